"""
Field constraints.

A constraint is a callable taking `(value, field, instance)` that raises
`ValueError` or `TypeError` when the value is invalid. Constraints are wrapped
in `FieldValidator` which turns such failures into `FieldValidationError`.

Every constraint built here accepts a `message` template, formatted with the
field `name`, the checked `value` and the constraint's own parameters, and a
`pre_validation_hook` applied to the value before it is checked.
"""

import collections.abc
import operator
import re
import typing

from .exceptions import FieldValidationError

_Validator: typing.TypeAlias = typing.Callable[
    [
        typing.Any,
        typing.Optional[typing.Any],
        typing.Optional[typing.Any],
    ],
    None,
]
_Hook = typing.Optional[typing.Callable[[typing.Any], typing.Any]]


def _field_name(field: typing.Optional[typing.Any]) -> str:
    return (field.name if field is not None else None) or "value"


class FieldValidator(typing.NamedTuple):
    func: _Validator
    message: typing.Optional[str] = None

    @property
    def name(self) -> str:
        return self.func.__name__

    def __call__(
        self,
        value: typing.Any,
        field: typing.Optional[typing.Any] = None,
        instance: typing.Optional[typing.Any] = None,
    ):
        try:
            self.func(value, field, instance)
        except (ValueError, TypeError) as exc:
            name = _field_name(field)
            if self.message:
                msg = self.message.format_map({"name": name, "value": value})
            else:
                msg = str(exc.args[0]) if exc.args else str(exc)
            raise FieldValidationError(msg, name, value) from exc


def load_validators(
    *validators: typing.Union[_Validator, FieldValidator],
) -> typing.List[FieldValidator]:
    """Load the field validators into preferred internal type, keeping their order."""
    loaded: typing.List[FieldValidator] = []
    for validator in validators:
        if not isinstance(validator, FieldValidator):
            if not callable(validator):
                raise TypeError(f"Field validator '{validator}' is not callable.")
            validator = FieldValidator(validator)
        loaded.append(validator)
    return loaded


def rule(
    check: typing.Callable[[typing.Any], bool],
    template: str,
    label: str,
    *,
    message: typing.Optional[str] = None,
    pre_validation_hook: _Hook = None,
    measure: typing.Optional[typing.Callable[[typing.Any], typing.Any]] = None,
    **params: typing.Any,
) -> FieldValidator:
    """
    Build a constraint that fails when `check` returns a false value.

    :param check: Predicate called with the (measured) value.
    :param template: Default failure message. Formatted with `name`, `value`,
        `measured` and `params`.
    :param label: Name of the constraint, shown by combinators.
    :param message: Failure message overriding `template`.
    :param pre_validation_hook: Applied to the value before anything else.
    :param measure: Applied to the value before `check`, e.g. `len`.
    """
    msg = message or template

    def constraint(
        value: typing.Any,
        field: typing.Optional[typing.Any] = None,
        instance: typing.Optional[typing.Any] = None,
    ):
        if pre_validation_hook:
            value = pre_validation_hook(value)
        measured = measure(value) if measure else value
        if check(measured):
            return
        raise ValueError(
            msg.format_map(
                {
                    **params,
                    "name": _field_name(field),
                    "value": value,
                    "measured": measured,
                }
            )
        )

    constraint.__name__ = label
    return FieldValidator(constraint)


def _is_blank(value: typing.Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    return isinstance(value, collections.abc.Sized) and len(value) == 0


not_null = rule(lambda value: value is not None, "This value should not be null.", "not_null")
"""Fails if the value is None."""

not_blank = rule(
    lambda value: not _is_blank(value), "This value should not be blank.", "not_blank"
)
"""Fails if the value is None, False, an empty (or whitespace-only) string or an empty collection."""

is_callable = rule(callable, "'{name}' must be callable", "is_callable")


def _bound_factory(
    compare: typing.Callable[[typing.Any, typing.Any], bool],
    symbol: str,
    template: str,
    measure: typing.Optional[typing.Callable[[typing.Any], typing.Any]] = None,
):
    """Return a factory of constraints comparing the (measured) value to a bound."""
    prefix = "length_" if measure else "value_"

    def factory(
        bound: typing.Any,
        message: typing.Optional[str] = None,
        pre_validation_hook: _Hook = None,
    ) -> FieldValidator:
        return rule(
            lambda measured: compare(measured, bound),
            template,
            f"{prefix}{symbol}_{bound}",
            message=message,
            pre_validation_hook=pre_validation_hook,
            measure=measure,
            symbol=symbol,
            bound=bound,
        )

    return factory


_COMPARISON_MESSAGE = "'{value} {symbol} {bound}' is not True for {name!r}"
_LENGTH_MESSAGE = "'len({name}) {symbol} {bound}' is not True, got {measured}"

gte = _bound_factory(operator.ge, ">=", _COMPARISON_MESSAGE)
lte = _bound_factory(operator.le, "<=", _COMPARISON_MESSAGE)
gt = _bound_factory(operator.gt, ">", _COMPARISON_MESSAGE)
lt = _bound_factory(operator.lt, "<", _COMPARISON_MESSAGE)
eq = _bound_factory(operator.eq, "=", _COMPARISON_MESSAGE)
min_len = _bound_factory(operator.ge, ">=", _LENGTH_MESSAGE, measure=len)
max_len = _bound_factory(operator.le, "<=", _LENGTH_MESSAGE, measure=len)
len_ = _bound_factory(operator.eq, "=", _LENGTH_MESSAGE, measure=len)


def number_range(
    min_val: typing.Any,
    max_val: typing.Any,
    message: typing.Optional[str] = None,
    pre_validation_hook: _Hook = None,
) -> FieldValidator:
    """Fails if the value is not between `min_val` and `max_val`, both included."""
    return rule(
        lambda value: min_val <= value <= max_val,
        "'{name}' must be between {min} and {max}",
        f"value_between_{min_val}_{max_val}",
        message=message,
        pre_validation_hook=pre_validation_hook,
        min=min_val,
        max=max_val,
    )


_MATCH_METHODS = {
    None: "fullmatch",
    re.fullmatch: "fullmatch",
    re.search: "search",
    re.match: "match",
}


def pattern(
    regex: typing.Union[re.Pattern, str, bytes],
    flags: int = 0,
    func: typing.Optional[typing.Callable] = None,
    message: typing.Optional[str] = None,
    pre_validation_hook: _Hook = None,
) -> FieldValidator:
    """
    Fails if the value is not a string matching `regex`.

    :param regex: A regex string or precompiled pattern.
    :param flags: Flags for a string `regex`.
    :param func: `re.fullmatch` (the default when None), `re.search` or `re.match`.
    """
    if func not in _MATCH_METHODS:
        raise ValueError("'func' must be one of None, fullmatch, match, search.")
    if isinstance(regex, re.Pattern):
        if flags:
            raise TypeError(
                "'flags' can only be used with a string pattern; "
                "pass flags to re.compile() instead"
            )
        compiled = regex
    else:
        compiled = re.compile(regex, flags)
    matches = getattr(compiled, _MATCH_METHODS[func])

    return rule(
        lambda value: isinstance(value, (str, bytes)) and matches(value) is not None,
        "'{name}' must match pattern {pattern!r} ({value!r} doesn't)",
        f"pattern_{compiled.pattern!r}",
        message=message,
        pre_validation_hook=pre_validation_hook,
        pattern=compiled.pattern,
    )


def instance_of(
    cls: typing.Union[typing.Type, typing.Tuple[typing.Type, ...]],
    message: typing.Optional[str] = None,
    pre_validation_hook: _Hook = None,
) -> FieldValidator:
    return rule(
        lambda value: isinstance(value, cls),
        "Value must be an instance of {cls!r}",
        f"instance_of_{cls!r}",
        message=message,
        pre_validation_hook=pre_validation_hook,
        cls=cls,
    )


def in_(
    choices: typing.Iterable[typing.Any],
    message: typing.Optional[str] = None,
    pre_validation_hook: _Hook = None,
) -> FieldValidator:
    choices = tuple(choices)
    return rule(
        lambda value: value in choices,
        "Value must be in {choices!r}",
        f"in_{choices!r}",
        message=message,
        pre_validation_hook=pre_validation_hook,
        choices=choices,
    )


# Combinators


def _failure(
    validator: FieldValidator,
    value: typing.Any,
    field: typing.Optional[typing.Any],
    instance: typing.Optional[typing.Any],
) -> typing.Optional[str]:
    """Run `validator` and return its failure message, or None if it passes."""
    try:
        validator(value, field, instance)
    except FieldValidationError as exc:
        return exc.message
    return None


def _names(validators: typing.Iterable[FieldValidator]) -> typing.List[str]:
    return [validator.name for validator in validators]


def pipe(*validators: typing.Union[_Validator, FieldValidator]) -> FieldValidator:
    """Apply `validators` in sequence, failing with the first failure met."""
    if not validators:
        raise ValueError("At least one validator must be provided.")
    loaded = load_validators(*validators)

    def pipeline(value, field=None, instance=None):
        for validator in loaded:
            failure = _failure(validator, value, field, instance)
            if failure is not None:
                raise ValueError(failure)

    pipeline.__name__ = f"pipe({_names(loaded)})"
    return FieldValidator(pipeline)


def and_(*validators: typing.Union[_Validator, FieldValidator]) -> FieldValidator:
    """Fails unless the value passes all of `validators`. Stops at the first failure."""
    conjunction = pipe(*validators)
    conjunction.func.__name__ = conjunction.name.replace("pipe", "conjunction", 1)
    return conjunction


def or_(
    *validators: typing.Union[_Validator, FieldValidator],
    message: typing.Optional[str] = None,
) -> FieldValidator:
    """Fails unless the value passes at least one of `validators`."""
    loaded = load_validators(*validators)
    names = _names(loaded)
    msg = message or "Value must validate at least one of {validators!r}"

    def disjunction(value, field=None, instance=None):
        for validator in loaded:
            if _failure(validator, value, field, instance) is None:
                return
        raise ValueError(
            msg.format_map(
                {"validators": names, "name": _field_name(field), "value": value}
            )
        )

    disjunction.__name__ = f"disjunction({names})"
    return FieldValidator(disjunction)


def not_(
    validator: typing.Union[_Validator, FieldValidator],
    message: typing.Optional[str] = None,
) -> FieldValidator:
    """Fails if the value passes `validator`."""
    negated = load_validators(validator)[0]
    msg = message or "Value must not validate {validator!r}"

    def negation(value, field=None, instance=None):
        if _failure(negated, value, field, instance) is not None:
            return
        raise ValueError(
            msg.format_map(
                {"validator": negated.name, "name": _field_name(field), "value": value}
            )
        )

    negation.__name__ = f"negate({negated.name})"
    return FieldValidator(negation)


def optional(validator: typing.Union[_Validator, FieldValidator]) -> FieldValidator:
    """Accept None, and apply `validator` to any other value."""
    wrapped = load_validators(validator)[0]

    def optional_validator(value, field=None, instance=None):
        if value is None:
            return
        failure = _failure(wrapped, value, field, instance)
        if failure is not None:
            raise ValueError(failure)

    optional_validator.__name__ = f"optional({wrapped.name})"
    return FieldValidator(optional_validator)


def each(*validators: typing.Union[_Validator, FieldValidator]) -> FieldValidator:
    """
    Apply `validators` to every element of a collection value.

    The failure message is prefixed with the index of the first offending element.
    Strings and bytes are not collections here.
    """
    element_validator = pipe(*validators)

    def each_validator(value, field=None, instance=None):
        if not isinstance(value, collections.abc.Iterable) or isinstance(
            value, (str, bytes)
        ):
            raise TypeError("This value should be a collection.")
        for index, element in enumerate(value):
            failure = _failure(element_validator, element, field, instance)
            if failure is not None:
                raise ValueError(f"[{index}] {failure}")

    each_validator.__name__ = f"each({element_validator.name})"
    return FieldValidator(each_validator)
