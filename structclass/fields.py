"""Struct fields"""

import typing
from typing_extensions import ParamSpec, Self

from . import validators as field_validators
from .exceptions import FieldError


_T = typing.TypeVar("_T")
P = ParamSpec("P")
R = typing.TypeVar("R")


DefaultFactory = typing.Callable[[], typing.Union[_T, typing.Any]]
"""Type alias for default value factories."""


class empty:
    """Class to represent missing/empty values."""

    def __bool__(self):
        return False

    def __init_subclass__(cls):
        raise TypeError("empty cannot be subclassed.")

    def __new__(cls):
        raise TypeError("empty cannot be instantiated.")


class _FactoryFunc(typing.Generic[R]):
    """Marks a callable as a default value factory."""

    __slots__ = ("func",)

    def __init__(self, func: typing.Callable[[], R]) -> None:
        self.func = func

    def __call__(self) -> R:
        return self.func()

    def __repr__(self) -> str:
        return f"Factory({getattr(self.func, '__name__', self.func)!r})"


def Factory(
    factory: typing.Callable[P, R],
    /,
    *args: P.args,
    **kwargs: P.kwargs,
) -> typing.Callable[[], R]:
    """
    Build a default value factory that invokes `factory` with the given arguments.

    Only callables wrapped with `Factory` are called to produce a default,
    so plain callables can still be used as default values.

    :param factory: The factory function to invoke.
    :param args: Additional arguments to pass to the factory function.
    :param kwargs: Additional keyword arguments to pass to the factory function.
    """

    def factory_func() -> R:
        return factory(*args, **kwargs)

    factory_func.__name__ = getattr(factory, "__name__", "factory")
    return _FactoryFunc(factory_func)


class Field(typing.Generic[_T]):
    """
    Attribute descriptor for a declared struct field.

    Fields do not cast or check assigned values. Constraints attached
    through `validators` are only evaluated when the owning struct is validated.
    """

    def __init__(
        self,
        default: typing.Union[_T, DefaultFactory[_T], None] = None,
        validators: typing.Optional[
            typing.Iterable[field_validators._Validator]
        ] = None,
        *,
        doc: typing.Optional[str] = None,
    ):
        """
        Initialize the field.

        :param default: The field's default value, or a `Factory` producing it.
            Defaults to None.
        :param validators: Constraints the field's value must satisfy for the
            struct to be valid. Each is a callable taking (value, field, instance)
            and raising `ValueError` or `TypeError` when the value is invalid.
        :param doc: Optional description of the field.
        """
        self.name: typing.Optional[str] = None
        self.owner: typing.Optional[typing.Type[typing.Any]] = None
        self.default = default
        self.validators = tuple(
            field_validators.load_validators(*(validators or ()))
        )
        self.doc = doc

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, default={self.default!r})"

    def get_default(self) -> typing.Union[_T, typing.Any]:
        """Return the default value for the field."""
        default_value = self.default
        if isinstance(default_value, _FactoryFunc):
            try:
                return default_value()
            except Exception as exc:
                raise FieldError(
                    f"An error occurred while calling the default factory for '{self.name}'."
                ) from exc
        return default_value

    def bind(self, parent: typing.Type[typing.Any], name: str) -> None:
        """
        Called when the field is bound to a parent class.

        :param parent: The parent class to which the field is bound.
        :param name: The name of the field.
        """
        self.name = name
        self.owner = parent

    def __set_name__(self, owner: typing.Type[typing.Any], name: str):
        """Assign the field name when the descriptor is initialized on the class."""
        self.bind(owner, name)

    @typing.overload
    def __get__(
        self,
        instance: None,
        owner: typing.Type[typing.Any],
    ) -> Self: ...

    @typing.overload
    def __get__(
        self,
        instance: typing.Any,
        owner: typing.Optional[typing.Type[typing.Any]],
    ) -> typing.Union[_T, typing.Any]: ...

    def __get__(
        self,
        instance: typing.Optional[typing.Any],
        owner: typing.Optional[typing.Type[typing.Any]] = None,
    ) -> typing.Union[_T, Self, typing.Any]:
        """Retrieve the field value from an instance, or the field itself from the class."""
        if instance is None:
            return self
        return self.get_value(instance)

    def __set__(self, instance: typing.Any, value: typing.Any) -> None:
        self.set_value(instance, value)

    def __delete__(self, instance: typing.Any) -> None:
        self.set_value(instance, self.get_default())

    def _check_bound(self, instance: typing.Any) -> str:
        field_name = self.name
        if not field_name:
            raise FieldError(
                f"'{type(self).__name__}' on '{type(instance).__name__}' has no name. Ensure it is bound to a class."
            )
        return field_name

    def get_value(self, instance: typing.Any) -> typing.Union[_T, typing.Any]:
        """
        Get the field value from an instance.

        A field that was never assigned is initialized with its default on first read.
        """
        field_name = self._check_bound(instance)
        try:
            return instance.__dict__[field_name]
        except KeyError:
            return self.set_value(instance, self.get_default())

    def set_value(self, instance: typing.Any, value: typing.Any) -> typing.Any:
        """
        Set the field's value on an instance, as is.

        :param instance: The instance to which the field belongs.
        :param value: The field value to set.
        :return: The set field value.
        """
        field_name = self._check_bound(instance)
        # Store directly in __dict__ to bypass the struct's field guard
        instance.__dict__[field_name] = value
        return value


__all__ = ["Field", "Factory", "empty", "DefaultFactory"]
