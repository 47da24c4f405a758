"""
Recursive struct validation.

`collect` walks a struct and every struct it holds (directly, or as an element
of a list, tuple or mapping held by a field), asking the constraint checker for
the violations of each one. `validate` raises `ValidationError` with the
rendered report when anything is invalid.

The walk has no cycle detection. Structs referencing each other will recurse
until the interpreter's recursion limit is hit.
"""

import logging
import typing

from .checkers import ConstraintChecker, Violation, get_checker
from .config import settings
from .exceptions import ValidationError
from .struct import Struct
from .utils import is_mapping, is_sequence, type_name


logger = logging.getLogger(__name__)


class ValidationReport:
    """
    Violations found in a struct and in the structs it holds.

    Only reports of invalid nested structs are kept in `children`.
    """

    __slots__ = ("struct_type", "violations", "children")

    def __init__(
        self,
        struct_type: str,
        violations: typing.Optional[typing.List[Violation]] = None,
        children: typing.Optional[typing.List["ValidationReport"]] = None,
    ) -> None:
        self.struct_type = struct_type
        self.violations = list(violations or [])
        self.children = list(children or [])

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(struct_type={self.struct_type!r}, "
            f"violations={self.violations!r}, children={self.children!r})"
        )

    @property
    def ok(self) -> bool:
        """True if neither the struct nor any struct it holds has violations."""
        return not self.violations and all(child.ok for child in self.children)

    def iter_violations(
        self,
    ) -> typing.Iterator[typing.Tuple[str, Violation]]:
        """Yield `(struct_type, violation)` pairs in report order."""
        for violation in self.violations:
            yield self.struct_type, violation
        for child in self.children:
            yield from child.iter_violations()

    def render(self) -> str:
        """
        Render the report as text.

        Each struct with violations contributes a header line followed by one
        line per violation. Nested reports follow in the order they were found.
        """
        text = ""
        if self.violations:
            text = settings.VALIDATION_HEADER.format(type_name=self.struct_type)
            for violation in self.violations:
                text += settings.VIOLATION_FORMAT.format(
                    path=violation.path,
                    message=violation.message,
                    value=violation.invalid_value,
                )
        for child in self.children:
            text += child.render()
        return text


def _nested_structs(value: typing.Any) -> typing.Iterator[Struct]:
    """Yield the structs a field value holds, in order."""
    if isinstance(value, Struct):
        yield value
    elif is_sequence(value):
        for element in value:
            if isinstance(element, Struct):
                yield element
    elif is_mapping(value):
        for element in value.values():
            if isinstance(element, Struct):
                yield element


def collect(
    instance: Struct,
    checker: typing.Optional[ConstraintChecker] = None,
) -> ValidationReport:
    """
    Build the validation report of a struct.

    :param instance: The struct to validate.
    :param checker: Constraint checker to use. Defaults to the registered checker.
    :return: The validation report. Check `report.ok` for the outcome.
    """
    if checker is None:
        checker = get_checker()
    report = ValidationReport(type_name(instance), checker.check(instance))

    instance_type = type(instance)
    for field in instance_type.__fields__.values():
        value = field.__get__(instance, instance_type)
        for nested in _nested_structs(value):
            child = collect(nested, checker)
            if not child.ok:
                report.children.append(child)

    logger.debug(
        "%s has %d invalid field(s)", report.struct_type, len(report.violations)
    )
    return report


def validate(
    instance: Struct,
    checker: typing.Optional[ConstraintChecker] = None,
) -> None:
    """
    Validate a struct and every struct it holds.

    :param instance: The struct to validate.
    :param checker: Constraint checker to use. Defaults to the registered checker.
    :raises ValidationError: If any violation is found. The error message is the
        rendered report, and `exc.report` holds the structured form.
    """
    report = collect(instance, checker)
    if not report.ok:
        raise ValidationError(report.render(), report=report)


__all__ = ["ValidationReport", "collect", "validate"]
