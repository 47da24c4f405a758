"""
Constraint checkers.

A constraint checker evaluates the constraints declared on a struct's own
fields and reports the violations found. It never looks into nested structs;
that is the job of the validation engine in `structclass.validation`.
"""

import logging
import threading
import typing

from .exceptions import FieldValidationError
from .logging import log_message

if typing.TYPE_CHECKING:
    from .struct import Struct


logger = logging.getLogger(__name__)


class Violation(typing.NamedTuple):
    """A single failed constraint."""

    path: str
    """Path of the offending field, relative to the checked struct."""
    message: str
    """Human-readable description of the failure."""
    invalid_value: typing.Any
    """The value that failed the constraint."""


@typing.runtime_checkable
class ConstraintChecker(typing.Protocol):
    """Evaluates the constraints of a struct's local fields."""

    def check(self, instance: "Struct") -> typing.List[Violation]: ...


class FieldConstraintChecker:
    """
    Default constraint checker.

    Runs every validator declared on each of the struct's fields, in field
    declaration order, and reports one violation per failing validator.
    """

    def check(self, instance: "Struct") -> typing.List[Violation]:
        violations: typing.List[Violation] = []
        for name, field in type(instance).__fields__.items():
            if not field.validators:
                continue

            value = field.__get__(instance, type(instance))
            for validator in field.validators:
                try:
                    validator(value, field, instance)
                except FieldValidationError as exc:
                    violations.append(Violation(name, exc.message, value))
        return violations


_checker: typing.Optional[ConstraintChecker] = None
_registered = False
_registry_lock = threading.Lock()


def register_checker(
    checker: typing.Optional[ConstraintChecker] = None,
    *,
    replace: bool = False,
) -> ConstraintChecker:
    """
    Register the process-wide constraint checker.

    Registration happens once. Later calls return the registered checker
    unchanged, unless `replace` is True.

    :param checker: The checker to register. Defaults to `FieldConstraintChecker`.
    :param replace: Replace an already registered checker.
    :return: The registered checker.
    """
    global _checker, _registered

    with _registry_lock:
        if _registered and not replace:
            return typing.cast(ConstraintChecker, _checker)

        if checker is not None and not isinstance(checker, ConstraintChecker):
            raise TypeError(
                f"{checker!r} is not a constraint checker. It must define `check(instance)`."
            )
        _checker = checker or FieldConstraintChecker()
        _registered = True

    log_message(
        f"Registered constraint checker {type(_checker).__name__}",
        logging.DEBUG,
        logger=logger,
    )
    return _checker


def get_checker() -> ConstraintChecker:
    """Return the registered constraint checker, registering the default if none is."""
    if not _registered:
        return register_checker()
    return typing.cast(ConstraintChecker, _checker)


def reset_checker() -> None:
    """Forget the registered constraint checker."""
    global _checker, _registered

    with _registry_lock:
        _checker = None
        _registered = False


__all__ = [
    "Violation",
    "ConstraintChecker",
    "FieldConstraintChecker",
    "register_checker",
    "get_checker",
    "reset_checker",
]
