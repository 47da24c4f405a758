import typing

if typing.TYPE_CHECKING:
    from .validation import ValidationReport


class StructError(Exception):
    """Base class for struct errors."""

    pass


class UndeclaredFieldError(StructError, AttributeError):
    """Exception raised on access to a field not declared by a struct type."""

    def __init__(self, struct_type: str, field_name: str, action: str = "get"):
        # The constructor arguments are the exception args, so copies and
        # pickles rebuild the error through `__init__`.
        super().__init__(struct_type, field_name, action)
        self.struct_type = struct_type
        self.field_name = field_name
        self.action = action
        self.message = f"Non-existent property {field_name} {action} in {struct_type}"

    def __str__(self) -> str:
        return self.message


class FieldError(StructError):
    """Exception raised for field-related errors."""

    pass


class FieldValidationError(FieldError):
    """Exception raised when a value fails a field constraint."""

    def __init__(
        self,
        message: str,
        name: typing.Optional[str] = None,
        value: typing.Any = None,
    ):
        super().__init__(message, name, value)
        self.message = message
        self.name = name
        self.value = value

    def __str__(self) -> str:
        return self.message


class ValidationError(StructError):
    """
    Exception raised when a struct, or any struct it holds, is invalid.

    `str(exc)` is the aggregated report text. The structured form is
    available as `exc.report`.
    """

    def __init__(self, message: str, report: "typing.Optional[ValidationReport]" = None):
        super().__init__(message)
        self.message = message
        self.report = report

    def __str__(self) -> str:
        return self.message


class SerializationError(StructError):
    """Exception raised for serialization errors."""

    pass


__all__ = [
    "StructError",
    "UndeclaredFieldError",
    "FieldError",
    "FieldValidationError",
    "ValidationError",
    "SerializationError",
]
