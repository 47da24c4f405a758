"""
Define structs with a closed set of fields and deep, constraint-driven validation.

Structs reject reads and writes of undeclared fields, can be built from plain
mappings, validate themselves and every struct they hold, and serialize to
ordered dictionaries or JSON.
"""

from .exceptions import (
    StructError,
    UndeclaredFieldError,
    FieldError,
    FieldValidationError,
    ValidationError,
    SerializationError,
)
from .fields import Field, Factory
from .struct import Struct, load, from_dict, from_attributes, to_dict
from .checkers import (
    Violation,
    ConstraintChecker,
    FieldConstraintChecker,
    register_checker,
    get_checker,
)
from .validation import ValidationReport, validate, collect
from .serializers import serialize, to_json
from .config import settings
from . import validators

__version__ = "0.1.0"
