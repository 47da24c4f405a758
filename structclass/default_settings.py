"""Default `structclass` settings. Override with `settings.configure(...)`."""

import typing

DISCARD_INVALID_ENTRIES: bool = False
"""Default for `discard_invalid_entries` when building structs from mappings."""

VALIDATION_HEADER: str = "Invalid properties in {type_name}\n"
"""Header written before the violations of a struct in a validation report."""

VIOLATION_FORMAT: str = "{path} : {message} but got {value!r}\n"
"""Format of a single violation line. Receives `path`, `message` and `value`."""

JSON_OPTIONS: int = 0
"""`orjson` option flags used by `to_json`."""

JSON_DEFAULT: typing.Optional[typing.Callable[[typing.Any], typing.Any]] = None
"""Fallback for values `orjson` cannot serialize natively, tried after structs."""
