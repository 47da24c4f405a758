import os
import typing
import importlib
from types import MappingProxyType, ModuleType

from .utils import merge_mappings
from . import default_settings


SETTINGS_ENV_VARIABLE = "STRUCTCLASS_SETTINGS_MODULE"


def _settings_from_module(module: ModuleType) -> typing.Dict[str, typing.Any]:
    settings = {}
    for attr in dir(module):
        if not attr.isupper():
            continue
        settings[attr] = getattr(module, attr)
    return settings


def load_settings(settings_module: str) -> typing.Dict[str, typing.Any]:
    """Load settings from a module"""
    module = importlib.import_module(settings_module)
    return _settings_from_module(module)


class Settings:
    """
    Library settings.

    Provides a read-only interface to the settings. Settings are the defaults in
    `structclass.default_settings`, updated by the module named in the
    `STRUCTCLASS_SETTINGS_MODULE` environment variable (if set), and then by
    any options passed to `configure(...)`.

    Settings configure themselves with the defaults on first access.

    Example:
    ```python
    from structclass.config import settings

    settings.configure(DISCARD_INVALID_ENTRIES=True)
    print(settings.DISCARD_INVALID_ENTRIES) # True
    ```
    """

    def __init__(self):
        self.__dict__["_store"] = None

    @property
    def configured(self) -> bool:
        return self._store is not None

    def __setattr__(self, name: typing.Any, value: typing.Any):
        raise RuntimeError(f"{type(self).__name__} cannot be modified")

    def __getattr__(self, name: str) -> typing.Any:
        if not self.configured:
            self.configure()
        try:
            return self._store[name]
        except KeyError as exc:
            raise AttributeError(exc) from exc

    def __getitem__(self, name: typing.Any) -> typing.Any:
        return getattr(self, name)

    def configure(self, **options) -> None:
        """
        (Re)build the settings store.

        :param options: Upper case setting names and their values.
        """
        for key in options:
            if not key.isupper():
                raise ValueError(
                    "Options for settings should be provided in upper case."
                )

        default_setting = _settings_from_module(default_settings)
        settings_module = os.environ.get(SETTINGS_ENV_VARIABLE)
        user_defined_settings = (
            load_settings(settings_module) if settings_module else {}
        )
        aggregate_settings = merge_mappings(
            default_setting, user_defined_settings, options, merge_nested=True
        )
        self.__dict__["_store"] = MappingProxyType(aggregate_settings)

    def reset(self) -> None:
        """Discard configured settings. Defaults are reloaded on next access."""
        self.__dict__["_store"] = None


settings = Settings()
"""`structclass` settings"""
