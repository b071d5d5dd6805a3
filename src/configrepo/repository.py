# ABOUTME: ConfigRepository resolves a JSON config path from flags and manages the file
# ABOUTME: Provides load, skeleton generation, and emptiness checks over a Storage backend
"""Config repository: flag-driven path resolution and config file lifecycle"""

import logging
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from configrepo.exceptions import ConfigFileExistError, EmptyConfigFilePathError
from configrepo.flags import DEFAULT_FLAGS, FlagDefinition, FlagValues, apply_flags
from configrepo.models import ModelT, check_model, decode_into, render_skeleton
from configrepo.storage import OsStorage, Storage

logger = logging.getLogger(__name__)

CONFIG_DIR_FLAG = "configDir"
ENVIRONMENT_FLAG = "environment"
CONFIG_FILE_SUFFIX = ".json"


@dataclass
class RepositoryConfig:
    """Settings a repository is built from; options mutate this before construction."""

    file_path: str = ""
    storage: Storage = field(default_factory=OsStorage)
    flag_definitions: list[FlagDefinition] = field(default_factory=list)
    disable_default_flags: bool = False
    disable_path_derivation: bool = False
    args: list[str] = field(default_factory=lambda: list(sys.argv))


Option = Callable[[RepositoryConfig], None]


def with_args(args: Iterable[str]) -> Option:
    """Parse these arguments instead of sys.argv. args[0] is the program name."""

    def option(config: RepositoryConfig) -> None:
        config.args = list(args)

    return option


def with_storage(storage: Storage) -> Option:
    def option(config: RepositoryConfig) -> None:
        config.storage = storage

    return option


def append_flag(definition: FlagDefinition) -> Option:
    def option(config: RepositoryConfig) -> None:
        config.flag_definitions.append(definition)

    return option


def with_flags(definitions: Iterable[FlagDefinition]) -> Option:
    """Replace all caller flag definitions collected so far."""

    def option(config: RepositoryConfig) -> None:
        config.flag_definitions = list(definitions)

    return option


def without_default_flags(disable: bool = True) -> Option:
    """Skip the built-in -configDir and -environment flags."""

    def option(config: RepositoryConfig) -> None:
        config.disable_default_flags = disable

    return option


def with_file_path(path: str) -> Option:
    """Use an explicit config file path; the derived path is never applied over it."""

    def option(config: RepositoryConfig) -> None:
        config.file_path = path
        config.disable_path_derivation = True

    return option


def derive_file_path(flags: FlagValues) -> str:
    """Build <configDir><environment>.json, or "" if either flag is undefined."""
    if CONFIG_DIR_FLAG not in flags or ENVIRONMENT_FLAG not in flags:
        return ""
    return f"{flags[CONFIG_DIR_FLAG]}{flags[ENVIRONMENT_FLAG]}{CONFIG_FILE_SUFFIX}"


def create_repository(*options: Option) -> "ConfigRepository":
    """
    Build a ConfigRepository from options applied in order.

    Flags are parsed from the configured arguments (sys.argv by default).
    Unless an explicit file path was set, the path is derived from the
    -configDir and -environment flags.

    Raises:
        ArgumentsEmptyError: If the argument list is empty
        FlagParseError: If arguments do not parse against the flag definitions
    """
    config = RepositoryConfig()
    for option in options:
        option(config)

    if not config.disable_default_flags:
        config.flag_definitions = [*config.flag_definitions, *DEFAULT_FLAGS]

    flags = apply_flags(config.flag_definitions, config.args)

    if not config.disable_path_derivation:
        config.file_path = derive_file_path(flags)

    logger.debug(f"Config file path resolved to {config.file_path!r}")
    return ConfigRepository(config, flags)


class ConfigRepository:
    """
    Access to one JSON config file.

    Every operation checks the model first, then that a file path was
    resolved, and opens the file at most once per call.
    """

    def __init__(self, config: RepositoryConfig, flags: FlagValues | None = None):
        self._config = config
        self._flags = flags if flags is not None else FlagValues({})
        self._last_loaded: Any = None

    @property
    def file_path(self) -> str:
        return self._config.file_path

    @property
    def storage(self) -> Storage:
        return self._config.storage

    @property
    def flags(self) -> FlagValues:
        return self._flags

    @property
    def last_loaded(self) -> Any:
        """The model most recently passed to load()."""
        return self._last_loaded

    def _require_path(self) -> str:
        if not self._config.file_path:
            raise EmptyConfigFilePathError(
                recovery_hint="Set a path with with_file_path() or keep the default flags"
            )
        return self._config.file_path

    def load(self, model: ModelT) -> ModelT:
        """
        Load the config file into model, in place.

        Returns:
            The same model instance

        Raises:
            InvalidConfigModelError: If model is not a writable record instance
            EmptyConfigFilePathError: If no file path was resolved
            OSError: If the file cannot be opened
            json.JSONDecodeError, pydantic.ValidationError: On bad content
        """
        check_model(model)
        path = self._require_path()

        with self.storage.open(path) as f:
            self._last_loaded = model
            decode_into(model, f)

        logger.debug(f"Loaded config from {path}")
        return model

    def write_skeleton(self, model: Any) -> None:
        """
        Write model's current values as a tab-indented JSON file.

        Never overwrites: an existing file raises ConfigFileExistError.
        """
        check_model(model)
        content = render_skeleton(model)
        path = self._require_path()

        try:
            self.storage.stat(path)
        except FileNotFoundError:
            pass
        else:
            raise ConfigFileExistError(recovery_hint=f"Remove {path} first or load it instead")

        with self.storage.create(path) as f:
            f.write(content)

        logger.info(f"Wrote config skeleton to {path}")

    def is_empty(self, model: Any) -> bool:
        """
        Report whether the config file is missing or zero bytes long.

        The model is only shape-checked. Emptiness is by size, so a file
        holding "{}" is not empty.
        """
        check_model(model)
        path = self._require_path()

        try:
            f = self.storage.open(path)
        except FileNotFoundError:
            return True

        with f:
            return self.storage.stat(path).size == 0
