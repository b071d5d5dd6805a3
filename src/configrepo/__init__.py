# ABOUTME: Package initialization for the configrepo config loading library
# ABOUTME: Defines version, public API re-exports, and package-level logging setup
"""configrepo - flag-resolved JSON config files loaded into typed models"""

__version__ = "0.1.0"

# Set up logging for the package
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from configrepo.exceptions import (  # noqa: E402
    ArgumentsEmptyError,
    ConfigFileExistError,
    ConfigRepoError,
    EmptyConfigFilePathError,
    FlagDefinitionError,
    FlagParseError,
    HelpRequested,
    InvalidConfigModelError,
)
from configrepo.flags import (  # noqa: E402
    DEFAULT_FLAGS,
    FlagDefinition,
    FlagKind,
    FlagValues,
    apply_flags,
    bool_flag,
    duration_flag,
    int_flag,
    parse_duration,
    string_flag,
)
from configrepo.repository import (  # noqa: E402
    ConfigRepository,
    RepositoryConfig,
    append_flag,
    create_repository,
    with_args,
    with_file_path,
    with_flags,
    with_storage,
    without_default_flags,
)
from configrepo.storage import FileInfo, MemoryStorage, OsStorage, ReadOnlyStorage, Storage  # noqa: E402

__all__ = [
    "ArgumentsEmptyError",
    "ConfigFileExistError",
    "ConfigRepoError",
    "ConfigRepository",
    "DEFAULT_FLAGS",
    "EmptyConfigFilePathError",
    "FileInfo",
    "FlagDefinition",
    "FlagDefinitionError",
    "FlagKind",
    "FlagParseError",
    "FlagValues",
    "HelpRequested",
    "InvalidConfigModelError",
    "MemoryStorage",
    "OsStorage",
    "ReadOnlyStorage",
    "RepositoryConfig",
    "Storage",
    "append_flag",
    "apply_flags",
    "bool_flag",
    "create_repository",
    "duration_flag",
    "int_flag",
    "parse_duration",
    "string_flag",
    "with_args",
    "with_file_path",
    "with_flags",
    "with_storage",
    "without_default_flags",
]
