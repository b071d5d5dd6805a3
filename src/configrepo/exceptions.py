# ABOUTME: Custom exception hierarchy for configrepo error handling
# ABOUTME: Named error kinds for model checks, path resolution, skeletons, and flags
"""Custom exceptions for configrepo"""


class ConfigRepoError(Exception):
    """Base exception for all configrepo errors"""

    def __init__(self, message: str, recovery_hint: str | None = None):
        super().__init__(message)
        self.recovery_hint = recovery_hint

    def __str__(self):
        base = super().__str__()
        if self.recovery_hint:
            return f"{base}\nHint: {self.recovery_hint}"
        return base


class ArgumentsEmptyError(ConfigRepoError):
    """Flag application was given no arguments, not even a program name"""

    def __init__(self, recovery_hint: str | None = None):
        super().__init__("os args should not be empty", recovery_hint)


class InvalidConfigModelError(ConfigRepoError):
    """Model is None, a class, frozen, or not a dataclass/pydantic instance"""

    def __init__(self, recovery_hint: str | None = None):
        super().__init__("model is empty or no valid struct", recovery_hint)


class EmptyConfigFilePathError(ConfigRepoError):
    """An operation needed a file path but none was resolved"""

    def __init__(self, recovery_hint: str | None = None):
        super().__init__("filepath is empty", recovery_hint)


class ConfigFileExistError(ConfigRepoError):
    """Skeleton generation refused to overwrite an existing file"""

    def __init__(self, recovery_hint: str | None = None):
        super().__init__("unable to generate skeleton. file already exists", recovery_hint)


class FlagDefinitionError(ConfigRepoError):
    """A flag definition has an unknown kind, bad name, or mistyped default"""

    pass


class FlagParseError(ConfigRepoError):
    """Command-line arguments could not be parsed against the flag definitions"""

    pass


class HelpRequested(FlagParseError):
    """-h or -help was passed; usage has already been printed"""

    def __init__(self):
        super().__init__("flag: help requested")
