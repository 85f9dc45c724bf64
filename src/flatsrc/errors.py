# src/flatsrc/errors.py


class FlattenError(Exception):
    """Base class for errors that abort a flatten run."""


class ConfigurationError(FlattenError):
    pass


class InvalidPatternError(ConfigurationError):
    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid pattern '{pattern}': {reason}")


class MissingFilterError(ConfigurationError):
    def __init__(self):
        super().__init__("Either a pattern or an extension filter is required")


class TraversalError(FlattenError):
    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Error walking '{path}': {cause}")


class NoMatchError(FlattenError):
    def __init__(self, pattern: str, extension: str = ""):
        self.pattern = pattern
        self.extension = extension
        message = f"No files matched pattern '{pattern}'"
        if extension:
            message += f" with extension '{extension}'"
        super().__init__(message)
