# Custom exceptions for gocodemod

class CodemodError(Exception):
    """Base exception for all application-specific errors."""
    pass

class ParseError(CodemodError):
    """Raised when Go source cannot be parsed into a syntax tree."""
    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(f"Failed to parse {file_path}: {message}")

class GrammarNotFoundError(CodemodError):
    """Raised when the tree-sitter Go grammar cannot be loaded."""
    def __init__(self, language: str, install_command: str):
        self.language = language
        self.install_command = install_command
        super().__init__(
            f"Grammar for '{language}' not found. Install it with: {install_command}"
        )

class FieldNotFoundError(CodemodError, KeyError):
    """Raised when a keyed composite literal has no element for the requested key."""
    def __init__(self, literal: str, key: str):
        self.literal = literal
        self.key = key
        super().__init__(f"{literal} doesn't have a field called {key!r}")

    def __str__(self):
        return self.args[0]

class InvalidNodeError(CodemodError):
    """Raised when a node of the wrong shape is handed to an accessor or primitive."""
    pass

class RecursionLimitError(CodemodError):
    """Raised when a tree walk exceeds its configured depth."""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Tree is deeper than the allowed {max_depth} levels")

class ConfigError(CodemodError):
    """Raised for configuration-related problems."""
    pass


class StaleFileError(CodemodError):
    """Raised when a file changed on disk between being read and being rewritten."""

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        super().__init__(f"Not writing {file_path}: {reason}")


class ApplyError(CodemodError):
    """Raised by the local runner when one or more files failed to transform."""

    def __init__(self, message: str, failures: list = None):
        self.failures = failures or []
        super().__init__(message)
