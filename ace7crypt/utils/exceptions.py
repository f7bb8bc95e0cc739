class FileError(Exception):
    """Exception raised for errors relating to a file."""
    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.path = path

class MissingCompanionError(FileError):
    """Exception raised when the companion file of an asset pair is absent or unreadable."""

class PairInconsistentError(Exception):
    """Exception raised when the primary file was replaced but the companion was not."""
    def __init__(self, message: str, primary_path: str, companion_path: str) -> None:
        super().__init__(message)
        self.message = message
        self.primary_path = primary_path
        self.companion_path = companion_path

class ModeError(Exception):
    """Exception raised for an invalid transform direction."""
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
