"""Exceptions raised by Baseline Modernizer."""


class ModernizerError(Exception):
    """Base class for all modernizer errors."""


class InvalidArgumentError(ModernizerError, ValueError):
    """Raised when a recording operation receives a count it cannot accept."""


class ScanError(ModernizerError):
    """Raised when a source file cannot be read for scanning."""


class UnknownCommandError(ModernizerError):
    """Raised when the dispatcher has no handler for a command."""


class SnapshotError(ModernizerError):
    """Raised when an exported metrics snapshot cannot be read back."""


class ExportError(ModernizerError):
    """Raised when a report or export cannot be written."""
