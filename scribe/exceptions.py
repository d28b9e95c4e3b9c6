"""Exception hierarchy for scribe."""

from typing import Optional


class ScribeError(Exception):
    """Base exception for all scribe errors."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage


class ConfigurationError(ScribeError):
    """Invalid configuration file or command-line override."""


class SpawnError(ScribeError):
    """An external binary is missing or could not be started."""


class ProcessError(ScribeError):
    """The recorder could not be signalled or did not exit cleanly."""


class TranscriptionError(ScribeError):
    """The transcriber failed or produced no usable text."""


class ClipboardError(ScribeError):
    """The clipboard command exited with an error."""
