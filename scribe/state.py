"""State management for the scribe pipeline."""

import logging
from enum import Enum
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)

StateObserver = Callable[["PipelineStateEnum", Optional[str]], Any]


class PipelineStateEnum(str, Enum):
    """Stages the pipeline moves through, in order."""

    IDLE = "Idle"
    RECORDING = "Recording"
    STOPPING = "Stopping"
    TRANSCRIBING = "Transcribing"
    COPYING = "Copying"
    DONE = "Done"
    ERROR = "Error"


class PipelineStateManager:
    """Tracks the current pipeline stage and notifies observers."""

    def __init__(self):
        """Initialize state manager with IDLE state."""
        self._state: PipelineStateEnum = PipelineStateEnum.IDLE
        self._failed_stage: Optional[PipelineStateEnum] = None
        self._last_error: Optional[str] = None
        self._observers: List[StateObserver] = []

    @property
    def current_state(self) -> PipelineStateEnum:
        """Get the current state of the pipeline."""
        return self._state

    @property
    def failed_stage(self) -> Optional[PipelineStateEnum]:
        """Stage that was active when the error was recorded, if any."""
        return self._failed_stage

    @property
    def last_error(self) -> Optional[str]:
        """Get the last error message, if any."""
        return self._last_error

    def add_observer(self, observer: StateObserver) -> None:
        """Add an observer callback for state changes.

        The callback receives the new state and optional error message.
        """
        self._observers.append(observer)

    def _notify_observers(self) -> None:
        for observer in self._observers:
            try:
                observer(self._state, self._last_error)
            except Exception:
                # A failing observer must not interrupt the pipeline
                logger.exception(f"State observer {observer!r} failed")

    def set_state(self, new_state: PipelineStateEnum) -> None:
        """Set the pipeline's current stage.

        Raises:
            TypeError: If the provided state is not a valid PipelineStateEnum.
        """
        if not isinstance(new_state, PipelineStateEnum):
            raise TypeError(f"State must be a PipelineStateEnum, got {type(new_state)}")

        if new_state != PipelineStateEnum.ERROR:
            self._last_error = None
            self._failed_stage = None

        if self._state != new_state:
            self._state = new_state
            self._notify_observers()

    def set_error(self, message: str) -> None:
        """Record a failure of the current stage.

        Args:
            message: The error message to store.
        """
        if self._state != PipelineStateEnum.ERROR:
            self._failed_stage = self._state
        changed = self._state != PipelineStateEnum.ERROR or self._last_error != message
        self._last_error = message
        self._state = PipelineStateEnum.ERROR

        if changed:
            self._notify_observers()
