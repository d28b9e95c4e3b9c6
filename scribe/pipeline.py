"""Record, transcribe and copy pipeline."""

import logging
from pathlib import Path

from . import clipboard, recorder, transcriber
from .config import AppConfig
from .exceptions import ScribeError
from .keyboard import await_keypress
from .recorder import RecordingSession
from .state import PipelineStateEnum, PipelineStateManager

logger = logging.getLogger(__name__)


def describe_error(error: ScribeError) -> str:
    """Human-readable message naming the stage that failed."""
    if error.stage:
        return f"{error.stage.capitalize()} stage failed: {error}"
    return str(error)


class PipelineController:
    """Runs the recorder, transcriber and clipboard stages in order."""

    def __init__(self, config: AppConfig, state_manager: PipelineStateManager):
        """Initialize the controller.

        Args:
            config: The application configuration.
            state_manager: Receives a state change for every stage.
        """
        self.config = config
        self.state_manager = state_manager

    async def start_recording(self, device: str, output_path: Path) -> RecordingSession:
        """Launch the recorder on device, writing to output_path."""
        session = await recorder.start_recording(
            self.config.recorder, device, output_path
        )
        self.state_manager.set_state(PipelineStateEnum.RECORDING)
        return session

    async def await_stop_signal(self) -> None:
        """Block until the user presses a key."""
        await await_keypress()

    async def stop_recording(self, session: RecordingSession) -> None:
        """Interrupt the recorder and wait for it to exit."""
        self.state_manager.set_state(PipelineStateEnum.STOPPING)
        await recorder.stop_recording(session, timeout=self.config.recorder.stop_timeout)
        if not session.has_audio:
            logger.warning(f"Recorder wrote no audio to {session.output_path}")

    async def transcribe(self, input_path: Path) -> str:
        """Run the transcriber on input_path and return its output."""
        self.state_manager.set_state(PipelineStateEnum.TRANSCRIBING)
        return await transcriber.transcribe(self.config.transcriber, input_path)

    async def copy_to_clipboard(self, text: str) -> None:
        """Hand text to the clipboard command."""
        self.state_manager.set_state(PipelineStateEnum.COPYING)
        await clipboard.copy_to_clipboard(text, self.config.clipboard)

    async def run(self) -> str:
        """Run every stage once.

        Returns:
            The transcript that was copied.

        Raises:
            ScribeError: The first stage failure. Remaining stages are skipped
                and the recording, if any, is left on disk. The recorder is
                never left running, whatever exception ends the run.
        """
        recorder_config = self.config.recorder
        output_path = recorder.make_recording_path(recorder_config.recording_dir)

        try:
            logger.info("Starting audio recording...")
            session = await self.start_recording(recorder_config.device, output_path)
            try:
                await self.await_stop_signal()
                await self.stop_recording(session)
            finally:
                # No-op once stop_recording has reaped the recorder
                await recorder.abort_recording(session)
            text = await self.transcribe(session.output_path)
            await self.copy_to_clipboard(text)
        except ScribeError as e:
            logger.info(f"Pipeline aborted: {e}")
            self.state_manager.set_error(describe_error(e))
            raise

        if not recorder_config.keep_recording:
            logger.info(f"Removing recording {output_path}")
            output_path.unlink(missing_ok=True)

        self.state_manager.set_state(PipelineStateEnum.DONE)
        return text
