"""Styled step output for the terminal."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from .state import PipelineStateEnum

THEME = Theme({
    "step": "bold cyan",
    "success": "bold green",
    "error": "red bold",
})

STEP_MESSAGES = {
    PipelineStateEnum.RECORDING: "Recording in progress... Press any key to stop.",
    PipelineStateEnum.STOPPING: "Stopping recording...",
    PipelineStateEnum.TRANSCRIBING: "Transcribing audio...",
    PipelineStateEnum.COPYING: "Copying transcription to clipboard...",
}


class StepConsole:
    """Prints one line per pipeline step; failures go to stderr."""

    def __init__(
        self,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        self.console = console or Console(theme=THEME, highlight=False)
        self.error_console = error_console or Console(
            theme=THEME, highlight=False, stderr=True
        )

    def step(self, message: str) -> None:
        self.console.print(f"> [step]{escape(message)}[/step]")

    def success(self, message: str) -> None:
        self.console.print(f"> [success]✔ {escape(message)}[/success]")

    def error(self, message: str) -> None:
        self.error_console.print(f"> [error]{escape(message)}[/error]")

    def on_state_change(
        self, state: PipelineStateEnum, error: Optional[str]
    ) -> None:
        """State observer printing the message for each stage."""
        if state == PipelineStateEnum.DONE:
            self.success("Copied transcription to clipboard.")
            self.step("Process completed successfully.")
        elif state == PipelineStateEnum.ERROR:
            self.error(error or "Unknown error")
        elif state in STEP_MESSAGES:
            self.step(STEP_MESSAGES[state])
