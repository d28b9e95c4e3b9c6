"""Tests for console step output."""

import io

import pytest
from rich.console import Console

from scribe.console import THEME, StepConsole
from scribe.state import PipelineStateEnum, PipelineStateManager


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def error_output():
    return io.StringIO()


@pytest.fixture
def step_console(output, error_output):
    return StepConsole(
        Console(file=output, theme=THEME, no_color=True, width=200),
        Console(file=error_output, theme=THEME, no_color=True, width=200),
    )


def test_step_format(step_console, output):
    step_console.step("Transcribing audio...")
    assert output.getvalue() == "> Transcribing audio...\n"


def test_observer_prints_each_stage(step_console, output):
    """Test a full run prints one line per stage plus the summary."""
    manager = PipelineStateManager()
    manager.add_observer(step_console.on_state_change)

    for state in (
        PipelineStateEnum.RECORDING,
        PipelineStateEnum.STOPPING,
        PipelineStateEnum.TRANSCRIBING,
        PipelineStateEnum.COPYING,
        PipelineStateEnum.DONE,
    ):
        manager.set_state(state)

    lines = output.getvalue().splitlines()
    assert lines == [
        "> Recording in progress... Press any key to stop.",
        "> Stopping recording...",
        "> Transcribing audio...",
        "> Copying transcription to clipboard...",
        "> ✔ Copied transcription to clipboard.",
        "> Process completed successfully.",
    ]


def test_observer_prints_error_to_error_console(step_console, output, error_output):
    manager = PipelineStateManager()
    manager.add_observer(step_console.on_state_change)

    manager.set_error("Transcription stage failed: no text")

    assert error_output.getvalue() == "> Transcription stage failed: no text\n"
    assert output.getvalue() == ""
