"""Tests for main entry point."""

from unittest.mock import AsyncMock, patch

import pytest

from scribe.config import AppConfig
from scribe.exceptions import TranscriptionError
from scribe.main import EXIT_CONFIG, EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_OK, main, run


@pytest.fixture
def mock_controller():
    """Patch the pipeline controller class."""
    with patch("scribe.main.PipelineController") as mock_cls:
        controller = mock_cls.return_value
        controller.run = AsyncMock(return_value="hello world")
        yield mock_cls


@pytest.fixture(autouse=True)
def mock_logging():
    with patch("scribe.main.setup_logging") as mock_setup:
        yield mock_setup


@pytest.mark.asyncio
async def test_main_success(mock_controller):
    assert await main([]) == EXIT_OK
    mock_controller.return_value.run.assert_awaited_once()


@pytest.mark.asyncio
async def test_main_uses_defaults_without_flags(mock_controller):
    """Test running with no flags and no config file uses the defaults."""
    await main([])

    config = mock_controller.call_args.args[0]
    assert config == AppConfig()


@pytest.mark.asyncio
async def test_main_stage_failure(mock_controller):
    """Test a pipeline error gives a non-zero exit code."""
    mock_controller.return_value.run.side_effect = TranscriptionError(
        "Whisper transcription failed", stage="transcription"
    )

    assert await main([]) == EXIT_FAILURE


@pytest.mark.asyncio
async def test_main_config_error(tmp_path, mock_controller, capsys):
    """Test an invalid config file exits before anything is started."""
    path = tmp_path / "bad.toml"
    path.write_text("[recorder\n")

    assert await main(["--config", str(path)]) == EXIT_CONFIG
    mock_controller.assert_not_called()
    assert "Error loading configuration" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_main_flags_override_config_file(tmp_path, mock_controller):
    """Test CLI flags take precedence over the config file."""
    path = tmp_path / "config.toml"
    path.write_text('[recorder]\ndevice = "hw:1"\nduration = 30\nvolume = 1.0\n')

    await main(["--config", str(path), "--device", "hw:9", "--volume", "4"])

    config = mock_controller.call_args.args[0]
    assert config.recorder.device == "hw:9"
    assert config.recorder.duration == 30
    assert config.recorder.volume == 4.0


@pytest.mark.asyncio
async def test_main_invalid_override(mock_controller):
    assert await main(["--duration", "0"]) == EXIT_CONFIG
    mock_controller.assert_not_called()


@pytest.mark.asyncio
async def test_main_log_level_flag(mock_controller, mock_logging):
    await main(["--log-level", "debug"])

    level, log_file = mock_logging.call_args.args
    assert level == "DEBUG"
    assert log_file is None


@pytest.mark.asyncio
async def test_main_prints_steps(mock_controller, capsys):
    await main([])
    assert "Starting audio recording..." in capsys.readouterr().out


def test_run_exit_codes():
    """Test run() maps outcomes onto process exit codes."""
    with patch("scribe.main.main", new=AsyncMock(return_value=EXIT_FAILURE)):
        with pytest.raises(SystemExit) as exc_info:
            run()
    assert exc_info.value.code == EXIT_FAILURE

    with patch("scribe.main.main", new=AsyncMock(side_effect=KeyboardInterrupt)):
        with pytest.raises(SystemExit) as exc_info:
            run()
    assert exc_info.value.code == EXIT_INTERRUPTED

    with patch("scribe.main.main", new=AsyncMock(side_effect=RuntimeError("boom"))):
        with pytest.raises(SystemExit) as exc_info:
            run()
    assert exc_info.value.code == EXIT_FAILURE
