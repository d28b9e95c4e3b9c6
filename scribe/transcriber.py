"""Audio transcription using the external whisper CLI."""

import asyncio
import logging
from pathlib import Path
from typing import List

from .config import TranscriberConfig
from .exceptions import SpawnError, TranscriptionError

logger = logging.getLogger(__name__)

STAGE = "transcription"


def build_transcribe_command(config: TranscriberConfig, input_path: Path) -> List[str]:
    """Build the whisper command line for transcribing input_path."""
    command = [config.binary, "--model", config.model, "--device", config.device]
    if config.language:
        command += ["--language", config.language]
    command += config.extra_args
    command.append(str(input_path))
    return command


def check_recording(input_path: Path) -> None:
    """Make sure there is something to transcribe.

    Raises:
        TranscriptionError: If the file is missing or empty.
    """
    try:
        size = input_path.stat().st_size
    except FileNotFoundError as e:
        raise TranscriptionError(
            f"Recording not found: {input_path}", stage=STAGE
        ) from e

    if size == 0:
        raise TranscriptionError(f"Recording is empty: {input_path}", stage=STAGE)


async def transcribe(config: TranscriberConfig, input_path: Path) -> str:
    """Transcribe an audio file and return the text whisper prints.

    Args:
        config: Transcriber configuration.
        input_path: Recorded audio file.

    Returns:
        The transcript exactly as written to stdout.

    Raises:
        SpawnError: If the transcriber binary is missing or can't be started.
        TranscriptionError: On non-zero exit, undecodable or blank output, or
            a missing/empty recording.
    """
    check_recording(input_path)

    command = build_transcribe_command(config, input_path)
    logger.info(f"Transcribing {input_path} with model '{config.model}'")
    logger.debug(f"Transcriber command: {command}")

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise SpawnError(
            f"'{config.binary}' command not found. Please ensure it is installed.",
            stage=STAGE,
        ) from e
    except OSError as e:
        raise SpawnError(f"Failed to start '{config.binary}': {e}", stage=STAGE) from e

    logger.debug(f"Started {config.binary} process with PID: {process.pid}")
    stdout, stderr = await process.communicate()

    if process.returncode != 0:
        error_msg = f"Whisper transcription failed with code {process.returncode}"
        if stderr:
            error_msg += f":\n{stderr.decode('utf-8', errors='replace').strip()}"
        raise TranscriptionError(error_msg, stage=STAGE)

    try:
        text = stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TranscriptionError(
            f"Transcriber output is not valid UTF-8: {e}", stage=STAGE
        ) from e

    if not text.strip():
        raise TranscriptionError("Transcriber produced no text", stage=STAGE)

    logger.info(f"Transcribed {len(text)} chars")
    return text
