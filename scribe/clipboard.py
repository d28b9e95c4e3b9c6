"""Copying transcribed text to the clipboard via an external command."""

import asyncio
import logging
import shlex

from .config import ClipboardConfig
from .exceptions import ClipboardError, SpawnError

logger = logging.getLogger(__name__)

STAGE = "clipboard"


async def copy_to_clipboard(text: str, config: ClipboardConfig) -> None:
    """Feed text to the configured clipboard command.

    Args:
        text: The text to copy
        config: Clipboard configuration containing the command

    Raises:
        SpawnError: If the command is missing or can't be started.
        ClipboardError: If the command exits non-zero.
    """
    if not text:
        logger.warning("Skipping clipboard copy for empty text")
        return

    command = shlex.split(config.command)
    logger.debug(f"Executing clipboard command: {command}")
    logger.debug(f"Text length: {len(text)} chars")

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise SpawnError(f"Command not found: {config.command}", stage=STAGE) from e
    except PermissionError as e:
        raise SpawnError(
            f"Permission denied executing: {config.command}", stage=STAGE
        ) from e
    except OSError as e:
        raise SpawnError(f"Error executing command: {e}", stage=STAGE) from e

    stdout, stderr = await process.communicate(text.encode("utf-8"))

    if process.returncode != 0:
        error_msg = (
            f"Failed to copy transcription to clipboard. "
            f"Command failed with code {process.returncode}:\n"
            f"Command: {config.command}\n"
            f"Stderr: {stderr.decode('utf-8', errors='replace')}"
        )
        if stdout:
            error_msg += f"\nStdout: {stdout.decode('utf-8', errors='replace')}"
        raise ClipboardError(error_msg, stage=STAGE)

    if stdout:
        logger.debug(f"Command stdout: {stdout.decode('utf-8', errors='replace')}")
    logger.info("Copied transcription to clipboard")
