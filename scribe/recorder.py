"""Audio recording via an external ffmpeg process."""

import asyncio
import logging
import signal
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import RecorderConfig
from .exceptions import ProcessError, SpawnError

logger = logging.getLogger(__name__)

STAGE = "recording"

# ffmpeg exits with 255 when interrupted, shells report 130 for SIGINT
GRACEFUL_EXIT_CODES = frozenset({0, 130, 255, -signal.SIGINT})


@dataclass
class RecordingSession:
    """A running recorder process and the file it writes to."""

    output_path: Path
    process: asyncio.subprocess.Process

    @property
    def has_audio(self) -> bool:
        """Whether the recording file exists and is non-empty."""
        try:
            return self.output_path.stat().st_size > 0
        except FileNotFoundError:
            return False


def make_recording_path(recording_dir: Path, now: Optional[float] = None) -> Path:
    """Build a timestamped recording path inside recording_dir."""
    timestamp = int(time.time() if now is None else now)
    return recording_dir / f"output_{timestamp}.wav"


def build_record_command(
    config: RecorderConfig, device: str, output_path: Path
) -> List[str]:
    """Build the ffmpeg command line for recording from device."""
    return [
        config.binary,
        "-y",  # Overwrite output file without prompting
        "-f",
        config.input_format,
        "-i",
        device,
        "-filter:a",
        f"volume={config.volume}",
        "-t",
        str(config.duration),
        str(output_path),
    ]


async def start_recording(
    config: RecorderConfig, device: str, output_path: Path
) -> RecordingSession:
    """Launch the recorder writing audio from device to output_path.

    Raises:
        SpawnError: If the recorder binary is missing or can't be started.
    """
    command = build_record_command(config, device, output_path)
    logger.info(f"Starting recorder on device {device!r} -> {output_path}")
    logger.debug(f"Recorder command: {command}")

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except FileNotFoundError as e:
        raise SpawnError(
            f"'{config.binary}' command not found. Please ensure it is installed.",
            stage=STAGE,
        ) from e
    except OSError as e:
        raise SpawnError(f"Failed to start '{config.binary}': {e}", stage=STAGE) from e

    logger.info(f"Started {config.binary} process with PID: {process.pid}")
    return RecordingSession(output_path=output_path, process=process)


async def stop_recording(session: RecordingSession, timeout: float = 0.0) -> int:
    """Interrupt the recorder and wait for it to exit.

    Args:
        session: The session returned by start_recording.
        timeout: Seconds to wait for exit; 0 waits forever.

    Returns:
        The recorder's exit code.

    Raises:
        ProcessError: If the signal can't be delivered, the recorder doesn't
            exit in time, or it exits with a non-graceful code.
    """
    process = session.process

    if process.returncode is None:
        try:
            process.send_signal(signal.SIGINT)
            logger.info(f"Sent SIGINT to recorder (PID {process.pid})")
        except ProcessLookupError:
            logger.info("Recorder already exited before it could be interrupted")
        except OSError as e:
            raise ProcessError(
                f"Failed to signal recorder (PID {process.pid}): {e}", stage=STAGE
            ) from e
    else:
        logger.info(f"Recorder already exited with code {process.returncode}")

    try:
        if timeout > 0:
            returncode = await asyncio.wait_for(process.wait(), timeout=timeout)
        else:
            returncode = await process.wait()
    except asyncio.TimeoutError as e:
        logger.warning(f"Timeout waiting for recorder to exit after {timeout}s, killing.")
        try:
            process.kill()
        except ProcessLookupError:
            pass  # Exited in the meantime
        raise ProcessError(
            f"Recorder did not exit within {timeout}s of SIGINT", stage=STAGE
        ) from e

    if returncode not in GRACEFUL_EXIT_CODES:
        raise ProcessError(
            f"Failed to record audio. Exit code: {returncode}", stage=STAGE
        )

    logger.info(f"Recorder stopped with exit code {returncode}")
    return returncode


async def abort_recording(session: RecordingSession, timeout: float = 2.0) -> None:
    """Make sure a recorder left behind by a failed run is not orphaned.

    Sends SIGINT if the process is still running, kills it if it hasn't
    exited after timeout seconds, and always reaps it.
    """
    process = session.process
    if process.returncode is not None:
        return

    logger.warning(f"Interrupting recorder (PID {process.pid}) after failed run")
    try:
        process.send_signal(signal.SIGINT)
        await asyncio.wait_for(process.wait(), timeout=timeout)
        return
    except ProcessLookupError:
        pass  # Exited in the meantime
    except asyncio.TimeoutError:
        logger.warning("Timeout waiting for recorder to terminate, killing.")

    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()
