"""Main entry point for scribe."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from . import __version__
from .config import apply_overrides, get_default_config_path, load_config
from .console import StepConsole
from .exceptions import ConfigurationError, ScribeError
from .logging_setup import setup_logging
from .pipeline import PipelineController, describe_error
from .state import PipelineStateManager

logger = logging.getLogger(__name__)

__all__ = ["run"]

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scribe",
        description=(
            "Record from an audio device until a key is pressed, transcribe "
            "the recording and copy the text to the clipboard."
        ),
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help=f"Path to configuration file (TOML, default: {get_default_config_path()})",
    )
    parser.add_argument("--device", help="Audio input device")
    parser.add_argument("--duration", type=int, help="Recording duration in seconds")
    parser.add_argument("--volume", type=float, help="Audio volume multiplier")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Console logging level",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Run the pipeline once.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    args = build_parser().parse_args(argv)
    step_console = StepConsole()

    # Load configuration first
    try:
        config = load_config(args.config)
        config = apply_overrides(
            config, device=args.device, duration=args.duration, volume=args.volume
        )
    except ConfigurationError as e:
        step_console.error(f"Error loading configuration: {e}")
        return EXIT_CONFIG

    log_level = args.log_level or config.logging.log_level
    setup_logging(log_level, config.logging.computed_log_file)
    logger.info(f"Starting scribe {__version__}")
    logger.debug(f"Configuration: {config.model_dump()}")

    state_manager = PipelineStateManager()
    state_manager.add_observer(step_console.on_state_change)
    controller = PipelineController(config, state_manager)

    step_console.step("Starting audio recording...")
    try:
        await controller.run()
    except ScribeError as e:
        logger.debug(f"{type(e).__name__}: {describe_error(e)}")
        return EXIT_FAILURE

    return EXIT_OK


def run() -> NoReturn:
    """Entry point for the scribe command."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        # Fallback logger in case of early failure
        logging.basicConfig()
        logger.exception(f"scribe failed with unhandled exception: {e}")
        sys.exit(EXIT_FAILURE)
