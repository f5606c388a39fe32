"""CLI entry point."""

import asyncio
import os
import sys
import threading
from typing import Optional, Sequence

from cli.config import Config
from cli.console import Console, KeyboardMonitor, format_progress
from cli.constants import (
    CANCELLED,
    CONTINUE_PROMPT,
    EXCEPTION,
    HELP_TEXT,
    SUCCESS,
    VALIDATION_ERROR,
)
from cli.models import CommandLineOptions
from cli.parser import parse_arguments
from common.logging_config import setup_logging
from filler.cancellable_operation import (
    CancellableOperation,
    Cancelled,
    Completed,
    Faulted,
    OperationOutcome,
)
from filler.exceptions import FillSpecValidationError
from filler.sized_file_writer import create_file
from filler.types import FillSpec
from filler.validation import validate_fill_spec


def describe_operation(options: CommandLineOptions, file_exists: bool) -> str:
    """
    Build the status line description for an operation.

    Args:
        options: Parsed options
        file_exists: Whether the target file already exists

    Returns:
        Text such as 'Overwriting out.bin [10 MB]...'
    """
    operation = "Writing to"
    if file_exists:
        operation = "Appending to" if options.append else "Overwriting"

    size = f" [{options.size} {options.unit.name}]" if options.verbose else ""
    return f"{operation} {options.file_name}{size}..."


def exit_code_for(outcome: OperationOutcome) -> int:
    """Map an operation outcome to the process exit code."""
    if isinstance(outcome, Completed):
        return SUCCESS
    elif isinstance(outcome, Cancelled):
        return CANCELLED
    return EXCEPTION


async def run_fill(
    spec: FillSpec,
    options: CommandLineOptions,
    config: Config,
    console: Console,
    keyboard: KeyboardMonitor
) -> int:
    """
    Write the file while watching for the escape key.

    Args:
        spec: Validated FillSpec
        options: Parsed options (verbosity, silent mode)
        config: Loaded configuration
        console: Output console
        keyboard: Source of the escape-key cancel condition

    Returns:
        Process exit code
    """
    console.start_status(describe_operation(options, spec.path.exists()))

    def action(stop_event: threading.Event):
        def on_progress(fraction: float) -> None:
            if options.verbose and not stop_event.is_set():
                console.update_status(format_progress(fraction, color=console.supports_color))

        return create_file(
            spec,
            on_progress=on_progress,
            stop_event=stop_event,
            chunk_size=config.get_chunk_size(),
            staging_dir=config.get_staging_dir(),
        )

    def on_outcome(outcome: OperationOutcome) -> None:
        if isinstance(outcome, Completed):
            console.update_status("done!")
        elif isinstance(outcome, Cancelled):
            console.update_status("cancelled")
        elif isinstance(outcome, Faulted):
            console.update_status("ERROR!")

    operation = CancellableOperation(
        action,
        keyboard.escape_pressed,
        on_outcome=on_outcome,
        on_finished=console.end_status,
        poll_interval=config.get_poll_interval(),
    )

    with keyboard.watching_for_escape():
        outcome = await operation.run()

    if isinstance(outcome, Faulted):
        console.display_error(f"{outcome.error}")

    if not options.silent and keyboard.interactive:
        console.write(CONTINUE_PROMPT)
        await keyboard.wait_for_any_key()
        console.end_status()

    return exit_code_for(outcome)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for CLI."""
    args = list(sys.argv[1:] if argv is None else argv)

    debug = any(arg and arg.upper() == '--DEBUG' for arg in args)
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')
    logger = setup_logging('cli', log_level=log_level)
    setup_logging('filler', log_level=log_level)

    if debug:
        logger.info("Debug logging enabled")

    config = Config()
    defaults = config.get_defaults()
    options = parse_arguments(args, defaults)
    console = Console()

    if options.show_help:
        console.write(HELP_TEXT.format(
            default_size=defaults.default_size,
            default_unit=defaults.default_unit.name,
            default_fill=defaults.default_fill.value,
        ))
        return SUCCESS

    try:
        spec = options.to_fill_spec()
        validate_fill_spec(spec)
    except FillSpecValidationError as e:
        logger.debug(f"Validation failed: {e}")
        console.display_error(str(e))
        return VALIDATION_ERROR

    if not options.hide_banner:
        console.display_banner()

    keyboard = KeyboardMonitor()
    try:
        return asyncio.run(run_fill(spec, options, config, console, keyboard))
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        keyboard.close()


if __name__ == "__main__":
    sys.exit(main())
