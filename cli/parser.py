"""Command-line argument parser."""

import re
from dataclasses import replace
from typing import Optional, Sequence

from cli.config import FillerSettings
from cli.constants import HELP_FLAG, RESERVED_ARGUMENTS, RESERVED_FLAGS
from cli.models import CommandLineOptions
from common.constants import FIXED_TEMPLATE, RANDOM_TEMPLATE
from filler.types import FillPolicy, SizeUnit

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

FLAG_FIELDS = {
    "--NOBANNER": "hide_banner",
    "--SILENT": "silent",
    "--VERBOSE": "verbose",
    "--APPEND": "append",
    "--DEBUG": "debug",
}


def parse_arguments(args: Sequence[Optional[str]], defaults: Optional[FillerSettings] = None) -> CommandLineOptions:
    """Parse command-line arguments into CommandLineOptions.

    The help flag is only recognised as the first argument. The file name
    is always the first argument. Unknown flags, unknown arguments and
    unparseable values are ignored, and missing values fall back to defaults.

    Args:
        args: Arguments without the program name
        defaults: Settings supplying default size, unit and fill

    Returns:
        Parsed options with defaults applied (unless help was requested)
    """
    options = CommandLineOptions()
    if not args:
        return _apply_defaults(options, defaults)

    if _matches(args[0], HELP_FLAG):
        return replace(options, show_help=True)

    options = replace(options, file_name=_parse_file_name(args[0]))

    for arg in args[1:]:
        if not arg:
            continue
        if "=" in arg:
            options = _apply_argument(options, arg)
        else:
            options = _apply_flag(options, arg)

    return _apply_defaults(options, defaults)


def _matches(value: Optional[str], name: str) -> bool:
    """Case-insensitive comparison of an argument against a reserved name."""
    return value is not None and value.upper() == name


def _parse_file_name(value: Optional[str]) -> Optional[str]:
    """Return the file name, or None if the value is blank or reserved."""
    if value is None or not value.strip():
        return None

    parts = value.split("=")
    if len(parts) == 2 and parts[0].upper() in RESERVED_ARGUMENTS:
        return None
    if value.upper() in RESERVED_FLAGS:
        return None

    return value


def _apply_flag(options: CommandLineOptions, flag: str) -> CommandLineOptions:
    """Set the option matching a flag; unknown flags are ignored."""
    field = FLAG_FIELDS.get(flag.upper())
    if field is None:
        return options
    return replace(options, **{field: True})


def _apply_argument(options: CommandLineOptions, argument: str) -> CommandLineOptions:
    """Apply a NAME=VALUE argument; malformed or unknown ones are ignored."""
    parts = argument.split("=")
    if len(parts) != 2:
        return options

    name = parts[0].strip().upper()
    value = parts[1].strip()

    if name == "--SIZE":
        if INTEGER_PATTERN.match(value):
            return replace(options, size=int(value))
    elif name == "--UNIT":
        unit = SizeUnit.parse(value)
        if unit is not None:
            return replace(options, unit=unit)
    elif name == "--CONTENT":
        return replace(options, content=value)
    elif name == "--FILL":
        fill = FillPolicy.parse(value)
        if fill is not None:
            return replace(options, fill=fill)

    return options


def _apply_defaults(options: CommandLineOptions, defaults: Optional[FillerSettings]) -> CommandLineOptions:
    """Fill in defaults for missing size, unit, fill and content."""
    if defaults is None:
        defaults = FillerSettings()

    size = options.size if options.size else defaults.default_size
    unit = options.unit if options.unit is not None else defaults.default_unit
    fill = options.fill if options.fill is not None else defaults.default_fill

    content = options.content
    if fill is not FillPolicy.NULL and (content is None or not content.strip()):
        content = RANDOM_TEMPLATE if fill is FillPolicy.RANDOM else FIXED_TEMPLATE

    return replace(options, size=size, unit=unit, fill=fill, content=content)
