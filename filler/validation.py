"""Validation of FillSpec values before any file I/O."""

import os
import sys
from pathlib import Path

from common.constants import CONTENT_ENCODING
from filler.exceptions import FillSpecValidationError
from filler.size_resolver import resolve_size
from filler.types import FillPolicy, FillSpec

if sys.platform == "win32":
    INVALID_FILE_NAME_CHARS = frozenset('<>:"/\\|?*\0') | frozenset(chr(i) for i in range(32))
else:
    INVALID_FILE_NAME_CHARS = frozenset("/\0")

INVALID_PATH_CHARS = frozenset("\0")


def validate_fill_spec(spec: FillSpec) -> None:
    """
    Check that a FillSpec can be written.

    Args:
        spec: FillSpec to validate

    Raises:
        FillSpecValidationError: With a user-facing message describing the
            first problem found
    """
    _validate_path(spec.path)
    _validate_template(spec.policy, spec.template)
    resolve_size(spec.size, spec.unit)


def _validate_path(path: Path) -> None:
    """Validate file name characters and that the parent directory exists."""
    raw = os.fspath(path) if path is not None else ""
    if not raw.strip():
        raise FillSpecValidationError("FileName is required.")

    directory, file_name = os.path.split(raw)
    if not file_name or any(c in INVALID_FILE_NAME_CHARS for c in file_name):
        raise FillSpecValidationError("Invalid FileName.")
    if any(c in INVALID_PATH_CHARS for c in directory):
        raise FillSpecValidationError("Invalid FileName.")

    if directory.strip() and not Path(directory).is_dir():
        raise FillSpecValidationError("Directory does not exist.")

    if Path(raw).is_dir():
        raise FillSpecValidationError("Invalid FileName.")


def _validate_template(policy: FillPolicy, template: str) -> None:
    """Non-null policies need a non-blank template that encodes one byte per character."""
    if policy is FillPolicy.NULL:
        return

    if not template or not template.strip():
        raise FillSpecValidationError("Invalid --CONTENT value.")

    try:
        template.encode(CONTENT_ENCODING)
    except UnicodeEncodeError:
        raise FillSpecValidationError("Invalid --CONTENT value.")
