"""Sized file fill engine and cancellable operation coordinator."""

from filler.cancellable_operation import (
    CancellableOperation,
    Cancelled,
    Completed,
    Faulted,
    OperationOutcome,
    OperationState,
)
from filler.content_generator import generate_content
from filler.exceptions import (
    FillerException,
    FillSpecValidationError,
    OperationCancelledError,
)
from filler.size_resolver import resolve_size
from filler.sized_file_writer import SizedFileWriter, create_file
from filler.types import FillPolicy, FillSpec, ProgressCallback, SizeUnit
from filler.validation import validate_fill_spec

__all__ = [
    "CancellableOperation",
    "Cancelled",
    "Completed",
    "Faulted",
    "OperationOutcome",
    "OperationState",
    "generate_content",
    "FillerException",
    "FillSpecValidationError",
    "OperationCancelledError",
    "resolve_size",
    "SizedFileWriter",
    "create_file",
    "FillPolicy",
    "FillSpec",
    "ProgressCallback",
    "SizeUnit",
    "validate_fill_spec",
]
