"""Writes a file of an exact size through a staging file."""

import asyncio
import errno
import os
import shutil
import threading
import uuid
from pathlib import Path
from typing import Optional

from common.constants import CONTENT_ENCODING, MAX_CHUNK_SIZE
from common.logging_config import get_logger
from filler.content_generator import generate_content
from filler.exceptions import OperationCancelledError
from filler.size_resolver import resolve_size
from filler.types import FillSpec, ProgressCallback
from filler.validation import validate_fill_spec

logger = get_logger(__name__)


def create_staging_file(directory: Path) -> Path:
    """
    Create an empty, uniquely named staging file.

    Args:
        directory: Directory to create the staging file in

    Returns:
        Path of the new staging file
    """
    while True:
        staging_path = directory / f"{uuid.uuid4()}.tmp"
        try:
            with open(staging_path, 'xb'):
                pass
        except FileExistsError:
            continue
        return staging_path


def remove_staging_file(staging_path: Path) -> None:
    """Delete a staging file, logging instead of raising if that fails."""
    try:
        staging_path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to delete staging file {staging_path}: {e}")


class SizedFileWriter:
    """
    Produces the target file described by a FillSpec.

    All content goes to a staging file first; the target is replaced only
    after every chunk has been written. On cancellation or failure the
    staging file is removed and the target is left as it was.
    """

    def __init__(
        self,
        spec: FillSpec,
        on_progress: Optional[ProgressCallback] = None,
        chunk_size: int = MAX_CHUNK_SIZE,
        staging_dir: Optional[Path] = None
    ):
        """
        Initialize the writer.

        Args:
            spec: What to write
            on_progress: Called with the completed fraction before each chunk
            chunk_size: Maximum characters generated and written per chunk
            staging_dir: Where to put the staging file (default: target's directory)

        Raises:
            FillSpecValidationError: If the FillSpec is invalid
            ValueError: If chunk_size is not positive
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        validate_fill_spec(spec)

        self.spec = spec
        self.target_path = Path(spec.path)
        self.on_progress = on_progress
        self.chunk_size = chunk_size
        self.staging_dir = Path(staging_dir) if staging_dir is not None else self.target_path.absolute().parent
        self.total_bytes = resolve_size(spec.size, spec.unit)

    async def run(self, stop_event: Optional[threading.Event] = None) -> int:
        """Run write() on a worker thread."""
        return await asyncio.to_thread(self.write, stop_event)

    def write(self, stop_event: Optional[threading.Event] = None) -> int:
        """
        Write the file.

        Args:
            stop_event: Checked before every chunk; when set the write aborts

        Returns:
            Number of newly generated bytes

        Raises:
            OperationCancelledError: If stop_event was set before completion
            OSError: If reading, writing or replacing files fails
        """
        logger.info(
            f"Writing {self.total_bytes} bytes to {self.target_path} "
            f"[fill={self.spec.policy.value}, append={self.spec.append}]"
        )

        self.staging_dir.mkdir(parents=True, exist_ok=True)
        staging_path = create_staging_file(self.staging_dir)
        logger.debug(f"Staging file created: {staging_path}")

        try:
            self._write_content(staging_path, stop_event)
            self._replace_target(staging_path)
        finally:
            remove_staging_file(staging_path)

        logger.info(f"Finished writing {self.target_path}")
        return self.total_bytes

    def _write_content(self, staging_path: Path, stop_event: Optional[threading.Event]) -> None:
        """Fill the staging file chunk by chunk."""
        if self.spec.append and self.target_path.exists():
            shutil.copyfile(self.target_path, staging_path)
            mode = 'ab'
            logger.debug(f"Copied existing content of {self.target_path} for append")
        else:
            mode = 'wb'

        with open(staging_path, mode) as f:
            if self.total_bytes == 0:
                self._report_progress(0, 0)
                return

            written = 0
            while written < self.total_bytes:
                if stop_event is not None and stop_event.is_set():
                    logger.info(f"Write to {self.target_path} cancelled after {written} bytes")
                    raise OperationCancelledError(f"Cancelled after {written} of {self.total_bytes} bytes")

                length = min(self.total_bytes - written, self.chunk_size)
                content = generate_content(self.spec.policy, self.spec.template, written, length)
                f.write(content.encode(CONTENT_ENCODING))
                self._report_progress(written, self.total_bytes)
                written += length

    def _report_progress(self, written: int, total: int) -> None:
        """Emit written/total (0 for an empty target)."""
        if self.on_progress is None:
            return
        self.on_progress(written / total if total else 0.0)

    def _replace_target(self, staging_path: Path) -> None:
        """Move the staging file over the target in one step."""
        try:
            os.replace(staging_path, self.target_path)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise
            logger.debug(f"Staging file on another device, copying next to {self.target_path}")
            local_path = create_staging_file(self.target_path.absolute().parent)
            try:
                shutil.copyfile(staging_path, local_path)
                os.replace(local_path, self.target_path)
            finally:
                remove_staging_file(local_path)


async def create_file(
    spec: FillSpec,
    on_progress: Optional[ProgressCallback] = None,
    stop_event: Optional[threading.Event] = None,
    chunk_size: int = MAX_CHUNK_SIZE,
    staging_dir: Optional[Path] = None
) -> int:
    """
    Create the file described by spec on a worker thread.

    Args:
        spec: What to write
        on_progress: Progress callback
        stop_event: Cooperative stop signal
        chunk_size: Maximum characters per chunk
        staging_dir: Optional directory for the staging file

    Returns:
        Number of newly generated bytes
    """
    writer = SizedFileWriter(spec, on_progress=on_progress, chunk_size=chunk_size, staging_dir=staging_dir)
    return await writer.run(stop_event)
