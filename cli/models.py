"""Parsed command-line options."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from filler.exceptions import FillSpecValidationError
from filler.types import FillPolicy, FillSpec, SizeUnit


@dataclass(frozen=True)
class CommandLineOptions:
    """Options parsed from the command line; unset values are None."""

    file_name: Optional[str] = None
    size: Optional[int] = None
    unit: Optional[SizeUnit] = None
    fill: Optional[FillPolicy] = None
    content: Optional[str] = None
    append: bool = False
    verbose: bool = False
    hide_banner: bool = False
    silent: bool = False
    debug: bool = False
    show_help: bool = False

    def to_fill_spec(self) -> FillSpec:
        """
        Build the FillSpec for these options.

        Raises:
            FillSpecValidationError: If the file name is missing
        """
        if self.file_name is None or not self.file_name.strip():
            raise FillSpecValidationError("FileName is required.")

        return FillSpec(
            path=Path(self.file_name),
            size=self.size if self.size is not None else 0,
            unit=self.unit if self.unit is not None else SizeUnit.B,
            policy=self.fill if self.fill is not None else FillPolicy.NULL,
            template=self.content or "",
            append=self.append,
        )
