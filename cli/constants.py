"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

APP_NAME = "largefill"

RESERVED_ARGUMENTS = ("--SIZE", "--UNIT", "--CONTENT", "--FILL")
RESERVED_FLAGS = ("--HELP", "--NOBANNER", "--SILENT", "--VERBOSE", "--APPEND", "--DEBUG")

HELP_FLAG = "--HELP"

SUCCESS = 0
CANCELLED = 1
VALIDATION_ERROR = -1
EXCEPTION = -2

STYLE = Style.from_dict(
    {
        "error": "#ff0000",
        "banner": "#F45935 bold",
    }
)

GREEN = "\033[32m"
RESET = "\033[0m"

BANNER_TEMPLATE = "{app}. Creates files of an exact size.\n\n"

HELP_TEXT = f"""Creates a file and fills it with content until the file reaches a specified size.

Usage: {APP_NAME} --HELP

Usage: {APP_NAME} FileName
\t[--SIZE=IntegerValue]
\t[--UNIT=B|KB|MB|GB]
\t[--CONTENT=StringValue]
\t[--FILL=Null|Random|Fixed]
\t[--APPEND]
\t[--VERBOSE]
\t[--NOBANNER]
\t[--SILENT]
\t[--DEBUG]

Arguments:
\tFileName   - Required. The file to write the output to.
\t--SIZE     - The output file size. DEFAULT: {{default_size}}
\t--UNIT     - The unit of measure for the file size. DEFAULT: {{default_unit}}
\t--CONTENT  - The string to use for filling the contents. DEFAULT: Depends on the --FILL argument
\t--FILL     - The order on which the contents are written to the output file. DEFAULT: {{default_fill}}
\t--APPEND   - Append the contents to the file if it exists already.
\t--VERBOSE  - Display more information on the progress.
\t--NOBANNER - Hide the application banner.
\t--SILENT   - Terminate immediately after completion.
\t--DEBUG    - Enable debug logging.
\t--HELP     - Show this message.

Press ESC while the file is being written to cancel.
"""

CONTINUE_PROMPT = "\nPress any key to continue..."
