"""Project-wide constants (chunk size, default templates, size limits)."""

MAX_CHUNK_SIZE: int = 32767  # characters written per chunk
MAX_FILE_SIZE_BYTES: int = 2**63 - 1  # largest signed 64-bit file offset

CONTENT_ENCODING: str = "ascii"

DEFAULT_POLL_INTERVAL: float = 0.01  # seconds between cancellation checks

RANDOM_TEMPLATE: str = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz1234567890"
    "!@#$%^&*()-=_+`~[]\\{}|;':\",./<>?\r\n\t "
)
FIXED_TEMPLATE: str = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua.\n"
)
