"""Custom exception classes for the fill engine."""


class FillerException(Exception):
    """
    Base exception class for all fill-related errors.
    """
    pass


class FillSpecValidationError(FillerException):
    """
    Raised when a FillSpec is malformed, before any file I/O happens.
    """
    pass


class OperationCancelledError(FillerException):
    """
    Raised inside a running action once its stop signal has been observed.
    """
    pass
