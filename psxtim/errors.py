"""Exceptions raised while decoding TIM files.

Everything here derives from `TimDecodeError`, which is a `ValueError`, so
callers that only care whether a file could be read can catch either.
"""


class TimDecodeError(ValueError):
    pass


class InvalidSignature(TimDecodeError):
    pass


class ClutSizeMismatch(TimDecodeError):
    pass


class MissingColorTable(TimDecodeError):
    pass


class UnsupportedImageType(TimDecodeError):
    pass


class UnexpectedEndOfInput(TimDecodeError, EOFError):
    pass


class InvalidArgument(TimDecodeError):
    """Raised for a bad argument from the caller, rather than a bad file."""
