"""Decoder for PlayStation TIM images."""
from psxtim.errors import (
    ClutSizeMismatch, InvalidArgument, InvalidSignature, MissingColorTable,
    TimDecodeError, UnexpectedEndOfInput, UnsupportedImageType,
)
from psxtim.format import ImageType
from psxtim.image import DecodedImage
from psxtim.load import decode, load, read_info
