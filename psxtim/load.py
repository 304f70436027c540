"""Loading whole TIM files."""
import logging

import attr

from psxtim.errors import MissingColorTable
from psxtim.format import BlockHeader, ColorLookupTable, FileHeader
from psxtim.image import get_pixel_format, read_image
from psxtim.lib.base import BufferedBinaryReader

log = logging.getLogger(__name__)


def _read_color_table(reader, file_header):
    """Read the CLUT block, if the file says it has one.

    Returns None when there's no color table to use.
    """
    pixel_format = get_pixel_format(file_header.image_type)

    if not file_header.has_color_lookup_table:
        if pixel_format.needs_clut:
            raise MissingColorTable(
                "{} image has no color table"
                .format(file_header.image_type.name))
        return None

    if not pixel_format.needs_clut:
        # Direct color doesn't use a palette, so just step over it
        header = BlockHeader.read(reader)
        log.warning(
            "ignoring a %dx%d color table on a %s image",
            header.width, header.height, file_header.image_type.name)
        reader.skip(header.data_length)
        return None

    return ColorLookupTable.read(reader, file_header.image_type)


def decode(stream):
    """Decode a TIM from a readable, seekable binary stream.

    Reading starts at the stream's current position.  The stream is left
    open; closing it is the caller's business.

    Returns a `DecodedImage`, or raises a `TimDecodeError`.
    """
    with BufferedBinaryReader(stream, leave_open=True) as reader:
        return _decode(reader)


def load(path):
    """Open and decode the TIM file at ``path``."""
    with BufferedBinaryReader(open(path, 'rb')) as reader:
        return _decode(reader)


def _decode(reader):
    file_header = FileHeader.read(reader)
    clut = _read_color_table(reader, file_header)
    return read_image(reader, file_header, clut)


@attr.s(frozen=True)
class TimInfo:
    file_header = attr.ib()
    clut_header = attr.ib()
    image_header = attr.ib()
    width = attr.ib()
    height = attr.ib()

    @property
    def image_type(self):
        return self.file_header.image_type


def read_info(stream):
    """Read just the headers of a TIM, without decoding any pixels."""
    with BufferedBinaryReader(stream, leave_open=True) as reader:
        file_header = FileHeader.read(reader)
        pixel_format = get_pixel_format(file_header.image_type)
        if pixel_format.needs_clut and not file_header.has_color_lookup_table:
            raise MissingColorTable(
                "{} image has no color table"
                .format(file_header.image_type.name))

        clut_header = None
        if file_header.has_color_lookup_table:
            clut_header = BlockHeader.read(reader)
            reader.skip(clut_header.data_length)

        image_header = BlockHeader.read(reader)
        return TimInfo(
            file_header=file_header,
            clut_header=clut_header,
            image_header=image_header,
            width=pixel_format.scale_width(image_header.width),
            height=image_header.height,
        )
