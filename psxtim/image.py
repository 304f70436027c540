"""Decoding the image block of a TIM into RGBA pixels."""
import itertools
import logging

import attr

from psxtim.errors import MissingColorTable, UnsupportedImageType
from psxtim.format import BlockHeader, ImageType
from psxtim.lib.color import COLOR_FORMATS

log = logging.getLogger(__name__)

PIXEL_FORMATS = {}


@attr.s
class PixelFormat:
    image_type = attr.ib()
    decoder = attr.ib()
    # How many pixels wide a block of the given width (in 16-bit words) is
    scale_width = attr.ib()
    # None for indexed formats, which get their colors from the CLUT
    color_format = attr.ib()

    @property
    def needs_clut(self):
        return self.color_format is None


def _register_pixel_format(image_type, *, scale_width, color_format=None):
    def register(f):
        PIXEL_FORMATS[image_type] = PixelFormat(
            image_type, f, scale_width,
            COLOR_FORMATS[color_format] if color_format else None)
        return f
    return register


def get_pixel_format(image_type):
    try:
        return PIXEL_FORMATS[image_type]
    except KeyError:
        raise UnsupportedImageType(
            "unsupported image type {!r}".format(image_type)) from None


class DecodedImage:
    """A decoded TIM: ``width * height`` RGBA pixels, four bytes each, in
    rows from the top down.
    """
    def __init__(self, width, height, data=None):
        self.width = width
        self.height = height
        if data is None:
            data = bytearray(width * height * 4)
        elif len(data) != width * height * 4:
            raise ValueError(
                "{}x{} pixels need {} bytes of data, got {}"
                .format(width, height, width * height * 4, len(data)))
        self.data = data

    def __repr__(self):
        return "<{} {}x{}>".format(type(self).__name__, self.width, self.height)

    def __iter__(self):
        return iter((self.width, self.height, self.data))

    def __eq__(self, other):
        if not isinstance(other, DecodedImage):
            return NotImplemented
        return (self.width, self.height, self.data) == (
            other.width, other.height, other.data)

    @property
    def stride(self):
        return self.width * 4

    def set_row(self, y, row):
        # memoryview slices refuse to change size, so a row of the wrong
        # length is an error instead of silently shifting every pixel after it
        start = y * self.stride
        memoryview(self.data)[start:start + self.stride] = row

    def pixel(self, x, y):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                "pixel ({}, {}) is outside a {}x{} image"
                .format(x, y, self.width, self.height))
        start = y * self.stride + x * 4
        return tuple(self.data[start:start + 4])

    def rows(self):
        """Yields each row as a list of RGBA tuples."""
        for y in range(self.height):
            row = self.data[y * self.stride:(y + 1) * self.stride]
            yield [tuple(row[i:i + 4]) for i in range(0, len(row), 4)]

    def write_to_png(self, f):
        """Write the image to a file object as an RGBA PNG."""
        import png

        writer = png.Writer(
            width=self.width, height=self.height, greyscale=False, alpha=True)
        writer.write(f, (
            self.data[y * self.stride:(y + 1) * self.stride]
            for y in range(self.height)
        ))


def _source_rows(data, header):
    # Every format is stored in 16-bit words, so each row is width * 2 bytes
    stride = header.width * 2
    for y in range(header.height):
        yield y, data[y * stride:(y + 1) * stride]


@_register_pixel_format(ImageType.INDEXED4, scale_width=lambda w: w * 4)
def decode_indexed4(data, header, clut, color_format):
    colors = clut.packed_entries
    for y, src in _source_rows(data, header):
        # Low nybble first
        yield y, b''.join(
            colors[index]
            for byte in src
            for index in (byte & 0x0f, byte >> 4)
        )


@_register_pixel_format(ImageType.INDEXED8, scale_width=lambda w: w * 2)
def decode_indexed8(data, header, clut, color_format):
    colors = clut.packed_entries
    for y, src in _source_rows(data, header):
        yield y, b''.join(colors[index] for index in src)


@_register_pixel_format(
    ImageType.SIXTEEN_BIT, scale_width=lambda w: w, color_format='RGB555')
def decode_sixteen_bit(data, header, clut, color_format):
    for y, src in _source_rows(data, header):
        yield y, bytes(itertools.chain.from_iterable(color_format(src)))


@_register_pixel_format(
    ImageType.TWENTY_FOUR_BIT, scale_width=lambda w: w // 2,
    color_format='RGB888')
def decode_twenty_four_bit(data, header, clut, color_format):
    width = header.width // 2
    for y, src in _source_rows(data, header):
        # Rows are padded out to a whole number of words; only the first
        # width * 3 bytes hold pixels
        yield y, bytes(itertools.chain.from_iterable(
            color_format(src, count=width)))


del _register_pixel_format


def read_image(reader, file_header, clut=None):
    """Read the image block at the reader's position and decode it.

    ``clut`` must be given for indexed images.
    """
    pixel_format = get_pixel_format(file_header.image_type)
    if pixel_format.needs_clut and clut is None:
        raise MissingColorTable(
            "{} image has no color table".format(file_header.image_type.name))

    header = BlockHeader.read(reader)
    width = pixel_format.scale_width(header.width)
    height = header.height
    log.debug(
        "image block: %r, decoding to %dx%d", header, width, height)

    data = reader.read_exact(header.data_length)

    image = DecodedImage(width, height)
    for y, row in pixel_format.decoder(
            data, header, clut, pixel_format.color_format):
        image.set_row(y, row)
    return image
