"""Structures making up a TIM file.

A TIM is laid out as::

    file header     u32 magic (0x10), u32 flags
    [CLUT block]    block header, then the palette(s)
    image block     block header, then the pixel data

and every block header is::

    u32 length, u16 x, u16 y, u16 width, u16 height

All integers are little-endian.  The x/y fields are where the block wants to
live in VRAM, which doesn't matter for decoding.  Block widths are counted in
16-bit words, whatever the pixel format.
"""
import enum
import logging

import attr
import construct as c

from psxtim.errors import ClutSizeMismatch, InvalidArgument, InvalidSignature
from psxtim.lib.color import unpack_psx_rgb555

log = logging.getLogger(__name__)

FILE_SIGNATURE = 0x10
HAS_CLUT_MASK = 0x08
IMAGE_TYPE_MASK = 0x07

block_header_struct = c.Struct(
    'length' / c.Int32ul,
    'x' / c.Int16ul,
    'y' / c.Int16ul,
    'width' / c.Int16ul,
    'height' / c.Int16ul,
)
BLOCK_HEADER_SIZE = block_header_struct.sizeof()


class ImageType(enum.IntEnum):
    INDEXED4 = 0
    INDEXED8 = 1
    SIXTEEN_BIT = 2
    TWENTY_FOUR_BIT = 3


# Number of palette entries each indexed type needs
CLUT_ENTRY_COUNTS = {
    ImageType.INDEXED4: 16,
    ImageType.INDEXED8: 256,
}


def image_type_from_code(code):
    """Returns the `ImageType` for a type code, or the code itself if it's not
    one we know.  Whether that's a problem is up to the image decoder.
    """
    try:
        return ImageType(code)
    except ValueError:
        return code


@attr.s(frozen=True)
class FileHeader:
    signature = attr.ib()
    has_color_lookup_table = attr.ib()
    image_type = attr.ib()

    @classmethod
    def read(cls, reader):
        signature = reader.read_u32()
        if signature != FILE_SIGNATURE:
            raise InvalidSignature(
                "not a TIM file; expected signature {:#x}, got {:#x}"
                .format(FILE_SIGNATURE, signature))

        flags = reader.read_u32()
        header = cls(
            signature=signature,
            has_color_lookup_table=bool(flags & HAS_CLUT_MASK),
            image_type=image_type_from_code(flags & IMAGE_TYPE_MASK),
        )
        log.debug("file header: %r", header)
        return header


@attr.s(frozen=True)
class BlockHeader:
    length = attr.ib()
    x = attr.ib()
    y = attr.ib()
    width = attr.ib()
    height = attr.ib()

    @classmethod
    def read(cls, reader):
        parsed = reader.parse(block_header_struct)
        header = cls(
            length=parsed.length,
            x=parsed.x,
            y=parsed.y,
            width=parsed.width,
            height=parsed.height,
        )
        if header.length != BLOCK_HEADER_SIZE + header.data_length:
            # Some tools write junk here, and nothing needs it anyway
            log.warning(
                "block at (%d, %d) claims to be %d bytes long, but its "
                "%dx%d size makes it %d",
                header.x, header.y, header.length, header.width, header.height,
                BLOCK_HEADER_SIZE + header.data_length)
        return header

    @property
    def data_length(self):
        """Size in bytes of the data following this header."""
        return self.width * self.height * 2


class ColorLookupTable:
    """A palette for an indexed image: 16 or 256 RGBA colors.

    A CLUT block may hold several palettes stacked as rows, but only the first
    one is used; the rest are skipped over.
    """
    def __init__(self, entries):
        self.entries = tuple(entries)
        # Pre-packed copies, for splicing straight into pixel rows
        self.packed_entries = tuple(bytes(entry) for entry in self.entries)

    @classmethod
    def read(cls, reader, image_type):
        if image_type not in CLUT_ENTRY_COUNTS:
            raise InvalidArgument(
                "only indexed images have a color table, not {!r}"
                .format(image_type))
        entry_count = CLUT_ENTRY_COUNTS[image_type]

        header = BlockHeader.read(reader)
        if header.width != entry_count:
            raise ClutSizeMismatch(
                "the color table has {} entries, but {} needs {}"
                .format(header.width, image_type.name, entry_count))

        entries = [
            unpack_psx_rgb555(reader.read_u16())
            for _ in range(entry_count)
        ]

        if header.height > 1:
            log.debug(
                "skipping %d extra palettes in the color table",
                header.height - 1)
            reader.skip(header.width * 2 * (header.height - 1))

        return cls(entries)

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, index):
        if not 0 <= index < len(self.entries):
            raise IndexError(
                "color table index must be in [0, {}], got {}"
                .format(len(self.entries) - 1, index))
        return self.entries[index]

    def __repr__(self):
        return "<{} of {} colors>".format(type(self).__name__, len(self))
