import io
import logging

import pytest
parametrize = pytest.mark.parametrize

from psxtim.errors import ClutSizeMismatch, InvalidArgument, InvalidSignature
from psxtim.format import (
    BlockHeader, ColorLookupTable, FileHeader, ImageType, image_type_from_code,
)
from psxtim.lib.base import BufferedBinaryReader

from psxtim.tests import PALETTE16, block, clut_block, file_header, pack_rgb555

def reader_for(*parts):
    return BufferedBinaryReader(io.BytesIO(b''.join(parts)))

@parametrize('image_type', list(ImageType))
@parametrize('has_clut', [True, False])
def test_file_header_flags(image_type, has_clut):
    header = FileHeader.read(reader_for(file_header(image_type, has_clut)))
    assert header.signature == 0x10
    assert header.image_type is image_type
    assert header.has_color_lookup_table == has_clut

def test_file_header_unknown_type_kept():
    header = FileHeader.read(reader_for(file_header(5, has_clut=True)))
    assert header.image_type == 5
    assert not isinstance(header.image_type, ImageType)
    assert header.has_color_lookup_table

def test_file_header_ignores_high_flag_bits():
    header = FileHeader.read(reader_for(file_header(0x1f0 | 2)))
    assert header.image_type is ImageType.SIXTEEN_BIT
    assert not header.has_color_lookup_table

def test_invalid_signature():
    reader = reader_for(b'\x00\x00\x00\x00', file_header(2))
    with pytest.raises(InvalidSignature):
        FileHeader.read(reader)
    # Only the signature itself was read
    assert reader.position == 4

def test_image_type_from_code():
    assert image_type_from_code(1) is ImageType.INDEXED8
    assert image_type_from_code(7) == 7

def test_block_header_fields():
    reader = reader_for(block(3, 2, [0] * 6, x=320, y=256))
    header = BlockHeader.read(reader)
    assert header == BlockHeader(length=24, x=320, y=256, width=3, height=2)
    assert header.data_length == 12
    assert reader.position == 12

def test_block_header_bad_length_is_tolerated(caplog):
    reader = reader_for(block(1, 1, [0], length=999))
    with caplog.at_level(logging.WARNING):
        header = BlockHeader.read(reader)
    assert header.length == 999
    assert 'claims to be 999 bytes long' in caplog.text

def test_clut_16():
    packed = [p for p, _ in PALETTE16]
    clut = ColorLookupTable.read(
        reader_for(clut_block(packed)), ImageType.INDEXED4)
    assert len(clut) == 16
    assert list(clut) == [rgba for _, rgba in PALETTE16]
    assert clut[3] == PALETTE16[3][1]

def test_clut_256():
    packed = [pack_rgb555(i % 32, i // 32, 0) for i in range(256)]
    clut = ColorLookupTable.read(
        reader_for(clut_block(packed)), ImageType.INDEXED8)
    assert len(clut) == 256
    assert clut[255] == (255, 57, 0, 255)

@parametrize(('image_type', 'entries'), [
    (ImageType.INDEXED4, 256),
    (ImageType.INDEXED8, 16),
    (ImageType.INDEXED4, 15),
])
def test_clut_size_mismatch(image_type, entries):
    reader = reader_for(clut_block([0] * entries))
    with pytest.raises(ClutSizeMismatch):
        ColorLookupTable.read(reader, image_type)

def test_clut_extra_palettes_skipped():
    first = [p for p, _ in PALETTE16]
    second = [0x7fff] * 16
    data = block(16, 3, first + second + second) + b'NEXT'
    reader = reader_for(data)
    clut = ColorLookupTable.read(reader, ImageType.INDEXED4)
    assert list(clut) == [rgba for _, rgba in PALETTE16]
    assert reader.position == 12 + 16 * 2 * 3
    assert reader.read_exact(4) == b'NEXT'

@parametrize('image_type', [ImageType.SIXTEEN_BIT, ImageType.TWENTY_FOUR_BIT, 6])
def test_clut_for_direct_color(image_type):
    reader = reader_for(clut_block([0] * 16))
    with pytest.raises(InvalidArgument):
        ColorLookupTable.read(reader, image_type)
    assert reader.position == 0

def test_clut_index_out_of_range():
    clut = ColorLookupTable([(0, 0, 0, 255)] * 16)
    with pytest.raises(IndexError):
        clut[16]
    with pytest.raises(IndexError):
        clut[-1]

def test_clut_truncated():
    reader = reader_for(clut_block([0] * 16)[:20])
    with pytest.raises(EOFError):
        ColorLookupTable.read(reader, ImageType.INDEXED4)
