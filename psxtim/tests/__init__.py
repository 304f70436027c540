
import io
import struct

# test support code
def pack_rgb555(r, g, b, transparent=False):
    """Pack 5-bit channels into a PSX 16-bit color"""
    return r | (g << 5) | (b << 10) | (0x8000 if transparent else 0)

def file_header(image_type, has_clut=False, signature=0x10):
    flags = image_type | (0x08 if has_clut else 0)
    return struct.pack('<LL', signature, flags)

def block(width, height, data, x=0, y=0, length=None):
    """A block header followed by its data.

    `data` is either raw bytes or a list of 16-bit words.
    """
    if not isinstance(data, (bytes, bytearray)):
        data = struct.pack('<{}H'.format(len(data)), *data)
    if length is None:
        length = 12 + len(data)
    return struct.pack('<LHHHH', length, x, y, width, height) + data

def clut_block(colors, rows=1):
    """A CLUT block holding `colors`, repeated for `rows` palettes"""
    return block(len(colors), rows, list(colors) * rows)

def tim_stream(*parts):
    return io.BytesIO(b''.join(parts))

# 16 distinct colors, as (packed, expected RGBA) pairs
def _expand(v):
    return (v << 3) | (v >> 2)

PALETTE16 = []
for i in range(16):
    r, g, b = i, 31 - i, i * 2 % 32
    PALETTE16.append(
        (pack_rgb555(r, g, b), (_expand(r), _expand(g), _expand(b), 255)))


class TrickleStream(io.BytesIO):
    """A stream that never returns more than a few bytes per read, like a
    pipe or a slow socket would.
    """
    def __init__(self, data, chunk=3):
        super().__init__(data)
        self.chunk = chunk
        self.reads = 0

    def read(self, n=-1):
        self.reads += 1
        if n < 0 or n > self.chunk:
            n = self.chunk
        return super().read(n)
