"""Color conversions for the PlayStation's pixel formats.

Every decoder here produces RGBA tuples.  The PSX keeps a semi-transparency
flag in the top bit of a 15-bit color, but what it means depends on GPU state
we don't have, so it's ignored and everything comes out opaque.  (ImageMagick
and tim2bmp do the same.)
"""
import attr

OPAQUE = 255

COLOR_FORMATS = {}


@attr.s
class ColorFormat:
    name = attr.ib()
    decoder = attr.ib()

    def __call__(self, data, **kwargs):
        return self.decoder(data, **kwargs)


def _register_color_decoder(name):
    def register(f):
        COLOR_FORMATS[name] = ColorFormat(name, f)
        return f
    return register


def expand_5_to_8(value):
    """Widen a 5-bit channel to 8 bits, copying the top bits into the bottom
    so that 0x1f becomes 0xff rather than 0xf8.
    """
    return (value << 3) | (value >> 2)


def unpack_psx_rgb555(datum):
    """Convert one packed 16-bit PSX color to an RGBA tuple.

    The layout is ``tbbbbbgggggrrrrr``: red in the low bits, and the
    transparency flag on top.
    """
    r = expand_5_to_8(datum & 0x1f)
    g = expand_5_to_8((datum >> 5) & 0x1f)
    b = expand_5_to_8((datum >> 10) & 0x1f)
    return r, g, b, OPAQUE


@_register_color_decoder('RGB555')
def decode_psx_rgb555(data, *, start=0, count=None):
    if count is None:
        end = len(data)
    else:
        end = start + count * 2

    for i in range(start, end, 2):
        yield unpack_psx_rgb555(data[i] | (data[i + 1] << 8))


@_register_color_decoder('RGB888')
def decode_rgb888(data, *, start=0, count=None):
    # Stored as plain bytes, red first
    if count is None:
        end = len(data) - len(data) % 3
    else:
        end = start + count * 3

    for i in range(start, end, 3):
        yield data[i], data[i + 1], data[i + 2], OPAQUE


del _register_color_decoder
