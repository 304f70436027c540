"""Base or helper classes used a lot for dealing with file formats.
"""
import io
import struct

from psxtim.errors import InvalidArgument, UnexpectedEndOfInput

MAX_BUFFER_SIZE = 4096
# Large enough for the widest fixed-size field, a u64
MIN_BUFFER_SIZE = 8


class BufferedBinaryReader:
    """Wraps a seekable stream and reads little-endian fields from it through
    a small buffer.

    Partly implements the file interface.

    Small fixed-width reads are served from the buffer, so parsing a header
    doesn't cost a read call per field.  Big reads, like a block of pixel
    data, go straight to the stream once the buffer is drained.

    The stream is closed along with the reader, unless ``leave_open`` is set.
    """
    def __init__(self, stream, *, leave_open=False):
        self.stream = stream
        self.leave_open = leave_open

        size = min(self._stream_length(), MAX_BUFFER_SIZE)
        self.buffer = bytearray(max(size, MIN_BUFFER_SIZE))
        # Unconsumed data is buffer[read_offset:read_length]
        self.read_offset = 0
        self.read_length = 0

    def __repr__(self):
        return "<{} of {} at {}>".format(
            type(self).__name__, self.stream, self.position)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def closed(self):
        return self.stream is None

    def close(self):
        if self.stream is not None:
            if not self.leave_open:
                self.stream.close()
            self.stream = None
        self.buffer = None

    def _check_open(self):
        if self.stream is None:
            raise ValueError("I/O operation on a closed reader")

    def _stream_length(self):
        pos = self.stream.tell()
        self.stream.seek(0, io.SEEK_END)
        length = self.stream.tell()
        self.stream.seek(pos)
        return length

    @property
    def length(self):
        self._check_open()
        return self._stream_length()

    def __len__(self):
        return self.length

    @property
    def position(self):
        self._check_open()
        return self.stream.tell() - self.read_length + self.read_offset

    @position.setter
    def position(self, value):
        if value < 0:
            raise InvalidArgument(
                "position must not be negative, got {}".format(value))

        current = self.position
        if value == current:
            return

        new_offset = self.read_offset + (value - current)
        if 0 <= new_offset <= self.read_length:
            # Still inside what we've buffered; no need to touch the stream
            self.read_offset = new_offset
        else:
            self.read_offset = 0
            self.read_length = 0
            self.stream.seek(value)

    def tell(self):
        return self.position

    def seek(self, offset, whence=0):
        if whence == 1:
            offset += self.position
        elif whence == 2:
            offset += self.length
        self.position = offset
        return self.position

    def skip(self, n):
        if n < 0:
            raise InvalidArgument(
                "can't skip a negative number of bytes ({})".format(n))
        self.position += n

    def read_exact(self, n):
        """Read exactly ``n`` bytes, or raise `UnexpectedEndOfInput`."""
        if n < 0:
            raise InvalidArgument(
                "can't read a negative number of bytes ({})".format(n))
        self._check_open()
        if n == 0:
            return b''

        if self.read_offset + n <= self.read_length:
            data = bytes(self.buffer[self.read_offset:self.read_offset + n])
            self.read_offset += n
            return data

        # Hand over whatever's left in the buffer, then read the rest directly
        # into the result
        result = bytearray(n)
        unread = self.read_length - self.read_offset
        if unread > 0:
            result[:unread] = self.buffer[self.read_offset:self.read_length]
        self.read_offset = 0
        self.read_length = 0

        got = unread
        view = memoryview(result)
        while got < n:
            chunk = self.stream.read(n - got)
            if not chunk:
                raise UnexpectedEndOfInput(
                    "wanted {} bytes, but the stream ended after {}"
                    .format(n, got))
            view[got:got + len(chunk)] = chunk
            got += len(chunk)

        return bytes(result)

    def _fill_buffer(self, min_bytes):
        unread = self.read_length - self.read_offset
        if unread > 0:
            self.buffer[:unread] = self.buffer[self.read_offset:self.read_length]

        filled = unread
        while filled < min_bytes:
            chunk = self.stream.read(len(self.buffer) - filled)
            if not chunk:
                # Keep what we had, so the position stays accurate
                self.read_offset = 0
                self.read_length = filled
                raise UnexpectedEndOfInput(
                    "wanted {} bytes, but the stream ended after {}"
                    .format(min_bytes, filled))
            self.buffer[filled:filled + len(chunk)] = chunk
            filled += len(chunk)

        self.read_offset = 0
        self.read_length = filled

    def _unpack(self, fmt):
        self._check_open()
        size = struct.calcsize(fmt)
        if self.read_offset + size > self.read_length:
            self._fill_buffer(size)
        value, = struct.unpack_from(fmt, self.buffer, self.read_offset)
        self.read_offset += size
        return value

    def read_u8(self):
        return self._unpack('<B')

    def read_u16(self):
        return self._unpack('<H')

    def read_u32(self):
        return self._unpack('<L')

    def read_u64(self):
        return self._unpack('<Q')

    def read_i8(self):
        return self._unpack('<b')

    def read_i16(self):
        return self._unpack('<h')

    def read_i32(self):
        return self._unpack('<l')

    def read_i64(self):
        return self._unpack('<q')

    def read_f32(self):
        return self._unpack('<f')

    def read_f64(self):
        return self._unpack('<d')

    def unpack(self, fmt):
        """Unpacks a struct format from the current position in the stream."""
        data = self.read_exact(struct.calcsize(fmt))
        return struct.unpack(fmt, data)

    def parse(self, struct_):
        """Parses a fixed-size construct struct from the current position."""
        return struct_.parse(self.read_exact(struct_.sizeof()))
