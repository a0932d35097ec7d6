"""
Sequential field reader over a forward-only byte stream.

Every primitive comes in two forms:
- read_*  (strict): raises ShortRead if the stream ends before the field
  is complete. Used for all header fields and for fields inside a record.
- probe_* (probing): returns None instead of raising. Used only at a
  payload record boundary to detect the normal end of the stream.
"""

import io
import struct
from typing import BinaryIO, Optional, Tuple

from .binary_format import FormatProfile, StringPolicy, TEXT_ENCODING, trim_text


class DecodeError(Exception):
    """Base exception for data file decoding failures."""
    pass


class ShortRead(DecodeError):
    """A mandatory field could not be read in full."""

    def __init__(self, field: str, offset: int, expected: int, received: int):
        self.field = field
        self.offset = offset
        self.expected = expected
        self.received = received
        super().__init__(
            f"Short read for '{field}' at byte {offset}: "
            f"expected {expected} bytes, got {received}"
        )


class FieldReader:
    """
    Decode primitives from a binary stream under a FormatProfile.

    The reader never seeks and never closes the stream; the caller owns it.

    Usage:
        reader = FieldReader(stream, BIG_TRIMMED)
        length = reader.read_u32('length')
        name = reader.read_text(16, 'device')
    """

    def __init__(self, stream: BinaryIO, profile: FormatProfile):
        self.stream = stream
        self.profile = profile
        self.offset = 0

        order = profile.byte_order.value
        self._u16 = struct.Struct(order + 'H')
        self._u32 = struct.Struct(order + 'I')
        self._f32 = struct.Struct(order + 'f')
        self._f64 = struct.Struct(order + 'd')

    def _take(self, size: int, field: str) -> bytes:
        """Read up to size bytes, tolerating short reads from pipes"""
        start = self.offset
        chunks = []
        remaining = size
        while remaining > 0:
            try:
                chunk = self.stream.read(remaining)
            except OSError as e:
                raise ShortRead(field, start, size, size - remaining) from e
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b''.join(chunks)
        self.offset += len(data)
        return data

    def _require(self, size: int, field: str) -> bytes:
        start = self.offset
        data = self._take(size, field)
        if len(data) < size:
            raise ShortRead(field, start, size, len(data))
        return data

    def _decode_text(self, data: bytes) -> str:
        if self.profile.string_policy is StringPolicy.TRIMMED:
            data = trim_text(data)
        return data.decode(TEXT_ENCODING)

    # Strict primitives

    def read_bytes(self, size: int, field: str = 'bytes') -> bytes:
        return self._require(size, field)

    def read_u16(self, field: str = 'u16') -> int:
        return self._u16.unpack(self._require(2, field))[0]

    def read_u32(self, field: str = 'u32') -> int:
        return self._u32.unpack(self._require(4, field))[0]

    def read_f32(self, field: str = 'f32') -> float:
        return self._f32.unpack(self._require(4, field))[0]

    def read_f64(self, field: str = 'f64') -> float:
        return self._f64.unpack(self._require(8, field))[0]

    def read_text(self, size: int, field: str = 'text') -> str:
        """
        Read a fixed-length text field.

        RAW policy keeps every byte (size characters, zeros included);
        TRIMMED policy drops trailing zero bytes.
        """
        return self._decode_text(self._require(size, field))

    def read_f32_array(self, count: int, field: str = 'f32_array') -> Tuple[float, ...]:
        """Read count consecutive 32-bit floats, in order"""
        data = self._require(4 * count, field)
        return tuple(struct.unpack(f'{self.profile.byte_order.value}{count}f', data))

    # Probing primitives

    def read_available(self, size: int) -> bytes:
        """Read up to size bytes; fewer only at the end of the stream"""
        return self._take(size, 'available')

    def probe_bytes(self, size: int) -> Optional[bytes]:
        """Read size bytes, or None if the stream holds fewer"""
        data = self._take(size, 'probe')
        if len(data) < size:
            return None
        return data

    def probe_u16(self) -> Optional[int]:
        data = self.probe_bytes(2)
        return None if data is None else self._u16.unpack(data)[0]

    def probe_u32(self) -> Optional[int]:
        data = self.probe_bytes(4)
        return None if data is None else self._u32.unpack(data)[0]

    def probe_f32(self) -> Optional[float]:
        data = self.probe_bytes(4)
        return None if data is None else self._f32.unpack(data)[0]

    def probe_f64(self) -> Optional[float]:
        data = self.probe_bytes(8)
        return None if data is None else self._f64.unpack(data)[0]

    def probe_record(self, size: int) -> Optional['FieldReader']:
        """
        Read one whole payload record.

        Returns a FieldReader over exactly size bytes with the same profile,
        or None when fewer than size bytes remain (a trailing partial record
        is dropped).
        """
        start = self.offset
        data = self.probe_bytes(size)
        if data is None:
            return None
        record = FieldReader(io.BytesIO(data), self.profile)
        record.offset = start
        return record
