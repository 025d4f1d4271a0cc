import struct
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def _check(length: int, pos: int, count: int):
    if pos < 0 or pos + count > length:
        raise IndexError(f'Invalid position: {pos + count} (0x{pos + count:08X}). Must be between 0 and {length} (0x{length:08X}).')


class ByteReader:

    def __init__(self, data: BytesLike, pos: int=0, big_endian: bool=True):
        self._data = bytes(data)
        self._prefix = '>' if big_endian else '<'
        self.pos = pos

    @property
    def data(self) -> bytes:
        return self._data

    def __len__(self):
        return len(self._data)

    @property
    def end_reached(self) -> bool:
        return self.pos >= len(self._data)

    def seek(self, pos: int) -> 'ByteReader':
        _check(len(self._data), pos, 0)
        self.pos = pos
        return self

    def skip(self, count: int) -> 'ByteReader':
        return self.seek(self.pos + count)

    def peek_bytes(self, count: int) -> bytes:
        _check(len(self._data), self.pos, count)
        return self._data[self.pos:self.pos + count]

    def peek_bytes_at(self, addr: int, count: int) -> bytes:
        _check(len(self._data), addr, count)
        return self._data[addr:addr + count]

    def read_bytes(self, count: int) -> bytes:
        b = self.peek_bytes(count)
        self.pos += count
        return b

    def _unpack(self, fmt: str, size: int) -> int:
        _check(len(self._data), self.pos, size)
        value = struct.unpack_from(self._prefix + fmt, self._data, self.pos)[0]
        self.pos += size
        return value

    def read_u8(self) -> int:
        return self._unpack('B', 1)

    def read_u16(self) -> int:
        return self._unpack('H', 2)

    def read_s16(self) -> int:
        return self._unpack('h', 2)

    def read_u32(self) -> int:
        return self._unpack('I', 4)

    def read_s32(self) -> int:
        return self._unpack('i', 4)

    def u16_at(self, addr: int) -> int:
        _check(len(self._data), addr, 2)
        return struct.unpack_from(self._prefix + 'H', self._data, addr)[0]

    def u32_at(self, addr: int) -> int:
        _check(len(self._data), addr, 4)
        return struct.unpack_from(self._prefix + 'I', self._data, addr)[0]

    def read_cstring_bytes(self, max_len: int=0) -> bytes:
        out = bytearray()
        while True:
            b = self.read_u8()
            if b == 0:
                break
            out.append(b)
            if max_len and len(out) >= max_len:
                break
        return bytes(out)

    def read_printable_cstring(self, max_len: int=0) -> str:
        out = []
        while not self.end_reached:
            b = self.read_u8()
            if b < 32 or b > 126:
                break
            out.append(chr(b))
            if max_len and len(out) >= max_len:
                break
        return ''.join(out)

    def is_padding(self, addr: int=None) -> bool:
        addr = self.pos if addr is None else addr
        if addr + 8 > len(self._data):
            return False
        chunk = self._data[addr:addr + 8]
        return chunk in (b'\x00' * 8, b'\xff' * 8)

    def find(self, needle: BytesLike, start: int=0, end: int=None) -> int:
        return self._data.find(bytes(needle), start, len(self._data) if end is None else end)


class ByteWriter:

    def __init__(self, buffer: bytearray, pos: int=0, big_endian: bool=True):
        if not isinstance(buffer, bytearray):
            raise TypeError('ByteWriter requires a bytearray it can own')
        self._buf = buffer
        self._prefix = '>' if big_endian else '<'
        self.pos = pos

    @property
    def buffer(self) -> bytearray:
        return self._buf

    def __len__(self):
        return len(self._buf)

    @property
    def end_reached(self) -> bool:
        return self.pos >= len(self._buf)

    def seek(self, pos: int) -> 'ByteWriter':
        _check(len(self._buf), pos, 0)
        self.pos = pos
        return self

    def write_bytes(self, data: BytesLike) -> 'ByteWriter':
        _check(len(self._buf), self.pos, len(data))
        self._buf[self.pos:self.pos + len(data)] = data
        self.pos += len(data)
        return self

    def _pack(self, fmt: str, size: int, value: int) -> 'ByteWriter':
        _check(len(self._buf), self.pos, size)
        struct.pack_into(self._prefix + fmt, self._buf, self.pos, value)
        self.pos += size
        return self

    def write_u8(self, value: int) -> 'ByteWriter':
        return self._pack('B', 1, value & 255)

    def write_u16(self, value: int) -> 'ByteWriter':
        return self._pack('H', 2, value & 65535)

    def write_u32(self, value: int) -> 'ByteWriter':
        return self._pack('I', 4, value & 4294967295)

    def write_s32(self, value: int) -> 'ByteWriter':
        return self._pack('i', 4, value)

    def write_cstring(self, data: BytesLike) -> 'ByteWriter':
        self.write_bytes(data)
        return self.write_u8(0)

    def fill(self, value: int, end: int) -> 'ByteWriter':
        end = min(end, len(self._buf))
        if end > self.pos:
            self._buf[self.pos:end] = bytes([value]) * (end - self.pos)
            self.pos = end
        return self
