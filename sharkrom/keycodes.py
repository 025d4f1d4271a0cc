import struct
import zlib
from typing import List, Optional, Tuple

from sharkrom.errors import TruncatedRecordError
from sharkrom.layout import RomLayout
from sharkrom.model import KeyCode
from sharkrom.scribe import ByteReader, ByteWriter, BytesLike

KEY_CODE_WINDOW = 0xA0
KEY_CODE_SENTINEL = b'Mario World 64 & Others'
KEY_CODE_NAME_LEN = 0x1F
MIN_KEY_CODE_LEN = 9
UNKNOWN_KEY_CODE_NAME = 'UNKNOWN'

# CIC-NUS-6102 chunks; images booted by other CIC chips need explicit ranges
DEFAULT_IPL3_RANGE = (0x40, 0x1000)
DEFAULT_PROGRAM_RANGE = (0x1000, None)


def read_active_prefix(data: BytesLike) -> bytes:
    return ByteReader(data).peek_bytes_at(RomLayout.ACTIVE_KEY_CODE_ADDR, 8)


def read_program_counter(data: BytesLike) -> bytes:
    return ByteReader(data).peek_bytes_at(RomLayout.PROGRAM_COUNTER_ADDR, 4)


def read_key_codes(data: BytesLike, layout: RomLayout) -> List[KeyCode]:
    reader = ByteReader(data)
    active_prefix = read_active_prefix(data)
    key_codes = []
    try:
        reader.seek(layout.key_code_list_addr)
        window = reader.peek_bytes(KEY_CODE_WINDOW)
        max_pos = reader.pos + len(window)
        entry_len = window.find(KEY_CODE_SENTINEL)
        if entry_len < MIN_KEY_CODE_LEN:
            return []
        while reader.pos <= max_pos and not reader.is_padding():
            raw = reader.read_bytes(entry_len)
            name = reader.read_printable_cstring(KEY_CODE_NAME_LEN)
            while not reader.end_reached and reader.peek_bytes(1) == b'\x00':
                reader.skip(1)
            key_codes.append(KeyCode(name, raw, raw[:8] == active_prefix))
    except IndexError as e:
        raise TruncatedRecordError(f'Key code {len(key_codes)} runs past the end of the ROM', offset=reader.pos) from e
    return key_codes


def active_key_code(data: BytesLike, key_codes: List[KeyCode]) -> KeyCode:
    crc_bytes = read_active_prefix(data)
    pc_bytes = read_program_counter(data)
    for key_code in key_codes:
        if key_code.checksum_bytes == crc_bytes:
            return KeyCode(key_code.name, crc_bytes + pc_bytes, True)
    return KeyCode(UNKNOWN_KEY_CODE_NAME, crc_bytes + pc_bytes, False)


def check_digit(data: BytesLike, key_code_bytes: bytes) -> int:
    reader = ByteReader(data, RomLayout.TIMESTAMP_ADDR)
    total = sum(reader.read_u32() for _ in range(4))
    words = len(key_code_bytes) // 4
    total += sum(struct.unpack(f'>{words}I', key_code_bytes[:words * 4]))
    return total & 0xFF


def _chunk(data: BytesLike, bounds: Tuple[int, Optional[int]]) -> bytes:
    start, end = bounds
    end = len(data) if end is None else end
    if not 0 <= start <= end <= len(data):
        raise ValueError(f'Invalid checksum range 0x{start:X}..0x{end:X} for a 0x{len(data):X} byte buffer')
    return bytes(data[start:end])


def compute_key_code(data: BytesLike, name: str, program_counter: bytes=b'', ipl3_range=DEFAULT_IPL3_RANGE, program_range=DEFAULT_PROGRAM_RANGE) -> KeyCode:
    if len(program_counter) not in (0, 4):
        raise ValueError(f'Program counter must be 4 bytes, got {len(program_counter)}')
    ipl3_crc = zlib.crc32(_chunk(data, ipl3_range)) & 0xFFFFFFFF
    program_crc = zlib.crc32(_chunk(data, program_range)) & 0xFFFFFFFF
    body = struct.pack('>II', ipl3_crc, program_crc) + bytes(program_counter)
    return KeyCode(name, body + bytes([check_digit(data, body)]))


def reset_active_key_code(buffer: bytearray, key_codes: List[KeyCode]) -> bool:
    if not key_codes:
        return False
    first = key_codes[0]
    if read_active_prefix(buffer) == first.checksum_bytes:
        return False
    ByteWriter(buffer, RomLayout.ACTIVE_KEY_CODE_ADDR).write_bytes(first.checksum_bytes)
    if first.program_counter_bytes:
        ByteWriter(buffer, RomLayout.PROGRAM_COUNTER_ADDR).write_bytes(first.program_counter_bytes)
    return True
