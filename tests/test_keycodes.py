import struct
import zlib

import pytest

from conftest import KEY_CODES
from sharkrom.errors import TruncatedRecordError
from sharkrom.keycodes import UNKNOWN_KEY_CODE_NAME, active_key_code, check_digit, compute_key_code, read_key_codes, reset_active_key_code
from sharkrom.layout import RomLayout

OLD_LAYOUT = RomLayout.for_version(2.1)


def test_read_key_codes(rom_v210):
    key_codes = read_key_codes(rom_v210, OLD_LAYOUT)
    assert [k.name for k in key_codes] == [name for name, _ in KEY_CODES]
    assert [k.data for k in key_codes] == [data for _, data in KEY_CODES]
    assert [k.is_active for k in key_codes] == [True, False, False]
    assert key_codes[0].check_digit == 0xA7
    assert key_codes[0].ipl3_crc32 == 0xD6C2407B
    assert key_codes[0].program_crc32 == 0xE91E0B49


def test_read_key_codes_new_layout(rom_v330):
    key_codes = read_key_codes(rom_v330, RomLayout.for_version(3.3))
    assert len(key_codes) == 3


def test_no_sentinel_means_no_key_codes(make_rom):
    rom = make_rom(key_codes=[('Diddy Kong Racing', KEY_CODES[1][1])], active_index=None)
    assert read_key_codes(rom, OLD_LAYOUT) == []


def test_active_key_code(make_rom):
    rom = make_rom(active_index=2)
    rom[0x08:0x0C] = bytes.fromhex('80201000')
    key_codes = read_key_codes(rom, OLD_LAYOUT)
    active = active_key_code(rom, key_codes)
    assert active.name == "Yoshi's Story"
    assert active.is_active
    assert active.data == KEY_CODES[2][1][:8] + bytes.fromhex('80201000')
    assert active.program_counter_bytes == bytes.fromhex('80201000')


def test_unknown_active_key_code(make_rom):
    rom = make_rom(active_index=None)
    rom[0x10:0x18] = b'\x12' * 8
    active = active_key_code(rom, read_key_codes(rom, OLD_LAYOUT))
    assert active.name == UNKNOWN_KEY_CODE_NAME
    assert not active.is_active
    assert active.checksum_bytes == b'\x12' * 8


def test_check_digit():
    data = bytearray(0x40)
    assert check_digit(data, struct.pack('>II', 1, 2)) == 3
    data[0x33] = 0xFF
    assert check_digit(data, struct.pack('>II', 1, 2)) == 2
    assert check_digit(data, struct.pack('>III', 0x100, 0, 0x80000001)) == 0


def test_compute_key_code(rom_v210):
    key_code = compute_key_code(rom_v210, 'Custom', program_counter=bytes.fromhex('80201000'))
    assert key_code.name == 'Custom'
    assert len(key_code.data) == 13
    assert key_code.ipl3_crc32 == zlib.crc32(rom_v210[0x40:0x1000])
    assert key_code.program_crc32 == zlib.crc32(rom_v210[0x1000:])
    assert key_code.program_counter_bytes == bytes.fromhex('80201000')
    assert key_code.check_digit == check_digit(rom_v210, key_code.data[:12])


def test_compute_key_code_custom_ranges(rom_v210):
    key_code = compute_key_code(rom_v210, 'Short', ipl3_range=(0, 0x40), program_range=(0x40, 0x80))
    assert len(key_code.data) == 9
    assert key_code.ipl3_crc32 == zlib.crc32(rom_v210[:0x40])


def test_reset_active_key_code(make_rom):
    rom = make_rom(active_index=1)
    key_codes = read_key_codes(rom, OLD_LAYOUT)
    assert reset_active_key_code(rom, key_codes)
    assert rom[0x10:0x18] == KEY_CODES[0][1][:8]
    assert not reset_active_key_code(rom, key_codes)
    assert not reset_active_key_code(rom, [])


def test_read_key_codes_past_end_of_data():
    # one full entry, then filler that leaves a partial entry at the end
    entries = KEY_CODES[0][1] + b'Mario World 64 & Others\x00' + b'\x01' * 127
    data = bytes(0x20) + entries
    layout = RomLayout(game_list_addr=0, key_code_list_addr=0x20, user_prefs_addr=None, game_list_limit=len(data))
    with pytest.raises(TruncatedRecordError) as info:
        read_key_codes(data, layout)
    assert info.value.offset == len(data) - 7
