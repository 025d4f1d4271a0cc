import struct

import pytest

from sharkrom.layout import ROM_SIZE, RomLayout

PRIMARY_MAGIC = 0x80371240
DATEL_HEADER = b'(C) DATEL D&D 98'

# (name, 8 CRC bytes + check digit)
KEY_CODES = [
    ('Mario World 64 & Others', bytes.fromhex('D6C2407BE91E0B49A7')),
    ('Diddy Kong Racing', bytes.fromhex('0DD4ABABB5A2A91EA1')),
    ("Yoshi's Story", bytes.fromhex('BBA5B2C1A4C86C8ABB')),
]

SUPER_MARIO = (b'Super Mario 64', [(b'\xffLives', True, [(0x8033B21D, 0x0064)]), (b'\xf7Stars', False, [(0x8033B218, 0x00FF), (0x8033B219, 0x0078)])])
ZELDA = (b'Zelda', [(b'Max Rupees', True, [(0x8011A605, 0x01F4)])])


def pack_game(name: bytes, cheats) -> bytes:
    out = bytearray(name + b'\x00')
    out.append(len(cheats))
    for cheat_name, active, codes in cheats:
        out += cheat_name + b'\x00'
        out.append(len(codes) | (0x80 if active else 0))
        for address, value in codes:
            out += struct.pack('>IH', address, value)
    return bytes(out)


def pack_key_codes(entries) -> bytes:
    out = bytearray()
    for name, data in entries:
        out += data + name.encode('ascii') + b'\x00'
    return bytes(out)


def build_rom(timestamp: str='13:57 Aug 25 98', magic: int=PRIMARY_MAGIC, header: bytes=DATEL_HEADER, games=(SUPER_MARIO, ZELDA), key_codes=KEY_CODES, active_index=0, prefs_magic: int=0x4754, selected_game: int=2, extra=()) -> bytearray:
    buf = bytearray(ROM_SIZE)
    struct.pack_into('>I', buf, 0, magic)
    buf[0x20:0x20 + len(header[:16])] = header[:16]
    raw = timestamp.encode('ascii')
    buf[0x30:0x30 + len(raw)] = raw
    number = 2.5 if timestamp in ('12:58 May 4', '09:54 Mar 27') else 0
    layout = RomLayout.for_version(number)
    if key_codes:
        if active_index is not None:
            active = key_codes[active_index][1]
            buf[0x10:0x18] = active[:8]
        packed = pack_key_codes(key_codes)
        start = layout.key_code_list_addr
        buf[start:start + len(packed)] = packed
        end = start + len(packed)
        buf[end:end + 0x100] = b'\xff' * 0x100
    if layout.has_user_prefs:
        struct.pack_into('>H', buf, layout.user_prefs_addr, prefs_magic)
        buf[layout.user_prefs_addr + 2] = 1
        buf[layout.user_prefs_addr + 4] = 2
        buf[layout.user_prefs_addr + 5] = selected_game
    body = struct.pack('>i', len(games)) + b''.join(pack_game(n, c) for n, c in games)
    start = layout.game_list_addr
    buf[start:start + len(body)] = body
    for addr, data in extra:
        buf[addr:addr + len(data)] = data
    return buf


@pytest.fixture
def rom_v210() -> bytes:
    return bytes(build_rom())


@pytest.fixture
def rom_v330() -> bytes:
    return bytes(build_rom(timestamp='09:54 Mar 27'))


@pytest.fixture
def make_rom():
    return build_rom
