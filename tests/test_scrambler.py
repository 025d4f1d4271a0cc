import pytest

from sharkrom.scrambler import ADDRESS_LIMIT, PASSTHROUGH_MASK, scramble_address, scramble_rom, unscramble_address, unscramble_rom


def test_address_functions_are_inverse():
    for addr in range(ADDRESS_LIMIT):
        assert unscramble_address(scramble_address(addr)) == addr
        assert scramble_address(unscramble_address(addr)) == addr


def test_address_stays_in_range():
    seen = {scramble_address(addr) for addr in range(0x1000)}
    assert seen == set(range(0x1000))


def test_high_bits_pass_through():
    for addr in (0x01000, 0x0F123, 0x1FFFF):
        assert scramble_address(addr) & PASSTHROUGH_MASK == addr & PASSTHROUGH_MASK


def test_rom_involution(rom_v210):
    scrambled = scramble_rom(rom_v210)
    assert scrambled != rom_v210
    assert len(scrambled) == len(rom_v210)
    assert unscramble_rom(scrambled) == rom_v210
    assert scramble_rom(unscramble_rom(rom_v210)) == rom_v210


def test_rom_keeps_byte_pairs_together():
    data = bytes(b for i in range(0x1000) for b in (i >> 8, i & 0xFF))
    scrambled = scramble_rom(data)
    for i in range(0, len(scrambled), 2):
        src = unscramble_address(i // 2)
        assert scrambled[i:i + 2] == data[2 * src:2 * src + 2]


def test_odd_length_rejected():
    with pytest.raises(ValueError):
        scramble_rom(b'\x00\x01\x02')
