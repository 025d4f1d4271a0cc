import struct

import pytest

from sharkrom.errors import GameListOverflowError, InvalidNameError, RecordOverflowError, TruncatedRecordError
from sharkrom.gamelist import PAGE_SIZE, decode_games, encode_game, encode_games, find_game, games_equal, reset_selected_game
from sharkrom.layout import ROM_SIZE, RomLayout
from sharkrom.model import Code, Game

OLD_LAYOUT = RomLayout.for_version(2.1)
NEW_LAYOUT = RomLayout.for_version(3.3)


def sample_games():
    mario = Game('Super Mario 64')
    lives = mario.add_cheat('Infinite Lives')
    lives.add_code(0x8033B21D, 0x0064)
    stars = mario.add_cheat('Have Stars', is_active=False)
    stars.add_code(0x8033B218, 0x00FF)
    stars.add_code(0x8033B219, 0x0078)
    zelda = Game('Zelda')
    zelda.add_cheat('Max Rupees').add_code(0x8011A605, 0x01F4)
    return [mario, zelda]


def test_two_games_decode_in_file_order(rom_v210):
    games = decode_games(rom_v210, OLD_LAYOUT)
    assert [g.name for g in games] == ['Super Mario 64', 'Zelda']
    mario = games[0]
    assert [c.name for c in mario.cheats] == ['Infinite Lives', 'Have Stars']
    assert mario.cheats[0].is_active
    assert not mario.cheats[1].is_active
    assert mario.cheats[1].codes == [Code(0x8033B218, 0x00FF), Code(0x8033B219, 0x0078)]
    assert games_equal(games, sample_games())


def test_encode_game_compressed_and_full():
    mario = sample_games()[0]
    packed = encode_game(mario, compress_names=True)
    assert packed.startswith(b'Super Mario 64\x00\x02\xffLives\x00\x81')
    assert b'\xf7Stars\x00\x02' in packed
    full = encode_game(mario, compress_names=False)
    assert b'Infinite Lives\x00\x81' in full
    assert b'Have Stars\x00\x02' in full


def test_game_names_are_never_compressed():
    game = Game('Infinite Lives Game')
    assert encode_game(game, compress_names=True) == b'Infinite Lives Game\x00\x00'


def test_round_trip(rom_v330):
    buffer = bytearray(rom_v330)
    games = sample_games()
    games.append(Game('Empty'))
    encode_games(buffer, games, NEW_LAYOUT, compress_names=True)
    assert games_equal(decode_games(buffer, NEW_LAYOUT), games)


def test_fill_after_list(rom_v330):
    buffer = bytearray(rom_v330)
    end = encode_games(buffer, sample_games(), NEW_LAYOUT, compress_names=True)
    assert buffer[end - 1] == 0
    page_end = (end + PAGE_SIZE - 1) // PAGE_SIZE * PAGE_SIZE
    assert buffer[end:page_end] == bytes(page_end - end)
    assert buffer[page_end:ROM_SIZE] == b'\xff' * (ROM_SIZE - page_end)


def test_old_layout_stops_filling_at_limit(rom_v210):
    buffer = bytearray(rom_v210)
    buffer[0x3E000:] = b'\xab' * (ROM_SIZE - 0x3E000)
    encode_games(buffer, sample_games(), OLD_LAYOUT, compress_names=True)
    assert buffer[0x3DFFF] == 0xFF
    assert buffer[0x3E000:] == b'\xab' * (ROM_SIZE - 0x3E000)


def test_selected_game_reset(rom_v330):
    buffer = bytearray(rom_v330)
    assert buffer[NEW_LAYOUT.selected_game_addr] == 2
    encode_games(buffer, sample_games(), NEW_LAYOUT, compress_names=True)
    assert buffer[NEW_LAYOUT.selected_game_addr] == 0


def test_pristine_prefs_left_alone(make_rom):
    buffer = make_rom(timestamp='09:54 Mar 27', prefs_magic=0xFFFF)
    assert not reset_selected_game(buffer, NEW_LAYOUT)
    assert buffer[NEW_LAYOUT.selected_game_addr] == 2
    assert not reset_selected_game(buffer, OLD_LAYOUT)


def test_list_overflow(rom_v210):
    games = []
    for i in range(90):
        game = Game(f'Game {i}')
        cheat = game.add_cheat('Everything')
        for n in range(127):
            cheat.add_code(0x80000000 + n, n)
        games.append(game)
    buffer = bytearray(rom_v210)
    with pytest.raises(GameListOverflowError):
        encode_games(buffer, games, OLD_LAYOUT, compress_names=True)
    assert buffer == bytearray(rom_v210)


def test_too_many_cheats():
    game = Game('Crowded')
    for i in range(256):
        game.add_cheat(f'Cheat {i}')
    with pytest.raises(RecordOverflowError):
        encode_game(game, compress_names=False)


def test_too_many_codes():
    game = Game('Crowded')
    cheat = game.add_cheat('Lots')
    for i in range(128):
        cheat.add_code(0x80000000, i)
    with pytest.raises(RecordOverflowError):
        encode_game(game, compress_names=False)


def test_invalid_name_on_decode(rom_v210):
    buffer = bytearray(rom_v210)
    record = struct.pack('>i', 1) + b'A' * 31 + b'\x00\x00'
    buffer[0x2E000:0x2E000 + len(record)] = record
    with pytest.raises(InvalidNameError) as info:
        decode_games(buffer, OLD_LAYOUT)
    assert info.value.offset == 0x2E004


def test_find_game():
    games = sample_games()
    assert find_game(games, 'Zelda') is games[1]
    assert find_game(games, 'Mario Kart 64') is None


def test_decode_unterminated_name_at_end_of_rom():
    data = bytearray(ROM_SIZE)
    struct.pack_into('>i', data, NEW_LAYOUT.game_list_addr, 1)
    data[NEW_LAYOUT.game_list_addr + 4:] = b'A' * (ROM_SIZE - NEW_LAYOUT.game_list_addr - 4)
    with pytest.raises(TruncatedRecordError) as info:
        decode_games(data, NEW_LAYOUT)
    assert info.value.offset == NEW_LAYOUT.game_list_addr + 4


def test_decode_truncated_code_record():
    body = struct.pack('>i', 1) + b'Z\x00\x01C\x00\x03' + b'\x80\x00\x00\x01\x00\x01\x80'
    data = bytes(ROM_SIZE - len(body)) + body
    layout = RomLayout(game_list_addr=ROM_SIZE - len(body), key_code_list_addr=OLD_LAYOUT.key_code_list_addr, user_prefs_addr=None, game_list_limit=ROM_SIZE)
    with pytest.raises(TruncatedRecordError, match='Game record 0'):
        decode_games(data, layout)
