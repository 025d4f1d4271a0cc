import struct
from typing import List, Optional

from sharkrom.dictionary import decode_name, encode_name
from sharkrom.errors import GameListOverflowError, RecordOverflowError, TruncatedRecordError
from sharkrom.layout import RomLayout
from sharkrom.model import Cheat, Code, Game
from sharkrom.scribe import ByteReader, ByteWriter, BytesLike

PAGE_SIZE = 256
MAX_CHEATS = 255
MAX_CODES = 127
ACTIVE_FLAG = 0x80
CODE_SIZE = 6
ERASED = 0xFF


def _read_name(reader: ByteReader) -> str:
    pos = reader.pos
    return decode_name(reader.read_cstring_bytes(), offset=pos)


def decode_game(reader: ByteReader) -> Game:
    game = Game(_read_name(reader))
    cheat_count = reader.read_u8()
    for _ in range(cheat_count):
        cheat = game.add_cheat(_read_name(reader))
        flags = reader.read_u8()
        cheat.is_active = bool(flags & ACTIVE_FLAG)
        for _ in range(flags & MAX_CODES):
            cheat.codes.append(Code.from_bytes(reader.read_bytes(CODE_SIZE)))
    return game


def decode_games(data: BytesLike, layout: RomLayout) -> List[Game]:
    reader = ByteReader(data, layout.game_list_addr)
    games = []
    start = reader.pos
    try:
        count = reader.read_s32()
        for _ in range(count):
            start = reader.pos
            games.append(decode_game(reader))
    except IndexError as e:
        raise TruncatedRecordError(f'Game record {len(games)} runs past the end of the ROM', offset=start) from e
    return games


def encode_game(game: Game, compress_names: bool) -> bytes:
    if len(game.cheats) > MAX_CHEATS:
        raise RecordOverflowError(f"Game '{game.name}' has {len(game.cheats)} cheats. The firmware supports at most {MAX_CHEATS}.")
    out = bytearray()
    out += encode_name(game.name) + b'\x00'
    out.append(len(game.cheats))
    for cheat in game.cheats:
        if len(cheat.codes) > MAX_CODES:
            raise RecordOverflowError(f"Cheat '{cheat.name}' in '{game.name}' has {len(cheat.codes)} codes. The firmware supports at most {MAX_CODES}.")
        out += encode_name(cheat.name, compress_names) + b'\x00'
        flags = len(cheat.codes)
        if cheat.is_active:
            flags |= ACTIVE_FLAG
        out.append(flags)
        for code in cheat.codes:
            out += code.to_bytes()
    return bytes(out)


def encode_games(buffer: bytearray, games: List[Game], layout: RomLayout, compress_names: bool) -> int:
    """Write the games list in place and return the end of the used region.

    The rest of the last page is zeroed, later pages are erased with 0xFF up to
    the layout's fill limit, and the selected game index is cleared.
    """
    body = bytearray(struct.pack('>i', len(games)))
    for game in games:
        body += encode_game(game, compress_names)
    body.append(0)
    limit = min(layout.game_list_limit, len(buffer))
    if layout.game_list_addr + len(body) > limit:
        raise GameListOverflowError(f'Games list needs 0x{len(body):X} bytes but only 0x{limit - layout.game_list_addr:X} are available at 0x{layout.game_list_addr:08X}.')
    writer = ByteWriter(buffer, layout.game_list_addr)
    writer.write_bytes(body)
    end = writer.pos
    page_end = -(-writer.pos // PAGE_SIZE) * PAGE_SIZE
    writer.fill(0, min(page_end, limit))
    writer.fill(ERASED, limit)
    reset_selected_game(buffer, layout)
    return end


def reset_selected_game(buffer: bytearray, layout: RomLayout) -> bool:
    if not layout.has_user_prefs:
        return False
    reader = ByteReader(buffer)
    if reader.u16_at(layout.user_prefs_addr) == 0xFFFF:
        return False
    ByteWriter(buffer, layout.selected_game_addr).write_u8(0)
    return True


def games_equal(a: List[Game], b: List[Game]) -> bool:
    return len(a) == len(b) and all(x.same_contents(y) for x, y in zip(a, b))


def find_game(games: List[Game], name: str) -> Optional[Game]:
    for game in games:
        if game.name == name:
            return game
    return None
