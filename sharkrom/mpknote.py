import struct

from sharkrom.errors import InvalidNoteLengthError, NoteFormatError
from sharkrom.gamelist import decode_game, encode_game
from sharkrom.model import Game
from sharkrom.scribe import ByteReader, BytesLike

MPK_VERSION = 0x01
MPK_MAGIC = b'MPKNote'
NOTE_MAGIC = 0x4E363400  # "N64\0"
HEADER_SIZE = 16
COMMENT_BLOCK = 16
COMMENT_COUNT_OFFSET = 15
NOTE_ENTRY_SIZE = 32
NOTE_PAGE = 256

# game code, publisher code, start page, status, reserved, data sum, extension
NOTE_ENTRY = struct.pack('>IHHBBHI', 0x3BADD1E5, 0xFADE, 0xCAFE, 0x03, 0x00, 0x0000, 0)
# "GAME-SAVEDAT" in the controller pak character set
NOTE_FILE_NAME = bytes([0x20, 0x1A, 0x26, 0x1E, 0x3B, 0x2C, 0x1A, 0x2F, 0x1E, 0x1D, 0x1A, 0x2D, 0x00, 0x00, 0x00, 0x00])


def write_note(game: Game) -> bytes:
    out = bytearray()
    out.append(MPK_VERSION)
    out += MPK_MAGIC + b'\x00'
    out += struct.pack('>HI', 0, 0)
    out.append(0)
    comment = game.name.encode('ascii')
    if comment:
        comment += b'\x00' * (-len(comment) % COMMENT_BLOCK)
        out += comment
        out[COMMENT_COUNT_OFFSET] = len(comment) // COMMENT_BLOCK
    out += NOTE_ENTRY + NOTE_FILE_NAME
    body = encode_game(game, compress_names=True)
    out += struct.pack('>Ii', NOTE_MAGIC, len(body))
    out += body
    out += b'\x00' * (-len(out) % NOTE_PAGE)
    return bytes(out)


def read_note(data: BytesLike) -> Game:
    reader = ByteReader(data)
    try:
        if reader.read_u8() != MPK_VERSION or reader.read_cstring_bytes() != MPK_MAGIC:
            raise NoteFormatError('Not an MPK note')
        reader.skip(2 + 4)
        comment_len = reader.read_u8() * COMMENT_BLOCK
        reader.skip(comment_len + NOTE_ENTRY_SIZE)
        if reader.read_u32() != NOTE_MAGIC:
            raise NoteFormatError('Invalid note header')
        length = reader.read_s32()
    except IndexError as e:
        raise NoteFormatError(f'MPK note is truncated: {e}') from e
    start = reader.pos
    try:
        game = decode_game(reader)
    except IndexError as e:
        raise InvalidNoteLengthError(f'Note declares {length} bytes but its game record runs past the end of the file') from e
    if reader.pos - start != length:
        raise InvalidNoteLengthError(f'Invalid note length: header declares {length} bytes, game record uses {reader.pos - start}')
    return game
