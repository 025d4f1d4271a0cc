from sharkrom.romcodec import RomCodec, RomModel, Codec, CODECS, find_codec
from sharkrom.layout import RomLayout, ValidationResult, validate
from sharkrom.version import RomVersion, resolve_version
from sharkrom.model import Code, Cheat, Game, KeyCode, UserPrefs, EmbeddedFile
from sharkrom.checksum import Checksum
from sharkrom.crypter import encrypt, decrypt
from sharkrom.scrambler import scramble_rom, unscramble_rom, scramble_address, unscramble_address
from sharkrom.lzari import compress_lzari, decompress_lzari
from sharkrom.rle01 import decompress_rle01
from sharkrom.textlist import read_list, write_list
from sharkrom.mpknote import read_note, write_note
from sharkrom.errors import RomError
__all__ = ['RomCodec', 'RomModel', 'Codec', 'CODECS', 'find_codec', 'RomLayout', 'ValidationResult', 'validate', 'RomVersion', 'resolve_version', 'Code', 'Cheat', 'Game', 'KeyCode', 'UserPrefs', 'EmbeddedFile', 'Checksum', 'encrypt', 'decrypt', 'scramble_rom', 'unscramble_rom', 'scramble_address', 'unscramble_address', 'compress_lzari', 'decompress_lzari', 'decompress_rle01', 'read_list', 'write_list', 'read_note', 'write_note', 'RomError']
