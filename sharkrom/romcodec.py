import struct
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sharkrom.checksum import Checksum
from sharkrom.crypter import decrypt, decrypt_word, encrypt, is_encrypted, seed_at
from sharkrom.dictionary import supports_compression
from sharkrom.errors import CompressionUndecidedWarning, MagicNumberError, RomError, RomWarning
from sharkrom.fsblob import read_embedded_files
from sharkrom.gamelist import decode_games, encode_games
from sharkrom.keycodes import active_key_code, read_key_codes, reset_active_key_code
from sharkrom.layout import RomLayout, check_size, is_valid_magic, read_magic, validate
from sharkrom.model import EmbeddedFile, Game, KeyCode, UserPrefs
from sharkrom.scrambler import scramble_rom, unscramble_rom
from sharkrom.scribe import ByteReader, ByteWriter, BytesLike
from sharkrom.version import RomVersion

FORMAT_PLAIN = 'plain'
FORMAT_ENCRYPTED = 'encrypted'
FORMAT_SCRAMBLED = 'scrambled'
ROM_FORMATS = (FORMAT_PLAIN, FORMAT_ENCRYPTED, FORMAT_SCRAMBLED)

USER_PREFS_LEN = 0x70


@dataclass
class RomModel:
    version: RomVersion
    layout: RomLayout
    rom_format: str
    sub_format: str
    header_id: str
    games: List[Game]
    key_codes: List[KeyCode]
    active_key_code: KeyCode
    user_prefs: Optional[UserPrefs]
    embedded_files: List[EmbeddedFile]
    checksum: Checksum
    warnings: List[RomWarning] = field(default_factory=list)
    buffer: bytes = b''

    @property
    def cheat_count(self) -> int:
        return sum(len(g.cheats) for g in self.games)

    @property
    def code_count(self) -> int:
        return sum(len(c.codes) for g in self.games for c in g.cheats)

    def summary_lines(self) -> List[str]:
        lines = [f'Version    : {self.version}', f'Format     : {self.rom_format} ({self.sub_format})', f"Header     : '{self.header_id}'"]
        if self.version.title:
            lines.append(f"Title      : '{self.version.title}'")
        lines.append(f'Games list : 0x{self.layout.game_list_addr:08X}  {len(self.games)} games, {self.cheat_count} cheats, {self.code_count} codes')
        lines.append(f'Key codes  : 0x{self.layout.key_code_list_addr:08X}  {len(self.key_codes)} entries')
        for key_code in self.key_codes:
            lines.append(f'  {key_code}')
        lines.append(f'Active key : {self.active_key_code}')
        if self.user_prefs is not None:
            prefs = self.user_prefs
            state = 'pristine' if prefs.is_pristine else f'sound={prefs.sound} background={prefs.background} selected_game={prefs.selected_game} bg_scroll={prefs.background_scroll} menu_scroll={prefs.menu_scroll}'
            lines.append(f'User prefs : 0x{self.layout.user_prefs_addr:08X}  {state}')
        if self.embedded_files:
            lines.append(f'Embedded   : {len(self.embedded_files)} files')
            for f in self.embedded_files:
                lines.append(f'  {f}')
        lines.append(f'Checksums  : {self.checksum}')
        for warning in self.warnings:
            lines.append(f'Warning: {warning}')
        return lines


class Codec:
    """Base for firmware image codecs.

    Subclasses recognise a raw image with is_match(), turn it into a model
    with read() and serialise a model back to image bytes with write().
    find_codec() picks the first registered codec that matches.
    """
    name = 'unknown'

    def is_match(self, data: BytesLike) -> bool:
        raise NotImplementedError

    def read(self, data: BytesLike):
        raise NotImplementedError

    def write(self, model) -> bytes:
        raise NotImplementedError


def read_user_prefs(data: BytesLike, layout: RomLayout) -> Optional[UserPrefs]:
    if not layout.has_user_prefs:
        return None
    reader = ByteReader(data)
    base = layout.user_prefs_addr
    return UserPrefs(magic=reader.u16_at(base), sound=reader.peek_bytes_at(base + 2, 1)[0], background=reader.peek_bytes_at(base + 4, 1)[0], selected_game=reader.peek_bytes_at(base + 5, 1)[0], background_scroll=reader.peek_bytes_at(base + 7, 1)[0], menu_scroll=reader.peek_bytes_at(base + 0x6C, 1)[0])


def reset_user_prefs(buffer: bytearray, layout: RomLayout) -> bool:
    if not layout.has_user_prefs:
        return False
    ByteWriter(buffer, layout.user_prefs_addr).fill(0xFF, layout.user_prefs_addr + USER_PREFS_LEN)
    return True


class RomCodec(Codec):
    name = 'n64_gameshark'

    def detect_format(self, data: BytesLike) -> str:
        check_size(data)
        magic = read_magic(data)
        if is_valid_magic(magic):
            return FORMAT_PLAIN
        first_word = struct.unpack_from('<I', data, 0)[0]
        decrypted = struct.unpack('>I', struct.pack('<I', decrypt_word(first_word, seed_at(0))))[0]
        if is_encrypted(data) or is_valid_magic(decrypted):
            return FORMAT_ENCRYPTED
        if is_valid_magic(read_magic(unscramble_rom(data))):
            return FORMAT_SCRAMBLED
        raise MagicNumberError(magic)

    def normalize(self, data: BytesLike) -> Tuple[bytes, str]:
        rom_format = self.detect_format(data)
        if rom_format == FORMAT_ENCRYPTED:
            return (decrypt(data), rom_format)
        if rom_format == FORMAT_SCRAMBLED:
            return (unscramble_rom(data), rom_format)
        return (bytes(data), rom_format)

    def is_match(self, data: BytesLike) -> bool:
        try:
            self.detect_format(data)
        except RomError:
            return False
        return True

    def read(self, data: BytesLike) -> RomModel:
        plain, rom_format = self.normalize(data)
        result = validate(plain)
        layout = result.layout
        games = decode_games(plain, layout)
        key_codes = read_key_codes(plain, layout)
        return RomModel(version=result.version, layout=layout, rom_format=rom_format, sub_format=result.sub_format, header_id=result.header_id, games=games, key_codes=key_codes, active_key_code=active_key_code(plain, key_codes), user_prefs=read_user_prefs(plain, layout), embedded_files=read_embedded_files(plain), checksum=Checksum.of(data), warnings=list(result.warnings), buffer=plain)

    def write(self, model: RomModel, rom_format: Optional[str]=None, reset_prefs: bool=False, reset_key_code: bool=False, compress_names: Optional[bool]=None) -> bytes:
        rom_format = rom_format or model.rom_format
        if rom_format not in ROM_FORMATS:
            raise ValueError(f'Unknown ROM format: {rom_format}')
        if compress_names is None:
            compress_names = supports_compression(model.version)
            if compress_names is None:
                compress_names = False
                model.warnings.append(CompressionUndecidedWarning(f"Cannot tell whether unverified build '{model.version.raw_timestamp}' understands abbreviated cheat names. Writing them in full."))
        buffer = bytearray(model.buffer)
        encode_games(buffer, model.games, model.layout, compress_names)
        if reset_key_code:
            reset_active_key_code(buffer, model.key_codes)
        if reset_prefs:
            reset_user_prefs(buffer, model.layout)
        return self.encode_format(bytes(buffer), rom_format)

    def encode_format(self, plain: bytes, rom_format: str) -> bytes:
        if rom_format == FORMAT_ENCRYPTED:
            return encrypt(plain)
        if rom_format == FORMAT_SCRAMBLED:
            return scramble_rom(plain)
        return plain

    def encrypt(self, data: BytesLike) -> bytes:
        plain, _ = self.normalize(data)
        return encrypt(plain)

    def decrypt(self, data: BytesLike) -> bytes:
        plain, _ = self.normalize(data)
        return plain

    def scramble(self, data: BytesLike) -> bytes:
        plain, _ = self.normalize(data)
        return scramble_rom(plain)

    def unscramble(self, data: BytesLike) -> bytes:
        plain, _ = self.normalize(data)
        return plain


CODECS: List[Codec] = [RomCodec()]


def find_codec(data: BytesLike) -> Optional[Codec]:
    for codec in CODECS:
        if codec.is_match(data):
            return codec
    return None
