from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from sharkrom.errors import AssetDecodeError, HeaderMismatchWarning, MagicNumberError, RomWarning, SizeMismatchError, TimestampParseError, UnverifiedVersionWarning, UserPrefsMagicError
from sharkrom.fsblob import read_shell
from sharkrom.scribe import ByteReader, BytesLike
from sharkrom.version import RomVersion, resolve_version

ROM_SIZE = 0x40000

SUB_FORMAT_PRIMARY = 'primary'
SUB_FORMAT_ALTERNATE = 'alternate'
SUB_FORMAT_TRAINER = 'trainer'

MAGIC_NUMBERS = {0x80371240: SUB_FORMAT_PRIMARY, 0x80371200: SUB_FORMAT_ALTERNATE}

HEADER_PREFIXES = ('(C) DATEL D&D', '(C) MUSHROOM &', 'Perfect Train', '(C) Jhynjhiruu')
TRAINER_HEADER_PREFIX = 'Perfect Train'

TITLE_NEEDLES = ('N64 GameShark Version ', 'GameShark Pro Version ', 'N64 Action Replay Version ', 'Action Replay Pro Version ', 'N64 Equalizer Version ', 'N64 Game Buster Version ', 'LibreShark Version ', 'LibreShark Pro Version ')
TITLE_SEARCH_END = 0x30000

USER_PREFS_MAGICS = (0x4754, 0xFFFF)
USER_PREFS_VERSION = 2.5


@dataclass(frozen=True)
class RomLayout:
    game_list_addr: int
    key_code_list_addr: int
    user_prefs_addr: Optional[int]
    game_list_limit: int

    MAGIC_ADDR: ClassVar[int] = 0x00
    PROGRAM_COUNTER_ADDR: ClassVar[int] = 0x08
    ACTIVE_KEY_CODE_ADDR: ClassVar[int] = 0x10
    HEADER_ADDR: ClassVar[int] = 0x20
    HEADER_LEN: ClassVar[int] = 16
    TIMESTAMP_ADDR: ClassVar[int] = 0x30
    TIMESTAMP_LEN: ClassVar[int] = 15

    @property
    def has_user_prefs(self) -> bool:
        return self.user_prefs_addr is not None

    @property
    def selected_game_addr(self) -> Optional[int]:
        if self.user_prefs_addr is None:
            return None
        return self.user_prefs_addr + 5

    @classmethod
    def for_version(cls, number: float) -> 'RomLayout':
        if number >= USER_PREFS_VERSION:
            return cls(game_list_addr=0x30000, key_code_list_addr=0x2FC00, user_prefs_addr=0x2FB00, game_list_limit=ROM_SIZE)
        return cls(game_list_addr=0x2E000, key_code_list_addr=0x2D800, user_prefs_addr=None, game_list_limit=0x3E000)


@dataclass
class ValidationResult:
    version: RomVersion
    layout: RomLayout
    sub_format: str
    header_id: str
    warnings: List[RomWarning] = field(default_factory=list)


def check_size(data: BytesLike):
    if len(data) != ROM_SIZE:
        raise SizeMismatchError(len(data), ROM_SIZE)


def read_magic(data: BytesLike) -> int:
    return ByteReader(data).u32_at(RomLayout.MAGIC_ADDR)


def is_valid_magic(magic: int) -> bool:
    return magic in MAGIC_NUMBERS


def read_header_id(reader: ByteReader) -> str:
    raw = reader.peek_bytes_at(RomLayout.HEADER_ADDR, RomLayout.HEADER_LEN)
    return raw.split(b'\x00', 1)[0].decode('latin-1')


def read_raw_timestamp(reader: ByteReader) -> str:
    return reader.seek(RomLayout.TIMESTAMP_ADDR).read_printable_cstring(RomLayout.TIMESTAMP_LEN)


def _search_title(reader: ByteReader, end: int) -> Optional[str]:
    for needle in TITLE_NEEDLES:
        pos = reader.find(needle.encode('ascii'), 0, end)
        if pos == -1:
            continue
        return reader.seek(pos).read_printable_cstring(len(needle) + 5).strip()
    return None


def find_title(reader: ByteReader) -> Optional[str]:
    title = _search_title(reader, min(TITLE_SEARCH_END, len(reader)))
    if title is not None:
        return title
    # compressed firmware keeps the main menu inside the embedded shell
    try:
        shell = read_shell(reader.data)
    except (AssetDecodeError, IndexError):
        return None
    if shell is None:
        return None
    shell_reader = ByteReader(shell)
    return _search_title(shell_reader, len(shell_reader))


def validate(data: BytesLike) -> ValidationResult:
    check_size(data)
    reader = ByteReader(data)
    magic = reader.u32_at(RomLayout.MAGIC_ADDR)
    if not is_valid_magic(magic):
        raise MagicNumberError(magic)
    sub_format = MAGIC_NUMBERS[magic]
    warnings: List[RomWarning] = []
    header_id = read_header_id(reader)
    if not header_id.startswith(HEADER_PREFIXES):
        warnings.append(HeaderMismatchWarning(f"Unexpected ROM header: '{header_id}'", header=header_id))
    elif header_id.startswith(TRAINER_HEADER_PREFIX):
        sub_format = SUB_FORMAT_TRAINER
    raw_timestamp = read_raw_timestamp(reader)
    version = resolve_version(raw_timestamp, find_title(reader))
    if version is None:
        raise TimestampParseError(raw_timestamp)
    if not version.is_known:
        warnings.append(UnverifiedVersionWarning(f"Unknown ROM build timestamp '{raw_timestamp}'. This ROM is not in our database.", raw_timestamp=raw_timestamp))
    layout = RomLayout.for_version(version.number)
    if layout.has_user_prefs:
        prefs_magic = reader.u16_at(layout.user_prefs_addr)
        if prefs_magic not in USER_PREFS_MAGICS:
            raise UserPrefsMagicError(prefs_magic)
    return ValidationResult(version=version, layout=layout, sub_format=sub_format, header_id=header_id, warnings=warnings)
