from dataclasses import dataclass
from typing import Optional


class RomError(ValueError):
    pass


class SizeMismatchError(RomError):

    def __init__(self, size: int, expected: int):
        super().__init__(f'Invalid ROM file size: 0x{size:08X}. Expected exactly 0x{expected:08X} bytes.')
        self.size = size
        self.expected = expected


class MagicNumberError(RomError):

    def __init__(self, magic: int):
        super().__init__(f'Invalid ROM magic number: 0x{magic:08X}.')
        self.magic = magic


class TimestampParseError(RomError):

    def __init__(self, raw: str):
        super().__init__(f"Invalid ROM build timestamp: '{raw}' (len = {len(raw)}). Expected HH:mm MMM dd [yy].")
        self.raw = raw


class UserPrefsMagicError(RomError):

    def __init__(self, magic: int):
        super().__init__(f'Invalid magic number for user settings block: 0x{magic:04X}. Expected 0x4754 or 0xFFFF.')
        self.magic = magic


class InvalidNameError(RomError):

    def __init__(self, message: str, name: str='', offset: Optional[int]=None):
        if offset is not None:
            message = f'{message} (at offset 0x{offset:08X})'
        super().__init__(message)
        self.name = name
        self.offset = offset


class RecordOverflowError(RomError):
    pass


class GameListOverflowError(RomError):
    pass


class TruncatedRecordError(RomError):

    def __init__(self, message: str, offset: Optional[int]=None):
        if offset is not None:
            message = f'{message} (at offset 0x{offset:08X})'
        super().__init__(message)
        self.offset = offset


class InvalidNoteLengthError(RomError):
    pass


class NoteFormatError(RomError):
    pass


class ListSyntaxError(RomError):

    def __init__(self, message: str, line_number: int):
        super().__init__(f'{message} (line {line_number})')
        self.line_number = line_number


class AssetDecodeError(RomError):
    pass


@dataclass(frozen=True)
class RomWarning:
    message: str

    def __str__(self):
        return self.message


@dataclass(frozen=True)
class HeaderMismatchWarning(RomWarning):
    header: str = ''


@dataclass(frozen=True)
class UnverifiedVersionWarning(RomWarning):
    raw_timestamp: str = ''


@dataclass(frozen=True)
class CompressionUndecidedWarning(RomWarning):
    pass
