import struct
from dataclasses import dataclass, field
from typing import List, Optional

from sharkrom.lzari import decompress_lzari


@dataclass(frozen=True)
class Code:
    address: int
    value: int

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Code':
        address, value = struct.unpack('>IH', data[:6])
        return cls(address, value)

    def to_bytes(self) -> bytes:
        return struct.pack('>IH', self.address & 4294967295, self.value & 65535)

    def __str__(self):
        return f'{self.address:08X} {self.value:04X}'


@dataclass(eq=False)
class Cheat:
    name: str
    codes: List[Code] = field(default_factory=list)
    is_active: bool = True

    def add_code(self, address: int, value: int) -> Code:
        code = Code(address, value)
        self.codes.append(code)
        return code

    def __eq__(self, other):
        if not isinstance(other, Cheat):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(('cheat', self.name))

    def __str__(self):
        return self.name if self.is_active else f'{self.name} [off]'


@dataclass(eq=False)
class Game:
    name: str
    cheats: List[Cheat] = field(default_factory=list)

    def add_cheat(self, name: str, is_active: bool=True) -> Cheat:
        cheat = Cheat(name, is_active=is_active)
        self.cheats.append(cheat)
        return cheat

    def same_contents(self, other: 'Game') -> bool:
        if self.name != other.name or len(self.cheats) != len(other.cheats):
            return False
        for a, b in zip(self.cheats, other.cheats):
            if a.name != b.name or a.is_active != b.is_active or a.codes != b.codes:
                return False
        return True

    def __eq__(self, other):
        if not isinstance(other, Game):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(('game', self.name))

    def __str__(self):
        return f'{self.name} ({len(self.cheats)})'


@dataclass(frozen=True)
class KeyCode:
    name: str
    data: bytes
    is_active: bool = False

    @property
    def checksum_bytes(self) -> bytes:
        return self.data[:8]

    @property
    def program_counter_bytes(self) -> bytes:
        if len(self.data) >= 12:
            return self.data[8:12]
        return b''

    @property
    def ipl3_crc32(self) -> int:
        return struct.unpack('>I', self.data[0:4])[0]

    @property
    def program_crc32(self) -> int:
        return struct.unpack('>I', self.data[4:8])[0]

    @property
    def check_digit(self) -> Optional[int]:
        if len(self.data) in (9, 13):
            return self.data[-1]
        return None

    def __str__(self):
        active = ' [ACTIVE]' if self.is_active else ''
        return f"{self.data.hex(' ').upper()} - {self.name}{active}"


@dataclass(frozen=True)
class UserPrefs:
    magic: int
    sound: int
    background: int
    selected_game: int
    background_scroll: int
    menu_scroll: int

    @property
    def is_pristine(self) -> bool:
        return self.magic == 65535

    @property
    def has_selected_game(self) -> bool:
        return not self.is_pristine and self.selected_game != 0


@dataclass(frozen=True)
class EmbeddedFile:
    name: str
    compressed: bytes
    offset: int = 0

    @property
    def struct_size(self) -> int:
        return len(self.compressed) + 16

    def decompress(self) -> bytes:
        return decompress_lzari(self.compressed)

    def __str__(self):
        return f'{self.name} @ 0x{self.offset:08X} ({len(self.compressed)} bytes)'
