import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from sharkrom.errors import InvalidNameError

MIN_NAME_LEN = 1
MAX_NAME_LEN = 30

VALID_NAME_CHARS = frozenset("!$%^&*()[]{}0123456789,.ABCDEFGHIJKLMNOPQRSTUVWXYZ=#/<>;-+: abcdefghijklmnopqrstuvwxyz?'")

# Order matters: compression replaces phrases one after another in this order.
DICTIONARY: Tuple[Tuple[int, str], ...] = (
    (0xF6, 'Key'),
    (0xF7, 'Have '),
    (0xF8, 'Lives'),
    (0xF9, 'Energy'),
    (0xFA, 'Health'),
    (0xFB, 'Activate '),
    (0xFC, 'Unlimited '),
    (0xFD, 'Player '),
    (0xFE, 'Always '),
    (0xFF, 'Infinite '),
)
PHRASES = dict(DICTIONARY)

COMPRESSION_MIN_VERSION = 1.04

HEX_TOKEN_RE = re.compile('`([0-9A-Fa-f]{2})`')


@dataclass(frozen=True)
class Literal:
    byte: int

    def __str__(self):
        return chr(self.byte)


@dataclass(frozen=True)
class Escape:
    byte: int

    def __str__(self):
        return f'`{self.byte:02X}`'


Token = Union[Literal, Escape]


def tokenize(raw: bytes) -> List[Token]:
    tokens = []
    for b in raw:
        if b < 0x20 or b > 0x7E:
            tokens.append(Escape(b))
        else:
            tokens.append(Literal(b))
    return tokens


def expand(tokens: List[Token], use_dictionary: bool=True) -> str:
    out = []
    for token in tokens:
        if isinstance(token, Escape) and use_dictionary and token.byte in PHRASES:
            out.append(PHRASES[token.byte])
        else:
            out.append(str(token))
    return ''.join(out)


def decode_name(raw: bytes, offset: Optional[int]=None) -> str:
    if not MIN_NAME_LEN <= len(raw) <= MAX_NAME_LEN:
        shown = expand(tokenize(raw), use_dictionary=False)
        raise InvalidNameError(f'Game and cheat names must be {MIN_NAME_LEN}-{MAX_NAME_LEN} bytes long, got {len(raw)}', name=shown, offset=offset)
    return expand(tokenize(raw))


def _name_to_bytes(name: str) -> bytes:
    out = bytearray()
    pos = 0
    while pos < len(name):
        match = HEX_TOKEN_RE.match(name, pos)
        if match:
            out.append(int(match.group(1), 16))
            pos = match.end()
        else:
            out.append(ord(name[pos]))
            pos += 1
    return bytes(out)


def validate_name(name: str, compress_name: bool=False) -> bytes:
    """Check a name against the firmware charset and length limits.

    The length is measured on the bytes that end up in the ROM, so with
    compression on, dictionary phrases count as one byte each.
    """
    plain = HEX_TOKEN_RE.sub('', name)
    for c in plain:
        if c not in VALID_NAME_CHARS:
            raise InvalidNameError(f"The character '{c}' is not allowed in game or cheat names", name=name)
    encoded = compress(name) if compress_name else _name_to_bytes(name)
    length = len(encoded)
    if length < MIN_NAME_LEN:
        raise InvalidNameError('Name cannot be blank', name=name)
    if length > MAX_NAME_LEN:
        raise InvalidNameError(f'The name {name!r} is too long ({length} > {MAX_NAME_LEN})', name=name)
    return encoded


def compress(name: str) -> bytes:
    for byte, phrase in DICTIONARY:
        name = name.replace(phrase, f'`{byte:02X}`')
    return _name_to_bytes(name)


def encode_name(name: str, compress_name: bool=False) -> bytes:
    return validate_name(name, compress_name)


def supports_compression(version) -> Optional[bool]:
    if version is None or not version.is_known:
        return None
    return version.number >= COMPRESSION_MIN_VERSION
