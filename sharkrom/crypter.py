import struct
from typing import Callable

from sharkrom.scribe import BytesLike

ENCRYPT = 'encrypt'
DECRYPT = 'decrypt'

SEEDS = (0x1471332e, 0x8149432e, 0x75697b21, 0x15597883, 0x1c2ad435, 0x13ade834, 0xe2de18b1, 0x51bc7835, 0x158732d4, 0x68d77612, 0x55424441, 0xd1f3fe22, 0xaeed7894, 0x34685312, 0xa3266563, 0x452cc12e)

# primary magic 80 37 12 40 after encryption
ENCRYPTED_MAGIC = bytes([0xAE, 0x59, 0x63, 0x54])


def seed_at(pos: int) -> int:
    return SEEDS[(pos >> 2) & 15]


def encrypt_word(value: int, seed: int) -> int:
    return ((value + (seed & 0xFF00)) ^ seed) & 0xFFFFFFFF


def decrypt_word(value: int, seed: int) -> int:
    return ((value ^ seed) - (seed & 0xFF00)) & 0xFFFFFFFF


def _for_each_word(data: BytesLike, formula: Callable[[int, int], int]) -> bytes:
    if len(data) % 4:
        raise ValueError(f'Buffer length must be a multiple of 4, got {len(data)}')
    count = len(data) // 4
    words = struct.unpack(f'<{count}I', data)
    out = [formula(value, SEEDS[i & 15]) for i, value in enumerate(words)]
    return struct.pack(f'<{count}I', *out)


def encrypt(data: BytesLike) -> bytes:
    return _for_each_word(data, encrypt_word)


def decrypt(data: BytesLike) -> bytes:
    return _for_each_word(data, decrypt_word)


def transform(data: BytesLike, direction: str) -> bytes:
    if direction == ENCRYPT:
        return encrypt(data)
    if direction == DECRYPT:
        return decrypt(data)
    raise ValueError(f'Unknown cipher direction: {direction}')


def is_encrypted(data: BytesLike) -> bool:
    return bytes(data[:7]).find(ENCRYPTED_MAGIC) != -1
