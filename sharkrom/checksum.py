import hashlib
import zlib
from dataclasses import dataclass

from sharkrom.scribe import BytesLike

CRC32C_POLY = 0x82F63B78


def _make_crc32c_table():
    table = []
    for n in range(256):
        crc = n
        for _ in range(8):
            crc = crc >> 1 ^ CRC32C_POLY if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


CRC32C_TABLE = _make_crc32c_table()


def calculate_crc32(data: BytesLike) -> int:
    return zlib.crc32(bytes(data)) & 0xFFFFFFFF


def calculate_crc32c(data: BytesLike) -> int:
    crc = 0xFFFFFFFF
    for byte in bytes(data):
        crc = crc >> 8 ^ CRC32C_TABLE[(crc ^ byte) & 255]
    return crc ^ 0xFFFFFFFF


@dataclass(frozen=True)
class Checksum:
    crc32: str
    crc32c: str
    md5: str
    sha1: str

    @classmethod
    def of(cls, data: BytesLike) -> 'Checksum':
        data = bytes(data)
        return cls(crc32=f'{calculate_crc32(data):08X}', crc32c=f'{calculate_crc32c(data):08X}', md5=hashlib.md5(data).hexdigest().upper(), sha1=hashlib.sha1(data).hexdigest().upper())

    def __str__(self):
        return f'CRC32: {self.crc32}, CRC32C: {self.crc32c}, MD5: {self.md5}, SHA1: {self.sha1}'
