import struct
from typing import List

from sharkrom.errors import AssetDecodeError

RLE01_MAGIC = b'RLE01'
HEADER_SIZE = 10


def decompress_rle01(src: bytes) -> bytes:
    """Expand an RLE01 block.

    Bytes 0-4 hold the preamble, byte 5 the escape key and bytes 6-9 the
    big-endian offset at which the compressed body ends.
    """
    if len(src) < HEADER_SIZE:
        raise AssetDecodeError(f'RLE01 block too short: {len(src)} bytes')
    key = src[5]
    size = struct.unpack_from('>I', src, 6)[0]
    if size > len(src):
        raise AssetDecodeError(f'RLE01 block truncated: header declares 0x{size:X} bytes, got 0x{len(src):X}')
    out = bytearray()
    i = HEADER_SIZE
    while i < size:
        b = src[i]
        if b != key:
            out.append(b)
            i += 1
            continue
        if i + 1 >= len(src):
            raise AssetDecodeError(f'RLE01 escape at 0x{i:X} is missing its count')
        count = src[i + 1]
        if count == 0:
            out.append(key)
            i += 2
            continue
        if i + 2 >= len(src):
            raise AssetDecodeError(f'RLE01 run at 0x{i:X} is missing its value')
        out += bytes([src[i + 2]]) * count
        i += 3
    return bytes(out)


def find_rle01_blocks(data: bytes) -> List[int]:
    found = []
    pos = data.find(RLE01_MAGIC)
    while pos != -1:
        found.append(pos)
        pos = data.find(RLE01_MAGIC, pos + 1)
    return found
