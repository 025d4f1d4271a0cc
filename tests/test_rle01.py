import struct

import pytest

from sharkrom.errors import AssetDecodeError
from sharkrom.rle01 import decompress_rle01, find_rle01_blocks

KEY = 0xAA


def block(body: bytes, trailing: bytes=b'') -> bytes:
    return b'RLE01' + bytes([KEY]) + struct.pack('>I', 10 + len(body)) + body + trailing


def test_literals_escapes_and_runs():
    src = block(b'AB' + bytes([KEY, 0]) + bytes([KEY, 4, 7]) + b'C', trailing=b'ignored')
    assert decompress_rle01(src) == b'AB\xaa\x07\x07\x07\x07C'


def test_empty_body():
    assert decompress_rle01(block(b'')) == b''


def test_truncated_block():
    src = bytearray(block(b'ABC'))
    struct.pack_into('>I', src, 6, 0x100)
    with pytest.raises(AssetDecodeError):
        decompress_rle01(bytes(src))


def test_escape_missing_count():
    with pytest.raises(AssetDecodeError):
        decompress_rle01(block(b'A' + bytes([KEY])))


def test_run_missing_value():
    with pytest.raises(AssetDecodeError):
        decompress_rle01(block(b'A' + bytes([KEY, 3])))


def test_header_too_short():
    with pytest.raises(AssetDecodeError):
        decompress_rle01(b'RLE01')


def test_find_blocks():
    data = b'xx' + block(b'A') + b'yy' + block(b'B')
    assert find_rle01_blocks(data) == [2, 2 + 11 + 2]
