from sharkrom.checksum import Checksum, calculate_crc32, calculate_crc32c

CHECK = b'123456789'


def test_crc32_check_value():
    assert calculate_crc32(CHECK) == 0xCBF43926


def test_crc32c_check_value():
    assert calculate_crc32c(CHECK) == 0xE3069283


def test_empty():
    assert calculate_crc32c(b'') == 0
    assert calculate_crc32(b'') == 0


def test_checksum_of():
    checksum = Checksum.of(CHECK)
    assert checksum.crc32 == 'CBF43926'
    assert checksum.crc32c == 'E3069283'
    assert checksum.md5 == '25F9E794323B453885F5181F1B624D0B'
    assert checksum.sha1 == 'F7C3BC1D808E04732ADF679965CCC34CA7AE3441'
    assert 'CRC32C: E3069283' in str(checksum)
