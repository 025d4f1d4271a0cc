from typing import List, Optional

from sharkrom.errors import AssetDecodeError
from sharkrom.model import EmbeddedFile
from sharkrom.scribe import ByteReader, BytesLike

SHELL_FILE_NAME = 'shell.bin'
FSBLOB_END = 0x2F000
FILE_NAME_LEN = 12
FILE_HEADER_LEN = 16


def find_fsblob(data: BytesLike) -> Optional[int]:
    data = bytes(data)
    needle = SHELL_FILE_NAME.encode('ascii')
    first = data.find(needle)
    if first == -1:
        return None
    # the first hit is the firmware's lookup string, the second is the file record
    second = data.find(needle, first + 1)
    if second == -1:
        return None
    return second - 4


def is_firmware_compressed(data: BytesLike) -> bool:
    return find_fsblob(data) is not None


def read_embedded_files(data: BytesLike) -> List[EmbeddedFile]:
    start = find_fsblob(data)
    if start is None:
        return []
    reader = ByteReader(data, start)
    files = []
    while reader.pos < FSBLOB_END and not reader.is_padding():
        offset = reader.pos
        try:
            struct_len = reader.read_u32()
            raw_name = reader.read_bytes(FILE_NAME_LEN)
        except IndexError as e:
            raise AssetDecodeError(f'Embedded file header at 0x{offset:08X} runs past the end of the ROM') from e
        if struct_len < FILE_HEADER_LEN:
            raise AssetDecodeError(f'Embedded file at 0x{offset:08X} declares an invalid length: 0x{struct_len:X}')
        name = ByteReader(raw_name).read_printable_cstring(FILE_NAME_LEN).strip()
        try:
            compressed = reader.read_bytes(struct_len - FILE_HEADER_LEN)
        except IndexError as e:
            raise AssetDecodeError(f"Embedded file '{name}' at 0x{offset:08X} runs past the end of the ROM") from e
        files.append(EmbeddedFile(name, compressed, offset))
    return files


def find_file(files: List[EmbeddedFile], name: str) -> Optional[EmbeddedFile]:
    for f in files:
        if f.name == name:
            return f
    return None


def read_shell(data: BytesLike) -> Optional[bytes]:
    shell = find_file(read_embedded_files(data), SHELL_FILE_NAME)
    if shell is None:
        return None
    return shell.decompress()
