from typing import Callable

from sharkrom.scribe import BytesLike

# bits above the permuted low 12 pass through untouched
PASSTHROUGH_MASK = 0x1F000
ADDRESS_LIMIT = 0x20000


def unscramble_address(addr: int) -> int:
    return (addr >> 4 & 0x001 | addr >> 8 & 0x002 | ~addr >> 9 & 0x004 | addr >> 3 & 0x008 |
            addr >> 6 & 0x010 | addr >> 2 & 0x020 | ~addr << 5 & 0x0C0 | ~addr << 8 & 0x100 |
            ~addr << 6 & 0x200 | ~addr << 2 & 0x400 | addr << 6 & 0x800 | addr & PASSTHROUGH_MASK)


def scramble_address(addr: int) -> int:
    return (~addr >> 8 & 0x001 | ~addr >> 5 & 0x006 | ~addr >> 6 & 0x008 | addr << 4 & 0x010 |
            addr >> 6 & 0x020 | addr << 3 & 0x040 | addr << 2 & 0x080 | ~addr >> 2 & 0x100 |
            addr << 8 & 0x200 | addr << 6 & 0x400 | ~addr << 9 & 0x800 | addr & PASSTHROUGH_MASK)


def _remap(data: BytesLike, address_fn: Callable[[int], int]) -> bytes:
    if len(data) % 2:
        raise ValueError(f'Buffer length must be even, got {len(data)}')
    if len(data) // 2 > ADDRESS_LIMIT:
        raise ValueError(f'Buffer too large to scramble: 0x{len(data):X} bytes')
    data = bytes(data)
    high = data[0::2]
    low = data[1::2]
    out = bytearray(len(data))
    for i in range(len(high)):
        src = address_fn(i)
        out[2 * i] = high[src]
        out[2 * i + 1] = low[src]
    return bytes(out)


def scramble_rom(data: BytesLike) -> bytes:
    return _remap(data, unscramble_address)


def unscramble_rom(data: BytesLike) -> bytes:
    return _remap(data, scramble_address)
