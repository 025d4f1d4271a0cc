from typing import List, Optional, Tuple

from PIL import Image

from sharkrom.errors import AssetDecodeError
from sharkrom.fsblob import find_file
from sharkrom.model import EmbeddedFile

LOGO_WIDTH = 320
LOGO_HEIGHT = 224
LOGO_POS_X = 24
LOGO_POS_Y = 40
LOGO_PIXELS = (LOGO_WIDTH - 2 * LOGO_POS_X) * (LOGO_HEIGHT - 2 * LOGO_POS_Y)

LOGO_FILE_PAIRS = (('gslogo3.pal', 'gslogo3.bin'), ('arlogo3.pal', 'arlogo3.bin'))


def rgb5_to_rgb8(channel: int) -> int:
    return channel * 255 // 31


def decode_palette(palette_bytes: bytes, transparent_color: Optional[Tuple[int, int, int]]=None) -> List[Tuple[int, int, int, int]]:
    colors = []
    for i in range(0, len(palette_bytes) - 2, 3):
        rgb = (rgb5_to_rgb8(palette_bytes[i]), rgb5_to_rgb8(palette_bytes[i + 1]), rgb5_to_rgb8(palette_bytes[i + 2]))
        alpha = 0 if transparent_color is not None and rgb == tuple(transparent_color) else 255
        colors.append(rgb + (alpha,))
    return colors


def render_startup_logo(palette_bytes: bytes, image_bytes: bytes, transparent_color: Optional[Tuple[int, int, int]]=None) -> Image.Image:
    palette = decode_palette(palette_bytes, transparent_color)
    if len(image_bytes) < LOGO_PIXELS:
        raise AssetDecodeError(f'Startup logo needs {LOGO_PIXELS} pixels, got {len(image_bytes)}')
    img = Image.new('RGBA', (LOGO_WIDTH, LOGO_HEIGHT), (0, 0, 0, 0))
    pixels = img.load()
    pos = 0
    for y in range(LOGO_POS_Y + 1, LOGO_HEIGHT - LOGO_POS_Y + 1):
        for x in range(LOGO_POS_X, LOGO_WIDTH - LOGO_POS_X):
            index = image_bytes[pos]
            if index >= len(palette):
                raise AssetDecodeError(f'Startup logo pixel {pos} uses color {index} but the palette has {len(palette)} entries')
            pixels[x, y] = palette[index]
            pos += 1
    return img


def extract_startup_logo(files: List[EmbeddedFile], transparent_color: Optional[Tuple[int, int, int]]=None) -> Optional[Image.Image]:
    for palette_name, image_name in LOGO_FILE_PAIRS:
        palette_file = find_file(files, palette_name)
        image_file = find_file(files, image_name)
        if palette_file is None or image_file is None:
            continue
        return render_startup_logo(palette_file.decompress(), image_file.decompress(), transparent_color)
    return None
