from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


def read_all_bytes(path: PathLike) -> bytes:
    return Path(path).read_bytes()


def write_all_bytes(path: PathLike, data: bytes):
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(bytes(data))


def read_all_text(path: PathLike) -> str:
    return Path(path).read_text(encoding='utf-8')


def write_all_text(path: PathLike, text: str):
    write_all_bytes(path, text.encode('utf-8'))
