import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from sharkrom.errors import RomError
from sharkrom.fileio import read_all_bytes, read_all_text, write_all_bytes, write_all_text
from sharkrom.gamelist import find_game
from sharkrom.logo import extract_startup_logo
from sharkrom.mpknote import write_note
from sharkrom.romcodec import ROM_FORMATS, RomCodec, RomModel
from sharkrom.textlist import read_list_text, write_list

Result = Tuple[bool, str]


def _print_warnings(model: RomModel):
    for warning in model.warnings:
        print(f'Warning: {warning}')


def cmd_info(args) -> Result:
    codec = RomCodec()
    model = codec.read(read_all_bytes(args.rom))
    print(f'[Info] {Path(args.rom).name}')
    for line in model.summary_lines():
        print(f'  {line}')
    if args.games:
        for game in model.games:
            print(f'  {game}')
            for cheat in game.cheats:
                print(f'    {cheat}')
    return (True, f'{len(model.games)} games read')


def _transform(args, fn: Callable[[bytes], bytes], label: str) -> Result:
    data = read_all_bytes(args.input)
    out = fn(data)
    write_all_bytes(args.output, out)
    print(f'[{label}] {Path(args.input).name} -> {Path(args.output).name} ({len(out):,} bytes)')
    return (True, f'Wrote {args.output}')


def cmd_encrypt(args) -> Result:
    return _transform(args, RomCodec().encrypt, 'Encrypt')


def cmd_decrypt(args) -> Result:
    return _transform(args, RomCodec().decrypt, 'Decrypt')


def cmd_scramble(args) -> Result:
    return _transform(args, RomCodec().scramble, 'Scramble')


def cmd_unscramble(args) -> Result:
    return _transform(args, RomCodec().unscramble, 'Unscramble')


def cmd_export_list(args) -> Result:
    model = RomCodec().read(read_all_bytes(args.rom))
    _print_warnings(model)
    write_all_text(args.output, write_list(model.games))
    print(f'[ExportList] {len(model.games)} games written to {args.output}')
    return (True, f'Wrote {args.output}')


def cmd_import_list(args) -> Result:
    codec = RomCodec()
    model = codec.read(read_all_bytes(args.rom))
    model.games = read_list_text(read_all_text(args.list))
    print(f'[ImportList] {len(model.games)} games parsed from {Path(args.list).name}')
    out = codec.write(model, rom_format=args.format, reset_prefs=args.reset, reset_key_code=args.reset, compress_names=args.compress)
    _print_warnings(model)
    write_all_bytes(args.output, out)
    print(f'[ImportList] ROM written to {args.output}')
    return (True, f'Wrote {args.output}')


def cmd_export_note(args) -> Result:
    model = RomCodec().read(read_all_bytes(args.rom))
    game = find_game(model.games, args.game)
    if game is None:
        return (False, f"No game named '{args.game}' in {Path(args.rom).name}")
    write_all_bytes(args.output, write_note(game))
    print(f"[ExportNote] '{game.name}' ({len(game.cheats)} cheats) written to {args.output}")
    return (True, f'Wrote {args.output}')


def cmd_extract_assets(args) -> Result:
    model = RomCodec().read(read_all_bytes(args.rom))
    if not model.embedded_files:
        return (False, 'This ROM has no embedded compressed files')
    out_dir = Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)
    for f in model.embedded_files:
        data = f.decompress()
        write_all_bytes(out_dir / f.name, data)
        print(f'[ExtractAssets] {f.name}: {len(f.compressed):,} -> {len(data):,} bytes')
    logo = extract_startup_logo(model.embedded_files)
    if logo is not None:
        logo.save(out_dir / 'startup_logo.png')
        print('[ExtractAssets] startup_logo.png rendered')
    return (True, f'{len(model.embedded_files)} files extracted to {out_dir}')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='sharkrom', description='Read, convert and rewrite N64 GameShark / Action Replay firmware ROMs.')
    sub = parser.add_subparsers(dest='command', required=True)
    p = sub.add_parser('info', help='show version, key codes and the games list summary')
    p.add_argument('rom')
    p.add_argument('--games', action='store_true', help='also list every game and cheat')
    p.set_defaults(func=cmd_info)
    for name, func, help_text in (('encrypt', cmd_encrypt, 'encrypt a ROM for the N64 Utils flasher'), ('decrypt', cmd_decrypt, 'write the plain ROM'), ('scramble', cmd_scramble, 'scramble a ROM for the Xplorer chip writer'), ('unscramble', cmd_unscramble, 'write the plain ROM')):
        p = sub.add_parser(name, help=help_text)
        p.add_argument('input')
        p.add_argument('output')
        p.set_defaults(func=func)
    p = sub.add_parser('export-list', help='write the games list as a text cheat list')
    p.add_argument('rom')
    p.add_argument('output')
    p.set_defaults(func=cmd_export_list)
    p = sub.add_parser('import-list', help='replace the games list from a text cheat list')
    p.add_argument('rom')
    p.add_argument('list')
    p.add_argument('output')
    p.add_argument('--format', choices=ROM_FORMATS, default=None, help='output format (default: same as input)')
    p.add_argument('--reset', action='store_true', help='reset user preferences and the active key code')
    p.add_argument('--compress', dest='compress', action='store_true', default=None, help='force abbreviated cheat names')
    p.add_argument('--no-compress', dest='compress', action='store_false', help='force full cheat names')
    p.set_defaults(func=cmd_import_list)
    p = sub.add_parser('export-note', help='write one game as a controller pak note')
    p.add_argument('rom')
    p.add_argument('game')
    p.add_argument('output')
    p.set_defaults(func=cmd_export_note)
    p = sub.add_parser('extract-assets', help='decompress embedded files and render the startup logo')
    p.add_argument('rom')
    p.add_argument('output')
    p.set_defaults(func=cmd_extract_assets)
    return parser


def main(argv: Optional[List[str]]=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        ok, msg = args.func(args)
    except (RomError, OSError) as e:
        print(f'ERROR: {e}')
        return 1
    if not ok:
        print(f'ERROR: {msg}')
        return 1
    print(msg)
    return 0


if __name__ == '__main__':
    sys.exit(main())
