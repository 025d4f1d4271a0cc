import re
from typing import Iterable, List, Optional

from sharkrom.errors import ListSyntaxError
from sharkrom.model import Cheat, Game

SEPARATOR = ';------------------------------------'

NAME_RE = re.compile('^\\s*"(?P<name>[^"]*)"\\s*(?P<off>\\.off)?\\s*(?:;.*)?$')
CODE_RE = re.compile('^\\s*(?P<address>[0-9A-F]{8})\\s+(?P<value>[0-9A-F]{4})\\s*(?:;.*)?$', re.IGNORECASE)
END_RE = re.compile('^\\s*\\.end\\s*(?:;.*)?$')
SKIP_RE = re.compile('^\\s*(?:;.*)?$')

IN_LIST = 'in_list'
IN_GAME = 'in_game'
IN_CHEAT = 'in_cheat'


def read_list(lines: Iterable[str]) -> List[Game]:
    games: List[Game] = []
    game: Optional[Game] = None
    cheat: Optional[Cheat] = None
    state = IN_LIST
    for number, line in enumerate(lines, 1):
        line = line.rstrip('\r\n')
        if SKIP_RE.match(line):
            continue
        name = NAME_RE.match(line)
        if state == IN_LIST:
            if not name:
                raise ListSyntaxError(f'Expected a quoted game name, got {line.strip()!r}', number)
            game = Game(name.group('name'))
            games.append(game)
            state = IN_GAME
            continue
        if END_RE.match(line):
            state = IN_LIST
            continue
        if name:
            cheat = game.add_cheat(name.group('name'), is_active=name.group('off') is None)
            state = IN_CHEAT
            continue
        code = CODE_RE.match(line)
        if state == IN_CHEAT and code:
            cheat.add_code(int(code.group('address'), 16), int(code.group('value'), 16))
            continue
        raise ListSyntaxError(f'Unrecognized line {line.strip()!r}', number)
    if state != IN_LIST:
        raise ListSyntaxError(f"Game '{game.name}' is missing its .end line", number)
    return games


def read_list_text(text: str) -> List[Game]:
    return read_list(text.splitlines())


def write_list(games: List[Game]) -> str:
    out = [SEPARATOR, f';{len(games)} Games in list', SEPARATOR, '']
    for game in games:
        out.append(f'"{game.name}"')
        for cheat in game.cheats:
            out.append(f'"{cheat.name}"' if cheat.is_active else f'"{cheat.name}" .off')
            for code in cheat.codes:
                out.append(str(code))
        out.append('.end')
        out.append('')
    return '\n'.join(out)
