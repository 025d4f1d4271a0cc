import pytest

from sharkrom.errors import ListSyntaxError
from sharkrom.gamelist import games_equal
from sharkrom.model import Game
from sharkrom.textlist import read_list, read_list_text, write_list

LIST = '''\
;------------------------------------
;2 Games in list
;------------------------------------

"Super Mario 64"
"Infinite Lives"
8033B21D 0064
"Have Stars" .off
8033B218 00FF
8033B219 0078
.end

"Zelda"
"Max Rupees"
8011A605 01F4
.end
'''


def sample_games():
    mario = Game('Super Mario 64')
    mario.add_cheat('Infinite Lives').add_code(0x8033B21D, 0x0064)
    stars = mario.add_cheat('Have Stars', is_active=False)
    stars.add_code(0x8033B218, 0x00FF)
    stars.add_code(0x8033B219, 0x0078)
    zelda = Game('Zelda')
    zelda.add_cheat('Max Rupees').add_code(0x8011A605, 0x01F4)
    return [mario, zelda]


def test_write_list():
    assert write_list(sample_games()) == LIST


def test_read_list():
    assert games_equal(read_list_text(LIST), sample_games())


def test_read_list_tolerates_comments_and_case():
    text = '''
; my list
  "Zelda"   ; the one with the ocarina
"Max Rupees"
8011a605 01f4 ; 500
  .end
'''
    games = read_list(text.splitlines(keepends=True))
    assert len(games) == 1
    assert games[0].cheats[0].codes[0].address == 0x8011A605
    assert games[0].cheats[0].codes[0].value == 0x01F4


def test_empty_game_and_cheat():
    games = read_list_text('"Empty"\n.end\n"One"\n"Nothing yet"\n.end\n')
    assert games[0].cheats == []
    assert games[1].cheats[0].codes == []


def test_code_before_cheat():
    with pytest.raises(ListSyntaxError) as info:
        read_list_text('"Zelda"\n8011A605 01F4\n.end\n')
    assert info.value.line_number == 2


def test_missing_end():
    with pytest.raises(ListSyntaxError):
        read_list_text('"Zelda"\n"Max Rupees"\n8011A605 01F4\n')


def test_garbage_line():
    with pytest.raises(ListSyntaxError) as info:
        read_list_text('"Zelda"\n"Max Rupees"\n8011A605 1F4\n.end\n')
    assert info.value.line_number == 3


def test_code_outside_game():
    with pytest.raises(ListSyntaxError):
        read_list_text('8011A605 01F4\n')
