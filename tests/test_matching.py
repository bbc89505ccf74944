import pytest

from rockfall.matching import (
    CIRCULAR_BONUS,
    CROSS_BONUS,
    LINE_POINTS,
    SHAPE_POINTS,
    Pattern,
    Shape,
    board_check,
    board_game_over,
    hide_pieces,
    hide_special_explosion,
    horizontal_test,
    l_test,
    matchpoint_verify,
    same_kind,
    swap,
    t_test,
    vertical_test,
)
from rockfall.model import BOARD_N, JEWEL_TYPE_N, GameSet, Mission, Score, Sound, new_board


def background():
    """A board without runs that never uses kind 0."""
    board = new_board()
    for i, row in enumerate(board):
        for j, jewel in enumerate(row):
            jewel.kind = 1 + (2 * i + j) % 5
    return board


def cycling():
    """Kinds cycling through all types row by row: no runs and no moves."""
    board = new_board()
    for i, row in enumerate(board):
        for j, jewel in enumerate(row):
            jewel.kind = (BOARD_N * i + j) % JEWEL_TYPE_N
    return board


def kinds(board):
    return [[jewel.kind for jewel in row] for row in board]


def make_game(board, mission_kind=0):
    sounds = []
    game = GameSet(
        board=board,
        score=Score(),
        mission=Mission(kind=mission_kind),
        sound_player=sounds.append,
    )
    return game, sounds


def place(board, cells, kind=0):
    for i, j in cells:
        board[i][j].kind = kind


@pytest.mark.parametrize(
    "kind, other, expected",
    [
        (0, 0, True),
        (0, JEWEL_TYPE_N, True),
        (0, 2 * JEWEL_TYPE_N, True),
        (JEWEL_TYPE_N + 3, 3, True),
        (0, 1, False),
        (0, 3, False),
    ],
)
def test_same_kind(kind, other, expected):
    assert same_kind(kind, other) is expected


def test_same_kind_is_symmetric():
    for a in range(3 * JEWEL_TYPE_N):
        for b in range(3 * JEWEL_TYPE_N):
            assert same_kind(a, b) == same_kind(b, a)


def test_board_check_false_on_background():
    assert board_check(background()) is False
    assert board_check(cycling()) is False


def test_board_check_finds_horizontal_and_vertical():
    board = background()
    place(board, [(5, 3), (5, 4), (5, 5)])
    assert board_check(board) is True
    board = background()
    place(board, [(6, 2), (7, 2), (8, 2)])
    assert board_check(board) is True


def test_board_check_treats_specials_as_base_kind():
    board = background()
    place(board, [(2, 0), (2, 2)])
    board[2][1].kind = JEWEL_TYPE_N
    assert board_check(board) is True


def test_board_check_ignores_feed_row():
    board = background()
    place(board, [(0, 0), (0, 1), (0, 2)])
    assert board_check(board) is False


@pytest.mark.parametrize("pattern", list(Pattern))
def test_matchpoint_verify_on_uniform_board(pattern):
    board = new_board()
    place(board, [(i, j) for i in range(BOARD_N + 1) for j in range(BOARD_N)], kind=2)
    assert matchpoint_verify(board, 2, 4, 4, pattern) is True
    assert matchpoint_verify(board, 3, 4, 4, pattern) is False


def test_matchpoint_verify_l_shape():
    board = background()
    place(board, [(3, 0), (2, 0), (1, 0), (3, 1), (3, 2)])
    assert matchpoint_verify(board, 0, 3, 0, Pattern.L) is True
    assert matchpoint_verify(board, 0, 3, 0, Pattern.T_LEFT) is False


def test_swap_exchanges_kinds_only():
    board = background()
    first, second = board[2][3], board[2][4]
    before = (first.kind, first.x, first.y, second.kind, second.x, second.y)
    swap(board, 2, 3, 2, 4)
    assert (first.kind, second.kind) == (before[3], before[0])
    assert (first.x, first.y, second.x, second.y) == (before[1], before[2], before[4], before[5])


def test_board_game_over_on_cycling_board():
    board = cycling()
    snapshot = kinds(board)
    assert board_game_over(board) is True
    assert kinds(board) == snapshot


def test_board_game_over_false_when_move_exists():
    board = background()
    place(board, [(1, 0), (1, 1), (2, 2)])
    snapshot = kinds(board)
    assert board_check(board) is False
    assert board_game_over(board) is False
    assert kinds(board) == snapshot


def test_circular_explosion():
    board = background()
    board[4][4].kind = JEWEL_TYPE_N + 1
    game, sounds = make_game(board, mission_kind=5)
    hide_special_explosion(game, 4, 4)
    assert game.score.local_score == CIRCULAR_BONUS
    assert board[4][4].kind == 1
    hidden = {(i, j) for i in range(BOARD_N + 1) for j in range(BOARD_N) if not board[i][j].draw}
    expected = {(a, b) for a in range(3, 6) for b in range(3, 6)} | {(0, j) for j in range(BOARD_N)}
    assert hidden == expected
    assert sounds == [Sound.SPECIAL1]


def test_circular_explosion_clamped_at_corner():
    board = background()
    board[BOARD_N][BOARD_N - 1].kind = JEWEL_TYPE_N
    game, _ = make_game(board, mission_kind=5)
    hide_special_explosion(game, BOARD_N, BOARD_N - 1)
    visible_hidden = {
        (i, j) for i in range(1, BOARD_N + 1) for j in range(BOARD_N) if not board[i][j].draw
    }
    assert visible_hidden == {
        (a, b) for a in (BOARD_N - 1, BOARD_N) for b in (BOARD_N - 2, BOARD_N - 1)
    }


def test_cross_explosion_hides_row_and_column():
    board = background()
    board[4][4].kind = 2 * JEWEL_TYPE_N + 2
    game, sounds = make_game(board, mission_kind=5)
    hide_special_explosion(game, 4, 4)
    assert game.score.local_score == CROSS_BONUS
    assert board[4][4].kind == 2
    assert all(not board[4][j].draw for j in range(BOARD_N))
    assert all(not board[i][4].draw for i in range(1, BOARD_N + 1))
    assert board[3][3].draw and board[5][5].draw
    assert sounds == [Sound.SPECIAL2]


def test_explosions_chain():
    board = background()
    board[4][4].kind = 2 * JEWEL_TYPE_N + 2
    board[4][0].kind = JEWEL_TYPE_N + 3
    game, sounds = make_game(board, mission_kind=5)
    hide_special_explosion(game, 4, 4)
    assert game.score.local_score == CROSS_BONUS + CIRCULAR_BONUS
    assert board[4][0].kind == 3
    assert not board[3][1].draw and not board[5][1].draw
    assert sounds == [Sound.SPECIAL1, Sound.SPECIAL2]


def test_hide_pieces_detonates_unflagged_special():
    board = background()
    board[2][0].kind = JEWEL_TYPE_N
    game, _ = make_game(board, mission_kind=5)
    hide_pieces(game, 3, 0, Shape.L)
    assert board[2][0].kind == 0
    assert game.score.local_score == CIRCULAR_BONUS
    assert not board[1][0].draw and not board[3][1].draw and not board[3][2].draw


def test_hide_pieces_spares_fresh_special():
    board = background()
    board[2][0].kind = JEWEL_TYPE_N
    board[2][0].special_gen_flag = True
    game, _ = make_game(board, mission_kind=5)
    hide_pieces(game, 3, 0, Shape.L)
    assert board[2][0].kind == JEWEL_TYPE_N
    assert game.score.local_score == 0
    assert [board[a][b].draw for a, b in [(2, 0), (1, 0), (3, 1), (3, 2)]] == [False] * 4


def test_l_test_makes_special_corner():
    board = background()
    place(board, [(3, 0), (2, 0), (1, 0), (3, 1), (3, 2)])
    game, sounds = make_game(board, mission_kind=0)
    assert l_test(game, True) == 5
    assert board[3][0].kind == JEWEL_TYPE_N
    assert board[3][0].special_gen_flag is True
    assert board[3][0].draw is True
    assert all(not board[a][b].draw for a, b in [(2, 0), (1, 0), (3, 1), (3, 2)])
    assert game.score.local_score == SHAPE_POINTS
    assert game.mission.quant == 5
    assert sounds == [Sound.FALL]


def test_l_test_nothing_on_background():
    game, sounds = make_game(background())
    assert l_test(game, True) == 0
    assert t_test(game, True) == 0
    assert sounds == []


def test_t_test_makes_special_centre():
    board = background()
    place(board, [(1, 0), (1, 1), (1, 2), (2, 1), (3, 1)])
    game, _ = make_game(board, mission_kind=4)
    game.mission.level = 2
    assert t_test(game, False) == 5
    assert board[1][1].kind == JEWEL_TYPE_N
    assert game.score.local_score == SHAPE_POINTS * 2
    assert game.mission.quant == 0


def test_horizontal_run_of_three():
    board = background()
    place(board, [(1, 0), (1, 1), (1, 2)])
    game, sounds = make_game(board, mission_kind=0)
    assert horizontal_test(game, True) == 3
    assert [board[1][j].draw for j in range(4)] == [False, False, False, True]
    assert game.score.local_score == LINE_POINTS * 3
    assert game.mission.quant == 3
    assert sounds == [Sound.FALL]


def test_horizontal_run_of_five_makes_cross_special():
    board = background()
    place(board, [(1, j) for j in range(5)])
    game, _ = make_game(board, mission_kind=0)
    assert horizontal_test(game, False) == 5
    middle = board[1][2]
    assert middle.kind == 2 * JEWEL_TYPE_N
    assert middle.draw is True and middle.special_gen_flag is True
    assert [board[1][j].draw for j in (0, 1, 3, 4)] == [False] * 4


def test_horizontal_run_of_four_has_no_special():
    board = background()
    place(board, [(6, j) for j in range(4, 8)])
    game, _ = make_game(board, mission_kind=0)
    assert horizontal_test(game, False) == 4
    assert all(board[6][j].kind == 0 for j in range(4, 8))


def test_vertical_run_of_three():
    board = background()
    place(board, [(1, 0), (2, 0), (3, 0)])
    game, _ = make_game(board, mission_kind=0)
    assert vertical_test(game, False) == 3
    assert [board[i][0].draw for i in range(1, 5)] == [False, False, False, True]
    assert game.mission.quant == 3


def test_vertical_run_of_five_makes_cross_special():
    board = background()
    place(board, [(i, 7) for i in range(4, 9)])
    game, _ = make_game(board, mission_kind=0)
    assert vertical_test(game, False) == 5
    assert board[6][7].kind == 2 * JEWEL_TYPE_N
    assert board[6][7].draw is True


def test_line_tests_find_nothing_on_background():
    game, _ = make_game(background())
    assert horizontal_test(game, True) == 0
    assert vertical_test(game, True) == 0
    assert game.score.local_score == 0