"""Match detection on the board: lines, L and T shapes, and special explosions."""

from __future__ import annotations

import enum
from typing import Iterable

from .model import BOARD_N, JEWEL_TYPE_N, Board, GameSet, Sound

CIRCULAR_BONUS = 800
CROSS_BONUS = 1500
SHAPE_POINTS = 500
LINE_POINTS = 100
SHAPE_SIZE = 5


class Pattern(enum.Enum):
    """Cell patterns that :func:`matchpoint_verify` can look for."""

    SINGLE = 1
    HORIZONTAL = 2
    VERTICAL = 3
    L = 4
    L_MIRRORED = 5
    L_UPSIDE_DOWN = 6
    L_MIRRORED_UPSIDE_DOWN = 7
    T = 8
    T_UPSIDE_DOWN = 9
    T_LEFT = 10
    T_RIGHT = 11


class Shape(enum.Enum):
    """Arms of an L or T match, hidden by :func:`hide_pieces`."""

    L = 1
    L_MIRRORED = 2
    L_UPSIDE_DOWN = 3
    L_MIRRORED_UPSIDE_DOWN = 4
    T = 5
    T_UPSIDE_DOWN = 6
    T_LEFT = 7
    T_RIGHT = 8


_PATTERN_OFFSETS: dict[Pattern, tuple[tuple[int, int], ...]] = {
    Pattern.SINGLE: ((0, 0),),
    Pattern.HORIZONTAL: ((0, 1), (0, 2)),
    Pattern.VERTICAL: ((1, 0), (2, 0)),
    Pattern.L: ((-1, 0), (-2, 0), (0, 1), (0, 2)),
    Pattern.L_MIRRORED: ((-1, 0), (-2, 0), (0, -1), (0, -2)),
    Pattern.L_UPSIDE_DOWN: ((1, 0), (2, 0), (0, 1), (0, 2)),
    Pattern.L_MIRRORED_UPSIDE_DOWN: ((1, 0), (2, 0), (0, -1), (0, -2)),
    Pattern.T: ((0, -1), (0, 1), (1, 0), (2, 0)),
    Pattern.T_UPSIDE_DOWN: ((0, -1), (0, 1), (-1, 0), (-2, 0)),
    Pattern.T_LEFT: ((0, 1), (0, 2), (-1, 0), (1, 0)),
    Pattern.T_RIGHT: ((0, -1), (0, -2), (-1, 0), (1, 0)),
}

# Offsets in the order their special jewels are checked for detonation.
_SHAPE_OFFSETS: dict[Shape, tuple[tuple[int, int], ...]] = {
    Shape.L: ((-1, 0), (-2, 0), (0, 1), (0, 2)),
    Shape.L_MIRRORED: ((-1, 0), (-2, 0), (0, -1), (0, -2)),
    Shape.L_UPSIDE_DOWN: ((1, 0), (2, 0), (0, 1), (0, 2)),
    Shape.L_MIRRORED_UPSIDE_DOWN: ((1, 0), (2, 0), (0, -1), (0, -2)),
    Shape.T: ((0, -1), (0, 1), (1, 0), (2, 0)),
    Shape.T_UPSIDE_DOWN: ((0, -1), (0, 1), (-1, 0), (-2, 0)),
    Shape.T_LEFT: ((0, 1), (0, 2), (-1, 0), (1, 0)),
    Shape.T_RIGHT: ((0, -1), (0, -2), (-1, 0), (1, 0)),
}

_TOP_ROWS = range(3, BOARD_N + 1)
_BOTTOM_ROWS = range(1, BOARD_N - 1)
_MIDDLE_ROWS = range(2, BOARD_N)
_LEFT_COLS = range(0, BOARD_N - 2)
_RIGHT_COLS = range(2, BOARD_N)
_INNER_COLS = range(1, BOARD_N - 1)

_L_SEARCH = (
    (Pattern.L, Shape.L, _TOP_ROWS, _LEFT_COLS),
    (Pattern.L_MIRRORED, Shape.L_MIRRORED, _TOP_ROWS, _RIGHT_COLS),
    (Pattern.L_UPSIDE_DOWN, Shape.L_UPSIDE_DOWN, _BOTTOM_ROWS, _LEFT_COLS),
    (Pattern.L_MIRRORED_UPSIDE_DOWN, Shape.L_MIRRORED_UPSIDE_DOWN, _BOTTOM_ROWS, _RIGHT_COLS),
)

_T_SEARCH = (
    (Pattern.T, Shape.T, _BOTTOM_ROWS, _INNER_COLS),
    (Pattern.T_UPSIDE_DOWN, Shape.T_UPSIDE_DOWN, _TOP_ROWS, _INNER_COLS),
    (Pattern.T_LEFT, Shape.T_LEFT, _MIDDLE_ROWS, _LEFT_COLS),
    (Pattern.T_RIGHT, Shape.T_RIGHT, _MIDDLE_ROWS, _RIGHT_COLS),
)


def same_kind(kind: int, other: int) -> bool:
    """True if two jewel kinds match, treating specials as their base colour."""
    return other == kind or abs(kind - other) in (JEWEL_TYPE_N, 2 * JEWEL_TYPE_N)


def matchpoint_verify(board: Board, kind: int, i: int, j: int, pattern: Pattern) -> bool:
    """True if every cell of *pattern* anchored at (i, j) matches *kind*."""
    return all(
        same_kind(kind, board[i + di][j + dj].kind) for di, dj in _PATTERN_OFFSETS[pattern]
    )


def board_check(board: Board) -> bool:
    """True if the visible board holds a run of three in a row or column."""
    for i in range(1, BOARD_N + 1):
        for j in range(BOARD_N - 2):
            if matchpoint_verify(board, board[i][j].kind, i, j, Pattern.HORIZONTAL):
                return True
    for i in range(1, BOARD_N - 1):
        for j in range(BOARD_N):
            if matchpoint_verify(board, board[i][j].kind, i, j, Pattern.VERTICAL):
                return True
    return False


def swap(board: Board, x: int, y: int, z: int, w: int) -> None:
    """Exchange the kinds of cells (x, y) and (z, w); positions are left alone."""
    board[x][y].kind, board[z][w].kind = board[z][w].kind, board[x][y].kind


def _candidate_swaps() -> Iterable[tuple[int, int, int, int]]:
    for i in range(1, BOARD_N):
        for j in range(BOARD_N - 1):
            yield i, j, i, j + 1
            yield i, j, i + 1, j
    last_col = BOARD_N - 1
    for i in range(1, BOARD_N):
        yield i, last_col, i + 1, last_col
    for j in range(BOARD_N - 1):
        yield BOARD_N, j, BOARD_N, j + 1


def board_game_over(board: Board) -> bool:
    """True if no single adjacent swap produces a match. The board is left unchanged."""
    for move in _candidate_swaps():
        swap(board, *move)
        found = board_check(board)
        swap(board, *move)
        if found:
            return False
    return True


def _blast(game: GameSet, a: int, b: int) -> None:
    jewel = game.board[a][b]
    jewel.draw = False
    if game.mission.kind == jewel.kind:
        game.mission.quant += 1
    if jewel.kind >= JEWEL_TYPE_N:
        hide_special_explosion(game, a, b)


def hide_special_explosion(game: GameSet, i: int, j: int) -> None:
    """Detonate the special jewel at (i, j), hiding the cells it reaches."""
    board = game.board
    jewel = board[i][j]
    if JEWEL_TYPE_N <= jewel.kind < 2 * JEWEL_TYPE_N:
        game.score.local_score += CIRCULAR_BONUS
        jewel.kind -= JEWEL_TYPE_N
        rows = range(max(i - 1, 0), min(i + 2, BOARD_N + 1))
        cols = range(max(j - 1, 0), min(j + 2, BOARD_N))
        for a in rows:
            for b in cols:
                _blast(game, a, b)
        game.play(Sound.SPECIAL1)
    elif jewel.kind >= 2 * JEWEL_TYPE_N:
        game.score.local_score += CROSS_BONUS
        jewel.kind -= 2 * JEWEL_TYPE_N
        for b in range(BOARD_N):
            _blast(game, i, b)
        for a in range(1, BOARD_N + 1):
            _blast(game, a, j)
        game.play(Sound.SPECIAL2)


def hide_pieces(game: GameSet, i: int, j: int, shape: Shape) -> None:
    """Hide the arms of *shape* around (i, j) and detonate the first fresh special among them."""
    board = game.board
    cells = [board[i + di][j + dj] for di, dj in _SHAPE_OFFSETS[shape]]
    for cell in cells:
        cell.draw = False
    for (di, dj), cell in zip(_SHAPE_OFFSETS[shape], cells):
        if cell.kind >= JEWEL_TYPE_N and not cell.special_gen_flag:
            hide_special_explosion(game, i + di, j + dj)
            break


def _shape_test(game: GameSet, sound: bool, searches) -> int:
    board = game.board
    quant = 0
    for pattern, shape, rows, cols in searches:
        for i in rows:
            for j in cols:
                kind = board[i][j].kind
                if not matchpoint_verify(board, kind, i, j, pattern):
                    continue
                centre = board[i][j]
                if centre.kind < JEWEL_TYPE_N:
                    centre.kind += JEWEL_TYPE_N
                    centre.special_gen_flag = True
                hide_pieces(game, i, j, shape)
                quant += SHAPE_SIZE
                game.score.local_score += SHAPE_POINTS * game.mission.level
                if sound:
                    game.play(Sound.FALL)
                if game.mission.kind == kind:
                    game.mission.quant += SHAPE_SIZE
    return quant


def l_test(game: GameSet, sound: bool) -> int:
    """Clear every L shaped match; return the number of jewels taken."""
    return _shape_test(game, sound, _L_SEARCH)


def t_test(game: GameSet, sound: bool) -> int:
    """Clear every T shaped match; return the number of jewels taken."""
    return _shape_test(game, sound, _T_SEARCH)


def _clear_run(game: GameSet, cells: list[tuple[int, int]], kind: int, sound: bool) -> int:
    board = game.board
    for a, b in cells:
        jewel = board[a][b]
        if jewel.kind < JEWEL_TYPE_N:
            jewel.draw = False
        elif not jewel.special_gen_flag:
            hide_special_explosion(game, a, b)
    if sound:
        game.play(Sound.FALL)
    length = len(cells)
    if game.mission.kind == kind:
        game.mission.quant += length
    game.score.local_score += LINE_POINTS * length * game.mission.level
    if length == SHAPE_SIZE:
        a, b = cells[2]
        middle = board[a][b]
        middle.kind += 2 * JEWEL_TYPE_N
        middle.draw = True
        middle.special_gen_flag = True
    return length


def horizontal_test(game: GameSet, sound: bool) -> int:
    """Clear horizontal runs of three or more; return the number of jewels taken."""
    board = game.board
    quant = 0
    for i in range(1, BOARD_N + 1):
        for j in range(BOARD_N - 2):
            if not board[i][j].draw:
                continue
            kind = board[i][j].kind
            if not matchpoint_verify(board, kind, i, j, Pattern.HORIZONTAL):
                continue
            k = j + 3
            while k < BOARD_N and matchpoint_verify(board, kind, i, k, Pattern.SINGLE):
                k += 1
            quant += _clear_run(game, [(i, b) for b in range(j, k)], kind, sound)
    return quant


def vertical_test(game: GameSet, sound: bool) -> int:
    """Clear vertical runs of three or more; return the number of jewels taken."""
    board = game.board
    quant = 0
    for i in range(1, BOARD_N - 1):
        for j in range(BOARD_N):
            if not board[i][j].draw:
                continue
            kind = board[i][j].kind
            if not matchpoint_verify(board, kind, i, j, Pattern.VERTICAL):
                continue
            k = i + 3
            while k < BOARD_N + 1 and matchpoint_verify(board, kind, k, j, Pattern.SINGLE):
                k += 1
            quant += _clear_run(game, [(a, j) for a in range(i, k)], kind, sound)
    return quant