"""Board animation and play flow: swapping, falling and reading the player's moves."""

from __future__ import annotations

import enum

from .engine import DISP_H, DISP_W, Mouse
from .matching import board_check, board_game_over, horizontal_test, l_test, swap, t_test, vertical_test
from .model import (
    BOARD_N,
    FALL_SPEED,
    JEWEL_SIZE,
    JEWEL_TYPE_N,
    X_OFFSET,
    Y_OFFSET,
    Board,
    BoardState,
    FallState,
    GameSet,
    JewelState,
    Sound,
    States,
)
from .utils import between

BOTTOM_MARGIN = 20
MIN_DRAG = JEWEL_SIZE - 18
# Once the feed row has slid this far down it becomes visible.
_FEED_VISIBLE_Y = 100


class FallOutcome(enum.Enum):
    """Result of one step of :func:`jewel_fall`."""

    FALLING = "falling"
    SETTLED = "settled"
    GAME_OVER = "game_over"


def gen_new_board(game: GameSet) -> None:
    """Fill the board with new jewels, let it settle, and reset score and mission."""
    for row in game.board:
        for jewel in row:
            jewel.kind = between(0, JEWEL_TYPE_N)

    while jewel_fall(game, False) is FallOutcome.FALLING:
        pass

    game.score.local_score = 0
    game.mission.reset()


def _test_fall(game: GameSet, sound: bool) -> FallOutcome:
    state = game.state
    taken = t_test(game, sound)
    taken += l_test(game, sound)
    taken += horizontal_test(game, sound)
    taken += vertical_test(game, sound)

    score = game.score
    if sound and score.local_score >= score.global_score:
        score.global_score = score.local_score

    mission = game.mission
    if mission.quant >= mission.top_level:
        game.play(Sound.LEVEL_UP)
        mission.quant = 0
        mission.level += 1
        mission.top_level += 1
        mission.kind = between(0, JEWEL_TYPE_N)

    if taken:
        state.fall_state = FallState.RENDER
        state.fall_flag = 1
        state.i_jewel_fall = 1
        return FallOutcome.FALLING
    if board_game_over(game.board):
        return FallOutcome.GAME_OVER
    state.board_state = BoardState.NEW_PLAY
    return FallOutcome.SETTLED


def _render_fall(game: GameSet, sound: bool) -> None:
    board = game.board
    state = game.state
    row = state.i_jewel_fall
    for j in range(BOARD_N):
        if board[row][j].draw:
            continue
        state.fall_flag = 0
        column = [board[i][j] for i in range(row + 1)]
        above = column[:row]
        if column[row - 1].y == column[row].y:
            for jewel in above:
                jewel.y -= JEWEL_SIZE
            for i in range(row, 0, -1):
                column[i].kind = column[i - 1].kind
            column[0].kind = between(0, JEWEL_TYPE_N)
            column[row].draw = True
            column[0].draw = False
            state.fall_flag = 1
        else:
            for jewel in above:
                jewel.y += FALL_SPEED
            if column[0].y > _FEED_VISIBLE_Y:
                column[0].draw = True

    if state.fall_flag == 1:
        state.i_jewel_fall += 1
        if state.i_jewel_fall > BOARD_N:
            if sound:
                game.play(Sound.FALL)
            state.fall_state = FallState.TEST


def jewel_fall(game: GameSet, sound: bool) -> FallOutcome:
    """Advance the clear-and-fall cycle by one step.

    Returns FALLING while jewels are still being cleared or dropped, SETTLED when
    the board is ready for a new move, and GAME_OVER when no move is left.
    """
    if game.state.fall_state is FallState.TEST:
        return _test_fall(game, sound)
    _render_fall(game, sound)
    return FallOutcome.FALLING


def switch_movement(board: Board, i_clk: int, j_clk: int, i_rls: int, j_rls: int, direction: int) -> None:
    """Slide the two swapped jewels one step towards (direction > 0) or away from each other."""
    if direction > 0:
        horizontal = j_rls - j_clk
        vertical = i_rls - i_clk
    else:
        horizontal = j_clk - j_rls
        vertical = i_clk - i_rls

    clicked = board[i_clk][j_clk]
    released = board[i_rls][j_rls]
    if horizontal > 0:
        clicked.x += FALL_SPEED
        released.x -= FALL_SPEED
    elif horizontal < 0:
        clicked.x -= FALL_SPEED
        released.x += FALL_SPEED
    elif vertical > 0:
        clicked.y += FALL_SPEED
        released.y -= FALL_SPEED
    elif vertical < 0:
        clicked.y -= FALL_SPEED
        released.y += FALL_SPEED


def switch_jewels(board: Board, state: States, mouse: Mouse) -> None:
    """Animate a swap; keep it if it scores, otherwise slide the jewels back."""
    clicked = board[mouse.i_clk][mouse.j_clk]
    released = board[mouse.i_rls][mouse.j_rls]
    cells = (mouse.i_clk, mouse.j_clk, mouse.i_rls, mouse.j_rls)

    if state.jewel_state is JewelState.GO:
        arrived = (
            clicked.x == state.x_jewel_rls
            and clicked.y == state.y_jewel_rls
            and released.x == state.x_jewel_clk
            and released.y == state.y_jewel_clk
        )
        if not arrived:
            switch_movement(board, *cells, 1)
            return
        swap(board, *cells)
        if board_check(board):
            state.board_state = BoardState.JEWEL_FALL
            clicked.x, clicked.y = state.x_jewel_clk, state.y_jewel_clk
            released.x, released.y = state.x_jewel_rls, state.y_jewel_rls
            state.x_jewel_clk = state.y_jewel_clk = -1
            state.x_jewel_rls = state.y_jewel_rls = -1
        else:
            swap(board, *cells)
            state.jewel_state = JewelState.BACK
    elif state.jewel_state is JewelState.BACK:
        home = (
            clicked.x == state.x_jewel_clk
            and clicked.y == state.y_jewel_clk
            and released.x == state.x_jewel_rls
            and released.y == state.y_jewel_rls
        )
        if home:
            state.jewel_state = JewelState.GO
            state.board_state = BoardState.NEW_PLAY
        else:
            switch_movement(board, *cells, -1)


def _on_board(x: int, y: int) -> bool:
    return X_OFFSET < x < DISP_W - X_OFFSET and Y_OFFSET < y < DISP_H - BOTTOM_MARGIN


def get_new_play(board: Board, state: States, mouse: Mouse) -> None:
    """Turn a click-and-drag on the board into a swap of two neighbouring jewels."""
    if not (_on_board(mouse.x_clk, mouse.y_clk) and _on_board(mouse.x_rls, mouse.y_rls)):
        return
    if mouse.x_clk == mouse.x_rls and mouse.y_clk == mouse.y_rls:
        return

    h_delta = abs(mouse.x_clk - mouse.x_rls)
    v_delta = abs(mouse.y_clk - mouse.y_rls)
    if h_delta < MIN_DRAG and v_delta < MIN_DRAG:
        return

    mouse.i_clk = (mouse.y_clk - Y_OFFSET + JEWEL_SIZE) // JEWEL_SIZE
    mouse.j_clk = (mouse.x_clk - X_OFFSET) // JEWEL_SIZE
    if h_delta > v_delta:
        mouse.i_rls = mouse.i_clk
        mouse.j_rls = mouse.j_clk + (1 if mouse.x_rls > mouse.x_clk else -1)
    else:
        mouse.j_rls = mouse.j_clk
        mouse.i_rls = mouse.i_clk + (1 if mouse.y_rls > mouse.y_clk else -1)

    if 0 <= mouse.i_rls < BOARD_N + 1 and 0 <= mouse.j_rls < BOARD_N:
        clicked = board[mouse.i_clk][mouse.j_clk]
        released = board[mouse.i_rls][mouse.j_rls]
        state.x_jewel_clk, state.y_jewel_clk = clicked.x, clicked.y
        state.x_jewel_rls, state.y_jewel_rls = released.x, released.y
        state.board_state = BoardState.SWITCH_JEWEL


def board_update(game: GameSet, mouse: Mouse) -> None:
    """Run one tick of the board state machine."""
    state = game.state
    if state.board_state is BoardState.NEW_PLAY:
        get_new_play(game.board, state, mouse)
    elif state.board_state is BoardState.SWITCH_JEWEL:
        switch_jewels(game.board, state, mouse)
    elif state.board_state is BoardState.JEWEL_FALL:
        if jewel_fall(game, True) is FallOutcome.GAME_OVER:
            game.game_over = True