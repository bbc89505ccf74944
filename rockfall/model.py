"""Game state: jewels, board, score, mission, stars and the game set."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .engine import BUFFER_H, BUFFER_W
from .utils import InitError, between, between_f

X_OFFSET = 80
Y_OFFSET = 140
JEWEL_SIZE = 70
BOARD_N = 8
JEWEL_TYPE_N = 6
FALL_SPEED = 5
STARS_N = (BUFFER_W // 2) - 1


class Sound(enum.Enum):
    """Sounds the game logic asks to be played."""

    BG_MUSIC = "bg_music"
    FALL = "fall"
    SPECIAL1 = "special1"
    SPECIAL2 = "special2"
    LEVEL_UP = "level_up"
    EASTER = "easter"


@dataclass
class Jewel:
    """One cell of the board."""

    x: int
    y: int
    kind: int
    draw: bool = True
    special_gen_flag: bool = False


Board = list[list[Jewel]]


class BoardState(enum.Enum):
    NEW_PLAY = 0
    SWITCH_JEWEL = 1
    JEWEL_FALL = 2


class JewelState(enum.Enum):
    GO = 0
    BACK = 1


class FallState(enum.Enum):
    TEST = 0
    RENDER = 1


@dataclass
class States:
    """State machines that drive the board."""

    board_state: BoardState = BoardState.NEW_PLAY
    jewel_state: JewelState = JewelState.GO
    fall_state: FallState = FallState.TEST
    x_jewel_clk: int = -1
    y_jewel_clk: int = -1
    x_jewel_rls: int = -1
    y_jewel_rls: int = -1
    i_jewel_fall: int = -1
    fall_flag: int = -1


def _read_history(path: Path, description: str) -> str:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a+", encoding="utf-8") as stream:
            stream.seek(0)
            return stream.read()
    except OSError as exc:
        raise InitError(f"couldn't initialize {description}") from exc


def _write_history(path: Path, values, description: str) -> None:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{value}\n" for value in values), encoding="utf-8")
    except OSError as exc:
        raise InitError(f"couldn't initialize {description}") from exc


def _read_ints(path: Path, count: int, description: str) -> list[int]:
    """Read up to *count* whitespace separated integers, stopping at the first bad token."""
    values: list[int] = []
    for token in _read_history(path, description).split():
        if len(values) == count:
            break
        try:
            values.append(int(token))
        except ValueError:
            break
    return values


def _padded(values: list[int], count: int) -> list[int]:
    return values + [0] * (count - len(values))


@dataclass
class Score:
    """Current score and best score seen."""

    local_score: int = 0
    global_score: int = 0

    @classmethod
    def load(cls, path) -> "Score":
        local, best = _padded(_read_ints(path, 2, "Global Score"), 2)
        score = cls()
        if local:
            score.local_score = local
        if best:
            score.global_score = best
        return score

    def save(self, path) -> None:
        path = Path(path)
        stored = 0
        if path.exists():
            stored = _padded(_read_ints(path, 2, "Save game score"), 2)[1]
        _write_history(path, (self.local_score, max(self.global_score, stored)), "Save game score")


def _random_kind() -> int:
    return between(0, JEWEL_TYPE_N)


@dataclass
class Mission:
    """Collect `top_level` jewels of `kind` to advance a level."""

    kind: int = field(default_factory=_random_kind)
    quant: int = 0
    level: int = 1
    top_level: int = 10

    @classmethod
    def load(cls, path) -> "Mission":
        kind, quant, level, top = _padded(_read_ints(path, 4, "Mission init"), 4)
        mission = cls()
        if kind:
            mission.kind = kind
        if quant:
            mission.quant = quant
        if level:
            mission.level = level
        if top:
            mission.top_level = top
        return mission

    def save(self, path) -> None:
        _write_history(path, (self.kind, self.quant, self.level, self.top_level), "Mission deinit")

    def reset(self) -> None:
        """Start again from the first level with a new target kind."""
        self.quant = 0
        self.level = 1
        self.top_level = 10
        self.kind = _random_kind()


@dataclass
class Star:
    y: float
    speed: float

    @classmethod
    def _spawn(cls) -> "Star":
        return cls(y=between_f(0, BUFFER_H), speed=between_f(0.1, 1))


def _spawn_stars() -> list[Star]:
    return [Star._spawn() for _ in range(STARS_N)]


@dataclass
class Starfield:
    """Columns of falling background stars."""

    stars: list[Star] = field(default_factory=_spawn_stars)

    def __iter__(self):
        return iter(self.stars)

    def __len__(self) -> int:
        return len(self.stars)

    def update(self) -> None:
        for star in self.stars:
            star.y += star.speed
            if star.y >= BUFFER_H:
                star.y = 0
                star.speed = between_f(0.1, 1)


def new_board() -> Board:
    """Build a board of BOARD_N+1 rows; row 0 is the hidden feed row."""
    return [
        [
            Jewel(
                x=X_OFFSET + j * JEWEL_SIZE,
                y=Y_OFFSET + (i - 1) * JEWEL_SIZE,
                kind=_random_kind(),
                draw=i > 0,
            )
            for j in range(BOARD_N)
        ]
        for i in range(BOARD_N + 1)
    ]


def load_board(path) -> Board:
    """Build a board and fill in jewel kinds saved at *path*."""
    board = new_board()
    kinds = iter(_read_ints(path, (BOARD_N + 1) * BOARD_N, "Board init"))
    for jewel in (jewel for row in board for jewel in row):
        kind = next(kinds, None)
        if kind is None:
            break
        jewel.kind = kind
    return board


def save_board(board: Board, path) -> None:
    _write_history(path, (jewel.kind for row in board for jewel in row), "Board init")


SoundPlayer = Callable[[Sound], None]


@dataclass
class GameSet:
    """Everything the game logic works on."""

    board: Board = field(default_factory=new_board)
    score: Score = field(default_factory=Score)
    mission: Mission = field(default_factory=Mission)
    state: States = field(default_factory=States)
    stars: Starfield = field(default_factory=Starfield)
    give_up: bool = False
    game_over: bool = False
    sound_player: Optional[SoundPlayer] = None

    def play(self, sound: Sound) -> None:
        """Ask the attached player, if any, to play *sound*."""
        if self.sound_player is not None:
            self.sound_player(sound)