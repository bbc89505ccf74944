"""Drawing, sound and window handling on top of pygame."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pygame

from .engine import BUFFER_H, BUFFER_W, DISP_H, DISP_W, Event, EventKind
from .model import JEWEL_TYPE_N, Board, Mission, Score, Sound, Starfield
from .utils import InitError, must_init

WHITE = (255, 255, 255)
TIMER_EVENT = pygame.USEREVENT + 1

_SOUND_FILES = {
    Sound.BG_MUSIC: ("sound/Haggstrom.opus", "Background music"),
    Sound.FALL: ("sound/rock_fall.wav", "Fall effect"),
    Sound.SPECIAL1: ("sound/special_explosion1.wav", "Special1 effect"),
    Sound.SPECIAL2: ("sound/special_explosion2.wav", "Special2 effect"),
    Sound.LEVEL_UP: ("sound/level_up_sound.wav", "Level up sound"),
    Sound.EASTER: ("sound/giveup.opus", "Rick Astley"),
}
_FONT_FILE = "fonts/half_bold_pixel-7.ttf"
_SPRITE_FILES = (
    [f"sprites/rocks/rock{n}.png" for n in range(1, JEWEL_TYPE_N + 1)]
    + [f"sprites/rocks/special1{n}.png" for n in range(1, JEWEL_TYPE_N + 1)]
    + [f"sprites/rocks/special2{n}.png" for n in range(1, JEWEL_TYPE_N + 1)]
)


def _load(loader, path: Path, description: str):
    try:
        return must_init(loader(str(path)), description)
    except (pygame.error, OSError) as exc:
        raise InitError(f"couldn't initialize {description}") from exc


@dataclass
class Assets:
    """Sounds, fonts and images the game draws and plays."""

    sounds: dict
    score_font: Any
    title_font: Any
    help_font: Any
    main_bg: Any
    help_bg: Any
    sprites: list
    _music_channel: Optional[Any] = field(default=None, init=False, repr=False)

    @classmethod
    def load(cls, root) -> "Assets":
        """Load every resource from the ``resources`` directory under *root*."""
        base = Path(root) / "resources"
        try:
            pygame.mixer.init()
            pygame.font.init()
        except pygame.error as exc:
            raise InitError("couldn't initialize Audio") from exc

        sounds = {
            sound: _load(pygame.mixer.Sound, base / name, description)
            for sound, (name, description) in _SOUND_FILES.items()
        }
        fonts = [
            _load(lambda p, s=size: pygame.font.Font(p, s), base / _FONT_FILE, description)
            for size, description in ((36, "Score Font"), (55, "Title Font"), (20, "Help Font"))
        ]
        main_bg = _load(pygame.image.load, base / "background/rock_bg.png", "Main background")
        help_bg = _load(pygame.image.load, base / "background/help_bg.png", "Help background")
        sprites = [_load(pygame.image.load, base / name, name) for name in _SPRITE_FILES]
        return cls(
            sounds=sounds,
            score_font=fonts[0],
            title_font=fonts[1],
            help_font=fonts[2],
            main_bg=main_bg,
            help_bg=help_bg,
            sprites=sprites,
        )

    def play(self, sound: Sound) -> None:
        """Play *sound*; the background music loops, everything else plays once."""
        if sound is Sound.BG_MUSIC:
            self._music_channel = self.sounds[sound].play(loops=-1)
        elif sound is Sound.EASTER:
            self.sounds[sound].play(loops=-1)
        else:
            self.sounds[sound].play(loops=0)

    def stop_music(self) -> None:
        """Stop the background music if it is playing."""
        if self._music_channel is not None:
            self._music_channel.stop()
            self._music_channel = None

    def play_easter(self) -> None:
        """Swap the background music for the looping easter tune."""
        self.stop_music()
        self.play(Sound.EASTER)


class Display:
    """A window with an off-screen buffer that is scaled onto it each frame."""

    def __init__(self) -> None:
        try:
            pygame.display.init()
            self.window = must_init(pygame.display.set_mode((DISP_W, DISP_H)), "Display")
        except pygame.error as exc:
            raise InitError("couldn't initialize Display") from exc
        self.buffer = pygame.Surface((BUFFER_W, BUFFER_H))

    def pre_draw(self) -> pygame.Surface:
        """Return the buffer that the frame is drawn on."""
        return self.buffer

    def post_draw(self) -> None:
        """Copy the buffer to the window and show it."""
        if (BUFFER_W, BUFFER_H) == (DISP_W, DISP_H):
            self.window.blit(self.buffer, (0, 0))
        else:
            self.window.blit(pygame.transform.scale(self.buffer, (DISP_W, DISP_H)), (0, 0))
        pygame.display.flip()


def _text_centered(surface, font, text: str, x: float, y: float) -> None:
    rendered = font.render(text, True, WHITE)
    surface.blit(rendered, (int(x - rendered.get_width() / 2), int(y)))


def draw_stars(surface, starfield: Starfield) -> None:
    """Draw one white pixel per star, in every other column."""
    for index, star in enumerate(starfield):
        surface.set_at((1 + 2 * index, int(star.y)), WHITE)


def draw_score(surface, score: Score, font) -> None:
    """Draw the current score and the record."""
    _text_centered(surface, font, "SCORE", DISP_W / 4.0 - 20, 30)
    _text_centered(surface, font, "RECORD", 3 * DISP_W / 4.0, 30)
    _text_centered(surface, font, str(score.local_score), DISP_W / 4.0 - 20, 90)
    _text_centered(surface, font, str(score.global_score), 3 * DISP_W / 4.0, 90)


def draw_mission(surface, mission: Mission, font, sprites) -> None:
    """Draw the level, the mission progress and the target jewel."""
    _text_centered(surface, font, "LEVEL", DISP_W / 2.0 - 40, 30)
    _text_centered(surface, font, f"{mission.level}x", DISP_W / 2.0 + 55, 30)
    _text_centered(surface, font, f"{mission.quant}/{mission.top_level}", DISP_W / 2.0 + 10, 90)
    sprite = sprites[mission.kind]
    area = pygame.Rect(0, 0, 60, 60).clip(sprite.get_rect())
    icon = pygame.transform.scale(sprite.subsurface(area), (50, 50))
    surface.blit(icon, (int(DISP_W / 2.0 - 110), 80))


def draw_board(surface, board: Board, sprites) -> None:
    """Draw every visible jewel; a drawn jewel is no longer newly made special."""
    for row in board:
        for jewel in row:
            if jewel.draw:
                surface.blit(sprites[jewel.kind], (jewel.x, jewel.y))
                jewel.special_gen_flag = False


def to_event(pygame_event) -> Optional[Event]:
    """Translate a pygame event into a game :class:`Event`, or None if it is not used."""
    kind = pygame_event.type
    if kind == TIMER_EVENT:
        return Event(EventKind.TIMER)
    if kind == pygame.QUIT:
        return Event(EventKind.DISPLAY_CLOSE)
    if kind == pygame.KEYDOWN:
        return Event(EventKind.KEY_DOWN, key=pygame_event.key)
    if kind == pygame.KEYUP:
        return Event(EventKind.KEY_UP, key=pygame_event.key)
    mouse_kinds = {
        pygame.MOUSEMOTION: EventKind.MOUSE_AXES,
        pygame.MOUSEBUTTONDOWN: EventKind.MOUSE_BUTTON_DOWN,
        pygame.MOUSEBUTTONUP: EventKind.MOUSE_BUTTON_UP,
    }
    if kind in mouse_kinds:
        x, y = pygame_event.pos
        return Event(mouse_kinds[kind], x=int(x), y=int(y))
    return None