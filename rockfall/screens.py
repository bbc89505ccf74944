"""Screens of the game (menu, play, help) and the application loop that runs them."""

from __future__ import annotations

import argparse
import enum
import sys
from pathlib import Path
from typing import Callable, Optional

import pygame

from .board import board_update, gen_new_board
from .engine import BUFFER_W, DISP_H, DISP_W, FRAMES_N, Event, EventKind, Keyboard, Mouse
from .model import GameSet, Mission, Score, Sound, load_board, save_board
from .render import (
    TIMER_EVENT,
    WHITE,
    Assets,
    Display,
    draw_board,
    draw_mission,
    draw_score,
    draw_stars,
    to_event,
)
from .utils import InitError


class GameStatus(enum.Enum):
    """Top-level state of the application."""

    LOAD = 0
    MENU = 1
    PLAY = 2
    HELP = 3
    OVER = 4
    FINISH = 5


class MenuChoice(enum.Enum):
    """What the player picked on the main menu."""

    NEW_GAME = "new_game"
    CONTINUE = "continue"
    HELP = "help"


_MENU_NEW = (BUFFER_W / 4, 380, 3 * BUFFER_W / 4, 440)
_MENU_CONTINUE = (BUFFER_W / 4, 500, 3 * BUFFER_W / 4, 560)
_BACK = (10, 25, 75, 65)
_GIVE_UP_YES = (350, 5, 410, 25)
_GIVE_UP_NO = (430, 5, 480, 25)
_OVER_NEW = (DISP_W / 2.0 - 200, 395, DISP_W / 2.0 + 200, 450)
_OVER_MENU = (DISP_W / 2.0 - 200, 545, DISP_W / 2.0 + 200, 600)

_BUTTON_IDLE = (150, 128, 70)
_BUTTON_HOVER = (120, 76, 0)
_BUTTON_EDGE = (64, 64, 64)
_BACK_COLOUR = (204, 102, 0)


def _inside(x: float, y: float, box) -> bool:
    x0, y0, x1, y1 = box
    return x0 < x < x1 and y0 < y < y1


def _clicked(mouse: Mouse, box) -> bool:
    return _inside(mouse.x_clk, mouse.y_clk, box)


def _reset_click(mouse: Mouse, value: int) -> None:
    mouse.x_clk = value
    mouse.y_clk = value


def _leave_requested(mouse: Mouse, keyboard: Keyboard) -> bool:
    """Handle the back button and ESC; True if the screen should return to the menu."""
    leave = False
    if _clicked(mouse, _BACK):
        _reset_click(mouse, -1)
        leave = True
    if keyboard.pressed(pygame.K_ESCAPE):
        _reset_click(mouse, -1)
        leave = True
    return leave


def menu_choice(mouse: Mouse, keyboard: Keyboard) -> Optional[MenuChoice]:
    """Read the menu buttons and help keys; a clicked button consumes the click."""
    choice: Optional[MenuChoice] = None
    if _clicked(mouse, _MENU_NEW):
        _reset_click(mouse, 0)
        choice = MenuChoice.NEW_GAME
    if _clicked(mouse, _MENU_CONTINUE):
        _reset_click(mouse, 0)
        choice = MenuChoice.CONTINUE
    if keyboard.pressed(pygame.K_h) or keyboard.pressed(pygame.K_F1):
        choice = MenuChoice.HELP
    return choice


def play_tick(game: GameSet, mouse: Mouse, keyboard: Keyboard) -> GameStatus:
    """Run one timer tick of the play screen and return the status to continue with."""
    status = GameStatus.PLAY
    if not game.game_over:
        board_update(game, mouse)
        if game.mission.level % 2 == 0 and not game.give_up:
            if _clicked(mouse, _GIVE_UP_YES):
                game.game_over = True
            if _clicked(mouse, _GIVE_UP_NO):
                game.give_up = True
                game.play(Sound.EASTER)
    else:
        if _clicked(mouse, _OVER_NEW):
            game.game_over = False
            gen_new_board(game)
        if _clicked(mouse, _OVER_MENU):
            _reset_click(mouse, 0)
            status = GameStatus.MENU

    if _leave_requested(mouse, keyboard):
        status = GameStatus.MENU
    return status


def help_tick(mouse: Mouse, keyboard: Keyboard) -> GameStatus:
    """Run one timer tick of the help screen and return the status to continue with."""
    return GameStatus.MENU if _leave_requested(mouse, keyboard) else GameStatus.HELP


def _text(surface, font, text: str, x: float, y: float, centered: bool = True) -> None:
    rendered = font.render(text, True, WHITE)
    left = x - rendered.get_width() / 2 if centered else x
    surface.blit(rendered, (int(left), int(y)))


def _box_rect(box) -> pygame.Rect:
    x0, y0, x1, y1 = box
    return pygame.Rect(int(x0), int(y0), int(x1 - x0), int(y1 - y0))


def _draw_back_button(surface) -> None:
    pygame.draw.rect(surface, _BACK_COLOUR, pygame.Rect(30, 37, 45, 16), border_radius=5)
    pygame.draw.polygon(surface, _BACK_COLOUR, [(10, 45), (35, 25), (35, 65)])


class App:
    """The running game: window, assets, game state and the screen loop."""

    def __init__(self, root=".") -> None:
        self.root = Path(root)
        self.status = GameStatus.LOAD
        self.mouse = Mouse()
        self.keyboard = Keyboard()
        self.display: Optional[Display] = None
        self.assets: Optional[Assets] = None
        self.game: Optional[GameSet] = None
        self._closed = False

    @property
    def _resources(self) -> Path:
        return self.root / "resources"

    @property
    def _score_path(self) -> Path:
        return self._resources / "score" / "score_history.txt"

    @property
    def _mission_path(self) -> Path:
        return self._resources / "mission" / "mission_history.txt"

    @property
    def _board_path(self) -> Path:
        return self._resources / "board" / "board_history.txt"

    def run(self) -> None:
        """Run the screens until the window is closed, then save and shut down."""
        handlers: dict[GameStatus, Callable[[], GameStatus]] = {
            GameStatus.LOAD: self._load,
            GameStatus.MENU: self._menu,
            GameStatus.PLAY: self._play,
            GameStatus.HELP: self._help,
            GameStatus.OVER: self._over,
        }
        try:
            while self.status is not GameStatus.FINISH:
                self.status = handlers[self.status]()
        finally:
            self.close()

    def close(self) -> None:
        """Save score, mission and board, and release the window and sound."""
        if self._closed:
            return
        self._closed = True
        if self.game is not None:
            self.game.score.save(self._score_path)
            self.game.mission.save(self._mission_path)
            save_board(self.game.board, self._board_path)
        pygame.quit()

    def _play_sound(self, sound: Sound) -> None:
        if self.assets is None:
            return
        if sound is Sound.EASTER:
            self.assets.play_easter()
        else:
            self.assets.play(sound)

    def _load(self) -> GameStatus:
        pygame.init()
        self.display = Display()
        self.assets = Assets.load(self.root)
        self.game = GameSet(
            board=load_board(self._board_path),
            score=Score.load(self._score_path),
            mission=Mission.load(self._mission_path),
            sound_player=self._play_sound,
        )
        self.assets.play(Sound.BG_MUSIC)
        pygame.time.set_timer(TIMER_EVENT, int(1000 / FRAMES_N))
        return GameStatus.MENU

    def _over(self) -> GameStatus:
        self.close()
        return GameStatus.FINISH

    def _screen(self, on_timer: Callable[[], Optional[GameStatus]], draw: Callable) -> GameStatus:
        redraw = True
        status: Optional[GameStatus] = None
        while status is None:
            event: Optional[Event] = to_event(pygame.event.wait())
            if event is not None:
                if event.kind is EventKind.TIMER:
                    self.game.stars.update()
                    status = on_timer()
                    redraw = True
                elif event.kind is EventKind.DISPLAY_CLOSE:
                    status = GameStatus.OVER
                if status is not None:
                    break
                self.keyboard.update(event)
                self.mouse.update(event)
            if redraw and not pygame.event.peek():
                draw(self.display.pre_draw())
                self.display.post_draw()
                redraw = False
        self.keyboard.clear()
        return status

    def _menu(self) -> GameStatus:
        game = self.game

        def tick() -> Optional[GameStatus]:
            choice = menu_choice(self.mouse, self.keyboard)
            if choice is MenuChoice.NEW_GAME:
                game.game_over = False
                gen_new_board(game)
                return GameStatus.PLAY
            if choice is MenuChoice.CONTINUE:
                return GameStatus.PLAY
            if choice is MenuChoice.HELP:
                return GameStatus.HELP
            return None

        return self._screen(tick, self._draw_menu)

    def _play(self) -> GameStatus:
        def tick() -> Optional[GameStatus]:
            status = play_tick(self.game, self.mouse, self.keyboard)
            return None if status is GameStatus.PLAY else status

        return self._screen(tick, self._draw_play)

    def _help(self) -> GameStatus:
        def tick() -> Optional[GameStatus]:
            status = help_tick(self.mouse, self.keyboard)
            return None if status is GameStatus.HELP else status

        return self._screen(tick, self._draw_help)

    def _draw_menu_button(self, surface, box, label: str, label_y: int) -> None:
        hover = _inside(self.mouse.x, self.mouse.y, box)
        rect = _box_rect(box)
        pygame.draw.rect(surface, _BUTTON_HOVER if hover else _BUTTON_IDLE, rect, border_radius=20)
        pygame.draw.rect(surface, _BUTTON_EDGE, rect, width=3, border_radius=20)
        _text(surface, self.assets.score_font, label, DISP_W / 2.0, label_y)

    def _draw_menu(self, surface) -> None:
        assets = self.assets
        surface.blit(assets.main_bg, (0, 0))
        draw_stars(surface, self.game.stars)
        self._draw_menu_button(surface, _MENU_NEW, "NEW GAME", 395)
        self._draw_menu_button(surface, _MENU_CONTINUE, "CONTINUE", 515)
        _text(surface, assets.title_font, "ROCK FALL", DISP_W / 2.0, 175)
        _text(surface, assets.help_font, "PRESS H OR F1 FOR HELP", 10, 700, centered=False)

    def _draw_play(self, surface) -> None:
        assets = self.assets
        game = self.game
        surface.blit(assets.main_bg, (0, 0))
        draw_stars(surface, game.stars)
        draw_score(surface, game.score, assets.score_font)
        draw_mission(surface, game.mission, assets.score_font, assets.sprites)
        draw_board(surface, game.board, assets.sprites)
        _draw_back_button(surface)

        if game.game_over:
            overlay = pygame.Surface((DISP_W - 100, DISP_H - 100), pygame.SRCALPHA)
            pygame.draw.rect(overlay, (0, 0, 0, 204), overlay.get_rect(), border_radius=20)
            surface.blit(overlay, (50, 50))
            _text(surface, assets.title_font, "GAME OVER", DISP_W / 2.0, 150)
            _text(surface, assets.score_font, "Parabéns", DISP_W / 2.0, 250)
            _text(surface, assets.help_font, "Esperava mais de voce...", DISP_W / 2.0, 300)
            _text(surface, assets.score_font, "NEW GAME", DISP_W / 2.0, 410)
            _text(surface, assets.score_font, "MENU", DISP_W / 2.0, 560)
            for top, bottom in ((395, 450), (545, 600)):
                rect = _box_rect((DISP_W / 2.0 - 170, top, DISP_W / 2.0 + 170, bottom))
                pygame.draw.rect(surface, WHITE, rect, width=3, border_radius=20)

        if game.mission.level % 2 == 0 and not game.give_up:
            _text(surface, assets.help_font, "give up? [ yes / no ]", DISP_W / 2.0, 5)

    def _draw_help(self, surface) -> None:
        assets = self.assets
        font = assets.help_font
        surface.blit(assets.help_bg, (0, 0))
        draw_stars(surface, self.game.stars)
        _draw_back_button(surface)
        _text(surface, assets.title_font, "HELP", DISP_W / 2.0, 30)
        _text(surface, font, "HOW TO PLAY: Click and drag the rocks to make sequences", 10, 100, centered=False)
        _text(surface, font, "MISSIONS: Destroy rocks with the same collor that", 10, 300, centered=False)
        _text(surface, font, "appears over the board", 140, 330, centered=False)
        _text(surface, font, "SPECIALS: Sequences of 5 or more rocks", 10, 490, centered=False)


def main(argv=None) -> int:
    """Start the game; return the process exit status."""
    parser = argparse.ArgumentParser(prog="rockfall", description="A falling-rocks match-three game.")
    parser.add_argument(
        "--root",
        default=".",
        help="directory that holds the resources folder (default: current directory)",
    )
    args = parser.parse_args(argv)
    try:
        App(args.root).run()
    except InitError as exc:
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())