# rockfall

A match-three puzzle game on an eight by eight board of rocks. Drag a rock
onto a neighbouring rock to swap the two. A swap that lines up three or more
rocks of one colour clears them, and the rocks above fall into the space. A
swap that makes no line slides back.

## Rules

- **Lines** of three or more rocks in a row or column score 100 points per
  rock, multiplied by the current level.
- **L and T shapes** of five rocks score 500 points times the level, and the
  rock where the arms meet becomes a special rock. When a special rock is
  cleared later, it destroys the rocks around it (800 bonus points).
- **Five in a line** turns the middle rock into a cross special. When it is
  cleared, it destroys its whole row and its whole column (1500 bonus points).
- **Missions**: the top of the screen shows one rock colour and a counter.
  Destroy enough rocks of that colour to go up a level. Each level needs one
  more rock than the level before.
- On even levels a `give up? [ yes / no ]` prompt appears at the top. *yes*
  ends the game; *no* hides the prompt and swaps the music for another tune.
- The game ends when no swap can make a line.

Your score, your record, the mission and the board are saved when the window
is closed. Choose **CONTINUE** on the menu to carry on from where you stopped,
or **NEW GAME** to start again.

## Installing and running

```
pip install .
rockfall
```

The game loads its images, sounds and fonts from a `resources/` directory and
writes its saved state to `resources/score/`, `resources/mission/` and
`resources/board/`. By default it looks in the current directory; point it
elsewhere with `--root`:

```
rockfall --root /path/to/game
```

The command exits with status 1 and a message if a resource cannot be loaded.

## What is not included

The package holds no images, sounds or fonts. `rockfall` needs a `resources/`
directory with `background/rock_bg.png`, `background/help_bg.png`,
`fonts/half_bold_pixel-7.ttf`, the rock sprites under `sprites/rocks/`
(`rock1.png`–`rock6.png`, `special11.png`–`special16.png`,
`special21.png`–`special26.png`) and the sounds under `sound/`
(`Haggstrom.opus`, `rock_fall.wav`, `special_explosion1.wav`,
`special_explosion2.wav`, `level_up_sound.wav`, `giveup.opus`).

## Controls

| Input                 | Effect                                  |
|-----------------------|-----------------------------------------|
| Mouse drag            | Swap two neighbouring rocks             |
| `H` or `F1` (menu)    | Open the help screen                    |
| `Esc` or back arrow   | Return to the menu                      |
| Close the window      | Save the game and quit                  |

## Using it as a library

The game logic in `rockfall.model`, `rockfall.matching` and `rockfall.board`
does not draw or play anything, so you can drive it from your own code:

```python
from rockfall.model import GameSet
from rockfall.board import gen_new_board
from rockfall.matching import board_check, board_game_over

game = GameSet()
gen_new_board(game)
print(board_check(game.board), board_game_over(game.board))
```

Sounds the logic asks for are passed to `GameSet.sound_player`, a callable
that receives a `rockfall.model.Sound`; leave it as `None` for silence.

## Development

```
pip install ".[test]"
pytest
```