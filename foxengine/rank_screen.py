"""Text layout of the game completion (rank) screen."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

Color = tuple[int, int, int]

LABEL_COLOR: Color = (82, 140, 123)
VALUE_COLOR: Color = (140, 181, 181)

FLAG_RIGHT_ALIGN = 0x01
FLAG_CENTER_ALIGN = 0x02
FLAG_LARGE_FONT = 0x10

LABEL_FLAGS = FLAG_LARGE_FONT | FLAG_RIGHT_ALIGN
VALUE_FLAGS = FLAG_LARGE_FONT

MAX_COUNTER = 999
MAX_HOURS = 99

DIFFICULTY_NAMES: dict[int, str] = {
    -1: "VERY EASY",
    0: "EASY",
    1: "NORMAL",
    2: "HARD",
    3: "EXTREME",
}

# Row positions for each of the four page layouts (mc_no 0..3).
_PLAY_TIME_ROWS = (60, 57, 53, 47)
_SAVE_ROWS = (74, 68, 64, 58)
_CONTINUE_ROWS = (88, 79, 75, 69)
_FOUND_ROWS = (102, 90, 86, 80)
_KILLED_ROWS = (116, 101, 97, 91)
_RATION_ROWS = (130, 112, 108, 102)

# x positions of the play time digits and separators.
_PLAY_TIME_COLUMNS = (172, 181, 193, 199, 208, 220, 226, 235)


@dataclass(frozen=True)
class TextCommand:
    """One piece of text drawn at a position with given flags and colour."""

    x: int
    y: int
    flags: int
    color: Color
    text: str
    value: Optional[int] = None

    @property
    def rendered(self) -> str:
        """The text with its value substituted."""
        if self.value is None:
            return self.text
        return self.text % self.value


@dataclass
class RankStats:
    """Play statistics shown on the completion screen."""

    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    saves: int = 5
    continues: int = 20
    times_spotted: int = 30
    enemies_killed: int = 40
    rations: int = 18
    difficulty: int = -1


def capped_digits(value: int) -> tuple[int, int, int]:
    """Hundreds, tens and ones of a counter capped at 999."""
    if value < 0:
        raise ValueError(f"counter must not be negative, got {value}")
    capped = min(value, MAX_COUNTER)
    return capped // 100, capped % 100 // 10, capped % 10


def _label(x: int, y: int, text: str, flags: int = LABEL_FLAGS) -> TextCommand:
    return TextCommand(x, y, flags, LABEL_COLOR, text)


def _value(x: int, y: int, text: str, value: Optional[int] = None) -> TextCommand:
    return TextCommand(x, y, VALUE_FLAGS, VALUE_COLOR, text, value)


def _play_time(stats: RankStats, y: int) -> list[TextCommand]:
    hours, minutes, seconds = stats.hours, stats.minutes, stats.seconds
    if hours >= 100:
        hours, minutes, seconds = MAX_HOURS, 59, 59
    pieces: list[tuple[str, Optional[int]]] = [
        ("%d", hours // 10),
        ("%d", hours % 10),
        (":", None),
        ("%d", minutes // 10),
        ("%d", minutes % 10),
        (":", None),
        ("%d", seconds // 10),
        ("%d", seconds % 10),
    ]
    commands = [_label(164, y, "PLAY TIME /")]
    commands.extend(
        _value(x, y, text, value)
        for x, (text, value) in zip(_PLAY_TIME_COLUMNS, pieces)
    )
    return commands


def _counter(y: int, label: str, value: int, suffix: str) -> list[TextCommand]:
    hundreds, tens, ones = capped_digits(value)
    commands = [_label(164, y, label)]
    if hundreds:
        commands.append(_value(172, y, "%d", hundreds))
    if tens or hundreds:
        commands.append(_value(181, y, "%d", tens))
    commands.append(_value(190, y, "%d", ones))
    commands.append(_label(214, y, suffix, VALUE_FLAGS))
    return commands


def _game_level(y: int, difficulty: int) -> list[TextCommand]:
    commands = [_label(164, y, "GAME LEVEL /")]
    name = DIFFICULTY_NAMES.get(difficulty)
    if name is not None:
        commands.append(_value(172, y, name))
    return commands


def _used_item(y: int, item: str) -> list[TextCommand]:
    return [_label(164, y, "USED ITEM /"), _value(172, y, item)]


def _used_items(y: int, second_y: int) -> list[TextCommand]:
    return [
        _label(164, y, "USED ITEMS /"),
        _value(172, y, "STEALTH"),
        _value(172, second_y, "BANDANA"),
    ]


def render_completion_screen(
    stats: RankStats,
    mc_no: int,
    radar: bool,
    stealth: bool,
    ranking_x_offset: int,
) -> list[TextCommand]:
    """Lay out the completion screen text for page layout mc_no (0 to 3)."""
    if mc_no not in range(4):
        raise ValueError(f"page layout must be 0 to 3, got {mc_no}")
    for name in ("hours", "minutes", "seconds"):
        if getattr(stats, name) < 0:
            raise ValueError(f"{name} must not be negative")

    commands = _play_time(stats, _PLAY_TIME_ROWS[mc_no])
    commands += _counter(_SAVE_ROWS[mc_no], "SAVE /", stats.saves, "TIMES")
    commands += _counter(_CONTINUE_ROWS[mc_no], "CONTINUE /", stats.continues, "TIMES")
    commands += _counter(_FOUND_ROWS[mc_no], "BEING FOUND /", stats.times_spotted, "TIMES")
    commands += _counter(_KILLED_ROWS[mc_no], "ENEMIES /", stats.enemies_killed, "KILLED")
    commands += _counter(_RATION_ROWS[mc_no], "RATIONS /", stats.rations, "USED")

    if mc_no == 1:
        if radar:
            commands += _game_level(46, stats.difficulty)
        else:
            commands += _used_item(112, "STEALTH" if stealth else "BANDANA")
    elif mc_no == 2:
        if radar:
            commands += _game_level(42, stats.difficulty)
            commands += _used_item(119, "STEALTH" if stealth else "BANDANA")
        else:
            commands += _used_items(108, 119)
    elif mc_no == 3:
        commands += _game_level(36, stats.difficulty)
        commands += _used_items(113, 124)

    commands.append(_label(115 - ranking_x_offset, 143, "CODE NAME", VALUE_FLAGS))
    if stats.difficulty != -1:
        commands.append(_label(107, 163, "SPECIAL ITEMS", VALUE_FLAGS))
    return commands