"""Rank actor shown when the game is completed, and its polygon helpers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any, Protocol

from .actors import Actor
from .rank_screen import RankStats, TextCommand, render_completion_screen

RANK_LEVEL = 1
RANK_SOURCE = "C:\\mgs\\source\\Onoda\\rank\\rank.c"
PAGE_TICKS = 60
PAGE_COUNT = 4
CODE2 = 0x02
POLY_TAG = 0x9000000
POLY_CODE = 44
POLY_SHADE = 64
NO_PROC = 0xFFFF


class ProcRunner(Protocol):
    """What the rank screen needs from the script engine."""

    def run_proc(self, proc_id: int, args: tuple[int, ...]) -> Any: ...


@dataclass
class PolyFT4:
    """A flat-shaded textured quad primitive."""

    tag: int = 0
    code: int = 0
    r0: int = 0
    g0: int = 0
    b0: int = 0
    x0: int = 0
    y0: int = 0
    x1: int = 0
    y1: int = 0
    x2: int = 0
    y2: int = 0
    x3: int = 0
    y3: int = 0


def set_code2(poly: PolyFT4, enabled: bool) -> PolyFT4:
    """Set or clear bit 1 (value 2) of the primitive's code byte."""
    if enabled:
        poly.code = (poly.code | CODE2) & 0xFF
    else:
        poly.code = poly.code & ~CODE2 & 0xFF
    return poly


def init_poly(
    poly: PolyFT4,
    x0: int,
    y0: int,
    x1: int,
    y2: int,
    enable_code2: bool,
) -> PolyFT4:
    """Make poly a grey axis-aligned quad spanning (x0, y0) to (x1, y2)."""
    poly.tag = (poly.tag & 0xFFFFFF) | POLY_TAG
    poly.code = POLY_CODE
    poly.r0 = poly.g0 = poly.b0 = POLY_SHADE
    poly.x0, poly.y0 = x0, y0
    poly.x1, poly.y1 = x1, y0
    poly.x2, poly.y2 = x0, y2
    poly.x3, poly.y3 = x1, y2
    return set_code2(poly, enable_code2)


class RankState(IntEnum):
    """The phases of the rank screen."""

    ANIMATE = 0
    SHOW_SCORES = 1
    RANK_NAME = 2
    SAVE = 3
    END = 4


class RankActor(Actor):
    """Cycles the completion screen pages and ends by running a script proc.

    The page layout (mc_no) advances every PAGE_TICKS frames, wrapping
    after the fourth layout.
    """

    def __init__(
        self,
        stats: RankStats,
        game_time_hours: int,
        game_time_seconds: int,
        runner: ProcRunner,
    ) -> None:
        super().__init__()
        if game_time_hours < 0 or game_time_seconds < 0:
            raise ValueError("game time must not be negative")
        minutes, seconds = divmod(game_time_seconds, 60)
        self.stats = replace(
            stats, hours=game_time_hours, minutes=minutes, seconds=seconds
        )
        self.runner = runner
        self.ticks = 0
        self.state = RankState.ANIMATE
        self.mc_no = 0
        self.radar = False
        self.stealth = False
        self.ranking_x_offset = 0
        self.end_proc = NO_PROC
        self.text: list[TextCommand] = []
        self.background = [
            init_poly(PolyFT4(), -160, -112, 0, 112, False),
            init_poly(PolyFT4(), 0, -112, 160, 112, False),
        ]
        self.init(RankActor.update, None, RANK_SOURCE)

    def update(self) -> list[TextCommand]:
        """Advance one frame; returns the text drawn this frame."""
        if self.ticks % PAGE_TICKS == 0:
            self.mc_no += 1
            if self.mc_no >= PAGE_COUNT:
                self.mc_no = 0

        if self.state is RankState.SHOW_SCORES:
            self.text = render_completion_screen(
                self.stats, self.mc_no, self.radar, self.stealth, self.ranking_x_offset
            )
        else:
            self.text = []
            if self.state is RankState.END:
                self.end()
        self.ticks += 1
        return self.text

    def advance_if_ready(self, ready: bool) -> bool:
        """Move on to the rank name phase when ready; True if it moved."""
        if not ready:
            return False
        self.state = RankState.RANK_NAME
        self.ticks = 0
        return True

    def end(self) -> None:
        """Run the end proc and destroy the actor on its next update."""
        self.runner.run_proc(self.end_proc & 0xFFFF, ())
        self.destroy_on_next_update()