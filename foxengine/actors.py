"""Levelled actor lists that are driven once per frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

ActorCallback = Callable[["Actor"], None]

# (pause mask, kill level) for each of the actor levels, in order.
PAUSE_KILLS: tuple[tuple[int, int], ...] = (
    (0, 7),
    (0, 7),
    (9, 4),
    (9, 4),
    (15, 4),
    (15, 4),
    (15, 4),
    (9, 4),
    (0, 7),
)
LEVEL_COUNT = len(PAUSE_KILLS)


class Actor:
    """An object that takes part in the per-frame update of an ActorSystem."""

    def __init__(self) -> None:
        self.on_update: Optional[ActorCallback] = None
        self.on_shutdown: Optional[ActorCallback] = None
        self.on_free: Optional[ActorCallback] = None
        self.name: Optional[str] = None
        self.profile_used = 0
        self.profile_total = 0
        self._level: Optional[ActorLevel] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def init(
        self,
        update: Optional[ActorCallback],
        shutdown: Optional[ActorCallback],
        name: Optional[str],
    ) -> "Actor":
        """Set the update and shutdown callbacks and the actor's name."""
        self.on_update = update
        self.on_shutdown = shutdown
        self.name = name
        self.profile_used = 0
        self.profile_total = 0
        return self

    def destroy_on_next_update(self) -> None:
        """Arrange for the actor to be destroyed the next time it is updated."""
        self.on_update = _destroy


@dataclass(eq=False)
class ActorLevel:
    """One level of actors with its pause mask and kill level."""

    pause: int
    kill: int
    actors: list[Actor] = field(default_factory=list)


def _destroy(actor: Optional[Actor]) -> None:
    if actor is None:
        return
    level = actor._level
    if level is not None:
        level.actors.remove(actor)
        actor._level = None
    if actor.on_shutdown is not None:
        actor.on_shutdown(actor)
    if actor.on_free is not None:
        actor.on_free(actor)


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def _describe(callback: ActorCallback) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


class ActorSystem:
    """All actor levels, updated in level order."""

    def __init__(self) -> None:
        self.levels: list[ActorLevel] = []
        self.pause_flags = 0
        self.reset()

    def reset(self) -> None:
        """Empty every level and restore the default pause and kill values."""
        for level in self.levels:
            for actor in level.actors:
                actor._level = None
        self.levels = [ActorLevel(pause, kill) for pause, kill in PAUSE_KILLS]
        self.pause_flags = 0

    def _iterate(
        self,
        enter: Callable[[ActorLevel], bool],
        visit: Callable[[Actor], bool],
    ) -> bool:
        """Visit actors of entered levels; True if a visit asked to stop."""
        for level in self.levels:
            if not enter(level):
                continue
            for actor in list(level.actors):
                if actor._level is not level:
                    continue
                if not visit(actor):
                    return True
        return False

    def push_back(self, level: int, actor: Actor, free: Optional[ActorCallback]) -> Actor:
        """Append an actor to a level, clearing its callbacks."""
        if actor._level is not None:
            raise ValueError(f"{actor!r} is already in an actor list")
        target = self.levels[level]
        target.actors.append(actor)
        actor._level = target
        actor.on_shutdown = None
        actor.on_update = None
        actor.on_free = free
        return actor

    def destroy(self, actor: Optional[Actor]) -> None:
        """Unlink an actor now, then run its shutdown and free callbacks."""
        _destroy(actor)

    def kill_actors_at_level(self, kill_level: int) -> None:
        """Mark every live actor of levels whose kill value is at most kill_level."""

        def visit(actor: Actor) -> bool:
            if actor.on_update is not None or actor.on_shutdown is not None:
                actor.destroy_on_next_update()
            return True

        self._iterate(lambda level: level.kill <= kill_level, visit)

    def update(self) -> None:
        """Run the update callback of every actor in levels that are not paused."""

        def visit(actor: Actor) -> bool:
            if actor.on_update is not None:
                actor.on_update(actor)
            return True

        self._iterate(lambda level: not (self.pause_flags & level.pause), visit)

    def set_kill_pause(self, index: int, pause: int, kill: int) -> ActorLevel:
        """Change the pause mask and kill level of one level."""
        level = self.levels[index]
        level.pause = pause
        level.kill = kill
        return level

    def remove(self, actor: Actor) -> bool:
        """Mark an actor for destruction; False (and a '#' on stdout) if not found."""

        def visit(candidate: Actor) -> bool:
            if candidate is actor:
                candidate.destroy_on_next_update()
                return False
            return True

        found = self._iterate(lambda level: True, visit)
        if not found:
            print("#", end="")
        return found

    def dump(self) -> str:
        """Describe every level and updating actor, resetting profile counters."""
        lines = ["--DumpActorSystem--"]
        for number, level in enumerate(self.levels, 1):
            lines.append(f"Lv {number} Pause {level.pause} Kill {level.kill}")
            for actor in list(level.actors):
                if actor.on_update is None:
                    continue
                if actor.profile_total > 0:
                    percent = _trunc_div(100 * actor.profile_used, actor.profile_total)
                else:
                    percent = 0
                whole = _trunc_div(percent, 100)
                fraction = percent - whole * 100
                lines.append(
                    f"Lv{number} {whole:04d}.{fraction:02d} "
                    f"{_describe(actor.on_update)} {actor.name or ''}"
                )
                actor.profile_total = 0
                actor.profile_used = 0
        return "\n".join(lines) + "\n"

    def actors(self, level: int) -> tuple[Actor, ...]:
        """The actors of one level, in update order."""
        return tuple(self.levels[level].actors)