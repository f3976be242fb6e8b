"""Actor that runs a script proc or script address after a number of frames."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Protocol

from .actors import ActorSystem, Actor

DELAY_LEVEL = 6
DELAY_SOURCE = "C:\\mgs\\source\\Game\\delay.c"
MAX_DELAY_ARGS = 8
PROC_ID_LIMIT = 0xFFFF


class ScriptRunner(Protocol):
    """What a delay needs from the script engine."""

    suspended: bool

    def run_proc(self, proc_id: int, args: tuple[int, ...]) -> Any: ...

    def run_script(self, address: int, args: tuple[int, ...]) -> Any: ...

    def execute(self, address: Any) -> int: ...


class DelayActor(Actor):
    """Counts frames down, then runs its target once and destroys itself.

    A negative tick count makes the delay keep counting while scripts are
    suspended; otherwise a suspended script engine cancels the delay.
    """

    def __init__(
        self,
        target: int,
        args: Optional[Iterable[int]],
        ticks: int,
        runner: ScriptRunner,
    ) -> None:
        super().__init__()
        arguments = tuple(args) if args is not None else ()
        if len(arguments) > MAX_DELAY_ARGS:
            raise ValueError(
                f"a delay holds at most {MAX_DELAY_ARGS} arguments, got {len(arguments)}"
            )
        self.target = target & 0xFFFFFFFF
        self.args = arguments
        self.runner = runner
        self.active = ticks < 0
        self.counter = -ticks if ticks < 0 else ticks
        self.init(DelayActor.update, None, DELAY_SOURCE)

    def update(self) -> None:
        """Advance the countdown by one frame."""
        if self.active or not getattr(self.runner, "suspended", False):
            self.counter -= 1
            if self.counter > 0:
                return
            if self.target <= PROC_ID_LIMIT:
                self.runner.run_proc(self.target, self.args)
            else:
                self.runner.run_script(self.target, self.args)
        self.destroy_on_next_update()


def spawn_delay(
    system: ActorSystem,
    target: int,
    args: Optional[Iterable[int]],
    ticks: int,
    runner: ScriptRunner,
) -> DelayActor:
    """Create a delay actor and add it to the delay level of the system."""
    delay = DelayActor(target, args, ticks, runner)
    system.push_back(DELAY_LEVEL, delay, None)
    delay.init(DelayActor.update, None, DELAY_SOURCE)
    return delay


def delay_command(
    system: ActorSystem,
    params: Mapping[str, Any],
    runner: ScriptRunner,
) -> Optional[DelayActor]:
    """The script 'delay' command.

    Parameters: 't' frame count, 'p' proc id or address, 'e' a script whose
    result becomes the target, 'g' keep counting while scripts are suspended.
    Returns the new delay, or None when the count or the target is zero.
    """
    ticks = int(params["t"]) if "t" in params else 0
    target = int(params["p"]) if "p" in params else 0
    if "e" in params:
        target = int(runner.execute(params["e"]))
    if "g" in params:
        ticks = -ticks
    if ticks and target:
        return spawn_delay(system, target, None, ticks, runner)
    return None