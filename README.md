# foxengine

Core engine pieces for a stage-based action game. They are used as a
library, and the package needs nothing beyond the standard library.

## Modules

- **`foxengine.actors`**: the actor system.
  - `ActorSystem` keeps nine `ActorLevel`s of `Actor` objects. Each level
    has a pause mask and a kill level.
  - `update()` runs the update callback of every actor in each level that
    `pause_flags` does not pause.
  - `kill_actors_at_level()` marks actors for destruction.
    `Actor.destroy_on_next_update()` makes an actor remove itself the next
    time it updates. `destroy()` unlinks an actor at once.
  - `remove()` marks a given actor.
  - `set_kill_pause()` changes the values of one level.
  - `actors()` lists the actors of a level.
  - `dump()` returns a text report of the levels and the actors that are
    updating.
- **`foxengine.delay`**: `DelayActor`, `spawn_delay()` and
  `delay_command()`. These run a script proc id, or a script address,
  after a number of frames. The script engine is supplied by the caller.
  It is any object with `suspended`, `run_proc()`, `run_script()` and
  `execute()`.
- **`foxengine.gcl`**: a disassembler for compiled GCL script byte code.
  - `disassemble_proc()` returns the statements of one proc as text, one
    per line.
  - `disassemble_expression()` returns the text of one expression item and
    the offset after it.
  - `read_word()` and `read_dword()` read big-endian values.
  - Byte code that cannot be walked raises `GclError`.
- **`foxengine.fs`**: `StageFileSystem` serves requests for files under
  `<root>/stage/<stage>/`. The path comes from `to_full_stage_path()`.
  - `load_request()` sizes a file and returns a `LoadedFile` that is
    pending.
  - `read_pending()` reads the pending file in.
  - `FileLoadMode` names the cache, no-cache, resident and sound modes.
- **`foxengine.loader`**: stage loading.
  - `StageLoader` walks a `data.cnf` listing one `step()` at a time, or to
    the end with `run()`. It hands every file, and every entry of a DAR
    archive, to a `load_file(data, name_hash, mode)` callback.
  - `iter_dar_entries()` yields `DarEntry` items from a DAR archive.
  - `HiTexRegistry` holds the names from a `hitex.dir` listing and tracks
    which high-resolution textures are in use.
  - `get_line()`, `count_non_dot_lines()` and `is_extension()` are the
    line and name helpers.
- **`foxengine.rank_screen`**: `render_completion_screen()` lays out the
  game completion screen as a list of `TextCommand`s built from
  `RankStats`. `capped_digits()` splits a counter capped at 999 into its
  digits.
- **`foxengine.rank`**: `RankActor` cycles the four completion screen
  layouts, moves through its `RankState` phases and runs an end proc. The
  module also has the `PolyFT4` primitive with `set_code2()` and
  `init_poly()`.

## Examples

```python
from foxengine.actors import Actor, ActorSystem

system = ActorSystem()
calls = []
actor = Actor()
system.push_back(0, actor, None)
actor.init(lambda a: calls.append(a.name), None, "demo")
system.update()
assert calls == ["demo"]
```

```python
from foxengine.gcl import disassemble_proc
from foxengine.loader import get_line, is_extension

assert disassemble_proc(bytes([0x40, 0x00, 0x22, 0x00])) == "JUMP_BY(0x22)\nEND\n"
assert get_line("Line1\r\r\n\nLine2") == ("Line1", "\r\n\nLine2")
assert is_extension("blah.dar", "dar")
assert not is_extension(".DAR", "dar")
```

## What it does not do

- There is no command-line tool, game loop or window.
- `TextCommand`s and `PolyFT4`s are plain data. Nothing here draws them.
- GCL byte code is disassembled, not run. Delays and the rank screen call
  a script engine that you supply.
- The hash used for file and texture names is a callable that you pass
  in. None is built in.

## Requirements

Python 3.10 or later. For the tests, install the `test` extra (pytest).