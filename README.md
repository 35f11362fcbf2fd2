# memedit

memedit scans and edits the memory of Linux processes. It finds values in
another process's memory and narrows the matches as those values change. It
can also write new values back, and it can keep chosen addresses locked to a
value.

memedit reads the target's regions from `/proc/<pid>/maps`. It reads and
writes the target's memory through `/proc/<pid>/mem`. For this, the target
must allow access to its memory. In practice you run as the same user as the
target, and ptrace access to it must be permitted.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Command line

```
memedit <pid>
```

This prints `Med CLI` and then a `> ` prompt. Each input line is split on
spaces:

- `s <value>` scans the process for `<value>`, read as `int32`, and prints
  `Scanned N`.
- `f <value>` filters the current matches with `<value>`, read as `int32`,
  and prints `Filtered N`.
- Any other input lists the current matches. Each line shows the address,
  the raw bytes in hex, and the current value.

The command uses only the first word after `s` or `f`. Use a value without
spaces, for example `f 90`. A bare operator also works: `f >` keeps the
matches whose value grew since the last scan or filter. Errors are printed
to standard error, and the prompt carries on. End of input (Ctrl-D) quits.

## Scan expressions

A scan value may begin with an operator:

| Operator | Meaning |
|---|---|
| `=` | equal (the default when no operator is given) |
| `!` | not equal |
| `>`, `<`, `>=`, `<=` | greater than, less than, and their inclusive forms (unsigned comparison) |
| `<> low high` | within the inclusive range |
| `~ value [delta]` | between `value - delta` and `value + delta`; `delta` defaults to 1 |
| `?` | save a snapshot to compare against in later filters |

A value may be decimal, or hexadecimal with a `0x` prefix.

Commas join sub-commands into one pattern that is matched over consecutive
bytes. Each sub-command may carry a type prefix:

- `i8:`, `i16:`, `i32:`, `i64:` for integers.
- `f32:`, `f64:` for floats.
- `s:'text'` for a string.
- `w:n` to skip `n` bytes.

A sub-command without a prefix uses the scan type you passed in. The type
`custom` falls back to `int32`. For example:

```
s:'HP', w:2, i16:100
```

In a filter, the operators `=`, `!`, `>` and `<` can be given without a
value. Each remaining match is then compared with the value it had at the
last scan or filter. If a snapshot was saved with `?`, the comparison is
made against that snapshot instead.

## Library use

`memedit.memed.MemEd` is the main entry point:

```python
from memedit.memed import MemEd

with MemEd(pid=1234) as med:
    matches = med.scan("100", "int32")
    matches = med.filter("> 90", "int32")
    sem = med.add_to_store_by_index(0)
    sem.description = "health"
    sem.lock()
    med.save_file("cheats.json")
```

`MemEd` provides these operations:

- `scan` and `filter` find matches and narrow them down. `scans()` returns
  the active matches as a `MemList`.
- Named result lists are kept in `named_scans`, a
  `memedit.namedscans.NamedScans`.
- The store is a list of watched addresses. Fill it with
  `add_to_store_by_index` or `add_new_address`, and access it as `store`.
- `save_file` writes the store and `notes` as JSON. `open_file` loads them
  back. Locks are never restored on load.
- A background thread rewrites the value of every locked entry about every
  0.8 seconds. `close()`, or leaving the `with` block, stops it.
- `set_scope_start` and `set_scope_end` limit scans to an address range.
- `pause_process` and `resume_process` stop and continue the target.
- `list_processes` and `select_process_by_index` choose the target from
  `/proc`.
- `read_memory` and `set_value_by_address` read and write memory directly.

If you give no pid, `MemEd` works on an in-process
`memedit.memory.LocalMemory`. This is a set of byte regions that you add
with `add_region`. It is useful for tests and experiments.

The lower-level modules can also be used on their own:

- `memedit.scanparser` and `memedit.scancommand` parse scan expressions.
- `memedit.memoperator` compares byte strings as little-endian unsigned
  values and formats them as text.
- `memedit.memscanner.MemScanner` does the scanning, filtering and
  snapshots.
- `memedit.memory` holds the memory blocks and the reader/writer:
  - `Mem`, `Pem` and `Sem` are the memory blocks.
  - `MemIO` reads and writes the memory.
- `memedit.maps.Maps` holds address regions. `memedit.common.parse_maps`
  reads them from maps-file text.
- `memedit.threadmanager.ThreadManager` runs queued tasks, with a limit on
  how many run at once.
- `memedit.coder` converts bytes between character encodings, for example
  with `convert_big5_to_utf8`.

## What it does not do

memedit has no graphical interface. The command line handles only `int32`
scans, filters and listing. The store, locking, scopes, snapshots, JSON
files and process selection are available only through the library.