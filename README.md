# inkrt

Building blocks for the runtime of stories written in the ink narrative
scripting language. The package has no dependencies outside the standard
library.

## Modules

- `inkrt.value`: `Value`, an immutable tagged value (`ValueType` plus a
  payload), and `StringValue` for strings that are either allocated at run
  time or live in a story's string table. A `Value` knows whether it is
  `printable()`, how it evaluates as a condition (`truthy()`), what a
  variable holding it becomes when assigned another value (`redefine()`), and
  how to write itself to and read itself from bytes (`snap()` /
  `Value.snap_load()`). `Value.from_python()` and `to_python()` convert
  to and from plain Python objects. Unsupported operations raise
  `InkValueError`.
- `inkrt.restorable_stack`: `RestorableStack`, a stack with one save point.
  After `save()`, pushes jump over the saved region so that `restore()` can
  go back to the saved state, while `forget()` keeps the current one.
  Iterating yields values from top to bottom, `reversed()` from bottom to
  top. An optional capacity makes overfull pushes raise `OverflowError`.
- `inkrt.string_table`: `StringTable`, the strings created while a story runs,
  each with a "used" mark; `clear_usage()`, `mark_used()` and `gc()` drop the
  unused ones. `snap()` / `snap_load()` serialise the table, and
  `snap_tag()` / `load_tag()` serialise a tag as a reference into it.
- `inkrt.string_operations`: `add`, `is_equal`, `not_equal`, `has` and
  `hasnt` on string operands (numbers are turned into text first), plus
  `contains_text` for the underlying substring test.
- `inkrt.string_utils`: `to_str` and `format_float` for number text,
  `decimal_digits` and `value_length` for length bounds, `str_equal` and
  `str_equal_len`, and `clean_string` to collapse runs of whitespace and
  blank lines.
- `inkrt.snapshot`: `Snapshot`, the binary container that holds one globals
  section and one section per runner, with `from_parts`, `from_binary`,
  `from_file` and `write_to_file`. Malformed data raises `SnapshotError`.
- `inkrt.hashing`: `hash_string`, the 32-bit hash used for variable names and
  story paths.
- `inkrt.inklecate`: `run_inklecate` and `build_command` to start the external
  `inklecate` compiler, and `parse_expectations` / `is_ignored` to read the
  `/** ... **/` expected-output blocks of `.ink` test files into
  `Expectation` records. A failed compile raises `InklecateError`.

## Install

```
pip install .
```

## Examples

Strings and values:

```python
from inkrt.value import Value
from inkrt.string_table import StringTable
from inkrt import string_operations

strings = StringTable()
joined = string_operations.add(Value.from_python("Score: "), Value.from_python(42), strings)
print(joined)                       # Score: 42
print(string_operations.has(joined, Value.from_python("42")).to_python())  # True
```

Saving and restoring a stack:

```python
from inkrt.restorable_stack import RestorableStack

stack = RestorableStack(null=0, capacity=8)
stack.push(1)
stack.save()
stack.push(2)
stack.restore()
assert list(stack) == [1]
```

Serialising an allocated string value together with its string table:

```python
from inkrt.string_table import StringTable
from inkrt.value import Value, ValueType

table = StringTable()
table.create("hello")
blob = Value(ValueType.STRING, "hello").snap(table.get_id)

loaded_strings, _ = StringTable().snap_load(table.snap(), 0)
value, _ = Value.snap_load(blob, 0, loaded_strings)
assert value.to_python() == "hello"
```

Snapshots:

```python
from inkrt.snapshot import Snapshot

snap = Snapshot.from_parts(b"globals", [b"runner-0"])
snap.write_to_file("story.snap")
again = Snapshot.from_file("story.snap")
assert again.num_runners() == 1
assert again.runner_snap(0) == b"runner-0"
```

Whitespace cleanup:

```python
from inkrt.string_utils import clean_string

assert clean_string("  a  b") == "a b"
```

Compiling an `.ink` file needs the `inklecate` compiler on the `PATH`, its
command in the `INKLECATE` environment variable, or the `command` argument:

```python
from inkrt.inklecate import parse_expectations, run_inklecate

run_inklecate("story.ink", "story.json")
with open("story.ink", encoding="utf-8") as f:
    for expectation in parse_expectations(f.read()):
        print(expectation.output, expectation.choice)
```

## What the package does not do

inkrt holds parts of a runtime, not a whole one. It does not load compiled
stories, run them, present choices or keep global variables; it has no
call stack or evaluation stack with frames and threads, no random number
generator, and no command-line player. It does not turn ink JSON into any
binary story format, and compiling `.ink` sources relies on the external
`inklecate` program.

## Tests

```
pip install .[test]
pytest
```