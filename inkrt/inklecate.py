"""Running the inklecate compiler and reading expectations embedded in ink files."""

from __future__ import annotations

import os
import re
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike

DEFAULT_COMMAND = "inklecate"
ENVIRONMENT_VARIABLE = "INKLECATE"
IGNORE_MARKER = "//IGNORE"

_EXPECTATION = re.compile(r"/\*\*[ \t]*((\d+)(:.+)?)?[ \t]*\n([\s\S]*?)\*\*/")


class InklecateError(RuntimeError):
    """Raised when inklecate cannot be started or reports a failure."""


@dataclass(frozen=True)
class Expectation:
    """Output expected from a story up to a choice point.

    ``choice`` is the index to pick afterwards (None when the story should
    end), ``choice_text`` the text that choice must show ("" for any).
    """

    output: str
    choice: int | None = None
    choice_text: str = ""


def build_command(
    ink_path: str | PathLike[str],
    json_path: str | PathLike[str],
    command: str | Sequence[str] | None = None,
) -> list[str]:
    """Return the argument list compiling ``ink_path`` into ``json_path``.

    The compiler is ``command`` if given, else the ``INKLECATE`` environment
    variable, else ``inklecate`` found on the search path.
    """
    if command is None:
        command = os.environ.get(ENVIRONMENT_VARIABLE) or DEFAULT_COMMAND
    program = shlex.split(command) if isinstance(command, str) else [str(part) for part in command]
    if not program:
        raise InklecateError("empty inklecate command")
    return [*program, "-o", os.fspath(json_path), os.fspath(ink_path)]


def run_inklecate(
    ink_path: str | PathLike[str],
    json_path: str | PathLike[str],
    command: str | Sequence[str] | None = None,
) -> None:
    """Compile an ink file to JSON with inklecate."""
    args = build_command(ink_path, json_path, command)
    try:
        result = subprocess.run(args, check=False)
    except OSError as exc:
        raise InklecateError(f"Failed to start inklecate: {exc}") from exc
    if result.returncode != 0:
        raise InklecateError(f"Inklecate failed with exit code {result.returncode}")


def is_ignored(text: str) -> bool:
    """Whether an ink test file opts out of testing."""
    return text.startswith(IGNORE_MARKER)


def parse_expectations(text: str) -> list[Expectation]:
    """Collect the ``/** [index[:choice text]]`` ... ``**/`` blocks of an ink file, in order."""
    expectations = []
    for match in _EXPECTATION.finditer(text):
        digits, choice_text, output = match.group(2), match.group(3), match.group(4)
        if digits is None:
            expectations.append(Expectation(output))
        else:
            expectations.append(
                Expectation(output, int(digits), choice_text[1:] if choice_text else "")
            )
    return expectations