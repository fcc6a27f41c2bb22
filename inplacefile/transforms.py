"""Line transforms used by the command line tool."""

from __future__ import annotations

from typing import IO, Callable

VOWELS = "AEIOUaeiou"

LineTransform = Callable[[str], str]


def disemvowel(line: str) -> str:
    return "".join(ch for ch in line if ch not in VOWELS)


def swapcase(line: str) -> str:
    return line.swapcase()


TRANSFORMS: dict[str, LineTransform] = {
    "disemvowel": disemvowel,
    "swapcase": swapcase,
}


def split_line_ending(line: str) -> tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body):]


def transform_lines(reader: IO[str], writer: IO[str], func: LineTransform) -> bool:
    """Copy *reader* to *writer* line by line through *func*, keeping line endings.

    Returns True if any line changed.
    """
    changed = False
    for line in reader:
        body, ending = split_line_ending(line)
        out = func(body) + ending
        if out != line:
            changed = True
        writer.write(out)
    return changed
