#!/usr/bin/env python3
from typing import Iterable, Iterator

HEADER_SENTINEL = "@"
LINES_PER_READ = 4

# Role of a line within its read, indexed by line_num % LINES_PER_READ
HEADER = 0
SEQUENCE = 1
SEPARATOR = 2
QUALITY = 3


def line_role(line_num: int) -> int:
    return line_num % LINES_PER_READ


def lines(handle: Iterable[str]) -> Iterator[str]:
    """Iterate through an open text handle, yielding each line without its
    line terminator.  A carriage return before the newline is dropped as well;
    nothing else about the line is altered."""
    for line in handle:
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        yield line


def short_name(name: str) -> str:
    """First whitespace-delimited token of name, or "" when there is none."""
    fields = name.split()
    return fields[0] if fields else ""


def read_name(header: str, use_short_name: bool = False) -> str:
    """Extract the read name from a header line."""
    name = header[len(HEADER_SENTINEL):] if header.startswith(HEADER_SENTINEL) else header
    if use_short_name:
        name = short_name(name)
    return name



def lines2reads(line_count: int) -> int:
    ''' Convert line count to the number of complete reads it holds '''
    return line_count // LINES_PER_READ
