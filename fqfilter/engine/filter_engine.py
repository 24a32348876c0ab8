from typing import AbstractSet, Iterable, Iterator, NamedTuple, Optional, Sequence, Tuple

import fqfilter.util.log as log
from fqfilter.exceptions import DesynchronizedInputError, InvalidFileFormatError
from fqfilter.util.fastq import HEADER, HEADER_SENTINEL, SEQUENCE, line_role, read_name


class FilterState(NamedTuple):
    ''' Everything the filter knows after a line position has been processed '''
    line_num: int = 0
    # Decided on the first stream's header, held for the rest of the read
    enable: bool = False
    name: str = ""
    sequences: Tuple[str, ...] = ()
    included: int = 0
    excluded: int = 0


def read_position(iterators: Sequence[Iterator[str]], line_num: int) -> Optional[Tuple[str, ...]]:
    """Pull the next line from every stream, first stream first.  Returns None
    when the first stream is exhausted, which is the normal end of input."""
    first = next(iterators[0], None)
    if first is None:
        return None
    lines = [first]
    for i, it in enumerate(iterators[1:], start=1):
        line = next(it, None)
        if line is None:
            raise DesynchronizedInputError(i, line_num)
        lines.append(line)
    return tuple(lines)


def step(state: FilterState, lines: Tuple[str, ...], names: AbstractSet[str],
         invert: bool = False, short_name: bool = False) -> FilterState:
    """Fold one line position, one line per stream, into the filter state.
    The returned state still refers to the same position."""
    role = line_role(state.line_num)
    if role == HEADER:
        # Every stream must be at a header; only the first one picks the read
        for line in lines:
            if not line.startswith(HEADER_SENTINEL):
                raise InvalidFileFormatError(state.line_num, line)
        name = read_name(lines[0], short_name)
        enable = (name in names) != invert
        return state._replace(name=name, enable=enable)
    if role == SEQUENCE:
        if state.enable:
            return state._replace(sequences=lines, included=state.included + 1)
        return state._replace(sequences=lines, excluded=state.excluded + 1)
    return state


def run_filter(streams: Sequence[Iterable[str]], names: AbstractSet[str], sink,
               invert: bool = False, short_name: bool = False, limit: int = 0) -> FilterState:
    '''
    Walk one or more line streams in lockstep, four lines per read, and emit
    the reads whose name is (or with invert, is not) in names through sink.
    Stops at the end of the first stream, or once limit reads have been
    included when limit is positive.  Returns the final state.
    '''
    iterators = [iter(s) for s in streams]
    state = FilterState(sequences=("",) * len(iterators))
    while True:
        lines = read_position(iterators, state.line_num)
        if lines is None:
            break
        state = step(state, lines, names, invert, short_name)
        if state.enable:
            sink.emit(state.line_num, lines, state.name, state.sequences)
        state = state._replace(line_num=state.line_num + 1)
        if limit > 0 and line_role(state.line_num) == HEADER and state.included >= limit:
            log.write("reached limit")
            break
    sink.flush(state.line_num)
    return state
