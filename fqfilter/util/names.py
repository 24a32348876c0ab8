from typing import FrozenSet, Iterable

from fqfilter.util.fastq import lines, short_name


def load_name_set(handle: Iterable[str], use_short_name: bool = False) -> FrozenSet[str]:
    '''
    Build the set of read names to match from a newline-delimited list.
    Each line is one name, taken verbatim unless use_short_name is set, in which
    case only its first whitespace-delimited token is kept.  Duplicates collapse.
    '''
    if use_short_name:
        return frozenset(short_name(name) for name in lines(handle))
    return frozenset(lines(handle))
