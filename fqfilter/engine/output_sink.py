from typing import Sequence, TextIO

from fqfilter.exceptions import OutputWriteError
from fqfilter.util.fastq import SEQUENCE, line_role


class PerStreamSink():
    ''' Writes every line of an included read verbatim to its own stream's handle '''
    def __init__(self, handles: Sequence[TextIO]):
        self.handles = list(handles)

    def emit(self, line_num, lines, name, sequences):
        for i, line in enumerate(lines):
            try:
                self.handles[i].write(line + "\n")
            except OSError as e:
                raise OutputWriteError(line_num, i, e) from e

    def flush(self, line_num):
        # Buffered writes fail here rather than in emit
        for i, handle in enumerate(self.handles):
            try:
                handle.flush()
            except OSError as e:
                raise OutputWriteError(line_num, i, e) from e


class TabularSink():
    '''
    Collapses each included read into one line on a single handle:
    the read name, then every stream's sequence, tab-separated.
    '''
    def __init__(self, handle: TextIO):
        self.handle = handle

    def emit(self, line_num, lines, name, sequences):
        # Only once the last stream's sequence line for this read is in
        if line_role(line_num) != SEQUENCE:
            return
        try:
            self.handle.write("\t".join([name, *sequences]) + "\n")
        except OSError as e:
            raise OutputWriteError(line_num, 0, e) from e

    def flush(self, line_num):
        try:
            self.handle.flush()
        except OSError as e:
            raise OutputWriteError(line_num, 0, e) from e
