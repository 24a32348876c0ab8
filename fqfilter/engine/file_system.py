import gzip
import os
import sys
from contextlib import contextmanager

from fqfilter.exceptions import ResourceError
from fqfilter.util.s3 import is_s3_path, fetch_from_s3

# Collection of helpers to open the files the filter reads and writes. A name
# ending in .gz is (de)compressed transparently, an empty name means the
# standard stream, and s3:// objects are staged through a local scratch dir.
#
# Every byte maps to one character and back (latin-1) and only "\n" ends a
# line, untranslated, so reads pass through unchanged.

STDIN_NAME = "stdin"
STDOUT_NAME = "stdout"
ENCODING = "latin-1"
NEWLINE = "\n"


def is_compressed(path):
    return path.endswith(".gz")


def _standard_stream(stream):
    ''' Switch a standard stream to byte-transparent text; streams that cannot be reconfigured are used as they are '''
    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding=ENCODING, newline=NEWLINE)
    return stream


def _close(handle, path):
    try:
        handle.close()
    except OSError as e:
        raise ResourceError(path, e, action="close") from e


@contextmanager
def open_input(path):
    """
    Open path for reading text, yielding the handle and closing it afterwards.
    With no path, yield standard input, which is left open.
    """
    if not path:
        yield _standard_stream(sys.stdin)
        return
    try:
        if is_compressed(path):
            handle = gzip.open(path, "rt", encoding=ENCODING, newline=NEWLINE)
        else:
            handle = open(path, "r", encoding=ENCODING, newline=NEWLINE)
    except OSError as e:
        raise ResourceError(path, e) from e
    with handle:
        yield handle


@contextmanager
def open_output(path):
    """
    Open path for writing text, yielding the handle and closing it afterwards.
    With no path, yield standard output, which is flushed but left open.
    A failure to flush or close the handle once the block is done is a ResourceError.
    """
    if not path:
        handle = _standard_stream(sys.stdout)
        yield handle
        try:
            handle.flush()
        except OSError as e:
            raise ResourceError(STDOUT_NAME, e, action="write") from e
        return
    try:
        if is_compressed(path):
            handle = gzip.open(path, "wt", encoding=ENCODING, newline=NEWLINE)
        else:
            handle = open(path, "w", encoding=ENCODING, newline=NEWLINE)
    except OSError as e:
        raise ResourceError(path, e) from e
    try:
        yield handle
    except BaseException:
        handle.close()
        raise
    _close(handle, path)


def local_input_path(path, scratch_dir):
    ''' Local file to read for path: remote objects are fetched into scratch_dir first '''
    if is_s3_path(path):
        return fetch_from_s3(path, scratch_dir)
    return path


def local_output_path(path, scratch_dir):
    ''' Local file to write for path: remote objects are written into scratch_dir and uploaded later '''
    if is_s3_path(path):
        return os.path.join(scratch_dir, "out", os.path.basename(path))
    return path
