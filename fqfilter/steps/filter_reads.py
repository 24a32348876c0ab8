import json
import os
import tempfile
from contextlib import ExitStack
from typing import NamedTuple, Optional, Sequence

import fqfilter.util.fastq as fastq
import fqfilter.util.log as log
from fqfilter.engine.file_system import STDIN_NAME, open_input, open_output, local_input_path, local_output_path
from fqfilter.engine.filter_engine import run_filter
from fqfilter.engine.output_sink import PerStreamSink, TabularSink
from fqfilter.exceptions import ConfigurationError, ResourceError
from fqfilter.util.names import load_name_set
from fqfilter.util.s3 import is_s3_path, upload_with_retries

OUTPUT_EXTENSION = "fq.gz"
MAX_INPUT_FILES = 2


class FilterOptions(NamedTuple):
    input_files: Sequence[str]
    reads_file: Optional[str]
    out_prefix: Optional[str] = None
    invert: bool = False
    limit: int = 0
    tab: bool = False
    short_name: bool = False
    counts_json: Optional[str] = None

    def validate(self):
        if not self.reads_file:
            raise ConfigurationError("Must provide a list of reads to match")
        if not self.input_files:
            raise ConfigurationError("Must specify at least one fastq file")
        if len(self.input_files) > MAX_INPUT_FILES:
            raise ConfigurationError("At most %d fastq files (one pair) are supported, got %d" %
                                     (MAX_INPUT_FILES, len(self.input_files)))
        if self.limit < 0:
            raise ConfigurationError("Limit must be 0 (unlimited) or positive, got %d" % self.limit)
        if self.tab and self.out_prefix:
            raise ConfigurationError("Tabular output only supports writing to stdout")


def output_file_names(prefix, stream_count, extension=OUTPUT_EXTENSION):
    ''' <prefix>.<ext> for single-end input, <prefix>_1.<ext> and <prefix>_2.<ext> for paired-end '''
    if stream_count == 1:
        return ["%s.%s" % (prefix, extension)]
    return ["%s_%d.%s" % (prefix, i + 1, extension) for i in range(stream_count)]


class PipelineStepFilterReads():
    ''' Keep, or with invert drop, the reads named in a list from one or a pair of fastq files '''
    def __init__(self, options: FilterOptions, name="filter_reads"):
        self.name = name
        self.options = options
        self.counts_dict = {}
        self.uploads = []

    def run(self):
        options = self.options
        options.validate()
        v = {"step": self.name, "inputs": list(options.input_files)}
        with log.log_context("filter_reads", v), \
                tempfile.TemporaryDirectory(prefix="fqfilter-") as scratch_dir:
            with ExitStack() as stack:
                streams = [fastq.lines(stack.enter_context(open_input(local_input_path(f, scratch_dir))))
                           for f in options.input_files]
                sink = self.open_sink(stack, scratch_dir)
                with log.log_context("load_names", {"reads_file": options.reads_file}):
                    names = self.load_names(stack, scratch_dir)
                log.write("%d read names to match" % len(names))
                state = run_filter(streams, names, sink,
                                   invert=options.invert,
                                   short_name=options.short_name,
                                   limit=options.limit)
            # Outputs are closed (and flushed) before anything is uploaded
            self.upload_outputs()
            self.counts_dict = {"included": state.included, "excluded": state.excluded}
            self.save_counts(scratch_dir)
        log.write("reads: %d" % fastq.lines2reads(state.line_num))
        log.write("included: %d" % state.included)
        log.write("excluded: %d" % state.excluded)
        return state

    def load_names(self, stack, scratch_dir):
        reads_file = self.options.reads_file
        if reads_file == STDIN_NAME:
            reads_file = ""
        handle = stack.enter_context(open_input(local_input_path(reads_file, scratch_dir)))
        return load_name_set(handle, self.options.short_name)

    def open_sink(self, stack, scratch_dir):
        options = self.options
        if options.tab:
            return TabularSink(stack.enter_context(open_output(None)))
        if not options.out_prefix:
            # Every stream shares the one standard output handle
            stdout = stack.enter_context(open_output(None))
            return PerStreamSink([stdout] * len(options.input_files))
        handles = []
        for f in output_file_names(options.out_prefix, len(options.input_files)):
            handles.append(stack.enter_context(open_output(self.local_output(f, scratch_dir))))
        return PerStreamSink(handles)

    def local_output(self, path, scratch_dir):
        local_path = local_output_path(path, scratch_dir)
        if local_path != path:
            os.makedirs(os.path.dirname(local_path), exist_ok=True)
            self.uploads.append((local_path, path))
        return local_path

    def upload_outputs(self):
        for local_path, s3_path in self.uploads:
            upload_with_retries(local_path, s3_path)

    def save_counts(self, scratch_dir):
        counts_json = self.options.counts_json
        if not counts_json:
            return
        local_path = local_output_path(counts_json, scratch_dir)
        if local_path != counts_json:
            os.makedirs(os.path.dirname(local_path), exist_ok=True)
        try:
            with open(local_path, "w") as count_file:
                json.dump(self.counts_dict, count_file)
        except OSError as e:
            raise ResourceError(counts_json, e) from e
        if is_s3_path(counts_json):
            upload_with_retries(local_path, counts_json)
