#!/usr/bin/env python3

import argparse
import sys
import fqfilter.util.log as log
from fqfilter.exceptions import ConfigurationError, FqFilterError
from fqfilter.steps.filter_reads import FilterOptions, PipelineStepFilterReads
from fqfilter import __version__


def build_parser():
    parser = argparse.ArgumentParser(
        prog="fqfilter",
        usage="%(prog)s [options] unaligned_1.fq.gz [unaligned_2.fq.gz]",
        description="Return the subset of reads from one fastq file, or a pair of them, "
                    "whose names are (or are not) in a list.")
    parser.add_argument('--version', action='version',
                        version='%(prog)s {version}'.format(version=__version__))
    parser.add_argument('fastq_files', nargs='*', metavar='FASTQ',
                        help='fastq file(s), optionally gzipped; s3:// paths are fetched first')
    parser.add_argument('--reads', dest='reads_file',
                        help='filename of reads to match, one per line ("stdin" to read standard input)')
    parser.add_argument('--invert', action='store_true', help='return reads NOT in the file')
    parser.add_argument('--out', dest='out_prefix', default='',
                        help='output filename prefix (default = stdout)')
    parser.add_argument('--limit', type=int, default=0, help='output only the first LIMIT matches')
    parser.add_argument('--tab', action='store_true',
                        help='print sequence as tabular output (readName, read1, read2)')
    parser.add_argument('--short-name', dest='short_name', action='store_true',
                        help='use just the first space-separated word of the read name')
    parser.add_argument('--counts-json', dest='counts_json',
                        help='also write the included/excluded counts to this json file')
    parser.add_argument('--log-file', dest='log_file', help='also append the log to this file')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    log.configure_logger(args.log_file)
    options = FilterOptions(input_files=args.fastq_files,
                            reads_file=args.reads_file,
                            out_prefix=args.out_prefix,
                            invert=args.invert,
                            limit=args.limit,
                            tab=args.tab,
                            short_name=args.short_name,
                            counts_json=args.counts_json)
    try:
        options.validate()
    except ConfigurationError as e:
        parser.error(str(e))
    try:
        PipelineStepFilterReads(options).run()
    except FqFilterError as e:
        log.write(str(e), warning=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
