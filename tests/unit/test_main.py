import io
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from fqfilter.__main__ import main
from tests.unit.unittest_helpers import fixture_lines, fixture_path

READS_1 = fixture_path("reads_1.fastq")
READS_2 = fixture_path("reads_2.fastq")
NAMES = fixture_path("names.txt")


@patch('fqfilter.util.log.configure_logger')
class TestMain(unittest.TestCase):
    def test_filter_to_stdout(self, mock_configure_logger):
        with patch('sys.stdout', io.StringIO()) as stdout:
            main(["--reads", NAMES, "--short-name", READS_1])
        reads_1 = fixture_lines("reads_1.fastq")
        self.assertEqual(stdout.getvalue().splitlines(), reads_1[4:8] + reads_1[12:16])

    def test_tabular(self, mock_configure_logger):
        with patch('sys.stdout', io.StringIO()) as stdout:
            main(["--reads", NAMES, "--short-name", "--tab", "--limit", "1", READS_1, READS_2])
        self.assertEqual(stdout.getvalue(), "read2\tTTGGCCAATT\tAATTGGCCAA\n")

    def test_missing_reads_option(self, mock_configure_logger):
        with patch('sys.stderr', io.StringIO()) as stderr:
            with self.assertRaises(SystemExit) as cm:
                main([READS_1])
        self.assertEqual(cm.exception.code, 2)
        self.assertIn("Must provide a list of reads to match", stderr.getvalue())

    def test_tab_with_out_prefix(self, mock_configure_logger):
        with patch('sys.stderr', io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                main(["--reads", NAMES, "--tab", "--out", "filtered", READS_1])
        self.assertEqual(cm.exception.code, 2)

    def test_no_inputs(self, mock_configure_logger):
        with patch('sys.stderr', io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                main(["--reads", NAMES])
        self.assertEqual(cm.exception.code, 2)

    @patch('fqfilter.util.log.write')
    def test_format_error_exits_nonzero(self, mock_write, mock_configure_logger):
        tmp_dir = tempfile.mkdtemp()
        try:
            broken = os.path.join(tmp_dir, "broken.fastq")
            with open(broken, "w") as f:
                f.write("read1\nACGT\n+\nIIII\n")
            with patch('sys.stdout', io.StringIO()) as stdout:
                with self.assertRaises(SystemExit) as cm:
                    main(["--reads", NAMES, "--invert", broken])
            self.assertEqual(cm.exception.code, 1)
            self.assertEqual(stdout.getvalue(), "")
            mock_write.assert_called_with("Line 0 should be a header line, got: read1", warning=True)
        finally:
            shutil.rmtree(tmp_dir)

    @patch('fqfilter.util.log.write')
    def test_write_failure_exits_nonzero(self, mock_write, mock_configure_logger):
        class FullDiskStringIO(io.StringIO):
            def flush(self):
                raise OSError(28, "No space left on device")

        with patch('sys.stdout', FullDiskStringIO()):
            with self.assertRaises(SystemExit) as cm:
                main(["--reads", NAMES, "--invert", READS_1])
        self.assertEqual(cm.exception.code, 1)
        mock_write.assert_called_with(
            "Failed to write line 20 to output 0: [Errno 28] No space left on device", warning=True)
