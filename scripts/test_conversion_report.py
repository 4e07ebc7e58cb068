#!/usr/bin/env python3
"""
Tests for batch summaries, single-file messages and saved reports.
"""
import json
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))
from conversion_report import format_batch_summary, format_single_result, load_report, save_report
from converter_models import BatchResult, ConversionResult


def converted(name, backup=True):
    return ConversionResult(name, success=True, original_encoding='big5', target_encoding='utf-8',
                            backup_created=backup)


def make_batch():
    batch = BatchResult(total_files=9)
    for i in range(7):
        batch.add(converted(f'docs/ch{i}.txt'))
    batch.add(ConversionResult('docs/blank.txt', success=True, skipped=True,
                               skip_reason='Already in target encoding'))
    batch.add(ConversionResult('docs/broken.txt', success=False, error='Conversion failed: boom'))
    return batch


class TestBatchSummary(unittest.TestCase):

    def test_detailed_summary_previews_five_per_outcome(self):
        text = format_batch_summary(make_batch(), 'Batch Convert to UTF-8')

        self.assertTrue(text.startswith('Batch Convert to UTF-8 Results:'))
        self.assertIn('- Total files: 9', text)
        self.assertIn('- Converted: 7', text)
        self.assertIn('Successfully converted (7):', text)
        self.assertIn('- ch0.txt: big5 -> utf-8', text)
        self.assertIn('- ch4.txt', text)
        self.assertNotIn('- ch5.txt', text)
        self.assertIn('... and 2 more', text)
        self.assertIn('- blank.txt: Already in target encoding', text)
        self.assertIn('- broken.txt: Conversion failed: boom', text)

    def test_simple_summary(self):
        text = format_batch_summary(make_batch(), 'Batch Convert to UTF-8', detailed=False)
        self.assertEqual(text, 'Batch Convert to UTF-8 completed. Processed: 9, Converted: 7, '
                               'Skipped: 1, Errors: 1')

    def test_cancelled_batch_is_flagged(self):
        batch = make_batch()
        batch.cancelled = True
        self.assertIn('Cancelled before all files were processed.', format_batch_summary(batch, 'Batch'))

    def test_empty_sections_omitted(self):
        batch = BatchResult(total_files=1)
        batch.add(converted('a.txt'))
        text = format_batch_summary(batch, 'Batch')
        self.assertNotIn('Skipped files', text)
        self.assertNotIn('Failed files', text)


class TestSingleResult(unittest.TestCase):

    def test_converted(self):
        self.assertEqual(format_single_result(converted('dir/a.txt')), 'File converted from BIG5 to UTF-8: a.txt')

    def test_already_in_target(self):
        result = ConversionResult('a.txt', success=True, skipped=True, skip_reason='Already in target encoding')
        self.assertEqual(format_single_result(result), 'File already in target encoding: a.txt')

    def test_rejected(self):
        result = ConversionResult('a.exe', success=False, skipped=True, skip_reason='Excluded by pattern: *.exe')
        self.assertEqual(format_single_result(result), 'File skipped (Excluded by pattern: *.exe): a.exe')

    def test_failed(self):
        result = ConversionResult('a.txt', success=False, error='Conversion failed: boom')
        self.assertEqual(format_single_result(result), 'Conversion failed: boom')


class TestReports(unittest.TestCase):

    def test_saved_report_can_be_loaded(self):
        batch = make_batch()
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'reports' / 'batch.json'
            save_report(path, batch, 'Batch Convert to UTF-8')
            operation, loaded = load_report(path)
            payload = json.loads(path.read_text(encoding='utf-8'))

        self.assertEqual(operation, 'Batch Convert to UTF-8')
        self.assertEqual(payload['version'], 1)
        self.assertEqual((loaded.converted, loaded.skipped, loaded.errors), (7, 1, 1))
        self.assertEqual(sum(r.undoable for r in loaded.results), 7)
        self.assertEqual(loaded.results[-1].error, 'Conversion failed: boom')

    def test_non_report_rejected(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'other.json'
            path.write_text(json.dumps({'hello': 'world'}), encoding='utf-8')
            with self.assertRaises(ValueError):
                load_report(path)


if __name__ == '__main__':
    unittest.main()
