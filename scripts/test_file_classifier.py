#!/usr/bin/env python3
"""
Tests for file classification and converter configuration.
"""
import argparse
import json
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))
from converter_config import (
    ConfigError,
    ConverterConfig,
    add_config_arguments,
    config_from_dict,
    load_config,
    resolve_config,
)
from file_classifier import matches_pattern, should_process


class TestPatterns(unittest.TestCase):

    def test_star_and_question_mark(self):
        self.assertTrue(matches_pattern('debug.log', '*.log'))
        self.assertTrue(matches_pattern('temp1.txt', 'temp?.txt'))
        self.assertFalse(matches_pattern('temp12.txt', 'temp?.txt'))

    def test_dot_is_literal(self):
        self.assertTrue(matches_pattern('main.c', '*.c'))
        self.assertFalse(matches_pattern('logic', '*.c'))

    def test_whole_name_match(self):
        self.assertFalse(matches_pattern('debug.log.txt', '*.log'))

    def test_brackets_are_literal(self):
        self.assertTrue(matches_pattern('report[1].txt', 'report[1].txt'))
        self.assertFalse(matches_pattern('report1.txt', 'report[1].txt'))


class TestShouldProcess(unittest.TestCase):

    def setUp(self):
        self.config = ConverterConfig(exclude_patterns=('*.log', 'temp?.txt'))

    def test_unsaved_document_rejected(self):
        check = should_process('untitled:Untitled-1', self.config)
        self.assertFalse(check.allow)
        self.assertEqual(check.reason, 'Unsaved file')

    def test_excluded_pattern_named_in_reason(self):
        check = should_process(Path('logs') / 'debug.log', self.config)
        self.assertFalse(check.allow)
        self.assertEqual(check.reason, 'Excluded by pattern: *.log')

    def test_binary_extension_case_insensitive(self):
        check = should_process('photos/holiday.JPEG', self.config)
        self.assertFalse(check.allow)
        self.assertEqual(check.reason, 'Binary file type')

    def test_text_file_allowed(self):
        check = should_process('docs/readme.txt', self.config)
        self.assertTrue(check.allow)
        self.assertIsNone(check.reason)

    def test_pattern_checked_before_binary_list(self):
        check = should_process('setup.exe', ConverterConfig())
        self.assertEqual(check.reason, 'Excluded by pattern: *.exe')

    def test_binary_list_applies_without_patterns(self):
        check = should_process('icon.bmp', ConverterConfig(exclude_patterns=()))
        self.assertEqual(check.reason, 'Binary file type')

    def test_pattern_matches_file_name_only(self):
        config = ConverterConfig(exclude_patterns=('build*',))
        self.assertTrue(should_process('build/notes.txt', config).allow)
        self.assertFalse(should_process('src/build.txt', config).allow)


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        config = load_config(None)
        self.assertEqual(config.concurrency, 5)
        self.assertTrue(config.create_backup)
        self.assertTrue(config.show_detailed_results)
        self.assertTrue(config.auto_reopen_files)
        self.assertIn('*.exe', config.exclude_patterns)

    def test_load_from_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'encoding_converter.json'
            path.write_text(json.dumps({'concurrency': 2, 'exclude_patterns': ['*.md']}), encoding='utf-8')
            config = load_config(path)
        self.assertEqual(config.concurrency, 2)
        self.assertEqual(config.exclude_patterns, ('*.md',))

    def test_unknown_key_rejected(self):
        with self.assertRaises(ConfigError):
            config_from_dict({'batchConcurrency': 3})

    def test_invalid_values_rejected(self):
        for bad in ({'concurrency': 0}, {'concurrency': True}, {'concurrency': '5'},
                    {'create_backup': 'yes'}, {'exclude_patterns': '*.exe'}):
            with self.assertRaises(ConfigError, msg=str(bad)):
                config_from_dict(bad)

    def test_unreadable_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'broken.json'
            path.write_text('{not json', encoding='utf-8')
            with self.assertRaises(ConfigError):
                load_config(path)

    def test_flags_override_file(self):
        parser = argparse.ArgumentParser()
        add_config_arguments(parser)
        parser.add_argument('--concurrency', type=int)
        parser.add_argument('--summary', action='store_true')

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'settings.json'
            path.write_text(json.dumps({'concurrency': 2, 'exclude_patterns': ['*.md']}), encoding='utf-8')
            args = parser.parse_args(['--config', path.as_posix(), '--no-backup', '--concurrency', '8',
                                      '--summary', '--exclude', '*.tmp'])
            config = resolve_config(args)

        self.assertEqual(config.concurrency, 8)
        self.assertFalse(config.create_backup)
        self.assertFalse(config.show_detailed_results)
        self.assertEqual(config.exclude_patterns, ('*.md', '*.tmp'))

    def test_config_is_immutable(self):
        config = ConverterConfig()
        with self.assertRaises(Exception):
            config.concurrency = 10


if __name__ == '__main__':
    unittest.main()
