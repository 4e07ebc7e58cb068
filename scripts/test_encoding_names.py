#!/usr/bin/env python3
"""
Tests for encoding name normalization and the codec adapter.
"""
import codecs
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))
from codec_adapter import CodecError, count_replacements, decode, encode, round_trips, strip_byte_order_mark
from encoding_names import (
    SupportedEncoding,
    UnknownEncodingError,
    encoding_choices,
    is_supported,
    is_utf8,
    lookup_encoding,
    normalize_encoding,
    parse_encoding_argument,
)


class TestNormalization(unittest.TestCase):

    def test_spellings_collapse_to_canonical(self):
        self.assertEqual(normalize_encoding('UTF8'), 'utf-8')
        self.assertEqual(normalize_encoding(' utf_8 '), 'utf-8')
        self.assertEqual(normalize_encoding('Big5'), 'big5')
        self.assertEqual(normalize_encoding('SHIFT_JIS'), 'shift_jis')
        self.assertEqual(normalize_encoding('shift-jis'), 'shift_jis')
        self.assertEqual(normalize_encoding('latin1'), 'iso-8859-1')
        self.assertEqual(normalize_encoding('cp1252'), 'windows-1252')
        self.assertEqual(normalize_encoding('Windows-1252'), 'windows-1252')
        self.assertEqual(normalize_encoding('utf_16_le'), 'utf-16le')

    def test_canonical_names_are_fixed_points(self):
        for member in SupportedEncoding:
            self.assertEqual(normalize_encoding(member.canonical), member.canonical)

    def test_unknown_names_rejected(self):
        for name in ('klingon', '', '   ', None, 'euc-tw'):
            with self.assertRaises(UnknownEncodingError):
                normalize_encoding(name)
            self.assertFalse(is_supported(name))

    def test_windows_1252_and_latin1_stay_distinct(self):
        self.assertNotEqual(normalize_encoding('cp1252'), normalize_encoding('latin-1'))

    def test_gbk_family_stays_distinct(self):
        names = {normalize_encoding(n) for n in ('gbk', 'gb2312', 'gb18030')}
        self.assertEqual(len(names), 3)

    def test_aliases_never_merge_different_codecs(self):
        """Every accepted spelling must transcode exactly like its canonical member."""
        for member in SupportedEncoding:
            expected = codecs.lookup(member.codec).name
            for spelling in (member.canonical,) + tuple(member.aliases):
                try:
                    actual = codecs.lookup(spelling).name
                except LookupError:
                    continue  # spelling unknown to Python; only our table resolves it
                self.assertEqual(actual, expected, f"{spelling} resolves to {actual}, not {expected}")

    def test_is_utf8(self):
        self.assertTrue(is_utf8('UTF8'))
        self.assertFalse(is_utf8('utf-8-sig'))
        self.assertFalse(is_utf8('big5'))

    def test_parse_encoding_argument(self):
        self.assertIsNone(parse_encoding_argument('auto'))
        self.assertIsNone(parse_encoding_argument('AUTO'))
        self.assertIsNone(parse_encoding_argument(None))
        self.assertEqual(parse_encoding_argument('GBK'), 'gbk')
        with self.assertRaises(UnknownEncodingError):
            parse_encoding_argument('nope')

    def test_picker_choices(self):
        labels = [label for label, _ in encoding_choices()]
        self.assertEqual(labels[0], 'UTF-8')
        self.assertIn('Big5', labels)
        self.assertEqual(len(labels), 11)

    def test_lookup_returns_enum_member(self):
        self.assertIs(lookup_encoding('Big5'), SupportedEncoding.BIG5)
        self.assertIs(lookup_encoding('cp936'), SupportedEncoding.GBK)


class TestCodecAdapter(unittest.TestCase):

    def test_round_trip_per_encoding(self):
        samples = {
            'utf-8': 'Grüße, 世界',
            'big5': '中文測試',
            'gbk': '简体中文',
            'shift_jis': '日本語のテキスト',
            'euc-kr': '한국어',
            'iso-8859-1': 'café déjà vu',
            'windows-1252': 'smart “quotes” €',
            'utf-16le': 'Grüße, 世界',
        }
        for encoding, text in samples.items():
            self.assertEqual(decode(encode(text, encoding), encoding), text, encoding)
            self.assertTrue(round_trips(encode(text, encoding), encoding), encoding)

    def test_decode_failure_raises_codec_error(self):
        with self.assertRaises(CodecError):
            decode(b'abc\xffdef', 'utf-8')

    def test_encode_failure_raises_codec_error(self):
        with self.assertRaises(CodecError):
            encode('中文', 'iso-8859-1')

    def test_unknown_encoding_is_codec_error(self):
        with self.assertRaises(CodecError):
            decode(b'abc', 'klingon')

    def test_leading_bom_character_dropped(self):
        self.assertEqual(decode(b'\xef\xbb\xbfhello', 'utf-8'), 'hello')

    def test_strip_bom_before_decoding(self):
        with self.assertRaises(CodecError):
            decode(b'\xef\xbb\xbfhello', 'ascii')
        self.assertEqual(decode(b'\xef\xbb\xbfhello', 'ascii', strip_bom=True), 'hello')

    def test_strip_byte_order_mark(self):
        self.assertEqual(strip_byte_order_mark(b'\xff\xfeh\x00'), b'h\x00')
        self.assertEqual(strip_byte_order_mark(b'plain'), b'plain')

    def test_count_replacements(self):
        self.assertEqual(count_replacements(b'\xa4\xa4', 'big5'), 0)
        self.assertGreater(count_replacements(b'\xff' * 10, 'big5'), 0)


if __name__ == '__main__':
    unittest.main()
