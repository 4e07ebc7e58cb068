#!/usr/bin/env python3
"""
Detect the character encoding of a file.

Detection is layered; the first step that answers wins:
    1. empty file
    2. tiny file (< 4 bytes)
    3. editor hint (encoding reported by the application holding the file open)
    4. chardet, when confident enough
    5. charset-normalizer, when it reports a non-UTF-8 encoding
    6. heuristic round-trip over common legacy encodings
    7. default (UTF-8)

Usage:
    python detect_encoding.py <file_path> [--hint ENCODING]

Output (JSON):
    {
        "file": "docs/readme.txt",
        "encoding": "big5",
        "confidence": 0.6,
        "method": "heuristic-roundtrip"
    }
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Callable, Optional

import chardet
from charset_normalizer import from_bytes

from codec_adapter import CodecError, count_replacements
from converter_models import DetectionResult
from encoding_constants import (
    CONFIDENCE_AUXILIARY, CONFIDENCE_DEFAULT, CONFIDENCE_EDITOR_HINT,
    CONFIDENCE_EMPTY, CONFIDENCE_FALLBACK, CONFIDENCE_HEURISTIC,
    CONFIDENCE_SMALL_ASCII, CONFIDENCE_SMALL_FILE,
    DEFAULT_ENCODING, HEURISTIC_CANDIDATES,
    METHOD_AUXILIARY, METHOD_DEFAULT, METHOD_EDITOR_HINT, METHOD_EMPTY,
    METHOD_FALLBACK, METHOD_HEURISTIC, METHOD_SMALL_ASCII, METHOD_SMALL_FILE,
    METHOD_STATISTICAL, STATISTICAL_MIN_CONFIDENCE,
    TINY_FILE_BYTES, heuristic_threshold,
)
from encoding_names import UnknownEncodingError, is_supported, is_utf8, normalize_encoding


def charset_normalizer_guess(data: bytes) -> Optional[str]:
    """Best charset-normalizer match for the buffer, or None."""
    best = from_bytes(data).best()
    return best.encoding if best is not None else None


def is_valid_utf8(data: bytes) -> bool:
    try:
        data.decode('utf-8')
    except UnicodeDecodeError:
        return False
    return True


class EncodingDetector:
    """Layered encoding detector. detect() never raises.

    Args:
        hint_provider: callable(path) -> encoding name or None, the encoding
            an editor already has the file open with
        statistical: chardet-style callable(bytes) -> {'encoding', 'confidence'}
        auxiliary: callable(bytes) -> encoding name or None
        logger: converter logger
    """

    def __init__(
        self,
        hint_provider: Optional[Callable[[Path], Optional[str]]] = None,
        statistical: Callable[[bytes], dict] = chardet.detect,
        auxiliary: Callable[[bytes], Optional[str]] = charset_normalizer_guess,
        logger: Optional[logging.Logger] = None,
    ):
        self.hint_provider = hint_provider
        self.statistical = statistical
        self.auxiliary = auxiliary
        self.logger = logger or logging.getLogger(__name__)

    def detect(self, data: bytes, path=None) -> DetectionResult:
        try:
            return self._detect(data, path)
        except Exception as e:
            self.logger.error(f"Encoding detection failed: {e}")
            return DetectionResult(DEFAULT_ENCODING, CONFIDENCE_FALLBACK, METHOD_FALLBACK)

    def _detect(self, data: bytes, path) -> DetectionResult:
        if len(data) == 0:
            return DetectionResult(DEFAULT_ENCODING, CONFIDENCE_EMPTY, METHOD_EMPTY)

        if len(data) < TINY_FILE_BYTES:
            if all(0 < byte < 128 for byte in data):
                return DetectionResult('ascii', CONFIDENCE_SMALL_ASCII, METHOD_SMALL_ASCII)
            if is_valid_utf8(data):
                return DetectionResult(DEFAULT_ENCODING, CONFIDENCE_SMALL_FILE, METHOD_SMALL_FILE)
            # Not UTF-8: let the hint or the heuristic pick a legacy encoding

        result = self._from_hint(path)
        if result:
            return result

        if len(data) >= TINY_FILE_BYTES:
            result = self._from_statistical(data) or self._from_auxiliary(data)
            if result:
                return result

        result = self._from_heuristic(data)
        if result:
            return result

        return DetectionResult(DEFAULT_ENCODING, CONFIDENCE_DEFAULT, METHOD_DEFAULT)

    def _from_hint(self, path) -> Optional[DetectionResult]:
        if path is None or self.hint_provider is None:
            return None
        hint = self.hint_provider(Path(path))
        if not hint:
            return None
        if not is_supported(hint):
            self.logger.debug(f"Ignoring unsupported editor hint: {hint}")
            return None
        if is_utf8(hint):
            return None
        return DetectionResult(normalize_encoding(hint), CONFIDENCE_EDITOR_HINT, METHOD_EDITOR_HINT)

    def _from_statistical(self, data: bytes) -> Optional[DetectionResult]:
        try:
            guess = self.statistical(data) or {}
        except Exception as e:
            self.logger.warning(f"chardet failed: {e}")
            return None

        encoding = guess.get('encoding')
        confidence = guess.get('confidence') or 0.0
        if not encoding or confidence <= STATISTICAL_MIN_CONFIDENCE:
            return None
        try:
            canonical = normalize_encoding(encoding)
        except UnknownEncodingError:
            self.logger.debug(f"chardet suggested unsupported encoding {encoding}")
            return None
        return DetectionResult(canonical, min(1.0, float(confidence)), METHOD_STATISTICAL)

    def _from_auxiliary(self, data: bytes) -> Optional[DetectionResult]:
        try:
            encoding = self.auxiliary(data)
        except Exception as e:
            self.logger.warning(f"charset-normalizer failed: {e}")
            return None

        if not encoding:
            return None
        try:
            canonical = normalize_encoding(encoding)
        except UnknownEncodingError:
            self.logger.debug(f"charset-normalizer suggested unsupported encoding {encoding}")
            return None
        if is_utf8(canonical):
            return None
        return DetectionResult(canonical, CONFIDENCE_AUXILIARY, METHOD_AUXILIARY)

    def _from_heuristic(self, data: bytes) -> Optional[DetectionResult]:
        # Valid UTF-8 (including pure ASCII) never needs a legacy guess
        if is_valid_utf8(data):
            return None

        threshold = heuristic_threshold(len(data))
        for candidate in HEURISTIC_CANDIDATES:
            try:
                replacements = count_replacements(data, candidate)
            except CodecError:
                continue
            if replacements < threshold:
                return DetectionResult(normalize_encoding(candidate), CONFIDENCE_HEURISTIC, METHOD_HEURISTIC)
        return None


def detect_file(file_path: Path, detector: Optional[EncodingDetector] = None) -> DetectionResult:
    """Read a file and detect its encoding."""
    detector = detector or EncodingDetector()
    return detector.detect(Path(file_path).read_bytes(), file_path)


def main():
    parser = argparse.ArgumentParser(description='Detect file encoding')
    parser.add_argument('file_path', help='Path to the file')
    parser.add_argument('--hint', help='Encoding the file is known to be open with (trusted over detection)')
    args = parser.parse_args()

    file_path = Path(args.file_path)

    if not file_path.is_file():
        print(json.dumps({'error': f'File not found: {file_path}'}))
        sys.exit(1)

    if args.hint and not is_supported(args.hint):
        print(json.dumps({'error': f'Unsupported encoding: {args.hint}'}))
        sys.exit(2)

    hint_provider = (lambda _path: args.hint) if args.hint else None
    detection = detect_file(file_path, EncodingDetector(hint_provider=hint_provider))

    print(json.dumps({
        'file': str(file_path),
        'encoding': detection.encoding,
        'confidence': detection.confidence,
        'method': detection.method,
    }))
    sys.exit(0)


if __name__ == '__main__':
    main()
