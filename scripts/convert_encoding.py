#!/usr/bin/env python3
"""
Convert a file from its (detected or given) encoding to a target encoding.

The file is rewritten in place. Unless disabled, the original bytes are first
copied to <file>.bak (or .bak.1, .bak.2, ... if that exists) so the
conversion can be undone with undo_conversion.py.

Usage:
    python convert_encoding.py <file_path> [--from ENCODING|auto] [--to ENCODING]
                               [--config FILE] [--no-backup] [--yes]

Output (JSON):
    {
        "file_path": "docs/readme.txt",
        "success": true,
        "skipped": false,
        "original_encoding": "big5",
        "target_encoding": "utf-8",
        "file_size": 48211,
        "backup_created": true,
        "detection_method": "statistical-detector",
        ...
    }
"""

import sys
import json
import logging
import argparse
from pathlib import Path, PurePath
from typing import Optional

from backup_manager import BackupManager
from codec_adapter import CodecError, decode, encode
from conversion_report import format_single_result
from converter_config import ConfigError, ConverterConfig, add_config_arguments, resolve_config
from converter_console import ConsolePrompter, ScriptedPrompter, command_reopener, create_logger
from converter_models import CONVERTED, ConversionResult
from detect_encoding import EncodingDetector
from encoding_constants import (
    CONFIDENCE_MANUAL, DEFAULT_TARGET_ENCODING, LARGE_FILE_CONFIRM_BYTES,
    LARGE_FILE_WARN_BYTES, METHOD_MANUAL, SKIP_ALREADY_TARGET, SKIP_LARGE_FILE,
)
from encoding_names import (
    AUTO_DETECT, UnknownEncodingError, lookup_encoding,
    normalize_encoding, parse_encoding_argument,
)
from file_classifier import should_process
from file_storage import FileStorage


class ConversionError(Exception):
    """Raised inside the engine when a file cannot be decoded or encoded."""


class ConversionEngine:
    """Converts one file at a time; convert() never raises."""

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        storage: Optional[FileStorage] = None,
        detector: Optional[EncodingDetector] = None,
        backups: Optional[BackupManager] = None,
        prompter=None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config or ConverterConfig()
        self.storage = storage or FileStorage()
        self.logger = logger or logging.getLogger(__name__)
        self.prompter = prompter or ConsolePrompter()
        self.detector = detector or EncodingDetector(logger=self.logger)
        self.backups = backups or BackupManager(self.storage, self.prompter, self.logger)

    def convert(self, path, source_encoding: Optional[str] = None,
                target_encoding: str = DEFAULT_TARGET_ENCODING) -> ConversionResult:
        file_path = str(path)
        name = PurePath(file_path).name
        self.logger.info(f"Starting conversion: {name}")

        check = should_process(path, self.config)
        if not check.allow:
            self.logger.info(f"Skipping {name}: {check.reason}")
            return ConversionResult(file_path, success=False, skipped=True, skip_reason=check.reason)

        result = ConversionResult(file_path, success=False,
                                  original_encoding=source_encoding, target_encoding=target_encoding)
        try:
            return self._convert(path, name, source_encoding, target_encoding, result)
        except Exception as e:
            message = f"Conversion failed: {e}"
            self.logger.error(f"{message} ({name})")
            result.success = False
            result.skipped = False
            result.error = message
            return result

    def _convert(self, path, name, source_encoding, target_encoding, result) -> ConversionResult:
        target = normalize_encoding(target_encoding)
        result.target_encoding = target

        data = self.storage.read_bytes(path)
        result.file_size = len(data)

        if len(data) > LARGE_FILE_WARN_BYTES:
            size_mb = f"{len(data) / (1024 * 1024):.1f}"
            self.logger.warning(f"Processing very large file ({size_mb}MB): {name}")
            if len(data) > LARGE_FILE_CONFIRM_BYTES:
                question = (f'The file "{name}" is very large ({size_mb}MB). '
                            'Processing it may consume significant memory. Continue?')
                if not self.prompter.confirm(question):
                    result.skipped = True
                    result.skip_reason = SKIP_LARGE_FILE
                    return result

        if source_encoding:
            source = normalize_encoding(source_encoding)
            confidence, method = CONFIDENCE_MANUAL, METHOD_MANUAL
        else:
            detection = self.detector.detect(data, path)
            source, confidence, method = detection.encoding, detection.confidence, detection.method

        result.original_encoding = source
        result.detected_original_encoding = source
        result.confidence = confidence
        result.detection_method = method
        self.logger.info(f"Detected encoding: {source} (confidence: {confidence}, method: {method})")

        if self._already_in_target(data, source, target):
            result.success = True
            result.skipped = True
            result.skip_reason = SKIP_ALREADY_TARGET
            return result

        if self.config.create_backup:
            result.backup_created = self.backups.create_backup(path)

        text = self._decode(data, source)
        try:
            encoded = encode(text, target)
        except CodecError as e:
            raise ConversionError(f"Failed to encode to {target}: {e}") from e

        self.storage.write_bytes(path, encoded)
        self.logger.info(f"Successfully converted {name} from {source} to {target}")

        result.success = True
        return result

    def _already_in_target(self, data: bytes, source: str, target: str) -> bool:
        """Same encoding after normalization, and an exact round trip."""
        if lookup_encoding(source) is not lookup_encoding(target):
            return False
        try:
            reencoded = encode(decode(data, source), target)
        except CodecError as e:
            self.logger.warning(f"Target encoding verification failed: {e}")
            return False
        return reencoded == data

    def _decode(self, data: bytes, source: str) -> str:
        try:
            return decode(data, source)
        except CodecError as e:
            self.logger.warning(f"Decode failed with {source}, retrying without byte-order mark: {e}")
        try:
            return decode(data, source, strip_bom=True)
        except CodecError as e:
            raise ConversionError(f"Failed to decode file: {e}") from e


def build_engine(config: ConverterConfig, prompter, logger: logging.Logger,
                 reopen=None, hint_provider=None) -> ConversionEngine:
    """Wire one engine with shared storage, detector and backup manager."""
    storage = FileStorage()
    detector = EncodingDetector(hint_provider=hint_provider, logger=logger)
    backups = BackupManager(storage, prompter, logger, reopen=reopen)
    return ConversionEngine(config, storage, detector, backups, prompter, logger)


def main():
    parser = argparse.ArgumentParser(description='Convert a file between encodings')
    parser.add_argument('file_path', help='Path to the file')
    parser.add_argument('--from', dest='source', default=AUTO_DETECT,
                        help='Source encoding, or "auto" to detect (default: auto)')
    parser.add_argument('--to', dest='target', default=DEFAULT_TARGET_ENCODING,
                        help=f'Target encoding (default: {DEFAULT_TARGET_ENCODING})')
    add_config_arguments(parser)
    args = parser.parse_args()

    logger = create_logger(args.verbose)
    try:
        config = resolve_config(args)
        source = parse_encoding_argument(args.source)
        target = normalize_encoding(args.target)
    except (ConfigError, UnknownEncodingError) as e:
        print(json.dumps({'error': str(e)}))
        sys.exit(2)

    if source is not None and source == target:
        print(json.dumps({'warning': 'Source and target encodings are the same'}))
        sys.exit(1)

    file_path = Path(args.file_path)
    if not file_path.is_file():
        print(json.dumps({'error': f'File not found: {file_path}'}))
        sys.exit(1)

    prompter = ScriptedPrompter() if args.yes else ConsolePrompter()
    reopen = command_reopener(args.reopen_with)
    engine = build_engine(config, prompter, logger, reopen=reopen)

    result = engine.convert(file_path, source, target)
    print(format_single_result(result), file=sys.stderr)
    print(json.dumps(result.to_dict(), indent=2))

    if result.outcome == CONVERTED:
        if config.auto_reopen_files:
            engine.backups.reopen_file(file_path)
        if result.backup_created and not args.yes:
            if prompter.choose('Undo this conversion?', ['Undo', 'Keep']) == 'Undo':
                if engine.backups.undo_conversion(file_path, reopen=config.auto_reopen_files):
                    print(f"Conversion undone: {file_path.name}", file=sys.stderr)

    sys.exit(0 if result.success or result.skipped else 1)


if __name__ == '__main__':
    main()
