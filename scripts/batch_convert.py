#!/usr/bin/env python3
"""
Convert many files (or whole directory trees) to a target encoding.

Directories are walked recursively; files matching an exclude pattern or a
known binary extension are left out. Files are converted in waves of at most
--concurrency files at a time. Ctrl-C stops after the current wave.

Usage:
    python batch_convert.py <path> [<path> ...] [--from ENCODING|auto] [--to ENCODING]
                            [--concurrency N] [--report FILE] [--summary]
                            [--config FILE] [--no-backup] [--yes]

Output (JSON):
    {
        "total_files": 12,
        "processed": 12,
        "converted": 9,
        "skipped": 3,
        "errors": 0,
        "cancelled": false,
        "results": [...]
    }
"""

import sys
import json
import logging
import argparse
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Optional

from conversion_report import format_batch_summary, save_report
from convert_encoding import ConversionEngine, build_engine
from converter_config import ConfigError, ConverterConfig, add_config_arguments, resolve_config
from converter_console import (
    ConsolePrompter, ConsoleProgress, ScriptedPrompter, command_reopener,
    create_logger, install_interrupt_handler,
)
from converter_models import BatchResult, ConversionResult
from encoding_constants import CONFIRM_PREVIEW_FILES, DEFAULT_TARGET_ENCODING
from encoding_names import AUTO_DETECT, UnknownEncodingError, lookup_encoding, normalize_encoding, parse_encoding_argument
from file_classifier import should_process
from file_storage import DIRECTORY, FILE, FileStorage


class BatchOrchestrator:
    """Discovers files and drives the conversion engine wave by wave."""

    def __init__(
        self,
        engine: ConversionEngine,
        config: Optional[ConverterConfig] = None,
        storage: Optional[FileStorage] = None,
        prompter=None,
        progress=None,
        logger: Optional[logging.Logger] = None,
    ):
        self.engine = engine
        self.config = config or engine.config
        self.storage = storage or engine.storage
        self.prompter = prompter or engine.prompter
        self.logger = logger or engine.logger
        self.progress = progress or ConsoleProgress(self.logger)

    def collect_files(self, paths: Iterable) -> List[Path]:
        """Expand directories, keep explicit files, drop duplicates (first seen wins)."""
        candidates = []
        for path in paths:
            path = Path(path)
            if self.storage.is_dir(path):
                candidates.extend(self._walk(path))
            else:
                # Explicit files are classified later so rejections show up as skips
                candidates.append(path)

        unique = []
        seen = set()
        for path in candidates:
            key = path.resolve()
            if key in seen:
                continue
            seen.add(key)
            unique.append(path)
        return unique

    def _walk(self, directory: Path) -> List[Path]:
        try:
            entries = self.storage.list_directory(directory)
        except OSError as e:
            self.logger.error(f"Error reading directory {directory}: {e}")
            return []

        files = []
        for name, kind in entries:
            child = directory / name
            if kind == FILE:
                if should_process(child, self.config).allow:
                    files.append(child)
            elif kind == DIRECTORY:
                files.extend(self._walk(child))
        return files

    def confirmation_message(self, files: List[Path], label: str) -> str:
        names = '\n'.join(f.name for f in files[:CONFIRM_PREVIEW_FILES])
        more = ''
        if len(files) > CONFIRM_PREVIEW_FILES:
            more = f"\n... and {len(files) - CONFIRM_PREVIEW_FILES} more files"
        yes_no = lambda flag: 'Yes' if flag else 'No'
        return (
            f"{label}\n\n"
            f"Files to process ({len(files)}):\n{names}{more}\n\n"
            f"Settings:\n"
            f"- Create backup: {yes_no(self.config.create_backup)}\n"
            f"- Concurrent files: {self.config.concurrency}\n"
            f"- Auto-reopen files: {yes_no(self.config.auto_reopen_files)} (single file conversion only)"
        )

    def process_many(self, paths: Iterable, source_encoding: Optional[str] = None,
                     target_encoding: str = DEFAULT_TARGET_ENCODING,
                     label: str = 'Batch Convert') -> BatchResult:
        files = self.collect_files(paths)
        if not files:
            self.logger.info('No files to process')
            self.prompter.info('No files to process')
            return BatchResult()

        if not self.prompter.confirm(self.confirmation_message(files, label)):
            self.logger.info(f"{label} declined")
            return BatchResult()

        total = len(files)
        wave_size = min(self.config.concurrency, total)
        batch = BatchResult(total_files=total)

        for start in range(0, total, wave_size):
            if self.progress.is_cancelled():
                self.logger.warning('Operation cancelled by user')
                batch.cancelled = True
                break

            wave_results = self._run_wave(files[start:start + wave_size], source_encoding, target_encoding)
            for result in wave_results:
                batch.add(result)

            current = wave_results[-1]
            self.progress.report(batch.processed / total * 100,
                                 f"Processing {current.file_name} ({batch.processed}/{total})")

        self.logger.info(format_batch_summary(batch, label, detailed=False))
        return batch

    def _run_wave(self, wave: List[Path], source_encoding, target_encoding) -> List[ConversionResult]:
        results = []
        with ThreadPoolExecutor(max_workers=len(wave)) as executor:
            futures = {
                executor.submit(self.engine.convert, path, source_encoding, target_encoding): path
                for path in wave
            }
            for future in as_completed(futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    path = futures[future]
                    self.logger.error(f"Conversion failed: {e} ({path.name})")
                    results.append(ConversionResult(str(path), success=False,
                                                    target_encoding=target_encoding,
                                                    error=f"Conversion failed: {e}"))
        return results


def main():
    parser = argparse.ArgumentParser(description='Batch convert files between encodings')
    parser.add_argument('paths', nargs='+', help='Files and/or directories (walked recursively)')
    parser.add_argument('--from', dest='source', default=AUTO_DETECT,
                        help='Source encoding, or "auto" to detect per file (default: auto)')
    parser.add_argument('--to', dest='target', default=DEFAULT_TARGET_ENCODING,
                        help=f'Target encoding (default: {DEFAULT_TARGET_ENCODING})')
    parser.add_argument('--concurrency', type=int, help='Files converted at the same time (default: 5)')
    parser.add_argument('--report', help='Write the batch result to this JSON file (used by undo_conversion.py)')
    parser.add_argument('--summary', action='store_true', help='Print a one-line summary instead of details')
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

    target_label = lookup_encoding(target).label
    if source is None:
        label = f"Batch Convert to {target_label}"
    else:
        label = f"Batch Convert from {lookup_encoding(source).label} to {target_label}"

    prompter = ScriptedPrompter() if args.yes else ConsolePrompter()
    progress = ConsoleProgress(logger)
    install_interrupt_handler(progress)

    engine = build_engine(config, prompter, logger, reopen=command_reopener(args.reopen_with))
    orchestrator = BatchOrchestrator(engine, config, progress=progress)
    result = orchestrator.process_many(args.paths, source, target, label)

    if result.total_files:
        print(format_batch_summary(result, f"Batch Convert to {target_label}", config.show_detailed_results),
              file=sys.stderr)
    if args.report:
        save_report(Path(args.report), result, label)
    print(json.dumps(result.to_dict(), indent=2))

    if not args.yes and any(r.undoable for r in result.results):
        if prompter.choose('Undo this batch?', ['Undo', 'OK']) == 'Undo':
            engine.backups.undo_batch(result.results, progress)

    sys.exit(1 if result.errors else 0)


if __name__ == '__main__':
    main()
