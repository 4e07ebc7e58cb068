#!/usr/bin/env python3
"""
Restore converted files from their most recent .bak backup.

The backup used for each file is deleted after the restore, so every backup
can be used once.

Usage:
    python undo_conversion.py <file_path> [<file_path> ...] [--yes]
    python undo_conversion.py --report batch_report.json [--yes]

Output (JSON):
    {
        "restored": 2,
        "failed": 0,
        "files": [{"file_path": "docs/readme.txt", "restored": true}, ...]
    }
"""

import sys
import json
import argparse
from pathlib import Path

from backup_manager import BackupManager
from conversion_report import load_report
from converter_console import ConsolePrompter, ConsoleProgress, ScriptedPrompter, command_reopener, create_logger
from converter_models import UndoSummary
from file_storage import FileStorage


def undo_files(manager: BackupManager, file_paths, reopen: bool = False) -> UndoSummary:
    """Undo each file independently; one failure does not stop the rest."""
    summary = UndoSummary()
    for file_path in file_paths:
        summary.record(str(file_path), manager.undo_conversion(file_path, reopen=reopen))
    return summary


def main():
    parser = argparse.ArgumentParser(description='Undo encoding conversions from .bak backups')
    parser.add_argument('file_paths', nargs='*', help='Files to restore')
    parser.add_argument('--report', help='Batch report written by batch_convert.py --report')
    parser.add_argument('--reopen-with', metavar='COMMAND', help='Editor command used to reopen restored files')
    parser.add_argument('--yes', '-y', action='store_true', help='Do not ask for confirmation')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    args = parser.parse_args()

    if not args.file_paths and not args.report:
        parser.error('give file paths or --report')

    logger = create_logger(args.verbose)
    prompter = ScriptedPrompter() if args.yes else ConsolePrompter()
    manager = BackupManager(FileStorage(), prompter, logger, reopen=command_reopener(args.reopen_with))

    summary = UndoSummary()
    if args.report:
        try:
            _operation, batch = load_report(Path(args.report))
        except (OSError, ValueError) as e:
            print(json.dumps({'error': f'Cannot read report: {e}'}))
            sys.exit(1)
        report_summary = manager.undo_batch(batch.results, ConsoleProgress(logger))
        for file_path, ok in report_summary.files:
            summary.record(file_path, ok)

    if args.file_paths:
        file_summary = undo_files(manager, args.file_paths, reopen=bool(args.reopen_with))
        for file_path, ok in file_summary.files:
            summary.record(file_path, ok)

    print(json.dumps(summary.to_dict(), indent=2))
    sys.exit(1 if summary.failed else 0)


if __name__ == '__main__':
    main()
