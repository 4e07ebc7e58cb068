"""
Human-readable summaries and JSON reports of conversion results.
Not meant to be called directly.
"""

import json
from pathlib import Path
from typing import List, Tuple

from converter_models import CONVERTED, FAILED, SKIPPED, BatchResult, ConversionResult
from encoding_constants import RESULT_PREVIEW_FILES

REPORT_VERSION = 1


def _preview(title: str, results: List[ConversionResult], describe) -> List[str]:
    if not results:
        return []
    lines = [f"{title} ({len(results)}):"]
    for r in results[:RESULT_PREVIEW_FILES]:
        lines.append(f"- {r.file_name}: {describe(r)}")
    if len(results) > RESULT_PREVIEW_FILES:
        lines.append(f"... and {len(results) - RESULT_PREVIEW_FILES} more")
    lines.append('')
    return lines


def format_batch_summary(result: BatchResult, operation: str, detailed: bool = True) -> str:
    """Summary of a batch; the detailed form lists up to five files per outcome."""
    if not detailed:
        return (f"{operation} completed. Processed: {result.processed}, Converted: {result.converted}, "
                f"Skipped: {result.skipped}, Errors: {result.errors}")

    lines = [
        f"{operation} Results:",
        '',
        'Summary:',
        f"- Total files: {result.total_files}",
        f"- Processed: {result.processed}",
        f"- Converted: {result.converted}",
        f"- Skipped: {result.skipped}",
        f"- Errors: {result.errors}",
        '',
    ]
    if result.cancelled:
        lines.insert(1, 'Cancelled before all files were processed.')

    lines += _preview('Successfully converted', result.by_outcome(CONVERTED),
                      lambda r: f"{r.original_encoding} -> {r.target_encoding}")
    lines += _preview('Skipped files', result.by_outcome(SKIPPED), lambda r: r.skip_reason)
    lines += _preview('Failed files', result.by_outcome(FAILED), lambda r: r.error)
    return '\n'.join(lines).rstrip()


def format_single_result(result: ConversionResult) -> str:
    """One-line message for a single-file conversion."""
    name = result.file_name
    if result.success and result.skipped:
        return f"File {(result.skip_reason or 'skipped').lower()}: {name}"
    if result.skipped:
        return f"File skipped ({result.skip_reason}): {name}"
    if not result.success:
        return result.error or f"Conversion failed: {name}"
    source = (result.original_encoding or '').upper()
    target = (result.target_encoding or '').upper()
    return f"File converted from {source} to {target}: {name}"


def save_report(path: Path, result: BatchResult, operation: str) -> None:
    """Write a batch result as JSON so it can be undone later."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {'version': REPORT_VERSION, 'operation': operation}
    payload.update(result.to_dict())
    with path.open('w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def load_report(path: Path) -> Tuple[str, BatchResult]:
    """Read a report written by save_report; returns (operation, result)."""
    with Path(path).open('r', encoding='utf-8') as f:
        payload = json.load(f)
    if not isinstance(payload, dict) or 'results' not in payload:
        raise ValueError(f"Not a conversion report: {path}")
    return payload.get('operation', ''), BatchResult.from_dict(payload)
