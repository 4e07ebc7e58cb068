"""
Decide whether a path should be converted at all.

Not meant to be called directly. Only the path string is inspected; no file
is opened.
"""

import re
from functools import lru_cache
from pathlib import PurePath

from converter_models import FileCheck
from encoding_constants import BINARY_EXTENSIONS, SKIP_BINARY, SKIP_EXCLUDED, SKIP_UNSAVED, UNSAVED_SCHEME


@lru_cache(maxsize=256)
def _pattern_regex(pattern: str):
    # Only * and ? are wildcards; everything else matches literally
    parts = []
    for ch in pattern:
        if ch == '*':
            parts.append('.*')
        elif ch == '?':
            parts.append('.')
        else:
            parts.append(re.escape(ch))
    return re.compile(''.join(parts), re.DOTALL)


def matches_pattern(file_name: str, pattern: str) -> bool:
    """Whole-name glob match with * (any run) and ? (one character)."""
    return _pattern_regex(pattern).fullmatch(file_name) is not None


def is_unsaved(path) -> bool:
    return str(path).startswith(UNSAVED_SCHEME)


def should_process(path, config) -> FileCheck:
    """Classify a path; the first matching rule decides."""
    if is_unsaved(path):
        return FileCheck(False, SKIP_UNSAVED)

    name = PurePath(str(path)).name
    for pattern in config.exclude_patterns:
        if matches_pattern(name, pattern):
            return FileCheck(False, SKIP_EXCLUDED.format(pattern=pattern))

    if PurePath(name).suffix.lower() in BINARY_EXTENSIONS:
        return FileCheck(False, SKIP_BINARY)

    return FileCheck(True)
