"""
Shared encoding converter constants, imported by every other script.

Detector thresholds, size guards, backup limits and the file lists used by
the classifier all live here so the scripts agree on them.

To print the current values:
    python3 scripts/encoding_constants.py --markdown
"""

# === Detection ===
TINY_FILE_BYTES = 4                # below this, chardet / charset-normalizer are skipped
STATISTICAL_MIN_CONFIDENCE = 0.7   # chardet answer must be strictly above this

CONFIDENCE_EMPTY = 1.0
CONFIDENCE_SMALL_ASCII = 0.9
CONFIDENCE_SMALL_FILE = 0.7
CONFIDENCE_EDITOR_HINT = 0.95
CONFIDENCE_AUXILIARY = 0.8         # charset-normalizer exposes no comparable score
CONFIDENCE_HEURISTIC = 0.6
CONFIDENCE_DEFAULT = 0.5
CONFIDENCE_FALLBACK = 0.1
CONFIDENCE_MANUAL = 1.0

# Order is the tie-break: first clean-enough candidate wins.
HEURISTIC_CANDIDATES = (
    'big5', 'gbk', 'gb2312', 'shift_jis', 'euc-kr', 'iso-8859-1', 'windows-1252',
)
HEURISTIC_SMALL_BUFFER = 100       # bytes
HEURISTIC_SMALL_RATIO = 0.10       # replacement budget for small buffers (min 1)
HEURISTIC_LARGE_RATIO = 0.05

DEFAULT_ENCODING = 'utf-8'
DEFAULT_TARGET_ENCODING = 'utf-8'

# === Detection methods ===
METHOD_EMPTY = 'empty-file'
METHOD_SMALL_ASCII = 'small-ascii'
METHOD_SMALL_FILE = 'small-file'
METHOD_EDITOR_HINT = 'editor-hint'
METHOD_STATISTICAL = 'statistical-detector'
METHOD_AUXILIARY = 'auxiliary-detector'
METHOD_HEURISTIC = 'heuristic-roundtrip'
METHOD_DEFAULT = 'default'
METHOD_FALLBACK = 'fallback'
METHOD_MANUAL = 'manual'

# === Conversion ===
LARGE_FILE_WARN_BYTES = 50 * 1024 * 1024
LARGE_FILE_CONFIRM_BYTES = 100 * 1024 * 1024

# Leading byte-order marks stripped on the decode retry
BYTE_ORDER_MARKS = (
    b'\xef\xbb\xbf',
    b'\xff\xfe\x00\x00',
    b'\x00\x00\xfe\xff',
    b'\xff\xfe',
    b'\xfe\xff',
)

# === Skip reasons ===
SKIP_UNSAVED = 'Unsaved file'
SKIP_EXCLUDED = 'Excluded by pattern: {pattern}'
SKIP_BINARY = 'Binary file type'
SKIP_ALREADY_TARGET = 'Already in target encoding'
SKIP_LARGE_FILE = 'User cancelled due to large file size'

# === Backups ===
BACKUP_SUFFIX = '.bak'
MAX_BACKUP_ATTEMPTS = 100
LATEST_BACKUP_CANDIDATES = 6       # .bak, .bak.1 ... .bak.5

# === Batch ===
DEFAULT_CONCURRENCY = 5
CONFIRM_PREVIEW_FILES = 10
RESULT_PREVIEW_FILES = 5

# === Classification ===
UNSAVED_SCHEME = 'untitled:'

DEFAULT_EXCLUDE_PATTERNS = (
    '*.exe', '*.dll', '*.so', '*.dylib', '*.bin', '*.pdf',
    '*.jpg', '*.png', '*.gif', '*.zip', '*.tar', '*.gz',
)

BINARY_EXTENSIONS = frozenset({
    # executables and objects
    '.exe', '.dll', '.so', '.dylib', '.bin', '.obj', '.o', '.a', '.lib',
    # images
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.tiff', '.ico', '.webp',
    # audio / video
    '.mp3', '.mp4', '.avi', '.mov', '.wmv', '.flv', '.mkv', '.wav', '.ogg',
    # archives
    '.zip', '.rar', '.7z', '.tar', '.gz', '.bz2', '.xz', '.lzma',
    # office documents
    '.pdf', '.doc', '.docx', '.ppt', '.pptx', '.xls', '.xlsx',
})


def heuristic_threshold(length: int) -> int:
    """Replacement-character budget for a buffer of the given length."""
    if length < HEURISTIC_SMALL_BUFFER:
        return max(1, int(length * HEURISTIC_SMALL_RATIO))
    return int(length * HEURISTIC_LARGE_RATIO)


def generate_markdown_table():
    """Render the tunable thresholds as a markdown table."""
    rows = [
        ('Tiny file limit', f'{TINY_FILE_BYTES} bytes'),
        ('Statistical confidence floor', f'> {STATISTICAL_MIN_CONFIDENCE}'),
        ('Heuristic candidates', ', '.join(HEURISTIC_CANDIDATES)),
        ('Heuristic budget (< 100 bytes)', f'max(1, {HEURISTIC_SMALL_RATIO:.0%} of length)'),
        ('Heuristic budget (>= 100 bytes)', f'{HEURISTIC_LARGE_RATIO:.0%} of length'),
        ('Large file warning', f'{LARGE_FILE_WARN_BYTES // (1024 * 1024)}MB'),
        ('Large file confirmation', f'{LARGE_FILE_CONFIRM_BYTES // (1024 * 1024)}MB'),
        ('Backup probe limit', str(MAX_BACKUP_ATTEMPTS)),
        ('Default concurrency', str(DEFAULT_CONCURRENCY)),
    ]

    lines = ['| Setting | Value |', '|---|---|']
    for label, value in rows:
        lines.append(f'| {label} | {value} |')
    return '\n'.join(lines)


if __name__ == '__main__':
    import sys
    if '--markdown' in sys.argv:
        print(generate_markdown_table())
    else:
        print('Usage: python3 encoding_constants.py --markdown')
        sys.exit(1)
