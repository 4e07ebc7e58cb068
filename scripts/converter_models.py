"""
Result types shared by the converter scripts.
Not meant to be called directly.
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import List, Optional, Tuple

CONVERTED = 'converted'
SKIPPED = 'skipped'
FAILED = 'failed'


@dataclass(frozen=True)
class DetectionResult:
    """Best guess for the encoding of a byte buffer."""
    encoding: str       # canonical encoding name
    confidence: float   # 0..1
    method: str         # which detection step answered


@dataclass(frozen=True)
class FileCheck:
    """Classifier verdict for a single path."""
    allow: bool
    reason: Optional[str] = None


@dataclass
class ConversionResult:
    """Outcome of converting one file."""
    file_path: str
    success: bool
    skipped: bool = False
    skip_reason: Optional[str] = None
    original_encoding: Optional[str] = None
    target_encoding: Optional[str] = None
    file_size: Optional[int] = None
    backup_created: bool = False
    error: Optional[str] = None
    detected_original_encoding: Optional[str] = None
    confidence: Optional[float] = None
    detection_method: Optional[str] = None

    @property
    def outcome(self) -> str:
        if self.skipped:
            return SKIPPED
        if self.success:
            return CONVERTED
        return FAILED

    @property
    def file_name(self) -> str:
        return Path(self.file_path).name

    @property
    def undoable(self) -> bool:
        return self.success and not self.skipped and self.backup_created

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'ConversionResult':
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class BatchResult:
    """Aggregate over the files of one batch, in processing order."""
    total_files: int = 0
    processed: int = 0
    converted: int = 0
    skipped: int = 0
    errors: int = 0
    results: List[ConversionResult] = field(default_factory=list)
    cancelled: bool = False

    def add(self, result: ConversionResult) -> None:
        self.results.append(result)
        self.processed += 1
        outcome = result.outcome
        if outcome == CONVERTED:
            self.converted += 1
        elif outcome == SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1

    def by_outcome(self, outcome: str) -> List[ConversionResult]:
        return [r for r in self.results if r.outcome == outcome]

    def to_dict(self) -> dict:
        return {
            'total_files': self.total_files,
            'processed': self.processed,
            'converted': self.converted,
            'skipped': self.skipped,
            'errors': self.errors,
            'cancelled': self.cancelled,
            'results': [r.to_dict() for r in self.results],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'BatchResult':
        return cls(
            total_files=data.get('total_files', 0),
            processed=data.get('processed', 0),
            converted=data.get('converted', 0),
            skipped=data.get('skipped', 0),
            errors=data.get('errors', 0),
            cancelled=data.get('cancelled', False),
            results=[ConversionResult.from_dict(r) for r in data.get('results', [])],
        )


@dataclass
class UndoSummary:
    """Outcome of restoring several files from their backups."""
    restored: int = 0
    failed: int = 0
    files: List[Tuple[str, bool]] = field(default_factory=list)

    def record(self, file_path: str, ok: bool) -> None:
        self.files.append((file_path, ok))
        if ok:
            self.restored += 1
        else:
            self.failed += 1

    @property
    def message(self) -> str:
        return f"Undo completed. Restored: {self.restored}, Failed: {self.failed}"

    def to_dict(self) -> dict:
        return {
            'restored': self.restored,
            'failed': self.failed,
            'files': [{'file_path': p, 'restored': ok} for p, ok in self.files],
        }
