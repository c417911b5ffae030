"""
Module: importer.diagnostics

Captures per-question problems during an import run and generates a
diagnostic report for review.

Structure:
- Each issue records the question position, id and name, plus the
  error class and message
- The report groups counts by issue type
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

ISSUE_FAILED = "failed"
ISSUE_UNSUPPORTED = "unsupported"
ISSUE_NOTICE = "notice"


@dataclass
class ImportIssue:
    """
    A single import issue with question context.

    Fields:
    - issue_type: "failed", "unsupported" or "notice"
    - error: Exception class name for failures, "" otherwise
    - condition: Offending CONDITION text for parse failures
    """
    issue_type: str
    position: int
    question_id: str
    question_name: str
    message: str
    error: str = ""
    condition: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "issue_type": self.issue_type,
            "position": self.position,
            "question_id": self.question_id,
            "question_name": self.question_name,
            "message": self.message,
        }
        if self.error:
            d["error"] = self.error
        if self.condition:
            d["condition"] = self.condition
        return d


class ImportDiagnostics:
    """
    Thread-safe collector for import issues.

    Kind importers run on worker threads when ImportConfig.workers > 1, so
    every mutation goes through the lock.
    """

    def __init__(self, source_name: str = ""):
        self.source_name = source_name
        self._issues: List[ImportIssue] = []
        self._lock = threading.Lock()
        self._imported = 0

    def add_failure(
        self,
        position: int,
        question_id: str,
        question_name: str,
        exc: Exception,
    ) -> None:
        """Record a question that could not be converted."""
        issue = ImportIssue(
            issue_type=ISSUE_FAILED,
            position=position,
            question_id=question_id,
            question_name=question_name,
            message=str(exc),
            error=type(exc).__name__,
            condition=getattr(exc, "condition", "") or "",
        )
        with self._lock:
            self._issues.append(issue)

    def add_unsupported(self, position: int, question_id: str, question_name: str, message: str) -> None:
        """Record a question skipped because its QTYPE has no importer."""
        issue = ImportIssue(
            issue_type=ISSUE_UNSUPPORTED,
            position=position,
            question_id=question_id,
            question_name=question_name,
            message=message,
        )
        with self._lock:
            self._issues.append(issue)

    def add_notice(self, position: int, question_id: str, question_name: str, message: str) -> None:
        issue = ImportIssue(
            issue_type=ISSUE_NOTICE,
            position=position,
            question_id=question_id,
            question_name=question_name,
            message=message,
        )
        with self._lock:
            self._issues.append(issue)

    def mark_imported(self, count: int = 1) -> None:
        with self._lock:
            self._imported += count

    @property
    def issues(self) -> List[ImportIssue]:
        """Issues ordered by question position."""
        with self._lock:
            return sorted(self._issues, key=lambda issue: issue.position)

    @property
    def issue_count(self) -> int:
        with self._lock:
            return len(self._issues)

    def count(self, issue_type: str) -> int:
        with self._lock:
            return sum(1 for issue in self._issues if issue.issue_type == issue_type)

    def summary(self) -> Dict[str, int]:
        """Counts of imported questions and of each issue type."""
        with self._lock:
            summary = {"imported": self._imported, ISSUE_FAILED: 0, ISSUE_UNSUPPORTED: 0, ISSUE_NOTICE: 0}
            for issue in self._issues:
                summary[issue.issue_type] = summary.get(issue.issue_type, 0) + 1
            return summary

    def generate_report(self) -> ImportReport:
        return ImportReport.from_issues(self.issues, self.summary(), self.source_name)

    def to_dict(self) -> Dict[str, Any]:
        return self.generate_report().to_dict()

    def write_report(self, path: Path) -> None:
        self.generate_report().save(path)


@dataclass
class ImportReport:
    """Complete diagnostics report of one import run."""
    generated_at: str
    source: str
    summary: Dict[str, int]
    issues: List[ImportIssue] = field(default_factory=list)

    @classmethod
    def from_issues(
        cls,
        issues: List[ImportIssue],
        summary: Dict[str, int],
        source: Optional[str] = None,
    ) -> ImportReport:
        return cls(
            generated_at=datetime.now(timezone.utc).isoformat(),
            source=source or "",
            summary=summary,
            issues=issues,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "source": self.source,
            "summary": self.summary,
            "total_issues": len(self.issues),
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info("Import diagnostics saved: %s", path)
