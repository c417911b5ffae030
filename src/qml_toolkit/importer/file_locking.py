"""
Module: importer.file_locking

Purpose:
    Lets several import runs append to one question bank file. A batch
    is serialized up front and written under a single exclusive
    portalocker lock, so lines from two runs never interleave.

Key Functions:
    - locked_append_jsonl: Append records to a JSONL question bank

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - importer.sink: JsonlQuestionBank writes
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable

import portalocker

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 10.0  # seconds


def locked_append_jsonl(
    path: Path,
    records: Iterable[Dict[str, Any]],
    timeout: float = DEFAULT_LOCK_TIMEOUT,
) -> int:
    """
    Append records to a JSONL question bank.

    Every record is encoded before the bank is opened; a record that
    cannot be serialized raises and leaves the file untouched.

    Args:
        path: Bank file; missing parent folders are created.
        records: Dictionaries to append, one JSON line each.
        timeout: Seconds to wait for another writer to release the bank.

    Returns:
        Number of records written.

    Raises:
        TypeError: If a record is not JSON serializable.
        portalocker.LockException: If the lock is not acquired in time.

    Example:
        >>> locked_append_jsonl(bank_path, [{"kind": "essay", "name": "Q1"}])
        1
    """
    lines = [json.dumps(record, ensure_ascii=False) + "\n" for record in records]
    if not lines:
        return 0

    path.parent.mkdir(parents=True, exist_ok=True)
    with portalocker.Lock(path, mode="a", timeout=timeout, encoding="utf-8") as bank:
        bank.writelines(lines)
        bank.flush()

    logger.debug("Appended %d record(s) to %s", len(lines), path.name)
    return len(lines)
