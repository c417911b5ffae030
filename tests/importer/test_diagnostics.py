"""
Unit Tests for Import Diagnostics

Tests for ImportDiagnostics and ImportReport.
"""

import json
import threading

from qml_toolkit.core.errors import ConditionParseError
from qml_toolkit.importer.diagnostics import (
    ISSUE_FAILED,
    ISSUE_NOTICE,
    ISSUE_UNSUPPORTED,
    ImportDiagnostics,
    ImportReport,
)


class TestImportDiagnostics:
    """Tests for ImportDiagnostics collector."""

    def test_add_failure_when_parse_error_then_condition_recorded(self):
        diagnostics = ImportDiagnostics("quiz.qml")
        exc = ConditionParseError("Unexpected word 'FOO'", condition='"0" FOO "1"')
        diagnostics.add_failure(3, "1011", "Broken", exc)

        issue = diagnostics.issues[0]
        assert issue.issue_type == ISSUE_FAILED
        assert issue.error == "ConditionParseError"
        assert issue.condition == '"0" FOO "1"'
        assert "Unexpected word" in issue.message

    def test_add_failure_when_plain_exception_then_no_condition(self):
        diagnostics = ImportDiagnostics()
        diagnostics.add_failure(1, "1", "Q", ValueError("bad"))
        assert diagnostics.issues[0].condition == ""
        assert "condition" not in diagnostics.issues[0].to_dict()

    def test_issues_when_added_out_of_order_then_sorted_by_position(self):
        diagnostics = ImportDiagnostics()
        diagnostics.add_notice(5, "5", "Five", "late")
        diagnostics.add_unsupported(2, "2", "Two", "early")
        assert [issue.position for issue in diagnostics.issues] == [2, 5]

    def test_summary_when_mixed_issues_then_counts_by_type(self):
        diagnostics = ImportDiagnostics()
        diagnostics.mark_imported(3)
        diagnostics.add_unsupported(1, "1", "A", "x")
        diagnostics.add_notice(2, "2", "B", "y")
        diagnostics.add_notice(3, "3", "C", "z")

        assert diagnostics.summary() == {
            "imported": 3, ISSUE_FAILED: 0, ISSUE_UNSUPPORTED: 1, ISSUE_NOTICE: 2,
        }
        assert diagnostics.issue_count == 3
        assert diagnostics.count(ISSUE_NOTICE) == 2

    def test_add_when_concurrent_threads_then_nothing_lost(self):
        diagnostics = ImportDiagnostics()

        def worker(offset):
            for i in range(100):
                diagnostics.add_notice(offset + i, str(i), "Q", "n")
                diagnostics.mark_imported()

        threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert diagnostics.issue_count == 400
        assert diagnostics.summary()["imported"] == 400

    def test_write_report_when_path_then_json_file(self, tmp_path):
        diagnostics = ImportDiagnostics("quiz.qml")
        diagnostics.add_unsupported(1, "1010", "Hotspot", "not supported")
        path = tmp_path / "reports" / "diagnostics.json"

        diagnostics.write_report(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["source"] == "quiz.qml"
        assert data["total_issues"] == 1
        assert data["issues"][0]["question_id"] == "1010"
        assert "error" not in data["issues"][0]


class TestImportReport:
    """Tests for ImportReport."""

    def test_from_issues_when_no_source_then_empty_string(self):
        report = ImportReport.from_issues([], {"imported": 0})
        assert report.source == ""
        assert report.generated_at

    def test_to_json_when_unicode_then_not_escaped(self):
        diagnostics = ImportDiagnostics()
        diagnostics.add_notice(1, "1", "Café", "naïve")
        assert "Café" in diagnostics.generate_report().to_json()
