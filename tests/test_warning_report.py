"""
Warning report loader tests:
  1. Alternative JSON layouts (warnings, issues, findings, bare array, custom key)
  2. Alternative field names
  3. Malformed entries and unreadable files
  4. File lookup tiers and summary
"""

import json
import os
import sys
import tempfile
import unittest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

REPORT = os.path.join(PROJECT_ROOT, "tests", "mock_report.json")

from astprint.context_selector import ContextStrategy
from astprint.warning_report import WarningReport

SAMPLE = {
    "type": "MagicNumber",
    "message": "'5' is a magic number.",
    "location": {"path": "src/Main.java", "startLine": 10},
    "severity": "High",
}


class ReportTestCase(unittest.TestCase):

    def make_report(self, data) -> WarningReport:
        with tempfile.NamedTemporaryFile(suffix=".json", mode="w", delete=False) as f:
            json.dump(data, f)
        self.addCleanup(os.unlink, f.name)
        return WarningReport(f.name)


class TestFormats(ReportTestCase):

    def test_layouts(self):
        cases = {
            "warnings": {"warnings": [SAMPLE]},
            "issues": {"issues": [SAMPLE]},
            "findings": {"findings": [SAMPLE]},
            "results": {"results": [SAMPLE]},
            "violations": {"violations": [SAMPLE]},
            "<root array>": [SAMPLE],
            "custom_report": {"tool": "pmd", "custom_report": [SAMPLE]},
        }
        for key, data in cases.items():
            with self.subTest(layout=key):
                report = self.make_report(data)
                self.assertEqual(len(report.get_all_warnings()), 1)
                self.assertEqual(report.get_summary()["detected_format"], key)

    def test_fields(self):
        w = self.make_report([SAMPLE]).get_all_warnings()[0]
        self.assertEqual(w.warning_type, "MagicNumber")
        self.assertEqual(w.file_path, "src/Main.java")
        self.assertEqual(w.line_number, 10)
        self.assertEqual(w.severity, "high")
        self.assertIsNone(w.strategy)
        self.assertIsNone(w.context_name)

    def test_alternative_field_names(self):
        item = {
            "rule": "UnusedPrivateField",
            "msg": "unused field",
            "file": "src\\pkg\\Main.java",
            "line": 42,
            "priority": "LOW",
            "category": "design",
            "context": "FIELDS",
            "name": "count",
        }
        w = self.make_report({"issues": [item]}).get_all_warnings()[0]
        self.assertEqual(w.warning_type, "UnusedPrivateField")
        self.assertEqual(w.message, "unused field")
        self.assertEqual(w.file_path, "src/pkg/Main.java")
        self.assertEqual(w.line_number, 42)
        self.assertEqual(w.severity, "low")
        self.assertEqual(w.category, "design")
        self.assertEqual(w.strategy, ContextStrategy.FIELDS)
        self.assertEqual(w.context_name, "count")


class TestMalformed(ReportTestCase):

    def test_empty(self):
        self.assertEqual(len(self.make_report({}).get_all_warnings()), 0)
        self.assertEqual(len(self.make_report([]).get_all_warnings()), 0)

    def test_entries_skipped(self):
        no_file = {"type": "X", "message": "m"}
        bad_strategy = dict(SAMPLE, strategy="sideways")
        report = self.make_report({"warnings": [SAMPLE, "bad", 42, None, no_file, bad_strategy]})
        self.assertEqual(len(report.get_all_warnings()), 1)

    def test_missing_file(self):
        self.assertEqual(len(WarningReport("/nonexistent/path/report.json").get_all_warnings()), 0)

    def test_invalid_json(self):
        with tempfile.NamedTemporaryFile(suffix=".json", mode="w", delete=False) as f:
            f.write("not valid json {{{")
        self.addCleanup(os.unlink, f.name)
        self.assertEqual(len(WarningReport(f.name).get_all_warnings()), 0)

    def test_binary_file(self):
        with tempfile.NamedTemporaryFile(suffix=".json", delete=False) as f:
            f.write(b"\xff\xfe\x00\x01binary data")
        self.addCleanup(os.unlink, f.name)
        self.assertEqual(len(WarningReport(f.name).get_all_warnings()), 0)

    def test_scalar_document(self):
        self.assertEqual(len(self.make_report("just a string").get_all_warnings()), 0)

    def test_directory_path(self):
        report = WarningReport(tempfile.gettempdir())
        self.assertEqual(len(report.get_all_warnings()), 0)
        self.assertIsNone(report.get_summary()["detected_format"])

    def test_no_list_of_objects(self):
        report = self.make_report({"tool": "pmd", "counts": [1, 2], "warnings": "none"})
        self.assertEqual(len(report.get_all_warnings()), 0)
        self.assertIsNone(report.get_summary()["detected_format"])


class TestMockReport(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.report = WarningReport(REPORT)

    def test_loaded(self):
        summary = self.report.get_summary()
        self.assertEqual(summary["total_warnings"], 7)
        self.assertEqual(summary["files_affected"], 4)
        self.assertEqual(summary["detected_format"], "warnings")
        self.assertEqual(summary["by_type"]["UnusedPrivateField"], 2)

    def test_lookup_exact(self):
        self.assertEqual(len(self.report.get_warnings_by_file("src/com/example/Limits.java")), 4)

    def test_lookup_case_insensitive(self):
        self.assertEqual(len(self.report.get_warnings_by_file("SRC/com/example/limits.java")), 4)

    def test_lookup_suffix(self):
        self.assertEqual(len(self.report.get_warnings_by_file("com/example/Limits.java")), 4)
        self.assertEqual(
            len(self.report.get_warnings_by_file("/work/project/src/com/example/Limits.java")), 4,
        )

    def test_lookup_basename(self):
        self.assertEqual(len(self.report.get_warnings_by_file("other/dir/Unbound.java")), 1)

    def test_lookup_none(self):
        self.assertEqual(self.report.get_warnings_by_file("Nothing.java"), [])

    def test_by_type(self):
        self.assertEqual(len(self.report.get_warnings_by_type("SimplifyBooleanReturns")), 2)

    def test_explicit_strategy(self):
        w = self.report.get_warnings_by_file("src/com/example/Unbound.java")[0]
        self.assertEqual(w.strategy, ContextStrategy.CLASS)


if __name__ == "__main__":
    unittest.main()
