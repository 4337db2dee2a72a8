"""
Warning Report Loader

Parses JSON warning reports produced by static-analysis tools (PMD,
Checkstyle, SpotBugs exports or a CI wrapper).  Supports several key
conventions:

  • {"warnings": [...]}    (default)
  • {"issues": [...]}      (simplified export)
  • {"findings": [...]}    (dashboard export)
  • {"results": [...]}     (custom CI pipeline wrapper)
  • [...]                  (bare array at top level)

Each entry is normalised into an AnalysisWarning model.
"""

import json
import logging
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel

from astprint.context_selector import ContextStrategy

logger = logging.getLogger(__name__)

# Keys we scan for when auto-detecting the report structure
_CANDIDATE_KEYS = ("warnings", "issues", "findings", "results", "violations")
ROOT_ARRAY = "<root array>"


class AnalysisWarning(BaseModel):
    file_path: str
    line_number: int
    warning_type: str = ""
    category: str = ""
    message: str = ""
    severity: str = "normal"
    context_name: Optional[str] = None
    strategy: Optional[ContextStrategy] = None


class WarningReport:
    """Load and query a JSON warning report."""

    def __init__(self, report_path: str):
        self.report_path = report_path
        self.warnings: List[AnalysisWarning] = []
        self._detected_key: Optional[str] = None
        self._load_report()

    # ────────────────────────────────────────────────────────────────
    #  Loading
    # ────────────────────────────────────────────────────────────────

    def _load_report(self):
        data = self._read_json()
        if data is None:
            return

        located = self._locate_entries(data)
        if located is None:
            logger.error(
                "No warning list in %s (expected a top-level array or one of: %s)",
                self.report_path, ", ".join(_CANDIDATE_KEYS),
            )
            return
        self._detected_key, entries = located

        for entry in entries:
            try:
                warning = self._normalise(entry)
            except (ValueError, TypeError) as e:
                logger.warning("Skipping malformed warning %r: %s", entry, e)
                continue
            if warning is not None:
                self.warnings.append(warning)

        logger.info(
            "Loaded %d warnings from %s (format: %s)",
            len(self.warnings), self.report_path, self._detected_key,
        )

    def _read_json(self):
        """Decoded report document, or None when it cannot be read."""
        try:
            with open(self.report_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            logger.error("Cannot open report %s: %s", self.report_path, e)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Report %s is not UTF-8 JSON: %s", self.report_path, e)
        return None

    @staticmethod
    def _locate_entries(data) -> Optional[Tuple[str, list]]:
        """Find the warning array and the key it was found under."""
        if isinstance(data, list):
            return ROOT_ARRAY, data
        if not isinstance(data, dict):
            return None

        key = next((k for k in _CANDIDATE_KEYS if isinstance(data.get(k), list)), None)
        if key is None:
            # tool-specific key: the first list of objects
            key = next(
                (k for k, v in data.items() if isinstance(v, list) and v and isinstance(v[0], dict)),
                None,
            )
        if key is None:
            return None
        return key, data[key]

    @staticmethod
    def _normalise(item: dict) -> Optional[AnalysisWarning]:
        """Normalise a single report entry to an AnalysisWarning."""
        if not isinstance(item, dict):
            return None

        warning_type = (
            item.get("type")
            or item.get("warningType")
            or item.get("rule")
            or item.get("ruleId")
            or item.get("checkId")
            or ""
        )

        loc = item.get("location")
        if isinstance(loc, dict) and loc:
            file_path = loc.get("path") or loc.get("file") or ""
            line_number = loc.get("startLine") or loc.get("line") or 0
        else:
            file_path = ""
            line_number = 0
        if not file_path:
            file_path = item.get("file") or item.get("path") or item.get("fileName") or ""
        if not line_number:
            line_number = item.get("line") or item.get("startLine") or item.get("lineNumber") or 0

        if not file_path:
            raise ValueError("warning has no file path")

        strategy = item.get("strategy") or item.get("context")
        context_name = item.get("contextName") or item.get("name")

        return AnalysisWarning(
            file_path=str(file_path).replace("\\", "/"),
            line_number=int(line_number),
            warning_type=str(warning_type),
            category=str(item.get("category") or ""),
            message=str(item.get("message") or item.get("msg") or ""),
            severity=str(item.get("severity") or item.get("priority") or "normal").lower(),
            context_name=str(context_name) if context_name is not None else None,
            strategy=ContextStrategy(str(strategy).lower()) if strategy else None,
        )

    # ────────────────────────────────────────────────────────────────
    #  Queries
    # ────────────────────────────────────────────────────────────────

    def get_warnings_by_file(self, file_path: str) -> List[AnalysisWarning]:
        """Warnings for a file, most specific match tier first.

        Matching tiers (returns on the first tier with results):
          1. Exact match
          2. Case-insensitive exact match
          3. Suffix match (either direction)
          4. Basename match (case-insensitive)
        """
        query = file_path.replace("\\", "/").rstrip("/")
        query_lower = query.lower()
        query_base = query.rsplit("/", 1)[-1].lower()

        exact = []
        exact_ci = []
        suffix = []
        basename = []

        for w in self.warnings:
            wp = w.file_path.rstrip("/")
            wp_lower = wp.lower()

            if wp == query:
                exact.append(w)
            elif wp_lower == query_lower:
                exact_ci.append(w)
            elif wp.endswith("/" + query) or query.endswith("/" + wp):
                suffix.append(w)
            elif wp_lower.rsplit("/", 1)[-1] == query_base:
                basename.append(w)

        return exact or exact_ci or suffix or basename

    def get_warnings_by_type(self, warning_type: str) -> List[AnalysisWarning]:
        return [w for w in self.warnings if w.warning_type == warning_type]

    def get_all_warnings(self) -> List[AnalysisWarning]:
        return self.warnings

    def get_summary(self) -> Dict:
        """Return a summary of the report for quick overview."""
        files: Dict[str, int] = {}
        types: Dict[str, int] = {}
        for w in self.warnings:
            files[w.file_path] = files.get(w.file_path, 0) + 1
            types[w.warning_type] = types.get(w.warning_type, 0) + 1
        return {
            "total_warnings": len(self.warnings),
            "files_affected": len(files),
            "by_file": files,
            "by_type": types,
            "detected_format": self._detected_key,
        }
