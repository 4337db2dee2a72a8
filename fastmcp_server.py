"""
AST Warning Fingerprint — MCP Server

Exposes tools via the Model Context Protocol:

  1. load_report          — load a JSON warning report + workspace root
  2. list_warnings        — list the warnings reported for a file
  3. fingerprint_warning  — fingerprint a single warning (file + line)
  4. fingerprint_file     — fingerprint every reported warning of a file
  5. explain_fingerprint  — show the context window and canonical token string
  6. compare_warnings     — check whether two warnings share a fingerprint
"""

from mcp.server.fastmcp import FastMCP
import os
import sys

# Ensure the astprint package is importable when run as a script
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from astprint.context_selector import ContextStrategy
from astprint.engine import WarningFingerprinter
from astprint.errors import FingerprintError
from astprint.fingerprint import HASH_ALGORITHM
from astprint.warning_report import WarningReport

# ═══════════════════════════════════════════════════════════════════════
#  Server Setup
# ═══════════════════════════════════════════════════════════════════════

mcp = FastMCP("AST Warning Fingerprint")

report = None
fingerprinter = None


def _strategy_arg(strategy: str):
    """Parse an optional strategy argument ('' means: pick by warning type)."""
    if not strategy.strip():
        return None
    return ContextStrategy(strategy.strip().lower())


def _ensure_fingerprinter() -> WarningFingerprinter:
    global fingerprinter
    if fingerprinter is None:
        fingerprinter = WarningFingerprinter(os.getcwd())
    return fingerprinter


# ═══════════════════════════════════════════════════════════════════════
#  Tool 1 — Load Report
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def load_report(report_path: str, workspace_root: str, hash_algorithm: str = HASH_ALGORITHM) -> str:
    """
    Loads a JSON warning report and sets the workspace the file paths refer to.

    Args:
        report_path:    Absolute path to the JSON warning report.
        workspace_root: Root directory of the Java sources.
        hash_algorithm: Digest used for fingerprints (default sha1).
    """
    global report, fingerprinter

    if not os.path.exists(report_path):
        return f"Error: Report file not found at {report_path}"
    if not os.path.exists(workspace_root):
        return f"Error: Workspace root not found at {workspace_root}"

    try:
        fingerprinter = WarningFingerprinter(workspace_root, hash_algorithm=hash_algorithm)
        report = WarningReport(report_path)
        summary = report.get_summary()
        return (
            f"Successfully loaded report. Found {summary['total_warnings']} warnings "
            f"in {summary['files_affected']} files.\n"
            f"Detected format: {summary['detected_format']}\n"
            f"Hash algorithm: {fingerprinter.hash_algorithm}"
        )
    except FingerprintError as e:
        return f"Error loading report: {e}"


# ═══════════════════════════════════════════════════════════════════════
#  Tool 2 — List Warnings
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def list_warnings(file_path: str) -> str:
    """
    Lists all reported warnings for a specific file.

    Args:
        file_path: Relative path of the file in the workspace.
    """
    if report is None:
        return "Error: No report loaded. Call load_report first."

    warnings = report.get_warnings_by_file(file_path)
    if not warnings:
        return f"No warnings found for {file_path}"

    result = f"**{len(warnings)} warnings in {file_path}:**\n\n"
    for w in warnings:
        result += (
            f"- **[{w.warning_type or 'unknown'}]** Line {w.line_number} "
            f"({w.severity}): {w.message}\n"
        )
    return result


# ═══════════════════════════════════════════════════════════════════════
#  Tool 3 — Fingerprint Warning
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def fingerprint_warning(file_path: str, line_number: int, warning_type: str = "",
                        strategy: str = "", name: str = "", category: str = "") -> str:
    """
    Computes the AST fingerprint of a warning.

    Args:
        file_path:    Java file, relative to the workspace root.
        line_number:  Line the warning is reported on.
        warning_type: Rule name; used to pick the context strategy.
        strategy:     Explicit strategy (line, environment, method, class,
                      fields, instance_fields, method_or_class, name_package).
        name:         Optional qualifying name appended to the token string.
        category:     Rule category, used when warning_type is not recognised.
    """
    engine = _ensure_fingerprinter()
    try:
        fp = engine.fingerprint(
            file_path, line_number, warning_type,
            strategy=_strategy_arg(strategy), name=name or None, category=category,
        )
    except (FingerprintError, ValueError) as e:
        return f"Error: {e}"
    return (
        f"`{file_path}:{line_number}`\n"
        f"- digest: `{fp.digest}`\n"
        f"- code: `{fp.code}`"
    )


# ═══════════════════════════════════════════════════════════════════════
#  Tool 4 — Fingerprint File
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def fingerprint_file(file_path: str) -> str:
    """
    Fingerprints every reported warning of a file (the file is parsed once).

    Args:
        file_path: Relative path of the file in the workspace.
    """
    if report is None or fingerprinter is None:
        return "Error: No report loaded. Call load_report first."

    warnings = report.get_warnings_by_file(file_path)
    if not warnings:
        return f"No warnings found for {file_path}"

    results = fingerprinter.fingerprint_warnings(warnings)
    lines = [
        f"## Fingerprints — `{file_path}`\n",
        "| Type | Line | Digest | Code |",
        "|------|------|--------|------|",
    ]
    for w, fp in results:
        if fp is None:
            lines.append(f"| {w.warning_type} | {w.line_number} | *parse error* | |")
        else:
            lines.append(f"| {w.warning_type} | {w.line_number} | `{fp.digest}` | {fp.code} |")
    return "\n".join(lines)


# ═══════════════════════════════════════════════════════════════════════
#  Tool 5 — Explain Fingerprint
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def explain_fingerprint(file_path: str, line_number: int, warning_type: str = "",
                        strategy: str = "", name: str = "", category: str = "") -> str:
    """
    Shows how a fingerprint is derived: chosen strategy, window size,
    recognised constants and the canonical token string.

    Args:
        file_path:    Java file, relative to the workspace root.
        line_number:  Line the warning is reported on.
        warning_type: Rule name; used to pick the context strategy.
        strategy:     Explicit strategy, overrides warning_type.
        name:         Optional qualifying name.
        category:     Rule category, used when warning_type is not recognised.
    """
    engine = _ensure_fingerprinter()
    try:
        info = engine.explain(
            file_path, line_number, warning_type,
            strategy=_strategy_arg(strategy), name=name or None, category=category,
        )
    except (FingerprintError, ValueError) as e:
        return f"Error: {e}"

    constants = ", ".join(f"{k} -> {v}" for k, v in sorted(info["constants"].items())) or "none"
    return f"""## Fingerprint of `{file_path}:{line_number}`

| Field | Value |
|-------|-------|
| **Strategy** | {info['strategy']} |
| **Window** | {info['window_size']} nodes |
| **Type body ends at** | line {info['last_line']} |
| **Constants** | {constants} |
| **Digest** | `{info['digest']}` |
| **Code** | `{info['code']}` |

### Canonical token string

```
{info['canonical']}
```
"""


# ═══════════════════════════════════════════════════════════════════════
#  Tool 6 — Compare Warnings
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def compare_warnings(file_a: str, line_a: int, file_b: str, line_b: int,
                     warning_type: str = "", strategy: str = "") -> str:
    """
    Checks whether two warning locations (e.g. before and after an edit)
    have the same fingerprint.

    Args:
        file_a, line_a: First warning location.
        file_b, line_b: Second warning location.
        warning_type:   Rule name shared by both warnings.
        strategy:       Explicit strategy, overrides warning_type.
    """
    engine = _ensure_fingerprinter()
    try:
        chosen = _strategy_arg(strategy)
        fp_a = engine.fingerprint(file_a, line_a, warning_type, strategy=chosen)
        fp_b = engine.fingerprint(file_b, line_b, warning_type, strategy=chosen)
    except (FingerprintError, ValueError) as e:
        return f"Error: {e}"

    verdict = "SAME warning" if engine.same_warning(fp_a, fp_b) else "DIFFERENT warnings"
    return (
        f"**{verdict}**\n"
        f"- `{file_a}:{line_a}` → `{fp_a.digest}`\n"
        f"- `{file_b}:{line_b}` → `{fp_b.digest}`"
    )


if __name__ == "__main__":
    mcp.run()
