"""
Warning Fingerprinter — ties the pieces together.

For one warning (file + line):
  1. parse the file once (java_parser)
  2. collect same-line nodes and constant bindings (build_context)
  3. ask the context strategy for the window (choose_area)
  4. canonicalise and digest the window (fingerprint)

All per-warning state lives in a fresh AstContext, so fingerprinting
different warnings never shares mutable data.
"""

import logging
import os
from typing import Dict, List, Optional, Tuple

from astprint.context_selector import (
    AstContext,
    ContextStrategy,
    build_context,
    choose_area,
    strategy_for,
)
from astprint.errors import ParseError
from astprint.fingerprint import (
    HASH_ALGORITHM,
    Fingerprint,
    canonical_string,
    compute_fingerprint,
    resolve_algorithm,
)
from astprint.java_parser import parse_file
from astprint.syntax_tree import SyntaxTree
from astprint.warning_report import AnalysisWarning, WarningReport

logger = logging.getLogger(__name__)


class WarningFingerprinter:
    """Computes AST fingerprints for warnings in a workspace."""

    def __init__(self, workspace_root: str = ".", hash_algorithm: str = HASH_ALGORITHM,
                 strict: bool = True):
        self.workspace_root = workspace_root
        # fail at construction, not on the first warning
        self.hash_algorithm = resolve_algorithm(hash_algorithm)
        self.strict = strict

    def _resolve(self, file_path: str) -> str:
        """Resolve a (possibly POSIX-style) relative path to an absolute path."""
        native = file_path.replace("/", os.sep).replace("\\", os.sep)
        if os.path.isabs(native):
            return native
        return os.path.join(self.workspace_root, native)

    def parse(self, file_path: str) -> SyntaxTree:
        return parse_file(self._resolve(file_path), strict=self.strict)

    @staticmethod
    def _strategy(strategy: Optional[ContextStrategy], warning_type: str,
                  category: str = "") -> ContextStrategy:
        if strategy is not None:
            return ContextStrategy(strategy)
        return strategy_for(warning_type, category)

    # ────────────────────────────────────────────────────────────────
    #  Single warning
    # ────────────────────────────────────────────────────────────────

    def fingerprint_tree(
        self,
        tree: SyntaxTree,
        line: int,
        strategy: ContextStrategy,
        name: Optional[str] = None,
    ) -> Fingerprint:
        """Fingerprint a warning on ``line`` of an already parsed tree."""
        ctx = build_context(tree, line)
        window = choose_area(strategy, ctx)
        return compute_fingerprint(tree, window, ctx.constants, name, self.hash_algorithm)

    def fingerprint(
        self,
        file_path: str,
        line: int,
        warning_type: str = "",
        strategy: Optional[ContextStrategy] = None,
        name: Optional[str] = None,
        category: str = "",
    ) -> Fingerprint:
        """Parse ``file_path`` and fingerprint the warning at ``line``.

        Raises ParseError if the file cannot be parsed.
        """
        tree = self.parse(file_path)
        return self.fingerprint_tree(
            tree, line, self._strategy(strategy, warning_type, category), name
        )

    def fingerprint_warning(self, warning: AnalysisWarning) -> Fingerprint:
        tree = self.parse(warning.file_path)
        strategy = self._strategy(warning.strategy, warning.warning_type, warning.category)
        return self.fingerprint_tree(tree, warning.line_number, strategy, warning.context_name)

    def explain(
        self,
        file_path: str,
        line: int,
        warning_type: str = "",
        strategy: Optional[ContextStrategy] = None,
        name: Optional[str] = None,
        category: str = "",
    ) -> Dict:
        """Describe how the fingerprint of a warning is derived."""
        tree = self.parse(file_path)
        chosen = self._strategy(strategy, warning_type, category)
        ctx: AstContext = build_context(tree, line)
        window = choose_area(chosen, ctx)
        fp = compute_fingerprint(tree, window, ctx.constants, name, self.hash_algorithm)
        return {
            "file": file_path,
            "line": line,
            "strategy": chosen.value,
            "window_size": len(window),
            "constants": {tree.text(i): tree.token_type(lit) for i, lit in ctx.constants.items()},
            "canonical": canonical_string(tree, window, ctx.constants, name),
            "last_line": ctx.last_line,
            "digest": fp.digest,
            "code": fp.code,
        }

    # ────────────────────────────────────────────────────────────────
    #  Batches
    # ────────────────────────────────────────────────────────────────

    def fingerprint_warnings(
        self, warnings: List[AnalysisWarning]
    ) -> List[Tuple[AnalysisWarning, Optional[Fingerprint]]]:
        """Fingerprint many warnings, parsing each file only once.

        Warnings in files that cannot be parsed get ``None``.
        """
        trees: Dict[str, Optional[SyntaxTree]] = {}
        results: List[Tuple[AnalysisWarning, Optional[Fingerprint]]] = []

        for warning in warnings:
            if warning.file_path not in trees:
                try:
                    trees[warning.file_path] = self.parse(warning.file_path)
                except ParseError as e:
                    logger.warning("Skipping warnings in %s: %s", warning.file_path, e)
                    trees[warning.file_path] = None

            tree = trees[warning.file_path]
            if tree is None:
                results.append((warning, None))
                continue
            strategy = self._strategy(warning.strategy, warning.warning_type, warning.category)
            results.append((
                warning,
                self.fingerprint_tree(tree, warning.line_number, strategy, warning.context_name),
            ))

        failed = sum(1 for _, fp in results if fp is None)
        logger.info(
            "Fingerprinted %d warnings in %d files (%d without fingerprint)",
            len(results) - failed, len(trees), failed,
        )
        return results

    def fingerprint_report(
        self, report: WarningReport
    ) -> List[Tuple[AnalysisWarning, Optional[Fingerprint]]]:
        return self.fingerprint_warnings(report.get_all_warnings())

    @staticmethod
    def same_warning(a: Optional[Fingerprint], b: Optional[Fingerprint]) -> bool:
        """True if both fingerprints exist and identify the same context."""
        if a is None or b is None:
            return False
        if a.code != b.code:
            return False
        return a.digest == b.digest
