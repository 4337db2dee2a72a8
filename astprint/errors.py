"""
Error types raised by the fingerprinting core.

  • ParseError               — a source file cannot be turned into a tree
  • HashAlgorithmUnavailable — the configured digest is missing or narrower than SHA-1
"""

from typing import Optional


class FingerprintError(Exception):
    """Base class for all errors raised by astprint."""


class ParseError(FingerprintError):
    """The file is unreadable, undecodable, binary or not valid Java."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(f"Cannot parse {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason


class HashAlgorithmUnavailable(FingerprintError):
    """The requested digest algorithm is not available in this runtime."""

    def __init__(self, algorithm: str, detail: Optional[str] = None):
        message = f"Requested algorithm not found: {algorithm}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.algorithm = algorithm
