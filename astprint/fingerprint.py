"""
Canonicaliser & Fingerprint Engine

Turns a context window (an ordered list of node indices) into a token
string and digests it:

  • TYPE nodes contribute the text of every node below them, so generic
    arguments and array dimensions take part in the fingerprint
  • references to recognised constants contribute the kind of the bound
    literal (``NUM_INT``), not the constant's name
  • every other node contributes its kind name

Each token is followed by DELIMITER.  An optional qualifying name is
appended last without a delimiter.  The string is hashed as UTF-8 with
HASH_ALGORITHM and rendered as lowercase hex.
"""

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from astprint import token_types as tt
from astprint.digest_converter import to_long
from astprint.errors import HashAlgorithmUnavailable
from astprint.syntax_tree import SyntaxTree
from astprint.traversal import all_descendants

logger = logging.getLogger(__name__)

DELIMITER = " "
CHARSET = "utf-8"
HASH_ALGORITHM = "sha1"
MIN_DIGEST_BYTES = 20  # 160 bits, the width of SHA-1


@dataclass(frozen=True)
class Fingerprint:
    """Digest of a warning context plus its 64-bit reduction.

    Two fingerprints are equal when their digests are equal; ``code`` is
    only a pre-filter.
    """
    digest: str
    code: int = field(compare=False)


def _new_hash(algorithm: str):
    try:
        digest = hashlib.new(algorithm)
        # variable-length digests (shake_*) cannot produce a plain hexdigest
        digest.copy().hexdigest()
    except (ValueError, TypeError) as e:
        raise HashAlgorithmUnavailable(algorithm, str(e)) from e
    if digest.digest_size < MIN_DIGEST_BYTES:
        raise HashAlgorithmUnavailable(algorithm, "digest narrower than 160 bits")
    return digest


def resolve_algorithm(algorithm: str = HASH_ALGORITHM) -> str:
    """Check that hashlib provides ``algorithm`` at 160 bits or wider."""
    _new_hash(algorithm)
    return algorithm


def canonical_string(
    tree: SyntaxTree,
    window: List[int],
    constants: Dict[int, int],
    name: Optional[str] = None,
) -> str:
    """Build the token string for ``window``."""
    # Identifier bindings in document order so repeated names stay stable
    bound = [
        (tree.text(ident), literal)
        for ident, literal in sorted(constants.items())
        if tree.token_type(ident) == tt.IDENT
    ]

    parts: List[str] = []
    for index in window:
        node = tree.nodes[index]

        if node.token_type == tt.TYPE:
            for child in tree.iter_children(index):
                for part in all_descendants(tree, child):
                    parts.append(tree.text(part))
                    parts.append(DELIMITER)
            continue

        substituted = False
        for ident_text, literal in bound:
            if ident_text == node.text:
                parts.append(tree.token_type(literal))
                parts.append(DELIMITER)
                substituted = True
        if not substituted:
            parts.append(node.token_type)
            parts.append(DELIMITER)

    if name is not None:
        parts.append(name)
    return "".join(parts)


def create_digest(text: str, algorithm: str = HASH_ALGORITHM) -> str:
    """Hex digest of ``text`` encoded as UTF-8."""
    digest = _new_hash(algorithm)
    digest.update(text.encode(CHARSET))
    return digest.hexdigest()


def compute_digest(
    tree: SyntaxTree,
    window: List[int],
    constants: Dict[int, int],
    name: Optional[str] = None,
    algorithm: str = HASH_ALGORITHM,
) -> str:
    return create_digest(canonical_string(tree, window, constants, name), algorithm)


def compute_fingerprint(
    tree: SyntaxTree,
    window: List[int],
    constants: Dict[int, int],
    name: Optional[str] = None,
    algorithm: str = HASH_ALGORITHM,
) -> Fingerprint:
    digest = compute_digest(tree, window, constants, name, algorithm)
    return Fingerprint(digest=digest, code=to_long(digest))
