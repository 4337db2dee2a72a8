"""
Constant Recognition Pass

Recognises simple constant declarations of the shape

    <3 modifiers> <type> <identifier> = <literal> ;

e.g. ``public static final int MAX = 10;`` and records a binding from the
identifier node to the literal node.  Later references to the identifier
are canonicalised to the literal's kind instead of the identifier's name.
"""

import logging
from typing import Dict, Optional

from astprint import token_types as tt
from astprint.syntax_tree import SyntaxTree
from astprint.traversal import walk

logger = logging.getLogger(__name__)

# modifiers, type, identifier, assignment, terminator
_CONSTANT_CHILD_COUNT = 5
_CONSTANT_MODIFIER_COUNT = 3


def is_constant(tree: SyntaxTree, index: int, bindings: Dict[int, int]) -> bool:
    """Return True and record a binding if ``index`` declares a constant.

    Any node may be passed; shapes that do not match simply return False.
    """
    node = tree.nodes[index]
    if node.token_type != tt.VARIABLE_DEF:
        return False
    children = tree.children(index)
    if len(children) != _CONSTANT_CHILD_COUNT:
        return False

    modifiers, type_node, ident, assign, semi = children
    if (tree.token_type(modifiers) != tt.MODIFIERS
            or tree.child_count(modifiers) != _CONSTANT_MODIFIER_COUNT):
        return False
    if tree.token_type(type_node) != tt.TYPE:
        return False
    if tree.token_type(ident) != tt.IDENT:
        return False
    if tree.token_type(assign) != tt.ASSIGN:
        return False
    if tree.token_type(semi) != tt.SEMI:
        return False

    literal = _initializer_token(tree, assign)
    if literal is None:
        return False

    bindings[ident] = literal
    return True


def _initializer_token(tree: SyntaxTree, assign: int) -> Optional[int]:
    """First grandchild of the assignment (the token under its EXPR)."""
    expr = tree.first_child(assign)
    if expr is None:
        return None
    return tree.first_child(expr)


def collect_constants(tree: SyntaxTree, root: Optional[int] = None) -> Dict[int, int]:
    """Run the recognition pass over every node reachable from ``root``.

    Defaults to the whole tree.  Returns a new identifier -> literal map.
    """
    if root is None:
        root = tree.root
    bindings: Dict[int, int] = {}
    for index in walk(tree, root):
        is_constant(tree, index, bindings)
    if bindings:
        logger.debug("Recognised %d constants in %s", len(bindings), tree.file_path)
    return bindings
