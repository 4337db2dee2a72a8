"""
Tree Traversal Engine

Depth-first, pre-order walks over a SyntaxTree:
  • nodes_on_line          — every node on a source line
  • all_descendants        — a node and its whole subtree
  • find_block_by_ordinal  — the N-th node of a kind in document order
  • last_sibling           — end of a sibling chain
  • last_line_number       — closing line of the first body block
  • trees_equal            — exact kind/text equality of two subtrees

Walks use an explicit stack and return fresh lists, so every function is
reentrant and independent of recursion depth.
"""

from typing import Dict, Iterable, Iterator, List, Optional

from astprint import token_types as tt
from astprint.syntax_tree import SyntaxTree


def walk(tree: SyntaxTree, root: Optional[int]) -> Iterator[int]:
    """Yield root, its subtree, then each following sibling and its subtree."""
    if root is None:
        return
    stack = [root]
    while stack:
        index = stack.pop()
        yield index
        node = tree.nodes[index]
        if node.next_sibling is not None:
            stack.append(node.next_sibling)
        if node.first_child is not None:
            stack.append(node.first_child)


def walk_subtree(tree: SyntaxTree, start: Optional[int]) -> Iterator[int]:
    """Yield start and its subtree, leaving out the siblings of start."""
    if start is None:
        return
    yield start
    yield from walk(tree, tree.nodes[start].first_child)


# ═══════════════════════════════════════════════════════════════════════
#  Collection
# ═══════════════════════════════════════════════════════════════════════

def nodes_on_line(tree: SyntaxTree, root: Optional[int], line: int) -> List[int]:
    """All nodes whose line number equals ``line``, in document order."""
    return [i for i in walk(tree, root) if tree.nodes[i].line_number == line]


def all_descendants(tree: SyntaxTree, start: Optional[int]) -> List[int]:
    """``start`` followed by every node below it, in document order."""
    return list(walk_subtree(tree, start))


def find_block_by_ordinal(
    tree: SyntaxTree, root: Optional[int], kind: str = tt.OBJBLOCK, ordinal: int = 0
) -> Optional[int]:
    """Return the ``ordinal``-th (0-based) node of ``kind``, or None.

    Stops at the first node that reaches the requested count.
    """
    if ordinal < 0:
        return None
    seen = 0
    for index in walk(tree, root):
        if tree.nodes[index].token_type == kind:
            if seen == ordinal:
                return index
            seen += 1
    return None


def last_sibling(tree: SyntaxTree, index: int) -> int:
    """Follow next-sibling links to the end of the chain."""
    while tree.nodes[index].next_sibling is not None:
        index = tree.nodes[index].next_sibling
    return index


def last_line_number(tree: SyntaxTree) -> Optional[int]:
    """Line of the last element in the first OBJBLOCK (its closing brace).

    Returns None when the tree contains no type body at all.
    """
    block = find_block_by_ordinal(tree, tree.root, tt.OBJBLOCK, 0)
    if block is None:
        return None
    first = tree.nodes[block].first_child
    if first is None:
        return tree.nodes[block].line_number
    return tree.nodes[last_sibling(tree, first)].line_number


# ═══════════════════════════════════════════════════════════════════════
#  Ancestry
# ═══════════════════════════════════════════════════════════════════════

def parent_map(tree: SyntaxTree) -> Dict[int, int]:
    """Map each node index to the index of its parent."""
    parents: Dict[int, int] = {}
    for node in tree.nodes:
        child = node.first_child
        while child is not None:
            parents[child] = node.index
            child = tree.nodes[child].next_sibling
    return parents


def ancestors(index: int, parents: Dict[int, int]) -> List[int]:
    """Parent, grandparent, ... of ``index`` up to the root."""
    chain = []
    current = parents.get(index)
    while current is not None:
        chain.append(current)
        current = parents.get(current)
    return chain


def enclosing(
    tree: SyntaxTree, index: int, kinds: Iterable[str], parents: Dict[int, int]
) -> Optional[int]:
    """Nearest node of one of ``kinds``, starting with ``index`` itself."""
    wanted = set(kinds)
    for candidate in [index] + ancestors(index, parents):
        if tree.nodes[candidate].token_type in wanted:
            return candidate
    return None


# ═══════════════════════════════════════════════════════════════════════
#  Equality
# ═══════════════════════════════════════════════════════════════════════

def trees_equal(
    tree_a: SyntaxTree, a: Optional[int], tree_b: SyntaxTree, b: Optional[int]
) -> bool:
    """True if both subtrees match in kind and text at every node.

    Children are compared in order; the siblings of ``a`` and ``b``
    themselves are not part of the comparison.
    """
    if a is None or b is None:
        return a is None and b is None

    pending = [(a, b)]
    while pending:
        x, y = pending.pop()
        node_x, node_y = tree_a.nodes[x], tree_b.nodes[y]
        if node_x.token_type != node_y.token_type or node_x.text != node_y.text:
            return False
        kids_x = tree_a.children(x)
        kids_y = tree_b.children(y)
        if len(kids_x) != len(kids_y):
            return False
        pending.extend(zip(kids_x, kids_y))
    return True
