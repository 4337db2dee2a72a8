"""
Tree model & traversal tests.

Hand-built trees (NodeSpec -> SyntaxTree) check that:
  1. Indices are allocated in pre-order with correct child/sibling links
  2. Walks visit root, subtree and following siblings in document order
  3. Line collection, ordinal block search and last-line lookup behave
  4. Structural equality compares kind and text only
  5. Deep trees are handled without recursion
"""

import os
import sys
import unittest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from astprint import token_types as tt
from astprint.syntax_tree import NodeSpec, SyntaxTree
from astprint.traversal import (
    all_descendants,
    ancestors,
    enclosing,
    find_block_by_ordinal,
    last_line_number,
    last_sibling,
    nodes_on_line,
    parent_map,
    trees_equal,
    walk,
)


def N(kind, text="", line=1, *children):
    return NodeSpec(kind, text, line, 0, list(children))


def small_tree():
    # A(1) -> [B(2) -> [D(2)], C(3)], sibling E(2)
    return SyntaxTree.from_specs([
        N("A", "", 1, N("B", "", 2, N("D", "d", 2)), N("C", "c", 3)),
        N("E", "e", 2),
    ])


def class_tree(with_members=True):
    """CLASS_DEF with an OBJBLOCK spanning lines 1-5 and a nested class."""
    members = []
    if with_members:
        members = [
            N(tt.LCURLY, "{", 1),
            N(tt.VARIABLE_DEF, "", 2, N(tt.IDENT, "x", 2)),
            N(tt.CLASS_DEF, "", 3, N(tt.OBJBLOCK, "", 3, N(tt.LCURLY, "{", 3), N(tt.RCURLY, "}", 4))),
            N(tt.RCURLY, "}", 5),
        ]
    return SyntaxTree.from_specs([
        N(tt.COMPILATION_UNIT, "", 1,
          N(tt.CLASS_DEF, "", 1, N(tt.IDENT, "Outer", 1), N(tt.OBJBLOCK, "", 1, *members))),
    ])


class TestTreeBuilder(unittest.TestCase):

    def test_preorder_indices(self):
        tree = small_tree()
        self.assertEqual([n.token_type for n in tree.nodes], ["A", "B", "D", "C", "E"])
        self.assertEqual([n.index for n in tree.nodes], [0, 1, 2, 3, 4])

    def test_links(self):
        tree = small_tree()
        self.assertEqual(tree.first_child(0), 1)
        self.assertEqual(tree.next_sibling(1), 3)
        self.assertEqual(tree.first_child(1), 2)
        self.assertIsNone(tree.next_sibling(3))
        self.assertEqual(tree.next_sibling(0), 4)
        self.assertTrue(tree.node(4).is_leaf)

    def test_children_helpers(self):
        tree = small_tree()
        self.assertEqual(tree.children(0), [1, 3])
        self.assertEqual(tree.child_count(0), 2)
        self.assertEqual(tree.find_child(0, "C"), 3)
        self.assertIsNone(tree.find_child(0, "Z"))

    def test_empty_tree(self):
        tree = SyntaxTree.from_specs([])
        self.assertIsNone(tree.root)
        self.assertEqual(len(tree), 0)
        self.assertEqual(list(walk(tree, tree.root)), [])


class TestWalks(unittest.TestCase):

    def test_walk_includes_following_siblings(self):
        tree = small_tree()
        self.assertEqual(list(walk(tree, 0)), [0, 1, 2, 3, 4])

    def test_walk_from_inner_node(self):
        tree = small_tree()
        # B, its child D, then B's sibling C
        self.assertEqual(list(walk(tree, 1)), [1, 2, 3])

    def test_nodes_on_line(self):
        tree = small_tree()
        self.assertEqual(nodes_on_line(tree, 0, 2), [1, 2, 4])
        self.assertEqual(nodes_on_line(tree, 0, 99), [])

    def test_nodes_on_line_fresh_list(self):
        tree = small_tree()
        first = nodes_on_line(tree, 0, 2)
        first.append(42)
        self.assertEqual(nodes_on_line(tree, 0, 2), [1, 2, 4])

    def test_lines_do_not_overlap(self):
        tree = small_tree()
        second = nodes_on_line(tree, 0, 2)
        third = nodes_on_line(tree, 0, 3)
        self.assertEqual(third, [3])
        self.assertFalse(set(second) & set(third))
        for line, found in ((2, second), (3, third)):
            for index in found:
                self.assertEqual(tree.node(index).line_number, line)

    def test_all_descendants_excludes_siblings(self):
        tree = small_tree()
        self.assertEqual(all_descendants(tree, 0), [0, 1, 2, 3])
        self.assertEqual(all_descendants(tree, 1), [1, 2])
        self.assertEqual(all_descendants(tree, 3), [3])
        self.assertEqual(all_descendants(tree, None), [])


class TestBlocks(unittest.TestCase):

    def test_find_block_by_ordinal(self):
        tree = class_tree()
        first = find_block_by_ordinal(tree, tree.root, tt.OBJBLOCK, 0)
        second = find_block_by_ordinal(tree, tree.root, tt.OBJBLOCK, 1)
        self.assertEqual(tree.line(first), 1)
        self.assertEqual(tree.line(second), 3)
        self.assertLess(first, second)
        self.assertIsNone(find_block_by_ordinal(tree, tree.root, tt.OBJBLOCK, 2))
        self.assertIsNone(find_block_by_ordinal(tree, tree.root, tt.OBJBLOCK, -1))

    def test_last_sibling(self):
        tree = small_tree()
        self.assertEqual(last_sibling(tree, 1), 3)
        self.assertEqual(last_sibling(tree, 3), 3)
        self.assertEqual(last_sibling(tree, 0), 4)

    def test_last_sibling_of_longer_chain(self):
        tree = SyntaxTree.from_specs([
            N("X", "x", 1),
            N("Y", "y", 1),
            N("Z", "z", 1, N("P", "p", 2), N("Q", "q", 2), N("R", "r", 2)),
        ])
        self.assertEqual(last_sibling(tree, 0), 2)
        self.assertEqual(last_sibling(tree, 1), 2)
        self.assertEqual(last_sibling(tree, 3), 5)
        self.assertEqual(tree.token_type(5), "R")

    def test_last_line_number(self):
        self.assertEqual(last_line_number(class_tree()), 5)

    def test_last_line_number_empty_body(self):
        self.assertEqual(last_line_number(class_tree(with_members=False)), 1)

    def test_last_line_number_without_body(self):
        self.assertIsNone(last_line_number(small_tree()))


class TestAncestry(unittest.TestCase):

    def test_parent_map(self):
        tree = small_tree()
        parents = parent_map(tree)
        self.assertEqual(parents, {1: 0, 2: 1, 3: 0})

    def test_ancestors(self):
        tree = small_tree()
        self.assertEqual(ancestors(2, parent_map(tree)), [1, 0])
        self.assertEqual(ancestors(0, parent_map(tree)), [])

    def test_enclosing_includes_start(self):
        tree = small_tree()
        parents = parent_map(tree)
        self.assertEqual(enclosing(tree, 2, {"A"}, parents), 0)
        self.assertEqual(enclosing(tree, 2, {"D"}, parents), 2)
        self.assertIsNone(enclosing(tree, 2, {"E"}, parents))


class TestTreesEqual(unittest.TestCase):

    def test_equal(self):
        self.assertTrue(trees_equal(small_tree(), 0, small_tree(), 0))

    def test_siblings_of_start_ignored(self):
        without_sibling = SyntaxTree.from_specs([
            N("A", "", 1, N("B", "", 2, N("D", "d", 2)), N("C", "c", 3)),
        ])
        self.assertTrue(trees_equal(small_tree(), 0, without_sibling, 0))

    def test_line_numbers_ignored(self):
        moved = SyntaxTree.from_specs([
            N("A", "", 10, N("B", "", 20, N("D", "d", 20)), N("C", "c", 30)),
        ])
        self.assertTrue(trees_equal(small_tree(), 0, moved, 0))

    def test_text_differs(self):
        other = SyntaxTree.from_specs([
            N("A", "", 1, N("B", "", 2, N("D", "x", 2)), N("C", "c", 3)),
        ])
        self.assertFalse(trees_equal(small_tree(), 0, other, 0))

    def test_child_count_differs(self):
        other = SyntaxTree.from_specs([N("A", "", 1, N("B", "", 2, N("D", "d", 2)))])
        self.assertFalse(trees_equal(small_tree(), 0, other, 0))

    def test_absent_nodes(self):
        tree = small_tree()
        self.assertTrue(trees_equal(tree, None, tree, None))
        self.assertFalse(trees_equal(tree, 0, tree, None))
        self.assertFalse(trees_equal(tree, None, tree, 0))


class TestDeepTrees(unittest.TestCase):
    """Nesting far beyond the interpreter recursion limit."""

    DEPTH = 5000

    def setUp(self):
        spec = N(tt.IDENT, "leaf", 7)
        for _ in range(self.DEPTH):
            spec = N(tt.EXPR, "", 7, spec)
        self.tree = SyntaxTree.from_specs([spec])

    def test_build_and_walk(self):
        self.assertEqual(len(self.tree), self.DEPTH + 1)
        self.assertEqual(len(all_descendants(self.tree, 0)), self.DEPTH + 1)
        self.assertEqual(len(nodes_on_line(self.tree, 0, 7)), self.DEPTH + 1)

    def test_compare(self):
        self.assertTrue(trees_equal(self.tree, 0, self.tree, 0))


if __name__ == "__main__":
    unittest.main()
