"""
Canonicaliser, digest and 64-bit reduction tests.
"""

import os
import sys
import unittest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from astprint import token_types as tt
from astprint.digest_converter import to_long
from astprint.errors import HashAlgorithmUnavailable
from astprint.fingerprint import (
    Fingerprint,
    canonical_string,
    compute_digest,
    compute_fingerprint,
    create_digest,
    resolve_algorithm,
)
from astprint.syntax_tree import NodeSpec, SyntaxTree

SHA1_EMPTY = "da39a3ee5e6b4b0d3255bfef95601890afd80709"
SHA1_ABC = "a9993e364706816aba3e25717850c26c9cd0d89d"


def statement_tree():
    """MAX constant declaration on line 1, ``return MAX;`` on line 2."""
    return SyntaxTree.from_specs([
        NodeSpec(tt.OBJBLOCK, children=[
            NodeSpec(tt.VARIABLE_DEF, line=1, children=[
                NodeSpec(tt.MODIFIERS, line=1, children=[
                    NodeSpec("LITERAL_PUBLIC", "public", 1),
                    NodeSpec(tt.LITERAL_STATIC, "static", 1),
                    NodeSpec("LITERAL_FINAL", "final", 1),
                ]),
                NodeSpec(tt.TYPE, line=1, children=[NodeSpec("LITERAL_INT", "int", 1)]),
                NodeSpec(tt.IDENT, "MAX", 1),
                NodeSpec(tt.ASSIGN, "=", 1, children=[
                    NodeSpec(tt.EXPR, line=1, children=[NodeSpec(tt.NUM_INT, "10", 1)]),
                ]),
                NodeSpec(tt.SEMI, ";", 1),
            ]),
            NodeSpec("LITERAL_RETURN", "return", 2, children=[
                NodeSpec(tt.EXPR, line=2, children=[NodeSpec(tt.IDENT, "MAX", 2)]),
                NodeSpec(tt.SEMI, ";", 2),
            ]),
        ]),
    ])


def indices(tree, kind, text=None):
    return [
        n.index for n in tree.nodes
        if n.token_type == kind and (text is None or n.text == text)
    ]


class TestCanonicalString(unittest.TestCase):

    def test_kinds_joined_with_delimiter(self):
        tree = statement_tree()
        ret = indices(tree, "LITERAL_RETURN")[0]
        window = [ret] + tree.children(ret)
        self.assertEqual(canonical_string(tree, window, {}), "LITERAL_RETURN EXPR SEMI ")

    def test_type_contributes_descendant_texts(self):
        tree = SyntaxTree.from_specs([
            NodeSpec(tt.TYPE, children=[NodeSpec(tt.IDENT, "A"), NodeSpec(tt.IDENT, "B")]),
        ])
        self.assertEqual(canonical_string(tree, [0], {}), "A B ")

    def test_generic_type_texts(self):
        tree = SyntaxTree.from_specs([
            NodeSpec(tt.TYPE, children=[
                NodeSpec(tt.IDENT, "List"),
                NodeSpec(tt.TYPE_ARGUMENTS, children=[
                    NodeSpec(tt.GENERIC_START, "<"),
                    NodeSpec(tt.TYPE_ARGUMENT, children=[NodeSpec(tt.IDENT, "String")]),
                    NodeSpec(tt.GENERIC_END, ">"),
                ]),
            ]),
        ])
        self.assertEqual(canonical_string(tree, [0], {}), "List  <  String > ")

    def test_constant_reference_uses_literal_kind(self):
        tree = statement_tree()
        reference = indices(tree, tt.IDENT, "MAX")[1]
        ident = indices(tree, tt.IDENT, "MAX")[0]
        literal = indices(tree, tt.NUM_INT)[0]
        self.assertEqual(canonical_string(tree, [reference], {ident: literal}), "NUM_INT ")
        self.assertEqual(canonical_string(tree, [reference], {}), "IDENT ")

    def test_every_matching_binding_contributes(self):
        tree = SyntaxTree.from_specs([
            NodeSpec(tt.IDENT, "X"),
            NodeSpec(tt.NUM_INT, "1"),
            NodeSpec(tt.IDENT, "X"),
            NodeSpec(tt.STRING_LITERAL, '"s"'),
            NodeSpec(tt.IDENT, "X"),
        ])
        bindings = {2: 3, 0: 1}
        self.assertEqual(canonical_string(tree, [4], bindings), "NUM_INT STRING_LITERAL ")

    def test_name_appended_without_delimiter(self):
        tree = statement_tree()
        semi = indices(tree, tt.SEMI)[-1]
        self.assertEqual(canonical_string(tree, [semi], {}, "count"), "SEMI count")
        self.assertEqual(canonical_string(tree, [semi], {}, None), "SEMI ")

    def test_empty_window(self):
        tree = statement_tree()
        self.assertEqual(canonical_string(tree, [], {}), "")
        self.assertEqual(canonical_string(tree, [], {}, "only"), "only")


class TestDigest(unittest.TestCase):

    def test_sha1(self):
        self.assertEqual(create_digest(""), SHA1_EMPTY)
        self.assertEqual(create_digest("abc"), SHA1_ABC)

    def test_wider_algorithm(self):
        self.assertEqual(
            create_digest("abc", "sha256"),
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad",
        )

    def test_narrow_algorithm_rejected(self):
        with self.assertRaises(HashAlgorithmUnavailable) as cm:
            create_digest("abc", "md5")
        self.assertIn("narrower than 160 bits", str(cm.exception))
        with self.assertRaises(HashAlgorithmUnavailable):
            resolve_algorithm("md5")

    def test_unknown_algorithm(self):
        with self.assertRaises(HashAlgorithmUnavailable) as cm:
            create_digest("abc", "no-such-digest")
        self.assertIn("no-such-digest", str(cm.exception))

    def test_resolve_algorithm(self):
        self.assertEqual(resolve_algorithm("sha256"), "sha256")
        with self.assertRaises(HashAlgorithmUnavailable):
            resolve_algorithm("no-such-digest")
        with self.assertRaises(HashAlgorithmUnavailable):
            resolve_algorithm("shake_128")

    def test_empty_window_digest(self):
        tree = statement_tree()
        self.assertEqual(compute_digest(tree, [], {}), SHA1_EMPTY)

    def test_deterministic(self):
        tree = statement_tree()
        window = list(range(len(tree)))
        first = compute_fingerprint(tree, window, {})
        second = compute_fingerprint(statement_tree(), window, {})
        self.assertEqual(first, second)
        self.assertEqual(first.code, second.code)

    def test_name_changes_digest(self):
        tree = statement_tree()
        window = list(range(len(tree)))
        self.assertNotEqual(
            compute_digest(tree, window, {}),
            compute_digest(tree, window, {}, "other"),
        )

    def test_fingerprint_code(self):
        tree = statement_tree()
        fp = compute_fingerprint(tree, [], {})
        self.assertEqual(fp.digest, SHA1_EMPTY)
        self.assertEqual(fp.code, to_long(SHA1_EMPTY))


class TestFingerprintValue(unittest.TestCase):

    def test_equality_on_digest(self):
        self.assertEqual(Fingerprint("ab", 1), Fingerprint("ab", 2))
        self.assertNotEqual(Fingerprint("ab", 1), Fingerprint("cd", 1))

    def test_hashable(self):
        self.assertEqual(len({Fingerprint("ab", 1), Fingerprint("ab", 2)}), 1)


class TestToLong(unittest.TestCase):

    def test_low_bits_negative(self):
        self.assertEqual(to_long(SHA1_EMPTY), 0x95601890AFD80709 - (1 << 64))

    def test_low_bits_positive(self):
        self.assertEqual(to_long(SHA1_ABC), 0x7850C26C9CD0D89D)

    def test_boundaries(self):
        self.assertEqual(to_long("ff" * 8), -1)
        self.assertEqual(to_long("7fffffffffffffff"), (1 << 63) - 1)
        self.assertEqual(to_long("8000000000000000"), -(1 << 63))
        self.assertEqual(to_long("1"), 1)
        self.assertEqual(to_long("10000000000000000"), 0)

    def test_case_insensitive(self):
        self.assertEqual(to_long(SHA1_ABC.upper()), to_long(SHA1_ABC))

    def test_invalid(self):
        for bad in ("", "xyz", "12 34", "0x12", "ab\n"):
            with self.assertRaises(ValueError):
                to_long(bad)


if __name__ == "__main__":
    unittest.main()
