"""
Syntax Tree — arena-allocated node model.

A parsed file is stored as a flat list of immutable SyntaxNode records.
Nodes refer to each other by integer index (first child, next sibling), so
node identity is the index and the tree holds no parent back-references.
Indices are handed out in pre-order, which makes index order equal to
document order.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass(frozen=True)
class SyntaxNode:
    """A single node of the syntax tree."""
    index: int
    token_type: str
    text: str                # literal token text, empty for structural nodes
    line_number: int         # 1-indexed
    column: int = 0          # 0-indexed
    first_child: Optional[int] = None
    next_sibling: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.first_child is None


@dataclass
class NodeSpec:
    """Nested, mutable description of a node used while building a tree."""
    token_type: str
    text: str = ""
    line: int = 0
    column: int = 0
    children: List["NodeSpec"] = field(default_factory=list)

    def add(self, *specs: "NodeSpec") -> "NodeSpec":
        self.children.extend(s for s in specs if s is not None)
        return self


class SyntaxTree:
    """Immutable arena of SyntaxNode records."""

    def __init__(self, nodes: List[SyntaxNode], file_path: str = "<memory>"):
        self.nodes = nodes
        self.file_path = file_path

    @property
    def root(self) -> Optional[int]:
        return 0 if self.nodes else None

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, index: int) -> SyntaxNode:
        return self.nodes[index]

    def token_type(self, index: int) -> str:
        return self.nodes[index].token_type

    def text(self, index: int) -> str:
        return self.nodes[index].text

    def line(self, index: int) -> int:
        return self.nodes[index].line_number

    def first_child(self, index: int) -> Optional[int]:
        return self.nodes[index].first_child

    def next_sibling(self, index: int) -> Optional[int]:
        return self.nodes[index].next_sibling

    def iter_children(self, index: int) -> Iterator[int]:
        child = self.nodes[index].first_child
        while child is not None:
            yield child
            child = self.nodes[child].next_sibling

    def children(self, index: int) -> List[int]:
        return list(self.iter_children(index))

    def child_count(self, index: int) -> int:
        return sum(1 for _ in self.iter_children(index))

    def find_child(self, index: int, token_type: str) -> Optional[int]:
        """First direct child of the given kind."""
        for child in self.iter_children(index):
            if self.nodes[child].token_type == token_type:
                return child
        return None

    @classmethod
    def from_specs(cls, roots: List[NodeSpec], file_path: str = "<memory>") -> "SyntaxTree":
        return TreeBuilder().build(roots, file_path)


class TreeBuilder:
    """Flattens NodeSpec hierarchies into a SyntaxTree.

    The top-level specs become the root and its sibling chain.  Allocation
    is iterative so deeply nested input does not hit the recursion limit.
    """

    def build(self, roots: List[NodeSpec], file_path: str = "<memory>") -> SyntaxTree:
        # [token_type, text, line, column, first_child, next_sibling]
        records: List[list] = []
        root_group: List[Optional[int]] = [None] * len(roots)
        stack = [(spec, root_group, pos, None) for pos, spec in reversed(list(enumerate(roots)))]

        while stack:
            spec, group, pos, parent = stack.pop()
            index = len(records)
            records.append([spec.token_type, spec.text, spec.line, spec.column, None, None])
            group[pos] = index
            if pos == 0:
                if parent is not None:
                    records[parent][4] = index
            else:
                records[group[pos - 1]][5] = index

            if spec.children:
                child_group: List[Optional[int]] = [None] * len(spec.children)
                for child_pos in range(len(spec.children) - 1, -1, -1):
                    stack.append((spec.children[child_pos], child_group, child_pos, index))

        nodes = [
            SyntaxNode(
                index=i,
                token_type=r[0],
                text=r[1],
                line_number=r[2],
                column=r[3],
                first_child=r[4],
                next_sibling=r[5],
            )
            for i, r in enumerate(records)
        ]
        return SyntaxTree(nodes, file_path)
