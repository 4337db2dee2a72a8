"""
Java Parser — tree-sitter front end.

Parses Java source with tree-sitter-java and re-shapes the concrete syntax
tree into the checkstyle-style token tree used by the fingerprinting core:

  • type declarations  -> CLASS_DEF / INTERFACE_DEF / ... with MODIFIERS,
                          IDENT and an OBJBLOCK body ({ members })
  • field declarations -> one VARIABLE_DEF per declarator:
                          MODIFIERS TYPE IDENT [ASSIGN(EXPR ...)] SEMI|COMMA
  • local variables    -> VARIABLE_DEF(MODIFIERS TYPE IDENT [ASSIGN]) followed
                          by a SEMI sibling
  • methods / ctors    -> METHOD_DEF / CTOR_DEF with PARAMETERS and an SLIST body
  • literals, operators and punctuation map to their checkstyle kind names

Comments are dropped, so formatting and comment edits never reach the
fingerprint.  Constructs without a dedicated mapping fall back to the
upper-cased tree-sitter node type.
"""

import codecs
import logging
from typing import Callable, Dict, List, Optional

import tree_sitter_java as tsjava
from tree_sitter import Language, Node, Parser

from astprint import token_types as tt
from astprint.errors import ParseError
from astprint.syntax_tree import NodeSpec, SyntaxTree, TreeBuilder

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = Language(tsjava.language())
_parser = Parser(JAVA_LANGUAGE)

BINARY_SNIFF_BYTES = 8192
MAX_BYTES = 10 * 1024 * 1024  # safety cap for generated sources

_COMMENTS = {"line_comment", "block_comment", "comment"}

_PUNCTUATION = {
    ";": tt.SEMI, ",": tt.COMMA, ".": tt.DOT,
    "(": tt.LPAREN, ")": tt.RPAREN,
    "{": tt.LCURLY, "}": tt.RCURLY,
    "[": tt.LBRACK, "]": tt.RBRACK,
    ":": tt.COLON, "?": tt.QUESTION, "@": tt.AT,
    "...": tt.ELLIPSIS, "->": tt.LAMBDA, "::": tt.METHOD_REF,
}

_BINARY_OPERATORS = {
    "+": "PLUS", "-": "MINUS", "*": "STAR", "/": "DIV", "%": "MOD",
    "==": "EQUAL", "!=": "NOT_EQUAL",
    "<": "LT", ">": "GT", "<=": "LE", ">=": "GE",
    "&&": "LAND", "||": "LOR",
    "&": "BAND", "|": "BOR", "^": "BXOR",
    "<<": "SL", ">>": "SR", ">>>": "BSR",
}

_ASSIGNMENT_OPERATORS = {
    "=": tt.ASSIGN, "+=": "PLUS_ASSIGN", "-=": "MINUS_ASSIGN",
    "*=": "STAR_ASSIGN", "/=": "DIV_ASSIGN", "%=": "MOD_ASSIGN",
    "&=": "BAND_ASSIGN", "|=": "BOR_ASSIGN", "^=": "BXOR_ASSIGN",
    "<<=": "SL_ASSIGN", ">>=": "SR_ASSIGN", ">>>=": "BSR_ASSIGN",
}

_UNARY_OPERATORS = {"-": "UNARY_MINUS", "+": "UNARY_PLUS", "!": "LNOT", "~": "BNOT"}

# Named nodes that always become a single leaf, even if tree-sitter gives
# them internal structure (string_literal has fragments, for instance).
_LEAF_KINDS = {
    "identifier": tt.IDENT,
    "type_identifier": tt.IDENT,
    "string_literal": tt.STRING_LITERAL,
    "text_block": tt.TEXT_BLOCK,
    "character_literal": tt.CHAR_LITERAL,
    "true": tt.LITERAL_TRUE,
    "false": tt.LITERAL_FALSE,
    "null_literal": tt.LITERAL_NULL,
    "this": tt.LITERAL_THIS,
    "super": tt.LITERAL_SUPER,
    "asterisk": "STAR",
}

_INTEGER_LITERALS = {
    "decimal_integer_literal", "hex_integer_literal",
    "octal_integer_literal", "binary_integer_literal",
}
_FLOAT_LITERALS = {"decimal_floating_point_literal", "hex_floating_point_literal"}

_PRIMITIVE_TYPES = {"integral_type", "floating_point_type", "boolean_type", "void_type"}
_TYPE_NODES = _PRIMITIVE_TYPES | {
    "type_identifier", "scoped_type_identifier", "generic_type",
    "array_type", "annotated_type",
}

_TYPE_DECLARATIONS = {
    "class_declaration": tt.CLASS_DEF,
    "interface_declaration": tt.INTERFACE_DEF,
    "enum_declaration": tt.ENUM_DEF,
    "record_declaration": tt.RECORD_DEF,
    "annotation_type_declaration": tt.ANNOTATION_DEF,
}

_TYPE_BODIES = {"class_body", "interface_body", "enum_body", "annotation_type_body"}

_RENAMES = {
    "enum_constant": tt.ENUM_CONSTANT_DEF,
    "static_initializer": tt.STATIC_INIT,
    "marker_annotation": tt.ANNOTATION,
    "annotation": tt.ANNOTATION,
    "switch_block_statement_group": tt.CASE_GROUP,
    "type_parameters": tt.TYPE_PARAMETERS,
    "labeled_statement": "LABELED_STAT",
}

_KEYWORD_STATEMENTS = {
    "if_statement", "while_statement", "do_statement", "for_statement",
    "return_statement", "throw_statement", "break_statement",
    "continue_statement", "synchronized_statement", "assert_statement",
    "yield_statement", "try_statement", "try_with_resources_statement",
    "switch_expression", "switch_statement",
}

_STATEMENTS = _KEYWORD_STATEMENTS | {
    "block", "expression_statement", "local_variable_declaration",
    "enhanced_for_statement", "labeled_statement", "local_class_declaration",
    "class_declaration", "interface_declaration", "enum_declaration",
    "record_declaration", "explicit_constructor_invocation",
    "switch_block", "switch_rule", "switch_label", "catch_clause",
    "finally_clause", "resource_specification", ";",
}


# ═══════════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════════

def parse_file(file_path: str, strict: bool = True) -> SyntaxTree:
    """Read and parse a Java file.

    Raises ParseError when the file cannot be read, is binary, is not valid
    UTF-8 or (in strict mode) contains syntax errors.
    """
    try:
        with open(file_path, "rb") as f:
            source = f.read(MAX_BYTES + 1)
    except OSError as e:
        raise ParseError(file_path, str(e)) from e

    if len(source) > MAX_BYTES:
        raise ParseError(file_path, f"file exceeds {MAX_BYTES} bytes")
    if b"\x00" in source[:BINARY_SNIFF_BYTES]:
        raise ParseError(file_path, "binary file")
    if source.startswith(codecs.BOM_UTF8):
        source = source[len(codecs.BOM_UTF8):]
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(file_path, f"not valid UTF-8: {e}") from e

    return parse_source(source, file_path, strict=strict)


def parse_source(source, file_path: str = "<memory>", strict: bool = True) -> SyntaxTree:
    """Parse Java source (bytes or str) into a SyntaxTree."""
    if isinstance(source, str):
        source = source.encode("utf-8")

    ts_tree = _parser.parse(source)
    root = ts_tree.root_node
    if strict and root.has_error:
        line = _first_error_line(root)
        raise ParseError(file_path, f"syntax error near line {line}")

    try:
        specs = _JavaTreeConverter(source).convert(root)
    except RecursionError as e:
        raise ParseError(file_path, "expression nesting too deep") from e

    tree = TreeBuilder().build(specs, file_path)
    logger.debug("Parsed %s into %d nodes", file_path, len(tree))
    return tree


def _first_error_line(root: Node) -> int:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        stack.extend(reversed(node.children))
    return root.start_point[0] + 1


# ═══════════════════════════════════════════════════════════════════════
#  Conversion
# ═══════════════════════════════════════════════════════════════════════

class _JavaTreeConverter:
    """Maps tree-sitter-java nodes to NodeSpec lists.

    Every handler returns a list because one source construct may expand to
    several nodes (``int a, b;``) or to none (comments).
    """

    def __init__(self, source: bytes):
        self.source = source
        self._handlers: Dict[str, Callable[[Node], List[NodeSpec]]] = {
            "program": self._program,
            "package_declaration": self._package,
            "import_declaration": self._import,
            "modifiers": self._modifiers,
            "field_declaration": self._field,
            "constant_declaration": self._field,
            "local_variable_declaration": self._local_variable,
            "method_declaration": self._method,
            "constructor_declaration": self._constructor,
            "formal_parameters": self._parameters,
            "block": self._block,
            "constructor_body": self._block,
            "expression_statement": self._expression_statement,
            "enhanced_for_statement": self._enhanced_for,
            "catch_clause": self._catch,
            "finally_clause": self._finally,
            "switch_label": self._switch_label,
            "enum_body_declarations": self._children,
            "argument_list": lambda n: self._arguments(n, with_lparen=True),
            "method_invocation": self._method_call,
            "object_creation_expression": self._new,
            "array_creation_expression": self._new_array,
            "array_initializer": self._array_init,
            "binary_expression": self._binary,
            "assignment_expression": self._assignment,
            "unary_expression": self._unary,
            "update_expression": self._update,
            "parenthesized_expression": self._parenthesized,
            "field_access": self._dot,
            "scoped_identifier": self._dot,
            "array_access": self._array_access,
            "cast_expression": self._cast,
            "ternary_expression": self._ternary,
            "instanceof_expression": self._instanceof,
            "lambda_expression": self._lambda,
            "method_reference": self._method_reference,
            "explicit_constructor_invocation": self._ctor_call,
        }
        for name in _TYPE_DECLARATIONS:
            self._handlers[name] = self._type_declaration
        for name in _TYPE_BODIES:
            self._handlers[name] = self._objblock
        for name in _KEYWORD_STATEMENTS:
            self._handlers[name] = self._keyword_statement
        for name in _TYPE_NODES:
            self._handlers[name] = self._type_parts

    # ────────────────────────────────────────────────────────────────
    #  Helpers
    # ────────────────────────────────────────────────────────────────

    def text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def spec(token_type: str, node: Node, text: str = "", children=None) -> NodeSpec:
        return NodeSpec(
            token_type=token_type,
            text=text,
            line=node.start_point[0] + 1,
            column=node.start_point[1],
            children=list(children or []),
        )

    def leaf(self, token_type: str, node: Node) -> NodeSpec:
        return self.spec(token_type, node, self.text(node))

    def convert(self, node: Node) -> List[NodeSpec]:
        if node.type in _COMMENTS:
            return []
        if node.type in _LEAF_KINDS:
            return [self.leaf(_LEAF_KINDS[node.type], node)]
        if node.type in _INTEGER_LITERALS:
            kind = tt.NUM_LONG if self.text(node)[-1:] in ("l", "L") else tt.NUM_INT
            return [self.leaf(kind, node)]
        if node.type in _FLOAT_LITERALS:
            kind = tt.NUM_FLOAT if self.text(node)[-1:] in ("f", "F") else tt.NUM_DOUBLE
            return [self.leaf(kind, node)]
        handler = self._handlers.get(node.type)
        if handler is not None:
            return handler(node)
        return self._generic(node)

    def convert_all(self, nodes) -> List[NodeSpec]:
        out: List[NodeSpec] = []
        for n in nodes:
            out.extend(self.convert(n))
        return out

    def _children(self, node: Node) -> List[NodeSpec]:
        return self.convert_all(node.children)

    def _generic(self, node: Node) -> List[NodeSpec]:
        if node.child_count == 0:
            return [self.leaf(self._token_kind(node), node)]
        kind = _RENAMES.get(node.type, node.type.upper())
        return [self.spec(kind, node, children=self._children(node))]

    def _token_kind(self, node: Node) -> str:
        if node.is_named:
            return node.type.upper()
        text = self.text(node)
        if text in _PUNCTUATION:
            return _PUNCTUATION[text]
        if text in _BINARY_OPERATORS:
            return _BINARY_OPERATORS[text]
        if text in _ASSIGNMENT_OPERATORS:
            return _ASSIGNMENT_OPERATORS[text]
        keyword = text.lstrip("@")
        if keyword.replace("-", "").isalpha():
            return "LITERAL_" + keyword.upper().replace("-", "_")
        return "TOKEN"

    def expr(self, node: Node) -> NodeSpec:
        """Wrap an expression in an EXPR node."""
        return self.spec(tt.EXPR, node, children=self.convert(node))

    def type_spec(self, node: Node, dimensions: Optional[Node] = None) -> NodeSpec:
        """Build a TYPE node for a type reference (plus trailing dimensions)."""
        parts = self._type_parts(node)
        if dimensions is not None:
            parts = self._wrap_dimensions(parts, dimensions)
        return self.spec(tt.TYPE, node, children=parts)

    def _modifiers_of(self, node: Node) -> NodeSpec:
        for child in node.children:
            if child.type == "modifiers":
                return self._modifiers(child)[0]
        return self.spec(tt.MODIFIERS, node)

    # ────────────────────────────────────────────────────────────────
    #  Compilation unit
    # ────────────────────────────────────────────────────────────────

    def _program(self, node: Node) -> List[NodeSpec]:
        unit = NodeSpec(tt.COMPILATION_UNIT, "", 1, 0, self._children(node))
        return [unit]

    def _package(self, node: Node) -> List[NodeSpec]:
        children = [c for c in node.children if c.type != "package"]
        return [self.spec(tt.PACKAGE_DEF, node, "package", self.convert_all(children))]

    def _import(self, node: Node) -> List[NodeSpec]:
        kind = tt.IMPORT
        name: Optional[NodeSpec] = None
        tail: List[NodeSpec] = []
        for child in node.children:
            if child.type == "static":
                kind = tt.STATIC_IMPORT
            elif child.type in ("identifier", "scoped_identifier"):
                name = self.convert(child)[0]
            elif child.type == "asterisk":
                star = self.leaf("STAR", child)
                name = self.spec(tt.DOT, child, ".", [name, star] if name else [star])
            elif child.type == ";":
                tail.append(self.leaf(tt.SEMI, child))
        children = ([name] if name else []) + tail
        return [self.spec(kind, node, "import", children)]

    # ────────────────────────────────────────────────────────────────
    #  Declarations
    # ────────────────────────────────────────────────────────────────

    def _type_declaration(self, node: Node) -> List[NodeSpec]:
        decl = self.spec(_TYPE_DECLARATIONS[node.type], node)
        decl.add(self._modifiers_of(node))
        for child in node.children:
            if child.type == "modifiers" or child.type in _COMMENTS:
                continue
            if child.type in ("superclass", "extends_interfaces"):
                decl.add(self._clause(tt.EXTENDS_CLAUSE, child, "extends"))
            elif child.type == "super_interfaces":
                decl.add(self._clause(tt.IMPLEMENTS_CLAUSE, child, "implements"))
            else:
                decl.add(*self.convert(child))
        return [decl]

    def _clause(self, kind: str, node: Node, keyword: str) -> NodeSpec:
        clause = self.spec(kind, node, keyword)
        for child in node.children:
            if child.type == keyword:
                continue
            if child.type == "type_list":
                clause.add(*self._children(child))
            else:
                clause.add(*self.convert(child))
        return clause

    def _objblock(self, node: Node) -> List[NodeSpec]:
        return [self.spec(tt.OBJBLOCK, node, children=self._children(node))]

    def _modifiers(self, node: Node) -> List[NodeSpec]:
        return [self.spec(tt.MODIFIERS, node, children=self._children(node))]

    def _declarators(self, node: Node) -> List[Node]:
        return [c for c in node.children if c.type == "variable_declarator"]

    def _variable_def(self, node: Node, declarator: Node, terminator: Optional[NodeSpec]) -> NodeSpec:
        """One VARIABLE_DEF for a single declarator of ``node``."""
        var = self.spec(tt.VARIABLE_DEF, node)
        var.add(self._modifiers_of(node))
        type_node = node.child_by_field_name("type")
        if type_node is not None:
            var.add(self.type_spec(type_node, declarator.child_by_field_name("dimensions")))
        name = declarator.child_by_field_name("name")
        if name is not None:
            var.add(self.leaf(tt.IDENT, name))

        value = declarator.child_by_field_name("value")
        if value is not None:
            equals = next((c for c in declarator.children if c.type == "="), value)
            if value.type == "array_initializer":
                initializer = self._array_init(value)[0]
            else:
                initializer = self.expr(value)
            var.add(self.spec(tt.ASSIGN, equals, "=", [initializer]))

        if terminator is not None:
            var.add(terminator)
        return var

    def _separators(self, node: Node) -> List[NodeSpec]:
        """COMMA/SEMI specs that follow each declarator, in order."""
        return [
            self.leaf(_PUNCTUATION[c.type], c)
            for c in node.children
            if c.type in (",", ";")
        ]

    def _field(self, node: Node) -> List[NodeSpec]:
        declarators = self._declarators(node)
        separators = self._separators(node)
        out = []
        for i, declarator in enumerate(declarators):
            terminator = separators[i] if i < len(separators) else None
            out.append(self._variable_def(node, declarator, terminator))
        return out

    def _local_variable(self, node: Node) -> List[NodeSpec]:
        declarators = self._declarators(node)
        separators = self._separators(node)
        out = []
        for i, declarator in enumerate(declarators):
            out.append(self._variable_def(node, declarator, None))
            if i < len(separators):
                out.append(separators[i])
        return out

    def _method(self, node: Node) -> List[NodeSpec]:
        method = self.spec(tt.METHOD_DEF, node)
        method.add(self._modifiers_of(node))
        return_type = node.child_by_field_name("type")
        for child in node.children:
            if child.type == "modifiers" or child.type in _COMMENTS:
                continue
            if return_type is not None and child == return_type:
                method.add(self.type_spec(child))
            elif child.type == "identifier":
                method.add(self.leaf(tt.IDENT, child))
            elif child.type == "throws":
                method.add(self._throws(child))
            elif child.type == "dimensions":
                continue
            else:
                method.add(*self.convert(child))
        return [method]

    def _constructor(self, node: Node) -> List[NodeSpec]:
        ctor = self.spec(tt.CTOR_DEF, node)
        ctor.add(self._modifiers_of(node))
        for child in node.children:
            if child.type == "modifiers" or child.type in _COMMENTS:
                continue
            if child.type == "throws":
                ctor.add(self._throws(child))
            else:
                ctor.add(*self.convert(child))
        return [ctor]

    def _throws(self, node: Node) -> NodeSpec:
        children = [c for c in node.children if c.type != "throws"]
        return self.spec("LITERAL_THROWS", node, "throws", self.convert_all(children))

    def _parameters(self, node: Node) -> List[NodeSpec]:
        params = self.spec(tt.PARAMETERS, node)
        lparen: Optional[NodeSpec] = None
        rparen: Optional[NodeSpec] = None
        for child in node.children:
            if child.type == "(":
                lparen = self.leaf(tt.LPAREN, child)
            elif child.type == ")":
                rparen = self.leaf(tt.RPAREN, child)
            elif child.type in ("formal_parameter", "spread_parameter"):
                params.add(self._parameter(child))
            else:
                params.add(*self.convert(child))
        return [s for s in (lparen, params, rparen) if s is not None]

    def _parameter(self, node: Node) -> NodeSpec:
        param = self.spec(tt.PARAMETER_DEF, node)
        param.add(self._modifiers_of(node))
        type_node = node.child_by_field_name("type")
        for child in node.children:
            if child.type == "modifiers" or child.type in _COMMENTS:
                continue
            if child.type in _TYPE_NODES and (type_node is None or child == type_node):
                param.add(self.type_spec(child, node.child_by_field_name("dimensions")))
            elif child.type == "identifier":
                param.add(self.leaf(tt.IDENT, child))
            elif child.type == "variable_declarator":
                name = child.child_by_field_name("name")
                if name is not None:
                    param.add(self.leaf(tt.IDENT, name))
            elif child.type == "dimensions":
                continue
            else:
                param.add(*self.convert(child))
        return param

    # ────────────────────────────────────────────────────────────────
    #  Types
    # ────────────────────────────────────────────────────────────────

    def _type_parts(self, node: Node) -> List[NodeSpec]:
        """Nodes spelling out a type reference (children of a TYPE node)."""
        kind = node.type
        if kind in _PRIMITIVE_TYPES:
            text = self.text(node)
            return [self.spec("LITERAL_" + text.upper(), node, text)]
        if kind == "type_identifier":
            return [self.leaf(tt.IDENT, node)]
        if kind == "scoped_type_identifier":
            inner: List[NodeSpec] = []
            for child in node.children:
                if child.type == ".":
                    continue
                inner.extend(self.convert(child))
            return [self.spec(tt.DOT, node, ".", inner)]
        if kind == "generic_type":
            parts: List[NodeSpec] = []
            for child in node.children:
                if child.type == "type_arguments":
                    parts.append(self._type_arguments(child))
                else:
                    parts.extend(self.convert(child))
            return parts
        if kind == "array_type":
            element = node.child_by_field_name("element")
            parts = self._type_parts(element) if element is not None else []
            return self._wrap_dimensions(parts, node.child_by_field_name("dimensions"))
        if kind == "annotated_type":
            return self._children(node)
        if kind == "type_arguments":
            return [self._type_arguments(node)]
        return self.convert(node)

    def _type_arguments(self, node: Node) -> NodeSpec:
        args = self.spec(tt.TYPE_ARGUMENTS, node)
        for child in node.children:
            if child.type == "<":
                args.add(self.leaf(tt.GENERIC_START, child))
            elif child.type == ">":
                args.add(self.leaf(tt.GENERIC_END, child))
            elif child.type == ",":
                args.add(self.leaf(tt.COMMA, child))
            elif child.type == "wildcard":
                args.add(self.spec(tt.TYPE_ARGUMENT, child, children=[self._wildcard(child)]))
            elif child.type not in _COMMENTS:
                args.add(self.spec(tt.TYPE_ARGUMENT, child, children=self._type_parts(child)))
        return args

    def _wildcard(self, node: Node) -> NodeSpec:
        wildcard = self.spec(tt.WILDCARD_TYPE, node, "?")
        for child in node.children:
            if child.type == "?":
                continue
            if child.type in ("extends", "super"):
                wildcard.add(self.spec("LITERAL_" + child.type.upper(), child, child.type))
            else:
                wildcard.add(*self._type_parts(child))
        return wildcard

    def _wrap_dimensions(self, parts: List[NodeSpec], dimensions: Optional[Node]) -> List[NodeSpec]:
        if dimensions is None:
            return parts
        for child in dimensions.children:
            if child.type == "]":
                parts = [self.spec(tt.ARRAY_DECLARATOR, child, "[", parts + [self.leaf(tt.RBRACK, child)])]
        return parts

    # ────────────────────────────────────────────────────────────────
    #  Statements
    # ────────────────────────────────────────────────────────────────

    def _block(self, node: Node) -> List[NodeSpec]:
        slist = self.spec(tt.SLIST, node, "{")
        for child in node.children:
            if child.type == "{":
                continue
            slist.add(*self.convert(child))
        return [slist]

    def _expression_statement(self, node: Node) -> List[NodeSpec]:
        out: List[NodeSpec] = []
        for child in node.children:
            if child.type == ";":
                out.append(self.leaf(tt.SEMI, child))
            elif child.type not in _COMMENTS:
                out.append(self.expr(child))
        return out

    def _keyword_statement(self, node: Node) -> List[NodeSpec]:
        """if/while/for/return/... : LITERAL_<KEYWORD> with converted parts.

        Expressions become EXPR, parenthesised conditions become
        LPAREN EXPR RPAREN and the statement after ``else`` is nested in a
        LITERAL_ELSE node.
        """
        children = [c for c in node.children if c.type not in _COMMENTS]
        if not children:
            return []
        keyword = children[0]
        stmt = self.spec("LITERAL_" + self.text(keyword).upper(), node, self.text(keyword))
        pending_else: Optional[NodeSpec] = None

        for child in children[1:]:
            if child.type == "else":
                pending_else = self.spec(tt.LITERAL_ELSE, child, "else")
                stmt.add(pending_else)
                continue
            target = pending_else if pending_else is not None else stmt
            if child.type == "parenthesized_expression":
                target.add(*self._parenthesized(child, wrap=True))
            elif child.type in _STATEMENTS or not child.is_named:
                target.add(*self.convert(child))
            else:
                target.add(self.expr(child))
        return [stmt]

    def _enhanced_for(self, node: Node) -> List[NodeSpec]:
        stmt = self.spec("LITERAL_FOR", node, "for")
        clause = self.spec(tt.FOR_EACH_CLAUSE, node)
        var = self.spec(tt.VARIABLE_DEF, node)
        var.add(self._modifiers_of(node))
        type_node = node.child_by_field_name("type")
        name = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        body = node.child_by_field_name("body")
        if type_node is not None:
            var.add(self.type_spec(type_node, node.child_by_field_name("dimensions")))
        if name is not None:
            var.add(*self.convert(name))
        clause.add(var)
        for child in node.children:
            if child.type == ":":
                clause.add(self.leaf(tt.COLON, child))
        if value is not None:
            clause.add(self.expr(value))

        for child in node.children:
            if child.type == "(":
                stmt.add(self.leaf(tt.LPAREN, child))
                stmt.add(clause)
            elif child.type == ")":
                stmt.add(self.leaf(tt.RPAREN, child))
        if body is not None:
            stmt.add(*self.convert(body))
        return [stmt]

    def _catch(self, node: Node) -> List[NodeSpec]:
        catch = self.spec(tt.LITERAL_CATCH, node, "catch")
        for child in node.children:
            if child.type == "catch":
                continue
            if child.type == "catch_formal_parameter":
                catch.add(self._catch_parameter(child))
            else:
                catch.add(*self.convert(child))
        return [catch]

    def _catch_parameter(self, node: Node) -> NodeSpec:
        param = self.spec(tt.PARAMETER_DEF, node)
        param.add(self._modifiers_of(node))
        for child in node.children:
            if child.type == "catch_type":
                parts: List[NodeSpec] = []
                for alt in child.children:
                    if alt.type == "|":
                        parts.append(self.leaf("BOR", alt))
                    elif alt.type not in _COMMENTS:
                        parts.extend(self._type_parts(alt))
                param.add(self.spec(tt.TYPE, child, children=parts))
            elif child.type == "identifier":
                param.add(self.leaf(tt.IDENT, child))
            elif child.type != "modifiers" and child.type not in _COMMENTS:
                param.add(*self.convert(child))
        return param

    def _finally(self, node: Node) -> List[NodeSpec]:
        children = [c for c in node.children if c.type != "finally"]
        return [self.spec(tt.LITERAL_FINALLY, node, "finally", self.convert_all(children))]

    def _switch_label(self, node: Node) -> List[NodeSpec]:
        is_default = self.text(node).startswith("default")
        label = self.spec(tt.LITERAL_DEFAULT if is_default else tt.LITERAL_CASE, node,
                          "default" if is_default else "case")
        for child in node.children:
            if child.type in ("case", "default") or child.type in _COMMENTS:
                continue
            if child.is_named:
                label.add(self.expr(child))
            else:
                label.add(*self.convert(child))
        return [label]

    def _ctor_call(self, node: Node) -> List[NodeSpec]:
        kind = "SUPER_CTOR_CALL" if any(c.type == "super" for c in node.children) else "CTOR_CALL"
        call = self.spec(kind, node)
        for child in node.children:
            if child.type in ("this", "super") or child.type in _COMMENTS:
                continue
            if child.type == "argument_list":
                call.add(*self._arguments(child, with_lparen=True))
            else:
                call.add(*self.convert(child))
        return [call]

    # ────────────────────────────────────────────────────────────────
    #  Expressions
    # ────────────────────────────────────────────────────────────────

    def _arguments(self, node: Node, with_lparen: bool = False) -> List[NodeSpec]:
        elist = self.spec(tt.ELIST, node)
        out: List[NodeSpec] = []
        rparen: Optional[NodeSpec] = None
        for child in node.children:
            if child.type == "(":
                if with_lparen:
                    out.append(self.leaf(tt.LPAREN, child))
            elif child.type == ")":
                rparen = self.leaf(tt.RPAREN, child)
            elif child.type == ",":
                elist.add(self.leaf(tt.COMMA, child))
            elif child.type not in _COMMENTS:
                elist.add(self.expr(child))
        out.append(elist)
        if rparen is not None:
            out.append(rparen)
        return out

    def _method_call(self, node: Node) -> List[NodeSpec]:
        obj = node.child_by_field_name("object")
        name = node.child_by_field_name("name")
        args = node.child_by_field_name("arguments")
        call = self.spec(tt.METHOD_CALL, node, "(")
        callee = self.leaf(tt.IDENT, name) if name is not None else None
        if obj is not None:
            dot_children = self.convert(obj) + ([callee] if callee else [])
            call.add(self.spec(tt.DOT, node, ".", dot_children))
        elif callee is not None:
            call.add(callee)
        if args is not None:
            call.add(*self._arguments(args))
        return [call]

    def _new(self, node: Node) -> List[NodeSpec]:
        new = self.spec(tt.LITERAL_NEW, node, "new")
        type_node = node.child_by_field_name("type")
        for child in node.children:
            if child.type in ("new", ".") or child.type in _COMMENTS:
                continue
            if type_node is not None and child == type_node:
                new.add(*self._type_parts(child))
            elif child.type == "argument_list":
                new.add(*self._arguments(child, with_lparen=True))
            else:
                new.add(*self.convert(child))
        return [new]

    def _new_array(self, node: Node) -> List[NodeSpec]:
        new = self.spec(tt.LITERAL_NEW, node, "new")
        for child in node.children:
            if child.type == "new" or child.type in _COMMENTS:
                continue
            if child.type == "dimensions_expr":
                inner = [c for c in child.children if c.is_named and c.type not in _COMMENTS]
                closing = [self.leaf(tt.RBRACK, c) for c in child.children if c.type == "]"]
                new.add(self.spec(tt.ARRAY_DECLARATOR, child, "[",
                                  [self.expr(c) for c in inner] + closing))
            elif child.type == "dimensions":
                for bracket in child.children:
                    if bracket.type == "]":
                        new.add(self.spec(tt.ARRAY_DECLARATOR, bracket, "[",
                                          [self.leaf(tt.RBRACK, bracket)]))
            else:
                new.add(*self.convert(child))
        return [new]

    def _array_init(self, node: Node) -> List[NodeSpec]:
        init = self.spec(tt.ARRAY_INIT, node, "{")
        for child in node.children:
            if child.type == "{" or child.type in _COMMENTS:
                continue
            if child.type in ("}", ","):
                init.add(self.leaf(_PUNCTUATION[child.type], child))
            elif child.type == "array_initializer":
                init.add(*self._array_init(child))
            else:
                init.add(self.expr(child))
        return [init]

    def _operator(self, node: Node) -> Optional[Node]:
        op = node.child_by_field_name("operator")
        if op is not None:
            return op
        return next((c for c in node.children if not c.is_named), None)

    def _operands(self, node: Node, operator: Optional[Node]) -> List[NodeSpec]:
        return self.convert_all(
            c for c in node.children if operator is None or c != operator
        )

    def _binary(self, node: Node) -> List[NodeSpec]:
        op = self._operator(node)
        text = self.text(op) if op is not None else ""
        kind = _BINARY_OPERATORS.get(text, "BINARY")
        anchor = op if op is not None else node
        return [self.spec(kind, anchor, text, self._operands(node, op))]

    def _assignment(self, node: Node) -> List[NodeSpec]:
        op = self._operator(node)
        text = self.text(op) if op is not None else "="
        kind = _ASSIGNMENT_OPERATORS.get(text, tt.ASSIGN)
        anchor = op if op is not None else node
        return [self.spec(kind, anchor, text, self._operands(node, op))]

    def _unary(self, node: Node) -> List[NodeSpec]:
        op = self._operator(node)
        text = self.text(op) if op is not None else ""
        kind = _UNARY_OPERATORS.get(text, "UNARY")
        return [self.spec(kind, node, text, self._operands(node, op))]

    def _update(self, node: Node) -> List[NodeSpec]:
        children = [c for c in node.children if c.type not in _COMMENTS]
        prefix = bool(children) and not children[0].is_named
        op = children[0] if prefix else children[-1]
        text = self.text(op)
        if text == "++":
            kind = "INC" if prefix else "POST_INC"
        else:
            kind = "DEC" if prefix else "POST_DEC"
        return [self.spec(kind, op, text, self._operands(node, op))]

    def _parenthesized(self, node: Node, wrap: bool = False) -> List[NodeSpec]:
        out: List[NodeSpec] = []
        for child in node.children:
            if child.type in ("(", ")"):
                out.append(self.leaf(_PUNCTUATION[child.type], child))
            elif child.type not in _COMMENTS:
                out.extend([self.expr(child)] if wrap else self.convert(child))
        return out

    def _dot(self, node: Node) -> List[NodeSpec]:
        children = [c for c in node.children if c.type != "." and c.type not in _COMMENTS]
        return [self.spec(tt.DOT, node, ".", self.convert_all(children))]

    def _array_access(self, node: Node) -> List[NodeSpec]:
        array = node.child_by_field_name("array")
        index = node.child_by_field_name("index")
        op = self.spec(tt.INDEX_OP, node, "[")
        if array is not None:
            op.add(*self.convert(array))
        if index is not None:
            op.add(self.expr(index))
        for child in node.children:
            if child.type == "]":
                op.add(self.leaf(tt.RBRACK, child))
        return [op]

    def _cast(self, node: Node) -> List[NodeSpec]:
        cast = self.spec(tt.TYPECAST, node, "(")
        value = node.child_by_field_name("value")
        for child in node.children:
            if child.type == "(" or child.type in _COMMENTS:
                continue
            if child.type == ")":
                cast.add(self.leaf(tt.RPAREN, child))
            elif value is not None and child == value:
                cast.add(*self.convert(child))
            elif child.type in _TYPE_NODES:
                cast.add(self.type_spec(child))
            else:
                cast.add(*self.convert(child))
        return [cast]

    def _ternary(self, node: Node) -> List[NodeSpec]:
        ternary = self.spec(tt.QUESTION, node, "?")
        for child in node.children:
            if child.type == "?" or child.type in _COMMENTS:
                continue
            ternary.add(*self.convert(child))
        return [ternary]

    def _instanceof(self, node: Node) -> List[NodeSpec]:
        op = self.spec("LITERAL_INSTANCEOF", node, "instanceof")
        for child in node.children:
            if child.type == "instanceof" or child.type in _COMMENTS:
                continue
            if child.type in _TYPE_NODES and child != node.child_by_field_name("left"):
                op.add(self.type_spec(child))
            else:
                op.add(*self.convert(child))
        return [op]

    def _lambda(self, node: Node) -> List[NodeSpec]:
        lam = self.spec(tt.LAMBDA, node, "->")
        for child in node.children:
            if child.type == "->" or child.type in _COMMENTS:
                continue
            lam.add(*self.convert(child))
        return [lam]

    def _method_reference(self, node: Node) -> List[NodeSpec]:
        ref = self.spec(tt.METHOD_REF, node, "::")
        for child in node.children:
            if child.type == "::" or child.type in _COMMENTS:
                continue
            ref.add(*self.convert(child))
        return [ref]
