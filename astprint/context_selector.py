"""
Context Selector

Chooses the part of the syntax tree that describes a warning.  The set of
strategies is closed (ContextStrategy); each one is a pure function from an
AstContext to an ordered list of node indices:

  • LINE             — the nodes on the warning line
  • ENVIRONMENT      — the enclosing statement plus its neighbours
  • METHOD           — the whole enclosing method or constructor
  • CLASS            — the header of the enclosing type declaration
  • FIELDS           — all fields of the enclosing type
  • INSTANCE_FIELDS  — the non-static fields of the enclosing type
  • METHOD_OR_CLASS  — METHOD inside a method, CLASS otherwise
  • NAME_PACKAGE     — package declaration and top-level type names

strategy_for() maps a warning type (a PMD / Checkstyle / FindBugs rule name)
or category to the strategy that fits it.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from astprint import token_types as tt
from astprint.constants import collect_constants
from astprint.syntax_tree import SyntaxTree
from astprint.traversal import (
    all_descendants,
    ancestors,
    enclosing,
    last_line_number,
    nodes_on_line,
    parent_map,
)

logger = logging.getLogger(__name__)


class ContextStrategy(str, Enum):
    LINE = "line"
    ENVIRONMENT = "environment"
    METHOD = "method"
    CLASS = "class"
    FIELDS = "fields"
    INSTANCE_FIELDS = "instance_fields"
    METHOD_OR_CLASS = "method_or_class"
    NAME_PACKAGE = "name_package"


@dataclass
class AstContext:
    """Everything one fingerprint computation needs to know about a file.

    Created per computation; never shared between warnings.
    """
    tree: SyntaxTree
    line: int
    same_line: List[int]
    constants: Dict[int, int]
    last_line: Optional[int] = None
    _parents: Optional[Dict[int, int]] = field(default=None, repr=False)

    @property
    def parents(self) -> Dict[int, int]:
        if self._parents is None:
            self._parents = parent_map(self.tree)
        return self._parents

    @property
    def anchor(self) -> Optional[int]:
        """First node on the warning line in document order."""
        return self.same_line[0] if self.same_line else None


def build_context(tree: SyntaxTree, line: int) -> AstContext:
    """Collect same-line nodes and constant bindings for ``line``."""
    return AstContext(
        tree=tree,
        line=line,
        same_line=nodes_on_line(tree, tree.root, line),
        constants=collect_constants(tree),
        last_line=last_line_number(tree),
    )


# ═══════════════════════════════════════════════════════════════════════
#  Strategies
# ═══════════════════════════════════════════════════════════════════════

_STATEMENT_CONTAINERS = {tt.SLIST, tt.OBJBLOCK, tt.CASE_GROUP}
_NOT_STATEMENTS = {tt.SEMI, tt.LCURLY, tt.RCURLY, tt.COMMA}


def _select_line(ctx: AstContext) -> List[int]:
    return list(ctx.same_line)


def _select_environment(ctx: AstContext) -> List[int]:
    anchor = ctx.anchor
    if anchor is None:
        return []

    tree = ctx.tree
    statement = None
    for candidate in [anchor] + ancestors(anchor, ctx.parents):
        parent = ctx.parents.get(candidate)
        if parent is not None and tree.token_type(parent) in _STATEMENT_CONTAINERS:
            statement = candidate
            break
    if statement is None:
        return _select_line(ctx)

    container = ctx.parents[statement]
    siblings = [
        c for c in tree.iter_children(container)
        if tree.token_type(c) not in _NOT_STATEMENTS
    ]
    if statement not in siblings:
        return _select_line(ctx)

    pos = siblings.index(statement)
    chosen = siblings[max(0, pos - 1):pos + 2]
    window: List[int] = []
    for index in chosen:
        window.extend(all_descendants(tree, index))
    return window


def _enclosing_method(ctx: AstContext) -> Optional[int]:
    if ctx.anchor is None:
        return None
    return enclosing(ctx.tree, ctx.anchor, tt.METHOD_DECLARATIONS, ctx.parents)


def _enclosing_type(ctx: AstContext) -> Optional[int]:
    if ctx.anchor is not None:
        found = enclosing(ctx.tree, ctx.anchor, tt.TYPE_DECLARATIONS, ctx.parents)
        if found is not None:
            return found
    # Outside any type (package or import line): use the first declared type
    for node in ctx.tree.nodes:
        if node.token_type in tt.TYPE_DECLARATIONS:
            return node.index
    return None


def _select_method(ctx: AstContext) -> List[int]:
    method = _enclosing_method(ctx)
    if method is None:
        return _select_line(ctx)
    return all_descendants(ctx.tree, method)


def _select_class(ctx: AstContext) -> List[int]:
    decl = _enclosing_type(ctx)
    if decl is None:
        return _select_line(ctx)
    tree = ctx.tree
    window = [decl]
    for child in tree.iter_children(decl):
        if tree.token_type(child) != tt.OBJBLOCK:
            window.extend(all_descendants(tree, child))
    return window


def _fields(ctx: AstContext, include_static: bool) -> List[int]:
    decl = _enclosing_type(ctx)
    if decl is None:
        return []
    tree = ctx.tree
    body = tree.find_child(decl, tt.OBJBLOCK)
    if body is None:
        return []

    window: List[int] = []
    for member in tree.iter_children(body):
        if tree.token_type(member) != tt.VARIABLE_DEF:
            continue
        if not include_static and _is_static(tree, member):
            continue
        window.extend(all_descendants(tree, member))
    return window


def _is_static(tree: SyntaxTree, declaration: int) -> bool:
    modifiers = tree.find_child(declaration, tt.MODIFIERS)
    return modifiers is not None and tree.find_child(modifiers, tt.LITERAL_STATIC) is not None


def _select_fields(ctx: AstContext) -> List[int]:
    return _fields(ctx, include_static=True)


def _select_instance_fields(ctx: AstContext) -> List[int]:
    return _fields(ctx, include_static=False)


def _select_method_or_class(ctx: AstContext) -> List[int]:
    if _enclosing_method(ctx) is not None:
        return _select_method(ctx)
    return _select_class(ctx)


def _select_name_package(ctx: AstContext) -> List[int]:
    tree = ctx.tree
    root = tree.root
    if root is None:
        return []
    window: List[int] = []
    for item in tree.iter_children(root):
        kind = tree.token_type(item)
        if kind == tt.PACKAGE_DEF:
            window.extend(all_descendants(tree, item))
        elif kind in tt.TYPE_DECLARATIONS:
            name = tree.find_child(item, tt.IDENT)
            if name is not None:
                window.append(name)
    return window


_SELECTORS: Dict[ContextStrategy, Callable[[AstContext], List[int]]] = {
    ContextStrategy.LINE: _select_line,
    ContextStrategy.ENVIRONMENT: _select_environment,
    ContextStrategy.METHOD: _select_method,
    ContextStrategy.CLASS: _select_class,
    ContextStrategy.FIELDS: _select_fields,
    ContextStrategy.INSTANCE_FIELDS: _select_instance_fields,
    ContextStrategy.METHOD_OR_CLASS: _select_method_or_class,
    ContextStrategy.NAME_PACKAGE: _select_name_package,
}


def choose_area(strategy: ContextStrategy, ctx: AstContext) -> List[int]:
    """Return the context window for ``strategy`` (possibly empty)."""
    window = _SELECTORS[ContextStrategy(strategy)](ctx)
    logger.debug(
        "Strategy %s selected %d nodes around %s:%d",
        ContextStrategy(strategy).value, len(window), ctx.tree.file_path, ctx.line,
    )
    return window


# ═══════════════════════════════════════════════════════════════════════
#  Warning type -> strategy
# ═══════════════════════════════════════════════════════════════════════

DEFAULT_STRATEGY = ContextStrategy.ENVIRONMENT

# Rule names as reported by PMD, Checkstyle and FindBugs/SpotBugs.
_RULE_STRATEGIES: Dict[str, ContextStrategy] = {
    # whole method
    "UnusedPrivateMethod": ContextStrategy.METHOD,
    "UnusedFormalParameter": ContextStrategy.METHOD,
    "CyclomaticComplexity": ContextStrategy.METHOD,
    "NPathComplexity": ContextStrategy.METHOD,
    "ExcessiveMethodLength": ContextStrategy.METHOD,
    "MethodLength": ContextStrategy.METHOD,
    "ReturnCount": ContextStrategy.METHOD,
    "DesignForExtension": ContextStrategy.METHOD,
    "FinalParameters": ContextStrategy.METHOD,
    "JavadocMethod": ContextStrategy.METHOD,
    # type header
    "ClassNamingConventions": ContextStrategy.CLASS,
    "TypeName": ContextStrategy.CLASS,
    "FinalClass": ContextStrategy.CLASS,
    "HideUtilityClassConstructor": ContextStrategy.CLASS,
    "JavadocType": ContextStrategy.CLASS,
    "SE_NO_SERIALVERSIONID": ContextStrategy.CLASS,
    "AbstractClassWithoutAbstractMethod": ContextStrategy.CLASS,
    # fields
    "UnusedPrivateField": ContextStrategy.FIELDS,
    "SingularField": ContextStrategy.FIELDS,
    "ImmutableField": ContextStrategy.FIELDS,
    "VisibilityModifier": ContextStrategy.INSTANCE_FIELDS,
    "BeanMembersShouldSerialize": ContextStrategy.INSTANCE_FIELDS,
    # package / naming
    "PackageName": ContextStrategy.NAME_PACKAGE,
    "PackageDeclaration": ContextStrategy.NAME_PACKAGE,
    "OuterTypeFilename": ContextStrategy.NAME_PACKAGE,
    # single line
    "MagicNumber": ContextStrategy.LINE,
    "LineLength": ContextStrategy.LINE,
    "AvoidStarImport": ContextStrategy.LINE,
    "UnusedImports": ContextStrategy.LINE,
    # method if any, else type
    "JavadocStyle": ContextStrategy.METHOD_OR_CLASS,
    "MissingSwitchDefault": ContextStrategy.METHOD_OR_CLASS,
}

_CATEGORY_STRATEGIES: Dict[str, ContextStrategy] = {
    "naming": ContextStrategy.NAME_PACKAGE,
    "imports": ContextStrategy.LINE,
    "sizes": ContextStrategy.METHOD,
    "metrics": ContextStrategy.METHOD,
    "design": ContextStrategy.METHOD_OR_CLASS,
    "javadoc": ContextStrategy.METHOD_OR_CLASS,
}


def strategy_for(warning_type: str = "", category: str = "") -> ContextStrategy:
    """Pick the context strategy for a warning type, then its category."""
    if warning_type in _RULE_STRATEGIES:
        return _RULE_STRATEGIES[warning_type]
    # Checkstyle reports fully qualified check names ("...checks.sizes.LineLengthCheck")
    short = warning_type.rsplit(".", 1)[-1]
    if short.endswith("Check"):
        short = short[:-len("Check")]
    if short in _RULE_STRATEGIES:
        return _RULE_STRATEGIES[short]
    if category and category.lower() in _CATEGORY_STRATEGIES:
        return _CATEGORY_STRATEGIES[category.lower()]
    return DEFAULT_STRATEGY
