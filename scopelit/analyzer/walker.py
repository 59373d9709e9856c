"""Scope-aware traversal of Go syntax trees.

The walker visits nodes depth-first in source order. Function declarations
and blocks open a scope frame; short variable declarations (including
`select` receives and type-switch bindings) and local
var/const/type declarations add names to the innermost open frame. Each
string literal is checked against every name visible at that point.
"""
from typing import Iterator, List, Sequence, Tuple
from tree_sitter import Node, Tree

from .recorder import FileStats, MatchRecorder, StringLiteral
from .scope_stack import ScopeStack


# Node types per scope category (tree-sitter-go grammar)
FUNCTION_TYPES = {'function_declaration', 'method_declaration', 'func_literal'}
BLOCK_TYPES = {'block'}
SHORT_VAR_TYPES = {'short_var_declaration'}
# `case v := <-ch` binds through `left`, `switch v := x.(type)` through `alias`
RECEIVE_TYPES = {'receive_statement'}
TYPE_SWITCH_TYPES = {'type_switch_statement'}
LOCAL_DECL_TYPES = {'var_declaration', 'const_declaration', 'type_declaration'}
STRING_TYPES = {'interpreted_string_literal', 'raw_string_literal'}

# var/const/type spec nodes carrying names, and the lists grouping them
SPEC_TYPES = {'var_spec', 'const_spec', 'type_spec', 'type_alias'}
SPEC_LIST_TYPES = {'var_spec_list', 'const_spec_list', 'type_spec_list'}

LITERAL_DELIMITERS = '"`'

# Work item tags for the explicit traversal stack
_VISIT = 0
_POP_SCOPE = 1


def node_text(node: Node) -> str:
    """Get the source text of a node."""
    return node.text.decode('utf-8', errors='replace') if node.text else ""


def literal_text(node: Node) -> str:
    """Strip every leading/trailing quote or backtick from a string literal."""
    return node_text(node).strip(LITERAL_DELIMITERS)


def get_node_line(node: Node) -> int:
    """Get 1-based line number."""
    return node.start_point[0] + 1


def parameter_names(param_list: Node) -> Iterator[str]:
    """Yield names bound by a parameter_list (named params or results).

    Unnamed entries such as ``(int, error)`` yield nothing.
    """
    for child in param_list.named_children:
        if child.type in ('parameter_declaration', 'variadic_parameter_declaration'):
            for name_node in child.children_by_field_name('name'):
                yield node_text(name_node)


def declared_names(decl: Node) -> Iterator[str]:
    """Yield names introduced by a var/const/type declaration."""
    for child in decl.named_children:
        if child.type in SPEC_TYPES:
            for name_node in child.children_by_field_name('name'):
                yield node_text(name_node)
        elif child.type in SPEC_LIST_TYPES:
            yield from declared_names(child)


class ScopeWalker:
    """Walk one file's syntax tree, tracking scopes and recording matches."""

    def __init__(self, file_path: str, source_lines: Sequence[str]):
        """Initialize walker state for a single file.

        Args:
            file_path: Path reported in match records
            source_lines: Raw source lines used for report context
        """
        self.file_path = file_path
        self.scopes = ScopeStack()
        self.recorder = MatchRecorder(file_path, source_lines)

    @property
    def stats(self) -> FileStats:
        return self.recorder.stats

    def walk(self, tree: Tree | Node) -> FileStats:
        """Traverse the tree and return this file's counters and matches.

        Uses an explicit stack instead of recursion; deep expression chains
        in generated code would otherwise hit the recursion limit.

        Args:
            tree: Parsed tree (or a subtree root)

        Returns:
            FileStats for everything visited
        """
        root = tree.root_node if isinstance(tree, Tree) else tree
        stack: List[Tuple[int, Node]] = [(_VISIT, root)]

        while stack:
            action, node = stack.pop()
            if action == _POP_SCOPE:
                self.scopes.pop()
                continue
            stack.extend(self._visit(node))

        return self.stats

    def _visit(self, node: Node) -> List[Tuple[int, Node]]:
        """Apply scope effects for ``node`` and return its follow-up work.

        Work items come back in reverse order (they are pushed onto a
        LIFO stack), so children still run in source order.
        """
        kind = node.type

        if kind in FUNCTION_TYPES:
            return self._enter_function(node)

        if kind in BLOCK_TYPES:
            self.scopes.push()
            return [(_POP_SCOPE, node)] + self._children(node)

        if kind in STRING_TYPES:
            literal = StringLiteral(
                text=literal_text(node),
                line=get_node_line(node),
                file_path=self.file_path,
            )
            self.recorder.observe(literal, self.scopes.visible_names())
            # Content/escape children are part of this literal
            return []

        if kind in SHORT_VAR_TYPES:
            self._declare_targets(node.child_by_field_name('left'))

        elif kind in RECEIVE_TYPES and self._uses_short_form(node):
            self._declare_targets(node.child_by_field_name('left'))

        elif kind in TYPE_SWITCH_TYPES:
            self._declare_targets(node.child_by_field_name('alias'))

        elif kind in LOCAL_DECL_TYPES and not self._is_package_level(node):
            for name in declared_names(node):
                self.scopes.declare(name)

        return self._children(node)

    def _enter_function(self, node: Node) -> List[Tuple[int, Node]]:
        """Open the function frame and declare its name, params and results.

        Function literals have no name; their parameters and results are
        still declared.

        Only the body is traversed afterwards. The signature holds no string
        literals worth checking and must not be walked a second time.
        """
        self.scopes.push()

        name_node = node.child_by_field_name('name')
        if name_node is not None:
            self.scopes.declare(node_text(name_node))

        params = node.child_by_field_name('parameters')
        if params is not None:
            for name in parameter_names(params):
                self.scopes.declare(name)

        result = node.child_by_field_name('result')
        if result is not None and result.type == 'parameter_list':
            for name in parameter_names(result):
                self.scopes.declare(name)

        work: List[Tuple[int, Node]] = [(_POP_SCOPE, node)]
        body = node.child_by_field_name('body')
        if body is not None:
            work.append((_VISIT, body))
        return work

    def _declare_targets(self, targets: Node | None):
        """Declare each plain identifier of a left-hand expression list."""
        if targets is None:
            return
        members = [targets] if targets.type == 'identifier' else targets.named_children
        for target in members:
            if target.type == 'identifier':
                self.scopes.declare(node_text(target))

    @staticmethod
    def _uses_short_form(node: Node) -> bool:
        return any(child.type == ':=' for child in node.children)

    @staticmethod
    def _children(node: Node) -> List[Tuple[int, Node]]:
        return [(_VISIT, child) for child in reversed(node.children)]

    @staticmethod
    def _is_package_level(node: Node) -> bool:
        parent = node.parent
        return parent is None or parent.type == 'source_file'
