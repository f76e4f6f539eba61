"""Find the type expression under a source position.

Parses a Python file with ast and returns the dotted name (``Order`` or
``models.Order``) that sits under a 1-based line/column, the way an editor
reports its caret.
"""

import ast
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class SourcePosition:
    """1-based line, optional 1-based column."""

    line: int
    column: Optional[int] = None


def _dotted_name(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        base = _dotted_name(node.value)
        return f"{base}.{node.attr}" if base else None
    return None


def _contains(node: ast.AST, line: int, col: int) -> bool:
    """Whether a 1-based line and 0-based column fall inside an expression node."""
    end_line = node.end_lineno or node.lineno
    end_col = node.end_col_offset if node.end_col_offset is not None else node.col_offset
    if (line, col) < (node.lineno, node.col_offset):
        return False
    return (line, col) < (end_line, end_col)


def _class_header_contains(node: ast.ClassDef, line: int, col: int, source_lines: List[str]) -> bool:
    """Whether the position is on the `class Name` token of a definition."""
    if line != node.lineno:
        return False
    text = source_lines[line - 1] if line - 1 < len(source_lines) else ""
    start = text.find(node.name, node.col_offset)
    return start != -1 and start <= col < start + len(node.name)


class _ClassScopeVisitor(ast.NodeVisitor):
    """Collects nested class qualnames around a line."""

    def __init__(self, line: int):
        self.line = line
        self.stack: List[str] = []
        self.innermost: Optional[str] = None
        self.header: Optional[str] = None

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self.stack.append(node.name)
        qualname = ".".join(self.stack)
        first_line = node.decorator_list[0].lineno if node.decorator_list else node.lineno
        if first_line <= self.line <= (node.end_lineno or node.lineno):
            self.innermost = qualname
        if node.lineno == self.line and self.header is None:
            self.header = qualname
        self.generic_visit(node)
        self.stack.pop()

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        # Classes defined inside functions are not reachable from the module
        return None

    visit_AsyncFunctionDef = visit_FunctionDef


def find_name_at(source: str, position: SourcePosition, filename: str = "<source>") -> Optional[str]:
    """
    Return the dotted name under a position, or None if there is none.

    Without a column, the class defined on that line wins, then the innermost
    class whose body contains the line.

    Raises:
        SyntaxError: If the source does not parse.
    """
    tree = ast.parse(source, filename=filename)

    if position.column is None:
        scopes = _ClassScopeVisitor(position.line)
        scopes.visit(tree)
        return scopes.header or scopes.innermost

    col = position.column - 1
    source_lines = source.splitlines()
    best: Optional[ast.AST] = None
    best_name: Optional[str] = None

    for node in ast.walk(tree):
        if isinstance(node, ast.ClassDef) and _class_header_contains(node, position.line, col, source_lines):
            return _qualified_class_name(tree, node)
        if not isinstance(node, (ast.Name, ast.Attribute)) or not _contains(node, position.line, col):
            continue
        name = _dotted_name(node)
        if name is None:
            continue
        # Prefer the widest dotted chain containing the position (models.Order over models)
        if best is None or len(name) > len(best_name):
            best, best_name = node, name

    return best_name


def _qualified_class_name(tree: ast.Module, target: ast.ClassDef) -> str:
    def search(body: List[ast.stmt], prefix: List[str]) -> Optional[str]:
        for stmt in body:
            if isinstance(stmt, ast.ClassDef):
                if stmt is target:
                    return ".".join(prefix + [stmt.name])
                found = search(stmt.body, prefix + [stmt.name])
                if found:
                    return found
        return None

    return search(tree.body, []) or target.name
