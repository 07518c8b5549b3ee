"""Exact cyclomatic complexity over the Python syntax tree."""

from __future__ import annotations

import ast
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]

# Scopes of their own; their decisions belong to them, not the enclosing function.
_NESTED_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)

_BRANCHES = (ast.If, ast.For, ast.AsyncFor, ast.While, ast.IfExp, ast.ExceptHandler)


@dataclass(frozen=True)
class FunctionComplexity:
    name: str
    line: int
    complexity: int


def iter_functions(tree: ast.Module) -> Iterator[tuple[str, FunctionNode]]:
    """Yield (qualified name, node) for module functions and class methods.

    Methods are named ``Class.method``; nested classes are qualified
    ``Outer.Inner.method``. Functions defined inside functions are not
    yielded.
    """
    yield from _walk_body(tree.body, prefix="")


def _walk_body(body: list[ast.stmt], prefix: str) -> Iterator[tuple[str, FunctionNode]]:
    for node in body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            yield f"{prefix}{node.name}", node
        elif isinstance(node, ast.ClassDef):
            yield from _walk_body(node.body, prefix=f"{prefix}{node.name}.")


def function_complexity(node: FunctionNode) -> int:
    """Cyclomatic complexity of one function body.

    Starts at 1 and adds one per ``if``/``elif``, loop, conditional
    expression, ``except`` clause, comprehension ``for`` and ``if`` filter,
    non-wildcard ``case``, and one per extra operand of ``and``/``or``.
    """
    complexity = 1
    for child in _iter_own_nodes(node):
        if isinstance(child, _BRANCHES):
            complexity += 1
        elif isinstance(child, ast.BoolOp):
            complexity += len(child.values) - 1
        elif isinstance(child, ast.comprehension):
            complexity += 1 + len(child.ifs)
        elif isinstance(child, ast.match_case):
            if not _is_wildcard(child):
                complexity += 1
    return complexity


def _iter_own_nodes(node: ast.AST) -> Iterator[ast.AST]:
    """Descendants of ``node``, not entering nested scopes."""
    stack = list(ast.iter_child_nodes(node))
    while stack:
        child = stack.pop()
        yield child
        if isinstance(child, _NESTED_SCOPES):
            continue
        stack.extend(ast.iter_child_nodes(child))


def _is_wildcard(case: ast.match_case) -> bool:
    pattern = case.pattern
    return (
        isinstance(pattern, ast.MatchAs)
        and pattern.pattern is None
        and pattern.name is None
        and case.guard is None
    )


def module_complexity(tree: ast.Module) -> list[FunctionComplexity]:
    """Complexity of every reported function, in source order."""
    return [
        FunctionComplexity(name, node.lineno, function_complexity(node))
        for name, node in iter_functions(tree)
    ]
