"""Tests for the exact Python complexity calculator."""

import ast
import textwrap

from codedrift.analyzers.complexity import module_complexity


def _complexities(source: str) -> dict[str, int]:
    tree = ast.parse(textwrap.dedent(source))
    return {fn.name: fn.complexity for fn in module_complexity(tree)}


class TestDecisionPoints:
    """Each decision point adds exactly one."""

    def test_straight_line_is_one(self):
        """A function without branches has complexity 1."""
        assert _complexities("def f():\n    return 1\n") == {"f": 1}

    def test_single_if(self):
        result = _complexities(
            """
            def f(x):
                if x:
                    return 1
                return 0
            """
        )
        assert result["f"] == 2

    def test_if_elif_else(self):
        """elif adds one, else adds nothing."""
        result = _complexities(
            """
            def f(x):
                if x > 1:
                    return 1
                elif x > 0:
                    return 2
                else:
                    return 3
            """
        )
        assert result["f"] == 3

    def test_boolean_operators(self):
        """(a and b) or (c and d) adds three."""
        result = _complexities(
            """
            def f(a, b, c, d):
                return (a and b) or (c and d)
            """
        )
        assert result["f"] == 4

    def test_chained_and_counts_each_operator(self):
        result = _complexities("def f(a, b, c):\n    return a and b and c\n")
        assert result["f"] == 3

    def test_loops(self):
        result = _complexities(
            """
            async def f(items, stream):
                for item in items:
                    pass
                while items:
                    items.pop()
                async for chunk in stream:
                    pass
            """
        )
        assert result["f"] == 4

    def test_except_clauses(self):
        """Each except clause adds one; try and finally add nothing."""
        result = _complexities(
            """
            def f():
                try:
                    work()
                except ValueError:
                    pass
                except KeyError:
                    pass
                finally:
                    cleanup()
            """
        )
        assert result["f"] == 3

    def test_ternary(self):
        assert _complexities("def f(x):\n    return 1 if x else 2\n")["f"] == 2

    def test_comprehension_for_and_filter(self):
        result = _complexities("def f(xs):\n    return [x for x in xs if x if x > 2]\n")
        assert result["f"] == 4

    def test_match_wildcard_is_not_counted(self):
        result = _complexities(
            """
            def f(command):
                match command:
                    case "start":
                        return 1
                    case "stop":
                        return 2
                    case _:
                        return 0
            """
        )
        assert result["f"] == 3

    def test_guarded_wildcard_is_counted(self):
        result = _complexities(
            """
            def f(command, force):
                match command:
                    case _ if force:
                        return 1
            """
        )
        assert result["f"] == 2


class TestScopes:
    """Nested scopes and naming."""

    def test_nested_function_not_counted_in_parent(self):
        result = _complexities(
            """
            def outer(x):
                def inner(y):
                    if y:
                        return 1
                    return 0
                return inner(x)
            """
        )
        assert result == {"outer": 1}

    def test_lambda_body_not_counted(self):
        result = _complexities("def f(xs):\n    return sorted(xs, key=lambda x: 1 if x else 0)\n")
        assert result["f"] == 1

    def test_methods_are_qualified(self):
        result = _complexities(
            """
            class Server:
                def start(self):
                    if self.ready:
                        return True

                class Config:
                    def load(self):
                        return {}

            def helper():
                pass
            """
        )
        assert result == {"Server.start": 2, "Server.Config.load": 1, "helper": 1}

    def test_functions_reported_in_source_order_with_lines(self):
        tree = ast.parse("def a():\n    pass\n\n\ndef b():\n    pass\n")
        records = module_complexity(tree)
        assert [(fn.name, fn.line) for fn in records] == [("a", 1), ("b", 5)]
