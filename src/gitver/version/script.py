"""Restricted expression scripts producing `major;minor;patch[;qualifier]*`.

Scripts are single Python expressions. They are parsed with `ast` and
interpreted node by node, so only the constructs listed below can run:

- constants, str/list/tuple literals and f-strings
- `metadata.KEY` and `metadata["KEY"]`
- `+` and `-`, comparisons, `and`/`or`/`not`, `x if cond else y`
- subscripts and slices
- calls to str, int, len, min, max, bool
- the string methods join, lower, upper, replace, strip, split,
  startswith, endswith

Example:

    f"{metadata.CURRENT_VERSION_MAJOR};{metadata.CURRENT_VERSION_MINOR};0;"
    + ("" if metadata.DIRTY == "false" else "dirty")
"""

from __future__ import annotations

import ast
import operator
from collections.abc import Callable
from typing import Any

from gitver.config.constants import SCRIPT_BINDING_NAME
from gitver.core.errors import VersionCalculationError
from gitver.version.metadata import MetadataView
from gitver.version.semver import SemanticVersion, Version, parse_component


class ScriptError(Exception):
    """A construct outside the allowed subset, or a failed lookup."""


_BUILTINS: dict[str, Callable[..., Any]] = {
    "str": str,
    "int": int,
    "len": len,
    "min": min,
    "max": max,
    "bool": bool,
}

_STR_METHODS = frozenset(
    {"join", "lower", "upper", "replace", "strip", "split", "startswith", "endswith"}
)

_BIN_OPS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
}

_COMPARE_OPS: dict[type[ast.cmpop], Callable[[Any, Any], Any]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.In: lambda a, b: a in b,
    ast.NotIn: lambda a, b: a not in b,
}


class ExpressionEvaluator:
    """Walks a parsed expression with `metadata` as the only free name."""

    def __init__(self, metadata: MetadataView) -> None:
        self._metadata = metadata

    def evaluate(self, source: str) -> Any:
        tree = ast.parse(source.strip(), mode="eval")
        return self._eval(tree.body)

    def _eval(self, node: ast.expr) -> Any:
        handler = getattr(self, f"_eval_{type(node).__name__}", None)
        if handler is None:
            raise ScriptError(f"{type(node).__name__} is not allowed in version scripts")
        return handler(node)

    def _eval_Constant(self, node: ast.Constant) -> Any:
        return node.value

    def _eval_Name(self, node: ast.Name) -> Any:
        if node.id == SCRIPT_BINDING_NAME:
            return self._metadata
        raise ScriptError(f"Unknown name {node.id!r}")

    def _eval_Attribute(self, node: ast.Attribute) -> Any:
        target = self._eval(node.value)
        if target is self._metadata:
            return self._lookup(node.attr)
        if isinstance(target, str) and node.attr in _STR_METHODS:
            return getattr(target, node.attr)
        raise ScriptError(f"Attribute {node.attr!r} is not allowed")

    def _eval_Subscript(self, node: ast.Subscript) -> Any:
        target = self._eval(node.value)
        index = self._eval(node.slice)
        if target is self._metadata:
            if not isinstance(index, str):
                raise ScriptError("metadata keys are strings")
            return self._lookup(index)
        return target[index]

    def _eval_Slice(self, node: ast.Slice) -> slice:
        def bound(part: ast.expr | None) -> Any:
            return None if part is None else self._eval(part)

        return slice(bound(node.lower), bound(node.upper), bound(node.step))

    def _eval_JoinedStr(self, node: ast.JoinedStr) -> str:
        return "".join(str(self._eval(part)) for part in node.values)

    def _eval_FormattedValue(self, node: ast.FormattedValue) -> str:
        value = self._eval(node.value)
        if node.conversion == ord("r"):
            value = repr(value)
        spec = self._eval(node.format_spec) if node.format_spec is not None else ""
        return format(value if value is not None else "", spec)

    def _eval_List(self, node: ast.List) -> list[Any]:
        return [self._eval(e) for e in node.elts]

    def _eval_Tuple(self, node: ast.Tuple) -> tuple[Any, ...]:
        return tuple(self._eval(e) for e in node.elts)

    def _eval_BinOp(self, node: ast.BinOp) -> Any:
        op = _BIN_OPS.get(type(node.op))
        if op is None:
            raise ScriptError(f"Operator {type(node.op).__name__} is not allowed")
        return op(self._eval(node.left), self._eval(node.right))

    def _eval_UnaryOp(self, node: ast.UnaryOp) -> Any:
        if isinstance(node.op, ast.Not):
            return not self._eval(node.operand)
        if isinstance(node.op, ast.USub):
            return -self._eval(node.operand)
        raise ScriptError(f"Operator {type(node.op).__name__} is not allowed")

    def _eval_BoolOp(self, node: ast.BoolOp) -> Any:
        result: Any = None
        for value in node.values:
            result = self._eval(value)
            if isinstance(node.op, ast.And) and not result:
                return result
            if isinstance(node.op, ast.Or) and result:
                return result
        return result

    def _eval_Compare(self, node: ast.Compare) -> bool:
        left = self._eval(node.left)
        for op_node, comparator in zip(node.ops, node.comparators, strict=True):
            op = _COMPARE_OPS.get(type(op_node))
            if op is None:
                raise ScriptError(f"Comparison {type(op_node).__name__} is not allowed")
            right = self._eval(comparator)
            if not op(left, right):
                return False
            left = right
        return True

    def _eval_IfExp(self, node: ast.IfExp) -> Any:
        return self._eval(node.body) if self._eval(node.test) else self._eval(node.orelse)

    def _eval_Call(self, node: ast.Call) -> Any:
        if node.keywords:
            raise ScriptError("Keyword arguments are not allowed")
        if isinstance(node.func, ast.Name):
            func = _BUILTINS.get(node.func.id)
            if func is None:
                raise ScriptError(f"Function {node.func.id!r} is not allowed")
        elif isinstance(node.func, ast.Attribute):
            func = self._eval_Attribute(node.func)
            if not callable(func):
                raise ScriptError(f"{node.func.attr!r} is not callable")
        else:
            raise ScriptError("Only named functions and string methods can be called")
        return func(*(self._eval(arg) for arg in node.args))

    def _lookup(self, key: str) -> str | None:
        try:
            return self._metadata.lookup(key)
        except KeyError as e:
            raise ScriptError(e.args[0]) from None


def parse_output(output: str) -> Version:
    """Parse `major;minor;patch[;qualifier]*`; empty qualifier fields are dropped."""
    fields = output.strip().split(";")
    if len(fields) < 3:
        raise VersionCalculationError.invalid_output(
            output, f"expected at least 3 ';'-separated fields, got {len(fields)}"
        )
    components = []
    for name, text in zip(("major", "minor", "patch"), fields[:3], strict=True):
        value = parse_component(text.strip())
        if value is None:
            raise VersionCalculationError.invalid_output(
                output, f"{name} {text!r} is not a non-negative integer"
            )
        components.append(value)
    major, minor, patch = components
    return Version(SemanticVersion(major, minor, patch), tuple(fields[3:]))


def run_script(source: str, metadata: MetadataView) -> Version:
    """Evaluate a version script and parse its output.

    Every failure, including syntax errors, surfaces as VersionCalculationError
    with the underlying error chained.
    """
    try:
        result = ExpressionEvaluator(metadata).evaluate(source)
    except (
        ScriptError,
        SyntaxError,
        TypeError,
        ValueError,
        IndexError,
        KeyError,
        RecursionError,
        MemoryError,
    ) as e:
        raise VersionCalculationError.script_failed(f"{type(e).__name__}: {e}") from e
    if result is None:
        raise VersionCalculationError.invalid_output("", "script produced no output")
    return parse_output(str(result))
