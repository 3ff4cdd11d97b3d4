"""Replay a serialized action list into self-validating AST nodes.

Scanning and parsing happen elsewhere; what reaches this module is the
parser's bottom-up output, serialized as JSON-like dictionaries. Every action
has a "node" key naming the construct, plus the construct's fields. Children
are always built before their parent, and block-like actions open a scope
around their contents, so the symbol table sees declarations in source order.

An optional "line" key on any action moves the shared line counter forward
before that node is built.

```
    {"node": "declaration", "type": "int", "kind": "var",
        "bindings": [{"name": "x"}, {"name": "y", "init": {...}},
                     {"name": "z", "literal": {"type": "int", "value": "3"}}]}
    {"node": "array_decl", "type": "int", "name": "a", "size": "10"}
    {"node": "var", "name": "x"}
    {"node": "const", "type": "float", "value": "1.5"}
    {"node": "op", "op": "+", "operands": [{...}, {...}]}
    {"node": "paren", "operand": {...}}
    {"node": "cast", "type": "float", "operand": {...}}
    {"node": "assign", "target": {...}, "value": {...}}
    {"node": "block", "lines": [...]}
    {"node": "if", "condition": {...}, "then": [...], "else": [...]}
    {"node": "for", "init": {...}, "test": {...}, "update": {...}, "body": [...]}
    {"node": "function", "returns": "int", "name": "f", "params": [["int", "a"]], "body": [...]}
    {"node": "return", "operand": {...}}
    {"node": "call", "name": "f", "args": [...]}
    {"node": "index", "name": "a", "index": {...}}
    {"node": "address", "operand": {...}}
    {"node": "reference", "operand": {...}}
    {"node": "nop"}
```
A function action without "body" is a forward declaration.
"""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

from SemanticComponents.AST import (
    Address,
    ArrayDecl,
    ArrayIndex,
    Assignment,
    ASTNode,
    Block,
    BoolOperation,
    Cast,
    Comparison,
    Conditional,
    Constant,
    Declaration,
    ExpressionList,
    Fun,
    FunCall,
    Loop,
    Nop,
    Operation,
    ParamList,
    Parenthesis,
    Reference,
    Return,
    UnaryMinus,
    Variable,
)
from SemanticComponents.Context import SemanticContext
from SemanticComponents.Diagnostics import ErrorKind
from SemanticComponents.Operators import (
    BOOLEAN_OPERATORS,
    COMPARISON_OPERATORS,
    Operator,
    parse_operator,
)
from SemanticComponents.ProgressReport import BuildReport
from SemanticComponents.Types import Literal
from SemanticComponents.TypeSystem import parse_type_name


NON_EXPRESSION_OPERATORS = frozenset({Operator.ASSIGN, Operator.PAR, Operator.CAST, Operator.TEST})


class BuildError(ValueError):
    """Raised when an action list is malformed (not for semantic errors)."""

    pass


Action = dict[str, Any]


def load_program(path: str | Path) -> tuple[str, list[Action]]:
    """Read a program file and return `(name, actions)`.

    The file holds either a bare list of actions or an object with a
    "program" list and an optional "name".
    """

    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise BuildError(f"{path.name}: not valid JSON ({e.msg} at line {e.lineno})") from e

    if isinstance(data, list):
        return path.stem, data
    if isinstance(data, dict) and isinstance(data.get("program"), list):
        return str(data.get("name") or path.stem), data["program"]
    raise BuildError(f"{path.name}: expected a list of actions or an object with a 'program' list")


class TreeBuilder:
    """Turns actions into nodes, threading one `SemanticContext` through all of them."""

    def __init__(self, context: SemanticContext):
        self.context = context
        self._handlers = {
            "declaration": self._declaration,
            "array_decl": self._array_decl,
            "var": self._variable,
            "const": self._constant,
            "op": self._operation,
            "paren": self._parenthesis,
            "cast": self._cast,
            "assign": self._assignment,
            "block": self._block,
            "if": self._conditional,
            "for": self._loop,
            "function": self._function,
            "return": self._return,
            "call": self._call,
            "index": self._index,
            "address": self._address,
            "reference": self._reference,
            "nop": self._nop,
        }

    def build(self, action: Action) -> ASTNode:
        if not isinstance(action, dict):
            raise BuildError(f"Expected an action object, got {type(action).__name__}")
        kind = action.get("node")
        handler = self._handlers.get(kind)  # type: ignore[arg-type]
        if handler is None:
            raise BuildError(f"Unknown node kind: {kind!r}")
        if "line" in action:
            try:
                line = int(action["line"])
            except (TypeError, ValueError) as e:
                raise BuildError(f"Invalid line number: {action['line']!r}") from e
            self.context.counter.advance_to(line)
        return handler(action)

    def build_optional(self, action: Action | None) -> ASTNode | None:
        return self.build(action) if action is not None else None

    # ----- helpers -----

    @staticmethod
    def _require(action: Action, key: str) -> Any:
        if not isinstance(action, dict):
            raise BuildError(f"Expected an object with '{key}', got {type(action).__name__}")
        if key not in action:
            raise BuildError(f"'{action.get('node')}' action is missing '{key}'")
        return action[key]

    def _type(self, action: Action, key: str = "type"):
        try:
            return parse_type_name(str(self._require(action, key)))
        except ValueError as e:
            raise BuildError(str(e)) from e

    def _scoped_block(self, lines: Any, title: str = "Block") -> Block:
        """Build `lines` (a list of actions, or one block action) inside a new scope."""
        if isinstance(lines, dict):
            if lines.get("node") != "block":
                lines = [lines]
            else:
                lines = self._require(lines, "lines")
        if not isinstance(lines, list):
            raise BuildError("Expected a list of statements")
        block = Block(title=title)
        self.context.symbols.enter_scope()
        try:
            for line in lines:
                block.add(self.build(line))
        finally:
            self.context.symbols.exit_scope()
        return block

    # ----- declarations -----

    def _declaration(self, action: Action) -> ASTNode:
        declaration = Declaration(self.context, self._type(action), action.get("kind", "var"))
        if "symbol_type" in action:
            declaration.set_symbol_type(str(action["symbol_type"]))
        for binding in self._require(action, "bindings"):
            name = self._require(binding, "name")
            if "literal" in binding:
                literal = binding["literal"]
                declaration.add(name, Literal(str(self._require(literal, "value")), self._type(literal)))
            else:
                declaration.add(name, self.build_optional(binding.get("init")))
        return declaration

    def _array_decl(self, action: Action) -> ASTNode:
        size = self._require(action, "size")
        if isinstance(size, dict):
            size = self.build(size)
        elif not isinstance(size, str):
            size = str(size)
        return ArrayDecl(self.context, self._type(action), self._require(action, "name"), size)

    # ----- expressions -----

    def _variable(self, action: Action) -> ASTNode:
        return Variable(self.context, self._require(action, "name"))

    def _constant(self, action: Action) -> ASTNode:
        return Constant(self._type(action), str(self._require(action, "value")), self.context.line)

    def _operation(self, action: Action) -> ASTNode:
        try:
            op = parse_operator(str(self._require(action, "op")))
        except ValueError as e:
            raise BuildError(str(e)) from e
        if op in NON_EXPRESSION_OPERATORS:
            raise BuildError(
                f"Operator {op.name} is not an expression operator; use the 'assign', 'paren' or 'cast' node"
            )
        operands = [self.build(operand) for operand in self._require(action, "operands")]
        if not operands:
            raise BuildError(f"Operation {op.name} needs at least one operand")

        if len(operands) == 1 and op in (Operator.MINUS, Operator.UNARY_MINUS):
            return UnaryMinus(self.context, operands[0])
        if op in COMPARISON_OPERATORS:
            return Comparison(self.context, op, *operands)
        if op in BOOLEAN_OPERATORS:
            return BoolOperation(self.context, op, *operands)
        return Operation(self.context, op, *operands)

    def _parenthesis(self, action: Action) -> ASTNode:
        return Parenthesis(self.context, self.build(self._require(action, "operand")))

    def _cast(self, action: Action) -> ASTNode:
        return Cast(self.context, self._type(action), self.build(self._require(action, "operand")))

    def _call(self, action: Action) -> ASTNode:
        args = ExpressionList([self.build(arg) for arg in action.get("args", [])])
        return FunCall(self.context, self._require(action, "name"), args)

    def _index(self, action: Action) -> ASTNode:
        return ArrayIndex(self.context, self._require(action, "name"), self.build(self._require(action, "index")))

    def _address(self, action: Action) -> ASTNode:
        return Address(self.build(self._require(action, "operand")))

    def _reference(self, action: Action) -> ASTNode:
        return Reference(self.build(self._require(action, "operand")))

    # ----- statements -----

    def _assignment(self, action: Action) -> ASTNode:
        target = self.build(self._require(action, "target"))
        value = self.build(self._require(action, "value"))
        return Assignment(self.context, target, value)

    def _block(self, action: Action) -> ASTNode:
        return self._scoped_block(self._require(action, "lines"))

    def _conditional(self, action: Action) -> ASTNode:
        condition = self.build(self._require(action, "condition"))
        accepted = self._scoped_block(self._require(action, "then"))
        rejected = self._scoped_block(action["else"]) if action.get("else") is not None else None
        return Conditional(self.context, condition, accepted, rejected)

    def _loop(self, action: Action) -> ASTNode:
        symbols = self.context.symbols
        symbols.enter_scope()
        try:
            init = self.build_optional(action.get("init"))
            test = self.build(self._require(action, "test"))
            update = self.build_optional(action.get("update"))
            body = self._scoped_block(self._require(action, "body"), title="Body")
        finally:
            symbols.exit_scope()
        return Loop(self.context, init, test, update, body)

    def _function(self, action: Action) -> ASTNode:
        name = self._require(action, "name")
        params = ParamList()
        for param in action.get("params", []):
            if not isinstance(param, (list, tuple)) or len(param) != 2:
                raise BuildError(f"Parameter of '{name}' must be a [type, name] pair")
            try:
                params.add(parse_type_name(str(param[0])), str(param[1]))
            except ValueError as e:
                raise BuildError(str(e)) from e

        fun = Fun(self.context, self._type(action, "returns"), name)
        fun.bind(params)
        if action.get("body") is None:
            return fun

        symbols = self.context.symbols
        symbols.enter_scope(name)
        try:
            for param_type, param_name in params:
                if not symbols.declare(param_name, param_type, self.context.line):
                    self.context.report(ErrorKind.MULTIPLE_DEFINITION, param_name)
            lines = action["body"]
            if not lines:
                fun.inject(Nop())
            for line in lines:
                fun.inject(self.build(line))
        finally:
            symbols.exit_scope()
        return fun

    def _return(self, action: Action) -> ASTNode:
        return Return(self.build_optional(action.get("operand")), self.context.line)

    def _nop(self, action: Action) -> ASTNode:
        return Nop(self.context.line)


def get_build_reporter(
    actions: list[Action],
    builder: TreeBuilder,
    root: Block,
) -> Generator[BuildReport, None, None]:
    """Build each top-level action into `root`, yielding one report per node.

    Yields:
        BuildReport: The node's label, whether it failed, and the diagnostics
        its construction emitted.
    """
    reporter = builder.context.reporter
    for action in actions:
        before = len(reporter.diagnostics)
        node = builder.build(action)
        root.add(node)

        report = BuildReport()
        report.node_label = node.unindented_representation()
        report.node_failed = node.error
        report.new_diagnostics = reporter.diagnostics[before:]
        report.top_level = True
        report.action_bar_message = f"Built {report.node_label}"
        if report.new_diagnostics:
            report.action_bar_message += f" ({len(report.new_diagnostics)} diagnostic(s))"
        yield report
