### Define self-validating AST nodes for the imperative language subset. ###

from __future__ import annotations

from collections.abc import Generator, Iterator
from typing import TYPE_CHECKING

from SemanticComponents.Diagnostics import ErrorKind
from SemanticComponents.Operators import Operator, operators_map
from SemanticComponents.ProgressReport import CodeGenerationReport
from SemanticComponents.Types import ASTNodeId, Literal
from SemanticComponents.TypeSystem import (
    ArrayType,
    PointerType,
    ReferenceType,
    StaticType,
    Type,
    can_coerce,
    is_assignable,
    is_error,
    printable_type,
    type_matches,
    type_to_string,
)

if TYPE_CHECKING:
    from SemanticComponents.Context import SemanticContext


INDENT = "    "

# Spelling of the implicit int -> float conversion in generated code.
COERCION_PREFIX = f"[{type_to_string(Type.FLOAT)}] "


def indentation(depth: int) -> str:
    return INDENT * depth


class ASTNode:
    """Base class for all AST nodes.

    ```BNF:
        <ast_node> ::= <expression> | <statement> | <block>
```
    Every node validates itself in its constructor: it computes its static type
    from its children, checks them against the coercion rules and reports any
    problem through the context's reporter. After construction a node is
    never re-validated.

    Attributes:
        line (int): Source line that was current when this node was built.
        edges (list[ASTNode]): Child nodes used for AST display and UI tree projection.
        override_last (bool | None): UI hint used by `tree_representation()` to override whether
            this node is rendered as the last child.
        unique_id (ASTNodeId | None): UI tree node id assigned when the tree is displayed.

    Methods:
        type -> StaticType: Static type of the node (VOID for statements, ANY after an error).
        error -> bool: Whether this node, or anything below it, carries an unrecovered error.
        to_string(depth: int = 0) -> str: Render the node as target code.
        generate_code(depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
            Emits incremental code-generation events for this node.
        tree_representation(prefix: str = "", is_last: bool = True) -> str:
            Produces a human-readable tree (debug/UI).
        unindented_representation() -> str:
            One-line label used in the AST tree.

    Notes:
        Semantic errors never raise. A failed node still renders so that the
        driver can keep going and report every independent problem in one run.
    """

    def __init__(self, line: int = 0):
        self.line: int = line
        self.edges: list[ASTNode] = []
        self.override_last = None
        self.unique_id: ASTNodeId | None = None
        self._failed: bool = False

    @property
    def type(self) -> StaticType:
        raise NotImplementedError("Subclasses must implement the type property")

    @property
    def error(self) -> bool:
        return self._failed

    def tree_representation(self, prefix="", is_last=True) -> str:
        """Return a string representation of the node with indentation.

        Meant for pretty-printing the AST structure. To produce target code,
        use `to_string()` or drive `generate_code()`.

        Args:
            prefix (str): Prefix string to render before this node (used recursively).
            is_last (bool): Whether this node is rendered as the last child.

        Returns:
            str: The indented string representation of the node.
        """
        if self.override_last is not None:
            is_last = self.override_last
        connector = "└── " if is_last else "├── "
        extension = "    " if is_last else "│   "
        unindented_rep = self.unindented_representation()
        result = f"{prefix}{connector}{unindented_rep}" if unindented_rep else ""
        if self.edges and unindented_rep:
            result += "\n"
        for i, edge in enumerate(self.edges):
            is_last_edge = i == len(self.edges) - 1
            result += edge.tree_representation(f"{prefix}{extension}", is_last_edge)
            if i < len(self.edges) - 1:
                result += "\n"
        return result

    def unindented_representation(self) -> str:
        """Return the one-line label for this node.

        Returns:
            str: Label used by `tree_representation()` and the UI tree.
        """
        raise NotImplementedError(
            "Subclasses must implement unindented_representation method"
        )

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        """Yield `CodeGenerationReport` events that build the target text.

        Args:
            depth (int): Nesting depth; statements are prefixed with `depth` indentation units.

        Yields:
            CodeGenerationReport: Progress events containing UI metadata and `new_code` fragments.
        """
        raise NotImplementedError("Subclasses must implement generate_code method")

    def to_string(self, depth: int = 0) -> str:
        """Render this node (and its subtree) as target code.

        Rendering has no side effects, so calling it repeatedly on an unchanged
        tree always produces the same text.
        """
        return "".join(report.new_code or "" for report in self.generate_code(depth))

    def _yield_report(self, message: str, code: str = "") -> Generator[CodeGenerationReport, None, None]:
        """Factory helper to create and yield CodeGenerationReport instances.

        Args:
            message (str): Action bar message describing what's being generated.
            code (str): The code fragment to append to the output.

        Yields:
            CodeGenerationReport: Single report event with the specified message and code.
        """
        report = CodeGenerationReport()
        report.action_bar_message = message
        report.looked_at_tree_node_id = self.unique_id
        report.new_code = code
        yield report

    def _label_suffix(self) -> str:
        return " (error)" if self.error else ""


class Expression(ASTNode):
    """Base class for value-producing nodes.

    ```BNF:
        <expression> ::= <operation> | <primary>
```
    Notes:
        Expressions render inline; `depth` only adds leading indentation so an
        expression can also stand on its own line inside a block.
    """


class Statement(ASTNode):
    """Base class for statement nodes.

    ```BNF:
        <statement> ::= <declaration> | <assignment> | <if_stmt> | <for_stmt>
```                     | <function_def> | <return_stmt> | <expression>

    Statements are typed VOID unless they say otherwise.
    """

    @property
    def type(self) -> StaticType:
        return Type.VOID


class Assignable(ASTNode):
    """Marker base for l-values (valid assignment targets).

    ```BNF:
        <assignable> ::= IDENTIFIER | IDENTIFIER '[' <expression> ']'
```
    """


def _is_empty(node: ASTNode | None) -> bool:
    if node is None or isinstance(node, Nop):
        return True
    if isinstance(node, Block):
        return all(_is_empty(line) for line in node.lines)
    return False


def _inline_text(node: ASTNode | None) -> str:
    """Render a statement for use inside a loop header (no trailing `;`).

    A declaration with several bindings is joined on one line, sharing the type.
    """
    if node is None:
        return ""
    if isinstance(node, Declaration) and len(node.declarations) > 1:
        prefix = f"{type_to_string(node.var_type)} "
        bindings = [declaration.to_string().rstrip(";") for declaration in node.declarations]
        return ", ".join([bindings[0]] + [binding.removeprefix(prefix) for binding in bindings[1:]])
    return node.to_string().rstrip(";")


class Nop(Statement):
    """Empty statement; renders nothing."""

    def unindented_representation(self) -> str:
        return "No-op"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        yield from ()

    def __repr__(self):
        return "NopNode()"


class Constant(Expression):
    """Literal value in an expression.

    ```BNF:
        <literal> ::= INT_LITERAL | FLOAT_LITERAL | BOOL_LITERAL
```
    Attributes:
        const_type (Type): Type the scanner assigned to the lexeme.
        value (str): Raw literal lexeme, rendered verbatim.

    Notes:
        Literals are well-typed by construction, so a constant never fails.
    """

    def __init__(self, const_type: StaticType, value: str, line: int = 0):
        super().__init__(line)
        self.const_type = const_type
        self.value = value

    @classmethod
    def from_literal(cls, literal: Literal, line: int = 0) -> "Constant":
        return cls(literal.type, literal.value, line)

    @property
    def type(self) -> StaticType:
        return self.const_type

    def unindented_representation(self) -> str:
        return f"LITERAL : {self.value} : {type_to_string(self.const_type)}"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        yield from self._yield_report(
            f"Generating code for literal: {self.value}", f"{indentation(depth)}{self.value}"
        )

    def __repr__(self):
        return f"ConstantNode({type_to_string(self.const_type)}, {self.value})"


class Variable(Expression, Assignable):
    """Identifier reference.

    ```BNF:
        <variable> ::= IDENTIFIER
```
    Attributes:
        name (str): Identifier text.

    Notes:
        The declared type is looked up once, at construction. An unknown name
        reports UNDECLARED_VARIABLE and types the node ANY so that enclosing
        nodes stay quiet about it.
    """

    def __init__(self, context: "SemanticContext", name: str):
        super().__init__(context.line)
        self.name = name
        declared = context.symbols.lookup(name)
        if declared is None:
            self._type: StaticType = Type.ANY
            self._failed = True
            context.report(ErrorKind.UNDECLARED_VARIABLE, name)
        else:
            self._type = declared

    @property
    def type(self) -> StaticType:
        return self._type

    def unindented_representation(self) -> str:
        return f"Identifier: {self.name} : {type_to_string(self._type)}{self._label_suffix()}"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        yield from self._yield_report(
            f"Generating code for variable: {self.name}", f"{indentation(depth)}{self.name}"
        )

    def __repr__(self):
        return f"VariableNode({self.name})"


class VarDecl(Statement):
    """Single typed variable declaration, optionally initialized.

    ```BNF:
        <var_decl> ::= <type> IDENTIFIER ('=' <expression>)? ';'
```
    Attributes:
        var_type (StaticType): Declared type.
        name (str): Declared identifier.
        value (ASTNode | None): Initializer expression.

    Notes:
        The initializer must have exactly the declared type; unlike assignment,
        an integer initializer is not widened to a float here.
    """

    def __init__(
        self,
        context: "SemanticContext",
        var_type: StaticType,
        name: str,
        value: ASTNode | None = None,
    ):
        super().__init__(context.line)
        self.var_type = var_type
        self.name = name
        self.value = value
        self.edges = [value] if value is not None else []

        if not context.symbols.declare(name, var_type, self.line):
            self._failed = True
            context.report(ErrorKind.MULTIPLE_DEFINITION, name)

        if value is None:
            return
        if value.error or is_error(value.type):
            self._failed = True
        elif not type_matches(var_type, value.type):
            self._failed = True
            context.report(ErrorKind.INCOMPATIBLE_ASSIGNMENT, var_type, value.type)

    @property
    def type(self) -> StaticType:
        return self.var_type

    def unindented_representation(self) -> str:
        return f"Variable Declaration: {self.name} : {type_to_string(self.var_type)}{self._label_suffix()}"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        yield from self._yield_report(
            f"Generating code for variable declaration: {self.name}",
            f"{indentation(depth)}{type_to_string(self.var_type)} {self.name}",
        )
        if self.value is not None:
            yield from self._yield_report(f"Generating code for initializer of {self.name}...", " = ")
            yield from self.value.generate_code()
        yield from self._yield_report(f"Finishing variable declaration: {self.name}", ";")

    def __repr__(self):
        return f"VarDeclNode({type_to_string(self.var_type)}, {self.name}, {self.value!r})"


class Declaration(Statement):
    """Declaration statement holding one or more bindings of the same type.

    ```BNF:
        <declaration> ::= <type> <binding> (',' <binding>)* ';'
```        <binding> ::= IDENTIFIER ('=' (<expression> | <literal>))?

    Attributes:
        var_type (StaticType): Type shared by every binding.
        kind (str): Declaration kind label (e.g. "var"), reserved for target-specific sugar.
        symbol_type (str): Optional user-facing type identifier set by the builder.
        declarations (list[VarDecl]): Bindings in the order they were added.

    Methods:
        add(name, value=None) -> VarDecl: Declare `name`, with an optional initializer node or `Literal`.

    Notes:
        A rejected binding (re-declaration, bad initializer) is still kept so it renders.
    """

    def __init__(self, context: "SemanticContext", var_type: StaticType, kind: str = "var"):
        super().__init__(context.line)
        self._context = context
        self.var_type = var_type
        self.kind = kind
        self.symbol_type = ""
        self.declarations: list[VarDecl] = []
        self.edges = self.declarations  # type: ignore

    def add(self, name: str, value: ASTNode | Literal | None = None) -> VarDecl:
        if isinstance(value, Literal):
            value = Constant.from_literal(value, self._context.line)
        declaration = VarDecl(self._context, self.var_type, name, value)
        self.declarations.append(declaration)
        return declaration

    def set_symbol_type(self, identifier: str) -> None:
        self.symbol_type = identifier

    @property
    def type(self) -> StaticType:
        return self.var_type

    @property
    def error(self) -> bool:
        return any(declaration.error for declaration in self.declarations)

    def unindented_representation(self) -> str:
        result = f"Declaration ({self.kind}) : {type_to_string(self.var_type)}"
        if len(self.declarations) > 1:
            result += f" x{len(self.declarations)}"
        return result + self._label_suffix()

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        for i, declaration in enumerate(self.declarations):
            if i > 0:
                yield from self._yield_report("Generating code for declaration (next binding)...", "\n")
            yield from declaration.generate_code(depth)

    def __repr__(self):
        return f"DeclarationNode({type_to_string(self.var_type)}, {self.declarations})"


class ArrayDecl(Statement):
    """Array declaration.

    ```BNF:
        <array_decl> ::= <type> IDENTIFIER '[' <size> ']' ';'
```
    Attributes:
        var_type (StaticType): Element type.
        name (str): Array identifier.
        size (str): Bound, rendered verbatim (no bounds checking at this layer).
    """

    def __init__(
        self,
        context: "SemanticContext",
        var_type: StaticType,
        name: str,
        size: str | ASTNode,
    ):
        super().__init__(context.line)
        self.var_type = var_type
        self.name = name
        self.size = size if isinstance(size, str) else size.to_string()
        self.array_type = ArrayType(var_type, self.size)
        if not context.symbols.declare(name, self.array_type, self.line):
            self._failed = True
            context.report(ErrorKind.MULTIPLE_DEFINITION, name)

    @property
    def type(self) -> StaticType:
        return self.var_type

    def unindented_representation(self) -> str:
        return f"Array Declaration: {self.name} : {type_to_string(self.array_type)}{self._label_suffix()}"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        yield from self._yield_report(
            f"Generating code for array declaration: {self.name}",
            f"{indentation(depth)}{type_to_string(self.var_type)} {self.name}[{self.size}];",
        )

    def __repr__(self):
        return f"ArrayDeclNode({type_to_string(self.var_type)}, {self.name}, {self.size})"


class Operation(Expression):
    """N-ary operator node shared by unary and binary operators.

    ```BNF:
        <operation> ::= <expression> <operator> <expression> (<operator> <expression>)*
```                      | <unary_operator> <expression>

    Attributes:
        op (Operator): Operator tag.
        operands (list[ASTNode]): Operands in source order.
        coerced (set[int]): Positions of operands rendered with an explicit int -> float cast.

    Methods:
        set_type(t): One-time override of the result type, used by specializations.
        op_string() -> str: Glyph placed between (or before) the operands.

    Notes:
        The operand type is a fold over the operands. It starts at `operand_type`
        (when given) or at the first operand's type, and every operand must
        match it. An int operand against a float expectation is accepted and
        marked for a cast. A float operand against an int running type widens
        the node to float, unless the operand type was given explicitly. Any
        other mismatch reports INCOMPATIBLE_OPERANDS once and the node becomes
        ANY. An operand that already failed makes this node fail without a new
        diagnostic, and no later operand is checked.
    """

    def __init__(
        self,
        context: "SemanticContext",
        op: Operator,
        *operands: ASTNode,
        operand_type: StaticType | None = None,
    ):
        if not operands:
            raise ValueError(f"Operation {op.name} needs at least one operand.")
        super().__init__(context.line)
        self.op = op
        self.operands: list[ASTNode] = []
        self.coerced: set[int] = set()
        self._explicit = operand_type is not None
        self._expected: StaticType = operand_type if operand_type is not None else operands[0].type
        self._result: StaticType | None = None
        for operand in operands:
            self._add_operand(context, operand)
        self.edges = self.operands  # type: ignore

    def _add_operand(self, context: "SemanticContext", operand: ASTNode) -> None:
        index = len(self.operands)
        self.operands.append(operand)
        self._failed = self._failed or operand.error
        if not self._failed:
            self._check(context, operand, index)

    def _check(self, context: "SemanticContext", operand: ASTNode, index: int) -> None:
        expected = self._expected
        actual = operand.type
        if is_error(expected) or is_error(actual):
            return
        if actual == Type.VOID:
            self._reject(context, Type.ANY if expected == Type.VOID else expected, actual)
        elif type_matches(expected, actual):
            return
        elif can_coerce(expected, actual):
            self.coerced.add(index)
        elif not self._explicit and can_coerce(actual, expected):
            # every earlier operand matched the old (integer) type exactly
            self.coerced.update(range(index))
            self._expected = actual
        else:
            self._reject(context, expected, actual)

    def _reject(self, context: "SemanticContext", expected: StaticType, actual: StaticType) -> None:
        self._failed = True
        context.report(ErrorKind.INCOMPATIBLE_OPERANDS, self.op, expected, actual)

    def set_type(self, t: StaticType) -> None:
        self._result = t

    @property
    def needs_coercion(self) -> bool:
        return bool(self.coerced)

    @property
    def type(self) -> StaticType:
        if self._failed:
            return Type.ANY
        return self._result if self._result is not None else self._expected

    def op_string(self) -> str:
        return operators_map[self.op]

    def prefix(self) -> str:
        """Text placed before the operand of a single-operand operation."""
        return self.op_string()

    def unindented_representation(self) -> str:
        return f"Operation: {self.op.name} : {type_to_string(self.type)}{self._label_suffix()}"

    def _operand_code(self, index: int) -> Generator[CodeGenerationReport, None, None]:
        if index in self.coerced:
            yield from self._yield_report("Inserting implicit cast to float...", COERCION_PREFIX)
        yield from self.operands[index].generate_code()

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        """Yield code-generation events for this operation.

        Yields:
            CodeGenerationReport: Events forming a fully parenthesized expression.
        """
        if len(self.operands) == 1:
            yield from self._yield_report(
                f"Generating code for {self.op.name} operation...",
                f"{indentation(depth)}({self.prefix()}",
            )
            yield from self._operand_code(0)
        else:
            yield from self._yield_report(
                f"Generating code for {self.op.name} operation...", f"{indentation(depth)}("
            )
            for index in range(len(self.operands)):
                if index > 0:
                    yield from self._yield_report(
                        f"Generating code for {self.op.name} operation (operator)...",
                        f" {self.op_string()} ",
                    )
                yield from self._operand_code(index)
        yield from self._yield_report(f"Finishing code for {self.op.name} operation...", ")")

    def __repr__(self):
        return f"OperationNode({self.op.name}, {self.operands})"


class Comparison(Operation):
    """Comparison operator; operands follow the usual rule, the result is always bool."""

    def __init__(self, context: "SemanticContext", op: Operator, *operands: ASTNode, operand_type: StaticType | None = None):
        super().__init__(context, op, *operands, operand_type=operand_type)
        self.set_type(Type.BOOL)


class BoolOperation(Operation):
    """Boolean connective (`&`, `|`, `!`): operands must already be bool."""

    def __init__(self, context: "SemanticContext", op: Operator, *operands: ASTNode):
        super().__init__(context, op, *operands, operand_type=Type.BOOL)


class Parenthesis(Operation):
    def __init__(self, context: "SemanticContext", operand: ASTNode):
        super().__init__(context, Operator.PAR, operand)

    def op_string(self) -> str:
        return ""


class UnaryMinus(Operation):
    def __init__(self, context: "SemanticContext", operand: ASTNode):
        super().__init__(context, Operator.UNARY_MINUS, operand)

    def op_string(self) -> str:
        return "-"


class Cast(Operation):
    """Explicit conversion to `target`.

    A cast never reports an operand mismatch, not even for a VOID operand,
    and its type is always the target, even when the operand itself failed
    (the failure still propagates through `error`).
    """

    def __init__(self, context: "SemanticContext", target: StaticType, operand: ASTNode):
        self.target = target
        super().__init__(context, Operator.CAST, operand)
        self.set_type(target)

    def _check(self, context: "SemanticContext", operand: ASTNode, index: int) -> None:
        return

    @property
    def type(self) -> StaticType:
        return self.target

    def op_string(self) -> str:
        return f"[{type_to_string(self.target)}]"

    def prefix(self) -> str:
        return self.op_string() + " "


class Assignment(Statement):
    """Assignment statement.

    ```BNF:
        <assignment> ::= <assignable> '=' <expression> ';'
```
    Attributes:
        target (ASTNode): Assignment target.
        value (ASTNode): Assigned value.
        coerced (bool): Whether the value is rendered with an int -> float cast.
    """

    def __init__(self, context: "SemanticContext", target: ASTNode, value: ASTNode):
        super().__init__(context.line)
        self.target = target
        self.value = value
        self.coerced = False
        self.edges = [target, value]

        if target.error or value.error:
            self._failed = True
        elif is_assignable(target.type, value.type):
            self.coerced = can_coerce(target.type, value.type)
        else:
            self._failed = True
            context.report(ErrorKind.INCOMPATIBLE_ASSIGNMENT, target.type, value.type)

    def unindented_representation(self) -> str:
        return "Assignment" + self._label_suffix()

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        """Yield code-generation events for this assignment.

        Yields:
            CodeGenerationReport: Events forming `target = value;`.
        """
        yield from self._yield_report("Generating code for assignment statement...", indentation(depth))
        yield from self.target.generate_code()
        yield from self._yield_report(
            "Generating code for assignment statement: ... = ",
            " = " + (COERCION_PREFIX if self.coerced else ""),
        )
        yield from self.value.generate_code()
        yield from self._yield_report("Finishing code for assignment statement", ";")

    def __repr__(self):
        return f"AssignmentNode({self.target!r}, {self.value!r})"


class Block(Statement):
    """Ordered sequence of statements.

    ```BNF:
        <block> ::= <statement>*
```
    Attributes:
        lines (list[ASTNode]): Statements in order.
        title (str): UI label for the block (e.g., "Body", "Then Branch").

    Notes:
        A failed line does not stop the block from rendering.
        Lines that render nothing (no-ops, empty blocks) are skipped.
    """

    def __init__(self, lines: list[ASTNode] | None = None, title: str = "Block"):
        super().__init__(0)
        self.lines: list[ASTNode] = list(lines) if lines else []
        self.title = title
        self.edges = self.lines  # type: ignore

    def add(self, line: ASTNode) -> ASTNode:
        self.lines.append(line)
        return line

    @property
    def error(self) -> bool:
        return any(line.error for line in self.lines)

    def __iter__(self) -> Iterator[ASTNode]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def unindented_representation(self) -> str:
        return f"{self.title}" if self.title else ""

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        first = True
        for line in self.lines:
            if _is_empty(line):
                continue
            if not first:
                yield from self._yield_report(f"Generating code for {self.title.lower()} (next line)...", "\n")
            first = False
            yield from line.generate_code(depth)

    def __repr__(self):
        return f"BlockNode({self.lines})"


def _nested_code(owner: ASTNode, body: ASTNode | None, depth: int) -> Generator[CodeGenerationReport, None, None]:
    """Emit `body` one level deeper, followed by a newline, unless it is empty."""
    if _is_empty(body):
        return
    yield from body.generate_code(depth + 1)  # type: ignore[union-attr]
    yield from owner._yield_report("Closing nested block...", "\n")


def _condition_code(owner: ASTNode, condition: ASTNode) -> Generator[CodeGenerationReport, None, None]:
    """Operations already render their own parentheses; anything else gets wrapped."""
    if isinstance(condition, Operation):
        yield from condition.generate_code()
        return
    yield from owner._yield_report("Generating code for condition...", "(")
    yield from condition.generate_code()
    yield from owner._yield_report("Generating code for condition...", ")")


def _check_test(context: "SemanticContext", condition: ASTNode) -> bool:
    """Validate a control-flow test; returns True when the owning node fails."""
    if condition.error or is_error(condition.type):
        return True
    if condition.type != Type.BOOL:
        context.report(ErrorKind.INCOMPATIBLE_TEST, condition.type)
        return True
    return False


class Conditional(Statement):
    """IF/ELSE control-flow statement.

    ```BNF:
        <if_stmt> ::= 'if' '(' <expression> ')' '{' <block> '}' ('else' '{' <block> '}')?
```
    Attributes:
        condition (ASTNode): Test; must be bool.
        accepted (ASTNode): Branch taken when the test holds.
        rejected (ASTNode | None): Optional else branch.
    """

    def __init__(
        self,
        context: "SemanticContext",
        condition: ASTNode,
        accepted: ASTNode,
        rejected: ASTNode | None = None,
    ):
        super().__init__(context.line)
        self.condition = condition
        self.accepted = accepted
        self.rejected = rejected
        if isinstance(accepted, Block):
            accepted.title = "Then Branch"
        if isinstance(rejected, Block):
            rejected.title = "Else Branch"
        self.edges = [condition, accepted] + ([rejected] if rejected is not None else [])
        self._failed = _check_test(context, condition)

    @property
    def error(self) -> bool:
        return (
            self._failed
            or self.accepted.error
            or (self.rejected is not None and self.rejected.error)
        )

    def unindented_representation(self) -> str:
        return "If Statement" + (" (error)" if self._failed else "")

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        """Yield code-generation events for this IF statement.

        Args:
            depth (int): Nesting depth of the `if` line; branches go one level deeper.

        Yields:
            CodeGenerationReport: Events forming `if (...) {` and optional `} else {` blocks.
        """
        indent = indentation(depth)
        yield from self._yield_report("Generating code for if statement...", f"{indent}if ")
        yield from _condition_code(self, self.condition)
        yield from self._yield_report("Generating code for if statement (then branch)...", " {\n")
        yield from _nested_code(self, self.accepted, depth)
        if self.rejected is not None:
            yield from self._yield_report("Generating code for if statement (else branch)...", f"{indent}}} else {{\n")
            yield from _nested_code(self, self.rejected, depth)
        yield from self._yield_report("Finishing if statement...", f"{indent}}}")

    def __repr__(self):
        return f"ConditionalNode({self.condition!r}, {self.accepted!r}, else={self.rejected!r})"


class Loop(Statement):
    """Counted loop.

    ```BNF:
        <for_stmt> ::= 'for' '(' <statement>? ';' <expression> ';' <statement>? ')' '{' <block> '}'
```
    Attributes:
        init (ASTNode | None): Statement run once before the loop.
        test (ASTNode): Loop test; must be bool.
        update (ASTNode | None): Statement run after every iteration.
        body (ASTNode): Loop body.

    Notes:
        init and update carry no type constraint of their own beyond whatever
        they checked when they were built.
    """

    def __init__(
        self,
        context: "SemanticContext",
        init: ASTNode | None,
        test: ASTNode,
        update: ASTNode | None,
        body: ASTNode,
    ):
        super().__init__(context.line)
        self.init = init
        self.test = test
        self.update = update
        self.body = body
        if isinstance(body, Block):
            body.title = "Body"
        self.edges = [node for node in (init, test, update, body) if node is not None]
        self._failed = _check_test(context, test)

    @property
    def error(self) -> bool:
        return self._failed or any(node.error for node in self.edges)

    def unindented_representation(self) -> str:
        return "For Loop" + (" (error)" if self._failed else "")

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        indent = indentation(depth)
        header = (
            f"{indent}for ({_inline_text(self.init)}; {self.test.to_string()}; "
            f"{_inline_text(self.update)}) {{\n"
        )
        yield from self._yield_report("Generating code for loop header...", header)
        yield from _nested_code(self, self.body, depth)
        yield from self._yield_report("Finishing loop...", f"{indent}}}")

    def __repr__(self):
        return f"LoopNode({self.init!r}, {self.test!r}, {self.update!r}, {self.body!r})"


class ParamList(ASTNode):
    """Typed parameter list of a function signature.

    ```BNF:
        <param_list> ::= <type> IDENTIFIER (',' <type> IDENTIFIER)*
```
    Iterating yields `(type, name)` pairs in declaration order. Duplicate names
    are not checked here; binding the parameters into a scope does that.
    """

    def __init__(self, params: list[tuple[StaticType, str]] | None = None):
        super().__init__(0)
        self.params: list[tuple[StaticType, str]] = list(params) if params else []

    def add(self, param_type: StaticType, name: str) -> None:
        self.params.append((param_type, name))

    @property
    def types(self) -> list[StaticType]:
        return [param_type for param_type, _name in self.params]

    @property
    def type(self) -> StaticType:
        return Type.VOID

    def __iter__(self) -> Iterator[tuple[StaticType, str]]:
        return iter(self.params)

    def __len__(self) -> int:
        return len(self.params)

    def unindented_representation(self) -> str:
        return f"Parameters: ({self.to_string()})"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        text = ", ".join(f"{type_to_string(param_type)} {name}" for param_type, name in self.params)
        yield from self._yield_report("Generating code for parameters...", text)

    def __repr__(self):
        return f"ParamListNode({self.params})"


class Fun(Statement):
    """Function declaration or definition, built incrementally.

    ```BNF:
        <function_def> ::= <type> IDENTIFIER '(' <param_list>? ')' ('{' <block> '}' | ';')
```
    Attributes:
        return_type (StaticType): Declared return type.
        name (str): Function name.
        params (ParamList | None): Signature, set by `bind()`.
        body (ASTNode | None): Body; None while the function is only declared.

    Methods:
        bind(params, body=None): Attach the signature (and optionally the body).
        inject(statement): Append a statement to the body, creating it if needed.

    Notes:
        Binding declares the signature in the symbol table. A function may be
        forward-declared any number of times, but binding a name that already
        has a body, or whose forward declaration has a different signature,
        reports MULTIPLE_DEFINITION_FN. A function that never gets a body is
        reported by the build session when the build finishes, not by this node.
    """

    def __init__(self, context: "SemanticContext", return_type: StaticType, name: str):
        super().__init__(context.line)
        self._context = context
        self.return_type = return_type
        self.name = name
        self.params: ParamList | None = None
        self.body: ASTNode | None = None

    def bind(self, params: ParamList, body: ASTNode | None = None) -> None:
        self.params = params
        symbols = self._context.symbols
        signature = [(name, param_type) for param_type, name in params]
        if not symbols.declare_function(self.name, signature, self.return_type, self.line):
            existing = symbols.lookup_function(self.name)
            if (
                existing is None
                or existing.defined
                or existing.parameter_types != params.types
                or existing.return_type != self.return_type
            ):
                self._failed = True
                self._context.report(ErrorKind.MULTIPLE_DEFINITION_FN, self.name)
        if body is not None:
            self.body = body
        if self.body is not None:
            self._mark_defined()
        self._refresh_edges()

    def inject(self, statement: ASTNode) -> None:
        if self.body is None:
            self.body = Block(title="Body")
        elif not isinstance(self.body, Block):
            self.body = Block([self.body], title="Body")
        self.body.add(statement)  # type: ignore[union-attr]
        if self.params is not None:
            self._mark_defined()
        self._refresh_edges()

    def _mark_defined(self) -> None:
        if not self._failed:
            self._context.symbols.define_function(self.name)

    def _refresh_edges(self) -> None:
        self.edges = [node for node in (self.params, self.body) if node is not None]

    @property
    def has_body(self) -> bool:
        return self.body is not None

    @property
    def type(self) -> StaticType:
        return self.return_type

    @property
    def error(self) -> bool:
        return self._failed or (self.body is not None and self.body.error)

    def unindented_representation(self) -> str:
        kind = "Function Definition" if self.has_body else "Function Declaration"
        return f"{kind}: {self.name} : {type_to_string(self.return_type)}" + (" (error)" if self._failed else "")

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        """Yield code-generation events for this function.

        Args:
            depth (int): Nesting depth of the signature line; the body goes one level deeper.

        Yields:
            CodeGenerationReport: Events forming the signature and, when defined, its body.
        """
        indent = indentation(depth)
        yield from self._yield_report(
            f"Generating code for function: {self.name}...",
            f"{indent}{type_to_string(self.return_type)} {self.name}(",
        )
        if self.params is not None:
            yield from self.params.generate_code()
        if self.body is None:
            yield from self._yield_report(f"Finishing declaration of {self.name}...", ");")
            return
        yield from self._yield_report(f"Generating code for function: {self.name} (body)...", ") {\n")
        yield from _nested_code(self, self.body, depth)
        yield from self._yield_report(f"Finishing function: {self.name}", f"{indent}}}")

    def __repr__(self):
        return f"FunNode({type_to_string(self.return_type)}, {self.name}, {self.params!r}, {self.body!r})"


class Return(Statement):
    """RETURN statement.

    ```BNF:
        <return_stmt> ::= 'return' <expression>? ';'
```
    Notes:
        Typed as its operand (VOID when bare). Checking it against the
        enclosing function's return type is not done here.
    """

    def __init__(self, operand: ASTNode | None = None, line: int = 0):
        super().__init__(line)
        self.operand = operand
        self.edges = [operand] if operand is not None else []

    @property
    def type(self) -> StaticType:
        return self.operand.type if self.operand is not None else Type.VOID

    @property
    def error(self) -> bool:
        return self.operand is not None and self.operand.error

    def unindented_representation(self) -> str:
        return "Return Statement"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        if self.operand is None:
            yield from self._yield_report("Generating code for return statement...", f"{indentation(depth)}return;")
            return
        yield from self._yield_report("Generating code for return statement...", f"{indentation(depth)}return ")
        yield from self.operand.generate_code()
        yield from self._yield_report("Finishing code for return statement...", ";")

    def __repr__(self):
        return f"ReturnNode({self.operand!r})"


class ExpressionList(ASTNode):
    """Comma-separated expressions (call arguments and general comma lists).

    ```BNF:
        <arg_list> ::= <expression> (',' <expression>)*
```
    """

    def __init__(self, expressions: list[ASTNode] | None = None):
        super().__init__(0)
        self.expressions: list[ASTNode] = list(expressions) if expressions else []
        self.edges = self.expressions  # type: ignore

    def add(self, expression: ASTNode) -> ASTNode:
        self.expressions.append(expression)
        return expression

    def size(self) -> int:
        return len(self.expressions)

    @property
    def type(self) -> StaticType:
        return Type.VOID

    @property
    def error(self) -> bool:
        return any(expression.error for expression in self.expressions)

    def __iter__(self) -> Iterator[ASTNode]:
        return iter(self.expressions)

    def __getitem__(self, index):
        return self.expressions[index]

    def __len__(self) -> int:
        return len(self.expressions)

    def unindented_representation(self) -> str:
        return "Argument" + ("s" if len(self.expressions) != 1 else "")

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        for i, expression in enumerate(self.expressions):
            if i > 0:
                yield from self._yield_report("Generating code for argument (adding comma)...", ", ")
            yield from expression.generate_code(depth if i == 0 else 0)

    def __repr__(self):
        return f"ExpressionListNode({self.expressions})"


class FunCall(Expression):
    """Function call expression.

    ```BNF:
        <function_call> ::= IDENTIFIER '(' <arg_list>? ')'
```
    Attributes:
        name (str): Callee identifier.
        args (ExpressionList): Argument expressions.
        coerced (set[int]): Argument positions rendered with an int -> float cast.

    Notes:
        An unknown callee reports UNDECLARED_VARIABLE. A wrong argument count
        reports WRONG_PARAM_COUNT and types the call ANY. Otherwise each
        position is compared with the declared parameter type. Positions whose
        argument already failed are skipped, and a mismatch reports
        INCOMPATIBLE_PARAM. `SemanticOptions.report_all_param_mismatches`
        decides whether checking goes on after the first mismatch. A call with
        a mismatched argument keeps the callee's return type.
    """

    def __init__(self, context: "SemanticContext", name: str, args: ExpressionList | None = None):
        super().__init__(context.line)
        self.name = name
        self.args = args if args is not None else ExpressionList()
        self.coerced: set[int] = set()
        self.edges = [self.args]
        self._type: StaticType = Type.ANY

        symbol = context.symbols.lookup_function(name)
        if symbol is None:
            self._failed = True
            context.report(ErrorKind.UNDECLARED_VARIABLE, name)
            return

        expected = symbol.parameter_types
        if len(expected) != len(self.args):
            self._failed = True
            context.report(ErrorKind.WRONG_PARAM_COUNT, name, len(expected), len(self.args))
            return

        self._type = symbol.return_type if symbol.return_type is not None else Type.VOID
        for index, (param_type, arg) in enumerate(zip(expected, self.args)):
            if arg.error or is_error(arg.type):
                self._failed = True
                continue
            if type_matches(param_type, arg.type):
                continue
            if can_coerce(param_type, arg.type):
                self.coerced.add(index)
                continue
            self._failed = True
            context.report(ErrorKind.INCOMPATIBLE_PARAM, name, param_type, arg.type)
            if not context.options.report_all_param_mismatches:
                break

    @property
    def type(self) -> StaticType:
        return self._type

    def unindented_representation(self) -> str:
        return f"Function Call: {self.name} : {type_to_string(self._type)}{self._label_suffix()}"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        yield from self._yield_report(
            f"Generating code for function call: {self.name}...", f"{indentation(depth)}{self.name}("
        )
        for i, arg in enumerate(self.args):
            if i > 0:
                yield from self._yield_report("Generating code for argument (adding comma)...", ", ")
            if i in self.coerced:
                yield from self._yield_report("Inserting implicit cast to float...", COERCION_PREFIX)
            yield from arg.generate_code()
        yield from self._yield_report(f"Finishing code for function call: {self.name}...", ")")

    def __repr__(self):
        return f"FunCallNode({self.name}, {self.args!r})"


class ArrayIndex(Expression, Assignable):
    """Array element access.

    ```BNF:
        <array_access> ::= IDENTIFIER '[' <expression> ']'
```
    Attributes:
        name (str): Array identifier.
        index (ASTNode): Index expression; must be int.

    Notes:
        The node's type is the array's element type, or ANY when the name is
        unknown or is not an array. A bad index marks the node failed but keeps
        the element type.
    """

    def __init__(self, context: "SemanticContext", name: str, index: ASTNode):
        super().__init__(context.line)
        self.name = name
        self.index = index
        self.edges = [index]
        self._type: StaticType = Type.ANY

        declared = context.symbols.lookup(name)
        if declared is None:
            self._failed = True
            context.report(ErrorKind.UNDECLARED_VARIABLE, name)
        elif not isinstance(declared, ArrayType):
            self._failed = True
            context.report(ErrorKind.NON_ARRAY_INDEX)
        else:
            self._type = declared.element

        if index.error or is_error(index.type):
            self._failed = True
        elif index.type != Type.INT:
            self._failed = True
            context.report(ErrorKind.INCOMPATIBLE_INDEX, Type.INT, index.type)

    @property
    def type(self) -> StaticType:
        return self._type

    def unindented_representation(self) -> str:
        return f"Array Access: {self.name} : {type_to_string(self._type)}{self._label_suffix()}"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        yield from self._yield_report(
            f"Generating code for array access: {self.name}[...]", f"{indentation(depth)}{self.name}["
        )
        yield from self.index.generate_code()
        yield from self._yield_report(f"Finishing code for array access: {self.name}", "]")

    def __repr__(self):
        return f"ArrayIndexNode({self.name}, {self.index!r})"


class _LvalueWrapper(Expression):
    """Shared shape of `Address` and `Reference`: one l-value, no diagnostics."""

    glyph = ""
    label = ""

    def __init__(self, lvalue: ASTNode):
        super().__init__(lvalue.line)
        self.lvalue = lvalue
        self.edges = [lvalue]
        self._failed = lvalue.error
        self._type: StaticType = Type.ANY if is_error(lvalue.type) else self._wrap(lvalue.type)

    def _wrap(self, t: StaticType) -> StaticType:
        raise NotImplementedError

    @property
    def type(self) -> StaticType:
        return self._type

    def unindented_representation(self) -> str:
        return f"{self.label} : {printable_type(self._type)}{self._label_suffix()}"

    def generate_code(self, depth: int = 0) -> Generator[CodeGenerationReport, None, None]:
        yield from self._yield_report(
            f"Generating code for {self.label.lower()}...", f"{indentation(depth)}{self.glyph}"
        )
        yield from self.lvalue.generate_code()


class Address(_LvalueWrapper):
    glyph = "&"
    label = "Address"

    def _wrap(self, t: StaticType) -> StaticType:
        return PointerType(t)

    def __repr__(self):
        return f"AddressNode({self.lvalue!r})"


class Reference(_LvalueWrapper):
    glyph = "*"
    label = "Reference"

    def _wrap(self, t: StaticType) -> StaticType:
        return ReferenceType(t)

    def __repr__(self):
        return f"ReferenceNode({self.lvalue!r})"
