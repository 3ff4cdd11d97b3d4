from __future__ import annotations

from dataclasses import dataclass, field

from SemanticComponents.TypeSystem import StaticType, type_to_string


class SemanticError(Exception):
    """Raised when the symbol table itself is misused (not for user errors)."""

    pass


@dataclass
class Symbol:
    identifier: str
    line: int
    data_type: StaticType
    scope: str = "global"
    parameters: list[tuple[str, StaticType]] | None = (
        None  # (param_name, param_type) if function
    )
    return_type: StaticType | None = None  # if function
    defined: bool = False  # for functions: whether a body has been attached

    @property
    def is_function(self) -> bool:
        return self.parameters is not None

    @property
    def parameter_types(self) -> list[StaticType]:
        return [ptype for _name, ptype in (self.parameters or [])]

    def to_markdown(self) -> str:
        params_str = (
            ", ".join(f"{type_to_string(type_)} {name}" for name, type_ in self.parameters)
            if self.parameters
            else "N/A"
        )
        return_type_str = type_to_string(self.return_type) if self.return_type else "N/A"
        return (
            f"| {self.identifier} | {self.line} | {type_to_string(self.data_type)} | "
            f"{self.scope} | {params_str} | {return_type_str} |"
        )

    def __str__(self) -> str:
        return f"""Identifier: {self.identifier}
Line: {self.line}
Data Type: {type_to_string(self.data_type)}
Scope: {self.scope}
Parameters: {self.parameters}
Return Type: {self.return_type}"""


@dataclass
class _Scope:
    name: str
    variables: dict[str, Symbol] = field(default_factory=dict)
    functions: dict[str, Symbol] = field(default_factory=dict)


class SymbolTable:
    """Lexically nested identifier store.

    Variables and functions live in separate namespaces. Declarations only
    conflict within the innermost scope; lookups walk outwards, so an inner
    declaration shadows an outer one.
    """

    def __init__(self):
        self.symbols: list[Symbol] = []  # every accepted declaration, in order
        self.parent_scope: dict[str, str] = {}  # scope_name -> parent_scope_name
        self._scopes: list[_Scope] = [_Scope("global")]
        self._scope_serial = 0

    @property
    def current_scope(self) -> str:
        return self._scopes[-1].name

    @property
    def depth(self) -> int:
        return len(self._scopes) - 1

    def enter_scope(self, new_scope: str | None = None) -> str:
        if new_scope is None:
            self._scope_serial += 1
            new_scope = f"block{self._scope_serial}"
        self.parent_scope[new_scope] = self.current_scope
        self._scopes.append(_Scope(new_scope))
        return new_scope

    def exit_scope(self) -> str:
        if len(self._scopes) == 1:
            raise SemanticError("Cannot leave the global scope.")
        self._scopes.pop()
        return self.current_scope

    def declare(self, identifier: str, data_type: StaticType, line: int = 0) -> bool:
        """Insert a variable in the innermost scope.

        Returns:
            bool: False (and leaves the table untouched) when the identifier is
            already declared in that scope.
        """
        scope = self._scopes[-1]
        if identifier in scope.variables:
            return False
        symbol = Symbol(identifier, line, data_type, scope=scope.name)
        scope.variables[identifier] = symbol
        self.symbols.append(symbol)
        return True

    def lookup(self, identifier: str) -> StaticType | None:
        symbol = self.lookup_symbol(identifier)
        return symbol.data_type if symbol is not None else None

    def lookup_symbol(self, identifier: str) -> Symbol | None:
        for scope in reversed(self._scopes):
            if identifier in scope.variables:
                return scope.variables[identifier]
        return None

    def declare_function(
        self,
        identifier: str,
        parameters: list[tuple[str, StaticType]],
        return_type: StaticType,
        line: int = 0,
    ) -> bool:
        scope = self._scopes[-1]
        if identifier in scope.functions:
            return False
        symbol = Symbol(
            identifier,
            line,
            return_type,
            scope=scope.name,
            parameters=list(parameters),
            return_type=return_type,
        )
        scope.functions[identifier] = symbol
        self.symbols.append(symbol)
        return True

    def lookup_function(self, identifier: str) -> Symbol | None:
        for scope in reversed(self._scopes):
            if identifier in scope.functions:
                return scope.functions[identifier]
        return None

    def define_function(self, identifier: str) -> None:
        symbol = self.lookup_function(identifier)
        if symbol is None:
            raise SemanticError(f"Function '{identifier}' must be declared before it is defined.")
        symbol.defined = True

    def undefined_functions(self) -> list[Symbol]:
        return [sym for sym in self.symbols if sym.is_function and not sym.defined]

    def __str__(self) -> str:
        result = "Symbol Table:\n"
        for sym in self.symbols:
            result += f"{sym}\n"
        return result

    def to_markdown(self) -> str:
        result = "| Identifier | Line | Data Type | Scope | Parameters | Return Type |\n"
        result += "|------------|------|-----------|-------|------------|-------------|\n"
        for sym in self.symbols:
            result += sym.to_markdown() + "\n"
        return result
