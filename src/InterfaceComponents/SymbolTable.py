from textual.widgets import DataTable

from SemanticComponents.Symbols import Symbol, SymbolTable
from SemanticComponents.TypeSystem import type_to_string


class SymbolTableWidget(DataTable):
    """UI widget for displaying a symbol table.

    Note: This is intentionally named `SymbolTableWidget` to avoid confusion with
    the `SemanticComponents.Symbols.SymbolTable` data model.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.zebra_stripes = True
        self.add_columns(
            ("#", "line_col"),
            ("ID", "ID_col"),
            ("TYPE", "TYPE_col"),
            ("SCOPE", "SCOPE_col"),
            ("PARAMS", "PARAMS_col"),
            ("RETURNS", "RETURNS_col"),
            ("DEFINED", "DEFINED_col"),
        )
        self.fixed_columns = 2

    def add_symbol(self, symbol: Symbol):
        """Adds a symbol to the symbol table.

        Args:
            symbol (Symbol): The symbol to add.
        """
        if symbol.is_function:
            params = (
                "\n".join(f"{type_to_string(p_type)} {p_name}" for p_name, p_type in symbol.parameters or [])
                or "none"
            )
            returns = type_to_string(symbol.return_type) if symbol.return_type else "none"
            defined = "yes" if symbol.defined else "no"
            kind = "function"
        else:
            params = "N/A"
            returns = "N/A"
            defined = "N/A"
            kind = type_to_string(symbol.data_type)
        self.add_row(
            str(symbol.line),
            symbol.identifier,
            kind,
            symbol.scope,
            params,
            returns,
            defined,
            height=None,
            key=f"{symbol.identifier}@{symbol.scope}@{self.row_count}",
        )

    def show_symbols(self, symbols: SymbolTable) -> None:
        self.clear()
        for symbol in symbols.symbols:
            self.add_symbol(symbol)
