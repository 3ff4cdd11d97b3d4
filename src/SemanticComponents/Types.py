"""Core compiler type aliases.

This module intentionally contains **no UI framework imports**.
The semantic core can expose IDs to a UI, but it should not depend on
Textual (or any other UI layer) to run headlessly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, NewType

if TYPE_CHECKING:
    from SemanticComponents.TypeSystem import Type

# Opaque identifier used to correlate AST nodes / progress events.
# In the Textual UI this maps cleanly to tree node ids.
ASTNodeId = NewType("ASTNodeId", int)


@dataclass(frozen=True, slots=True)
class Literal:
    """Raw lexeme paired with the type the scanner assigned to it."""

    value: str
    type: "Type"
