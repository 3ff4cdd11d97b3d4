### Operator tags, their spelling in generated code and in diagnostics. ###

from enum import Enum, auto


class Operator(Enum):
    EQUAL = auto()
    NOT_EQUAL = auto()
    GREATER_THAN = auto()
    LESS_THAN = auto()
    GREATER_EQUAL_THAN = auto()
    LESS_EQUAL_THAN = auto()
    AND = auto()
    OR = auto()
    NOT = auto()
    PLUS = auto()
    MINUS = auto()
    TIMES = auto()
    DIVIDE = auto()
    UNARY_MINUS = auto()
    ASSIGN = auto()
    PAR = auto()
    CAST = auto()
    TEST = auto()


operators_map = {
    Operator.EQUAL: "==",
    Operator.NOT_EQUAL: "!=",
    Operator.GREATER_THAN: ">",
    Operator.LESS_THAN: "<",
    Operator.GREATER_EQUAL_THAN: ">=",
    Operator.LESS_EQUAL_THAN: "<=",
    Operator.AND: "&",
    Operator.OR: "|",
    Operator.NOT: "!",
    Operator.PLUS: "+",
    Operator.MINUS: "-",
    Operator.TIMES: "*",
    Operator.DIVIDE: "/",
    Operator.UNARY_MINUS: "-",
    Operator.ASSIGN: "=",
    Operator.PAR: "",
}

printable_operators_map = {
    Operator.EQUAL: "equal",
    Operator.NOT_EQUAL: "different",
    Operator.GREATER_THAN: "greater than",
    Operator.LESS_THAN: "less than",
    Operator.GREATER_EQUAL_THAN: "greater or equal than",
    Operator.LESS_EQUAL_THAN: "less or equal than",
    Operator.AND: "and",
    Operator.OR: "or",
    Operator.NOT: "negation",
    Operator.PLUS: "addition",
    Operator.MINUS: "subtraction",
    Operator.TIMES: "multiplication",
    Operator.DIVIDE: "division",
    Operator.UNARY_MINUS: "unary minus",
    Operator.ASSIGN: "attribution",
    Operator.PAR: "parenthesis",
    Operator.CAST: "cast",
    Operator.TEST: "test",
}

COMPARISON_OPERATORS = frozenset(
    {
        Operator.EQUAL,
        Operator.NOT_EQUAL,
        Operator.GREATER_THAN,
        Operator.LESS_THAN,
        Operator.GREATER_EQUAL_THAN,
        Operator.LESS_EQUAL_THAN,
    }
)

BOOLEAN_OPERATORS = frozenset({Operator.AND, Operator.OR, Operator.NOT})


def printable_operator(op: Operator) -> str:
    return printable_operators_map[op]


def parse_operator(name: str) -> Operator:
    """Accept either the enum name ("PLUS") or the canonical symbol ("+").

    Binary "-" resolves to MINUS; unary minus must be requested by name.
    """

    key = name.strip()
    if key.upper() in Operator.__members__:
        return Operator[key.upper()]
    for op, symbol in operators_map.items():
        if symbol and symbol == key and op is not Operator.UNARY_MINUS:
            return op
    raise ValueError(f"Unknown operator: {name!r}")
