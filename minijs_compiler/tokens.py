from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional

class TokenType(Enum):
    # Single-character tokens
    LEFT_PAREN = auto()     # (
    RIGHT_PAREN = auto()    # )
    LEFT_BRACE = auto()     # {
    RIGHT_BRACE = auto()    # }
    SEMICOLON = auto()      # ;
    MINUS = auto()          # -
    PLUS = auto()           # +
    SLASH = auto()          # /
    STAR = auto()           # *

    # One or two character tokens
    BANG = auto()           # !
    BANG_EQUAL = auto()     # !=
    EQUAL = auto()          # =
    EQUAL_EQUAL = auto()    # ==
    GREATER = auto()        # >
    GREATER_EQUAL = auto()  # >=
    LESS = auto()           # <
    LESS_EQUAL = auto()     # <=
    AND = auto()            # &&
    OR = auto()             # ||

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    CONST = auto()
    ELSE = auto()
    IF = auto()
    LET = auto()

    # End of file
    EOF = auto()


@dataclass(frozen=True)
class Token:
    token_type: TokenType
    lexeme: str
    literal: Optional[Any]
    line: int

    def __str__(self) -> str:
        return f"Token(type={self.token_type.name}, lexeme='{self.lexeme}', literal={self.literal}, line={self.line})"

# Mapping keywords to their token types
keywords = {
    "const": TokenType.CONST,
    "else": TokenType.ELSE,
    "if": TokenType.IF,
    "let": TokenType.LET,
}

# Tokens that begin a new declaration or statement; the parser resumes here after an error.
STATEMENT_STARTS = frozenset({
    TokenType.LET,
    TokenType.CONST,
    TokenType.IF,
    TokenType.ELSE,
})
