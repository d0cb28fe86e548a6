import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .tokens import Token, TokenType


class Phase(Enum):
    LEX = "lex"
    PARSE = "parse"
    RUNTIME = "runtime"


@dataclass(frozen=True)
class Diagnostic:
    """A single problem found while lexing, parsing or running a program."""
    phase: Phase
    line: int
    message: str
    where: str = ""

    @classmethod
    def at_token(cls, phase: Phase, token: Token, message: str) -> 'Diagnostic':
        if token.token_type == TokenType.EOF:
            return cls(phase, token.line, message, "at end of input")
        return cls(phase, token.line, message, f"at '{token.lexeme}'")

    def __str__(self) -> str:
        if self.phase is Phase.RUNTIME:
            return f"[Line {self.line}] RuntimeError: {self.message}"
        if self.where:
            return f"[Line {self.line}] Error {self.where}: {self.message}"
        return f"[Line {self.line}] Error: {self.message}"


class DiagnosticSink:
    """
    Collects diagnostics from every phase in the order they are reported.
    With echo enabled each diagnostic is also printed to stderr as it arrives.
    """
    def __init__(self, echo: bool = False):
        self.diagnostics: List[Diagnostic] = []
        self.echo = echo

    def report(self, diagnostic: Diagnostic):
        self.diagnostics.append(diagnostic)
        if self.echo:
            print(diagnostic, file=sys.stderr)

    def had_error(self, phase: Optional[Phase] = None) -> bool:
        if phase is None:
            return bool(self.diagnostics)
        return any(d.phase is phase for d in self.diagnostics)

    def of_phase(self, phase: Phase) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.phase is phase]

    def clear(self):
        self.diagnostics.clear()

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)


class MiniJSRuntimeError(RuntimeError):
    """Custom exception for reporting runtime errors."""
    def __init__(self, token: Token, message: str):
        self.token = token
        self.message = message
        super().__init__(self.message)
