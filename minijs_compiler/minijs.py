import json
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from termcolor import colored

from .lexer import Lexer
from .parser import Parser
from .interpreter import Interpreter, ExecutionResult
from .environment_monitor import format_environment
from .ast_printer import AstPrinter, ast_to_obj
from .configuration import Debug
from .errors import Diagnostic, DiagnosticSink, Phase
from .tokens import Token
from . import ast_nodes as ast


@dataclass
class RunReport:
    """Everything one run produced: tokens and AST are kept even when a later phase fails."""
    tokens: List[Token]
    statements: List[ast.Stmt]
    diagnostics: List[Diagnostic] = field(default_factory=list)
    result: Optional[ExecutionResult] = None

    @property
    def had_syntax_error(self) -> bool:
        return any(d.phase in (Phase.LEX, Phase.PARSE) for d in self.diagnostics)

    @property
    def had_runtime_error(self) -> bool:
        return self.result is not None and not self.result.succeeded

    @property
    def succeeded(self) -> bool:
        return not self.diagnostics and self.result is not None and self.result.succeeded

    @property
    def first_error(self) -> Optional[Diagnostic]:
        return self.diagnostics[0] if self.diagnostics else None


def format_tokens(tokens: List[Token]) -> str:
    if not tokens:
        return "No tokens generated"
    return "\n".join(
        f'[{index}] {token.token_type.name}: "{token.lexeme}" (Line {token.line})'
        for index, token in enumerate(tokens)
    )


def dump_section(name: str, content: str):
    """Output a block of text under a fancy header."""
    heading_length = 20
    print(colored(f"{name} Dump".center(heading_length, "~"), attrs=["bold"]))
    print(content)
    print(colored("~" * heading_length, attrs=["bold"]))


class MiniJS:
    """
    Runs source text through the lexer, parser and interpreter.
    The interpreter lives as long as this object, so prompt lines share one global scope.
    """
    PROMPT = "> "

    def __init__(self, debug_flags: Debug = Debug(0), echo: bool = True):
        self.debug_flags = debug_flags
        self.echo = echo
        self.sink = DiagnosticSink()
        self.interpreter = Interpreter(self.sink)
        self.had_error = False
        self.had_runtime_error = False

    def run(self, source: str) -> RunReport:
        self.sink.clear()
        source = source.replace("\r\n", "\n")

        tokens = Lexer(source, self.sink).scan_tokens()
        if self.debug_flags & Debug.DUMP_TOKENS:
            dump_section("Token", format_tokens(tokens))

        statements = Parser(tokens, self.sink).parse()
        if self.debug_flags & Debug.DUMP_AST:
            dump_section("AST", AstPrinter().print_program(statements))
        if self.debug_flags & Debug.DUMP_AST_JSON:
            dump_section("AST", json.dumps(ast_to_obj(statements), indent=2))

        report = RunReport(tokens, statements)
        if self.sink.had_error():
            self.had_error = True
        elif not self.debug_flags & Debug.NO_INTERPRET:
            report.result = self.interpreter.interpret(statements)
            if not report.result.succeeded:
                self.had_runtime_error = True
            if self.debug_flags & Debug.DUMP_ENVIRONMENT:
                dump_section("Environment", format_environment(report.result.environment))

        report.diagnostics = list(self.sink.diagnostics)
        if self.echo:
            for diagnostic in report.diagnostics:
                print(colored(str(diagnostic), "red"), file=sys.stderr)
        return report

    def run_file(self, path: str) -> RunReport:
        with open(path, 'r', encoding='utf-8') as f:
            return self.run(f.read())

    def run_prompt(self):
        print("MiniJS REPL (Ctrl+C to exit)")
        while True:
            try:
                line = input(self.PROMPT)
                if not line: continue
                self.run(line)
                self.had_error = False
                self.had_runtime_error = False
            except (KeyboardInterrupt, EOFError):
                print("\nExiting.")
                break
