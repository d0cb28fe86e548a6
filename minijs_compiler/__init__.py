from .tokens import Token, TokenType
from .errors import Diagnostic, DiagnosticSink, MiniJSRuntimeError, Phase
from .lexer import Lexer, tokenize
from .parser import Parser, ParseError, parse
from .environment import Environment
from .environment_monitor import EnvironmentSnapshot, format_environment, snapshot_environment
from .interpreter import ExecutionResult, Interpreter, interpret
from .ast_printer import AstPrinter, ast_to_obj
from .minijs import MiniJS, RunReport, format_tokens

__all__ = (
    "AstPrinter",
    "Diagnostic",
    "DiagnosticSink",
    "Environment",
    "EnvironmentSnapshot",
    "ExecutionResult",
    "Interpreter",
    "Lexer",
    "MiniJS",
    "MiniJSRuntimeError",
    "ParseError",
    "Parser",
    "Phase",
    "RunReport",
    "Token",
    "TokenType",
    "ast_to_obj",
    "format_environment",
    "format_tokens",
    "interpret",
    "parse",
    "snapshot_environment",
    "tokenize",
)
