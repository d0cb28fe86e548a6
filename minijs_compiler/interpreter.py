from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Any, Optional

from . import ast_nodes as ast
from .tokens import Token, TokenType
from .errors import Diagnostic, DiagnosticSink, MiniJSRuntimeError, Phase
from .environment import Environment
from .environment_monitor import EnvironmentSnapshot, snapshot_environment
from .configuration import MAX_EVALUATION_DEPTH
from .values import MiniJSValue, is_equal, is_number, is_truthy, stringify


@dataclass(frozen=True)
class ExecutionResult:
    succeeded: bool
    message: str
    environment: EnvironmentSnapshot
    error: Optional[Diagnostic] = None


class Interpreter:
    """
    The Interpreter walks the AST and executes the code.

    Each instance owns its global scope for its whole lifetime, so separate
    interpreters share nothing and successive `interpret` calls on one
    instance see each other's variables.
    """
    def __init__(self, sink: Optional[DiagnosticSink] = None):
        self.sink: DiagnosticSink = sink if sink is not None else DiagnosticSink()
        self.globals = Environment()
        self.environment = self.globals
        self._depth = 0

    def interpret(self, statements: List[ast.Stmt]) -> ExecutionResult:
        """
        The main entry point for the interpreter. A runtime error stops the
        remaining statements; whatever already ran keeps its effect.
        """
        try:
            for statement in statements:
                self._execute(statement)
        except MiniJSRuntimeError as error:
            diagnostic = Diagnostic.at_token(Phase.RUNTIME, error.token, error.message)
            self.sink.report(diagnostic)
            return ExecutionResult(False, error.message, self.snapshot(), diagnostic)

        return ExecutionResult(True, "Program executed successfully.", self.snapshot())

    def snapshot(self) -> EnvironmentSnapshot:
        return snapshot_environment(self.environment)

    def reset(self):
        """Throws away every global binding."""
        self.globals = Environment()
        self.environment = self.globals

    def _execute(self, stmt: ast.AnyStmt):
        """Helper to execute a single statement."""
        match stmt:
            case ast.Expression():
                self._evaluate(stmt.expression)
            case ast.Var():
                self._execute_var(stmt)
            case ast.Block():
                self._execute_block(stmt.statements, Environment(self.environment))
            case ast.If():
                self._execute_if(stmt)
            case _:
                raise TypeError(f"Unknown statement node: {type(stmt).__name__}")

    def _evaluate(self, expr: ast.AnyExpr) -> MiniJSValue:
        """Helper to evaluate a single expression."""
        match expr:
            case ast.Literal():
                return expr.value
            case ast.Grouping():
                return self._evaluate(expr.expression)
            case ast.Variable():
                return self.environment.get(expr.name)
            case ast.Assign():
                with self._deeper(expr.name):
                    return self._evaluate_assign(expr)
            case ast.Unary():
                with self._deeper(expr.operator):
                    return self._evaluate_unary(expr)
            case ast.Binary():
                with self._deeper(expr.operator):
                    return self._evaluate_binary(expr)
            case ast.Logical():
                with self._deeper(expr.operator):
                    return self._evaluate_logical(expr)
            case _:
                raise TypeError(f"Unknown expression node: {type(expr).__name__}")

    @contextmanager
    def _deeper(self, token: Token):
        if self._depth >= MAX_EVALUATION_DEPTH:
            raise MiniJSRuntimeError(token, "Too much nesting.")
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    # --- STATEMENTS ---

    def _execute_var(self, stmt: ast.Var):
        value = None
        if stmt.initializer is not None:
            value = self._evaluate(stmt.initializer)

        self.environment.define(stmt.name.lexeme, value)

    def _execute_if(self, stmt: ast.If):
        if is_truthy(self._evaluate(stmt.condition)):
            self._execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            self._execute(stmt.else_branch)

    def _execute_block(self, statements: List[ast.Stmt], environment: Environment):
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                self._execute(statement)
        finally:
            self.environment = previous

    # --- HELPER METHODS FOR RUNTIME CHECKS ---

    def _check_number_operand(self, operator: Token, operand: Any):
        if is_number(operand): return
        raise MiniJSRuntimeError(operator, "Operand must be a number.")

    def _check_number_operands(self, operator: Token, left: Any, right: Any):
        if is_number(left) and is_number(right): return
        raise MiniJSRuntimeError(operator, "Operands must be numbers.")

    # --- EXPRESSIONS ---

    def _evaluate_assign(self, expr: ast.Assign):
        value = self._evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value

    def _evaluate_unary(self, expr: ast.Unary):
        right = self._evaluate(expr.right)
        op_type = expr.operator.token_type

        if op_type == TokenType.MINUS:
            self._check_number_operand(expr.operator, right)
            return -float(right)
        if op_type == TokenType.BANG:
            return not is_truthy(right)

        raise MiniJSRuntimeError(expr.operator, f"Unknown unary operator '{expr.operator.lexeme}'.")

    def _evaluate_binary(self, expr: ast.Binary):
        # `1 + 2 + 3` folds to the left; walk that spine in a loop so a long
        # flat chain costs no Python stack.
        spine = ast.left_spine(expr)
        value = self._evaluate(spine[-1].left)
        for node in reversed(spine):
            value = self._binary_operation(node.operator, value, self._evaluate(node.right))
        return value

    def _binary_operation(self, operator: Token, left: MiniJSValue, right: MiniJSValue) -> MiniJSValue:
        op_type = operator.token_type

        if op_type == TokenType.MINUS:
            self._check_number_operands(operator, left, right)
            return float(left) - float(right)
        if op_type == TokenType.SLASH:
            self._check_number_operands(operator, left, right)
            if float(right) == 0.0:
                raise MiniJSRuntimeError(operator, "Division by zero.")
            return float(left) / float(right)
        if op_type == TokenType.STAR:
            self._check_number_operands(operator, left, right)
            return float(left) * float(right)
        if op_type == TokenType.PLUS:
            if is_number(left) and is_number(right):
                return float(left) + float(right)
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise MiniJSRuntimeError(operator, "Operands must be numbers or strings.")

        if op_type == TokenType.GREATER:
            self._check_number_operands(operator, left, right)
            return float(left) > float(right)
        if op_type == TokenType.GREATER_EQUAL:
            self._check_number_operands(operator, left, right)
            return float(left) >= float(right)
        if op_type == TokenType.LESS:
            self._check_number_operands(operator, left, right)
            return float(left) < float(right)
        if op_type == TokenType.LESS_EQUAL:
            self._check_number_operands(operator, left, right)
            return float(left) <= float(right)

        if op_type == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op_type == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        raise MiniJSRuntimeError(operator, f"Unknown binary operator '{operator.lexeme}'.")

    def _evaluate_logical(self, expr: ast.Logical):
        spine = ast.left_spine(expr)
        value = self._evaluate(spine[-1].left)

        for node in reversed(spine):
            if node.operator.token_type == TokenType.OR:
                if is_truthy(value):
                    continue
            else: # AND
                if not is_truthy(value):
                    continue
            value = self._evaluate(node.right)

        return value


def interpret(statements: List[ast.Stmt], sink: Optional[DiagnosticSink] = None) -> ExecutionResult:
    """Runs statements against a fresh interpreter and reports how it went."""
    return Interpreter(sink).interpret(statements)
