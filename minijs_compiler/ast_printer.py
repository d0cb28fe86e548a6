from typing import Any, Dict, List

from . import ast_nodes as ast
from .tokens import Token
from .values import stringify

class AstPrinter:
    """
    A utility class to print the AST in a readable Lisp-like format.
    This is extremely useful for debugging the parser.
    """
    def print_program(self, statements: List[ast.Stmt]) -> str:
        lines = []
        for stmt in statements:
            lines.append(self.print_stmt(stmt))
        return "\n".join(lines)

    # --- Statements ---

    def print_stmt(self, stmt: ast.AnyStmt) -> str:
        match stmt:
            case ast.Expression():
                return self._parenthesize("expr_stmt", stmt.expression)
            case ast.Var():
                keyword = "const" if stmt.is_const else "let"
                if stmt.initializer is not None:
                    return self._parenthesize(f"{keyword} {stmt.name.lexeme}", stmt.initializer)
                return f"({keyword} {stmt.name.lexeme})"
            case ast.Block():
                lines = ["(block"]
                for statement in stmt.statements:
                    for line in self.print_stmt(statement).split("\n"):
                        lines.append(f"  {line}")
                lines.append(")")
                return "\n".join(lines)
            case ast.If():
                parts = [
                    "(if ",
                    self.print_expr(stmt.condition),
                    " ",
                    self.print_stmt(stmt.then_branch)
                ]
                if stmt.else_branch is not None:
                    parts.append(" else ")
                    parts.append(self.print_stmt(stmt.else_branch))
                parts.append(")")
                return "".join(parts)
        raise TypeError(f"Unknown statement node: {type(stmt).__name__}")

    # --- Expressions ---

    def print_expr(self, expr: ast.AnyExpr) -> str:
        match expr:
            case ast.Binary() | ast.Logical():
                return self._print_chain(expr)
            case ast.Grouping():
                return self._parenthesize("group", expr.expression)
            case ast.Literal():
                if isinstance(expr.value, str): return f'"{expr.value}"'
                return stringify(expr.value)
            case ast.Unary():
                return self._parenthesize(expr.operator.lexeme, expr.right)
            case ast.Variable():
                return expr.name.lexeme
            case ast.Assign():
                return self._parenthesize(f"assign {expr.name.lexeme}", expr.value)
        raise TypeError(f"Unknown expression node: {type(expr).__name__}")

    # --- Helper Methods ---

    def _print_chain(self, expr) -> str:
        """Prints a left-folded chain from its first operand outward, without recursing down the spine."""
        spine = ast.left_spine(expr)
        text = self.print_expr(spine[-1].left)
        for node in reversed(spine):
            text = f"({node.operator.lexeme} {text} {self.print_expr(node.right)})"
        return text

    def _parenthesize(self, name: str, *parts: ast.Expr) -> str:
        """Helper to format a node and its children."""
        result = [f"({name}"]
        for part in parts:
            result.append(f" {self.print_expr(part)}")
        result.append(")")
        return "".join(result)


def ast_to_obj(node: Any) -> Any:
    """
    Converts AST nodes into plain dicts and lists suitable for JSON encoding.
    Every node becomes {"type": <class name>, ...fields}; tokens are reduced to their lexeme.
    Binary and logical chains are flattened so the result stays shallow for long programs.
    """
    if node is None or isinstance(node, (str, float, int, bool)):
        return node
    if isinstance(node, Token):
        return node.lexeme
    if isinstance(node, list):
        return [ast_to_obj(item) for item in node]

    match node:
        case ast.Binary() | ast.Logical():
            # A left-folded chain `a + b - c` is one object:
            # {"operands": [a, b, c], "operators": ["+", "-"]}, applied left to right.
            spine = ast.left_spine(node)
            fields = {
                "operands": [spine[-1].left] + [link.right for link in reversed(spine)],
                "operators": [link.operator for link in reversed(spine)],
            }
        case ast.Grouping():
            fields = {"expression": node.expression}
        case ast.Literal():
            fields = {"value": node.value}
        case ast.Unary():
            fields = {"operator": node.operator, "right": node.right}
        case ast.Variable():
            fields = {"name": node.name}
        case ast.Assign():
            fields = {"name": node.name, "value": node.value}
        case ast.Expression():
            fields = {"expression": node.expression}
        case ast.If():
            fields = {
                "condition": node.condition,
                "then_branch": node.then_branch,
                "else_branch": node.else_branch,
            }
        case ast.Var():
            fields = {"kind": node.keyword, "name": node.name, "initializer": node.initializer}
        case ast.Block():
            fields = {"statements": node.statements}
        case _:
            raise TypeError(f"Cannot serialize {type(node).__name__}")

    obj: Dict[str, Any] = {"type": type(node).__name__}
    for key, value in fields.items():
        obj[key] = ast_to_obj(value)
    return obj
