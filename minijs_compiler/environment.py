from typing import Dict, Any, Iterator, Optional

from .tokens import Token
from .errors import MiniJSRuntimeError

class Environment:
    """
    Manages variable scopes, storing and retrieving variable values.

    Scopes form a singly linked chain through `enclosing`, walked outward only.
    A scope does not own its enclosing scope; the interpreter keeps the outer
    scope alive for as long as any inner scope is in use.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing: Optional['Environment'] = enclosing

    def define(self, name: str, value: Any):
        """
        Defines a new variable in the current scope.
        This is used for 'let' and 'const' declarations, and may shadow an outer variable.
        """
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """
        Retrieves the value of a variable.
        If not found in the current scope, it checks the enclosing scopes.
        """
        return self._owner(name).values[name.lexeme]

    def assign(self, name: Token, value: Any):
        """
        Assigns a new value to an existing variable in the nearest scope that defines it.
        """
        self._owner(name).values[name.lexeme] = value

    def chain(self) -> Iterator['Environment']:
        """Yields this scope followed by each enclosing scope, innermost first."""
        scope: Optional[Environment] = self
        while scope is not None:
            yield scope
            scope = scope.enclosing

    def _owner(self, name: Token) -> 'Environment':
        for scope in self.chain():
            if name.lexeme in scope.values:
                return scope
        raise MiniJSRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
