from enum import Flag, auto


class Debug(Flag):
    DUMP_TOKENS = auto()
    DUMP_AST = auto()
    DUMP_AST_JSON = auto()
    DUMP_ENVIRONMENT = auto()
    NO_INTERPRET = auto()


# Deepest nesting of groupings, unary chains, assignment chains, blocks and if
# statements accepted by the parser before it reports a syntax error.
MAX_NESTING_DEPTH = 48

# Deepest operator nesting the interpreter evaluates before failing at runtime.
# Left-folded chains such as `1 + 1 + ... + 1` are evaluated in a loop and do not count.
MAX_EVALUATION_DEPTH = 200
