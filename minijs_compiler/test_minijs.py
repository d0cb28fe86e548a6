import json

import pytest

from .minijs import MiniJS, RunReport, format_tokens
from .__main__ import main
from .ast_printer import ast_to_obj
from .configuration import Debug
from .errors import Diagnostic, DiagnosticSink, Phase
from .lexer import tokenize
from .parser import parse

SCENARIO = "let x = 10; let y = 5; let sum = x + y; if (x > y) { sum = sum * 2; } x = sum;"


def test_run_reports_success():
    report = MiniJS(echo=False).run(SCENARIO)
    assert isinstance(report, RunReport)
    assert report.succeeded
    assert report.diagnostics == []
    assert report.first_error is None
    assert report.result.environment.variables == {"x": "30", "y": "5", "sum": "30"}
    assert report.tokens[-1].token_type.name == "EOF"
    assert len(report.statements) == 5


def test_syntax_error_skips_interpretation():
    minijs = MiniJS(echo=False)
    report = minijs.run("let = 1; let ok = 2;")
    assert report.had_syntax_error
    assert not report.succeeded
    assert report.result is None
    assert len(report.statements) == 1
    assert minijs.had_error
    assert minijs.interpreter.globals.values == {}


def test_lex_error_counts_as_syntax_error():
    report = MiniJS(echo=False).run("let a = 1 @ 2;")
    assert report.had_syntax_error
    assert report.first_error.phase is Phase.LEX


def test_runtime_error_is_reported():
    minijs = MiniJS(echo=False)
    report = minijs.run("let a = 1;\nx = 1;")
    assert report.had_runtime_error
    assert not report.had_syntax_error
    assert minijs.had_runtime_error
    assert str(report.first_error) == "[Line 2] RuntimeError: Undefined variable 'x'."
    assert report.result.environment.variables == {"a": "1"}


def test_windows_line_endings_are_normalized():
    report = MiniJS(echo=False).run("let a = 1;\r\nlet b = a;")
    assert report.succeeded
    assert [t.line for t in report.tokens if t.lexeme == "b"] == [2]


def test_successive_runs_share_globals():
    minijs = MiniJS(echo=False)
    minijs.run("let count = 1;")
    report = minijs.run("count = count + 1;")
    assert report.succeeded
    assert report.result.environment.variables == {"count": "2"}


def test_diagnostics_cleared_between_runs():
    minijs = MiniJS(echo=False)
    minijs.run("let = 1;")
    report = minijs.run("let fine = 1;")
    assert report.diagnostics == []
    assert report.succeeded


def test_no_interpret_flag():
    report = MiniJS(Debug.NO_INTERPRET, echo=False).run("let a = 1;")
    assert report.result is None
    assert report.statements


def test_dump_flags(capsys):
    flags = Debug.DUMP_TOKENS | Debug.DUMP_AST | Debug.DUMP_ENVIRONMENT
    MiniJS(flags, echo=False).run("let x = 1;")
    out = capsys.readouterr().out
    assert "Token Dump" in out
    assert '[0] LET: "let" (Line 1)' in out
    assert "AST Dump" in out
    assert "(let x 1)" in out
    assert "Environment Dump" in out
    assert "Global Scope:\n  x: 1" in out


def test_dump_ast_json(capsys):
    MiniJS(Debug.DUMP_AST_JSON | Debug.NO_INTERPRET, echo=False).run("const c = 2;")
    out = capsys.readouterr().out
    assert '"type": "Var"' in out
    assert '"kind": "const"' in out


def test_echo_prints_diagnostics_to_stderr(capsys):
    MiniJS().run("1 +")
    captured = capsys.readouterr()
    assert "[Line 1] Error at end of input: Expect expression." in captured.err
    assert captured.out == ""


def test_sink_echo(capsys):
    sink = DiagnosticSink(echo=True)
    sink.report(Diagnostic(Phase.LEX, 4, "Unterminated string."))
    assert capsys.readouterr().err == "[Line 4] Error: Unterminated string.\n"
    assert sink.had_error(Phase.LEX)
    assert not sink.had_error(Phase.RUNTIME)


def test_run_prompt(monkeypatch, capsys):
    lines = iter(["let a = 2;", "", "a = a * 3;", "a = nope;"])

    def fake_input(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)
    minijs = MiniJS()
    minijs.run_prompt()
    captured = capsys.readouterr()
    assert "MiniJS REPL" in captured.out
    assert "Exiting." in captured.out
    assert "Undefined variable 'nope'." in captured.err
    assert minijs.interpreter.globals.values == {"a": 6.0}
    assert not minijs.had_runtime_error


def test_format_tokens():
    assert format_tokens([]) == "No tokens generated"
    assert format_tokens(tokenize('s = "x";')) == "\n".join([
        '[0] IDENTIFIER: "s" (Line 1)',
        '[1] EQUAL: "=" (Line 1)',
        '[2] STRING: ""x"" (Line 1)',
        '[3] SEMICOLON: ";" (Line 1)',
        '[4] EOF: "" (Line 1)',
    ])


def test_ast_to_obj_flattens_chains():
    obj = ast_to_obj(parse(tokenize("1 - 2 * 3 + 4;")))
    assert obj == [
        {
            "type": "Expression",
            "expression": {
                "type": "Binary",
                "operands": [
                    {"type": "Literal", "value": 1.0},
                    {
                        "type": "Binary",
                        "operands": [{"type": "Literal", "value": 2.0}, {"type": "Literal", "value": 3.0}],
                        "operators": ["*"],
                    },
                    {"type": "Literal", "value": 4.0},
                ],
                "operators": ["-", "+"],
            },
        }
    ]


def test_ast_to_obj_handles_thousand_term_chain():
    obj = ast_to_obj(parse(tokenize(" + ".join(["1"] * 1000) + ";")))
    chain = obj[0]["expression"]
    assert chain["operators"] == ["+"] * 999
    assert len(chain["operands"]) == 1000
    assert json.loads(json.dumps(obj, indent=2)) == obj


def test_long_chain_dumps(capsys):
    flags = Debug.DUMP_AST | Debug.DUMP_AST_JSON
    report = MiniJS(flags, echo=False).run("let total = " + " + ".join(["1"] * 600) + ";")
    assert report.succeeded
    assert report.result.environment.variables == {"total": "600"}
    out = capsys.readouterr().out
    assert "(let total (+ (+ " in out
    assert '"operators": [' in out


def test_ast_to_obj_is_json_ready():
    obj = ast_to_obj(parse(tokenize("let x = -1; if (x) { x = 2; }")))
    assert obj == [
        {
            "type": "Var",
            "kind": "let",
            "name": "x",
            "initializer": {"type": "Unary", "operator": "-", "right": {"type": "Literal", "value": 1.0}},
        },
        {
            "type": "If",
            "condition": {"type": "Variable", "name": "x"},
            "then_branch": {
                "type": "Block",
                "statements": [
                    {
                        "type": "Expression",
                        "expression": {"type": "Assign", "name": "x", "value": {"type": "Literal", "value": 2.0}},
                    }
                ],
            },
            "else_branch": None,
        },
    ]
    json.dumps(obj)


# --- Command line ---

def test_main_runs_string():
    assert main(["-c", SCENARIO]) == 0


def test_main_syntax_error_exit_code():
    assert main(["-c", "let = ;"]) == 65


def test_main_runtime_error_exit_code():
    assert main(["-c", "let a = 1 / 0;"]) == 70


def test_main_runs_file(tmp_path, capsys):
    script = tmp_path / "program.mjs"
    script.write_text("let greeting = \"hi\";\n", encoding="utf-8")
    assert main(["--dbg", "DUMP_ENVIRONMENT", str(script)]) == 0
    assert 'greeting: "hi"' in capsys.readouterr().out


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.mjs")]) == 66
    assert "ERROR: Could not read" in capsys.readouterr().err


def test_main_rejects_unknown_debug_flag():
    with pytest.raises(SystemExit) as info:
        main(["--dbg", "NOT_A_FLAG", "-c", "1;"])
    assert info.value.code == 2
