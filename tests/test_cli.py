import io
import json

from calcapi.cli import main


def _run(capsys, argv):
    exit_code = main(argv)
    out = capsys.readouterr().out.strip()
    return exit_code, json.loads(out)


def test_cli_success(capsys):
    exit_code, data = _run(capsys, ["2", "+", "2", "*", "(3", "-", "1)"])
    assert exit_code == 0
    assert data == {"status": "ok", "result": 6.0}


def test_cli_postfix(capsys):
    exit_code, data = _run(capsys, ["--postfix", "8 - 3 - 2"])
    assert exit_code == 0
    assert data["result"] == 3
    assert data["postfix"] == "8 3 - 2 -"


def test_cli_error_exit(capsys):
    exit_code, data = _run(capsys, ["10 / 0"])
    assert exit_code == 2
    assert data["status"] == "error"
    assert data["error_type"] == "division_by_zero"


def test_cli_reads_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("10/4\n"))
    exit_code, data = _run(capsys, [])
    assert exit_code == 0
    assert data["result"] == 2.5


def test_cli_empty_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    exit_code, data = _run(capsys, [])
    assert exit_code == 2
    assert data["error_type"] == "invalid_expression"
