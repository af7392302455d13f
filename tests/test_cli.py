import io
from pathlib import Path

import pytest

from docannot.cli import main

from conftest import run_cli, write


def test_cli_parse_file(tmp_path: Path, capsys):
    path = write(tmp_path / "block.txt", """
        Summary.

        @see docs
        @tag {1, 2}
    """)
    assert main(["parse", str(path)]) == 0

    out = capsys.readouterr().out
    assert out.splitlines() == [
        "description: 'Summary.'",
        "tags:",
        "  @see: 'docs'",
        "  @tag: {1, 2}",
        "annotations: none",
    ]


def test_cli_parse_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("/** @flag */"))
    assert main(["parse"]) == 0

    out = capsys.readouterr().out
    assert "  @flag: True" in out
    assert "description: ''" in out


def test_cli_read_class(capsys):
    assert main(["read", "sample_annotations:Service"]) == 0

    out = capsys.readouterr().out
    assert "description: 'User service.'" in out
    assert "  sample_annotations.FooAnnotation:" in out
    assert "value='foo'" in out
    assert "ConstructorAnnotation(count=8, label='something')" in out


def test_cli_read_members(capsys):
    assert main(["read", "sample_annotations:Service", "--member", "list_users"]) == 0
    out = capsys.readouterr().out
    assert "path='/users'" in out
    assert "  @cached: '60'" in out

    assert main(["read", "sample_annotations:Service", "--member", "name"]) == 0
    assert "value='bar'" in capsys.readouterr().out


def test_cli_read_function_dotted(capsys):
    assert main(["read", "sample_annotations.create_user"]) == 0
    assert "path='/users/create'" in capsys.readouterr().out


def test_cli_schemas_option(tmp_path: Path, capsys):
    schemas = write(tmp_path / "schemas.yaml", """
        sample_annotations.Point:
          default_attribute: x
          constructor: [x, y]
          attributes:
            x: {type: int}
            y: {type: int, default: 0}
    """)
    block = write(tmp_path / "block.txt", "@sample_annotations.Point(5)\n")

    assert main(["parse", str(block), "--schemas", str(schemas)]) == 0
    assert "Point(x=5, y=0)" in capsys.readouterr().out


@pytest.mark.parametrize("argv, message", [
    (["read", "sample_annotations:Misplaced"], "can not be applied to class"),
    (["read", "no_such_module_xyz:Thing"], "Cannot import module no_such_module_xyz"),
    (["read", "sample_annotations:Missing"], "sample_annotations has no attribute Missing"),
    (["read", "Service"], "Invalid target 'Service'"),
    (["read", "sample_annotations:Service", "--member", "missing"], "Method missing does not exist"),
    (["parse", "missing.txt"], "File not found"),
])
def test_cli_user_errors(argv, message, capsys):
    assert main(argv) == 2
    captured = capsys.readouterr()
    assert message in captured.err
    assert "Traceback" not in captured.err


def test_cli_syntax_error(tmp_path: Path, capsys):
    block = write(tmp_path / "block.txt", "@tag {1, 2\n")
    assert main(["parse", str(block)]) == 2
    assert "Unexpected end of comment" in capsys.readouterr().err


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("docannot ")


def test_cli_module_entry_point(tmp_path: Path):
    cp = run_cli(tmp_path, "read", "sample_annotations:Service", "--member", "list_users")
    assert cp.returncode == 0, cp.stderr
    assert "sample_annotations.Route:" in cp.stdout
