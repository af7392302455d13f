import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

import sample_annotations
from docannot import AnnotationReader

TESTS_DIR = Path(__file__).resolve().parent
REPO_ROOT = TESTS_DIR.parent


def write(p: Path, text: str) -> Path:
    """Writes dedented text, creating parent directories."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return p


def run_cli(cwd: Path, *args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(REPO_ROOT), str(TESTS_DIR), env.get("PYTHONPATH", "")) if p
    )
    return subprocess.run(
        [sys.executable, "-m", "docannot", *args],
        cwd=cwd, env=env, capture_output=True, text=True, encoding="utf-8"
    )


@pytest.fixture
def reader() -> AnnotationReader:
    """Fresh reader: every test starts with an empty schema cache."""
    return AnnotationReader()


@pytest.fixture
def scope() -> dict:
    """Name resolution scope of the sample annotations module."""
    return vars(sample_annotations)


@pytest.fixture
def foo_reader(reader: AnnotationReader) -> AnnotationReader:
    """Reader with `Foo(name: string required, n: int)` registered explicitly."""
    reader.register_annotation(sample_annotations.Foo, {
        "default_attribute": "name",
        "targets": "class",
        "attributes": {
            "name": {"type": "string", "required": True},
            "n": {"type": "int"},
        },
    })
    return reader
