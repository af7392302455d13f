from __future__ import annotations

import argparse
import importlib
import inspect
import sys
from pathlib import Path
from typing import Any, List, Optional

from .comment import Comment
from .config import setup_logging
from .errors import AnnotationUserError
from .reader import AnnotationReader
from .targets import Placement
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="docannot",
        description="Reads @annotations from docstrings and documentation comments",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--schemas",
            action="append",
            metavar="FILE",
            help="YAML file with annotation schemas (can be given several times)",
        )

    sp_read = sub.add_parser("read", help="Annotations of an importable class or function")
    sp_read.add_argument("target", metavar="MODULE:QUALNAME", help="e.g. myapp.views:UserView")
    sp_read.add_argument("--member", metavar="NAME", help="method or property of the class")
    add_common(sp_read)

    sp_parse = sub.add_parser("parse", help="Annotations of raw comment text")
    sp_parse.add_argument("file", nargs="?", default="-", metavar="FILE|-", help="text file, - for stdin")
    sp_parse.add_argument(
        "--target",
        default="class",
        choices=["class", "method", "property", "function", "annotation"],
        help="placement the text documents",
    )
    add_common(sp_parse)

    return p


def _import_target(spec: str) -> Any:
    """Imports `module:QualName` (or `module.QualName`)."""
    if ":" in spec:
        module_name, qualname = spec.split(":", 1)
    elif "." in spec:
        module_name, qualname = spec.rsplit(".", 1)
    else:
        raise ValueError(f"Invalid target '{spec}'. Expected 'module:QualName'")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module {module_name}: {e}")
    for part in qualname.split("."):
        if not hasattr(obj, part):
            raise ValueError(f"{module_name} has no attribute {qualname}")
        obj = getattr(obj, part)
    return obj


def _read_target(reader: AnnotationReader, ns: argparse.Namespace) -> Comment:
    obj = _import_target(ns.target)
    if ns.member:
        if not isinstance(obj, type):
            raise ValueError(f"--member requires a class target, got {ns.target}")
        if isinstance(inspect.getattr_static(obj, ns.member, None), property):
            return reader.read_property(obj, ns.member)
        return reader.read_method(obj, ns.member)
    if isinstance(obj, type):
        return reader.read_class(obj)
    if callable(obj):
        return reader.read_function(obj)
    raise ValueError(f"{ns.target} is neither a class nor a function")


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    file_path = Path(path)
    if not file_path.is_file():
        raise ValueError(f"File not found: {file_path}")
    return file_path.read_text(encoding="utf-8")


def _format_instance(obj: Any) -> str:
    fields = ", ".join(f"{k}={v!r}" for k, v in vars(obj).items())
    return f"{type(obj).__name__}({fields})"


def format_comment(comment: Comment) -> str:
    """Plain-text listing of a parse result."""
    lines: List[str] = [f"description: {comment.get_description()!r}"]
    tags = comment.tags
    lines.append("tags:" if tags else "tags: none")
    for name, value in tags.items():
        lines.append(f"  @{name}: {value!r}")
    annotations = comment.get_annotations()
    lines.append("annotations:" if annotations else "annotations: none")
    for type_id, instances in annotations.items():
        lines.append(f"  {type_id}:")
        for obj in instances:
            lines.append(f"    {_format_instance(obj)}")
    return "\n".join(lines) + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    setup_logging()

    try:
        reader = AnnotationReader()
        for path in ns.schemas or ():
            reader.load_schemas(path)

        if ns.cmd == "read":
            comment = _read_target(reader, ns)
            sys.stdout.write(format_comment(comment))
            return 0

        if ns.cmd == "parse":
            comment = reader.parse(_read_text(ns.file), Placement.parse(ns.target))
            sys.stdout.write(format_comment(comment))
            return 0

    except AnnotationUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
