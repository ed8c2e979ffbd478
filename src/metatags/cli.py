"""Command-line interface for rendering meta tags from JSON."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, NamedTuple, Optional

from pydantic import ValidationError

from .collection import MetaTagsCollection
from .config import ENV_PREFIX, Configuration, get_config
from .loader import MetaTagsInputError, parse_meta_tags
from .renderer import Renderer
from .resources import load_cheatsheet

logger = logging.getLogger(__name__)

SUBCOMMANDS_HINT = "Use one of: render, title, cheatsheet."


@dataclass
class CliError(Exception):
    code: str
    message: str
    hint: Optional[str] = None
    exit_code: int = 1
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    retryable: bool = False

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"ok": False}
        payload.update((key, value) for key, value in asdict(self).items() if key != "exit_code")
        return payload


def _usage_error(message: str) -> CliError:
    return CliError("E_ARGS", message, hint=SUBCOMMANDS_HINT, exit_code=2)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise _usage_error(message)


class InputSource(NamedTuple):
    text: str
    name: str
    path: Optional[Path] = None

    @property
    def file(self) -> Optional[str]:
        return str(self.path) if self.path else None


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", nargs="?", help="Input .json file")
    parser.add_argument("--text", help="Raw JSON source")
    parser.add_argument("--defaults", help="JSON file merged under the input")


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="metatags",
        description="Render HTML head meta tags from a JSON description.",
    )
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")

    subparsers = parser.add_subparsers(dest="command")

    render_parser = subparsers.add_parser("render", help="Render meta tags to HTML")
    _add_input_arguments(render_parser)
    render_parser.add_argument("--stdout", action="store_true", help="Write HTML to stdout")
    render_parser.add_argument("-o", "--output", help="Output .html path")
    render_parser.add_argument(
        "--open-tags",
        action="store_true",
        help="Emit <meta ...> instead of <meta ... />",
    )

    title_parser = subparsers.add_parser("title", help="Print the full page title")
    _add_input_arguments(title_parser)

    subparsers.add_parser("cheatsheet", help="Print the input format reference")

    return parser


def _read_file(path: Path) -> InputSource:
    if not path.exists():
        raise CliError("E_IO_READ", f"input file not found: {path}", exit_code=2, file=str(path))
    try:
        return InputSource(path.read_text(encoding="utf-8"), str(path), path)
    except OSError as exc:
        raise CliError(
            "E_IO_READ",
            f"could not read {path}",
            hint=str(exc),
            exit_code=2,
            file=str(path),
            retryable=True,
        ) from exc


def _read_stdin() -> InputSource:
    if sys.stdin.isatty():
        raise CliError(
            "E_ARGS",
            "no input provided",
            hint="Pass FILE or --text, or pipe a JSON object into stdin.",
            exit_code=2,
        )
    data = sys.stdin.read()
    if not data.strip():
        raise CliError("E_ARGS", "stdin was empty", hint="Pipe a JSON object into stdin.", exit_code=2)
    return InputSource(data, "<stdin>")


def _read_input(path: Optional[str], text: Optional[str]) -> InputSource:
    if path and text is not None:
        raise CliError("E_ARGS", "--text cannot be combined with file input", hint="Use either FILE or --text.", exit_code=2)
    if text is not None:
        return InputSource(text, "<text>")
    if path:
        return _read_file(Path(path))
    return _read_stdin()


def _parse(source: InputSource) -> Dict[str, Any]:
    try:
        return parse_meta_tags(source.text)
    except json.JSONDecodeError as exc:
        raise CliError(
            "E_PARSE_JSON",
            f"failed to parse JSON: {exc.msg}",
            hint="Input must be a JSON object; references are written as {\"$ref\": \"title\"}.",
            exit_code=2,
            file=source.file,
            line=exc.lineno,
            column=exc.colno,
        ) from exc


def _collection_from_args(args: argparse.Namespace, config: Configuration) -> tuple[MetaTagsCollection, InputSource]:
    source = _read_input(args.input, args.text)
    meta_tags = MetaTagsCollection(config=config)
    if args.defaults:
        meta_tags.update(_parse(_read_file(Path(args.defaults))))
    meta_tags.update(_parse(source))
    logger.debug("Loaded %d meta tag keys from %s", len(meta_tags), source.name)
    return meta_tags, source


def _write_html(path: Path, html: str) -> None:
    try:
        path.write_text(html + "\n", encoding="utf-8")
    except OSError as exc:
        raise CliError(
            "E_IO_WRITE",
            f"could not write {path}",
            hint=str(exc),
            exit_code=4,
            file=str(path),
            retryable=True,
        ) from exc


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for problem in exc.errors():
        field = ".".join(str(part) for part in problem["loc"])
        problems.append(f"{ENV_PREFIX}{field.upper()}: {problem['msg']}")
    return "invalid configuration: " + "; ".join(problems)


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    if isinstance(exc, ValidationError):
        return CliError(
            "E_CONFIG",
            _describe_validation_error(exc),
            hint=f"Fix or unset the {ENV_PREFIX}* environment variables.",
            exit_code=3,
        )
    if isinstance(exc, MetaTagsInputError):
        return CliError(
            "E_INPUT",
            str(exc),
            hint="Wrap tags in a JSON object, e.g. {\"title\": \"Home\"}.",
            exit_code=3,
        )
    if isinstance(exc, (TypeError, ValueError)):
        return CliError(
            "E_INPUT",
            str(exc),
            hint="Check value types: titles, descriptions and keywords must be strings.",
            exit_code=3,
        )
    return CliError(
        "E_INTERNAL",
        str(exc) or exc.__class__.__name__,
        hint="Re-run with --debug to see traceback.",
    )


def _emit_error(err: CliError, *, error_format: str) -> None:
    if error_format == "json":
        sys.stderr.write(json.dumps(err.to_payload()) + "\n")
        return
    sys.stderr.write(f"error[{err.code}]: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def _handle_render(args: argparse.Namespace) -> int:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )

    config = get_config()
    if args.open_tags:
        config = config.with_overrides(open_meta_tags=True)
    meta_tags, source = _collection_from_args(args, config)
    html = str(Renderer(meta_tags, config=config).render())

    if args.output:
        target: Optional[Path] = Path(args.output)
    elif source.path is not None and not args.stdout:
        target = source.path.with_suffix(".html")
    else:
        target = None

    if target is None:
        sys.stdout.write(html if html.endswith("\n") else html + "\n")
        return 0
    _write_html(target, html)
    print(f"Wrote {target}")
    return 0


def _handle_title(args: argparse.Namespace) -> int:
    meta_tags, _source = _collection_from_args(args, get_config())
    print(meta_tags.extract_full_title())
    return 0


def _handle_cheatsheet(args: argparse.Namespace) -> int:
    print(load_cheatsheet())
    return 0


HANDLERS: Dict[str, Callable[[argparse.Namespace], int]] = {
    "render": _handle_render,
    "title": _handle_title,
    "cheatsheet": _handle_cheatsheet,
}


def _requested_error_format(argv: list[str]) -> str:
    # Used for errors raised before argparse has produced a namespace.
    if "--error-format=json" in argv:
        return "json"
    if "--error-format" in argv:
        idx = argv.index("--error-format")
        if idx + 1 < len(argv) and argv[idx + 1] == "json":
            return "json"
    return "text"


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    error_format = _requested_error_format(raw_argv)
    debug_enabled = "--debug" in raw_argv or os.getenv("METATAGS_DEBUG") == "1"
    if debug_enabled:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        args = _build_parser().parse_args(raw_argv)
        handler = HANDLERS.get(args.command)
        if handler is None:
            raise _usage_error("missing subcommand")
        return handler(args)
    except Exception as exc:  # pragma: no cover - exercised in acceptance tests
        err = _error_from_exception(exc)
        _emit_error(err, error_format=error_format)
        if debug_enabled and err.code == "E_INTERNAL":
            traceback.print_exc(file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
