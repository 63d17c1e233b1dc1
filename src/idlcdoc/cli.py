"""Command-line entry point for idlc-doc.

Usage:
    idlc-doc render build/html               # post-process a Doxygen site
    idlc-doc render build/html --dry-run     # report without modifying
    idlc-doc css --style monokai -o highlight.css
    idlc-doc highlight idl sample.idl
    idlc-doc languages
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console

from idlcdoc.config import get_settings
from idlcdoc.engine import PygmentsEngine
from idlcdoc.grammars import register_grammars

console = Console()


def _engine(style: str) -> PygmentsEngine:
    engine = PygmentsEngine(style=style)
    register_grammars(engine)
    return engine


def _cmd_render(args: argparse.Namespace) -> int:
    from idlcdoc.pipeline import render_site  # noqa: PLC0415

    missing = [path for path in args.paths if not path.exists()]
    if missing:
        for path in missing:
            console.print(f"[red]Error:[/] {path} does not exist")
        return 1

    config = get_settings().highlight
    if args.no_copy_buttons:
        config = config.model_copy(update={"copy_buttons": False})

    report = render_site(
        args.paths,
        engine=_engine(config.style),
        config=config,
        dry_run=args.dry_run,
    )

    mode = "[yellow]DRY RUN[/] " if args.dry_run else ""
    console.print(f"{mode}Render complete:")
    console.print(f"  Files scanned:        {report.files_scanned}")
    console.print(f"  Files changed:        {report.files_changed}")
    console.print(f"  Fragments classified: {report.fragments_classified}")
    console.print(f"  Fragments skipped:    {report.fragments_skipped}")
    console.print(f"  Blocks highlighted:   {report.blocks_highlighted}")
    console.print(f"  Copy buttons added:   {report.copy_buttons}")
    return 0


def _cmd_css(args: argparse.Namespace) -> int:
    settings = get_settings().highlight
    engine = PygmentsEngine(style=args.style or settings.style)
    css = engine.stylesheet(args.selector or settings.css_selector)
    if args.output is None:
        sys.stdout.write(css + "\n")
    else:
        args.output.write_text(css + "\n", encoding="utf-8")
        console.print(f"Written {args.output}")
    return 0


def _cmd_highlight(args: argparse.Namespace) -> int:
    engine = _engine(get_settings().highlight.style)
    if engine.get_language(args.language) is None:
        console.print(f"[red]Error:[/] unknown language {args.language!r}")
        return 1
    if args.file is None:
        code = sys.stdin.read()
    elif args.file.is_file():
        code = args.file.read_text(encoding="utf-8")
    else:
        console.print(f"[red]Error:[/] {args.file} does not exist")
        return 1
    sys.stdout.write(engine.highlight(code, args.language) + "\n")
    return 0


def _cmd_languages(args: argparse.Namespace) -> int:
    engine = _engine(get_settings().highlight.style)
    for name, grammar in engine.grammars.items():
        console.print(f"{name:<12} {grammar.display_name}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idlc-doc",
        description="Highlight code fragments in generated IDL compiler docs.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render HTML pages in place.")
    render.add_argument("paths", nargs="+", type=Path, help="HTML files or dirs.")
    render.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without modifying files.",
    )
    render.add_argument(
        "--no-copy-buttons",
        action="store_true",
        help="Don't add copy-to-clipboard buttons.",
    )
    render.set_defaults(handler=_cmd_render)

    css = subparsers.add_parser("css", help="Print the highlight stylesheet.")
    css.add_argument("--style", help="Pygments style name.")
    css.add_argument("--selector", help="CSS selector to scope the rules to.")
    css.add_argument("-o", "--output", type=Path, help="Write to file.")
    css.set_defaults(handler=_cmd_css)

    highlight = subparsers.add_parser("highlight", help="Highlight a file to HTML.")
    highlight.add_argument("language", help="Language id, e.g. idl.")
    highlight.add_argument("file", nargs="?", type=Path, help="Source (or stdin).")
    highlight.set_defaults(handler=_cmd_highlight)

    languages = subparsers.add_parser("languages", help="List language ids.")
    languages.set_defaults(handler=_cmd_languages)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    from idlcdoc import _setup_logging  # noqa: PLC0415

    args = _build_parser().parse_args(argv)

    app = get_settings().app
    _setup_logging(app.log_dir, to_file=app.log_to_file)

    sys.exit(args.handler(args))
