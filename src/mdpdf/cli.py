"""Command-line entry point: one-shot conversion or live preview."""

import argparse
import sys
from pathlib import Path

from . import config


def _convert(args: argparse.Namespace) -> int:
    from .convert import ConversionError, convert_markdown_to_pdf

    input_path = Path(args.input).resolve()
    output_path = Path(args.output).resolve()

    try:
        convert_markdown_to_pdf(input_path, output_path)
    except ConversionError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(f"PDF written to {output_path}")
    return 0


def _preview(args: argparse.Namespace) -> int:
    settings = config.load_preview_settings(
        args.input, args.output, host=args.host, port=args.port
    )
    if not settings.input_path.is_file():
        print(f"Error: Input markdown file not found: {settings.input_path}", file=sys.stderr)
        return 1

    import uvicorn

    from .server import create_app

    print(f"Live preview: http://{settings.host}:{settings.port}")
    print(f"Watching: {settings.input_path}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdpdf", description="Convert markdown to PDF"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert a markdown file once")
    convert.add_argument("input", help="Markdown input file")
    convert.add_argument("output", help="PDF output file")
    convert.set_defaults(handler=_convert)

    preview = subparsers.add_parser(
        "preview", help="Serve a live-reloading preview of a markdown file"
    )
    preview.add_argument(
        "input", nargs="?", default=None, help=f"Markdown input file (default: {config.PREVIEW_INPUT})"
    )
    preview.add_argument(
        "output", nargs="?", default=None, help=f"PDF output file (default: {config.PREVIEW_OUTPUT})"
    )
    preview.add_argument("--host", default=None, help=f"Bind host (default: {config.PREVIEW_HOST})")
    preview.add_argument(
        "--port", type=int, default=None, help=f"Bind port (default: {config.PREVIEW_PORT})"
    )
    preview.set_defaults(handler=_preview)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
