"""
Module: cli

Purpose:
    Command-line entry point.

    convert: parse a raw/legacy question file, validate, write canonical JSONL
    tags:    list the image ids each question references
    preview: render questions to a standalone HTML page

Key Functions:
    - main(): Console script entry point

Used By:
    - ``assessment-toolkit`` console script
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from assessment_toolkit import __version__
from assessment_toolkit.core.richtext import extract_image_tags
from assessment_toolkit.core.utils import (
    ExportError,
    check_exportable,
    dumps_questions_jsonl,
    save_questions_jsonl,
)
from assessment_toolkit.loading import LoaderError, load_questions_report
from assessment_toolkit.normalize import NormalizationMode, NormalizerConfig
from assessment_toolkit.rendering import (
    ImageStore,
    ImageStoreError,
    RenderOptions,
    render_preview_html,
)

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp"}

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_LOAD_ERROR = 2

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{body}
</body>
</html>
"""


def _load_image_dir(directory: Path) -> ImageStore:
    """Register every image file in ``directory`` under its file stem."""
    if not directory.is_dir():
        raise LoaderError(f"Image directory does not exist: {directory}")
    store = ImageStore()
    for path in sorted(directory.iterdir()):
        if path.suffix.lower() not in IMAGE_SUFFIXES:
            continue
        try:
            store.add(path.stem, path)
        except ImageStoreError as e:
            logger.warning(f"Skipping {path.name}: {e}")
    logger.info(f"Loaded {len(store)} image(s) from {directory}")
    return store


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def cmd_convert(args: argparse.Namespace) -> int:
    mode = NormalizationMode.STRICT if args.strict else NormalizationMode.LENIENT
    result = load_questions_report(args.input, config=NormalizerConfig(mode=mode))
    print(result.summary())
    for failure in result.failures:
        print(f"  discarded #{failure.index}: {failure.reason}", file=sys.stderr)

    if args.output is None:
        errors = check_exportable(result.questions, strict=args.strict)
        if errors:
            for message in errors:
                print(f"  {message}", file=sys.stderr)
            return EXIT_INVALID
        sys.stdout.write(dumps_questions_jsonl(result.questions))
        return EXIT_OK

    try:
        save_questions_jsonl(result.questions, args.output, strict=args.strict)
    except ExportError as e:
        print(str(e), file=sys.stderr)
        for message in e.errors:
            print(f"  {message}", file=sys.stderr)
        return EXIT_INVALID
    print(f"Wrote {len(result.questions)} question(s) to {args.output}")
    return EXIT_OK


def cmd_tags(args: argparse.Namespace) -> int:
    result = load_questions_report(args.input)
    store = _load_image_dir(args.images) if args.images else None

    missing_total = 0
    for question in result.questions:
        tags = sorted(extract_image_tags(question))
        print(f"{question.id}: {', '.join(tags) if tags else '-'}")
        if store is not None:
            missing = sorted(store.missing(question))
            missing_total += len(missing)
            if missing:
                print(f"  missing: {', '.join(missing)}")
    if missing_total:
        return EXIT_INVALID
    return EXIT_OK


def cmd_preview(args: argparse.Namespace) -> int:
    result = load_questions_report(args.input)
    resolver = _load_image_dir(args.images).resolve if args.images else None

    blocks = [
        render_preview_html(question, RenderOptions(
            image_resolver=resolver,
            question_number=number,
            show_marks=not args.hide_marks,
        ))
        for number, question in enumerate(result.questions, start=1)
    ]
    page = _PAGE_TEMPLATE.format(title=args.input.stem, body="\n".join(blocks))
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(page, encoding="utf-8")
    print(f"Rendered {len(blocks)} question(s) to {args.output}")
    return EXIT_OK


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assessment-toolkit",
        description="Normalize, validate and preview assessment question banks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s convert legacy_bank.json -o bank.jsonl
  %(prog)s convert bank.jsonl --strict
  %(prog)s tags bank.jsonl --images figures/
  %(prog)s preview bank.jsonl -o preview.html
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    convert = commands.add_parser("convert", help="Convert a question file to canonical JSONL")
    convert.add_argument("input", type=Path, help="JSON, JSON array or JSONL question file")
    convert.add_argument("-o", "--output", type=Path, help="Output .jsonl (default: stdout)")
    convert.add_argument(
        "--strict",
        action="store_true",
        help="Reject legacy records and apply the JSON Schema checks",
    )
    convert.set_defaults(handler=cmd_convert)

    tags = commands.add_parser("tags", help="List image ids referenced by each question")
    tags.add_argument("input", type=Path, help="Question file")
    tags.add_argument("--images", type=Path, help="Directory of images named <id>.<ext>; report missing ids")
    tags.set_defaults(handler=cmd_tags)

    preview = commands.add_parser("preview", help="Render questions to an HTML page")
    preview.add_argument("input", type=Path, help="Question file")
    preview.add_argument("-o", "--output", type=Path, required=True, help="Output .html")
    preview.add_argument("--images", type=Path, help="Directory of images named <id>.<ext>")
    preview.add_argument("--hide-marks", action="store_true", help="Omit the marks badge")
    preview.set_defaults(handler=cmd_preview)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s | %(name)s | %(message)s",
    )

    try:
        return args.handler(args)
    except LoaderError as e:
        logger.error(str(e))
        return EXIT_LOAD_ERROR


if __name__ == "__main__":
    sys.exit(main())
