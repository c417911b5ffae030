"""
Module: cli

Purpose:
    `qml-import` command: converts one QML document into question-bank
    records (JSONL) and prints an import summary.

Exit codes:
    0 - Document imported (individual questions may still have failed)
    1 - Document could not be read
    2 - Bad arguments
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from qml_toolkit import __version__
from qml_toolkit.core.errors import DocumentError
from qml_toolkit.core.utils.serialization import serialize_question
from qml_toolkit.importer.config import ImportConfig, TemplateVariables
from qml_toolkit.importer.messages import MessageCatalog
from qml_toolkit.importer.pipeline import import_questions
from qml_toolkit.importer.sink import JsonlQuestionBank, MemoryQuestionBank

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DOCUMENT_ERROR = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qml-import",
        description="Import Questionmark QML questions as question-bank records",
    )
    parser.add_argument("input", type=Path, help="QML document to import")
    parser.add_argument(
        "-o", "--output", type=Path,
        help="Append records to this JSONL file (default: write records to stdout)",
    )
    parser.add_argument("--variables", type=Path, help="JSON object of template variables")
    parser.add_argument("--lang", default="en", help="Message language (default: en)")
    parser.add_argument("--workers", type=int, default=1, help="Questions converted in parallel")
    parser.add_argument("--report", type=Path, help="Write a JSON diagnostics report here")
    parser.add_argument(
        "--strict", action="store_true",
        help="Validate every record against the full JSON schema",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.input.is_file():
        parser.error(f"input file not found: {args.input}")

    try:
        variables = TemplateVariables.from_json(args.variables) if args.variables else TemplateVariables()
        config = ImportConfig(
            language=args.lang,
            variables=variables,
            workers=args.workers,
            strict_validation=args.strict,
        )
    except (OSError, ValueError) as exc:
        parser.error(str(exc))

    sink = JsonlQuestionBank(args.output, strict=config.strict_validation) if args.output else MemoryQuestionBank()
    try:
        result = import_questions(args.input, config, sink=sink)
    except DocumentError as exc:
        logger.error("%s", exc)
        return EXIT_DOCUMENT_ERROR

    if isinstance(sink, MemoryQuestionBank):
        for question in sink:
            sys.stdout.write(json.dumps(serialize_question(question), ensure_ascii=False) + "\n")

    if args.report:
        result.diagnostics.write_report(args.report)

    summary_stream = sys.stderr if args.output is None else sys.stdout
    print(result.summary(MessageCatalog(config.language)), file=summary_stream)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
