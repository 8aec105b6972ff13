"""
Command line entry point.

    python -m scannability page.html --url https://acme.atlassian.net/wiki/x
    python -m scannability page.html --preset notion --chars-per-line 90 --json

Scores one HTML file and prints a text report (default) or the
AnalysisResult as JSON. Logs go to stderr so the report can be piped.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from scannability import __version__
from scannability.config import settings
from scannability.logging import get_logger, setup_logging
from scannability.html_tree import parse_html
from scannability.preset import Preset
from scannability.presets import PRESET_MAP, detect_preset, get_preset_by_id
from scannability.schemas.analysis import AnalysisResult
from scannability.service import ScannabilityService

logger = get_logger("cli")


def format_report(result: AnalysisResult, preset: Preset) -> str:
    lines = [
        f"Scannability score: {result.score}/100  (preset: {preset.name or preset.id})",
        f"Text blocks: {result.total_text_blocks}   "
        f"Anchors: {result.total_anchors_raw} (weighted {result.weighted_total:.1f})",
    ]

    b = result.breakdown
    lines.append(
        f"  headings {b.headings.count}, emphasis {b.emphasis.count}, "
        f"code {b.code_blocks.count + b.inline_code.count}, "
        f"links {b.standalone_links.count + b.inline_links.count}, "
        f"images {b.images.count}, lists {b.lists.count}"
    )
    for name, category in b.platform.items():
        if category.count:
            lines.append(f"  {name} {category.count}")

    if result.problems:
        lines.append("")
        lines.append("Problems:")
        for problem in result.problems:
            lines.append(f"  - {problem.description}: {problem.count} (-{problem.penalty})")

    if result.findings:
        lines.append("")
        lines.append("Unformatted code:")
        for finding in result.findings:
            lines.append(f"  - [{finding.type}] {finding.description}: {finding.snippet!r}")

    if result.suggestions:
        lines.append("")
        lines.append("Suggestions:")
        for suggestion in result.suggestions:
            lines.append(f"  - {suggestion.name}: {suggestion.description}")

    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scannability",
        description="Score how easily an HTML page can be scanned",
    )
    parser.add_argument("file", help="HTML file to analyze")
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--preset", choices=sorted(PRESET_MAP),
        help=f"Preset id (default: {settings.DEFAULT_PRESET})",
    )
    target.add_argument("--url", help="Pick the preset from the page's URL")
    parser.add_argument(
        "--chars-per-line", type=int, default=None,
        help="Approximate wrapping width used to estimate paragraph height",
    )
    parser.add_argument("--json", action="store_true", help="JSON output format")
    parser.add_argument("--log-level", default=None, help="Log level (default: from environment)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    if args.chars_per_line is not None and args.chars_per_line <= 0:
        parser.error("--chars-per-line must be positive")

    try:
        with open(args.file, "r", encoding="utf-8") as f:
            markup = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Cannot read %s: %s", args.file, e, extra={"error": str(e)})
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1

    if args.url:
        preset = detect_preset(args.url)
    else:
        preset = get_preset_by_id(args.preset or settings.DEFAULT_PRESET)

    document = parse_html(markup, chars_per_line=args.chars_per_line)
    service = ScannabilityService(preset)
    result = service.analyze(document)

    logger.info(
        "Scored %s", args.file,
        extra={"preset_id": preset.id, "score": result.score,
               "text_blocks": result.total_text_blocks},
    )

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(format_report(result, preset))
    return 0
