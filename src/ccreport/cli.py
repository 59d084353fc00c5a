"""
CLI argument parsing. Writes a report from a problems file, or extracts the model of an existing report.
"""

import argparse
from pathlib import Path
from typing import Optional

from .json_model import DEFAULT_DOCUMENTATION_URL
from .template import DEFAULT_TITLE


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ccreport",
        description="Produce a configuration cache problems HTML report with an embedded JSON model.",
    )
    parser.add_argument(
        "problems",
        type=Path,
        nargs="?",
        metavar="PROBLEMS",
        help="JSON file with the report details and the diagnostics to include",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output",
        type=Path,
        default=Path("./configuration-cache-report.html"),
        help="Report file to write (default: ./configuration-cache-report.html)",
    )

    # Template
    parser.add_argument(
        "--template",
        type=Path,
        metavar="FILE",
        help="Jinja2 HTML template to use instead of the packaged one. "
             "It must reference {{ report_data }} exactly once.",
    )
    parser.add_argument(
        "--title",
        type=str,
        default=DEFAULT_TITLE,
        help=f"Report title (default: {DEFAULT_TITLE!r})",
    )
    parser.add_argument(
        "--documentation-url",
        type=str,
        metavar="URL",
        default=DEFAULT_DOCUMENTATION_URL,
        help="Base URL that diagnostic documentation sections are appended to",
    )

    # Extraction
    parser.add_argument(
        "--extract",
        type=Path,
        metavar="REPORT",
        help="Print the JSON model embedded in REPORT and exit",
    )

    args = parser.parse_args(argv)
    if args.extract is None and args.problems is None:
        parser.error("a PROBLEMS file is required unless --extract is given")
    return args
