"""
CLI entry point. Parses args and delegates to pipeline.
"""

import json
import sys
from typing import Optional

from .cli import parse_args
from .errors import ReportError
from .pipeline import extract_model, load_problems, write_report
from .template import HtmlReportTemplate


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)

    try:
        if args.extract is not None:
            model = extract_model(args.extract)
            print(json.dumps(model, indent=2))
            return 0

        problems = load_problems(args.problems)
        template = HtmlReportTemplate(template_path=args.template, title=args.title)
        path = write_report(
            problems,
            args.output,
            template=template,
            documentation_url=args.documentation_url,
        )
        print(f"Report written to {path} ({len(problems.diagnostics)} diagnostics)")
        return 0
    except ReportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
