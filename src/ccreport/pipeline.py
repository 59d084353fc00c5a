"""
Pipeline orchestrator: load a problems file, stream it into an HTML report.
A report that fails part-way is deleted; a half-written report is never left behind.
"""

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ._util import debug
from .errors import ExtractionFailure, ProblemsInputError
from .extract import load_report_model
from .json_model import DEFAULT_DOCUMENTATION_URL
from .report_writer import open_report
from .schema import ProblemsInput
from .template import HtmlReportTemplate, TemplateProvider, check_report_template


def load_problems(path: Path) -> ProblemsInput:
    """Load and validate a problems input file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ProblemsInputError(f"cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ProblemsInputError(f"{path} is not valid JSON: {exc}") from exc
    try:
        return ProblemsInput.model_validate(data)
    except ValidationError as exc:
        raise ProblemsInputError(f"{path} does not match the problems schema:\n{exc}") from exc


def write_report(
    problems: ProblemsInput,
    output_path: Path,
    template: Optional[TemplateProvider] = None,
    documentation_url: str = DEFAULT_DOCUMENTATION_URL,
) -> Path:
    """
    Write the full report for problems to output_path.

    Returns output_path. On any failure the partial file is removed and the
    error propagates.
    """
    output_path = Path(output_path)
    if template is None:
        template = HtmlReportTemplate()
    loaded = template.load()
    check_report_template(loaded)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open_report(output_path, loaded, documentation_url=documentation_url) as writer:
            writer.begin_report()
            for entry in problems.diagnostics:
                writer.write_diagnostic(entry.kind, entry.problem)
            writer.end_report(problems.details)
    except BaseException:
        if output_path.is_file():
            debug("pipeline", f"discarding partial report {output_path}")
            output_path.unlink()
        raise
    debug("pipeline", f"wrote {len(problems.diagnostics)} diagnostics to {output_path}")
    return output_path


def extract_model(report_path: Path) -> Any:
    """Return the JSON model embedded in an existing report file."""
    try:
        text = Path(report_path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionFailure(f"cannot read {report_path}: {exc}") from exc
    return load_report_model(text)
