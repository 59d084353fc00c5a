"""
Read the JSON model back out of a finished report.

Only the two marker lines are looked for; the surrounding HTML and
JavaScript are never parsed.
"""

import json
from typing import Any

from .errors import ExtractionFailure
from .template import BEGIN_MARKER, END_MARKER


def extract_report_data(text: str) -> str:
    """Return the text strictly between the begin and end marker lines."""
    lines = text.splitlines(keepends=True)
    begin = end = None
    for index, line in enumerate(lines):
        stripped = line.rstrip("\r\n")
        if begin is None and stripped == BEGIN_MARKER:
            begin = index
        elif begin is not None and stripped == END_MARKER:
            end = index
            break
    if begin is None:
        raise ExtractionFailure(f"no '{BEGIN_MARKER}' line found")
    if end is None:
        raise ExtractionFailure(f"no '{END_MARKER}' line after '{BEGIN_MARKER}'")
    return "".join(lines[begin + 1:end]).strip("\r\n")


def load_report_model(text: str) -> Any:
    """Extract and parse the JSON model embedded in a report."""
    data = extract_report_data(text)
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise ExtractionFailure(f"embedded report data is not valid JSON: {exc}") from exc
