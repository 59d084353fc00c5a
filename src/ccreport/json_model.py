"""
Streaming JSON model of a report.

The model is one JSON object: the diagnostics array, followed by the summary
fields known only at the end. It is written piecewise as diagnostics arrive,
so no complete collection is ever held in memory.
"""

import json
from typing import Any, Dict, Protocol

from pydantic import ValidationError

from .errors import ProtocolViolation, SerializationFailure
from .schema import (
    DecoratedReportProblem,
    DiagnosticKind,
    ProblemFailure,
    ProblemReportDetails,
)

DEFAULT_DOCUMENTATION_URL = "https://docs.gradle.org/current/userguide/configuration_cache.html"

# The model is embedded in a <script> element: none of these may appear raw.
_SCRIPT_SAFE = str.maketrans({
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
})


class ModelSerializer(Protocol):
    """
    Anything that can stream the report model.

    begin_model() once, write_diagnostic() zero or more times, end_model() once.
    The concatenation of everything written, in call order, is one JSON value.
    """

    def begin_model(self) -> None: ...

    def write_diagnostic(self, kind: DiagnosticKind, problem: DecoratedReportProblem) -> None: ...

    def end_model(self, details: ProblemReportDetails) -> None: ...


class _TextSink(Protocol):
    def write(self, text: str) -> None: ...


def _dumps(value: Any) -> str:
    try:
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationFailure(f"value is not JSON serializable: {exc}") from exc
    return text.translate(_SCRIPT_SAFE)


def _failure_json(failure: ProblemFailure) -> Dict[str, Any]:
    parts = []
    for part in failure.parts:
        parts.append({"internalText": part.text} if part.is_internal else {"text": part.text})
    return {
        "summary": [f.model_dump(exclude_none=True) for f in failure.summary],
        "parts": parts,
    }


class JsonModelWriter:
    """Writes the report model to a text sink as a stream of JSON fragments."""

    def __init__(self, sink: _TextSink, documentation_url: str = DEFAULT_DOCUMENTATION_URL):
        self._sink = sink
        self.documentation_url = documentation_url
        self._began = False
        self._ended = False
        self._count = 0

    def documentation_link(self, section: str) -> str:
        return f"{self.documentation_url}#{section}"

    def begin_model(self) -> None:
        if self._began:
            raise ProtocolViolation("begin_model() called twice")
        self._began = True
        self._sink.write('{"diagnostics":[')

    def write_diagnostic(self, kind: DiagnosticKind, problem: DecoratedReportProblem) -> None:
        if not self._began or self._ended:
            raise ProtocolViolation("write_diagnostic() is only valid between begin_model() and end_model()")
        fragment = _dumps(self._diagnostic(kind, problem))
        self._sink.write(("," if self._count else "") + "\n" + fragment)
        self._count += 1

    def end_model(self, details: ProblemReportDetails) -> None:
        if not self._began or self._ended:
            raise ProtocolViolation("end_model() is only valid once, after begin_model()")
        # Leading "{" of the summary object is dropped; its fields close the model.
        fields = _dumps(self._summary(details))[1:]
        self._ended = True
        self._sink.write("\n]," + fields)

    def _diagnostic(self, kind: DiagnosticKind, problem: DecoratedReportProblem) -> Dict[str, Any]:
        try:
            kind = DiagnosticKind(kind)
            if not isinstance(problem, DecoratedReportProblem):
                problem = DecoratedReportProblem.model_validate(problem)
        except (ValueError, ValidationError) as exc:
            raise SerializationFailure(f"cannot serialize {kind!r} diagnostic: {exc}") from exc
        out: Dict[str, Any] = {
            "trace": [t.model_dump(mode="json", by_alias=True, exclude_none=True) for t in problem.trace],
            kind.value: [f.model_dump(exclude_none=True) for f in problem.message],
        }
        if problem.documentation_section:
            out["documentationLink"] = self.documentation_link(problem.documentation_section)
        if problem.error is not None:
            out["error"] = _failure_json(problem.error)
        return out

    def _summary(self, details: ProblemReportDetails) -> Dict[str, Any]:
        if not isinstance(details, ProblemReportDetails):
            try:
                details = ProblemReportDetails.model_validate(details)
            except ValidationError as exc:
                raise SerializationFailure(f"cannot serialize report details: {exc}") from exc
        out: Dict[str, Any] = {"totalProblemCount": details.total_problem_count}
        if details.build_display_name is not None:
            out["buildName"] = details.build_display_name
        if details.requested_tasks is not None:
            out["requestedTasks"] = details.requested_tasks
        out["cacheAction"] = details.cache_action
        out["cacheActionDescription"] = [
            f.model_dump(exclude_none=True) for f in details.cache_action_description
        ]
        out["documentationLink"] = self.documentation_url
        return out
