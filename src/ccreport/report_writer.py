"""
HTML report writer.

The report is laid out so that the pure JSON model can be extracted by looking
for the `// begin-report-data` and `// end-report-data` marker lines, while the
model stays callable as `configurationCacheProblems()` from the page's own
script. The writer owns the output sink and drives the model serializer in
lock-step with its own writes.
"""

from contextlib import closing, contextmanager
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, Optional, TextIO

from ._util import debug
from .errors import ProtocolViolation, SinkIOFailure
from .json_model import DEFAULT_DOCUMENTATION_URL, JsonModelWriter, ModelSerializer
from .schema import DecoratedReportProblem, DiagnosticKind, ProblemReportDetails
from .template import (
    BEGIN_MARKER,
    END_MARKER,
    TemplateProvider,
    check_report_template,
)

_REPORT_DATA_PROLOGUE = (
    '<script type="text/javascript">\n'
    "function configurationCacheProblems() { return (\n"
    f"{BEGIN_MARKER}\n"
)
_REPORT_DATA_EPILOGUE = (
    "\n"
    f"{END_MARKER}\n"
    ");}\n"
    "</script>\n"
)


# ---------------------------------------------------------------------------
# Output sink
# ---------------------------------------------------------------------------

class ReportSink:
    """Append-only text destination shared by the writer and its serializer."""

    def __init__(self, stream: TextIO, name: str = "<stream>"):
        self._stream = stream
        self.name = name
        self.closed = False

    def write(self, text: str) -> None:
        if self.closed:
            raise ProtocolViolation(f"write to released report sink {self.name}")
        try:
            self._stream.write(text)
        except OSError as exc:
            raise SinkIOFailure(f"cannot write to {self.name}: {exc}") from exc

    def close(self) -> None:
        """Flush and close the stream. Only the first call has any effect."""
        if self.closed:
            return
        self.closed = True
        try:
            try:
                self._stream.flush()
            finally:
                self._stream.close()
        except OSError as exc:
            raise SinkIOFailure(f"cannot close {self.name}: {exc}") from exc


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class ReportState(Enum):
    NOT_STARTED = "not started"
    OPEN = "open"
    CLOSED = "closed"
    FAILED = "failed"
    RELEASED = "released"


class HtmlReportWriter:
    """
    Writes one configuration cache HTML report.

    Call order: begin_report(), write_diagnostic() any number of times,
    end_report(details), close(). Calls out of order raise ProtocolViolation
    without touching the sink. Once any of the three fails, the writer is
    FAILED and only close() is accepted.

    close() is accepted in every state. Closing before end_report() leaves a
    truncated document with no end marker; the caller must discard it.
    Calling close() again is a no-op.
    """

    def __init__(self, sink: ReportSink, template: TemplateProvider, serializer: ModelSerializer):
        self._template = template.load()
        check_report_template(self._template)
        self._sink = sink
        self._serializer = serializer
        self._state = ReportState.NOT_STARTED

    @property
    def state(self) -> ReportState:
        return self._state

    def _require(self, expected: ReportState, operation: str) -> None:
        if self._state is not expected:
            raise ProtocolViolation(
                f"{operation}() is only valid when the report is {expected.value}; "
                f"it is {self._state.value}"
            )

    @contextmanager
    def _transition(self, expected: ReportState, operation: str, target: ReportState) -> Iterator[None]:
        self._require(expected, operation)
        try:
            yield
        except BaseException:
            self._state = ReportState.FAILED
            debug("report", f"{operation}() failed on {self._sink.name}; report is unusable")
            raise
        self._state = target

    def begin_report(self) -> None:
        with self._transition(ReportState.NOT_STARTED, "begin_report", ReportState.OPEN):
            head = self._template.head
            self._sink.write(head)
            if head and not head.endswith("\n"):
                self._sink.write("\n")
            self._sink.write(_REPORT_DATA_PROLOGUE)
            self._serializer.begin_model()
        debug("report", f"begun {self._sink.name}")

    def write_diagnostic(self, kind: DiagnosticKind, problem: DecoratedReportProblem) -> None:
        with self._transition(ReportState.OPEN, "write_diagnostic", ReportState.OPEN):
            self._serializer.write_diagnostic(kind, problem)

    def end_report(self, details: ProblemReportDetails) -> None:
        with self._transition(ReportState.OPEN, "end_report", ReportState.CLOSED):
            self._serializer.end_model(details)
            self._sink.write(_REPORT_DATA_EPILOGUE)
            self._sink.write(self._template.tail)
        debug("report", f"ended {self._sink.name}")

    def close(self) -> None:
        if self._state is ReportState.RELEASED:
            return
        if self._state is not ReportState.CLOSED:
            debug("report", f"{self._sink.name} released while {self._state.value}; output is truncated")
        self._state = ReportState.RELEASED
        self._sink.close()

    def __enter__(self) -> "HtmlReportWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Scoped construction
# ---------------------------------------------------------------------------

@contextmanager
def open_report(
    path: Path,
    template_provider: TemplateProvider,
    documentation_url: str = DEFAULT_DOCUMENTATION_URL,
    serializer_factory: Optional[Callable[[ReportSink], ModelSerializer]] = None,
) -> Iterator[HtmlReportWriter]:
    """
    Open path for writing and yield a report writer bound to it.

    The template is loaded before the file is created, so a broken template
    leaves nothing behind. The file is closed on every exit path.
    """
    template = template_provider.load()
    check_report_template(template)
    path = Path(path)
    try:
        stream = path.open("w", encoding="utf-8", newline="\n")
    except OSError as exc:
        raise SinkIOFailure(f"cannot open {path}: {exc}") from exc
    sink = ReportSink(stream, name=str(path))
    with closing(sink):
        if serializer_factory is None:
            serializer: ModelSerializer = JsonModelWriter(sink, documentation_url=documentation_url)
        else:
            serializer = serializer_factory(sink)
        with HtmlReportWriter(sink, template, serializer) as writer:
            yield writer
