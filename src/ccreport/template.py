"""
Report template provider.

Renders the HTML shell through Jinja2 once and splits it around the point
where the report data script goes. The writer only ever sees the two halves.
"""

from pathlib import Path
from typing import NamedTuple, Optional, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError
from markupsafe import Markup

from ._util import debug
from .errors import TemplateLoadFailure

DEFAULT_TEMPLATE_NAME = "configuration-cache-report.html.j2"
DEFAULT_TITLE = "Configuration cache report"

# Lines delimiting the embedded JSON model; extraction relies on each appearing once.
BEGIN_MARKER = "// begin-report-data"
END_MARKER = "// end-report-data"

# Bound to the template's report_data variable; must survive rendering exactly once.
_INSERTION_POINT = "<!-- ccreport:report-data -->"


class ReportTemplate(NamedTuple):
    """The rendered template, split at the insertion point."""

    head: str
    tail: str

    def load(self) -> "ReportTemplate":
        """An already loaded template is its own provider."""
        return self


class TemplateProvider(Protocol):
    def load(self) -> ReportTemplate: ...


def check_report_template(template: ReportTemplate) -> None:
    """Reject a template whose own text contains a report data marker line."""
    for part in (template.head, template.tail):
        for line in part.splitlines():
            if line.strip() in (BEGIN_MARKER, END_MARKER):
                raise TemplateLoadFailure(
                    f"report template must not contain the line {line.strip()!r}"
                )


def _templates_dir() -> Path:
    return Path(__file__).resolve().parent / "templates"


class HtmlReportTemplate:
    """Loads the packaged template, or a user-supplied one, as a (head, tail) pair."""

    def __init__(self, template_path: Optional[Path] = None, title: str = DEFAULT_TITLE):
        self.template_path = Path(template_path) if template_path is not None else None
        self.title = title

    def _environment(self) -> Environment:
        search_dir = self.template_path.parent if self.template_path else _templates_dir()
        return Environment(
            loader=FileSystemLoader(str(search_dir)),
            autoescape=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def load(self) -> ReportTemplate:
        name = self.template_path.name if self.template_path else DEFAULT_TEMPLATE_NAME
        try:
            template = self._environment().get_template(name)
            html = template.render(title=self.title, report_data=Markup(_INSERTION_POINT))
        except (TemplateError, OSError, UnicodeDecodeError) as exc:
            raise TemplateLoadFailure(f"cannot load report template {name}: {exc}") from exc
        parts = html.split(_INSERTION_POINT)
        if len(parts) != 2:
            raise TemplateLoadFailure(
                f"report template {name} must reference report_data exactly once "
                f"(found {len(parts) - 1})"
            )
        template = ReportTemplate(head=parts[0], tail=parts[1])
        check_report_template(template)
        debug("template", f"loaded {name}: head={len(parts[0])} tail={len(parts[1])} chars")
        return template
