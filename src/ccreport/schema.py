"""
Report data schema.

Strongly typed contract between whatever collects configuration cache problems
and the report writer. The writer passes these values through verbatim; only
the JSON model serializer looks inside them.

Wire names are camelCase (aliases); Python attributes are snake_case.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class DiagnosticKind(str, Enum):
    """Category of a diagnostic. The value is the JSON key holding its message."""

    PROBLEM = "problem"
    INCOMPATIBLE_TASK = "incompatibleTask"
    INPUT = "input"


# --- Structured messages ---


class MessageFragment(BaseModel):
    """Either plain text or a reference to a named thing (type, property, task)."""

    text: Optional[str] = None
    name: Optional[str] = None

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="after")
    def check_text_or_name(self) -> "MessageFragment":
        if (self.text is None) == (self.name is None):
            raise ValueError("a message fragment has exactly one of text or name")
        return self


# --- Property trace ---


class TraceKind(str, Enum):
    TASK = "Task"
    BEAN = "Bean"
    FIELD = "Field"
    INPUT_PROPERTY = "InputProperty"
    OUTPUT_PROPERTY = "OutputProperty"
    SYSTEM_PROPERTY = "SystemProperty"
    BUILD_LOGIC = "BuildLogic"
    BUILD_LOGIC_CLASS = "BuildLogicClass"
    PROJECT = "Project"
    UNKNOWN = "Unknown"


class TraceElement(BaseModel):
    """One step of the trace leading from the build down to the problem."""

    kind: TraceKind
    name: Optional[str] = None
    path: Optional[str] = None
    type: Optional[str] = None
    declaring_type: Optional[str] = Field(default=None, alias="declaringType")
    location: Optional[str] = None  # build logic display name, e.g. "build file 'build.gradle'"

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}


# --- Failure decoration ---


class StackTracePart(BaseModel):
    """A run of stack frames, either user code or internal frames."""

    is_internal: bool = Field(default=False, alias="isInternal")
    text: str

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}


class ProblemFailure(BaseModel):
    """Exception attached to a problem, already summarized and split into parts."""

    summary: List[MessageFragment] = Field(default_factory=list)
    parts: List[StackTracePart] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "forbid"}


# --- Diagnostics ---


class DecoratedReportProblem(BaseModel):
    """A single problem, enriched with its trace and human-readable message."""

    trace: List[TraceElement] = Field(default_factory=list)
    message: List[MessageFragment] = Field(default_factory=list)
    documentation_section: Optional[str] = Field(default=None, alias="documentationSection")
    error: Optional[ProblemFailure] = None

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}


class ProblemReportDetails(BaseModel):
    """Summary known only once all problems have been reported."""

    build_display_name: Optional[str] = Field(default=None, alias="buildDisplayName")
    cache_action: str = Field(default="", alias="cacheAction")
    cache_action_description: List[MessageFragment] = Field(
        default_factory=list, alias="cacheActionDescription"
    )
    requested_tasks: Optional[str] = Field(default=None, alias="requestedTasks")
    total_problem_count: int = Field(default=0, ge=0, alias="totalProblemCount")

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}


# --- Problems input file ---


class DiagnosticEntry(BaseModel):
    kind: DiagnosticKind
    problem: DecoratedReportProblem

    model_config = {"extra": "forbid"}


class ProblemsInput(BaseModel):
    """
    Content of a problems file handed to the CLI.
    Diagnostics are written to the report in list order.
    """

    details: ProblemReportDetails = Field(default_factory=ProblemReportDetails)
    diagnostics: List[DiagnosticEntry] = Field(default_factory=list)

    model_config = {"extra": "forbid"}
