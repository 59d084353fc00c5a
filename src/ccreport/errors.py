"""
Error taxonomy. Every failure is fatal for the report being written; nothing
is retried, since a partially written text stream cannot be repaired in place.
"""


class ReportError(Exception):
    """Base class for all ccreport errors."""


class ProtocolViolation(ReportError):
    """A writer or serializer operation was called outside its lifecycle state."""


class SinkIOFailure(ReportError):
    """The output sink rejected a write, flush or close."""


class TemplateLoadFailure(ReportError):
    """The HTML template could not be loaded or split around its insertion point."""


class SerializationFailure(ReportError):
    """A diagnostic or summary value could not be represented as JSON."""


class ExtractionFailure(ReportError):
    """The JSON model could not be extracted from a report text."""


class ProblemsInputError(ReportError):
    """A problems input file is missing, unreadable or does not match the schema."""
