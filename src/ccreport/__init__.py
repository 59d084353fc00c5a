"""ccreport: configuration cache problems HTML report with an embedded JSON model."""

__version__ = "0.1.0"
