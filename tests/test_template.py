"""Tests for the report template provider."""

import pytest

from ccreport.errors import TemplateLoadFailure
from ccreport.template import DEFAULT_TITLE, HtmlReportTemplate, ReportTemplate


def _write(tmp_path, text, name="custom.html.j2"):
    path = tmp_path / name
    path.write_text(text)
    return path


# ---------------------------------------------------------------------------
# Packaged template
# ---------------------------------------------------------------------------

def test_packaged_template_splits_around_report_data():
    template = HtmlReportTemplate().load()
    assert isinstance(template, ReportTemplate)
    assert template.head.startswith("<!DOCTYPE html>")
    assert f"<title>{DEFAULT_TITLE}</title>" in template.head
    assert "configurationCacheProblems()" not in template.head
    assert "configurationCacheProblems()" in template.tail
    assert template.tail.rstrip().endswith("</html>")


def test_packaged_template_escapes_title():
    template = HtmlReportTemplate(title="<b>ci & co</b>").load()
    assert "&lt;b&gt;ci &amp; co&lt;/b&gt;" in template.head
    assert "<b>ci" not in template.head


def test_loaded_template_is_its_own_provider():
    template = ReportTemplate("<html>", "</html>")
    assert template.load() is template


# ---------------------------------------------------------------------------
# Custom templates
# ---------------------------------------------------------------------------

def test_custom_template(tmp_path):
    path = _write(tmp_path, "<html><head><title>{{ title }}</title></head><body>{{ report_data }}</body></html>")
    template = HtmlReportTemplate(template_path=path, title="Nightly").load()
    assert template.head == "<html><head><title>Nightly</title></head><body>"
    assert template.tail == "</body></html>"


def test_custom_template_without_report_data(tmp_path):
    path = _write(tmp_path, "<html></html>")
    with pytest.raises(TemplateLoadFailure, match="found 0"):
        HtmlReportTemplate(template_path=path).load()


def test_custom_template_with_report_data_twice(tmp_path):
    path = _write(tmp_path, "{{ report_data }}<hr>{{ report_data }}")
    with pytest.raises(TemplateLoadFailure, match="found 2"):
        HtmlReportTemplate(template_path=path).load()


def test_missing_template(tmp_path):
    with pytest.raises(TemplateLoadFailure):
        HtmlReportTemplate(template_path=tmp_path / "nope.html.j2").load()


def test_template_syntax_error(tmp_path):
    path = _write(tmp_path, "{% if %}{{ report_data }}")
    with pytest.raises(TemplateLoadFailure):
        HtmlReportTemplate(template_path=path).load()


def test_template_undefined_variable(tmp_path):
    path = _write(tmp_path, "{{ build_name }}{{ report_data }}")
    with pytest.raises(TemplateLoadFailure):
        HtmlReportTemplate(template_path=path).load()


@pytest.mark.parametrize("marker", ["// begin-report-data", "// end-report-data"])
def test_custom_template_with_marker_line(tmp_path, marker):
    path = _write(tmp_path, f"<html><script>\n  {marker}\n</script>{{{{ report_data }}}}</html>")
    with pytest.raises(TemplateLoadFailure, match="must not contain"):
        HtmlReportTemplate(template_path=path).load()


def test_marker_text_inside_a_line_is_allowed(tmp_path):
    path = _write(tmp_path, "<p>see // end-report-data below</p>{{ report_data }}")
    template = HtmlReportTemplate(template_path=path).load()
    assert template.head == "<p>see // end-report-data below</p>"
