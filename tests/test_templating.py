from datetime import date, datetime

import pytest

from billforge.domain.errors import (
    BillingError,
    InvalidAnchorDateError,
    TemplateExecError,
    TemplateSyntaxError,
)
from billforge.services.templating import (
    TemplatePreprocessor,
    billing_period,
    end_of_next_month,
    end_of_this_month,
)


@pytest.mark.parametrize(
    "anchor, expected",
    [
        (date(2024, 1, 15), "01/31/24"),
        (date(2024, 2, 1), "02/29/24"),
        (date(2023, 2, 28), "02/28/23"),
        (date(2024, 4, 30), "04/30/24"),
        (date(2023, 12, 10), "12/31/23"),
    ],
)
def test_end_of_this_month(anchor, expected):
    assert end_of_this_month(anchor) == expected


@pytest.mark.parametrize(
    "anchor, expected",
    [
        (date(2024, 1, 15), "02/29/24"),
        (date(2023, 1, 31), "02/28/23"),
        (date(2023, 12, 10), "01/31/24"),
        (date(2024, 11, 30), "12/31/24"),
        (date(2024, 8, 31), "09/30/24"),
    ],
)
def test_end_of_next_month(anchor, expected):
    assert end_of_next_month(anchor) == expected


def test_billing_period_covers_whole_month():
    assert billing_period(date(2024, 2, 17)) == "Feb 1, 2024 - Feb 29, 2024"
    assert billing_period(date(2023, 9, 1)) == "Sep 1, 2023 - Sep 30, 2023"


def test_expand_billing_period():
    preprocessor = TemplatePreprocessor(date(2024, 2, 1))

    assert preprocessor.expand("Period: {{billingPeriod}}") == "Period: Feb 1, 2024 - Feb 29, 2024"


def test_expand_all_placeholders_with_spacing():
    preprocessor = TemplatePreprocessor(date(2024, 1, 15))

    text = "a: {{ endOfThisMonth }}\nb: {{endOfNextMonth}}\n"

    assert preprocessor.expand(text) == "a: 01/31/24\nb: 02/29/24\n"


def test_expand_accepts_datetime_anchor():
    preprocessor = TemplatePreprocessor(datetime(2024, 1, 15, 13, 45))

    assert preprocessor.anchor_date == date(2024, 1, 15)
    assert preprocessor.expand("{{endOfThisMonth}}") == "01/31/24"


def test_text_without_placeholders_is_unchanged():
    text = "business:\n  name: Plain\n"

    assert TemplatePreprocessor(date(2024, 1, 1)).expand(text) == text


def test_unknown_placeholder_names_source_file():
    preprocessor = TemplatePreprocessor(date(2024, 1, 1), source_name="acme.yaml")

    with pytest.raises(TemplateSyntaxError, match="acme.yaml") as exc_info:
        preprocessor.expand("due: {{ nextYear }}")

    assert "nextYear" in str(exc_info.value)


def test_malformed_syntax_reports_line():
    preprocessor = TemplatePreprocessor(date(2024, 1, 1), source_name="billing.yaml")

    with pytest.raises(TemplateSyntaxError, match="billing.yaml") as exc_info:
        preprocessor.expand("a: 1\nb: {{ billingPeriod ) }}\nc: 3\n")

    assert exc_info.value.lineno == 2
    assert isinstance(exc_info.value, BillingError)


def test_missing_anchor_date_fails_on_use():
    preprocessor = TemplatePreprocessor(None)

    with pytest.raises(TemplateExecError):
        preprocessor.expand("due: {{endOfThisMonth}}")


def test_missing_anchor_date_allowed_without_placeholders():
    assert TemplatePreprocessor(None).expand("name: x") == "name: x"


def test_render_failure_is_exec_error():
    preprocessor = TemplatePreprocessor(date(2024, 1, 1))

    with pytest.raises(TemplateExecError):
        preprocessor.expand("{{ billingPeriod + 1 }}")


def test_string_anchor_date_is_rejected():
    with pytest.raises(InvalidAnchorDateError):
        TemplatePreprocessor("2024-01-01")


def test_python_attribute_access_is_blocked():
    preprocessor = TemplatePreprocessor(date(2024, 1, 1))

    with pytest.raises(TemplateExecError):
        preprocessor.expand("{{ billingPeriod.__class__.__mro__[1].__subclasses__()|length }}")


def test_statement_and_comment_markers_pass_through():
    text = 'description: "Item {#3 rush} {% raw %} #}"\nnote: "{%- x -%}"\n'

    assert TemplatePreprocessor(date(2024, 1, 1)).expand(text) == text


def test_comment_marker_next_to_placeholder():
    preprocessor = TemplatePreprocessor(date(2024, 1, 15))

    assert preprocessor.expand("due: {#1 {{endOfThisMonth}}") == "due: {#1 01/31/24"


def test_text_is_parsed_once(monkeypatch):
    preprocessor = TemplatePreprocessor(date(2024, 1, 15))
    environment = preprocessor.environment
    original_parse = environment._parse
    sources = []

    def counting_parse(source, *args, **kwargs):
        sources.append(source)
        return original_parse(source, *args, **kwargs)

    monkeypatch.setattr(environment, "_parse", counting_parse)

    assert preprocessor.expand("due: {{endOfThisMonth}}") == "due: 01/31/24"
    assert len(sources) == 1
