"""
Placeholder expansion for billing documents.

Authors embed a small fixed set of date-relative placeholders in the YAML
text, e.g. ``description: "Consulting {{billingPeriod}}"``. The text is
rendered with Jinja2 before it is decoded, using one anchor date for every
placeholder.

Supported placeholders:
- billingPeriod: "Jan 1, 2024 - Jan 31, 2024" for the anchor's month
- endOfThisMonth: last day of the anchor's month as MM/DD/YY
- endOfNextMonth: last day of the following month as MM/DD/YY

Design Decisions:
- Placeholder values come from pure functions of the anchor date, so they
  can be tested with any date without building the pipeline
- Unknown names are rejected when the template is parsed, not rendered
- StrictUndefined makes any unresolved lookup a hard failure
- A sandboxed environment keeps documents away from Python attributes
"""

import logging
from collections.abc import Callable
from datetime import date, datetime

import jinja2
from jinja2 import StrictUndefined, meta
from jinja2.sandbox import ImmutableSandboxedEnvironment

from billforge.domain.errors import (
    InvalidAnchorDateError,
    TemplateExecError,
    TemplateSyntaxError,
)

from .dates import (
    beginning_of_month,
    end_of_month,
    format_long,
    format_short,
)
from .dates import end_of_next_month as _last_day_of_next_month

logger = logging.getLogger(__name__)


def billing_period(anchor: date) -> str:
    """Date range covering the whole calendar month of ``anchor``."""
    return f"{format_long(beginning_of_month(anchor))} - {format_long(end_of_month(anchor))}"


def end_of_this_month(anchor: date) -> str:
    return format_short(end_of_month(anchor))


def end_of_next_month(anchor: date) -> str:
    return format_short(_last_day_of_next_month(anchor))


# Only {{ ... }} is recognised. Statement and comment delimiters are set to
# strings containing NUL, which YAML text cannot contain, so "{%" and "{#"
# in billing text pass through untouched.
DISABLED_BLOCK = ("\x00{%", "%\x00}")
DISABLED_COMMENT = ("\x00{#", "#\x00}")

PLACEHOLDERS: dict[str, Callable[[date], str]] = {
    "billingPeriod": billing_period,
    "endOfThisMonth": end_of_this_month,
    "endOfNextMonth": end_of_next_month,
}


class TemplatePreprocessor:
    """
    Expands date placeholders in raw billing text.

    Example:
        preprocessor = TemplatePreprocessor(date(2024, 2, 1))
        preprocessor.expand("Period: {{billingPeriod}}")
        # "Period: Feb 1, 2024 - Feb 29, 2024"
    """

    def __init__(
        self,
        anchor_date: date | None,
        source_name: str = "billing.yaml",
    ) -> None:
        """
        Initialize the preprocessor.

        Args:
            anchor_date: Date every placeholder is evaluated against. May be
                None only for text without placeholders.
            source_name: File name used in error messages
        """
        if isinstance(anchor_date, datetime):
            anchor_date = anchor_date.date()
        elif anchor_date is not None and not isinstance(anchor_date, date):
            raise InvalidAnchorDateError(anchor_date)

        self.anchor_date = anchor_date
        self.source_name = source_name
        self.environment = ImmutableSandboxedEnvironment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
            block_start_string=DISABLED_BLOCK[0],
            block_end_string=DISABLED_BLOCK[1],
            comment_start_string=DISABLED_COMMENT[0],
            comment_end_string=DISABLED_COMMENT[1],
        )

    def expand(self, raw_text: str) -> str:
        """
        Render all placeholders in ``raw_text``.

        Raises:
            TemplateSyntaxError: Malformed syntax or unknown placeholder
            TemplateExecError: Missing anchor date or a render failure
        """
        try:
            ast = self.environment.parse(raw_text)
            template = self.environment.from_string(ast)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateSyntaxError(self.source_name, e.message or str(e), e.lineno) from e

        used = meta.find_undeclared_variables(ast)
        unknown = sorted(used - PLACEHOLDERS.keys())
        if unknown:
            raise TemplateSyntaxError(
                self.source_name,
                f"function {', '.join(repr(name) for name in unknown)} not defined",
            )

        if used and self.anchor_date is None:
            raise TemplateExecError(self.source_name, "no billing date available for placeholders")

        context = {name: PLACEHOLDERS[name](self.anchor_date) for name in used}
        logger.debug(f"Expanding {sorted(used)} in {self.source_name} for {self.anchor_date}")

        try:
            return template.render(context)
        except (jinja2.TemplateError, TypeError) as e:
            raise TemplateExecError(self.source_name, str(e)) from e
