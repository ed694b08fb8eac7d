"""
Error taxonomy for billing configuration resolution.

Every recoverable failure derives from BillingError and renders a one-line
diagnostic that names the source file and, where it applies, the field path
or template line.

FormattingInvariantError deliberately sits outside that hierarchy: it signals
a broken monetary formatter, not bad input, so a broad ``except BillingError``
in a caller never hides it.
"""


class BillingError(Exception):
    """Base class for errors a caller can report and exit on."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.message = message
        self.source = source
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.message}"
        return self.message


class InvalidAnchorDateError(BillingError):
    """The billing (anchor) date could not be interpreted as a date."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid billing date: {value!r}")


class TemplateError(BillingError):
    """Base class for placeholder expansion failures."""


class TemplateSyntaxError(TemplateError):
    """Malformed placeholder syntax or an unknown placeholder name."""

    def __init__(self, source: str, message: str, lineno: int | None = None) -> None:
        self.lineno = lineno
        location = f"line {lineno}: " if lineno else ""
        super().__init__(f"Error parsing template: {location}{message}", source)


class TemplateExecError(TemplateError):
    """A placeholder could not be evaluated."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"Error expanding template: {message}", source)


class SchemaError(BillingError):
    """Decoded text does not match the billing configuration structure."""

    def __init__(self, source: str, field_path: str, message: str) -> None:
        self.field_path = field_path
        super().__init__(f"{field_path}: {message}", source)


class MissingRequiredSectionError(SchemaError):
    """A required top-level section is absent or empty."""

    def __init__(self, source: str, section: str) -> None:
        self.section = section
        super().__init__(source, section, "required section is missing")


class FormattingInvariantError(RuntimeError):
    """
    The monetary formatter produced output it cannot parse back.

    This is a logic error in the formatter itself. Callers should let it
    abort the run rather than display an amount that cannot be trusted.
    """

    def __init__(self, amount: object, rendered: str) -> None:
        self.amount = amount
        self.rendered = rendered
        super().__init__(
            f"Monetary formatting invariant violated: {amount!r} rendered as {rendered!r}"
        )
