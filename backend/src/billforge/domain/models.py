"""
Billing configuration models.

These models describe the billing document an author writes in YAML: who is
billing, who is billed, the billable items and the optional tax, bank and
colour sections. Field names match the YAML keys one-to-one.

Design Decisions:
- Pydantic models so decoding reports the exact failing field path
- Frozen models: normalization returns a new tree instead of mutating
- Unknown keys are ignored so older binaries accept newer documents
- Optional sections are ``None`` when absent, never half-populated
- Text fields keep the scalar text as written; numeric fields reject
  strings and non-finite values
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .money import format_currency


def _scalar_to_text(value: Any) -> Any:
    """Render scalars into text fields, preferring the text the author wrote."""
    source_text = getattr(value, "source_text", None)
    if source_text is not None:
        return source_text
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, date, datetime)):
        return str(value)
    return value


def _plain_number(value: Any) -> Any:
    """Drop the source text a YAML number carries, keeping its value."""
    if isinstance(value, float) and type(value) is not float:
        return float(value)
    if isinstance(value, int) and type(value) not in (int, bool):
        return int(value)
    return value


Text = Annotated[str, BeforeValidator(_scalar_to_text)]

# Quoted numbers ("12"), booleans, NaN and infinities are type errors
Number = Annotated[float, Field(strict=True, allow_inf_nan=False), BeforeValidator(_plain_number)]
Integer = Annotated[int, Field(strict=True), BeforeValidator(_plain_number)]


class ConfigModel(BaseModel):
    """Shared configuration for every billing model."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class BusinessDetails(ConfigModel):
    """The business issuing the bill."""
    name: Text = ""
    person: Text = ""
    address: Text = ""
    image_file: Text = ""
    sans_font: Text = ""
    serif_font: Text = ""


class BillDetails(ConfigModel):
    """
    Bill-level settings.

    ``date`` is always overwritten during normalization with the billing
    date the run was started for.
    """
    department: Text = ""
    currency: Text = ""
    payment_terms: Text = ""
    due_date: Text = ""
    date: Text = ""
    use_exact_date: bool = False

    def strings(self) -> list[str]:
        return [self.department, self.currency, self.payment_terms, self.due_date]


class BillToDetails(ConfigModel):
    """The recipient of the bill."""
    email: Text = ""
    name: Text = ""
    street: Text = ""
    city_state_zip: Text = ""
    country: Text = ""


class BillableItem(ConfigModel):
    """
    A single line on the bill.

    The total is derived from quantity and unit price every time it is
    read and is never clamped, so negative inputs yield negative totals.
    """
    quantity: Number = 0.0
    description: Text = ""
    unit_price: Number = 0.0
    currency: Text = ""

    @property
    def total(self) -> float:
        """Compute the line total from unit_price * quantity."""
        return self.unit_price * self.quantity

    def strings(self) -> list[str]:
        """Display cells: quantity, description, unit price, total."""
        return [
            f"{self.quantity:.2f}",
            self.description,
            f"{self.currency} {format_currency(self.unit_price)}",
            f"{self.currency} {format_currency(self.total)}",
        ]


class TaxDetails(ConfigModel):
    default_percentage: Number = 0.0
    tax_name: Text = ""


class BankDetails(ConfigModel):
    """Bank transfer details. Values are passed through unvalidated."""
    transfer_type: Text = ""
    name: Text = ""
    account_type: Text = ""
    routing_number: Text = ""
    account_number: Text = ""

    def strings(self) -> list[str]:
        return [
            self.transfer_type,
            self.name,
            self.account_type,
            self.account_number,
            self.routing_number,
        ]


class Color(ConfigModel):
    r: Integer = 0
    g: Integer = 0
    b: Integer = 0


class BillColor(ConfigModel):
    """Light/dark colour pair used by the renderer's theme."""
    color_light: Color = Field(default_factory=Color)
    color_dark: Color = Field(default_factory=Color)


class AppConfig(ConfigModel):
    output_dir: Text = ""


class BillingConfig(ConfigModel):
    """
    Root of the billing configuration tree.

    ``business``, ``bill`` and ``billables`` are required. Every other
    section is ``None`` when the document does not configure it.
    """
    business: BusinessDetails
    bill: BillDetails
    billables: list[BillableItem]
    bill_to: BillToDetails | None = None
    tax: TaxDetails | None = None
    bank: BankDetails | None = None
    colors: BillColor | None = None
    app_config: AppConfig | None = None

    @property
    def subtotal(self) -> float:
        """Sum of all billable item totals."""
        return sum((item.total for item in self.billables), 0.0)

    @property
    def output_dir(self) -> str:
        """Configured output directory, empty when not configured."""
        return self.app_config.output_dir if self.app_config else ""


@dataclass(frozen=True)
class ResolvedBilling:
    """
    A fully normalized configuration plus the invoice number of its run.

    This is what gets handed to the renderer. Keeping the invoice number
    here instead of in module state lets several runs share a process.
    """
    config: BillingConfig
    invoice_number: str

    @property
    def output_dir(self) -> str:
        return self.config.output_dir
