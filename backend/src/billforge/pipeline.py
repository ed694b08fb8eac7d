"""
Billing configuration pipeline.

Ties the stages together:
1. Validate the billing date that anchors every placeholder
2. Expand placeholders in the raw document text
3. Decode the expanded YAML into a BillingConfig
4. Normalize the config and attach the invoice number

The result is a ResolvedBilling for the renderer. Any stage failure raises
a BillingError subclass and aborts resolution; nothing is retried.
"""

import logging
from pathlib import Path

from billforge.config import Settings, get_settings
from billforge.domain.models import ResolvedBilling
from billforge.logging_config import configure_logging
from billforge.services.dates import parse_anchor_date
from billforge.services.decoder import ConfigDecoder
from billforge.services.normalize import ConfigNormalizer
from billforge.services.templating import TemplatePreprocessor

logger = logging.getLogger(__name__)


def resolve_billing(
    raw_text: str,
    billing_date: str,
    output_dir: str,
    invoice_number: str,
    source_name: str = "billing.yaml",
) -> ResolvedBilling:
    """
    Resolve raw billing text into a normalized configuration.

    Args:
        raw_text: Document text with placeholders, already read by the caller
        billing_date: Billing date string, e.g. "2024-02-01"
        output_dir: Default output directory
        invoice_number: Invoice number for this run
        source_name: Name of the document, used in error messages

    Returns:
        ResolvedBilling with the normalized config and invoice number

    Raises:
        InvalidAnchorDateError: billing_date is not a valid date
        TemplateSyntaxError: Malformed or unknown placeholder
        TemplateExecError: A placeholder could not be evaluated
        SchemaError: The document has the wrong structure
        MissingRequiredSectionError: business, bill or billables is absent
    """
    anchor_date = parse_anchor_date(billing_date)

    expanded = TemplatePreprocessor(anchor_date, source_name).expand(raw_text)
    config = ConfigDecoder(source_name).decode(expanded)
    resolved = ConfigNormalizer().normalize(config, billing_date, output_dir, invoice_number)

    logger.info(
        f"Resolved {source_name}: {len(resolved.config.billables)} billable(s), "
        f"invoice {resolved.invoice_number}, output to {resolved.output_dir}"
    )
    return resolved


def load_billing(
    config_file: Path | str | None = None,
    billing_date: str | None = None,
    output_dir: Path | str | None = None,
    invoice_number: str | None = None,
    settings: Settings | None = None,
) -> ResolvedBilling:
    """
    Read a billing document from disk and resolve it.

    Any argument left as None falls back to Settings. Logging is configured
    at the Settings log level first.

    Raises:
        FileNotFoundError: If the billing document does not exist
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    path = Path(config_file) if config_file is not None else settings.config_file
    if not path.exists():
        raise FileNotFoundError(f"Billing document not found: {path}")

    if billing_date is None:
        billing_date = settings.default_billing_date()
    if invoice_number is None:
        invoice_number = settings.default_invoice_number()
    if output_dir is None:
        output_dir = settings.output_dir

    logger.debug(f"Reading billing document {path}")
    raw_text = path.read_text(encoding="utf-8")

    return resolve_billing(
        raw_text,
        billing_date=billing_date,
        output_dir=str(output_dir),
        invoice_number=invoice_number,
        source_name=path.name,
    )
