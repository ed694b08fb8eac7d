"""
Normalization of a decoded BillingConfig.

Fills in the values a run supplies rather than the document: the billing
date, a default output directory and the invoice number. Applied
unconditionally and in that order; there is no failure path.
"""

import logging

from billforge.domain.models import AppConfig, BillingConfig, ResolvedBilling

logger = logging.getLogger(__name__)


class ConfigNormalizer:
    """
    Applies run-level defaults to a decoded configuration.

    Example:
        resolved = ConfigNormalizer().normalize(config, "2024-02-01", "./out", "Feb12024")
        resolved.config.bill.date   # "2024-02-01"
        resolved.invoice_number     # "Feb12024"
    """

    def normalize(
        self,
        config: BillingConfig,
        billing_date: str,
        output_dir: str,
        invoice_number: str,
    ) -> ResolvedBilling:
        """
        Return a normalized copy of ``config`` with its invoice number.

        Args:
            config: Decoded configuration (left untouched)
            billing_date: Overrides whatever date the document carried
            output_dir: Used only when the document sets no output directory
            invoice_number: Carried alongside the config for the renderer
        """
        bill = config.bill.model_copy(update={"date": billing_date})

        app_config = config.app_config
        if app_config is None or not app_config.output_dir:
            logger.debug(f"No output directory configured, using '{output_dir}'")
            app_config = AppConfig(output_dir=str(output_dir))

        normalized = config.model_copy(update={"bill": bill, "app_config": app_config})
        return ResolvedBilling(config=normalized, invoice_number=invoice_number)
