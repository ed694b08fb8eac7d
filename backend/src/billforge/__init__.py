"""
billforge - Billing configuration pipeline.

Turns a YAML billing document with date placeholders into a typed,
normalized configuration ready for rendering.
"""

from billforge.domain.models import BillingConfig, ResolvedBilling
from billforge.domain.money import format_currency
from billforge.pipeline import load_billing, resolve_billing

__version__ = "0.1.0"

__all__ = [
    "BillingConfig",
    "ResolvedBilling",
    "format_currency",
    "load_billing",
    "resolve_billing",
]
