"""
Decoding of expanded billing text into a BillingConfig.

The text is parsed with PyYAML and validated with pydantic. Failures are
reported as SchemaError with the dotted path of the offending field, e.g.
``billables[1].unit_price``.

Section policy:
- business, bill and billables are required; absent or null raises
  MissingRequiredSectionError before any field is validated
- bill_to, tax, bank, colors and app_config are optional; absent or null
  decodes to None

Scalars keep the text the author wrote. YAML 1.1 reads an unquoted
``021000021`` as octal and ``1:30`` as base 60; string fields still receive
the original characters while numeric fields receive the number.
"""

import logging
from typing import Any

import yaml
from pydantic import ValidationError

from billforge.domain.errors import MissingRequiredSectionError, SchemaError
from billforge.domain.models import BillingConfig

logger = logging.getLogger(__name__)


REQUIRED_SECTIONS = ("business", "bill", "billables")
OPTIONAL_SECTIONS = ("bill_to", "tax", "bank", "colors", "app_config")


class YamlInt(int):
    """An int constructed from YAML that remembers its source text."""
    source_text: str


class YamlFloat(float):
    """A float constructed from YAML that remembers its source text."""
    source_text: str


def _keep_source_text(number_type, construct):
    def constructor(loader, node):
        value = number_type(construct(loader, node))
        value.source_text = node.value
        return value
    return constructor


def _construct_raw_text(loader, node):
    return loader.construct_scalar(node)


class BillingLoader(yaml.SafeLoader):
    """
    SafeLoader that never loses the author's scalar text.

    Booleans and timestamps stay strings; pydantic parses booleans where a
    bool field expects one.
    """


BillingLoader.add_constructor(
    "tag:yaml.org,2002:int",
    _keep_source_text(YamlInt, yaml.SafeLoader.construct_yaml_int),
)
BillingLoader.add_constructor(
    "tag:yaml.org,2002:float",
    _keep_source_text(YamlFloat, yaml.SafeLoader.construct_yaml_float),
)
BillingLoader.add_constructor("tag:yaml.org,2002:bool", _construct_raw_text)
BillingLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_raw_text)


def format_field_path(location: tuple[int | str, ...]) -> str:
    """
    Render a pydantic error location as a field path.

    Example:
        >>> format_field_path(("billables", 1, "unit_price"))
        'billables[1].unit_price'
    """
    path = ""
    for part in location:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "<root>"


class ConfigDecoder:
    """Decodes expanded YAML text into a typed BillingConfig."""

    def __init__(self, source_name: str = "billing.yaml") -> None:
        self.source_name = source_name

    def decode(self, expanded_text: str) -> BillingConfig:
        """
        Parse and validate the billing document.

        Raises:
            SchemaError: Invalid YAML or a field of the wrong type
            MissingRequiredSectionError: A required section is absent
        """
        document = self._load_yaml(expanded_text)

        for section in REQUIRED_SECTIONS:
            if document.get(section) is None:
                raise MissingRequiredSectionError(self.source_name, section)

        for section in OPTIONAL_SECTIONS:
            if document.get(section) is None:
                logger.debug(f"Optional section '{section}' not configured in {self.source_name}")

        try:
            config = BillingConfig.model_validate(document)
        except ValidationError as e:
            error = e.errors()[0]
            field_path = format_field_path(error["loc"])
            raise SchemaError(self.source_name, field_path, error["msg"]) from e

        if not config.billables:
            logger.warning(f"No billable items in {self.source_name}")

        return config

    def _load_yaml(self, text: str) -> dict[str, Any]:
        try:
            document = yaml.load(text, Loader=BillingLoader)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            where = f" (line {mark.line + 1})" if mark is not None else ""
            problem = getattr(e, "problem", None) or str(e)
            raise SchemaError(self.source_name, "<root>", f"invalid YAML{where}: {problem}") from e

        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise SchemaError(
                self.source_name,
                "<root>",
                f"expected a mapping, got {type(document).__name__}",
            )
        return document
