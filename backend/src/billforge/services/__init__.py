"""
Services package - The stages of the billing configuration pipeline.

Includes placeholder expansion, YAML decoding and normalization.
"""

from .decoder import ConfigDecoder
from .normalize import ConfigNormalizer
from .templating import TemplatePreprocessor

__all__ = ["TemplatePreprocessor", "ConfigDecoder", "ConfigNormalizer"]
