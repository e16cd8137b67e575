"""Converter plugin interface, built-ins, and registry."""

from .base import ConverterPlugin
from .registry import ConversionRegistry, create_default_registry

__all__ = ["ConverterPlugin", "ConversionRegistry", "create_default_registry"]
