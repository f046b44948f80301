"""
Prototype-to-class rewrite passes.
"""

from .context import ClassRecord, ConstructorSite, ConversionContext, PropertyRecord
from .pipeline import ConversionResult, build_context, convert_source, run_passes

__all__ = [
    "ClassRecord",
    "ConstructorSite",
    "ConversionContext",
    "ConversionResult",
    "PropertyRecord",
    "build_context",
    "convert_source",
    "run_passes",
]
