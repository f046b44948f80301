"""
Diagnostic subsystem.
"""

from .models import Diagnostic
from .registry import all_definitions, create_diagnostic, get_definition

__all__ = ["Diagnostic", "create_diagnostic", "get_definition", "all_definitions"]
