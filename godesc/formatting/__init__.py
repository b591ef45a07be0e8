"""
Canonical printing of parsed descriptors.

The printer writes descriptors the way the engine does, so printing a
descriptor parsed from an engine-written file reproduces that file.
"""

from __future__ import annotations

__all__ = ["DescriptorFormatter", "FormattingOptions", "format_descriptor"]

from .core import DescriptorFormatter, FormattingOptions, format_descriptor
