"""Output generation for quotes (text, PDF)."""

from tuitioncalc.output.pdf_generator import QuotePDFGenerator
from tuitioncalc.output.quote_text import (
    QuoteBuilder,
    QuoteConfig,
    generate_quote_text,
    strip_duplicate_suffix,
)

__all__ = [
    "QuoteBuilder",
    "QuoteConfig",
    "QuotePDFGenerator",
    "generate_quote_text",
    "strip_duplicate_suffix",
]
