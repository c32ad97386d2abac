"""PDF generation for enrolment quotes.

This module creates a printable quote showing:
- The student and quote date in a header
- One section per course with period, breaks, class time and fees
- A tuition total and the payment notice
"""

from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from tuitioncalc.domain.models import CartLineItem, CourseCatalog
from tuitioncalc.errors import QuoteError
from tuitioncalc.output.quote_text import QuoteBuilder, resolve_textbook, strip_duplicate_suffix

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "header": (0.2, 0.3, 0.5),
    "section": (0.92, 0.94, 0.98),
    "rule": (0.7, 0.7, 0.7),
    "text": (0, 0, 0),
}

# Built-in CID font covering Hangul.
DEFAULT_FONT = "HYSMyeongJo-Medium"


class QuotePDFGenerator:
    """Generates printable PDF quotes.

    Example:
        >>> generator = QuotePDFGenerator(catalog)
        >>> generator.generate("김철수", cart, "quote.pdf")
    """

    def __init__(
        self,
        catalog: CourseCatalog,
        quote_builder: Optional[QuoteBuilder] = None,
        page_width: float = 595,  # A4 portrait width
        page_height: float = 842,  # A4 portrait height
        margin: float = 48,
        font_name: str = DEFAULT_FONT,
    ):
        self.catalog = catalog
        self.quote_builder = quote_builder or QuoteBuilder(catalog)
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.font_name = font_name

    def generate(
        self,
        student_name: str,
        cart: list[CartLineItem],
        output_path: Union[str, Path],
        textbook_option: str = "none",
        textbook_amount: int = 0,
        note: str = "",
        quote_date: Optional[date] = None,
    ) -> None:
        """Generate a PDF quote and save it to a file.

        Args:
            student_name: Student the quote is addressed to.
            cart: Priced line items.
            output_path: Path to save the PDF.
            textbook_option: Fallback textbook option for every item.
            textbook_amount: Fallback textbook amount.
            note: Fallback note.
            quote_date: Date printed in the header (defaults to today).
        """
        canvas = self._open_canvas(str(output_path))
        self._draw_quote(canvas, student_name, cart, textbook_option, textbook_amount, note, quote_date)
        canvas.save()

    def generate_to_buffer(
        self,
        student_name: str,
        cart: list[CartLineItem],
        textbook_option: str = "none",
        textbook_amount: int = 0,
        note: str = "",
        quote_date: Optional[date] = None,
    ) -> BytesIO:
        """Generate a PDF quote and return it as a bytes buffer."""
        buffer = BytesIO()
        canvas = self._open_canvas(buffer)
        self._draw_quote(canvas, student_name, cart, textbook_option, textbook_amount, note, quote_date)
        canvas.save()
        buffer.seek(0)
        return buffer

    def _open_canvas(self, target):
        try:
            from reportlab.pdfbase import pdfmetrics
            from reportlab.pdfbase.cidfonts import UnicodeCIDFont
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        if self.font_name not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(UnicodeCIDFont(self.font_name))
        return canvas.Canvas(target, pagesize=(self.page_width, self.page_height))

    def _draw_quote(
        self,
        c,
        student_name: str,
        cart: list[CartLineItem],
        textbook_option: str,
        textbook_amount: int,
        note: str,
        quote_date: Optional[date],
    ) -> None:
        if not (student_name or "").strip():
            raise QuoteError("Student name is missing.")
        if not cart:
            raise QuoteError("No course selected.")

        display_name = strip_duplicate_suffix(student_name)
        y = self._draw_header(c, display_name, quote_date or date.today())

        bills_textbook = False
        for index, item in enumerate(cart, start=1):
            option, amount, item_note = resolve_textbook(item, textbook_option, textbook_amount, note)
            lines = self.quote_builder.item_lines(item)
            lines.extend(self.quote_builder.textbook_lines(option, amount))
            if item_note:
                lines.append(item_note)
            bills_textbook = bills_textbook or (option == "amount" and amount > 0)

            needed = 30 + 14 * len(lines)
            if y - needed < self.margin:
                c.showPage()
                y = self._draw_header(c, display_name, quote_date or date.today())
            y = self._draw_section(c, f"Course {index}", lines, y)

        y = self._draw_total(c, cart, y)
        footer = self.quote_builder.config.tuition_account.splitlines()
        if bills_textbook:
            footer += [""] + self.quote_builder.config.textbook_account.splitlines()
        self._draw_footer(c, footer, y)
        c.showPage()

    def _draw_header(self, c, student_name: str, quote_date: date) -> float:
        """Draw page header; returns the y position below it."""
        top = self.page_height - self.margin
        c.setFillColorRGB(*COLORS["header"])
        c.setFont(self.font_name, 16)
        c.drawString(self.margin, top - 16, f"Enrolment Quote - {student_name}")

        c.setFillColorRGB(*COLORS["text"])
        c.setFont(self.font_name, 9)
        c.drawRightString(self.page_width - self.margin, top - 16, quote_date.isoformat())
        if self.catalog.name:
            c.drawString(self.margin, top - 32, self.catalog.name)

        c.setStrokeColorRGB(*COLORS["rule"])
        c.line(self.margin, top - 40, self.page_width - self.margin, top - 40)
        return top - 60

    def _draw_section(self, c, title: str, lines: list[str], y: float) -> float:
        """Draw one course section; returns the y position below it."""
        height = 22 + 14 * len(lines)
        c.setFillColorRGB(*COLORS["section"])
        c.rect(self.margin, y - height, self.page_width - 2 * self.margin, height, fill=1, stroke=0)

        c.setFillColorRGB(*COLORS["text"])
        c.setFont(self.font_name, 11)
        c.drawString(self.margin + 8, y - 15, title)

        c.setFont(self.font_name, 9)
        line_y = y - 30
        for line in lines:
            c.drawString(self.margin + 16, line_y, line)
            line_y -= 14
        return y - height - 12

    def _draw_total(self, c, cart: list[CartLineItem], y: float) -> float:
        total = sum(item.final_fee for item in cart)
        c.setFont(self.font_name, 12)
        c.drawRightString(
            self.page_width - self.margin,
            y - 4,
            f"Total tuition: {self.quote_builder.money(total)}",
        )
        return y - 28

    def _draw_footer(self, c, lines: list[str], y: float) -> None:
        c.setFont(self.font_name, 8)
        for line in lines:
            if y < self.margin:
                c.showPage()
                c.setFont(self.font_name, 8)
                y = self.page_height - self.margin
            c.drawString(self.margin, y, line)
            y -= 11
