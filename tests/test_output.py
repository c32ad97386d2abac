"""Tests for quote text and PDF generation."""

from datetime import date

import pytest

from tuitioncalc.cart.builder import CartBuilder
from tuitioncalc.domain.models import CartInputs, CourseInputs
from tuitioncalc.errors import QuoteError
from tuitioncalc.output.pdf_generator import QuotePDFGenerator
from tuitioncalc.output.quote_text import (
    QuoteBuilder,
    QuoteConfig,
    generate_quote_text,
    skip_week_blocks,
    strip_duplicate_suffix,
)


@pytest.fixture
def builder(catalog):
    """Create a cart builder with default policies."""
    return CartBuilder(catalog)


@pytest.fixture
def make_item(builder):
    """Factory for priced line items."""

    def _make(course_key="sat_1500", discount=0.0, **choices):
        choices.setdefault("period", 4)
        choices.setdefault("start_date", "2026-01-05")
        return builder.create_cart_item(
            CartInputs(
                student_name="김철수",
                course_key=course_key,
                course=CourseInputs(**choices),
                discount=discount,
            )
        )

    return _make


class TestHelpers:
    """Tests for quote helper functions."""

    @pytest.mark.parametrize(
        "name, expected",
        [("김철수A", "김철수"), ("김철수 B", "김철수"), ("김철수", "김철수"), ("JohnB", "JohnB"), (None, "")],
    )
    def test_strip_duplicate_suffix(self, name, expected):
        assert strip_duplicate_suffix(name) == expected

    def test_skip_week_blocks(self):
        assert skip_week_blocks([5, 2, 3]) == [(2, 3), (5, 5)]
        assert skip_week_blocks([]) == []


class TestQuoteText:
    """Tests for QuoteBuilder.generate_text."""

    @pytest.fixture
    def quote_builder(self, catalog):
        """Create a quote builder with default settings."""
        return QuoteBuilder(catalog)

    def test_single_item(self, quote_builder, make_item):
        text = quote_builder.generate_text("김철수A", [make_item(course_type="online")])
        assert "Student: 김철수\n" in text
        assert "• Course: SAT 1500 online" in text
        assert "• Period: 01.05(Mon)~01.30(Fri) 4 weeks" in text
        assert "• Class time: 09:00-12:00 (KST)" in text
        assert "• Tuition: 3,200,000 won" in text
        assert "[Tuition account]" in text
        assert "[Textbook account]" not in text
        assert "[Course 1]" not in text

    def test_discount_label(self, quote_builder, make_item):
        text = quote_builder.generate_text("김철수", [make_item(course_type="online", discount=0.1)])
        assert "• Tuition: 2,880,000 won (10% off)" in text

    def test_skip_weeks(self, quote_builder, make_item):
        item = make_item(course_type="online", skip_weeks=(2, 3))
        text = quote_builder.generate_text("김철수", [item])
        assert "※ Not enrolled: 01.12(Mon)~01.25(Sun) 2 weeks" in text
        assert "• Period: 01.05(Mon)~02.13(Fri) 6 weeks" in text

    def test_term_break(self, quote_builder, make_item):
        text = quote_builder.generate_text("김철수", [make_item("ap_calc")])
        assert "※ Term break: 01.19(Mon)~01.23(Fri) 1 week" in text
        assert "• Period: 01.05(Mon)~02.06(Fri) 5 weeks" in text

    def test_recording_breakdown(self, quote_builder, make_item):
        item = make_item(period=1, course_type="online", recording_dates=("2026-01-06",))
        text = quote_builder.generate_text("김철수", [item])
        assert "• Recorded lecture days: 01.06(Tue)" in text
        assert "= Live classes (4 days): 640,000 won" in text
        assert "+ Recorded lectures (1 days): 64,000 won (40% of list price)" in text

    def test_math_excluded_label(self, quote_builder, make_item):
        item = make_item(course_type="online", exclude_math=True)
        assert quote_builder.course_label(item) == "SAT 1500 online (math excluded)"

    def test_textbook_tbd(self, quote_builder, make_item):
        text = quote_builder.generate_text(
            "김철수", [make_item(course_type="online")], textbook_option="tbd"
        )
        assert "Textbook fee will be announced later." in text
        assert "[Textbook account]" not in text

    def test_textbook_amount(self, quote_builder, make_item):
        text = quote_builder.generate_text(
            "김철수",
            [make_item(course_type="online")],
            textbook_option="amount",
            textbook_amount=35000,
            note="Bring a calculator.",
        )
        assert "Textbook fee: 35,000 won" in text
        assert "[Textbook account]" in text
        assert "Bring a calculator." in text

    def test_item_textbook_overrides_quote_default(self, quote_builder, make_item):
        item = make_item(course_type="online")
        item.textbook_option = "amount"
        item.textbook_amount = 20000
        text = quote_builder.generate_text("김철수", [item], textbook_option="tbd")
        assert "Textbook fee: 20,000 won" in text
        assert "announced later" not in text

    def test_multiple_items(self, quote_builder, make_item):
        cart = [make_item(course_type="online"), make_item("ap_calc", period=2)]
        text = quote_builder.generate_text("김철수", cart)
        assert "[Course 1]" in text
        assert "[Course 2]" in text
        assert "Total tuition: 4,200,000 won" in text

    def test_custom_config(self, catalog, make_item):
        quote_builder = QuoteBuilder(catalog, config=QuoteConfig(greeting="Hello!", currency="KRW"))
        text = quote_builder.generate_text("김철수", [make_item(course_type="online")])
        assert text.startswith("Hello!")
        assert "3,200,000 KRW" in text

    def test_module_level_wrapper(self, catalog, make_item):
        text = generate_quote_text(catalog, "김철수", [make_item(course_type="online")])
        assert "SAT 1500 online" in text

    def test_blank_student_name(self, quote_builder, make_item):
        with pytest.raises(QuoteError):
            quote_builder.generate_text("  ", [make_item(course_type="online")])

    def test_empty_cart(self, quote_builder):
        with pytest.raises(QuoteError):
            quote_builder.generate_text("김철수", [])


class TestQuotePDFGenerator:
    """Tests for QuotePDFGenerator."""

    @pytest.fixture(autouse=True)
    def require_reportlab(self):
        pytest.importorskip("reportlab")

    def test_generate_to_buffer(self, catalog, make_item):
        cart = [make_item(course_type="online"), make_item("ap_calc", period=2)]
        buffer = QuotePDFGenerator(catalog).generate_to_buffer(
            "김철수", cart, textbook_option="amount", textbook_amount=35000, quote_date=date(2026, 1, 2)
        )
        assert buffer.read(4) == b"%PDF"

    def test_generate_to_file(self, catalog, make_item, tmp_path):
        output = tmp_path / "quote.pdf"
        QuotePDFGenerator(catalog).generate("김철수", [make_item(course_type="online")], output)
        assert output.read_bytes().startswith(b"%PDF")

    def test_many_items_paginate(self, catalog, make_item):
        cart = [
            make_item(course_type="online", start_date=f"2026-0{month}-0{day}")
            for month, day in [(1, 5), (2, 2), (3, 2), (4, 6), (5, 4), (6, 1), (7, 6), (8, 3)]
        ]
        buffer = QuotePDFGenerator(catalog).generate_to_buffer("김철수", cart)
        assert buffer.getvalue().startswith(b"%PDF")

    def test_empty_cart(self, catalog):
        with pytest.raises(QuoteError):
            QuotePDFGenerator(catalog).generate_to_buffer("김철수", [])
