"""Plain-text enrolment quotes.

Renders cart line items as the enrolment notice sent to students and
parents: one block per course with period, term breaks, unregistered
weeks, recorded-lecture days, class time and fee breakdown, followed by
payment account details.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from tuitioncalc.domain.calendar import add_days, parse_date_only, weekday_index
from tuitioncalc.domain.models import CartLineItem, CourseCatalog
from tuitioncalc.domain.policies import DefaultFeePolicy, FeePolicy, ScheduleConfig
from tuitioncalc.errors import QuoteError
from tuitioncalc.pricing.fee_resolver import weeks_label
from tuitioncalc.scheduling.break_ranges import get_range_break_weeks
from tuitioncalc.scheduling.schedule_resolver import get_end_date

TEXTBOOK_OPTIONS = ("none", "tbd", "amount")

_NAME_SUFFIX = re.compile(r"^(.+?)([A-Za-z]+)$")
_HANGUL = re.compile(r"[가-힣]")


@dataclass
class QuoteConfig:
    """Fixed text blocks of the quote.

    Attributes:
        greeting: Opening line.
        tuition_account: Payment notice and tuition account, always printed.
        textbook_account: Textbook account, printed only when a textbook
            amount is billed.
        currency: Currency label after amounts.
    """

    greeting: str = "Thank you. Here are your enrolment details."
    tuition_account: str = (
        "Notice\n"
        "- Please make the transfer under the STUDENT's name.\n"
        "- Transfers under a parent's name cannot be matched and may delay registration.\n"
        "- After paying, send us the phone or business number for the cash receipt.\n"
        "[Tuition account]"
    )
    textbook_account: str = "[Textbook account]"
    currency: str = "won"


def strip_duplicate_suffix(name: Optional[str]) -> str:
    """Drop a trailing Latin disambiguation suffix from a Korean name.

    Student lists tell namesakes apart with a letter suffix ("김철수A");
    the quote shows the plain name. Names without Hangul are kept as-is.
    """
    trimmed = (name or "").strip()
    if not trimmed:
        return ""
    match = _NAME_SUFFIX.match(trimmed)
    if not match:
        return trimmed
    base = match.group(1).strip()
    if not base or not _HANGUL.search(base):
        return trimmed
    return base


def skip_week_blocks(skip_weeks: Iterable[int]) -> list[tuple[int, int]]:
    """Group skip weeks into runs of consecutive weeks, as (first, last) pairs."""
    weeks = sorted(set(skip_weeks))
    if not weeks:
        return []
    blocks = []
    first = previous = weeks[0]
    for week in weeks[1:]:
        if week == previous + 1:
            previous = week
            continue
        blocks.append((first, previous))
        first = previous = week
    blocks.append((first, previous))
    return blocks


def resolve_textbook(
    item: CartLineItem,
    option: str = "none",
    amount: int = 0,
    note: str = "",
) -> tuple[str, int, str]:
    """Textbook option, amount and note for an item, with quote-wide fallbacks."""
    chosen = item.textbook_option if item.textbook_option is not None else option
    if chosen not in TEXTBOOK_OPTIONS:
        chosen = "none"
    raw_amount = item.textbook_amount if item.textbook_amount is not None else amount
    fee = int(raw_amount or 0) if chosen == "amount" else 0
    raw_note = item.note if item.note is not None else note
    return chosen, fee, (raw_note or "").strip()


class QuoteBuilder:
    """Builds enrolment quote text for cart line items.

    Example:
        >>> builder = QuoteBuilder(catalog)
        >>> text = builder.generate_text("김철수", cart, textbook_option="tbd")
    """

    def __init__(
        self,
        catalog: CourseCatalog,
        fee_policy: Optional[FeePolicy] = None,
        schedule_config: Optional[ScheduleConfig] = None,
        config: Optional[QuoteConfig] = None,
    ):
        self.catalog = catalog
        self.fee_policy = fee_policy or DefaultFeePolicy()
        self.schedule_config = schedule_config or ScheduleConfig()
        self.config = config or QuoteConfig()

    def format_date(self, value: Optional[date]) -> str:
        if value is None:
            return ""
        name = self.catalog.weekday_name(weekday_index(value))
        return f"{value.month:02d}.{value.day:02d}({name})"

    def money(self, amount: int) -> str:
        return f"{amount:,} {self.config.currency}"

    def period_line(self, item: CartLineItem) -> str:
        start = item.details.start_date or parse_date_only(item.inputs.start_date)
        weeks = item.schedule_weeks or item.details.schedule_weeks
        end = item.details.end_date
        if end is None and start is not None and weeks > 0:
            course = self.catalog.get(item.course_key)
            end_day = course.end_day if course else None
            end = get_end_date(start, weeks, end_day, self.schedule_config)
        if start is not None and end is not None and weeks > 0:
            return f"{self.format_date(start)}~{self.format_date(end)} {weeks_label(weeks)}"
        return item.details.duration_text

    def skip_lines(self, item: CartLineItem) -> list[str]:
        start = item.details.start_date or parse_date_only(item.inputs.start_date)
        if start is None:
            return []
        lines = []
        for first, last in skip_week_blocks(item.normalized_skip_weeks):
            block_start = add_days(start, (first - 1) * 7)
            block_end = add_days(start, last * 7 - 1)
            lines.append(
                f"※ Not enrolled: {self.format_date(block_start)}~{self.format_date(block_end)} "
                f"{weeks_label(last - first + 1)}"
            )
        return lines

    def break_lines(self, item: CartLineItem) -> list[str]:
        course = self.catalog.get(item.course_key)
        start = item.details.start_date
        end = item.details.end_date
        if course is None or start is None or end is None or start > end:
            return []
        lines = []
        for break_range in course.break_ranges:
            clipped = break_range.clip(start, end)
            if clipped is None:
                continue
            weeks = get_range_break_weeks(start, end, break_range, course.class_days)
            if weeks:
                lines.append(
                    f"※ Term break: {self.format_date(clipped.start)}~{self.format_date(clipped.end)} "
                    f"{weeks_label(len(weeks))}"
                )
        return lines

    def course_label(self, item: CartLineItem) -> str:
        name = item.display_name.strip()
        if name and item.inputs.exclude_math and "math excluded" not in name:
            return f"{name} (math excluded)"
        return name

    def item_lines(self, item: CartLineItem) -> list[str]:
        """Detail lines for one cart item, without textbook information."""
        lines = [
            f"• Course: {self.course_label(item) or '-'}",
            f"• Period: {self.period_line(item) or '-'}",
        ]
        lines.extend(self.break_lines(item))
        lines.extend(self.skip_lines(item))
        if item.recording_dates:
            dates = ", ".join(self.format_date(day) for day in item.recording_dates)
            lines.append(f"• Recorded lecture days: {dates}")
        lines.append(f"• Class time: {item.details.time_text or '-'}")

        discount_label = ""
        if item.discount and item.discount > 0:
            discount_label = f" ({round(item.discount * 100)}% off)"
        lines.append(f"• Tuition: {self.money(item.final_fee)}{discount_label}")

        if item.recording_days > 0:
            share = round(self.fee_policy.recording_rate() * 100)
            lines.append(f"= Live classes ({item.live_days} days): {self.money(item.normal_fee)}")
            lines.append(
                f"+ Recorded lectures ({item.recording_days} days): "
                f"{self.money(item.recording_fee)} ({share}% of list price)"
            )
        return lines

    def textbook_lines(self, option: str, amount: int) -> list[str]:
        if option == "tbd":
            return ["Textbook fee will be announced later."]
        if option == "amount" and amount > 0:
            return [f"Textbook fee: {self.money(amount)}"]
        return []

    def generate_text(
        self,
        student_name: str,
        cart: list[CartLineItem],
        textbook_option: str = "none",
        textbook_amount: int = 0,
        note: str = "",
    ) -> str:
        """Render the full quote.

        Args:
            student_name: Student the quote is addressed to.
            cart: Priced line items.
            textbook_option: Fallback textbook option ("none", "tbd", "amount")
                for items that do not set their own.
            textbook_amount: Fallback textbook amount.
            note: Fallback free-form note.

        Raises:
            QuoteError: If the student name is blank or the cart is empty.
        """
        if not (student_name or "").strip():
            raise QuoteError("Student name is missing.")
        if not cart:
            raise QuoteError("No course selected.")

        multiple = len(cart) > 1
        bills_textbook = False
        parts = [f"{self.config.greeting}\n\nStudent: {strip_duplicate_suffix(student_name)}\n"]

        for index, item in enumerate(cart, start=1):
            lines = self.item_lines(item)
            if multiple:
                option, amount, item_note = resolve_textbook(item, textbook_option, textbook_amount, note)
                textbook = self.textbook_lines(option, amount)
                lines.extend(textbook)
                bills_textbook = bills_textbook or (option == "amount" and amount > 0)
                if item_note:
                    lines.extend(["", item_note])
                parts.append(f"\n[Course {index}]\n")
            parts.append("\n".join(lines) + "\n")

        if multiple:
            total = sum(item.final_fee for item in cart)
            parts.append(f"\nTotal tuition: {self.money(total)}\n")
        else:
            option, amount, item_note = resolve_textbook(cart[0], textbook_option, textbook_amount, note)
            for line in self.textbook_lines(option, amount):
                parts.append(f"{line}\n")
            bills_textbook = option == "amount" and amount > 0
            if item_note:
                parts.append(f"\n{item_note}\n")

        parts.append(f"\n{self.config.tuition_account}\n")
        if bills_textbook:
            parts.append(f"\n{self.config.textbook_account}\n")

        return "".join(parts)


def generate_quote_text(
    catalog: CourseCatalog,
    student_name: str,
    cart: list[CartLineItem],
    textbook_option: str = "none",
    textbook_amount: int = 0,
    note: str = "",
) -> str:
    """Convenience wrapper around QuoteBuilder with default settings."""
    return QuoteBuilder(catalog).generate_text(
        student_name,
        cart,
        textbook_option=textbook_option,
        textbook_amount=textbook_amount,
        note=note,
    )
