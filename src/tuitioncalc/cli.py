"""Command-line interface for the tuition calculator."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from tuitioncalc.cart.builder import CartBuilder
from tuitioncalc.catalog.repository import CatalogRepository
from tuitioncalc.domain.calendar import coerce_int, format_date_only, parse_date_only
from tuitioncalc.domain.models import CartInputs, CartLineItem, CourseInputs, ScheduleInput
from tuitioncalc.errors import CatalogError, InvalidLineItemError, QuoteError, UnknownCourseError
from tuitioncalc.output.pdf_generator import QuotePDFGenerator
from tuitioncalc.output.quote_text import QuoteBuilder
from tuitioncalc.pricing.calculator import TuitionCalculator
from tuitioncalc.scheduling.schedule_resolver import get_schedule_weeks


def parse_break_arg(value: str) -> tuple[str, str]:
    """Parse ``START:END`` (or a single date) into a break-range pair."""
    start, _, end = value.partition(":")
    if parse_date_only(start) is None or (end and parse_date_only(end) is None):
        raise argparse.ArgumentTypeError(f"Invalid break range: {value!r}")
    return start, end or start


def course_inputs_from_args(args: argparse.Namespace) -> CourseInputs:
    return CourseInputs(
        period=args.weeks,
        start_date=args.start,
        course_type=args.course_type,
        level=args.level,
        campus=args.campus,
        dynamic_time=args.time,
        skip_weeks=tuple(args.skip or ()),
        recording_dates=tuple(args.recording or ()),
        exclude_math=args.exclude_math,
    )


def course_inputs_from_mapping(data: dict) -> CourseInputs:
    """Build CourseInputs from a JSON item using the calculator's field names."""
    return CourseInputs(
        period=data.get("period", 0),
        start_date=data.get("startDate"),
        course_type=data.get("courseType"),
        level=data.get("level") or data.get("drwLevel"),
        campus=data.get("selectedSatCampus") or data.get("campus"),
        dynamic_time=data.get("selectedDynamicTime") or data.get("dynamicTime"),
        skip_weeks=tuple(data.get("skipWeeks") or ()),
        recording_dates=tuple(data.get("recordingDates") or ()),
        exclude_math=bool(data.get("excludeMath", False)),
    )


def load_selections(path: str, default_discount: float) -> list[tuple[str, float, dict]]:
    """Read a cart file: a JSON list of items, each naming its ``course``.

    Raises:
        ValueError: If the file cannot be read, is not a JSON list, or an
            item has no course or a non-numeric discount.
    """
    items_path = Path(path)
    try:
        raw_items = json.loads(items_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read items file {items_path}: {exc}") from exc
    if not isinstance(raw_items, list):
        raise ValueError(f"Items file {items_path} must contain a JSON list")

    selections = []
    for index, item in enumerate(raw_items, start=1):
        if not isinstance(item, dict) or not item.get("course"):
            raise ValueError(f"Item {index} in {items_path} has no course")
        try:
            discount = float(item.get("discount", default_discount))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Item {index} in {items_path} has an invalid discount") from exc
        selections.append((str(item["course"]), discount, item))
    return selections


def apply_item_extras(item: CartLineItem, data: dict) -> None:
    """Copy per-item textbook and note settings from a cart-file entry."""
    if data.get("textbookOption") is not None:
        item.textbook_option = str(data["textbookOption"])
    if data.get("textbookAmount") is not None:
        item.textbook_amount = coerce_int(data["textbookAmount"]) or 0
    note = data.get("customNote", data.get("note"))
    if note is not None:
        item.note = str(note)


def run_schedule(args: argparse.Namespace) -> int:
    """Print the resolved schedule for raw inputs."""
    result = get_schedule_weeks(
        ScheduleInput(
            start_date=parse_date_only(args.start),
            paid_weeks=args.weeks,
            skip_weeks=tuple(args.skip or ()),
            course_days=tuple(args.days or ()),
            end_day=args.end_day,
            break_ranges=tuple(args.breaks or ()),
        )
    )

    print(f"Paid weeks:      {args.weeks}")
    print(f"Schedule weeks:  {result.schedule_weeks}")
    print(f"End date:        {format_date_only(result.end_date) or '-'}")
    print(f"Skip weeks:      {', '.join(map(str, result.normalized_skip_weeks)) or '-'}")
    print(f"Break weeks:     {', '.join(map(str, sorted(result.break_week_set))) or '-'}")
    if not result.converged:
        print("Warning: schedule did not settle within the iteration cap")
    return 0


def run_fee(args: argparse.Namespace, repository: CatalogRepository) -> int:
    """Print the fee preview for one course selection."""
    calculator = TuitionCalculator(repository.current)
    result = calculator.calculate_total_fee(args.course, args.discount, course_inputs_from_args(args))

    if result.error:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    if result.details is None:
        print(f"Error: cannot price course {args.course!r}", file=sys.stderr)
        return 1

    details = result.details
    print(f"Course:       {repository.current.course_name(args.course)}")
    print(f"Period:       {details.duration_text}")
    print(f"Class time:   {details.time_text or '-'}")
    print(f"Weekly fee:   {details.weekly_fee:,}")
    print(f"List price:   {details.total_fee:,}")
    print(f"Amount due:   {result.total_fee:,}")
    return 0


def run_quote(args: argparse.Namespace, repository: CatalogRepository) -> int:
    """Build line items and print the quote text or write a PDF."""
    catalog = repository.current
    builder = CartBuilder(catalog)

    if args.items:
        try:
            selections = load_selections(args.items, args.discount)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    else:
        if not args.course:
            print("Error: --course or --items is required", file=sys.stderr)
            return 2
        selections = [(args.course, args.discount, None)]

    cart = []
    for course_key, discount, data in selections:
        inputs = course_inputs_from_args(args) if data is None else course_inputs_from_mapping(data)
        try:
            item = builder.create_cart_item(
                CartInputs(
                    student_name=args.student,
                    course_key=course_key,
                    course=inputs,
                    discount=discount,
                ),
                current_cart=cart,
            )
        except InvalidLineItemError as exc:
            print(f"Cannot add {course_key}:\n{exc}", file=sys.stderr)
            return 1
        except UnknownCourseError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        if data is not None:
            apply_item_extras(item, data)
        cart.append(item)

    quote_builder = QuoteBuilder(catalog)
    try:
        if args.output:
            QuotePDFGenerator(catalog, quote_builder=quote_builder).generate(
                args.student,
                cart,
                args.output,
                textbook_option=args.textbook,
                textbook_amount=args.textbook_amount,
                note=args.note,
            )
            print(f"Quote written to {args.output}")
        else:
            print(
                quote_builder.generate_text(
                    args.student,
                    cart,
                    textbook_option=args.textbook,
                    textbook_amount=args.textbook_amount,
                    note=args.note,
                )
            )
    except QuoteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--catalog", "-C", required=True, help="Catalog JSON file")
    parser.add_argument("--course", "-k", help="Course key")
    parser.add_argument("--weeks", "-w", type=int, default=4, help="Paid weeks (default: 4)")
    parser.add_argument("--start", "-s", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--skip", type=int, nargs="*", help="Skip-week numbers")
    parser.add_argument("--discount", "-d", type=float, default=0.0, help="Discount rate, e.g. 0.1")
    parser.add_argument("--course-type", "-t", help="Course type (online/offline)")
    parser.add_argument("--campus", help="Campus option")
    parser.add_argument("--time", help="Time option label")
    parser.add_argument("--level", help="Level for level-based courses")
    parser.add_argument("--recording", nargs="*", help="Recorded lecture dates")
    parser.add_argument("--exclude-math", action="store_true", help="Exclude the math component")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Tuition Calc - course schedule and tuition calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s schedule --start 2026-01-05 --weeks 4 --skip 2
  %(prog)s schedule --start 2026-01-05 --weeks 4 --break 2026-01-12:2026-01-16

  %(prog)s fee -C catalog.json -k sat_1500 -s 2026-01-05 -w 4 -t online
  %(prog)s quote -C catalog.json -k sat_1500 -s 2026-01-05 --student Kim
  %(prog)s quote -C catalog.json --items cart.json --student Kim -o quote.pdf
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    schedule_parser = subparsers.add_parser("schedule", help="Resolve schedule weeks and end date")
    schedule_parser.add_argument("--start", "-s", required=True, help="Start date (YYYY-MM-DD)")
    schedule_parser.add_argument("--weeks", "-w", type=int, required=True, help="Paid weeks")
    schedule_parser.add_argument("--skip", type=int, nargs="*", help="Skip-week numbers")
    schedule_parser.add_argument(
        "--days",
        type=int,
        nargs="*",
        default=[1, 2, 3, 4, 5],
        help="Class weekdays, 0=Sun..6=Sat (default: Mon-Fri)",
    )
    schedule_parser.add_argument("--end-day", type=int, default=5, help="End weekday (default: 5, Friday)")
    schedule_parser.add_argument(
        "--break",
        dest="breaks",
        type=parse_break_arg,
        action="append",
        help="Break range START:END (repeatable)",
    )

    fee_parser = subparsers.add_parser("fee", help="Preview the fee for a course selection")
    add_selection_arguments(fee_parser)

    quote_parser = subparsers.add_parser("quote", help="Build line items and render a quote")
    add_selection_arguments(quote_parser)
    quote_parser.add_argument("--student", required=True, help="Student name")
    quote_parser.add_argument("--items", help="JSON file with a list of course selections")
    quote_parser.add_argument(
        "--textbook",
        default="none",
        choices=["none", "tbd", "amount"],
        help="Textbook option (default: none)",
    )
    quote_parser.add_argument("--textbook-amount", type=int, default=0, help="Textbook fee")
    quote_parser.add_argument("--note", default="", help="Note printed with the quote")
    quote_parser.add_argument("--output", "-o", help="Write a PDF quote to this path")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "schedule":
        return run_schedule(args)
    elif args.command in ("fee", "quote"):
        repository = CatalogRepository()
        try:
            repository.load_file(args.catalog)
        except CatalogError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        if args.command == "fee":
            if not args.course:
                print("Error: --course is required", file=sys.stderr)
                return 2
            return run_fee(args, repository)
        return run_quote(args, repository)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
