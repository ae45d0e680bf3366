"""Command line interface for the airline booking system."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from . import reports
from .config import Settings
from .console import Console
from .dataset import generate_sample_data
from .errors import BookingError, PersistenceError
from .models import PassengerDraft
from .services import (
    AirlineState,
    BookingEngine,
    list_available_flights,
    load_state,
    save_state,
    search_flights,
)

logger = logging.getLogger(__name__)


def _add_draft_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", required=True, help="Passenger name (max 20 characters).")
    parser.add_argument("--passport", required=True, help="Passport number (max 10 letters or digits).")
    parser.add_argument("--id", dest="government_id", required=True, help="Government ID (max 10 digits).")
    parser.add_argument("--phone", required=True, help="Contact phone (max 15 digits).")
    parser.add_argument(
        "--seat",
        dest="seats",
        action="append",
        required=True,
        help="Seat to request, e.g. A1. Repeat to give fallbacks tried in order.",
    )


def _draft_from_args(args: argparse.Namespace) -> PassengerDraft:
    return PassengerDraft(
        name=args.name,
        passport=args.passport,
        government_id=args.government_id,
        contact=args.phone,
    )


def parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Book, cancel and postpone airline seats.")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding flights.txt, passengers.txt and bookings.txt.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: AIRLINE_LOG_LEVEL or WARNING).",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("menu", help="Run the interactive console (default).")

    flights = sub.add_parser("flights", help="List flights.")
    flights.add_argument("--available", action="store_true", help="Only flights with free seats.")

    search = sub.add_parser("search", help="Search flights by destination.")
    search.add_argument("destination")

    seatmap = sub.add_parser("seatmap", help="Show a flight's seat map.")
    seatmap.add_argument("flight_no")

    book = sub.add_parser("book", help="Book a seat on a flight.")
    book.add_argument("flight_no")
    _add_draft_arguments(book)
    book.add_argument(
        "--confirm",
        action="store_true",
        help="Confirm payment on booking for passengers without a prepaid account.",
    )

    cancel = sub.add_parser("cancel", help="Cancel a booking (no refund).")
    cancel.add_argument("booking_id")

    postpone = sub.add_parser("postpone", help="Move a booking to new details and a new seat.")
    postpone.add_argument("booking_id")
    postpone.add_argument("--verify-id", required=True, help="Passenger ID currently on the booking.")
    _add_draft_arguments(postpone)

    booking = sub.add_parser("booking", help="Show active bookings for a passenger ID.")
    booking.add_argument("passenger_id")

    sub.add_parser("bank", help="Show the prepaid balance statement.")

    export = sub.add_parser("export", help="Export bookings or passengers to CSV or XLSX.")
    export.add_argument("report", choices=["bookings", "passengers"])
    export.add_argument("path", type=Path)

    seed = sub.add_parser("seed", help="Populate the data files with sample flights and bookings.")
    seed.add_argument("--flights", type=int, default=6)
    seed.add_argument("--bookings", type=int, default=40)

    return parser.parse_args(list(argv))


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if args.data_dir is not None:
        settings.data_dir = args.data_dir
    if args.log_level:
        settings.log_level = args.log_level
    return settings


def _run(args: argparse.Namespace, settings: Settings, state: AirlineState) -> List[str]:
    """Execute a non-interactive command and return the lines to print."""

    engine = BookingEngine(state)
    command = args.command
    if command == "flights":
        flights = list_available_flights(state) if args.available else state.flights.values()
        return [reports.render_flights(flights, settings.currency)]
    if command == "search":
        return [reports.render_flights(search_flights(state, destination=args.destination), settings.currency)]
    if command == "seatmap":
        return [reports.render_seat_map(engine.get_flight(args.flight_no))]
    if command == "booking":
        found = engine.current_bookings(args.passenger_id)
        if not found:
            return ["No booking found for this ID!"]
        return [reports.render_booking_detail(booking, passenger) for booking, passenger in found]
    if command == "bank":
        return [reports.render_bank_statement(state.bank, settings.currency)]
    if command == "export":
        if args.report == "bookings":
            frame = reports.bookings_frame(state.ledger, state.flights)
        else:
            frame = reports.passengers_frame(state.passengers)
        path = reports.export_frame(frame, args.path, sheet_name=args.report.title())
        return [f"Exported {len(frame)} {args.report} to {path}"]

    if command == "book":
        receipt = engine.book(
            args.flight_no,
            _draft_from_args(args),
            args.seats,
            confirm=lambda amount: args.confirm,
        )
        lines = [f"Booking successful! Your Booking ID: {receipt.booking.booking_id} (seat {receipt.booking.seat_number})"]
        if receipt.balance is not None:
            lines.append(f"New balance: {receipt.balance:,.2f} {settings.currency}")
    elif command == "cancel":
        engine.cancel(args.booking_id)
        lines = ["Booking cancelled successfully!"]
    elif command == "postpone":
        booking = engine.postpone(args.booking_id, args.verify_id, _draft_from_args(args), args.seats)
        lines = [f"Booking {booking.booking_id} postponed to seat {booking.seat_number}"]
    elif command == "seed":
        summary = generate_sample_data(state, flights=args.flights, bookings=args.bookings)
        lines = [f"Created {summary['flights']} flights and {summary['bookings']} bookings"]
    else:
        raise ValueError(f"Unsupported command '{command}'.")

    try:
        save_state(state, settings)
    except PersistenceError as exc:
        logger.error("Persisting state failed: %s", exc)
        lines.append(str(exc))
    return lines


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = _settings_from_args(args)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        state = load_state(settings)
    except PersistenceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.command in (None, "menu"):
        Console(state, settings).run()
        return 0

    try:
        lines = _run(args, settings, state)
    except (BookingError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
