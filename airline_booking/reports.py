"""Text and tabular renderings of the booking state."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd
from tabulate import tabulate

from .bank import PaymentAuthority
from .models import Booking, Flight, Passenger

BOOKED_MARK = "[X]"
FREE_MARK = "[ ]"


def format_timestamp(epoch_seconds: int) -> str:
    return datetime.fromtimestamp(epoch_seconds).strftime("%Y-%m-%d %H:%M:%S")


def _format_money(amount: float, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


def render_seat_map(flight: Flight) -> str:
    seat_map = flight.seat_map
    header = "  " + "".join(f"{column:>4}" for column in seat_map.columns)
    lines = [f"===== SEAT MAP FOR FLIGHT {flight.flight_no} =====", "", header]
    for row, occupied in seat_map.iter_rows():
        marks = "".join(f"{(BOOKED_MARK if taken else FREE_MARK):>4}" for taken in occupied)
        lines.append(f"{row:>2}{marks}")
    lines.append("")
    lines.append(f"{BOOKED_MARK} = Booked    {FREE_MARK} = Available")
    return "\n".join(lines)


def render_flights(flights: Iterable[Flight], currency: str = "ETB") -> str:
    rows = [
        [
            flight.flight_no,
            flight.destination,
            flight.day_time,
            flight.distance,
            flight.duration,
            flight.plane,
            flight.available_seats,
            _format_money(flight.price, currency),
        ]
        for flight in flights
    ]
    if not rows:
        return "No flights found!"
    headers = ["Code", "Destination", "Departure", "Distance", "Duration", "Aircraft", "Seats", "Price"]
    return tabulate(rows, headers=headers, tablefmt="github")


def render_bank_statement(bank: PaymentAuthority, currency: str = "ETB") -> str:
    rows = [[account.name, _format_money(account.balance, currency)] for account in bank]
    return tabulate(rows, headers=["Account", "Balance"], tablefmt="github")


def render_passengers(passengers: Iterable[Passenger]) -> str:
    rows = [
        [
            p.name,
            p.destination,
            p.passport,
            p.government_id,
            format_timestamp(p.registered_at),
        ]
        for p in passengers
    ]
    if not rows:
        return "No passengers registered!"
    headers = ["Name", "Destination", "Passport", "ID", "Registration Date"]
    return tabulate(rows, headers=headers, tablefmt="github")


def render_bookings(bookings: Iterable[Booking]) -> str:
    rows = [
        [
            b.booking_id,
            b.flight_no,
            b.passenger_id,
            b.seat_number,
            format_timestamp(b.booked_at),
            "Paid" if b.is_paid else "Unpaid",
        ]
        for b in bookings
    ]
    if not rows:
        return "No bookings found!"
    headers = ["Booking ID", "Flight", "Passenger ID", "Seat", "Booking Time", "Status"]
    return tabulate(rows, headers=headers, tablefmt="github")


def render_booking_detail(booking: Booking, passenger: Optional[Passenger]) -> str:
    lines = [
        "===== YOUR BOOKING =====",
        f"Booking ID: {booking.booking_id}",
        f"Flight: {booking.flight_no}",
        f"Seat: {booking.seat_number}",
        f"Booking Time: {format_timestamp(booking.booked_at)}",
        f"Status: {'Paid' if booking.is_paid else 'Unpaid'}",
    ]
    if passenger is not None:
        lines.extend(
            [
                "",
                "Passenger Details:",
                f"Name: {passenger.name}",
                f"Passport: {passenger.passport}",
                f"Contact: {passenger.contact}",
            ]
        )
    return "\n".join(lines)


def bookings_frame(bookings: Iterable[Booking], flights: Dict[str, Flight]) -> pd.DataFrame:
    data: List[Dict[str, object]] = []
    for b in bookings:
        flight = flights.get(b.flight_no)
        data.append(
            {
                "Booking ID": b.booking_id,
                "Flight": b.flight_no,
                "Destination": flight.destination if flight else None,
                "Passenger ID": b.passenger_id,
                "Seat": b.seat_number,
                "Booked At": datetime.fromtimestamp(b.booked_at),
                "Paid": b.is_paid,
                "Fare": flight.price if flight else None,
            }
        )
    return pd.DataFrame(
        data,
        columns=["Booking ID", "Flight", "Destination", "Passenger ID", "Seat", "Booked At", "Paid", "Fare"],
    )


def passengers_frame(passengers: Iterable[Passenger]) -> pd.DataFrame:
    data = [
        {
            "Name": p.name,
            "Passport": p.passport,
            "ID": p.government_id,
            "Contact": p.contact,
            "Destination": p.destination,
            "Registered At": datetime.fromtimestamp(p.registered_at),
        }
        for p in passengers
    ]
    return pd.DataFrame(
        data, columns=["Name", "Passport", "ID", "Contact", "Destination", "Registered At"]
    )


def export_frame(dataframe: pd.DataFrame, path: Path, *, sheet_name: str = "Report") -> Path:
    """Write ``dataframe`` as CSV or XLSX depending on the file suffix."""

    suffix = path.suffix.lower()
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        dataframe.to_csv(path, index=False)
    elif suffix == ".xlsx":
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            dataframe.to_excel(writer, index=False, sheet_name=sheet_name)
    else:
        raise ValueError(f"Unsupported export format '{path.suffix}'. Use .csv or .xlsx")
    return path
