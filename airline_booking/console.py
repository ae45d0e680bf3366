"""Interactive text menus for passengers and administrators."""
from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional

from . import reports
from .config import Settings, authenticate_admin
from .errors import BookingError, CatalogError, PersistenceError
from .models import PassengerDraft
from .services import (
    AirlineState,
    BookingEngine,
    add_aircraft,
    add_flight,
    delete_aircraft,
    delete_flight,
    save_state,
    search_flights,
)
from .validators import validate_id, validate_name, validate_passport, validate_phone

logger = logging.getLogger(__name__)

PASSENGER_MENU = """
===== PASSENGER MENU =====
1. View all flights
2. Search by destination
3. Book a flight
4. Cancel booking
5. View current booking
6. Postpone booking
0. Back"""

ADMIN_MENU = """
===== ADMIN MENU =====
1. Add aircraft
2. Add flight
3. Delete aircraft
4. Delete flight
5. View passengers
6. View bookings
7. Cancel a booking
8. Current state
0. Back"""

MAIN_MENU = """
===== AIRLINE BOOKING =====
1. Passenger
2. Admin
3. Bank statement
0. Exit"""


class Console:
    def __init__(
        self,
        state: AirlineState,
        settings: Settings,
        *,
        input_fn: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        engine: Optional[BookingEngine] = None,
    ) -> None:
        self.state = state
        self.settings = settings
        self.input_fn = input_fn
        self.output = output
        self.engine = engine or BookingEngine(state)

    def ask(self, prompt: str) -> str:
        return self.input_fn(prompt).strip()

    def ask_until(self, prompt: str, predicate: Callable[[str], bool], error: str) -> str:
        while True:
            value = self.ask(prompt)
            if predicate(value):
                return value
            self.output(error)

    def save(self) -> None:
        try:
            save_state(self.state, self.settings)
        except PersistenceError as exc:
            logger.error("Persisting state failed: %s", exc)
            self.output(str(exc))

    def _seat_prompts(self, prompt: str) -> Iterator[str]:
        while True:
            seat = self.ask(prompt)
            if not seat:
                return
            yield seat

    def _report_rejection(self, exc: Exception) -> None:
        self.output(f"{exc}. Please choose another seat.")

    def collect_draft(self) -> PassengerDraft:
        return PassengerDraft(
            name=self.ask_until("Enter your name (max 20 chars): ", validate_name, "Invalid name!"),
            passport=self.ask_until(
                "Enter passport (max 10 chars): ", validate_passport, "Invalid passport!"
            ),
            government_id=self.ask_until("Enter ID (max 10 digits): ", validate_id, "Invalid ID!"),
            contact=self.ask_until(
                "Enter phone (max 15 digits): ", validate_phone, "Invalid phone!"
            ),
        )

    # passenger actions

    def view_flights(self) -> None:
        self.output(reports.render_flights(self.state.flights.values(), self.settings.currency))

    def search(self) -> None:
        destination = self.ask("Enter destination: ")
        self.output(reports.render_flights(search_flights(self.state, destination=destination), self.settings.currency))

    def book(self) -> None:
        self.view_flights()
        flight_no = self.ask("Enter flight number: ")
        try:
            flight = self.engine.get_flight(flight_no)
            if flight.available_seats <= 0:
                self.output("No seats available!")
                return
            self.output(reports.render_seat_map(flight))
            draft = self.collect_draft()
            receipt = self.engine.book(
                flight_no,
                draft,
                self._seat_prompts("Choose your seat (e.g., A1, B3): "),
                confirm=self._confirm_payment,
                on_rejected=self._report_rejection,
            )
        except BookingError as exc:
            self.output(str(exc))
            return
        if receipt.balance is not None:
            self.output(f"Payment processed successfully! New balance: {receipt.balance:,.2f} {self.settings.currency}")
        self.output(f"Booking successful! Your Booking ID: {receipt.booking.booking_id}")
        self.save()

    def _confirm_payment(self, amount: float) -> bool:
        answer = self.ask(f"Total to pay: {amount:,.2f} {self.settings.currency}. Confirm payment? (1=Yes, 0=No): ")
        return answer == "1"

    def cancel(self) -> None:
        booking_id = self.ask("Enter booking ID: ")
        try:
            self.engine.cancel(booking_id)
        except BookingError as exc:
            self.output(str(exc))
            return
        self.output("Booking cancelled successfully!")
        self.save()

    def view_booking(self) -> None:
        passenger_id = self.ask("Enter your ID: ")
        found = self.engine.current_bookings(passenger_id)
        if not found:
            self.output("No booking found for this ID!")
            return
        for booking, passenger in found:
            self.output(reports.render_booking_detail(booking, passenger))

    def postpone(self) -> None:
        booking_id = self.ask("Enter your booking ID: ")
        verify_id = self.ask("Enter your passenger ID to verify: ")
        try:
            booking = self.engine.verify_owner(booking_id, verify_id)
        except BookingError as exc:
            self.output(str(exc))
            return
        self.output("Enter new booking details:")
        draft = self.collect_draft()
        flight = self.state.flights.get(booking.flight_no)
        if flight is not None:
            self.output(reports.render_seat_map(flight))
        try:
            self.engine.postpone(
                booking_id,
                verify_id,
                draft,
                self._seat_prompts("Choose your new seat: "),
                on_rejected=self._report_rejection,
            )
        except BookingError as exc:
            self.output(str(exc))
            self.save()
            return
        self.output("Booking postponed successfully!")
        self.save()

    # admin actions

    def add_aircraft(self) -> None:
        model = self.ask("Aircraft model: ")
        seats = self.ask("Total seats: ")
        features = self.ask("Features (comma separated): ")
        try:
            add_aircraft(self.state, model=model, total_seats=int(seats), features=features.split(","))
        except (CatalogError, ValueError) as exc:
            self.output(f"Could not add aircraft: {exc}")
            return
        self.output("Aircraft added successfully!")

    def add_flight(self) -> None:
        if not self.state.aircraft:
            self.output("No aircraft available! Add an aircraft first.")
            return
        for aircraft in self.state.aircraft.values():
            self.output(f"- {aircraft.model} ({aircraft.total_seats} seats)")
        try:
            add_flight(
                self.state,
                flight_no=self.ask("Flight number: "),
                aircraft_model=self.ask("Aircraft model: "),
                destination=self.ask("Destination: "),
                day_time=self.ask("Departure day/time: "),
                distance=self.ask("Distance: "),
                duration=self.ask("Duration: "),
                price=float(self.ask("Price: ")),
            )
        except (CatalogError, ValueError) as exc:
            self.output(f"Could not add flight: {exc}")
            return
        self.output("Flight added successfully!")
        self.save()

    def delete_aircraft(self) -> None:
        self.current_state()
        try:
            delete_aircraft(self.state, self.ask("Aircraft model to delete: "))
        except CatalogError as exc:
            self.output(str(exc))
            return
        self.output("Aircraft deleted successfully!")

    def delete_flight(self) -> None:
        self.current_state()
        try:
            removed = delete_flight(self.state, self.ask("Flight number to delete: "))
        except CatalogError as exc:
            self.output(str(exc))
            return
        self.output(f"Flight deleted successfully! {len(removed)} booking(s) removed.")
        self.save()

    def current_state(self) -> None:
        if self.state.aircraft:
            for aircraft in self.state.aircraft.values():
                features = ", ".join(aircraft.features) or "-"
                self.output(f"Aircraft {aircraft.model}: {aircraft.total_seats} seats [{features}]")
        else:
            self.output("No aircraft registered.")
        if self.state.flights:
            for flight in self.state.flights.values():
                self.output(
                    f"{flight.flight_no} to {flight.destination} ({flight.plane}) - "
                    f"{flight.available_seats} seats available"
                )
        else:
            self.output("No flights scheduled.")

    def admin(self) -> None:
        if not authenticate_admin(self.ask("Enter admin password: "), self.settings):
            self.output("Authentication failed!")
            return
        actions = {
            "1": self.add_aircraft,
            "2": self.add_flight,
            "3": self.delete_aircraft,
            "4": self.delete_flight,
            "5": lambda: self.output(reports.render_passengers(self.state.passengers)),
            "6": lambda: self.output(reports.render_bookings(self.state.ledger)),
            "7": self._admin_cancel,
            "8": self.current_state,
        }
        self._loop(ADMIN_MENU, actions)

    def _admin_cancel(self) -> None:
        self.output(reports.render_bookings(self.state.ledger))
        if len(self.state.ledger):
            self.cancel()

    def passenger(self) -> None:
        actions = {
            "1": self.view_flights,
            "2": self.search,
            "3": self.book,
            "4": self.cancel,
            "5": self.view_booking,
            "6": self.postpone,
        }
        self._loop(PASSENGER_MENU, actions)

    def _loop(self, menu: str, actions: dict) -> None:
        while True:
            self.output(menu)
            choice = self.ask("Enter choice: ")
            if choice == "0":
                return
            action = actions.get(choice)
            if action is None:
                self.output("Invalid choice!")
                continue
            action()

    def run(self) -> None:
        actions = {
            "1": self.passenger,
            "2": self.admin,
            "3": lambda: self.output(reports.render_bank_statement(self.state.bank, self.settings.currency)),
        }
        try:
            self._loop(MAIN_MENU, actions)
        except (EOFError, KeyboardInterrupt):
            self.output("")
        self.save()
        self.output("Goodbye!")
