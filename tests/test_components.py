import pytest

from airline_booking.bank import PaymentAuthority
from airline_booking.errors import InvalidSeatFormat, SeatUnavailable, SeatUnknown
from airline_booking.ledger import Ledger
from airline_booking.models import Booking, Flight, Passenger
from airline_booking.roster import Roster
from airline_booking.seating import SeatMap, is_valid_format
from airline_booking.validators import validate_id, validate_name, validate_passport, validate_phone


def _passenger(government_id, name="Test"):
    return Passenger(name=name, passport="P1", government_id=government_id, contact="1")


def test_seat_grid_is_fixed_at_one_hundred_seats():
    seat_map = SeatMap()
    assert len(seat_map) == 100
    assert seat_map.exists("a1")
    assert seat_map.exists("J10")
    assert not seat_map.exists("K1")
    assert not seat_map.exists("A11")


def test_flight_capacity_does_not_change_grid_size():
    flight = Flight("AF1", "Paris", "", "", "Dash 8", "", total_seats=70, price=100.0)
    assert len(flight.seat_map) == 100
    assert flight.available_seats == 70


@pytest.mark.parametrize("seat", ["A1", "b10", "J9"])
def test_valid_seat_formats(seat):
    assert is_valid_format(seat)


@pytest.mark.parametrize("seat", ["1A", "A", "", "AA1", "A1B"])
def test_invalid_seat_formats(seat):
    assert not is_valid_format(seat)


def test_reserve_and_release():
    seat_map = SeatMap()
    assert seat_map.reserve("c3") == "C3"
    assert not seat_map.is_free("C3")
    with pytest.raises(SeatUnavailable):
        seat_map.reserve("C3")
    with pytest.raises(SeatUnknown):
        seat_map.reserve("K1")
    with pytest.raises(InvalidSeatFormat):
        seat_map.reserve("3C")

    assert seat_map.release("C3") is True
    assert seat_map.release("C3") is False
    assert seat_map.release("Z99") is False
    assert seat_map.is_free("C3")
    with pytest.raises(SeatUnknown):
        seat_map.is_free("K1")


def test_roster_keeps_insertion_order_and_forgets_removed():
    roster = Roster()
    for government_id in ("1", "2", "3"):
        roster.add(_passenger(government_id))

    removed = roster.remove_by_identity("2")
    roster.add(_passenger("4"))

    assert removed.government_id == "2"
    assert roster.remove_by_identity("2") is None
    assert [p.government_id for p in roster] == ["1", "3", "4"]
    assert len(roster) == 3


def test_roster_rejects_duplicates_and_replaces_in_place():
    roster = Roster()
    roster.add(_passenger("1"))
    roster.add(_passenger("2"))
    with pytest.raises(ValueError):
        roster.add(_passenger("1"))

    assert roster.replace("1", _passenger("9", name="New")) is True
    assert roster.replace("404", _passenger("5")) is False
    assert [p.government_id for p in roster] == ["9", "2"]
    assert roster.find("9").name == "New"


def test_ledger_lookups_and_cancel():
    ledger = Ledger()
    first = ledger.create("AF1", "100", "A1", booked_at=1)
    second = ledger.create("AF2", "100", "B1", booked_at=2, is_paid=False)
    ledger.create("AF1", "200", "A2", booked_at=3)

    assert first.booking_id == "B1000"
    assert second.booking_id == "B1001"
    assert [b.flight_no for b in ledger.find_by_passenger_id("100")] == ["AF1", "AF2"]
    assert [b.seat_number for b in ledger.find_by_flight_id("AF1")] == ["A1", "A2"]
    assert ledger.has_identity_on_flight("100", "AF1")
    assert not ledger.has_identity_on_flight("100", "AF1", exclude="B1000")

    assert ledger.cancel("B1000") is first
    assert ledger.cancel("B1000") is None
    assert ledger.find_by_booking_id("B1000") is None
    assert len(ledger) == 2


def test_ledger_sequence_continues_after_loaded_records():
    ledger = Ledger([Booking("B1005", "AF1", "1", "A1", 0), Booking("legacy", "AF1", "2", "A2", 0)])
    assert ledger.next_sequence == 1006

    purged = ledger.purge_flight("AF1")
    assert len(purged) == 2
    assert ledger.next_booking_id() == "B1006"


def test_ledger_resumes_from_stored_sequence():
    ledger = Ledger(next_sequence=1010)
    assert ledger.create("AF1", "1", "A1", booked_at=0).booking_id == "B1010"
    assert Ledger(next_sequence=5).next_booking_id() == "B1000"


def test_payment_authority_debits_only_when_covered():
    bank = PaymentAuthority()
    assert len(bank) == 8
    assert bank.has_account("Abebe Bikila")
    assert not bank.has_account("abebe bikila")
    assert bank.balance_of("Nobody") == 0

    assert bank.debit("Abiy Yosi", 5000) is True
    assert bank.balance_of("Abiy Yosi") == 0
    assert bank.debit("Abiy Yosi", 0.01) is False
    assert bank.debit("Nobody", 1) is False
    assert bank.balance_of("Abiy Yosi") == 0


def test_payment_authority_refuses_negative_seed():
    with pytest.raises(ValueError):
        PaymentAuthority([("Broke", -1.0)])


def test_field_validators():
    assert validate_name("Abebe Bikila")
    assert not validate_name("")
    assert not validate_name("x" * 21)
    assert validate_passport("EP12345")
    assert not validate_passport("EP-123")
    assert validate_id("1234567890")
    assert not validate_id("12345678901")
    assert not validate_id("12a")
    assert validate_phone("251911000000")
    assert not validate_phone("+251911")
