import pytest

from airline_booking.config import Settings
from airline_booking.errors import PersistenceError
from airline_booking.models import Booking, Flight, Passenger, PassengerDraft
from airline_booking.services import (
    AirlineState,
    BookingEngine,
    load_state,
    rebuild_seat_state_from_bookings,
    save_state,
)
from airline_booking.storage import decode_booking, decode_flight, encode_flight

NOW = 1_700_000_000


def _flight(flight_no="AF101", destination="Paris", seats=100):
    return Flight(flight_no, destination, "Mon 08:00", "5600km", "Boeing 787", "7h", seats, 2500.0)


def _state_with_booking():
    state = AirlineState(flights={"AF101": _flight()})
    engine = BookingEngine(state, clock=lambda: NOW)
    engine.book(
        "AF101",
        PassengerDraft("Abebe Bikila", "EP1001", "1001", "251911000001"),
        "A1",
    )
    return state, engine


def test_serialize_state_emits_comma_separated_records():
    state, engine = _state_with_booking()

    flight_lines, passenger_lines, booking_lines = engine.serialize_state()

    assert flight_lines == ["AF101,Paris,Mon 08:00,5600km,Boeing 787,7h,100,2500"]
    assert passenger_lines == [f"Abebe Bikila,EP1001,1001,251911000001,Paris,{NOW}"]
    assert booking_lines == [f"B1000,AF101,1001,A1,{NOW},1"]


def test_save_and_load_rebuilds_seats_and_roster(tmp_path):
    settings = Settings(data_dir=tmp_path / "data")
    state, _ = _state_with_booking()

    save_state(state, settings)
    loaded = load_state(settings)

    flight = loaded.flights["AF101"]
    assert flight.available_seats == 99
    assert not flight.seat_map.is_free("A1")
    assert flight.roster.find("1001").name == "Abebe Bikila"
    assert flight.roster.find("1001").seat_number == "A1"
    assert flight.is_consistent()
    assert loaded.ledger.next_booking_id() == "B1001"


def test_cancelled_booking_id_is_not_reissued_after_reload(tmp_path):
    settings = Settings(data_dir=tmp_path)
    state, engine = _state_with_booking()
    hanan = PassengerDraft("Hanan Daye", "EP77", "77", "251900000077")
    second = engine.book("AF101", hanan, "A2").booking
    assert second.booking_id == "B1001"
    engine.cancel("B1001")

    save_state(state, settings)
    reloaded = load_state(settings)
    rebooked = BookingEngine(reloaded, clock=lambda: NOW).book("AF101", hanan, "A3").booking

    assert rebooked.booking_id == "B1002"
    assert (tmp_path / "booking_sequence.txt").read_text(encoding="utf-8") == "1002\n"


def test_malformed_booking_sequence_falls_back_to_records(tmp_path):
    (tmp_path / "bookings.txt").write_text(f"B1004,AF101,1001,A1,{NOW},1\n", encoding="utf-8")
    (tmp_path / "booking_sequence.txt").write_text("not-a-number\n", encoding="utf-8")

    state = load_state(Settings(data_dir=tmp_path))

    assert state.ledger.next_booking_id() == "B1005"


def test_loading_twice_does_not_drift_availability(tmp_path):
    settings = Settings(data_dir=tmp_path)
    state, _ = _state_with_booking()
    save_state(state, settings)

    save_state(load_state(settings), settings)
    reloaded = load_state(settings)

    assert reloaded.flights["AF101"].available_seats == 99


def test_rebuild_skips_unplaceable_bookings():
    flights = [_flight()]
    bookings = [
        Booking("B1000", "AF101", "1", "A1", NOW),
        Booking("B1001", "AF101", "2", "A1", NOW),
        Booking("B1002", "AF101", "3", "Z9", NOW),
        Booking("B1003", "AF999", "4", "A2", NOW),
        Booking("B1004", "AF101", "1", "A3", NOW),
    ]
    passengers = [Passenger("One", "P1", "1", "11", destination="Paris", registered_at=NOW)]

    skipped = rebuild_seat_state_from_bookings(flights, bookings, passengers)

    assert [b.booking_id for b in skipped] == ["B1001", "B1002", "B1003", "B1004"]
    assert flights[0].available_seats == 99
    assert flights[0].roster.find("1").name == "One"
    assert flights[0].seat_map.is_free("A3")
    assert flights[0].is_consistent()


def test_rebuild_creates_placeholder_for_unregistered_passenger():
    flight = _flight()
    rebuild_seat_state_from_bookings([flight], [Booking("B1000", "AF101", "77", "b2", NOW)])

    entry = flight.roster.find("77")
    assert entry.seat_number == "B2"
    assert entry.destination == "Paris"
    assert not flight.seat_map.is_free("B2")


def test_load_reads_hand_written_files_and_skips_malformed_lines(tmp_path):
    (tmp_path / "flights.txt").write_text(
        "AF101,Paris,Mon 08:00,5600km,Boeing 787,7h,100,2500\nbroken line\n", encoding="utf-8"
    )
    (tmp_path / "bookings.txt").write_text(
        f"B1000,AF101,1001,A1,{NOW},1\nB1001,AF101,1002,C3,{NOW},0\n", encoding="utf-8"
    )

    state = load_state(Settings(data_dir=tmp_path))

    flight = state.flights["AF101"]
    assert list(state.flights) == ["AF101"]
    assert flight.available_seats == 98
    assert sorted(flight.seat_map.occupied_seats()) == ["A1", "C3"]
    assert state.ledger.find_by_booking_id("B1001").is_paid is False
    assert state.passengers == []


def test_missing_files_load_as_empty_state(tmp_path):
    state = load_state(Settings(data_dir=tmp_path / "absent"))
    assert state.flights == {}
    assert len(state.ledger) == 0
    assert len(state.bank) == 8


def test_failed_save_leaves_memory_untouched(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    state, _ = _state_with_booking()

    with pytest.raises(PersistenceError):
        save_state(state, Settings(data_dir=blocker))

    assert len(state.ledger) == 1
    assert not state.flights["AF101"].seat_map.is_free("A1")


def test_codecs_handle_fractional_prices_and_lowercase_seats():
    flight = decode_flight("AF7,Cairo,Fri,900km,Dash 8,2h,70,1999.5")
    assert flight.price == 1999.5
    assert encode_flight(flight).endswith(",70,1999.5")
    assert decode_booking("B1000,AF7,1,c4,10,1").seat_number == "C4"
    assert decode_booking("B1000,AF7,1, c4 ,10,1").seat_number == "C4"
