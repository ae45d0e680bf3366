from __future__ import annotations

import pandas as pd

from airline_booking import cli
from airline_booking.config import Settings
from airline_booking.console import Console
from airline_booking.services import load_state

FLIGHT_LINE = "AF101,Paris,Mon 08:00,5600km,Boeing 787,7h,100,2500\n"


def _seed_flight(tmp_path):
    (tmp_path / "flights.txt").write_text(FLIGHT_LINE, encoding="utf-8")


def _book_args(tmp_path, *extra):
    return [
        "--data-dir",
        str(tmp_path),
        "book",
        "AF101",
        "--name",
        "Abebe Bikila",
        "--passport",
        "EP1001",
        "--id",
        "1001",
        "--phone",
        "251911000001",
        *extra,
    ]


def test_book_command_persists_booking(tmp_path, capsys):
    _seed_flight(tmp_path)

    exit_code = cli.main(_book_args(tmp_path, "--seat", "1A", "--seat", "a1"))

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "B1000" in out
    assert "6,000.00 ETB" in out
    bookings = (tmp_path / "bookings.txt").read_text(encoding="utf-8")
    assert bookings.startswith("B1000,AF101,1001,A1,")
    assert (tmp_path / "flights.txt").read_text(encoding="utf-8") == FLIGHT_LINE


def test_cancel_unknown_booking_reports_error(tmp_path, capsys):
    _seed_flight(tmp_path)

    exit_code = cli.main(["--data-dir", str(tmp_path), "cancel", "B9999"])

    assert exit_code == 1
    assert "Error: Booking B9999 not found" in capsys.readouterr().err


def test_book_then_cancel_then_postpone_rejected(tmp_path, capsys):
    _seed_flight(tmp_path)
    assert cli.main(_book_args(tmp_path, "--seat", "B2")) == 0
    assert cli.main(["--data-dir", str(tmp_path), "cancel", "B1000"]) == 0

    exit_code = cli.main(
        [
            "--data-dir",
            str(tmp_path),
            "postpone",
            "B1000",
            "--verify-id",
            "1001",
            "--name",
            "Abebe Bikila",
            "--passport",
            "EP1001",
            "--id",
            "1001",
            "--phone",
            "251911000001",
            "--seat",
            "C3",
        ]
    )

    assert exit_code == 1
    assert (tmp_path / "bookings.txt").read_text(encoding="utf-8") == ""
    state = load_state(Settings(data_dir=tmp_path))
    assert state.flights["AF101"].available_seats == 100


def test_seed_and_export_bookings_csv(tmp_path, capsys):
    assert cli.main(["--data-dir", str(tmp_path), "seed", "--flights", "2", "--bookings", "5"]) == 0
    export_path = tmp_path / "reports" / "bookings.csv"

    assert cli.main(["--data-dir", str(tmp_path), "export", "bookings", str(export_path)]) == 0

    frame = pd.read_csv(export_path)
    state = load_state(Settings(data_dir=tmp_path))
    assert len(frame) == len(state.ledger)
    assert list(frame.columns)[:2] == ["Booking ID", "Flight"]


def test_seatmap_and_bank_commands(tmp_path, capsys):
    _seed_flight(tmp_path)
    cli.main(_book_args(tmp_path, "--seat", "A1"))
    capsys.readouterr()

    assert cli.main(["--data-dir", str(tmp_path), "seatmap", "AF101"]) == 0
    seat_map = capsys.readouterr().out
    assert "SEAT MAP FOR FLIGHT AF101" in seat_map
    assert " 1 [X] [ ]" in seat_map

    assert cli.main(["--data-dir", str(tmp_path), "bank"]) == 0
    # balances live in memory only, so a fresh process starts from the seed
    assert "8,500.00 ETB" in capsys.readouterr().out


def test_interactive_console_books_with_seat_retry(tmp_path):
    _seed_flight(tmp_path)
    settings = Settings(data_dir=tmp_path)
    state = load_state(settings)
    answers = iter(
        [
            "1",  # passenger menu
            "3",  # book
            "AF101",
            "Hanan Daye",
            "EP77",
            "77",
            "251900000077",
            "Z9",
            "c3",
            "0",
            "0",
        ]
    )
    printed = []

    Console(state, settings, input_fn=lambda prompt: next(answers), output=printed.append).run()

    [booking] = list(state.ledger)
    assert booking.seat_number == "C3"
    assert state.bank.balance_of("Hanan Daye") == 3500
    assert any("Z9 doesn't exist" in line for line in printed)
    assert any("Booking successful! Your Booking ID: B1000" in line for line in printed)
    assert "B1000,AF101,77,C3," in (tmp_path / "bookings.txt").read_text(encoding="utf-8")


def test_console_admin_requires_password(tmp_path):
    settings = Settings(data_dir=tmp_path, admin_password="secret")
    state = load_state(settings)
    answers = iter(["2", "wrong", "2", "secret", "1", "Dash 8", "70", "Meals", "0", "0"])
    printed = []

    Console(state, settings, input_fn=lambda prompt: next(answers), output=printed.append).run()

    assert "Authentication failed!" in printed
    assert state.aircraft["Dash 8"].total_seats == 70
