from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from boattours.models import BlackoutIntervals, Bookings, Vessels
from boattours.services.slots import Party, RejectionCode, admit_booking, calculate_day_availability
from boattours.services.slots import admission
from boattours.database import build_engine, init_db
from boattours.services.slots.clock import InvalidWallClockError, civil_day_bounds, to_instant, to_utc_naive

DAY = "2025-06-10"
PARIS = "Europe/Paris"


def _admit(db, config, now, time_str, party, day=DAY, **kwargs):
    return admit_booking(db, day, time_str, party, config=config, now=now, **kwargs)


def test_admission_persists_booking_on_rotated_vessel(db, config, now, make_vessels):
    ids = make_vessels(6, 6, 6)

    result = _admit(db, config, now, "10:10", Party(2, "FR"), adults=2, customer_name="Durand")

    assert result.ok
    booking = result.booking
    assert booking.vessel_id == ids[1]
    assert booking.start_at == datetime(2025, 6, 10, 8, 10)
    assert booking.end_at == datetime(2025, 6, 10, 8, 35)  # tour only, no buffer
    assert booking.status == "active"
    assert booking.customer_name == "Durand"
    assert not booking.staff_override


def test_join_until_capacity_then_reject(db, config, now, make_vessels):
    make_vessels(6, 6, 6)

    assert _admit(db, config, now, "10:00", Party(5, "FR")).ok

    rejected = _admit(db, config, now, "10:00", Party(2, "FR"))
    assert rejected.rejection.code == RejectionCode.CAPACITY_EXCEEDED

    assert _admit(db, config, now, "10:00", Party(1, "FR")).ok
    seats = sum(b.party_size for b in db.query(Bookings).all())
    assert seats == 6


def test_language_mismatch_is_rejected(db, config, now, make_vessels):
    make_vessels(6, 6, 6)
    _admit(db, config, now, "10:00", Party(4, "EN"))

    result = _admit(db, config, now, "10:00", Party(2, "FR"))

    assert result.rejection.code == RejectionCode.LANGUAGE_MISMATCH
    assert db.query(Bookings).count() == 1


def test_private_booking_is_exclusive(db, config, now, make_vessels):
    make_vessels(6, 6, 6)

    assert _admit(db, config, now, "10:00", Party(2, "FR", is_private=True)).ok
    result = _admit(db, config, now, "10:00", Party(1, "FR"))

    assert result.rejection.code == RejectionCode.PRIVACY_CONFLICT


def test_private_request_on_occupied_departure(db, config, now, make_vessels):
    make_vessels(6, 6, 6)
    _admit(db, config, now, "10:00", Party(1, "FR"))

    result = _admit(db, config, now, "10:00", Party(2, "FR", is_private=True))

    assert result.rejection.code == RejectionCode.PRIVACY_CONFLICT


def test_empty_fleet_is_a_configuration_rejection(db, config, now):
    result = _admit(db, config, now, "10:00", Party(2, "FR"))

    assert result.rejection.code == RejectionCode.NO_VESSEL_AVAILABLE
    assert result.rejection.is_configuration_error


def test_inactive_vessels_leave_rotation(db, config, now, make_vessels):
    make_vessels(6, status="maintenance")
    active = make_vessels(6, 6)

    result = _admit(db, config, now, "10:00", Party(2, "FR"))

    assert result.booking.vessel_id == active[0]


def test_full_day_blackout_blocks_admission(db, config, now, make_vessels):
    make_vessels(6, 6, 6)
    start, end = civil_day_bounds(DAY, PARIS)
    db.add(BlackoutIntervals(
        scope="day", start_at=to_utc_naive(start), end_at=to_utc_naive(end), reason="Strike",
    ))
    db.commit()

    result = _admit(db, config, now, "10:00", Party(2, "FR"))

    assert result.rejection.code == RejectionCode.SLOT_BLOCKED
    assert result.rejection.message == "Strike"


def test_partial_blackout_blocks_overlapping_departure(db, config, now, make_vessels):
    make_vessels(6, 6, 6)
    db.add(BlackoutIntervals(
        scope="time",
        start_at=to_utc_naive(to_instant(DAY, "14:00", PARIS)),
        end_at=to_utc_naive(to_instant(DAY, "15:00", PARIS)),
    ))
    db.commit()

    assert _admit(db, config, now, "14:20", Party(2, "FR")).rejection.code == RejectionCode.SLOT_BLOCKED
    assert _admit(db, config, now, "15:00", Party(2, "FR")).ok


@pytest.mark.parametrize("time_str", ["10:05", "12:30", "09:00", "18:00"])
def test_time_off_the_grid_is_rejected(db, config, now, make_vessels, time_str):
    make_vessels(6, 6, 6)
    result = _admit(db, config, now, time_str, Party(2, "FR"))
    assert result.rejection.code == RejectionCode.OUTSIDE_SERVICE_HOURS


def test_lead_time_applies_to_public_but_not_staff(db, config, make_vessels):
    make_vessels(6, 6, 6)
    now = to_instant(DAY, "13:27", PARIS)

    late = _admit(db, config, now, "13:30", Party(2, "FR"))
    assert late.rejection.code == RejectionCode.LEAD_TIME_VIOLATION

    counter = _admit(db, config, now, "13:30", Party(2, "FR"), staff_override=True)
    assert counter.ok
    assert counter.booking.staff_override


def test_staff_override_relaxes_capacity_but_not_blackouts(db, config, now, make_vessels):
    make_vessels(6, 6, 6)
    _admit(db, config, now, "10:00", Party(6, "FR"))

    assert _admit(db, config, now, "10:00", Party(3, "FR"), staff_override=True).ok

    start, end = civil_day_bounds(DAY, PARIS)
    db.add(BlackoutIntervals(scope="day", start_at=to_utc_naive(start), end_at=to_utc_naive(end)))
    db.commit()

    blocked = _admit(db, config, now, "10:10", Party(2, "FR"), staff_override=True)
    assert blocked.rejection.code == RejectionCode.SLOT_BLOCKED


def test_staff_override_keeps_private_departures_exclusive(db, config, now, make_vessels):
    make_vessels(6, 6, 6)
    assert _admit(db, config, now, "10:00", Party(2, "FR", is_private=True)).ok

    result = _admit(db, config, now, "10:00", Party(2, "EN"), staff_override=True)

    assert result.rejection.code == RejectionCode.PRIVACY_CONFLICT
    assert [(b.language, b.is_private) for b in db.query(Bookings).all()] == [("FR", True)]


def test_staff_override_keeps_language_homogeneous(db, config, now, make_vessels):
    make_vessels(6, 6, 6)
    _admit(db, config, now, "10:00", Party(2, "FR"))

    result = _admit(db, config, now, "10:00", Party(2, "EN"), staff_override=True)

    assert result.rejection.code == RejectionCode.LANGUAGE_MISMATCH


@pytest.mark.parametrize("day, time_str", [("2025-13-45", "10:00"), (DAY, "25:99")])
def test_malformed_wall_clock_fails_before_storage(db, config, now, make_vessels, day, time_str):
    make_vessels(6, 6, 6)

    with pytest.raises(InvalidWallClockError):
        _admit(db, config, now, time_str, Party(2, "FR"), day=day)
    assert not db.in_transaction()


def test_cancelled_booking_frees_its_seats(db, config, now, make_vessels):
    make_vessels(6, 6, 6)
    first = _admit(db, config, now, "10:00", Party(6, "EN")).booking
    assert not _admit(db, config, now, "10:00", Party(2, "FR")).ok

    first.status = "cancelled"
    db.commit()

    assert _admit(db, config, now, "10:00", Party(2, "FR")).ok


def test_near_miss_overlap_is_caught_at_commit(db, config, now, make_vessels):
    # two vessels: 10:20 goes back to the vessel that left at 10:00
    make_vessels(6, 6)
    assert _admit(db, config, now, "10:00", Party(2, "FR")).ok

    result = _admit(db, config, now, "10:20", Party(2, "FR"))

    assert result.rejection.code == RejectionCode.CAPACITY_EXCEEDED
    assert _admit(db, config, now, "10:30", Party(2, "FR")).ok


def test_read_and_write_paths_agree(db, config, now, make_vessels):
    make_vessels(6, 6, 6)
    _admit(db, config, now, "10:00", Party(4, "EN"))
    _admit(db, config, now, "10:10", Party(2, "FR", is_private=True))

    party = Party(2, "FR")
    open_slots = calculate_day_availability(db, DAY, party, config, now).available_slots

    for time_str in ("10:00", "10:10", "10:20"):
        outcome = _admit(db, config, now, time_str, party)
        assert outcome.ok == (time_str in open_slots)


def test_lost_race_on_unique_index_maps_to_capacity(db, config, now, make_vessels, monkeypatch):
    make_vessels(6, 6, 6)

    def _raise(*args, **kwargs):
        raise IntegrityError("INSERT INTO bookings", {}, Exception("UNIQUE constraint failed"))

    monkeypatch.setattr(admission, "_create_booking", _raise)
    result = _admit(db, config, now, "10:00", Party(2, "FR", is_private=True))

    assert result.rejection.code == RejectionCode.CAPACITY_EXCEEDED
    assert db.query(Bookings).count() == 0


def test_private_departure_unique_index(db, make_vessels):
    vessel_id = make_vessels(6)[0]
    start = datetime(2025, 6, 10, 8, 0)
    for _ in range(2):
        db.add(Bookings(
            vessel_id=vessel_id, start_at=start, end_at=start, language="FR",
            party_size=1, is_private=True, status="active",
        ))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
    assert db.query(Vessels).count() == 1


@pytest.fixture
def file_session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}")
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def _admit_concurrently(session_factory, config, now, time_str, parties):
    def _one(party):
        with session_factory() as session:
            result = admit_booking(session, DAY, time_str, party, config=config, now=now)
            return result.ok, result.rejection.code if result.rejection else None

    with ThreadPoolExecutor(max_workers=len(parties)) as pool:
        return list(pool.map(_one, parties))


def test_concurrent_admissions_never_overbook(file_session_factory, config, now):
    with file_session_factory() as session:
        for i in range(3):
            session.add(Vessels(name=f"Barque {i + 1}", capacity=6, rotation_order=i))
        session.commit()

    outcomes = _admit_concurrently(
        file_session_factory, config, now, "10:00", [Party(4, "FR") for _ in range(8)]
    )

    assert sum(ok for ok, _ in outcomes) == 1
    assert all(code == RejectionCode.CAPACITY_EXCEEDED for ok, code in outcomes if not ok)
    with file_session_factory() as session:
        seats = sum(b.party_size for b in session.query(Bookings).all())
    assert seats <= 6


def test_concurrent_private_requests_admit_one(file_session_factory, config, now):
    with file_session_factory() as session:
        for i in range(3):
            session.add(Vessels(name=f"Barque {i + 1}", capacity=6, rotation_order=i))
        session.commit()

    outcomes = _admit_concurrently(
        file_session_factory, config, now, "10:10", [Party(2, "FR", is_private=True) for _ in range(4)]
    )

    assert sum(ok for ok, _ in outcomes) == 1
    with file_session_factory() as session:
        assert session.query(Bookings).filter(Bookings.is_private.is_(True)).count() == 1
