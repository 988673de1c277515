import os
from datetime import datetime, timedelta, timezone

import pytest
from openpyxl import load_workbook

from app.domain.settings.repository import (
    AUTO_EXCEL_EXPORT,
    EXCEL_EXPORT_SCHEDULE,
    SettingsRepository,
)
from app.workers.export_worker import ExportScheduler, InvalidCronExpression, parse_cron

from .conftest import NOW, FakeClock, make_booking


@pytest.fixture
def scheduler(session_factory, tmp_path, clock):
    return ExportScheduler(session_factory, exports_dir=tmp_path / "exports", clock=clock)


def set_mtime(path, when: datetime):
    stamp = when.replace(tzinfo=timezone.utc).timestamp()
    os.utime(path, (stamp, stamp))


def test_disabled_export_writes_nothing(scheduler, db):
    SettingsRepository.set_value(db, AUTO_EXCEL_EXPORT, "false")

    assert scheduler.run_export() is None
    assert not scheduler.exports_dir.exists()


def test_missing_setting_means_disabled(scheduler):
    assert scheduler.run_export() is None


def test_enabled_export_writes_workbook(scheduler, db, users):
    SettingsRepository.set_value(db, AUTO_EXCEL_EXPORT, "true")
    make_booking(db)

    path = scheduler.run_export()

    assert path.name == "photography_export_2024-06-01.xlsx"
    workbook = load_workbook(path)
    assert workbook.sheetnames == ["Bookings", "Photo Selections", "Payments"]
    bookings = workbook["Bookings"]
    assert bookings["A1"].value == "Booking ID"
    assert bookings["A1"].font.bold
    assert bookings["A1"].fill.fgColor.rgb == "FFD4AF37"
    assert bookings.max_row == 2


def test_export_prunes_old_files(scheduler, db):
    SettingsRepository.set_value(db, AUTO_EXCEL_EXPORT, "true")
    scheduler.exports_dir.mkdir(parents=True)
    stale = scheduler.exports_dir / "photography_export_2024-04-01.xlsx"
    recent = scheduler.exports_dir / "photography_export_2024-05-20.xlsx"
    stale.write_bytes(b"old")
    recent.write_bytes(b"new")
    set_mtime(stale, NOW - timedelta(days=31))
    set_mtime(recent, NOW - timedelta(days=12))

    scheduler.run_export()

    assert not stale.exists()
    assert recent.exists()
    assert (scheduler.exports_dir / "photography_export_2024-06-01.xlsx").exists()


def test_unreachable_database_is_logged_not_raised(tmp_path):
    def broken_factory():
        raise RuntimeError("database is down")

    scheduler = ExportScheduler(broken_factory, exports_dir=tmp_path, clock=FakeClock())
    assert scheduler.run_export() is None


def test_export_build_failure_returns_none(scheduler, db, monkeypatch):
    SettingsRepository.set_value(db, AUTO_EXCEL_EXPORT, "true")

    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("app.workers.export_worker.build_workbook", explode)
    assert scheduler.run_export() is None


def test_parse_daily_schedule():
    options = parse_cron("0 2 * * *")
    assert options["minute"] == {0}
    assert options["hour"] == {2}
    assert options["day"] is None
    assert options["month"] is None
    assert options["weekday"] is None


def test_parse_weekdays_and_steps():
    options = parse_cron("*/15 9-17 * 1,7 1-5")
    assert options["minute"] == {0, 15, 30, 45}
    assert options["hour"] == set(range(9, 18))
    assert options["month"] == {1, 7}
    # cron Monday..Friday -> Python weekday() 0..4
    assert options["weekday"] == {0, 1, 2, 3, 4}


def test_parse_sunday_both_spellings():
    assert parse_cron("0 0 * * 0")["weekday"] == {6}
    assert parse_cron("0 0 * * 7")["weekday"] == {6}


@pytest.mark.parametrize(
    "expression",
    ["", "0 2 * *", "61 * * * *", "a b c d e", "*/0 * * * *", "0 0 30 2 *", "0 0 31 4,6,9,11 *"],
)
def test_parse_rejects_bad_expressions(expression):
    with pytest.raises(InvalidCronExpression):
        parse_cron(expression)


def test_next_run_in_export_timezone(scheduler):
    # 12:00 UTC is 08:00 in New York during summer time
    fire_at = scheduler.next_run(parse_cron("0 2 * * *"))
    assert (fire_at.year, fire_at.month, fire_at.day) == (2024, 6, 2)
    assert (fire_at.hour, fire_at.minute, fire_at.second) == (2, 0, 0)
    assert fire_at.utcoffset() == timedelta(hours=-4)


def test_invalid_stored_schedule_falls_back_to_default(scheduler, db):
    SettingsRepository.set_value(db, EXCEL_EXPORT_SCHEDULE, "every night")
    assert scheduler.load_schedule() == parse_cron("0 2 * * *")


def test_impossible_stored_date_falls_back_to_default(scheduler, db):
    SettingsRepository.set_value(db, EXCEL_EXPORT_SCHEDULE, "0 0 30 2 *")
    options = scheduler.load_schedule()
    assert options == parse_cron("0 2 * * *")
    assert scheduler.next_run(options).day == 2


def test_leap_day_schedule_is_accepted(scheduler):
    fire_at = scheduler.next_run(parse_cron("0 0 29 2 *"))
    assert (fire_at.year, fire_at.month, fire_at.day) == (2028, 2, 29)


def test_day_of_month_or_weekday_fires_on_first_match(scheduler):
    # Saturday 2024-06-01; the next Monday comes before the 1st of July
    fire_at = scheduler.next_run(parse_cron("0 2 1 * 1"))
    assert (fire_at.year, fire_at.month, fire_at.day, fire_at.hour) == (2024, 6, 3, 2)

    # the 2nd comes before the next Friday
    fire_at = scheduler.next_run(parse_cron("0 2 2 * 5"))
    assert (fire_at.year, fire_at.month, fire_at.day) == (2024, 6, 2)


def test_impossible_day_with_weekday_uses_weekday_only(scheduler):
    fire_at = scheduler.next_run(parse_cron("0 0 30 2 1"))
    assert (fire_at.year, fire_at.month, fire_at.day) == (2025, 2, 3)
    assert fire_at.weekday() == 0


def test_stored_schedule_is_used(scheduler, db):
    SettingsRepository.set_value(db, EXCEL_EXPORT_SCHEDULE, "30 6 * * 1")
    options = scheduler.load_schedule()
    assert options["hour"] == {6}
    assert options["weekday"] == {0}


async def _start_and_stop(scheduler):
    scheduler.start()
    await scheduler.stop()
    return scheduler._task


def test_start_and_stop(scheduler):
    import asyncio

    assert asyncio.run(_start_and_stop(scheduler)) is None
