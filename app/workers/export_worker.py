"""
Scheduled Excel Export Worker
Writes the full studio workbook to disk on a cron schedule and prunes old exports
"""

import asyncio
import contextlib
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from arq.cron import next_cron
from sqlalchemy.orm import Session

from ..config import (
    DATABASE_URL,
    EXPORT_RETENTION_DAYS,
    EXPORT_TIMEZONE,
    EXPORTS_DIR,
)
from ..database import create_session_factory
from ..domain.reports.exporter import ALL_SECTIONS, build_workbook
from ..domain.settings.repository import (
    AUTO_EXCEL_EXPORT,
    DEFAULT_EXPORT_SCHEDULE,
    EXCEL_EXPORT_SCHEDULE,
    SettingsRepository,
)
from ..shared.clock import Clock, utcnow

logger = logging.getLogger(__name__)

# (arq keyword, lowest value, highest value) for the five cron fields
CRON_FIELDS = [
    ("minute", 0, 59),
    ("hour", 0, 23),
    ("day", 1, 31),
    ("month", 1, 12),
    ("weekday", 0, 7),
]


class InvalidCronExpression(ValueError):
    pass


# Longest each month can be; February 29 still exists in leap years
DAYS_IN_MONTH = {1: 31, 2: 29, 3: 31, 4: 30, 5: 31, 6: 30, 7: 31, 8: 31, 9: 30, 10: 31, 11: 30, 12: 31}


def _day_of_month_can_match(days: Optional[set[int]], months: Optional[set[int]]) -> bool:
    days = days or range(1, 32)
    months = months or range(1, 13)
    return any(day <= DAYS_IN_MONTH[month] for month in months for day in days)


def _parse_cron_field(field: str, low: int, high: int) -> Optional[set[int]]:
    if field == "*":
        return None

    values = set()
    for part in field.split(","):
        step = 1
        if "/" in part:
            part, step_text = part.split("/", 1)
            if not step_text.isdigit() or int(step_text) == 0:
                raise InvalidCronExpression(f"Invalid step in '{field}'")
            step = int(step_text)

        if part == "*":
            start, end = low, high
        elif "-" in part:
            start_text, end_text = part.split("-", 1)
            if not (start_text.isdigit() and end_text.isdigit()):
                raise InvalidCronExpression(f"Invalid range in '{field}'")
            start, end = int(start_text), int(end_text)
        elif part.isdigit():
            start = int(part)
            end = high if step > 1 else start
        else:
            raise InvalidCronExpression(f"Invalid value '{part}'")

        if start < low or end > high or start > end:
            raise InvalidCronExpression(f"'{field}' is outside {low}-{high}")
        values.update(range(start, end + 1, step))
    return values


def parse_cron(expression: str) -> dict:
    """Translate a five-field cron expression into ``arq.cron.next_cron`` options.

    Cron numbers weekdays from Sunday (0 or 7); arq uses ``datetime.weekday()``
    where Monday is 0. When both day-of-month and day-of-week are restricted
    a day matching either one fires, as in standard cron. A day-of-month that
    no selected month has (e.g. February 30) is rejected.
    """
    fields = (expression or "").split()
    if len(fields) != 5:
        raise InvalidCronExpression(f"Expected 5 fields, got {len(fields)}")

    options = {}
    for text, (name, low, high) in zip(fields, CRON_FIELDS):
        values = _parse_cron_field(text, low, high)
        if values is not None and name == "weekday":
            values = {(value - 1) % 7 for value in values}
        options[name] = values
    if options["weekday"] is None and not _day_of_month_can_match(options["day"], options["month"]):
        raise InvalidCronExpression(f"'{expression}' never matches a calendar date")

    options["second"] = 0
    options["microsecond"] = 0
    return options


class ExportScheduler:
    """Periodic Excel export, independent of the HTTP application.

    ``start()`` must be called from a running event loop; it runs one export
    immediately and then one per cron tick until ``stop()``.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        exports_dir: str = EXPORTS_DIR,
        clock: Clock = utcnow,
        timezone: str = EXPORT_TIMEZONE,
        retention_days: int = EXPORT_RETENTION_DAYS,
    ):
        self.session_factory = session_factory
        self.exports_dir = Path(exports_dir)
        self.clock = clock
        self.timezone = ZoneInfo(timezone)
        self.retention_days = retention_days
        self._task: Optional[asyncio.Task] = None

    def _now_utc(self) -> datetime:
        return self.clock().replace(tzinfo=timezone.utc)

    def run_export(self) -> Optional[Path]:
        """Write today's workbook if automatic exports are enabled.

        Returns the written file, or None when disabled or on failure.
        """
        logger.info("🔄 Starting automatic Excel export...")
        db = None
        try:
            db = self.session_factory()
            if SettingsRepository.get_value(db, AUTO_EXCEL_EXPORT) != "true":
                logger.info("⏭️ Auto Excel export is disabled")
                return None

            workbook = build_workbook(db, sections=ALL_SECTIONS)
            self.exports_dir.mkdir(parents=True, exist_ok=True)
            path = self.exports_dir / f"photography_export_{self.clock().date().isoformat()}.xlsx"
            workbook.save(path)
            logger.info(f"✅ Excel export completed: {path.name}")

            self.prune_exports()
            return path
        except Exception as e:
            logger.error(f"❌ Automatic Excel export failed: {e}")
            logger.exception(e)
            return None
        finally:
            if db is not None:
                db.close()

    def prune_exports(self) -> list[str]:
        """Delete files in the exports directory last modified before the retention cutoff"""
        cutoff = (self._now_utc() - timedelta(days=self.retention_days)).timestamp()
        removed = []
        for entry in self.exports_dir.iterdir():
            if entry.is_file() and entry.stat().st_mtime < cutoff:
                entry.unlink()
                removed.append(entry.name)
                logger.info(f"🗑️ Deleted old export: {entry.name}")
        return removed

    def load_schedule(self) -> dict:
        expression = DEFAULT_EXPORT_SCHEDULE
        db = None
        try:
            db = self.session_factory()
            expression = SettingsRepository.get_value(
                db, EXCEL_EXPORT_SCHEDULE, DEFAULT_EXPORT_SCHEDULE
            )
        except Exception as e:
            logger.error(f"❌ Could not read export schedule: {e}")
        finally:
            if db is not None:
                db.close()

        try:
            options = parse_cron(expression)
        except InvalidCronExpression as e:
            logger.warning(
                f"⚠️ Invalid export schedule '{expression}' ({e}), using '{DEFAULT_EXPORT_SCHEDULE}'"
            )
            expression = DEFAULT_EXPORT_SCHEDULE
            options = parse_cron(expression)

        logger.info(f"📅 Excel export schedule: {expression} ({self.timezone.key})")
        return options

    def next_run(self, options: dict) -> datetime:
        """Next fire time after now, as an aware datetime in the export timezone"""
        local_now = self._now_utc().astimezone(self.timezone)
        if options["day"] is None or options["weekday"] is None:
            return next_cron(local_now, **options)

        # both restricted: either rule may fire
        candidates = [next_cron(local_now, **{**options, "day": None})]
        if _day_of_month_can_match(options["day"], options["month"]):
            candidates.append(next_cron(local_now, **{**options, "weekday": None}))
        return min(candidates)

    async def _run(self) -> None:
        options = await asyncio.to_thread(self.load_schedule)
        await asyncio.to_thread(self.run_export)

        while True:
            fire_at = await asyncio.to_thread(self.next_run, options)
            delay = (fire_at - self._now_utc()).total_seconds()
            logger.info(f"⏰ Next Excel export at {fire_at.isoformat()}")
            await asyncio.sleep(max(delay, 0))
            await asyncio.to_thread(self.run_export)

    def start(self) -> None:
        if self._task and not self._task.done():
            return
        logger.info("🚀 Starting Excel export scheduler...")
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if not self._task:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("🛑 Excel export scheduler stopped")


async def run_export_worker():
    """Run the scheduler as its own process"""
    scheduler = ExportScheduler(create_session_factory(DATABASE_URL))
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_export_worker())
