"""Expansion of supplemental contribution rules into dated cash injections."""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, datetime
import logging

from .schema import MaterializedContribution, SupplementalContribution

logger = logging.getLogger(__name__)

QUARTER_START_MONTHS = {1, 4, 7, 10}
NO_END_YEARS = 100


class DateParseError(ValueError):
    """Raised when a contribution date cannot be parsed in strict mode."""


def calendar_position(simulation_month: int, start_month: int) -> tuple[int, int]:
    """Return (year_offset, calendar_month) for a 1-based simulation month."""
    offset = start_month - 1 + simulation_month - 1
    return offset // 12, offset % 12 + 1


def parse_contribution_date(value: str | date | None, *, strict: bool = False) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        if strict:
            raise DateParseError(f"'{value}' is not a valid date; expected YYYY-MM-DD") from None
        logger.warning("Could not parse contribution date %r; using today's date", value)
        return date.today()


def _simulation_bounds(simulation_months: int, start_month: int, base_year: int) -> tuple[date, date]:
    start = date(base_year, start_month, 1)
    year_offset, month = calendar_position(max(1, simulation_months), start_month)
    year = base_year + year_offset
    end = date(year, month, calendar.monthrange(year, month)[1])
    return start, end


def _applicability_window(
    contribution: SupplementalContribution,
    start_date: date | None,
    end_date: date | None,
    sim_start: date,
    sim_end: date,
) -> tuple[date, date]:
    if contribution.use_custom_date_range and (start_date is not None or end_date is not None):
        window_start = start_date or sim_start
        window_end = end_date or date(window_start.year + NO_END_YEARS, 1, 1)
        return window_start, window_end
    return sim_start, sim_end


def _matches(contribution: SupplementalContribution, day: date, start_date: date | None, anchor: date) -> bool:
    frequency = contribution.frequency
    if frequency == "daily":
        return True
    if frequency in {"weekly", "biweekly"}:
        weekday = contribution.day_of_week or anchor.isoweekday()
        if day.isoweekday() != weekday:
            return False
        if frequency == "biweekly":
            return ((day - anchor).days // 7) % 2 == 0
        return True
    if frequency == "semimonthly":
        return day.day in {1, 15}
    if frequency == "monthly":
        return day.day == (start_date.day if start_date else 1)
    if frequency == "quarterly":
        return day.month in QUARTER_START_MONTHS and day.day == (start_date.day if start_date else 1)
    if frequency == "yearly":
        if start_date is None:
            return day.month == 1 and day.day == 1
        return day.month == start_date.month and day.day == start_date.day
    return False


def _materialize_one(
    contribution: SupplementalContribution,
    simulation_months: int,
    start_month: int,
    base_year: int,
    strict_dates: bool,
) -> list[MaterializedContribution]:
    sim_start, sim_end = _simulation_bounds(simulation_months, start_month, base_year)
    start_date = parse_contribution_date(contribution.start_date, strict=strict_dates)
    end_date = parse_contribution_date(contribution.end_date, strict=strict_dates)

    def _entry(day: date) -> MaterializedContribution:
        return MaterializedContribution(
            amount=contribution.amount,
            date=day,
            source_id=contribution.id,
            source_name=contribution.name,
        )

    if not contribution.recurring:
        on_date = start_date or sim_start
        if sim_start <= on_date <= sim_end:
            return [_entry(on_date)]
        logger.debug("One-time contribution %s on %s falls outside the simulation", contribution.id, on_date)
        return []

    window_start, window_end = _applicability_window(contribution, start_date, end_date, sim_start, sim_end)
    anchor = start_date or sim_start
    entries: list[MaterializedContribution] = []
    for month in range(1, simulation_months + 1):
        year_offset, calendar_month = calendar_position(month, start_month)
        year = base_year + year_offset
        for day_of_month in range(1, calendar.monthrange(year, calendar_month)[1] + 1):
            day = date(year, calendar_month, day_of_month)
            if day < window_start or day > window_end:
                continue
            if _matches(contribution, day, start_date, anchor):
                entries.append(_entry(day))
    return entries


def materialize_contributions(
    contributions: list[SupplementalContribution] | None,
    simulation_months: int,
    start_month: int = 1,
    *,
    base_year: int | None = None,
    strict_dates: bool = False,
) -> list[MaterializedContribution]:
    """Expand contribution rules into a date-sorted list of cash injections.

    The simulation is anchored on the first day of ``start_month`` in
    ``base_year`` (the current year unless given). Same-day injections keep
    the order of the rules that produced them.
    """
    if not contributions or simulation_months <= 0:
        return []
    if base_year is None:
        base_year = date.today().year

    materialized: list[MaterializedContribution] = []
    for contribution in contributions:
        if not contribution.enabled:
            continue
        materialized.extend(_materialize_one(contribution, simulation_months, start_month, base_year, strict_dates))
    materialized.sort(key=lambda item: item.date)
    logger.debug("Materialized %d contributions from %d rules", len(materialized), len(contributions))
    return materialized


def group_contributions_by_month(materialized: list[MaterializedContribution]) -> dict[tuple[int, int], float]:
    grouped: dict[tuple[int, int], float] = defaultdict(float)
    for item in materialized:
        grouped[(item.date.year, item.date.month)] += item.amount
    return dict(grouped)


def month_contribution(
    grouped: dict[tuple[int, int], float],
    simulation_month: int,
    start_month: int,
    base_year: int,
) -> float:
    year_offset, calendar_month = calendar_position(simulation_month, start_month)
    return grouped.get((base_year + year_offset, calendar_month), 0.0)
