#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Occurrence computation for recurring calendar events.

Every occurrence is computed from the rule start date and an absolute
occurrence index, never from the previous occurrence, so long expansions do
not drift. Scans over occurrence indices are bounded by `max_probe`.
"""

import datetime
import logging
from collections.abc import Generator
from enum import StrEnum, auto
from typing import NamedTuple

from calrecur.constants import DEFAULT_MAX_PROBE
from calrecur.time_utils import RecurrenceRule, as_date, shift_by_periods

logger = logging.getLogger(__name__)


class OccurrenceStatus(StrEnum):
    """Outcome of probing a single occurrence index.

    `skipped_invalid_date` is recoverable: later indices may still occur.
    `exceeded_bound` is final: bounds are monotonic in the index, so no later
    index can occur either.
    """

    OCCURRED = auto()
    SKIPPED_INVALID_DATE = auto()
    EXCEEDED_BOUND = auto()


class Occurrence(NamedTuple):
    index: int
    status: OccurrenceStatus
    date: datetime.date | None = None


class RecurrenceExpansion(NamedTuple):
    """All occurrences of a rule.

    Parameters
    ----------
    dates
        The occurrence dates in chronological order, starting with the rule start date.
    probes
        Number of occurrence indices probed after the start date.
    truncated
        True if `max_probe` indices were probed without exhausting the rule,
        so later occurrences may exist. The index after the last probed one is
        checked (and not counted in `probes`) before a full expansion is marked
        as truncated.
    """

    dates: list[datetime.date]
    probes: int
    truncated: bool


class RecurrenceInstance(NamedTuple):
    date: datetime.date
    is_original: bool


def _check_max_probe(max_probe: int):
    if max_probe < 0:
        raise ValueError(f"max_probe must be non-negative, got {max_probe}")


def probe_occurrence(
    base_date: datetime.date, rule: RecurrenceRule, occurrence_count: int = 0
) -> Occurrence:
    """Compute the occurrence `occurrence_count` periods of `rule` after `base_date`.

    The candidate date is checked for existence first (monthly and yearly
    rules skip months lacking the anchor day), then against `rule.end_date`
    and finally against `rule.max_occurrences`.
    """
    if occurrence_count < 0:
        raise ValueError(
            f"occurrence_count must be non-negative, got {occurrence_count}"
        )
    if not rule.recurs:
        return Occurrence(occurrence_count, OccurrenceStatus.EXCEEDED_BOUND)
    base_date = as_date(base_date)
    try:
        candidate = shift_by_periods(
            base_date, rule.type, rule.interval * occurrence_count
        )
    except (OverflowError, ValueError):
        logger.debug(
            f"Occurrence {occurrence_count} of {rule.type} rule starting "
            f"{base_date} is past the last representable date"
        )
        return Occurrence(occurrence_count, OccurrenceStatus.EXCEEDED_BOUND)
    if candidate is None:
        return Occurrence(occurrence_count, OccurrenceStatus.SKIPPED_INVALID_DATE)
    if rule.end_date is not None and candidate > rule.end_date:
        return Occurrence(occurrence_count, OccurrenceStatus.EXCEEDED_BOUND)
    if rule.max_occurrences is not None and occurrence_count >= rule.max_occurrences:
        return Occurrence(occurrence_count, OccurrenceStatus.EXCEEDED_BOUND)
    return Occurrence(occurrence_count, OccurrenceStatus.OCCURRED, candidate)


def get_next_recurrence_date(
    base_date: datetime.date, rule: RecurrenceRule, occurrence_count: int = 0
) -> datetime.date | None:
    """Return the date of occurrence `occurrence_count` of `rule`, measured from
    `base_date`, or None if that index does not occur.

    None is returned for non-recurring rules, for indices whose target month
    lacks the anchor day and for indices past the rule end date or
    maximum number of occurrences.
    """
    return probe_occurrence(base_date, rule, occurrence_count).date


def iter_occurrences(
    rule: RecurrenceRule,
    first_index: int = 0,
    max_probe: int = DEFAULT_MAX_PROBE,
) -> Generator[Occurrence, None, None]:
    """Probe at most `max_probe` consecutive indices of `rule`, starting at
    `first_index`. The generator stops after the first index that exceeds
    the rule bounds."""
    _check_max_probe(max_probe)
    for index in range(first_index, first_index + max_probe):
        occurrence = probe_occurrence(rule.start_date, rule, index)
        yield occurrence
        if occurrence.status == OccurrenceStatus.EXCEEDED_BOUND:
            return


def expand_occurrences(
    rule: RecurrenceRule,
    max_probe: int = DEFAULT_MAX_PROBE,
    *,
    truncation_log_level: int = logging.WARNING,
) -> RecurrenceExpansion:
    """Expand `rule` into its occurrence dates, probing indices `1..max_probe`.

    Skipped indices are stepped over. The expansion ends at the first index
    that exceeds the rule bounds, or once `max_probe` indices have been probed,
    in which case it is marked as truncated unless index `max_probe + 1`
    exceeds the rule bounds.

    Parameters
    ----------
    truncation_log_level
        Level at which a truncated expansion is logged.
    """
    _check_max_probe(max_probe)
    dates = [rule.start_date]
    if not rule.recurs:
        return RecurrenceExpansion(dates=dates, probes=0, truncated=False)

    probes, exhausted = 0, False
    for occurrence in iter_occurrences(rule, first_index=1, max_probe=max_probe):
        probes += 1
        match occurrence.status:
            case OccurrenceStatus.OCCURRED:
                dates.append(occurrence.date)
            case OccurrenceStatus.SKIPPED_INVALID_DATE:
                logger.debug(
                    f"Skipping occurrence {occurrence.index}: no day "
                    f"{rule.start_date.day} in the target month"
                )
            case OccurrenceStatus.EXCEEDED_BOUND:
                exhausted = True

    if not exhausted:
        following = probe_occurrence(rule.start_date, rule, max_probe + 1)
        exhausted = following.status == OccurrenceStatus.EXCEEDED_BOUND
    if not exhausted:
        reason = (
            "later occurrences may exist"
            if rule.finite
            else "the rule has no end bound"
        )
        logger.log(
            truncation_log_level,
            f"Expansion of {rule.type} rule starting {rule.start_date} stopped after "
            f"{probes} probes with {len(dates)} occurrences; {reason}",
        )
    return RecurrenceExpansion(dates=dates, probes=probes, truncated=not exhausted)


def get_all_recurrence_dates(
    rule: RecurrenceRule, max_probe: int = DEFAULT_MAX_PROBE
) -> list[datetime.date]:
    """Return the start date followed by every later occurrence of `rule`, in
    chronological order. Possibly truncated after `max_probe` probed indices, see
    `expand_occurrences`. Truncation is only logged at debug level."""
    expansion = expand_occurrences(
        rule, max_probe=max_probe, truncation_log_level=logging.DEBUG
    )
    return expansion.dates


def get_recurrence_instances(
    rule: RecurrenceRule, max_probe: int = DEFAULT_MAX_PROBE
) -> list[RecurrenceInstance]:
    """Same as `get_all_recurrence_dates`, with the start date marked as the
    original occurrence."""
    return [
        RecurrenceInstance(date=date, is_original=i == 0)
        for i, date in enumerate(get_all_recurrence_dates(rule, max_probe=max_probe))
    ]


def is_recurrence_date(
    date: datetime.date, rule: RecurrenceRule, max_probe: int = DEFAULT_MAX_PROBE
) -> bool:
    """Check if `date` is an occurrence of `rule`."""
    date = as_date(date)
    if not rule.recurs:
        return date == rule.start_date
    return date in get_all_recurrence_dates(rule, max_probe=max_probe)


def find_next_recurrence_date(
    after_date: datetime.date,
    rule: RecurrenceRule,
    max_probe: int = DEFAULT_MAX_PROBE,
) -> datetime.date | None:
    """Return the earliest occurrence of `rule` strictly after `after_date`.

    Indices `0..max_probe - 1` are scanned. None is returned for non-recurring
    rules, if the rule ends before `after_date` or if no occurrence is found
    within `max_probe` indices.
    """
    _check_max_probe(max_probe)
    if not rule.recurs:
        return None
    after_date = as_date(after_date)
    for occurrence in iter_occurrences(rule, first_index=0, max_probe=max_probe):
        if occurrence.status == OccurrenceStatus.EXCEEDED_BOUND:
            logger.debug(
                f"Rule exhausted at occurrence {occurrence.index} before {after_date}"
            )
            return None
        if (
            occurrence.status == OccurrenceStatus.OCCURRED
            and occurrence.date > after_date
        ):
            return occurrence.date
    logger.debug(f"No occurrence after {after_date} within {max_probe} probes")
    return None
