#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""A light wrapper around the `datetime` library, containing the recurrence rule
model and the calendar arithmetic used to place occurrences of a recurring event."""

import datetime
from enum import StrEnum, auto
from typing import Self

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field, model_validator

from calrecur.constants import DAYS_PER_WEEK


class RepeatType(StrEnum):
    NONE = auto()
    DAILY = auto()
    WEEKLY = auto()
    MONTHLY = auto()
    YEARLY = auto()


class RecurrenceRule(BaseModel):
    """
    Represents a recurrence rule for a calendar event.

    Parameters
    ----------
    type
        How often the event repeats. `none` means the event happens once, on
        `start_date`.
    interval
        Number of periods between consecutive occurrences. For example, with
        `weekly`, an interval of 2 means once every two weeks.
    start_date
        The first occurrence of the event (occurrence index 0).
    end_date
        If set, no occurrence falls strictly after this date.
    max_occurrences
        If set, occurrence indices greater than or equal to this value are
        rejected.

    Notes
    -----
    1. Monthly and yearly rules never clamp: a rule anchored on the 31st
    has no occurrence in shorter months, and a rule anchored on February 29
    only occurs in leap years.
    2. `max_occurrences` bounds the occurrence *index*, so skipped months
    count towards it.
    """

    model_config = ConfigDict(frozen=True)

    type: RepeatType = RepeatType.NONE
    interval: int = 1
    start_date: datetime.date
    end_date: datetime.date | None = None
    max_occurrences: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _check_interval(self) -> Self:
        if self.type != RepeatType.NONE and self.interval < 1:
            raise ValueError(
                f"interval must be a positive integer for {self.type} rules, "
                f"got {self.interval}"
            )
        return self

    @property
    def recurs(self) -> bool:
        return self.type != RepeatType.NONE

    @property
    def finite(self) -> bool:
        return any([self.max_occurrences is not None, self.end_date is not None])


def as_date(value: datetime.date) -> datetime.date:
    """Drop the time of day from `value` if it is a `datetime.datetime`."""
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


def shift_by_periods(
    start: datetime.date, repeat_type: RepeatType, periods: int
) -> datetime.date | None:
    """Move `start` forward by `periods` daily, weekly, monthly or yearly periods.

    Returns
    -------
    The shifted date, or None if the target month has no day matching the
    day of month of `start` (eg the 31st in April, February 29 in 2025).

    Raises
    ------
    OverflowError, ValueError
        If the shifted date cannot be represented (past year 9999).
    ValueError
        If `repeat_type` is `none`, which has no period.
    """
    match repeat_type:
        case RepeatType.DAILY:
            return start + datetime.timedelta(days=periods)
        case RepeatType.WEEKLY:
            return start + datetime.timedelta(days=periods * DAYS_PER_WEEK)
        case RepeatType.MONTHLY:
            delta = relativedelta(months=periods)
        case RepeatType.YEARLY:
            delta = relativedelta(years=periods)
        case _:
            raise ValueError(f"Unsupported repeat type: {repeat_type}")
    # relativedelta clamps to the end of the month, so a changed day means the
    # anchor day does not exist in the target month
    shifted = start + delta
    if shifted.day != start.day:
        return None
    return shifted
