#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import datetime

import pytest

from calrecur.time_utils import RecurrenceRule, RepeatType


@pytest.fixture()
def daily_rule() -> RecurrenceRule:
    return RecurrenceRule(
        type=RepeatType.DAILY, interval=1, start_date=datetime.date(2024, 1, 15)
    )


@pytest.fixture()
def bounded_daily_rule() -> RecurrenceRule:
    return RecurrenceRule(
        type=RepeatType.DAILY,
        interval=1,
        start_date=datetime.date(2024, 1, 15),
        end_date=datetime.date(2024, 1, 17),
    )


@pytest.fixture()
def one_off_rule() -> RecurrenceRule:
    return RecurrenceRule(
        type=RepeatType.NONE, interval=1, start_date=datetime.date(2024, 1, 15)
    )


@pytest.fixture()
def month_end_rule() -> RecurrenceRule:
    return RecurrenceRule(
        type=RepeatType.MONTHLY, interval=1, start_date=datetime.date(2024, 1, 31)
    )


@pytest.fixture()
def leap_day_rule() -> RecurrenceRule:
    return RecurrenceRule(
        type=RepeatType.YEARLY, interval=1, start_date=datetime.date(2024, 2, 29)
    )
