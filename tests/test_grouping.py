"""Tests for date bucketing."""

import logging
from datetime import date, datetime, timedelta

import pytest

from donext.core.dates import format_date
from donext.core.grouping import (
    GROUP_ORDER,
    DateGroup,
    TaskGroup,
    classify,
    format_group_title,
    group_by_date,
    has_valid_dates,
    sort_by_target_deadline,
)
from donext.core.tasks import Task


# Fixtures
@pytest.fixture
def now():
    # Wednesday; the week runs Mon 13 - Sun 19 January
    return datetime(2025, 1, 15, 10, 30)


@pytest.fixture
def today(now):
    return now.date()


def make_task(id="1", target=None, due=None, completed=False) -> Task:
    return Task(
        id=id,
        title=f"Task {id}",
        target_deadline=target,
        due_date=due,
        completed=completed,
    )


class TestClassify:
    def test_no_target_deadline_is_no_date(self, now):
        assert classify(make_task(), now) == DateGroup.NO_DATE

    def test_due_date_alone_is_ignored(self, now, today):
        task = make_task(due=today)
        assert classify(task, now) == DateGroup.NO_DATE

    def test_past_deadline_is_overdue(self, now, today):
        task = make_task(target=today - timedelta(days=1))
        assert classify(task, now) == DateGroup.OVERDUE

    def test_far_past_deadline_is_overdue(self, now):
        task = make_task(target=date(2020, 3, 1))
        assert classify(task, now) == DateGroup.OVERDUE

    def test_completed_yesterday_is_not_overdue(self, now, today):
        """Yesterday (Tuesday) is in the current week, so it lands in This Week."""
        task = make_task(target=today - timedelta(days=1), completed=True)
        assert classify(task, now) == DateGroup.THIS_WEEK

    def test_completed_earlier_this_month(self, now):
        task = make_task(target=date(2025, 1, 2), completed=True)
        assert classify(task, now) == DateGroup.THIS_MONTH

    def test_completed_long_ago_is_future(self, now):
        task = make_task(target=date(2024, 6, 1), completed=True)
        assert classify(task, now) == DateGroup.FUTURE

    def test_earlier_today_is_today_not_overdue(self, now):
        """Time of day never affects the bucket."""
        task = make_task(target=datetime(2025, 1, 15, 0, 5))
        assert classify(task, now) == DateGroup.TODAY

    def test_late_today_is_today(self, now):
        task = make_task(target=datetime(2025, 1, 15, 23, 59))
        assert classify(task, now) == DateGroup.TODAY

    def test_tomorrow(self, now, today):
        task = make_task(target=today + timedelta(days=1))
        assert classify(task, now) == DateGroup.TOMORROW

    def test_rest_of_week_is_this_week(self, now):
        assert classify(make_task(target=date(2025, 1, 18)), now) == DateGroup.THIS_WEEK
        assert classify(make_task(target=date(2025, 1, 19)), now) == DateGroup.THIS_WEEK

    def test_following_monday_to_sunday_is_next_week(self, now):
        assert classify(make_task(target=date(2025, 1, 20)), now) == DateGroup.NEXT_WEEK
        assert classify(make_task(target=date(2025, 1, 26)), now) == DateGroup.NEXT_WEEK

    def test_rest_of_month(self, now):
        assert classify(make_task(target=date(2025, 1, 27)), now) == DateGroup.THIS_MONTH
        assert classify(make_task(target=date(2025, 1, 31)), now) == DateGroup.THIS_MONTH

    def test_beyond_month_is_future(self, now):
        assert classify(make_task(target=date(2025, 2, 1)), now) == DateGroup.FUTURE

    def test_week_beats_month_across_month_end(self):
        """Thursday Jan 30: Sunday Feb 2 is this week even though it's next month."""
        as_of = datetime(2025, 1, 30, 9, 0)
        assert classify(make_task(target=date(2025, 2, 2)), as_of) == DateGroup.THIS_WEEK
        assert classify(make_task(target=date(2025, 2, 3)), as_of) == DateGroup.NEXT_WEEK

    def test_sunday_tomorrow_beats_next_week(self):
        as_of = datetime(2025, 1, 19, 20, 0)
        assert classify(make_task(target=date(2025, 1, 20)), as_of) == DateGroup.TOMORROW
        assert classify(make_task(target=date(2025, 1, 21)), as_of) == DateGroup.NEXT_WEEK

    def test_iso_string_deadline(self, now):
        task = make_task(target="2025-01-16T08:00:00")
        assert classify(task, now) == DateGroup.TOMORROW

    def test_malformed_deadline_raises(self, now):
        with pytest.raises(ValueError):
            classify(make_task(target="not-a-date"), now)

    @pytest.mark.parametrize("offset", [-400, -30, -8, -3, -1])
    def test_completed_never_overdue(self, now, today, offset):
        task = make_task(target=today + timedelta(days=offset), completed=True)
        assert classify(task, now) != DateGroup.OVERDUE


class TestDateGroupOrder:
    def test_canonical_order(self):
        assert [g.value for g in GROUP_ORDER] == [
            "Overdue",
            "Today",
            "Tomorrow",
            "This Week",
            "Next Week",
            "This Month",
            "Future",
            "No Date",
        ]

    def test_groups_sort_by_rank_not_label(self):
        assert sorted([DateGroup.NO_DATE, DateGroup.FUTURE, DateGroup.OVERDUE]) == [
            DateGroup.OVERDUE,
            DateGroup.FUTURE,
            DateGroup.NO_DATE,
        ]


class TestGroupByDate:
    def test_empty(self, now):
        assert group_by_date([], now) == []

    def test_drops_empty_groups_and_orders(self, now, today):
        tasks = [
            make_task("none"),
            make_task("future", target=date(2025, 3, 1)),
            make_task("today", target=today),
            make_task("overdue", target=today - timedelta(days=3)),
        ]
        groups = group_by_date(tasks, now)

        assert [g.group for g in groups] == [
            DateGroup.OVERDUE,
            DateGroup.TODAY,
            DateGroup.FUTURE,
            DateGroup.NO_DATE,
        ]
        assert all(g.tasks for g in groups)

    def test_stable_within_group(self, now, today):
        tasks = [
            make_task("b", target=datetime(2025, 1, 15, 18, 0)),
            make_task("a", target=datetime(2025, 1, 15, 8, 0)),
            make_task("c", target=today),
        ]
        groups = group_by_date(tasks, now)

        assert len(groups) == 1
        assert [t.id for t in groups[0].tasks] == ["b", "a", "c"]

    def test_group_ids_and_titles_are_labels(self, now, today):
        groups = group_by_date([make_task(target=today + timedelta(days=1))], now)
        assert groups[0].id == "Tomorrow"
        assert groups[0].title == "Tomorrow"

    def test_result_is_subsequence_of_canonical_order(self, now, today):
        tasks = [
            make_task(str(i), target=today + timedelta(days=offset))
            for i, offset in enumerate([40, -2, 5, 0, 12, 1, 3, -9])
        ] + [make_task("x")]
        ranks = [g.group.rank for g in group_by_date(tasks, now)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == len(ranks)

    def test_malformed_task_skipped_not_fatal(self, now, today, caplog):
        tasks = [
            make_task("good", target=today),
            make_task("bad-target", target="2025-13-45"),
            make_task("bad-due", due="yesterday-ish"),
            make_task("undated"),
        ]
        with caplog.at_level(logging.WARNING):
            groups = group_by_date(tasks, now)

        ids = [t.id for g in groups for t in g.tasks]
        assert ids == ["good", "undated"]
        assert "bad-target" in caplog.text
        assert "bad-due" in caplog.text


class TestHasValidDates:
    def test_no_dates_valid(self):
        assert has_valid_dates(make_task()) is True

    def test_real_dates_valid(self, now):
        assert has_valid_dates(make_task(target=now, due=now.date())) is True

    def test_iso_strings_valid(self):
        assert has_valid_dates(make_task(target="2025-01-15", due="2025-01-15T09:00:00")) is True

    def test_bad_due_date_invalid(self):
        assert has_valid_dates(make_task(due="soon")) is False

    def test_bad_target_invalid(self):
        assert has_valid_dates(make_task(target="2025-02-30")) is False

    def test_empty_string_treated_as_absent(self):
        assert has_valid_dates(make_task(target="", due="")) is True


class TestSortByTargetDeadline:
    def test_ascending(self):
        tasks = [
            make_task("16", target=date(2024, 3, 16)),
            make_task("15", target=date(2024, 3, 15)),
            make_task("17", target=date(2024, 3, 17)),
        ]
        assert [t.id for t in sort_by_target_deadline(tasks)] == ["15", "16", "17"]

    def test_undated_and_malformed_last(self):
        tasks = [
            make_task("none"),
            make_task("bad", target="garbage"),
            make_task("dated", target=date(2024, 3, 16)),
        ]
        assert [t.id for t in sort_by_target_deadline(tasks)] == ["dated", "none", "bad"]

    def test_empty(self):
        assert sort_by_target_deadline([]) == []


class TestFormatting:
    def test_group_title_with_count(self, today):
        tasks = [make_task("1"), make_task("2")]
        assert format_group_title(DateGroup.TODAY, tasks) == "Today (2)"

    def test_task_group_defaults_empty(self):
        assert TaskGroup(group=DateGroup.FUTURE).tasks == []

    def test_format_date(self):
        assert format_date(date(2025, 6, 5)) == "Jun 5, 2025"
        assert format_date(datetime(2025, 12, 25, 14, 0)) == "Dec 25, 2025"

    def test_format_date_none(self):
        assert format_date(None) == ""
