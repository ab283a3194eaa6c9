"""
==============================================================================
Shift Window Evaluator Tests
==============================================================================

Tests for active-shift selection and summary building, using plain
in-memory time cards and records.

==============================================================================
"""

from dataclasses import dataclass
from datetime import datetime

import pytest

from storeledger.core.exceptions import ParseError
from storeledger.services.shift_window_service import ShiftWindowEvaluator


@dataclass(frozen=True)
class Card:
    id: int
    year: str
    month: str
    day: str
    work_time: str


@dataclass(frozen=True)
class Entry:
    inventory_name: str


def lookup_from(mapping):
    return lambda card: mapping.get(card.id, [])


MORNING = Card(1, "2023", "3", "1", "09:00~18:00")


class TestActiveWindow:
    """The look-ahead rule: start == reference, or start within the next 24h."""

    @pytest.mark.parametrize("reference, active", [
        (datetime(2023, 3, 1, 9, 0), True),     # exactly at start
        (datetime(2023, 3, 1, 0, 0), True),     # earlier the same day
        (datetime(2023, 2, 28, 9, 1), True),    # just under 24h before
        (datetime(2023, 2, 28, 9, 0), False),   # exactly 24h before
        (datetime(2023, 2, 27, 12, 0), False),  # more than a day before
        (datetime(2023, 3, 1, 9, 1), False),    # shift already started
        (datetime(2023, 3, 1, 12, 0), False),   # in the middle of the shift
    ])
    def test_active_at(self, reference, active):
        evaluator = ShiftWindowEvaluator()
        result = evaluator.evaluate(reference, [MORNING], lookup_from({1: [Entry("Esse")]}))
        assert (len(result) == 1) is active

    def test_start_at_24_is_midnight_of_the_card_date(self):
        card = Card(2, "2023", "3", "1", "24:00~08:00")
        evaluator = ShiftWindowEvaluator()
        result = evaluator.evaluate(
            datetime(2023, 3, 1, 0, 0), [card], lookup_from({2: [Entry("Esse")]})
        )
        assert len(result) == 1
        assert result[0].window.start == datetime(2023, 3, 1, 0, 0)

    def test_rollover_end_is_next_day(self):
        card = Card(3, "2023", "3", "1", "22:00~24:00")
        evaluator = ShiftWindowEvaluator()
        result = evaluator.evaluate(
            datetime(2023, 3, 1, 0, 0), [card], lookup_from({3: [Entry("Esse")]})
        )
        assert result[0].window.end == datetime(2023, 3, 2, 0, 0)


class TestSummaries:
    """Tests for summary text and shift exclusion."""

    def test_single_entry_has_no_suffix(self):
        evaluator = ShiftWindowEvaluator()
        result = evaluator.evaluate(
            datetime(2023, 3, 1), [MORNING], lookup_from({1: [Entry("Esse")]})
        )
        assert result[0].primary_item_name == "Esse"
        assert result[0].count_suffix == ""
        assert result[0].summary == "Esse"

    def test_three_entries_count_the_rest(self):
        entries = [Entry("Esse"), Entry("Marlboro"), Entry("Raison")]
        evaluator = ShiftWindowEvaluator()
        result = evaluator.evaluate(datetime(2023, 3, 1), [MORNING], lookup_from({1: entries}))
        assert result[0].count_suffix == " and 2 more"
        assert result[0].summary == "Esse and 2 more"
        assert result[0].first_entry is entries[0]
        assert result[0].time_card is MORNING

    def test_custom_suffix_template(self):
        entries = [Entry("Esse"), Entry("Marlboro")]
        evaluator = ShiftWindowEvaluator(" 외 {count}")
        result = evaluator.evaluate(datetime(2023, 3, 1), [MORNING], lookup_from({1: entries}))
        assert result[0].summary == "Esse 외 1"

    def test_shift_without_entries_is_excluded(self):
        evaluator = ShiftWindowEvaluator()
        assert evaluator.evaluate(datetime(2023, 3, 1), [MORNING], lookup_from({})) == []

    def test_inactive_shift_entries_are_not_looked_up(self):
        looked_up = []

        def lookup(card):
            looked_up.append(card.id)
            return [Entry("Esse")]

        evaluator = ShiftWindowEvaluator()
        evaluator.evaluate(datetime(2023, 3, 5), [MORNING], lookup)
        assert looked_up == []

    def test_empty_input(self):
        assert ShiftWindowEvaluator().evaluate(datetime(2023, 3, 1), [], lookup_from({})) == []


class TestOrdering:
    """Results come back in reverse iteration order."""

    def test_result_is_reversed(self):
        a = Card(1, "2023", "3", "1", "06:00~12:00")
        b = Card(2, "2023", "3", "1", "12:00~18:00")
        c = Card(3, "2023", "3", "1", "18:00~24:00")
        lookup = lookup_from({1: [Entry("A")], 2: [Entry("B")], 3: [Entry("C")]})

        result = ShiftWindowEvaluator().evaluate(datetime(2023, 3, 1), [a, b, c], lookup)

        assert [s.time_card.id for s in result] == [3, 2, 1]

    def test_reversal_uses_iteration_order_not_start_time(self):
        late = Card(1, "2023", "3", "1", "18:00~24:00")
        early = Card(2, "2023", "3", "1", "06:00~12:00")
        lookup = lookup_from({1: [Entry("late")], 2: [Entry("early")]})

        result = ShiftWindowEvaluator().evaluate(datetime(2023, 3, 1), [late, early], lookup)

        assert [s.primary_item_name for s in result] == ["early", "late"]


class TestMalformedRecords:
    """A malformed work time aborts evaluation."""

    def test_parse_error_propagates(self):
        broken = Card(9, "2023", "3", "1", "0900-1800")
        with pytest.raises(ParseError):
            ShiftWindowEvaluator().evaluate(
                datetime(2023, 3, 1), [MORNING, broken], lookup_from({1: [Entry("Esse")]})
            )
