"""
==============================================================================
Shift Window Service Module
==============================================================================

Summarises the inventory activity of the shifts that are current for a
reference time.

Evaluation Flow:
---------------
1. Parse each time card into a ShiftWindow
2. Keep the shifts active at the reference time (start == reference, or
   start within the 24 hours after it)
3. Look up each active shift's records; shifts without records are dropped
4. Summarise: first record's item name plus " and N more"
5. Reverse the list so the last shift iterated comes first

The evaluator is a plain function of its inputs; record lookup is injected.

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Generic, Iterable, List, Optional, Protocol, Sequence, TypeVar

from storeledger.utils.work_time import ShiftWindow, parse_shift_window


# Module logger
logger = logging.getLogger(__name__)

DEFAULT_SUFFIX_TEMPLATE = " and {count} more"


class ShiftRecord(Protocol):
    year: str
    month: str
    day: str
    work_time: str


class InventoryEntry(Protocol):
    inventory_name: str


S = TypeVar("S", bound=ShiftRecord)
E = TypeVar("E", bound=InventoryEntry)


@dataclass(frozen=True)
class ShiftSummary(Generic[S, E]):
    """
    Summary of one active shift.

    Attributes:
        primary_item_name: Inventory name of the shift's first record
        count_suffix: "" for a single record, else " and N more"
        time_card: The summarised shift
        first_entry: The shift's first record, for detail rendering
        window: Parsed start/end of the shift
    """

    primary_item_name: str
    count_suffix: str
    time_card: S
    first_entry: E
    window: ShiftWindow

    @property
    def summary(self) -> str:
        return f"{self.primary_item_name}{self.count_suffix}"


class ShiftWindowEvaluator:
    """
    Selects active shifts and summarises their inventory records.

    Example:
        >>> evaluator = ShiftWindowEvaluator()
        >>> summaries = evaluator.evaluate(
        ...     datetime(2023, 3, 1),
        ...     time_cards,
        ...     repository.find_by_time_card,
        ... )
        >>> summaries[0].summary
        'Marlboro Red and 2 more'
    """

    def __init__(self, suffix_template: str = DEFAULT_SUFFIX_TEMPLATE) -> None:
        self._suffix_template = suffix_template

    def count_suffix(self, entry_count: int) -> str:
        """Suffix for a shift with ``entry_count`` (>= 1) records."""
        if entry_count < 2:
            return ""
        return self._suffix_template.format(count=entry_count - 1)

    def summarize(
        self,
        time_card: S,
        window: ShiftWindow,
        entries: Sequence[E]
    ) -> Optional[ShiftSummary[S, E]]:
        """Summary for one shift, or None when it has no records."""
        if not entries:
            return None

        first = entries[0]
        return ShiftSummary(
            primary_item_name=first.inventory_name,
            count_suffix=self.count_suffix(len(entries)),
            time_card=time_card,
            first_entry=first,
            window=window,
        )

    def evaluate(
        self,
        reference_time: datetime,
        shift_records: Iterable[S],
        entry_lookup: Callable[[S], Sequence[E]]
    ) -> List[ShiftSummary[S, E]]:
        """
        Summaries of the shifts active at ``reference_time``.

        Args:
            reference_time: Naive datetime on the store clock
            shift_records: Time cards, in the order to evaluate them
            entry_lookup: Returns the records of one time card

        Returns:
            Summaries in reverse iteration order

        Raises:
            ParseError: On the first time card whose work time is malformed
        """
        summaries: List[ShiftSummary[S, E]] = []

        for record in shift_records:
            window = parse_shift_window(record.year, record.month, record.day, record.work_time)

            if not window.is_active_at(reference_time):
                continue

            summary = self.summarize(record, window, entry_lookup(record))
            if summary is not None:
                summaries.append(summary)

        summaries.reverse()

        logger.debug(
            f"Evaluated shifts at {reference_time.isoformat()}: "
            f"{len(summaries)} active with records"
        )
        return summaries
