"""
Board snapshots.

A snapshot is the observable state of a board at one instant: the names of
its lists and, for the watched lists, each card's id, name, description,
owning list and labels. Snapshots live only in process memory.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from trellomcp.integrations.trello.schemas import Action, BoardList, Card

logger = logging.getLogger(__name__)


class BoardSource(Protocol):
    """
    The upstream reads the watch engine needs.

    Each call is expected to be rate-limited and to retry quota
    rejections itself (TrelloClient does both).
    """

    async def get_lists(self, board_id: str) -> list[BoardList]: ...

    async def get_cards_by_list(self, list_id: str) -> list[Card]: ...

    async def get_recent_activity(self, board_id: str, limit: int = 10) -> list[Action]: ...


@dataclass(frozen=True, slots=True)
class CardSnapshot:
    """Captured state of one card."""

    id: str
    name: str
    description: str
    list_id: str
    labels: tuple[str, ...] = ()

    @property
    def label_key(self) -> str:
        """Order-insensitive encoding of the label set."""
        return ",".join(sorted(self.labels))

    @classmethod
    def from_card(cls, card: Card) -> CardSnapshot:
        return cls(
            id=card.id,
            name=card.name,
            description=card.desc,
            list_id=card.id_list,
            labels=tuple(card.id_labels),
        )


@dataclass(slots=True)
class BoardSnapshot:
    """
    Captured state of a board.

    `cards` preserves capture order (list order, then card order within
    each list). `last_activity_id` is the newest activity entry already
    accounted for; it is filled in by change detection.
    """

    board_id: str
    cards: dict[str, CardSnapshot] = field(default_factory=dict)
    list_names: dict[str, str] = field(default_factory=dict)
    last_activity_id: str | None = None


class SnapshotBuilder:
    """
    Captures BoardSnapshots through a BoardSource.

    Upstream failures propagate unchanged.

    Example:
        builder = SnapshotBuilder(client)
        snapshot = await builder.capture("board-1", list_ids={"list-a"})
    """

    def __init__(self, source: BoardSource):
        self._source = source

    async def capture(
        self,
        board_id: str,
        list_ids: Iterable[str] | None = None,
    ) -> BoardSnapshot:
        """
        Capture a board's lists and the cards of the targeted lists.

        Args:
            board_id: Board to capture
            list_ids: Lists whose cards are collected (None = every list)
        """
        targets = set(list_ids) if list_ids is not None else None
        snapshot = BoardSnapshot(board_id=board_id)

        for board_list in await self._source.get_lists(board_id):
            snapshot.list_names[board_list.id] = board_list.name
            if targets is not None and board_list.id not in targets:
                continue
            for card in await self._source.get_cards_by_list(board_list.id):
                snapshot.cards[card.id] = CardSnapshot.from_card(card)

        logger.debug(
            f"[watch] Captured board {board_id}: "
            f"{len(snapshot.list_names)} lists, {len(snapshot.cards)} cards"
        )
        return snapshot


class SnapshotStore:
    """
    Latest known snapshot per board.

    Owned by whoever orchestrates watches and shared across watch calls.
    Concurrent watches of the same board are not coordinated: the last
    writer wins.
    """

    def __init__(self) -> None:
        self._snapshots: dict[str, BoardSnapshot] = {}

    def get(self, board_id: str) -> BoardSnapshot | None:
        return self._snapshots.get(board_id)

    def put(self, snapshot: BoardSnapshot) -> None:
        self._snapshots[snapshot.board_id] = snapshot

    def __contains__(self, board_id: object) -> bool:
        return board_id in self._snapshots

    def __len__(self) -> int:
        return len(self._snapshots)
