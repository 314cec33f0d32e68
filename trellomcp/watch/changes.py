"""
Change detection between two board snapshots.

Produces an ordered list of change records:
1. Comments found in the activity feed since the previous snapshot
   (newest first)
2. Per-card changes in the current snapshot's capture order:
   added | moved | label_changed | description_changed

Cards that disappear between snapshots (archived, deleted, moved to an
unwatched list) are not reported.
"""

from __future__ import annotations

import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from trellomcp.watch.snapshot import BoardSnapshot, BoardSource, CardSnapshot

logger = logging.getLogger(__name__)

# Comments posted by automation carry this marker in their text
AUTOMATION_MARKER = "🤖 by Claude Code"

ACTIVITY_SCAN_LIMIT = 50


# =============================================================================
# Change Records
# =============================================================================


class _ChangeBase(BaseModel):
    """Fields shared by every change: the card's current state."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    card_id: str
    card_name: str
    description: str
    list_id: str
    list_name: str
    labels: list[str]

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class CardAdded(_ChangeBase):
    type: Literal["added"] = "added"


class CardMoved(_ChangeBase):
    type: Literal["moved"] = "moved"
    previous_list_id: str


class LabelsChanged(_ChangeBase):
    type: Literal["label_changed"] = "label_changed"
    previous_labels: list[str]


class DescriptionChanged(_ChangeBase):
    type: Literal["description_changed"] = "description_changed"


class CardCommented(_ChangeBase):
    type: Literal["commented"] = "commented"
    text: str
    is_claude_comment: bool


ChangeRecord = Annotated[
    Union[CardAdded, CardMoved, LabelsChanged, DescriptionChanged, CardCommented],
    Field(discriminator="type"),
]


# =============================================================================
# Detector
# =============================================================================


class ChangeDetector:
    """
    Computes the changes between two snapshots of the same board.

    The detector reads the board's activity feed for comments and records
    the newest activity id it saw on the current snapshot, so the next
    comparison only scans newer entries.

    Example:
        detector = ChangeDetector(client)
        changes = await detector.detect(previous, current, list_names)
    """

    def __init__(self, source: BoardSource, *, activity_limit: int = ACTIVITY_SCAN_LIMIT):
        self._source = source
        self._activity_limit = activity_limit

    async def detect(
        self,
        previous: BoardSnapshot,
        current: BoardSnapshot,
        list_names: dict[str, str] | None = None,
    ) -> list[ChangeRecord]:
        """
        Compare two snapshots.

        Args:
            previous: Earlier snapshot (its last_activity_id bounds the scan)
            current: New snapshot (its last_activity_id is updated)
            list_names: List id -> name used to label records

        Returns:
            Comment changes first, then per-card changes
        """
        names = {**(list_names or {}), **current.list_names}

        changes: list[ChangeRecord] = []
        changes.extend(await self._detect_comments(previous, current, names))
        for card in current.cards.values():
            changes.extend(self._diff_card(previous.cards.get(card.id), card, names))

        if changes:
            logger.info(f"[watch] Board {current.board_id}: {len(changes)} change(s) detected")
        return changes

    async def _detect_comments(
        self,
        previous: BoardSnapshot,
        current: BoardSnapshot,
        names: dict[str, str],
    ) -> list[CardCommented]:
        actions = await self._source.get_recent_activity(
            current.board_id, limit=self._activity_limit
        )

        comments: list[CardCommented] = []
        newest_seen: str | None = None

        for action in actions:
            if previous.last_activity_id is not None and action.id <= previous.last_activity_id:
                break
            if newest_seen is None:
                newest_seen = action.id
            if not action.is_comment:
                continue

            card = current.cards.get(action.card_id or "")
            if card is None:
                continue

            text = action.data.text or ""
            comments.append(
                CardCommented(
                    **_current_state(card, names),
                    text=text,
                    is_claude_comment=AUTOMATION_MARKER in text,
                )
            )

        current.last_activity_id = newest_seen or previous.last_activity_id
        return comments

    @staticmethod
    def _diff_card(
        old: CardSnapshot | None,
        new: CardSnapshot,
        names: dict[str, str],
    ) -> list[ChangeRecord]:
        state = _current_state(new, names)

        if old is None:
            return [CardAdded(**state)]

        changes: list[ChangeRecord] = []
        if old.list_id != new.list_id:
            changes.append(CardMoved(**state, previous_list_id=old.list_id))
        if old.label_key != new.label_key:
            changes.append(LabelsChanged(**state, previous_labels=list(old.labels)))
        if old.description != new.description:
            changes.append(DescriptionChanged(**state))
        return changes


def _current_state(card: CardSnapshot, names: dict[str, str]) -> dict:
    return {
        "card_id": card.id,
        "card_name": card.name,
        "description": card.description,
        "list_id": card.list_id,
        "list_name": names.get(card.list_id, ""),
        "labels": list(card.labels),
    }
