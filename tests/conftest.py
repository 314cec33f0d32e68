"""
Pytest configuration and fixtures for Trello MCP tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from trellomcp.watch import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from trellomcp.integrations.trello import Action, BoardList, Card  # noqa: E402


def make_card(card_id, list_id, *, name=None, desc="", labels=()):
    return Card(id=card_id, name=name or f"Card {card_id}", desc=desc, id_list=list_id, id_labels=list(labels))


def make_comment(action_id, card_id, text):
    return Action.model_validate(
        {
            "id": action_id,
            "type": "commentCard",
            "data": {"text": text, "card": {"id": card_id, "name": card_id}},
        }
    )


def make_action(action_id, action_type="updateCard", card_id=None):
    data = {"card": {"id": card_id, "name": card_id}} if card_id else {}
    return Action.model_validate({"id": action_id, "type": action_type, "data": data})


class FakeBoard:
    """
    In-memory board implementing the reads the watch engine uses.

    Tests mutate `lists`, `cards` and `actions` between polls. `actions`
    is kept newest first, like Trello's activity feed.
    """

    def __init__(self, lists=None):
        self.lists: list[BoardList] = [BoardList(id=lid, name=name) for lid, name in (lists or [])]
        self.cards: dict[str, list[Card]] = {board_list.id: [] for board_list in self.lists}
        self.actions: list[Action] = []
        self.calls: list[tuple] = []

    def add_card(self, card):
        self.cards.setdefault(card.id_list, []).append(card)

    def move_card(self, card_id, to_list):
        card = self.remove_card(card_id)
        self.add_card(card.model_copy(update={"id_list": to_list}))

    def replace_card(self, card_id, **updates):
        for cards in self.cards.values():
            for index, card in enumerate(cards):
                if card.id == card_id:
                    cards[index] = card.model_copy(update=updates)
                    return

    def remove_card(self, card_id):
        for cards in self.cards.values():
            for card in cards:
                if card.id == card_id:
                    cards.remove(card)
                    return card
        raise KeyError(card_id)

    def post(self, action):
        self.actions.insert(0, action)

    async def get_lists(self, board_id):
        self.calls.append(("get_lists", board_id))
        return list(self.lists)

    async def get_cards_by_list(self, list_id):
        self.calls.append(("get_cards_by_list", list_id))
        return list(self.cards.get(list_id, []))

    async def get_recent_activity(self, board_id, limit=10):
        self.calls.append(("get_recent_activity", board_id, limit))
        return self.actions[:limit]


@pytest.fixture
def board():
    """Board with two lists, To Do (L1) and Doing (L2)."""
    return FakeBoard(lists=[("L1", "To Do"), ("L2", "Doing")])
