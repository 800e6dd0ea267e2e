"""
Owns each side's hand, draw pile, discard pile and mana.
"""
from typing import Optional

from ..config import MatchSettings
from ..errors import ErrorKind, InsufficientResourcesError, InvalidCardError
from ..models import Card, MatchState, SideId, SideState


class RosterManager:

    def __init__(self, state: MatchState, settings: MatchSettings):
        self.state = state
        self.settings = settings

    def _side(self, side: SideId) -> SideState:
        return self.state.side(side)

    def find_card(self, side: SideId, card_id: str) -> Card:
        card = self._side(side).get_card_from_hand(card_id)
        if not card:
            raise InvalidCardError(f"Card {card_id} is not in {side.value}'s hand.")
        return card

    def draw_card(self, side: SideId) -> Optional[Card]:
        """
        Moves the top card of the draw pile into the hand.
        A full hand discards the drawn card instead; an empty pile does nothing.
        """
        side_state = self._side(side)
        if not side_state.draw_pile:
            return None
        card = side_state.draw_pile.pop()
        if len(side_state.hand) >= self.settings.MAX_HAND_SIZE:
            side_state.discard_pile.append(card)
            self.state.add_log(f"{ErrorKind.HAND_FULL.value}: {side_state.name} discards {card.name}.")
            return None
        side_state.hand.append(card)
        return card

    def draw_opening_hand(self, side: SideId):
        for _ in range(self.settings.OPENING_HAND_SIZE):
            self.draw_card(side)

    def can_afford(self, side: SideId, card: Card, reserved: int = 0) -> bool:
        return card.cost <= self._side(side).mana - reserved

    def spend(self, side: SideId, card_id: str) -> Card:
        """Pays for a card and hands it back to the caller, out of the hand."""
        side_state = self._side(side)
        card = self.find_card(side, card_id)
        if card.cost > side_state.mana:
            raise InsufficientResourcesError(
                f"{side_state.name} cannot afford {card.name}: costs {card.cost}, has {side_state.mana}."
            )
        side_state.mana -= card.cost
        side_state.hand.remove(card)
        return card

    def refill_turn_resources(self, side: SideId) -> int:
        side_state = self._side(side)
        side_state.turns_taken += 1
        if self.settings.REFILL_MODE == "reset":
            side_state.mana = self.settings.MANA_PER_TURN * side_state.turns_taken
        else:
            side_state.mana = side_state.mana + self.settings.MANA_PER_TURN
        side_state.mana = max(0, min(self.settings.MAX_MANA, side_state.mana))
        return side_state.mana
