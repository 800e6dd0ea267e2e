"""
Builds shuffled decks from the unit catalog.
Kept separate from the data loader so decks can be built from any catalog,
including hand-written ones in tests.
"""

import itertools
import random
from typing import List, Optional

from .data_loader import CatalogEntry
from .models import Card


def create_cards(entry: CatalogEntry, id_prefix: str, counter: itertools.count) -> List[Card]:
    """Creates `entry.copies` cards, each with its own id."""
    return [
        Card(id=f"{id_prefix}-{entry.id}-{next(counter)}", cost=entry.cost, archetype=entry.archetype)
        for _ in range(entry.copies)
    ]


def create_deck(
    catalog: List[CatalogEntry],
    id_prefix: str,
    deck_size: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[Card]:
    """
    Returns a shuffled deck. The last card of the list is the top of the deck.
    When `deck_size` is larger than the catalog, copies are cycled.
    """
    rng = rng or random.Random()
    counter = itertools.count(1)
    pool: List[Card] = []
    for entry in catalog:
        pool.extend(create_cards(entry, id_prefix, counter))
    if not pool:
        return []

    if deck_size is not None:
        while len(pool) < deck_size:
            for entry in catalog:
                pool.extend(create_cards(CatalogEntry(entry.id, entry.cost, entry.archetype, 1), id_prefix, counter))
        rng.shuffle(pool)
        return pool[:deck_size]

    rng.shuffle(pool)
    return pool
