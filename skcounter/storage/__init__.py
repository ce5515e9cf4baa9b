"""Game state and player profile persistence."""

from skcounter.storage.store import GameStore
from skcounter.storage.ledger import PlayerProfile, ProfileLedger

__all__ = ['GameStore', 'PlayerProfile', 'ProfileLedger']
