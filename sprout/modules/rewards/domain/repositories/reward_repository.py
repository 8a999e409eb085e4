"""
Repository interface for the reward points ledger.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.reward import RewardTransaction


class RewardTransactionRepository(ABC):
    """Append-only store of earn/spend entries."""

    @abstractmethod
    async def create(self, transaction: RewardTransaction) -> RewardTransaction:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[RewardTransaction]:
        """Entries for a user, newest first."""
        pass
