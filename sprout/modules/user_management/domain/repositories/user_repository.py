# 📄 File: sprout/modules/user_management/domain/repositories/user_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists everything the marketplace needs to be able to do with stored member records,
# without saying which database keeps them.
# 🧪 Purpose (Technical Summary):
# Repository interface for the User aggregate, including atomic counter and reward-point
# updates that must not be done read-modify-write.
# 🔗 Dependencies:
# abc, domain User model
# 🔄 Connected Modules / Calls From:
# UserService, PlantListingService, RewardService, OrderService, ChatService, ForumService,
# background maintenance tasks

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..models.user import User


class UserRepository(ABC):
    """
    Repository interface for User data access.

    Implementation Notes:
    - Methods return domain entities, never ORM rows
    - update() persists every mutable field of the given entity
    - Point and counter changes are single UPDATE statements
    """

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateResourceError: If the id or username is taken
        """
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_ids(self, user_ids: List[str]) -> List[User]:
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive username lookup."""
        pass

    @abstractmethod
    async def get_by_stripe_customer_id(self, customer_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass

    @abstractmethod
    async def increment_counters(
        self,
        user_id: str,
        plants_listed: int = 0,
        plants_traded: int = 0
    ) -> None:
        pass

    @abstractmethod
    async def add_reward_points(self, user_id: str, points: int) -> Optional[int]:
        """
        Add points to a user's balance.

        Returns:
            New balance, or None when the user does not exist
        """
        pass

    @abstractmethod
    async def deduct_reward_points(self, user_id: str, points: int) -> Optional[int]:
        """
        Subtract points only if the balance covers them.

        Returns:
            New balance, or None when the user is missing or the balance is too low
        """
        pass

    @abstractmethod
    async def list_expired_pro(self, now: datetime) -> List[User]:
        """Users on Pro whose expiry date lies before `now`."""
        pass
