"""
Repository interface for forums and forum membership.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.forum import Forum


class ForumRepository(ABC):

    @abstractmethod
    async def create(self, forum: Forum) -> Forum:
        """Store the forum and record its creator as the first member."""
        pass

    @abstractmethod
    async def get_by_id(self, forum_id: str) -> Optional[Forum]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Forum]:
        """Forums, newest first."""
        pass

    @abstractmethod
    async def update(self, forum: Forum) -> Forum:
        pass

    @abstractmethod
    async def delete(self, forum_id: str) -> bool:
        """Delete the forum together with its posts, comments and memberships."""
        pass

    @abstractmethod
    async def add_member(self, forum_id: str, user_id: str) -> bool:
        """Returns False if already a member."""
        pass

    @abstractmethod
    async def remove_member(self, forum_id: str, user_id: str) -> bool:
        """Returns False if not a member."""
        pass

    @abstractmethod
    async def is_member(self, forum_id: str, user_id: str) -> bool:
        pass
