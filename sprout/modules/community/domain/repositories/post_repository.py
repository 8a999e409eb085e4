"""
Repository interface for forum posts and their comments.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.forum import Comment, Post


class PostRepository(ABC):

    @abstractmethod
    async def create(self, post: Post) -> Post:
        pass

    @abstractmethod
    async def get_by_id(self, post_id: str) -> Optional[Post]:
        pass

    @abstractmethod
    async def list_for_forum(self, forum_id: str) -> List[Post]:
        """Posts of a forum, newest first."""
        pass

    @abstractmethod
    async def update_votes(self, post: Post) -> Post:
        pass

    @abstractmethod
    async def delete(self, post_id: str) -> bool:
        """Delete the post and its comments."""
        pass

    @abstractmethod
    async def add_comment(self, comment: Comment) -> Comment:
        """Store the comment and increment the post's comment_count."""
        pass

    @abstractmethod
    async def list_comments(self, post_id: str) -> List[Comment]:
        """Comments of a post, oldest first."""
        pass
