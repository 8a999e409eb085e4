# 📄 File: sprout/modules/community/domain/models/forum.py
# 🧭 Purpose (Layman Explanation):
# Community boards: each board has posts, each post has comments and up/down votes,
# and a few members help run the board as moderators.
# 🧪 Purpose (Technical Summary):
# Forum, Post and Comment domain models. Post voting is a toggle over two id lists that
# never both contain the same user.
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# forum_service.py, forum and post repositories, community schemas

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.shared.utils.helpers import generate_id, utc_now


class VoteType(str, Enum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class Forum(BaseModel):
    id: str = Field(default_factory=generate_id)
    name: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=10, max_length=200)
    creator_id: str
    banner_url: Optional[str] = None
    moderators: List[str] = Field(default_factory=list)
    member_count: int = Field(1, ge=1)
    created_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(validate_assignment=True)

    def is_moderator(self, user_id: str) -> bool:
        return user_id == self.creator_id or user_id in self.moderators


class Post(BaseModel):
    id: str = Field(default_factory=generate_id)
    forum_id: str
    author_id: str
    author_username: str
    author_avatar_url: Optional[str] = None
    title: str
    content: str
    image_url: Optional[str] = None
    upvotes: List[str] = Field(default_factory=list)
    downvotes: List[str] = Field(default_factory=list)
    comment_count: int = 0
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def score(self) -> int:
        return len(self.upvotes) - len(self.downvotes)

    def toggle_vote(self, user_id: str, vote: VoteType) -> None:
        """
        Apply a vote toggle.

        Voting the same way twice removes the vote; voting the other way moves it.
        """
        same, other = (
            (self.upvotes, self.downvotes) if vote == VoteType.UPVOTE else (self.downvotes, self.upvotes)
        )
        if user_id in same:
            same = [u for u in same if u != user_id]
        else:
            same = [*same, user_id]
            other = [u for u in other if u != user_id]

        if vote == VoteType.UPVOTE:
            self.upvotes, self.downvotes = same, other
        else:
            self.downvotes, self.upvotes = same, other


class Comment(BaseModel):
    id: str = Field(default_factory=generate_id)
    post_id: str
    author_id: str
    author_username: str
    author_avatar_url: Optional[str] = None
    text: str
    created_at: datetime = Field(default_factory=utc_now)
