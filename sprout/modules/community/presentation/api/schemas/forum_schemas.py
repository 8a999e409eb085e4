# 📄 File: sprout/modules/community/presentation/api/schemas/forum_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# The shapes of community boards, posts and comments going in and out of the app.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for forums, posts, comments and votes. Post
# responses carry the computed score.
#
# 🔗 Dependencies:
# - pydantic
# - community domain models
#
# 🔄 Connected Modules / Calls From:
# - sprout.modules.community.presentation.api.v1.forums

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.modules.community.domain.models.forum import Comment, Forum, Post, VoteType
from sprout.modules.user_management.presentation.api.schemas.user_schemas import PublicProfileResponse


class ForumCreateRequest(BaseModel):
    name: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=10, max_length=200)

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {"name": "Aroid Addicts", "description": "Everything Monstera, Philodendron and Anthurium"}
        }
    )


class ForumUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=50)
    description: Optional[str] = Field(None, min_length=10, max_length=200)

    model_config = ConfigDict(str_strip_whitespace=True)


class ModeratorAddRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)

    model_config = ConfigDict(str_strip_whitespace=True)


class ModeratorListResponse(BaseModel):
    moderators: List[PublicProfileResponse]


class ForumResponse(BaseModel):
    id: str
    name: str
    description: str
    creator_id: str
    banner_url: Optional[str] = None
    moderators: List[str]
    member_count: int
    created_at: datetime

    @classmethod
    def from_domain(cls, forum: Forum) -> "ForumResponse":
        return cls(**forum.model_dump())


class ForumListResponse(BaseModel):
    forums: List[ForumResponse]


class PostCreateRequest(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    content: str = Field(..., min_length=1, max_length=10000)
    image_url: Optional[str] = Field(None, max_length=1024)

    model_config = ConfigDict(str_strip_whitespace=True)


class VoteRequest(BaseModel):
    vote: VoteType

    model_config = ConfigDict(use_enum_values=True)


class PostResponse(BaseModel):
    id: str
    forum_id: str
    author_id: str
    author_username: str
    author_avatar_url: Optional[str] = None
    title: str
    content: str
    image_url: Optional[str] = None
    upvotes: List[str]
    downvotes: List[str]
    score: int
    comment_count: int
    created_at: datetime

    @classmethod
    def from_domain(cls, post: Post) -> "PostResponse":
        return cls(**post.model_dump(), score=post.score)


class PostListResponse(BaseModel):
    posts: List[PostResponse]


class CommentCreateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)

    model_config = ConfigDict(str_strip_whitespace=True)


class CommentResponse(BaseModel):
    id: str
    post_id: str
    author_id: str
    author_username: str
    author_avatar_url: Optional[str] = None
    text: str
    created_at: datetime

    @classmethod
    def from_domain(cls, comment: Comment) -> "CommentResponse":
        return cls(**comment.model_dump())


class CommentListResponse(BaseModel):
    comments: List[CommentResponse]
