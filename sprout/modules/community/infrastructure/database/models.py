# 📄 File: sprout/modules/community/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes the tables for community boards, who joined them, their posts and comments.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models: forums, forum_members (unique per forum and user), posts with
# JSON vote lists and a denormalized comment counter, and comments.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - sprout.shared.infrastructure.database.connection (Base)
#
# 🔄 Connected Modules / Calls From:
# - forum_repository_impl.py, post_repository_impl.py
# - migrations/versions

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from sprout.shared.infrastructure.database.connection import Base


class ForumModel(Base):
    """SQLAlchemy model for forums."""
    __tablename__ = "forums"

    id = Column(String(36), primary_key=True)
    name = Column(String(50), nullable=False)
    description = Column(String(200), nullable=False)
    creator_id = Column(String(128), nullable=False, index=True)
    banner_url = Column(String(1024), nullable=True)
    moderators = Column(JSON, nullable=False, default=list)
    member_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), index=True)

    __table_args__ = (
        CheckConstraint("member_count >= 1", name="ck_forums_member_count_min"),
    )

    def __repr__(self) -> str:
        return f"<ForumModel(id={self.id}, name={self.name})>"


class ForumMemberModel(Base):
    """SQLAlchemy model for forum membership."""
    __tablename__ = "forum_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    forum_id = Column(String(36), ForeignKey("forums.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(128), nullable=False, index=True)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    __table_args__ = (
        UniqueConstraint("forum_id", "user_id", name="uq_forum_members_forum_user"),
    )


class PostModel(Base):
    """SQLAlchemy model for forum posts."""
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True)
    forum_id = Column(String(36), ForeignKey("forums.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(String(128), nullable=False, index=True)
    author_username = Column(String(30), nullable=False)
    author_avatar_url = Column(String(1024), nullable=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String(1024), nullable=True)
    upvotes = Column(JSON, nullable=False, default=list)
    downvotes = Column(JSON, nullable=False, default=list)
    comment_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    __table_args__ = (
        Index("ix_posts_forum_created", "forum_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<PostModel(id={self.id}, forum_id={self.forum_id})>"


class CommentModel(Base):
    """SQLAlchemy model for post comments."""
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(String(128), nullable=False)
    author_username = Column(String(30), nullable=False)
    author_avatar_url = Column(String(1024), nullable=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    __table_args__ = (
        Index("ix_comments_post_created", "post_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<CommentModel(id={self.id}, post_id={self.post_id})>"
