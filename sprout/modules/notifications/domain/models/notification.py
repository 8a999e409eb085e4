"""
Notification domain model.

A notification is a short message shown in a member's bell menu, with a link
to the page it is about.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from sprout.shared.utils.helpers import generate_id, utc_now


class NotificationType(str, Enum):
    MESSAGE = "message"
    ORDER = "order"
    COMMENT = "comment"
    FOLLOW = "follow"
    SYSTEM = "system"


class Notification(BaseModel):
    id: str = Field(default_factory=generate_id)
    user_id: str
    type: NotificationType
    message: str
    link: Optional[str] = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(use_enum_values=True)
