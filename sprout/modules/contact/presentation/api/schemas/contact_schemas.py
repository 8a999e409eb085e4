"""
Contact form schemas.
"""

from pydantic import BaseModel

from sprout.modules.contact.domain.models.contact import ContactRequest

__all__ = ["ContactRequest", "ContactResponse"]


class ContactResponse(BaseModel):
    message: str
