"""
Contact form message as submitted by a visitor.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    message: str = Field(..., min_length=10, max_length=500)

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Ada Fern",
                "email": "ada@example.com",
                "message": "Do you ship variegated Monsteras to Canada?",
            }
        },
    )
