"""
Chat schemas for learnpath.

A tutor session is an append-only ordered list of ChatMessage turns scoped
to one lesson.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ChatMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(validation_alias=AliasChoices("text", "message", "content"))
    is_from_user: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_from_user", "is_user", "isUser"),
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        validation_alias=AliasChoices("created_at", "createdAt", "timestamp"),
    )

    @field_validator("text", mode="before")
    @classmethod
    def text_not_null(cls, v):
        return v or ""
