import re
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

_DATA_URL = re.compile(r"^data:([a-z]+/[a-z0-9.+-]+)?(;[a-z0-9-]+=[^;,]+)*(;base64)?,", re.IGNORECASE)


class PostPayload(BaseModel):
    text: Optional[str] = None
    image: Optional[str] = None

    @field_validator("image")
    @classmethod
    def _image_is_data_url(cls, value: Optional[str]) -> Optional[str]:
        if value and not _DATA_URL.match(value):
            raise ValueError("Image must be a valid Data URL")
        return value


class PostCreatePayload(PostPayload):
    @model_validator(mode="after")
    def _text_or_image(self) -> "PostCreatePayload":
        if not (self.text or "").strip() and not self.image:
            raise ValueError("Text or image is required")
        return self


class PostEditPayload(PostPayload):
    pass


class CommentCreatePayload(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def _text_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Text is required")
        return value
