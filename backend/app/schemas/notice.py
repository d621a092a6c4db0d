from datetime import datetime

from pydantic import BaseModel, Field


class NoticeCreate(BaseModel):
    module_id: str = Field(min_length=1, max_length=36)
    title: str = Field(max_length=200)
    content: str = Field(max_length=5000)


class NoticeOut(BaseModel):
    id: str
    module_id: str
    module_code: str
    author_id: str
    author_name: str | None = None
    title: str
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}
