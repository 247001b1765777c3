from typing import Generic, TypeVar

from pydantic import BaseModel

ItemT = TypeVar('ItemT')


class PagedResponse(BaseModel, Generic[ItemT]):
    items: list[ItemT]
    current_page: int
    page_size: int
    total_count: int

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
