from pydantic import BaseModel


class PageMeta(BaseModel):
    """Pagination metadata returned alongside every paged listing."""
    page: int
    limit: int
    total: int
    pages: int
    sort_by: str
    order: str
    search: str


class MessageResponse(BaseModel):
    message: str
