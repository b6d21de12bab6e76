from pydantic import BaseModel


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
