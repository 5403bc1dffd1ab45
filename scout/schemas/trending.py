from pydantic import BaseModel


class NormalizedItem(BaseModel):
    """Uniform record for an item from any upstream. Every field has a default."""

    source_target: str = ""  # subreddit, search query or keyword the item came from
    id: str = ""
    title: str = ""
    url: str = ""
    primary_metric: int | float = 0  # score, views or rising value
    secondary_metric: int | float = 0  # comments or likes
    created_at: int | float = 0  # epoch seconds
    is_short_form: bool = False
    duration: str = ""  # raw ISO-8601 duration, videos only
    author: str = ""
    thumbnail: str = ""
    is_video: bool = False


class ErrorAnnotation(BaseModel):
    """A requested target whose upstream call failed."""

    target: str
    detail: str


class ItemsData(BaseModel):
    items: list[NormalizedItem]
    errors: list[ErrorAnnotation] | None = None


class ItemsResponse(BaseModel):
    """Envelope for list endpoints."""

    ok: bool = True
    data: ItemsData


class TrendsData(ItemsData):
    keyword: str
    source: str


class TrendsResponse(BaseModel):
    """Envelope for the rising related-queries endpoint."""

    ok: bool = True
    data: TrendsData


class HealthResponse(BaseModel):
    ok: bool = True
    python: str


class VersionResponse(BaseModel):
    ok: bool = True
    python: str
    commit: str
    server_time: str
