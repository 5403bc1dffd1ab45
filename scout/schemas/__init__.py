from scout.schemas.trending import (
    ErrorAnnotation,
    HealthResponse,
    ItemsData,
    ItemsResponse,
    NormalizedItem,
    TrendsData,
    TrendsResponse,
    VersionResponse,
)

__all__ = [
    "ErrorAnnotation",
    "HealthResponse",
    "ItemsData",
    "ItemsResponse",
    "NormalizedItem",
    "TrendsData",
    "TrendsResponse",
    "VersionResponse",
]
