from fastapi import Response

from scout.aggregate.fanout import AggregatedResponse
from scout.schemas.trending import ItemsData

CDN_CACHE_CONTROL = "s-maxage=60, stale-while-revalidate=60"


def set_cdn_cache(response: Response) -> None:
    """Let a fronting CDN cache successful aggregates briefly."""
    response.headers["Cache-Control"] = CDN_CACHE_CONTROL


def items_data(result: AggregatedResponse) -> ItemsData:
    """Envelope data for an aggregate; ``errors`` is left out when nothing failed."""
    return ItemsData(items=result.items, errors=result.errors or None)
