# cybertaxi/services/tile_proxy.py
"""
Map tile forwarding and font glyph lookup.

Tiles:  GET {TILE_SERVER_URL}/styles/{style}/{z}/{x}/{y}.{format}  (TileServer GL)
Fonts:  {FONTS_DIR}/{fontstack}/{range}.pbf on local disk
No caching and no retry: a dead tile server is reported straight back.
"""

import os
from dataclasses import dataclass

import httpx

from cybertaxi.config import settings
from cybertaxi.utils.errors import NotFound, UpstreamUnavailable
from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TILE_MEDIA_TYPE = "application/octet-stream"


@dataclass
class TileResponse:
    status_code: int
    content: bytes
    media_type: str


def upstream_tile_path(style: str, z: int, x: int, y: int, fmt: str) -> str:
    return f"/styles/{style}/{z}/{x}/{y}.{fmt}"


async def fetch_tile(style: str, z: int, x: int, y: int, fmt: str) -> TileResponse:
    url = settings.TILE_SERVER_URL.rstrip("/") + upstream_tile_path(style, z, x, y, fmt)
    try:
        async with httpx.AsyncClient(timeout=settings.TILE_PROXY_TIMEOUT_SECONDS) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        logger.error(f"[TILES] Tile proxy error for {url}: {e}")
        raise UpstreamUnavailable("Failed to proxy tile request", details=str(e))

    logger.debug(f"[TILES] {url} → {response.status_code} ({len(response.content)} bytes)")
    return TileResponse(
        status_code=response.status_code,
        content=response.content,
        media_type=response.headers.get("content-type", DEFAULT_TILE_MEDIA_TYPE),
    )


def font_path(fontstack: str, glyph_range: str) -> str:
    """Absolute path of a glyph file. Raises NotFound if missing or outside FONTS_DIR."""
    root = os.path.realpath(settings.FONTS_DIR)
    candidate = os.path.realpath(os.path.join(root, fontstack, f"{glyph_range}.pbf"))
    if os.path.commonpath([root, candidate]) != root or not os.path.isfile(candidate):
        logger.warning(f"[FONTS] Font PBF not found: {fontstack}/{glyph_range}.pbf")
        raise NotFound("Font PBF not found", details=f"{fontstack}/{glyph_range}.pbf")
    return candidate
