# cybertaxi/routers/tiles.py
"""
Map tiles proxied to TileServer GL, and font glyphs served from disk.
Both are public: the map needs them before login.
"""

from fastapi import APIRouter, Response
from fastapi.responses import FileResponse
from cybertaxi.services import tile_proxy

router = APIRouter()


@router.get("/tiles/{style}/{z}/{x}/{y}.{format}", summary="Proxy a map tile")
async def get_tile(style: str, z: int, x: int, y: int, format: str):
    tile = await tile_proxy.fetch_tile(style, z, x, y, format)
    return Response(content=tile.content, status_code=tile.status_code, media_type=tile.media_type)


@router.get("/fonts/{fontstack}/{range}.pbf", summary="Font glyph range (PBF)")
def get_font(fontstack: str, range: str):
    return FileResponse(tile_proxy.font_path(fontstack, range), media_type="application/x-protobuf")
