# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi                 import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from Core.Modules            import lifespan
from fastapi.responses       import JSONResponse, RedirectResponse
from urllib.parse            import quote
from Settings                import PROJE, PRODUCTION

kekik_FastAPI = FastAPI(
    title       = PROJE,
    openapi_url = None if PRODUCTION else "/openapi.json",
    docs_url    = None if PRODUCTION else "/docs",
    redoc_url   = None,
    lifespan    = lifespan
)

# ! ----------------------------------------» Middlewares

kekik_FastAPI.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])
kekik_FastAPI.add_middleware(GZipMiddleware, minimum_size=1000)

# ! ----------------------------------------» Routers

from Core.Modules             import _istek, _hata, _security
from Public.API.v1.Routers    import api_v1_router
from Public.WebSocket.Routers import wss_router
from Public.WatchParty.Models import normalize_room_id

kekik_FastAPI.include_router(api_v1_router)
kekik_FastAPI.include_router(wss_router)

@kekik_FastAPI.get("/")
async def ana_sayfa(request: Request):
    """Paylaşım linki (?room=XXXXXX) odanın snapshot'ına yönlenir"""
    room_id = normalize_room_id(request.query_params.get("room", ""))
    if room_id:
        return RedirectResponse(url=f"/api/v1/rooms/{quote(room_id, safe='')}", status_code=302)

    return JSONResponse({"proje": PROJE, "api": "/api/v1"})
