# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                  import JSONResponse
from Settings              import STORAGE_BACKEND
from Public.WebSocket.Libs import room_hub
from .                     import api_v1_router

@api_v1_router.get("/health")
async def health_check():
    """API sağlık kontrolü"""
    return JSONResponse({
        "success" : True,
        "status"  : "healthy",
        "storage" : STORAGE_BACKEND,
        "sockets" : sum(len(aboneler) for aboneler in room_hub.sockets.values())
    })
