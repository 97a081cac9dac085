# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi import APIRouter
from Core    import Request

api_v1_router         = APIRouter(prefix="/api/v1")
api_v1_global_message = {
    "with" : "Watch Party oda deposu",
    "docs" : ["/api/v1/health", "/api/v1/rooms/{room_id}", "/wss/rooms/{room_id}"]
}

@api_v1_router.get("")
async def get_api_v1_router(request: Request):
    return api_v1_global_message


# ! ----------------------------------------» Routers
from . import (
    health,
    rooms
)
