# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                     import JSONResponse, HTTPException
from Public.WatchParty.Models import Room, RoomNotFound, normalize_room_id
from Public.WebSocket.Libs    import room_hub
from .                        import api_v1_router

@api_v1_router.get("/rooms/{room_id}")
async def get_room(room_id: str):
    """Odanın son snapshot'ı (büyük/küçük harf duyarsız)"""
    room = await room_hub.get_room(room_id)
    if room is None:
        raise RoomNotFound(normalize_room_id(room_id))

    return JSONResponse(room.to_dict())

@api_v1_router.put("/rooms/{room_id}")
async def put_room(room_id: str, room: Room):
    """Odanın tam snapshot'ını yaz (son yazan kazanır) ve abonelere push et"""
    room_id = normalize_room_id(room_id)
    if normalize_room_id(room.id) != room_id:
        raise HTTPException(status_code=422, detail=f"Gövdedeki oda id'si ({room.id}) yol ile uyuşmuyor ({room_id})")

    await room_hub.put_room(room_id, room)
    return JSONResponse({"success": True, "roomId": room_id})
