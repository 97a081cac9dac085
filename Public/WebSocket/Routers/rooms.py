# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                      import konsol
from fastapi                  import WebSocket, WebSocketDisconnect
from Settings                 import MAX_WS_PAYLOAD
from Public.WatchParty.Models import normalize_room_id
from .                        import wss_router
from ..Libs                   import room_hub
import json, time

async def send_json(websocket: WebSocket, data: dict):
    """JSON mesajı gönder"""
    await websocket.send_text(json.dumps(data, ensure_ascii=False))

async def send_error(websocket: WebSocket, message: str):
    """Hata mesajı gönder"""
    await send_json(websocket, {"type": "error", "message": message})

async def send_room_state(websocket: WebSocket, room_id: str):
    room = await room_hub.get_room(room_id)
    if room:
        await send_json(websocket, {"type": "room_state", "room": room.to_dict()})

@wss_router.websocket("/rooms/{room_id}")
async def room_websocket(websocket: WebSocket, room_id: str):
    """Odanın snapshot push kanalı - yazma HTTP PUT ile yapılır"""
    await websocket.accept()
    room_id = normalize_room_id(room_id)
    conn_id = await room_hub.connect(room_id, websocket)

    # Rate limiting (10/s)
    msg_count = 0
    last_time = time.perf_counter()

    try:
        await send_room_state(websocket, room_id)

        while True:
            gelen = await websocket.receive()
            if gelen["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(gelen.get("code", 1000))

            raw = gelen.get("text")
            if raw is None:
                await send_error(websocket, "Sadece metin (JSON) mesajları desteklenir")
                continue

            # 1. Flood Control: Payload Size
            if len(raw.encode("utf-8")) > MAX_WS_PAYLOAD:
                await send_error(websocket, "Mesaj boyutu çok büyük")
                continue

            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                await send_error(websocket, "Geçersiz JSON formatı")
                continue

            t = msg.get("type") if isinstance(msg, dict) else None
            if not t:
                continue

            # 2. Flood Control: Rate Limit
            now = time.perf_counter()
            if now - last_time > 1.0:
                msg_count = 0
                last_time = now

            msg_count += 1
            if msg_count > 10:
                await send_error(websocket, "Çok hızlı işlem yapıyorsunuz")
                continue

            match t:
                case "ping":
                    pong = {"type": "pong"}
                    if msg.get("_ping_id") is not None:
                        pong["_ping_id"] = msg["_ping_id"]
                    await send_json(websocket, pong)
                case "get_state":
                    await send_room_state(websocket, room_id)
                case _:
                    await send_error(websocket, f"Bilinmeyen mesaj tipi: {t}")

    except WebSocketDisconnect:
        pass
    except Exception as e:
        konsol.log(f"[red]WebSocket Error:[/] {e}")
    finally:
        await room_hub.disconnect(room_id, conn_id)
