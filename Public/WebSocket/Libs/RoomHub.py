# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi                  import WebSocket
from CLI                      import konsol
from Settings                 import STORAGE_BACKEND, STORAGE_DIR
from Public.WatchParty.Libs   import RoomRepository, build_repository
from Public.WatchParty.Models import Room, normalize_room_id
import json, asyncio, uuid

class RoomHub:
    """Sunucu tarafı oda deposu + oda bazlı WebSocket aboneleri"""

    def __init__(self, repository: RoomRepository):
        self.repository = repository
        self.sockets: dict[str, dict[str, WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, room_id: str, websocket: WebSocket) -> str:
        """Aboneyi kaydet (lock protected)"""
        conn_id = str(uuid.uuid4())[:8]
        async with self._lock:
            self.sockets.setdefault(normalize_room_id(room_id), {})[conn_id] = websocket
        return conn_id

    async def disconnect(self, room_id: str, conn_id: str) -> bool:
        """Aboneyi sil, oda boşaldıysa kaydı kaldır"""
        room_id = normalize_room_id(room_id)
        async with self._lock:
            aboneler = self.sockets.get(room_id)
            if not aboneler or conn_id not in aboneler:
                return False

            del aboneler[conn_id]
            if not aboneler:
                del self.sockets[room_id]
            return True

    async def subscriber_count(self, room_id: str) -> int:
        async with self._lock:
            return len(self.sockets.get(normalize_room_id(room_id), {}))

    async def get_room(self, room_id: str) -> Room | None:
        return await self.repository.get(room_id)

    async def put_room(self, room_id: str, room: Room) -> None:
        """Snapshot'ı yaz ve odadaki herkese push et"""
        await self.repository.put(room_id, room)
        await self.broadcast_to_room(room_id, {"type": "room_state", "room": room.to_dict()})

    async def broadcast_to_room(self, room_id: str, message: dict, exclude_conn_id: str | None = None) -> None:
        """Odadaki herkese mesaj gönder (parallel safe send)"""
        async with self._lock:
            aboneler = dict(self.sockets.get(normalize_room_id(room_id), {}))

        if not aboneler:
            return

        message_str = json.dumps(message, ensure_ascii=False)

        # Helper: Safe send with timeout
        async def _safe_send(conn_id: str, ws: WebSocket, timeout: float = 1.5):
            try:
                await asyncio.wait_for(ws.send_text(message_str), timeout=timeout)
            except Exception as hata:
                konsol.log(f"[yellow]Push gönderilemedi ({room_id}/{conn_id}):[/] {type(hata).__name__}")

        await asyncio.gather(*(
            _safe_send(conn_id, ws)
                for conn_id, ws in aboneler.items()
                    if conn_id != exclude_conn_id
        ))

    async def close_all(self) -> None:
        """Kapanışta tüm WebSocket'leri kapat"""
        async with self._lock:
            tum_soketler = [ws for aboneler in self.sockets.values() for ws in aboneler.values()]
            self.sockets.clear()

        for ws in tum_soketler:
            try:
                await ws.close()
            except Exception:
                pass


# Singleton instance
room_hub = RoomHub(build_repository(STORAGE_BACKEND, STORAGE_DIR))
