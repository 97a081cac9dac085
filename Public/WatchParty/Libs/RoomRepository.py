# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__            import annotations
from abc                   import ABC, abstractmethod
from collections.abc       import Awaitable, Callable
from pathlib               import Path
from CLI                   import konsol
from Libs                  import global_request
from websockets.exceptions import WebSocketException
from pydantic              import ValidationError as PydanticValidationError
from ..Models              import Room, normalize_room_id
import asyncio, inspect, json, os, tempfile, websockets

RoomListener = Callable[[Room], Awaitable[None] | None]

async def _notify(listener: RoomListener, room: Room) -> None:
    sonuc = listener(room)
    if inspect.isawaitable(sonuc):
        await sonuc


class RoomRepository(ABC):
    """
    Oda snapshot'larının kalıcı deposu.

    Son yazan kazanır: her put odanın tamamını üzerine yazar, alan bazlı
    yazma ya da versiyon kontrolü yoktur. Id'ler büyük/küçük harf duyarsızdır.
    """

    @abstractmethod
    async def get(self, room_id: str) -> Room | None:
        """Odayı getir, yoksa None"""

    @abstractmethod
    async def put(self, room_id: str, room: Room) -> None:
        """Odanın tam snapshot'ını yaz (idempotent)"""

    async def exists(self, room_id: str) -> bool:
        return await self.get(room_id) is not None


class MemoryRoomRepository(RoomRepository):
    """
    Süreç içi depo - snapshot'lar JSON metni olarak tutulur (tarayıcıdaki
    localStorage gibi), böylece her get bağımsız bir kopya döner.
    Push tabanlı senkron için subscribe/unsubscribe sunar.
    """

    def __init__(self):
        self._rooms: dict[str, str] = {}
        self._listeners: dict[str, list[RoomListener]] = {}
        self._lock = asyncio.Lock()

    async def get(self, room_id: str) -> Room | None:
        async with self._lock:
            veri = self._rooms.get(normalize_room_id(room_id))

        return Room.model_validate_json(veri) if veri else None

    async def put(self, room_id: str, room: Room) -> None:
        anahtar = normalize_room_id(room_id)
        veri    = room.to_json()

        async with self._lock:
            self._rooms[anahtar] = veri
            listeners = list(self._listeners.get(anahtar, []))

        # Lock dışında bildir
        for listener in listeners:
            try:
                await _notify(listener, Room.model_validate_json(veri))
            except Exception as hata:
                konsol.log(f"[red]Oda dinleyici hatası ({anahtar}):[/] {hata}")

    def subscribe(self, room_id: str, listener: RoomListener) -> None:
        self._listeners.setdefault(normalize_room_id(room_id), []).append(listener)

    def unsubscribe(self, room_id: str, listener: RoomListener) -> None:
        listeners = self._listeners.get(normalize_room_id(room_id), [])
        if listener in listeners:
            listeners.remove(listener)

    def room_ids(self) -> list[str]:
        return list(self._rooms.keys())


class FileRoomRepository(RoomRepository):
    """Her oda için bir JSON dosyası: <dizin>/room_<ID>.json"""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, room_id: str) -> Path:
        return self.directory / f"room_{normalize_room_id(room_id)}.json"

    def _read(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write(self, path: Path, veri: str) -> None:
        # Yarım yazılmış dosya okunmasın: geçici dosya + atomik replace
        fd, gecici = tempfile.mkstemp(dir=self.directory, prefix=".room_", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as dosya:
                dosya.write(veri)
            os.replace(gecici, path)
        except BaseException:
            Path(gecici).unlink(missing_ok=True)
            raise

    async def get(self, room_id: str) -> Room | None:
        veri = await asyncio.to_thread(self._read, self._path(room_id))
        return Room.model_validate_json(veri) if veri else None

    async def put(self, room_id: str, room: Room) -> None:
        await asyncio.to_thread(self._write, self._path(room_id), room.to_json())


class HttpRoomRepository(RoomRepository):
    """
    Depo sunucusuna (`/api/v1/rooms`) HTTP ile bağlanan istemci.

    Zaman aşımı ve tekrar deneme `global_request` içinde yapılır; çekirdek
    (session / reconciler) bunlardan habersizdir.
    """

    def __init__(self, base_url: str, requester = global_request):
        self.base_url  = base_url.rstrip("/")
        self.requester = requester

    def _url(self, room_id: str) -> str:
        return f"{self.base_url}/api/v1/rooms/{normalize_room_id(room_id)}"

    def ws_url(self, room_id: str) -> str:
        ws_base = self.base_url.replace("https://", "wss://", 1).replace("http://", "ws://", 1)
        return f"{ws_base}/wss/rooms/{normalize_room_id(room_id)}"

    async def get(self, room_id: str) -> Room | None:
        yanit = await self.requester.fetch(self._url(room_id))
        if yanit.status_code == 404:
            return None

        yanit.raise_for_status()
        return Room.model_validate(yanit.json())

    async def put(self, room_id: str, room: Room) -> None:
        yanit = await self.requester.fetch(self._url(room_id), method="PUT", json=room.to_dict())
        yanit.raise_for_status()

    def listen(self, room_id: str, listener: RoomListener, reconnect_delay: float = 2.0) -> asyncio.Task:
        """WebSocket üzerinden push edilen snapshot'ları dinle (iptal edilene kadar)"""

        async def _dinle():
            while True:
                try:
                    async with websockets.connect(self.ws_url(room_id), ping_interval=None) as ws:
                        async for raw in ws:
                            try:
                                mesaj = json.loads(raw)
                                if not isinstance(mesaj, dict) or mesaj.get("type") != "room_state" or not mesaj.get("room"):
                                    continue
                                room = Room.model_validate(mesaj["room"])
                            except (json.JSONDecodeError, PydanticValidationError) as hata:
                                konsol.log(f"[yellow]Geçersiz push mesajı atlandı ({room_id}):[/] {type(hata).__name__}")
                                continue

                            await _notify(listener, room)
                except asyncio.CancelledError:
                    raise
                except (OSError, WebSocketException) as hata:
                    konsol.log(f"[yellow]Oda push bağlantısı koptu ({room_id}):[/] {hata}")
                except Exception as hata:
                    konsol.log(f"[red]Oda push dinleyici hatası ({room_id}):[/] {type(hata).__name__} » {hata}")

                await asyncio.sleep(reconnect_delay)

        return asyncio.create_task(_dinle())


def build_repository(backend: str, storage_dir: str | Path | None = None) -> RoomRepository:
    """Ayarlardaki STORAGE_BACKEND değerine göre depo üret"""
    match backend:
        case "memory":
            return MemoryRoomRepository()
        case "file":
            return FileRoomRepository(storage_dir or ".rooms")
        case _:
            raise ValueError(f"Bilinmeyen depo türü: {backend}")
