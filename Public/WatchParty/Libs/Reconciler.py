# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__      import annotations
from collections.abc import Awaitable, Callable
from typing          import TYPE_CHECKING
from CLI             import konsol
from Settings        import RECONCILE_INTERVAL
from ..Models        import Room
import asyncio, inspect

if TYPE_CHECKING:
    from .RoomSession import RoomSession

RoomChangeCallback = Callable[[Room], Awaitable[None] | None]


class RoomReconciler:
    """
    Depodaki son snapshot'ı yerel oda ile karşılaştırır, farklıysa benimser.

    Diğer istemcilerin yazdıklarının görüldüğü tek yol budur. Kayıplıdır:
    aynı turda yapılmış yerel bir değişikliği son çekilen snapshot ezer.
    Poll (`start`) veya push (`notify`) ile sürülebilir, kural aynıdır.
    """

    def __init__(self, session: RoomSession, interval: float = RECONCILE_INTERVAL):
        self.session      = session
        self.interval     = interval
        self.listeners    : list[RoomChangeCallback] = []
        self._task        : asyncio.Task | None = None
        self._push_task   : asyncio.Task | None = None
        self._unsubscribe : Callable[[], None] | None = None

        self.adopted_count = 0
        self.failed_count  = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def add_listener(self, callback: RoomChangeCallback) -> None:
        self.listeners.append(callback)

    async def _emit(self, room: Room):
        for callback in list(self.listeners):
            try:
                sonuc = callback(room)
                if inspect.isawaitable(sonuc):
                    await sonuc
            except Exception as hata:
                konsol.log(f"[red]Reconcile dinleyici hatası:[/] {hata}")

    async def notify(self, room: Room) -> bool:
        """Push edilen (veya çekilen) snapshot'ı fark varsa benimse"""
        if not self.session.apply_remote(room):
            return False

        self.adopted_count += 1
        konsol.log(f"[dim]Uzak snapshot benimsendi:[/] {room.id} » {len(room.participants)} kişi, {len(room.messages)} mesaj")
        await self._emit(self.session.room)
        return True

    async def reconcile_once(self) -> bool:
        """Tek tur: depodan çek, karşılaştır, gerekirse benimse"""
        if not self.session.active:
            return False

        room_id = self.session.room.id
        try:
            uzak = await self.session.repository.get(room_id)
        except Exception as hata:
            self.failed_count += 1
            konsol.log(f"[red]Oda snapshot'ı çekilemedi ({room_id}):[/] {type(hata).__name__} » {hata}")
            return False

        if uzak is None:
            konsol.log(f"[yellow]Oda depoda yok, yerel state korunuyor:[/] {room_id}")
            return False

        return await self.notify(uzak)

    async def _loop(self):
        while self.session.active:
            await asyncio.sleep(self.interval)
            await self.reconcile_once()

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self._loop())
        return self._task

    def listen(self) -> bool:
        """Push destekleyen depoda snapshot bildirimlerine abone ol"""
        if not self.session.active or self._unsubscribe or self._push_task:
            return False

        repo    = self.session.repository
        room_id = self.session.room.id

        if hasattr(repo, "subscribe"):
            repo.subscribe(room_id, self.notify)
            self._unsubscribe = lambda: repo.unsubscribe(room_id, self.notify)
            return True

        if hasattr(repo, "listen"):
            self._push_task = repo.listen(room_id, self.notify)
            return True

        return False

    async def stop(self):
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

        for task in (self._task, self._push_task):
            if task and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

        self._task = self._push_task = None
