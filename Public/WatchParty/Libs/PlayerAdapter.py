# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__      import annotations
from abc             import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from typing          import TYPE_CHECKING
from CLI             import konsol
from Settings        import PLAYBACK_TICK, ADAPTER_RETRIES, SEEK_THRESHOLD
from ..Models        import PlayerStatePatch, Room, AdapterFailure
import asyncio, inspect, re, time

if TYPE_CHECKING:
    from .RoomSession import RoomSession

YOUTUBE_ID_REGEX = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)")

StateCallback = Callable[[PlayerStatePatch, bool], Awaitable[None] | None]

def extract_video_id(url: str) -> str | None:
    """youtube.com/watch?v=..., youtu.be/... veya youtube.com/embed/... linkinden video id"""
    eslesme = YOUTUBE_ID_REGEX.search(url or "")
    return eslesme[1] if eslesme else None


class PlayerAdapter(ABC):
    """
    Üçüncü parti video widget'ı sarmalayan sınır.

    Çekirdek sadece play / pause / seek komutu verebilmeli, oynatma durumunu
    okuyabilmeli ve kullanıcı etkileşimlerini `on_state_change` ile almalıdır.
    `duration` süresiz olarak 0 (bilinmiyor) kalabilir.
    """

    def __init__(self):
        self.on_state_change: StateCallback | None = None

    async def emit(self, patch: PlayerStatePatch | Mapping, force_sync: bool = False):
        if self.on_state_change is None:
            return

        sonuc = self.on_state_change(PlayerStatePatch.coerce(patch), force_sync)
        if inspect.isawaitable(sonuc):
            await sonuc

    @property
    @abstractmethod
    def video_id(self) -> str: ...

    @property
    @abstractmethod
    def is_playing(self) -> bool: ...

    @property
    @abstractmethod
    def current_time(self) -> float: ...

    @property
    @abstractmethod
    def duration(self) -> float: ...

    @abstractmethod
    async def load(self, video_id: str) -> None:
        """Videoyu yükle - aynı id için tekrar çağrı etkisizdir"""

    @abstractmethod
    async def play(self) -> None: ...

    @abstractmethod
    async def pause(self) -> None: ...

    @abstractmethod
    async def seek(self, seconds: float) -> None: ...

    async def release(self) -> None:
        self.on_state_change = None


class SimulatedPlayer(PlayerAdapter):
    """
    Ekransız oynatıcı - testler ve demo için.

    Komutlar (play/pause/seek) olay üretmez; `user_*` metodları kullanıcı
    etkileşimini taklit eder ve zorunlu senkron olayı yayar.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, known_duration: float = 0.0, fail_loads: int = 0):
        super().__init__()
        self.clock          = clock
        self.known_duration = known_duration
        self.fail_loads     = fail_loads
        self.load_count     = 0

        self._video_id   = ""
        self._playing    = False
        self._base_time  = 0.0
        self._started_at = 0.0
        self._duration   = 0.0

    @property
    def video_id(self) -> str:
        return self._video_id

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def current_time(self) -> float:
        zaman = self._base_time
        if self._playing:
            zaman += self.clock() - self._started_at

        if self._duration > 0:
            zaman = min(zaman, self._duration)
        return max(zaman, 0.0)

    @property
    def duration(self) -> float:
        return self._duration

    async def load(self, video_id: str) -> None:
        if video_id == self._video_id:
            return

        self.load_count += 1
        if self.fail_loads > 0:
            self.fail_loads -= 1
            raise AdapterFailure(video_id, "widget yüklenemedi")

        self._video_id  = video_id
        self._playing   = False
        self._base_time = 0.0
        self._duration  = 0.0

    async def play(self) -> None:
        if not self._playing:
            self._started_at = self.clock()
            self._playing    = True

    async def pause(self) -> None:
        if self._playing:
            self._base_time = self.current_time
            self._playing   = False

    async def seek(self, seconds: float) -> None:
        self._base_time  = max(float(seconds), 0.0)
        self._started_at = self.clock()

    def advance(self, seconds: float) -> None:
        """Oynarken konumu saatten bağımsız ileri al (demo)"""
        if self._playing:
            self._base_time += max(float(seconds), 0.0)

    async def report_duration(self) -> None:
        """Widget metadata'yı okudu gibi davran"""
        if self.known_duration > 0:
            self._duration = self.known_duration
            await self.emit({"duration": self._duration})

    # ! ----------------------------------------» Kullanıcı etkileşimi

    async def user_toggle(self) -> None:
        await (self.pause() if self._playing else self.play())
        await self.emit({"isPlaying": self._playing, "currentTime": self.current_time}, force_sync=True)

    async def user_seek(self, seconds: float) -> None:
        await self.seek(seconds)
        await self.emit({"currentTime": self.current_time}, force_sync=True)


class PlayerBridge:
    """
    Oynatıcı ile oturum arasındaki kablolama.

    - Kullanıcı olayları → `sync_player_state(..., force_sync=True)`
    - Oynatma saati (≈1 Hz) → zorunlu olmayan `sync_player_state`
    - Reconcile edilen oda → oynatıcıya load / seek / play / pause komutları
    - AdapterFailure → oturumun son bilinen PlayerState'i korunur, oynatıcı
      aynı video için yeniden oluşturulur
    """

    def __init__(
        self,
        session        : RoomSession,
        factory        : Callable[[], PlayerAdapter],
        *,
        tick           : float = PLAYBACK_TICK,
        retries        : int   = ADAPTER_RETRIES,
        seek_threshold : float = SEEK_THRESHOLD,
    ):
        self.session        = session
        self.factory        = factory
        self.tick_interval  = tick
        self.retries        = retries
        self.seek_threshold = seek_threshold

        self.adapter : PlayerAdapter  | None = None
        self.error   : AdapterFailure | None = None
        self._tick_task : asyncio.Task | None = None

    @property
    def loading(self) -> bool:
        return self.error is not None

    def _new_adapter(self) -> PlayerAdapter:
        adapter = self.factory()
        adapter.on_state_change = self.handle_event
        return adapter

    async def attach(self, start_clock: bool = True) -> PlayerBridge:
        """Oturuma bağlan, mevcut videoyu yükle, oynatma saatini başlat"""
        self.session.bridge = self
        if self.session.reconciler:
            self.session.reconciler.add_listener(self.apply_room)

        self.adapter = self._new_adapter()
        if self.session.player_state.video_id and await self.ensure_loaded(self.session.player_state.video_id):
            await self._align(self.session.player_state.is_playing, self.session.player_state.current_time)

        if start_clock:
            self._tick_task = asyncio.create_task(self._clock_loop())
        return self

    async def ensure_loaded(self, video_id: str) -> bool:
        """Videoyu yükle; hata olursa oynatıcıyı yeniden yaratıp tekrar dene"""
        for deneme in range(1, self.retries + 1):
            try:
                await self.adapter.load(video_id)
                self.error = None
                return True
            except AdapterFailure as hata:
                self.error = hata
                konsol.log(f"[yellow]Oynatıcı hatası ({deneme}/{self.retries}):[/] {hata}")
                await self.adapter.release()
                self.adapter = self._new_adapter()

        konsol.log(f"[red]Oynatıcı yüklenemedi, son bilinen durum korunuyor:[/] {video_id}")
        return False

    async def handle_event(self, patch: PlayerStatePatch, force_sync: bool = False):
        """Oynatıcıdan gelen olay"""
        if not self.session.active:
            return

        alanlar = patch.fields()
        if set(alanlar) == {"duration"}:
            self.session.report_duration(patch.duration)
            return

        await self.session.sync_player_state(patch, force_sync=force_sync)

    async def tick(self) -> bool:
        """Oynatma saatinin tek adımı: oynarken zamanı ilerlet"""
        if not self.session.active or self.adapter is None or self.error or not self.adapter.is_playing:
            return False

        return await self.session.sync_player_state({"currentTime": self.adapter.current_time})

    async def _clock_loop(self):
        while self.session.active:
            await asyncio.sleep(self.tick_interval)
            await self.tick()

    async def _align(self, is_playing: bool, current_time: float):
        if abs(self.adapter.current_time - current_time) > self.seek_threshold:
            await self.adapter.seek(current_time)

        if is_playing and not self.adapter.is_playing:
            await self.adapter.play()
        elif not is_playing and self.adapter.is_playing:
            await self.adapter.pause()

    async def apply_room(self, room: Room):
        """Reconcile edilen paylaşılan durumu oynatıcıya uygula"""
        if self.adapter is None or room.current_video is None:
            return

        if self.adapter.video_id != room.current_video.id or self.error:
            if not await self.ensure_loaded(room.current_video.id):
                return

        try:
            await self._align(room.is_playing, room.current_time)
        except AdapterFailure as hata:
            self.error = hata
            konsol.log(f"[yellow]Oynatıcı komutu başarısız:[/] {hata}")
            await self.adapter.release()
            self.adapter = self._new_adapter()
            await self.ensure_loaded(room.current_video.id)

    async def release(self):
        task, self._tick_task = self._tick_task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if self.adapter:
            await self.adapter.release()
            self.adapter = None
