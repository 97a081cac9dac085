# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__      import annotations
from collections.abc import Callable, Mapping
from urllib.parse    import urlparse, urlunparse, parse_qs, urlencode
from CLI             import konsol
from Settings        import PUBLIC_URL, SYNC_DEBOUNCE, SEEK_THRESHOLD, MAX_MESSAGE_LENGTH, ROOM_ID_LENGTH, RECONCILE_INTERVAL
from ..Models        import (
    HOST_AVATAR, GUEST_AVATAR,
    User, ChatMessage, MediaRef, PlayerState, PlayerStatePatch, Room,
    new_room_id, normalize_room_id,
    ValidationError, RoomNotFound, AuthorityError, SessionNotActive
)
from .RoomRepository import RoomRepository
from .Reconciler     import RoomReconciler
from .PlayerAdapter  import extract_video_id
import secrets, string, time

MAX_ROOM_ID_ATTEMPTS = 16

def build_share_link(base_url: str, room_id: str) -> str:
    """Odaya katılım linki: <base>?room=<ID>"""
    parca = urlparse(base_url)
    sorgu = {k: v[-1] for k, v in parse_qs(parca.query).items()}
    sorgu["room"] = normalize_room_id(room_id)
    return urlunparse(parca._replace(query=urlencode(sorgu)))

def parse_share_link(url: str) -> str | None:
    """Linkteki room parametresini (normalize edilmiş) döndür"""
    degerler = parse_qs(urlparse(url).query).get("room")
    if not degerler or not degerler[-1].strip():
        return None
    return normalize_room_id(degerler[-1])

def _unique_name(room: Room, user_name: str) -> str:
    """İsim odada varsa kısa rastgele ek ile ayırt et"""
    isim = user_name
    while room.has_participant_named(isim):
        ek   = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(4))
        isim = f"{user_name}#{ek}"
    return isim


class RoomSession:
    """
    Tek bir istemcinin aktif oda üyeliği.

    Yerel Room + User + PlayerState'in tek sahibidir; yetki kurallarını uygular,
    her değişikliği depoya tam snapshot olarak yazar ve dikkate değer geçişler
    için sistem mesajı üretir. Diğer istemcilerin yazdıkları sadece
    `apply_remote` üzerinden (reconciler) görülür.
    """

    def __init__(
        self,
        repository         : RoomRepository,
        *,
        clock              : Callable[[], float] = time.monotonic,
        public_url         : str   = PUBLIC_URL,
        debounce           : float = SYNC_DEBOUNCE,
        seek_threshold     : float = SEEK_THRESHOLD,
        max_message_length : int   = MAX_MESSAGE_LENGTH,
        room_id_length     : int   = ROOM_ID_LENGTH,
    ):
        self.repository         = repository
        self.clock              = clock
        self.public_url         = public_url
        self.debounce           = debounce
        self.seek_threshold     = seek_threshold
        self.max_message_length = max_message_length
        self.room_id_length     = room_id_length

        self.room         : Room | None = None
        self.user         : User | None = None
        self.player_state : PlayerState = PlayerState()
        self.share_link   : str  | None = None

        self.reconciler : RoomReconciler | None = None
        self.bridge     = None  # PlayerBridge, bağlanırsa
        self.closed     = False

        self._last_sync_at : float | None = None

    # ! ----------------------------------------» Yaşam döngüsü

    @property
    def active(self) -> bool:
        return not self.closed and self.room is not None and self.user is not None

    @property
    def is_host(self) -> bool:
        return self.active and self.room.is_host(self.user.id)

    def _require_active(self):
        if not self.active:
            raise SessionNotActive("Aktif oda yok - önce create_room / join_room çağrılmalı")

    def _require_fresh(self):
        if self.closed:
            raise SessionNotActive("Oturum kapatılmış")
        if self.room is not None:
            raise SessionNotActive(f"Oturum zaten {self.room.id} odasına bağlı")

    def start_reconciler(self, interval: float = RECONCILE_INTERVAL, autostart: bool = True) -> RoomReconciler:
        """Depoyu periyodik olarak yoklayan reconciler'ı bağla (ve başlat)"""
        self._require_active()
        if self.reconciler is None:
            self.reconciler = RoomReconciler(self, interval=interval)
            if self.bridge:
                self.reconciler.add_listener(self.bridge.apply_room)
        if autostart:
            self.reconciler.start()
        return self.reconciler

    async def close(self):
        """Reconciler'ı durdur, oynatıcıyı bırak - oda depoda kalır"""
        if self.closed:
            return

        self.closed = True

        if self.reconciler:
            await self.reconciler.stop()

        if self.bridge:
            await self.bridge.release()

    async def __aenter__(self) -> RoomSession:
        return self

    async def __aexit__(self, *_):
        await self.close()

    # ! ----------------------------------------» Oda oluştur / katıl

    async def _fresh_room_id(self) -> str:
        for _ in range(MAX_ROOM_ID_ATTEMPTS):
            room_id = new_room_id(self.room_id_length)
            if not await self.repository.exists(room_id):
                return room_id

        raise RuntimeError("Boş oda id'si üretilemedi")

    async def create_room(self, room_name: str, user_name: str) -> tuple[Room, User]:
        """Yeni oda oluştur, kurucu kullanıcı host olur"""
        self._require_fresh()

        user = User(name=user_name, is_host=True, avatar=HOST_AVATAR)
        room = Room(
            id           = await self._fresh_room_id(),
            name         = room_name,
            participants = (user,),
            messages     = (ChatMessage.system(f"🎉 {user_name} odayı oluşturdu! Arkadaşlarını davet et!"),),
        )

        await self.repository.put(room.id, room)

        self.room       = room
        self.user       = user
        self.share_link = build_share_link(self.public_url, room.id)

        konsol.log(f"[green]Oda oluşturuldu:[/] [bold]{room.id}[/] ({room_name}) » host: {user_name}")
        return room, user

    async def join_room(self, room_id: str, user_name: str) -> tuple[Room, User]:
        """Var olan odaya katıl - oda yoksa RoomNotFound"""
        self._require_fresh()

        room_id  = normalize_room_id(room_id)
        mevcut   = await self.repository.get(room_id)
        if mevcut is None:
            konsol.log(f"[yellow]Oda bulunamadı:[/] {room_id}")
            raise RoomNotFound(room_id)

        user = User(name=_unique_name(mevcut, user_name), is_host=False, avatar=GUEST_AVATAR)
        room = (
            mevcut
                .with_participant(user)
                .with_message(ChatMessage.system(f"👋 {user.name} odaya katıldı!"))
        )

        await self.repository.put(room.id, room)

        self.room       = room
        self.user       = user
        self.share_link = build_share_link(self.public_url, room.id)

        # Videosu olan odada oynatıcıyı paylaşılan durumdan başlat
        if room.current_video:
            self.player_state = PlayerState(
                is_playing   = room.is_playing,
                current_time = room.current_time,
                duration     = 0.0,
                video_id     = room.current_video.id,
            )

        konsol.log(f"[green]Odaya katılındı:[/] [bold]{room.id}[/] » {user.name}")
        return room, user

    # ! ----------------------------------------» Sohbet

    def validate_message(self, text: str) -> str:
        """Trim edilmiş metni döndür, boş / uzun metinde ValidationError"""
        metin = (text or "").strip()
        if not metin:
            raise ValidationError("Mesaj boş olamaz")

        if len(metin) > self.max_message_length:
            raise ValidationError(f"Mesaj en fazla {self.max_message_length} karakter olabilir")

        return metin

    def add_system_message(self, text: str) -> ChatMessage:
        """Yerel odaya sistem mesajı ekle (kalıcı yazma çağırana ait)"""
        self._require_active()
        mesaj     = ChatMessage.system(text)
        self.room = self.room.with_message(mesaj)
        return mesaj

    async def send_message(self, text: str) -> ChatMessage:
        """Kullanıcı mesajını sona ekle ve yaz"""
        self._require_active()
        metin = self.validate_message(text)

        mesaj     = ChatMessage(user_id=self.user.id, user_name=self.user.name, message=metin)
        self.room = self.room.with_message(mesaj)

        await self.repository.put(self.room.id, self.room)
        return mesaj

    # ! ----------------------------------------» Video

    async def change_video(self, video_id: str, title: str) -> bool:
        """Sadece host: videoyu değiştir, oynatma 0. saniyede durmuş başlar"""
        self._require_active()

        if not self.is_host:
            hata = AuthorityError(self.user.name, "change_video")
            konsol.log(f"[yellow]Yetkisiz video değişikliği yok sayıldı:[/] {hata}")
            return False

        self.room = self.room.with_video(MediaRef.from_video(video_id, title))
        self.player_state = PlayerState(is_playing=False, current_time=0.0, duration=0.0, video_id=video_id)
        self.add_system_message(f"🎵 {self.user.name} videoyu değiştirdi: {title}")

        await self.repository.put(self.room.id, self.room)

        if self.bridge:
            await self.bridge.apply_room(self.room)
        return True

    async def change_video_from_url(self, url: str, title: str | None = None) -> bool:
        """YouTube linkinden video değiştir - geçersiz linkte ValidationError"""
        video_id = extract_video_id(url)
        if not video_id:
            raise ValidationError("Geçerli bir YouTube linki girin")

        return await self.change_video(video_id, (title or "").strip() or f"Yeni video {video_id}")

    # ! ----------------------------------------» Oynatma senkronu

    def _debounced(self, force_sync: bool) -> bool:
        """Pencere içindeki zorunlu olmayan çağrı düşürülür"""
        simdi = self.clock()
        if not force_sync and self._last_sync_at is not None and simdi - self._last_sync_at < self.debounce:
            return True

        self._last_sync_at = simdi
        return False

    def _transition_message(self, onceki: PlayerState, patch: PlayerStatePatch) -> str | None:
        if patch.is_playing is not None and patch.is_playing != onceki.is_playing:
            return f"▶️ {self.user.name} oynatmayı başlattı" if patch.is_playing else f"⏸️ {self.user.name} duraklattı"

        if patch.current_time is not None and abs(patch.current_time - onceki.current_time) > self.seek_threshold:
            return f"⏩ {self.user.name} {int(patch.current_time)}. saniyeye atladı"

        return None

    async def sync_player_state(self, patch: PlayerStatePatch | Mapping, force_sync: bool = False) -> bool:
        """
        Oynatıcıdan gelen durum değişikliği (toggle, seek, zaman ilerlemesi).

        - force_sync olmayan çağrılar debounce penceresinde düşürülür.
        - Patch yerel PlayerState'e her zaman birleştirilir.
        - Sadece host'un değişikliği odaya yansır ve depoya yazılır.

        Depoya yazıldıysa True döner.
        """
        self._require_active()
        patch = PlayerStatePatch.coerce(patch)

        if self._debounced(force_sync):
            return False

        onceki = self.player_state
        self.player_state = onceki.merge(patch)

        if not self.is_host:
            return False

        self.room = self.room.with_playback(self.player_state.is_playing, self.player_state.current_time)

        if mesaj := self._transition_message(onceki, patch):
            self.add_system_message(mesaj)

        await self.repository.put(self.room.id, self.room)
        return True

    def report_duration(self, duration: float) -> None:
        """Oynatıcının bildirdiği süre - sadece yerel, odaya yazılmaz"""
        self.player_state = self.player_state.merge({"duration": max(float(duration), 0.0)})

    # ! ----------------------------------------» Uzak snapshot

    def apply_remote(self, room: Room) -> bool:
        """Depodan gelen snapshot farklıysa yerel state'i onunla değiştir"""
        if self.closed or self.room is None or room == self.room:
            return False

        self.room = room

        if room.current_video:
            video_id = room.current_video.id
            duration = self.player_state.duration if self.player_state.video_id == video_id else 0.0
            self.player_state = PlayerState(
                is_playing   = room.is_playing,
                current_time = room.current_time,
                duration     = duration,
                video_id     = video_id,
            )

        return True
