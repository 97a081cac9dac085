# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__                import annotations
from collections.abc           import Mapping
from datetime                  import datetime, timezone
from pydantic                  import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
import secrets, string, time

SYSTEM_USER_ID   = "system"
SYSTEM_USER_NAME = "System"

HOST_AVATAR  = "https://images.pexels.com/photos/220453/pexels-photo-220453.jpeg?auto=compress&cs=tinysrgb&w=100&h=100&fit=crop"
GUEST_AVATAR = "https://images.pexels.com/photos/415829/pexels-photo-415829.jpeg?auto=compress&cs=tinysrgb&w=100&h=100&fit=crop"

_ROOM_ID_ALFABE = string.ascii_uppercase + string.digits
_TOKEN_ALFABE   = string.ascii_lowercase + string.digits

def new_user_id() -> str:
    return "".join(secrets.choice(_TOKEN_ALFABE) for _ in range(9))

def new_message_id() -> str:
    """Zaman sıralı mesaj id'si (aynı ns'de çakışmaya karşı rastgele kuyruk)"""
    kuyruk = "".join(secrets.choice(_TOKEN_ALFABE) for _ in range(4))
    return f"{time.time_ns():x}-{kuyruk}"

def new_room_id(length: int = 6) -> str:
    return "".join(secrets.choice(_ROOM_ID_ALFABE) for _ in range(length))

def normalize_room_id(room_id: str) -> str:
    """Oda id'leri büyük/küçük harf duyarsız: abc123 == ABC123"""
    return room_id.strip().upper()

def thumbnail_url(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Snapshot(BaseModel):
    """Değişmez snapshot tabanı - JSON'da camelCase, Python'da snake_case"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class User(_Snapshot):
    """Watch Party kullanıcısı"""
    id      : str  = Field(default_factory=new_user_id)
    name    : str
    is_host : bool = False
    avatar  : str  = GUEST_AVATAR


class ChatMessage(_Snapshot):
    """Chat mesajı (sistem mesajlarında user_id = "system")"""
    id        : str      = Field(default_factory=new_message_id)
    user_id   : str
    user_name : str
    message   : str      = Field(min_length=1)
    timestamp : datetime = Field(default_factory=_utc_now)

    @property
    def is_system(self) -> bool:
        return self.user_id == SYSTEM_USER_ID

    @classmethod
    def system(cls, message: str) -> ChatMessage:
        return cls(user_id=SYSTEM_USER_ID, user_name=SYSTEM_USER_NAME, message=message)


class MediaRef(_Snapshot):
    """Seçili video referansı, thumbnail id'den türetilir"""
    id        : str
    title     : str
    thumbnail : str = ""

    @classmethod
    def from_video(cls, video_id: str, title: str) -> MediaRef:
        return cls(id=video_id, title=title, thumbnail=thumbnail_url(video_id))


class PlayerStatePatch(_Snapshot):
    """PlayerState için kısmi güncelleme, sadece set edilen alanlar uygulanır"""
    is_playing   : bool  | None = None
    current_time : float | None = Field(default=None, ge=0)
    duration     : float | None = Field(default=None, ge=0)
    video_id     : str   | None = None

    @classmethod
    def coerce(cls, value: PlayerStatePatch | Mapping) -> PlayerStatePatch:
        """Hem patch hem de {"isPlaying": True} / {"is_playing": True} gibi dict kabul eder"""
        if isinstance(value, PlayerStatePatch):
            return value
        return cls.model_validate(dict(value))

    def fields(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class PlayerState(_Snapshot):
    """Oynatıcı görünümü: odanın oynatma alanları + sadece yerel duration"""
    is_playing   : bool  = False
    current_time : float = Field(default=0.0, ge=0)
    duration     : float = Field(default=0.0, ge=0)  # 0 = bilinmiyor
    video_id     : str   = ""

    def merge(self, patch: PlayerStatePatch | Mapping) -> PlayerState:
        """Alan bazında sığ birleştirme - yeni snapshot döner"""
        return self.model_copy(update=PlayerStatePatch.coerce(patch).fields())


class Room(_Snapshot):
    """Watch Party odası - paylaşılan tek state birimi"""
    id            : str
    name          : str
    current_video : MediaRef | None    = None
    participants  : tuple[User, ...]        = ()
    messages      : tuple[ChatMessage, ...] = ()
    is_playing    : bool     = False
    current_time  : float    = Field(default=0.0, ge=0)
    created_at    : datetime = Field(default_factory=_utc_now)

    @property
    def host(self) -> User | None:
        return next((user for user in self.participants if user.is_host), None)

    def participant(self, user_id: str) -> User | None:
        return next((user for user in self.participants if user.id == user_id), None)

    def is_host(self, user_id: str) -> bool:
        user = self.participant(user_id)
        return bool(user and user.is_host)

    def has_participant_named(self, name: str) -> bool:
        return any(user.name == name for user in self.participants)

    # ! ----------------------------------------» Yeni snapshot üreten yardımcılar

    def with_participant(self, user: User) -> Room:
        if self.participant(user.id):
            return self
        return self.model_copy(update={"participants": (*self.participants, user)})

    def with_message(self, message: ChatMessage) -> Room:
        return self.model_copy(update={"messages": (*self.messages, message)})

    def with_playback(self, is_playing: bool, current_time: float) -> Room:
        return self.model_copy(update={"is_playing": is_playing, "current_time": current_time})

    def with_video(self, media: MediaRef) -> Room:
        """Yeni video her zaman 0. saniyede ve durmuş başlar"""
        return self.model_copy(update={"current_video": media, "is_playing": False, "current_time": 0.0})
