# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .WatchPartyModels import (
    SYSTEM_USER_ID, SYSTEM_USER_NAME, HOST_AVATAR, GUEST_AVATAR,
    User, ChatMessage, MediaRef, PlayerState, PlayerStatePatch, Room,
    new_user_id, new_message_id, new_room_id, normalize_room_id, thumbnail_url
)
from .WatchPartyErrors import (
    WatchPartyError, ValidationError, RoomNotFound, AuthorityError, AdapterFailure, SessionNotActive
)
