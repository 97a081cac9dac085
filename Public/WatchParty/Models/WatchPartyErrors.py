# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

class WatchPartyError(Exception):
    """Watch Party alt sisteminin temel hatası"""

class ValidationError(WatchPartyError, ValueError):
    """Boş ya da sınırı aşan girdi - hiçbir state değişmeden reddedilir"""

class RoomNotFound(WatchPartyError, LookupError):
    """Depoda bu id ile oda yok"""

    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Oda bulunamadı: {room_id}")

class AuthorityError(WatchPartyError, PermissionError):
    """Host olmayan kullanıcı host yetkisi gerektiren bir işlem denedi"""

    def __init__(self, user_name: str, action: str):
        self.user_name = user_name
        self.action    = action
        super().__init__(f"{user_name} için yetki yok: {action}")

class AdapterFailure(WatchPartyError):
    """Video oynatıcı yüklenemedi ya da durum bildiremedi"""

    def __init__(self, video_id: str, reason: str = ""):
        self.video_id = video_id
        self.reason   = reason
        super().__init__(f"Oynatıcı hatası ({video_id}): {reason}" if reason else f"Oynatıcı hatası ({video_id})")

class SessionNotActive(WatchPartyError):
    """Aktif oda/kullanıcı olmadan oturum işlemi çağrıldı"""
