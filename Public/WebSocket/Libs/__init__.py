# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .RoomHub import RoomHub, room_hub
