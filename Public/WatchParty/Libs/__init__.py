# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .RoomRepository import RoomRepository, MemoryRoomRepository, FileRoomRepository, HttpRoomRepository, build_repository
from .Reconciler     import RoomReconciler
from .PlayerAdapter  import PlayerAdapter, SimulatedPlayer, PlayerBridge, extract_video_id
from .RoomSession    import RoomSession, build_share_link, parse_share_link
