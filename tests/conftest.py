# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Public.WatchParty.Libs import MemoryRoomRepository, RoomSession
from Public.WebSocket.Libs  import room_hub
from Libs                   import global_request
from Core                   import kekik_FastAPI
import httpx, pytest, pytest_asyncio

PUBLIC_URL = "https://watch.example/"


class FakeClock:
    """Elle ilerletilen monotonic saat"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repo() -> MemoryRoomRepository:
    return MemoryRoomRepository()


@pytest.fixture
def make_session(repo, clock):
    def _make(repository=None) -> RoomSession:
        return RoomSession(repository or repo, clock=clock, public_url=PUBLIC_URL)
    return _make


@pytest.fixture
def hub_repo(monkeypatch) -> MemoryRoomRepository:
    """Sunucu tarafı hub'ı her test için boş bir depoya bağla"""
    fresh = MemoryRoomRepository()
    monkeypatch.setattr(room_hub, "repository", fresh)
    return fresh


@pytest_asyncio.fixture
async def api_client(hub_repo):
    transport = httpx.ASGITransport(app=kekik_FastAPI)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def asgi_requester(hub_repo):
    """global_request'i ağ yerine doğrudan uygulamaya yönlendir"""
    await global_request.stop()
    await global_request.start(transport=httpx.ASGITransport(app=kekik_FastAPI))
    yield global_request
    await global_request.stop()
