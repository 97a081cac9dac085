# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Public.WatchParty.Models import Room, User, ChatMessage
import pytest


def _room(room_id: str = "ABC123") -> Room:
    return Room(
        id           = room_id,
        name         = "Movie Night",
        participants = (User(name="Alice", is_host=True),),
        messages     = (ChatMessage.system("🎉 Alice odayı oluşturdu! Arkadaşlarını davet et!"),),
    )


@pytest.mark.asyncio
async def test_get_missing_room_returns_404(api_client):
    yanit = await api_client.get("/api/v1/rooms/zzzzzz")

    assert yanit.status_code == 404
    assert yanit.json() == {"success": False, "message": "Oda bulunamadı: ZZZZZZ"}


@pytest.mark.asyncio
async def test_put_then_get(api_client, hub_repo):
    room  = _room()
    yanit = await api_client.put("/api/v1/rooms/abc123", json=room.to_dict())

    assert yanit.status_code == 200
    assert yanit.json() == {"success": True, "roomId": "ABC123"}
    assert await hub_repo.get("ABC123") == room

    yanit = await api_client.get("/api/v1/rooms/Abc123")
    assert yanit.status_code == 200
    assert yanit.json()["isPlaying"] is False
    assert Room.model_validate(yanit.json()) == room
    assert yanit.headers["cache-control"] == "no-store"
    assert yanit.headers["x-robots-tag"] == "noindex, nofollow"


@pytest.mark.asyncio
async def test_put_with_mismatched_id_is_rejected(api_client, hub_repo):
    yanit = await api_client.put("/api/v1/rooms/OTHER1", json=_room().to_dict())

    assert yanit.status_code == 422
    assert yanit.json()["success"] is False
    assert hub_repo.room_ids() == []


@pytest.mark.asyncio
async def test_put_with_invalid_body_is_rejected(api_client):
    yanit = await api_client.put("/api/v1/rooms/ABC123", json={"id": "ABC123"})

    assert yanit.status_code == 422
    assert yanit.json()["success"] is False
    assert "name" in yanit.json()["message"]


@pytest.mark.asyncio
async def test_health(api_client):
    yanit = await api_client.get("/api/v1/health")

    assert yanit.status_code == 200
    assert yanit.json()["success"] is True
    assert yanit.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_share_link_redirects_to_snapshot(api_client):
    yanit = await api_client.get("/", params={"room": "abc123"})

    assert yanit.status_code == 302
    assert yanit.headers["location"] == "/api/v1/rooms/ABC123"

    yanit = await api_client.get("/")
    assert yanit.status_code == 200
    assert yanit.json()["api"] == "/api/v1"


@pytest.mark.asyncio
async def test_share_link_redirect_cannot_escape_rooms_path(api_client):
    yanit = await api_client.get("/", params={"room": "../health"})

    assert yanit.status_code == 302
    assert yanit.headers["location"] == "/api/v1/rooms/..%2FHEALTH"
