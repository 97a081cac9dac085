# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Public.WatchParty.Libs   import RoomSession, build_share_link, parse_share_link
from Public.WatchParty.Models import ValidationError, RoomNotFound, SessionNotActive, SYSTEM_USER_ID
import pytest, string


async def _alice_and_bob(make_session):
    alice = make_session()
    room, _ = await alice.create_room("Movie Night", "Alice")

    bob = make_session()
    await bob.join_room(room.id.lower(), "Bob")
    return alice, bob


# ! ----------------------------------------» Senaryo

@pytest.mark.asyncio
async def test_movie_night_scenario(make_session, repo):
    alice = make_session()
    room, alice_user = await alice.create_room("Movie Night", "Alice")

    assert len(room.id) >= 6
    assert alice_user.is_host
    assert len(room.messages) == 1
    assert alice.share_link == f"https://watch.example/?room={room.id}"

    bob = make_session()
    room, bob_user = await bob.join_room(room.id, "Bob")

    assert len(room.participants) == 2
    assert not bob_user.is_host
    assert len(room.messages) == 2

    # Alice, Bob'un katılımını reconcile ile görür
    alice.start_reconciler(autostart=False)
    assert await alice.reconciler.reconcile_once()

    assert await alice.change_video("abc123XYZ", "Test")
    stored = await repo.get(room.id)
    assert stored.current_video.id == "abc123XYZ"
    assert stored.is_playing is False
    assert stored.current_time == 0
    assert len(stored.messages) == 3

    assert await alice.sync_player_state({"isPlaying": True}, force_sync=True)
    stored = await repo.get(room.id)
    assert stored.is_playing is True
    assert len(stored.messages) == 4

    assert await bob.change_video("zzz", "Hacked") is False
    assert await repo.get(room.id) == stored
    assert len(stored.messages) == 4

    await alice.close()
    await bob.close()


# ! ----------------------------------------» Oda oluştur / katıl

@pytest.mark.asyncio
async def test_create_room_has_single_host_and_welcome(make_session, repo):
    session = make_session()
    room, user = await session.create_room("Movie Night", "Alice")

    assert set(room.id) <= set(string.ascii_uppercase + string.digits)
    assert [u for u in room.participants if u.is_host] == [user]
    assert room.messages[0].user_id == SYSTEM_USER_ID
    assert "Alice odayı oluşturdu" in room.messages[0].message
    assert await repo.get(room.id) == room
    assert session.is_host


@pytest.mark.asyncio
async def test_joiners_are_never_host(make_session, repo):
    alice, bob = await _alice_and_bob(make_session)
    carol = make_session()
    await carol.join_room(alice.room.id, "Carol")

    stored = await repo.get(alice.room.id)
    assert [u.name for u in stored.participants if u.is_host] == ["Alice"]
    assert not bob.is_host
    assert not carol.is_host
    assert stored.messages[-1].message == "👋 Carol odaya katıldı!"


@pytest.mark.asyncio
async def test_join_missing_room_raises(make_session, repo):
    session = make_session()

    with pytest.raises(RoomNotFound) as hata:
        await session.join_room("zzzzzz", "Bob")

    assert hata.value.room_id == "ZZZZZZ"
    assert repo.room_ids() == []
    assert not session.active


@pytest.mark.asyncio
async def test_duplicate_names_are_disambiguated(make_session):
    alice, bob = await _alice_and_bob(make_session)
    ikinci_bob = make_session()
    _, user = await ikinci_bob.join_room(alice.room.id, "Bob")

    assert user.name != "Bob"
    assert user.name.startswith("Bob#")


@pytest.mark.asyncio
async def test_session_lifecycle_guards(make_session):
    session = make_session()

    with pytest.raises(SessionNotActive):
        await session.send_message("selam")

    await session.create_room("Oda", "Alice")
    with pytest.raises(SessionNotActive):
        await session.create_room("Başka", "Alice")

    await session.close()
    assert not session.active
    with pytest.raises(SessionNotActive):
        await session.send_message("selam")


# ! ----------------------------------------» Sohbet

@pytest.mark.asyncio
async def test_send_message_appends_trimmed_text(make_session, repo):
    alice, bob = await _alice_and_bob(make_session)
    once = len(bob.room.messages)

    mesaj = await bob.send_message("  merhaba millet  ")

    stored = await repo.get(bob.room.id)
    assert len(stored.messages) == once + 1
    assert stored.messages[-1] == mesaj
    assert mesaj.message == "merhaba millet"
    assert mesaj.user_id == bob.user.id
    assert mesaj.user_name == "Bob"


@pytest.mark.asyncio
@pytest.mark.parametrize("metin", ["", "   ", "\n\t", "x" * 501])
async def test_invalid_messages_are_rejected(make_session, repo, metin):
    session = make_session()
    room, _ = await session.create_room("Oda", "Alice")

    with pytest.raises(ValidationError):
        await session.send_message(metin)

    assert session.room == room
    assert await repo.get(room.id) == room


@pytest.mark.asyncio
async def test_message_at_limit_is_accepted(make_session):
    session = make_session()
    await session.create_room("Oda", "Alice")

    mesaj = await session.send_message("y" * 500)
    assert len(mesaj.message) == 500


# ! ----------------------------------------» Video

@pytest.mark.asyncio
async def test_non_host_change_video_changes_nothing(make_session, repo):
    alice, bob = await _alice_and_bob(make_session)
    once = await repo.get(bob.room.id)

    assert await bob.change_video("zzz", "Hacked") is False

    assert await repo.get(bob.room.id) == once
    assert bob.room.current_video is None
    assert bob.room.is_playing is False


@pytest.mark.asyncio
async def test_host_change_video_always_resets_playback(make_session, repo, clock):
    session = make_session()
    room, _ = await session.create_room("Oda", "Alice")

    await session.change_video("vid1", "Bir")
    await session.sync_player_state({"isPlaying": True, "currentTime": 80}, force_sync=True)
    assert (await repo.get(room.id)).is_playing

    await session.change_video("vid2", "İki")
    stored = await repo.get(room.id)
    assert stored.current_video.id == "vid2"
    assert stored.is_playing is False
    assert stored.current_time == 0
    assert stored.messages[-1].message == "🎵 Alice videoyu değiştirdi: İki"
    assert session.player_state.video_id == "vid2"
    assert session.player_state.current_time == 0


@pytest.mark.asyncio
async def test_change_video_from_url(make_session):
    session = make_session()
    await session.create_room("Oda", "Alice")

    assert await session.change_video_from_url("https://youtu.be/dQw4w9WgXcQ")
    assert session.room.current_video.id == "dQw4w9WgXcQ"
    assert session.room.current_video.title == "Yeni video dQw4w9WgXcQ"

    with pytest.raises(ValidationError):
        await session.change_video_from_url("https://example.com/video")


# ! ----------------------------------------» Oynatma senkronu

@pytest.mark.asyncio
async def test_debounce_drops_non_forced_calls(make_session, repo, clock):
    session = make_session()
    room, _ = await session.create_room("Oda", "Alice")
    await session.change_video("vid", "Video")

    assert await session.sync_player_state({"currentTime": 1})

    clock.advance(0.05)
    assert await session.sync_player_state({"currentTime": 2}) is False
    assert (await repo.get(room.id)).current_time == 1

    clock.advance(0.02)
    assert await session.sync_player_state({"currentTime": 3}, force_sync=True)
    assert (await repo.get(room.id)).current_time == 3

    clock.advance(0.2)
    assert await session.sync_player_state({"currentTime": 4})
    assert (await repo.get(room.id)).current_time == 4


@pytest.mark.asyncio
async def test_small_seek_has_no_message_large_seek_has_one(make_session, repo, clock):
    session = make_session()
    room, _ = await session.create_room("Oda", "Alice")
    await session.change_video("vid", "Video")
    once = len(session.room.messages)

    await session.sync_player_state({"currentTime": 5.0}, force_sync=True)
    assert len(session.room.messages) == once

    await session.sync_player_state({"currentTime": 90.0}, force_sync=True)
    assert len(session.room.messages) == once + 1
    assert session.room.messages[-1].message == "⏩ Alice 90. saniyeye atladı"
    assert len((await repo.get(room.id)).messages) == once + 1


@pytest.mark.asyncio
async def test_toggle_messages(make_session):
    session = make_session()
    await session.create_room("Oda", "Alice")
    await session.change_video("vid", "Video")

    await session.sync_player_state({"isPlaying": True}, force_sync=True)
    assert session.room.messages[-1].message == "▶️ Alice oynatmayı başlattı"

    once = len(session.room.messages)
    await session.sync_player_state({"isPlaying": True}, force_sync=True)
    assert len(session.room.messages) == once

    await session.sync_player_state({"isPlaying": False}, force_sync=True)
    assert session.room.messages[-1].message == "⏸️ Alice duraklattı"


@pytest.mark.asyncio
async def test_non_host_sync_is_local_only(make_session, repo):
    alice, bob = await _alice_and_bob(make_session)
    once = await repo.get(bob.room.id)

    assert await bob.sync_player_state({"isPlaying": True, "currentTime": 30}, force_sync=True) is False

    assert bob.player_state.is_playing is True
    assert bob.player_state.current_time == 30
    assert bob.room.is_playing is False
    assert await repo.get(bob.room.id) == once


@pytest.mark.asyncio
async def test_report_duration_is_local(make_session, repo):
    session = make_session()
    room, _ = await session.create_room("Oda", "Alice")
    await session.change_video("vid", "Video")
    once = await repo.get(room.id)

    session.report_duration(212.5)

    assert session.player_state.duration == 212.5
    assert await repo.get(room.id) == once


# ! ----------------------------------------» Uzak snapshot

@pytest.mark.asyncio
async def test_apply_remote_keeps_duration_for_same_video(make_session):
    alice, bob = await _alice_and_bob(make_session)
    await alice.change_video("vid", "Video")

    bob.apply_remote(alice.room)
    bob.report_duration(300.0)

    await alice.sync_player_state({"isPlaying": True, "currentTime": 12}, force_sync=True)
    assert bob.apply_remote(alice.room)
    assert bob.player_state.duration == 300.0
    assert bob.player_state.is_playing is True
    assert bob.player_state.current_time == 12

    await alice.change_video("vid2", "Diğer")
    assert bob.apply_remote(alice.room)
    assert bob.player_state.duration == 0.0
    assert bob.player_state.video_id == "vid2"


@pytest.mark.asyncio
async def test_apply_remote_ignores_equal_and_closed(make_session):
    alice, bob = await _alice_and_bob(make_session)

    assert bob.apply_remote(bob.room) is False

    await bob.close()
    assert bob.apply_remote(alice.room) is False


# ! ----------------------------------------» Paylaşım linki

def test_share_link_round_trip():
    link = build_share_link("https://watch.example/party?lang=tr", "abc123")

    assert link.startswith("https://watch.example/party?")
    assert "lang=tr" in link
    assert "room=ABC123" in link
    assert parse_share_link(link) == "ABC123"


def test_parse_share_link_without_room():
    assert parse_share_link("https://watch.example/") is None
    assert parse_share_link("https://watch.example/?room=") is None
    assert parse_share_link("https://watch.example/?room=xy12ab") == "XY12AB"


def test_session_defaults_come_from_settings():
    session = RoomSession(repository=None)
    assert session.debounce == 0.1
    assert session.seek_threshold == 5.0
    assert session.max_message_length == 500
