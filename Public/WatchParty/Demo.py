# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI        import konsol, cikis_yap, hata_yakala
from rich.table import Table
from .Libs      import MemoryRoomRepository, RoomSession, PlayerBridge, SimulatedPlayer
from .Models    import Room
import asyncio

def oda_tablosu(room: Room) -> Table:
    tablo = Table(title=f"{room.name} » {room.id}", title_style="bold gold1", show_lines=False)
    tablo.add_column("Kim",   style="turquoise2")
    tablo.add_column("Mesaj", style="pale_green1")

    for mesaj in room.messages:
        tablo.add_row(mesaj.user_name, mesaj.message, style="dim" if mesaj.is_system else None)

    video = room.current_video.title if room.current_video else "-"
    durum = "▶️" if room.is_playing else "⏸️"
    tablo.caption = f"{video} {durum} {room.current_time:.1f} sn | {len(room.participants)} kişi"
    return tablo

async def demo() -> Room:
    """İki istemci tek bir bellek deposu üzerinden aynı odada buluşur"""
    repo = MemoryRoomRepository()

    async with RoomSession(repo) as alice, RoomSession(repo) as bob:
        room, _ = await alice.create_room("Movie Night", "Alice")
        await bob.join_room(room.id, "Bob")

        alice_oynatici = await PlayerBridge(alice, SimulatedPlayer).attach(start_clock=False)
        bob_oynatici   = await PlayerBridge(bob, SimulatedPlayer).attach(start_clock=False)

        for oturum in (alice, bob):
            oturum.start_reconciler(autostart=False).listen()

        await alice.reconciler.reconcile_once()

        await alice.change_video_from_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "Never Gonna Give You Up")
        await bob.send_message("Hazırım!")
        await alice_oynatici.adapter.user_toggle()

        alice_oynatici.adapter.advance(3)
        await asyncio.sleep(alice.debounce)
        await alice_oynatici.tick()

        await alice_oynatici.adapter.user_seek(42)
        await bob_oynatici.adapter.user_seek(5)   # misafir: sadece yerel

        konsol.print(oda_tablosu(bob.room))
        konsol.log(f"[green]Bob'un oynatıcısı:[/] {bob_oynatici.adapter.video_id} » {bob_oynatici.adapter.current_time:.1f} sn")
        konsol.log(f"[green]Paylaşım linki:[/] {alice.share_link}")

        return await repo.get(room.id)

def main():
    try:
        asyncio.run(demo())
        cikis_yap(False)
    except Exception as hata:
        hata_yakala(hata)

if __name__ == "__main__":
    main()
