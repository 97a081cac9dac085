# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                   import konsol
from fastapi               import FastAPI
from contextlib            import asynccontextmanager
from Settings              import STORAGE_BACKEND, STORAGE_DIR
from Libs                  import global_request
from Public.WebSocket.Libs import room_hub

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan events - startup ve shutdown"""

    depo = f"{STORAGE_BACKEND} » {STORAGE_DIR}" if STORAGE_BACKEND == "file" else STORAGE_BACKEND
    konsol.log(f"[green]Oda deposu hazır:[/] {depo}")

    yield

    # ! Açık WebSocket abonelerini ve paylaşımlı HTTP client'ı kapat
    await room_hub.close_all()

    if global_request.started:
        await global_request.stop()

    konsol.log("[yellow]Sunucu kapatıldı.[/]")
