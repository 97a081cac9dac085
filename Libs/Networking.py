# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__ import annotations
from CLI        import konsol
from Settings   import REPO_TIMEOUT, REPO_RETRIES
import httpx, asyncio

class GlobalClient:
    """
    Paylaşımlı httpx.AsyncClient singleton yapısı.
    Oda deposu sunucusuna giden istekler için zaman aşımı ve tekrar deneme sağlar.
    """
    _instance : 'GlobalClient'    | None = None
    _client   : httpx.AsyncClient | None = None

    retries : int   = REPO_RETRIES
    backoff : float = 0.2

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(GlobalClient, cls).__new__(cls)
        return cls._instance

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GlobalClient henüz başlatılmadı! Önce 'start()' çağrılmalı.")
        return self._client

    @property
    def started(self) -> bool:
        return self._client is not None

    async def start(self, **client_kwargs):
        """Client'ı ilklendir - testlerde transport=ASGITransport(...) verilebilir"""
        if self._client is not None:
            return

        limits = httpx.Limits(
            max_connections           = 20,
            max_keepalive_connections = 10,
            keepalive_expiry          = 30.0
        )
        timeout = httpx.Timeout(REPO_TIMEOUT, connect=min(REPO_TIMEOUT, 5.0))

        ayarlar = {
            "http2"            : True,
            "headers"          : {"User-Agent": "WatchParty/1.0 (+httpx)"},
            "limits"           : limits,
            "timeout"          : timeout,
            "follow_redirects" : True,
        }
        ayarlar.update(client_kwargs)

        self._client = httpx.AsyncClient(**ayarlar)

    async def stop(self):
        """Client'ı kapat"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, method: str = "GET", **kwargs) -> httpx.Response:
        """
        Paylaşımlı client ile istek atar.
        Bağlantı / zaman aşımı hatalarında `retries` kez tekrar dener, sonra hatayı yükseltir.
        """
        if self._client is None:
            await self.start()

        for deneme in range(1, self.retries + 1):
            try:
                return await self.client.request(method, url, **kwargs)
            except httpx.TransportError as hata:
                if deneme == self.retries:
                    konsol.log(f"[red]İstek başarısız ({deneme}/{self.retries}):[/] {method} {url} » {type(hata).__name__}")
                    raise

                konsol.log(f"[yellow]İstek tekrar deneniyor ({deneme}/{self.retries}):[/] {method} {url} » {type(hata).__name__}")
                await asyncio.sleep(self.backoff * deneme)

# Singleton instance
global_request = GlobalClient()
