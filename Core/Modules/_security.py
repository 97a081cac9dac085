# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core import kekik_FastAPI, Request

@kekik_FastAPI.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)

    # --- Temel Güvenlik Başlıkları ---
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"]        = "DENY"
    response.headers["X-XSS-Protection"]       = "0"
    response.headers["Referrer-Policy"]        = "strict-origin-when-cross-origin"

    # --- Modern Tarayıcı / İzolasyon Politikaları ---
    response.headers["Cross-Origin-Opener-Policy"]   = "same-origin"
    response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"

    # --- HTTPS Zorlaması (HSTS) ---
    response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains; preload"

    # --- Permissions-Policy (Feature-Policy) ---
    response.headers["Permissions-Policy"] = (
        "camera=(), microphone=(), geolocation=(), payment=(), "
        "fullscreen=(self), autoplay=(self)"
    )

    # Oda snapshot'ları indekslenmesin
    if request.url.path.startswith(("/api", "/wss")):
        response.headers["X-Robots-Tag"] = "noindex, nofollow"

    # Oda durumu her istekte değişebilir
    if request.url.path.startswith("/api/v1/rooms"):
        response.headers["Cache-Control"] = "no-store"

    # --- Gereksiz Bilgi Sızmalarını Temizle ---
    for header in ("server", "x-powered-by"):
        if header in response.headers:
            del response.headers[header]

    return response
