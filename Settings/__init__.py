# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib import Path
from yaml    import load, FullLoader
from dotenv  import load_dotenv
import os

PROJE_DIZINI = Path(__file__).resolve().parent.parent

# .env yükleme
load_dotenv(dotenv_path=PROJE_DIZINI / ".env")

# AYAR.yml yükleme (çalışma dizininden bağımsız)
with open(PROJE_DIZINI / "AYAR.yml", "r", encoding="utf-8") as yaml_dosyasi:
    AYAR = load(yaml_dosyasi, Loader=FullLoader)

# Genel ayarlar
PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"

PROJE = AYAR["PROJE"]
HOST  = AYAR["APP"]["HOST"]
PORT  = AYAR["APP"]["PORT"]

# Paylaşım linki tabanı (?room=XXXXXX eklenir)
PUBLIC_URL = os.getenv("PUBLIC_URL", f"http://127.0.0.1:{PORT}/")

# Senkronizasyon
SYNC_DEBOUNCE      = float(os.getenv("SYNC_DEBOUNCE", AYAR["SYNC"]["DEBOUNCE"]))
SEEK_THRESHOLD     = float(os.getenv("SEEK_THRESHOLD", AYAR["SYNC"]["SEEK_THRESHOLD"]))
RECONCILE_INTERVAL = float(os.getenv("RECONCILE_INTERVAL", AYAR["SYNC"]["RECONCILE_INTERVAL"]))
PLAYBACK_TICK      = float(os.getenv("PLAYBACK_TICK", AYAR["SYNC"]["PLAYBACK_TICK"]))

# Oda
ROOM_ID_LENGTH     = int(AYAR["ROOM"]["ID_LENGTH"])
MAX_MESSAGE_LENGTH = int(AYAR["ROOM"]["MAX_MESSAGE_LENGTH"])

# Depo
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", AYAR["STORAGE"]["BACKEND"]).lower()
STORAGE_DIR     = Path(os.getenv("STORAGE_DIR", AYAR["STORAGE"]["DIR"]))
REPO_TIMEOUT    = float(os.getenv("REPO_TIMEOUT", AYAR["STORAGE"]["TIMEOUT"]))
REPO_RETRIES    = int(os.getenv("REPO_RETRIES", AYAR["STORAGE"]["RETRIES"]))

# Oynatıcı
ADAPTER_RETRIES = int(AYAR["PLAYER"]["RETRIES"])

# WebSocket
MAX_WS_PAYLOAD = 512 * 1024  # 512 KB
