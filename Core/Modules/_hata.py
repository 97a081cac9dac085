# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                     import kekik_FastAPI, Request, JSONResponse
from starlette.exceptions     import HTTPException as StarletteHTTPException
from fastapi.exceptions       import RequestValidationError
from pydantic                 import ValidationError as PydanticValidationError
from Public.WatchParty.Models import WatchPartyError, RoomNotFound

def _hata_yaniti(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})

def _dogrulama_mesaji(errors: list[dict]) -> str:
    return " | ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in errors)

@kekik_FastAPI.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _hata_yaniti(exc.status_code, str(exc.detail))

@kekik_FastAPI.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Gövde / yol doğrulama hatalarını JSON olarak döndür"""
    return _hata_yaniti(422, _dogrulama_mesaji(exc.errors()))

@kekik_FastAPI.exception_handler(PydanticValidationError)
async def validation_exception_handler(request: Request, exc: PydanticValidationError):
    """Pydantic validation hatalarını JSON olarak döndür"""
    return _hata_yaniti(422, _dogrulama_mesaji(exc.errors()))

@kekik_FastAPI.exception_handler(RoomNotFound)
async def room_not_found_handler(request: Request, exc: RoomNotFound):
    return _hata_yaniti(404, str(exc))

@kekik_FastAPI.exception_handler(WatchPartyError)
async def watch_party_error_handler(request: Request, exc: WatchPartyError):
    return _hata_yaniti(400, str(exc))
