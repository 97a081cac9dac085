# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from rich.console   import Console
from rich.panel     import Panel
from rich.traceback import Traceback
import sys

konsol = Console(log_path=False, highlight=False)

def cikis_yap(temizle: bool = True):
    """Uygulamayı temiz bir şekilde sonlandır"""
    if temizle:
        konsol.clear()

    konsol.print("\n[bold turquoise2]Watch Party[/] [yellow]:bird:[/] [pale_green1]kapatıldı, görüşmek üzere..[/]\n", width=70, justify="center")

def hata_yakala(hata: BaseException):
    """Beklenmeyen hatayı panel içinde göster ve çık"""
    if isinstance(hata, KeyboardInterrupt):
        cikis_yap(False)
        sys.exit(0)

    iz = Traceback.from_exception(type(hata), hata, hata.__traceback__, show_locals=False)
    konsol.print(Panel(iz, title=f"[bold red]{type(hata).__name__}[/]", subtitle=str(hata), border_style="red"))
    sys.exit(1)
