from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
import html
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

import pandas as pd

from cointape.quotes import MarketRecord, MarketSnapshot
from cointape.symbols import COINS, Coin, provider_id_for

# ── Palette ──────────────────────────────────────────────────────────────────
BG      = "#0b0f0d"
PANEL   = "#0f1714"
BORDER  = "#1b2a24"
UP      = "#00d084"
DOWN    = "#ff5a5f"
TXT     = "#e7f5ef"
DIM     = "#6a7a73"
FONT_PRIMARY = "'Space Grotesk','Inter','Helvetica Neue',sans-serif"
FONT_MONO    = "'IBM Plex Mono','SF Mono','Fira Code','Cascadia Code',monospace"

PLACEHOLDER_PRICE = "—"
_QUANT = Decimal("0.0001")

TONE_COLORS = {"buy": UP, "sell": DOWN, "text": TXT}


def format_usd(value) -> str:
    """en-US currency, 2 to 4 fraction digits."""
    try:
        amount = Decimal(str(value)).quantize(_QUANT, rounding=ROUND_HALF_UP)
        whole, frac = f"{abs(amount):,.4f}".split(".")
        frac = frac.rstrip("0").ljust(2, "0")
        sign = "-" if amount < 0 else ""
        return f"{sign}${whole}.{frac}"
    except (ArithmeticError, TypeError, ValueError):
        return f"${value}"


def format_change(pct: Optional[float]) -> Tuple[str, str]:
    if pct is None:
        return "", "flat"
    if pct >= 0:
        return f"+{pct:.2f}%", "up"
    return f"{pct:.2f}%", "down"


@dataclass(frozen=True)
class QuoteView:
    label: str
    provider_id: str
    price_text: str
    change_text: str
    direction: str
    logo_url: Optional[str] = None


@dataclass(frozen=True)
class BadgeView:
    text: str
    tone: str

    @property
    def color(self) -> str:
        return TONE_COLORS.get(self.tone, TXT)


class QuoteTarget(Protocol):
    def paint(self, views: Sequence[QuoteView]) -> None:
        ...


def quote_view(coin: Coin, record: Optional[MarketRecord]) -> QuoteView:
    if record is None:
        return QuoteView(coin.label, coin.provider_id, PLACEHOLDER_PRICE, "", "flat")
    change_text, direction = format_change(record.price_change_percentage_24h)
    return QuoteView(
        label=coin.label,
        provider_id=coin.provider_id,
        price_text=PLACEHOLDER_PRICE if record.current_price is None else format_usd(record.current_price),
        change_text=change_text,
        direction=direction,
        logo_url=record.image,
    )


def build_quote_views(snapshot: MarketSnapshot, coins: Iterable[Coin] = COINS) -> List[QuoteView]:
    # The strip is painted twice back to back so the -50% scroll loops cleanly.
    row = [quote_view(coin, snapshot.get(coin.provider_id)) for coin in coins]
    return row + row


def render_quotes(target: QuoteTarget, snapshot: MarketSnapshot, coins: Iterable[Coin] = COINS) -> List[QuoteView]:
    views = build_quote_views(snapshot, coins)
    target.paint(views)
    return views


def badge_view(symbol: str, snapshot: MarketSnapshot) -> BadgeView:
    record = snapshot.get(provider_id_for(symbol))
    if record is None or record.current_price is None:
        return BadgeView("", "text")
    price = format_usd(record.current_price)
    change = record.price_change_percentage_24h
    if change is None:
        return BadgeView(price, "text")
    change_text, direction = format_change(change)
    return BadgeView(f"{price} ({change_text})", "buy" if direction == "up" else "sell")


def _quote_item_html(view: QuoteView) -> str:
    label = html.escape(view.label)
    logo = ""
    if view.logo_url:
        logo = f'<img src="{html.escape(view.logo_url, quote=True)}" alt="{label} logo" loading="lazy">'
    return (
        f'<div class="quote">{logo}'
        f'<span class="sym">{label}</span>'
        f'<span class="px">{html.escape(view.price_text)}</span>'
        f'<span class="chg {view.direction}">{html.escape(view.change_text)}</span>'
        f"</div>"
    )


def quote_strip_html(views: Sequence[QuoteView], duration_seconds: int = 40) -> str:
    items = "".join(_quote_item_html(view) for view in views)
    return f"""<!DOCTYPE html>
<html>
<head>
<style>
html,body{{margin:0;padding:0;background:{BG};overflow:hidden}}
.quotes{{width:100%;overflow:hidden;border-bottom:1px solid {BORDER};background:{PANEL}}}
#quotesTrack{{display:flex;width:max-content;animation:ct-scroll {duration_seconds}s linear infinite}}
#quotesTrack:hover{{animation-play-state:paused}}
@keyframes ct-scroll{{from{{transform:translateX(0)}}to{{transform:translateX(-50%)}}}}
.quote{{display:flex;align-items:center;gap:6px;padding:6px 16px;
  font-family:{FONT_PRIMARY};font-size:12px;color:{TXT};white-space:nowrap}}
.quote img{{width:16px;height:16px}}
.quote .sym{{font-weight:600;letter-spacing:.5px}}
.quote .px{{font-family:{FONT_MONO}}}
.quote .chg{{font-family:{FONT_MONO};color:{DIM}}}
.quote .chg.up{{color:{UP}}}
.quote .chg.down{{color:{DOWN}}}
</style>
</head>
<body>
<div class="quotes"><div id="quotesTrack">{items}</div></div>
</body>
</html>"""


def badge_html(badge: BadgeView) -> str:
    return (
        f'<span id="selectedPrice" style="font-family:{FONT_MONO};color:{badge.color}">'
        f"{html.escape(badge.text)}</span>"
    )


def quotes_frame(snapshot: MarketSnapshot, coins: Iterable[Coin] = COINS) -> pd.DataFrame:
    rows = []
    for coin in coins:
        record = snapshot.get(coin.provider_id)
        rows.append(
            {
                "Coin": coin.label,
                "Name": record.name if record and record.name else coin.label,
                "Price": record.current_price if record else None,
                "24h %": record.price_change_percentage_24h if record else None,
                "Updated": pd.to_datetime(record.last_updated, utc=True, errors="coerce")
                if record and record.last_updated
                else pd.NaT,
            }
        )
    return pd.DataFrame(rows, columns=["Coin", "Name", "Price", "24h %", "Updated"])
