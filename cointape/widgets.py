"""TradingView chart + technical-analysis widgets behind a mount/unmount seam."""
from __future__ import annotations

from dataclasses import dataclass, field
import html
import json
import logging
from typing import Dict, Optional, Protocol, Tuple

from cointape.config import Settings, settings as default_settings
from cointape.render import BG, BORDER
from cointape.symbols import ta_interval

logger = logging.getLogger(__name__)

CHART_CONTAINER = "tv_chart"
TA_CONTAINER = "tv_ta"

CHART_KIND = "chart"
TA_KIND = "technical-analysis"

TV_SCRIPT_URL = "https://s3.tradingview.com/tv.js"
TA_SCRIPT_URL = "https://s3.tradingview.com/external-embedding/embed-widget-technical-analysis.js"


@dataclass(frozen=True)
class Widget:
    kind: str
    symbol: str
    interval: str
    options: Dict[str, object] = field(default_factory=dict, compare=False)


class ChartProvider(Protocol):
    def mount(self, container: str, widget: Widget) -> None:
        ...

    def unmount(self, container: str) -> None:
        ...


def chart_options(symbol: str, interval: str, container_id: str = CHART_CONTAINER,
                  config: Settings = default_settings) -> Dict[str, object]:
    return {
        "autosize": True,
        "symbol": symbol,
        "interval": interval,
        "timezone": "Etc/UTC",
        "theme": config.theme,
        "style": "1",
        "locale": config.locale,
        "toolbar_bg": BG,
        "enable_publishing": False,
        "withdateranges": True,
        "hide_side_toolbar": False,
        "allow_symbol_change": True,
        "container_id": container_id,
    }


def ta_options(symbol: str, interval: str, config: Settings = default_settings) -> Dict[str, object]:
    return {
        "interval": ta_interval(interval),
        "width": "100%",
        "isTransparent": True,
        "height": "100%",
        "symbol": symbol,
        "showIntervalTabs": True,
        "displayMode": "single",
        "colorTheme": config.theme,
        "locale": config.locale,
    }


class ChartController:
    """Two widget slots, each absent or rendered(symbol, interval)."""

    def __init__(self, provider: ChartProvider, config: Settings = default_settings,
                 chart_container: str = CHART_CONTAINER, ta_container: str = TA_CONTAINER):
        self.provider = provider
        self.config = config
        self.chart_container = chart_container
        self.ta_container = ta_container
        self.slots: Dict[str, Optional[Tuple[str, str]]] = {
            chart_container: None,
            ta_container: None,
        }

    def apply(self, symbol: str, interval: str) -> None:
        # Full teardown and recreate, never an in-place update.
        for container in (self.chart_container, self.ta_container):
            self.provider.unmount(container)
            self.slots[container] = None
        self.provider.mount(
            self.chart_container,
            Widget(CHART_KIND, symbol, interval,
                   chart_options(symbol, interval, self.chart_container, self.config)),
        )
        self.slots[self.chart_container] = (symbol, interval)
        self.provider.mount(
            self.ta_container,
            Widget(TA_KIND, symbol, interval, ta_options(symbol, interval, self.config)),
        )
        self.slots[self.ta_container] = (symbol, interval)
        logger.debug("Widgets applied for %s @ %s", symbol, interval)

    def state(self, container: str) -> Optional[Tuple[str, str]]:
        return self.slots.get(container)


# ── TradingView embed markup ─────────────────────────────────────────────────
def _page(body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
<style>
html,body{{margin:0;padding:0;height:100%;background:{BG};overflow:hidden}}
.tv-container{{height:100%;width:100%;border:1px solid {BORDER};box-sizing:border-box}}
</style>
</head>
<body>
{body}
</body>
</html>"""


def chart_embed_html(widget: Widget) -> str:
    container_id = html.escape(str(widget.options.get("container_id", CHART_CONTAINER)), quote=True)
    config_json = json.dumps(widget.options)
    return _page(f"""<div id="{container_id}" class="tv-container"></div>
<script type="text/javascript" src="{TV_SCRIPT_URL}"></script>
<script type="text/javascript">
new TradingView.widget({config_json});
</script>""")


def ta_embed_html(widget: Widget) -> str:
    config_json = json.dumps(widget.options, indent=2)
    return _page(f"""<div class="tradingview-widget-container tv-container">
<div class="tradingview-widget-container__widget"></div>
<script type="text/javascript" src="{TA_SCRIPT_URL}" async>
{config_json}
</script>
</div>""")


def embed_html(widget: Widget) -> str:
    if widget.kind == CHART_KIND:
        return chart_embed_html(widget)
    if widget.kind == TA_KIND:
        return ta_embed_html(widget)
    raise ValueError(f"Unknown widget kind: {widget.kind}")


class TradingViewEmbed:
    """Provider that keeps the embed markup of every mounted container."""

    def __init__(self):
        self.mounted: Dict[str, Widget] = {}

    def mount(self, container: str, widget: Widget) -> None:
        self.mounted[container] = widget

    def unmount(self, container: str) -> None:
        self.mounted.pop(container, None)

    def html_for(self, container: str) -> Optional[str]:
        widget = self.mounted.get(container)
        if widget is None:
            return None
        return embed_html(widget)
