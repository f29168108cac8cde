from __future__ import annotations

import logging
from typing import Mapping, MutableMapping, Optional, Tuple

from cointape.config import Settings, settings as default_settings
from cointape.quotes import AppState, QuoteService
from cointape.render import BadgeView, badge_view
from cointape.symbols import INTERVAL_CODES, normalize_vendor_symbol
from cointape.widgets import ChartController

logger = logging.getLogger(__name__)

SYMBOL_KEY = "symbolSelect"
INTERVAL_KEY = "intervalSelect"


def _qp_value(qp: Mapping, key: str) -> str:
    if key not in qp:
        return ""
    val = qp.get(key)
    if isinstance(val, list):
        return val[0] if val else ""
    return val or ""


def initial_selection(query_params: Mapping, config: Settings = default_settings) -> Tuple[str, str]:
    symbol = normalize_vendor_symbol(_qp_value(query_params, "symbol"))
    if ":" not in symbol:
        symbol = config.default_symbol
    interval = str(_qp_value(query_params, "interval")).strip().upper()
    if interval not in INTERVAL_CODES:
        interval = config.default_interval
    return symbol, interval


class Dashboard:
    """Binds the symbol/interval selectors to the widgets, quotes and badge.

    ``selection`` is the widget state (``st.session_state`` on the page) and
    is the only place the current symbol and interval live.
    """

    def __init__(
        self,
        selection: MutableMapping,
        controller: ChartController,
        quotes: QuoteService,
        state: Optional[AppState] = None,
    ):
        self.selection = selection
        self.controller = controller
        self.quotes = quotes
        self.state = state or AppState()
        self.badge = BadgeView("", "text")

    def current_symbol(self) -> str:
        return self.selection[SYMBOL_KEY]

    def current_interval(self) -> str:
        return self.selection[INTERVAL_KEY]

    def apply_symbol(self, symbol: str) -> None:
        interval = self.current_interval()
        self.selection[SYMBOL_KEY] = symbol
        self.controller.apply(symbol, interval)
        self.update_badge()

    def apply_interval(self, interval: str) -> None:
        self.controller.apply(self.current_symbol(), interval)

    def update_badge(self) -> BadgeView:
        self.badge = badge_view(self.current_symbol(), self.state.snapshot)
        return self.badge

    def load_quotes(self) -> bool:
        ok = self.quotes.refresh(self.state)
        if ok:
            self.update_badge()
        return ok

    def boot(self, symbol: str, interval: str) -> None:
        self.selection[SYMBOL_KEY] = symbol
        self.selection[INTERVAL_KEY] = interval
        self.apply_symbol(symbol)
        self.load_quotes()
        logger.info("Dashboard booted on %s @ %s", symbol, interval)
