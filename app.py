import logging
from datetime import datetime, timezone

import streamlit as st
import streamlit.components.v1 as components

from cointape.config import settings
from cointape.controls import INTERVAL_KEY, SYMBOL_KEY, Dashboard, initial_selection
from cointape.logging_utils import configure_logging
from cointape.quotes import QuoteFetcher, QuoteService
from cointape.render import (
    BG, BORDER, DIM, FONT_MONO, FONT_PRIMARY, PANEL, TXT, UP,
    badge_html, quote_strip_html, quotes_frame, render_quotes,
)
from cointape.symbols import INTERVAL_CODES, INTERVAL_LABELS, SYMBOL_CHOICES
from cointape.widgets import CHART_CONTAINER, TA_CONTAINER, ChartController, TradingViewEmbed

st.set_page_config(layout="wide", page_title="CoinTape", initial_sidebar_state="collapsed")

configure_logging(settings.log_level)
logger = logging.getLogger("cointape.app")

STRIP_HEIGHT = 40
WIDGET_HEIGHT = 560

# ── Streamlit CSS: thin control bar ──────────────────────────────────────────
st.markdown(f"""<style>
@import url('https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@400;500;600;700&family=IBM+Plex+Mono:wght@400;600&display=swap');
html,body,[data-testid="stAppViewContainer"],[data-testid="stApp"]
  {{background:{BG}!important;color:{TXT};font-family:{FONT_PRIMARY}!important}}
[data-testid="stHeader"],[data-testid="stToolbar"],
[data-testid="stDecoration"],#MainMenu,footer {{display:none!important}}
.block-container{{padding:.5rem 1rem 0 1rem!important;max-width:100%!important}}
[data-testid="stHorizontalBlock"]{{gap:.4rem!important;align-items:center!important}}
[data-testid="stSelectbox"]>div>div{{
  background:{PANEL}!important;border-color:{BORDER}!important;
  font-family:{FONT_MONO}!important;font-size:.7rem!important}}
[data-testid="stSelectbox"] label{{display:none!important}}
.ct-brand{{font-family:{FONT_MONO};color:{UP};letter-spacing:2px;font-size:.8rem}}
.ct-meta{{font-family:{FONT_MONO};color:{DIM};font-size:.6rem;letter-spacing:1px}}
iframe{{border:none!important}}
</style>""", unsafe_allow_html=True)


class StreamlitQuoteStrip:
    """Paints quote views into the current Streamlit container."""

    def __init__(self, height: int = STRIP_HEIGHT):
        self.height = height

    def paint(self, views):
        components.html(quote_strip_html(views), height=self.height)


def _new_dashboard() -> Dashboard:
    controller = ChartController(TradingViewEmbed(), settings)
    service = QuoteService(QuoteFetcher(settings))
    return Dashboard(st.session_state, controller, service)


if "dashboard" not in st.session_state:
    _dash = _new_dashboard()
    st.session_state.dashboard = _dash
    _dash.boot(*initial_selection(st.query_params, settings))

dashboard: Dashboard = st.session_state.dashboard


def _on_symbol_change():
    logger.debug("Symbol selected: %s", st.session_state[SYMBOL_KEY])
    dashboard.apply_symbol(st.session_state[SYMBOL_KEY])


def _on_interval_change():
    logger.debug("Interval selected: %s", st.session_state[INTERVAL_KEY])
    dashboard.apply_interval(st.session_state[INTERVAL_KEY])


def _quotes_due(now: datetime) -> bool:
    last = dashboard.state.last_attempt
    if last is None:
        return True
    # One second of slack so a timer tick never lands just short of the window.
    return (now - last).total_seconds() >= settings.refresh_seconds - 1


# ── Controls ─────────────────────────────────────────────────────────────────
symbol_options = list(SYMBOL_CHOICES)
if dashboard.current_symbol() not in symbol_options:
    symbol_options.append(dashboard.current_symbol())

c_brand, c_sym, c_int = st.columns([1, 2, 1])
with c_brand:
    st.markdown('<div class="ct-brand">COINTAPE</div>', unsafe_allow_html=True)
with c_sym:
    st.selectbox("Symbol", symbol_options, key=SYMBOL_KEY, on_change=_on_symbol_change)
with c_int:
    st.selectbox(
        "Interval",
        INTERVAL_CODES,
        key=INTERVAL_KEY,
        format_func=lambda code: INTERVAL_LABELS.get(code, code),
        on_change=_on_interval_change,
    )


@st.fragment(run_every=settings.refresh_seconds)
def quotes_panel():
    if _quotes_due(datetime.now(timezone.utc)):
        dashboard.load_quotes()
    render_quotes(StreamlitQuoteStrip(), dashboard.state.snapshot)
    fetched_at = dashboard.state.snapshot.fetched_at
    stamp = fetched_at.strftime("%H:%M:%S UTC") if fetched_at else "--"
    stale = " · STALE" if dashboard.state.last_error else ""
    st.markdown(
        f'{badge_html(dashboard.update_badge())} '
        f'<span class="ct-meta">UPDATED {stamp}{stale}</span>',
        unsafe_allow_html=True,
    )
    if settings.debug:
        st.caption(
            f"refreshes={dashboard.state.refresh_count} "
            f"last_attempt={dashboard.state.last_attempt} "
            f"last_error={dashboard.state.last_error}"
        )


quotes_panel()

# ── Chart + technical analysis ───────────────────────────────────────────────
provider: TradingViewEmbed = dashboard.controller.provider
c_chart, c_ta = st.columns([3, 1])
with c_chart:
    chart_html = provider.html_for(CHART_CONTAINER)
    if chart_html:
        components.html(chart_html, height=WIDGET_HEIGHT)
with c_ta:
    ta_html = provider.html_for(TA_CONTAINER)
    if ta_html:
        components.html(ta_html, height=WIDGET_HEIGHT)

with st.expander("Markets", expanded=False):
    st.dataframe(
        quotes_frame(dashboard.state.snapshot),
        hide_index=True,
        column_config={
            "Price": st.column_config.NumberColumn(format="$%.4f"),
            "24h %": st.column_config.NumberColumn(format="%.2f%%"),
        },
    )
