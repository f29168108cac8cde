import json

import pytest

from cointape.config import Settings
from cointape.widgets import (
    CHART_CONTAINER,
    CHART_KIND,
    TA_CONTAINER,
    TA_KIND,
    TA_SCRIPT_URL,
    ChartController,
    TradingViewEmbed,
    Widget,
    chart_options,
    embed_html,
    ta_options,
)
from tests.fakes import RecordingProvider


def test_chart_options() -> None:
    options = chart_options("BINANCE:ETHUSDT", "60", config=Settings(theme="light", locale="en"))

    assert options["symbol"] == "BINANCE:ETHUSDT"
    assert options["interval"] == "60"
    assert options["container_id"] == CHART_CONTAINER
    assert options["theme"] == "light"
    assert options["locale"] == "en"
    assert options["timezone"] == "Etc/UTC"
    assert options["autosize"] is True
    assert options["allow_symbol_change"] is True
    assert options["enable_publishing"] is False


def test_ta_options_translate_interval() -> None:
    options = ta_options("BINANCE:BTCUSDT", "D", config=Settings())

    assert options["interval"] == "1D"
    assert options["symbol"] == "BINANCE:BTCUSDT"
    assert options["displayMode"] == "single"
    assert options["colorTheme"] == "dark"
    assert ta_options("BINANCE:BTCUSDT", "2")["interval"] == "1h"


def test_apply_tears_down_then_recreates_both_slots() -> None:
    provider = RecordingProvider()
    controller = ChartController(provider, Settings())

    assert controller.state(CHART_CONTAINER) is None
    controller.apply("BINANCE:BTCUSDT", "15")

    kinds = [(event[0], event[1]) for event in provider.events]
    assert kinds == [
        ("unmount", CHART_CONTAINER),
        ("unmount", TA_CONTAINER),
        ("mount", CHART_CONTAINER),
        ("mount", TA_CONTAINER),
    ]
    assert controller.state(CHART_CONTAINER) == ("BINANCE:BTCUSDT", "15")
    assert controller.state(TA_CONTAINER) == ("BINANCE:BTCUSDT", "15")
    assert provider.mounted[TA_CONTAINER].options["interval"] == "15m"


def test_apply_is_idempotent() -> None:
    provider = RecordingProvider()
    controller = ChartController(provider, Settings())

    controller.apply("BINANCE:BTCUSDT", "15")
    first = dict(provider.mounted)
    controller.apply("BINANCE:BTCUSDT", "15")

    assert provider.mounted == first
    assert len(provider.events) == 8


def test_embed_markup() -> None:
    embed = TradingViewEmbed()
    controller = ChartController(embed, Settings())
    controller.apply("BINANCE:SOLUSDT", "W")

    chart = embed.html_for(CHART_CONTAINER)
    assert 'id="tv_chart"' in chart
    assert "new TradingView.widget(" in chart
    assert '"symbol": "BINANCE:SOLUSDT"' in chart

    ta = embed.html_for(TA_CONTAINER)
    assert TA_SCRIPT_URL in ta
    config = json.loads(ta.split("async>")[1].split("</script>")[0])
    assert config["interval"] == "1W"
    assert config["symbol"] == "BINANCE:SOLUSDT"

    embed.unmount(TA_CONTAINER)
    assert embed.html_for(TA_CONTAINER) is None


def test_embed_html_rejects_unknown_kind() -> None:
    assert "TradingView.widget" in embed_html(Widget(CHART_KIND, "X:Y", "1", {}))
    assert TA_SCRIPT_URL in embed_html(Widget(TA_KIND, "X:Y", "1", {}))
    with pytest.raises(ValueError):
        embed_html(Widget("ticker", "X:Y", "1", {}))
