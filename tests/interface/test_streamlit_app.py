"""Tests for the Streamlit app module."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from src.adapters.interface.streamlit import app
from src.domain.errors import UpstreamUnavailableError
from src.domain.models import (
    ConsolidatedAsset,
    Portfolio,
    PortfolioStatus,
    ValuationRecord,
)
from src.infrastructure.settings import PortfolioSettings


def _asset(symbol: str, value: str) -> ConsolidatedAsset:
    return ConsolidatedAsset(
        pricing_id=symbol.lower(),
        symbol=symbol,
        amount=Decimal("1"),
        current_value=Decimal(value),
        price=Decimal(value),
        change_24h=Decimal("1"),
    )


def _portfolio(*assets: ConsolidatedAsset) -> Portfolio:
    total = sum((asset.current_value for asset in assets), Decimal("0"))
    return Portfolio(
        total_value=total,
        change_24h_value=Decimal("10"),
        change_24h_percent=Decimal("1"),
        assets=tuple(assets),
    )


def test_fetch_portfolio_invokes_use_case(monkeypatch):
    """_fetch_portfolio should wire the shared client into the use case."""
    expected = _portfolio(_asset("BTC", "100"))
    use_case = MagicMock()
    use_case.execute.return_value = expected

    monkeypatch.setattr(app, "_market_data_client", lambda: "client")

    def _fake_build(client):
        assert client == "client"
        return use_case

    monkeypatch.setattr(app, "build_sync_portfolio_use_case", _fake_build)

    assert app._fetch_portfolio("user-1") is expected
    use_case.execute.assert_called_once_with("user-1")


def test_load_portfolio_uses_fetch(monkeypatch):
    """The cached loader should delegate to _fetch_portfolio."""
    expected = _portfolio(_asset("ETH", "50"))
    monkeypatch.setattr(app, "_fetch_portfolio", lambda user_id: expected)

    result = app._load_portfolio("user-load-portfolio-test")

    assert result == expected


def test_allocation_chart_groups_small_assets_into_other():
    portfolio = _portfolio(
        _asset("BTC", "500"),
        _asset("ETH", "300"),
        _asset("LINK", "150"),
        _asset("UNI", "50"),
    )

    data = app._prepare_allocation_chart_data(portfolio, "usd", max_assets=2)

    assert [row["asset"] for row in data] == ["BTC", "ETH", "Other"]
    assert data[2]["amount"] == 200.0
    assert data[0]["share_label"] == "50.0%"
    assert data[0]["amount_label"] == "500.00 $"


def test_series_chart_data_skips_malformed_points():
    series = {"prices": [[0, 1.5], [1000, None], "bad", [2000]]}

    data = app._prepare_series_chart_data(series)

    assert data == [{"time": "1970-01-01T00:00:00+00:00", "price": 1.5}]


def test_format_helpers():
    assert app._format_currency(Decimal("1234.5"), "eur") == "1,234.50 EUR"
    assert (
        app._format_delta_with_percent(Decimal("-5"), Decimal("-0.5"))
        == "-5.00 (-0.50%)"
    )


class _FakeColumn:
    def __init__(self, owner) -> None:
        self._owner = owner

    def metric(self, label, value, delta=None):
        self._owner.metrics.append((label, value, delta))


class _FakeSidebar:
    def __init__(self, user_id: str, page: str) -> None:
        self._user_id = user_id
        self._page = page

    def text_input(self, label, value=""):
        return self._user_id

    def selectbox(self, label, options):
        assert self._page in options
        return self._page


class _FakeStreamlit:
    def __init__(
        self,
        user_id: str = "user-1",
        page: str = "Portfolio",
        button: bool = False,
    ) -> None:
        self.sidebar = _FakeSidebar(user_id, page)
        self.config_called = False
        self.title_called = False
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.infos: list[str] = []
        self.metrics: list[tuple] = []
        self.charts: list = []
        self.markdowns: list[str] = []
        self.captions: list[str] = []
        self.dataframe_payload = None
        self._button = button

    def set_page_config(self, **kwargs):
        self.config_called = True
        self.config_kwargs = kwargs

    def title(self, text: str):
        self.title_called = True

    def warning(self, text: str):
        self.warnings.append(text)

    def error(self, text: str):
        self.errors.append(text)

    def info(self, text: str):
        self.infos.append(text)

    def subheader(self, text: str):
        pass

    def caption(self, text: str):
        self.captions.append(text)

    def markdown(self, text: str):
        self.markdowns.append(text)

    def columns(self, count: int):
        return [_FakeColumn(self) for _ in range(count)]

    def metric(self, label, value, delta=None):
        self.metrics.append((label, value, delta))

    def altair_chart(self, chart, **_kwargs):
        self.charts.append(chart)

    def dataframe(self, data, **kwargs):
        self.dataframe_payload = (data, kwargs)

    def button(self, label: str) -> bool:
        return self._button

    def text_input(self, label, value=""):
        return value


def _patch_settings(monkeypatch):
    monkeypatch.setattr(
        app.PortfolioSettings,
        "from_env",
        classmethod(lambda cls: PortfolioSettings()),
    )


def test_main_renders_portfolio_and_insights(monkeypatch):
    """main should render metrics, the donut and the asset table."""
    fake_st = _FakeStreamlit(button=True)
    portfolio = _portfolio(_asset("ETH", "900"), _asset("BTC", "650"))
    _patch_settings(monkeypatch)
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(
        app,
        "_load_portfolio",
        lambda user_id, schema_version=1: portfolio,
    )

    app.main()

    assert fake_st.config_called
    assert fake_st.title_called
    assert fake_st.warnings == []
    assert fake_st.metrics[0][1] == "1,550.00 $"
    assert len(fake_st.charts) == 1
    table_data, kwargs = fake_st.dataframe_payload
    assert [row["Asset"] for row in table_data] == ["ETH", "BTC"]
    assert kwargs["hide_index"] is True
    assert fake_st.markdowns[0].startswith("- ")


def test_main_shows_status_message(monkeypatch):
    """Non-OK portfolios should surface their message."""
    fake_st = _FakeStreamlit()
    _patch_settings(monkeypatch)
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(
        app,
        "_load_portfolio",
        lambda user_id, schema_version=1: Portfolio.empty(
            PortfolioStatus.NO_ASSETS,
            "No assets found.",
        ),
    )

    app.main()

    assert fake_st.warnings == ["No assets found."]
    assert fake_st.charts == []
    assert fake_st.dataframe_payload is None


def test_main_warns_without_user(monkeypatch):
    fake_st = _FakeStreamlit(user_id="")
    _patch_settings(monkeypatch)
    monkeypatch.setattr(app, "st", fake_st)

    app.main()

    assert fake_st.warnings == ["Enter a user id to load a portfolio."]


def test_main_history_page_plots_records(monkeypatch):
    fake_st = _FakeStreamlit(page="History")
    _patch_settings(monkeypatch)
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(
        app,
        "_fetch_history",
        lambda user_id: [ValuationRecord(date(2024, 1, 1), Decimal("10"))],
    )

    app.main()

    assert len(fake_st.charts) == 1


def test_main_coin_page_handles_upstream_failure(monkeypatch):
    fake_st = _FakeStreamlit(page="Coin")
    _patch_settings(monkeypatch)
    monkeypatch.setattr(app, "st", fake_st)

    def _failing(coin_id):
        raise UpstreamUnavailableError("CoinGecko API timeout")

    monkeypatch.setattr(app, "_fetch_coin_details", _failing)

    app.main()

    assert "bitcoin" in fake_st.errors[0]
