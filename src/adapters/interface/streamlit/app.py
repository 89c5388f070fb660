"""Streamlit dashboard entry point."""

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal
import os
from typing import Any

import altair as alt
import streamlit as st

from src.application.use_cases.generate_portfolio_insights import (
    GeneratePortfolioInsightsUseCase,
)
from src.application.use_cases.get_market_details import (
    GetCoinDetailsUseCase,
    GetHistoricalSeriesUseCase,
)
from src.application.use_cases.get_portfolio_history import (
    GetPortfolioHistoryUseCase,
)
from src.domain.errors import PortfolioError
from src.domain.models import Portfolio, PortfolioStatus, ValuationRecord
from src.infrastructure.container import (
    build_market_data_cache,
    build_market_data_client,
    build_rate_limiter,
    build_sync_portfolio_use_case,
    build_valuation_store,
)
from src.infrastructure.settings import PortfolioSettings


@st.cache_resource(show_spinner=False)
def _market_data_client():
    """Process-wide market data client sharing one cache and rate limiter."""
    settings = PortfolioSettings.from_env()
    return build_market_data_client(
        build_market_data_cache(settings),
        build_rate_limiter(settings),
        settings,
    )


def _fetch_portfolio(user_id: str) -> Portfolio:
    """Run the portfolio sync for the user."""
    use_case = build_sync_portfolio_use_case(_market_data_client())
    return use_case.execute(user_id)


@st.cache_data(show_spinner=False, ttl=60)
def _load_portfolio(user_id: str, schema_version: int = 1) -> Portfolio:
    """Cached wrapper around _fetch_portfolio."""
    _ = schema_version
    return _fetch_portfolio(user_id)


def _fetch_history(user_id: str) -> list[ValuationRecord]:
    """Fetch the stored daily valuations."""
    use_case = GetPortfolioHistoryUseCase(build_valuation_store())
    return use_case.execute(user_id)


def _fetch_coin_details(coin_id: str) -> dict[str, Any] | None:
    use_case = GetCoinDetailsUseCase(_market_data_client())
    return use_case.execute(coin_id)


def _fetch_series(coin_id: str) -> dict[str, Any]:
    use_case = GetHistoricalSeriesUseCase(_market_data_client())
    return use_case.execute(coin_id, days=1)


def _format_currency(value: Decimal, currency_code: str) -> str:
    """Format currency values for display."""
    symbol = "$" if currency_code.lower() == "usd" else currency_code.upper()
    return f"{value:,.2f} {symbol}"


def _format_delta_with_percent(delta: Decimal, percent: Decimal) -> str:
    """Format delta value with percentage change."""
    sign = "+" if delta >= 0 else ""
    percent_sign = "+" if percent >= 0 else ""
    return f"{sign}{delta:,.2f} ({percent_sign}{percent:.2f}%)"


def _prepare_allocation_chart_data(
    portfolio: Portfolio,
    currency_code: str,
    max_assets: int = 6,
) -> list[dict[str, str | float]]:
    """Prepare donut chart data with a Top-N + Other grouping.

    Args:
        portfolio: Portfolio with assets ranked by value.
        currency_code: Reference currency code for labels.
        max_assets: Maximum assets to keep before grouping into Other.

    Returns:
        Altair-ready chart rows.
    """
    top_assets = list(portfolio.assets[:max_assets])
    rows = [(asset.symbol, asset.current_value) for asset in top_assets]
    other_amount = sum(
        (asset.current_value for asset in portfolio.assets[max_assets:]),
        start=Decimal("0"),
    )
    if other_amount:
        rows.append(("Other", other_amount))

    total = portfolio.total_value
    data: list[dict[str, str | float]] = []
    for symbol, amount in rows:
        share = (amount / total) * Decimal("100") if total else Decimal("0")
        data.append(
            {
                "asset": symbol,
                "amount": float(amount),
                "amount_label": _format_currency(amount, currency_code),
                "share_label": f"{share:.1f}%",
            }
        )
    return data


def _prepare_series_chart_data(
    series: dict[str, Any],
) -> list[dict[str, str | float]]:
    """Convert ``prices`` pairs of [ms timestamp, price] to chart rows."""
    data = []
    for point in series.get("prices") or []:
        if not isinstance(point, (list, tuple)) or len(point) != 2:
            continue
        timestamp, price = point
        if price is None:
            continue
        moment = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
        data.append({"time": moment.isoformat(), "price": float(price)})
    return data


def _render_portfolio(portfolio: Portfolio, currency_code: str) -> None:
    """Render headline metrics, allocation donut and the asset table."""
    if portfolio.status is not PortfolioStatus.OK:
        st.warning(portfolio.message or "Portfolio is unavailable.")

    value_col, change_col = st.columns(2)
    value_col.metric(
        "Total Value",
        _format_currency(portfolio.total_value, currency_code),
        _format_delta_with_percent(
            portfolio.change_24h_value,
            portfolio.change_24h_percent,
        ),
    )
    change_col.metric("Assets", str(len(portfolio.assets)))

    if not portfolio.assets:
        return

    chart_data = _prepare_allocation_chart_data(portfolio, currency_code)
    chart = alt.Chart(alt.Data(values=chart_data)).mark_arc(
        innerRadius=100,
        cornerRadius=8,
        padAngle=0.02,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color("asset:N", legend=alt.Legend(orient="bottom")),
        order=alt.Order("amount:Q", sort="descending"),
        tooltip=[
            alt.Tooltip("asset:N"),
            alt.Tooltip("amount_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    ).properties(width=320, height=320)
    st.subheader("Allocation")
    st.altair_chart(chart)

    table = [
        {
            "Asset": asset.symbol,
            "Amount": f"{asset.amount:.8f}",
            "Price": _format_currency(asset.price, currency_code),
            "Value": _format_currency(asset.current_value, currency_code),
            "24h": f"{asset.change_24h:+.2f}%",
        }
        for asset in portfolio.assets
    ]
    st.dataframe(table, hide_index=True, use_container_width=True)


def _render_insights(portfolio: Portfolio, currency_code: str) -> None:
    if not st.button("Generate insights"):
        return
    try:
        insights = GeneratePortfolioInsightsUseCase(currency_code).execute(
            portfolio
        )
    except PortfolioError as exc:
        st.warning(str(exc))
        return
    st.caption(insights.summary)
    st.markdown(insights.as_text())


def _render_history(records: Sequence[ValuationRecord]) -> None:
    if not records:
        st.info("No valuations recorded yet. Sync your portfolio first.")
        return
    data = [
        {
            "date": record.snapshot_date.isoformat(),
            "total_value": float(record.total_value),
        }
        for record in records
    ]
    chart = alt.Chart(alt.Data(values=data)).mark_line(point=True).encode(
        x=alt.X("date:T", title="Date"),
        y=alt.Y("total_value:Q", title="Total value"),
    )
    st.altair_chart(chart)


def _render_coin_details(coin_id: str, currency_code: str) -> None:
    try:
        details = _fetch_coin_details(coin_id)
    except PortfolioError as exc:
        st.error(f"Failed to fetch details for {coin_id}: {exc}")
        return
    if details is None:
        st.warning(f"Market data not found for {coin_id}")
        return
    st.subheader(details.get("name") or coin_id)
    price = details.get("current_price")
    if price is not None:
        st.metric(
            "Price",
            _format_currency(Decimal(str(price)), currency_code),
            f"{details.get('price_change_percentage_24h') or 0:.2f}%",
        )
    try:
        series = _fetch_series(coin_id)
    except PortfolioError as exc:
        st.error(f"Failed to fetch 24h history for {coin_id}: {exc}")
        return
    data = _prepare_series_chart_data(series)
    if data:
        chart = alt.Chart(alt.Data(values=data)).mark_line().encode(
            x=alt.X("time:T", title="Time (UTC)"),
            y=alt.Y("price:Q", title="Price", scale=alt.Scale(zero=False)),
        )
        st.altair_chart(chart)


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Crypto Portfolio", layout="wide")
    st.title("Crypto Portfolio")

    currency_code = PortfolioSettings.from_env().vs_currency
    user_id = st.sidebar.text_input(
        "User id",
        value=os.getenv("PORTFOLIO_USER_ID", ""),
    ).strip()
    page = st.sidebar.selectbox("Page", ["Portfolio", "History", "Coin"])

    if page == "Coin":
        coin_id = st.text_input("CoinGecko id", value="bitcoin").strip()
        if coin_id:
            _render_coin_details(coin_id, currency_code)
        return

    if not user_id:
        st.warning("Enter a user id to load a portfolio.")
        return

    if page == "History":
        _render_history(_fetch_history(user_id))
        return

    portfolio = _load_portfolio(user_id, schema_version=1)
    _render_portfolio(portfolio, currency_code)
    _render_insights(portfolio, currency_code)


if __name__ == "__main__":  # pragma: no cover
    main()
