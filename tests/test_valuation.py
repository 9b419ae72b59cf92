import pytest

from crypto_tracker.errors import APIError, ErrorKind, PortfolioError, find_error, has_kind
from crypto_tracker.portfolio.valuation import calculate_profit_loss, calculate_total_value, value_holdings
from tests.helpers import StaticPriceClient, holding, make_portfolio


def _rate_limited() -> APIError:
    return APIError("simple/price", 429, ErrorKind.RATE_LIMIT_EXCEEDED)


def test_total_value_single_holding() -> None:
    portfolio = make_portfolio(holding("bitcoin", "Bitcoin", 2, 30000))
    client = StaticPriceClient({"bitcoin": 50000})
    assert calculate_total_value(portfolio, client) == 100000.0


def test_total_value_multiple_holdings_uses_one_batched_request() -> None:
    portfolio = make_portfolio(
        holding("bitcoin", "Bitcoin", 1, 40000),
        holding("ethereum", "Ethereum", 10, 2000),
    )
    client = StaticPriceClient({"bitcoin": 60000, "ethereum": 3000})
    assert calculate_total_value(portfolio, client) == 90000.0
    assert client.requests == [["bitcoin", "ethereum"]]


def test_total_value_requests_distinct_assets_and_sums_every_lot() -> None:
    portfolio = make_portfolio(
        holding("bitcoin", "Bitcoin", 1, 40000),
        holding("bitcoin", "Bitcoin", 0.5, 20000),
    )
    client = StaticPriceClient({"bitcoin": 10000})
    assert calculate_total_value(portfolio, client) == pytest.approx(15000.0)
    assert client.requests == [["bitcoin"]]


def test_total_value_empty_portfolio_skips_price_client() -> None:
    client = StaticPriceClient(error=_rate_limited())
    assert calculate_total_value(make_portfolio(), client) == 0.0
    assert client.requests == []


def test_total_value_rate_limit_kind_survives_wrapping() -> None:
    portfolio = make_portfolio(holding("bitcoin", "Bitcoin", 1, 30000))
    with pytest.raises(PortfolioError) as exc_info:
        calculate_total_value(portfolio, StaticPriceClient(error=_rate_limited()))
    error = exc_info.value
    assert error.operation == "calculate total value"
    assert has_kind(error, ErrorKind.RATE_LIMIT_EXCEEDED)
    assert find_error(error, APIError).status_code == 429


def test_total_value_missing_price_names_asset() -> None:
    portfolio = make_portfolio(
        holding("bitcoin", "Bitcoin", 1, 30000),
        holding("solana", "Solana", 5, 100),
    )
    with pytest.raises(PortfolioError) as exc_info:
        calculate_total_value(portfolio, StaticPriceClient({"bitcoin": 60000}))
    assert exc_info.value.asset_id == "solana"
    assert has_kind(exc_info.value, ErrorKind.PRICE_NOT_AVAILABLE)


def test_profit_loss_profit() -> None:
    portfolio = make_portfolio(holding("bitcoin", "Bitcoin", 1, 30000))
    result = calculate_profit_loss(portfolio, StaticPriceClient({"bitcoin": 60000}))
    assert result == {"bitcoin": 30000.0}


def test_profit_loss_loss() -> None:
    portfolio = make_portfolio(holding("ethereum", "Ethereum", 2, 3000))
    result = calculate_profit_loss(portfolio, StaticPriceClient({"ethereum": 1500}))
    assert result == {"ethereum": -3000.0}


def test_profit_loss_multiple_assets() -> None:
    portfolio = make_portfolio(
        holding("bitcoin", "Bitcoin", 1, 40000),
        holding("ethereum", "Ethereum", 5, 3000),
    )
    client = StaticPriceClient({"bitcoin": 60000, "ethereum": 2000})
    assert calculate_profit_loss(portfolio, client) == {"bitcoin": 20000.0, "ethereum": -5000.0}
    assert client.requests == [["bitcoin", "ethereum"]]


def test_profit_loss_selector_excludes_unselected_assets() -> None:
    portfolio = make_portfolio(
        holding("bitcoin", "Bitcoin", 1, 30000),
        holding("ethereum", "Ethereum", 2, 2000),
    )
    client = StaticPriceClient({"bitcoin": 50000, "ethereum": 3000})
    result = calculate_profit_loss(portfolio, client, ["bitcoin"])
    assert result == {"bitcoin": 20000.0}
    assert client.requests == [["bitcoin"]]


def test_profit_loss_selected_but_not_held_is_skipped() -> None:
    portfolio = make_portfolio(holding("bitcoin", "Bitcoin", 1, 30000))
    client = StaticPriceClient({"bitcoin": 50000, "solana": 100})
    result = calculate_profit_loss(portfolio, client, ["bitcoin", "solana"])
    assert result == {"bitcoin": 20000.0}


def test_profit_loss_selected_not_held_and_unpriced_is_not_an_error() -> None:
    portfolio = make_portfolio(holding("bitcoin", "Bitcoin", 1, 30000))
    result = calculate_profit_loss(portfolio, StaticPriceClient({"bitcoin": 50000}), ["bitcoin", "dogecoin"])
    assert result == {"bitcoin": 20000.0}


def test_profit_loss_empty_portfolio() -> None:
    client = StaticPriceClient({})
    with pytest.raises(PortfolioError) as exc_info:
        calculate_profit_loss(make_portfolio(), client)
    assert has_kind(exc_info.value, ErrorKind.EMPTY_PORTFOLIO)
    assert client.requests == []


def test_profit_loss_empty_selector_defaults_to_all_holdings() -> None:
    portfolio = make_portfolio(
        holding("bitcoin", "Bitcoin", 1, 30000),
        holding("ethereum", "Ethereum", 2, 2000),
    )
    client = StaticPriceClient({"bitcoin": 50000, "ethereum": 3000})
    result = calculate_profit_loss(portfolio, client, [])
    assert result == {"bitcoin": 20000.0, "ethereum": 2000.0}


def test_profit_loss_held_but_unpriced_fails() -> None:
    portfolio = make_portfolio(
        holding("bitcoin", "Bitcoin", 1, 30000),
        holding("solana", "Solana", 3, 100),
    )
    with pytest.raises(PortfolioError) as exc_info:
        calculate_profit_loss(portfolio, StaticPriceClient({"bitcoin": 50000}))
    assert exc_info.value.asset_id == "solana"
    assert has_kind(exc_info.value, ErrorKind.PRICE_NOT_AVAILABLE)


def test_profit_loss_rate_limit_kind_survives_wrapping() -> None:
    portfolio = make_portfolio(holding("bitcoin", "Bitcoin", 1, 30000))
    with pytest.raises(PortfolioError) as exc_info:
        calculate_profit_loss(portfolio, StaticPriceClient(error=_rate_limited()))
    assert has_kind(exc_info.value, ErrorKind.RATE_LIMIT_EXCEEDED)


def test_value_holdings_reports_unpriced_rows_without_failing() -> None:
    portfolio = make_portfolio(
        holding("bitcoin", "Bitcoin", 2, 30000),
        holding("solana", "Solana", 3, 100),
    )
    rows = value_holdings(portfolio, StaticPriceClient({"bitcoin": 50000}))
    assert rows[0].market_value == 100000.0
    assert rows[0].profit_loss == 40000.0
    assert rows[1].current_price is None
    assert rows[1].market_value is None


def test_value_holdings_empty_portfolio() -> None:
    client = StaticPriceClient(error=_rate_limited())
    assert value_holdings(make_portfolio(), client) == []
    assert client.requests == []
