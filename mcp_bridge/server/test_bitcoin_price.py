from unittest.mock import MagicMock, patch

import pytest
import requests

from mcp_bridge.server.bitcoin_price import (
    COINGECKO_PRICE_URL,
    REQUEST_TIMEOUT,
    PriceLookupError,
    UnsupportedCurrencyError,
    get_bitcoin_price,
    normalize_currency,
)

PRICES = {"bitcoin": {"usd": 65000.5, "eur": 60000.0, "rub": 5900000.25}}


@pytest.fixture
def mock_get():
    """替换 requests.get，返回固定的价格数据"""
    with patch("mcp_bridge.server.bitcoin_price.requests.get") as mock:
        response = MagicMock()
        response.json.return_value = PRICES
        mock.return_value = response
        yield mock


@pytest.mark.parametrize("currency", ["RUB", "rub", "Rub"])
def test_currency_is_case_insensitive(mock_get, currency):
    assert get_bitcoin_price(currency) == 5900000.25


def test_empty_currency_defaults_to_usd(mock_get):
    assert normalize_currency("") == "usd"
    assert get_bitcoin_price("") == 65000.5


def test_single_request_with_timeout(mock_get):
    get_bitcoin_price("EUR")

    mock_get.assert_called_once()
    args, kwargs = mock_get.call_args
    assert args[0] == COINGECKO_PRICE_URL
    assert kwargs["timeout"] == REQUEST_TIMEOUT == 10
    assert kwargs["params"]["ids"] == "bitcoin"


def test_unsupported_currency_makes_no_request(mock_get):
    with pytest.raises(UnsupportedCurrencyError, match="unsupported currency: XYZ"):
        get_bitcoin_price("XYZ")
    mock_get.assert_not_called()


def test_network_error_is_wrapped_without_retry(mock_get):
    mock_get.side_effect = requests.exceptions.Timeout("timed out")

    with pytest.raises(PriceLookupError, match="error making request"):
        get_bitcoin_price("USD")
    assert mock_get.call_count == 1


def test_http_error_is_wrapped(mock_get):
    mock_get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("429")

    with pytest.raises(PriceLookupError):
        get_bitcoin_price("USD")


def test_missing_field_is_wrapped(mock_get):
    mock_get.return_value.json.return_value = {"bitcoin": {"usd": 1.0}}

    with pytest.raises(PriceLookupError, match="error parsing JSON response"):
        get_bitcoin_price("GBP")
