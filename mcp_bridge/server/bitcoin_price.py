import requests

from common import logger

logger = logger.configure_logging(__name__)

# CoinGecko 公共价格接口，无需鉴权，文档地址：https://docs.coingecko.com/reference/simple-price
COINGECKO_PRICE_URL = "https://api.coingecko.com/api/v3/simple/price"
SUPPORTED_CURRENCIES = ("usd", "eur", "gbp", "jpy", "aud", "cad", "chf", "cny", "krw", "rub")
DEFAULT_CURRENCY = "USD"
REQUEST_TIMEOUT = 10  # 秒


class PriceLookupError(Exception):
    """获取比特币价格失败（网络错误、HTTP错误或响应解析错误）"""


class UnsupportedCurrencyError(PriceLookupError):
    """请求的币种不在支持列表中"""

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"unsupported currency: {currency}")


def normalize_currency(currency: str) -> str:
    """
    校验并规范化币种代码（不区分大小写），空值默认使用 USD

    Returns:
        小写的币种代码，如 "rub"

    Raises:
        UnsupportedCurrencyError: 币种不在支持列表中
    """
    code = (currency or DEFAULT_CURRENCY).lower()
    if code not in SUPPORTED_CURRENCIES:
        raise UnsupportedCurrencyError(currency)
    return code


def get_bitcoin_price(currency: str = DEFAULT_CURRENCY) -> float:
    """
    从 CoinGecko 获取比特币的最新价格

    每次调用都会发起一次实时请求，不做缓存也不重试；请求超时时间固定为10秒。
    不支持的币种在发起请求前直接报错。

    Args:
        currency: 币种代码，如 "USD"、"rub"

    Returns:
        对应币种的价格

    Raises:
        UnsupportedCurrencyError: 币种不受支持
        PriceLookupError: 请求或解析失败
    """
    code = normalize_currency(currency)
    logger.debug(f"请求比特币价格，币种: {code}")

    params = {
        "ids": "bitcoin",
        "vs_currencies": ",".join(SUPPORTED_CURRENCIES)
    }
    try:
        response = requests.get(COINGECKO_PRICE_URL, params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()  # 检查HTTP状态码
    except requests.exceptions.RequestException as e:
        raise PriceLookupError(f"error making request to CoinGecko API: {e}") from e

    try:
        data = response.json()
        return float(data["bitcoin"][code])
    except (ValueError, KeyError, TypeError) as e:
        raise PriceLookupError(f"error parsing JSON response: {e}") from e
