"""
Adapter: Exchange price feed over HTTP.

Implements the PriceFeed port using the public Binance ticker API.

Spot lookup order:
    1. Each configured Binance spot endpoint (``/api/v3/ticker/price``).
       HTTP 451 (restricted location) and transport errors move on to
       the next endpoint.
    2. Mercado Bitcoin ticker, for pairs quoted in BRL.
    3. Bitget spot ticker, for any pair.

Futures lookups only use the Binance ``fapi`` endpoints.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

import httpx

from app.domain.trading.errors import PriceUnavailableError
from app.domain.trading.ports import PriceFeed

logger = logging.getLogger(__name__)

SPOT_TICKER_PATH = "/api/v3/ticker/price"
FUTURES_TICKER_PATH = "/fapi/v1/ticker/price"
BITGET_TICKER_PATH = "/api/v2/spot/market/tickers"
BITGET_OK = "00000"


def _to_decimal(raw) -> Optional[Decimal]:
    if raw is None:
        return None
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        return None
    return value if value.is_finite() and value > 0 else None


class BinancePriceFeed(PriceFeed):
    """Synchronous price feed with endpoint fallback.

    Args:
        spot_endpoints: Binance spot base URLs, tried in order.
        futures_endpoints: Binance futures base URLs, tried in order.
        mercado_bitcoin_url: Base URL of the Mercado Bitcoin public API.
        bitget_url: Base URL of the Bitget public API.
        timeout: HTTP timeout in seconds.
        client: Optional preconfigured ``httpx.Client`` (tests inject a
            client backed by ``httpx.MockTransport``).
    """

    def __init__(
        self,
        spot_endpoints: list[str],
        futures_endpoints: list[str],
        mercado_bitcoin_url: str,
        bitget_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._spot_endpoints = [u.rstrip("/") for u in spot_endpoints]
        self._futures_endpoints = [u.rstrip("/") for u in futures_endpoints]
        self._mercado_bitcoin_url = mercado_bitcoin_url.rstrip("/")
        self._bitget_url = bitget_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # PriceFeed
    # ------------------------------------------------------------------

    def get_spot_price(self, symbol: str) -> Decimal:
        symbol = self._normalize(symbol)
        price, last_error = self._try_binance(self._spot_endpoints, SPOT_TICKER_PATH, symbol)
        if price is not None:
            return price

        if symbol.endswith("BRL"):
            price = self._try_mercado_bitcoin(symbol)
            if price is not None:
                return price

        price = self._try_bitget(symbol)
        if price is not None:
            return price

        raise PriceUnavailableError(symbol, last_error or "all sources failed")

    def get_futures_price(self, symbol: str) -> Decimal:
        symbol = self._normalize(symbol)
        price, last_error = self._try_binance(
            self._futures_endpoints, FUTURES_TICKER_PATH, symbol
        )
        if price is not None:
            return price
        raise PriceUnavailableError(symbol, last_error or "all futures endpoints failed")

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize(symbol: str) -> str:
        cleaned = (symbol or "").strip().upper()
        if not cleaned:
            raise PriceUnavailableError(symbol or "", "symbol is required")
        return cleaned

    def _try_binance(
        self, endpoints: list[str], path: str, symbol: str
    ) -> tuple[Optional[Decimal], Optional[str]]:
        last_error: Optional[str] = None
        for base in endpoints:
            url = f"{base}{path}"
            try:
                resp = self._client.get(url, params={"symbol": symbol})
            except httpx.HTTPError as exc:
                logger.warning("Price request to %s failed: %s", url, exc)
                last_error = str(exc)
                continue

            if resp.status_code == 451:
                logger.warning("Binance restricted location (451) on %s", base)
                last_error = "restricted location (451)"
                continue
            if resp.status_code != 200:
                last_error = f"HTTP {resp.status_code} from {base}"
                logger.warning("Price request for %s: %s", symbol, last_error)
                continue

            try:
                price = _to_decimal(resp.json().get("price"))
            except ValueError:
                price = None
            if price is None:
                last_error = f"invalid ticker payload from {base}"
                logger.warning("Price request for %s: %s", symbol, last_error)
                continue
            return price, None
        return None, last_error

    def _try_mercado_bitcoin(self, symbol: str) -> Optional[Decimal]:
        coin = symbol[: -len("BRL")]
        url = f"{self._mercado_bitcoin_url}/{coin}/ticker/"
        logger.info("Falling back to Mercado Bitcoin for %s", symbol)
        try:
            resp = self._client.get(url)
            if resp.status_code != 200:
                return None
            ticker = resp.json().get("ticker") or {}
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Mercado Bitcoin fallback failed for %s: %s", symbol, exc)
            return None
        return _to_decimal(ticker.get("last"))

    def _try_bitget(self, symbol: str) -> Optional[Decimal]:
        url = f"{self._bitget_url}{BITGET_TICKER_PATH}"
        logger.info("Falling back to Bitget for %s", symbol)
        try:
            resp = self._client.get(url, params={"symbol": symbol})
            if resp.status_code != 200:
                return None
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Bitget fallback failed for %s: %s", symbol, exc)
            return None
        if payload.get("code") != BITGET_OK or not payload.get("data"):
            return None
        return _to_decimal(payload["data"][0].get("lastPr"))
