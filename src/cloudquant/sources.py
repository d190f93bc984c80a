"""Quote and candle sources with the live/mock fallback policy.

Mode is decided once, when the ``DataSource`` is built: live when a
Finnhub key is configured, simulated otherwise. In live mode every
failed call (network error, malformed payload, non-"ok" status, failed
quality gate) is answered with the fixed mock payload of the default
symbol. A candle cache that cannot be read counts as a miss and one that
cannot be written is skipped. Failures never leave this module.
"""

from __future__ import annotations

from cloudquant.cache import CacheBackend, NoCache, create_cache
from cloudquant.config import DashboardConfig
from cloudquant.errors import DashboardErrorCode, FetchError
from cloudquant.log import get_logger
from cloudquant.models.candle import Candle
from cloudquant.models.quote import Quote
from cloudquant.providers import create_provider
from cloudquant.providers.base import BaseMarketDataProvider
from cloudquant.providers.mock import MockProvider
from cloudquant.quality import validate_candles, validate_quote

logger = get_logger("sources")


class DataSource:
    """Shared provider selection and fallback payloads.

    Args:
        config: Resolved dashboard configuration.
        provider: Override the provider chosen from ``config`` (tests).
        cache: Override the candle cache chosen from ``config``.
    """

    def __init__(
        self,
        config: DashboardConfig,
        provider: BaseMarketDataProvider | None = None,
        cache: CacheBackend | None = None,
    ) -> None:
        self.config = config
        self.default_symbol = config.default_symbol.upper()

        # Zero-latency generator for per-call fallback payloads
        self._fallback = MockProvider(
            seed=config.mock_seed, default_symbol=self.default_symbol,
        )

        if provider is None:
            if config.live_mode:
                provider = create_provider("finnhub", api_key=config.finnhub_api_key)
            else:
                provider = create_provider(
                    "mock",
                    seed=config.mock_seed,
                    quote_latency=config.mock_quote_latency,
                    candle_latency=config.mock_candle_latency,
                    default_symbol=self.default_symbol,
                )
        self.provider = provider

        if cache is None:
            cache = (
                create_cache(config.cache_backend, config.cache_dir, config.cache_ttl_seconds)
                if self.live_mode
                else NoCache()
            )
        self.cache = cache

        if not self.live_mode:
            logger.warning("No Finnhub API key configured; market data is simulated")

    @property
    def live_mode(self) -> bool:
        return self.provider.is_live

    def fallback_quote(self) -> Quote:
        return self._fallback.get_quote(self.default_symbol)

    def fallback_candles(self, range_days: int) -> list[Candle]:
        return self._fallback.get_candles(
            self.default_symbol, self.config.candle_resolution, range_days,
        )


class QuoteSource:
    """Point-in-time quotes for any symbol; never raises on fetch failure."""

    def __init__(self, source: DataSource) -> None:
        self.source = source

    def fetch(self, symbol: str) -> Quote:
        try:
            quote = self.source.provider.get_quote(symbol)
            if not validate_quote(quote):
                raise FetchError(
                    f"Quote for {symbol} failed sanity check",
                    code=DashboardErrorCode.MALFORMED_RESPONSE,
                )
            return quote
        except FetchError as exc:
            logger.warning(
                "Quote fetch for %s failed (%s): %s; using mock quote",
                symbol, exc.code.value, exc,
            )
            return self.source.fallback_quote()


class CandleSource:
    """Historical candles sorted ascending by time; never raises on fetch failure."""

    def __init__(self, source: DataSource) -> None:
        self.source = source

    def fetch(
        self,
        symbol: str,
        resolution: str | None = None,
        range_days: int | None = None,
    ) -> list[Candle]:
        config = self.source.config
        resolution = resolution or config.candle_resolution
        range_days = range_days or config.candle_range_days

        cached = self._read_cache(symbol, resolution, range_days)
        if cached is not None:
            return cached

        try:
            candles = self.source.provider.get_candles(symbol, resolution, range_days)
            if self.source.live_mode and config.validate:
                result = validate_candles(candles)
                if not result.passed:
                    raise FetchError(
                        f"Validation failed: {result.summary()}",
                        code=DashboardErrorCode.MALFORMED_RESPONSE,
                    )
        except FetchError as exc:
            logger.warning(
                "Candle fetch for %s failed (%s): %s; using mock candles",
                symbol, exc.code.value, exc,
            )
            return self.source.fallback_candles(range_days)

        if self.source.live_mode:
            self._write_cache(symbol, candles, resolution, range_days)
        return candles

    def invalidate(self, symbol: str) -> None:
        """Drop cached history so the next fetch goes to the provider."""
        try:
            self.source.cache.clear(symbol)
        except OSError as exc:
            logger.warning("Could not clear cached candles for %s: %s", symbol, exc)

    def _read_cache(
        self, symbol: str, resolution: str, range_days: int,
    ) -> list[Candle] | None:
        try:
            return self.source.cache.get_candles(symbol, resolution, range_days)
        except (OSError, ValueError) as exc:
            logger.warning("Candle cache read for %s failed: %s", symbol, exc)
            return None

    def _write_cache(
        self, symbol: str, candles: list[Candle], resolution: str, range_days: int,
    ) -> None:
        try:
            self.source.cache.store_candles(symbol, candles, resolution, range_days)
        except (OSError, ValueError) as exc:
            logger.warning("Candle cache write for %s failed: %s", symbol, exc)
