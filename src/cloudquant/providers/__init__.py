"""Market data provider registry."""

from __future__ import annotations

from cloudquant.providers.base import BaseMarketDataProvider

# Lazy registry - classes imported on demand so mock mode never imports
# the Finnhub client.
PROVIDER_CLASSES: dict[str, str] = {
    "finnhub": "cloudquant.providers.finnhub.FinnhubProvider",
    "mock": "cloudquant.providers.mock.MockProvider",
}


def create_provider(name: str, **kwargs) -> BaseMarketDataProvider:
    """Instantiate a provider by name, forwarding kwargs to its constructor."""
    import importlib

    dotted = PROVIDER_CLASSES[name]
    module_path, cls_name = dotted.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, cls_name)
    return cls(**kwargs)


__all__ = ["BaseMarketDataProvider", "PROVIDER_CLASSES", "create_provider"]
