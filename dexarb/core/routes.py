"""Static arbitration route catalog."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from dexarb.config import RouteConfig
from dexarb.core.types import Leg, Route

KYBER = "KYBER-EXCHANGE"
UNISWAP = "UNISWAP-EXCHANGE"


def _route(method: str, funding_token: str, buy_venue: str, sell_venue: str) -> Route:
    return Route(
        method=method,
        funding_token=funding_token,
        buy_leg=Leg("ETH", funding_token, f"BUY-{buy_venue}"),
        sell_leg=Leg("ETH", funding_token, f"SELL-{sell_venue}"),
    )


DEFAULT_ROUTES: tuple[Route, ...] = (
    _route("arbEthFromKyberToUniswap", "SAI", KYBER, UNISWAP),
    _route("arbEthFromUniswapToKyber", "SAI", UNISWAP, KYBER),
    _route("arbEthFromKyberToUniswap", "DAI", KYBER, UNISWAP),
    _route("arbEthFromUniswapToKyber", "DAI", UNISWAP, KYBER),
)


class RouteCatalog(Sequence[Route]):
    """Immutable, ordered collection of routes.

    Order matters: it breaks ties when two routes show the same gain.
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Iterable[Route] = DEFAULT_ROUTES) -> None:
        self._routes = tuple(routes)
        ids = [r.id for r in self._routes]
        if len(ids) != len(set(ids)):
            msg = f"Duplicate route ids in catalog: {ids}"
            raise ValueError(msg)

    @classmethod
    def from_config(cls, routes: Sequence[RouteConfig] | None) -> "RouteCatalog":
        """Build the catalog from ARB_ROUTES, or the default routes when unset."""
        if not routes:
            return cls()
        return cls(
            Route(
                method=r.method,
                funding_token=r.funding_token,
                buy_leg=Leg(r.buy.from_asset, r.buy.to_asset, r.buy.venue),
                sell_leg=Leg(r.sell.from_asset, r.sell.to_asset, r.sell.venue),
            )
            for r in routes
        )

    def __getitem__(self, index):  # type: ignore[override]
        return self._routes[index]

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __repr__(self) -> str:
        return f"RouteCatalog({[r.id for r in self._routes]})"
