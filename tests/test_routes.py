"""Tests for the route catalog and data model."""

import dataclasses

import pytest

from dexarb.core.routes import DEFAULT_ROUTES, RouteCatalog
from dexarb.core.types import Leg, Route


def test_default_catalog_order_and_ids() -> None:
    catalog = RouteCatalog()
    assert [r.id for r in catalog] == [
        "arbEthFromKyberToUniswap:SAI",
        "arbEthFromUniswapToKyber:SAI",
        "arbEthFromKyberToUniswap:DAI",
        "arbEthFromUniswapToKyber:DAI",
    ]
    assert catalog[0].buy_leg == Leg("ETH", "SAI", "BUY-KYBER-EXCHANGE")
    assert catalog[0].sell_leg == Leg("ETH", "SAI", "SELL-UNISWAP-EXCHANGE")


def test_routes_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_ROUTES[0].method = "other"  # type: ignore[misc]


def test_duplicate_route_ids_rejected() -> None:
    route = Route("m", "DAI", Leg("ETH", "DAI", "A"), Leg("ETH", "DAI", "B"))
    with pytest.raises(ValueError):
        RouteCatalog([route, route])


def test_catalog_is_a_sequence() -> None:
    catalog = RouteCatalog(DEFAULT_ROUTES[:2])
    assert len(catalog) == 2
    assert catalog[-1] is DEFAULT_ROUTES[1]
    assert DEFAULT_ROUTES[0] in catalog
