"""Tests for market graph grouping and the liquidity filter."""

import pytest

from uniswappy.amm.uniswap_v2 import UniswapV2Pair
from uniswappy.discovery.graph import (
    GroupedMarkets,
    drop_singletons,
    filter_by_liquidity,
    flatten,
    group_by_non_pivot,
    non_pivot_token,
)
from uniswappy.errors import MalformedMarket
from tests.helpers import DAI, ETHER, LINK, UNI, USDC, WETH, addr, make_pair

FLOOR = 5 * ETHER


class TestNonPivotToken:
    def test_either_side(self):
        assert non_pivot_token(make_pair(addr(1), DAI, pivot_first=True)) == DAI
        assert non_pivot_token(make_pair(addr(2), DAI, pivot_first=False)) == DAI

    def test_no_pivot_raises(self):
        with pytest.raises(MalformedMarket):
            non_pivot_token(UniswapV2Pair(addr(1), (DAI, USDC)))

    def test_custom_pivot(self):
        market = UniswapV2Pair(addr(1), (DAI, USDC))
        assert non_pivot_token(market, pivot=USDC.upper().replace("0X", "0x")) == DAI


class TestGrouping:
    def test_groups_preserve_order(self):
        m1 = make_pair(addr(1), DAI)
        m2 = make_pair(addr(2), LINK, pivot_first=False)
        m3 = make_pair(addr(3), DAI, pivot_first=False)

        graph = group_by_non_pivot([m1, m2, m3])

        assert list(graph) == [DAI, LINK]
        assert graph[DAI] == [m1, m3]
        assert graph[LINK] == [m2]

    def test_market_without_pivot_raises(self):
        with pytest.raises(MalformedMarket):
            group_by_non_pivot([UniswapV2Pair(addr(1), (DAI, USDC))])

    def test_drop_singletons(self):
        m1, m2, m3 = make_pair(addr(1), DAI), make_pair(addr(2), DAI), make_pair(addr(3), UNI)
        graph = drop_singletons(group_by_non_pivot([m1, m2, m3]))
        assert graph == {DAI: [m1, m2]}

    def test_every_remaining_bucket_has_two_or_more(self):
        markets = [make_pair(addr(i), token) for i, token in enumerate([DAI, DAI, UNI, LINK, LINK, LINK, USDC], 1)]
        graph = drop_singletons(group_by_non_pivot(markets))
        assert all(len(ms) > 1 for ms in graph.values())
        assert set(graph) == {DAI, LINK}

    def test_flatten(self):
        m1, m2, m3 = make_pair(addr(1), DAI), make_pair(addr(2), LINK), make_pair(addr(3), DAI)
        assert flatten(group_by_non_pivot([m1, m2, m3])) == [m1, m3, m2]

    def test_empty(self):
        assert drop_singletons(group_by_non_pivot([])) == {}
        assert flatten({}) == []


class TestLiquidityFilter:
    def test_floor_is_exclusive(self):
        """4.9 ETH dropped, 5.1 ETH kept, exactly 5 ETH dropped."""
        low = make_pair(addr(1), DAI, pivot_reserve=49 * ETHER // 10, token_reserve=1)
        high = make_pair(addr(2), DAI, pivot_reserve=51 * ETHER // 10, token_reserve=1, pivot_first=False)
        exact = make_pair(addr(3), DAI, pivot_reserve=FLOOR, token_reserve=1)

        graph = filter_by_liquidity([low, high, exact], FLOOR)

        assert graph == {DAI: [high]}

    def test_reads_pivot_side_only(self):
        """A huge non-pivot reserve does not rescue a shallow pivot side."""
        market = make_pair(addr(1), DAI, pivot_reserve=ETHER, token_reserve=10**30)
        assert filter_by_liquidity([market], FLOOR) == {}

    def test_singletons_may_remain(self):
        deep = make_pair(addr(1), LINK, pivot_reserve=60 * ETHER, token_reserve=1)
        shallow = make_pair(addr(2), LINK, pivot_reserve=ETHER, token_reserve=1)
        assert filter_by_liquidity([deep, shallow], FLOOR) == {LINK: [deep]}

    def test_zero_floor_drops_empty_pairs(self):
        empty = make_pair(addr(1), DAI)
        assert filter_by_liquidity([empty], 0) == {}

    def test_custom_pivot(self):
        market = UniswapV2Pair(addr(1), (USDC, DAI))
        market.set_reserves([10, 1])
        assert filter_by_liquidity([market], 9, pivot=USDC) == {DAI: [market]}

    def test_market_without_pivot_raises(self):
        with pytest.raises(MalformedMarket):
            filter_by_liquidity([UniswapV2Pair(addr(1), (DAI, USDC))], FLOOR)


class TestGroupedMarkets:
    def test_counts(self):
        m1, m2, m3 = make_pair(addr(1), DAI), make_pair(addr(2), DAI), make_pair(addr(3), LINK)
        grouped = GroupedMarkets(markets_by_token={DAI: [m1, m2], LINK: [m3]})
        assert grouped.token_count == 2
        assert grouped.market_count == 3

    def test_empty_defaults(self):
        grouped = GroupedMarkets()
        assert grouped.token_count == 0
        assert grouped.market_count == 0
        assert grouped.all_market_pairs == []
        assert grouped.failed_factories == {}
