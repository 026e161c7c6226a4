"""Tests for MarketConfig."""

import pytest

from uniswappy.config import DEFAULT_CONFIG, MarketConfig
from uniswappy.constants import DENYLIST_TOKENS
from tests.helpers import BAD_TOKEN, DAI, ETHER, USDC, WETH


class TestDefaults:
    def test_default_values(self):
        config = MarketConfig()
        assert config.pivot_token == WETH
        assert config.batch_size == 1000
        assert config.batch_count_limit == 100
        assert config.liquidity_floor == 5 * ETHER
        assert (config.fee_numerator, config.fee_denominator) == (997, 1000)
        assert config.denylist == DENYLIST_TOKENS
        assert config.max_workers is None

    def test_default_instance(self):
        assert DEFAULT_CONFIG == MarketConfig()

    def test_default_denylist(self):
        assert DEFAULT_CONFIG.is_denylisted(BAD_TOKEN)
        assert DEFAULT_CONFIG.is_denylisted(BAD_TOKEN.upper().replace("0X", "0x"))
        assert not DEFAULT_CONFIG.is_denylisted(DAI)

    def test_is_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.batch_size = 5  # type: ignore[misc]


class TestValidation:
    def test_addresses_normalized(self):
        config = MarketConfig(pivot_token=USDC.upper().replace("0X", "0x"), denylist=frozenset({DAI.upper()}))
        assert config.pivot_token == USDC
        assert config.denylist == frozenset({DAI})

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"batch_size": 0},
            {"batch_count_limit": 0},
            {"liquidity_floor": -1},
            {"fee_numerator": 0},
            {"fee_numerator": 1001},
            {"max_workers": 0},
            {"pivot_token": "0x1234"},
            {"denylist": frozenset({"not-an-address"})},
        ],
    )
    def test_invalid_values_raise(self, kwargs):
        with pytest.raises(ValueError):
            MarketConfig(**kwargs)


class TestFromEnv:
    def test_empty_environment_gives_defaults(self):
        assert MarketConfig.from_env({}) == MarketConfig()

    def test_overrides(self):
        config = MarketConfig.from_env(
            {
                "UNISWAPPY_PIVOT_TOKEN": USDC,
                "UNISWAPPY_BATCH_SIZE": "500",
                "UNISWAPPY_BATCH_COUNT_LIMIT": "3",
                "UNISWAPPY_LIQUIDITY_FLOOR": str(10 * ETHER),
                "UNISWAPPY_MAX_WORKERS": "4",
            }
        )
        assert config.pivot_token == USDC
        assert config.batch_size == 500
        assert config.batch_count_limit == 3
        assert config.liquidity_floor == 10 * ETHER
        assert config.max_workers == 4

    def test_denylist_replaces_default(self):
        config = MarketConfig.from_env({"UNISWAPPY_DENYLIST": f" {DAI} , {USDC},"})
        assert config.denylist == frozenset({DAI, USDC})
        assert not config.is_denylisted(BAD_TOKEN)

    def test_empty_denylist_clears_it(self):
        assert MarketConfig.from_env({"UNISWAPPY_DENYLIST": ""}).denylist == frozenset()

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("UNISWAPPY_BATCH_SIZE", "250")
        assert MarketConfig.from_env().batch_size == 250

    def test_bad_integer_raises(self):
        with pytest.raises(ValueError, match="UNISWAPPY_BATCH_SIZE"):
            MarketConfig.from_env({"UNISWAPPY_BATCH_SIZE": "lots"})
