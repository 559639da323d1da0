# [TESTER] v1

from __future__ import annotations

import pytest

from src.integration.config import PoolServiceConfig, config_from_env, config_from_mapping, load_config


def test_defaults_are_valid() -> None:
    cfg = PoolServiceConfig()
    assert cfg.fee_rate_milli == 30
    assert cfg.swap_inbound_transfer is True
    assert cfg.admin_signers == ()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"fee_rate_milli": 1000},
        {"fee_rate_milli": -1},
        {"fee_rate_milli": True},
        {"asset_a": "X", "asset_b": "X"},
        {"pool_account": "same", "fee_receiver_account": "same"},
        {"pool_id": " "},
        {"swap_inbound_transfer": "yes"},
        {"admin_signers": ("ok", "")},
        {"admin_signers": ["admin"]},
    ],
)
def test_invalid_values_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        PoolServiceConfig(**kwargs)


def test_from_env() -> None:
    cfg = config_from_env(
        {
            "AMM_POOL_POOL_ID": "usdc-eth",
            "AMM_POOL_ASSET_A": "USDC",
            "AMM_POOL_ASSET_B": "ETH",
            "AMM_POOL_FEE_RATE_MILLI": "5",
            "AMM_POOL_SWAP_INBOUND_TRANSFER": "off",
            "AMM_POOL_ADMIN_SIGNERS": "alice, bob,,",
            "AMM_POOL_FEE_COLLECTOR_SIGNERS": "treasurer",
        }
    )
    assert (cfg.pool_id, cfg.asset_a, cfg.asset_b) == ("usdc-eth", "USDC", "ETH")
    assert cfg.fee_rate_milli == 5
    assert cfg.swap_inbound_transfer is False
    assert cfg.admin_signers == ("alice", "bob")
    assert cfg.fee_collector_signers == ("treasurer",)


def test_from_env_empty_is_default() -> None:
    assert config_from_env({}) == PoolServiceConfig()


def test_from_env_unparseable_bool_falls_back_to_default() -> None:
    assert config_from_env({"AMM_POOL_SWAP_INBOUND_TRANSFER": "maybe"}).swap_inbound_transfer is True


def test_from_env_bad_fee() -> None:
    with pytest.raises(ValueError, match="FEE_RATE_MILLI"):
        config_from_env({"AMM_POOL_FEE_RATE_MILLI": "0.3"})


def test_mapping_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="unknown config keys: fee_bps"):
        config_from_mapping({"fee_bps": 30})


def test_mapping_rejects_signers_string() -> None:
    with pytest.raises(ValueError, match="admin_signers"):
        config_from_mapping({"admin_signers": "alice"})


def test_load_yaml(tmp_path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text(
        "pool_id: main\n"
        "fee_rate_milli: 25\n"
        "swap_inbound_transfer: false\n"
        "admin_signers:\n"
        "  - ops\n"
        "fee_collector_signers: [treasurer]\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.pool_id == "main"
    assert cfg.fee_rate_milli == 25
    assert cfg.swap_inbound_transfer is False
    assert cfg.admin_signers == ("ops",)
    assert cfg.fee_collector_signers == ("treasurer",)


def test_load_empty_yaml(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == PoolServiceConfig()


def test_load_non_mapping_yaml(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_config(str(path))
