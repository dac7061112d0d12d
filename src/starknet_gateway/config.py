"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from starknet_gateway.models.config import DEFAULT_NETWORK, NETWORK_BASE_URLS, GatewayConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "STARKNET_GATEWAY_",
) -> GatewayConfig:
    """Load client configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (STARKNET_GATEWAY_BASE_URL, etc.)
        2. TOML config file
        3. Defaults from GatewayConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    values: dict = {}

    # ── Network section ────────────────────────────────────
    network = raw.get("network", {})
    if v := network.get("name"):
        values["network"] = str(v)
    if v := network.get("base_url"):
        values["base_url"] = str(v)
    if v := network.get("feeder_gateway_url"):
        values["feeder_gateway_url"] = str(v)
    if v := network.get("gateway_url"):
        values["gateway_url"] = str(v)
    if v := network.get("rpc_url"):
        values["rpc_url"] = str(v)
    if v := network.get("request_timeout"):
        values["request_timeout"] = float(v)

    # ── Polling section ────────────────────────────────────
    polling = raw.get("polling", {})
    if (v := polling.get("interval")) is not None:
        values["poll_interval"] = float(v)
    if (v := polling.get("accept_pending")) is not None:
        values["accept_pending"] = bool(v)
    if v := polling.get("backoff_factor"):
        values["backoff_factor"] = float(v)
    if v := polling.get("max_interval"):
        values["max_interval"] = float(v)

    # ── Logging section ────────────────────────────────────
    logging_raw = raw.get("logging", {})
    if v := logging_raw.get("level"):
        values["log_level"] = str(v)

    # ── Environment variable overrides (highest priority) ──
    if net := os.environ.get(f"{env_prefix}NETWORK"):
        values["network"] = net
    if base := os.environ.get(f"{env_prefix}BASE_URL"):
        values["base_url"] = base
    if rpc := os.environ.get(f"{env_prefix}RPC_URL"):
        values["rpc_url"] = rpc
    if interval := os.environ.get(f"{env_prefix}POLL_INTERVAL"):
        values["poll_interval"] = float(interval)
    if pending := os.environ.get(f"{env_prefix}ACCEPT_PENDING"):
        values["accept_pending"] = pending.strip().lower() in ("1", "true", "yes", "on")
    if level := os.environ.get(f"{env_prefix}LOG_LEVEL"):
        values["log_level"] = level

    # Feeder/gateway URLs follow the base URL unless set explicitly
    base_url = values.pop("base_url", None)
    if base_url is None:
        name = values.get("network", DEFAULT_NETWORK)
        if name not in NETWORK_BASE_URLS:
            raise ValueError(f"unknown network {name!r}; set network.base_url")
        base_url = NETWORK_BASE_URLS[name]
    return GatewayConfig.from_base_url(base_url, **values)


def configure_logging(level: str = "info") -> None:
    """Apply the package's standard log format to the root logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
