"""
modboard.config — YAML Configuration Loader
============================================

**Why this file exists:**
This module reads ``config.yaml`` for the bot's soft settings (prefix,
role names, leaderboard channel, data file, web port, timers).  Secrets
such as the Discord token stay in the environment (``.env``).

Usage::

    from modboard.config import load_config

    cfg = load_config()               # reads ./config.yaml by default
    print(cfg.leaderboard_channel_id) # 1468816181854081229
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from modboard.constants import (
    BOT_DISPLAY_NAME,
    DEFAULT_MODERATOR_ROLE,
    DEFAULT_REWARD_ROLE,
    MILESTONES,
)


class ConfigError(RuntimeError):
    """Raised when required settings are missing or invalid."""


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ModboardConfig:
    """Immutable configuration loaded from ``config.yaml`` (+ env overrides)."""

    # Discord
    leaderboard_channel_id: int
    bot_prefix: str = "?"
    moderator_role_name: str = DEFAULT_MODERATOR_ROLE
    reward_role_name: str = DEFAULT_REWARD_ROLE

    # Persistence
    data_file: str = "moderator_data.json"
    save_interval_minutes: float = 5.0

    # Presence
    presence_interval_minutes: float = 5.0

    # Web view / health check
    web_host: str = "0.0.0.0"
    web_port: int = 3000

    # Gameplay
    milestones: tuple[int, ...] = MILESTONES

    # Identity (shown by ?info)
    bot_name: str = BOT_DISPLAY_NAME
    creator: str = "Georgio"
    version: str = "1.0"
    footer_text: str = "musico.xyz"


def _parse_milestones(raw) -> tuple[int, ...]:
    if raw is None:
        return MILESTONES
    try:
        values = tuple(int(v) for v in raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"milestones must be a list of integers: {raw!r}") from exc
    if not values or any(v <= 0 for v in values):
        raise ConfigError("milestones must be a non-empty list of positive integers")
    if any(a >= b for a, b in zip(values, values[1:])):
        raise ConfigError("milestones must be strictly ascending")
    return values


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> ModboardConfig:
    """Read *path* and return a :class:`ModboardConfig` instance.

    The YAML file is optional when ``LEADERBOARD_CHANNEL_ID`` is set in the
    environment; every other key has a default.  ``LEADERBOARD_CHANNEL_ID``
    and ``PORT`` override their YAML counterparts.

    Raises
    ------
    ConfigError
        If the leaderboard channel is not configured anywhere, or a value
        cannot be parsed.
    """
    config_path = Path(path)
    raw: dict = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{config_path} must contain a YAML mapping")

    channel_id = os.getenv("LEADERBOARD_CHANNEL_ID") or raw.get("leaderboard_channel_id")
    if not channel_id:
        raise ConfigError(
            "leaderboard_channel_id is not set.  "
            "Set LEADERBOARD_CHANNEL_ID or copy config.yaml.example → config.yaml."
        )

    defaults = ModboardConfig(leaderboard_channel_id=0)
    try:
        return ModboardConfig(
            leaderboard_channel_id=int(channel_id),
            bot_prefix=str(raw.get("bot_prefix", defaults.bot_prefix)),
            moderator_role_name=str(
                raw.get("moderator_role_name", defaults.moderator_role_name)
            ),
            reward_role_name=str(raw.get("reward_role_name", defaults.reward_role_name)),
            data_file=str(raw.get("data_file", defaults.data_file)),
            save_interval_minutes=float(
                raw.get("save_interval_minutes", defaults.save_interval_minutes)
            ),
            presence_interval_minutes=float(
                raw.get("presence_interval_minutes", defaults.presence_interval_minutes)
            ),
            web_host=str(raw.get("web_host", defaults.web_host)),
            web_port=int(os.getenv("PORT") or raw.get("web_port", defaults.web_port)),
            milestones=_parse_milestones(raw.get("milestones")),
            bot_name=str(raw.get("bot_name", defaults.bot_name)),
            creator=str(raw.get("creator", defaults.creator)),
            version=str(raw.get("version", defaults.version)),
            footer_text=str(raw.get("footer_text", defaults.footer_text)),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value in {config_path}: {exc}") from exc
