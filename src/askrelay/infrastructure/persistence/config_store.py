"""
Relay Configuration Store
=========================

Reads and writes the per-user relay configuration file
(``~/.claude/slack-notify.json`` unless ``ASKRELAY_CONFIG`` points
elsewhere).

Reading never raises: a missing, unreadable or incomplete file yields
``None``, which callers treat as "relay unavailable".  Writes are atomic
and leave the file readable by its owner only, since it holds a token.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from askrelay.core.domain.config import RelayConfig

logger = structlog.get_logger(__name__)

CONFIG_ENV_VAR = "ASKRELAY_CONFIG"
CONFIG_RELATIVE_PATH = Path(".claude") / "slack-notify.json"


def get_config_path() -> Path:
    """Return the configuration file location."""
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_RELATIVE_PATH


def _load_raw(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("config.read_failed", path=str(path), error=str(exc))
        return None
    if not isinstance(data, dict):
        logger.warning("config.not_an_object", path=str(path))
        return None
    return data


def read_config(path: Path | None = None) -> RelayConfig | None:
    """Load the configuration.

    Args:
        path: File to read; defaults to ``get_config_path()``.

    Returns:
        The parsed configuration, or None if the file is absent, invalid,
        or missing ``botToken``/``channelId``.
    """
    path = path or get_config_path()
    raw = _load_raw(path)
    if raw is None:
        return None

    try:
        config = RelayConfig.model_validate(raw)
    except ValidationError as exc:
        logger.warning(
            "config.invalid",
            path=str(path),
            errors=exc.error_count(),
            error=str(exc),
        )
        return None

    if not config.bot_token or not config.channel_id:
        logger.warning("config.missing_required_fields", path=str(path))
        return None
    return config


def write_config(data: dict[str, Any], path: Path | None = None) -> bool:
    """Write ``data`` as the configuration file, atomically.

    Returns:
        True on success, False if the file could not be written.
    """
    path = path or get_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(
            dir=path.parent, suffix=".tmp", prefix=".slack-notify_"
        )
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.chmod(temp_path, 0o600)
            os.replace(temp_path, path)
        except Exception:
            if Path(temp_path).exists():
                Path(temp_path).unlink()
            raise
    except OSError as exc:
        logger.error("config.write_failed", path=str(path), error=str(exc))
        return False

    logger.debug("config.written", path=str(path))
    return True


def update_config(updates: dict[str, Any], path: Path | None = None) -> bool:
    """Merge ``updates`` (camelCase keys) into the stored configuration."""
    path = path or get_config_path()
    current = _load_raw(path) or {}
    merged = {**current, **{k: v for k, v in updates.items() if v is not None}}
    return write_config(merged, path)
