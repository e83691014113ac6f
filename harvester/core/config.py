"""
Configuration Management for Harvester

This module provides the run configuration with:
- Environment variable loading (configs/.env)
- Type validation
- Sensible defaults
- Explicit overrides (no global configuration instance)
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

from harvester.core.exceptions import ConfigurationError


DEFAULT_ENV_PATH = Path("configs/.env")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/126.0.0.0 Safari/537.36"
)

_FALSE_VALUES = {"0", "false", "no", "off"}
_UNBOUNDED_VALUES = {"", "none", "unbounded", "all"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in _FALSE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _env_optional_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None:
        return default
    if raw.strip().lower() in _UNBOUNDED_VALUES:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer or 'none', got {raw!r}")


def _env_optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip().lower() in _UNBOUNDED_VALUES:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _env_optional_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


@dataclass(frozen=True)
class HarvestConfig:
    """
    Options for a single harvest run.

    Timeouts and intervals are in milliseconds except ``run_deadline_s``.
    ``enhancement_cap`` of None means every list item is enhanced.
    """

    # === Session ===
    headless: bool = False
    evasion_enabled: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    nav_timeout_ms: int = 60_000

    # === Gate ===
    challenge_timeout_ms: int = 30_000
    clearance_timeout_ms: int = 180_000

    # === Listing ===
    ready_timeout_ms: int = 15_000
    scroll_interval_ms: int = 2_000

    # === Detail pages ===
    detail_timeout_ms: int = 15_000
    detail_ready_timeout_ms: int = 10_000
    detail_delay_ms: int = 1_000
    enhancement_cap: Optional[int] = 20

    # === Records ===
    sort_key: Optional[str] = None
    dedupe: bool = False

    # === Run ===
    persist_partial: bool = False
    run_deadline_s: Optional[float] = None
    site: Optional[str] = None
    search_query: Optional[str] = None

    # === Output / logging ===
    export_csv: bool = False
    out_dir: Path = field(default_factory=lambda: Path("results"))
    log_dir: Path = field(default_factory=lambda: Path("logs"))
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration."""
        errors = []

        for name in (
            "nav_timeout_ms",
            "challenge_timeout_ms",
            "clearance_timeout_ms",
            "ready_timeout_ms",
            "detail_timeout_ms",
            "detail_ready_timeout_ms",
        ):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive, got {getattr(self, name)}")

        if self.scroll_interval_ms < 0:
            errors.append(f"scroll_interval_ms must be non-negative, got {self.scroll_interval_ms}")

        if self.detail_delay_ms < 0:
            errors.append(f"detail_delay_ms must be non-negative, got {self.detail_delay_ms}")

        if self.enhancement_cap is not None and self.enhancement_cap < 0:
            errors.append(f"enhancement_cap must be non-negative, got {self.enhancement_cap}")

        if self.run_deadline_s is not None and self.run_deadline_s <= 0:
            errors.append(f"run_deadline_s must be positive, got {self.run_deadline_s}")

        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            errors.append(f"log_level must be a logging level name, got {self.log_level}")

        if errors:
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "HarvestConfig":
        """
        Build configuration from the environment.

        Args:
            env_path: Path to .env file (default: configs/.env)

        Returns:
            Validated HarvestConfig

        Raises:
            ConfigurationError: If a variable is malformed or out of range

        Example:
            >>> config = HarvestConfig.from_env()
            >>> config.scroll_interval_ms
            2000
        """
        load_dotenv(dotenv_path=env_path or DEFAULT_ENV_PATH, override=True)
        defaults = cls()

        deadline = _env_optional_float("RUN_DEADLINE_S")

        return cls(
            headless=_env_bool("HEADLESS", defaults.headless),
            evasion_enabled=_env_bool("EVASION_ENABLED", defaults.evasion_enabled),
            user_agent=_env_optional_str("USER_AGENT") or defaults.user_agent,
            nav_timeout_ms=_env_int("NAV_TIMEOUT_MS", defaults.nav_timeout_ms),
            challenge_timeout_ms=_env_int("CHALLENGE_TIMEOUT_MS", defaults.challenge_timeout_ms),
            clearance_timeout_ms=_env_int("CLEARANCE_TIMEOUT_MS", defaults.clearance_timeout_ms),
            ready_timeout_ms=_env_int("READY_TIMEOUT_MS", defaults.ready_timeout_ms),
            scroll_interval_ms=_env_int("SCROLL_INTERVAL_MS", defaults.scroll_interval_ms),
            detail_timeout_ms=_env_int("DETAIL_TIMEOUT_MS", defaults.detail_timeout_ms),
            detail_ready_timeout_ms=_env_int("DETAIL_READY_TIMEOUT_MS", defaults.detail_ready_timeout_ms),
            detail_delay_ms=_env_int("DETAIL_DELAY_MS", defaults.detail_delay_ms),
            enhancement_cap=_env_optional_int("ENHANCEMENT_CAP", defaults.enhancement_cap),
            sort_key=_env_optional_str("SORT_KEY"),
            dedupe=_env_bool("DEDUPE", defaults.dedupe),
            persist_partial=_env_bool("PERSIST_PARTIAL", defaults.persist_partial),
            run_deadline_s=deadline,
            site=_env_optional_str("SITE"),
            search_query=_env_optional_str("SEARCH_QUERY"),
            export_csv=_env_bool("EXPORT_CSV", defaults.export_csv),
            out_dir=Path(os.getenv("OUT_DIR", str(defaults.out_dir))),
            log_dir=Path(os.getenv("LOG_DIR", str(defaults.log_dir))),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        )

    def with_overrides(self, **overrides) -> "HarvestConfig":
        """
        Return a copy with the given fields replaced.

        Keys whose value is None are ignored so optional CLI flags can be
        passed straight through.
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def __repr__(self) -> str:
        """Return a short string representation of the config."""
        return (
            f"HarvestConfig(\n"
            f"  headless={self.headless},\n"
            f"  evasion_enabled={self.evasion_enabled},\n"
            f"  challenge_timeout_ms={self.challenge_timeout_ms},\n"
            f"  scroll_interval_ms={self.scroll_interval_ms},\n"
            f"  enhancement_cap={self.enhancement_cap if self.enhancement_cap is not None else 'unbounded'},\n"
            f"  sort_key={self.sort_key or 'none'},\n"
            f"  site={self.site or 'auto'}\n"
            f")"
        )
