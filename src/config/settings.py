# src/config/settings.py

"""Central configuration for the stock_sync job."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""


class Settings:
    """Static constants shared by every component."""

    # --- HTTP ---
    STORE_TIMEOUT: int = 15             # Seconds per store request
    FEED_TIMEOUT: int = 30              # Seconds per feed download
    STORE_PAGE_SIZE: int = 100          # Records per paginated list call

    # --- Feed downloads ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"

    # --- Reconciliation ---
    OFFER_SAFETY_MARGIN: int = 2        # Subtracted from offer feed stock
    IN_STOCK_VALUE: str = "in_stock"
    DEFAULT_MAX_UPDATES: int = 10
    DEFAULT_FALLBACK_QTY: int = 2

    # --- Summary output ---
    SAMPLE_CHANGES: int = 10
    SAMPLE_BUCKET: int = 5

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
    REPORTS_DIR: Path = BASE_DIR / "reports"


def _parse_int(
    environ: Mapping[str, str], name: str, default: int,
) -> int:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(
            f"{name} must be an integer, got {raw!r}"
        ) from exc


def parse_ean_list(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated EAN list, dropping blanks."""
    if not raw:
        return ()
    return tuple(e.strip() for e in raw.split(",") if e.strip())


@dataclass(frozen=True)
class SyncConfig:
    """Run configuration passed explicitly into each component."""

    store_url: str = ""
    api_key: str = ""
    offer_feed_url: str = ""
    shopping_feed_url: str | None = None
    apply_changes: bool = False
    max_updates: int = Settings.DEFAULT_MAX_UPDATES
    fallback_qty: int = Settings.DEFAULT_FALLBACK_QTY
    allowed_eans: tuple[str, ...] = ()
    test_ean: str | None = None

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None,
    ) -> "SyncConfig":
        """Build a config from environment variables (``.env`` included)."""
        env = os.environ if environ is None else environ
        return cls(
            store_url=env.get("PRESTA_URL", "").strip().rstrip("/"),
            api_key=env.get("PRESTA_API_KEY", "").strip(),
            offer_feed_url=env.get("FEED_URL", "").strip(),
            shopping_feed_url=(
                env.get("GOOGLE_FEED_URL", "").strip() or None
            ),
            apply_changes=(
                env.get("APPLY_CHANGES", "").strip().lower() == "true"
            ),
            max_updates=_parse_int(
                env, "MAX_UPDATES", Settings.DEFAULT_MAX_UPDATES
            ),
            fallback_qty=_parse_int(
                env, "GOOGLE_FALLBACK_QTY", Settings.DEFAULT_FALLBACK_QTY
            ),
            allowed_eans=parse_ean_list(env.get("ALLOWED_EANS")),
            test_ean=env.get("TEST_EAN", "").strip() or None,
        )

    @property
    def api_base(self) -> str:
        """Root of the store webservice."""
        return f"{self.store_url}/api"

    def _require(self, fields: dict[str, object]) -> None:
        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise ConfigError(
                "Missing required configuration: " + ", ".join(missing)
            )

    def validate_for_sync(self) -> None:
        """Fail fast unless the store and the offer feed are configured."""
        self._require({
            "PRESTA_URL": self.store_url,
            "PRESTA_API_KEY": self.api_key,
            "FEED_URL": self.offer_feed_url,
        })

    def validate_for_check(self) -> None:
        """The single-EAN check needs every source plus the target EAN."""
        self._require({
            "TEST_EAN": self.test_ean,
            "PRESTA_URL": self.store_url,
            "PRESTA_API_KEY": self.api_key,
            "FEED_URL": self.offer_feed_url,
            "GOOGLE_FEED_URL": self.shopping_feed_url,
        })
