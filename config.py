"""
Central configuration for the purchase entry engine.

All paths, thresholds, and presentation settings are defined here.
Override via environment variables or by passing a Config instance directly.

Settings priority (highest wins):
  1. Environment variables
  2. config/purchase_settings.json  (admin-editable, persisted)
  3. Hardcoded defaults in this file
"""
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from models.purchase_order import PaymentMode

logger = logging.getLogger(__name__)

# Project root (directory containing this file)
PROJECT_ROOT = Path(__file__).parent

# Default data locations (relative to project root)
DEFAULT_SUPPLIERS_CSV = PROJECT_ROOT / "data" / "suppliers.csv"
DEFAULT_PRODUCTS_CSV  = PROJECT_ROOT / "data" / "products.csv"
DEFAULT_CONFIG_DIR    = PROJECT_ROOT / "config"

SETTINGS_FILE_NAME = "purchase_settings.json"


@dataclass
class Config:
    # --- Presentation ---
    currency_symbol: str = field(
        default_factory=lambda: os.getenv("CURRENCY_SYMBOL", "₹")
    )
    default_payment_mode: str = field(
        default_factory=lambda: os.getenv("DEFAULT_PAYMENT_MODE", "Cash")
    )
    # Optional Jinja2 template (file name inside config_dir) for the success notice
    notice_template: Optional[str] = field(
        default_factory=lambda: os.getenv("NOTICE_TEMPLATE")
    )

    # --- Submission ---
    simulated_delay_seconds: float = field(
        default_factory=lambda: float(os.getenv("SIMULATED_DELAY", "1.5"))
    )
    # How long a submission may stay outstanding before it is treated as failed.
    # 0 disables the timeout.
    gateway_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("GATEWAY_TIMEOUT", "30"))
    )

    # --- Catalog lookup ---
    suppliers_csv: Path = field(
        default_factory=lambda: Path(os.getenv("SUPPLIERS_CSV", str(DEFAULT_SUPPLIERS_CSV)))
    )
    products_csv: Path = field(
        default_factory=lambda: Path(os.getenv("PRODUCTS_CSV", str(DEFAULT_PRODUCTS_CSV)))
    )
    catalog_fuzzy_threshold: int = 70     # Minimum rapidfuzz score (0-100)
    max_suggestions: int = 5

    config_dir: Path = field(
        default_factory=lambda: Path(os.getenv("CONFIG_DIR", str(DEFAULT_CONFIG_DIR)))
    )

    def __post_init__(self) -> None:
        self._load_settings_file()
        self._check_payment_mode()

    def _load_settings_file(self) -> None:
        """Overlay runtime-tunable settings from purchase_settings.json if present."""
        settings_file = self.config_dir / SETTINGS_FILE_NAME
        if not settings_file.exists():
            return
        _type_map: dict[str, type] = {
            "currency_symbol":          str,
            "default_payment_mode":     str,
            "notice_template":          str,
            "simulated_delay_seconds":  float,
            "gateway_timeout_seconds":  float,
            "catalog_fuzzy_threshold":  int,
            "max_suggestions":          int,
        }
        # Environment variables win over the settings file
        _env_names = {
            "currency_symbol":          "CURRENCY_SYMBOL",
            "default_payment_mode":     "DEFAULT_PAYMENT_MODE",
            "notice_template":          "NOTICE_TEMPLATE",
            "simulated_delay_seconds":  "SIMULATED_DELAY",
            "gateway_timeout_seconds":  "GATEWAY_TIMEOUT",
        }
        try:
            with open(settings_file, encoding="utf-8") as f:
                overrides = {k: v for k, v in json.load(f).items() if not k.startswith("_")}
            for key, val in overrides.items():
                if key not in _type_map or not hasattr(self, key):
                    continue
                env_name = _env_names.get(key)
                if env_name and os.getenv(env_name) is not None:
                    continue
                setattr(self, key, _type_map[key](val))
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Failed to load %s: %s", SETTINGS_FILE_NAME, exc)

    def _check_payment_mode(self) -> None:
        """Fall back to Cash when the configured default is not a known payment mode."""
        valid = [mode.value for mode in PaymentMode]
        if self.default_payment_mode in valid:
            return
        # Accept a case-insensitive match ("cash", "upi")
        for value in valid:
            if str(self.default_payment_mode).strip().lower() == value.lower():
                self.default_payment_mode = value
                return
        logger.warning(
            "Unknown default payment mode %r (expected one of %s); using %s",
            self.default_payment_mode, ", ".join(valid), PaymentMode.CASH.value,
        )
        self.default_payment_mode = PaymentMode.CASH.value

    @property
    def gateway_timeout(self) -> Optional[float]:
        """Timeout for asyncio.wait_for, or None when disabled."""
        return self.gateway_timeout_seconds if self.gateway_timeout_seconds > 0 else None
