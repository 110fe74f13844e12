from __future__ import annotations

from dataclasses import dataclass, field

HANDLER_ERRORS_PROPAGATE = "propagate"
HANDLER_ERRORS_ISOLATE = "isolate"

DEFAULT_TEST_COOKIE_NAME = "__odltest__"
DEFAULT_TEST_COOKIE_MAX_AGE_S = 3600 * 24 * 7


@dataclass(frozen=True)
class TestModeSettings:
    __test__ = False

    cookie_name: str = DEFAULT_TEST_COOKIE_NAME
    query_param: str = DEFAULT_TEST_COOKIE_NAME
    cookie_path: str = "/"
    cookie_max_age_s: int = DEFAULT_TEST_COOKIE_MAX_AGE_S


@dataclass(frozen=True)
class DeliverySettings:
    handler_errors: str = HANDLER_ERRORS_PROPAGATE


@dataclass(frozen=True)
class DatalayerSettings:
    meta_prefix: str = "dal:"
    test_mode: TestModeSettings = field(default_factory=TestModeSettings)
    delivery: DeliverySettings = field(default_factory=DeliverySettings)


def validate_settings(settings: DatalayerSettings) -> None:
    if not settings.meta_prefix:
        raise ValueError("meta_prefix must be set")
    _require_text(settings.test_mode.cookie_name, "test_mode.cookie_name")
    _require_text(settings.test_mode.query_param, "test_mode.query_param")
    _require_text(settings.test_mode.cookie_path, "test_mode.cookie_path")
    if settings.test_mode.cookie_max_age_s <= 0:
        raise ValueError("test_mode.cookie_max_age_s must be > 0")
    if settings.delivery.handler_errors not in {HANDLER_ERRORS_PROPAGATE, HANDLER_ERRORS_ISOLATE}:
        raise ValueError("delivery.handler_errors must be 'propagate' or 'isolate'")


def _require_text(value: str, field_name: str) -> None:
    if not value:
        raise ValueError(f"{field_name} must be set")
