from datalayer.config.loader import load_default_settings, parse_settings
from datalayer.config.schema import (
    DEFAULT_TEST_COOKIE_MAX_AGE_S,
    DEFAULT_TEST_COOKIE_NAME,
    HANDLER_ERRORS_ISOLATE,
    HANDLER_ERRORS_PROPAGATE,
    DatalayerSettings,
    DeliverySettings,
    TestModeSettings,
    validate_settings,
)

__all__ = [
    "DEFAULT_TEST_COOKIE_MAX_AGE_S",
    "DEFAULT_TEST_COOKIE_NAME",
    "HANDLER_ERRORS_ISOLATE",
    "HANDLER_ERRORS_PROPAGATE",
    "DatalayerSettings",
    "DeliverySettings",
    "TestModeSettings",
    "load_default_settings",
    "parse_settings",
    "validate_settings",
]
