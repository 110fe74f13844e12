from __future__ import annotations

import importlib
from collections.abc import Mapping
from importlib import resources

from datalayer.config.schema import (
    DatalayerSettings,
    DeliverySettings,
    TestModeSettings,
    validate_settings,
)

_ROOT_KEYS = {"meta_prefix", "test_mode", "delivery"}
_TEST_MODE_KEYS = {"cookie_name", "query_param", "cookie_path", "cookie_max_age_s"}
_DELIVERY_KEYS = {"handler_errors"}


def load_default_settings() -> DatalayerSettings:
    payload = _load_default_payload()
    return parse_settings(payload)


def parse_settings(payload: Mapping[str, object]) -> DatalayerSettings:
    settings = _parse_settings(payload)
    validate_settings(settings)
    return settings


def _load_default_payload() -> Mapping[str, object]:
    text = (
        resources.files("datalayer.config")
        .joinpath("default.yaml")
        .read_text(encoding="utf-8")
    )
    yaml = importlib.import_module("yaml")
    data = yaml.safe_load(text)
    if not isinstance(data, Mapping):
        raise ValueError("datalayer default config must be a mapping")
    return data


def _parse_settings(payload: Mapping[str, object]) -> DatalayerSettings:
    _reject_unknown(payload, _ROOT_KEYS, "datalayer config")
    defaults = DatalayerSettings()
    meta_prefix = payload.get("meta_prefix", defaults.meta_prefix)
    if not isinstance(meta_prefix, str):
        raise ValueError("meta_prefix must be a string")
    return DatalayerSettings(
        meta_prefix=meta_prefix,
        test_mode=_parse_test_mode(payload.get("test_mode")),
        delivery=_parse_delivery(payload.get("delivery")),
    )


def _parse_test_mode(data: object) -> TestModeSettings:
    if data is None:
        return TestModeSettings()
    if not isinstance(data, Mapping):
        raise ValueError("test_mode must be a mapping")
    _reject_unknown(data, _TEST_MODE_KEYS, "test_mode")
    defaults = TestModeSettings()
    cookie_name = data.get("cookie_name", defaults.cookie_name)
    query_param = data.get("query_param", defaults.query_param)
    cookie_path = data.get("cookie_path", defaults.cookie_path)
    cookie_max_age_s = data.get("cookie_max_age_s", defaults.cookie_max_age_s)
    if not isinstance(cookie_name, str):
        raise ValueError("test_mode.cookie_name must be a string")
    if not isinstance(query_param, str):
        raise ValueError("test_mode.query_param must be a string")
    if not isinstance(cookie_path, str):
        raise ValueError("test_mode.cookie_path must be a string")
    if isinstance(cookie_max_age_s, bool) or not isinstance(cookie_max_age_s, int):
        raise ValueError("test_mode.cookie_max_age_s must be an int")
    return TestModeSettings(
        cookie_name=cookie_name,
        query_param=query_param,
        cookie_path=cookie_path,
        cookie_max_age_s=cookie_max_age_s,
    )


def _parse_delivery(data: object) -> DeliverySettings:
    if data is None:
        return DeliverySettings()
    if not isinstance(data, Mapping):
        raise ValueError("delivery must be a mapping")
    _reject_unknown(data, _DELIVERY_KEYS, "delivery")
    handler_errors = data.get("handler_errors", DeliverySettings().handler_errors)
    if not isinstance(handler_errors, str):
        raise ValueError("delivery.handler_errors must be a string")
    return DeliverySettings(handler_errors=handler_errors)


def _reject_unknown(payload: Mapping[str, object], allowed: set[str], label: str) -> None:
    unknown = set(payload.keys()) - allowed
    if unknown:
        unknown_list = ", ".join(sorted(str(item) for item in unknown))
        raise ValueError(f"unknown {label} keys: {unknown_list}")
