from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import parse_qs

from datalayer.config import TestModeSettings


class CookieStore(Protocol):
    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str, options: Mapping[str, object]) -> None: ...

    def remove(self, name: str, options: Mapping[str, object]) -> None: ...


@dataclass
class InMemoryCookieStore:
    cookies: dict[str, str]
    options: dict[str, dict[str, object]]

    def __init__(self, cookies: Mapping[str, str] | None = None) -> None:
        self.cookies = dict(cookies or {})
        self.options = {}

    def get(self, name: str) -> str | None:
        return self.cookies.get(name)

    def set(self, name: str, value: str, options: Mapping[str, object]) -> None:
        self.cookies[name] = value
        self.options[name] = dict(options)

    def remove(self, name: str, options: Mapping[str, object]) -> None:
        self.cookies.pop(name, None)
        self.options.pop(name, None)


def resolve_test_mode(
    cookies: CookieStore,
    query_string: str,
    *,
    settings: TestModeSettings | None = None,
) -> bool:
    """Decide whether test mode is active and persist the decision in a cookie."""
    settings = settings or TestModeSettings()
    requested = _requested_values(query_string, settings.query_param)
    if cookies.get(settings.cookie_name):
        if "0" in requested:
            cookies.remove(settings.cookie_name, {"path": settings.cookie_path})
            return False
        return True
    if "1" in requested:
        cookies.set(
            settings.cookie_name,
            "1",
            {"path": settings.cookie_path, "max_age": settings.cookie_max_age_s},
        )
        return True
    return False


def _requested_values(query_string: str, param: str) -> list[str]:
    parsed = parse_qs(query_string.lstrip("?"), keep_blank_values=True)
    return parsed.get(param, [])
