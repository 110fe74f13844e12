from __future__ import annotations

from collections.abc import Mapping

from datalayer.contracts import GlobalData


class ValidationError(ValueError):
    """Base class for missing or malformed required page data."""


class MissingPageDataError(ValidationError):
    """Raised when page.type or page.name is missing."""


class MissingSiteDataError(ValidationError):
    """Raised when site.id is missing."""


class MissingUserDataError(ValidationError):
    """Raised when user data is missing."""


def validate_global_data(data: GlobalData) -> None:
    # page, then site, then user: the first failure masks the rest
    page = data.get("page")
    if not _has_fields(page, ("type", "name")):
        raise MissingPageDataError("Supplied DALPageData is invalid or missing")
    site = data.get("site")
    if not _has_fields(site, ("id",)):
        raise MissingSiteDataError("Supplied DALSiteData is invalid or missing")
    if data.get("user") is None:
        raise MissingUserDataError("Supplied DALUserData is invalid or missing")


def _has_fields(section: object, fields: tuple[str, ...]) -> bool:
    if not isinstance(section, Mapping):
        return False
    return all(section.get(field) for field in fields)
