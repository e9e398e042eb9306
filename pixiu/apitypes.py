"""Request and response types for the menu, role and common API endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class IdMeta:
    id: int = 0
    resource_version: int = 0


@dataclass
class TimeOption:
    """Creation and modification times as presented by the API."""

    gmt_create: Any = None
    gmt_modified: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the non-empty time fields."""
        return {
            key: value
            for key, value in (("gmt_create", self.gmt_create), ("gmt_modified", self.gmt_modified))
            if value is not None
        }


def _format(moment: datetime) -> str:
    text = moment.strftime("%Y-%m-%d %H:%M:%S")
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    return text


def format_time(gmt_create: datetime, gmt_modified: datetime) -> TimeOption:
    """Format both times; fractional seconds appear only when non-zero."""
    return TimeOption(gmt_create=_format(gmt_create), gmt_modified=_format(gmt_modified))


@dataclass
class MenusReq:
    status: int = 0
    memo: str = ""
    parent_id: int = 0
    url: str = ""
    name: str = ""
    sequence: int = 0
    menu_type: int = 0
    icon: str = ""
    method: str = ""
    code: str = ""


@dataclass
class UpdateMenusReq(MenusReq):
    resource_version: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Column values for an update of a menu row."""
        return {
            "status": self.status,
            "memo": self.memo,
            "parent_id": self.parent_id,
            "url": self.url,
            "name": self.name,
            "sequence": self.sequence,
            "menu_type": self.menu_type,
            "icon": self.icon,
            "method": self.method,
            "code": self.code,
            "resource_version": self.resource_version,
        }


@dataclass
class Menus:
    menu_ids: list[int] = field(default_factory=list)


@dataclass
class Roles:
    role_ids: list[int] = field(default_factory=list)


@dataclass
class RoleReq:
    memo: str = ""
    name: str = ""
    sequence: int = 0
    parent_id: int = 0
    status: int = 0


@dataclass
class UpdateRoleReq(RoleReq):
    resource_version: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Column values for an update of a role row."""
        return {
            "memo": self.memo,
            "name": self.name,
            "sequence": self.sequence,
            "parent_id": self.parent_id,
            "status": self.status,
            "resource_version": self.resource_version,
        }