"""Single entry point to every data-access object, sharing one session."""

from __future__ import annotations

from sqlalchemy.orm import Session

from pixiu.db.audit import AuditDao
from pixiu.db.cloud import CloudDao, KubeConfigDao
from pixiu.db.menu import MenuDao
from pixiu.db.role import RoleDao
from pixiu.db.user import UserDao


class DaoFactory:
    """Hands out data-access objects bound to the same session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def cloud(self) -> CloudDao:
        return CloudDao(self._session)

    def kube_config(self) -> KubeConfigDao:
        return KubeConfigDao(self._session)

    def user(self) -> UserDao:
        return UserDao(self._session)

    def role(self) -> RoleDao:
        return RoleDao(self._session)

    def menu(self) -> MenuDao:
        return MenuDao(self._session)

    def audit(self) -> AuditDao:
        return AuditDao(self._session)