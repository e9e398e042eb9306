"""Data access for clouds, their clusters, nodes and kubeconfigs."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.orm import Session

from pixiu.models import Cloud, Cluster, KubeConfig, Node, RecordNotFoundError


@contextmanager
def _transaction(session: Session) -> Iterator[None]:
    try:
        yield
        session.commit()
    except Exception:
        session.rollback()
        raise


def _paginate(stmt: Select, page: int, page_size: int) -> Select:
    if page_size > 0:
        stmt = stmt.limit(page_size)
    offset = (page - 1) * page_size
    if offset > 0:
        stmt = stmt.offset(offset)
    return stmt


def _versioned_values(resource_version: int, updates: Mapping[str, Any]) -> dict[str, Any]:
    values = dict(updates)
    values["gmt_modified"] = datetime.now()
    values["resource_version"] = resource_version + 1
    return values


class CloudDao:
    """Stores clouds together with their cluster settings and nodes."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, obj: Cloud) -> Cloud:
        now = datetime.now()
        obj.gmt_create = now
        obj.gmt_modified = now
        with _transaction(self._session):
            self._session.add(obj)
        return obj

    def update(self, cid: int, resource_version: int, updates: Mapping[str, Any]) -> None:
        """Apply ``updates`` if the cloud is still at ``resource_version``."""
        values = _versioned_values(resource_version, updates)
        with _transaction(self._session):
            self._session.execute(
                update(Cloud)
                .where(Cloud.id == cid, Cloud.resource_version == resource_version)
                .values(**values)
            )

    def delete(self, cid: int) -> Cloud:
        """Delete the cloud and return it as it was."""
        obj = self.get(cid)
        self._session.expunge(obj)
        with _transaction(self._session):
            self._session.execute(delete(Cloud).where(Cloud.id == cid))
        return obj

    def get(self, cid: int) -> Cloud:
        obj = self._session.scalars(select(Cloud).where(Cloud.id == cid).order_by(Cloud.id)).first()
        if obj is None:
            raise RecordNotFoundError(f"cloud {cid} not found")
        return obj

    def list(self) -> list[Cloud]:
        return list(self._session.scalars(select(Cloud).order_by(Cloud.id)))

    def set_status(self, name: str, status: int) -> None:
        with _transaction(self._session):
            self._session.execute(
                update(Cloud)
                .where(Cloud.name == name)
                .values(status=status, gmt_modified=datetime.now())
            )

    def get_by_name(self, name: str) -> Cloud:
        obj = self._session.scalars(select(Cloud).where(Cloud.name == name).order_by(Cloud.id)).first()
        if obj is None:
            raise RecordNotFoundError(f"cloud {name!r} not found")
        return obj

    def page_list(self, page: int, page_size: int) -> tuple[list[Cloud], int]:
        """Return one page of clouds and the total number of clouds."""
        stmt = _paginate(select(Cloud).order_by(Cloud.id), page, page_size)
        clouds = list(self._session.scalars(stmt))
        return clouds, self.count()

    def count(self) -> int:
        return self._session.scalar(select(func.count()).select_from(Cloud)) or 0

    def create_cluster(self, cluster: Cluster) -> None:
        now = datetime.now()
        cluster.gmt_create = now
        cluster.gmt_modified = now
        with _transaction(self._session):
            self._session.add(cluster)

    def delete_cluster(self, cid: int) -> None:
        with _transaction(self._session):
            self._session.execute(delete(Cluster).where(Cluster.cloud_id == cid))

    def create_nodes(self, nodes: Iterable[Node]) -> None:
        """Store several nodes at once; an empty batch is an error."""
        batch = list(nodes)
        if not batch:
            raise ValueError("empty slice found")
        now = datetime.now()
        for node in batch:
            node.gmt_create = now
            node.gmt_modified = now
        with _transaction(self._session):
            self._session.add_all(batch)

    def delete_nodes(self, cid: int) -> None:
        with _transaction(self._session):
            self._session.execute(delete(Node).where(Node.cloud_id == cid))

    def get_nodes(self, cid: int) -> list[Node]:
        stmt = select(Node).where(Node.cloud_id == cid).order_by(Node.id)
        return list(self._session.scalars(stmt))


class KubeConfigDao:
    """Stores the (encrypted) kubeconfig of each cloud."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, obj: KubeConfig) -> KubeConfig:
        now = datetime.now()
        obj.gmt_create = now
        obj.gmt_modified = now
        with _transaction(self._session):
            self._session.add(obj)
        return obj

    def update(self, kid: int, resource_version: int, updates: Mapping[str, Any]) -> None:
        values = _versioned_values(resource_version, updates)
        with _transaction(self._session):
            self._session.execute(
                update(KubeConfig)
                .where(KubeConfig.id == kid, KubeConfig.resource_version == resource_version)
                .values(**values)
            )

    def delete(self, kid: int) -> None:
        with _transaction(self._session):
            self._session.execute(delete(KubeConfig).where(KubeConfig.id == kid))

    def get(self, kid: int) -> KubeConfig:
        obj = self._session.scalars(
            select(KubeConfig).where(KubeConfig.id == kid).order_by(KubeConfig.id)
        ).first()
        if obj is None:
            raise RecordNotFoundError(f"kubeconfig {kid} not found")
        return obj

    def list(self, cloud_name: str) -> list[KubeConfig]:
        stmt = select(KubeConfig).where(KubeConfig.cloud_name == cloud_name).order_by(KubeConfig.id)
        return list(self._session.scalars(stmt))

    def delete_by_cloud(self, cloud_id: int) -> None:
        with _transaction(self._session):
            self._session.execute(delete(KubeConfig).where(KubeConfig.cloud_id == cloud_id))

    def get_by_cloud(self, cloud_id: int) -> KubeConfig:
        obj = self._session.scalars(
            select(KubeConfig).where(KubeConfig.cloud_id == cloud_id).order_by(KubeConfig.id)
        ).first()
        if obj is None:
            raise RecordNotFoundError(f"kubeconfig of cloud {cloud_id} not found")
        return obj

    def list_by_clouds(self, cloud_ids: Iterable[int]) -> list[KubeConfig]:
        stmt = (
            select(KubeConfig)
            .where(KubeConfig.cloud_id.in_(list(cloud_ids)))
            .order_by(KubeConfig.id)
        )
        return list(self._session.scalars(stmt))