"""Request and response types for clouds, users, CI/CD jobs and the web shell."""

from __future__ import annotations

import base64
import enum
import json
from dataclasses import dataclass, field
from typing import Any

from pixiu.apitypes import TimeOption
from pixiu.types import CloudSubResources

_UINT16_MAX = 0xFFFF


class CloudType(enum.IntEnum):
    """Kind of kubernetes cluster: standard (uploaded kubeconfig) or self-built."""

    STANDARD = 1
    BUILD = 2


@dataclass
class Git:
    git_url: str = ""
    branch: str = ""
    credentials_id: str = ""
    script_path: str = ""


@dataclass
class Cicd:
    name: str = ""
    old_name: str = ""
    new_name: str = ""
    view_name: str = ""
    version: str = ""
    type: str = ""
    git: Git = field(default_factory=Git)


@dataclass
class User:
    id: int = 0
    resource_version: int = 0
    name: str = ""
    password: str = ""
    status: int = 0
    role: str = ""
    email: str = ""
    description: str = ""
    time_option: TimeOption = field(default_factory=TimeOption)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping; time fields appear only when set."""
        data: dict[str, Any] = {
            "id": self.id,
            "resource_version": self.resource_version,
            "name": self.name,
            "password": self.password,
            "status": self.status,
            "role": self.role,
            "email": self.email,
            "description": self.description,
        }
        data.update(self.time_option.to_dict())
        return data


@dataclass
class Password:
    user_id: int = 0
    origin_password: str = ""
    password: str = ""
    confirm_password: str = ""


@dataclass
class Cloud:
    """A cloud as presented by the API."""

    id: int = 0
    resource_version: int = 0
    name: str = ""
    alias_name: str = ""
    status: int = 0
    cloud_type: int = 0
    kube_version: str = ""
    raw_data: bytes = b""
    node_number: int = 0
    resources: CloudSubResources = field(default_factory=CloudSubResources)
    description: str = ""
    time_option: TimeOption = field(default_factory=TimeOption)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping; raw_data (base64) and time fields appear only when set."""
        data: dict[str, Any] = {
            "id": self.id,
            "resource_version": self.resource_version,
            "name": self.name,
            "alias_name": self.alias_name,
            "status": self.status,
            "cloud_type": int(self.cloud_type),
            "kube_version": self.kube_version,
        }
        if self.raw_data:
            data["raw_data"] = base64.b64encode(bytes(self.raw_data)).decode("ascii")
        data["node_number"] = self.node_number
        data["resources"] = {
            "cpu": self.resources.cpu,
            "memory": self.resources.memory,
            "pods": self.resources.pods,
        }
        data["description"] = self.description
        data.update(self.time_option.to_dict())
        return data


@dataclass
class LoadCloud:
    """A running cluster added by uploading its kubeconfig."""

    name: str = ""
    alias_name: str = ""
    cloud_type: int = 0
    raw_data: bytes = b""


@dataclass
class NodeSpec:
    host_name: str = ""
    address: str = ""
    user: str = ""
    password: str = ""


@dataclass
class KubernetesSpec:
    api_server: str = ""
    version: str = ""
    runtime: str = ""
    cni: str = ""
    service_cidr: str = ""
    pod_cidr: str = ""
    proxy_mode: str = ""
    masters: list[NodeSpec] = field(default_factory=list)
    nodes: list[NodeSpec] = field(default_factory=list)


@dataclass
class BuildCloud:
    """A self-built cluster and everything needed to deploy it."""

    name: str = ""
    alias_name: str = ""
    cloud_type: int = 0
    immediate: bool = False
    region: str = ""
    kubernetes: KubernetesSpec | None = None
    create_namespace: bool = False
    description: str = ""


@dataclass
class Node:
    name: str = ""
    status: str = ""
    roles: str = ""
    create_at: str = ""
    version: str = ""
    internal_ip: str = ""
    os_image: str = ""
    kernel_version: str = ""
    container_runtime: str = ""


@dataclass
class KubeConfigOptions:
    id: int = 0
    cloud_name: str = ""
    service_account: str = ""
    cluster_role: str = ""
    config: str = ""
    expiration_timestamp: str = ""


def _escape_html(text: str) -> str:
    return (
        text.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


@dataclass
class TerminalMessage:
    """One message between a browser terminal and a container shell."""

    operation: str = ""
    data: str = ""
    rows: int = 0
    cols: int = 0

    def to_json(self) -> str:
        """Compact JSON with HTML-sensitive characters escaped."""
        text = json.dumps(
            {"operation": self.operation, "data": self.data, "rows": self.rows, "cols": self.cols},
            separators=(",", ":"),
            ensure_ascii=False,
        )
        return _escape_html(text)

    @classmethod
    def from_json(cls, data: str | bytes) -> "TerminalMessage":
        """Parse a message; keys match case-insensitively and missing ones default."""
        obj = json.loads(data)
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise ValueError("terminal message must be a JSON object")
        fields = {key.lower(): value for key, value in obj.items()}
        message = cls()
        for name in ("operation", "data"):
            value = fields.get(name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"{name} must be a string")
            setattr(message, name, value)
        for name in ("rows", "cols"):
            value = fields.get(name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer")
            if not 0 <= value <= _UINT16_MAX:
                raise ValueError(f"{name} out of range: {value}")
            setattr(message, name, value)
        return message