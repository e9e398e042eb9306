"""Core value types: node roles, resource and event kinds, audit events."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass


class Role(str, enum.Enum):
    MASTER = "master"
    NODE = "node"


class ResourceType(str, enum.Enum):
    CLOUD = "cloud"


class EventType(str, enum.Enum):
    CREATE = "新建"
    UPDATE = "更新"
    DELETE = "删除"
    GET = "查询"


@dataclass
class Event:
    """An audit event."""

    user: str = ""
    client_ip: str = ""
    operator: str = ""
    object: str = ""
    message: str = ""


@dataclass
class CloudSubResources:
    """Aggregated capacity of a cluster."""

    cpu: int = 0
    memory: str = ""
    pods: int = 0

    def marshal(self) -> str:
        """Serialise to compact JSON with keys cpu, memory, pods."""
        return json.dumps(
            {"cpu": self.cpu, "memory": self.memory, "pods": self.pods},
            separators=(",", ":"),
            ensure_ascii=False,
        )

    @classmethod
    def unmarshal(cls, data: str) -> "CloudSubResources":
        """Parse JSON text; keys are matched case-insensitively, missing ones default."""
        obj = json.loads(data)
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise ValueError("cloud sub resources must be a JSON object")
        fields = {key.lower(): value for key, value in obj.items()}
        result = cls()
        if "cpu" in fields:
            result.cpu = _as_int(fields["cpu"], "cpu")
        if "memory" in fields:
            if not isinstance(fields["memory"], str):
                raise ValueError("memory must be a string")
            result.memory = fields["memory"]
        if "pods" in fields:
            result.pods = _as_int(fields["pods"], "pods")
        return result


def _as_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    return value