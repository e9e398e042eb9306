# pixiu

Building blocks for a Kubernetes cloud management service:

- `pixiu.cache` – a thread-safe registry of connected clusters,
- `pixiu.models` – SQLAlchemy models for clouds, clusters, nodes, kubeconfigs,
  users, roles, menus, role/menu and user/role bindings, policy rules and
  audit events,
- `pixiu.db` – data-access objects over those models, handed out by
  `pixiu.db.factory.DaoFactory`,
- `pixiu.cipher` – AES-CBC encryption of kubeconfig contents stored at rest,
- `pixiu.audit` – an audit service with a periodic clean-up job that keeps
  seven days of events,
- `pixiu.types`, `pixiu.apitypes`, `pixiu.schemas` – value types and the
  request/response shapes of the API (clouds, users, menus, roles, CI/CD job
  settings, web-shell terminal messages),
- `pixiu.log` – loggers configured for stdout, stderr or a rotating file,
- small helpers: `pixiu.lru.LRUCache`, `pixiu.intstr.IntOrString` and
  `pixiu.util` (int64 parsing, directory checks, `DEBUG` detection, cloud name
  generation).

Python 3.10 or later is required; the package depends on `cryptography` and
`SQLAlchemy` 2.0.

## Encrypting kubeconfig data

```python
from pixiu.cipher import encrypt, decrypt

ciphertext = encrypt(b"apiVersion: v1\nkind: Config\n")
assert decrypt(ciphertext) == b"apiVersion: v1\nkind: Config\n"
```

`encrypt` returns base64 text; `decrypt` turns that text back into bytes and
raises `ValueError` for text that is not valid base64 or not whole blocks.

## Storing clouds and their kubeconfigs

```python
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from pixiu.cipher import encrypt
from pixiu.db.factory import DaoFactory
from pixiu.models import Cloud, KubeConfig, create_schema
from pixiu.util import new_cloud_name

engine = create_engine("sqlite://")
create_schema(engine)

with Session(engine) as session:
    factory = DaoFactory(session)

    cloud = factory.cloud().create(
        Cloud(name=new_cloud_name("atm-"), alias_name="staging")
    )
    factory.kube_config().create(
        KubeConfig(
            service_account=cloud.name,
            cluster_role="cloud-admin",
            cloud_name=cloud.name,
            cloud_id=cloud.id,
            config=encrypt(b"apiVersion: v1\n"),
        )
    )

    clouds, total = factory.cloud().page_list(1, 10)
```

`CloudDao` also stores a self-built cloud's cluster settings
(`create_cluster`, `delete_cluster`) and nodes (`create_nodes`, `delete_nodes`,
`get_nodes`). `KubeConfigDao` looks kubeconfigs up by id, cloud name or cloud id.

Updates through `update(id, resource_version, updates)` only touch a row whose
stored version matches, and bump it by one. Lookups of missing rows raise
`pixiu.models.RecordNotFoundError`; the user, role and menu updates raise
`pixiu.models.RecordNotUpdatedError` when no row matched.

## Users, roles and menus

`factory.user()`, `factory.role()` and `factory.menu()` manage the RBAC
tables. Role and menu listings with `page=0` and `limit=0` return every row
as a tree; otherwise the page holds top-level entries with their children
attached. `RoleDao.set_role` replaces a role's menus,
`UserDao.set_user_roles` replaces a user's roles, and
`UserDao.get_buttons_by_user_id` / `get_left_menus_by_user_id` resolve the
enabled menus a user reaches through enabled roles. The tree builders
`pixiu.db.menu.build_menu_tree` and `pixiu.db.role.build_role_tree` work on
any list of models.

## Audit events

```python
import threading

from pixiu.audit import AuditService
from pixiu.types import Event, EventType, ResourceType

audit = AuditService(factory)
audit.create(Event(user="alice", client_ip="127.0.0.1",
                   operator=EventType.CREATE, object=ResourceType.CLOUD,
                   message="created staging"))
recent = audit.list("24h")

stop = threading.Event()
audit.run(stop, interval=3600)   # clean every hour until stop.set()
```

`list` takes a duration such as `"30m"` or `"2h45m"` (parsed by
`pixiu.audit.parse_duration`). `clean()` deletes events older than seven days
and returns the cutoff; `run` calls it from a daemon thread once per interval.

## Cluster registry

```python
from pixiu.cache import Cluster, ClustersStore

store = ClustersStore()
store.set("atm-1a2b3c4d", Cluster(client_set=None, kube_config=None))
found = store.get("atm-1a2b3c4d")     # None when absent
snapshot = store.list()               # a copy of the mapping
```

## Terminal messages

```python
from pixiu.schemas import TerminalMessage

msg = TerminalMessage.from_json('{"operation": "resize", "rows": 40, "cols": 120}')
text = TerminalMessage(operation="stdout", data="ok").to_json()
```

## Logging

```python
from pixiu.log import register, get_logger

register("stdout", "/var/log/pixiu", "warn")
get_logger().warn("cluster %s is unreachable", "atm-1a2b3c4d")
```

The log type is `stdout` (the default), `stderr` or `file`; with `file`,
messages go to `pixiu.log` and `access.log` in the given directory, rotated at
500 MB with three backups kept for seven days. `register` accepts `info`,
`warn` and `error`, and treats anything else as `info`. Until `register` is
called, `get_logger()` and `get_access_logger()` return info-level stdout
loggers.

## Small utilities

```python
from pixiu.lru import LRUCache
from pixiu.intstr import from_int64, from_string

cache = LRUCache(2)
cache.add("a", 1)
cache.add("b", 2)
cache.add("c", 3)          # "a" is evicted
assert "a" not in cache and len(cache) == 2

assert str(from_int64(42)) == "42"
assert from_string("7").to_int() == 7
```

## What the package does not do

It is a library, not a running service. It has no HTTP server or API routes,
no command-line program, and no Kubernetes, Helm or Jenkins client: `Cluster`
holds whatever client and config objects the caller provides, and the CI/CD
and web-shell types only describe data. The `Rule` model stores policy rows,
but nothing here evaluates them.