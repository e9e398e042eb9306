import threading

from pixiu.cache import Cluster, ClustersStore


def test_set_and_get():
    s = ClustersStore()
    c = Cluster(client_set="cs", kube_config="kc")
    s.set("one", c)
    assert s.get("one") is c


def test_get_missing_returns_none():
    assert ClustersStore().get("missing") is None


def test_delete_and_delete_missing():
    s = ClustersStore()
    s.set("one", Cluster())
    s.delete("one")
    s.delete("one")
    assert s.get("one") is None
    assert s.list() == {}


def test_list_is_snapshot():
    s = ClustersStore()
    a, b = Cluster(client_set=1), Cluster(client_set=2)
    s.set("a", a)
    s.set("b", b)
    snap = s.list()
    assert snap == {"a": a, "b": b}
    snap.pop("a")
    assert s.get("a") is a


def test_clear():
    s = ClustersStore()
    s.set("a", Cluster())
    s.clear()
    assert s.list() == {}


def test_concurrent_sets():
    s = ClustersStore()

    def worker(n):
        for i in range(100):
            s.set(f"{n}-{i}", Cluster(client_set=i))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(s.list()) == 400