from __future__ import annotations

from pathlib import Path

import pytest

from checklints.core.cache import RemoteResourceCache, ResourceKind, fetch_bytes
from checklints.core.exceptions import RemoteFetchError, RemoteIntegrityError
from checklints.core.hashing import hash_bytes
from checklints.core.models import RemoteFile
from helpers import remote as fake_remote

URL = "https://example.com/checklists/base.toml"
BODY = b'[[check]]\ntype = "file"\npath = "README.md"\n'


@pytest.fixture
def store(tmp_path: Path) -> RemoteResourceCache:
    return RemoteResourceCache(tmp_path / "remote-checklists", {})


def test_unpinned_fetch_writes_and_registers(store: RemoteResourceCache, monkeypatch) -> None:
    fake = fake_remote.install(monkeypatch, {URL: BODY})

    path = store.fetch(RemoteFile.parse(URL), ResourceKind.CHECKLIST)

    assert path == store.directory / "checklists" / hash_bytes(BODY)[:16] / "base.toml"
    assert path.read_bytes() == BODY
    assert store.registry == {hash_bytes(BODY): str(path)}
    assert fake.calls == [URL]


def test_pinned_hash_hit_skips_network(store: RemoteResourceCache, monkeypatch) -> None:
    digest = hash_bytes(BODY)
    fake = fake_remote.install(monkeypatch, {URL: BODY})
    reference = RemoteFile.parse(f"{URL}::{digest}")

    first = store.fetch(reference, ResourceKind.CHECKLIST)
    second = store.fetch(reference, ResourceKind.CHECKLIST)

    assert first == second
    assert fake.calls == [URL]


def test_unpinned_reference_is_always_refetched(store: RemoteResourceCache, monkeypatch) -> None:
    fake = fake_remote.install(monkeypatch, {URL: BODY})
    reference = RemoteFile.parse(URL)

    store.fetch(reference, ResourceKind.CHECKLIST)
    store.fetch(reference, ResourceKind.CHECKLIST)

    assert fake.calls == [URL, URL]


def test_hash_mismatch_writes_and_registers_nothing(store: RemoteResourceCache, monkeypatch) -> None:
    fake_remote.install(monkeypatch, {URL: BODY})

    with pytest.raises(RemoteIntegrityError, match="Hash mismatch"):
        store.fetch(RemoteFile.parse(f"{URL}::deadbeef"), ResourceKind.CHECKLIST)

    assert store.registry == {}
    assert not (store.directory / "checklists").exists()


def test_changed_content_keeps_both_versions(store: RemoteResourceCache, monkeypatch) -> None:
    fake = fake_remote.install(monkeypatch, {URL: BODY})
    old = store.fetch(RemoteFile.parse(URL), ResourceKind.CHECKLIST)

    fake.bodies[URL] = BODY + b"# v2\n"
    new = store.fetch(RemoteFile.parse(URL), ResourceKind.CHECKLIST)

    assert old != new
    assert old.read_bytes() == BODY
    assert store.registry == {hash_bytes(BODY): str(old), hash_bytes(BODY + b"# v2\n"): str(new)}

    fake.calls.clear()
    pinned = store.fetch(RemoteFile.parse(f"{URL}::{hash_bytes(BODY)}"), ResourceKind.CHECKLIST)
    assert pinned == old
    assert fake.calls == []


def test_templates_go_to_their_own_directory(store: RemoteResourceCache, monkeypatch) -> None:
    url = "https://example.com/templates/LICENSE.j2"
    fake_remote.install(monkeypatch, {url: b"MIT {{ author }}\n"})

    path = store.fetch(RemoteFile.parse(url), ResourceKind.TEMPLATE)

    assert path.parent.parent == store.directory / "templates"
    assert path.name == "LICENSE.j2"


def test_missing_local_copy_is_refetched(store: RemoteResourceCache, monkeypatch) -> None:
    digest = hash_bytes(BODY)
    fake = fake_remote.install(monkeypatch, {URL: BODY})
    reference = RemoteFile.parse(f"{URL}::{digest}")

    path = store.fetch(reference, ResourceKind.CHECKLIST)
    path.unlink()
    store.fetch(reference, ResourceKind.CHECKLIST)

    assert fake.calls == [URL, URL]
    assert path.is_file()


def test_fetch_errors_are_wrapped(monkeypatch) -> None:
    fake_remote.install(monkeypatch, {})
    with pytest.raises(RemoteFetchError, match="Failed to fetch"):
        fetch_bytes(URL, timeout=1.0)


def test_same_file_name_from_two_hosts_does_not_collide(store: RemoteResourceCache, monkeypatch) -> None:
    url_a = "https://a.example.com/main.toml"
    url_b = "https://b.example.com/main.toml"
    body_a = b'[[check]]\ntype = "file"\npath = "A.md"\n'
    body_b = b'[[check]]\ntype = "file"\npath = "B.md"\n'
    fake_remote.install(monkeypatch, {url_a: body_a, url_b: body_b})

    pinned_a = RemoteFile.parse(f"{url_a}::{hash_bytes(body_a)}")
    path_a = store.fetch(pinned_a, ResourceKind.CHECKLIST)
    path_b = store.fetch(RemoteFile.parse(url_b), ResourceKind.CHECKLIST)

    assert path_a != path_b
    assert path_a.name == path_b.name == "main.toml"
    assert path_a.read_bytes() == body_a
    assert path_b.read_bytes() == body_b
    assert store.lookup(hash_bytes(body_a)) == path_a
