import pytest

from gentlytold.adapters.fs.filestore import FileSystemStore


@pytest.fixture
def store(tmp_path):
    return FileSystemStore(str(tmp_path / "photos"))


def test_put_get_keeps_content_type(store):
    key = store.put("jane-doe-1", b"\x89PNG", "image/png")

    blob = store.get(key)

    assert key == "jane-doe-1"
    assert blob.data == b"\x89PNG"
    assert blob.content_type == "image/png"


def test_missing_sidecar_defaults_content_type(store):
    store.put("jane-doe-1", b"bytes", "image/png")
    (store.base_path / "jane-doe-1.meta.json").unlink()

    assert store.get("jane-doe-1").content_type == "application/octet-stream"


def test_get_missing_raises(store):
    with pytest.raises(FileNotFoundError):
        store.get("jane-doe-missing")


def test_delete_removes_blob_and_sidecar(store):
    store.put("jane-doe-1", b"bytes", "image/jpeg")

    store.delete("jane-doe-1")
    store.delete("jane-doe-1")

    assert list(store.base_path.iterdir()) == []


@pytest.mark.parametrize("key", ["../outside", "a/../../outside", "", "."])
def test_traversal_rejected(store, key):
    with pytest.raises(ValueError):
        store.put(key, b"x", "image/jpeg")


def test_sibling_directory_prefix_rejected(store):
    with pytest.raises(ValueError):
        store.get("../photos-evil/x")
