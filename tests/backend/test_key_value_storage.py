import json

import pytest

from modelstore.errors import MalformedRecordError
from modelstore.storage.key_value_backend import FileKeyValueStore, KeyValueStorageStrategy
from modelstore.storage.serializer import EncryptedSerializer, YAMLSerializer
from tests.helpers import make_user, run


def test_store_set_get_remove(tmp_path):
    s = FileKeyValueStore(tmp_path / "kv" / "store.json")
    assert s.get_item("a") is None
    s.set_item("a", "1")
    assert s.get_item("a") == "1"
    assert list(s.keys()) == ["a"]
    s.remove_item("a")
    assert s.get_item("a") is None
    s.remove_item("a")
    s.set_item("b", "2")
    s.clear()
    assert list(s.keys()) == []


def test_store_is_persisted_and_shared(tmp_path):
    path = tmp_path / "store.json"
    first = FileKeyValueStore(path)
    second = FileKeyValueStore(path)
    first.set_item("k", "v")
    assert second.get_item("k") == "v"
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}
    assert not path.with_suffix(".json.tmp").exists()


def test_strategy_uses_composite_keys(tmp_path):
    store = FileKeyValueStore(tmp_path / "store.json")
    strategy = KeyValueStorageStrategy(store)
    u = make_user()
    assert run(strategy.save("users", "u1", u.serialize())) == {"message": "Obj saved successfully!"}
    assert list(store.keys()) == ["users/u1"]
    assert run(strategy.get("User", "users", "u1")) == u


def test_strategy_crud_and_absence(tmp_path):
    strategy = KeyValueStorageStrategy(file_path=tmp_path / "store.json")
    assert run(strategy.get("User", "users", "u1")) is None
    run(strategy.save("users", "u1", make_user().serialize()))
    run(strategy.update("users", "u1", make_user(name="Jane Doe").serialize()))
    assert run(strategy.get("User", "users", "u1")).name == "Jane Doe"
    deleted = run(strategy.delete("users", "u1"))
    assert deleted == run(strategy.delete("users", "u1"))
    assert run(strategy.get("User", "users", "u1")) is None


def test_strategy_survives_reopen(tmp_path):
    path = tmp_path / "store.json"
    run(KeyValueStorageStrategy(file_path=path).save("users", "u1", make_user().serialize()))
    assert run(KeyValueStorageStrategy(file_path=path).get("User", "users", "u1")).name == "John Doe"


def test_yaml_file_format(tmp_path):
    store = FileKeyValueStore(tmp_path / "store.yml", YAMLSerializer())
    strategy = KeyValueStorageStrategy(store)
    run(strategy.save("users", "u1", make_user().serialize()))
    assert "users/u1" in (tmp_path / "store.yml").read_text(encoding="utf-8")
    assert run(strategy.get("User", "users", "u1")).email == "john@x.com"


def test_malformed_payload_raises(tmp_path):
    strategy = KeyValueStorageStrategy(file_path=tmp_path / "store.json")
    run(strategy.save("users", "bad", "not json"))
    with pytest.raises(MalformedRecordError):
        run(strategy.get("User", "users", "bad"))


@pytest.mark.parametrize("name,content,serializer", [
    ("store.json", "{not json", None),
    ("store.yml", "- a\n- b\n", YAMLSerializer()),
    ("store.yml", "key: [unclosed\n", YAMLSerializer()),
])
def test_corrupted_store_file_is_malformed(tmp_path, name, content, serializer):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    strategy = KeyValueStorageStrategy(FileKeyValueStore(path, serializer))
    with pytest.raises(MalformedRecordError):
        run(strategy.get("User", "users", "u1"))


def test_wrong_password_is_malformed(tmp_path):
    path = tmp_path / "store.enc"
    FileKeyValueStore(path, EncryptedSerializer(password="right")).set_item("users/u1", "{}")
    with pytest.raises(MalformedRecordError):
        FileKeyValueStore(path, EncryptedSerializer(password="wrong")).get_item("users/u1")
