import pytest
from cryptography.fernet import Fernet

from modelstore.storage.serializer import (
    EncryptedSerializer,
    JSONSerializer,
    YAMLSerializer,
    get_serializer,
)

ITEMS = {"users/u1": '{"id": "u1", "name": "John Doe"}'}


@pytest.mark.parametrize("name,cls", [("json", JSONSerializer), ("yaml", YAMLSerializer)])
def test_get_serializer_plain(name, cls):
    s = get_serializer(name)
    assert isinstance(s, cls)
    assert s.load(s.dump(ITEMS)) == ITEMS


def test_yaml_empty_document_loads_empty_map():
    assert YAMLSerializer().load(b"") == {}


def test_encrypted_password_mode():
    s = get_serializer("encrypted", password="pwtest")
    blob = s.dump(ITEMS)
    assert b"John Doe" not in blob
    assert s.load(blob) == ITEMS
    # fresh salt per dump
    assert s.dump(ITEMS) != blob


def test_encrypted_key_mode():
    key = Fernet.generate_key()
    s = EncryptedSerializer(key=key)
    assert EncryptedSerializer(key=key).load(s.dump(ITEMS)) == ITEMS


def test_encrypted_mode_mismatch():
    blob = EncryptedSerializer(password="pw").dump(ITEMS)
    with pytest.raises(ValueError):
        EncryptedSerializer(key=Fernet.generate_key()).load(blob)


def test_encrypted_requires_secret():
    with pytest.raises(ValueError):
        EncryptedSerializer()


def test_unknown_serializer():
    with pytest.raises(ValueError):
        get_serializer("pickle")
