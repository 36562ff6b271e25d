"""Serializers for the flat key-value store file.

A serializer turns the store's whole ``{key: record text}`` mapping into
bytes and back. `dump` and `load` must be symmetric.
"""
from __future__ import annotations
import base64
import json
import os
from typing import Dict, Optional, Protocol

import yaml
from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC


class Serializer(Protocol):
    extension: str

    def dump(self, value: Dict[str, str]) -> bytes: ...

    def load(self, data: bytes) -> Dict[str, str]: ...


class JSONSerializer:
    """Plain JSON text. Default format; readable and greppable."""

    extension = ".json"

    def dump(self, value: Dict[str, str]) -> bytes:
        return json.dumps(value, indent=2, sort_keys=True).encode("utf-8")

    def load(self, data: bytes) -> Dict[str, str]:
        return json.loads(data.decode("utf-8"))


class YAMLSerializer:
    extension = ".yml"

    def dump(self, value: Dict[str, str]) -> bytes:
        return yaml.safe_dump(value, default_flow_style=False).encode("utf-8")

    def load(self, data: bytes) -> Dict[str, str]:
        return yaml.safe_load(data.decode("utf-8")) or {}


class EncryptedSerializer:
    """Encrypts the store with Fernet (AES-CBC + HMAC from `cryptography`).

    Provide either `key` (a Fernet key) or `password`. In password mode each
    dump uses a fresh random salt and records the PBKDF2 parameters in the
    frame so `load` can derive the same key again.
    """

    extension = ".enc"

    def __init__(
        self,
        *,
        key: bytes | None = None,
        password: str | None = None,
        iterations: int = 390000,
        base_serializer: Serializer | None = None,
    ) -> None:
        if key is None and password is None:
            raise ValueError("EncryptedSerializer requires either `key` or `password`")
        self._key = key
        self._password = password
        self._iterations = iterations
        self.base_serializer = base_serializer or JSONSerializer()

    @staticmethod
    def _derive_key(password: str, salt: bytes, iterations: int) -> bytes:
        kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=iterations)
        return base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8")))

    def dump(self, value: Dict[str, str]) -> bytes:
        inner = self.base_serializer.dump(value)
        if self._password is not None:
            salt = os.urandom(16)
            token = Fernet(self._derive_key(self._password, salt, self._iterations)).encrypt(inner)
            frame = {
                "v": 1,
                "mode": "password",
                "kdf": "pbkdf2",
                "iterations": self._iterations,
                "salt": base64.urlsafe_b64encode(salt).decode("ascii"),
                "ct": token.decode("ascii"),
            }
        else:
            token = Fernet(self._key).encrypt(inner)
            frame = {"v": 1, "mode": "key", "ct": token.decode("ascii")}
        return json.dumps(frame).encode("utf-8")

    def load(self, data: bytes) -> Dict[str, str]:
        frame = json.loads(data.decode("utf-8"))
        mode = frame.get("mode")
        if mode == "password":
            if self._password is None:
                raise ValueError("serializer was not configured with a password")
            salt = base64.urlsafe_b64decode(frame["salt"].encode("ascii"))
            key = self._derive_key(self._password, salt, frame.get("iterations", self._iterations))
        elif mode == "key":
            if self._key is None:
                raise ValueError("serializer was not configured with a key")
            key = self._key
        else:
            raise ValueError("unknown frame format")
        return self.base_serializer.load(Fernet(key).decrypt(frame["ct"].encode("ascii")))


def get_serializer(name: str = "json", *, password: Optional[str] = None, key: Optional[bytes] = None) -> Serializer:
    """Return a serializer by name: ``json``, ``yaml`` or ``encrypted``."""
    if name == "json":
        return JSONSerializer()
    if name == "yaml":
        return YAMLSerializer()
    if name == "encrypted":
        return EncryptedSerializer(key=key, password=password)
    raise ValueError(f"Unknown serializer: {name!r}")
