import logging

import pytest
import yaml

from modelstore.config import StorageConfig, create_strategy_from_config, load_config
from modelstore.logging_config import configure_logging
from modelstore.storage import KeyValueStorageStrategy, TransactionalStorageStrategy
from modelstore.storage.serializer import EncryptedSerializer


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "none.yml") == StorageConfig()


def test_load_config_values_and_unknown_keys(tmp_path, caplog):
    path = tmp_path / "storage.yml"
    path.write_text(yaml.safe_dump({"backend": "transactional", "db_name": "app", "bogus": 1}), encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        cfg = load_config(path)
    assert cfg.backend == "transactional" and cfg.db_name == "app"
    assert "bogus" in caplog.text


def test_non_mapping_config_rejected(tmp_path):
    path = tmp_path / "storage.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_strategy_from_config(tmp_path):
    kv = create_strategy_from_config(StorageConfig(backend="key_value", data_dir=str(tmp_path),
                                                   serializer="encrypted", password="pw"))
    assert isinstance(kv, KeyValueStorageStrategy)
    assert isinstance(kv.store.serializer, EncryptedSerializer)
    tx = create_strategy_from_config(StorageConfig(backend="transactional", data_dir=str(tmp_path)))
    assert isinstance(tx, TransactionalStorageStrategy)


def test_configure_logging_reads_level(tmp_path):
    path = tmp_path / "storage.yml"
    path.write_text("log_level: debug\n", encoding="utf-8")
    configure_logging(path)
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    configure_logging(tmp_path / "missing.yml")
    assert logging.getLogger().level == logging.WARNING
