# -*- coding: utf-8 -*-
"""
Test del almacén de colecciones JSON (CollectionStore)
"""
import json
import os

import pytest

from rifa_boletas.errors import StorageError
from rifa_boletas.repositories import CollectionStore


@pytest.fixture
def store(tmp_path):
    with CollectionStore(str(tmp_path / 'data')) as s:
        yield s


def test_load_creates_missing_file_with_empty_list(store):
    assert store.load('tickets') == []
    with open(store.path_for('tickets'), encoding='utf-8') as f:
        assert json.load(f) == []


def test_save_persists_to_disk(store):
    store.save('tickets', [{'number': '0001'}])
    store.clear_cache()
    assert store.load('tickets') == [{'number': '0001'}]


def test_load_returns_a_copy(store):
    store.save('tickets', [{'number': '0001'}])
    records = store.load('tickets')
    records.append({'number': '0002'})
    assert len(store.load('tickets')) == 1


def test_corrupt_json_raises_storage_error(store):
    with open(store.path_for('customers'), 'w', encoding='utf-8') as f:
        f.write('{not json')
    with pytest.raises(StorageError):
        store.load('customers')


def test_non_list_collection_raises_storage_error(store):
    with open(store.path_for('customers'), 'w', encoding='utf-8') as f:
        json.dump({'a': 1}, f)
    with pytest.raises(StorageError):
        store.load('customers')


def test_failed_write_keeps_previous_state(store):
    store.save('tickets', [{'number': '0001'}])
    with pytest.raises(StorageError):
        store.save('tickets', [{'number': object()}])

    assert store.load('tickets') == [{'number': '0001'}]
    assert not os.path.exists(store.path_for('tickets') + '.tmp')
    store.clear_cache()
    assert store.load('tickets') == [{'number': '0001'}]


def test_closed_store_rejects_access(tmp_path):
    store = CollectionStore(str(tmp_path / 'data')).open()
    store.close()
    assert not store.is_open
    with pytest.raises(StorageError):
        store.load('tickets')


def test_documents_use_default_factory(store):
    doc = store.load_document('config', lambda: {'precioBoleta': 1})
    assert doc == {'precioBoleta': 1}
    store.save_document('config', {'precioBoleta': 2})
    store.clear_cache()
    assert store.load_document('config') == {'precioBoleta': 2}
