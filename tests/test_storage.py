import pytest
from pathlib import Path
from passfile.lib.errors import StorageError
from passfile.lib.storage import StoreFile
from passfile.lib.version import v0_4
from test_accessors import bank

def test_create_and_load(tmp_path: Path):
    sf = StoreFile(tmp_path / 'store.yml')
    assert not sf.exists()
    created = sf.create('pw')
    assert sf.exists() and not created.unsaved()
    store, warning = sf.load()
    assert isinstance(store, v0_4.Store) and warning is None
    store.set_key('pw')

def test_create_twice(tmp_path: Path):
    sf = StoreFile(tmp_path / 'store.yml'); sf.create('pw')
    with pytest.raises(StorageError):
        sf.create('pw')
    sf.create('pw2', force=True)
    sf.load()[0].set_key('pw2')

def test_save_marks_saved(tmp_path: Path):
    sf = StoreFile(tmp_path / 'store.yml')
    s = bank()
    assert s.unsaved()
    sf.save(s)
    assert not s.unsaved()
    assert sf.read() == s.write()
    assert not (tmp_path / 'store.yml.tmp').exists()

def test_failed_write_keeps_unsaved(tmp_path: Path):
    sf = StoreFile(tmp_path / 'missing' / 'store.yml')
    s = bank()
    with pytest.raises(StorageError):
        sf.save(s)
    assert s.unsaved()

def test_read_missing(tmp_path: Path):
    with pytest.raises(StorageError):
        StoreFile(tmp_path / 'nope.yml').read()

def test_env_path(monkeypatch, tmp_path: Path):
    monkeypatch.setenv('PASSFILE_PATH', str(tmp_path / 'env.yml'))
    assert StoreFile().path == tmp_path / 'env.yml'
