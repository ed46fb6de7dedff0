import pytest
from passfile.config import settings

@pytest.fixture(autouse=True)
def cheap_argon2(monkeypatch):
    # Production costs need ~1GB per derivation
    monkeypatch.setattr(settings, 'ARGON2_TIME_COST', 1)
    monkeypatch.setattr(settings, 'ARGON2_MEMORY_COST', 1024)
