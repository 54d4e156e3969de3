import importlib
import pytest
from fastapi.testclient import TestClient

from notekeeper.storage.records_store import RecordStore


class FakeClock:
    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1) -> None:
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(tmp_path, clock):
    return RecordStore(tmp_path, clock=clock)


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("JWT_SECRET", "dev-secret-for-tests")
    monkeypatch.setenv("ALLOW_USER_ID_HEADER", "1")

    # reload modules so that the routers pick up the new data dir
    import notekeeper.api.auth
    import notekeeper.api.notes
    import notekeeper.main
    importlib.reload(notekeeper.api.auth)
    importlib.reload(notekeeper.api.notes)
    importlib.reload(notekeeper.main)

    return TestClient(notekeeper.main.app)
