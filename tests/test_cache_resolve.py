import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.cache.cache_keys import resolve_key

client = TestClient(app)


class FakeCache:
    def __init__(self):
        self.kv = {}
        self.gets = 0

    def get_json(self, k):
        self.gets += 1
        v = self.kv.get(k)
        return type("R", (), {"hit": v is not None, "value": v})

    def set_json(self, k, v, ttl):
        self.kv[k] = v


def body() -> dict:
    return {
        "result": {
            "documents": [
                {
                    "id": "1",
                    "entities": [
                        {"text": "aspirin", "category": "MedicationName", "confidenceScore": 0.9, "offset": 0, "length": 7},
                        {"text": "headache", "category": "SymptomOrSign", "confidenceScore": 0.8, "offset": 12, "length": 8},
                    ],
                    "relations": [
                        {
                            "relationType": "TreatsCondition",
                            "source": "#/results/documents/0/entities/0",
                            "target": "#/results/documents/0/entities/1",
                        }
                    ],
                }
            ],
            "errors": [],
            "modelVersion": "2021-05-15",
        }
    }


@pytest.fixture()
def fake_cache():
    """
    Installs a FakeCache on app.state and removes it after execution,
    also when the test fails.
    """
    cache = FakeCache()
    client.app.state.cache = cache
    yield cache
    client.app.state.cache = None


def test_resolve_cache_hit(fake_cache, monkeypatch):
    cache = fake_cache

    import app.api.routes.healthcare as hc_route

    r1 = client.post("/healthcare/resolve", json=body())
    assert r1.status_code == 200, r1.text
    assert len(cache.kv) == 1

    def boom(*args, **kwargs):
        raise AssertionError("resolver must not run on cache hit")

    monkeypatch.setattr(hc_route, "convert_to_healthcare_result_collection", boom)

    r2 = client.post("/healthcare/resolve", json=body())
    assert r2.status_code == 200, r2.text
    assert r2.json() == r1.json()



def test_resolve_key_ignores_key_order():
    a = {"x": 1, "y": [1, 2]}
    b = {"y": [1, 2], "x": 1}
    assert resolve_key(a) == resolve_key(b)
    assert resolve_key(a) != resolve_key({"x": 2, "y": [1, 2]})
