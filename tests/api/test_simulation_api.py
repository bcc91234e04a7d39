"""测试模拟状态相关的 HTTP 端点。"""

from __future__ import annotations

import pytest

MIB = 1024 * 1024


def _health(client):
    r = client.get("/health")
    return r.status_code, r.json()


class TestIndex:
    def test_lists_endpoints_and_current_state(self, client) -> None:
        r = client.get("/")
        assert r.status_code == 200
        payload = r.json()
        assert payload["message"] == "Observability Demo App"
        assert set(payload["endpoints"]) == {
            "/metrics",
            "/health",
            "/stress",
            "/normal",
            "/unhealthy",
            "/set-cpu/:value",
            "/set-memory/:value",
        }
        assert payload["current_state"] == {
            "cpu": 25,
            "memory_mb": 100,
            "healthy": True,
        }

    def test_memory_mb_is_rounded(self, client) -> None:
        client.get("/set-memory/1.5")
        assert client.get("/").json()["current_state"]["memory_mb"] == 2


class TestSetCpu:
    @pytest.mark.parametrize("raw,expected", [("0", 0), ("42.5", 42.5), ("100", 100)])
    def test_valid_value_is_reported_by_health(self, client, raw, expected) -> None:
        r = client.get(f"/set-cpu/{raw}")
        assert r.status_code == 200
        assert r.json() == {"message": "CPU usage updated", "cpu": expected}

        status_code, body = _health(client)
        assert status_code == 200
        assert body["cpu"] == expected

    @pytest.mark.parametrize("raw", ["150", "-1", "abc", "nan", "inf", "100.01"])
    def test_invalid_value_is_rejected_without_mutation(self, client, raw) -> None:
        client.get("/set-cpu/60")

        r = client.get(f"/set-cpu/{raw}")
        assert r.status_code == 400
        assert r.json() == {"error": "CPU value must be between 0 and 100"}

        _, body = _health(client)
        assert body["cpu"] == 60

    def test_negative_zero_is_reported_as_zero(self, client) -> None:
        r = client.get("/set-cpu/-0")
        assert r.status_code == 200
        assert r.text == '{"message":"CPU usage updated","cpu":0}'
        assert '"cpu":0,' in client.get("/health").text

    def test_integral_values_are_serialized_as_integers(self, client) -> None:
        assert isinstance(_health(client)[1]["cpu"], int)
        assert isinstance(client.get("/set-cpu/42.0").json()["cpu"], int)
        assert isinstance(client.get("/set-cpu/42.5").json()["cpu"], float)


class TestSetMemory:
    def test_megabytes_are_stored_as_bytes(self, client) -> None:
        r = client.get("/set-memory/250")
        assert r.status_code == 200
        assert r.json() == {"message": "Memory usage updated", "memory_mb": 250}
        assert isinstance(r.json()["memory_mb"], int)

        _, body = _health(client)
        assert body["memory"] == 250 * MIB

    def test_large_finite_value_is_accepted(self, client) -> None:
        r = client.get("/set-memory/1e6")
        assert r.status_code == 200
        assert _health(client)[1]["memory"] == 10**6 * MIB

    def test_zero_is_accepted(self, client) -> None:
        assert client.get("/set-memory/0").status_code == 200
        assert _health(client)[1]["memory"] == 0

    @pytest.mark.parametrize("raw", ["-5", "lots", "inf", "1e308"])
    def test_invalid_value_is_rejected_without_mutation(self, client, raw) -> None:
        r = client.get(f"/set-memory/{raw}")
        assert r.status_code == 400
        assert r.json() == {"error": "Memory value must be positive"}
        assert _health(client)[1]["memory"] == 100 * MIB


class TestScenarios:
    def test_stress_then_normal(self, client) -> None:
        r = client.get("/stress")
        assert r.status_code == 200
        payload = r.json()
        assert payload["cpu"] == 85
        assert payload["message"] == "High CPU load simulated"
        assert "alert" in payload
        assert _health(client)[1]["cpu"] == 85

        client.get("/set-memory/512")
        r = client.get("/normal")
        assert r.status_code == 200
        assert r.json() == {
            "message": "Reset to normal state",
            "cpu": 25,
            "memory": 100 * MIB,
            "healthy": True,
        }

    def test_unhealthy_then_normal(self, client) -> None:
        r = client.get("/unhealthy")
        assert r.status_code == 200
        assert r.json()["healthy"] is False

        status_code, body = _health(client)
        assert status_code == 503
        assert body == {"status": "unhealthy", "cpu": 25, "memory": 100 * MIB}

        client.get("/normal")
        status_code, body = _health(client)
        assert status_code == 200
        assert body["status"] == "healthy"


class TestRouting:
    def test_unknown_path_returns_404(self, client) -> None:
        assert client.get("/does-not-exist").status_code == 404

    def test_missing_path_value_returns_404(self, client) -> None:
        assert client.get("/set-cpu/").status_code == 404

    def test_other_methods_are_not_allowed(self, client) -> None:
        assert client.post("/stress").status_code == 405
        assert client.get("/health").json()["cpu"] == 25

    def test_metrics_content_type(self, client) -> None:
        r = client.get("/metrics")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/plain")
