"""API エンドポイントのテスト"""

import asyncio

from fastapi.testclient import TestClient
import pytest


@pytest.fixture
def client():
    """ライフサイクル込みのテストクライアント

    起動時に構成を読み込み、終了時に全パネルを切断する。
    """
    from api.main import app

    with TestClient(app) as test_client:
        yield test_client


class TestRootEndpoints:
    """ルート/ヘルスチェックのテスト"""

    def test_root(self, client) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/health"

    def test_health_reports_ready(self, client) -> None:
        """起動完了後にreadyがTrueになること"""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["ready"] is True
        assert isinstance(body["pid"], int)


class TestPanelsEndpoint:
    """モジュール/パネルエンドポイントのテスト"""

    def test_get_modules(self, client) -> None:
        response = client.get("/api/modules")

        assert response.status_code == 200
        modules = response.json()
        assert [m["name"] for m in modules] == ["Pedestal", "Overhead"]
        pedestal = modules[0]
        assert [p["name"] for p in pedestal["panels"]] == [
            "Pedestal.Trim",
            "Pedestal.Takis",
            "Pedestal.Spare",
        ]
        assert pedestal["panels"][2]["enabled"] is False

    def test_get_panel(self, client) -> None:
        response = client.get("/api/panels/Pedestal.Takis")

        assert response.status_code == 200
        body = response.json()
        assert body["port"] == "COM4"
        assert body["connected"] is True
        assert body["signals"] == ["oid1", "oid2", "Takis"]
        assert body["last_resolved_signal"] == "Undefined"

    def test_get_unknown_panel_returns_404(self, client) -> None:
        response = client.get("/api/panels/Pedestal.Nothing")
        assert response.status_code == 404

    def test_post_message_applies_value(self, client) -> None:
        """受信行の投入でステートが更新されること"""
        response = client.post(
            "/api/panels/Pedestal.Takis/messages", json={"line": "oid1 F 12.5"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "panel": "Pedestal.Takis",
            "outcome": "applied",
            "succeeded": True,
        }

        state = client.get("/api/state").json()
        assert state["oid1"] == {"type": "F", "value": 12.5}

        panel = client.get("/api/panels/Pedestal.Takis").json()
        assert panel["last_resolved_signal"] == "oid1"
        assert panel["previous_raw_message"] == "oid1 F 12.5"

    def test_post_duplicate_message_is_suppressed(self, client) -> None:
        url = "/api/panels/Overhead.Lights/messages"
        client.post(url, json={"line": "oidA2 I 7"})

        response = client.post(url, json={"line": "oidA2 I 7"})

        assert response.json()["outcome"] == "suppressed"
        assert response.json()["succeeded"] is True

    def test_post_invalid_message_returns_outcome(self, client) -> None:
        """ディスパッチ失敗はHTTPエラーではなく結果として返ること"""
        response = client.post(
            "/api/panels/Pedestal.Takis/messages", json={"line": "Takis B nottrue"}
        )

        assert response.status_code == 200
        assert response.json()["outcome"] == "value_invalid"
        assert response.json()["succeeded"] is False

    def test_post_to_disabled_panel(self, client) -> None:
        response = client.post(
            "/api/panels/Pedestal.Spare/messages", json={"line": "oidB1 I 1"}
        )

        assert response.json()["outcome"] == "panel_disabled"

    def test_post_to_unknown_panel_returns_404(self, client) -> None:
        response = client.post(
            "/api/panels/Nothing/messages", json={"line": "oid1 I 1"}
        )
        assert response.status_code == 404

    def test_post_without_line_returns_422(self, client) -> None:
        response = client.post("/api/panels/Pedestal.Takis/messages", json={})
        assert response.status_code == 422

    def test_get_status(self, client) -> None:
        response = client.get("/api/status")

        assert response.status_code == 200
        body = response.json()
        assert body["ready"] is True
        assert body["module_count"] == 2
        assert body["connected_panels"] == 3

    def test_get_events(self, client) -> None:
        client.post("/api/panels/Pedestal.Trim/messages", json={"line": "oid1 I 1"})

        events = client.get("/api/events").json()

        assert events[-1]["kind"] == "signal_unresolved"
        assert events[-1]["source"] == "Pedestal.Trim"


class TestSystemEndpoint:
    """システムエンドポイントのテスト"""

    def test_shutdown_response_model_has_required_fields(self) -> None:
        """ShutdownResponseが必要なフィールドを持つこと"""
        from api.routes.system import ShutdownResponse

        fields = ShutdownResponse.model_fields
        required_fields = ["status", "message"]
        for field in required_fields:
            assert field in fields, f"Missing field: {field}"

    def test_reload(self, client) -> None:
        """構成の再読み込みでパネルが作り直されること"""
        client.post(
            "/api/panels/Pedestal.Takis/messages", json={"line": "oid2 I 3"}
        )

        response = client.post("/api/reload")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "module_count": 2,
            "failed_panels": [],
        }
        panel = client.get("/api/panels/Pedestal.Takis").json()
        assert panel["previous_raw_message"] is None

    def test_reload_with_missing_config_returns_500(self, client, monkeypatch) -> None:
        from api.services.module_service import module_service

        monkeypatch.setattr(
            module_service._settings, "MODULES_CONFIG_PATH", "config/missing.json"
        )

        response = client.post("/api/reload")

        assert response.status_code == 500


def _has_running_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class TestBlockingCallsOffEventLoop:
    """シリアル書き込みやポート開閉がイベントループ外で実行されること"""

    def test_post_message_runs_in_threadpool(self, client, monkeypatch) -> None:
        from api.services.module_service import module_service

        seen: list[bool] = []
        original = module_service.submit

        def submit(name, line):
            seen.append(_has_running_loop())
            return original(name, line)

        monkeypatch.setattr(module_service, "submit", submit)

        response = client.post(
            "/api/panels/Pedestal.Takis/messages", json={"line": "oid1 F 1.5"}
        )

        assert response.status_code == 200
        assert seen == [False]

    def test_reload_runs_in_threadpool(self, client, monkeypatch) -> None:
        from api.services.module_service import module_service

        seen: list[bool] = []
        original = module_service.initialize

        def initialize():
            seen.append(_has_running_loop())
            return original()

        monkeypatch.setattr(module_service, "initialize", initialize)

        response = client.post("/api/reload")

        assert response.status_code == 200
        assert seen == [False]

    def test_shutdown_disconnects_in_threadpool(self, monkeypatch, client) -> None:
        from api.routes import system
        from api.services.module_service import module_service

        seen: list[bool] = []
        monkeypatch.setattr(
            module_service, "shutdown", lambda: seen.append(_has_running_loop())
        )
        # プロセスへのシグナル送信は行わない (クライアント終了まで差し替えたまま)
        monkeypatch.setattr(system.os, "kill", lambda pid, sig: None)

        response = client.post("/api/shutdown")

        assert response.status_code == 200
        assert response.json()["status"] == "shutting_down"
        assert seen == [False]
