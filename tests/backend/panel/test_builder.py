"""build_modules()のテスト"""

import pytest

from backend.exceptions import DuplicateSignalError
from backend.panel.builder import build_modules, panel_full_name
from backend.state.state_store import StateStore
from backend.transport.mock_transport import MockTransport
from config.modules_config import load_modules_config
from config.settings import ResolutionMode, Settings
from schemas.modules_config import ModulesConfig
from schemas.oid import Oid
from schemas.outcome import DispatchOutcome


@pytest.fixture
def modules_config(oids_config_path):
    return load_modules_config(oids_config_path)


@pytest.fixture
def settings():
    return Settings(TRANSPORT="mock", RESOLUTION_MODE="panel")


class TestPanelFullName:
    def test_joins_with_dot(self):
        assert panel_full_name("Pedestal", "Trim") == "Pedestal.Trim"


class TestBuildModules:
    """構成からのモジュール生成"""

    def test_modules_and_panels_in_declared_order(self, modules_config, settings):
        modules = build_modules(modules_config, settings)

        assert [m.name for m in modules] == ["Pedestal", "Overhead"]
        assert [p.name for p in modules[0].panels] == [
            "Pedestal.Trim",
            "Pedestal.Takis",
            "Pedestal.Spare",
        ]
        assert [p.name for p in modules[1].panels] == ["Overhead.Lights"]

    def test_panel_attributes(self, modules_config, settings):
        modules = build_modules(modules_config, settings)
        takis = modules[0].get_panel("Pedestal.Takis")

        assert takis.port == "COM4"
        assert takis.signals == (Oid.oid1, Oid.oid2, Oid.Takis)
        assert isinstance(takis.transport, MockTransport)

    def test_disabled_panel_has_no_transport(self, modules_config, settings):
        """無効なパネルは登録されるがトランスポートを持たないか"""
        modules = build_modules(modules_config, settings)
        spare = modules[0].get_panel("Pedestal.Spare")

        assert spare.enabled is False
        assert spare.transport is None
        assert spare.on_data_received(spare.name, "oidB1 I 1") is (
            DispatchOutcome.PANEL_DISABLED
        )

    def test_each_panel_gets_own_transport(self, modules_config, settings):
        created = []

        def factory(s):
            transport = MockTransport()
            created.append(transport)
            return transport

        build_modules(modules_config, settings, transport_factory=factory)

        # 有効なパネル3枚分
        assert len(created) == 3
        assert len({id(t) for t in created}) == 3

    def test_shared_state_store(self, modules_config, settings):
        """全パネルが1つのステートストアを共有するか"""
        store = StateStore()
        modules = build_modules(modules_config, settings, state_store=store)

        trim = modules[0].get_panel("Pedestal.Trim")
        lights = modules[1].get_panel("Overhead.Lights")
        trim.on_data_received(trim.name, "OverheadBrightForOledStep I 100")
        lights.on_data_received(lights.name, "oidA1 B true")

        assert store.get_int(Oid.OverheadBrightForOledStep) == 100
        assert store.get_bool(Oid.oidA1) is True

    def test_module_resolution_mode(self, modules_config):
        settings = Settings(TRANSPORT="mock", RESOLUTION_MODE="module")
        modules = build_modules(modules_config, settings)

        assert modules[0].resolution is ResolutionMode.MODULE
        trim = modules[0].get_panel("Pedestal.Trim")
        assert trim.on_data_received(trim.name, "Takis B false") is (
            DispatchOutcome.APPLIED
        )

    def test_overlapping_signals_fail_build(self, settings):
        config = ModulesConfig.model_validate(
            {
                "Modules": {
                    "M": {
                        "A": {"Oids": ["oid1"], "Port": "COM1"},
                        "B": {"Oids": ["oid1"], "Port": "COM2"},
                    }
                }
            }
        )

        with pytest.raises(DuplicateSignalError):
            build_modules(config, settings)
