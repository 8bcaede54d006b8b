import pytest

from volc_asr.config import AsrConfig
from volc_asr.engine import facade
from volc_asr.engine.results import MessageKind


def test_stub_mode_returns_stub_engine() -> None:
    factory = facade.build_engine_factory(AsrConfig(engine="stub"))
    engine = factory()
    assert isinstance(engine, facade.StubEngine)
    assert engine.init() == 0


def test_invalid_mode_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported engine mode"):
        facade.build_engine_factory(AsrConfig(engine="does-not-exist"))


def test_import_mode_loads_callable() -> None:
    cfg = AsrConfig(engine="import", factory="volc_asr.engine.facade:StubEngine")
    assert facade.build_engine_factory(cfg) is facade.StubEngine


def test_import_mode_requires_module_and_attribute() -> None:
    with pytest.raises(ValueError, match="package.module:callable"):
        facade.build_engine_factory(AsrConfig(engine="import", factory="nocolon"))
    with pytest.raises(ValueError, match="no attribute"):
        facade.build_engine_factory(
            AsrConfig(engine="import", factory="volc_asr.engine.facade:Missing")
        )


def test_import_mode_missing_module() -> None:
    cfg = AsrConfig(engine="import", factory="definitely_not_installed_sdk:Engine")
    with pytest.raises(RuntimeError, match="not installed"):
        facade.build_engine_factory(cfg)


def test_stub_engine_records_and_emits() -> None:
    received = []
    engine = facade.StubEngine()
    engine.create_instance(lambda kind, payload: received.append((kind, payload)))
    engine.set_param("k", 1)
    engine.rejected.add(facade.Directive.START)
    assert engine.send_directive(facade.Directive.SYNC_STOP) is True
    assert engine.send_directive(facade.Directive.START) is False
    engine.emit(MessageKind.OTHER, "{}")
    assert engine.params == {"k": 1}
    assert received == [(MessageKind.OTHER, b"{}")]
    engine.destroy()
    assert not engine.alive
    with pytest.raises(RuntimeError):
        engine.emit(MessageKind.OTHER)
