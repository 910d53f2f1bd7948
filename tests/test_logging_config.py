import logging

from rearrange_toolkit.logging_config import setup_logging


def test_setup_logging_writes_to_configured_directory(config_dir, tmp_path, monkeypatch):
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("REARRANGE_LOG_DIR", str(log_dir))
    monkeypatch.delenv("REARRANGE_DEBUG_MODULES", raising=False)

    setup_logging()
    logging.getLogger("rearrange_toolkit.core.services").info("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello from test" in (log_dir / "app.log").read_text(encoding="utf-8")


def test_debug_override_lowers_named_logger(config_dir, tmp_path, monkeypatch):
    monkeypatch.setenv("REARRANGE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("REARRANGE_DEBUG_MODULES", "rearrange_toolkit.test_probe, ")

    setup_logging()

    probe = logging.getLogger("rearrange_toolkit.test_probe")
    assert probe.level == logging.DEBUG
    assert any(h.level <= logging.DEBUG for h in probe.handlers)


def test_invalid_logging_config_falls_back(config_dir, tmp_path, monkeypatch):
    monkeypatch.setenv("REARRANGE_LOG_DIR", str(tmp_path / "logs"))
    config_dir.mkdir(parents=True)
    (config_dir / "logging.yml").write_text(
        "version: 1\nhandlers:\n  file:\n    class: no.such.Handler\n", encoding="utf-8"
    )

    setup_logging()

    assert any(isinstance(h, logging.StreamHandler) for h in logging.getLogger().handlers)
