import importlib
import logging

from family_budget import config


def test_configure_logging_replaces_handler():
    logger = config.configure_logging('debug')
    config.configure_logging('info')

    assert logger.name == 'family_budget'
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_budget_file_env_override(monkeypatch, tmp_path):
    target = tmp_path / 'custom.json'
    monkeypatch.setenv('FAMILY_BUDGET_FILE', str(target))
    try:
        reloaded = importlib.reload(config)
        assert reloaded.BUDGET_FILE == target.resolve()
        assert reloaded.get_budget_file() == str(target.resolve())
    finally:
        monkeypatch.delenv('FAMILY_BUDGET_FILE')
        importlib.reload(config)
