"""
Тесты для настройки логирования
"""
import logging

import pytest

from messenger.core import logging as messenger_logging
from messenger.core.config import settings

pytestmark = pytest.mark.unit


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_setup_logging_writes_files(tmp_path, monkeypatch, restore_root_logger):
    """Логи пишутся в общий файл и в отдельный файл ошибок"""
    monkeypatch.setattr(settings, "LOG_TO_FILE", True)

    messenger_logging.setup_logging("INFO", log_dir=str(tmp_path))
    logger = messenger_logging.get_logger("test")
    logger.info("информация")
    logger.error("ошибка")
    for handler in logging.getLogger().handlers:
        handler.flush()

    main_log = next(tmp_path.glob("messenger_*.log")).read_text(encoding="utf-8")
    error_log = next(tmp_path.glob("errors_*.log")).read_text(encoding="utf-8")
    assert "информация" in main_log and "ошибка" in main_log
    assert "информация" not in error_log and "ошибка" in error_log


def test_setup_logging_console_only(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.setattr(settings, "LOG_TO_FILE", False)

    messenger_logging.setup_logging("DEBUG", log_dir=str(tmp_path / "logs"))

    assert len(logging.getLogger().handlers) == 1
    assert not (tmp_path / "logs").exists()


def test_setup_logging_invalid_level(restore_root_logger):
    with pytest.raises(ValueError):
        messenger_logging.setup_logging("LOUD")
