import sys

from scriptengine.config_manager import PathsConfig
from scriptengine.utils.logger import setup_logger


def test_setup_logger_creates_sinks(tmp_path):
    log_dir = tmp_path / "logs"
    log = setup_logger(PathsConfig(log_dir=str(log_dir)), level="DEBUG")
    try:
        log.error("something broke")
        assert (log_dir / "scriptengine.log").exists()
        assert (log_dir / "scriptengine.json.log").exists()
        assert "something broke" in (log_dir / "error.log").read_text()
    finally:
        log.remove()
        log.add(sys.stderr)


def test_setup_logger_uses_configured_name(tmp_path):
    paths = PathsConfig(log_dir=str(tmp_path), log_name="engine", log_rotation="1 MB", log_retention="1 day")
    log = setup_logger(paths)
    try:
        log.info("hello")
        assert (tmp_path / "engine.log").exists()
        assert '"hello"' in (tmp_path / "engine.json.log").read_text()
        assert not (tmp_path / "scriptengine.log").exists()
    finally:
        log.remove()
        log.add(sys.stderr)
