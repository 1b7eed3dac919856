import logging
import sys

import pytest

from arplogger import runner
from arplogger.utils import config as cfg
from arplogger.utils import logger as log_setup


@pytest.fixture
def root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_file_destination_appends(root_logging, tmp_path):
    path = tmp_path / "arplogger.log"
    path.write_text("earlier line\n")
    handler = log_setup.configure(str(path))
    assert isinstance(handler, logging.FileHandler)
    logging.getLogger("arplogger.test").info("New host discovered")
    handler.flush()
    lines = path.read_text().splitlines()
    assert lines[0] == "earlier line"
    assert lines[1].endswith("INFO [arplogger.test] New host discovered")


def test_dash_logs_to_stderr(root_logging):
    handler = log_setup.configure("-", logging.DEBUG)
    assert type(handler) is logging.StreamHandler
    assert handler.stream is sys.stderr
    assert handler in root_logging.handlers
    assert root_logging.level == logging.DEBUG
    assert log_setup.logs_to_stderr("-")
    assert not log_setup.logs_to_stderr("/var/log/arplogger.log")


def test_unopenable_logfile(root_logging, tmp_path, capsys):
    path = str(tmp_path / "missing-dir" / "arplogger.log")
    with pytest.raises(OSError):
        log_setup.configure(path)

    config = cfg.load(logfile=path, database=str(tmp_path / "a.db"))
    assert runner.run(config) == 1
    assert "cannot open logfile" in capsys.readouterr().err
