import logging

from chunkwise.utils import chunk_log_level, setup_logging


def test_chunk_log_level():
    assert chunk_log_level(True) == logging.INFO
    assert chunk_log_level(False) == logging.DEBUG


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "logs" / "run.log"
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level
    for handler in previous_handlers:
        root.removeHandler(handler)
    try:
        setup_logging("debug", log_file=str(log_file))
        logging.getLogger("chunkwise.test").debug("hello from test")
        for handler in root.handlers:
            handler.flush()
        assert log_file.exists()
        assert "[DEBUG] chunkwise.test - hello from test" in log_file.read_text()
        assert logging.getLogger("chunkwise").level == logging.DEBUG
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in previous_handlers:
            root.addHandler(handler)
        root.setLevel(previous_level)
        logging.getLogger("chunkwise").setLevel(logging.NOTSET)
