import logging
import tempfile
import unittest
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from layered_settings.logging import FileLoggingSettings, LoggingSettings, init_logging


class InitLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        root.handlers = []

        def restore() -> None:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)

        self.addCleanup(restore)

    def test_stream_only(self) -> None:
        init_logging(LoggingSettings(level="debug"))
        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)

    def test_file_handler(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logs" / "app.log"
            init_logging(LoggingSettings(file=FileLoggingSettings(path=str(path))))
            root = logging.getLogger()
            file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
            self.assertEqual(len(file_handlers), 1)
            self.assertEqual(file_handlers[0].backupCount, 5)
            self.assertTrue(path.parent.is_dir())
            for handler in file_handlers:
                root.removeHandler(handler)
                handler.close()

    def test_unknown_level(self) -> None:
        with self.assertRaises(ValueError):
            init_logging(LoggingSettings(level="LOUD"))


if __name__ == "__main__":
    unittest.main()
