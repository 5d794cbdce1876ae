import tempfile
import unittest
from pathlib import Path

from quizcore.config.config import load_config, validate_config
from quizcore.errors import ValidationError


class ConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["storage"]["backend"], "memory")
        self.assertFalse(cfg["quiz"]["lock_completed"])
        self.assertTrue(cfg["quiz"]["validate_answers"])
        self.assertIsNone(cfg["quiz"]["catalog_path"])
        self.assertEqual(cfg["logging"]["level"], "INFO")

    def test_empty_config_gets_defaults(self) -> None:
        cfg = validate_config({})
        self.assertEqual(cfg["storage"]["data_dir"], "./quiz_data")
        self.assertFalse(cfg["logging"]["json"])

    def test_bad_enums_fall_back(self) -> None:
        with self.assertLogs("quizcore.config.config", level="WARNING"):
            cfg = validate_config({"storage": {"backend": "redis"}, "logging": {"level": "loud"}})
        self.assertEqual(cfg["storage"]["backend"], "memory")
        self.assertEqual(cfg["logging"]["level"], "INFO")

    def test_non_bool_flag_falls_back(self) -> None:
        with self.assertLogs("quizcore.config.config", level="WARNING"):
            cfg = validate_config({"quiz": {"lock_completed": "yes please"}})
        self.assertFalse(cfg["quiz"]["lock_completed"])

    def test_missing_files(self) -> None:
        with self.assertRaises(ValidationError):
            load_config("/nonexistent/quiz.yml")
        with self.assertRaises(ValidationError):
            validate_config({"quiz": {"catalog_path": "/nonexistent/questions.yml"}})

    def test_load_user_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.yml"
            path.write_text("quiz:\n  lock_completed: true\nstorage:\n  backend: PARQUET\n", encoding="utf-8")
            cfg = validate_config(load_config(str(path)))
        self.assertTrue(cfg["quiz"]["lock_completed"])
        self.assertEqual(cfg["storage"]["backend"], "parquet")


if __name__ == "__main__":
    unittest.main()
