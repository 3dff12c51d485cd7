import os
import unittest
from unittest import mock

from layered_settings import (
    STANDARD_ENVIRONMENTS,
    ConfigProfile,
    Environment,
    UnsupportedEnvironmentError,
    check_environment,
    current_environment,
)


class CurrentEnvironmentTests(unittest.TestCase):
    def test_defaults_to_dev_when_unset(self) -> None:
        self.assertEqual(current_environment(environ={}), "dev")

    def test_reads_process_environment_by_default(self) -> None:
        with mock.patch.dict(os.environ, {"APP_ENVIRONMENT": "staging"}):
            self.assertEqual(current_environment(), "staging")
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(current_environment(), "dev")

    def test_value_is_normalized(self) -> None:
        self.assertEqual(current_environment(environ={"APP_ENVIRONMENT": " Production "}), "production")

    def test_blank_value_falls_back_to_default(self) -> None:
        self.assertEqual(current_environment(environ={"APP_ENVIRONMENT": "  "}), "dev")

    def test_profile_knobs(self) -> None:
        profile = ConfigProfile(environment_variable="MY_ENV", default_environment="LOCAL")
        self.assertEqual(current_environment(profile, environ={"APP_ENVIRONMENT": "production"}), "local")
        self.assertEqual(current_environment(profile, environ={"MY_ENV": "qa"}), "qa")

    def test_logs_detected_environment(self) -> None:
        with self.assertLogs("layered_settings.environment", level="INFO") as captured:
            current_environment(environ={"APP_ENVIRONMENT": "Staging"})
        self.assertEqual(len(captured.output), 1)
        self.assertIn("variable=APP_ENVIRONMENT", captured.output[0])
        self.assertIn("environment=staging", captured.output[0])


class CheckEnvironmentTests(unittest.TestCase):
    def test_any_token_allowed_by_default(self) -> None:
        self.assertEqual(check_environment(ConfigProfile(), "qa"), "qa")

    def test_rejects_tokens_outside_allowed_set(self) -> None:
        profile = ConfigProfile(allowed_environments=STANDARD_ENVIRONMENTS)
        self.assertEqual(check_environment(profile, "staging"), "staging")
        with self.assertRaises(UnsupportedEnvironmentError) as ctx:
            check_environment(profile, "qa")
        self.assertIn("qa is not a supported environment", str(ctx.exception))
        self.assertEqual(ctx.exception.allowed, ("local", "dev", "staging", "production"))

    def test_rejects_path_like_names(self) -> None:
        for name in ("../secret", "/etc/app", "a\\b", "..", ".", "dev\x00"):
            with self.subTest(name=name):
                with self.assertRaises(UnsupportedEnvironmentError) as ctx:
                    check_environment(ConfigProfile(), name)
                self.assertEqual(ctx.exception.environment, name)

    def test_dotted_names_are_plain_tokens(self) -> None:
        self.assertEqual(check_environment(ConfigProfile(), "eu.prod"), "eu.prod")

    def test_standard_environments(self) -> None:
        self.assertEqual(Environment.PRODUCTION.as_str(), "production")
        self.assertEqual(STANDARD_ENVIRONMENTS, ("local", "dev", "staging", "production"))


class ConfigProfileTests(unittest.TestCase):
    def test_defaults(self) -> None:
        profile = ConfigProfile()
        self.assertEqual(profile.prefix, "APP")
        self.assertEqual(profile.separator, "__")
        self.assertEqual(profile.configuration_dir, "configuration")
        self.assertEqual(profile.default_environment, "dev")
        self.assertEqual(profile.environment_variable, "APP_ENVIRONMENT")
        self.assertTrue(profile.environment_file_required)

    def test_is_frozen(self) -> None:
        profile = ConfigProfile()
        with self.assertRaises(AttributeError):
            profile.prefix = "OTHER"  # type: ignore[misc]

    def test_rejects_empty_knobs(self) -> None:
        with self.assertRaises(ValueError):
            ConfigProfile(separator="")
        with self.assertRaises(ValueError):
            ConfigProfile(prefix="")
        with self.assertRaises(ValueError):
            ConfigProfile(file_extensions=("yaml",))


if __name__ == "__main__":
    unittest.main()
