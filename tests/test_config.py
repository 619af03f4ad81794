"""Tests for Config loading and layering."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from branchfmt.config import CONFIG_FILENAME, DEFAULT_FORMATTER_CANDIDATES, Config
from branchfmt.errors import ConfigError


class TestConfigDefaults(unittest.TestCase):
    """Tests for default values."""

    def test_defaults(self):
        config = Config()

        self.assertEqual(config.upstream, "origin/master")
        self.assertEqual(config.protected_branch, "master")
        self.assertEqual(config.extensions, ("c", "h"))
        self.assertEqual(config.style, "file")
        self.assertEqual(config.formatter_candidates, DEFAULT_FORMATTER_CANDIDATES)
        self.assertIsNone(config.clang_format_binary)
        self.assertEqual(config.verbosity, 0)

    def test_versioned_formatters_preferred(self):
        self.assertEqual(DEFAULT_FORMATTER_CANDIDATES[-1], "git-clang-format")
        self.assertTrue(DEFAULT_FORMATTER_CANDIDATES[0].startswith("git-clang-format-"))

    def test_extensions_arg(self):
        self.assertEqual(Config(extensions=("c", "h", "cpp")).extensions_arg, "c,h,cpp")


class TestConfigFromDict(unittest.TestCase):
    """Tests for Config.from_dict."""

    def test_overrides_given_keys_only(self):
        config = Config.from_dict({"upstream": "upstream/main"})

        self.assertEqual(config.upstream, "upstream/main")
        self.assertEqual(config.protected_branch, "master")

    def test_extensions_from_list_strip_dots(self):
        config = Config.from_dict({"extensions": [".c", ".h", "cc"]})

        self.assertEqual(config.extensions, ("c", "h", "cc"))

    def test_extensions_from_comma_string(self):
        config = Config.from_dict({"extensions": "c, h,,cpp"})

        self.assertEqual(config.extensions, ("c", "h", "cpp"))

    def test_unknown_key_rejected(self):
        with self.assertRaises(ConfigError) as ctx:
            Config.from_dict({"upstreem": "origin/main"})

        self.assertIn("upstreem", str(ctx.exception))

    def test_wrong_type_rejected(self):
        with self.assertRaises(ConfigError):
            Config.from_dict({"protected_branch": 3})
        with self.assertRaises(ConfigError):
            Config.from_dict({"verbosity": True})
        with self.assertRaises(ConfigError):
            Config.from_dict({"extensions": [1, 2]})

    def test_layers_onto_base(self):
        base = Config(style="LLVM")

        config = Config.from_dict({"upstream": "origin/main"}, base=base)

        self.assertEqual(config.style, "LLVM")
        self.assertEqual(config.upstream, "origin/main")


class TestConfigLoad(unittest.TestCase):
    """Tests for Config.load from YAML files and the environment."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.top_level = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_no_file_keeps_defaults(self):
        config = Config.load(repo_top_level=str(self.top_level), environ={})

        self.assertEqual(config, Config())

    def test_reads_default_file(self):
        (self.top_level / CONFIG_FILENAME).write_text(
            "upstream: origin/main\n"
            "protected_branch: main\n"
            "extensions: [c, h, cpp]\n"
        )

        config = Config.load(repo_top_level=str(self.top_level), environ={})

        self.assertEqual(config.upstream, "origin/main")
        self.assertEqual(config.protected_branch, "main")
        self.assertEqual(config.extensions, ("c", "h", "cpp"))

    def test_empty_file_keeps_defaults(self):
        (self.top_level / CONFIG_FILENAME).write_text("")

        config = Config.load(repo_top_level=str(self.top_level), environ={})

        self.assertEqual(config, Config())

    def test_explicit_file(self):
        path = self.top_level / "fmt.yaml"
        path.write_text("style: Google\n")

        config = Config.load(config_file=str(path), environ={})

        self.assertEqual(config.style, "Google")

    def test_explicit_missing_file_raises(self):
        with self.assertRaises(ConfigError):
            Config.load(config_file=str(self.top_level / "missing.yaml"), environ={})

    def test_invalid_yaml_raises(self):
        (self.top_level / CONFIG_FILENAME).write_text("upstream: [unclosed\n")

        with self.assertRaises(ConfigError):
            Config.load(repo_top_level=str(self.top_level), environ={})

    def test_non_mapping_raises(self):
        (self.top_level / CONFIG_FILENAME).write_text("- c\n- h\n")

        with self.assertRaises(ConfigError):
            Config.load(repo_top_level=str(self.top_level), environ={})

    def test_environment_overrides_file(self):
        (self.top_level / CONFIG_FILENAME).write_text("upstream: origin/main\n")

        config = Config.load(
            repo_top_level=str(self.top_level),
            environ={
                "BRANCH_FORMAT_UPSTREAM": "upstream/next",
                "BRANCH_FORMAT_PROTECTED_BRANCH": "next",
            },
        )

        self.assertEqual(config.upstream, "upstream/next")
        self.assertEqual(config.protected_branch, "next")

    def test_empty_environment_value_ignored(self):
        config = Config.load(
            repo_top_level=str(self.top_level), environ={"BRANCH_FORMAT_UPSTREAM": ""}
        )

        self.assertEqual(config.upstream, "origin/master")


class TestWithOverrides(unittest.TestCase):
    """Tests for Config.with_overrides."""

    def test_none_values_ignored(self):
        config = Config(verbosity=1).with_overrides(verbosity=None, repo_path="/src/repo")

        self.assertEqual(config.verbosity, 1)
        self.assertEqual(config.repo_path, "/src/repo")


if __name__ == "__main__":
    unittest.main()
