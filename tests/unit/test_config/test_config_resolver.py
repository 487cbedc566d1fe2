"""
Unit tests for resolving configuration sources.
"""

from pathlib import Path

import pytest

from webpack_live.config import build_configuration_from_options, resolve_config
from webpack_live.models import DEFAULT_WATCH_EXTENSIONS, FactoryConfig, StaticConfig
from webpack_live.validation import ConfigLoadFailure


@pytest.mark.unit
class TestResolveConfig:
    """Test cases for StaticConfig / FactoryConfig resolution."""

    def test_static_single_entry(self):
        config = resolve_config(StaticConfig({"output": {"path": "/dist", "filename": "x.js"}}))

        assert len(config.entries) == 1
        assert config.primary.output_path == "/dist"
        assert config.primary.filename == "x.js"
        assert config.primary.context == ""

    def test_factory_is_called_once(self):
        calls = []

        def factory():
            calls.append(1)
            return [{"output": {"path": "/a"}}, {"output": {"path": "/b"}}]

        config = resolve_config(FactoryConfig(factory, source_path=Path("/proj/cfg.py")))

        assert calls == [1]
        assert [e.output_path for e in config.entries] == ["/a", "/b"]
        assert config.source_path == Path("/proj/cfg.py")

    def test_factory_exception_becomes_load_failure(self):
        def factory():
            raise KeyError("missing")

        with pytest.raises(ConfigLoadFailure) as exc_info:
            resolve_config(FactoryConfig(factory))

        assert "KeyError" in str(exc_info.value)

    def test_defaults(self):
        config = build_configuration_from_options({})

        assert config.primary.output_path == "dist"
        assert config.primary.filename == "[name].js"
        assert config.watch.aggregate_timeout == pytest.approx(0.3)
        assert config.watch.poll is False

    def test_watch_options_from_first_entry(self):
        config = build_configuration_from_options([
            {"watchOptions": {"aggregateTimeout": 1000, "poll": 500, "ignored": "**/tmp/**"}},
            {"watchOptions": {"aggregateTimeout": 5}},
        ])

        assert config.watch.aggregate_timeout == pytest.approx(1.0)
        assert config.watch.poll is True
        assert config.watch.ignored == ["**/tmp/**"]

    def test_resolve_extensions_extend_watched_types(self):
        config = build_configuration_from_options(
            {"resolve": {"extensions": [".coffee", ".js", "..."]}}
        )

        assert config.watch.extensions == DEFAULT_WATCH_EXTENSIONS + (".coffee",)
        assert ".log" not in config.watch.extensions

    def test_raw_options_are_kept(self):
        options = [{"output": {"path": "/a"}, "target": "node"}]

        assert build_configuration_from_options(options).raw is options

    @pytest.mark.parametrize(
        "options",
        [
            [],
            ["not a dict"],
            {"output": "dist"},
            {"output": {"path": 42}},
            {"context": ["x"]},
            {"watchOptions": {"aggregateTimeout": -1}},
            {"resolve": ".js"},
        ],
    )
    def test_invalid_options(self, options):
        with pytest.raises(ConfigLoadFailure):
            build_configuration_from_options(options)
