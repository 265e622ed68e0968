"""Tests for plugin discovery and load_plugins."""

import pytest

from botconfig.config.schema import BotConfig
from botconfig.plugins import load_plugins
from botconfig.plugins.discovery import discover_plugin_candidates


def make_config(**plugins):
    return BotConfig.model_validate({"plugins": plugins} if plugins else {})


def simple_plugin(plugin_id, kind=None, register_body="pass"):
    kind_line = f'    "kind": "{kind}",\n' if kind else ""
    return (
        "def register(api):\n"
        f"    {register_body}\n"
        "\n"
        "plugin = {\n"
        f'    "id": "{plugin_id}",\n'
        f"{kind_line}"
        '    "register": register,\n'
        "}\n"
    )


# ---------------------------------------------------------------------------
# Tests: discovery
# ---------------------------------------------------------------------------

class TestDiscovery:
    def test_bundled_plugins_found(self):
        candidates, diagnostics = discover_plugin_candidates()
        ids = [c.plugin_id for c in candidates if c.origin == "bundled"]
        assert ids == ["discord", "memory-core", "slack", "telegram"]
        assert diagnostics == []

    def test_config_paths_take_precedence(self, write_plugin, tmp_path):
        write_plugin("alpha", simple_plugin("alpha"))
        candidates, _ = discover_plugin_candidates(extra_paths=[str(tmp_path / "plugins")])
        assert candidates[0].plugin_id == "alpha"
        assert candidates[0].origin == "config"

    def test_workspace_and_global_extensions(self, write_plugin, tmp_path, state_dir):
        workspace = tmp_path / "ws"
        write_plugin("ws-plugin", simple_plugin("ws-plugin"), workspace / ".botconfig" / "extensions")
        write_plugin("global-plugin", simple_plugin("global-plugin"), state_dir / "extensions")
        candidates, _ = discover_plugin_candidates(workspace_dir=str(workspace))
        origins = {c.plugin_id: c.origin for c in candidates}
        assert origins["ws-plugin"] == "workspace"
        assert origins["global-plugin"] == "global"

    def test_private_files_skipped(self, write_plugin, tmp_path):
        write_plugin("_helpers", "x = 1\n")
        candidates, _ = discover_plugin_candidates(extra_paths=[str(tmp_path / "plugins")])
        assert all(c.origin != "config" for c in candidates)

    def test_directory_plugin_with_manifest(self, tmp_path):
        plugin_dir = tmp_path / "my-dir"
        plugin_dir.mkdir()
        (plugin_dir / "plugin.py").write_text(simple_plugin("custom-id"))
        (plugin_dir / "plugin.yaml").write_text("id: custom-id\nname: Custom\nkind: tool\n")
        candidates, _ = discover_plugin_candidates(extra_paths=[str(plugin_dir)])
        assert candidates[0].plugin_id == "custom-id"
        assert candidates[0].manifest["name"] == "Custom"

    def test_invalid_manifest_reported(self, tmp_path):
        plugin_dir = tmp_path / "broken"
        plugin_dir.mkdir()
        (plugin_dir / "plugin.py").write_text(simple_plugin("broken"))
        (plugin_dir / "plugin.yaml").write_text("id: [unclosed\n")
        candidates, diagnostics = discover_plugin_candidates(extra_paths=[str(plugin_dir)])
        assert candidates[0].plugin_id == "broken"
        assert diagnostics[0].level == "error"
        assert diagnostics[0].message.startswith("invalid plugin manifest")

    def test_missing_paths_skipped(self, tmp_path):
        candidates, diagnostics = discover_plugin_candidates(extra_paths=[str(tmp_path / "nope")])
        assert all(c.origin == "bundled" for c in candidates)
        assert diagnostics == []


# ---------------------------------------------------------------------------
# Tests: load_plugins
# ---------------------------------------------------------------------------

class TestLoadPlugins:
    def test_plugins_disabled_lists_without_importing(self, write_plugin):
        path = write_plugin("explodes", "raise RuntimeError('should not import')\n")
        registry = load_plugins(make_config(enabled=False, load={"paths": [str(path)]}), cache=False)
        record = registry.get("explodes")
        assert record.status == "disabled"
        assert record.error == "plugins disabled"
        assert registry.diagnostics == []

    def test_bundled_defaults(self):
        registry = load_plugins(make_config(), cache=False, mode="validate")
        assert registry.get("memory-core").status == "loaded"
        assert registry.get("discord").status == "disabled"
        assert registry.get("discord").error == "bundled (disabled by default)"

    def test_full_mode_registers_tools_and_channels(self):
        config = make_config(entries={"discord": {"enabled": True, "config": {"token": "t"}}})
        registry = load_plugins(config, cache=False, mode="full")
        assert registry.get("memory-core").tool_names == ["memory_search", "memory_get"]
        assert registry.get("discord").channel_ids == ["discord"]
        assert [entry["plugin_id"] for entry in registry.channels] == ["discord"]

    def test_validate_mode_skips_register(self):
        config = make_config(entries={"discord": {"enabled": True}})
        registry = load_plugins(config, cache=False, mode="validate")
        assert registry.get("discord").status == "loaded"
        assert registry.tools == []
        assert registry.channels == []

    def test_hooks_registered(self, write_plugin):
        path = write_plugin("hooky", simple_plugin("hooky", register_body="api.register_hook('before_start', lambda: None)"))
        registry = load_plugins(make_config(load={"paths": [str(path)]}), cache=False)
        assert registry.get("hooky").hook_names == ["before_start"]
        assert len(registry.hooks_for("before_start")) == 1

    def test_import_failure_is_diagnostic(self, write_plugin):
        path = write_plugin("broken", "raise RuntimeError('kaboom')\n")
        registry = load_plugins(make_config(load={"paths": [str(path)]}), cache=False)
        record = registry.get("broken")
        assert record.status == "error"
        assert [d.message for d in registry.errors()] == ["failed to load plugin: kaboom"]
        assert registry.errors()[0].plugin_id == "broken"

    def test_missing_export_is_diagnostic(self, write_plugin):
        path = write_plugin("empty", "VALUE = 1\n")
        registry = load_plugins(make_config(load={"paths": [str(path)]}), cache=False)
        assert registry.get("empty").status == "error"
        assert "plugin export missing" in registry.errors()[0].message

    def test_register_failure_is_diagnostic(self, write_plugin):
        path = write_plugin("grumpy", simple_plugin("grumpy", register_body="raise RuntimeError('nope')"))
        registry = load_plugins(make_config(load={"paths": [str(path)]}), cache=False, mode="full")
        assert registry.get("grumpy").status == "error"
        assert registry.errors()[0].message == "plugin failed during register: nope"
        assert registry.ids().count("grumpy") == 1

    def test_declared_id_names_single_file_plugin(self, write_plugin):
        path = write_plugin("file_name", simple_plugin("declared-name"))
        registry = load_plugins(make_config(load={"paths": [str(path)]}), cache=False)
        assert registry.get("file_name") is None
        assert registry.get("declared-name").status == "loaded"
        assert registry.diagnostics == []

    def test_declared_id_rechecks_enable_state(self, write_plugin):
        path = write_plugin("file_name", simple_plugin("declared-name"))
        config = make_config(
            load={"paths": [str(path)]},
            entries={"declared-name": {"enabled": False}},
        )
        registry = load_plugins(config, cache=False)
        record = registry.get("declared-name")
        assert record.status == "disabled"
        assert record.error == "disabled in config"

    def test_declared_id_duplicate_of_earlier_plugin(self, write_plugin, tmp_path):
        write_plugin("aaa", simple_plugin("shared"))
        write_plugin("bbb", simple_plugin("shared"))
        registry = load_plugins(make_config(load={"paths": [str(tmp_path / "plugins")]}), cache=False)
        records = [r for r in registry.plugins if r.id == "shared"]
        assert [r.status for r in records] == ["loaded", "disabled"]
        assert records[1].error == "overridden by config plugin"

    def test_manifest_id_mismatch_warns(self, tmp_path):
        plugin_dir = tmp_path / "my-dir"
        plugin_dir.mkdir()
        (plugin_dir / "plugin.py").write_text(simple_plugin("declared-name"))
        (plugin_dir / "plugin.yaml").write_text("id: manifest-name\n")
        registry = load_plugins(make_config(load={"paths": [str(plugin_dir)]}), cache=False)
        assert registry.get("manifest-name").status == "loaded"
        assert registry.get("declared-name") is None
        warnings = [d for d in registry.diagnostics if d.level == "warn"]
        assert "plugin id mismatch" in warnings[0].message

    def test_duplicate_id_first_wins(self, write_plugin):
        path = write_plugin("discord", simple_plugin("discord"))
        registry = load_plugins(make_config(load={"paths": [str(path)]}), cache=False)
        records = [r for r in registry.plugins if r.id == "discord"]
        assert [r.origin for r in records] == ["config", "bundled"]
        assert records[0].status == "loaded"
        assert records[1].error == "overridden by config plugin"

    def test_memory_slot_selects_one_memory_plugin(self, write_plugin):
        path = write_plugin("my-memory", simple_plugin("my-memory", kind="memory"))
        config = make_config(load={"paths": [str(path)]}, slots={"memory": "my-memory"})
        registry = load_plugins(config, cache=False)
        assert registry.get("my-memory").status == "loaded"
        assert registry.get("memory-core").status == "disabled"
        assert registry.get("memory-core").error == 'memory slot set to "my-memory"'

    def test_memory_slot_none_disables_memory_plugins(self):
        registry = load_plugins(make_config(slots={"memory": "none"}), cache=False)
        assert registry.get("memory-core").error == "memory slot disabled"
        assert registry.diagnostics == []

    def test_unknown_memory_slot_warns(self):
        registry = load_plugins(make_config(slots={"memory": "ghost"}), cache=False)
        assert registry.errors() == []
        assert any("memory slot plugin not found" in d.message for d in registry.diagnostics)

    def test_invalid_config_for_pydantic_schema(self):
        config = make_config(entries={"memory-core": {"config": {"maxResults": 0}}})
        registry = load_plugins(config, cache=False, mode="validate")
        assert registry.get("memory-core").status == "error"
        assert registry.errors()[0].message.startswith("invalid config: maxResults")

    def test_cache_reused_only_when_enabled(self, write_plugin, tmp_path):
        marker = tmp_path / "imports.txt"
        body = (
            f"with open({str(marker)!r}, 'a') as fh:\n"
            "    fh.write('x')\n\n"
            + simple_plugin("counted")
        )
        path = write_plugin("counted", body)
        config = make_config(load={"paths": [str(path)]})
        load_plugins(config)
        load_plugins(config)
        assert marker.read_text() == "x"
        load_plugins(config, cache=False)
        assert marker.read_text() == "xx"

    def test_cached_registry_is_copied(self):
        config = make_config()
        first = load_plugins(config)
        first.plugins.clear()
        first.warn("caller-added")
        second = load_plugins(config)
        assert second is not first
        assert second.has("memory-core")
        assert second.diagnostics == []

    def test_cache_keyed_by_state_dir(self, write_plugin, tmp_path, monkeypatch):
        config = make_config()
        assert not load_plugins(config).has("global-plugin")
        other_state = tmp_path / "other-state"
        write_plugin("global-plugin", simple_plugin("global-plugin"), other_state / "extensions")
        monkeypatch.setenv("BOTCONFIG_STATE_DIR", str(other_state))
        assert load_plugins(config).get("global-plugin").origin == "global"

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            load_plugins(make_config(), mode="dry-run")
