"""Tests for legacy shape detection and duplicate agent directories."""

from botconfig.config.agent_dirs import find_duplicate_agent_dirs, format_duplicate_agent_dir_error
from botconfig.config.legacy import find_legacy_config_issues
from botconfig.config.schema import BotConfig


class TestLegacyIssues:
    def test_clean_config(self):
        assert find_legacy_config_issues({"agents": {}, "gateway": {"auth": {"token": "x"}}}) == []

    def test_non_dict(self):
        assert find_legacy_config_issues("nope") == []

    def test_nested_rules(self):
        issues = find_legacy_config_issues({
            "routing": {"allowFrom": ["+1555"]},
            "gateway": {"token": "abc"},
        })
        assert [i.path for i in issues] == ["routing.allowFrom", "gateway.token"]

    def test_plugins_paths_only_when_list(self):
        assert find_legacy_config_issues({"plugins": {"paths": "x"}}) == []
        assert [i.path for i in find_legacy_config_issues({"plugins": {"paths": ["x"]}})] == ["plugins.paths"]


class TestDuplicateAgentDirs:
    def test_unique_dirs(self):
        config = BotConfig.model_validate({"agents": {"list": [{"id": "a"}, {"id": "b"}]}})
        assert find_duplicate_agent_dirs(config) == []

    def test_override_collides_with_default(self, state_dir):
        config = BotConfig.model_validate({"agents": {"list": [
            {"id": "a"},
            {"id": "b", "agentDir": str(state_dir / "agents" / "a" / "agent")},
        ]}})
        dupes = find_duplicate_agent_dirs(config)
        assert len(dupes) == 1
        assert dupes[0].agent_ids == ["a", "b"]

    def test_format_lists_every_group(self):
        from botconfig.config.agent_dirs import DuplicateAgentDir
        message = format_duplicate_agent_dir_error([
            DuplicateAgentDir("/x", ["a", "b"]),
            DuplicateAgentDir("/y", ["c", "d"]),
        ])
        assert '- /x: "a", "b"' in message
        assert '- /y: "c", "d"' in message
