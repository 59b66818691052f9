"""Tests for configuration loading and validation."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from p2bridge.config import Config, MavenConfig, ProjectDetails
from p2bridge.exceptions import ConfigError
from p2bridge.remote.resolver import MAVEN_CENTRAL

FULL_CONFIG = """\
sites:
  - name: birt
    url: https://download.eclipse.org/birt/updates/release/latest
mappings:
  - pattern: 'org\\.eclipse\\.birt\\.(.+)'
    groupId: org.eclipse.birt
    artifactId: 'birt-$1'
exclude:
  - id: org.eclipse.birt.tests
candidates:
  - pattern: 'org\\.eclipse\\.birt:.*'
nocheck:
  - id: org.eclipse.emf
publish:
  - id: org.eclipse.birt.runtime
  - pattern: 'org\\.eclipse\\.birt\\.report\\..*'
details:
  - group: org.eclipse.birt
    name: Eclipse BIRT
    url: https://eclipse.dev/birt
    scm: https://github.com/eclipse-birt/birt
maven:
  group: org.example.birt
  resolve: true
  repoId: ossrh
  repoUrl: https://oss.example.org/releases
  gpgFingerprint: ABCD
parallelism: 4
"""


class TestLoad:

    def test_full_document(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(FULL_CONFIG, encoding="utf-8")
        config = Config.load(path)

        assert config.sites[0].name == "birt"
        assert config.mappings[0].apply("org.eclipse.birt.core") == {
            "group_id": "org.eclipse.birt", "artifact_id": "birt-core",
        }
        assert config.exclude[0].id == "org.eclipse.birt.tests"
        assert [str(rule) for rule in config.candidates] == [
            "/org\\.eclipse\\.birt:.*/", "org.eclipse.emf",
        ]
        assert len(config.publish) == 2
        assert config.maven.group == "org.example.birt"
        assert config.maven.resolve is True
        assert config.maven.repo_id == "ossrh"
        assert config.maven.repo_url == "https://oss.example.org/releases"
        assert config.maven.signing is True
        assert config.maven.central == MAVEN_CENTRAL
        assert config.parallelism == 4

    def test_empty_document(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        config = Config.load(path)
        assert config == Config()
        assert config.maven.resolve is False
        assert config.maven.signing is False

    def test_json_is_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text('{"publish": [{"id": "x"}], "maven": {"resolve": false}}', encoding="utf-8")
        assert Config.load(path).publish[0].id == "x"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            Config.load(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("sites: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            Config.load(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="must be a mapping"):
            Config.load(path)


class TestValidation:

    def test_invalid_pattern(self) -> None:
        with pytest.raises(ConfigError, match="Invalid pattern"):
            Config.from_dict({"mappings": [{"pattern": "(", "groupId": "g"}]})

    def test_bad_template_reference(self) -> None:
        with pytest.raises(ConfigError):
            Config.from_dict({"mappings": [{"pattern": "x", "artifactId": "$1"}]})

    def test_unknown_named_template_reference(self) -> None:
        with pytest.raises(ConfigError, match="nope"):
            Config.from_dict({"mappings": [{"pattern": "(.+)", "groupId": "${nope}"}]})

    def test_rule_without_id_or_pattern(self) -> None:
        with pytest.raises(ConfigError, match="'id' or a 'pattern'"):
            Config.from_dict({"exclude": [{"name": "x"}]})

    def test_missing_site_url(self) -> None:
        with pytest.raises(ConfigError, match="Missing configuration key"):
            Config.from_dict({"sites": [{"name": "x"}]})

    def test_list_required(self) -> None:
        with pytest.raises(ConfigError, match="list of mappings"):
            Config.from_dict({"publish": {"id": "x"}})

    def test_maven_must_be_mapping(self) -> None:
        with pytest.raises(ConfigError, match="'maven' must be a mapping"):
            Config.from_dict({"maven": ["x"]})

    def test_unknown_maven_keys_ignored(self) -> None:
        assert Config.from_dict({"maven": {"somethingElse": 1}}).maven == MavenConfig()

    @pytest.mark.parametrize("value", [0, -1, "many"])
    def test_invalid_parallelism(self, value: object) -> None:
        with pytest.raises(ConfigError):
            Config.from_dict({"parallelism": value})

    def test_snake_case_keys(self) -> None:
        config = Config.from_dict({"maven": {"repo_id": "a", "gpg_key": "k.asc"}})
        assert config.maven.repo_id == "a"
        assert config.maven.signing is True


class TestDetails:

    def test_find_by_id_then_group(self) -> None:
        config = Config(details=(
            ProjectDetails(name="One", id="com.example.core"),
            ProjectDetails(name="Group", group="com.example"),
        ))
        assert config.find_details("com.example.core", "com.example").name == "One"  # type: ignore[union-attr]
        assert config.find_details("com.example.util", "com.example").name == "Group"  # type: ignore[union-attr]
        assert config.find_details("other", "org.other") is None
        assert config.find_details("other", None) is None


class TestImmutability:

    def test_frozen(self) -> None:
        with pytest.raises(FrozenInstanceError):
            Config().parallelism = 2  # type: ignore[misc]

    def test_secrets_not_in_repr(self) -> None:
        assert "hunter2" not in repr(MavenConfig(password="hunter2", gpg_passphrase="hunter2"))
