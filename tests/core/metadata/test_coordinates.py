"""Tests for MavenCoordinates: identity, rendering, parsing, and layout."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from p2bridge.core.metadata import MavenCoordinates, strip_snapshot


class TestIdentity:
    """Equality considers group, artifact, version, and classifier only."""

    def test_type_and_properties_are_ignored(self) -> None:
        a = MavenCoordinates("org.slf4j", "slf4j-api", "1.7.36", type="jar", properties={"x": "1"})
        b = MavenCoordinates("org.slf4j", "slf4j-api", "1.7.36")
        assert a == b
        assert hash(a) == hash(b)

    def test_classifier_is_part_of_identity(self) -> None:
        a = MavenCoordinates("g", "a", "1", classifier="sources")
        b = MavenCoordinates("g", "a", "1")
        assert a != b

    def test_frozen(self) -> None:
        c = MavenCoordinates("g", "a", "1")
        with pytest.raises(FrozenInstanceError):
            c.version = "2"  # type: ignore[misc]


class TestRendering:
    """String form and repository layout."""

    def test_str(self) -> None:
        assert str(MavenCoordinates("org.slf4j", "slf4j-api", "1.7.36")) == "org.slf4j:slf4j-api:1.7.36"

    def test_str_renders_missing_version_as_empty(self) -> None:
        assert str(MavenCoordinates("g", "a")) == "g:a:"

    def test_path(self) -> None:
        assert MavenCoordinates("org.slf4j", "slf4j-api", "1.7.36").path == "org/slf4j/slf4j-api/1.7.36"

    def test_file_name(self) -> None:
        c = MavenCoordinates("g", "core", "1.2.0")
        assert c.file_name() == "core-1.2.0.jar"
        assert c.file_name("pom") == "core-1.2.0.pom"
        assert c.file_name("jar", "sources") == "core-1.2.0-sources.jar"


class TestParse:
    """``MavenCoordinates.parse`` accepts 3, 4, or 5 parts."""

    def test_three_parts(self) -> None:
        c = MavenCoordinates.parse("g:a:1.0")
        assert (c.group_id, c.artifact_id, c.version) == ("g", "a", "1.0")
        assert c.type is None

    def test_four_parts(self) -> None:
        c = MavenCoordinates.parse("g:a:pom:1.0")
        assert c.type == "pom"
        assert c.version == "1.0"

    def test_five_parts(self) -> None:
        c = MavenCoordinates.parse("g:a:jar:sources:1.0")
        assert c.classifier == "sources"
        assert c.version == "1.0"

    @pytest.mark.parametrize("text", ["g:a", "g", "a:b:c:d:e:f"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            MavenCoordinates.parse(text)


class TestStripSnapshot:

    def test_strips_suffix(self) -> None:
        assert strip_snapshot("1.0.0-SNAPSHOT") == "1.0.0"

    def test_keeps_release(self) -> None:
        assert strip_snapshot("1.0.0") == "1.0.0"

    def test_none(self) -> None:
        assert strip_snapshot(None) is None
