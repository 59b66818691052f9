"""Tests for capability matching (namespace + name, ranges ignored)."""

from __future__ import annotations

from p2bridge.core.metadata import ProvidedCapability, RequiredCapability
from p2bridge.core.resolution import capability_key, matches, satisfies

from tests.helpers import bundle


class TestMatches:

    def test_same_namespace_and_name(self) -> None:
        provided = ProvidedCapability("osgi.bundle", "org.slf4j.api", "1.7.36")
        required = RequiredCapability("osgi.bundle", "org.slf4j.api", "[2.0.0,3.0.0)")
        assert matches(provided, required) is True

    def test_version_range_is_not_evaluated(self) -> None:
        provided = ProvidedCapability("java.package", "org.slf4j", "0.0.1")
        required = RequiredCapability("java.package", "org.slf4j", "[99.0.0,100.0.0)")
        assert matches(provided, required) is True

    def test_different_namespace(self) -> None:
        provided = ProvidedCapability("osgi.bundle", "org.slf4j", "1.0")
        required = RequiredCapability("java.package", "org.slf4j")
        assert matches(provided, required) is False

    def test_different_name(self) -> None:
        provided = ProvidedCapability("osgi.bundle", "org.slf4j.api", "1.0")
        required = RequiredCapability("osgi.bundle", "org.slf4j.simple")
        assert matches(provided, required) is False


    def test_capability_key_ignores_version(self) -> None:
        provided = ProvidedCapability("osgi.bundle", "org.slf4j.api", "1.7.36")
        required = RequiredCapability("osgi.bundle", "org.slf4j.api", "[2.0.0,3.0.0)")
        assert capability_key(provided) == capability_key(required) == ("osgi.bundle", "org.slf4j.api")


class TestSatisfies:

    def test_any_provided_capability(self) -> None:
        unit = bundle("org.slf4j.api", provides=[ProvidedCapability("java.package", "org.slf4j")])
        assert satisfies(unit, RequiredCapability("java.package", "org.slf4j"))
        assert satisfies(unit, RequiredCapability("osgi.bundle", "org.slf4j.api"))

    def test_no_match(self) -> None:
        assert not satisfies(bundle("x"), RequiredCapability("osgi.bundle", "y"))
