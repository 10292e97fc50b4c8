"""Unit tests for semantic version parsing and ordering."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from k8s_bundle_cli.errors import InvalidVersionError
from k8s_bundle_cli.versions import KubeVersion, parse_tolerant, parse_version

component = st.integers(min_value=0, max_value=10_000)


class TestParseVersion:
    """Tests for strict parsing."""

    @pytest.mark.unit
    def test_parses_major_minor_patch(self) -> None:
        assert parse_version("1.22.0") == KubeVersion(1, 22, 0)

    @pytest.mark.unit
    def test_parses_prerelease_and_build(self) -> None:
        version = parse_version("1.0.0-beta.1+exp.sha.5114f85")
        assert version.prerelease == ("beta", "1")
        assert version.build == ("exp", "sha", "5114f85")
        assert str(version) == "1.0.0-beta.1+exp.sha.5114f85"

    @pytest.mark.unit
    def test_accepts_largest_unsigned_64_bit_component(self) -> None:
        assert parse_version("18446744073709551615.0.0").major == 2**64 - 1

    @pytest.mark.unit
    def test_rejects_empty_string(self) -> None:
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_version("")
        assert exc_info.value.reason == "Version string empty"

    @pytest.mark.unit
    def test_rejects_short_version(self) -> None:
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_version("1.22")
        assert exc_info.value.reason == "No Major.Minor.Patch elements found"

    @pytest.mark.unit
    def test_rejects_leading_zeroes(self) -> None:
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_version("1.021.0")
        assert exc_info.value.reason == 'Minor number must not contain leading zeroes "021"'

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("text", "reason"),
        [
            ("a.1.0", 'Invalid character(s) found in major number "a"'),
            ("1.b.0", 'Invalid character(s) found in minor number "b"'),
            ("1.2.c", 'Invalid character(s) found in patch number "c"'),
            ("1.2.3-", "Prerelease is empty"),
            ("1.2.3-a_b", 'Invalid character(s) found in prerelease "a_b"'),
            ("1.2.3-01", 'Numeric PreRelease version must not contain leading zeroes "01"'),
            ("1.2.3+", "Build meta data is empty"),
            (
                "18446744073709551616.0.0",
                'strconv.ParseUint: parsing "18446744073709551616": value out of range',
            ),
            (
                "1.2.3-18446744073709551616",
                'strconv.ParseUint: parsing "18446744073709551616": value out of range',
            ),
        ],
    )
    def test_failure_reasons(self, text: str, reason: str) -> None:
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_version(text)
        assert exc_info.value.reason == reason
        assert exc_info.value.version == text


class TestParseTolerant:
    """Tests for lenient parsing of user-written versions."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1.22", KubeVersion(1, 22, 0)),
            ("1", KubeVersion(1, 0, 0)),
            ("v1.21.0", KubeVersion(1, 21, 0)),
            ("  1.21.3  ", KubeVersion(1, 21, 3)),
            ("1.021", KubeVersion(1, 21, 0)),
            ("01.22.00", KubeVersion(1, 22, 0)),
        ],
    )
    def test_normalizes(self, text: str, expected: KubeVersion) -> None:
        assert parse_tolerant(text) == expected

    @pytest.mark.unit
    def test_invalid_reports_raw_value(self) -> None:
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_tolerant("invalid")
        assert exc_info.value.reason == 'Invalid character(s) found in major number "invalid"'
        assert exc_info.value.version == "invalid"

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["1.22-rc", "1.22+build", "1-rc"])
    def test_short_version_cannot_carry_prerelease(self, text: str) -> None:
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_tolerant(text)
        assert exc_info.value.reason == "Short version cannot contain PreRelease/Build meta data"

    @pytest.mark.unit
    def test_dotted_suffix_on_short_version_lands_in_minor(self) -> None:
        # "1.22-rc.1" splits into three parts, so "22-rc" is read as the minor number
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_tolerant("1.22-rc.1")
        assert exc_info.value.reason == 'Invalid character(s) found in minor number "22-rc"'

    @pytest.mark.unit
    def test_full_version_keeps_prerelease(self) -> None:
        assert parse_tolerant("1.22.0-rc.1").prerelease == ("rc", "1")


class TestOrdering:
    """Tests for semver precedence."""

    @pytest.mark.unit
    def test_numeric_ordering(self) -> None:
        assert parse_version("1.21.0") < parse_version("1.22.0")
        assert parse_version("1.9.0") < parse_version("1.10.0")
        assert parse_version("2.0.0") > parse_version("1.99.99")

    @pytest.mark.unit
    def test_prerelease_sorts_before_release(self) -> None:
        assert parse_version("1.22.0-rc.1") < parse_version("1.22.0")

    @pytest.mark.unit
    def test_prerelease_precedence(self) -> None:
        ordered = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
        ]
        versions = [parse_version(v) for v in ordered]
        assert sorted(reversed(versions)) == versions

    @pytest.mark.unit
    def test_build_metadata_ignored(self) -> None:
        assert parse_version("1.22.0+build.1") == parse_version("1.22.0")
        assert hash(parse_version("1.22.0+build.1")) == hash(parse_version("1.22.0"))

    @pytest.mark.unit
    @given(a=st.tuples(component, component, component), b=st.tuples(component, component, component))
    def test_ordering_matches_tuple_ordering(
        self, a: tuple[int, int, int], b: tuple[int, int, int]
    ) -> None:
        va = parse_version(".".join(map(str, a)))
        vb = parse_version(".".join(map(str, b)))
        assert (va < vb) == (a < b)
        assert (va == vb) == (a == b)

    @pytest.mark.unit
    @given(major=component, minor=component)
    def test_tolerant_fills_patch(self, major: int, minor: int) -> None:
        assert parse_tolerant(f"{major}.{minor}") == KubeVersion(major, minor, 0)
