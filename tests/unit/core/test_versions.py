"""Tests for version requirement parsing and comparison."""

import pytest

from depmerge.core.errors import ManifestParseError
from depmerge.core.versions import (
    Comparator,
    Exact,
    Op,
    Ordering,
    Range,
    Version,
    VersionReq,
    Versionless,
    compare,
    parse_version_spec,
)


def test_parse_version_spec_exact() -> None:
    """A complete semantic version is an Exact requirement."""
    spec = parse_version_spec("1.2.3")

    assert spec == Exact(Version(1, 2, 3))


def test_parse_version_spec_bare_is_caret_range() -> None:
    """A partial version without operator is a caret comparator."""
    spec = parse_version_spec("1.2")

    assert spec == Range(VersionReq((Comparator(Op.CARET, 1, 2),)))


def test_parse_version_spec_none_is_versionless() -> None:
    assert parse_version_spec(None) == Versionless()


def test_parse_version_spec_multiple_comparators() -> None:
    spec = parse_version_spec(">=1.2, <1.5")

    assert isinstance(spec, Range)
    assert spec.req.comparators == (
        Comparator(Op.GREATER_EQ, 1, 2),
        Comparator(Op.LESS, 1, 5),
    )


def test_parse_version_spec_star_has_no_comparators() -> None:
    spec = parse_version_spec("*")

    assert spec == Range(VersionReq(()))
    assert str(spec) == "*"


def test_parse_version_spec_minor_wildcard() -> None:
    spec = parse_version_spec("1.*")

    assert spec == Range(VersionReq((Comparator(Op.WILDCARD, 1),)))


@pytest.mark.parametrize(
    "text",
    ["", "not-a-version", "1.2.3.4", ">=", "1.*.3", "^1.2-beta", "1.2, ,3", "01.2.3x"],
)
def test_parse_version_spec_rejects_malformed(text: str) -> None:
    """Malformed requirements fail at parse time, never at comparison time."""
    with pytest.raises(ManifestParseError):
        parse_version_spec(text)


def test_version_parse_rejects_leading_zero() -> None:
    with pytest.raises(ManifestParseError):
        Version.parse("1.02.3")


def test_version_pre_release_sorts_before_release() -> None:
    assert Version.parse("1.0.0-alpha") < Version.parse("1.0.0")
    assert Version.parse("1.0.0-alpha.1") < Version.parse("1.0.0-alpha.beta")
    assert Version.parse("1.0.0-2") < Version.parse("1.0.0-10")


def test_version_str_round_trips() -> None:
    assert str(Version.parse("1.2.3-rc.1+build.5")) == "1.2.3-rc.1+build.5"


def test_caret_matching_follows_cargo_rules() -> None:
    req = VersionReq.parse("^1.2.3")

    assert req.matches(Version.parse("1.2.3"))
    assert req.matches(Version.parse("1.9.0"))
    assert not req.matches(Version.parse("2.0.0"))
    assert not req.matches(Version.parse("1.2.2"))


def test_caret_zero_major_is_minor_bounded() -> None:
    req = VersionReq.parse("^0.3")

    assert req.matches(Version.parse("0.3.9"))
    assert not req.matches(Version.parse("0.4.0"))


def test_tilde_matching() -> None:
    req = VersionReq.parse("~1.2.3")

    assert req.matches(Version.parse("1.2.9"))
    assert not req.matches(Version.parse("1.3.0"))


def test_pre_release_only_matches_when_opted_in() -> None:
    assert not VersionReq.parse(">=1.0.0").matches(Version.parse("1.1.0-beta"))
    assert VersionReq.parse(">=1.1.0-alpha").matches(Version.parse("1.1.0-beta"))


def test_compare_exact_versions() -> None:
    assert compare(parse_version_spec("1.2.3"), parse_version_spec("1.3.0")) is Ordering.LESS
    assert compare(parse_version_spec("2.0.0"), parse_version_spec("1.9.9")) is Ordering.GREATER
    assert compare(parse_version_spec("1.2.3"), parse_version_spec("1.2.3")) is Ordering.EQUAL


def test_compare_exact_inside_range_wins() -> None:
    """An exact version satisfying the range is the more specific, newer choice."""
    exact = parse_version_spec("1.5.0")
    caret = parse_version_spec("^1")

    assert compare(exact, caret) is Ordering.GREATER
    assert compare(caret, exact) is Ordering.LESS


def test_compare_exact_outside_range_loses() -> None:
    exact = parse_version_spec("2.0.0")
    caret = parse_version_spec("^1")

    assert compare(exact, caret) is Ordering.LESS
    assert compare(caret, exact) is Ordering.GREATER


def test_compare_caret_ranges_by_floor() -> None:
    assert compare(parse_version_spec("0.3"), parse_version_spec("0.4")) is Ordering.LESS
    assert compare(parse_version_spec("^1.2"), parse_version_spec("^1.1.9")) is Ordering.GREATER


def test_compare_caret_ranges_missing_parts_count_as_zero() -> None:
    """^1 and ^1.0.0 have the same floor, so neither is preferred."""
    assert compare(parse_version_spec("^1"), parse_version_spec("^1.0.0")) is None


def test_compare_non_caret_ranges_is_incomparable() -> None:
    assert compare(parse_version_spec(">=1.0"), parse_version_spec("^1.2")) is None
    assert compare(parse_version_spec("~1.2"), parse_version_spec("~1.3")) is None
    assert compare(parse_version_spec("^1, <1.5"), parse_version_spec("^1.2")) is None


def test_compare_versionless_is_incomparable() -> None:
    assert compare(Versionless(), parse_version_spec("1.0.0")) is None
    assert compare(parse_version_spec("^1"), Versionless()) is None
    assert compare(Versionless(), Versionless()) is None


def test_compare_is_antisymmetric() -> None:
    samples = ["1.0.0", "1.2.3", "^1", "^1.3", "0.4", "2.0.0", ">=1", "~1.2"]
    specs = [parse_version_spec(text) for text in samples]

    for left in specs:
        for right in specs:
            forward = compare(left, right)
            backward = compare(right, left)
            if forward is None:
                assert backward is None
            else:
                assert backward is Ordering(-forward.value)
