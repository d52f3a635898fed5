"""Version requirements and the partial order used to pick a merge winner.

A dependency's declared requirement is modelled as one of three variants,
built once when the manifest is parsed:

- Exact: a fully resolved version such as "1.2.3"
- Range: a requirement expression such as "^1.2", "~0.3" or ">=1, <2"
- Versionless: no version at all (path, git or workspace dependencies)

Parsing follows Cargo's rules: text that is a valid version is Exact, anything
else must parse as a requirement, and a comparator without an operator is a
caret comparator. Malformed text raises ManifestParseError at parse time so
that compare() itself can never fail.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

from depmerge.core.errors import ManifestParseError

_NUMBER = r"0|[1-9]\d*"
_IDENTS = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

_VERSION_RE = re.compile(
    rf"^(?P<major>{_NUMBER})\.(?P<minor>{_NUMBER})\.(?P<patch>{_NUMBER})"
    rf"(?:-(?P<pre>{_IDENTS}))?(?:\+(?P<build>{_IDENTS}))?$"
)

_COMPARATOR_RE = re.compile(
    r"^(?P<op>>=|<=|=|>|<|~|\^)?\s*"
    r"(?P<major>\d+|[*xX])(?:\.(?P<minor>\d+|[*xX]))?(?:\.(?P<patch>\d+|[*xX]))?"
    rf"(?:-(?P<pre>{_IDENTS}))?(?:\+(?P<build>{_IDENTS}))?$"
)

_WILDCARDS = frozenset({"*", "x", "X"})


class Ordering(Enum):
    """Result of comparing two requirements that are comparable."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def _ordering_of(left: object, right: object) -> Ordering:
    if left < right:  # type: ignore[operator]
        return Ordering.LESS
    if left > right:  # type: ignore[operator]
        return Ordering.GREATER
    return Ordering.EQUAL


def _split_identifiers(text: str | None, *, field: str, source: str) -> tuple[str, ...]:
    if not text:
        return ()
    identifiers = tuple(text.split("."))
    if field == "pre-release":
        for ident in identifiers:
            if ident.isdigit() and len(ident) > 1 and ident.startswith("0"):
                raise ManifestParseError(
                    f"Invalid {field} identifier '{ident}' in '{source}': leading zero"
                )
    return identifiers


def _identifier_key(ident: str) -> tuple[int, int, str]:
    # Numeric identifiers sort numerically and before alphanumeric ones.
    if ident.isdigit():
        return (0, int(ident), "")
    return (1, 0, ident)


def _pre_key(pre: tuple[str, ...]) -> tuple:
    # A release sorts after every pre-release of the same version.
    if not pre:
        return (1, ())
    return (0, tuple(_identifier_key(ident) for ident in pre))


def _build_key(build: tuple[str, ...]) -> tuple:
    return tuple(_identifier_key(ident) for ident in build)


@total_ordering
@dataclass(frozen=True)
class Version:
    """A semantic version: MAJOR.MINOR.PATCH with optional pre-release and build."""

    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a strict semantic version.

        Raises:
            ManifestParseError: If text is not a complete semantic version
        """
        match = _VERSION_RE.match(text)
        if match is None:
            raise ManifestParseError(f"Invalid version '{text}'")
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            pre=_split_identifiers(match["pre"], field="pre-release", source=text),
            build=_split_identifiers(match["build"], field="build", source=text),
        )

    def precedence_key(self) -> tuple:
        return (self.major, self.minor, self.patch, _pre_key(self.pre), _build_key(self.build))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.precedence_key() < other.precedence_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


class Op(Enum):
    """Comparator operators understood in a requirement."""

    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = "*"


@dataclass(frozen=True)
class Comparator:
    """One operator/version pair of a requirement, e.g. ``^1.2`` or ``>=0.3.1``.

    Missing minor or patch components are None; they are not the same as 0.
    """

    op: Op
    major: int
    minor: int | None = None
    patch: int | None = None
    pre: tuple[str, ...] = ()

    def matches(self, version: Version) -> bool:
        match self.op:
            case Op.EXACT | Op.WILDCARD:
                return self._matches_exact(version)
            case Op.GREATER:
                return self._matches_greater(version)
            case Op.GREATER_EQ:
                return self._matches_exact(version) or self._matches_greater(version)
            case Op.LESS:
                return self._matches_less(version)
            case Op.LESS_EQ:
                return self._matches_exact(version) or self._matches_less(version)
            case Op.TILDE:
                return self._matches_tilde(version)
            case Op.CARET:
                return self._matches_caret(version)

    def allows_pre_release_of(self, version: Version) -> bool:
        """Whether this comparator opts in to pre-releases of version's release."""
        return (
            self.major == version.major
            and self.minor == version.minor
            and self.patch == version.patch
            and bool(self.pre)
        )

    def _matches_exact(self, v: Version) -> bool:
        if v.major != self.major:
            return False
        if self.minor is None:
            return True
        if v.minor != self.minor:
            return False
        if self.patch is None:
            return True
        if v.patch != self.patch:
            return False
        return v.pre == self.pre

    def _matches_greater(self, v: Version) -> bool:
        if v.major != self.major:
            return v.major > self.major
        if self.minor is None:
            return False
        if v.minor != self.minor:
            return v.minor > self.minor
        if self.patch is None:
            return False
        if v.patch != self.patch:
            return v.patch > self.patch
        return _pre_key(v.pre) > _pre_key(self.pre)

    def _matches_less(self, v: Version) -> bool:
        if v.major != self.major:
            return v.major < self.major
        if self.minor is None:
            return False
        if v.minor != self.minor:
            return v.minor < self.minor
        if self.patch is None:
            return False
        if v.patch != self.patch:
            return v.patch < self.patch
        return _pre_key(v.pre) < _pre_key(self.pre)

    def _matches_tilde(self, v: Version) -> bool:
        if v.major != self.major:
            return False
        if self.minor is not None and v.minor != self.minor:
            return False
        if self.patch is not None and v.patch != self.patch:
            return v.patch > self.patch
        return _pre_key(v.pre) >= _pre_key(self.pre)

    def _matches_caret(self, v: Version) -> bool:
        if v.major != self.major:
            return False
        if self.minor is None:
            return True
        if self.patch is None:
            if self.major > 0:
                return v.minor >= self.minor
            return v.minor == self.minor

        if self.major > 0:
            if v.minor != self.minor:
                return v.minor > self.minor
            if v.patch != self.patch:
                return v.patch > self.patch
        elif self.minor > 0:
            if v.minor != self.minor:
                return False
            if v.patch != self.patch:
                return v.patch > self.patch
        elif v.minor != self.minor or v.patch != self.patch:
            return False

        return _pre_key(v.pre) >= _pre_key(self.pre)

    def __str__(self) -> str:
        parts = [str(self.major)]
        if self.minor is not None:
            parts.append(str(self.minor))
        elif self.op is Op.WILDCARD:
            parts.append("*")
        if self.patch is not None:
            parts.append(str(self.patch))
        elif self.op is Op.WILDCARD and self.minor is not None:
            parts.append("*")
        text = ".".join(parts)
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.op is Op.WILDCARD:
            return text
        return f"{self.op.value}{text}"


def _parse_component(raw: str | None, *, source: str) -> int | None:
    if raw is None or raw in _WILDCARDS:
        return None
    if len(raw) > 1 and raw.startswith("0"):
        raise ManifestParseError(f"Invalid version requirement '{source}': leading zero in '{raw}'")
    return int(raw)


def _parse_comparator(text: str, *, source: str) -> Comparator | None:
    """Parse one comma-separated part. Returns None for a bare ``*``."""
    match = _COMPARATOR_RE.match(text)
    if match is None:
        raise ManifestParseError(f"Invalid version requirement '{source}'")

    raw_op = match["op"]
    raw_major, raw_minor, raw_patch = match["major"], match["minor"], match["patch"]

    if raw_major in _WILDCARDS:
        if raw_op is not None or raw_minor is not None or match["pre"]:
            raise ManifestParseError(f"Invalid version requirement '{source}'")
        return None

    minor_is_wild = raw_minor in _WILDCARDS
    patch_is_wild = raw_patch in _WILDCARDS
    if minor_is_wild and raw_patch is not None and not patch_is_wild:
        raise ManifestParseError(
            f"Invalid version requirement '{source}': version component after wildcard"
        )
    if match["pre"] and (raw_patch is None or patch_is_wild):
        raise ManifestParseError(
            f"Invalid version requirement '{source}': pre-release requires a patch version"
        )

    if raw_op is None:
        op = Op.CARET
    else:
        op = Op(raw_op)
    if (minor_is_wild or patch_is_wild) and op in (Op.CARET, Op.EXACT) and raw_op != "^":
        op = Op.WILDCARD

    return Comparator(
        op=op,
        major=int(raw_major),
        minor=_parse_component(raw_minor, source=source),
        patch=_parse_component(raw_patch, source=source),
        pre=_split_identifiers(match["pre"], field="pre-release", source=source),
    )


@dataclass(frozen=True)
class VersionReq:
    """A comma-separated list of comparators that must all match.

    An empty comparator list is the ``*`` requirement.
    """

    comparators: tuple[Comparator, ...]

    @classmethod
    def parse(cls, text: str) -> "VersionReq":
        """Parse a requirement string such as ``^1.2, <1.5``.

        Raises:
            ManifestParseError: If text is empty or any part is malformed
        """
        stripped = text.strip()
        if not stripped:
            raise ManifestParseError("Empty version requirement")

        comparators: list[Comparator] = []
        for part in stripped.split(","):
            part = part.strip()
            if not part:
                raise ManifestParseError(f"Invalid version requirement '{text}': empty comparator")
            comparator = _parse_comparator(part, source=text)
            if comparator is not None:
                comparators.append(comparator)
        return cls(comparators=tuple(comparators))

    def matches(self, version: Version) -> bool:
        if not all(comparator.matches(version) for comparator in self.comparators):
            return False
        if not version.pre:
            return True
        return any(comparator.allows_pre_release_of(version) for comparator in self.comparators)

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return ", ".join(str(comparator) for comparator in self.comparators)


@dataclass(frozen=True)
class Exact:
    """Requirement pinned to one version."""

    version: Version

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True)
class Range:
    """Requirement expressed as a comparator list."""

    req: VersionReq

    def __str__(self) -> str:
        return str(self.req)


@dataclass(frozen=True)
class Versionless:
    """Dependency declared without any version (path/git/workspace)."""

    def __str__(self) -> str:
        return "(no version)"


VersionSpec = Exact | Range | Versionless


def parse_version_spec(text: str | None) -> VersionSpec:
    """Build the VersionSpec for a dependency's version text.

    Args:
        text: The declared version, or None when the entry has no version key

    Raises:
        ManifestParseError: If text is neither a version nor a requirement
    """
    if text is None:
        return Versionless()
    try:
        return Exact(Version.parse(text))
    except ManifestParseError:
        return Range(VersionReq.parse(text))


def _compare_caret_ranges(left: VersionReq, right: VersionReq) -> Ordering | None:
    if len(left.comparators) != 1 or len(right.comparators) != 1:
        return None

    this, other = left.comparators[0], right.comparators[0]
    if this.op is not Op.CARET or other.op is not Op.CARET:
        return None

    for mine, theirs in (
        (this.major, other.major),
        (this.minor or 0, other.minor or 0),
        (this.patch or 0, other.patch or 0),
    ):
        ordering = _ordering_of(mine, theirs)
        if ordering is not Ordering.EQUAL:
            return ordering

    # Same caret floor: no basis for preferring either side.
    return None


def compare(left: VersionSpec, right: VersionSpec) -> Ordering | None:
    """Compare two requirements for the same dependency.

    Returns None when the pair is incomparable; callers fall back to their
    tie-break policy in that case.

    Rules:
        - Versionless on either side is incomparable
        - Exact vs Exact uses version precedence
        - Exact vs Range: the exact version wins if the range matches it,
          otherwise the range wins
        - Range vs Range is only decided for two single caret comparators,
          by major, then minor, then patch (missing parts count as 0)
    """
    match left, right:
        case (Versionless(), _) | (_, Versionless()):
            return None
        case Exact(version=a), Exact(version=b):
            return _ordering_of(a, b)
        case Exact(version=version), Range(req=req):
            return Ordering.GREATER if req.matches(version) else Ordering.LESS
        case Range(req=req), Exact(version=version):
            return Ordering.LESS if req.matches(version) else Ordering.GREATER
        case Range(req=a), Range(req=b):
            return _compare_caret_ranges(a, b)
    return None
