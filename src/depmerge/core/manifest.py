"""Semantic merge of dependency tables in two TOML manifest revisions.

Used as a git merge driver when both sides of a merge bumped versions in the
same dependency table. Only the listed tables are rewritten; everything else is
taken from the local revision verbatim, so comments, ordering and formatting of
unrelated sections round-trip byte for byte.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.toml_document import TOMLDocument

from depmerge.core.errors import ManifestParseError
from depmerge.core.versions import Ordering, VersionSpec, compare, parse_version_spec

logger = logging.getLogger(__name__)

DEFAULT_TABLES: tuple[str, ...] = ("dependencies",)


class TieBreak(Enum):
    """Which side wins when two requirements are equal or incomparable.

    REMOTE is the default. Versionless entries are always incomparable.
    """

    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class DependencyEntry:
    """One dependency as declared in a manifest table.

    Fields:
        name: Key in the dependency table
        version: Parsed requirement (Versionless when the entry has no version)
        raw: The tomlkit item as parsed, auxiliary keys and formatting included
    """

    name: str
    version: VersionSpec
    raw: Any


def _parse_document(text: str, *, side: str) -> TOMLDocument:
    try:
        return tomlkit.parse(text)
    except TOMLKitError as e:
        raise ManifestParseError(f"Could not parse {side} manifest: {e}") from e


def _dependency_table(doc: TOMLDocument, table: str, *, side: str) -> Mapping[str, Any]:
    if table not in doc:
        raise ManifestParseError(f"The {side} manifest has no [{table}] table")
    deps = doc[table]
    if not isinstance(deps, Mapping):
        raise ManifestParseError(f"[{table}] in the {side} manifest is not a table")
    return deps


def _parse_entry(name: str, item: Any, *, table: str) -> DependencyEntry:
    if isinstance(item, str):
        version_text: str | None = str(item)
    elif isinstance(item, Mapping):
        version = item.get("version")
        if version is not None and not isinstance(version, str):
            raise ManifestParseError(f"'{table}.{name}.version' must be a string")
        version_text = str(version) if version is not None else None
    else:
        raise ManifestParseError(
            f"'{table}.{name}' must be a version string or a table, got {type(item).__name__}"
        )

    try:
        spec = parse_version_spec(version_text)
    except ManifestParseError as e:
        raise ManifestParseError(f"'{table}.{name}': {e}") from e

    return DependencyEntry(name=name, version=spec, raw=item)


def _entries_from_table(deps: Mapping[str, Any], table: str) -> dict[str, DependencyEntry]:
    return {str(name): _parse_entry(str(name), item, table=table) for name, item in deps.items()}


def parse_dependencies(text: str, table: str = "dependencies") -> dict[str, DependencyEntry]:
    """Parse one dependency table of a manifest into entries keyed by name.

    Entries keep the table's document order.

    Raises:
        ManifestParseError: If the document, the table, or any entry is malformed
    """
    doc = _parse_document(text, side="given")
    return _entries_from_table(_dependency_table(doc, table, side="given"), table)


def pick_winner(
    local: DependencyEntry,
    remote: DependencyEntry,
    tie_break: TieBreak = TieBreak.REMOTE,
) -> DependencyEntry:
    """Choose between the two declarations of the same dependency.

    The local entry wins only when its requirement is strictly greater; the
    remote entry wins when strictly greater. Equal and incomparable pairs are
    settled by the tie-break policy.
    """
    ordering = compare(local.version, remote.version)
    if ordering is Ordering.GREATER:
        return local
    if ordering is Ordering.LESS:
        return remote

    logger.debug(
        "No strict order between %s (%s vs %s), tie-break favors %s",
        local.name,
        local.version,
        remote.version,
        tie_break.value,
    )
    return local if tie_break is TieBreak.LOCAL else remote


def _union_names(
    local: Mapping[str, DependencyEntry], remote: Mapping[str, DependencyEntry]
) -> list[str]:
    names = list(local)
    names.extend(name for name in remote if name not in local)
    return names


def _merge_table(
    local_doc: TOMLDocument,
    remote_doc: TOMLDocument,
    table: str,
    tie_break: TieBreak,
) -> None:
    local_table = _dependency_table(local_doc, table, side="local")
    local_deps = _entries_from_table(local_table, table)
    remote_deps = _entries_from_table(_dependency_table(remote_doc, table, side="remote"), table)

    target: Any = local_table
    for name in _union_names(local_deps, remote_deps):
        local_entry = local_deps.get(name)
        remote_entry = remote_deps.get(name)

        if remote_entry is None:
            continue
        if local_entry is None:
            logger.debug("[%s] %s only on remote side, adding %s", table, name, remote_entry.version)
            target[name] = remote_entry.raw
            continue

        winner = pick_winner(local_entry, remote_entry, tie_break)
        if winner is local_entry:
            logger.debug("[%s] %s keeps local %s", table, name, local_entry.version)
            continue

        logger.debug(
            "[%s] %s takes remote %s over local %s",
            table,
            name,
            remote_entry.version,
            local_entry.version,
        )
        target[name] = remote_entry.raw


def merge_manifests(
    local: str,
    remote: str,
    *,
    tables: Iterable[str] = DEFAULT_TABLES,
    tie_break: TieBreak = TieBreak.REMOTE,
) -> str:
    """Merge the dependency tables of two manifest revisions.

    Pure and deterministic: no filesystem access, same inputs give the same
    output. The result is the local document with each dependency replaced by
    the winning side's full entry. Entries present on only one side are kept
    as they are; remote-only entries are appended to the table.

    Args:
        local: Text of the local ("ours") revision
        remote: Text of the remote ("theirs") revision
        tables: Names of the top-level dependency tables to merge. The first
            must exist on both sides; the others may be missing on either
        tie_break: Policy for equal or incomparable requirements

    Returns:
        The merged manifest text

    Raises:
        ManifestParseError: If either revision or a present listed table is
            malformed, or the first table is missing
    """
    local_doc = _parse_document(local, side="local")
    remote_doc = _parse_document(remote, side="remote")

    names = list(tables)
    if not names:
        raise ValueError("At least one dependency table is required")
    primary, *extra = names
    _merge_table(local_doc, remote_doc, primary, tie_break)
    for table in extra:
        if table not in remote_doc:
            continue
        if table not in local_doc:
            # Validate before taking the remote table whole.
            _entries_from_table(_dependency_table(remote_doc, table, side="remote"), table)
            logger.debug("[%s] only on remote side, adding it", table)
            local_doc[table] = remote_doc[table]
            continue
        _merge_table(local_doc, remote_doc, table, tie_break)

    return tomlkit.dumps(local_doc)
