"""Data models for operator bundles and the inputs of bundle validation.

These are plain, read-only containers. The loader builds them from disk,
the deprecation detector reads them, and validation rules consume them
without mutating anything.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from k8s_bundle_cli.constants import KUBE_MAX_ANNOTATION
from k8s_bundle_cli.errors import InvalidVersionError
from k8s_bundle_cli.versions import KubeVersion, parse_tolerant


@dataclass(frozen=True)
class ManifestObject:
    """A single Kubernetes manifest document.

    Attributes:
        api_version: The document's apiVersion (e.g., "apiextensions.k8s.io/v1").
        kind: The document's kind (e.g., "CustomResourceDefinition").
        name: metadata.name, empty when the document has none.
        raw: The parsed document as loaded.
    """

    api_version: str
    kind: str
    name: str
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, doc: Mapping[str, Any]) -> ManifestObject:
        """Build a ManifestObject from a parsed YAML document.

        Raises:
            ValueError: If metadata is not a mapping.
        """
        metadata = _metadata(doc)
        return cls(
            api_version=str(doc.get("apiVersion", "")),
            kind=str(doc.get("kind", "")),
            name=str(metadata.get("name", "")),
            raw=doc,
        )


def _metadata(doc: Mapping[str, Any]) -> Mapping[str, Any]:
    metadata = doc.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        raise ValueError("metadata must be a mapping")
    return metadata


def string_map(value: Any, field_name: str) -> dict[str, str]:
    """Check that an annotations block maps strings to strings.

    A null value reads as an empty string. Any other non-string value is
    rejected rather than converted: YAML reads an unquoted ``1.30`` as the
    float 1.3, and ``str()`` of it would silently change the version.

    Args:
        value: The parsed block (None is treated as empty).
        field_name: Dotted path used in error messages.

    Returns:
        The block as a plain dict of strings.

    Raises:
        ValueError: If the block is not a mapping or holds a non-string value.
    """
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{field_name} must be a mapping")

    result: dict[str, str] = {}
    for key, item in value.items():
        if item is None:
            item = ""
        elif not isinstance(item, str):
            raise ValueError(
                f'{field_name}["{key}"] must be a string, got {type(item).__name__} '
                f"{item!r} (quote the value)"
            )
        result[str(key)] = item
    return result


@dataclass(frozen=True)
class BundleDescriptor(ManifestObject):
    """The bundle's ClusterServiceVersion.

    Attributes:
        annotations: metadata.annotations of the CSV (string keys and values).
    """

    annotations: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, doc: Mapping[str, Any]) -> BundleDescriptor:
        """Build a BundleDescriptor from a parsed CSV document.

        Raises:
            ValueError: If metadata or metadata.annotations is malformed.
        """
        metadata = _metadata(doc)
        return cls(
            api_version=str(doc.get("apiVersion", "")),
            kind=str(doc.get("kind", "")),
            name=str(metadata.get("name", "")),
            raw=doc,
            annotations=string_map(metadata.get("annotations"), "metadata.annotations"),
        )

    def with_annotations(self, annotations: Mapping[str, str]) -> BundleDescriptor:
        """Return a copy of this descriptor carrying different annotations."""
        return BundleDescriptor(
            api_version=self.api_version,
            kind=self.kind,
            name=self.name,
            raw=self.raw,
            annotations=dict(annotations),
        )


@dataclass(frozen=True)
class Bundle:
    """An operator bundle: a CSV plus the manifests shipped with it.

    Attributes:
        name: Bundle name (the CSV's metadata.name).
        csv: The ClusterServiceVersion, or None when absent.
        crds: CustomResourceDefinitions shipped in the bundle.
        objects: Every other manifest in the bundle.
        annotations: Bundle-level annotations from metadata/annotations.yaml.
    """

    name: str
    csv: BundleDescriptor | None
    crds: tuple[ManifestObject, ...] = ()
    objects: tuple[ManifestObject, ...] = ()
    annotations: Mapping[str, str] = field(default_factory=dict)

    def objects_to_validate(self) -> list[ManifestObject]:
        """Return the full object set to scan: CSV, CRDs, then other objects."""
        objs: list[ManifestObject] = []
        if self.csv is not None:
            objs.append(self.csv)
        objs.extend(self.crds)
        objs.extend(self.objects)
        return objs


@dataclass(frozen=True)
class DeprecationSignal:
    """Outcome of deprecated-API detection for one bundle.

    An empty message means nothing deprecated was found.
    """

    message: str = ""

    @property
    def detected(self) -> bool:
        return bool(self.message)


class DeclaredState(Enum):
    """What the max-kube-version annotation held."""

    ABSENT = "absent"
    PARSED = "parsed"
    INVALID = "invalid"


@dataclass(frozen=True)
class DeclaredMaxVersion:
    """The max Kubernetes version a CSV declares through its annotation.

    Attributes:
        state: ABSENT (missing or empty), PARSED, or INVALID.
        raw: Annotation value exactly as written ("" when absent).
        version: Parsed version when state is PARSED.
        reason: Parser failure text when state is INVALID.
    """

    state: DeclaredState
    raw: str = ""
    version: KubeVersion | None = None
    reason: str | None = None

    @classmethod
    def from_annotations(cls, annotations: Mapping[str, str]) -> DeclaredMaxVersion:
        """Read and parse the max-kube-version annotation.

        A missing key and an empty value are the same thing.
        """
        raw = annotations.get(KUBE_MAX_ANNOTATION, "") or ""
        if not raw:
            return cls(state=DeclaredState.ABSENT)
        try:
            version = parse_tolerant(raw)
        except InvalidVersionError as e:
            return cls(state=DeclaredState.INVALID, raw=raw, reason=e.reason)
        return cls(state=DeclaredState.PARSED, raw=raw, version=version)
