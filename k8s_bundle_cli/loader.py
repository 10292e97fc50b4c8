"""Load operator bundles from disk.

A bundle directory looks like:

    my-operator/
    ├── manifests/
    │   ├── my-operator.clusterserviceversion.yaml
    │   └── cache.example.com_memcacheds.yaml
    └── metadata/
        └── annotations.yaml

When there is no manifests/ subdirectory, manifest files are read from the
bundle directory itself.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from k8s_bundle_cli.constants import (
    ANNOTATIONS_FILENAME,
    CRD_KIND,
    CSV_KIND,
    MANIFEST_EXTENSIONS,
    MANIFESTS_DIR,
    METADATA_DIR,
)
from k8s_bundle_cli.errors import BundleNotFoundError, ManifestParseError, MissingCsvError
from k8s_bundle_cli.models import Bundle, BundleDescriptor, ManifestObject, string_map

logger = logging.getLogger(__name__)


def _manifest_files(directory: Path) -> list[Path]:
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in MANIFEST_EXTENSIONS
    )


def _read_documents(path: Path) -> Iterator[Mapping[str, Any]]:
    """Yield every mapping document in a (possibly multi-document) YAML file."""
    try:
        docs = list(yaml.safe_load_all(path.read_text(encoding="utf-8")))
    except yaml.YAMLError as e:
        raise ManifestParseError(str(path), str(e)) from e

    for doc in docs:
        if not isinstance(doc, dict):
            # Empty documents (---\n---) and scalars carry no manifest
            continue
        yield doc


def load_bundle_annotations(bundle_path: Path) -> dict[str, str]:
    """Read metadata/annotations.yaml.

    Returns:
        The ``annotations`` mapping, or an empty dict when the file is absent.
    """
    annotations_file = bundle_path / METADATA_DIR / ANNOTATIONS_FILENAME
    if not annotations_file.is_file():
        return {}

    for doc in _read_documents(annotations_file):
        try:
            return string_map(doc.get("annotations"), "annotations")
        except ValueError as e:
            raise ManifestParseError(str(annotations_file), str(e)) from e
    return {}


def _to_object(doc: Mapping[str, Any], path: Path) -> ManifestObject:
    kind = doc.get("kind")
    try:
        if kind == CSV_KIND:
            return BundleDescriptor.from_dict(doc)
        return ManifestObject.from_dict(doc)
    except ValueError as e:
        raise ManifestParseError(str(path), str(e)) from e


def load_bundle(bundle_path: Path) -> Bundle:
    """Load an operator bundle from a directory.

    Args:
        bundle_path: Bundle root directory.

    Returns:
        Bundle with its CSV, CRDs and remaining manifests.

    Raises:
        BundleNotFoundError: If bundle_path is not a directory.
        ManifestParseError: If a manifest file is not valid YAML, or its
            metadata or annotations are not shaped as Kubernetes expects.
        MissingCsvError: If no ClusterServiceVersion manifest is present.
    """
    if not bundle_path.is_dir():
        raise BundleNotFoundError(str(bundle_path))

    manifests_dir = bundle_path / MANIFESTS_DIR
    if not manifests_dir.is_dir():
        manifests_dir = bundle_path

    csv: BundleDescriptor | None = None
    crds: list[ManifestObject] = []
    objects: list[ManifestObject] = []

    for manifest in _manifest_files(manifests_dir):
        logger.debug("Reading manifest %s", manifest)
        for doc in _read_documents(manifest):
            obj = _to_object(doc, manifest)
            if isinstance(obj, BundleDescriptor):
                if csv is not None:
                    logger.warning(
                        "Multiple ClusterServiceVersions in %s, using the last one", bundle_path
                    )
                csv = obj
            elif obj.kind == CRD_KIND:
                crds.append(obj)
            else:
                objects.append(obj)

    if csv is None:
        raise MissingCsvError(str(bundle_path))

    logger.debug(
        "Loaded bundle %s: %d CRD(s), %d other object(s)", csv.name, len(crds), len(objects)
    )

    return Bundle(
        name=csv.name,
        csv=csv,
        crds=tuple(crds),
        objects=tuple(objects),
        annotations=load_bundle_annotations(bundle_path),
    )
