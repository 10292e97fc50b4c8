"""Shared pytest fixtures for k8s-bundle CLI tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from k8s_bundle_cli.constants import KUBE_MAX_ANNOTATION
from k8s_bundle_cli.models import Bundle, BundleDescriptor, DeprecationSignal, ManifestObject

# Summary text produced for the memcached fixture bundle with a v1beta1 CRD
MEMCACHED_DEPRECATION_MESSAGE = (
    "this bundle is using APIs which were deprecated and removed in v1.22. "
    "More info: https://kubernetes.io/docs/reference/using-api/deprecation-guide/#v1-22. "
    'Migrate the API(s) for CRD: (["memcacheds.cache.example.com"])'
)

CSV_NAME = "memcached-operator.v0.0.1"


# =============================================================================
# Fixture Directory Access
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def bundle_v1_dir(fixtures_dir: Path) -> Path:
    """Bundle whose CRD uses apiextensions.k8s.io/v1 (nothing deprecated)."""
    return fixtures_dir / "bundles" / "bundle_v1"


@pytest.fixture
def bundle_v1beta1_dir(fixtures_dir: Path) -> Path:
    """Bundle whose CRD uses apiextensions.k8s.io/v1beta1 (removed in 1.22)."""
    return fixtures_dir / "bundles" / "bundle_v1beta1"


# =============================================================================
# In-memory bundles
# =============================================================================


@pytest.fixture
def make_bundle() -> Callable[..., Bundle]:
    """Factory for in-memory bundles with an optional maxKubeVersion value."""

    def _make(
        max_kube_version: str | None = None, *, crd_api: str = "apiextensions.k8s.io/v1"
    ) -> Bundle:
        annotations = {"capabilities": "Basic Install"}
        if max_kube_version is not None:
            annotations[KUBE_MAX_ANNOTATION] = max_kube_version
        csv = BundleDescriptor(
            api_version="operators.coreos.com/v1alpha1",
            kind="ClusterServiceVersion",
            name=CSV_NAME,
            annotations=annotations,
        )
        crd = ManifestObject(
            api_version=crd_api,
            kind="CustomResourceDefinition",
            name="memcacheds.cache.example.com",
        )
        return Bundle(name=CSV_NAME, csv=csv, crds=(crd,))

    return _make


@pytest.fixture
def deprecated_signal() -> DeprecationSignal:
    """Signal reporting the memcached v1beta1 CRD."""
    return DeprecationSignal(message=MEMCACHED_DEPRECATION_MESSAGE)


@pytest.fixture
def clean_signal() -> DeprecationSignal:
    """Signal reporting no deprecated APIs."""
    return DeprecationSignal()


@pytest.fixture
def write_bundle(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write a bundle directory from a {relative path: YAML text} mapping."""

    def _write(files: dict[str, str]) -> Path:
        root = tmp_path / "bundle"
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        root.mkdir(exist_ok=True)
        return root

    return _write
