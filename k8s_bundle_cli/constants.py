"""Shared constants for the k8s-bundle CLI.

This module contains constants that are used across multiple modules
to avoid duplication and ensure consistency.
"""

from __future__ import annotations

# CSV annotation declaring the highest Kubernetes version the bundle supports
KUBE_MAX_ANNOTATION: str = "operators.operatorframework.io/maxKubeVersion"

# Kubernetes version where the v1beta1 APIs are no longer served
K8S_VERSION_REMOVED: str = "1.22.0"

# Last Kubernetes version that still serves the v1beta1 APIs
K8S_VERSION_SUPPORTED: str = "1.21.0"

# Upstream guide linked from the deprecation summary
DEPRECATION_GUIDE_URL: str = "https://kubernetes.io/docs/reference/using-api/deprecation-guide/#v1-22"

# Manifest file extensions read by the loader
MANIFEST_EXTENSIONS: frozenset[str] = frozenset({".yaml", ".yml", ".json"})

# Well-known bundle layout
MANIFESTS_DIR: str = "manifests"
METADATA_DIR: str = "metadata"
ANNOTATIONS_FILENAME: str = "annotations.yaml"

CSV_KIND: str = "ClusterServiceVersion"
CRD_KIND: str = "CustomResourceDefinition"
