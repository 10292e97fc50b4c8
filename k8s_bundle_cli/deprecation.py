"""Detection of Kubernetes APIs removed in v1.22.

Validation rules never call a detector themselves. The validation runner
calls one against a bundle's manifests and hands the rules the resulting
DeprecationSignal. Any object with a ``detect(objects)`` method can stand
in for the default RemovedApisDetector.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from k8s_bundle_cli.constants import CRD_KIND, DEPRECATION_GUIDE_URL
from k8s_bundle_cli.models import DeprecationSignal, ManifestObject

logger = logging.getLogger(__name__)

# (apiVersion, kind) pairs no longer served from Kubernetes v1.22
REMOVED_IN_1_22: frozenset[tuple[str, str]] = frozenset(
    {
        ("admissionregistration.k8s.io/v1beta1", "MutatingWebhookConfiguration"),
        ("admissionregistration.k8s.io/v1beta1", "ValidatingWebhookConfiguration"),
        ("apiextensions.k8s.io/v1beta1", "CustomResourceDefinition"),
        ("apiregistration.k8s.io/v1beta1", "APIService"),
        ("authentication.k8s.io/v1beta1", "TokenReview"),
        ("authorization.k8s.io/v1beta1", "LocalSubjectAccessReview"),
        ("authorization.k8s.io/v1beta1", "SelfSubjectAccessReview"),
        ("authorization.k8s.io/v1beta1", "SubjectAccessReview"),
        ("certificates.k8s.io/v1beta1", "CertificateSigningRequest"),
        ("coordination.k8s.io/v1beta1", "Lease"),
        ("extensions/v1beta1", "Ingress"),
        ("networking.k8s.io/v1beta1", "Ingress"),
        ("networking.k8s.io/v1beta1", "IngressClass"),
        ("rbac.authorization.k8s.io/v1beta1", "ClusterRole"),
        ("rbac.authorization.k8s.io/v1beta1", "ClusterRoleBinding"),
        ("rbac.authorization.k8s.io/v1beta1", "Role"),
        ("rbac.authorization.k8s.io/v1beta1", "RoleBinding"),
        ("scheduling.k8s.io/v1beta1", "PriorityClass"),
        ("storage.k8s.io/v1beta1", "CSIDriver"),
        ("storage.k8s.io/v1beta1", "CSINode"),
        ("storage.k8s.io/v1beta1", "StorageClass"),
        ("storage.k8s.io/v1beta1", "VolumeAttachment"),
    }
)

DEPRECATION_SUMMARY = (
    "this bundle is using APIs which were deprecated and removed in v1.22. "
    f"More info: {DEPRECATION_GUIDE_URL}. Migrate the API(s) for "
)


@dataclass(frozen=True)
class DetectionResult:
    """Findings of one detector pass.

    Attributes:
        name: What was checked.
        warnings: Human-readable findings, in the order they were produced.
    """

    name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)


class DeprecationDetector(Protocol):
    """Anything that can scan manifests for deprecated APIs."""

    def detect(self, objects: Sequence[ManifestObject]) -> list[DetectionResult]: ...


def _quote_names(names: Iterable[str]) -> str:
    # Rendered as a bracketed, space-separated list of quoted names: ["a" "b"]
    quoted = []
    for name in names:
        escaped = name.replace("\\", "\\\\").replace('"', '\\"')
        quoted.append(f'"{escaped}"')
    return "[" + " ".join(quoted) + "]"


def _kind_label(kind: str) -> str:
    return "CRD" if kind == CRD_KIND else kind


class RemovedApisDetector:
    """Flag manifests whose apiVersion/kind was removed in Kubernetes v1.22."""

    name = "deprecated APIs"

    def __init__(self, removed: frozenset[tuple[str, str]] = REMOVED_IN_1_22) -> None:
        self.removed = removed

    def detect(self, objects: Sequence[ManifestObject]) -> list[DetectionResult]:
        """Scan objects and summarize removed-API usage.

        Returns:
            A single result with one warning when anything was found,
            otherwise an empty list.
        """
        found: dict[str, list[str]] = {}
        for obj in objects:
            if (obj.api_version, obj.kind) not in self.removed:
                continue
            logger.debug("Removed API %s %s used by %r", obj.api_version, obj.kind, obj.name)
            names = found.setdefault(_kind_label(obj.kind), [])
            if obj.name not in names:
                names.append(obj.name)

        if not found:
            return []

        detail = ",".join(f"{kind}: ({_quote_names(names)})" for kind, names in found.items())
        return [DetectionResult(name=self.name, warnings=(DEPRECATION_SUMMARY + detail,))]


def signal_from_results(results: Iterable[DetectionResult]) -> DeprecationSignal:
    """Collapse detector results into one signal.

    When several warnings are reported the last one seen wins.
    """
    message = ""
    for result in results:
        for warning in result.warnings:
            message = warning
    return DeprecationSignal(message=message)
