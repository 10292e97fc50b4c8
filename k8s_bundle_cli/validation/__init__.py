"""Validation framework for operator bundles.

This module provides the public API for validating bundles:
- check(): Load a bundle directory and run validation rules against it
- validate(): Offer already-loaded objects to every registered rule
- ValidationReport: Aggregate validation outcomes
- BundleRule: Base class for custom rules
"""

from k8s_bundle_cli.validation.results import (
    Diagnostic,
    PolicyOutcome,
    Severity,
    ValidationReport,
)
from k8s_bundle_cli.validation.rules import (
    BundleRule,
    MaxKubeVersionRule,
    check_max_kube_version_annotation,
)
from k8s_bundle_cli.validation.runner import check, validate, validate_bundle

__all__ = [
    "BundleRule",
    "Diagnostic",
    "MaxKubeVersionRule",
    "PolicyOutcome",
    "Severity",
    "ValidationReport",
    "check",
    "check_max_kube_version_annotation",
    "validate",
    "validate_bundle",
]
