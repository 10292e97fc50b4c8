"""k8s-bundle CLI - Check operator bundles against community catalog criteria."""

from k8s_bundle_cli.cli import cli
from k8s_bundle_cli.loader import load_bundle
from k8s_bundle_cli.validation import check, check_max_kube_version_annotation

__all__ = [
    "check",
    "check_max_kube_version_annotation",
    "cli",
    "load_bundle",
]
