"""Validation rule base class and built-in rules.

Each rule checks one publishing requirement for operator bundles. Rules
declare which objects they apply to through ``accepts()``; the runner
offers every object to every rule and skips rules that decline it.

Rules are pure: they read the bundle and the precomputed deprecation
signal, and return a fresh PolicyOutcome. They never raise for policy
violations and never perform I/O.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from k8s_bundle_cli.constants import K8S_VERSION_REMOVED, KUBE_MAX_ANNOTATION
from k8s_bundle_cli.models import (
    Bundle,
    DeclaredMaxVersion,
    DeclaredState,
    DeprecationSignal,
)
from k8s_bundle_cli.validation.results import PolicyOutcome
from k8s_bundle_cli.versions import parse_tolerant

REMOVAL_VERSION = parse_tolerant(K8S_VERSION_REMOVED)


class BundleRule(ABC):
    """Base class for all bundle validation rules.

    Subclasses must define:
        name: Unique identifier for the rule
        description: Human-readable explanation for --verbose

    Subclasses must implement:
        check(): Run the validation and return an outcome
    """

    name: str
    description: str

    def accepts(self, obj: Any) -> bool:
        """Return True if this rule applies to obj."""
        return obj is None or isinstance(obj, Bundle)

    @abstractmethod
    def check(self, bundle: Bundle | None, signal: DeprecationSignal) -> PolicyOutcome:
        """Run this rule against a bundle.

        Args:
            bundle: The bundle to check (None is reported, not raised).
            signal: Deprecated-API findings for the bundle's manifests.

        Returns:
            PolicyOutcome with zero or more diagnostics.
        """
        ...


# ─────────────────────────────────────────────────────────────────────────────
# maxKubeVersion annotation
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class _Inputs:
    bundle: Bundle | None
    signal: DeprecationSignal
    declared: DeclaredMaxVersion


# A step returns the next outcome and whether evaluation stops there
_Step = Callable[[PolicyOutcome, _Inputs], tuple[PolicyOutcome, bool]]


def _csv_name(inputs: _Inputs) -> str:
    if inputs.bundle is None or inputs.bundle.csv is None:
        return ""
    return inputs.bundle.csv.name


def _require_bundle(outcome: PolicyOutcome, inputs: _Inputs) -> tuple[PolicyOutcome, bool]:
    if inputs.bundle is None:
        return outcome.with_error("Bundle is nil"), True
    outcome = outcome.with_name(inputs.bundle.name)
    if inputs.bundle.csv is None:
        return outcome.with_error("Bundle csv is nil", inputs.bundle.name), True
    return outcome, False


def _require_valid_annotation(
    outcome: PolicyOutcome, inputs: _Inputs
) -> tuple[PolicyOutcome, bool]:
    declared = inputs.declared
    if declared.state is not DeclaredState.INVALID:
        return outcome, False
    message = (
        f"{KUBE_MAX_ANNOTATION} metadata.annotation value ({declared.raw}) is invalid. "
        f"Error: {declared.reason} "
    )
    return outcome.with_error(message, _csv_name(inputs)), True


def _skip_without_deprecations(
    outcome: PolicyOutcome, inputs: _Inputs
) -> tuple[PolicyOutcome, bool]:
    return outcome, not inputs.signal.detected


def _require_annotation(outcome: PolicyOutcome, inputs: _Inputs) -> tuple[PolicyOutcome, bool]:
    if inputs.declared.state is not DeclaredState.ABSENT:
        return outcome, False
    message = (
        f"{KUBE_MAX_ANNOTATION} metadata.annotation is not infomed. "
        "This distributions still using the removed APIs then, you **MUST** ensure that its "
        f"CSV has the informative metadata annotation `{KUBE_MAX_ANNOTATION}`. "
        f"More info: {inputs.signal.message}"
    )
    return outcome.with_error(message, _csv_name(inputs)), True


def _require_below_removal(
    outcome: PolicyOutcome, inputs: _Inputs
) -> tuple[PolicyOutcome, bool]:
    declared = inputs.declared
    if declared.version is None or declared.version < REMOVAL_VERSION:
        return outcome, True
    message = (
        f"invalid value for {KUBE_MAX_ANNOTATION}. "
        f"The K8s version value {declared.raw} is >= of {K8S_VERSION_REMOVED}. "
        f"Note that {inputs.signal.message}"
    )
    return outcome.with_error(message, _csv_name(inputs)), True


MAX_KUBE_VERSION_STEPS: tuple[_Step, ...] = (
    _require_bundle,
    _require_valid_annotation,
    _skip_without_deprecations,
    _require_annotation,
    _require_below_removal,
)


def _run_steps(steps: Sequence[_Step], inputs: _Inputs) -> PolicyOutcome:
    outcome = PolicyOutcome()
    for step in steps:
        outcome, stop = step(outcome, inputs)
        if stop:
            break
    return outcome


def check_max_kube_version_annotation(
    bundle: Bundle | None, signal: DeprecationSignal
) -> PolicyOutcome:
    """Check the maxKubeVersion annotation against deprecated-API usage.

    Order of evaluation, first match wins:
    1. No bundle or no CSV: structural error.
    2. Annotation set but unparsable: error, whatever the signal says.
    3. No deprecated APIs: pass.
    4. Deprecated APIs and no annotation: error.
    5. Deprecated APIs and a declared version >= 1.22.0: error.

    Args:
        bundle: Bundle to check.
        signal: Deprecated-API findings for the bundle.

    Returns:
        PolicyOutcome holding at most one error and no warnings.
    """
    annotations = bundle.csv.annotations if bundle is not None and bundle.csv else {}
    inputs = _Inputs(
        bundle=bundle,
        signal=signal,
        declared=DeclaredMaxVersion.from_annotations(annotations),
    )
    return _run_steps(MAX_KUBE_VERSION_STEPS, inputs)


class MaxKubeVersionRule(BundleRule):
    """Require a maxKubeVersion below 1.22 when removed APIs are in use.

    Bundles that ship v1beta1 manifests cannot install on Kubernetes 1.22+,
    so the CSV must say so through the maxKubeVersion annotation.
    """

    name = "max_kube_version"
    description = f"Verify {KUBE_MAX_ANNOTATION} is set below {K8S_VERSION_REMOVED} for removed APIs"

    def check(self, bundle: Bundle | None, signal: DeprecationSignal) -> PolicyOutcome:
        return check_max_kube_version_annotation(bundle, signal)
