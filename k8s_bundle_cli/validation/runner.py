"""Validation runner that offers objects to every registered rule."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from k8s_bundle_cli.deprecation import DeprecationDetector, RemovedApisDetector, signal_from_results
from k8s_bundle_cli.loader import load_bundle
from k8s_bundle_cli.models import Bundle, DeprecationSignal
from k8s_bundle_cli.validation.results import PolicyOutcome, ValidationReport
from k8s_bundle_cli.validation.rules import BundleRule, MaxKubeVersionRule

logger = logging.getLogger(__name__)

# Immutable tuple to prevent accidental mutation
DEFAULT_RULES: tuple[BundleRule, ...] = (MaxKubeVersionRule(),)


def detect_deprecations(
    bundle: Bundle | None, detector: DeprecationDetector | None = None
) -> DeprecationSignal:
    """Run a detector over a bundle's manifests and collapse its findings."""
    if bundle is None:
        return DeprecationSignal()
    if detector is None:
        detector = RemovedApisDetector()
    return signal_from_results(detector.detect(bundle.objects_to_validate()))


def validate(
    *objs: Any,
    rules: Sequence[BundleRule] | None = None,
    detector: DeprecationDetector | None = None,
) -> list[PolicyOutcome]:
    """Run rules against objects.

    Every object is offered to every rule; rules that do not accept the
    object are skipped.

    Args:
        *objs: Objects to validate (bundles, or anything else).
        rules: Optional sequence of rules to run. Defaults to DEFAULT_RULES.
        detector: Deprecated-API detector. Defaults to RemovedApisDetector.

    Returns:
        Outcomes in object-then-rule order.
    """
    if rules is None:
        rules = DEFAULT_RULES

    outcomes: list[PolicyOutcome] = []
    for obj in objs:
        accepting = [rule for rule in rules if rule.accepts(obj)]
        if not accepting:
            logger.debug("No rule accepts %s, skipping", type(obj).__name__)
            continue
        signal = detect_deprecations(obj, detector)
        for rule in accepting:
            logger.debug("Running rule %s", rule.name)
            outcomes.append(rule.check(obj, signal))

    return outcomes


def validate_bundle(
    bundle: Bundle | None,
    *,
    rules: Sequence[BundleRule] | None = None,
    detector: DeprecationDetector | None = None,
) -> ValidationReport:
    """Validate one bundle and aggregate the outcomes into a report."""
    return ValidationReport(outcomes=validate(bundle, rules=rules, detector=detector))


def check(
    bundle_path: Path,
    *,
    rules: Sequence[BundleRule] | None = None,
    detector: DeprecationDetector | None = None,
) -> ValidationReport:
    """Load a bundle directory and validate it.

    Raises:
        BundleError: If the bundle cannot be loaded.
    """
    bundle = load_bundle(bundle_path)
    return validate_bundle(bundle, rules=rules, detector=detector)
