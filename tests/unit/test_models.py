"""Unit tests for bundle data models."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from k8s_bundle_cli.constants import KUBE_MAX_ANNOTATION
from k8s_bundle_cli.models import (
    Bundle,
    BundleDescriptor,
    DeclaredMaxVersion,
    DeclaredState,
    DeprecationSignal,
    ManifestObject,
    string_map,
)
from k8s_bundle_cli.versions import KubeVersion


class TestManifestObject:
    @pytest.mark.unit
    def test_from_dict(self) -> None:
        doc = {"apiVersion": "v1", "kind": "Service", "metadata": {"name": "metrics"}}
        obj = ManifestObject.from_dict(doc)
        assert (obj.api_version, obj.kind, obj.name) == ("v1", "Service", "metrics")
        assert obj.raw is doc

    @pytest.mark.unit
    def test_from_dict_without_metadata(self) -> None:
        obj = ManifestObject.from_dict({"apiVersion": "v1", "kind": "List"})
        assert obj.name == ""

    @pytest.mark.unit
    def test_from_dict_rejects_list_metadata(self) -> None:
        with pytest.raises(ValueError, match="metadata must be a mapping"):
            ManifestObject.from_dict({"apiVersion": "v1", "kind": "Service", "metadata": ["x"]})


class TestStringMap:
    @pytest.mark.unit
    def test_none_is_empty(self) -> None:
        assert string_map(None, "annotations") == {}

    @pytest.mark.unit
    def test_null_values_become_empty_strings(self) -> None:
        assert string_map({"a": None, "b": "x"}, "annotations") == {"a": "", "b": "x"}

    @pytest.mark.unit
    def test_error_names_the_key(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            string_map({KUBE_MAX_ANNOTATION: 1.3}, "metadata.annotations")
        assert str(exc_info.value) == (
            f'metadata.annotations["{KUBE_MAX_ANNOTATION}"] must be a string, '
            "got float 1.3 (quote the value)"
        )


class TestBundleDescriptor:
    @pytest.mark.unit
    def test_reads_annotations(self) -> None:
        csv = BundleDescriptor.from_dict(
            {
                "apiVersion": "operators.coreos.com/v1alpha1",
                "kind": "ClusterServiceVersion",
                "metadata": {
                    "name": "op.v1.0.0",
                    "annotations": {KUBE_MAX_ANNOTATION: "1.21", "empty": None},
                },
            }
        )
        assert csv.name == "op.v1.0.0"
        assert csv.annotations[KUBE_MAX_ANNOTATION] == "1.21"
        assert csv.annotations["empty"] == ""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [1.3, 1, True, ["1.21"]])
    def test_rejects_non_string_annotation(self, value: object) -> None:
        # An unquoted 1.30 in YAML arrives here as the float 1.3
        doc = {"metadata": {"name": "op", "annotations": {KUBE_MAX_ANNOTATION: value}}}
        with pytest.raises(ValueError, match="must be a string"):
            BundleDescriptor.from_dict(doc)

    @pytest.mark.unit
    def test_rejects_non_mapping_annotations(self) -> None:
        with pytest.raises(ValueError, match="metadata.annotations must be a mapping"):
            BundleDescriptor.from_dict({"metadata": {"name": "op", "annotations": ["a", "b"]}})

    @pytest.mark.unit
    def test_missing_annotations(self) -> None:
        csv = BundleDescriptor.from_dict({"kind": "ClusterServiceVersion", "metadata": {}})
        assert csv.annotations == {}

    @pytest.mark.unit
    def test_with_annotations_returns_copy(self) -> None:
        csv = BundleDescriptor(api_version="v", kind="ClusterServiceVersion", name="op")
        updated = csv.with_annotations({KUBE_MAX_ANNOTATION: "1.21.0"})
        assert csv.annotations == {}
        assert updated.annotations == {KUBE_MAX_ANNOTATION: "1.21.0"}
        assert updated.name == "op"


class TestBundle:
    @pytest.mark.unit
    def test_objects_to_validate_order(self, make_bundle: Callable[..., Bundle]) -> None:
        service = ManifestObject(api_version="v1", kind="Service", name="svc")
        base = make_bundle()
        bundle = Bundle(name=base.name, csv=base.csv, crds=base.crds, objects=(service,))
        kinds = [o.kind for o in bundle.objects_to_validate()]
        assert kinds == ["ClusterServiceVersion", "CustomResourceDefinition", "Service"]

    @pytest.mark.unit
    def test_objects_to_validate_without_csv(self) -> None:
        assert Bundle(name="x", csv=None).objects_to_validate() == []


class TestDeprecationSignal:
    @pytest.mark.unit
    def test_detected_follows_message(self) -> None:
        assert not DeprecationSignal().detected
        assert not DeprecationSignal("").detected
        assert DeprecationSignal("removed APIs in use").detected


class TestDeclaredMaxVersion:
    @pytest.mark.unit
    @pytest.mark.parametrize("annotations", [{}, {KUBE_MAX_ANNOTATION: ""}])
    def test_absent(self, annotations: dict[str, str]) -> None:
        declared = DeclaredMaxVersion.from_annotations(annotations)
        assert declared.state is DeclaredState.ABSENT
        assert declared.raw == ""

    @pytest.mark.unit
    def test_parsed(self) -> None:
        declared = DeclaredMaxVersion.from_annotations({KUBE_MAX_ANNOTATION: "1.21"})
        assert declared.state is DeclaredState.PARSED
        assert declared.version == KubeVersion(1, 21, 0)
        assert declared.raw == "1.21"

    @pytest.mark.unit
    def test_invalid(self) -> None:
        declared = DeclaredMaxVersion.from_annotations({KUBE_MAX_ANNOTATION: "invalid"})
        assert declared.state is DeclaredState.INVALID
        assert declared.version is None
        assert declared.reason == 'Invalid character(s) found in major number "invalid"'
