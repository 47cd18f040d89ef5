"""Tests for the resource kind registry and cluster-scoped narrowing."""

from __future__ import annotations

import pytest

from kube_ns_dump.resources import (
    DEFAULT_KINDS,
    DEFAULT_SKIP_TYPES,
    ResourceKind,
    merge_kinds,
    narrow_to_namespace,
    select_kinds,
    typed_items,
)


class TestResourceKind:
    @pytest.mark.parametrize(
        "kind,namespace,expected",
        [
            (ResourceKind("configmaps"), "default", "/api/v1/namespaces/default/configmaps"),
            (ResourceKind("jobs", "batch", "v1"), "ci", "/apis/batch/v1/namespaces/ci/jobs"),
            (ResourceKind("persistentvolumes", namespaced=False), "default", "/api/v1/persistentvolumes"),
            (
                ResourceKind("storageclasses", "storage.k8s.io", "v1", namespaced=False),
                "default",
                "/apis/storage.k8s.io/v1/storageclasses",
            ),
            (ResourceKind("secrets"), None, "/api/v1/secrets"),
        ],
    )
    def test_list_path(self, kind: ResourceKind, namespace: str | None, expected: str) -> None:
        assert kind.list_path(namespace) == expected

    def test_api_version(self) -> None:
        assert ResourceKind("services").api_version == "v1"
        assert ResourceKind("ingresses", "networking.k8s.io", "v1").api_version == "networking.k8s.io/v1"

    def test_is_frozen(self) -> None:
        kind = ResourceKind("services")
        with pytest.raises(AttributeError):
            kind.plural = "other"  # type: ignore[misc]


class TestDefaultKinds:
    def test_plurals_are_unique(self) -> None:
        plurals = [k.plural for k in DEFAULT_KINDS]
        assert len(plurals) == len(set(plurals))

    def test_covers_the_classic_set(self) -> None:
        plurals = {k.plural for k in DEFAULT_KINDS}
        for expected in ("configmaps", "deployments", "secrets", "services", "statefulsets", "thirdpartyresources"):
            assert expected in plurals

    def test_default_skip_types_are_known_kinds(self) -> None:
        plurals = {k.plural for k in DEFAULT_KINDS}
        assert set(DEFAULT_SKIP_TYPES) <= plurals


class TestSelectKinds:
    def test_drops_skipped(self) -> None:
        selected = select_kinds(DEFAULT_KINDS, ["secrets", "serviceaccounts"])
        plurals = {k.plural for k in selected}
        assert "secrets" not in plurals
        assert "serviceaccounts" not in plurals
        assert len(selected) == len(DEFAULT_KINDS) - 2

    def test_unknown_skip_type_is_ignored(self) -> None:
        assert select_kinds(DEFAULT_KINDS, ["widgets"]) == list(DEFAULT_KINDS)

    def test_preserves_order(self) -> None:
        kinds = [ResourceKind("b"), ResourceKind("a"), ResourceKind("c")]
        assert [k.plural for k in select_kinds(kinds, ["a"])] == ["b", "c"]


class TestMergeKinds:
    def test_appends_new_kinds(self) -> None:
        extra = ResourceKind("certificates", "cert-manager.io", "v1")
        merged = merge_kinds(DEFAULT_KINDS, [extra])
        assert merged[-1] == extra
        assert len(merged) == len(DEFAULT_KINDS) + 1

    def test_replaces_kind_with_same_plural(self) -> None:
        override = ResourceKind("cronjobs", "batch", "v1beta1")
        merged = merge_kinds(DEFAULT_KINDS, [override])
        assert len(merged) == len(DEFAULT_KINDS)
        assert next(k for k in merged if k.plural == "cronjobs").version == "v1beta1"


class TestNarrowToNamespace:
    def test_persistent_volumes_follow_claim_namespace(self) -> None:
        pvs = [
            {"metadata": {"name": "pv-a"}, "spec": {"claimRef": {"namespace": "team-a", "name": "data"}}},
            {"metadata": {"name": "pv-b"}, "spec": {"claimRef": {"namespace": "team-b", "name": "data"}}},
            {"metadata": {"name": "pv-free"}, "spec": {}},
        ]
        result = narrow_to_namespace("persistentvolumes", pvs, "team-a", [])
        assert [pv["metadata"]["name"] for pv in result] == ["pv-a"]

    def test_storage_classes_follow_claims(self) -> None:
        classes = [{"metadata": {"name": "fast"}}, {"metadata": {"name": "slow"}}]
        claims = [{"spec": {"storageClassName": "fast"}}, {"spec": {}}]
        result = narrow_to_namespace("storageclasses", classes, "team-a", claims)
        assert [sc["metadata"]["name"] for sc in result] == ["fast"]

    def test_storage_classes_without_claims(self) -> None:
        classes = [{"metadata": {"name": "fast"}}]
        assert narrow_to_namespace("storageclasses", classes, "team-a", []) == []

    def test_other_cluster_kinds_pass_through(self) -> None:
        items = [{"metadata": {"name": "restricted"}}]
        assert narrow_to_namespace("podsecuritypolicies", items, "team-a", []) == items


class TestTypedItems:
    def test_fills_kind_and_api_version(self) -> None:
        document = {"kind": "DeploymentList", "apiVersion": "apps/v1", "items": [{"metadata": {"name": "web"}}]}
        items = typed_items(document, ResourceKind("deployments", "apps", "v1"))
        assert items == [{"kind": "Deployment", "apiVersion": "apps/v1", "metadata": {"name": "web"}}]

    def test_keeps_existing_type_meta(self) -> None:
        document = {
            "kind": "List",
            "apiVersion": "v1",
            "items": [{"kind": "Widget", "apiVersion": "example.com/v1", "metadata": {"name": "w"}}],
        }
        items = typed_items(document, ResourceKind("widgets", "example.com", "v1"))
        assert items[0]["kind"] == "Widget"
        assert items[0]["apiVersion"] == "example.com/v1"

    def test_falls_back_to_kind_api_version(self) -> None:
        items = typed_items({"items": [{"metadata": {"name": "x"}}]}, ResourceKind("jobs", "batch", "v1"))
        assert items == [{"apiVersion": "batch/v1", "metadata": {"name": "x"}}]

    def test_does_not_mutate_input(self) -> None:
        item = {"metadata": {"name": "cm"}}
        typed_items({"kind": "ConfigMapList", "items": [item]}, ResourceKind("configmaps"))
        assert item == {"metadata": {"name": "cm"}}
