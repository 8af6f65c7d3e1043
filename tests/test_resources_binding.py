"""Tests for the generic resource binding against the in-memory server."""

from __future__ import annotations

import pytest

from contractorcli.core.exceptions import ArgumentError, NotFoundError, UnboundResourceError, ValidationError
from contractorcli.resources import Contractor
from contractorcli.resources import catalog
from contractorcli.resources.kinds import ActionSpec, ResourceKind, kind


@pytest.fixture
def contractor(fake, contractor_config):
    session = Contractor(contractor_config, transport=fake.transport())
    session.open()
    yield session
    session.close()


class TestResourceKind:
    def test_undeclared_create_field(self):
        with pytest.raises(ValueError, match="not declared"):
            kind("Thing", "/api/v1/Test/Thing", fields=("a",), create=("a", "b"), update=())

    def test_create_only_fields(self):
        assert catalog.SITE.create_only_fields == ("name",)

    def test_namespace_uri(self):
        assert catalog.AMT_FOUNDATION.namespace_uri == "/api/v1/AMT/"

    def test_unknown_action(self):
        with pytest.raises(KeyError, match="no action 'explode'"):
            catalog.SITE.action("explode")

    def test_catalog_types(self):
        assert isinstance(catalog.RECORDER.action("query"), ActionSpec)
        assert isinstance(catalog.SITE, ResourceKind)


class TestAccessor:
    def test_object_uri(self, contractor):
        accessor = contractor.accessor(catalog.SITE)
        assert accessor.object_uri("site1") == "/api/v1/Site/Site:site1:"
        assert accessor.object_uri("/api/v1/Site/Site:site1:") == "/api/v1/Site/Site:site1:"
        with pytest.raises(ArgumentError):
            accessor.object_uri("")

    def test_accessor_by_name(self, contractor):
        assert contractor.accessor("Site") is contractor.accessor(catalog.SITE)
        with pytest.raises(ArgumentError, match="Unknown resource kind"):
            contractor.accessor("Nope")

    def test_create_sends_only_create_fields(self, contractor, fake):
        resource = contractor.accessor(catalog.SITE).new(name="site1", description="d")
        resource.values["created"] = "yesterday"
        resource.create()

        assert resource.uri == "/api/v1/Site/Site:site1:"
        assert resource.id == "site1"
        assert fake.verbs("CREATE")[0][3] == {"name": "site1", "description": "d"}

    def test_unknown_field_rejected_locally(self, contractor):
        resource = contractor.accessor(catalog.SITE).new()
        with pytest.raises(ArgumentError, match="no field 'colour'"):
            resource["colour"] = "blue"

    def test_list_is_restartable(self, contractor, fake):
        fake.add("Site", name="a")
        fake.add("Site", name="b")
        accessor = contractor.accessor(catalog.SITE)

        assert [item.id for item in accessor.list()] == ["a", "b"]
        assert [item.id for item in accessor.list()] == ["a", "b"]

    def test_list_filter(self, contractor, fake):
        fake.add("Site", name="a", parent="/api/v1/Site/Site:root:")
        fake.add("Site", name="b")
        items = contractor.accessor(catalog.SITE).list("parent", {"parent": "/api/v1/Site/Site:root:"})
        assert [item.id for item in items] == ["a"]


class TestUpdate:
    def test_update_named_fields_only(self, contractor, fake):
        fake.add("Site", name="site1", description="old", zone=None)
        resource = contractor.accessor(catalog.SITE).get("site1")
        resource["description"] = "new"
        resource["zone"] = "/api/v1/Site/Zone:z1:"

        resource.update(["description"])

        assert fake.verbs("UPDATE")[0][3] == {"description": "new"}

    def test_ineligible_field(self, contractor, fake):
        fake.add("Site", name="site1")
        resource = contractor.accessor(catalog.SITE).get("site1")

        with pytest.raises(ArgumentError, match="not updatable: name"):
            resource.update(["name"])
        assert fake.verbs("UPDATE") == []

    def test_empty_field_list_is_noop(self, contractor, fake):
        fake.add("Site", name="site1")
        resource = contractor.accessor(catalog.SITE).get("site1")

        assert resource.update([]) is resource
        assert fake.verbs("UPDATE") == []

    def test_unbound(self, contractor):
        resource = contractor.accessor(catalog.SITE).new(name="x")
        with pytest.raises(UnboundResourceError):
            resource.update(["description"])
        with pytest.raises(UnboundResourceError):
            resource.delete()

    def test_server_rejection(self, contractor, fake):
        fake.add("Network", 2, name="lan")
        resource = contractor.accessor(catalog.NETWORK).get(2)
        with pytest.raises(ValidationError) as exc_info:
            contractor.client.update(resource.uri, {"created": "x"})
        assert exc_info.value.field_errors == {"created": "not allowed"}


class TestActions:
    def test_instance_action_args_must_match(self, contractor, fake):
        fake.add("Foundation", locator="f1")
        resource = contractor.accessor(catalog.FOUNDATION).get("f1")

        with pytest.raises(ArgumentError, match="missing name"):
            resource.call("doJob")
        with pytest.raises(ArgumentError, match="unexpected force"):
            resource.call("doJob", name="ping", force=True)
        assert [request for request in fake.data_requests if request[0] == "CALL"] == []

    def test_static_action_via_accessor(self, contractor, fake):
        fake.on_action("Recorder", "query", lambda object_id, args: [args["group"]])
        result = contractor.accessor(catalog.RECORDER).call(
            "query", group="Structure", query={}, fields=None, max_results=1
        )
        assert result == ["Structure"]

    def test_instance_action_needs_instance(self, contractor):
        with pytest.raises(ArgumentError, match="must be called on an instance"):
            contractor.accessor(catalog.FOUNDATION).call("getJob")


class TestSupportedTypes:
    def test_filters_missing_and_mismatched(self, contractor, fake):
        fake.namespaces = {"/api/v1/Docker/": "0.1", "/api/v1/Packet/": "1.0"}
        assert contractor.supported_types(catalog.COMPLEX_TYPES) == ["docker"]


class TestLifecycle:
    def test_create_get_delete(self, contractor, fake):
        accessor = contractor.accessor(catalog.PLOT)
        accessor.new(name="rack1", corners="0,0;1,1").create()

        fetched = accessor.get("rack1")
        assert fetched["name"] == "rack1"
        assert fetched["corners"] == "0,0;1,1"

        fetched.delete()
        with pytest.raises(NotFoundError):
            accessor.get("rack1")

    @pytest.mark.parametrize("chunk_size", [1, 3, 50])
    def test_list_returns_each_once(self, contractor, fake, chunk_size):
        for index in range(7):
            fake.add("Plot", name=f"p{index}")
        names = [item.id for item in contractor.accessor(catalog.PLOT).list(chunk_size=chunk_size)]
        assert sorted(names) == [f"p{index}" for index in range(7)]
