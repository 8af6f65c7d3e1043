"""Tests for contractorcli/cinp/uri.py."""

import pytest

from contractorcli.cinp.uri import build, extract_id, extract_id_list, extract_ids, split


class TestSplit:
    def test_object_uri(self):
        parsed = split("/api/v1/Site/Site:site1:")
        assert parsed.root == "/api/v1/"
        assert parsed.namespace == ["Site"]
        assert parsed.model == "Site"
        assert parsed.ids == ["site1"]
        assert parsed.action is None
        assert parsed.model_uri == "/api/v1/Site/Site"

    def test_multi_object_uri(self):
        parsed = split("/api/v1/Utilities/Address:1:2:3:")
        assert parsed.ids == ["1", "2", "3"]
        assert parsed.is_multi

    def test_action_on_object(self):
        parsed = split("/api/v1/Building/Foundation:f1:(doJob)")
        assert parsed.ids == ["f1"]
        assert parsed.action == "doJob"

    def test_static_action(self):
        parsed = split("/api/v1/Records/Recorder(query)")
        assert parsed.ids == []
        assert parsed.model == "Recorder"
        assert parsed.action == "query"

    def test_namespace_only(self):
        parsed = split("/api/v1/AMT/")
        assert parsed.namespace == ["AMT"]
        assert parsed.model is None

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid CInP URI"):
            split("Site:site1:")


class TestBuild:
    def test_model_only(self):
        assert build("/api/v1/Site/Site") == "/api/v1/Site/Site"

    def test_ids_and_action(self):
        assert build("/api/v1/Utilities/AddressBlock", [1], "usage") == "/api/v1/Utilities/AddressBlock:1:(usage)"

    def test_multi(self):
        assert build("/api/v1/Site/Site", ["a", "b"]) == "/api/v1/Site/Site:a:b:"


class TestExtract:
    def test_extract_id(self):
        assert extract_id("/api/v1/Site/Site:site1:") == "site1"

    @pytest.mark.parametrize("value", [None, "", "/api/v1/Site/Site"])
    def test_extract_id_empty(self, value):
        assert extract_id(value) == ""

    def test_extract_id_list(self):
        assert extract_id_list(["/api/v1/Site/Site:a:", "/api/v1/Site/Site:b:"]) == "a,b"
        assert extract_id_list(None) == ""

    def test_extract_ids_flattens_multi(self):
        assert extract_ids(["/api/v1/Site/Site:a:b:", "/api/v1/Site/Site:c:"]) == ["a", "b", "c"]
