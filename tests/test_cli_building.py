"""CLI tests for foundations, structures, complexes and jobs."""

from __future__ import annotations

import json

import pytest

SITE_URI = "/api/v1/Site/Site:site1:"
JOB_URI = "/api/v1/Foreman/FoundationJob:3:"


@pytest.fixture
def building(fake):
    fake.add("Site", name="site1")
    fake.add("FoundationBluePrint", name="fbp", script_map={})
    fake.add("StructureBluePrint", name="sbp", script_map={})
    fake.add(
        "Foundation",
        locator="f1",
        site=SITE_URI,
        blueprint="/api/v1/BluePrint/FoundationBluePrint:fbp:",
        type="Manual",
        state="planned",
    )
    fake.add(
        "Structure",
        4,
        hostname="web01",
        site=SITE_URI,
        blueprint="/api/v1/BluePrint/StructureBluePrint:sbp:",
        foundation="/api/v1/Building/Foundation:f1:",
    )
    return fake


class TestFoundation:
    def test_provider_create_sends_provider_fields(self, invoke, building):
        result = invoke(
            "--json", "foundation", "test", "create", "-l", "t1", "-s", "site1", "-b", "fbp", "-d", "5", "-f", "0"
        )

        assert result.exit_code == 0, result.output
        assert fake_body(building, "CREATE") == {
            "locator": "t1",
            "site": SITE_URI,
            "blueprint": "/api/v1/BluePrint/FoundationBluePrint:fbp:",
            "test_delay_variance": 5,
            "test_fail_likelihood": 0,
        }
        assert json.loads(result.output)["uri"] == "/api/v1/Test/TestFoundation:t1:"

    def test_provider_create_requires_locator(self, invoke, building):
        result = invoke("foundation", "ipmi", "create", "-s", "site1")

        assert result.exit_code == 2
        assert building.verbs("CREATE") == []
        assert "Missing option '--locator'" in result.output

    def test_provider_update_leaves_locator_alone(self, invoke, building):
        building.add("IPMIFoundation", locator="bmc1", ipmi_ip_address="10.0.0.9")

        result = invoke("foundation", "ipmi", "update", "bmc1", "-i", "10.0.0.10", "-o", "ttyS1")

        assert result.exit_code == 0, result.output
        assert fake_body(building, "UPDATE") == {"ipmi_ip_address": "10.0.0.10", "ipmi_sol_port": "ttyS1"}
        assert "IPMI Ip Address:" in result.output

    def test_vm_provider_resolves_complex(self, invoke, building):
        building.add("LibVirtComplex", name="host1")

        result = invoke("foundation", "libvirt", "create", "-l", "vm1", "-x", "host1")

        assert result.exit_code == 0, result.output
        assert fake_body(building, "CREATE") == {
            "locator": "vm1",
            "libvirt_complex": "/api/v1/LibVirt/LibVirtComplex:host1:",
        }

    def test_types_only_lists_loaded_versions(self, invoke, building):
        building.namespaces = {"/api/v1/AMT/": "0.1", "/api/v1/IPMI/": "0.2", "/api/v1/Manual/": "0.1"}

        result = invoke("--json", "foundation", "types")

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"type": ["amt", "manual"]}

    def test_update_generic_fields(self, invoke, building):
        result = invoke("foundation", "update", "f1", "-b", "fbp")

        assert result.exit_code == 0, result.output
        assert fake_body(building, "UPDATE") == {"blueprint": "/api/v1/BluePrint/FoundationBluePrint:fbp:"}

    @pytest.mark.parametrize("flags", [[], ["-c", "-d"], ["-i", "-u", "ping"]])
    def test_job_needs_exactly_one_flag(self, invoke, building, flags):
        result = invoke("foundation", "job", "f1", *flags)

        assert result.exit_code == 1
        assert "Specify exactly one of" in result.output
        assert building.requests == []

    def test_job_utility(self, invoke, building):
        calls = []

        def do_job(object_id, args):
            calls.append((object_id, args))
            return JOB_URI

        building.on_action("Foundation", "doJob", do_job)

        result = invoke("foundation", "job", "f1", "--utility", "ping")

        assert result.exit_code == 0, result.output
        assert calls == [("f1", {"name": "ping"})]
        assert result.output.strip() == f"job:\t{JOB_URI}"

    def test_job_info(self, invoke, building):
        building.add("FoundationJob", 3, foundation="/api/v1/Building/Foundation:f1:", state="waiting")
        building.on_action("Foundation", "getJob", lambda object_id, args: JOB_URI)

        result = invoke("foundation", "job", "f1", "-i")

        assert result.exit_code == 0, result.output
        assert "Foundation:  f1" in result.output
        assert "State:       waiting" in result.output

    def test_job_info_with_base_job_uri(self, invoke, building):
        building.add("FoundationJob", 3, foundation="/api/v1/Building/Foundation:f1:", state="paused")
        building.on_action("Foundation", "getJob", lambda object_id, args: "/api/v1/Foreman/BaseJob:3:")

        result = invoke("foundation", "job", "f1", "--info")

        assert result.exit_code == 0, result.output
        assert "State:       paused" in result.output


class TestStructure:
    def test_create_resolves_references(self, invoke, building):
        result = invoke("structure", "create", "-o", "web02", "-s", "site1", "-b", "sbp", "-f", "f1")

        assert result.exit_code == 0, result.output
        assert fake_body(building, "CREATE") == {
            "hostname": "web02",
            "site": SITE_URI,
            "blueprint": "/api/v1/BluePrint/StructureBluePrint:sbp:",
            "foundation": "/api/v1/Building/Foundation:f1:",
        }

    def test_address_next(self, invoke, building):
        building.add("AddressBlock", 1, name="lan", subnet="10.0.0.0", prefix=24)
        calls = []

        def next_address(object_id, args):
            calls.append((object_id, args))
            return "/api/v1/Utilities/Address:9:"

        building.on_action("AddressBlock", "nextAddress", next_address)

        result = invoke("structure", "address", "next", "4", "-a", "1", "-n", "eth0", "-p")

        assert result.exit_code == 0, result.output
        assert calls == [
            ("1", {"networked": "/api/v1/Utilities/Networked:4:", "interface_name": "eth0", "is_primary": True})
        ]
        assert result.output.strip() == "id:\t/api/v1/Utilities/Address:9:"

    def test_address_list_only_shows_this_structure(self, invoke, building):
        building.add("Address", networked="/api/v1/Utilities/Networked:4:", offset=5, ip_address="10.0.0.5")
        building.add("Address", networked="/api/v1/Utilities/Networked:5:", offset=6, ip_address="10.0.0.6")

        result = invoke("--json", "structure", "address", "list", "4")

        assert result.exit_code == 0, result.output
        assert [item["ip_address"] for item in json.loads(result.output)] == ["10.0.0.5"]

    def test_job_info_without_job(self, invoke, building):
        building.on_action("Structure", "getJob", lambda object_id, args: None)

        result = invoke("structure", "job", "info", "4")

        assert result.exit_code == 1
        assert "No Job for Structure 4" in result.output

    def test_job_state(self, invoke, building):
        building.add("StructureJob", 8, structure="/api/v1/Building/Structure:4:")
        building.on_action("Structure", "getJob", lambda object_id, args: "/api/v1/Foreman/StructureJob:8:")
        building.on_action("StructureJob", "jobRunnerVariables", lambda object_id, args: {"count": 2})
        building.on_action(
            "StructureJob",
            "jobRunnerState",
            lambda object_id, args: {"state": "running", "cur_line": 3, "script": "begin()\nend"},
        )

        result = invoke("structure", "job", "state", "4")

        assert result.exit_code == 0, result.output
        assert "Script State: running" in result.output
        assert "Script Line No: 3" in result.output

    def test_interfaces_sorted_by_id(self, invoke, building):
        building.add("AbstractNetworkInterface", 12, structure="/api/v1/Building/Structure:4:", name="eth1")
        building.add("AbstractNetworkInterface", 2, structure="/api/v1/Building/Structure:4:", name="eth0")

        result = invoke("--json", "structure", "interface", "list", "4")

        assert result.exit_code == 0, result.output
        assert [item["name"] for item in json.loads(result.output)] == ["eth0", "eth1"]


class TestComplex:
    def test_vcenter_create(self, invoke, building):
        result = invoke(
            "complex", "vcenter", "create",
            "-l", "vc1", "-s", "site1", "-u", "admin", "-p", "pw",
            "-a", "dc1", "-c", "cluster1", "-o", "4", "-m", "4",
        )

        assert result.exit_code == 0, result.output
        assert fake_body(building, "CREATE") == {
            "name": "vc1",
            "site": SITE_URI,
            "built_percentage": 80,
            "members": ["/api/v1/Building/Structure:4:"],
            "vcenter_username": "admin",
            "vcenter_password": "pw",
            "vcenter_datacenter": "dc1",
            "vcenter_cluster": "cluster1",
            "vcenter_host": "/api/v1/Building/Structure:4:",
        }

    def test_create_requires_name(self, invoke, building):
        result = invoke("complex", "manual", "create", "-s", "site1")

        assert result.exit_code == 2
        assert "Missing option '--name'" in result.output
        assert building.verbs("CREATE") == []

    def test_update_without_changes_sends_nothing(self, invoke, building):
        building.add("ManualComplex", name="m1")

        result = invoke("complex", "manual", "update", "m1")

        assert result.exit_code == 0, result.output
        assert building.verbs("UPDATE") == []


class TestJob:
    def test_pause(self, invoke, building):
        building.add("FoundationJob", 3, foundation="/api/v1/Building/Foundation:f1:")
        calls = []
        building.on_action("FoundationJob", "pause", lambda object_id, args: calls.append(object_id))

        result = invoke("job", "foundation", "pause", "3")

        assert result.exit_code == 0, result.output
        assert calls == ["3"]
        assert "Job 3: pause requested" in result.output

    def test_list(self, invoke, building):
        building.add("StructureJob", 8, structure="/api/v1/Building/Structure:4:", state="queued")

        result = invoke("job", "structure", "list")

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[2].split()[:3] == ["8", "4", "queued"]


def fake_body(fake, verb):
    """Body of the single request sent with verb."""
    requests = fake.verbs(verb)
    assert len(requests) == 1
    return requests[0][3]
