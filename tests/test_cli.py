from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import httpx
import pytest
from conftest import FakePhotonAPI, step_payload, task_payload
from typer.testing import CliRunner

import photonctl.cli as cli_module
from photonctl.config import ConfigManager
from photonctl.errors import ConfigError, TaskFailedError

runner = CliRunner()


def _queue_task(api: FakePhotonAPI, *states: str, **kwargs: object) -> None:
    api.add("GET", "/tasks/task-1", *[task_payload("task-1", state, **kwargs) for state in states])


def test_output_and_non_interactive_are_exclusive() -> None:
    result = runner.invoke(cli_module.app, ["-n", "-o", "json", "tenant", "list"])

    assert result.exit_code == 2
    assert "cannot be combined" in result.output


def test_detail_is_exclusive_with_machine_output() -> None:
    result = runner.invoke(cli_module.app, ["-d", "-o", "yaml", "tenant", "list"])

    assert result.exit_code == 2


def test_version() -> None:
    result = runner.invoke(cli_module.app, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "photon 0.4.0"


def test_target_set_and_show(tmp_path: Path) -> None:
    config = tmp_path / "config.yml"

    set_result = runner.invoke(
        cli_module.app,
        ["-c", str(config), "target", "set", "https://10.0.0.5:9000/", "--nocertcheck"],
    )
    show_result = runner.invoke(cli_module.app, ["-c", str(config), "-n", "target", "show"])

    assert set_result.exit_code == 0
    assert "API target set to 'https://10.0.0.5:9000'" in set_result.stdout
    assert show_result.stdout.strip() == "https://10.0.0.5:9000"
    assert ConfigManager(config).load().ignore_certificate is True


def test_target_set_rejects_bare_host(tmp_path: Path) -> None:
    result = runner.invoke(cli_module.app, ["-c", str(tmp_path / "c.yml"), "target", "set", "10.0.0.5"])

    assert result.exit_code == 2


def test_detail_prints_current_selection(tmp_path: Path, photon_api: FakePhotonAPI) -> None:
    config = tmp_path / "config.yml"
    manager = ConfigManager(config)
    manager.set_target("https://photon.example")
    manager.set_tenant("demo", "tenant-1")
    photon_api.add("GET", "/tenants", {"items": []})

    result = runner.invoke(cli_module.app, ["-c", str(config), "-d", "tenant", "list"])

    assert result.exit_code == 0
    assert "Target:  https://photon.example" in result.stdout
    assert "Tenant:  demo (tenant-1)" in result.stdout
    assert "Project: -" in result.stdout


def test_tenant_create_non_interactive_prints_entity_id(photon_api: FakePhotonAPI) -> None:
    photon_api.add("POST", "/tenants", task_payload("task-1", "QUEUED"))
    _queue_task(photon_api, "QUEUED", "STARTED", "COMPLETED")

    result = runner.invoke(cli_module.app, ["-n", "tenant", "create", "demo", "--security-groups", "a,b"])

    assert result.exit_code == 0, result.output
    assert result.stdout == "tenant-1\n"
    create = next(request for request in photon_api.requests if request.method == "POST")
    assert json.loads(create.content) == {"name": "demo", "securityGroups": ["a", "b"]}
    assert photon_api.hits[("GET", "/tasks/task-1")] == 3


def test_tenant_create_human_mode_reports_completion(photon_api: FakePhotonAPI) -> None:
    photon_api.add("POST", "/tenants", task_payload("task-1", "QUEUED"))
    _queue_task(photon_api, "STARTED", "COMPLETED")

    result = runner.invoke(cli_module.app, ["tenant", "create"], input="demo\n")

    assert result.exit_code == 0, result.output
    assert "Tenant name" in result.stdout
    assert "CREATE_TENANT completed for 'tenant' entity tenant-1" in result.stdout


def test_tenant_create_json_output_prints_created_tenant(photon_api: FakePhotonAPI) -> None:
    photon_api.add("POST", "/tenants", task_payload("task-1", "QUEUED"))
    _queue_task(photon_api, "COMPLETED")
    photon_api.add("GET", "/tenants/tenant-1", {"id": "tenant-1", "name": "demo", "securityGroups": []})

    result = runner.invoke(cli_module.app, ["-o", "json", "tenant", "create", "demo"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["id"] == "tenant-1"
    assert payload["name"] == "demo"


def test_tenant_create_missing_name_is_usage_error(photon_api: FakePhotonAPI) -> None:
    result = runner.invoke(cli_module.app, ["-n", "tenant", "create"])

    assert result.exit_code == 2
    assert photon_api.requests == []


def test_failed_task_surfaces_step_errors(photon_api: FakePhotonAPI) -> None:
    photon_api.add("POST", "/tenants", task_payload("task-1", "QUEUED"))
    failed_step = step_payload(0, "ERROR", errors=[{"code": "NameTaken", "message": "duplicate name"}])
    _queue_task(photon_api, "ERROR", steps=[failed_step])

    result = runner.invoke(cli_module.app, ["-n", "tenant", "create", "demo"])

    assert result.exit_code == 1
    assert isinstance(result.exception, TaskFailedError)
    assert "API Errors: NameTaken: duplicate name" in str(result.exception)


def test_tenant_delete_clears_selected_tenant(tmp_path: Path, photon_api: FakePhotonAPI) -> None:
    config = tmp_path / "config.yml"
    manager = ConfigManager(config)
    manager.set_tenant("demo", "tenant-1")
    manager.set_project("web", "project-1")
    photon_api.add("DELETE", "/tenants/tenant-1", task_payload("task-1", "QUEUED", operation="DELETE_TENANT"))
    _queue_task(photon_api, "COMPLETED", operation="DELETE_TENANT")

    result = runner.invoke(cli_module.app, ["-c", str(config), "-n", "tenant", "delete", "tenant-1"])

    assert result.exit_code == 0, result.output
    cfg = manager.load()
    assert cfg.tenant is None
    assert cfg.project is None


def test_delete_can_be_cancelled(photon_api: FakePhotonAPI) -> None:
    result = runner.invoke(cli_module.app, ["vm", "delete", "vm-1"], input="n\n")

    assert result.exit_code == 0
    assert "Canceled" in result.stdout
    assert photon_api.requests == []


def test_tenant_set_stores_selection(tmp_path: Path, photon_api: FakePhotonAPI) -> None:
    config = tmp_path / "config.yml"
    photon_api.add("GET", "/tenants", {"items": [{"id": "tenant-7", "name": "demo"}]})

    result = runner.invoke(cli_module.app, ["-c", str(config), "tenant", "set", "demo"])
    get_result = runner.invoke(cli_module.app, ["-c", str(config), "-n", "tenant", "get"])

    assert result.exit_code == 0, result.output
    assert "Tenant set to 'demo'" in result.stdout
    assert get_result.stdout == "tenant-7\tdemo\n"


def test_task_show_script_output_sorts_steps(photon_api: FakePhotonAPI) -> None:
    photon_api.add(
        "GET",
        "/tasks/task-1",
        task_payload(
            "task-1",
            "COMPLETED",
            operation="CREATE_VM",
            entity_id="vm-1",
            entity_kind="vm",
            steps=[step_payload(1, "COMPLETED", operation="CREATE"), step_payload(0, "COMPLETED", operation="RESERVE")],
            startedTime=1000,
            endTime=5000,
        ),
    )

    result = runner.invoke(cli_module.app, ["-n", "task", "show", "task-1"])

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "task-1\tCOMPLETED\tvm-1\tvm\tCREATE_VM\t1000\t5000\t"
    assert lines[1].startswith("0\tRESERVE\tCOMPLETED")
    assert lines[2].startswith("1\tCREATE\tCOMPLETED")


def test_task_show_human_output(photon_api: FakePhotonAPI) -> None:
    photon_api.add("GET", "/tasks/task-1", task_payload("task-1", "QUEUED", operation="CREATE_VM"))

    result = runner.invoke(cli_module.app, ["task", "show", "task-1"])

    assert result.exit_code == 0, result.output
    assert "Task:        task-1" in result.stdout
    assert "StartedTime: -" in result.stdout
    assert "Steps:" in result.stdout


def test_task_monitor_script_mode(photon_api: FakePhotonAPI) -> None:
    _queue_task(photon_api, "STARTED", "COMPLETED", operation="CREATE_VM", entity_id="vm-1", entity_kind="vm")

    result = runner.invoke(cli_module.app, ["-n", "task", "monitor", "task-1"])

    assert result.exit_code == 0, result.output
    assert result.stdout == "task-1\tCOMPLETED\tvm-1\tvm\n"


def test_task_list_filters_are_sent(photon_api: FakePhotonAPI) -> None:
    photon_api.add("GET", "/tasks", {"items": [task_payload("task-1", "COMPLETED", startedTime=1000, endTime=4000)]})

    result = runner.invoke(cli_module.app, ["-n", "task", "list", "--entity-kind", "vm", "--state", "completed"])

    assert result.exit_code == 0, result.output
    assert result.stdout == "task-1\tCOMPLETED\tCREATE_TENANT\t1000\t3000\n"
    params = photon_api.requests[0].url.params
    assert params["entityKind"] == "vm"
    assert params["state"] == "COMPLETED"


def test_project_scoped_commands_require_a_project(photon_api: FakePhotonAPI) -> None:
    result = runner.invoke(cli_module.app, ["-n", "vm", "list"])

    assert result.exit_code == 1
    assert isinstance(result.exception, ConfigError)
    assert "project set" in str(result.exception)


def test_vm_list_uses_selected_project(photon_api: FakePhotonAPI) -> None:
    photon_api.config["project"] = {"name": "web", "id": "project-1"}
    photon_api.add(
        "GET",
        "/projects/project-1/vms",
        {
            "items": [
                {"id": "vm-1", "name": "db", "state": "STARTED"},
                {"id": "vm-2", "name": "app", "state": "STOPPED"},
            ]
        },
    )

    result = runner.invoke(cli_module.app, ["-n", "vm", "list"])

    assert result.exit_code == 0, result.output
    assert result.stdout == "vm-1\tdb\tSTARTED\nvm-2\tapp\tSTOPPED\n"


def test_vm_networks_reads_task_resource_properties(photon_api: FakePhotonAPI) -> None:
    photon_api.add("GET", "/vms/vm-1/subnets", task_payload("task-1", "QUEUED", operation="GET_NETWORKS"))
    connections = {"networkConnections": [{"network": "net-1", "macAddress": "00:50", "ipAddress": "10.0.0.4"}]}
    _queue_task(photon_api, "COMPLETED", operation="GET_NETWORKS", resourceProperties=connections)

    result = runner.invoke(cli_module.app, ["-n", "vm", "networks", "vm-1"])

    assert result.exit_code == 0, result.output
    assert result.stdout == "net-1\t00:50\t10.0.0.4\t-\t-\n"


def test_cluster_resize_waits_for_ready(photon_api: FakePhotonAPI) -> None:
    photon_api.add("POST", "/clusters/c-1/resize", task_payload("task-1", "QUEUED", operation="RESIZE_CLUSTER"))
    _queue_task(photon_api, "COMPLETED", operation="RESIZE_CLUSTER", entity_id="c-1", entity_kind="cluster")
    photon_api.add(
        "GET",
        "/clusters/c-1",
        {"id": "c-1", "name": "k8s", "state": "RESIZING"},
        {"id": "c-1", "name": "k8s", "state": "READY"},
    )

    result = runner.invoke(cli_module.app, ["-n", "cluster", "resize", "c-1", "3", "--wait-for-ready"])

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["c-1", "Waiting for cluster c-1 to become ready", "Cluster c-1 is ready"]
    resize = next(request for request in photon_api.requests if request.method == "POST")
    assert json.loads(resize.content) == {"newWorkerCount": 3}


def test_service_ready_failure_exits_with_error(photon_api: FakePhotonAPI) -> None:
    photon_api.add("POST", "/services/s-1/resize", task_payload("task-1", "QUEUED", operation="RESIZE_SERVICE"))
    _queue_task(photon_api, "COMPLETED", operation="RESIZE_SERVICE", entity_id="s-1", entity_kind="service")
    photon_api.add("GET", "/services/s-1", {"id": "s-1", "name": "harbor", "state": "ERROR"})

    result = runner.invoke(cli_module.app, ["-n", "service", "resize", "s-1", "2", "--wait-for-ready"])

    assert result.exit_code == 1
    assert isinstance(result.exception, TaskFailedError)
    assert str(result.exception) == "Service s-1 entered ERROR state"


def test_service_list_json(photon_api: FakePhotonAPI) -> None:
    photon_api.config["project"] = {"name": "web", "id": "project-1"}
    photon_api.add(
        "GET",
        "/projects/project-1/services",
        {"items": [{"id": "s-1", "name": "harbor", "type": "HARBOR", "state": "READY", "workerCount": 0}]},
    )

    result = runner.invoke(cli_module.app, ["-o", "json", "service", "list"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)[0]["type"] == "HARBOR"


def test_cluster_create_builds_extended_properties(tmp_path: Path, photon_api: FakePhotonAPI) -> None:
    ssh_key = tmp_path / "id_rsa.pub"
    ssh_key.write_text("ssh-rsa AAAA test@example\n", encoding="utf-8")
    photon_api.config["project"] = {"name": "web", "id": "project-1"}
    photon_api.add("POST", "/projects/project-1/clusters", task_payload("task-1", "QUEUED", operation="CREATE_CLUSTER"))
    _queue_task(photon_api, "COMPLETED", operation="CREATE_CLUSTER", entity_id="c-1", entity_kind="cluster")

    result = runner.invoke(
        cli_module.app,
        [
            "-n",
            "cluster",
            "create",
            "--name",
            "k8s",
            "--type",
            "kubernetes",
            "--dns",
            "10.0.0.1",
            "--gateway",
            "10.0.0.254",
            "--netmask",
            "255.255.255.0",
            "--master-ip",
            "10.0.0.10",
            "--container-network",
            "10.2.0.0/16",
            "--etcd1",
            "10.0.0.11",
            "--etcd3",
            "10.0.0.13",
            "--ssh-key",
            str(ssh_key),
        ],
    )

    assert result.exit_code == 0, result.output
    body = json.loads(next(request for request in photon_api.requests if request.method == "POST").content)
    assert body["type"] == "KUBERNETES"
    assert body["workerCount"] == 1
    assert body["extendedProperties"]["ssh_key"] == "ssh-rsa AAAA test@example"
    assert body["extendedProperties"]["etcd_ip1"] == "10.0.0.11"
    assert "etcd_ip3" not in body["extendedProperties"]


def test_api_errors_reach_the_caller(photon_api: FakePhotonAPI) -> None:
    photon_api.add("GET", "/tenants/t-9", httpx.Response(404, json={"code": "TenantNotFound", "message": "missing"}))

    result = runner.invoke(cli_module.app, ["tenant", "show", "t-9"])

    assert result.exit_code == 1
    assert "TenantNotFound" in str(result.exception)


def _flavor(**extra: object) -> dict[str, object]:
    cost = [{"key": "vm.cpu", "value": 1, "unit": "COUNT"}, {"key": "vm.memory", "value": 2, "unit": "GB"}]
    return {"id": "flavor-1", "name": "small", "kind": "vm", "cost": cost, **extra}


def test_flavor_create_non_interactive_sends_costs(photon_api: FakePhotonAPI) -> None:
    photon_api.add("POST", "/flavors", task_payload("task-1", "QUEUED", operation="CREATE_FLAVOR"))
    _queue_task(photon_api, "STARTED", "COMPLETED", operation="CREATE_FLAVOR", entity_id="flavor-1")

    result = runner.invoke(
        cli_module.app,
        ["-n", "flavor", "create", "-n", "small", "-k", "vm", "-c", "vm.cpu 1 COUNT, vm.memory 2 GB"],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == "flavor-1\n"
    create = next(request for request in photon_api.requests if request.method == "POST")
    assert json.loads(create.content) == {
        "name": "small",
        "kind": "vm",
        "cost": [{"key": "vm.cpu", "value": 1.0, "unit": "COUNT"}, {"key": "vm.memory", "value": 2.0, "unit": "GB"}],
    }


def test_flavor_create_rejects_unknown_kind(photon_api: FakePhotonAPI) -> None:
    result = runner.invoke(cli_module.app, ["-n", "flavor", "create", "-n", "small", "-k", "gpu"])

    assert result.exit_code == 2
    assert "--kind" in result.output
    assert photon_api.requests == []


def test_flavor_create_interactive_lists_costs_and_can_cancel(photon_api: FakePhotonAPI) -> None:
    answers = "small\nephemeral-disk\nephemeral-disk 1 COUNT\nn\n"
    result = runner.invoke(cli_module.app, ["flavor", "create"], input=answers)

    assert result.exit_code == 0, result.output
    assert "Creating flavor: 'small', Kind: 'ephemeral-disk'" in result.stdout
    assert "1: ephemeral-disk, 1, COUNT" in result.stdout
    assert result.stdout.rstrip().endswith("OK. Canceled")
    assert photon_api.requests == []


def test_flavor_list_and_show_script_output(photon_api: FakePhotonAPI) -> None:
    photon_api.add("GET", "/flavors", {"items": [_flavor()]})
    photon_api.add("GET", "/flavors/flavor-1", _flavor(state="READY"))

    listed = runner.invoke(cli_module.app, ["-n", "flavor", "list", "--kind", "vm", "--name", "small"])
    shown = runner.invoke(cli_module.app, ["-n", "flavor", "show", "flavor-1"])

    assert listed.exit_code == 0, listed.output
    assert listed.stdout == "flavor-1\tsmall\tvm\tvm.cpu:1:COUNT,vm.memory:2:GB\n"
    params = photon_api.requests[0].url.params
    assert (params["kind"], params["name"]) == ("vm", "small")
    assert shown.exit_code == 0, shown.output
    assert shown.stdout == "flavor-1\tsmall\tvm\tvm.cpu:1:COUNT,vm.memory:2:GB\tREADY\n"


def test_flavor_delete_and_tasks(photon_api: FakePhotonAPI) -> None:
    photon_api.add("DELETE", "/flavors/flavor-1", task_payload("task-1", "QUEUED", operation="DELETE_FLAVOR"))
    _queue_task(photon_api, "COMPLETED", operation="DELETE_FLAVOR", entity_id="flavor-1", entity_kind="flavor")
    photon_api.add(
        "GET",
        "/flavors/flavor-1/tasks",
        {"items": [task_payload("task-1", "COMPLETED", operation="DELETE_FLAVOR", startedTime=10, endTime=30)]},
    )

    deleted = runner.invoke(cli_module.app, ["-n", "flavor", "delete", "flavor-1"])
    tasks = runner.invoke(cli_module.app, ["-n", "flavor", "tasks", "flavor-1", "--state", "completed"])

    assert deleted.exit_code == 0, deleted.output
    assert deleted.stdout == "flavor-1\n"
    assert tasks.exit_code == 0, tasks.output
    assert tasks.stdout == "task-1\tCOMPLETED\tDELETE_FLAVOR\t10\t20\n"
    assert photon_api.requests[-1].url.params["state"] == "COMPLETED"


def test_run_prints_error_and_exits(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def broken_app() -> None:
        raise ConfigError("Specify a Photon Controller endpoint by running 'target set' command")

    monkeypatch.setattr(cli_module, "app", broken_app)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.run()

    assert excinfo.value.code == 1
    assert excinfo.value.__cause__ is None
    assert excinfo.value.__suppress_context__
    err = capsys.readouterr().err
    assert err == "error: Specify a Photon Controller endpoint by running 'target set' command\n"
    assert "Traceback" not in err


def test_run_rejects_empty_task_id(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], photon_api: FakePhotonAPI
) -> None:
    monkeypatch.setattr(sys, "argv", ["photon", "-n", "task", "monitor", ""])

    with pytest.raises(SystemExit) as excinfo:
        cli_module.run()

    assert excinfo.value.code == 1
    assert capsys.readouterr().err == "error: task id is required\n"
    assert photon_api.requests == []


def test_module_entry_point_reports_errors_without_traceback(tmp_path: Path) -> None:
    src = Path(__file__).resolve().parents[1] / "src"
    env = {
        **os.environ,
        "HOME": str(tmp_path),
        "PHOTON_TARGET": "http://127.0.0.1:9",
        "PYTHONPATH": os.pathsep.join(filter(None, [str(src), os.environ.get("PYTHONPATH")])),
    }

    completed = subprocess.run(
        [sys.executable, "-m", "photonctl", "task", "show", "t-1"],
        capture_output=True,
        text=True,
        env=env,
        timeout=60,
        check=False,
    )

    assert completed.returncode == 1
    assert completed.stderr.startswith("error: ")
    assert "Traceback" not in completed.stderr


def test_log_file_captures_requests(tmp_path: Path, photon_api: FakePhotonAPI) -> None:
    log_file = tmp_path / "logs" / "photon.log"
    photon_api.add("GET", "/tenants", {"items": []})

    result = runner.invoke(cli_module.app, ["-l", str(log_file), "-n", "tenant", "list"])

    assert result.exit_code == 0, result.output
    content = log_file.read_text(encoding="utf-8")
    assert "[photon-cli]" in content
    assert "GET /tenants" in content
