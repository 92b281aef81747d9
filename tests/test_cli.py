import json
from datetime import datetime

import pytest
import requests

import scripts.fram as fram_cli
from fram_provider.core.fram import AuthenticationError, FramAPIError, FramClient

BASEURL = "fram_am_baseurlsource"

REMOTE = {
    "source": "REQUEST_VALUES",
    "contextPath": "/am",
    "fixedValue": "",
    "extensionClassName": "",
}


@pytest.fixture()
def platform(monkeypatch, fake_response):
    """Fake AM: login always succeeds and GET/POST return REMOTE."""
    calls = []

    def fake_authenticate(self):
        self._token = "token"
        return "token"

    def fake_get(self, path, params=None, **kwargs):
        calls.append(("GET", path))
        return fake_response(REMOTE)

    def fake_post(self, path, json=None, params=None, **kwargs):
        calls.append(("POST", path, json))
        return fake_response(REMOTE, status_code=201)

    monkeypatch.setattr(FramClient, "authenticate", fake_authenticate)
    monkeypatch.setattr(FramClient, "get", fake_get)
    monkeypatch.setattr(FramClient, "post", fake_post)
    return calls


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_no_command_prints_help(capsys):
    assert fram_cli.main([]) == 0
    assert "FRAM provider driver" in capsys.readouterr().out


def test_schema(capsys):
    assert fram_cli.main(["schema"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["type_name"] == "fram"
    assert set(data["resource_schemas"]) == {BASEURL, "fram_p1aic_serviceaccount"}


def test_plan_from_yaml(tmp_path, capsys):
    request_file = _write(tmp_path, "plan.yaml", (
        "prior_state: null\n"
        "config:\n"
        "  source: REQUEST_VALUES\n"
        "  context_path: /am\n"
        "  fixed_value: ''\n"
    ))

    assert fram_cli.main(["plan", "--type", BASEURL, "--file", request_file]) == 0

    proposed = json.loads(capsys.readouterr().out)
    assert proposed["action"] == "create"
    assert proposed["planned_state"]["source"] == "REQUEST_VALUES"


def test_plan_reports_invalid_config(tmp_path, capsys):
    request_file = _write(tmp_path, "plan.yaml", "config:\n  source: SOMEWHERE\n")

    assert fram_cli.main(["plan", "--type", BASEURL, "--file", request_file]) == 1

    err = capsys.readouterr().err
    assert "[fram] ERROR (source) Invalid Attribute Value" in err
    assert "Missing Required Attribute" in err


def test_unknown_type(tmp_path, capsys):
    request_file = _write(tmp_path, "plan.yaml", "config: {}\n")
    assert fram_cli.main(["plan", "--type", "fram_widget", "--file", request_file]) == 1
    assert "Unknown Resource Type" in capsys.readouterr().err


def test_missing_request_file_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        fram_cli.main(["plan", "--type", BASEURL, "--file", str(tmp_path / "missing.yaml")])
    assert excinfo.value.code == 2


def test_import(platform, capsys):
    assert fram_cli.main(["--realm", "/alpha", "import", "--type", BASEURL, "--id", "/alpha"]) == 0

    state = json.loads(capsys.readouterr().out)["state"]
    assert state["id"] == "/alpha"
    assert state["source"] == "REQUEST_VALUES"
    assert platform == [("GET", "/json/realms/root/realms/alpha/realm-config/services/baseurl")]


def test_apply_plan_document(platform, tmp_path, capsys):
    plan_file = _write(tmp_path, "plan.json", json.dumps({"plan": {
        "action": "create",
        "planned_state": {"id": None, "source": "REQUEST_VALUES", "context_path": "/am",
                          "fixed_value": "", "extension_class_name": None},
    }}))

    assert fram_cli.main(["apply", "--type", BASEURL, "--file", plan_file]) == 0

    assert json.loads(capsys.readouterr().out)["state"]["id"] == "/"
    assert platform[0][0] == "POST"


def test_read_removed_object(monkeypatch, tmp_path, capsys):
    def gone(self, path, params=None, **kwargs):
        raise FramAPIError(404, "", path)

    monkeypatch.setattr(FramClient, "authenticate", lambda self: "token")
    monkeypatch.setattr(FramClient, "get", gone)
    state_file = _write(tmp_path, "state.yaml", "state:\n  id: /\n  source: FIXED_VALUE\n")

    assert fram_cli.main(["read", "--type", BASEURL, "--file", state_file]) == 0
    assert json.loads(capsys.readouterr().out) == {"state": None, "removed": True}


def test_data_source_read(platform, capsys):
    assert fram_cli.main(["data", "--type", BASEURL]) == 0
    assert json.loads(capsys.readouterr().out)["state"]["source"] == "REQUEST_VALUES"


def test_login_failure_is_reported(monkeypatch, capsys):
    def refuse(self):
        raise AuthenticationError("status: 401, body: nope")

    monkeypatch.setattr(FramClient, "authenticate", refuse)

    assert fram_cli.main(["import", "--type", BASEURL, "--id", "/"]) == 1
    assert "Unable to Create FRAM Client" in capsys.readouterr().err


def test_password_help_points_at_safer_sources(capsys):
    with pytest.raises(SystemExit):
        fram_cli.main(["--help"])
    assert "FRAM_PASSWORD" in capsys.readouterr().out


def test_password_comes_from_environment_when_flag_omitted(monkeypatch, platform, tmp_path):
    monkeypatch.setattr("fram_provider.config.settings.SECRETS_DIR", str(tmp_path))
    monkeypatch.setenv("FRAM_USERNAME", "admin")
    monkeypatch.setenv("FRAM_PASSWORD", "from-env")
    seen = []

    def fake_authenticate(self):
        seen.append((self.username, self.password))
        self._token = "token"
        return "token"

    monkeypatch.setattr(FramClient, "authenticate", fake_authenticate)

    assert fram_cli.main(["data", "--type", BASEURL]) == 0
    assert seen == [("admin", "from-env")]


def test_unreachable_server_exits_with_diagnostic(monkeypatch, capsys):
    def fake_authenticate(self):
        self._token = "token"
        self._authenticated_at = datetime.now()
        return "token"

    def refused(method, url, **kwargs):
        raise requests.ConnectionError("Connection refused")

    monkeypatch.setattr(FramClient, "authenticate", fake_authenticate)
    monkeypatch.setattr(requests, "request", refused)

    assert fram_cli.main(["import", "--type", BASEURL, "--id", "/"]) == 1
    assert "Client Error" in capsys.readouterr().err
