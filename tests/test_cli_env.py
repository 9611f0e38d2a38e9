from typer.testing import CliRunner

from unity_client.cli import app

runner = CliRunner()

CREATE_ARGS = [
    "luns",
    "create-vmware",
    "--base-url",
    "https://unity01",
    "--username",
    "admin",
    "--password",
    "secret",
    "--name",
    "DS1",
    "--pool",
    "pool_1",
    "--size",
    "1024",
    "--yes",
]


def test_cli_respects_env_cert_and_verify_true(monkeypatch, tmp_path):
    cert = tmp_path / "ca.pem"
    cert.write_text("dummy", encoding="utf-8")
    captured: dict[str, object] = {}

    class DummyClient:
        label = "unity01"
        is_connected = False

        def __init__(self, **kwargs):
            captured.update(kwargs)

        def connect(self):
            return self

        def close(self):
            pass

    monkeypatch.setattr("unity_client.cli.UnityClient", DummyClient)

    result = runner.invoke(
        app,
        CREATE_ARGS,
        env={"UNITY_CA_CERT": str(cert), "UNITY_VERIFY_SSL": "1"},
    )

    assert captured["verify_ssl"] == str(cert)
    assert result.exit_code == 1
    assert "Session unity01 is not connected" in result.stderr


def test_cli_env_cert_with_no_verify_rejected(tmp_path):
    cert = tmp_path / "ca.pem"
    cert.write_text("dummy", encoding="utf-8")

    result = runner.invoke(
        app,
        CREATE_ARGS,
        env={"UNITY_CA_CERT": str(cert), "UNITY_VERIFY_SSL": "0"},
    )

    assert result.exit_code != 0
    assert "Cannot combine --cert with --no-verify" in result.stderr


def test_cli_requires_credentials():
    args = [arg for arg in CREATE_ARGS if arg not in ("--password", "secret")]

    result = runner.invoke(app, args, env={"UNITY_PASSWORD": ""})

    assert result.exit_code == 2
    assert "--username and --password are required" in result.stderr
