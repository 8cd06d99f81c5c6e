from fastapi.testclient import TestClient

from simfaas.fission.config import FissionConfig
from simfaas.fission.main import create_app


FUNCTIONS_YAML = """
defaults:
  cold_start: 0.0
  runtime: 0.01

functions:
  declared:
    response: "from file"

custom_handlers:
  declared: "simfaas.fission.core.custom_handlers:echo"
"""


def make_config(tmp_path, monkeypatch, **env) -> FissionConfig:
    path = tmp_path / "functions.yml"
    path.write_text(FUNCTIONS_YAML)
    monkeypatch.setenv("FUNCTIONS_CONFIG_PATH", str(path))
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return FissionConfig(_env_file=None)


def test_lifespan_loads_declared_functions(tmp_path, monkeypatch):
    app = create_app(make_config(tmp_path, monkeypatch))

    with TestClient(app) as client:
        assert app.state.platform.functions() == ["declared"]

        response = client.get("/fission-function/declared")
        assert response.status_code == 200
        assert response.json()["response"] == "from file"

        response = client.post(
            "/fission-function/declared", content=b"echoed", headers={"X-CustomFn": "1"}
        )
        assert response.json()["response"] == "echoed"


def test_lifespan_respects_auto_creation_setting(tmp_path, monkeypatch):
    app = create_app(
        make_config(tmp_path, monkeypatch, CREATE_UNDEFINED_FUNCTIONS="false")
    )

    with TestClient(app) as client:
        response = client.post("/v2/getServiceForFunction", json={"name": "ghost"})
        assert response.status_code == 404

        response = client.post("/v2/getServiceForFunction", json={"name": "declared"})
        assert response.status_code == 200
        assert response.text == "declared"


def test_lifespan_creates_undefined_functions_from_defaults(tmp_path, monkeypatch):
    app = create_app(make_config(tmp_path, monkeypatch))

    with TestClient(app) as client:
        response = client.get("/fission-function/fresh")
        assert response.status_code == 200
        assert app.state.platform.get("fresh").config.runtime == 0.01
