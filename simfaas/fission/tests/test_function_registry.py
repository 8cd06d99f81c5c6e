import pytest

from simfaas.fission.config import FissionConfig
from simfaas.fission.services.function_registry import FunctionRegistry


@pytest.fixture
def functions_yaml():
    return """
defaults:
  runtime: 0.25
  keep_warm: ${TEST_KEEP_WARM}

functions:
  hello:
    runtime: 2.0
    response: "hi"
  plain:

custom_handlers:
  echo: "simfaas.fission.core.custom_handlers:echo"
"""


def make_registry(tmp_path, content: str, monkeypatch) -> FunctionRegistry:
    path = tmp_path / "functions.yml"
    path.write_text(content)
    monkeypatch.setenv("FUNCTIONS_CONFIG_PATH", str(path))
    return FunctionRegistry(FissionConfig(_env_file=None))


def test_function_registry_load_success(tmp_path, monkeypatch, functions_yaml):
    monkeypatch.setenv("TEST_KEEP_WARM", "12")
    registry = make_registry(tmp_path, functions_yaml, monkeypatch)

    loaded = registry.load_functions_config()

    assert set(loaded) == {"hello", "plain"}
    hello = registry.get_function_config("hello")
    assert hello.runtime == 2.0
    assert hello.response == "hi"
    # File defaults apply to declared functions.
    assert hello.keep_warm == 12.0
    assert registry.get_function_config("plain").runtime == 0.25
    assert registry.custom_handlers == {"echo": "simfaas.fission.core.custom_handlers:echo"}


def test_function_factory_uses_defaults(tmp_path, monkeypatch, functions_yaml):
    monkeypatch.setenv("TEST_KEEP_WARM", "12")
    monkeypatch.setenv("DEFAULT_COLD_START", "0.75")
    registry = make_registry(tmp_path, functions_yaml, monkeypatch)
    registry.load_functions_config()

    cfg = registry.function_factory("anything")

    assert cfg.runtime == 0.25
    assert cfg.cold_start == 0.75
    assert cfg.keep_warm == 12.0
    assert cfg == registry.function_factory("something-else")


def test_function_registry_get_nonexistent(tmp_path, monkeypatch):
    registry = make_registry(tmp_path, "functions: {}", monkeypatch)
    registry.load_functions_config()

    assert registry.get_function_config("nonexistent") is None


def test_function_registry_missing_file(tmp_path, monkeypatch):
    monkeypatch.setenv("FUNCTIONS_CONFIG_PATH", str(tmp_path / "missing.yml"))
    registry = FunctionRegistry(FissionConfig(_env_file=None))

    assert registry.load_functions_config() == {}
    assert registry.function_factory("fn").runtime == registry.config.DEFAULT_RUNTIME


def test_function_registry_invalid_yaml(tmp_path, monkeypatch):
    registry = make_registry(tmp_path, "functions: [\n  - broken\n", monkeypatch)

    assert registry.load_functions_config() == {}
    assert registry.custom_handlers == {}


def test_function_registry_invalid_definition(tmp_path, monkeypatch):
    registry = make_registry(tmp_path, "functions:\n  bad:\n    runtime: -1\n", monkeypatch)

    assert registry.load_functions_config() == {}


@pytest.mark.parametrize(
    "content",
    [
        "- hello\n- plain\n",
        "functions:\n  hello: 2.0\n",
        "functions:\n  - hello\n",
        "defaults: fast\nfunctions:\n  hello:\n",
        "custom_handlers:\n  - echo\n",
    ],
)
def test_function_registry_malformed_structure(tmp_path, monkeypatch, content):
    registry = make_registry(tmp_path, content, monkeypatch)

    assert registry.load_functions_config() == {}
    assert registry.custom_handlers == {}
    assert registry.function_factory("fn").runtime == registry.config.DEFAULT_RUNTIME
