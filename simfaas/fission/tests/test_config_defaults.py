"""
Where: simfaas/fission/tests/test_config_defaults.py
What: Validate default FissionConfig values.
Why: Keep config defaults stable as environment defaults evolve.
"""

import pytest
from pydantic import ValidationError

from simfaas.fission.config import FissionConfig


def test_defaults(monkeypatch):
    for name in ("CREATE_UNDEFINED_FUNCTIONS", "BIND_ADDR", "CUSTOM_HANDLER_RESOLVER"):
        monkeypatch.delenv(name, raising=False)

    config = FissionConfig(_env_file=None)

    assert config.CREATE_UNDEFINED_FUNCTIONS is True
    assert config.BIND_ADDR == "0.0.0.0:8888"
    assert config.CUSTOM_HANDLER_RESOLVER == "name"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CREATE_UNDEFINED_FUNCTIONS", "false")
    monkeypatch.setenv("DEFAULT_RUNTIME", "2.5")

    config = FissionConfig(_env_file=None)

    assert config.CREATE_UNDEFINED_FUNCTIONS is False
    assert config.DEFAULT_RUNTIME == 2.5


def test_unknown_resolver_rejected(monkeypatch):
    monkeypatch.setenv("CUSTOM_HANDLER_RESOLVER", "regex")

    with pytest.raises(ValidationError):
        FissionConfig(_env_file=None)
