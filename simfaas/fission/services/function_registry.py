"""
Function registry.

Loads functions.yml and provides name-to-config mapping, the factory used to
configure functions created on demand, and the custom handler references.
"""

from typing import Any, Dict, Optional
import yaml
import logging
import os
import string

from pydantic import ValidationError

from simfaas.platform import FunctionConfig

from ..config import FissionConfig, config as default_config

logger = logging.getLogger("fission.function_registry")


class FunctionRegistry:
    def __init__(self, fission_config: Optional[FissionConfig] = None):
        self.config = fission_config or default_config
        self.config_path = self.config.FUNCTIONS_CONFIG_PATH
        self._registry: Dict[str, FunctionConfig] = {}
        self._defaults: Dict[str, Any] = {}
        self._custom_handlers: Dict[str, str] = {}

    def load_functions_config(self) -> Dict[str, FunctionConfig]:
        """
        Load and cache functions.yml.

        Returns:
            Dict of function name -> config
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                # Substitute environment variables using string.Template.
                template = string.Template(f.read())
                content = template.safe_substitute(os.environ.copy())
                cfg = yaml.safe_load(content) or {}

            if not isinstance(cfg, dict):
                raise ValueError("top level must be a mapping")

            defaults = self._section(cfg, "defaults")
            functions = self._section(cfg, "functions")
            custom_handlers = self._section(cfg, "custom_handlers")
            for name, data in functions.items():
                if data is not None and not isinstance(data, dict):
                    raise ValueError(f"function {name!r} must be a mapping")

            self._defaults = defaults
            self._custom_handlers = custom_handlers
            self._registry = {
                name: self._build_config(data or {}) for name, data in functions.items()
            }

            logger.info(f"Loaded {len(self._registry)} functions from {self.config_path}")

        except FileNotFoundError:
            logger.warning(f"Functions config not found at {self.config_path}")
            self._reset()

        except yaml.YAMLError as e:
            logger.error(f"Error parsing functions config: {e}")
            self._reset()

        except ValidationError as e:
            logger.error(f"Invalid function definition in {self.config_path}: {e}")
            self._reset()

        except ValueError as e:
            logger.error(f"Malformed functions config {self.config_path}: {e}")
            self._reset()

        return self._registry

    @staticmethod
    def _section(cfg: Dict[str, Any], key: str) -> Dict[str, Any]:
        section = cfg.get(key) or {}
        if not isinstance(section, dict):
            raise ValueError(f"{key} must be a mapping")
        return section

    def _reset(self) -> None:
        self._registry = {}
        self._defaults = {}
        self._custom_handlers = {}

    def _base_defaults(self) -> Dict[str, Any]:
        return {
            "runtime": self.config.DEFAULT_RUNTIME,
            "cold_start": self.config.DEFAULT_COLD_START,
            "keep_warm": self.config.DEFAULT_KEEP_WARM,
            "max_instances": self.config.DEFAULT_MAX_INSTANCES,
            "acquire_timeout": self.config.DEFAULT_ACQUIRE_TIMEOUT,
        }

    def _build_config(self, data: Dict[str, Any]) -> FunctionConfig:
        # Settings first, then file defaults, then the function's own values.
        merged = self._base_defaults()
        merged.update(self._defaults)
        merged.update(data)
        return FunctionConfig(**merged)

    def function_factory(self, name: str) -> FunctionConfig:
        """
        Configuration for a function that was never declared.

        Depends only on the defaults, never on the name.
        """
        return self._build_config({})

    def get_function_config(self, function_name: str) -> Optional[FunctionConfig]:
        return self._registry.get(function_name)

    @property
    def functions(self) -> Dict[str, FunctionConfig]:
        return dict(self._registry)

    @property
    def custom_handlers(self) -> Dict[str, str]:
        return dict(self._custom_handlers)
