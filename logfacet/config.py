"""
Configuration System - logging configuration for logfacet

Provides centralized configuration loading from a YAML file and environment
variables with precedence handling and environment variable substitution.
"""

import os
import sys
import re
from pathlib import Path
from beartype.typing import Dict, Any, Optional, Tuple

import yaml

from logfacet.constants import FAULT_MAPPING
from logfacet.levels import Severity, parse_level


class LoggingConfig:
    """
    Centralized logging configuration for logfacet.

    Reads from file, environment variables, or explicit overrides with
    proper precedence handling.

    Example configuration file (logfacet.yml):
        logging:
          enabled: true
          level: DEBUG
          format: "%{time:%H:%M:%S} %{lvl} %{message}"
          color: 0            # 0 disables colored output
          output: file        # stderr, stdout, file
          file_path: /var/log/app/app.log
          module: app
          prefix: ""
    """

    DEFAULT_CONFIG = {
        "enabled": True,
        "level": "INFO",
        "format": None,  # placeholder template, None keeps the built-in one
        "color": 1,
        "output": "stderr",  # stderr, stdout, file
        "file_path": None,
        "module": "DEFAULT",
        "prefix": "",
    }

    VALID_OUTPUTS = ["stderr", "stdout", "file"]

    # File or devnull stream opened by the last setup_logging call
    _owned_stream = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from multiple sources.

        Precedence: Environment > File > Default

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary

        Example:
            config = LoggingConfig.load("logfacet.yml")
        """
        config = cls.DEFAULT_CONFIG.copy()

        # 1. Load from file
        if config_path and Path(config_path).exists():
            file_config = cls._load_from_file(config_path)
            if isinstance(file_config, dict) and isinstance(file_config.get("logging"), dict):
                config.update(file_config["logging"])

        # 2. Override with environment variables
        config = cls._apply_env_overrides(config)

        # 3. Substitute environment variables in values
        config = cls._substitute_env_vars(config)

        return config

    @classmethod
    def _load_from_file(cls, config_path: str) -> Optional[Dict[str, Any]]:
        """
        Load configuration from YAML file.

        Returns:
            Parsed document or None if it could not be read
        """
        try:
            with open(config_path) as f:
                return yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            sys.stderr.write(FAULT_MAPPING["yaml_file_parse_issue"].format(file_path=config_path, error=e) + "\n")
            return None

    @classmethod
    def _apply_env_overrides(cls, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides.

        Environment variables:
            LOGFACET_LOG_ENABLED: Enable/disable logging (true, false, yes, no, 1, 0)
            LOGFACET_LOG_LEVEL: Log level (CRITICAL, ERROR, WARNING, NOTICE, INFO, DEBUG)
            LOGFACET_LOG_FORMAT: Placeholder template
            LOGFACET_LOG_COLOR: Color flag (0 disables colored output)
            LOGFACET_LOG_OUTPUT: Output destination (stderr, stdout, file)
            LOGFACET_LOG_FILE: Log file path
            LOGFACET_LOG_MODULE: Module name of the default logger
            LOGFACET_LOG_PREFIX: Text put in front of every line
        """
        if "LOGFACET_LOG_ENABLED" in os.environ:
            enabled_value = os.environ["LOGFACET_LOG_ENABLED"].lower()
            config["enabled"] = enabled_value in ("true", "yes", "1", "on")

        env_mappings = {
            "LOGFACET_LOG_LEVEL": "level",
            "LOGFACET_LOG_FORMAT": "format",
            "LOGFACET_LOG_OUTPUT": "output",
            "LOGFACET_LOG_FILE": "file_path",
            "LOGFACET_LOG_MODULE": "module",
            "LOGFACET_LOG_PREFIX": "prefix",
        }

        for env_var, config_key in env_mappings.items():
            if env_var in os.environ:
                config[config_key] = os.environ[env_var]

        if "LOGFACET_LOG_COLOR" in os.environ:
            try:
                config["color"] = int(os.environ["LOGFACET_LOG_COLOR"])
            except ValueError:
                config["color"] = os.environ["LOGFACET_LOG_COLOR"]

        return config

    @classmethod
    def _substitute_env_vars(cls, config: Any) -> Any:
        """
        Recursively substitute environment variables in configuration.

        Supports ${VAR_NAME} syntax. Unknown variables are left as is.

        Example:
            file_path: /var/log/${ENVIRONMENT}/app.log
            With ENVIRONMENT=production, becomes:
            file_path: /var/log/production/app.log
        """
        if isinstance(config, str):

            def replace_env(match):
                var_name = match.group(1)
                return os.environ.get(var_name, match.group(0))

            return re.sub(r"\$\{([^}]+)\}", replace_env, config)

        elif isinstance(config, dict):
            return {k: cls._substitute_env_vars(v) for k, v in config.items()}

        elif isinstance(config, list):
            return [cls._substitute_env_vars(item) for item in config]

        else:
            return config

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> Tuple[bool, str]:
        """
        Validate configuration.

        Returns:
            Tuple of (is_valid, error_message)

        Example:
            is_valid, error = LoggingConfig.validate(config)
            if not is_valid:
                print(f"Invalid configuration: {error}")
        """
        level = config.get("level", "INFO")
        try:
            parse_level(level)
        except ValueError:
            return False, FAULT_MAPPING["invalid_level"].format(
                level=level, levels=", ".join(Severity.__members__)
            )

        color = config.get("color", 1)
        if color is not None and (not isinstance(color, int) or isinstance(color, bool)):
            return False, FAULT_MAPPING["invalid_color"].format(color=color)

        for option in ("format", "prefix", "module"):
            value = config.get(option)
            if value is not None and not isinstance(value, str):
                return False, FAULT_MAPPING["invalid_text_option"].format(option=option, value=value)

        output = config.get("output", "stderr")
        if output not in cls.VALID_OUTPUTS:
            return False, FAULT_MAPPING["invalid_output"].format(
                output=output, outputs=", ".join(cls.VALID_OUTPUTS)
            )

        if output == "file" and not config.get("file_path"):
            return False, FAULT_MAPPING["missing_file_path"]

        return True, ""

    @classmethod
    def _open_stream(cls, config: Dict[str, Any]):
        output_type = config.get("output", "stderr")

        if output_type == "stdout":
            return sys.stdout
        if output_type == "file":
            path = Path(config["file_path"])
            path.parent.mkdir(parents=True, exist_ok=True)
            return open(path, "a", encoding="utf-8")
        return sys.stderr

    @classmethod
    def setup_logging(cls, config_path: Optional[str] = None, **overrides):
        """
        Setup logging based on configuration.

        Args:
            config_path: Path to configuration file
            **overrides: Configuration overrides (e.g., level="DEBUG")

        Raises:
            LoggerConfigError: if the resulting configuration is invalid

        Example:
            LoggingConfig.setup_logging(
                config_path="logfacet.yml",
                level="DEBUG",
                color=0
            )
        """
        from logfacet.logger import LoggerConfigError, LoggerFactory

        config = cls.load(config_path)
        config.update({key: value for key, value in overrides.items() if value is not None})

        is_valid, error = cls.validate(config)
        if not is_valid:
            raise LoggerConfigError("logging", error)

        if not config.get("enabled", True):
            # Only CRITICAL passes and it goes nowhere
            stream = open(os.devnull, "w")
            LoggerFactory.configure(level=Severity.CRITICAL, stream=stream)
            cls._replace_owned_stream(stream)
            return

        stream = cls._open_stream(config)
        LoggerFactory.configure(
            level=config.get("level", "INFO"),
            template=config.get("format"),
            color=config.get("color") or 0,
            stream=stream,
            prefix=config.get("prefix") or "",
            module=config.get("module") or "DEFAULT",
        )
        cls._replace_owned_stream(stream)

    @classmethod
    def _replace_owned_stream(cls, stream):
        """Close the stream opened by the previous setup once loggers no longer use it"""
        previous = cls._owned_stream
        cls._owned_stream = None if stream is sys.stdout or stream is sys.stderr else stream
        if previous is not None and previous is not stream:
            previous.close()
