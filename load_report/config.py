"""
Configuration management for load-report.

This module provides the Config class for loading, validating, and managing
report configuration from YAML/JSON files with environment variable overrides.
"""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from . import __title__, __version__
from .utils.validation import (
    ValidationError,
    validate_int_range,
    validate_non_empty_string,
    validate_url,
)


DEFAULT_ECHARTS_URL = "https://cdn.jsdelivr.net/npm/echarts@5.2.2/dist/echarts.min.js"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class ReportConfig:
    """Report rendering configuration."""

    generator_name: str = __title__
    generator_version: str = __version__
    precision: int = 0  # decimal places for resolved percentiles
    echarts_url: str = DEFAULT_ECHARTS_URL
    title: str = "Load Test Report"
    output_file: str = "./report.html"

    def validate(self) -> None:
        """Validate report configuration."""
        try:
            validate_non_empty_string(self.generator_name, "generator_name")
            validate_non_empty_string(self.generator_version, "generator_version")
            validate_non_empty_string(self.title, "title")
            validate_int_range(self.precision, "precision", 0, 6)
            validate_url(self.echarts_url, "echarts_url")
        except ValidationError as e:
            raise ValueError(str(e)) from e
        if not self.output_file:
            raise ValueError("output_file is required")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_file: Optional[str] = None
    verbose: bool = False

    def validate(self) -> None:
        """Validate logging configuration."""
        if self.level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.level}. Must be one of {VALID_LOG_LEVELS}")


class Config:
    """Main configuration class for load-report."""

    def __init__(
        self,
        report: Optional[ReportConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ):
        """
        Initialize configuration.

        Args:
            report: Report rendering configuration (optional)
            logging: Logging configuration (optional)
        """
        self.report = report or ReportConfig()
        self.logging = logging or LoggingConfig()

    def validate(self) -> None:
        """Validate all configuration sections."""
        self.report.validate()
        self.logging.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "report": asdict(self.report),
            "logging": asdict(self.logging),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """
        Create Config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance

        Raises:
            ValueError: If a section contains unknown keys
        """
        try:
            report = ReportConfig(**data.get("report", {})) if "report" in data else None
            logging = LoggingConfig(**data.get("logging", {})) if "logging" in data else None
        except TypeError as e:
            raise ValueError(f"Invalid configuration: {e}") from e

        return cls(report=report, logging=logging)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Config":
        """
        Load configuration from YAML file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If YAML is empty or invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        if not data:
            raise ValueError(f"Empty configuration file: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "Config":
        """
        Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If JSON is empty or invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r') as f:
            data = json.load(f)

        if not data:
            raise ValueError(f"Empty configuration file: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Config":
        """
        Load configuration from file (auto-detect YAML/JSON).

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is unsupported or invalid
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in ['.yaml', '.yml']:
            return cls.from_yaml(path)
        elif suffix == '.json':
            return cls.from_json(path)
        else:
            raise ValueError(f"Unsupported configuration file format: {suffix}")

    def apply_env_overrides(self) -> None:
        """
        Apply environment variable overrides to configuration.

        Environment variables follow the pattern:
        LOAD_REPORT_<SECTION>_<KEY>=value

        Examples:
            LOAD_REPORT_REPORT_PRECISION=2
            LOAD_REPORT_REPORT_ECHARTS_URL=https://cdn.example.com/echarts.min.js
            LOAD_REPORT_LOGGING_VERBOSE=true
        """
        # Report overrides
        if name := os.getenv("LOAD_REPORT_REPORT_GENERATOR_NAME"):
            self.report.generator_name = name
        if version := os.getenv("LOAD_REPORT_REPORT_GENERATOR_VERSION"):
            self.report.generator_version = version
        if precision := os.getenv("LOAD_REPORT_REPORT_PRECISION"):
            self.report.precision = int(precision)
        if echarts_url := os.getenv("LOAD_REPORT_REPORT_ECHARTS_URL"):
            self.report.echarts_url = echarts_url
        if title := os.getenv("LOAD_REPORT_REPORT_TITLE"):
            self.report.title = title
        if output_file := os.getenv("LOAD_REPORT_REPORT_OUTPUT_FILE"):
            self.report.output_file = output_file

        # Logging overrides
        if level := os.getenv("LOAD_REPORT_LOGGING_LEVEL"):
            self.logging.level = level
        if log_file := os.getenv("LOAD_REPORT_LOGGING_LOG_FILE"):
            self.logging.log_file = log_file
        if verbose := os.getenv("LOAD_REPORT_LOGGING_VERBOSE"):
            self.logging.verbose = verbose.lower() in ["true", "1", "yes"]

    def save_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def save_json(self, path: Union[str, Path]) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
