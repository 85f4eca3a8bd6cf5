#!/usr/bin/env python3
"""
Configuration settings using Pydantic for environment variable loading
"""

import os
import re
from typing import Optional, Dict, Any, List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load environment variables from .env file if it exists
load_dotenv()


TRUE_VALUES = ("1", "true", "yes", "on")
ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")
DEFAULT_QUIET_LOGGERS = "requests,urllib3,botocore,boto3,uvicorn.access"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in TRUE_VALUES


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def expand_env_references(text: str) -> str:
    """Replace ${VAR} with its environment value, or nothing when VAR is unset"""
    return ENV_REFERENCE.sub(lambda match: os.getenv(match.group(1), ""), text)


class AWSSettings(BaseSettings):
    """SQS queue and Auto Scaling configuration settings"""
    region: str = Field(default_factory=lambda: os.getenv("AWS_REGION", "eu-west-1"))
    queue_url: Optional[str] = Field(default_factory=lambda: os.getenv("SQS_URL"))
    wait_time_seconds: int = Field(default_factory=lambda: int(os.getenv("SQS_WAIT_TIME_SECONDS", "20")))
    max_messages: int = Field(default_factory=lambda: int(os.getenv("SQS_MAX_MESSAGES", "1")))
    visibility_timeout: int = Field(default_factory=lambda: int(os.getenv("SQS_VISIBILITY_TIMEOUT", "300")))

    class Config:
        env_prefix = "DRAINER_AWS_"
        extra = "ignore"


class RancherSettings(BaseSettings):
    """Rancher server configuration settings"""
    url: str = Field(default_factory=lambda: os.getenv("RANCHER_SERVER_URL", "http://rancher-server:8080"))
    access_key: Optional[str] = Field(default_factory=lambda: os.getenv("RANCHER_SERVER_ACCESS_KEY"))
    secret_key: Optional[str] = Field(default_factory=lambda: os.getenv("RANCHER_SERVER_SECRET_KEY"))
    host_label: str = Field(default_factory=lambda: os.getenv("RANCHER_HOST_LABEL", "HOSTID"))
    request_timeout: int = Field(default_factory=lambda: int(os.getenv("RANCHER_REQUEST_TIMEOUT", "30")))

    class Config:
        env_prefix = "DRAINER_RANCHER_"
        extra = "ignore"


class DrainerSettings(BaseSettings):
    """Dispatch loop, metrics and status API settings"""
    lifecycle_action_result: str = "CONTINUE"

    # Status API settings
    api_enabled: bool = Field(default_factory=lambda: _env_bool("DRAINER_API_ENABLED", "true"))
    api_host: str = Field(default_factory=lambda: os.getenv("DRAINER_API_HOST", "0.0.0.0"))
    api_port: int = Field(default_factory=lambda: int(os.getenv("DRAINER_API_PORT", "8080")))
    metrics_port: int = Field(default_factory=lambda: int(os.getenv("DRAINER_METRICS_PORT", "9091")))

    class Config:
        env_prefix = "DRAINER_SERVICE_"
        extra = "ignore"


class LoggingSettings(BaseSettings):
    """Logging configuration settings"""
    level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    file: Optional[str] = Field(default_factory=lambda: os.getenv("LOG_FILE"))
    colors: bool = Field(default_factory=lambda: _env_bool("LOG_COLORS", "true"))
    quiet_loggers: List[str] = Field(
        default_factory=lambda: _env_list("LOG_QUIET_LOGGERS", DEFAULT_QUIET_LOGGERS)
    )

    class Config:
        env_prefix = "DRAINER_LOGGING_"
        extra = "ignore"


class Settings(BaseSettings):
    """Main settings class that includes all sub-settings"""
    # Environment
    environment: str = Field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    debug: bool = Field(default_factory=lambda: _env_bool("DEBUG", "false"))

    # Component settings
    aws: AWSSettings = Field(default_factory=AWSSettings)
    rancher: RancherSettings = Field(default_factory=RancherSettings)
    drainer: DrainerSettings = Field(default_factory=DrainerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    class Config:
        env_prefix = "DRAINER_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def validate_required(self) -> List[str]:
        """Return the names of required settings that are missing"""
        missing = []
        if not self.aws.queue_url:
            missing.append("SQS_URL")
        if not self.rancher.access_key:
            missing.append("RANCHER_SERVER_ACCESS_KEY")
        if not self.rancher.secret_key:
            missing.append("RANCHER_SERVER_SECRET_KEY")
        return missing

    def get_safe_config(self) -> Dict[str, Any]:
        """Settings as a plain dictionary with credentials removed"""
        return {
            "environment": self.environment,
            "aws": {
                "region": self.aws.region,
                "queue_url": self.aws.queue_url,
                "wait_time_seconds": self.aws.wait_time_seconds,
                "max_messages": self.aws.max_messages,
                "visibility_timeout": self.aws.visibility_timeout
            },
            "rancher": {
                "url": self.rancher.url,
                "host_label": self.rancher.host_label,
                "request_timeout": self.rancher.request_timeout,
                "access_key_configured": bool(self.rancher.access_key),
                "secret_key_configured": bool(self.rancher.secret_key)
            },
            "drainer": {
                "lifecycle_action_result": self.drainer.lifecycle_action_result,
                "api_enabled": self.drainer.api_enabled,
                "api_port": self.drainer.api_port,
                "metrics_port": self.drainer.metrics_port
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
                "quiet_loggers": self.logging.quiet_loggers
            }
        }

    @classmethod
    def load_from_yaml_with_env_override(cls, yaml_path: str) -> "Settings":
        """Load settings from YAML file and override with environment variables"""
        import yaml

        # Load YAML if it exists
        yaml_config = {}
        if os.path.exists(yaml_path):
            with open(yaml_path, 'r') as f:
                # Unset references become empty values so validate_required reports them
                yaml_config = yaml.safe_load(expand_env_references(f.read())) or {}

        return Settings(
            environment=yaml_config.get("environment", os.getenv("ENVIRONMENT", "development")),
            debug=yaml_config.get("debug", False),
            aws=AWSSettings(**yaml_config.get("aws", {})),
            rancher=RancherSettings(**yaml_config.get("rancher", {})),
            drainer=DrainerSettings(**yaml_config.get("drainer", {})),
            logging=LoggingSettings(**yaml_config.get("logging", {}))
        )
