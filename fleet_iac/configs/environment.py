"""
Environment configuration loader.

Loads and validates configuration from Pulumi stack config files.
"""

import logging
from collections.abc import Mapping
from typing import Any

import pulumi
from pydantic import ValidationError

from fleet_iac.configs.base import EnvironmentConfig, ServiceConfig
from fleet_iac.configs.constants import (
    AVAILABILITY_ZONES,
    DEFAULT_SERVICES,
    PRIVATE_SUBNET_CIDRS,
    PROJECT_NAME,
    PUBLIC_SUBNET_CIDRS,
    VPC_CIDR,
)
from fleet_iac.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

_LIST_KEYS = ("availability_zones", "public_subnet_cidrs", "private_subnet_cidrs")


def _as_tuple(raw: Mapping[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = raw.get(key)
    if value is None:
        return tuple(default)
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigValidationError(f"{key} must be a list of strings", field=key)
    if len(value) != 2:
        raise ConfigValidationError(
            f"{key} must contain exactly 2 entries, got {len(value)}",
            field=key,
        )
    return tuple(str(item) for item in value)


def _parse_services(raw_services: Any) -> tuple[ServiceConfig, ...]:
    if not isinstance(raw_services, Mapping) or not raw_services:
        raise ConfigValidationError(
            "services must be a non-empty mapping of service name to settings",
            field="services",
        )

    services = []
    for name, settings in raw_services.items():
        if settings is None:
            settings = {}
        if not isinstance(settings, Mapping):
            raise ConfigValidationError(
                f"Settings for service '{name}' must be a mapping, got {type(settings).__name__}",
                field=f"services.{name}",
            )
        settings = dict(settings)
        if "name" in settings and settings["name"] != name:
            raise ConfigValidationError(
                f"Service key '{name}' does not match its name '{settings['name']}'",
                field=f"services.{name}.name",
            )
        settings["name"] = name
        try:
            services.append(ServiceConfig(**settings))
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            field = f"services.{name}.{location}" if location else f"services.{name}"
            raise ConfigValidationError(
                f"Invalid settings for service '{name}': {first['msg']}",
                field=field,
                details={"errors": e.errors(include_url=False)},
            ) from e
    return tuple(services)


def load_config(raw: Mapping[str, Any]) -> EnvironmentConfig:
    """
    Build an EnvironmentConfig from plain configuration values.

    Args:
        raw: Mapping of config key to value (as read from the stack)

    Returns:
        EnvironmentConfig: Validated configuration object

    Raises:
        ConfigValidationError: If a required value is missing or invalid
    """
    environment = raw.get("environment")
    if not environment:
        raise ConfigValidationError("environment is required", field="environment")

    raw_services = raw.get("services")
    if raw_services is None:
        raw_services = DEFAULT_SERVICES
    services = _parse_services(raw_services)
    environment = str(environment)

    config = EnvironmentConfig(
        environment=environment,
        project=str(raw.get("project") or PROJECT_NAME),
        vpc_cidr=str(raw.get("vpc_cidr") or VPC_CIDR),
        availability_zones=_as_tuple(raw, "availability_zones", AVAILABILITY_ZONES),
        public_subnet_cidrs=_as_tuple(raw, "public_subnet_cidrs", PUBLIC_SUBNET_CIDRS),
        private_subnet_cidrs=_as_tuple(raw, "private_subnet_cidrs", PRIVATE_SUBNET_CIDRS),
        enable_nat_gateway=_as_bool(raw, "enable_nat_gateway", default=True),
        enable_deletion_protection=_as_bool(raw, "enable_deletion_protection", default=False),
        services=services,
    )
    logger.info(
        "Loaded %s config with %d service(s): %s",
        config.environment,
        len(config.services),
        ", ".join(config.service_names),
    )
    return config


def _as_bool(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ConfigValidationError(f"{key} must be a boolean, got {value!r}", field=key)


def get_config() -> EnvironmentConfig:
    """
    Load environment configuration from Pulumi stack config.

    Returns:
        EnvironmentConfig: Validated configuration object

    Raises:
        pulumi.ConfigMissingError: If required config values are missing
        ConfigValidationError: If config values are invalid
    """
    config = pulumi.Config()

    raw: dict[str, Any] = {
        "environment": config.require("environment"),
        "project": config.get("project"),
        "vpc_cidr": config.get("vpc_cidr"),
        "enable_nat_gateway": config.get_bool("enable_nat_gateway"),
        "enable_deletion_protection": config.get_bool("enable_deletion_protection"),
        "services": config.get_object("services"),
    }
    for key in _LIST_KEYS:
        raw[key] = config.get_object(key)

    return load_config(raw)
