"""
Configuration module for Pulumi infrastructure.

Provides type-safe configuration loading from Pulumi stack config files.
"""

from fleet_iac.configs.base import EnvironmentConfig, ServiceConfig
from fleet_iac.configs.environment import get_config, load_config
from fleet_iac.configs.constants import (
    VPC_CIDR,
    PUBLIC_SUBNET_CIDRS,
    PRIVATE_SUBNET_CIDRS,
    AVAILABILITY_ZONES,
    DEFAULT_TAGS,
)

__all__ = [
    "EnvironmentConfig",
    "ServiceConfig",
    "get_config",
    "load_config",
    "VPC_CIDR",
    "PUBLIC_SUBNET_CIDRS",
    "PRIVATE_SUBNET_CIDRS",
    "AVAILABILITY_ZONES",
    "DEFAULT_TAGS",
]
