"""
Tests for stack configuration loading.

Validates:
1. Defaults applied when optional keys are missing
2. Service settings parsed into ServiceConfig models
3. Invalid values rejected with ConfigValidationError naming the field
"""

from dataclasses import is_dataclass

import pytest

from fleet_iac.configs.base import EnvironmentConfig, ServiceConfig
from fleet_iac.configs.constants import (
    AVAILABILITY_ZONES,
    DEFAULT_SERVICES,
    PRIVATE_SUBNET_CIDRS,
    PROJECT_NAME,
    PUBLIC_SUBNET_CIDRS,
    VPC_CIDR,
)
from fleet_iac.configs.environment import load_config
from fleet_iac.exceptions import ConfigValidationError


class TestLoadConfigDefaults:
    """Defaults for optional configuration keys."""

    def test_minimal_config_uses_defaults(self):
        config = load_config({"environment": "dev"})

        assert config.project == PROJECT_NAME
        assert config.vpc_cidr == VPC_CIDR
        assert config.availability_zones == AVAILABILITY_ZONES
        assert config.public_subnet_cidrs == PUBLIC_SUBNET_CIDRS
        assert config.private_subnet_cidrs == PRIVATE_SUBNET_CIDRS
        assert config.enable_nat_gateway is True
        assert config.enable_deletion_protection is False

    def test_default_services_used_when_none_configured(self):
        config = load_config({"environment": "dev", "services": None})

        assert config.service_names == list(DEFAULT_SERVICES)

    def test_environment_config_is_frozen_dataclass(self, environment_config):
        assert is_dataclass(EnvironmentConfig)
        with pytest.raises(AttributeError):
            environment_config.environment = "prod"

    def test_string_booleans_accepted(self):
        config = load_config({
            "environment": "dev",
            "enable_nat_gateway": "false",
            "enable_deletion_protection": "True",
        })

        assert config.enable_nat_gateway is False
        assert config.enable_deletion_protection is True


class TestServiceParsing:
    """Service settings from the services object."""

    def test_services_keep_declaration_order(self, environment_config):
        assert environment_config.service_names == ["frontend", "api"]

    def test_service_fields(self, environment_config):
        api = environment_config.get_service("api")

        assert isinstance(api, ServiceConfig)
        assert api.port == 8080
        assert api.listener_port == 80
        assert api.health_check_path == "/health"
        assert api.min_size == 2
        assert api.max_size == 4
        assert api.cpu_target == 60

    def test_desired_capacity_defaults_to_min_size(self, environment_config):
        assert environment_config.get_service("api").capacity == 2

    def test_explicit_desired_capacity(self):
        service = ServiceConfig(name="web", port=80, min_size=1, desired_capacity=2, max_size=3)

        assert service.capacity == 2

    def test_single_character_service_name(self):
        config = load_config({"environment": "dev", "services": {"a": {"port": 80}}})

        assert config.service_names == ["a"]

    def test_unknown_service_raises_key_error(self, environment_config):
        with pytest.raises(KeyError):
            environment_config.get_service("missing")

    def test_https_enabled_with_certificate(self):
        service = ServiceConfig(
            name="web",
            port=80,
            certificate_arn="arn:aws:acm:us-east-1:123456789012:certificate/abc",
        )

        assert service.https_enabled is True
        assert ServiceConfig(name="web", port=80).https_enabled is False


class TestConfigValidation:
    """Invalid configuration is rejected before any resource is declared."""

    def test_missing_environment(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({})

        assert exc_info.value.field == "environment"

    def test_empty_services_mapping_rejected(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({"environment": "dev", "services": {}})

        assert exc_info.value.field == "services"

    def test_services_must_be_a_mapping(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({"environment": "dev", "services": ["web"]})

        assert exc_info.value.field == "services"

    @pytest.mark.parametrize("settings", [80, ["port", 80], "port=80"])
    def test_service_settings_must_be_a_mapping(self, settings):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({"environment": "dev", "services": {"web": settings}})

        assert exc_info.value.field == "services.web"

    def test_min_size_above_max_size(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({
                "environment": "dev",
                "services": {"web": {"port": 80, "min_size": 5, "max_size": 2}},
            })

        assert exc_info.value.field == "services.web"
        assert "min_size" in exc_info.value.message

    def test_desired_capacity_outside_bounds(self):
        with pytest.raises(ConfigValidationError):
            load_config({
                "environment": "dev",
                "services": {"web": {"port": 80, "min_size": 1, "max_size": 2, "desired_capacity": 3}},
            })

    def test_port_out_of_range(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({"environment": "dev", "services": {"web": {"port": 70000}}})

        assert exc_info.value.field == "services.web.port"

    def test_invalid_service_name(self):
        with pytest.raises(ConfigValidationError):
            load_config({"environment": "dev", "services": {"Web_App": {"port": 80}}})

    @pytest.mark.parametrize("name", ["web-", "-web", "1web"])
    def test_service_name_must_start_with_letter_and_end_alphanumeric(self, name):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({"environment": "dev", "services": {name: {"port": 80}}})

        assert exc_info.value.field == f"services.{name}.name"

    def test_unknown_service_setting(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({"environment": "dev", "services": {"web": {"port": 80, "colour": "blue"}}})

        assert exc_info.value.field == "services.web.colour"

    def test_mismatched_service_name(self):
        with pytest.raises(ConfigValidationError):
            load_config({"environment": "dev", "services": {"web": {"name": "api", "port": 80}}})

    def test_availability_zones_must_be_two(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({"environment": "dev", "availability_zones": ["us-east-1a"]})

        assert exc_info.value.field == "availability_zones"

    def test_availability_zones_must_be_a_list(self):
        with pytest.raises(ConfigValidationError):
            load_config({"environment": "dev", "availability_zones": "us-east-1a"})

    def test_non_boolean_flag(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({"environment": "dev", "enable_nat_gateway": "sometimes"})

        assert exc_info.value.field == "enable_nat_gateway"

    def test_error_string_includes_details(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config({})

        assert "Details" in str(exc_info.value)
