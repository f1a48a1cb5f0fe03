"""
Base configuration types for environment and service settings.

Provides type-safe configuration structure loaded from Pulumi stack configs.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fleet_iac.configs.constants import (
    ASG_DEFAULTS,
    DEFAULT_INSTANCE_TYPE,
    HEALTH_CHECK_DEFAULTS,
    PORTS,
)


class ServiceConfig(BaseModel):
    """
    One load-balanced service: an ALB in front of an auto-scaling group.

    Attributes:
        name: DNS-safe service name, used in resource names and outputs
        port: Port the instances listen on
        listener_port: Port the ALB listens on for HTTP
        instance_type: EC2 instance type for the launch template
        ami_id: AMI for the launch template (Amazon Linux 2023 if unset)
        min_size: Minimum number of instances
        max_size: Maximum number of instances
        desired_capacity: Initial number of instances (defaults to min_size)
        health_check_path: Target group health check path
        health_check_matcher: HTTP codes counted as healthy
        user_data: Bootstrap script (a default health page server if unset)
        certificate_arn: ACM certificate; enables HTTPS and HTTP redirect
        cpu_target: Average CPU percentage for target-tracking scaling
        internal: Create an internal rather than internet-facing ALB
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(pattern=r"^[a-z]([a-z0-9-]*[a-z0-9])?$", max_length=20)
    port: int = Field(ge=1, le=65535)
    listener_port: int = Field(default=PORTS["http"], ge=1, le=65535)
    instance_type: str = DEFAULT_INSTANCE_TYPE
    ami_id: str | None = None
    min_size: int = Field(default=ASG_DEFAULTS["min_size"], ge=0)
    max_size: int = Field(default=ASG_DEFAULTS["max_size"], ge=1)
    desired_capacity: int | None = Field(default=None, ge=0)
    health_check_path: str = Field(default=HEALTH_CHECK_DEFAULTS["path"], pattern=r"^/")
    health_check_matcher: str = HEALTH_CHECK_DEFAULTS["matcher"]
    user_data: str | None = None
    certificate_arn: str | None = None
    cpu_target: float | None = Field(default=None, gt=0, le=100)
    internal: bool = False

    @model_validator(mode="after")
    def check_capacity_bounds(self) -> "ServiceConfig":
        """Enforce min_size <= desired_capacity <= max_size."""
        if self.min_size > self.max_size:
            raise ValueError(
                f"min_size ({self.min_size}) exceeds max_size ({self.max_size})"
            )
        desired = self.capacity
        if not self.min_size <= desired <= self.max_size:
            raise ValueError(
                f"desired_capacity ({desired}) must be between "
                f"{self.min_size} and {self.max_size}"
            )
        return self

    @property
    def capacity(self) -> int:
        """Desired capacity, falling back to min_size."""
        if self.desired_capacity is None:
            return self.min_size
        return self.desired_capacity

    @property
    def https_enabled(self) -> bool:
        """Check if the service terminates TLS at the ALB."""
        return self.certificate_arn is not None


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Environment-specific configuration for infrastructure deployment.

    Attributes:
        environment: Deployment environment (dev, staging, prod)
        project: Project identifier used in resource names
        vpc_cidr: CIDR block of the VPC
        availability_zones: The two AZs subnets are spread across
        public_subnet_cidrs: Public subnet CIDRs, one per AZ
        private_subnet_cidrs: Private subnet CIDRs, one per AZ
        enable_nat_gateway: Give private subnets outbound internet via NAT
        enable_deletion_protection: Enable deletion protection on ALBs
        services: Load-balanced services to deploy
    """
    environment: str
    project: str
    vpc_cidr: str
    availability_zones: tuple[str, ...]
    public_subnet_cidrs: tuple[str, ...]
    private_subnet_cidrs: tuple[str, ...]
    enable_nat_gateway: bool
    enable_deletion_protection: bool
    services: tuple[ServiceConfig, ...]

    @property
    def service_names(self) -> list[str]:
        """Get service names in declaration order."""
        return [service.name for service in self.services]

    def get_service(self, name: str) -> ServiceConfig:
        """Get a service by name."""
        for service in self.services:
            if service.name == name:
                return service
        raise KeyError(name)
