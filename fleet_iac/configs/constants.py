"""
Infrastructure constants for the service fleet.

Contains CIDR blocks, availability zones, default sizing and tags.
"""

from typing import Any, Final

PROJECT_NAME: Final[str] = "service-fleet"

# VPC Configuration
VPC_CIDR: Final[str] = "10.0.0.0/16"

# Subnet CIDR blocks, one per availability zone
PUBLIC_SUBNET_CIDRS: Final[tuple[str, str]] = (
    "10.0.0.0/24",  # ALBs + NAT (AZ-a)
    "10.0.1.0/24",  # ALBs (AZ-b)
)
PRIVATE_SUBNET_CIDRS: Final[tuple[str, str]] = (
    "10.0.10.0/24",  # ASG instances (AZ-a)
    "10.0.11.0/24",  # ASG instances (AZ-b)
)

# Availability zones (us-east-1)
AVAILABILITY_ZONES: Final[tuple[str, str]] = (
    "us-east-1a",
    "us-east-1b",
)

# Everything outside the VPC
ANY_IPV4: Final[str] = "0.0.0.0/0"

# AWS caps load balancer and target group names at 32 characters
AWS_NAME_LIMIT: Final[int] = 32

# Default tags applied to all resources
DEFAULT_TAGS: Final[dict[str, str]] = {
    "Project": PROJECT_NAME,
    "ManagedBy": "pulumi",
}

# Port configurations
PORTS: Final[dict[str, int]] = {
    "http": 80,
    "https": 443,
}

# Auto Scaling Group defaults
ASG_DEFAULTS: Final[dict[str, int]] = {
    "min_size": 1,
    "max_size": 2,
    "health_check_grace_period": 120,
    "min_healthy_percentage": 50,
}

# Target group health check defaults
HEALTH_CHECK_DEFAULTS: Final[dict[str, Any]] = {
    "path": "/",
    "matcher": "200",
    "healthy_threshold": 2,
    "unhealthy_threshold": 3,
    "timeout": 5,
    "interval": 30,
}

DEFAULT_INSTANCE_TYPE: Final[str] = "t3.micro"

# Amazon Linux 2023 AMI lookup
DEFAULT_AMI_FILTER: Final[str] = "al2023-ami-2023.*-x86_64"

# Services declared when the stack config has no "services" object
DEFAULT_SERVICES: Final[dict[str, dict[str, Any]]] = {
    "frontend": {"port": 80},
    "api": {"port": 8080, "health_check_path": "/health"},
}
