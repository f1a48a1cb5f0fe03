"""
Declarative topology plans for the service fleet.

Pure-Python description of subnets and security group rules, computed from
configuration before any Pulumi resource is declared. Components turn these
plans into resources; validation checks them for structural problems.

Layout:
- Public subnets (one per AZ): ALBs and the NAT gateway.
- Private subnets (one per AZ): auto-scaling group instances.

Security groups (two per service):
- "<service>-alb": accepts the listener port(s) from anywhere, forwards only
  to the service's instance group.
- "<service>-instances": accepts the service port ONLY from its ALB group,
  outbound open (package installs, AWS APIs via NAT).
"""

from dataclasses import dataclass
from typing import Literal

from fleet_iac.configs.base import EnvironmentConfig, ServiceConfig
from fleet_iac.configs.constants import ANY_IPV4, PORTS

SubnetTier = Literal["public", "private"]
RuleDirection = Literal["ingress", "egress"]

_AZ_SUFFIXES = ("a", "b")


@dataclass(frozen=True)
class SubnetPlan:
    """A subnet to create: logical key, CIDR block, AZ and tier."""
    key: str
    cidr: str
    availability_zone: str
    tier: SubnetTier


@dataclass(frozen=True)
class SecurityRule:
    """
    A single security group rule between logical groups.

    Attributes:
        key: Unique rule identifier, used in the resource name
        direction: "ingress" or "egress"
        group: Logical key of the group the rule belongs to
        ip_protocol: "tcp", or "-1" for all traffic
        port: Port (from and to) for tcp rules, None for all traffic
        source_group: Logical key of the referenced group, if any
        cidr: IPv4 CIDR peer, if the peer is not a group
        description: Human-readable description
    """
    key: str
    direction: RuleDirection
    group: str
    ip_protocol: str
    port: int | None
    source_group: str | None = None
    cidr: str | None = None
    description: str = ""


def alb_group_key(service_name: str) -> str:
    """Logical key of a service's load balancer security group."""
    return f"{service_name}-alb"


def instance_group_key(service_name: str) -> str:
    """Logical key of a service's instance security group."""
    return f"{service_name}-instances"


def plan_subnets(config: EnvironmentConfig) -> list[SubnetPlan]:
    """
    Plan one public and one private subnet per availability zone.

    Args:
        config: Environment configuration

    Returns:
        Public subnets first, then private, each ordered by AZ
    """
    plans = []
    for tier, cidrs in (
        ("public", config.public_subnet_cidrs),
        ("private", config.private_subnet_cidrs),
    ):
        for suffix, cidr, az in zip(_AZ_SUFFIXES, cidrs, config.availability_zones):
            plans.append(
                SubnetPlan(
                    key=f"{tier}-{suffix}",
                    cidr=cidr,
                    availability_zone=az,
                    tier=tier,
                )
            )
    return plans


def listener_ports(service: ServiceConfig) -> list[int]:
    """Ports the service's ALB listens on."""
    if service.https_enabled:
        return [service.listener_port, PORTS["https"]]
    return [service.listener_port]


def plan_security_groups(services: tuple[ServiceConfig, ...] | list[ServiceConfig]) -> list[str]:
    """Logical keys of every security group to create."""
    groups = []
    for service in services:
        groups.append(alb_group_key(service.name))
        groups.append(instance_group_key(service.name))
    return groups


def plan_security_rules(
    services: tuple[ServiceConfig, ...] | list[ServiceConfig],
) -> list[SecurityRule]:
    """
    Plan least-privilege rules for every service.

    Args:
        services: Services to plan rules for

    Returns:
        Ingress and egress rules referencing logical group keys
    """
    rules = []
    for service in services:
        alb_group = alb_group_key(service.name)
        instance_group = instance_group_key(service.name)

        for port in listener_ports(service):
            rules.append(
                SecurityRule(
                    key=f"{service.name}-alb-ingress-{port}",
                    direction="ingress",
                    group=alb_group,
                    ip_protocol="tcp",
                    port=port,
                    cidr=ANY_IPV4,
                    description=f"Port {port} from the internet",
                )
            )

        rules.append(
            SecurityRule(
                key=f"{service.name}-alb-egress-instances",
                direction="egress",
                group=alb_group,
                ip_protocol="tcp",
                port=service.port,
                source_group=instance_group,
                description=f"To {service.name} instances",
            )
        )
        rules.append(
            SecurityRule(
                key=f"{service.name}-instances-ingress-alb",
                direction="ingress",
                group=instance_group,
                ip_protocol="tcp",
                port=service.port,
                source_group=alb_group,
                description=f"Port {service.port} from {service.name} ALB",
            )
        )
        rules.append(
            SecurityRule(
                key=f"{service.name}-instances-egress-all",
                direction="egress",
                group=instance_group,
                ip_protocol="-1",
                port=None,
                cidr=ANY_IPV4,
                description="All outbound traffic",
            )
        )
    return rules
