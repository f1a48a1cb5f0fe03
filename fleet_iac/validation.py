"""
Structural checks for the planned topology.

Runs before any resource is declared so a broken configuration fails the
preview with a readable list of problems instead of a provider error halfway
through an update.

Checks:
- Subnets sit inside the VPC CIDR and do not overlap.
- Every load balancer gets exactly two subnets in different AZs.
- Every security group rule references a declared group.
- Generated ALB / target group names fit AWS limits and are unique.
- HTTPS listeners do not collide with the HTTP listener port.

Each check returns a list of error strings; empty means valid.
"""

import ipaddress
import logging
import re
from collections import Counter
from collections.abc import Iterable, Sequence

from fleet_iac.configs.base import EnvironmentConfig, ServiceConfig
from fleet_iac.configs.constants import AWS_NAME_LIMIT, PORTS
from fleet_iac.exceptions import TopologyError
from fleet_iac.topology import (
    SecurityRule,
    SubnetPlan,
    plan_security_groups,
    plan_security_rules,
    plan_subnets,
)
from fleet_iac.utils.naming import ResourceNamer

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")

_NETWORK_ERRORS = (ValueError, TypeError)


def _parse_network(cidr: str) -> ipaddress.IPv4Network | None:
    try:
        network = ipaddress.ip_network(cidr, strict=True)
    except _NETWORK_ERRORS:
        return None
    if not isinstance(network, ipaddress.IPv4Network):
        return None
    return network


def check_subnets(vpc_cidr: str, subnets: Sequence[SubnetPlan]) -> list[str]:
    """
    Check subnet CIDRs against the VPC and each other.

    Args:
        vpc_cidr: VPC CIDR block
        subnets: Planned subnets

    Returns:
        Error messages
    """
    vpc_network = _parse_network(vpc_cidr)
    if vpc_network is None:
        return [f"VPC CIDR '{vpc_cidr}' is not a valid IPv4 network"]

    errors = []
    for key, count in Counter(subnet.key for subnet in subnets).items():
        if count > 1:
            errors.append(f"Subnet key '{key}' is declared {count} times")

    parsed: list[tuple[SubnetPlan, ipaddress.IPv4Network]] = []
    for subnet in subnets:
        network = _parse_network(subnet.cidr)
        if network is None:
            errors.append(f"Subnet '{subnet.key}' CIDR '{subnet.cidr}' is not a valid IPv4 network")
            continue
        if not network.subnet_of(vpc_network):
            errors.append(f"Subnet '{subnet.key}' ({subnet.cidr}) is outside VPC {vpc_cidr}")
        parsed.append((subnet, network))

    for i, (first, first_network) in enumerate(parsed):
        for second, second_network in parsed[i + 1:]:
            if first_network.overlaps(second_network):
                errors.append(
                    f"Subnets '{first.key}' ({first.cidr}) and "
                    f"'{second.key}' ({second.cidr}) overlap"
                )
    return errors


def check_load_balancer_subnets(subnets: Sequence[SubnetPlan], owner: str = "load balancer") -> list[str]:
    """
    Check a load balancer references exactly two subnets in different AZs.

    Args:
        subnets: Subnets the load balancer is attached to
        owner: Name used in error messages

    Returns:
        Error messages
    """
    if len(subnets) != 2:
        return [f"{owner} must reference exactly 2 subnets, got {len(subnets)}"]

    first, second = subnets
    if first.availability_zone == second.availability_zone:
        return [
            f"{owner} subnets '{first.key}' and '{second.key}' are both in "
            f"{first.availability_zone}; they must be in different availability zones"
        ]
    return []


def check_ingress_references(rules: Iterable[SecurityRule], groups: Iterable[str]) -> list[str]:
    """
    Check every rule belongs to and references declared security groups.

    Args:
        rules: Planned security group rules
        groups: Declared security group keys

    Returns:
        Error messages
    """
    declared = set(groups)
    errors = []
    for rule in rules:
        if rule.group not in declared:
            errors.append(f"Rule '{rule.key}' belongs to unknown security group '{rule.group}'")
        if rule.source_group is not None and rule.source_group not in declared:
            errors.append(
                f"Rule '{rule.key}' references unknown security group '{rule.source_group}'"
            )
        if rule.source_group is None and rule.cidr is None:
            errors.append(f"Rule '{rule.key}' has neither a security group nor a CIDR peer")
    return errors


def check_resource_names(names: Iterable[str], limit: int = AWS_NAME_LIMIT) -> list[str]:
    """
    Check physical resource names are valid ALB / target group names.

    Names must be unique, fit the length limit, use only letters, digits and
    hyphens, not start or end with a hyphen, and not start with "internal-".

    Args:
        names: Generated names
        limit: Maximum length

    Returns:
        Error messages
    """
    errors = []
    names = list(names)
    for name in names:
        if len(name) > limit:
            errors.append(f"Name '{name}' is {len(name)} characters; the limit is {limit}")
        if not _NAME_PATTERN.match(name):
            errors.append(
                f"Name '{name}' may only contain letters, digits and hyphens, "
                "and cannot start or end with a hyphen"
            )
        if name.lower().startswith("internal-"):
            errors.append(f"Name '{name}' cannot start with 'internal-'")
    for name, count in Counter(names).items():
        if count > 1:
            errors.append(f"Name '{name}' is generated {count} times")
    return errors


def check_listener_ports(services: Iterable[ServiceConfig]) -> list[str]:
    """Check HTTPS-enabled services keep HTTP off the HTTPS port."""
    errors = []
    for service in services:
        if service.https_enabled and service.listener_port == PORTS["https"]:
            errors.append(
                f"Service '{service.name}' has a certificate, so its HTTP listener "
                f"cannot use port {PORTS['https']}"
            )
    return errors


def collect_topology_errors(config: EnvironmentConfig, namer: ResourceNamer) -> list[str]:
    """
    Run every structural check against the planned topology.

    Args:
        config: Environment configuration
        namer: Namer used to generate physical names

    Returns:
        All error messages, in check order
    """
    subnets = plan_subnets(config)
    public_subnets = [subnet for subnet in subnets if subnet.tier == "public"]
    private_subnets = [subnet for subnet in subnets if subnet.tier == "private"]

    errors = check_subnets(config.vpc_cidr, subnets)
    for service in config.services:
        lb_subnets = private_subnets if service.internal else public_subnets
        errors.extend(
            check_load_balancer_subnets(lb_subnets, owner=f"Service '{service.name}' ALB")
        )

    errors.extend(
        check_ingress_references(
            plan_security_rules(config.services),
            plan_security_groups(config.services),
        )
    )

    physical_names = []
    for service in config.services:
        physical_names.append(namer.aws_name(service.name, "alb"))
        physical_names.append(namer.aws_name(service.name, "tg"))
    errors.extend(check_resource_names(physical_names))
    errors.extend(check_listener_ports(config.services))
    return errors


def validate_topology(config: EnvironmentConfig, namer: ResourceNamer) -> None:
    """
    Validate the planned topology.

    Raises:
        TopologyError: If any structural check fails
    """
    errors = collect_topology_errors(config, namer)
    if errors:
        for error in errors:
            logger.error("Topology check failed: %s", error)
        raise TopologyError(errors)
    logger.info("Topology checks passed for %d service(s)", len(config.services))
