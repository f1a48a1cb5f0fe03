"""
Fleet assembly: declares every component in dependency order.

1. VPC (subnets, gateways, route tables)
2. Security groups (per-service ALB + instance groups)
3. Web services (ALB, target group, listeners, launch template, ASG)

Kept separate from the program entry point so the whole fleet can be
declared under Pulumi mocks in tests.
"""

from typing import Any

import pulumi

from fleet_iac.components.compute.auto_scaling import lookup_default_ami
from fleet_iac.components.compute.web_service import WebServiceComponent
from fleet_iac.components.networking.security_groups import SecurityGroupsComponent
from fleet_iac.components.networking.vpc import VpcComponent
from fleet_iac.configs.base import EnvironmentConfig
from fleet_iac.utils.naming import ResourceNamer


def deploy_fleet(config: EnvironmentConfig, namer: ResourceNamer) -> dict[str, Any]:
    """
    Declare the VPC, security groups and every configured service.

    Args:
        config: Validated environment configuration
        namer: Resource namer for the stack

    Returns:
        Stack outputs, including load_balancer_dns: service name to ALB DNS name
    """
    base_name = namer.name("")

    # --- Layer 1: Networking Foundation ---
    vpc = VpcComponent(
        name=base_name,
        config=config,
    )
    vpc_outputs = vpc.get_outputs()

    security_groups = SecurityGroupsComponent(
        name=base_name,
        environment=config.environment,
        vpc_id=vpc_outputs.vpc_id,
        services=config.services,
    )
    sg_outputs = security_groups.get_outputs()

    # --- Layer 2: Services ---
    ami_id = None
    if any(service.ami_id is None for service in config.services):
        ami_id = lookup_default_ami()
        pulumi.log.info(f"Using Amazon Linux 2023 AMI {ami_id}")

    services = {}
    for service in config.services:
        web_service = WebServiceComponent(
            name=namer.name(service.name),
            environment=config.environment,
            service=service,
            namer=namer,
            vpc_id=vpc_outputs.vpc_id,
            public_subnet_ids=vpc_outputs.public_subnet_ids,
            private_subnet_ids=vpc_outputs.private_subnet_ids,
            alb_security_group_id=sg_outputs.alb_sg_ids[service.name],
            instance_security_group_id=sg_outputs.instance_sg_ids[service.name],
            ami_id=ami_id,
            enable_deletion_protection=config.enable_deletion_protection,
        )
        services[service.name] = web_service.get_outputs()
        pulumi.log.info(
            f"Declared service {service.name}: port {service.port}, "
            f"{service.min_size}-{service.max_size} x {service.instance_type}"
        )

    outputs: dict[str, Any] = {
        "vpc_id": vpc_outputs.vpc_id,
        "public_subnet_ids": vpc_outputs.public_subnet_ids,
        "private_subnet_ids": vpc_outputs.private_subnet_ids,
        "load_balancer_dns": {
            name: service_outputs.dns_name for name, service_outputs in services.items()
        },
        "autoscaling_groups": {
            name: service_outputs.asg_name for name, service_outputs in services.items()
        },
    }
    if vpc_outputs.nat_gateway_id is not None:
        outputs["nat_gateway_id"] = vpc_outputs.nat_gateway_id
    return outputs
