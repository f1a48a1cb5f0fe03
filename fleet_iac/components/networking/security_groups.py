"""
Security Groups Component for Network Access Control.

Architectural Steps & Flow:
1. Create "Shell" Security Groups:
   - Two per service: one for its ALB, one for its instances. Created first
     without rules so they exist and can be referenced by ID.

2. Define Rules (Micro-Segmentation) from the topology plan:
   - ALB ingress: listener port(s) from anywhere.
   - ALB egress: ONLY to its own instance group on the service port.
   - Instance ingress: ONLY from its own ALB group on the service port.
   - Instance egress: open, for bootstrapping and AWS APIs.

3. Identity over IPs:
   - Rules between tiers reference source security groups rather than
     CIDRs, so scaling events never need rule changes.

4. Stateful Nature:
   - Security Groups are stateful. Allowing an inbound request
     automatically allows the outbound reply.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from fleet_iac.configs.base import ServiceConfig
from fleet_iac.topology import (
    SecurityRule,
    alb_group_key,
    instance_group_key,
    plan_security_groups,
    plan_security_rules,
)
from fleet_iac.utils.tags import create_tags


@dataclass
class SecurityGroupOutputs:
    """Output values from security groups component, keyed by service name."""
    alb_sg_ids: dict[str, pulumi.Output[str]]
    instance_sg_ids: dict[str, pulumi.Output[str]]


class SecurityGroupsComponent(pulumi.ComponentResource):
    """
    Security groups component for per-service access control.

    Implements least-privilege security group rules:
    - Each ALB accepts its listener ports from the internet
    - Each ALB may only talk to its own service's instances
    - Instances accept traffic only from their own ALB
    """

    def __init__(
        self,
        name: str,
        environment: str,
        vpc_id: pulumi.Input[str],
        services: tuple[ServiceConfig, ...] | list[ServiceConfig],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:SecurityGroups", name, None, opts)
        self.environment = environment
        self.services = list(services)

        child_opts = pulumi.ResourceOptions(parent=self)

        service_by_group = {}
        for service in self.services:
            service_by_group[alb_group_key(service.name)] = (service.name, "Application Load Balancer")
            service_by_group[instance_group_key(service.name)] = (service.name, "auto-scaling instances")

        self.groups: dict[str, aws.ec2.SecurityGroup] = {}
        for key in plan_security_groups(self.services):
            service_name, role = service_by_group[key]
            self.groups[key] = aws.ec2.SecurityGroup(
                f"{name}-{key}-sg",
                description=f"Security group for {service_name} {role}",
                vpc_id=vpc_id,
                tags=create_tags(environment, f"{name}-{key}-sg", service=service_name),
                opts=child_opts,
            )

        self.rules = plan_security_rules(self.services)
        self._create_rules(name, child_opts)

        outputs = self.get_outputs()
        self.register_outputs({
            "alb_sg_ids": outputs.alb_sg_ids,
            "instance_sg_ids": outputs.instance_sg_ids,
        })

    def _create_rules(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create security group rules from the plan."""
        self.rule_resources: dict[str, pulumi.CustomResource] = {}
        for rule in self.rules:
            args = self._rule_args(rule)
            if rule.direction == "ingress":
                resource = aws.vpc.SecurityGroupIngressRule(f"{name}-{rule.key}", **args, opts=opts)
            else:
                resource = aws.vpc.SecurityGroupEgressRule(f"{name}-{rule.key}", **args, opts=opts)
            self.rule_resources[rule.key] = resource

    def _rule_args(self, rule: SecurityRule) -> dict:
        """Translate a planned rule into resource arguments."""
        args = {
            "security_group_id": self.groups[rule.group].id,
            "ip_protocol": rule.ip_protocol,
            "description": rule.description,
        }
        if rule.port is not None:
            args["from_port"] = rule.port
            args["to_port"] = rule.port
        if rule.source_group is not None:
            args["referenced_security_group_id"] = self.groups[rule.source_group].id
        else:
            args["cidr_ipv4"] = rule.cidr
        return args

    def get_outputs(self) -> SecurityGroupOutputs:
        """Get security group output values."""
        return SecurityGroupOutputs(
            alb_sg_ids={
                service.name: self.groups[alb_group_key(service.name)].id
                for service in self.services
            },
            instance_sg_ids={
                service.name: self.groups[instance_group_key(service.name)].id
                for service in self.services
            },
        )
