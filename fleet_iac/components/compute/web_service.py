"""
Web Service Component: one load-balanced, auto-scaled service.

Request path: client → ALB listener → target group → ASG instance.

Placement:
- Internet-facing ALBs sit in the public subnets; internal ALBs in the
  private subnets. Either way, exactly two subnets in different AZs.
- Instances always live in the private subnets.
"""

from dataclasses import dataclass

import pulumi

from fleet_iac.components.compute.alb import AlbComponent
from fleet_iac.components.compute.auto_scaling import AutoScalingComponent
from fleet_iac.configs.base import ServiceConfig
from fleet_iac.utils.naming import ResourceNamer


@dataclass
class WebServiceOutputs:
    """Output values from web service component."""
    service_name: str
    dns_name: pulumi.Output[str]
    target_group_arn: pulumi.Output[str]
    asg_name: pulumi.Output[str]


class WebServiceComponent(pulumi.ComponentResource):
    """
    ALB plus auto-scaling group for a single service.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        service: ServiceConfig,
        namer: ResourceNamer,
        vpc_id: pulumi.Input[str],
        public_subnet_ids: list[pulumi.Input[str]],
        private_subnet_ids: list[pulumi.Input[str]],
        alb_security_group_id: pulumi.Input[str],
        instance_security_group_id: pulumi.Input[str],
        ami_id: pulumi.Input[str] | None = None,
        enable_deletion_protection: bool = False,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:WebService", name, None, opts)
        self.service = service

        child_opts = pulumi.ResourceOptions(parent=self)

        self.alb = AlbComponent(
            name=name,
            environment=environment,
            service=service,
            vpc_id=vpc_id,
            subnet_ids=private_subnet_ids if service.internal else public_subnet_ids,
            security_group_id=alb_security_group_id,
            alb_name=namer.aws_name(service.name, "alb"),
            target_group_name=namer.aws_name(service.name, "tg"),
            enable_deletion_protection=enable_deletion_protection,
            opts=child_opts,
        )
        alb_outputs = self.alb.get_outputs()

        self.auto_scaling = AutoScalingComponent(
            name=name,
            environment=environment,
            service=service,
            subnet_ids=private_subnet_ids,
            security_group_id=instance_security_group_id,
            target_group_arn=alb_outputs.target_group_arn,
            ami_id=ami_id,
            opts=child_opts,
        )
        asg_outputs = self.auto_scaling.get_outputs()

        self.register_outputs({
            "dns_name": alb_outputs.alb_dns_name,
            "target_group_arn": alb_outputs.target_group_arn,
            "asg_name": asg_outputs.asg_name,
        })

    def get_outputs(self) -> WebServiceOutputs:
        """Get web service output values."""
        return WebServiceOutputs(
            service_name=self.service.name,
            dns_name=self.alb.alb.dns_name,
            target_group_arn=self.alb.target_group.arn,
            asg_name=self.auto_scaling.asg.name,
        )
