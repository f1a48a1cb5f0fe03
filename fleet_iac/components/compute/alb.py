"""
Application Load Balancer Component for a fleet service.

Core Jobs:
1. Distribute Traffic: Spread requests across the service's ASG instances.
2. Health Check: Constantly probe instances. Unhealthy ones stop receiving
   traffic, and the ASG replaces them (ELB health checks).
3. Stable Endpoint: Instances come and go, but the ALB DNS name stays the
   same. That DNS name is what the stack exports per service.

The 3-Resource Chain:
1. Load Balancer: The "building". Has a DNS name. Spans exactly two subnets
   in different AZs.
2. Listener: The "door". Binds to a PORT and says what to do with traffic.
   - HTTP only: forward to the target group.
   - With a certificate: port 80 redirects to 443, port 443 forwards.
3. Target Group: The "pool of servers". The ASG registers its instances here.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from fleet_iac.configs.base import ServiceConfig
from fleet_iac.configs.constants import HEALTH_CHECK_DEFAULTS, PORTS
from fleet_iac.utils.tags import create_tags

TLS_POLICY = "ELBSecurityPolicy-TLS13-1-2-2021-06"


@dataclass
class AlbOutputs:
    """Output values from ALB component."""
    alb_arn: pulumi.Output[str]
    alb_dns_name: pulumi.Output[str]
    listener_arn: pulumi.Output[str]
    target_group_arn: pulumi.Output[str]


class AlbComponent(pulumi.ComponentResource):
    """
    Application Load Balancer in front of one service's auto-scaling group.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        service: ServiceConfig,
        vpc_id: pulumi.Input[str],
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        alb_name: str,
        target_group_name: str,
        enable_deletion_protection: bool = False,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        if len(subnet_ids) != 2:
            raise ValueError(
                f"ALB {alb_name} needs exactly 2 subnets in different AZs, got {len(subnet_ids)}"
            )

        super().__init__("custom:compute:Alb", name, None, opts)

        self.service = service
        child_opts = pulumi.ResourceOptions(parent=self)

        self.alb = aws.lb.LoadBalancer(
            f"{name}-alb",
            name=alb_name,
            internal=service.internal,
            load_balancer_type="application",
            security_groups=[security_group_id],
            subnets=subnet_ids,
            enable_deletion_protection=enable_deletion_protection,
            tags=create_tags(environment, alb_name, service=service.name),
            opts=child_opts,
        )

        self.target_group = aws.lb.TargetGroup(
            f"{name}-tg",
            name=target_group_name,
            port=service.port,
            protocol="HTTP",
            vpc_id=vpc_id,
            target_type="instance",
            deregistration_delay=30,
            health_check=aws.lb.TargetGroupHealthCheckArgs(
                enabled=True,
                path=service.health_check_path,
                port="traffic-port",
                protocol="HTTP",
                healthy_threshold=HEALTH_CHECK_DEFAULTS["healthy_threshold"],
                unhealthy_threshold=HEALTH_CHECK_DEFAULTS["unhealthy_threshold"],
                timeout=HEALTH_CHECK_DEFAULTS["timeout"],
                interval=HEALTH_CHECK_DEFAULTS["interval"],
                matcher=service.health_check_matcher,
            ),
            tags=create_tags(environment, target_group_name, service=service.name),
            opts=child_opts,
        )

        self.https_listener: aws.lb.Listener | None = None
        if service.https_enabled:
            self._create_https_listeners(name, environment, child_opts)
        else:
            self.http_listener = aws.lb.Listener(
                f"{name}-http-listener",
                load_balancer_arn=self.alb.arn,
                port=service.listener_port,
                protocol="HTTP",
                default_actions=[
                    aws.lb.ListenerDefaultActionArgs(
                        type="forward",
                        target_group_arn=self.target_group.arn,
                    ),
                ],
                tags=create_tags(environment, f"{name}-http-listener", service=service.name),
                opts=child_opts,
            )

        self.register_outputs({
            "alb_arn": self.alb.arn,
            "alb_dns_name": self.alb.dns_name,
            "listener_arn": self.listener.arn,
            "target_group_arn": self.target_group.arn,
        })

    def _create_https_listeners(
        self,
        name: str,
        environment: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create the HTTPS forwarding listener and the HTTP redirect."""
        self.https_listener = aws.lb.Listener(
            f"{name}-https-listener",
            load_balancer_arn=self.alb.arn,
            port=PORTS["https"],
            protocol="HTTPS",
            ssl_policy=TLS_POLICY,
            certificate_arn=self.service.certificate_arn,
            default_actions=[
                aws.lb.ListenerDefaultActionArgs(
                    type="forward",
                    target_group_arn=self.target_group.arn,
                ),
            ],
            tags=create_tags(environment, f"{name}-https-listener", service=self.service.name),
            opts=opts,
        )

        self.http_listener = aws.lb.Listener(
            f"{name}-http-listener",
            load_balancer_arn=self.alb.arn,
            port=self.service.listener_port,
            protocol="HTTP",
            default_actions=[
                aws.lb.ListenerDefaultActionArgs(
                    type="redirect",
                    redirect=aws.lb.ListenerDefaultActionRedirectArgs(
                        port=str(PORTS["https"]),
                        protocol="HTTPS",
                        status_code="HTTP_301",
                    ),
                ),
            ],
            tags=create_tags(environment, f"{name}-http-listener", service=self.service.name),
            opts=opts,
        )

    @property
    def listener(self) -> aws.lb.Listener:
        """The listener that forwards to the target group."""
        if self.https_listener is not None:
            return self.https_listener
        return self.http_listener

    def get_outputs(self) -> AlbOutputs:
        """Get ALB output values."""
        return AlbOutputs(
            alb_arn=self.alb.arn,
            alb_dns_name=self.alb.dns_name,
            listener_arn=self.listener.arn,
            target_group_arn=self.target_group.arn,
        )
