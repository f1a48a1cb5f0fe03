"""
Auto Scaling Component for a fleet service's instances.

Key Components:
1. AMI (Amazon Machine Image): The OS template. Amazon Linux 2023 unless the
   service pins its own AMI.
2. Launch Template: Everything needed to boot an instance: AMI, type,
   security group, encrypted gp3 root volume, IMDSv2 and user data.
3. User Data: Bootstrap script that runs ONCE at first boot. The default
   serves a static health page on the service port so the target group
   marks instances healthy before a real application is deployed.
4. Auto Scaling Group:
   - Sized min <= desired <= max.
   - Spread across the two private subnets (one per AZ).
   - Registers instances with the ALB target group and uses ELB health
     checks, so instances failing the ALB probe are replaced.
   - Rolling instance refresh on launch template changes.
5. Scaling Policy (optional): target tracking on average CPU.
"""

import base64
import posixpath
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from fleet_iac.configs.base import ServiceConfig
from fleet_iac.configs.constants import ASG_DEFAULTS, DEFAULT_AMI_FILTER
from fleet_iac.utils.tags import asg_tags, create_tags


@dataclass
class AutoScalingOutputs:
    """Output values from auto scaling component."""
    asg_name: pulumi.Output[str]
    launch_template_id: pulumi.Output[str]


def lookup_default_ami() -> str:
    """Get the latest Amazon Linux 2023 AMI id in the provider's region."""
    ami = aws.ec2.get_ami(
        most_recent=True,
        owners=["amazon"],
        filters=[
            aws.ec2.GetAmiFilterArgs(
                name="name",
                values=[DEFAULT_AMI_FILTER],
            ),
            aws.ec2.GetAmiFilterArgs(
                name="virtualization-type",
                values=["hvm"],
            ),
        ],
    )
    return ami.id


def render_user_data(service: ServiceConfig) -> str:
    """
    Render the bootstrap script for a service's instances.

    Args:
        service: Service configuration

    Returns:
        The service's own user data, or a default health page server
    """
    if service.user_data is not None:
        return service.user_data

    web_root = f"/opt/{service.name}/www"
    health_file = service.health_check_path
    if health_file.endswith("/"):
        health_file += "index.html"
    health_dir = posixpath.dirname(health_file)

    return f"""#!/bin/bash
set -e

# Static health page
mkdir -p {web_root}{health_dir}
echo "{service.name} ok" > {web_root}{health_file}
echo "{service.name}" > {web_root}/index.html

cat > /etc/systemd/system/{service.name}.service << 'EOF'
[Unit]
Description={service.name} placeholder server
After=network.target

[Service]
Type=simple
ExecStart=/usr/bin/python3 -m http.server {service.port} --directory {web_root}
Restart=always
RestartSec=5

[Install]
WantedBy=multi-user.target
EOF

systemctl daemon-reload
systemctl enable --now {service.name}

echo "Bootstrap complete"
"""


class AutoScalingComponent(pulumi.ComponentResource):
    """
    Launch template and auto-scaling group for one service.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        service: ServiceConfig,
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        target_group_arn: pulumi.Input[str],
        ami_id: pulumi.Input[str] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        image_id = service.ami_id or ami_id
        if image_id is None:
            raise ValueError(f"Service {service.name} has no AMI; pass ami_id or set one in config")

        super().__init__("custom:compute:AutoScaling", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        instance_tags = create_tags(environment, f"{name}-instance", service=service.name)
        user_data = base64.b64encode(render_user_data(service).encode()).decode()

        # Target tracking owns the live desired capacity once attached.
        self.asg_opts = child_opts
        if service.cpu_target is not None:
            self.asg_opts = pulumi.ResourceOptions.merge(
                child_opts,
                pulumi.ResourceOptions(ignore_changes=["desiredCapacity"]),
            )

        self.launch_template = aws.ec2.LaunchTemplate(
            f"{name}-lt",
            name_prefix=f"{name}-",
            image_id=image_id,
            instance_type=service.instance_type,
            vpc_security_group_ids=[security_group_id],
            user_data=user_data,
            update_default_version=True,
            block_device_mappings=[
                aws.ec2.LaunchTemplateBlockDeviceMappingArgs(
                    device_name="/dev/xvda",
                    ebs=aws.ec2.LaunchTemplateBlockDeviceMappingEbsArgs(
                        volume_size=8,
                        volume_type="gp3",
                        encrypted="true",
                        delete_on_termination="true",
                    ),
                ),
            ],
            metadata_options=aws.ec2.LaunchTemplateMetadataOptionsArgs(
                http_tokens="required",  # IMDSv2
                http_endpoint="enabled",
            ),
            tag_specifications=[
                aws.ec2.LaunchTemplateTagSpecificationArgs(
                    resource_type="volume",
                    tags=instance_tags,
                ),
            ],
            tags=create_tags(environment, f"{name}-lt", service=service.name),
            opts=child_opts,
        )

        self.asg = aws.autoscaling.Group(
            f"{name}-asg",
            min_size=service.min_size,
            max_size=service.max_size,
            desired_capacity=service.capacity,
            vpc_zone_identifiers=subnet_ids,
            target_group_arns=[target_group_arn],
            health_check_type="ELB",
            health_check_grace_period=ASG_DEFAULTS["health_check_grace_period"],
            launch_template=aws.autoscaling.GroupLaunchTemplateArgs(
                id=self.launch_template.id,
                version=self.launch_template.latest_version.apply(str),
            ),
            instance_refresh=aws.autoscaling.GroupInstanceRefreshArgs(
                strategy="Rolling",
                preferences=aws.autoscaling.GroupInstanceRefreshPreferencesArgs(
                    min_healthy_percentage=ASG_DEFAULTS["min_healthy_percentage"],
                ),
            ),
            tags=asg_tags(instance_tags),
            opts=self.asg_opts,
        )

        self.scaling_policy: aws.autoscaling.Policy | None = None
        if service.cpu_target is not None:
            self.scaling_policy = aws.autoscaling.Policy(
                f"{name}-cpu-target",
                autoscaling_group_name=self.asg.name,
                policy_type="TargetTrackingScaling",
                target_tracking_configuration=aws.autoscaling.PolicyTargetTrackingConfigurationArgs(
                    predefined_metric_specification=aws.autoscaling.PolicyTargetTrackingConfigurationPredefinedMetricSpecificationArgs(
                        predefined_metric_type="ASGAverageCPUUtilization",
                    ),
                    target_value=service.cpu_target,
                ),
                opts=child_opts,
            )

        self.register_outputs({
            "asg_name": self.asg.name,
            "launch_template_id": self.launch_template.id,
        })

    def get_outputs(self) -> AutoScalingOutputs:
        """Get auto scaling output values."""
        return AutoScalingOutputs(
            asg_name=self.asg.name,
            launch_template_id=self.launch_template.id,
        )
