"""
VPC Component Resource for the service fleet network.

Steps & Architecture:
1. VPC (10.0.0.0/16 by default): The isolated network container.
2. Internet Gateway (IGW): The "door" to the internet for the public tier.
3. Subnets (one per AZ in each tier, two AZs):
   - Public: ALBs and the NAT gateway. Instances here get public IPs.
   - Private: Auto-scaling group instances. No inbound path from the internet.
4. NAT Gateway (optional): Single NAT in the first public subnet so private
   instances can install packages and reach AWS APIs.
5. Route Tables:
   - Public RT: 0.0.0.0/0 -> IGW. Required for ALB replies to reach clients.
   - Private RT: 0.0.0.0/0 -> NAT when enabled, otherwise only the implicit
     "local" route.
6. Associations: Explicitly link every subnet to its tier's route table.

ALBs need two subnets in different AZs, which is why each tier spans
exactly two availability zones.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from fleet_iac.configs.base import EnvironmentConfig
from fleet_iac.configs.constants import ANY_IPV4
from fleet_iac.topology import SubnetPlan, plan_subnets
from fleet_iac.utils.tags import create_tags


@dataclass
class VpcOutputs:
    """Output values from VPC component."""
    vpc_id: pulumi.Output[str]
    public_subnet_ids: list[pulumi.Output[str]]
    private_subnet_ids: list[pulumi.Output[str]]
    public_route_table_id: pulumi.Output[str]
    private_route_table_id: pulumi.Output[str]
    nat_gateway_id: pulumi.Output[str] | None


class VpcComponent(pulumi.ComponentResource):
    """
    VPC component with public and private subnets across two AZs.

    Public subnets host load balancers; private subnets host the
    auto-scaling groups behind them.
    """

    def __init__(
        self,
        name: str,
        config: EnvironmentConfig,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:Vpc", name, None, opts)
        self.environment = config.environment

        child_opts = pulumi.ResourceOptions(parent=self)

        self.vpc = aws.ec2.Vpc(
            f"{name}-vpc",
            cidr_block=config.vpc_cidr,
            enable_dns_hostnames=True,
            enable_dns_support=True,
            tags=create_tags(self.environment, f"{name}-vpc"),
            opts=child_opts,
        )

        self.igw = aws.ec2.InternetGateway(
            f"{name}-igw",
            vpc_id=self.vpc.id,
            tags=create_tags(self.environment, f"{name}-igw"),
            opts=child_opts,
        )

        self.subnet_plans = plan_subnets(config)
        self.public_subnets: list[aws.ec2.Subnet] = []
        self.private_subnets: list[aws.ec2.Subnet] = []
        for plan in self.subnet_plans:
            subnet = self._create_subnet(name, plan, child_opts)
            if plan.tier == "public":
                self.public_subnets.append(subnet)
            else:
                self.private_subnets.append(subnet)

        self.nat_gateway: aws.ec2.NatGateway | None = None
        if config.enable_nat_gateway:
            self._create_nat_gateway(name, child_opts)

        self._create_route_tables(name, child_opts)

        self.register_outputs({
            "vpc_id": self.vpc.id,
            "public_subnet_ids": [subnet.id for subnet in self.public_subnets],
            "private_subnet_ids": [subnet.id for subnet in self.private_subnets],
            "public_route_table_id": self.public_rt.id,
            "private_route_table_id": self.private_rt.id,
        })

    def _create_subnet(
        self,
        name: str,
        plan: SubnetPlan,
        opts: pulumi.ResourceOptions,
    ) -> aws.ec2.Subnet:
        """Create a subnet from its plan."""
        return aws.ec2.Subnet(
            f"{name}-{plan.key}-subnet",
            vpc_id=self.vpc.id,
            cidr_block=plan.cidr,
            availability_zone=plan.availability_zone,
            map_public_ip_on_launch=plan.tier == "public",
            tags=create_tags(self.environment, f"{name}-{plan.key}-subnet", Tier=plan.tier),
            opts=opts,
        )

    def _create_nat_gateway(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create a single NAT gateway in the first public subnet."""
        self.nat_eip = aws.ec2.Eip(
            f"{name}-nat-eip",
            domain="vpc",
            tags=create_tags(self.environment, f"{name}-nat-eip"),
            opts=opts,
        )

        self.nat_gateway = aws.ec2.NatGateway(
            f"{name}-nat",
            allocation_id=self.nat_eip.id,
            subnet_id=self.public_subnets[0].id,
            tags=create_tags(self.environment, f"{name}-nat"),
            opts=pulumi.ResourceOptions.merge(
                opts,
                pulumi.ResourceOptions(depends_on=[self.igw]),
            ),
        )

    def _create_route_tables(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create route tables for public and private subnets."""
        self.public_rt = aws.ec2.RouteTable(
            f"{name}-public-rt",
            vpc_id=self.vpc.id,
            routes=[
                aws.ec2.RouteTableRouteArgs(
                    cidr_block=ANY_IPV4,
                    gateway_id=self.igw.id,
                ),
            ],
            tags=create_tags(self.environment, f"{name}-public-rt"),
            opts=opts,
        )

        private_routes = []
        if self.nat_gateway is not None:
            private_routes.append(
                aws.ec2.RouteTableRouteArgs(
                    cidr_block=ANY_IPV4,
                    nat_gateway_id=self.nat_gateway.id,
                )
            )

        self.private_rt = aws.ec2.RouteTable(
            f"{name}-private-rt",
            vpc_id=self.vpc.id,
            routes=private_routes,
            tags=create_tags(self.environment, f"{name}-private-rt"),
            opts=opts,
        )

        for plan, subnet in zip(
            [p for p in self.subnet_plans if p.tier == "public"], self.public_subnets
        ):
            aws.ec2.RouteTableAssociation(
                f"{name}-{plan.key}-rt-assoc",
                subnet_id=subnet.id,
                route_table_id=self.public_rt.id,
                opts=opts,
            )

        for plan, subnet in zip(
            [p for p in self.subnet_plans if p.tier == "private"], self.private_subnets
        ):
            aws.ec2.RouteTableAssociation(
                f"{name}-{plan.key}-rt-assoc",
                subnet_id=subnet.id,
                route_table_id=self.private_rt.id,
                opts=opts,
            )

    def get_outputs(self) -> VpcOutputs:
        """Get VPC output values."""
        return VpcOutputs(
            vpc_id=self.vpc.id,
            public_subnet_ids=[subnet.id for subnet in self.public_subnets],
            private_subnet_ids=[subnet.id for subnet in self.private_subnets],
            public_route_table_id=self.public_rt.id,
            private_route_table_id=self.private_rt.id,
            nat_gateway_id=self.nat_gateway.id if self.nat_gateway else None,
        )
