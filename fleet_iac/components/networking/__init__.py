"""
Networking components for VPC infrastructure.

Components:
- VpcComponent: VPC with public/private subnets, NAT gateway, route tables
- SecurityGroupsComponent: Per-service ALB and instance security groups
"""

from fleet_iac.components.networking.vpc import VpcComponent, VpcOutputs
from fleet_iac.components.networking.security_groups import SecurityGroupsComponent, SecurityGroupOutputs

__all__ = [
    "VpcComponent",
    "VpcOutputs",
    "SecurityGroupsComponent",
    "SecurityGroupOutputs",
]
