"""
Compute components for load-balanced services.

Components:
- AlbComponent: Application Load Balancer, target group, listeners
- AutoScalingComponent: Launch template and auto-scaling group
- WebServiceComponent: ALB + auto-scaling group for one service
"""

from fleet_iac.components.compute.alb import AlbComponent, AlbOutputs
from fleet_iac.components.compute.auto_scaling import AutoScalingComponent, AutoScalingOutputs
from fleet_iac.components.compute.web_service import WebServiceComponent, WebServiceOutputs

__all__ = [
    "AlbComponent",
    "AlbOutputs",
    "AutoScalingComponent",
    "AutoScalingOutputs",
    "WebServiceComponent",
    "WebServiceOutputs",
]
