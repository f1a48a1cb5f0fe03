"""
Pulumi infrastructure-as-code for a load-balanced service fleet.

This package defines AWS infrastructure including:
- VPC with public and private subnets across two availability zones
- Internet gateway, optional NAT gateway and route tables
- Per-service security groups for load balancers and instances
- Per-service Application Load Balancer, target group and listeners
- Per-service launch template and auto-scaling group
"""
