"""
Pulumi component resources for the service fleet.

Each submodule provides reusable ComponentResource classes:
- networking: VPC, subnets, route tables, security groups
- compute: load balancers, auto-scaling groups, per-service composition
"""
