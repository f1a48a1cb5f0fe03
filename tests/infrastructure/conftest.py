"""Pytest fixtures for infrastructure tests."""

import sys
from pathlib import Path

import pulumi
import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class FleetMocks(pulumi.runtime.Mocks):
    """Echo resource inputs back as state, filling in provider-computed fields."""

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs = dict(args.inputs)
        outputs.setdefault("arn", f"arn:aws:mock:us-east-1:123456789012:{args.name}")
        if args.typ == "aws:lb/loadBalancer:LoadBalancer":
            outputs["dnsName"] = f"{args.name}-1234567890.us-east-1.elb.amazonaws.com"
        if args.typ == "aws:autoscaling/group:Group":
            outputs.setdefault("name", f"{args.name}-20260101")
        if args.typ == "aws:ec2/launchTemplate:LaunchTemplate":
            outputs["latestVersion"] = 1
        return [f"{args.name}-id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "aws:ec2/getAmi:getAmi":
            return {"id": "ami-0mock1234567890", "architecture": "x86_64"}
        return {}


pulumi.runtime.set_mocks(
    FleetMocks(),
    project="service-fleet",
    stack="test",
    preview=False,
)


@pytest.fixture
def iac_project_root():
    """Return the IaC package root directory."""
    return PROJECT_ROOT / "fleet_iac"


@pytest.fixture
def python_files_in_iac(iac_project_root):
    """Return all Python files in the IaC package."""
    return [f for f in iac_project_root.rglob("*.py") if "__pycache__" not in str(f)]


@pytest.fixture
def raw_config():
    """Plain stack configuration values with two services."""
    return {
        "environment": "dev",
        "services": {
            "frontend": {"port": 80, "min_size": 1, "max_size": 3},
            "api": {
                "port": 8080,
                "health_check_path": "/health",
                "min_size": 2,
                "max_size": 4,
                "cpu_target": 60,
            },
        },
    }


@pytest.fixture
def environment_config(raw_config):
    """Validated environment configuration."""
    from fleet_iac.configs.environment import load_config

    return load_config(raw_config)


@pytest.fixture
def namer(environment_config):
    """Resource namer for the test stack."""
    from fleet_iac.utils.naming import ResourceNamer

    return ResourceNamer(project=environment_config.project, environment=environment_config.environment)
