"""
Pulumi program entry point for the service fleet infrastructure.

Steps:
1. Load and validate configuration (fails before any resource is declared)
2. VPC → Security Groups → per-service ALB + Auto Scaling Group
3. Export outputs, including load_balancer_dns (service name → ALB DNS)
"""

import pulumi

from fleet_iac.configs.environment import get_config
from fleet_iac.fleet import deploy_fleet
from fleet_iac.utils.log_config import configure_logging
from fleet_iac.utils.naming import ResourceNamer
from fleet_iac.utils.outputs import write_outputs_to_env
from fleet_iac.validation import validate_topology


def main() -> None:
    """Deploy the service fleet infrastructure."""
    configure_logging(pulumi.Config().get("log_level") or "INFO")

    # Load configuration
    config = get_config()
    namer = ResourceNamer(project=config.project, environment=config.environment)

    validate_topology(config, namer)
    pulumi.log.info(
        f"Deploying {len(config.services)} service(s) to {config.environment}: "
        f"{', '.join(config.service_names)}"
    )

    outputs = deploy_fleet(config, namer)

    # Write outputs to .env file for local tooling
    write_outputs_to_env(outputs, "infrastructure.env")

    # Export to Pulumi stack
    for key, value in outputs.items():
        pulumi.export(key, value)


# Execute
main()
