"""
Resource naming conventions for consistent AWS resource names.

Follows pattern: {project}-{environment}-{resource}
"""

import hashlib
from dataclasses import dataclass

from fleet_iac.configs.constants import AWS_NAME_LIMIT


@dataclass
class ResourceNamer:
    """
    Generates consistent resource names for AWS resources.

    Attributes:
        project: Project identifier
        environment: Deployment environment (dev, staging, prod)
    """
    project: str
    environment: str

    def name(self, resource: str) -> str:
        """
        Generate a resource name.

        Args:
            resource: Resource identifier (e.g., 'vpc', 'api-alb')

        Returns:
            Formatted resource name
        """
        if not resource:
            return f"{self.project}-{self.environment}"
        return f"{self.project}-{self.environment}-{resource}"

    def aws_name(self, resource: str, suffix: str, limit: int = AWS_NAME_LIMIT) -> str:
        """
        Generate a physical name that fits an AWS length limit.

        Load balancers and target groups reject names over 32 characters.
        Long names keep their leading part and suffix, with a short digest
        of the full name in between so distinct resources stay distinct.

        Args:
            resource: Resource identifier (e.g., the service name)
            suffix: Resource kind (e.g., 'alb', 'tg')
            limit: Maximum name length

        Returns:
            Name no longer than limit
        """
        full = self.name(f"{resource}-{suffix}")
        if len(full) <= limit:
            return full

        digest = hashlib.sha256(full.encode()).hexdigest()[:6]
        head = full[: limit - len(suffix) - len(digest) - 2].rstrip("-")
        return f"{head}-{digest}-{suffix}"
