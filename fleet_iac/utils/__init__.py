"""
Utility functions for Pulumi infrastructure.

Provides naming conventions, tag factories, and output utilities.
"""

from fleet_iac.utils.naming import ResourceNamer
from fleet_iac.utils.tags import asg_tags, create_tags
from fleet_iac.utils.outputs import format_env_lines, write_outputs_to_env

__all__ = [
    "ResourceNamer",
    "asg_tags",
    "create_tags",
    "format_env_lines",
    "write_outputs_to_env",
]
