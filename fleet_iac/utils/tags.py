"""
Tag factory for AWS resources.

Provides consistent tagging for cost allocation and resource management.
Auto-scaling groups take tags as a list of key/value/propagate entries
rather than a dict, so instances launched by the group get tagged too.
"""

import pulumi_aws as aws

from fleet_iac.configs.constants import DEFAULT_TAGS


def create_tags(
    environment: str,
    resource_name: str,
    service: str | None = None,
    **extra_tags: str,
) -> dict[str, str]:
    """
    Create a standard tag set for an AWS resource.

    Args:
        environment: Deployment environment
        resource_name: Name of the resource
        service: Owning service, if the resource belongs to one
        **extra_tags: Additional tags to include

    Returns:
        Dictionary of tags
    """
    tags = {
        **DEFAULT_TAGS,
        "Environment": environment,
        "Name": resource_name,
    }
    if service:
        tags["Service"] = service
    tags.update(extra_tags)
    return tags


def asg_tags(tags: dict[str, str]) -> list[aws.autoscaling.GroupTagArgs]:
    """
    Convert a tag dictionary to auto-scaling group tags propagated at launch.

    Args:
        tags: Tag dictionary

    Returns:
        One GroupTagArgs per tag, sorted by key
    """
    return [
        aws.autoscaling.GroupTagArgs(
            key=key,
            value=value,
            propagate_at_launch=True,
        )
        for key, value in sorted(tags.items())
    ]
