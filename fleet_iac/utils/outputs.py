"""
Stack output export to a local dotenv file.

Resolved outputs are written after apply so local tooling can reach the
load balancers without calling `pulumi stack output`.
"""

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pulumi

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def _env_key(*parts: str) -> str:
    return "_".join(_NON_ALNUM.sub("_", part).strip("_").upper() for part in parts)


def format_env_lines(values: Mapping[str, Any], prefix: str = "") -> list[str]:
    """
    Flatten resolved output values into KEY=value lines.

    Nested mappings become PARENT_CHILD keys, lists are comma-joined and
    None values are skipped.

    Args:
        values: Resolved output values
        prefix: Key prefix for nested values

    Returns:
        Lines in insertion order
    """
    lines = []
    for key, value in values.items():
        env_key = _env_key(prefix, key) if prefix else _env_key(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            lines.extend(format_env_lines(value, prefix=env_key))
        elif isinstance(value, (list, tuple)):
            lines.append(f"{env_key}={','.join(str(item) for item in value)}")
        elif isinstance(value, bool):
            lines.append(f"{env_key}={'true' if value else 'false'}")
        else:
            lines.append(f"{env_key}={value}")
    return lines


def _write_env_file(values: Mapping[str, Any], path: Path) -> str:
    lines = format_env_lines(values)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    logger.info("Wrote %d output(s) to %s", len(lines), path)
    return str(path)


def write_outputs_to_env(
    outputs: Mapping[str, Any],
    filename: str,
) -> pulumi.Output[str] | None:
    """
    Write stack outputs to a dotenv file once they resolve.

    Skipped during preview, where most values are still unknown.

    Args:
        outputs: Output name to value (plain, Output, or dict of Outputs)
        filename: Destination file, relative to the working directory

    Returns:
        Output resolving to the written path, or None during preview
    """
    if pulumi.runtime.is_dry_run():
        return None

    path = Path(filename)
    return pulumi.Output.from_input(dict(outputs)).apply(
        lambda resolved: _write_env_file(resolved, path)
    )
