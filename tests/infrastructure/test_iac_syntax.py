"""
Test suite for IaC package syntax and structure validation.

Validates:
1. All Python modules have valid syntax
2. Component and config modules import cleanly
3. Component classes inherit from pulumi.ComponentResource
4. Output dataclasses are properly defined
5. The program entry point defines a documented main()
"""

import ast
from dataclasses import is_dataclass
from pathlib import Path

import pulumi
import pytest

from fleet_iac.components.compute import (
    AlbComponent,
    AlbOutputs,
    AutoScalingComponent,
    AutoScalingOutputs,
    WebServiceComponent,
    WebServiceOutputs,
)
from fleet_iac.components.networking import (
    SecurityGroupOutputs,
    SecurityGroupsComponent,
    VpcComponent,
    VpcOutputs,
)

COMPONENTS = [
    (VpcComponent, VpcOutputs),
    (SecurityGroupsComponent, SecurityGroupOutputs),
    (AlbComponent, AlbOutputs),
    (AutoScalingComponent, AutoScalingOutputs),
    (WebServiceComponent, WebServiceOutputs),
]


class TestIacSyntaxValidation:
    """Validate Python syntax in all IaC modules."""

    def test_all_iac_files_have_valid_syntax(self, python_files_in_iac):
        errors = []
        for py_file in python_files_in_iac:
            try:
                ast.parse(py_file.read_text(encoding="utf-8"))
            except SyntaxError as e:
                errors.append(f"{py_file}: {e.msg} (line {e.lineno})")

        assert not errors, "Syntax errors found:\n" + "\n".join(errors)

    def test_all_packages_have_init(self, iac_project_root):
        for package in ("configs", "utils", "components", "components/networking", "components/compute"):
            assert (iac_project_root / package / "__init__.py").exists(), package


class TestIacComponentStructure:
    """Validate component class structure and inheritance."""

    @pytest.mark.parametrize("component, outputs", COMPONENTS)
    def test_component_is_component_resource(self, component, outputs):
        assert issubclass(component, pulumi.ComponentResource)
        assert hasattr(component, "get_outputs")
        assert is_dataclass(outputs)

    def test_vpc_outputs_fields(self):
        fields = {f.name for f in VpcOutputs.__dataclass_fields__.values()}

        assert {"vpc_id", "public_subnet_ids", "private_subnet_ids", "nat_gateway_id"} <= fields

    def test_alb_outputs_fields(self):
        fields = {f.name for f in AlbOutputs.__dataclass_fields__.values()}

        assert {"alb_dns_name", "listener_arn", "target_group_arn"} <= fields


class TestIacEntryPoint:
    """The program entry point can't be imported: it runs main() on import."""

    def _main_tree(self, iac_project_root: Path) -> ast.Module:
        return ast.parse((iac_project_root / "__main__.py").read_text(encoding="utf-8"))

    def test_main_module_has_docstring(self, iac_project_root):
        docstring = ast.get_docstring(self._main_tree(iac_project_root))

        assert docstring

    def test_main_entry_point_has_documented_main(self, iac_project_root):
        tree = self._main_tree(iac_project_root)
        main_func = next(
            (node for node in ast.walk(tree) if isinstance(node, ast.FunctionDef) and node.name == "main"),
            None,
        )

        assert main_func is not None, "main() function not found in __main__.py"
        assert ast.get_docstring(main_func) is not None

    def test_main_validates_before_deploying(self, iac_project_root):
        tree = self._main_tree(iac_project_root)
        calls = [
            node.func.id
            for node in ast.walk(tree)
            if isinstance(node, ast.Call) and isinstance(node.func, ast.Name)
        ]

        assert calls.index("validate_topology") < calls.index("deploy_fleet")
