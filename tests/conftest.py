"""
Pytest configuration for the typeshape test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Isolated home/project directories so user config files never leak in
- Member graph factories and sample source files
"""

import os
import textwrap

import pytest

from typeshape.cli.config import CLIConfig
from typeshape.graph.schemas import MemberNode, TypeKind
from typeshape.logging_config import setup_logging


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for quiet operation."""
    os.environ.setdefault("TYPESHAPE_MACHINE_MODE", "1")


# ============================================================================
# LOGGING / ENVIRONMENT FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False, force=True)
    CLIConfig.set_machine_mode(None)
    yield
    CLIConfig.set_machine_mode(None)


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Point HOME and CWD at empty temp directories."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("TYPESHAPE_HUMAN_MODE", raising=False)
    monkeypatch.chdir(project)
    return project


# ============================================================================
# MEMBER GRAPH FIXTURES
# ============================================================================

@pytest.fixture
def make_node():
    """
    Factory for MemberNode trees.

    Usage:
        make_node("customer", "Customer", children=[make_node("id", "int", "Primitive")])
    """
    def factory(name, type_name, kind="Class", children=None):
        return MemberNode(
            name=name,
            type_name=type_name,
            type_kind=TypeKind(kind),
            children=tuple(children) if children is not None else None,
        )

    return factory


@pytest.fixture
def order_graph(make_node):
    """
    Order -> Customer -> Order cycle, as a builder would hand it over:

    root: Order
      id: int
      customer: Customer
        name: str
        lastOrder: Order (not expanded again)
      total: Decimal
    """
    return make_node("root", "Order", children=[
        make_node("id", "int", "Primitive"),
        make_node("customer", "Customer", children=[
            make_node("name", "str", "Primitive"),
            make_node("lastOrder", "Order", children=[
                make_node("id", "int", "Primitive"),
            ]),
        ]),
        make_node("total", "Decimal", "Primitive"),
    ])


# ============================================================================
# SOURCE FILE FIXTURES
# ============================================================================

SAMPLE_MODELS = textwrap.dedent('''
    from dataclasses import dataclass, field
    from typing import List, Optional


    @dataclass
    class Address:
        street: str
        city: str


    @dataclass
    class Customer:
        name: str
        address: Address
        last_order: Optional["Order"] = None


    @dataclass
    class Order:
        id: int
        customer: Customer
        lines: List[str] = field(default_factory=list)


    def make_order():
        return Order(1, Customer("x", Address("a", "b")))


    DEFAULT_CITY = "Ghent"
''')


@pytest.fixture
def models_file(tmp_path):
    """
    A source file with cyclic dataclasses.

    Class headers (1-based lines): Address 7, Customer 13, Order 20.
    `customer: Customer` is line 22 (annotation at column 15), make_order
    is line 26, DEFAULT_CITY line 30.
    """
    path = tmp_path / "sample_models.py"
    path.write_text(SAMPLE_MODELS, encoding="utf-8")
    return path
