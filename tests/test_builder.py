"""Tests for building member graphs from Python types."""

import abc
import datetime
import decimal
import enum
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Dict, List, NamedTuple, Optional, Protocol, Tuple, TypedDict, Union

import pytest
from pydantic import BaseModel

from typeshape.graph.schemas import TypeKind
from typeshape.introspection import BuildOptions, MemberGraphBuilder
from typeshape.introspection.kinds import classify, element_slots, type_display_name, unwrap
from typeshape.rendering import MemberGraphFormatter, RenderOptions

pytestmark = pytest.mark.fast


# ============================================================================
# SAMPLE TYPES
# ============================================================================

@dataclass
class Address:
    street: str
    city: str


@dataclass
class Customer:
    name: str
    address: Address
    last_order: Optional["Order"] = None


@dataclass(frozen=True)
class OrderLine:
    sku: str
    quantity: int
    price: decimal.Decimal


@dataclass
class Order:
    id: int
    customer: Customer
    lines: List[OrderLine] = field(default_factory=list)
    tags: Dict[str, int] = field(default_factory=dict)


class Status(enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class Point(NamedTuple):
    x: float
    y: float


class Movie(TypedDict):
    title: str
    year: int


class Shape(Protocol):
    name: str

    @property
    def area(self) -> float:
        ...


class Repository(abc.ABC):
    @abc.abstractmethod
    def load(self):
        ...


class Account(BaseModel):
    id: uuid.UUID
    created: datetime.datetime
    status: Status
    owner: Optional["Account"] = None

    @property
    def label(self) -> str:
        return str(self.id)


Account.model_rebuild()


class Plain:
    title: str
    _secret: int
    registry: ClassVar[dict]

    @property
    def slug(self) -> str:
        return self.title.lower()

    @property
    def untyped(self):
        return None


class Broken:
    ref: "MissingType"  # noqa: F821
    count: int


@dataclass
class Leaf:
    value: int


@dataclass
class Branch:
    leaf: Leaf


@dataclass
class Trunk:
    branch: Branch
    leaf: Leaf


@dataclass
class Ping:
    pong: "Pong"


@dataclass
class Pong:
    ping: Ping


@dataclass
class Court:
    ping: Ping
    pong: Pong


def qn(cls):
    return f"{cls.__module__}.{cls.__qualname__}"


def names(node):
    return [child.name for child in node.iter_children()]


@pytest.fixture
def builder():
    return MemberGraphBuilder()


# ============================================================================
# CLASSIFICATION AND NAMING
# ============================================================================

class TestKinds:

    @pytest.mark.parametrize("tp, kind", [
        (int, TypeKind.PRIMITIVE),
        (str, TypeKind.PRIMITIVE),
        (type(None), TypeKind.PRIMITIVE),
        (decimal.Decimal, TypeKind.PRIMITIVE),
        (Path, TypeKind.PRIMITIVE),
        (Status, TypeKind.ENUM),
        (Point, TypeKind.STRUCT),
        (Movie, TypeKind.STRUCT),
        (OrderLine, TypeKind.STRUCT),
        (Address, TypeKind.CLASS),
        (Account, TypeKind.CLASS),
        (Shape, TypeKind.INTERFACE),
        (Repository, TypeKind.INTERFACE),
        (List[int], TypeKind.COLLECTION),
        (dict, TypeKind.COLLECTION),
        (Union[int, str], TypeKind.OTHER),
    ])
    def test_classify(self, tp, kind):
        assert classify(tp) is kind

    def test_display_names(self):
        assert type_display_name(int) == "int"
        assert type_display_name(type(None)) == "None"
        assert type_display_name(List[Address]) == f"list[{qn(Address)}]"
        assert type_display_name(Dict[str, int]) == "dict[str, int]"
        assert type_display_name(Tuple[int, ...]) == "tuple[int, ...]"
        assert type_display_name(Union[int, str]) == "int | str"
        assert type_display_name(decimal.Decimal) == "decimal.Decimal"

    def test_distinct_classes_get_distinct_names(self):
        class Address:  # shadows the module-level class
            pass

        assert type_display_name(Address) != type_display_name(globals()["Address"])

    def test_unwrap_optional_but_not_real_unions(self):
        assert unwrap(Optional[Address]) is Address
        assert unwrap(Union[int, str]) == Union[int, str]

    def test_element_slots(self):
        assert element_slots(List[int]) == [("item", int)]
        assert element_slots(Dict[str, Address]) == [("key", str), ("value", Address)]
        assert element_slots(Tuple[int, ...]) == [("item", int)]
        assert element_slots(Tuple[int, str]) == [("[0]", int), ("[1]", str)]
        assert element_slots(list) == []


# ============================================================================
# GRAPH BUILDING
# ============================================================================

class TestBuilder:

    def test_dataclass_graph(self, builder):
        root = builder.build(Order)

        assert root.name == "Order"
        assert root.type_name == qn(Order)
        assert names(root) == ["id", "customer", "lines", "tags"]

        lines = root.children[2]
        assert lines.type_name == f"list[{qn(OrderLine)}]"
        assert lines.type_kind is TypeKind.COLLECTION
        item = lines.children[0]
        assert item.name == "item"
        assert item.type_kind is TypeKind.STRUCT
        assert names(item) == ["sku", "quantity", "price"]

        tags = root.children[3]
        assert [(c.name, c.type_name) for c in tags.iter_children()] == [("key", "str"), ("value", "int")]

    def test_cyclic_member_is_left_unexpanded(self, builder):
        root = builder.build(Order)

        customer = root.children[1]
        last_order = customer.children[2]
        assert last_order.name == "last_order"
        assert last_order.type_name == qn(Order)
        assert last_order.children is None

    def test_primitives_and_enums_are_not_expanded(self, builder):
        root = builder.build(Account)

        assert [(c.name, c.type_kind) for c in root.iter_children()] == [
            ("id", TypeKind.PRIMITIVE),
            ("created", TypeKind.PRIMITIVE),
            ("status", TypeKind.ENUM),
            ("owner", TypeKind.CLASS),
            ("label", TypeKind.PRIMITIVE),
        ]
        assert all(child.children is None for child in root.iter_children())

    def test_pydantic_internals_are_not_members(self, builder):
        assert "model_extra" not in names(builder.build(Account))

    def test_private_classvar_and_untyped_members(self, builder):
        assert names(builder.build(Plain)) == ["title", "slug"]

        with_private = MemberGraphBuilder(BuildOptions(include_private=True))
        assert names(with_private.build(Plain)) == ["title", "_secret", "slug"]

        without_properties = MemberGraphBuilder(BuildOptions(include_properties=False))
        assert names(without_properties.build(Plain)) == ["title"]

    def test_structs_and_interfaces(self, builder):
        assert names(builder.build(Point)) == ["x", "y"]
        assert names(builder.build(Movie)) == ["title", "year"]
        assert names(builder.build(Shape)) == ["name", "area"]

    def test_enum_root(self, builder):
        root = builder.build(Status)

        assert root.type_kind is TypeKind.ENUM
        assert root.children is None

    def test_union_members_expand_into_variants(self, builder):
        root = builder.build(Union[Address, int])

        assert root.type_kind is TypeKind.OTHER
        assert [(c.name, c.type_name) for c in root.iter_children()] == [
            ("variant", qn(Address)),
            ("variant", "int"),
        ]

    def test_generic_root(self, builder):
        root = builder.build(List[Address])

        assert root.name == f"list[{qn(Address)}]"
        assert names(root.children[0]) == ["street", "city"]

    def test_max_depth(self):
        root = MemberGraphBuilder(BuildOptions(max_depth=1)).build(Order)

        customer = root.children[1]
        assert customer.type_name == qn(Customer)
        assert customer.children is None

    def test_depth_truncated_type_reuses_expansion_from_elsewhere(self):
        # Trunk.branch.leaf sits at the depth limit, Trunk.leaf does not
        root = MemberGraphBuilder(BuildOptions(max_depth=2)).build(Trunk)

        branch_leaf = root.children[0].children[0]
        assert names(branch_leaf) == ["value"]
        assert branch_leaf.children == root.children[1].children

    def test_depth_truncated_members_survive_rendering(self):
        root = MemberGraphBuilder(BuildOptions(max_depth=2)).build(Trunk)

        outline = MemberGraphFormatter(RenderOptions(output_format="text")).format(root).splitlines()

        assert outline == [
            f"{qn(Trunk)} (Class) Trunk",
            f"  {qn(Branch)} (Class) branch",
            f"    {qn(Leaf)} (Class) leaf",
            "      int (Primitive) value",
            f"  {qn(Leaf)} (Class) leaf",
            "    int (Primitive) value",
        ]

    def test_depth_filling_stops_at_cycles(self):
        root = MemberGraphBuilder(BuildOptions(max_depth=2)).build(Court)

        outline = MemberGraphFormatter(RenderOptions(output_format="text")).format(root).splitlines()

        assert outline == [
            f"{qn(Court)} (Class) Court",
            f"  {qn(Ping)} (Class) ping",
            f"    {qn(Pong)} (Class) pong",
            f"      {qn(Ping)} (cycle) ping",
            f"  {qn(Pong)} (Class) pong",
            f"    {qn(Ping)} (cycle) ping",
        ]

    def test_unresolvable_annotations_fall_back(self, builder):
        root = builder.build(Broken)

        assert [(c.name, c.type_name, c.type_kind) for c in root.iter_children()] == [
            ("ref", "MissingType", TypeKind.OTHER),
            ("count", "int", TypeKind.PRIMITIVE),
        ]

    def test_custom_root_name(self, builder):
        assert builder.build(Address, name="shipping").name == "shipping"


def test_built_graph_renders_cycle_placeholder(builder):
    formatter = MemberGraphFormatter(RenderOptions(output_format="text"))

    outline = formatter.format(builder.build(Order)).splitlines()

    assert outline[0] == f"{qn(Order)} (Class) Order"
    assert f"    {qn(Order)} (cycle) last_order" in outline
    assert outline.count(f"  {qn(Customer)} (Class) customer") == 1
