"""Dataclasses shared by the test suite.

No ``from __future__ import annotations`` here: several tests rely on
forward references being plain strings resolved from module globals.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


class Weekday(enum.IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2

    def ts_name(self) -> str:
        return self.name.capitalize()


# ---------------------------------------------------------------------------
# End-to-end scenario
# ---------------------------------------------------------------------------

@dataclass
class Address:
    StreetName: str
    City: str
    ZipCode: Optional[str] = None


@dataclass
class Dog:
    Name: str
    Age: int


@dataclass
class Tag:
    Label: str


@dataclass
class Person:
    FirstName: str
    Favorite: Color
    HomeAddress: Address
    Pets: list[Dog]
    Tags: dict[str, Tag]


# ---------------------------------------------------------------------------
# Class mode / hydration
# ---------------------------------------------------------------------------

@dataclass
class Point:
    x: float
    y: float


@dataclass
class Shape:
    name: str
    origin: Point
    vertices: list[Point]


@dataclass
class Canvas:
    grid: list[list[int]]
    layers: list[list[Point]]
    named: dict[str, Point]
    counts: dict[str, int]
    maybe: list[Optional[Point]]


# ---------------------------------------------------------------------------
# Graph shapes
# ---------------------------------------------------------------------------

@dataclass
class TreeNode:
    value: int
    children: list["TreeNode"] = field(default_factory=list)
    parent: Optional["TreeNode"] = None


@dataclass
class Leaf:
    id: int


@dataclass
class LeftBranch:
    leaf: Leaf


@dataclass
class RightBranch:
    leaf: Leaf


@dataclass
class Root:
    left: LeftBranch
    right: RightBranch
    leaves: dict[str, Leaf]


# ---------------------------------------------------------------------------
# Tags and naming
# ---------------------------------------------------------------------------

@dataclass
class Secretive:
    visible: str
    hidden: str = field(default="", metadata={"json": "-"})
    _private: str = ""
    blank: str = field(default="", metadata={"json": " "})
    after: int = 0


@dataclass
class Tagged:
    required: str = field(metadata={"json": "req"})
    omitted: str = field(metadata={"json": "omitted,omitempty"})
    pointer: Optional[int] = field(metadata={"json": "pointer"})
    untagged_pointer: Optional[str]
    plain: str = field(metadata={"json": ",omitempty"})
    dotted: str = field(metadata={"json": "os.version"})


@dataclass
class Documented:
    title: str = field(metadata={"ts_doc": "Display title"})
    when: str = field(metadata={"ts_type": "Date", "ts_transform": "new Date(__VALUE__)"})
    raw: Any = None


@dataclass
class Timestamps:
    created: str
    updated: str


@dataclass
class Article:
    title: str
    stamps: Timestamps = field(metadata={"embed": True})
    body: str = ""


@dataclass
class Schedule:
    day: Weekday
    days: list[Weekday]
    color: Optional[Color] = None


@dataclass
class Event:
    name: str
    when: datetime


@dataclass
class Meeting:
    title: str
    start: datetime
    end: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Custom handler scenario
# ---------------------------------------------------------------------------

@dataclass
class History:
    author: str = field(metadata={"json": "author,omitempty"})
    created: datetime = field(metadata={"json": "created,omitempty"})
    created_by: str = field(metadata={"json": "created_by,omitempty"})
    comment: str = field(metadata={"json": "comment,omitempty"})
    empty_layer: bool = field(metadata={"json": "empty_layer,omitempty"})


@dataclass
class ConfigFile:
    architecture: str = field(metadata={"json": "architecture"})
    author: str = field(metadata={"json": "author,omitempty"})
    container: str = field(metadata={"json": "container,omitempty"})
    created: datetime = field(metadata={"json": "created,omitempty"})
    docker_version: str = field(metadata={"json": "docker_version,omitempty"})
    history: list[History] = field(metadata={"json": "history,omitempty"})
    os: str = field(metadata={"json": "os"})
    os_version: str = field(metadata={"json": "os.version,omitempty"})
    variant: str = field(metadata={"json": "variant,omitempty"})
    os_features: list[str] = field(metadata={"json": "os.features,omitempty"})


@dataclass
class Metadata:
    Size: int = field(metadata={"json": ",omitempty"})
    ImageID: str = field(metadata={"json": ",omitempty"})
    DiffIDs: list[str] = field(metadata={"json": ",omitempty"})
    RepoTags: list[str] = field(metadata={"json": ",omitempty"})
    RepoDigests: list[str] = field(metadata={"json": ",omitempty"})
    ImageConfig: ConfigFile = field(metadata={"json": ",omitempty"})


@dataclass
class Grouped:
    groups: dict[str, list[Leaf]]
    grid: list[dict[str, Leaf]]
