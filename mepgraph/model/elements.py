"""Element model for MEP distribution systems.

This module stands in for the host application's document: it holds the
elements (equipment, segments, fittings, terminals), the physical
connections between their connector ports, and the systems that group
elements into mechanical, electrical, and piping networks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from mepgraph.logging import get_logger

LOGGER = get_logger(__name__)


class SystemCategory(Enum):
    """System discipline. Member order is the bucket order of exports."""

    MECHANICAL = "mechanical"
    ELECTRICAL = "electrical"
    PIPING = "piping"

    @property
    def label(self) -> str:
        """Display label used in the combined identifier document."""
        return f"{self.value.capitalize()} System"

    @classmethod
    def from_string(cls, value: str) -> SystemCategory:
        """Parse a case-insensitive category name.

        Raises:
            ValueError: If the string names no category.
        """
        try:
            return cls(value.lower())
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(
                f"Invalid system category '{value}'. Valid values are: {valid}"
            ) from None


class ElementKind(Enum):
    """Role an element plays in a distribution network."""

    EQUIPMENT = "equipment"
    SEGMENT = "segment"
    JUNCTION = "junction"
    TERMINAL = "terminal"

    @classmethod
    def from_string(cls, value: str) -> ElementKind:
        try:
            return cls(value.lower())
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(
                f"Invalid element kind '{value}'. Valid values are: {valid}"
            ) from None


class ElementNotFoundError(KeyError):
    """Raised when an element id is not part of the model."""

    def __init__(self, element_id: Any) -> None:
        super().__init__(element_id)
        self.element_id = element_id

    def __str__(self) -> str:
        return f"Element '{self.element_id}' not found in model."


@dataclass
class Element:
    """One element of a distribution network.

    Attributes:
        id (int): Stable unique element id.
        name (str): Display name; may be empty.
        kind (ElementKind): Equipment, segment, junction or terminal.
        connectors (List[str]): Port labels in declaration order. The order
            drives neighbor enumeration and therefore child order in trees.
        attrs (Dict[str, Any]): Additional metadata (size, level, family...).
    """

    id: int
    name: str = ""
    kind: ElementKind = ElementKind.SEGMENT
    connectors: List[str] = field(default_factory=list)
    attrs: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if len(set(self.connectors)) != len(self.connectors):
            raise ValueError(f"Element {self.id} declares duplicate connector labels.")

    @property
    def label(self) -> str:
        """Name used in exported documents."""
        name = self.name.strip()
        return name if name else f"{self.kind.value} {self.id}"


@dataclass(frozen=True)
class Connection:
    """A physical join between two connector ports.

    Attributes:
        source (int): Element id on one side.
        source_port (str): Port label on ``source``.
        target (int): Element id on the other side.
        target_port (str): Port label on ``target``.
    """

    source: int
    source_port: str
    target: int
    target_port: str

    def endpoints(self) -> Tuple[Tuple[int, str], Tuple[int, str]]:
        return (self.source, self.source_port), (self.target, self.target_port)


@dataclass
class MEPSystem:
    """A named network of elements.

    ``well_connected`` and ``multiple_network`` mirror the host model's
    connectivity quality flags. Leave them as None to have them derived from
    the topology when systems are selected for export.

    Attributes:
        id (int): Stable unique system id.
        name (str): System name, e.g. "SA 1" or "HWS 2".
        category (SystemCategory): Mechanical, electrical or piping.
        base_equipment (Optional[int]): Element the traversal starts at.
        elements (List[int]): Member element ids.
        well_connected (Optional[bool]): Host flag for mechanical/piping.
        multiple_network (Optional[bool]): Host flag for electrical.
    """

    id: int
    name: str
    category: SystemCategory
    base_equipment: Optional[int] = None
    elements: List[int] = field(default_factory=list)
    well_connected: Optional[bool] = None
    multiple_network: Optional[bool] = None

    @property
    def size(self) -> int:
        return len(self.elements)

    @property
    def display_name(self) -> str:
        """``<id>(<name>)`` as used in run summaries."""
        return f"{self.id}({self.name})"


@dataclass
class ElementModel:
    """A document: elements, their connections, and the systems over them.

    Attributes:
        title (str): Document title used for the aggregate JSON root.
        elements (Dict[int, Element]): Element id -> Element.
        connections (List[Connection]): Physical joins in insertion order.
        systems (Dict[int, MEPSystem]): System id -> MEPSystem.
    """

    title: str = ""
    elements: Dict[int, Element] = field(default_factory=dict)
    connections: List[Connection] = field(default_factory=list)
    systems: Dict[int, MEPSystem] = field(default_factory=dict)
    _port_peers: Dict[Tuple[int, str], Tuple[int, str]] = field(
        default_factory=dict, init=False, repr=False
    )

    def add_element(self, element: Element) -> None:
        """Add an element keyed by its id.

        Raises:
            ValueError: If an element with the same id exists.
        """
        if element.id in self.elements:
            raise ValueError(f"Element '{element.id}' already exists in the model.")
        self.elements[element.id] = element

    def add_connection(self, connection: Connection) -> None:
        """Join two connector ports.

        Raises:
            ElementNotFoundError: If either element is unknown.
            ValueError: If a port is undeclared, already joined, or the
                connection joins a port to itself.
        """
        for element_id, port in connection.endpoints():
            element = self.get_element(element_id)
            if port not in element.connectors:
                raise ValueError(
                    f"Element {element_id} has no connector '{port}'."
                )
            if (element_id, port) in self._port_peers:
                raise ValueError(
                    f"Connector '{port}' of element {element_id} is already connected."
                )
        a, b = connection.endpoints()
        if a == b:
            raise ValueError(f"Connector '{a[1]}' of element {a[0]} cannot join itself.")

        self._port_peers[a] = b
        self._port_peers[b] = a
        self.connections.append(connection)

    def add_system(self, system: MEPSystem) -> None:
        """Register a system.

        Raises:
            ValueError: If the system id is taken or a member is unknown.
        """
        if system.id in self.systems:
            raise ValueError(f"System '{system.id}' already exists in the model.")
        unknown = [eid for eid in system.elements if eid not in self.elements]
        if unknown:
            raise ValueError(
                f"System '{system.id}' references unknown elements: {unknown}"
            )
        if len(set(system.elements)) != len(system.elements):
            raise ValueError(f"System '{system.id}' lists a member twice.")
        if system.base_equipment is not None and system.base_equipment not in self.elements:
            LOGGER.warning(
                "System %s base equipment %s is not in the model",
                system.display_name,
                system.base_equipment,
            )
        self.systems[system.id] = system

    def get_element(self, element_id: int) -> Element:
        try:
            return self.elements[element_id]
        except KeyError:
            raise ElementNotFoundError(element_id) from None

    def get_system(self, system_id: int) -> MEPSystem:
        try:
            return self.systems[system_id]
        except KeyError:
            raise KeyError(f"System '{system_id}' not found in model.") from None

    def peer_of(self, element_id: int, port: str) -> Optional[Tuple[int, str]]:
        """Return the ``(element, port)`` joined to a port, or None if open."""
        return self._port_peers.get((element_id, port))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ElementModel:
        """Build a model from a validated document mapping.

        See ``mepgraph/schemas/model.json`` for the document shape.
        """
        model = cls(title=str(data.get("title", "")))

        for entry in data.get("elements", []):
            model.add_element(
                Element(
                    id=int(entry["id"]),
                    name=str(entry.get("name", "")),
                    kind=ElementKind.from_string(entry.get("kind", "segment")),
                    connectors=[str(c) for c in entry.get("connectors", [])],
                    attrs=dict(entry.get("attrs", {})),
                )
            )

        for entry in data.get("connections", []):
            model.add_connection(
                Connection(
                    source=int(entry["source"]),
                    source_port=str(entry["source_port"]),
                    target=int(entry["target"]),
                    target_port=str(entry["target_port"]),
                )
            )

        for entry in data.get("systems", []):
            base = entry.get("base_equipment")
            model.add_system(
                MEPSystem(
                    id=int(entry["id"]),
                    name=str(entry.get("name", "")),
                    category=SystemCategory.from_string(entry["category"]),
                    base_equipment=int(base) if base is not None else None,
                    elements=[int(e) for e in entry.get("elements", [])],
                    well_connected=entry.get("well_connected"),
                    multiple_network=entry.get("multiple_network"),
                )
            )

        LOGGER.debug(
            "Loaded model '%s': %d elements, %d connections, %d systems",
            model.title,
            len(model.elements),
            len(model.connections),
            len(model.systems),
        )
        return model

    @classmethod
    def from_yaml(cls, yaml_str: str) -> ElementModel:
        """Parse, validate, and build a model from a YAML document."""
        from mepgraph.dsl.loader import load_model_yaml

        return cls.from_dict(load_model_yaml(yaml_str))
