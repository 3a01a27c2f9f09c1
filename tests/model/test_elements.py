import pytest

from mepgraph.model.elements import (
    Connection,
    Element,
    ElementKind,
    ElementModel,
    ElementNotFoundError,
    MEPSystem,
    SystemCategory,
)


def _two_segments() -> ElementModel:
    model = ElementModel(title="t")
    model.add_element(Element(1, "Duct 1", ElementKind.SEGMENT, ["a", "b"]))
    model.add_element(Element(2, "Duct 2", ElementKind.SEGMENT, ["a", "b"]))
    return model


class TestSystemCategory:
    def test_labels(self):
        assert SystemCategory.MECHANICAL.label == "Mechanical System"
        assert SystemCategory.ELECTRICAL.label == "Electrical System"
        assert SystemCategory.PIPING.label == "Piping System"

    def test_bucket_order(self):
        assert list(SystemCategory) == [
            SystemCategory.MECHANICAL,
            SystemCategory.ELECTRICAL,
            SystemCategory.PIPING,
        ]

    def test_from_string_case_insensitive(self):
        assert SystemCategory.from_string("Piping") is SystemCategory.PIPING

    def test_from_string_invalid(self):
        with pytest.raises(ValueError, match="Invalid system category 'plumbing'"):
            SystemCategory.from_string("plumbing")


def test_element_kind_from_string_invalid():
    with pytest.raises(ValueError, match="Invalid element kind"):
        ElementKind.from_string("valve")


def test_element_label_falls_back_to_kind_and_id():
    assert Element(7, "Duct 7").label == "Duct 7"
    assert Element(7, "   ", ElementKind.JUNCTION).label == "junction 7"
    assert Element(8).label == "segment 8"


def test_element_duplicate_connectors():
    with pytest.raises(ValueError, match="duplicate connector"):
        Element(1, "x", ElementKind.SEGMENT, ["a", "a"])


def test_system_display_name_and_size():
    system = MEPSystem(12, "SA 1", SystemCategory.MECHANICAL, 1, [1, 2, 3])
    assert system.display_name == "12(SA 1)"
    assert system.size == 3


class TestElementModel:
    def test_duplicate_element(self):
        model = _two_segments()
        with pytest.raises(ValueError, match="already exists"):
            model.add_element(Element(1, "again"))

    def test_connection_records_both_sides(self):
        model = _two_segments()
        model.add_connection(Connection(1, "b", 2, "a"))
        assert model.peer_of(1, "b") == (2, "a")
        assert model.peer_of(2, "a") == (1, "b")
        assert model.peer_of(1, "a") is None
        assert model.connections == [Connection(1, "b", 2, "a")]

    def test_connection_unknown_element(self):
        model = _two_segments()
        with pytest.raises(ElementNotFoundError):
            model.add_connection(Connection(1, "b", 99, "a"))

    def test_connection_undeclared_port(self):
        model = _two_segments()
        with pytest.raises(ValueError, match="no connector 'c'"):
            model.add_connection(Connection(1, "c", 2, "a"))

    def test_port_joins_once(self):
        model = _two_segments()
        model.add_connection(Connection(1, "b", 2, "a"))
        with pytest.raises(ValueError, match="already connected"):
            model.add_connection(Connection(2, "b", 1, "b"))

    def test_port_cannot_join_itself(self):
        model = _two_segments()
        with pytest.raises(ValueError, match="cannot join itself"):
            model.add_connection(Connection(1, "a", 1, "a"))

    def test_two_ports_of_one_element_may_join(self):
        model = _two_segments()
        model.add_connection(Connection(1, "a", 1, "b"))
        assert model.peer_of(1, "a") == (1, "b")

    def test_system_unknown_member(self):
        model = _two_segments()
        with pytest.raises(ValueError, match="unknown elements"):
            model.add_system(MEPSystem(5, "S", SystemCategory.PIPING, 1, [1, 3]))

    def test_system_duplicate_member(self):
        model = _two_segments()
        with pytest.raises(ValueError, match="twice"):
            model.add_system(MEPSystem(5, "S", SystemCategory.PIPING, 1, [1, 1]))

    def test_duplicate_system(self):
        model = _two_segments()
        model.add_system(MEPSystem(5, "S", SystemCategory.PIPING, 1, [1, 2]))
        with pytest.raises(ValueError, match="already exists"):
            model.add_system(MEPSystem(5, "T", SystemCategory.PIPING, 1, [1, 2]))

    def test_missing_base_equipment_is_accepted(self, caplog):
        model = _two_segments()
        model.add_system(MEPSystem(5, "S", SystemCategory.PIPING, 42, [1, 2]))
        assert 5 in model.systems
        assert "base equipment 42 is not in the model" in caplog.text

    def test_lookups(self):
        model = _two_segments()
        assert model.get_element(2).name == "Duct 2"
        with pytest.raises(ElementNotFoundError) as exc:
            model.get_element(3)
        assert isinstance(exc.value, KeyError)
        assert exc.value.element_id == 3
        assert str(exc.value) == "Element '3' not found in model."
        with pytest.raises(KeyError, match="System '9' not found"):
            model.get_system(9)


def test_from_dict_builds_everything():
    model = ElementModel.from_dict(
        {
            "title": "Doc",
            "elements": [
                {"id": 1, "name": "AHU", "kind": "equipment", "connectors": ["s"]},
                {"id": 2, "connectors": ["e"], "attrs": {"size": "300x200"}},
            ],
            "connections": [{"source": 1, "source_port": "s", "target": 2, "target_port": "e"}],
            "systems": [
                {"id": 9, "name": "SA", "category": "mechanical", "base_equipment": 1, "elements": [1, 2]}
            ],
        }
    )
    assert model.title == "Doc"
    assert model.get_element(2).kind is ElementKind.SEGMENT
    assert model.get_element(2).attrs == {"size": "300x200"}
    system = model.get_system(9)
    assert system.category is SystemCategory.MECHANICAL
    assert system.base_equipment == 1
    assert system.well_connected is None


def test_from_yaml(building):
    assert building.title == "Building A"
    assert len(building.elements) == 18
    assert len(building.connections) == 15
    assert list(building.systems) == [1001, 1002, 2001, 3001, 4001, 4002, 4003]
    assert building.get_system(4001).well_connected is True
    assert building.get_system(4001).base_equipment is None
