import json
from concurrent.futures import ThreadPoolExecutor

from mepgraph.model.connectivity import ConnectivityModel
from mepgraph.model.elements import SystemCategory
from mepgraph.results.identifiers import IdentifierCollector
from mepgraph.traversal.engine import traverse

MECH = SystemCategory.MECHANICAL
ELEC = SystemCategory.ELECTRICAL
PIPE = SystemCategory.PIPING


def test_add_deduplicates_per_category():
    collector = IdentifierCollector()
    assert collector.add(MECH, 5)
    assert not collector.add(MECH, 5)
    assert collector.add(PIPE, 5)
    assert collector.ids(MECH) == [5]
    assert collector.ids(PIPE) == [5]
    assert collector.ids(ELEC) == []
    assert len(collector) == 2


def test_add_many_keeps_first_seen_order():
    collector = IdentifierCollector()
    assert collector.add_many(ELEC, [3, 1, 3, 2, 1]) == 3
    assert collector.add_many(ELEC, [2, 4]) == 1
    assert collector.ids(ELEC) == [3, 1, 2, 4]


def test_revisited_element_recorded_once(diamond):
    model, system = diamond
    tree = traverse(ConnectivityModel(model), system)
    assert tree.element_ids().count(4) == 2

    collector = IdentifierCollector()
    assert collector.collect(tree) == 4
    assert collector.ids(MECH) == [1, 2, 4, 3]
    # Collecting the same tree again adds nothing
    assert collector.collect(tree) == 0


def test_shared_elements_across_systems(building, building_connectivity):
    collector = IdentifierCollector()
    for system_id in (1001, 1002, 2001, 3001):
        collector.collect(traverse(building_connectivity, building.get_system(system_id)))
    assert collector.ids(MECH) == [10, 11, 12, 14, 13, 15, 16, 17]
    assert collector.ids(ELEC) == [20, 10, 22, 23]
    assert collector.ids(PIPE) == [30, 31, 33, 32]


def test_merge():
    first, second = IdentifierCollector(), IdentifierCollector()
    first.add_many(MECH, [1, 2])
    second.add_many(MECH, [2, 3])
    second.add(PIPE, 9)
    first.merge(second)
    assert first.ids(MECH) == [1, 2, 3]
    assert first.ids(PIPE) == [9]
    assert second.ids(MECH) == [2, 3]


def test_reset():
    collector = IdentifierCollector()
    collector.add(MECH, 1)
    collector.reset()
    assert len(collector) == 0


def test_to_json_array():
    collector = IdentifierCollector()
    assert collector.to_json_array(ELEC) == "[]"
    collector.add_many(ELEC, [7, 8])
    assert collector.to_json_array(ELEC) == "[7,8]"
    assert json.loads(collector.to_json_array(ELEC)) == [7, 8]


def test_combined_document_has_three_branches():
    collector = IdentifierCollector()
    collector.add_many(MECH, [1, 2])
    collector.add_many(PIPE, [3])
    doc = collector.combined_document()
    assert doc == {
        "id": 1,
        "name": "MEP Systems",
        "children": [
            {"id": 2, "name": "Mechanical System", "children": [1, 2]},
            {"id": 3, "name": "Electrical System", "children": []},
            {"id": 4, "name": "Piping System", "children": [3]},
        ],
    }
    assert collector.combined_document("Site")["name"] == "Site"


def test_concurrent_adds():
    collector = IdentifierCollector()

    def fill(offset):
        for i in range(500):
            collector.add(MECH, (i + offset) % 700)

    with ThreadPoolExecutor(max_workers=4) as executor:
        list(executor.map(fill, [0, 100, 200, 300]))
    assert sorted(collector.ids(MECH)) == list(range(700))
