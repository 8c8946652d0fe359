from __future__ import annotations

import json

import pytest

from logicruntime.logic_sheet.models import Connection, NodeKind, PortRef, load_logic_sheet_json


def _sheet() -> dict:
    return {
        "name": "Ball",
        "nodes": [
            {"id": "ev", "type": "event", "subtype": "OnUpdate", "x": 10, "y": 20},
            {"id": "move", "type": "action", "subtype": "Move", "properties": {"dx": 3}},
            {"id": "get", "type": "variable", "subtype": "GetVariable", "properties": {"variableName": "speed"}},
        ],
        "connections": [
            {"from": {"nodeId": "ev", "outputId": "exec"}, "to": {"nodeId": "move", "inputId": "exec"}},
            {"from": {"nodeId": "get", "outputId": "value"}, "to": {"nodeId": "move", "inputId": "dx"}},
        ],
    }


def test_load_logic_sheet_parses_nodes_and_connections() -> None:
    sheet = load_logic_sheet_json(_sheet())

    assert sheet.name == "Ball"
    assert [n.id for n in sheet.nodes] == ["ev", "move", "get"]
    assert [n.kind for n in sheet.nodes] == [NodeKind.EVENT, NodeKind.ACTION, NodeKind.VARIABLE]
    assert sheet.nodes[1].properties == {"dx": 3}
    assert sheet.nodes[0].properties == {}
    assert sheet.connections[0] == Connection(from_port=PortRef("ev", "exec"), to_port=PortRef("move", "exec"))


def test_load_logic_sheet_drops_malformed_entries_but_keeps_dangling_connections() -> None:
    raw = _sheet()
    raw["nodes"].append({"type": "action", "subtype": "Move"})  # no id
    raw["nodes"].append({"id": "weird", "type": "macro", "subtype": "X"})  # unknown kind
    raw["nodes"].append("not-a-node")
    raw["connections"].append({"from": {"nodeId": "ev"}, "to": {"nodeId": "move", "inputId": "exec"}})
    raw["connections"].append({"from": {"nodeId": "ev", "outputId": "exec"}, "to": {"nodeId": "ghost", "inputId": "exec"}})

    sheet = load_logic_sheet_json(raw)

    assert [n.id for n in sheet.nodes] == ["ev", "move", "get"]
    assert len(sheet.connections) == 3
    assert sheet.connections[-1].to_port == PortRef("ghost", "exec")


def test_load_logic_sheet_accepts_json_text_and_model_dump_like_objects() -> None:
    raw = _sheet()

    from_text = load_logic_sheet_json(json.dumps(raw))
    assert [n.id for n in from_text.nodes] == ["ev", "move", "get"]

    class Dummy:
        def model_dump(self):
            return raw

    from_model = load_logic_sheet_json(Dummy())
    assert len(from_model.connections) == 2


def test_load_logic_sheet_normalizes_kind_spelling() -> None:
    sheet = load_logic_sheet_json(
        {"nodes": [{"id": "a", "type": " Logic ", "subtype": "Add"}, {"id": "b", "type": "NodeKind.CAST", "subtype": "ToString"}]}
    )
    assert [n.kind for n in sheet.nodes] == [NodeKind.LOGIC, NodeKind.CAST]


def test_load_logic_sheet_rejects_non_object_documents() -> None:
    with pytest.raises(TypeError):
        load_logic_sheet_json([1, 2, 3])


def test_port_ref_renders_as_dotted_key() -> None:
    assert str(PortRef("node_1", "exec")) == "node_1.exec"
