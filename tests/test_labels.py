import pytest

from flowgraph_viz.graph_model import FlowGraphNode
from flowgraph_viz.labels import (
    MAX_LABEL_LENGTH,
    LabelResolver,
    handled_classes,
    label_rule,
    resolve_label,
)
from flowgraph_viz.lookup_tables import LookupTables


@pytest.fixture
def tables():
    return LookupTables(
        game_tokens={"42": "HasKey"},
        game_metrics={"9": "KillCount"},
        remote_events={"77": "Lobby Alarm"},
        objectives={"18446744073709551615": "Escape the station"},
        tasks={"100": "Reach the lobby"},
        descriptions={"18446744073709551614": "Find the keycard"},
        clues={"300": "Muddy footprints"},
        locations={"1000": "Lobby", "1001": "Arboretum"},
        connectivity={"800": "Lobby to Arboretum", "900": "1001"},
    )


def test_game_token_set(tables):
    label = resolve_label("Mission:GameTokenSet", None, {"gametokenid_token": "42", "value": "3"}, tables)
    assert label == 'SET TOKEN HasKey="3"'


def test_unknown_token_id_passes_through(tables):
    label = resolve_label("Mission:GameTokenGet", None, {"gametokenid_token": "55"}, tables)
    assert label == "GET TOKEN 55"


def test_task_state_falls_back_to_unsigned_id(tables):
    label = resolve_label("Ark:Objectives:TaskState", None, {"task_task": "-5"}, tables)
    assert label == "TASK 18446744073709551611"


def test_objective_state_converts_signed_id_and_tracks(tables):
    label = resolve_label(
        "Ark:Objectives:ObjectiveState",
        None,
        {"objective_objective": "-1", "settracked": "1"},
        tables,
    )
    assert label == 'OBJECTIVE "Escape the station"\nSET TRACKED'


def test_objective_description_uses_unsigned_lookup(tables):
    label = resolve_label(
        "Ark:Objectives:SetObjectiveDescription",
        None,
        {"objectivedescription_description": "-2"},
        tables,
    )
    assert label == 'SET DESC "Find the keycard"'


@pytest.mark.parametrize(
    "node_class, inputs, expected",
    [
        ("Mission:GameTokenCheck", {"gametokenid_token": "42", "checkvalue": "1"}, 'CHECK TOKEN HasKey="1"'),
        (
            "Mission:GameTokenModify",
            {"gametokenid_token": "42", "op": "Add", "type": "Int", "value": "2"},
            'MODIFY TOKEN HasKey\nOp="Add" Type="Int" Value="2"',
        ),
        ("Ark:IncrementGameMetric", {"gamemetric_metric": "9", "amount": "1"}, 'INC METRIC "KillCount"\nBY 1'),
        ("Ark:Objectives:ShowClue", {"objectiveclue_clue": "300"}, "SHOW CLUE Muddy footprints"),
        (
            "Ark:Objectives:SetTaskLocation",
            {"task_task": "100", "location_location": "1000"},
            "SET TASK LOCATION\nReach the lobby=Lobby",
        ),
        ("Ark:SendRemoteEvent", {"remoteevent_event": "77"}, 'SEND EVENT\n"Lobby Alarm"'),
        ("Ark:Locations:CheckLocation", {"location_location": "1001"}, "CHECK LOCATION Arboretum"),
        ("Ark:PDA:SetStationAccessState", {"stationaccess_access": "800"}, "Lobby to Arboretum"),
        ("Ark:PDA:SetStationAirlockState", {"stationairlock_airlock": "900"}, "Airlock to Arboretum"),
        ("Ark:EndGame", {}, "END GAME"),
        (
            "Mission:GameTokenUpdated",
            {"gametokenid_token": "42", "compare_value": "5"},
            'ON UPDATED TOKEN HasKey="5"',
        ),
        ("Ark:GameMetric", {"gamemetric_metric": "9"}, 'METRIC "KillCount"'),
        ("Debug:DisplayMessage", {"message": "Hello there"}, "[[[Hello there]]]"),
        (
            "Ark:Objectives:GetObjectiveState",
            {"objective_objective": "-1"},
            'GET OBJECTIVE STATE\n"Escape the station"',
        ),
        (
            "Ark:Objectives:ObjectiveNotification",
            {"objective_objective": "-1"},
            'OBJECTIVE NOTIFICATION\n"Escape the station"',
        ),
        (
            "Ark:Objectives:SetTrackedObjective",
            {"objective_objective": "-1"},
            'SET TRACKED OBJECTIVE\n"Escape the station"',
        ),
        (
            "Ark:Objectives:SetTaskMarkerEntity",
            {"task_task": "100"},
            "SET TASK MARKER ENTITY\nReach the lobby",
        ),
        ("Ark:Objectives:GetTaskState", {"task_task": "100"}, "TASK Reach the lobby"),
        ("Ark:RemoteEvent", {"remoteevent_event": "77"}, 'RECEIVE EVENT\n"Lobby Alarm"'),
        ("Ark:Locations:SetAlternateName", {"location_location": "1000"}, "SET ALT LOCATION NAME\nLobby"),
        ("Ark:Roster:SetLocation", {"location_location": "1001"}, "SET ROSTER LOCATION\nArboretum"),
    ],
)
def test_class_rules(tables, node_class, inputs, expected):
    assert resolve_label(node_class, None, inputs, tables) == expected


def test_comment_uses_node_name(tables):
    assert resolve_label("_commentbox", "Boss fight", {}, tables) == "[[Boss fight]]"


def test_missing_field_gets_diagnostic_suffix(tables):
    label = resolve_label("Ark:Debug:ConsoleEvent", None, {}, tables)
    assert label.startswith('CMD "<missing>"\nArk:Debug:ConsoleEvent {}')
    assert label.endswith("(was missing)")


def test_unknown_station_path_is_reported(tables):
    label = resolve_label("Ark:PDA:SetStationAccessState", None, {"stationaccess_access": "1"}, tables)
    assert label.startswith("<missing>\nArk:PDA:SetStationAccessState")


def test_labels_are_truncated(tables):
    long_name = "x" * 300
    label = resolve_label("_comment", long_name, {}, tables)
    assert len(label) == MAX_LABEL_LENGTH
    assert label == ("[[" + long_name)[:MAX_LABEL_LENGTH]


def test_resolution_is_deterministic(tables):
    inputs = {"task_task": "-5", "location_location": "1000"}
    first = resolve_label("Ark:Objectives:SetTaskLocation", None, inputs, tables)
    second = resolve_label("Ark:Objectives:SetTaskLocation", None, inputs, tables)
    assert first == second


def test_unhandled_classes_are_deduplicated_and_sorted(tables):
    resolver = LabelResolver(tables)
    for node_class in ["Zeta:Node", "Alpha:Node", "Zeta:Node", "Mission:GameTokenGet"]:
        node = FlowGraphNode(id="1", name=None, node_class=node_class, inputs={"b": "2", "a": "1"})
        resolver.resolve(node)

    assert resolver.unhandled_classes == ["Alpha:Node", "Zeta:Node"]


def test_unknown_class_fallback_label(tables):
    resolver = LabelResolver(tables)
    node = FlowGraphNode(id="1", name=None, node_class="Logic:Any", inputs={"b": "2", "a": "1"})
    assert resolver.resolve(node) == "Logic:Any {a=1, b=2}"


def test_registry_rejects_duplicate_rules():
    assert {"_comment", "_commentbox", "Ark:Objectives:GetTaskState"} <= set(handled_classes())
    with pytest.raises(ValueError):
        label_rule("Ark:EndGame")(lambda inputs, name, tables: "again")


def test_known_id_without_name_is_reported():
    tables = LookupTables(locations={"1002": None})
    label = resolve_label("Ark:Locations:CheckLocation", None, {"location_location": "1002"}, tables)

    assert label.startswith("CHECK LOCATION <missing>\nArk:Locations:CheckLocation")
    assert label.endswith("(was missing)")


def test_node_without_class_is_not_listed_as_unhandled(tables):
    resolver = LabelResolver(tables)
    resolver.resolve(FlowGraphNode(id="1", name=None, node_class=None))

    assert resolver.unhandled_classes == []
