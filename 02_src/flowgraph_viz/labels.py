"""Human readable node labels resolved through the lookup tables.

Each node class with a dedicated rule registers a handler through
``label_rule``. Handlers are pure: they read the node inputs, translate ids via
``LookupTables`` and return the label text (or ``None`` when nothing useful can
be said). ``resolve_label`` applies the uniform post-processing, and
``LabelResolver`` adds the bookkeeping of classes that have no rule yet.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional, Set

from .attributes import signed_to_unsigned
from .graph_model import FlowGraphNode
from .lookup_tables import LookupTables, Table

logger = logging.getLogger(__name__)

MAX_LABEL_LENGTH = 100

# Rendered in place of an input that the node does not carry. Attribute values
# never contain `<`, so this cannot collide with scraped data.
MISSING_FIELD = "<missing>"

LabelHandler = Callable[[Mapping[str, str], Optional[str], LookupTables], Optional[str]]

_HANDLERS: Dict[str, LabelHandler] = {}


def label_rule(*node_classes: str) -> Callable[[LabelHandler], LabelHandler]:
    def register(handler: LabelHandler) -> LabelHandler:
        for node_class in node_classes:
            if node_class in _HANDLERS:
                raise ValueError(f"Duplicate label rule for class '{node_class}'.")
            _HANDLERS[node_class] = handler
        return handler

    return register


def handled_classes() -> List[str]:
    return sorted(_HANDLERS)


def is_handled(node_class: Optional[str]) -> bool:
    return node_class in _HANDLERS


def format_inputs(inputs: Mapping[str, str]) -> str:
    pairs = ", ".join(f"{key}={value}" for key, value in sorted(inputs.items()))
    return "{" + pairs + "}"


def fallback_label(node_class: Optional[str], inputs: Mapping[str, str]) -> str:
    return f"{node_class} {format_inputs(inputs)}"


def _field(inputs: Mapping[str, str], key: str) -> str:
    value = inputs.get(key)
    return MISSING_FIELD if value is None else value


def _lookup(table: Table, raw_id: Optional[str], unsigned: bool = False) -> str:
    if raw_id is None:
        return MISSING_FIELD
    key = signed_to_unsigned(raw_id) if unsigned else raw_id
    if key not in table:
        return key
    # Known id whose name was not scrapeable.
    name = table[key]
    return MISSING_FIELD if name is None else name


def _token(inputs: Mapping[str, str], tables: LookupTables) -> str:
    return _lookup(tables.game_tokens, inputs.get("gametokenid_token"))


def _metric(inputs: Mapping[str, str], tables: LookupTables) -> str:
    return _lookup(tables.game_metrics, inputs.get("gamemetric_metric"))


def _objective(inputs: Mapping[str, str], tables: LookupTables) -> str:
    return _lookup(tables.objectives, inputs.get("objective_objective"), unsigned=True)


def _task(inputs: Mapping[str, str], tables: LookupTables) -> str:
    return _lookup(tables.tasks, inputs.get("task_task"), unsigned=True)


def _location(inputs: Mapping[str, str], tables: LookupTables) -> str:
    return _lookup(tables.locations, inputs.get("location_location"))


def _remote_event(inputs: Mapping[str, str], tables: LookupTables) -> str:
    return _lookup(tables.remote_events, inputs.get("remoteevent_event"))


# Game tokens


@label_rule("Mission:GameTokenSet")
def _game_token_set(inputs, name, tables):
    return f'SET TOKEN {_token(inputs, tables)}="{_field(inputs, "value")}"'


@label_rule("Mission:GameTokenCheck")
def _game_token_check(inputs, name, tables):
    return f'CHECK TOKEN {_token(inputs, tables)}="{_field(inputs, "checkvalue")}"'


@label_rule("Mission:GameTokenUpdated")
def _game_token_updated(inputs, name, tables):
    return f'ON UPDATED TOKEN {_token(inputs, tables)}="{_field(inputs, "compare_value")}"'


@label_rule("Mission:GameTokenGet")
def _game_token_get(inputs, name, tables):
    return f"GET TOKEN {_token(inputs, tables)}"


@label_rule("Mission:GameTokenModify")
def _game_token_modify(inputs, name, tables):
    return (
        f"MODIFY TOKEN {_token(inputs, tables)}\n"
        f'Op="{_field(inputs, "op")}" Type="{_field(inputs, "type")}" Value="{_field(inputs, "value")}"'
    )


# Metrics


@label_rule("Ark:GameMetric")
def _game_metric(inputs, name, tables):
    return f'METRIC "{_metric(inputs, tables)}"'


@label_rule("Ark:IncrementGameMetric")
def _increment_game_metric(inputs, name, tables):
    return f'INC METRIC "{_metric(inputs, tables)}"\nBY {_field(inputs, "amount")}'


# Annotations and debug


@label_rule("_comment", "_commentbox")
def _comment(inputs, name, tables):
    return f"[[{MISSING_FIELD if name is None else name}]]"


@label_rule("Debug:DisplayMessage")
def _display_message(inputs, name, tables):
    return f"[[[{_field(inputs, 'message')}]]]"


@label_rule("Ark:Debug:ConsoleEvent")
def _console_event(inputs, name, tables):
    return f'CMD "{_field(inputs, "command")}"'


@label_rule("Ark:EndGame")
def _end_game(inputs, name, tables):
    return "END GAME"


# Objectives


@label_rule("Ark:Objectives:ObjectiveState")
def _objective_state(inputs, name, tables):
    label = f'OBJECTIVE "{_objective(inputs, tables)}"'
    if inputs.get("settracked") == "1":
        label += "\nSET TRACKED"
    return label


@label_rule("Ark:Objectives:GetObjectiveState")
def _get_objective_state(inputs, name, tables):
    return f'GET OBJECTIVE STATE\n"{_objective(inputs, tables)}"'


@label_rule("Ark:Objectives:ObjectiveNotification")
def _objective_notification(inputs, name, tables):
    return f'OBJECTIVE NOTIFICATION\n"{_objective(inputs, tables)}"'


@label_rule("Ark:Objectives:SetTrackedObjective")
def _set_tracked_objective(inputs, name, tables):
    return f'SET TRACKED OBJECTIVE\n"{_objective(inputs, tables)}"'


@label_rule("Ark:Objectives:SetObjectiveDescription")
def _set_objective_description(inputs, name, tables):
    description = _lookup(
        tables.descriptions, inputs.get("objectivedescription_description"), unsigned=True
    )
    return f'SET DESC "{description}"'


@label_rule("Ark:Objectives:TaskState", "Ark:Objectives:GetTaskState")
def _task_state(inputs, name, tables):
    return f"TASK {_task(inputs, tables)}"


@label_rule("Ark:Objectives:SetTaskLocation")
def _set_task_location(inputs, name, tables):
    return f"SET TASK LOCATION\n{_task(inputs, tables)}={_location(inputs, tables)}"


@label_rule("Ark:Objectives:SetTaskMarkerEntity")
def _set_task_marker_entity(inputs, name, tables):
    return f"SET TASK MARKER ENTITY\n{_task(inputs, tables)}"


@label_rule("Ark:Objectives:ShowClue")
def _show_clue(inputs, name, tables):
    clue = _lookup(tables.clues, inputs.get("objectiveclue_clue"), unsigned=True)
    return f"SHOW CLUE {clue}"


# Remote events


@label_rule("Ark:RemoteEvent")
def _remote_event_received(inputs, name, tables):
    return f'RECEIVE EVENT\n"{_remote_event(inputs, tables)}"'


@label_rule("Ark:SendRemoteEvent")
def _remote_event_sent(inputs, name, tables):
    return f'SEND EVENT\n"{_remote_event(inputs, tables)}"'


# Locations and station connectivity


@label_rule("Ark:Locations:CheckLocation")
def _check_location(inputs, name, tables):
    return f"CHECK LOCATION {_location(inputs, tables)}"


@label_rule("Ark:Locations:SetAlternateName")
def _set_alternate_name(inputs, name, tables):
    return f"SET ALT LOCATION NAME\n{_location(inputs, tables)}"


@label_rule("Ark:Roster:SetLocation")
def _roster_set_location(inputs, name, tables):
    return f"SET ROSTER LOCATION\n{_location(inputs, tables)}"


@label_rule("Ark:PDA:SetStationAccessState")
def _station_access_state(inputs, name, tables):
    return tables.connectivity.get(inputs.get("stationaccess_access"))


@label_rule("Ark:PDA:SetStationAirlockState")
def _station_airlock_state(inputs, name, tables):
    location_id = tables.connectivity.get(inputs.get("stationairlock_airlock"))
    location = tables.locations.get(location_id)
    return f"Airlock to {MISSING_FIELD if location is None else location}"


def truncate_label(label: str, max_length: int = MAX_LABEL_LENGTH) -> str:
    return label[:max_length]


def resolve_label(
    node_class: Optional[str],
    node_name: Optional[str],
    inputs: Mapping[str, str],
    tables: LookupTables,
    max_length: int = MAX_LABEL_LENGTH,
) -> str:
    """Translate a node into display text; never raises on incomplete data."""
    handler = _HANDLERS.get(node_class)
    if handler is None:
        label: Optional[str] = fallback_label(node_class, inputs)
    else:
        label = handler(inputs, node_name, tables)

    if label is None or MISSING_FIELD in label:
        label = f"{MISSING_FIELD if label is None else label}\n{fallback_label(node_class, inputs)}(was missing)"
        logger.warning("Incomplete label data for %s", fallback_label(node_class, inputs))

    return truncate_label(label, max_length)


class LabelResolver:
    """Resolves node labels and remembers which classes lack a rule."""

    def __init__(self, tables: LookupTables, max_length: int = MAX_LABEL_LENGTH) -> None:
        self.tables = tables
        self.max_length = max_length
        self._unhandled: Set[str] = set()

    def resolve(self, node: FlowGraphNode) -> str:
        if node.node_class is None:
            logger.warning("Node %s has no class", node.id)
        elif not is_handled(node.node_class):
            self._unhandled.add(node.node_class)
        return resolve_label(node.node_class, node.name, node.inputs, self.tables, self.max_length)

    @property
    def unhandled_classes(self) -> List[str]:
        return sorted(self._unhandled)
