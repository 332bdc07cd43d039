"""Id -> display name tables scraped from auxiliary game data."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from .attributes import extract_attributes, extract_tag
from .config import FlowGraphConfig

logger = logging.getLogger(__name__)

Table = Mapping[str, Optional[str]]


def _frozen(table: Dict[str, Optional[str]]) -> Table:
    return MappingProxyType(dict(table))


@dataclass(frozen=True)
class LookupTables:
    game_tokens: Table = field(default_factory=dict)
    game_metrics: Table = field(default_factory=dict)
    remote_events: Table = field(default_factory=dict)
    objectives: Table = field(default_factory=dict)
    tasks: Table = field(default_factory=dict)
    descriptions: Table = field(default_factory=dict)
    clues: Table = field(default_factory=dict)
    locations: Table = field(default_factory=dict)
    # Station path id -> path name, airlock id -> location id.
    connectivity: Table = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in self.__dataclass_fields__:
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    def sizes(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in self.__dataclass_fields__}


def _iter_lines(path: Path) -> Iterator[str]:
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        for line in handle:
            yield line.rstrip("\r\n")


def _load_marked_table(path: Path, marker: str, value_key: str = "name") -> Dict[str, Optional[str]]:
    table: Dict[str, Optional[str]] = {}
    try:
        for line in _iter_lines(path):
            if marker in line:
                keys = extract_attributes(line)
                table[keys.get("id")] = keys.get(value_key)
    except OSError as error:
        logger.warning("Lookup source %s unavailable, using empty table: %s", path, error)
    return table


def load_game_tokens(path: Path) -> Dict[str, Optional[str]]:
    return _load_marked_table(path, "<GameToken ")


def load_game_metrics(path: Path) -> Dict[str, Optional[str]]:
    return _load_marked_table(path, "<ArkGameMetricProperties")


def load_locations(path: Path) -> Dict[str, Optional[str]]:
    return _load_marked_table(path, "<ArkLocation ")


def load_remote_events(path: Path) -> Dict[str, Optional[str]]:
    events: Dict[str, Optional[str]] = {}
    try:
        for line in _iter_lines(path):
            if extract_tag(line) == "ArkRemoteEvent":
                keys = extract_attributes(line)
                events[keys.get("id")] = keys.get("name")
    except OSError as error:
        logger.warning("Lookup source %s unavailable, using empty table: %s", path, error)
    return events


def load_connectivity(path: Path) -> Dict[str, Optional[str]]:
    connectivity: Dict[str, Optional[str]] = {}
    try:
        for line in _iter_lines(path):
            if "<ArkStationPath " in line:
                keys = extract_attributes(line)
                connectivity[keys.get("id")] = keys.get("name")
            elif "<ArkStationAirlock " in line:
                keys = extract_attributes(line)
                connectivity[keys.get("id")] = keys.get("location")
    except OSError as error:
        logger.warning("Lookup source %s unavailable, using empty table: %s", path, error)
    return connectivity


def load_objectives(
    objectives_dir: Path,
) -> Tuple[Dict[str, Optional[str]], Dict[str, Optional[str]], Dict[str, Optional[str]], Dict[str, Optional[str]]]:
    """Scan objective files into (objectives, tasks, descriptions, clues).

    An objective has no display name of its own; it takes the display name of
    the first Task or Clue that follows it in the same file.
    """
    objectives: Dict[str, Optional[str]] = {}
    tasks: Dict[str, Optional[str]] = {}
    descriptions: Dict[str, Optional[str]] = {}
    clues: Dict[str, Optional[str]] = {}

    if not objectives_dir.is_dir():
        logger.warning("Objectives directory %s not found, objective tables are empty", objectives_dir)
        return objectives, tasks, descriptions, clues

    for path in sorted(objectives_dir.iterdir()):
        if not path.is_file():
            continue
        pending_objective: Optional[str] = None
        needs_name = False
        try:
            for line in _iter_lines(path):
                header = extract_tag(line)
                if header not in ("Objective", "Task", "Desc", "Clue"):
                    continue
                keys = extract_attributes(line)
                if header == "Objective":
                    pending_objective = keys.get("id")
                    needs_name = True
                elif header == "Desc":
                    descriptions[keys.get("id")] = keys.get("displayname")
                else:
                    target = tasks if header == "Task" else clues
                    target[keys.get("id")] = keys.get("displayname")
                    if needs_name:
                        objectives[pending_objective] = keys.get("displayname")
                        needs_name = False
        except OSError as error:
            logger.warning("Objective file %s unreadable, skipping: %s", path, error)

    return objectives, tasks, descriptions, clues


def load_lookup_tables(config: FlowGraphConfig) -> LookupTables:
    layout = config.layout
    objectives, tasks, descriptions, clues = load_objectives(config.source_path(layout.objectives_dir))
    tables = LookupTables(
        game_tokens=load_game_tokens(config.source_path(layout.game_tokens)),
        game_metrics=load_game_metrics(config.source_path(layout.game_metrics)),
        remote_events=load_remote_events(config.source_path(layout.remote_events)),
        objectives=objectives,
        tasks=tasks,
        descriptions=descriptions,
        clues=clues,
        locations=load_locations(config.source_path(layout.locations)),
        connectivity=load_connectivity(config.source_path(layout.connectivity)),
    )
    logger.info("Loaded lookup tables: %s", tables.sizes())
    return tables
