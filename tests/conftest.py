from pathlib import Path

import pytest

from flowgraph_viz.config import FlowGraphConfig


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    root = tmp_path / "game"
    write(
        root / "Libs" / "GameTokens" / "GT_Global.xml",
        '<GameTokensLibrary>\n'
        '  <GameToken Id="42" Name="HasKey" Type="Bool"/>\n'
        '  <GameToken Id="43" Name="DoorOpen" Type="Bool"/>\n'
        '</GameTokensLibrary>\n',
    )
    write(
        root / "Ark" / "Player" / "GameMetrics.xml",
        '<Metrics>\n  <ArkGameMetricProperties ID="9" Name="KillCount" />\n</Metrics>\n',
    )
    write(
        root / "Ark" / "RemoteEventLibrary.xml",
        '<Library>\n  <ArkRemoteEvent ID="77" Name="Lobby Alarm" />\n  <Other ID="78" Name="Ignored" />\n</Library>\n',
    )
    write(
        root / "Ark" / "Campaign" / "Objectives" / "Mission1.xml",
        '<Objective ID="18446744073709551611" Name="obj_internal">\n'
        '  <Desc ID="500" DisplayName="Find the keycard" />\n'
        '  <Task ID="100" DisplayName="Reach the lobby" />\n'
        '  <Task ID="101" DisplayName="Open the vault" />\n'
        '</Objective>\n'
        '<Objective ID="2" Name="second">\n'
        '  <Clue ID="300" DisplayName="Muddy footprints" />\n'
        '  <Task ID="102" DisplayName="Follow the trail" />\n'
        '</Objective>\n',
    )
    write(
        root / "Ark" / "Campaign" / "Locations.xml",
        '<Locations>\n  <ArkLocation ID="1000" Name="Lobby" />\n  <ArkLocation ID="1001" Name="Arboretum" />\n</Locations>\n',
    )
    write(
        root / "Ark" / "Campaign" / "StationAccessLibrary.xml",
        '<Access>\n'
        '  <ArkStationPath ID="800" Name="Lobby to Arboretum" />\n'
        '  <ArkStationAirlock ID="900" Location="1001" />\n'
        '</Access>\n',
    )
    return root


@pytest.fixture
def config(source_root: Path, tmp_path: Path) -> FlowGraphConfig:
    return FlowGraphConfig(source_root=source_root, output_dir=tmp_path / "out")
