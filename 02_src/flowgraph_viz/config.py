"""Runtime configuration for the flow graph visualizer."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_OUTPUT_SUBDIR = Path("_PostProcessingOutput") / "FlowGraphOutput"


@dataclass(frozen=True)
class SourceLayout:
    """Auxiliary data locations, relative to the source root."""

    game_tokens: Path = Path("Libs") / "GameTokens" / "GT_Global.xml"
    game_metrics: Path = Path("Ark") / "Player" / "GameMetrics.xml"
    remote_events: Path = Path("Ark") / "RemoteEventLibrary.xml"
    objectives_dir: Path = Path("Ark") / "Campaign" / "Objectives"
    locations: Path = Path("Ark") / "Campaign" / "Locations.xml"
    connectivity: Path = Path("Ark") / "Campaign" / "StationAccessLibrary.xml"


@dataclass(frozen=True)
class FlowGraphConfig:
    source_root: Path = Path(".")
    output_dir: Optional[Path] = None
    actions_dir: Path = Path("Libs") / "GlobalActions"
    dot_executable: str = "dot"
    layout_engine: str = "neato"
    render_format: str = "png"
    render_timeout: float = 10.0
    max_label_length: int = 100
    y_scale: float = 0.75
    layout: SourceLayout = field(default_factory=SourceLayout)

    def __post_init__(self) -> None:
        if self.render_timeout <= 0:
            raise ValueError(f"render_timeout must be positive, got {self.render_timeout}")
        if self.max_label_length <= 0:
            raise ValueError(f"max_label_length must be positive, got {self.max_label_length}")

    @property
    def resolved_output_dir(self) -> Path:
        if self.output_dir is not None:
            return self.output_dir
        return self.source_root / DEFAULT_OUTPUT_SUBDIR

    @property
    def resolved_actions_dir(self) -> Path:
        return self.source_root / self.actions_dir

    def source_path(self, relative: Path) -> Path:
        return self.source_root / relative

    @classmethod
    def from_env(cls) -> "FlowGraphConfig":
        load_dotenv()
        output_dir = os.getenv("FLOWGRAPH_OUTPUT_DIR")
        return cls(
            source_root=Path(os.getenv("FLOWGRAPH_SOURCE_ROOT", ".")),
            output_dir=Path(output_dir) if output_dir else None,
            actions_dir=Path(os.getenv("FLOWGRAPH_ACTIONS_DIR", str(cls.actions_dir))),
            dot_executable=os.getenv("FLOWGRAPH_DOT_EXECUTABLE", cls.dot_executable),
            render_format=os.getenv("FLOWGRAPH_RENDER_FORMAT", cls.render_format),
            render_timeout=float(os.getenv("FLOWGRAPH_RENDER_TIMEOUT", str(cls.render_timeout))),
        )
