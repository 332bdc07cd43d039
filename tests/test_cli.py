import logging
from pathlib import Path

from flowgraph_viz import cli
from flowgraph_viz.lookup_tables import load_lookup_tables
from flowgraph_viz.render import RenderResult

MISSION = """\
<Entity Name="Door" Id="1">
 <FlowGraph>
  <Node Id="1" Class="Mission:GameTokenSet" pos="1,2,0">
   <Inputs GameTokenId_Token="42" Value="3"/>
  </Node>
  <Node Id="2" Class="Ark:Objectives:TaskState">
   <Inputs Task_Task="-5"/>
  </Node>
  <Edge nodeIn="2" nodeOut="1" portIn="In" portOut="Out"/>
  <Edge nodeIn="3" nodeOut="1" portIn="In" portOut="Out"/>
 </FlowGraph>
</Entity>
<Node Id="9" Class="Logic:Any"/>
"""


def _write_mission(config) -> Path:
    actions = config.resolved_actions_dir
    actions.mkdir(parents=True, exist_ok=True)
    path = actions / "global_mission.xml"
    path.write_text(MISSION, encoding="utf-8")
    return path


def test_run_pipeline_writes_one_dot_per_scope(config):
    source = _write_mission(config)
    resolver = cli.LabelResolver(load_lookup_tables(config))

    result = cli.run_pipeline(source, config, resolver, render=False)

    out = config.resolved_output_dir
    assert sorted(Path(p).name for p in result["outputs"]) == ["global_mission.dot", "global_mission_Door.dot"]
    door = (out / "global_mission_Door.dot").read_text(encoding="utf-8")
    assert 'label="SET TOKEN HasKey=\\"3\\""' in door
    assert 'label="TASK 18446744073709551611"' in door
    report = result["validation_report"]
    assert report["scope_count"] == 2
    assert report["dangling_edge_count"] == 1
    assert report["render_failure_count"] == 0
    assert resolver.unhandled_classes == ["Logic:Any"]


def test_run_batch_continues_after_failed_file(config):
    source = _write_mission(config)
    missing = source.parent / "missing.xml"

    summary = cli.run_batch(config, [missing, source], load_lookup_tables(config), render=False)

    assert [item["source_path"] for item in summary["failures"]] == [str(missing)]
    assert len(summary["results"]) == 1


def test_render_failures_are_reported(config, monkeypatch):
    source = _write_mission(config)
    monkeypatch.setattr(
        "flowgraph_viz.phases.rendering.render_dot",
        lambda dot_path, image_path, **kwargs: RenderResult(dot_path, image_path, ok=False, detail="timeout"),
    )

    summary = cli.run_batch(config, [source], load_lookup_tables(config))

    report = summary["results"][0]["validation_report"]
    assert report["render_failure_count"] == 2
    assert any("render failed" in warning for warning in report["warnings"])


def test_main_processes_actions_dir(config, capsys):
    _write_mission(config)

    exit_code = cli.main(
        [
            "--source-root",
            str(config.source_root),
            "--output-dir",
            str(config.resolved_output_dir),
            "--no-render",
        ]
    )

    assert exit_code == 0
    captured = capsys.readouterr().out
    assert "files=1" in captured
    assert "Logic:Any" in captured
    assert (config.resolved_output_dir / "global_mission_Door.dot").exists()


def test_collect_inputs_does_not_descend_into_subdirectories(config):
    top = _write_mission(config)
    nested = config.resolved_actions_dir / "archive" / "global_mission.xml"
    nested.parent.mkdir()
    nested.write_text(MISSION, encoding="utf-8")

    assert cli.collect_inputs([config.resolved_actions_dir]) == [top]


def test_same_named_inputs_do_not_overwrite_each_other(config, tmp_path):
    first = tmp_path / "a" / "m.xml"
    second = tmp_path / "b" / "m.xml"
    for path in (first, second):
        path.parent.mkdir()
        path.write_text(MISSION, encoding="utf-8")

    summary = cli.run_batch(config, [first, second], load_lookup_tables(config), render=False)

    outputs = [output for result in summary["results"] for output in result["outputs"]]
    assert len(outputs) == len(set(outputs)) == 2
    assert [item["source_path"] for item in summary["failures"]] == [str(second)]
    assert "already used" in summary["failures"][0]["error"]


def test_unhandled_classes_logged_once_per_file(config, caplog):
    source = _write_mission(config)
    resolver = cli.LabelResolver(load_lookup_tables(config))

    with caplog.at_level(logging.INFO, logger="flowgraph_viz.dot_export"):
        result = cli.run_pipeline(source, config, resolver, render=False)

    assert result["validation_report"]["scope_count"] == 2
    reports = [record for record in caplog.records if "didn't have special parsers" in record.getMessage()]
    assert len(reports) == 1
