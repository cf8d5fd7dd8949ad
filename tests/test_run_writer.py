"""Tests for standardized run writer."""

import json
from pathlib import Path

from kci.application.run_writer import (
    SummaryContent,
    build_summary_lines,
    create_run,
    finalize_run,
    list_output_files,
)


def test_run_writer_creates_manifest_and_summary(tmp_path: Path) -> None:
    ctx = create_run(
        "cluster-capacity",
        inputs={"key": "value"},
        reports_root=str(tmp_path),
    )
    data_file = ctx.output_dir / "result.json"
    data_file.write_text("{}\n", encoding="utf-8")

    result = finalize_run(
        ctx,
        output_files=list_output_files(ctx.output_dir),
        summary_lines=["# Unit", "- ok"],
    )

    assert result.output_dir == tmp_path / "cluster-capacity" / ctx.run_id
    assert result.manifest_path.exists()
    assert result.summary_path.exists()
    assert data_file in result.output_files
    manifest = json.loads(result.manifest_path.read_text(encoding="utf-8"))
    assert manifest["capability"] == "cluster-capacity"
    assert manifest["status"] == "success"
    assert manifest["inputs"] == {"key": "value"}
    assert manifest["outputs"] == ["result.json", "summary.md", "manifest.json"]


def test_build_summary_lines_sections() -> None:
    lines = build_summary_lines(
        SummaryContent(
            title="Resource Fit",
            explanation="Resources FIT in cluster.",
            figures={"fits": True, "available_cpu_cores": 7.5},
            inputs={"memory_gib": 1.0, "cpu_cores": 2.0},
        ),
        "resource-fit",
        (Path("result.json"),),
    )

    assert lines[0] == "# Resource Fit"
    assert "- `cpu_cores`: `2.0`" in lines
    assert lines.index("- `cpu_cores`: `2.0`") < lines.index("- `memory_gib`: `1.0`")
    assert "- `available_cpu_cores`: `7.500`" in lines
    assert "- `fits`: `True`" in lines
    assert "Resources FIT in cluster." in lines
    assert "  - `result.json`" in lines


def test_build_summary_lines_without_inputs() -> None:
    lines = build_summary_lines(
        SummaryContent(title="Node Breakdown", explanation="x"),
        "node-breakdown",
        (),
    )
    assert lines.count("- (none)") == 2
    assert "- `artifacts`: (none)" in lines
