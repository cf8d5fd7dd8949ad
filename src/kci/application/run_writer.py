"""Run directories holding the artifacts of one persisted insight report.

Layout: `<reports_root>/<capability>/<run_id>/` with the capability's own
files plus `summary.md` and `manifest.json`, which are always written last.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

SUMMARY_FILENAME = "summary.md"
MANIFEST_FILENAME = "manifest.json"


@dataclass(frozen=True)
class RunResult:
    """Paths produced by a persisted insight run."""

    run_id: str
    capability: str
    output_dir: Path
    manifest_path: Path
    summary_path: Path
    output_files: tuple[Path, ...]


@dataclass(frozen=True)
class RunContext:
    """Run directory created but not yet finalized."""

    run_id: str
    capability: str
    output_dir: Path
    started_at: str
    inputs: dict[str, Any]

    def relative(self, path: Path) -> str:
        return path.relative_to(self.output_dir).as_posix()


@dataclass(frozen=True)
class SummaryContent:
    """Payload rendered into summary.md."""

    title: str
    explanation: str
    figures: dict[str, Any] | None = None
    inputs: dict[str, Any] | None = None


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def create_run(
    capability: str,
    *,
    inputs: dict[str, Any],
    reports_root: str = "reports",
) -> RunContext:
    """Create `reports_root/<capability>/<run_id>` and return its context."""
    # Microseconds keep back-to-back runs of one capability apart.
    run_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    output_dir = Path(reports_root) / capability / run_id
    output_dir.mkdir(parents=True, exist_ok=True)
    return RunContext(
        run_id=run_id,
        capability=capability,
        output_dir=output_dir,
        started_at=_timestamp(),
        inputs=inputs,
    )


def list_output_files(output_dir: Path) -> tuple[Path, ...]:
    """Return files already written under `output_dir`, sorted."""
    return tuple(sorted(path for path in output_dir.rglob("*") if path.is_file()))


def _manifest(ctx: RunContext, artifacts: tuple[Path, ...]) -> dict[str, Any]:
    return {
        "run_id": ctx.run_id,
        "capability": ctx.capability,
        "status": "success",
        "started_at": ctx.started_at,
        "finished_at": _timestamp(),
        "inputs": ctx.inputs,
        "outputs": [ctx.relative(path) for path in artifacts] + [MANIFEST_FILENAME],
    }


def finalize_run(
    ctx: RunContext,
    *,
    output_files: tuple[Path, ...],
    summary_lines: list[str],
) -> RunResult:
    """Write summary and manifest next to `output_files`."""
    summary_path = ctx.output_dir / SUMMARY_FILENAME
    summary_path.write_text("\n".join(summary_lines) + "\n", encoding="utf-8")
    artifacts = (*output_files, summary_path)

    manifest_path = ctx.output_dir / MANIFEST_FILENAME
    manifest_path.write_text(
        json.dumps(_manifest(ctx, artifacts), ensure_ascii=False, indent=2)
        + "\n",
        encoding="utf-8",
    )
    return RunResult(
        run_id=ctx.run_id,
        capability=ctx.capability,
        output_dir=ctx.output_dir,
        manifest_path=manifest_path,
        summary_path=summary_path,
        output_files=(*artifacts, manifest_path),
    )


def _format_figure(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


def _bullets(
    items: dict[str, Any], *, formatter: Callable[[Any], str] = str
) -> list[str]:
    if not items:
        return ["- (none)"]
    return [f"- `{key}`: `{formatter(value)}`" for key, value in items.items()]


def build_summary_lines(
    content: SummaryContent,
    capability: str,
    output_files: tuple[Path, ...],
) -> list[str]:
    """Render summary.md: inputs, figures, explanation and artifact list."""
    inputs = content.inputs or {}
    sorted_inputs = {key: inputs[key] for key in sorted(inputs)}

    lines = [f"# {content.title}", "", "## Inputs", *_bullets(sorted_inputs)]
    lines += [
        "",
        "## Figures",
        *_bullets(content.figures or {}, formatter=_format_figure),
    ]
    lines += ["", "## Explanation", "", content.explanation]
    lines += ["", "## Outputs", f"- `capability`: `{capability}`"]
    if output_files:
        lines.append("- `artifacts`:")
        lines += [f"  - `{path.name}`" for path in output_files]
    else:
        lines.append("- `artifacts`: (none)")
    return lines
