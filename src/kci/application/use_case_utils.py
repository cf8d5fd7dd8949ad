"""Shared helpers for use-case stdout mode and run persistence."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from kci.application._insights_models import InsightsResponse
from kci.application._insights_reports import (
    generate_records_csv,
    generate_result_json,
    response_figures,
    response_records,
)
from kci.application.run_writer import (
    RunResult,
    SummaryContent,
    build_summary_lines,
    create_run,
    finalize_run,
    list_output_files,
)
from kci.application.stdout_renderer import render_stdout_json, render_stdout_report
from kci.infrastructure.metrics import track_request

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=InsightsResponse)


def run_tracked(capability: str, runner: Callable[[], ResponseT]) -> ResponseT:
    """Execute an operation inside request/error counters."""
    with track_request() as timer:
        try:
            response = runner()
        except Exception as exc:
            logger.warning("%s failed: %s", capability, exc)
            raise
    logger.debug("%s finished in %.3fs", capability, timer.elapsed)
    return response


def render_response_stdout(
    response: InsightsResponse, *, title: str, as_json: bool = False
) -> None:
    """Print response as rich report or plain JSON."""
    if as_json:
        render_stdout_json(response.to_dict())
        return
    render_stdout_report(
        title=title,
        explanation=response.explanation,
        figures=response_figures(response),
        records=response_records(response),
    )


def persist_response_run(
    response: InsightsResponse,
    *,
    capability: str,
    title: str,
    inputs: dict[str, Any],
    reports_root: str,
) -> RunResult:
    """Write result.json, record CSVs, summary and manifest for a response."""
    ctx = create_run(capability, inputs=inputs, reports_root=reports_root)
    generate_result_json(response, ctx.output_dir)
    generate_records_csv(response, ctx.output_dir)
    output_files = list_output_files(ctx.output_dir)
    lines = build_summary_lines(
        SummaryContent(
            title=title,
            explanation=response.explanation,
            figures=response_figures(response),
            inputs=ctx.inputs,
        ),
        capability=ctx.capability,
        output_files=output_files,
    )
    return finalize_run(
        ctx,
        output_files=output_files,
        summary_lines=lines,
    )
