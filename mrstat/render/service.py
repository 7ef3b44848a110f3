"""Rendering of classified merge requests into shareable reports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson
import pendulum
from jinja2 import Environment, FileSystemLoader, select_autoescape

from mrstat.classify import find_blockers

if TYPE_CHECKING:
    from datetime import datetime

    from mrstat.models import MergeRequest
    from mrstat.monitor import MonitorResult

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
READY_HEADER = "Ready to Merge"
BLOCKED_HEADER = "Blocked"


class ReportFormat(StrEnum):
    """Output formats supported by the renderer."""

    SLACK = "slack"
    TEXT = "text"
    JSON = "json"


@dataclass(frozen=True)
class ReportEntry:
    """A merge request paired with its blockers for display."""

    merge_request: MergeRequest
    blockers: list[str]

    @property
    def rows(self) -> list[tuple[str, str]]:
        """Return the labelled rows shown in the plain-text listing."""
        merge_request = self.merge_request
        rows = [
            ("Title:", merge_request.title),
            ("Author:", merge_request.author.name),
            ("Branch:", merge_request.source_branch),
            ("URL:", merge_request.web_url),
        ]
        if merge_request.labels:
            rows.append(("Labels:", ", ".join(merge_request.labels)))
        if self.blockers:
            rows.append(("Blockers:", ", ".join(self.blockers)))
        return rows

    @property
    def width(self) -> int:
        """Return the column width that aligns row values."""
        return max(len(key) for key, _ in self.rows) + 1


@dataclass(frozen=True)
class ReportSection:
    """A titled group of report entries."""

    header: str
    entries: list[ReportEntry]


class RenderService:
    """Render a monitor result as Slack markdown, aligned text, or JSON."""

    def __init__(
        self,
        *,
        template_dir: Path | None = None,
        reference: datetime | None = None,
    ) -> None:
        """Initialise a renderer reading templates from ``template_dir``."""
        self._template_dir = Path(template_dir or DEFAULT_TEMPLATE_DIR)
        self._reference = reference
        self._env = Environment(
            loader=FileSystemLoader(self._template_dir),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, result: MonitorResult, fmt: ReportFormat = ReportFormat.SLACK) -> str:
        """Return the report text for ``result`` in the requested format."""
        if fmt is ReportFormat.JSON:
            return self._render_json(result)
        template_name = "slack.md.j2" if fmt is ReportFormat.SLACK else "text.txt.j2"
        template = self._env.get_template(template_name)
        rendered = template.render(
            target_branch=result.target_branch,
            sections=_sections(result),
        )
        return rendered.rstrip("\n")

    def _render_json(self, result: MonitorResult) -> str:
        generated_at = pendulum.instance(self._reference) if self._reference else pendulum.now("UTC")
        payload: dict[str, Any] = {
            "target_branch": result.target_branch,
            "generated_at": generated_at.to_iso8601_string(),
            "ready": [_encode_merge_request(merge_request) for merge_request in result.ready],
            "blocked": [_encode_merge_request(merge_request) for merge_request in result.blocked],
        }
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode()


def _sections(result: MonitorResult) -> list[ReportSection]:
    sections: list[ReportSection] = []
    for header, merge_request_list in ((READY_HEADER, result.ready), (BLOCKED_HEADER, result.blocked)):
        if not merge_request_list:
            continue
        entries = [ReportEntry(merge_request, find_blockers(merge_request)) for merge_request in merge_request_list]
        sections.append(ReportSection(header=header, entries=entries))
    return sections


def _encode_merge_request(merge_request: MergeRequest) -> dict[str, Any]:
    payload = merge_request.model_dump(mode="json")
    payload["blockers"] = find_blockers(merge_request)
    return payload
