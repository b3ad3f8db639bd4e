"""Markdown summary of the current catalog view."""

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import yaml

from models.constants import RECOMMENDATION_LABELS, SCORE_WEIGHTS

if TYPE_CHECKING:
    from catalog.sync import DetailPanel, ViewSyncController

logger = logging.getLogger(__name__)


class MarkdownGenerator:
    """Generator for catalog summary files with YAML frontmatter."""

    def __init__(self, output_dir: str = "output", top_n: int = 3):
        """
        Initialize the generator.

        Args:
            output_dir: Directory summary files are written to
            top_n: Number of top picks listed in the summary
        """
        self.output_dir = Path(output_dir)
        self.top_n = top_n

    def generate_yaml_frontmatter(
        self, controller: "ViewSyncController", generated_at: datetime
    ) -> str:
        """Generate YAML frontmatter describing the view the summary was taken from."""
        catalog = controller.catalog
        stats = controller.stats_projection()

        filters: Dict[str, Any] = {
            "type": catalog.type_filter.value,
            "recommendation": catalog.recommendation_filter.value,
            "sort": controller.sort_order.value,
        }
        if catalog.search_query:
            filters["search"] = catalog.search_query

        frontmatter: Dict[str, Any] = {
            "generated_at": generated_at.isoformat(),
            "filters": filters,
            "stats": {
                "total_projects": stats.total,
                "visible_projects": stats.visible,
                "new_launches": stats.new_launches,
                "average_score": stats.average_score,
            },
        }
        panel = controller.detail_projection()
        if panel is not None:
            frontmatter["selected"] = {
                "id": panel.project.id,
                "title": panel.project.title,
                "score": panel.breakdown.to_dict(),
            }

        return yaml.dump(
            frontmatter,
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
        )

    def generate_markdown_content(self, controller: "ViewSyncController") -> str:
        """Generate the markdown body: stats, project table, top picks, detail."""
        stats = controller.stats_projection()
        lines: List[str] = [
            "# Project Catalog",
            "",
            f"**{stats.visible}** of **{stats.total}** projects visible "
            f"| New launches: {stats.new_launches} "
            f"| Average score: {stats.average_score:.1f}",
            "",
        ]

        entries = controller.list_projection()
        if entries:
            lines.extend([
                "| # | Project | Builder | Location | Type | Price | Score | Rating |",
                "|---|---------|---------|----------|------|-------|-------|--------|",
            ])
            for rank, entry in enumerate(entries, 1):
                project = entry.project
                marker = " ◀" if entry.active else ""
                lines.append(
                    f"| {rank} | {self._escape(project.title)}{marker} "
                    f"| {self._escape(project.builder)} "
                    f"| {self._escape(project.location)} "
                    f"| {project.type.value} "
                    f"| {self._escape(project.price) or 'n/a'} "
                    f"| {entry.breakdown.composite} "
                    f"| {RECOMMENDATION_LABELS[entry.tier]} |"
                )
        else:
            lines.append("*No projects match the current filters.*")
        lines.append("")

        top_picks = controller.top_picks(self.top_n)
        if top_picks:
            lines.extend(["## Top Picks", ""])
            for project in top_picks:
                breakdown = controller.score_engine.score(project)
                lines.append(
                    f"- **{project.title}** ({project.builder}, {project.location}): "
                    f"{breakdown.composite}/100 {breakdown.label}"
                )
            lines.append("")

        panel = controller.detail_projection()
        if panel is not None:
            lines.extend(self._detail_section(panel))

        return "\n".join(lines)

    def _detail_section(self, panel: "DetailPanel") -> List[str]:
        project = panel.project
        breakdown = panel.breakdown
        insights = panel.insights

        lines = [
            f"## {project.title}",
            "",
            f"{project.builder} · {project.location} · {project.price or 'Price on request'}",
            "",
            f"**{breakdown.composite}/100 {panel.recommendation_text}**",
            "",
            "| Metric | Score | Weight |",
            "|--------|-------|--------|",
        ]
        for (name, weight), value in zip(SCORE_WEIGHTS, breakdown.sub_scores()):
            lines.append(f"| {name.capitalize()} | {value} | {weight:.0%} |")

        lines += [
            "",
            f"- Metro: {insights.metro_text}",
            f"- Appreciation: +{insights.appreciation_percent}% YoY",
            f"- Developer on-time delivery: {insights.on_time_percent}%",
            f"- Construction: {insights.completion_percent}% built",
            f"- Gross yield: {insights.gross_yield_percent:.1f}%",
            "",
            f"> {insights.summary}",
            "",
        ]

        if project.amenities:
            lines.append("**Amenities:** " + ", ".join(project.amenities))
            lines.append("")

        lines.append(f"[Directions]({panel.directions_url}) · [Street View]({panel.street_view_url})")
        lines.append("")
        return lines

    def write_summary(
        self,
        controller: "ViewSyncController",
        filename: str = "catalog_summary.md",
        generated_at: Optional[datetime] = None,
    ) -> Path:
        """
        Write the summary file atomically (temp file + rename).

        Returns:
            Path of the written file
        """
        generated_at = generated_at or datetime.now()
        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / filename

        frontmatter = self.generate_yaml_frontmatter(controller, generated_at)
        body = self.generate_markdown_content(controller)
        full_content = f"---\n{frontmatter}---\n\n{body}"

        temp_path = filepath.with_suffix(".tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(full_content)
        temp_path.replace(filepath)

        logger.info(f"Catalog summary saved: {filepath}")
        return filepath

    def _escape(self, text: str) -> str:
        """Escape pipe characters so table cells stay intact."""
        return (text or "").replace("|", "\\|")
