"""
Plain-text fit report.

Renders an analysis result through templates/fit_report.txt.jinja.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from skillfit.contexts.classification.skill_normalizer import confidence_label

TEMPLATES_PATH = Path(__file__).parent / "templates"
REPORT_TEMPLATE = "fit_report.txt.jinja"


class ReportRenderer:
    """Loads and caches the report template."""

    def __init__(self, templates_path: Optional[Path] = None):
        self.templates_path = templates_path or TEMPLATES_PATH
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["percent"] = lambda value: f"{round(value * 100)}%"
        self.env.filters["confidence_label"] = confidence_label
        self._template: Optional[Template] = None

    @property
    def template(self) -> Template:
        if self._template is None:
            self._template = self.env.get_template(REPORT_TEMPLATE)
        return self._template

    def render(self, result: Dict[str, Any]) -> str:
        """
        Render a report.

        Args:
            result: AnalysisResult.to_dict() output

        Returns:
            Report text
        """
        return self.template.render(result=result)


def render_report(result: Dict[str, Any]) -> str:
    """Render a report with the packaged template."""
    return ReportRenderer().render(result)
