"""Jinja2 template configuration for the dashboard."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from attendance.core.summary import DEFAULT_TARGET, SUPPORTED_TARGETS
from attendance.models.subject import NAME_MAX_LENGTH, TYPE_MAX_LENGTH

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
STATIC_DIR = Path(__file__).parent.parent / "static"

# Percentage at which a figure is shown as on track
HEALTHY_PERCENTAGE = 75


def format_percent(value: float, digits: int = 1) -> str:
    """Format a percentage for display, e.g. 75.0%."""
    return f"{value:.{digits}f}%"


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["percent"] = format_percent
templates.env.globals.update(
    supported_targets=SUPPORTED_TARGETS,
    default_target=DEFAULT_TARGET,
    healthy_percentage=HEALTHY_PERCENTAGE,
    name_max_length=NAME_MAX_LENGTH,
    type_max_length=TYPE_MAX_LENGTH,
)
