"""HTML rendering of a ``ViewState`` snapshot."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from users_api.client.state import ViewState

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

# Autoescaping covers & < > " ' in every interpolated value
environment = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)


def render_page(state: ViewState, api_url: str, refresh_seconds: int = 30) -> str:
    template = environment.get_template("console.html")
    return template.render(state=state, api_url=api_url, refresh_seconds=refresh_seconds)
