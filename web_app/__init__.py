from __future__ import annotations

from flask import Flask

from lead_miner.config import Settings, get_settings
from lead_miner.sources.gemini import GeminiSearchClient
from lead_miner.utils import parse_rating

from .jobs import JobRegistry

TOP_RATING = 4.5


def is_top_rated(rating: str) -> bool:
    value = parse_rating(rating)
    return value is not None and value >= TOP_RATING


def create_app(settings: Settings | None = None, client=None) -> Flask:
    settings = settings or get_settings()

    def client_factory() -> GeminiSearchClient:
        return GeminiSearchClient(
            api_key=settings.require_api_key(),
            model=settings.gemini_model,
            max_output_tokens=settings.max_output_tokens,
            thinking_budget=settings.thinking_budget,
        )

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=settings.secret_key,
        SESSION_COOKIE_NAME="lead_miner_session",
        PAGE_DELAY=settings.page_delay,
        CLIENT_FACTORY=client_factory,
    )
    app.extensions["lead_miner_jobs"] = JobRegistry()
    app.extensions["lead_miner_client"] = client
    app.add_template_filter(is_top_rated, "top_rated")

    from .routes import bp as main_bp
    app.register_blueprint(main_bp)

    return app


def main() -> None:
    create_app().run(debug=False)
