import logging

from flask import Flask, redirect, url_for
from dotenv import load_dotenv

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from extensions import db  # noqa: E402  (load_dotenv needs to run first)


def create_app(overrides: dict | None = None) -> Flask:
    """Application factory for the part lifetime tracker."""

    app = Flask(__name__)
    app.config.from_object(Config)
    # overrides go in before db.init_app(): the engine is bound to the URI there
    if overrides:
        app.config.update(overrides)

    if not app.debug and not app.testing:
        logging.basicConfig(level=logging.INFO)

    # init extensions
    db.init_app(app)

    # blueprints
    from modules.parts import bp as parts_bp
    from modules.advisor import bp as advisor_bp

    app.register_blueprint(parts_bp)
    app.register_blueprint(advisor_bp)

    @app.route("/")
    def home():
        return redirect(url_for("parts.list_parts"))

    # DB + inventory bootstrap
    with app.app_context():
        # модели должны быть импортированы до create_all()
        from modules.parts import models as parts_models  # noqa: F401

        db.create_all()

    from modules.parts.store import init_store
    init_store(app)

    return app

if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
