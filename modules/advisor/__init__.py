"""Maintenance advisor module package."""

from flask import Blueprint

bp = Blueprint("advisor", __name__, url_prefix="/advisor")

from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "routes"]
