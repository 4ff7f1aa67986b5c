"""Success envelope helpers shared by all blueprints."""

from __future__ import annotations

from typing import Any

from flask import jsonify


def success(data: Any = None, message: str = "Success", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def created(data: Any = None, message: str = "Created successfully"):
    return success(data, message, status=201)
