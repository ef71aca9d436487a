# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify

from sessiongate.infrastructure.db import Database
from sessiongate.infrastructure.health import check_database
from sessiongate.shared.logging import logger


class MiscController:
    def __init__(self, *, user_store: str, database: Database | None = None) -> None:
        self._user_store = user_store
        self._database = database

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"ok": True, "user_store": self._user_store}
        if self._database is None:
            return jsonify(status), 200
        try:
            check_database(self._database)
            status["database"] = "ok"
        except Exception:
            logger.opt(exception=True).warning("health: database check failed")
            status["ok"] = False
            status["database"] = "error"
            return jsonify(status), 503
        return jsonify(status), 200
