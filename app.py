"""
Topic Mapper preview server.

Lets a mapping configuration be tried out over HTTP without a broker: post a
topic and a raw payload, get back the records the mapper would emit.  The
mapping file is read from ``TOPIC_MAPPER_CONFIG``.

    TOPIC_MAPPER_CONFIG=mappings.json flask --app app run
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask, request

from topic_mapper import __version__
from topic_mapper.config import MapperConfig
from topic_mapper.exceptions import (
    InvalidMessageTypeError,
    MappingConfigError,
    UnknownTopicError,
)
from topic_mapper.mapper import Mapper

logger = logging.getLogger(__name__)

CONFIG_ENV = "TOPIC_MAPPER_CONFIG"


def _mapper_from_env() -> Mapper:
    path = os.getenv(CONFIG_ENV)
    if not path:
        raise MappingConfigError([f"{CONFIG_ENV} is not set"])
    return Mapper(config=MapperConfig(mapping_path=Path(path)))


def create_app(mapper: Optional[Mapper] = None) -> Flask:
    """Build the Flask app around *mapper* (loaded from the environment if omitted)."""
    app = Flask(__name__)
    app.config["MAPPER"] = mapper or _mapper_from_env()

    # -------------------------------------------------------
    # API
    # -------------------------------------------------------

    @app.route("/api/health", methods=["GET"])
    def api_health():
        current: Mapper = app.config["MAPPER"]
        return {
            "status": "online",
            "version": __version__,
            "definitions": current.definition_count,
            "topics": len(current.topics()),
        }, 200

    @app.route("/api/topics", methods=["GET"])
    def api_topics():
        current: Mapper = app.config["MAPPER"]
        return {
            "topics": [
                {"topic": topic, "mappings": current.describe(topic)}
                for topic in current.topics()
            ]
        }, 200

    @app.route("/api/resolve", methods=["POST"])
    def api_resolve():
        current: Mapper = app.config["MAPPER"]
        body = request.get_json(silent=True)

        if not isinstance(body, dict) or not isinstance(body.get("topic"), str):
            return {"success": False, "error": "Body must be JSON with a 'topic'"}, 400

        topic = body["topic"]
        message = body.get("message", "")

        try:
            records = current.resolve(topic, message)
        except UnknownTopicError as e:
            return {
                "success": False,
                "error": str(e),
                "suggestions": e.suggestions,
            }, 404
        except InvalidMessageTypeError as e:
            return {"success": False, "error": str(e)}, 400

        logger.info("Preview %s → %d record(s)", topic, len(records))
        return {
            "success": True,
            "topic": topic,
            "records": [r.to_dict() for r in records],
        }, 200

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
