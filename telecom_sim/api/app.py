"""Flask application exposing the simulation engine over HTTP.

Every response uses the envelope ``{"success": bool, ...}`` with either
``data``, ``message`` or ``error``. Engine errors are translated here:
unknown nodes and links become 404, invalid values 400 and anything else 500.
"""

import logging
from typing import Any, Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS

from telecom_sim.core.errors import InvalidArgumentError, NotFoundError
from telecom_sim.core.simulator import NetworkSimulator
from telecom_sim.driver import TickDriver

logger = logging.getLogger(__name__)

bp = Blueprint("simulate", __name__, url_prefix="/api/simulate")


def _simulator() -> NetworkSimulator:
    return current_app.extensions["simulator"]


def _ok(**payload: Any):
    return jsonify({"success": True, **payload})


def _fail(status: int, error: str):
    return jsonify({"success": False, "error": error}), status


def _int_field(name: str) -> int:
    """Read an integer field from the JSON body.

    Raises:
        InvalidArgumentError: If the field is missing or not an integer.
    """
    body = request.get_json(silent=True) or {}
    value = body.get(name)
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError(f"Field '{name}' is required")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Field '{name}' must be an integer") from None
    if isinstance(value, float) and not value.is_integer():
        raise InvalidArgumentError(f"Field '{name}' must be an integer")
    return number


@bp.errorhandler(NotFoundError)
def handle_not_found(error: NotFoundError):
    return _fail(404, str(error))


@bp.errorhandler(InvalidArgumentError)
def handle_invalid(error: InvalidArgumentError):
    return _fail(400, str(error))


@bp.errorhandler(Exception)
def handle_unexpected(error: Exception):
    logger.exception("Unhandled error in simulation API")
    return _fail(500, str(error))


@bp.get("/stats")
def stats():
    return _ok(data=_simulator().get_stats().to_dict())


@bp.post("/tick")
def tick():
    simulator = _simulator()
    simulator.tick()
    return _ok(message="Simulation tick completed", data=simulator.get_stats().to_dict())


@bp.post("/start")
def start():
    _simulator().start()
    return _ok(message="Simulation started")


@bp.post("/pause")
def pause():
    _simulator().pause()
    return _ok(message="Simulation paused")


@bp.post("/reset")
def reset():
    _simulator().reset()
    return _ok(message="Simulation reset to initial state")


@bp.post("/traffic/<node_id>")
def update_traffic(node_id: str):
    try:
        rate = _int_field("rate")
    except InvalidArgumentError:
        return _fail(400, "Valid rate (>= 0) is required")
    _simulator().set_node_rate(node_id, rate)
    return _ok(message=f"Traffic rate updated for node {node_id} to {rate} packets/second")


@bp.post("/link/<source>/<target>/capacity")
def update_capacity(source: str, target: str):
    try:
        capacity = _int_field("capacity")
    except InvalidArgumentError:
        return _fail(400, "Valid capacity (> 0) is required")
    _simulator().set_link_capacity(source, target, capacity)
    return _ok(
        message=f"Link capacity updated from {source} to {target}: {capacity} packets/second"
    )


@bp.post("/advance-time")
def advance_time():
    current_time = _simulator().advance_time_slot()
    return _ok(
        message=f"Advanced to time slot: {current_time}",
        data={"currentTime": current_time},
    )


@bp.get("/topology")
def topology():
    return _ok(data=_simulator().topology())


def create_app(
    simulator: Optional[NetworkSimulator] = None,
    driver: Optional[TickDriver] = None,
) -> Flask:
    """Create the Flask application.

    Args:
        simulator: Engine to serve. A default one is created when omitted.
        driver: Tick driver to start with the app, if any.

    Returns:
        The configured Flask app.
    """
    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": "*"}}, send_wildcard=True)

    if simulator is None:
        simulator = NetworkSimulator()
    app.extensions["simulator"] = simulator
    app.register_blueprint(bp)

    if driver is not None:
        app.extensions["tick_driver"] = driver
        driver.start_in_thread()

    return app
