import logging
from functools import wraps

from flask import Flask, jsonify, request
from werkzeug.exceptions import BadRequest, HTTPException

from config import get_settings
from models import SortStrategy
from trace_format import TraceSyntaxError
from trace_runner import TraceRunner

logger = logging.getLogger(__name__)

app = Flask(__name__)

settings = get_settings()
runner = TraceRunner(strategy=settings.sort_strategy)


# -------------------------
# Shared: JSON body required
# -------------------------
def require_json(fn):
    @wraps(fn)
    def inner(*args, **kwargs):
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise BadRequest("request body must be a JSON object")
        return fn(body, *args, **kwargs)
    return inner


@app.errorhandler(HTTPException)
def handle_http_error(exc: HTTPException):
    return jsonify({"error": exc.name, "message": exc.description}), exc.code


# -------------------------
# Queue state
# -------------------------
@app.route("/queue", methods=["GET"])
def queue_state():
    return jsonify(runner.state())


@app.route("/strategies", methods=["GET"])
def strategies():
    return jsonify({
        "strategies": [s.value for s in SortStrategy],
        "default": settings.sort_strategy.value,
    })


# -------------------------
# Single command
# -------------------------
@app.route("/command", methods=["POST"])
@require_json
def run_command(body):
    line = body.get("line")
    if not isinstance(line, str) or not line.strip():
        raise BadRequest("'line' must be a non-empty string")
    try:
        result = runner.execute(line)
    except TraceSyntaxError as exc:
        raise BadRequest(str(exc))
    return jsonify({"result": result.to_dict(), "queue": runner.state()})


# -------------------------
# Whole trace (on its own runner)
# -------------------------
@app.route("/trace", methods=["POST"])
@require_json
def run_trace(body):
    lines = body.get("lines")
    if not isinstance(lines, list) or not all(isinstance(x, str) for x in lines):
        raise BadRequest("'lines' must be a list of strings")

    strategy = settings.sort_strategy
    if body.get("strategy") is not None:
        try:
            strategy = SortStrategy.parse(body["strategy"])
        except ValueError as exc:
            raise BadRequest(str(exc))

    trace_runner = TraceRunner(strategy=strategy)
    try:
        report = trace_runner.run(lines)
    except TraceSyntaxError as exc:
        raise BadRequest(str(exc))
    logger.info("Trace via HTTP: %d commands, ok=%s", len(report.results), report.ok)
    return jsonify({"strategy": strategy.value, **report.to_dict()})


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.run(debug=True)
