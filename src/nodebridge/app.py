import json, logging
from flask import Flask, request, jsonify

from . import config
from .errors import AbnormalExit, BridgeError, Cancelled, LaunchFailure, RuntimeUnavailable
from .runner import CancelScope, check_available
from .session import Session

logger = logging.getLogger(__name__)

app = Flask(__name__)

STATUS_BY_KIND = {
    Cancelled.kind: 408,
    RuntimeUnavailable.kind: 500,
    LaunchFailure.kind: 500,
}


def _truncate(s: str, n: int) -> str:
    if not s or len(s) <= n: return s or ""
    return s[:n] + f"\n... [truncated {len(s) - n} chars]\n"


def _validation_error(message: str, status: int = 400):
    return jsonify(error={"type": "ValidationError", "message": message}), status


def _bridge_error(e: BridgeError):
    body = {"type": e.kind, "message": _truncate(e.detail, config.OUTPUT_MAX_CHARS)}
    if isinstance(e, AbnormalExit):
        body["details"] = _truncate(e.output, config.OUTPUT_MAX_CHARS)
    return jsonify(error=body), STATUS_BY_KIND.get(e.kind, 400)


def _request_body():
    if not request.is_json:
        return None, _validation_error("Content-Type must be application/json")
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, _validation_error("body must be a JSON object")
    preamble = data.get("preamble")
    if preamble is not None and not isinstance(preamble, str):
        return None, _validation_error("'preamble' must be a string")
    return data, None


def _too_large(*parts) -> bool:
    return sum(len(p.encode("utf-8")) for p in parts if p) > config.MAX_SOURCE_BYTES


def _session(data) -> Session:
    # Fresh scope per request; the library itself has no default timeout.
    return Session(preamble=data.get("preamble"), scope=CancelScope(config.TIMEOUT_SECONDS))


def _run(fn):
    try:
        return jsonify(result=fn())
    except BridgeError as e:
        logger.info("evaluation failed (%s): %.200s", e.kind, e.detail)
        return _bridge_error(e)


@app.post("/eval")
def eval_expression():
    data, err = _request_body()
    if err: return err
    expression = data.get("expression")
    if not isinstance(expression, str):
        return _validation_error("'expression' must be a string")
    if _too_large(expression, data.get("preamble")):
        return _validation_error("source too large", 413)
    return _run(lambda: _session(data).eval(expression))


@app.post("/exec")
def exec_source():
    data, err = _request_body()
    if err: return err
    source = data.get("source")
    if not isinstance(source, str):
        return _validation_error("'source' must be a string")
    if _too_large(source, data.get("preamble")):
        return _validation_error("source too large", 413)
    return _run(lambda: _session(data).exec(source))


@app.post("/call")
def call_function():
    data, err = _request_body()
    if err: return err
    function = data.get("function")
    args = data.get("args", [])
    if not isinstance(function, str) or not function.strip():
        return _validation_error("'function' must be a non-empty string")
    if not isinstance(args, list):
        return _validation_error("'args' must be a list")
    if _too_large(function, json.dumps(args), data.get("preamble")):
        return _validation_error("source too large", 413)
    return _run(lambda: _session(data).call(function, *args))


@app.get("/healthz")
def health():
    try:
        version = check_available(scope=CancelScope(config.TIMEOUT_SECONDS))
    except RuntimeUnavailable as e:
        return jsonify(error={"type": e.kind, "message": e.detail}), 503
    return jsonify(status="ok", node=version), 200


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    app.run(host="0.0.0.0", port=config.PORT)
