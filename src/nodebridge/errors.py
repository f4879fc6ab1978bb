"""Error kinds raised by the bridge. Every failure is one of these."""
import json


class BridgeError(Exception):
    kind = "bridge_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class RuntimeUnavailable(BridgeError):
    kind = "unavailable"


class LaunchFailure(BridgeError):
    kind = "launch_failure"


class AbnormalExit(BridgeError):
    kind = "abnormal_exit"

    def __init__(self, returncode: int, output: str):
        super().__init__(f"node exited with status {returncode}: {output}")
        self.returncode = returncode
        self.output = output


class ProtocolViolation(BridgeError):
    kind = "protocol_violation"

    def __init__(self, detail: str, line: str | None = None):
        super().__init__(detail)
        self.line = line


class EvaluationError(BridgeError):
    kind = "evaluation_error"

    def __init__(self, value):
        self.value = value
        super().__init__(value if isinstance(value, str) else json.dumps(value, ensure_ascii=False))


class Cancelled(BridgeError):
    kind = "cancelled"


class ArgumentError(BridgeError):
    kind = "argument_error"
