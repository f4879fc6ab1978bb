from .errors import (
    AbnormalExit,
    ArgumentError,
    BridgeError,
    Cancelled,
    EvaluationError,
    LaunchFailure,
    ProtocolViolation,
    RuntimeUnavailable,
)
from .harness import build_program
from .result import Outcome, decode_output
from .runner import CancelScope, check_available, run_program
from .session import Session

__version__ = "0.1.0"
