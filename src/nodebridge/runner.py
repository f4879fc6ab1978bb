import logging, subprocess, threading, time

from . import config
from .errors import AbnormalExit, Cancelled, LaunchFailure, RuntimeUnavailable

logger = logging.getLogger(__name__)


class CancelScope:
    """Cooperative cancellation for one or more runs.

    ``cancel()`` may be called from any thread. A scope with a timeout
    expires that many seconds after it was created; without one it only
    ends when cancelled.
    """

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def reason(self) -> str:
        return "cancelled" if self.cancelled else f"time limit exceeded ({self.timeout}s)"


def _communicate(proc: subprocess.Popen, data: bytes | None, scope: CancelScope | None) -> bytes:
    try:
        return _poll(proc, data, scope)
    except BaseException:
        # The child must not outlive an interrupted wait.
        proc.kill()
        raise


def _poll(proc: subprocess.Popen, data: bytes | None, scope: CancelScope | None) -> bytes:
    # Retrying communicate() after TimeoutExpired resumes without losing input or output.
    while True:
        if scope is not None and scope.done:
            proc.kill()
            proc.communicate()
            logger.warning("node pid %s killed: %s", proc.pid, scope.reason())
            raise Cancelled(scope.reason())
        slice_ = None
        if scope is not None:
            slice_ = config.POLL_SECONDS
            remaining = scope.remaining()
            if remaining is not None:
                slice_ = min(slice_, remaining)
        try:
            out, _ = proc.communicate(data, timeout=slice_)
            return out or b""
        except subprocess.TimeoutExpired:
            # Input is already queued; passing it again raises ValueError.
            data = None


def _spawn(cmd: list[str], cwd=None) -> subprocess.Popen:
    try:
        return subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=cwd,
        )
    except OSError as e:
        raise LaunchFailure(f"could not start {cmd[0]}: {e}") from e


def check_available(node_bin: str | None = None, scope: CancelScope | None = None) -> str:
    """Run ``node -v``; return the version or raise RuntimeUnavailable."""
    node_bin = config.resolve_node_bin(node_bin)
    try:
        with _spawn([node_bin, "-v"]) as proc:
            out = _communicate(proc, None, scope)
    except (LaunchFailure, Cancelled) as e:
        raise RuntimeUnavailable(f"node runtime not available: {e.detail}") from e
    text = out.decode("utf-8", errors="replace").strip()
    if proc.returncode != 0:
        raise RuntimeUnavailable(f"{node_bin} -v exited with status {proc.returncode}: {text}")
    logger.debug("node runtime %s at %s", text, node_bin)
    return text


def run_program(program: str, node_bin: str | None = None, cwd=None, scope: CancelScope | None = None) -> str:
    """Feed ``program`` to node on stdin; return combined stdout/stderr text.

    Raises LaunchFailure, Cancelled, or AbnormalExit on a non-zero status.
    """
    node_bin = config.resolve_node_bin(node_bin)
    data = program.encode("utf-8")
    logger.debug("running %d byte program with %s (cwd=%s)", len(data), node_bin, cwd)

    with _spawn([node_bin], cwd=cwd) as proc:
        out = _communicate(proc, data, scope)
    output = out.decode("utf-8", errors="replace")

    if proc.returncode != 0:
        logger.warning("node exited with status %s", proc.returncode)
        raise AbnormalExit(proc.returncode, output)
    logger.debug("node exited cleanly, %d bytes of output", len(out))
    return output
