import json, logging
from dataclasses import dataclass
from typing import Any

from .errors import EvaluationError, ProtocolViolation

logger = logging.getLogger(__name__)

OK = "ok"
ERR = "err"


@dataclass(frozen=True)
class Outcome:
    """Decoded tag line. ``value`` is None for undefined, null and unserializable results."""
    status: Any
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.status == OK

    def unwrap(self):
        if not self.ok:
            raise EvaluationError(self.value)
        return self.value


def tag_line(output: str) -> str:
    # Driver output ends "\n<tag>\n", so the tag is second to last after the split.
    lines = output.replace("\r", "").split("\n")
    if len(lines) < 2:
        raise ProtocolViolation(f"no tag line in output: {output!r}", line=None)
    return lines[-2]


def parse_tag(line: str) -> Outcome:
    try:
        res = json.loads(line)
    except ValueError as e:
        raise ProtocolViolation(f"invalid tag line {line!r}: {e}", line=line) from e
    if not isinstance(res, list):
        raise ProtocolViolation(f"tag line is not an array: {line}", line=line)

    if len(res) == 0:
        res = [ERR]
    if len(res) == 1:
        res = [res[0], None]
    return Outcome(status=res[0], value=res[1])


def decode_output(output: str) -> Outcome:
    line = tag_line(output)
    logger.debug("tag line: %.200s", line)
    return parse_tag(line)
