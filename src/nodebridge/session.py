"""Sessions: a preamble plus per-call configuration for running node code.

    >>> s = Session.create("id = function(v) { return v; }")
    >>> s.call("id", "bar")
    'bar'
    >>> s.eval("[1, 2].map(id)")
    [1, 2]

Each call spawns a fresh ``node`` process; nothing is shared between calls
except the preamble text.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any

from .harness import build_program, call_expression, wrap_expression
from .result import decode_output
from .runner import CancelScope, check_available, run_program

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    preamble: str | None = None
    cwd: str | None = None
    scope: CancelScope | None = None
    node_bin: str | None = None

    @classmethod
    def create(cls, preamble: str | None = None, *, cwd=None, scope: CancelScope | None = None,
               node_bin: str | None = None) -> "Session":
        """Probe the runtime first; raises RuntimeUnavailable instead of returning."""
        check_available(node_bin, scope)
        return cls(preamble=preamble, cwd=cwd, scope=scope, node_bin=node_bin)

    def with_cwd(self, cwd) -> "Session":
        return replace(self, cwd=cwd)

    def with_scope(self, scope: CancelScope | None) -> "Session":
        return replace(self, scope=scope)

    def program(self, source: str) -> str:
        return build_program(source, self.preamble)

    def exec(self, source: str, *, cwd=None, scope: CancelScope | None = None) -> Any:
        """Run ``source`` as a function body; its ``return`` value is the result."""
        output = run_program(
            self.program(source),
            node_bin=self.node_bin,
            cwd=cwd if cwd is not None else self.cwd,
            scope=scope if scope is not None else self.scope,
        )
        return decode_output(output).unwrap()

    def eval(self, expression: str, *, cwd=None, scope: CancelScope | None = None) -> Any:
        return self.exec(wrap_expression(expression), cwd=cwd, scope=scope)

    def call(self, function: str, *args, cwd=None, scope: CancelScope | None = None) -> Any:
        """Apply the dotted reference ``function`` to JSON-encoded ``args``."""
        expression = call_expression(function, args)
        logger.debug("call %s with %d args", function, len(args))
        return self.eval(expression, cwd=cwd, scope=scope)
