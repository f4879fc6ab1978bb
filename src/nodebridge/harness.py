"""Harness program construction for the node runtime.

The harness wraps caller source in a zero-argument function and drives it,
printing one blank line followed by a single tag line:

    ["ok"]              result was undefined or could not be serialized
    ["ok", <value>]     result serialized with JSON.stringify
    ["err", <message>]  the source threw
"""
import json

from .errors import ArgumentError

SOURCE_MARKER = "#{source}"

RUNNER_TEMPLATE = """\
(function(program, execJS) { execJS(program) })(function() { #{source}
}, function(program) {
  var print = function(string) {
    process.stdout.write('' + string + '\\n');
  };
  var tag;
  try {
    var result = program();
    if (typeof result == 'undefined') {
      tag = '["ok"]';
    } else {
      try {
        tag = JSON.stringify(['ok', result]);
      } catch (err) {
        tag = '["ok"]';
      }
    }
  } catch (err) {
    var message;
    try {
      message = String(err);
    } catch (e) {
      message = Object.prototype.toString.call(err);
    }
    tag = JSON.stringify(['err', message]);
  }
  print('');
  print(tag);
});
"""

# Split once, so marker text arriving inside user source is never rescanned.
_HEAD, _TAIL = RUNNER_TEMPLATE.split(SOURCE_MARKER)


def combine_source(source: str, preamble: str | None = None) -> str:
    if preamble:
        return preamble + "\n" + source
    return source


def build_program(source: str, preamble: str | None = None) -> str:
    return _HEAD + combine_source(source, preamble) + _TAIL


def wrap_expression(expression: str) -> str:
    # Parenthesised so object and function literals read as expressions; the
    # closing paren sits on its own line so a trailing // comment cannot eat it.
    if not expression.strip():
        return "return eval('')"
    return "return eval(%s)" % json.dumps("(" + expression + "\n)")


def encode_args(args) -> str:
    try:
        return json.dumps(list(args), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ArgumentError(f"arguments are not JSON-serializable: {e}") from e


def call_expression(function: str, args=()) -> str:
    return f"{function}.apply(this, {encode_args(args)})"
