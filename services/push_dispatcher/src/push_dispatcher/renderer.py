"""Rendering of default notification bodies from Jinja2 templates."""

import functools

from jinja2 import StrictUndefined, Template
from jinja2.sandbox import SandboxedEnvironment

# Push text is plain, so no HTML autoescaping.
_env = SandboxedEnvironment(autoescape=False, undefined=StrictUndefined)


@functools.lru_cache(maxsize=16)
def _compile(template: str) -> Template:
    return _env.from_string(template)


def render_body(template: str, responder_name: str) -> str:
    """Render a notification body for a blood request response.

    The template sees a single variable, ``responder_name``. Any other
    variable raises ``jinja2.UndefinedError``, and the sandbox rejects
    access to Python internals.
    """
    return _compile(template).render(responder_name=responder_name)
