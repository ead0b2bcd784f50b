"""
Custom validator registry.

Catalog files reference validators by name (``validator: uses_arrow_function``);
the loader resolves the name to a callable through this registry. Validators
receive the learner's source text unmodified.
"""

import re
from typing import Callable

from pagelab.schemas import ValidatorFn, ValidatorResult


_REGISTRY: dict[str, ValidatorFn] = {}


def register(name: str) -> Callable[[ValidatorFn], ValidatorFn]:
    """Register a validator function under ``name``."""
    def decorator(func: ValidatorFn) -> ValidatorFn:
        if name in _REGISTRY:
            raise ValueError(f"Validator already registered: {name}")
        _REGISTRY[name] = func
        return func
    return decorator


def get_validator(name: str) -> ValidatorFn:
    """Look up a registered validator. Raises KeyError for unknown names."""
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown validator: {name}") from None


def available_validators() -> list[str]:
    return sorted(_REGISTRY)


def _strip_comments(source: str) -> str:
    source = re.sub(r"/\*.*?\*/", "", source, flags=re.DOTALL)
    return re.sub(r"//[^\n]*", "", source)


# -----------------------------------------------------------------------------
# Built-in validators
# -----------------------------------------------------------------------------

@register("uses_arrow_function")
def uses_arrow_function(source: str) -> ValidatorResult:
    if "=>" not in _strip_comments(source):
        return ValidatorResult(False, "Write the function as an arrow function (=>).")
    return ValidatorResult(True)


@register("uses_template_literal")
def uses_template_literal(source: str) -> ValidatorResult:
    code = _strip_comments(source)
    if not re.search(r"`[^`]*\$\{[^}]+\}[^`]*`", code):
        return ValidatorResult(False, "Use a template literal with ${...} to build the text.")
    return ValidatorResult(True)


@register("no_var_declarations")
def no_var_declarations(source: str) -> ValidatorResult:
    if re.search(r"\bvar\s+[A-Za-z_$]", _strip_comments(source)):
        return ValidatorResult(False, "Use let or const instead of var.")
    return ValidatorResult(True)


@register("strict_equality")
def strict_equality(source: str) -> ValidatorResult:
    code = _strip_comments(source)
    # == or != that is not part of === / !==
    if re.search(r"(?<![=!<>])[=!]=(?!=)", code):
        return ValidatorResult(False, "Compare with === or !== instead of == or !=.")
    if "===" not in code and "!==" not in code:
        return ValidatorResult(False, "Use a strict comparison (=== or !==).")
    return ValidatorResult(True)


@register("uses_add_event_listener")
def uses_add_event_listener(source: str) -> ValidatorResult:
    code = _strip_comments(source)
    if ".addEventListener(" not in code:
        return ValidatorResult(False, "Attach the handler with addEventListener.")
    if re.search(r"\.on[a-z]+\s*=", code):
        return ValidatorResult(False, "Avoid on... properties; use addEventListener only.")
    return ValidatorResult(True)


@register("uses_flexbox_centering")
def uses_flexbox_centering(source: str) -> ValidatorResult:
    css = re.sub(r"\s+", " ", source.lower())
    if not re.search(r"display\s*:\s*flex", css):
        return ValidatorResult(False, "The container needs display: flex.")
    if not re.search(r"justify-content\s*:\s*center", css):
        return ValidatorResult(False, "Center horizontally with justify-content: center.")
    if not re.search(r"align-items\s*:\s*center", css):
        return ValidatorResult(False, "Center vertically with align-items: center.")
    return ValidatorResult(True)


@register("balanced_list_items")
def balanced_list_items(source: str) -> ValidatorResult:
    markup = source.lower()
    opened = len(re.findall(r"<li[\s>]", markup))
    closed = markup.count("</li>")
    if opened < 3:
        return ValidatorResult(False, "The list needs at least three <li> items.")
    if opened != closed:
        return ValidatorResult(False, "Every <li> needs a matching </li>.")
    return ValidatorResult(True)
