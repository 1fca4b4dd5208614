"""Static component-usage validator for generated React code.

Pattern-based, not a JSX parser: it scans opening tags, their attributes and
a handful of styling patterns, and reports anything outside the component
library or the allowed Tailwind usage.
"""

from __future__ import annotations

import re

from uigen.library.components import COMPONENT_LIBRARY
from uigen.schemas.generation import ValidationResult

ALLOWED_FRAGMENTS = {"Fragment", "React.Fragment"}
ALWAYS_ALLOWED_PROPS = {"key"}
ROOT_COMPONENT = "GeneratedUI"

# Opening tag name. The lookbehind skips generics such as useState<User>(...).
_TAG_RE = re.compile(r"(?<![\w.])<([A-Za-z_][\w.]*)(?=[\s/>])")

_DYNAMIC_TEMPLATE_RE = re.compile(r"`[^`]*\$\{")
_STRING_LITERAL_RE = re.compile(r"""'([^']*)'|"([^"]*)"|`([^`]*)`""")
_TEMPLATE_SUB_RE = re.compile(r"\$\{[^}]*\}")
_ARBITRARY_VALUE_RE = re.compile(r"\[[^\]]*\]")
_STYLE_TAG_RE = re.compile(r"<style[\s>]")
_CSS_IMPORT_RE = re.compile(r"""\bimport\s+(?:[^'";]+\s+from\s+)?['"][^'"]+\.css['"]""")
_COMPONENT_DEF_RE = re.compile(
    r"\bfunction\s+([A-Z]\w*)\s*\("
    r"|\b(?:const|let|var)\s+([A-Z]\w*)\s*=\s*(?:async\s+)?(?:\([^)]*\)|[A-Za-z_]\w*)\s*=>"
    r"|\b(?:const|let|var)\s+([A-Z]\w*)\s*=\s*(?:React\.)?(?:memo|forwardRef)\s*\("
    r"|\bclass\s+([A-Z]\w*)\s+extends\b"
)
_EXPORT_DEFAULT_RE = re.compile(r"export\s+default\s+function")
_ATTR_NAME_RE = re.compile(r"[A-Za-z_][\w:-]*")


def _scan_tag_body(code: str, start: int) -> str:
    """Return the attribute text of an opening tag that begins at ``start``.

    Stops at the first ``>`` outside braces and quotes, so expressions like
    ``onClick={() => a > b}`` stay inside the tag.
    """
    depth = 0
    quote: str | None = None
    i = start
    while i < len(code):
        ch = code[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'`":
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(0, depth - 1)
        elif ch == ">" and depth == 0:
            return code[start:i]
        i += 1
    return code[start:]


def _read_braced(body: str, start: int) -> tuple[str, int]:
    """Read a ``{...}`` expression starting at ``body[start] == "{"``."""
    depth = 0
    quote: str | None = None
    i = start
    while i < len(body):
        ch = body[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'`":
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return body[start + 1:i], i + 1
        i += 1
    return body[start + 1:], len(body)


def _literal(expr: str) -> str | None:
    """Return the string value of a quoted literal expression, else None."""
    expr = expr.strip()
    if len(expr) >= 2 and expr[0] == expr[-1] and expr[0] in "\"'`" and "${" not in expr:
        return expr[1:-1]
    return None


def _scan_attributes(body: str) -> list[tuple[str, str | None, str | None]]:
    """Split attribute text into ``(name, quoted_value, braced_expression)``."""
    attrs: list[tuple[str, str | None, str | None]] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch.isspace() or ch == "/":
            i += 1
            continue
        if ch == "{":
            expr, i = _read_braced(body, i)
            if expr.strip().startswith("..."):
                attrs.append(("...", None, expr))
            continue
        m = _ATTR_NAME_RE.match(body, i)
        if not m:
            i += 1
            continue
        name = m.group(0)
        i = m.end()
        while i < len(body) and body[i].isspace():
            i += 1
        value: str | None = None
        expr: str | None = None
        if i < len(body) and body[i] == "=":
            i += 1
            while i < len(body) and body[i].isspace():
                i += 1
            if i < len(body) and body[i] in "\"'":
                quote = body[i]
                end = body.find(quote, i + 1)
                end = len(body) if end == -1 else end
                value = body[i + 1:end]
                i = end + 1
            elif i < len(body) and body[i] == "{":
                expr, i = _read_braced(body, i)
        attrs.append((name, value, expr))
    return attrs


def parse_attributes(body: str) -> list[tuple[str, str | None]]:
    """Split an opening tag's attribute text into ``(name, literal_value)`` pairs.

    ``literal_value`` is the string for ``name="x"`` / ``name={'x'}`` and None
    for expressions or boolean attributes. Spread attributes are reported
    with the name ``"..."``.
    """
    return [
        (name, value if value is not None or expr is None else _literal(expr))
        for name, value, expr in _scan_attributes(body)
    ]


def _class_strings(value: str | None, expr: str | None) -> list[str]:
    """Every string literal a className attribute can evaluate to."""
    if value is not None:
        return [value]
    if expr is None:
        return []
    return [
        _TEMPLATE_SUB_RE.sub(" ", next(g for g in m.groups() if g is not None))
        for m in _STRING_LITERAL_RE.finditer(expr)
    ]


def iter_tags(code: str):
    """Yield ``(name, attribute_text)`` for every JSX opening tag in ``code``."""
    for match in _TAG_RE.finditer(code):
        yield match.group(1), _scan_tag_body(code, match.end())


def _is_component_name(name: str) -> bool:
    return name[0].isupper()


def has_default_export(code: str) -> bool:
    return bool(_EXPORT_DEFAULT_RE.search(code))


def extract_component_usage(code: str) -> list[str]:
    """Return the library components used in ``code``, in first-use order."""
    used: list[str] = []
    for match in _TAG_RE.finditer(code):
        name = match.group(1)
        if name in COMPONENT_LIBRARY and name not in used:
            used.append(name)
    return used


def validate_component_usage(code: str) -> ValidationResult:
    """Check that ``code`` only uses library components, props and core Tailwind."""
    errors: list[str] = []
    warnings: list[str] = []

    def add(collection: list[str], message: str) -> None:
        if message not in collection:
            collection.append(message)

    tags = list(iter_tags(code))
    styled = False
    dynamic = False
    arbitrary: list[str] = []
    for _, body in tags:
        for attr, value, expr in _scan_attributes(body):
            if attr == "style":
                styled = True
            elif attr == "className":
                if expr is not None and _DYNAMIC_TEMPLATE_RE.search(expr):
                    dynamic = True
                for classes in _class_strings(value, expr):
                    arbitrary.extend(c for c in classes.split() if _ARBITRARY_VALUE_RE.search(c))

    if styled:
        add(errors, "Inline styles are not allowed")
    if dynamic:
        add(errors, "Dynamic Tailwind class generation is not allowed")
    for cls in arbitrary:
        add(errors, f"Arbitrary Tailwind value not allowed: {cls}")

    if _STYLE_TAG_RE.search(code) or _CSS_IMPORT_RE.search(code):
        add(errors, "Custom CSS is not allowed")

    for name, body in tags:
        if name in ALLOWED_FRAGMENTS or not _is_component_name(name):
            continue
        definition = COMPONENT_LIBRARY.get(name)
        if definition is None:
            add(errors, f"Unauthorized component: {name}")
            continue
        for prop, value in parse_attributes(body):
            if prop == "...":
                add(warnings, f"Spread props on {name} cannot be checked")
                continue
            if prop in ALWAYS_ALLOWED_PROPS:
                continue
            if prop not in definition.allowed_props:
                add(errors, f"Unauthorized prop '{prop}' on {name}")
                continue
            allowed_values = definition.props.get(prop)
            if allowed_values and value is not None and value not in allowed_values:
                add(errors, f"Invalid value '{value}' for {name}.{prop}")

    for match in _COMPONENT_DEF_RE.finditer(code):
        name = next(g for g in match.groups() if g is not None)
        if name != ROOT_COMPONENT:
            add(errors, f"New component definitions are not allowed: {name}")

    if not has_default_export(code):
        add(warnings, "No 'export default function' found")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
