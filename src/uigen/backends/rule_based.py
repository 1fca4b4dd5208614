"""Rule-based generator — keyword matching instead of an LLM.

Deterministic and offline. The intent is matched against keyword tables to
pick page sections; each section is rendered from a fixed JSX template that
only uses library components, so the output always passes the validator.
With existing code, the sections already present are kept and the new ones
are merged in.
"""

from __future__ import annotations

import logging
import re

from uigen.library.validator import extract_component_usage, validate_component_usage
from uigen.schemas.generation import AgentStep, GenerationPlan, GenerationResult

logger = logging.getLogger(__name__)

# Section order on the page
SECTION_ORDER = ["navbar", "sidebar", "stats", "chart", "table", "form", "modal", "actions"]

SECTION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "navbar": ("navbar", "nav bar", "navigation", "header", "top bar", "menu bar", "landing", "dashboard"),
    "sidebar": ("sidebar", "side bar", "side menu", "admin", "side navigation"),
    "stats": ("stat", "metric", "kpi", "overview", "summary", "cards", "card", "dashboard"),
    "chart": ("chart", "graph", "analytics", "trend", "plot", "visuali", "dashboard"),
    "table": ("table", "list of", "records", "rows", "pagination", "data grid"),
    "form": ("form", "login", "log in", "sign in", "signup", "sign up", "register", "contact", "profile", "input", "settings"),
    "modal": ("modal", "dialog", "popup", "pop-up", "confirm"),
    "actions": ("button", "call to action", "cta", "action"),
}

# Component that marks each section as present in existing code
SECTION_COMPONENT = {
    "navbar": "Navbar",
    "sidebar": "Sidebar",
    "chart": "Chart",
    "table": "Table",
    "form": "Input",
    "modal": "Modal",
}

_REMOVE_RE = re.compile(
    r"\b(?:remove|delete|drop|hide|without|no)\s+(?:the\s+|a\s+|any\s+)?([a-z]+(?:\s+[a-z]+)?)"
)

FORM_FIELDS: dict[str, tuple[str, list[tuple[str, str, str, str]], str]] = {
    # kind: (card title, [(key, type, label, placeholder)], submit label)
    "login": ("Sign in", [
        ("email", "email", "Email", "you@example.com"),
        ("password", "password", "Password", "Enter your password"),
    ], "Sign in"),
    "signup": ("Create an account", [
        ("name", "text", "Full name", "Jane Doe"),
        ("email", "email", "Email", "you@example.com"),
        ("password", "password", "Password", "Choose a password"),
    ], "Create account"),
    "contact": ("Contact us", [
        ("name", "text", "Name", "Your name"),
        ("email", "email", "Email", "you@example.com"),
        ("message", "text", "Message", "How can we help?"),
    ], "Send message"),
    "profile": ("Profile", [
        ("name", "text", "Name", "Jane Doe"),
        ("email", "email", "Email", "you@example.com"),
        ("age", "number", "Age", "30"),
    ], "Save changes"),
    "generic": ("Details", [
        ("name", "text", "Name", "Your name"),
        ("email", "email", "Email", "you@example.com"),
    ], "Submit"),
}

_FORM_KIND_KEYWORDS = [
    ("login", ("login", "log in", "sign in", "signin")),
    ("signup", ("signup", "sign up", "register", "registration")),
    ("contact", ("contact", "feedback", "message")),
    ("profile", ("profile", "account", "settings")),
]

_CHART_TYPES = ("pie", "bar", "area", "line")


def _has_any(text: str, words: tuple[str, ...]) -> bool:
    # Prefix match at a word boundary: "stat" matches "stats", not "transaction".
    return any(re.search(rf"\b{re.escape(w)}", text) for w in words)


def _detect_sections(text: str) -> list[str]:
    return [s for s in SECTION_ORDER if _has_any(text, SECTION_KEYWORDS[s])]


def _detect_removals(text: str) -> set[str]:
    removed: set[str] = set()
    for match in _REMOVE_RE.finditer(text):
        target = match.group(1)
        for section, words in SECTION_KEYWORDS.items():
            if _has_any(target, words):
                removed.add(section)
    return removed


def _detect_chart_type(text: str, default: str = "line") -> str:
    for chart_type in _CHART_TYPES:
        if re.search(rf"\b{chart_type}[\s-]+(?:chart|graph|plot)", text):
            return chart_type
    # "bar" and "line" alone are too ambiguous ("nav bar", "timeline")
    for chart_type in ("pie", "area"):
        if re.search(rf"\b{chart_type}\b", text):
            return chart_type
    return default


def _detect_form_kind(text: str) -> str:
    for kind, words in _FORM_KIND_KEYWORDS:
        if _has_any(text, words):
            return kind
    return "generic"


def _existing_sections(code: str) -> tuple[list[str], dict[str, str]]:
    """Sections (and options) already present in previously generated code."""
    used = extract_component_usage(code)
    sections = [s for s, comp in SECTION_COMPONENT.items() if comp in used]
    if "Card" in used and "grid-cols" in code:
        sections.append("stats")
    if "Button" in used and "actions" not in sections and 'data-section="actions"' in code:
        sections.append("actions")
    options: dict[str, str] = {}
    if m := re.search(r'<Chart\s+type="(\w+)"', code):
        options["chart_type"] = m.group(1)
    if m := re.search(r"<Card title=\"([^\"]+)\" variant=\"outlined\"", code):
        for kind, (title, _, _) in FORM_FIELDS.items():
            if title == m.group(1):
                options["form_kind"] = kind
    if '<Navbar logo="App" items={navItems} variant="dark"' in code:
        options["navbar_variant"] = "dark"
    return sections, options


def _indent(block: str, spaces: int) -> str:
    pad = " " * spaces
    return "\n".join(pad + line if line else line for line in block.splitlines())


class RuleBasedGenerator:
    """Builds ``GeneratedUI`` from keyword-selected section templates."""

    def generate(self, prompt: str, current_code: str | None = None) -> GenerationResult:
        text = prompt.lower()
        requested = _detect_sections(text)
        removed = _detect_removals(text)

        options: dict[str, str] = {}
        sections: list[str] = []
        if current_code:
            sections, options = _existing_sections(current_code)
        for section in requested:
            if section not in sections:
                sections.append(section)
        sections = [s for s in SECTION_ORDER if s in sections and s not in removed]
        if not sections:
            sections = ["actions"]

        if "chart" in requested:
            options["chart_type"] = _detect_chart_type(text, options.get("chart_type", "line"))
        options.setdefault("chart_type", "line")
        if "form" in requested:
            options["form_kind"] = _detect_form_kind(text)
        options.setdefault("form_kind", "generic")
        if "dark" in text:
            options["navbar_variant"] = "dark"
        elif "light" in text:
            options["navbar_variant"] = "light"
        options.setdefault("navbar_variant", "light")
        striped = "striped" in text

        code = self._render(sections, options, striped=striped)
        plan = self._plan(prompt, sections, options, modified=bool(current_code))
        explanation = self._explain(sections, options, modified=bool(current_code))
        validation = validate_component_usage(code)
        if not validation.valid:
            # Templates only use library components; reaching this is a template bug.
            logger.error("Rule-based template produced invalid code: %s", validation.errors)

        logger.info("Rule-based generation: sections=%s options=%s", sections, options)
        return GenerationResult(
            plan=plan,
            code=code,
            explanation=explanation,
            component_usage=extract_component_usage(code),
            validation=validation,
            steps=[AgentStep(step="planner", input=prompt, output=", ".join(sections))],
        )

    # ------------------------------------------------------------------
    # Plan and explanation
    # ------------------------------------------------------------------

    def _plan(self, prompt: str, sections: list[str], options: dict[str, str], *, modified: bool) -> GenerationPlan:
        components: list[str] = []
        reasoning: list[str] = []
        for section in sections:
            for comp in _SECTION_COMPONENTS[section]:
                if comp not in components:
                    components.append(comp)
            reasoning.append(_SECTION_REASONS[section].format(**options))
        if "sidebar" in sections:
            layout = "Sidebar on the left with the main content in a scrollable column on the right"
        else:
            layout = "Single column with sections stacked vertically"
        if "navbar" in sections:
            layout = "Navbar across the top; " + layout[0].lower() + layout[1:]
        return GenerationPlan(
            intent=prompt.strip()[:200],
            layout_structure=layout,
            components=components,
            reasoning=reasoning + (["Existing sections were kept and the request merged in"] if modified else []),
        )

    def _explain(self, sections: list[str], options: dict[str, str], *, modified: bool) -> str:
        names = [_SECTION_LABELS[s].format(**options) for s in sections]
        listed = names[0] if len(names) == 1 else ", ".join(names[:-1]) + " and " + names[-1]
        opening = "I updated the existing layout, which now has " if modified else "The layout combines "
        text = f"{opening}{listed}, built only from the fixed component library."
        if "sidebar" in sections:
            text += " The Sidebar keeps navigation visible while the main column holds the content."
        elif "navbar" in sections:
            text += " The Navbar anchors the page so the sections below read top to bottom."
        text += " Spacing and grids use core Tailwind utilities, so the result stays consistent with the rest of the library."
        return text

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(self, sections: list[str], options: dict[str, str], *, striped: bool) -> str:
        setup: list[str] = []
        body: list[str] = []
        for section in sections:
            if section in ("navbar", "sidebar"):
                continue
            render = getattr(self, f"_section_{section}")
            section_setup, section_body = render(options, striped=striped)
            setup.extend(section_setup)
            body.append(section_body)

        main = "\n".join(body) if body else ""
        if "sidebar" in sections:
            setup.insert(0, SIDEBAR_SETUP)
            inner = (
                '<div className="flex">\n'
                '  <Sidebar items={sidebarItems} active={activeItem} onItemClick={setActiveItem} />\n'
                '  <main className="flex-1 p-6 space-y-6">\n'
                f"{_indent(main, 4)}\n"
                "  </main>\n"
                "</div>"
            )
        else:
            inner = (
                '<main className="max-w-6xl mx-auto p-6 space-y-6">\n'
                f"{_indent(main, 2)}\n"
                "</main>"
            )
        if "navbar" in sections:
            setup.insert(0, NAVBAR_SETUP)
            variant = options["navbar_variant"]
            inner = f'<Navbar logo="App" items={{navItems}} variant="{variant}" />\n' + inner

        setup_text = "\n\n".join(_indent(block, 2) for block in setup)
        return (
            "export default function GeneratedUI() {\n"
            + (setup_text + "\n\n" if setup_text else "")
            + "  return (\n"
            + '    <div className="min-h-screen bg-gray-50">\n'
            + _indent(inner, 6) + "\n"
            + "    </div>\n"
            + "  );\n"
            + "}\n"
        )

    def _section_stats(self, options: dict[str, str], *, striped: bool) -> tuple[list[str], str]:
        return [STATS_SETUP], STATS_BODY

    def _section_chart(self, options: dict[str, str], *, striped: bool) -> tuple[list[str], str]:
        chart_type = options["chart_type"]
        title = "Breakdown" if chart_type == "pie" else "Monthly trend"
        body = (
            f'<Card title="{title}">\n'
            f'  <Chart type="{chart_type}" data={{chartData}} xAxis="name" yAxis="value" />\n'
            "</Card>"
        )
        return [CHART_SETUP], body

    def _section_table(self, options: dict[str, str], *, striped: bool) -> tuple[list[str], str]:
        flags = " striped" if striped else ""
        body = (
            '<Card title="Records">\n'
            f"  <Table columns={{columns}} data={{rows}}{flags} />\n"
            "</Card>"
        )
        return [TABLE_SETUP], body

    def _section_form(self, options: dict[str, str], *, striped: bool) -> tuple[list[str], str]:
        title, fields, submit = FORM_FIELDS[options["form_kind"]]
        initial = ", ".join(f"{key}: ''" for key, _, _, _ in fields)
        setup = f"const [form, setForm] = useState({{ {initial} }});"
        inputs = "\n".join(
            f'  <Input type="{ftype}" label="{label}" placeholder="{placeholder}" '
            f"value={{form.{key}}} onChange={{(e) => setForm({{ ...form, {key}: e.target.value }})}} />"
            for key, ftype, label, placeholder in fields
        )
        body = (
            f'<Card title="{title}" variant="outlined">\n'
            '  <div className="space-y-4">\n'
            f"{_indent(inputs, 2)}\n"
            f'    <Button variant="primary" size="md">{submit}</Button>\n'
            "  </div>\n"
            "</Card>"
        )
        return [setup], body

    def _section_modal(self, options: dict[str, str], *, striped: bool) -> tuple[list[str], str]:
        return [MODAL_SETUP], MODAL_BODY

    def _section_actions(self, options: dict[str, str], *, striped: bool) -> tuple[list[str], str]:
        return [], ACTIONS_BODY


_SECTION_COMPONENTS = {
    "navbar": ["Navbar"],
    "sidebar": ["Sidebar"],
    "stats": ["Card"],
    "chart": ["Card", "Chart"],
    "table": ["Card", "Table"],
    "form": ["Card", "Input", "Button"],
    "modal": ["Button", "Modal"],
    "actions": ["Card", "Button"],
}

_SECTION_REASONS = {
    "navbar": "A Navbar ({navbar_variant}) provides top-level navigation",
    "sidebar": "A Sidebar groups secondary navigation on the left",
    "stats": "Cards in a responsive grid surface the key metrics",
    "chart": "A {chart_type} Chart visualises the data",
    "table": "A Table lists the records with clear columns",
    "form": "Inputs inside an outlined Card collect the {form_kind} details",
    "modal": "A Modal confirms the action without leaving the page",
    "actions": "Buttons expose the primary and secondary actions",
}

_SECTION_LABELS = {
    "navbar": "a top Navbar",
    "sidebar": "a navigation Sidebar",
    "stats": "metric Cards",
    "chart": "a {chart_type} Chart",
    "table": "a data Table",
    "form": "a {form_kind} form",
    "modal": "a confirmation Modal",
    "actions": "action Buttons",
}

NAVBAR_SETUP = """\
const navItems = [
  { id: 'home', label: 'Home' },
  { id: 'reports', label: 'Reports' },
  { id: 'settings', label: 'Settings' },
];"""

SIDEBAR_SETUP = """\
const sidebarItems = [
  { id: 'overview', label: 'Overview' },
  { id: 'analytics', label: 'Analytics' },
  { id: 'customers', label: 'Customers' },
  { id: 'settings', label: 'Settings' },
];
const [activeItem, setActiveItem] = useState('overview');"""

STATS_SETUP = """\
const stats = [
  { label: 'Total users', value: '12,480' },
  { label: 'Revenue', value: '$48,200' },
  { label: 'Conversion', value: '3.2%' },
];"""

STATS_BODY = """\
<div className="grid grid-cols-1 md:grid-cols-3 gap-4">
  {stats.map((stat) => (
    <Card key={stat.label} variant="elevated">
      <p className="text-sm text-gray-500">{stat.label}</p>
      <p className="text-2xl font-bold text-gray-900">{stat.value}</p>
    </Card>
  ))}
</div>"""

CHART_SETUP = """\
const chartData = [
  { name: 'Jan', value: 400 },
  { name: 'Feb', value: 300 },
  { name: 'Mar', value: 520 },
  { name: 'Apr', value: 480 },
  { name: 'May', value: 610 },
];"""

TABLE_SETUP = """\
const columns = [
  { key: 'name', header: 'Name' },
  { key: 'email', header: 'Email' },
  { key: 'status', header: 'Status' },
];
const rows = [
  { name: 'Ada Lovelace', email: 'ada@example.com', status: 'Active' },
  { name: 'Alan Turing', email: 'alan@example.com', status: 'Invited' },
  { name: 'Grace Hopper', email: 'grace@example.com', status: 'Active' },
];"""

MODAL_SETUP = "const [isOpen, setIsOpen] = useState(false);"

MODAL_BODY = """\
<div>
  <Button variant="secondary" onClick={() => setIsOpen(true)}>Open dialog</Button>
  <Modal isOpen={isOpen} onClose={() => setIsOpen(false)} title="Are you sure?" footer={<Button variant="primary" onClick={() => setIsOpen(false)}>Confirm</Button>}>
    <p className="text-gray-700">This action can be undone from the history panel.</p>
  </Modal>
</div>"""

ACTIONS_BODY = """\
<Card title="Get started">
  <div className="flex gap-3" data-section="actions">
    <Button variant="primary" size="md">Continue</Button>
    <Button variant="outline" size="md">Learn more</Button>
  </div>
</Card>"""
