"""Markdown report builder — renders a GenerationResult to a Markdown document."""

from __future__ import annotations

from datetime import datetime, timezone

from uigen.schemas.generation import GenerationResult


def render_generation_report(prompt: str, result: GenerationResult) -> str:
    """Render one generation run into a Markdown string."""
    sections: list[str] = []
    plan = result.plan

    sections.append("# UI Generation Report\n")
    sections.append(f"*Generated: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}*\n")

    sections.append("## Prompt\n")
    sections.append(f"> {prompt.strip()}\n")

    sections.append("## Plan\n")
    sections.append(f"- **Intent:** {plan.intent or 'N/A'}")
    sections.append(f"- **Layout:** {plan.layout_structure or 'N/A'}")
    sections.append(f"- **Planned components:** {', '.join(plan.components) or 'none'}")
    sections.append(f"- **Used components:** {', '.join(result.component_usage) or 'none'}")
    if result.usage.input_tokens or result.usage.output_tokens:
        sections.append(
            f"- **Tokens:** {result.usage.input_tokens:,} in / {result.usage.output_tokens:,} out"
        )
    sections.append("")

    if plan.reasoning:
        sections.append("### Reasoning\n")
        for reason in plan.reasoning:
            sections.append(f"- {reason}")
        sections.append("")

    sections.append("## Validation\n")
    if result.validation.valid:
        sections.append("✅ All component rules passed.\n")
    else:
        sections.append("❌ The code breaks the component rules:\n")
        for error in result.validation.errors:
            sections.append(f"- {error}")
        sections.append("")
    if result.validation.warnings:
        sections.append("**Warnings:**")
        for warning in result.validation.warnings:
            sections.append(f"- {warning}")
        sections.append("")

    if result.explanation:
        sections.append("## Explanation\n")
        sections.append(result.explanation.strip() + "\n")

    sections.append("## Code\n")
    sections.append("```jsx")
    sections.append(result.code.rstrip())
    sections.append("```\n")

    if result.steps:
        sections.append("## Agent Steps\n")
        sections.append("| # | Step | Input | Output |")
        sections.append("|---|------|-------|--------|")
        for i, step in enumerate(result.steps, 1):
            sections.append(
                f"| {i} | {step.step} | {_cell(step.input)} | {_cell(step.output)} |"
            )
        sections.append("")

    return "\n".join(sections)


def _cell(text: str, limit: int = 80) -> str:
    """Collapse text into a single table cell."""
    text = " ".join(text.split()).replace("|", "\\|")
    if len(text) > limit:
        text = text[:limit - 1] + "…"
    return text
