"""
Output formatters for CLI display.

Supports human-readable, JSON, and markdown output modes. Human and markdown
output write numbers the Dutch way (decimal comma).
"""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, Optional


class OutputFormat(str, Enum):
    HUMAN = "human"
    JSON = "json"
    MARKDOWN = "markdown"


def format_result(
    result: Any,
    fmt: OutputFormat = OutputFormat.HUMAN,
    title: Optional[str] = None,
) -> str:
    """Format a result object (record, dataclass or dict) for display."""
    if fmt == OutputFormat.JSON:
        return format_json(result)
    elif fmt == OutputFormat.MARKDOWN:
        return _format_markdown(result, title)
    else:
        return _format_human(result, title)


def to_plain(result: Any) -> Any:
    """Reduce a result to JSON-compatible dicts, lists and scalars."""
    if hasattr(result, "to_dict"):
        return to_plain(result.to_dict())
    if is_dataclass(result) and not isinstance(result, type):
        return to_plain(asdict(result))
    if isinstance(result, Enum):
        return result.value
    if isinstance(result, dict):
        return {str(k): to_plain(v) for k, v in result.items()}
    if isinstance(result, (list, tuple)):
        return [to_plain(v) for v in result]
    return result


def _to_dict(result: Any) -> Dict[str, Any]:
    data = to_plain(result)
    if isinstance(data, dict):
        return data
    return {"value": data}


def format_json(result: Any) -> str:
    return json.dumps(to_plain(result), indent=2, default=str, ensure_ascii=False)


def format_value(value: Any) -> str:
    """Scalar as display text: floats get at most 2 decimals and a decimal comma."""
    if isinstance(value, bool):
        return "ja" if value else "nee"
    if isinstance(value, float):
        rounded = round(value, 2)
        if rounded == int(rounded):
            return f"{int(rounded):,}".replace(",", ".")
        text = f"{rounded:,.2f}".rstrip("0")
        return text.replace(",", "_").replace(".", ",").replace("_", ".")
    if value is None:
        return "-"
    return str(value)


def _inline(value: Any) -> str:
    if isinstance(value, dict):
        return ", ".join(f"{k}={format_value(v)}" for k, v in value.items())
    return format_value(value)


def _format_human(result: Any, title: Optional[str] = None) -> str:
    lines = []
    if title:
        lines.extend([title, "=" * len(title), ""])

    data = _to_dict(result)
    max_key_len = max(len(str(k)) for k in data.keys()) if data else 0

    for key, value in data.items():
        label = key.replace("_", " ").title()
        if isinstance(value, list):
            formatted = "\n".join(f"  - {_inline(v)}" for v in value) if value else "(geen)"
            if value:
                formatted = "\n" + formatted
        elif isinstance(value, dict):
            formatted = "\n".join(f"  {k}: {_inline(v)}" for k, v in value.items()) if value else "(geen)"
            if value:
                formatted = "\n" + formatted
        else:
            formatted = format_value(value)
        lines.append(f"{label:<{max_key_len + 2}}: {formatted}")

    return "\n".join(lines)


def _format_markdown(result: Any, title: Optional[str] = None) -> str:
    lines = []
    if title:
        lines.extend([f"# {title}", ""])

    data = _to_dict(result)
    lines.extend(["| Parameter | Waarde |", "|-----------|--------|"])

    for key, value in data.items():
        label = key.replace("_", " ").title()
        if isinstance(value, list):
            formatted = "; ".join(_inline(v) for v in value) if value else "-"
        else:
            formatted = _inline(value)
        lines.append(f"| {label} | {formatted} |")

    return "\n".join(lines)
