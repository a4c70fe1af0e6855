"""
CSS styles for HTML dashboards.

Both themes share one stylesheet; a theme only supplies the custom
properties the stylesheet reads.
"""

from __future__ import annotations

LIGHT_PALETTE: dict[str, str] = {
    "page": "#f7f7f9",
    "card": "#ffffff",
    "ink": "#222831",
    "ink-soft": "#5f6b7a",
    "rule": "#dde1e6",
    "banner": "#2b3a4a",
    "accent": "#1f77b4",
    "accent-soft": "#aec7e8",
    "muted": "#c4c4c4",
    "stripe": "#f2f4f7",
}

DARK_PALETTE: dict[str, str] = {
    "page": "#121418",
    "card": "#1c1f26",
    "ink": "#e4e6eb",
    "ink-soft": "#9aa4b2",
    "rule": "#363b45",
    "banner": "#0b0d10",
    "accent": "#7fb8e6",
    "accent-soft": "#36597a",
    "muted": "#4b5260",
    "stripe": "#232730",
}


def _palette_block(palette: dict[str, str]) -> str:
    entries = "\n".join(f"  --{name}: {value};" for name, value in palette.items())
    return f":root {{\n{entries}\n}}\n"


LIGHT_THEME: str = _palette_block(LIGHT_PALETTE)
DARK_THEME: str = _palette_block(DARK_PALETTE)

# One rule per line; selectors match the classes emitted by templates.py
DASHBOARD_CSS: str = """
html, body { margin: 0; padding: 0; }
body { background: var(--page); color: var(--ink); font: 13px/1.45 "Helvetica Neue", Helvetica, Arial, sans-serif; }
a { color: var(--accent); }

.report-header { background: var(--banner); color: #fafafa; padding: 18px 28px 12px; }
.report-header h1 { margin: 0 0 6px; font-size: 20px; font-weight: normal; letter-spacing: 0.02em; }
.report-header .metadata { display: flex; flex-wrap: wrap; gap: 4px 18px; font-size: 12px; opacity: 0.75; }
.description { max-width: 960px; margin: 14px auto 0; padding: 0 28px; color: var(--ink-soft); }

.tab-navigation { display: flex; gap: 2px; padding: 0 28px; border-bottom: 1px solid var(--rule); background: var(--card); }
.tab-btn { border: 0; border-bottom: 3px solid transparent; background: none; color: var(--ink-soft); padding: 10px 14px; font: inherit; cursor: pointer; }
.tab-btn:hover { color: var(--ink); }
.tab-btn.active { color: var(--accent); border-bottom-color: var(--accent); }

.report-content { padding: 20px 28px 32px; }
.tab-section { display: none; }
.tab-section.active { display: block; }
.section-title { margin: 0 0 14px; font-size: 15px; font-weight: 600; }

.plot-container { display: grid; grid-template-columns: minmax(0, 3fr) minmax(180px, 1fr); gap: 12px; margin-bottom: 24px; padding: 14px; background: var(--card); border: 1px solid var(--rule); border-radius: 3px; }
.plot-title { grid-column: 1 / -1; margin: 0; font-size: 14px; font-weight: 600; }
.plot { min-height: 420px; }
.detail p { margin: 0 0 4px; color: var(--ink-soft); }

.legend ul { list-style: none; margin: 8px 0 0; padding: 0; display: flex; flex-wrap: wrap; gap: 2px 10px; }
.legendItem { display: inline-flex; align-items: center; gap: 6px; cursor: pointer; user-select: none; }
.legendItem.full-width { flex-basis: 100%; }
.legendItem.targetHidden .legendItemLabel { color: var(--muted); text-decoration: line-through; }
.legendItem.targetHidden .legendItemColor { opacity: 0.3; }
.legendItemColor { width: 11px; height: 11px; border-radius: 50%; flex: none; }

.table-container { margin-bottom: 28px; padding: 14px; background: var(--card); border: 1px solid var(--rule); border-radius: 3px; overflow-x: auto; }
.table-search { margin: 8px 0; padding: 5px 8px; width: 260px; border: 1px solid var(--rule); background: var(--page); color: var(--ink); font: inherit; }
table.data { border-collapse: collapse; width: 100%; }
table.data th { position: sticky; top: 0; background: var(--card); border-bottom: 2px solid var(--rule); padding: 6px 8px; text-align: left; cursor: pointer; white-space: nowrap; }
table.data td { border-bottom: 1px solid var(--rule); padding: 4px 8px; }
table.data tbody tr:nth-child(even) { background: var(--stripe); }
table.data tbody tr:hover { background: var(--accent-soft); }
table.data .numeric { text-align: right; font-variant-numeric: tabular-nums; }

.report-footer { padding: 12px 28px 20px; color: var(--ink-soft); font-size: 11px; text-align: center; }

@media (max-width: 900px) {
  .plot-container { grid-template-columns: 1fr; }
  .table-search { width: 100%; }
}
"""


def get_css_styles(theme: str = "light") -> str:
    """Return the stylesheet with the custom properties for ``theme``."""
    palette = DARK_THEME if theme == "dark" else LIGHT_THEME
    return palette + DASHBOARD_CSS
