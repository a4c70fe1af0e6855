"""
HTML templates for dashboard export.

Templates are filled with ``str.format``; JavaScript blocks are inserted
verbatim and contain no placeholders.
"""

from __future__ import annotations

PLOTLY_CDN = "https://cdn.plot.ly/plotly-2.35.2.min.js"

REPORT_BASE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
{css_styles}
</style>
{plotly_script}
</head>
<body>
<header class="report-header">
    <h1>{title}</h1>
    <div class="metadata">
        <span>Experiments: {experiment_count}</span>
        <span>Samples: {sample_count}</span>
        <span>Generated: {timestamp}</span>
    </div>
    {description}
</header>
<nav class="tab-navigation">
{navigation}
</nav>
<main class="report-content">
{content}
</main>
<footer class="report-footer">
    Generated by atacdash {version}
</footer>
{plotly_js}
{js_scripts}
</body>
</html>
"""

DESCRIPTION_TEMPLATE = '<div class="description">{description}</div>'

TAB_SECTION_TEMPLATE = """
<section id="{tab_id}" class="tab-section{active_class}">
    <h2 class="section-title">{section_title}</h2>
    {content}
</section>
"""

PLOT_CONTAINER_TEMPLATE = """
<div class="plot-container" id="{container_id}">
    <div class="plot-title">{title}</div>
    <div class="plot" id="{plot_id}"></div>
    <div>
        <div class="detail">{detail}</div>
        <div class="legend"><ul>{legend}</ul></div>
    </div>
</div>
"""

LEGEND_ITEM_TEMPLATE = (
    '<li class="{classes}" data-sample="{sample}">'
    '<span class="legendItemColor" style="background-color: {color}"></span>'
    '<span class="legendItemLabel">{sample}</span></li>'
)

DATA_TABLE_TEMPLATE = """
<div class="table-container">
    <h3 class="plot-title">{title}</h3>
    <input class="table-search" type="search" placeholder="Search..." data-table="{table_id}">
    <table class="data" id="{table_id}" data-order="{order}">
        <thead><tr>{header}</tr></thead>
        <tbody>{rows}</tbody>
    </table>
</div>
"""

TAB_NAVIGATION_JS = """
<script>
function showTab(tabId) {
    document.querySelectorAll('.tab-section').forEach(function(s) {
        s.classList.toggle('active', s.id === tabId);
    });
    document.querySelectorAll('.tab-btn').forEach(function(b) {
        b.classList.toggle('active', b.dataset.tab === tabId);
    });
    if (typeof Plotly !== 'undefined') {
        document.querySelectorAll('#' + tabId + ' .plot').forEach(function(p) {
            if (p.data) { Plotly.Plots.resize(p); }
        });
    }
}
</script>
"""

DATA_TABLE_JS = """
<script>
document.addEventListener('DOMContentLoaded', function() {
    document.querySelectorAll('.table-search').forEach(function(input) {
        input.addEventListener('input', function() {
            var needle = input.value.toLowerCase();
            var table = document.getElementById(input.dataset.table);
            table.querySelectorAll('tbody tr').forEach(function(row) {
                row.style.display = row.textContent.toLowerCase().indexOf(needle) >= 0 ? '' : 'none';
            });
        });
    });
    document.querySelectorAll('table.data th[data-orderable="true"]').forEach(function(th) {
        th.addEventListener('click', function() {
            var table = th.closest('table');
            var index = Array.prototype.indexOf.call(th.parentNode.children, th);
            var descending = th.dataset.direction === 'asc';
            th.dataset.direction = descending ? 'desc' : 'asc';
            var body = table.querySelector('tbody');
            var rows = Array.prototype.slice.call(body.rows);
            rows.sort(function(a, b) {
                var x = a.cells[index].dataset.value, y = b.cells[index].dataset.value;
                var nx = parseFloat(x), ny = parseFloat(y);
                var cmp = (!isNaN(nx) && !isNaN(ny)) ? nx - ny : x.localeCompare(y);
                return descending ? -cmp : cmp;
            });
            rows.forEach(function(r) { body.appendChild(r); });
        });
    });
});
</script>
"""
