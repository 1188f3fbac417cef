# /namer/services/export_helpers/renderers.py

"""
File renderers for exports. Each takes a SharedContent and returns bytes.
"""

import json
import logging

import pandas as pd
from jinja2 import Environment, BaseLoader, select_autoescape

from ...db.database import utcnow
from ...models.share_model import SharedContent

logger = logging.getLogger(__name__)

_PDF_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{{ title }}</title>
  <style>
    body { font-family: 'DejaVu Sans', sans-serif; margin: 40px; color: #333; line-height: 1.6; }
    .header { text-align: center; margin-bottom: 40px; padding-bottom: 20px; border-bottom: 2px solid #e5e7eb; }
    .title { font-size: 24px; font-weight: bold; color: #1f2937; }
    .subtitle { font-size: 14px; color: #6b7280; }
    table { width: 100%; border-collapse: collapse; font-size: 12px; }
    th, td { text-align: left; padding: 6px 8px; border-bottom: 1px solid #e5e7eb; }
    th { background: #f9fafb; }
    .footer { margin-top: 40px; font-size: 11px; color: #6b7280; text-align: center; }
  </style>
</head>
<body>
  <div class="header">
    <div class="title">{{ title }}</div>
    {% if description %}<div class="subtitle">{{ description }}</div>{% endif %}
  </div>
  {% if columns %}
  <table>
    <thead><tr>{% for column in columns %}<th>{{ column }}</th>{% endfor %}</tr></thead>
    <tbody>
    {% for row in rows %}
      <tr>{% for column in columns %}<td>{{ row.get(column, "") }}</td>{% endfor %}</tr>
    {% endfor %}
    </tbody>
  </table>
  {% else %}
  <p>Nothing to show yet.</p>
  {% endif %}
  <div class="footer">Generated {{ generated_at }}</div>
</body>
</html>
"""

_environment = Environment(loader=BaseLoader(), autoescape=select_autoescape(default=True))


def _columns(rows) -> list:
    columns = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def render_json(content: SharedContent) -> bytes:
    payload = {
        "title": content.title,
        "description": content.description,
        "kind": content.kind.value,
        "target_id": content.target_id,
        "exported_at": utcnow().isoformat(),
        "data": content.content,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str).encode("utf-8")


def render_csv(content: SharedContent) -> bytes:
    df = pd.DataFrame(content.rows, columns=_columns(content.rows) or None)
    return df.to_csv(index=False).encode("utf-8")


def render_html(content: SharedContent) -> str:
    template = _environment.from_string(_PDF_TEMPLATE)
    return template.render(
        title=content.title,
        description=content.description,
        columns=_columns(content.rows),
        rows=content.rows,
        generated_at=utcnow().strftime("%Y-%m-%d %H:%M UTC"),
    )


def render_pdf(content: SharedContent) -> bytes:
    # WeasyPrint pulls in native libraries at import time.
    from weasyprint import HTML

    return HTML(string=render_html(content)).write_pdf()


RENDERERS = {
    "json": render_json,
    "csv": render_csv,
    "pdf": render_pdf,
}
