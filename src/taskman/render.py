"""Static HTML snapshot of the task list."""

from __future__ import annotations

from collections.abc import Sequence

from jinja2 import BaseLoader, Environment

from taskman import __version__
from taskman.config import TaskmanConfig
from taskman.links import attribute_link
from taskman.record import Record
from taskman.store import filter_records

PAGE_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>taskman v{{ version }}</title>
</head>
<body>
{% if query %}
  <p class="filter">Filter: {{ query }}</p>
{% endif %}
  <table class="table">
    <thead>
      <tr>
        <th>Done</th>
        <th>Priority</th>
        <th>Task</th>
{% for name in link_names %}
        <th>{{ name }}</th>
{% endfor %}
      </tr>
    </thead>
    <tbody>
{% for row in rows %}
      <tr class="todo">
        <td><input type="checkbox" disabled{% if row.record.done %} checked{% endif %} /></td>
        <td>{{ row.record.priority or "-" }}</td>
        <td{% if row.record.done %} style="text-decoration: line-through"{% endif %}>{{ row.record.body }}</td>
{% for link in row.links %}
        <td>{% if link %}<a href="{{ link }}" target="_blank">Open</a>{% endif %}</td>
{% endfor %}
      </tr>
{% endfor %}
    </tbody>
  </table>
</body>
</html>
"""


def render_html(
    records: Sequence[Record],
    config: TaskmanConfig,
    query: str | None = None,
) -> str:
    """Render the (optionally filtered) records as an HTML page.

    Each configured link adds a column holding a link built from the
    matching attribute.
    """
    env = Environment(loader=BaseLoader(), autoescape=True, trim_blocks=True)
    template = env.from_string(PAGE_TEMPLATE)

    link_names = sorted(config.links)
    rows = [
        {
            "record": record,
            "links": [
                attribute_link(record, name, config.links[name].template)
                for name in link_names
            ],
        }
        for record in filter_records(records, query)
    ]

    return template.render(
        version=__version__,
        query=query,
        link_names=link_names,
        rows=rows,
    )
