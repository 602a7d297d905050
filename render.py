"""Jinja2 renderers for the site's data-driven fragments.

Every renderer takes an output sink and plain data; nothing here knows where
the HTML ends up.
"""

from __future__ import annotations

from typing import Any

from jinja2 import DictLoader, Environment, select_autoescape
from markupsafe import Markup, escape

from models import PublicationRecord, TalkRecord
from sinks import OutputSink

PUBLICATIONS_TEMPLATE = """\
{% macro render_link(paper, link) -%}
{% if link.kind == "abstract" -%}
<label for="abstract-{{ paper.record_id }}" class="sidenote-toggle abstract-toggle">[{{ link.label }}]</label>
{%- elif link.kind == "citations" -%}
<span class="citation-count" title="Citations">({{ link.label }})</span>
{%- else -%}
<a href="{{ link.url }}">[{{ link.label }}]</a>
{%- endif %}
{%- endmacro %}
<ul id="paper-list">
{% for paper in papers %}
  <li>
    <p>
{% if paper.abstract %}
      <input type="checkbox" id="abstract-{{ paper.record_id }}" class="sidenote-toggle abstract-checkbox" />\
<span class="sidenote abstract-content"><strong>Abstract:</strong> {{ paper.abstract }} \
<label for="abstract-{{ paper.record_id }}" class="abstract-close">[Close]</label></span>\
<label for="abstract-{{ paper.record_id }}" class="sidenote-backdrop"></label>
{% endif %}
      <strong>{{ paper.title }}</strong><br>
      {% for author in paper.authors %}{% if author.is_self %}<u>{{ author.display }}</u>{% else %}{{ author.display }}{% endif %}{% if not loop.last %}, {% endif %}{% endfor %}\
{% if paper.et_al %} <em>et al.</em>{% endif %}\
{% if paper.collaboration %} ({{ paper.collaboration }} Collaboration){% endif %}<br>
      <em>{{ venue_html(paper) }}</em><br>
      {% for link in paper.links %}{{ render_link(paper, link) }}{% if not loop.last %} {% endif %}{% endfor %}

    </p>
  </li>
{% endfor %}
</ul>
"""

TALKS_TEMPLATE = """\
<ul id="talk-list">
{% for talk in talks %}
  <li>
    <p>
      <strong>{{ talk.title }}</strong>\
{% if talk.abbr %} <span class="talk-tag"{% if tag_color(talk.abbr) %} style="color: {{ tag_color(talk.abbr) }};"{% endif %}>[{{ talk.abbr }}]</span>{% endif %}<br>
      {{ talk.note or "Event" }}<br>
      {% if talk.month %}{{ talk.month }} {% endif %}{{ talk.year }}.
{% if talk.indico or talk.url %}
      <br>{% if talk.indico %}<a href="{{ talk.indico }}">[Slides]</a>{% endif %}{% if talk.indico and talk.url %} {% endif %}{% if talk.url %}<a href="{{ talk.url }}">[URL]</a>{% endif %}

{% endif %}
    </p>
  </li>
{% endfor %}
</ul>
"""

CV_TEMPLATE = """\
<div id="cv-content">
{% for section in sections %}
{% if section.type == "time_table" %}
  <table class="cv-time-table">
{% if section.title %}
    <caption>{{ section.title }}</caption>
{% endif %}
    <thead><tr><th scope="col">Year</th><th scope="col">Description</th></tr></thead>
    <tbody>
{% for item in section.contents %}
      <tr>
        <td>{{ item.year }}</td>
        <td>\
{% if item.get("items") %}<ul>{% for entry in item.get("items") %}<li>{{ entry }}</li>{% endfor %}</ul>\
{% else %}\
{% if item.title %}<strong>{{ item.title }}</strong>{% endif %}\
{% if item.institution %}<br>{{ item.institution }}{% endif %}\
{% if item.department %}<br>{{ item.department }}{% endif %}\
{% if item.location %}, {{ item.location }}{% endif %}\
{% if item.maindescription %}<br><em>{{ item.maindescription | join(" ") }}</em>{% endif %}\
{% if item.description %}<br><small>{{ item.description | join(" ") }}</small>{% endif %}\
{% endif %}</td>
      </tr>
{% endfor %}
    </tbody>
  </table>
{% else %}
{% if section.title %}
  <h3>{{ section.title }}</h3>
{% endif %}
{% if section.type == "map" %}
  <table class="borders-custom">
    <tbody>
{% for item in section.contents %}
      <tr><td><strong>{{ item.name }}</strong></td><td>{{ item.value }}</td></tr>
{% endfor %}
    </tbody>
  </table>
{% elif section.type == "nested_list" %}
  <div>
{% for group in section.contents %}
    <p><strong>{{ group.title }}</strong></p>
{% if group.get("items") %}
    <ul>
{% for entry in group.get("items") %}
      <li>{{ entry | safe }}</li>
{% endfor %}
    </ul>
{% endif %}
{% endfor %}
  </div>
{% elif section.type == "list" %}
  <ul>
{% for entry in section.contents %}
    <li>{{ entry | safe }}</li>
{% endfor %}
  </ul>
{% endif %}
{% endif %}
{% endfor %}
</div>
"""

CONTACT_TEMPLATE = """\
<ul id="contact-list" class="contact-links">
{% for link in links %}
  <li><a href="{{ link.url }}"><span class="contact-icon contact-icon-{{ link.icon }}" aria-hidden="true"></span><span>{{ link.label }}</span></a></li>
{% endfor %}
</ul>
"""

MESSAGE_TEMPLATE = """\
{% if tag == "li" %}<ul><li>{{ message }}</li></ul>{% else %}<{{ tag }}>{{ message }}</{{ tag }}>{% endif %}
"""

env = Environment(
    loader=DictLoader(
        {
            "publications.html": PUBLICATIONS_TEMPLATE,
            "talks.html": TALKS_TEMPLATE,
            "cv.html": CV_TEMPLATE,
            "contact.html": CONTACT_TEMPLATE,
            "message.html": MESSAGE_TEMPLATE,
        }
    ),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def talk_tag_color(abbr: str | None) -> str | None:
    """Display colour for a talk category tag, or None for the default colour."""
    if not abbr:
        return None
    tag = abbr.lower().strip()
    if tag in ("talk", "talk & poster"):
        return "#f08080"
    if tag == "poster":
        return "#6495ed"
    if tag == "plenary talk" or "multi-exp" in tag:
        return "#daa520"
    return None


def venue_html(record: PublicationRecord) -> Markup:
    """Escaped venue string with the journal volume in bold."""
    if not record.volume:
        return escape(record.venue)
    head, sep, tail = record.venue.partition(f" {record.volume}")
    if not sep:
        return escape(record.venue)
    return escape(head) + Markup(" <strong>") + escape(record.volume) + Markup("</strong>") + escape(tail)


def render_publications(sink: OutputSink, papers: list[PublicationRecord]) -> None:
    html = env.get_template("publications.html").render(papers=papers, venue_html=venue_html)
    sink.write(html)


def render_talks(sink: OutputSink, talks: list[TalkRecord]) -> None:
    html = env.get_template("talks.html").render(talks=talks, tag_color=talk_tag_color)
    sink.write(html)


def render_cv(sink: OutputSink, sections: list[dict[str, Any]]) -> None:
    html = env.get_template("cv.html").render(sections=sections)
    sink.write(html)


def render_contact(sink: OutputSink, links: list[dict[str, str]]) -> None:
    html = env.get_template("contact.html").render(links=links)
    sink.write(html)


def render_message(sink: OutputSink, message: str, tag: str = "li") -> None:
    """Write a placeholder or error line; the sink is not marked as showing content."""
    html = env.get_template("message.html").render(message=message, tag=tag)
    sink.write(html, placeholder=True)
