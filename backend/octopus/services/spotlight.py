"""Spotlight Renderer - share-card images (SVG / PNG) for a claim.

Invariants:
    - Claim text is XML-escaped by the template environment (autoescape on)
    - Body is wrapped to at most MAX_LINES lines; overflow ends with an ellipsis
    - Amounts are shown in display units (human_readable)

Design Decisions:
    - cairosvg is imported on first PNG render: it binds libcairo at import time and the
      API process must start on hosts that only ever serve SVG
"""

import textwrap

from jinja2 import Environment, PackageLoader, StrictUndefined

from octopus.core.coins import human_readable
from octopus.schemas.chain import Claim

MAX_LINES = 5
CHARS_PER_LINE = 38


class SpotlightRenderer:
    def __init__(self, width: int = 1200, height: int = 630):
        self.width = width
        self.height = height
        self._env = Environment(
            loader=PackageLoader("octopus", "templates/spotlight"),
            undefined=StrictUndefined,
            autoescape=True,
        )

    @staticmethod
    def wrap(body: str) -> list[str]:
        lines = textwrap.wrap(" ".join(body.split()), width=CHARS_PER_LINE)
        if len(lines) <= MAX_LINES:
            return lines
        kept = lines[:MAX_LINES]
        kept[-1] = f"{kept[-1][: CHARS_PER_LINE - 3].rstrip()}..."
        return kept

    def render_svg(self, claim: Claim, community_name: str, argument_count: int) -> str:
        font_size = 56 if len(claim.body) < 120 else 44
        return self._env.get_template("claim.svg.j2").render(
            width=self.width,
            height=self.height,
            community=community_name,
            lines=self.wrap(claim.body),
            line_height=int(font_size * 1.25),
            font_size=font_size,
            argument_count=argument_count,
            backed=human_readable(claim.total_backed.amount),
            challenged=human_readable(claim.total_challenged.amount),
        )

    def render_png(self, svg: str) -> bytes:
        import cairosvg

        return cairosvg.svg2png(
            bytestring=svg.encode("utf-8"),
            output_width=self.width,
            output_height=self.height,
        )
