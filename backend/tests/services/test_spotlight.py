"""Spotlight - SVG share cards are escaped, wrapped and show display amounts."""

from octopus.schemas.chain import Claim, Coin
from octopus.services.spotlight import CHARS_PER_LINE, MAX_LINES, SpotlightRenderer


def _claim(body: str) -> Claim:
    return Claim(
        id=1, community_id="crypto", body=body, creator="cosmos1x",
        total_backed=Coin(amount=1_500_000_000), total_challenged=Coin(amount=0),
    )


def test_svg_escapes_claim_text():
    svg = SpotlightRenderer().render_svg(_claim("<script>alert(1)</script> & more"), "Crypto", 2)
    assert "<script>" not in svg
    assert "&lt;script&gt;" in svg
    assert "&amp; more" in svg


def test_svg_shows_counts_and_amounts():
    svg = SpotlightRenderer(800, 400).render_svg(_claim("Short claim"), "Crypto", 3)
    assert 'width="800"' in svg
    assert "Crypto" in svg
    assert "3 arguments" in svg
    assert "1.5 TRU agreed" in svg
    assert "0 TRU disagreed" in svg


def test_wrap_limits_lines_and_marks_overflow():
    lines = SpotlightRenderer.wrap("word " * 200)
    assert len(lines) == MAX_LINES
    assert all(len(line) <= CHARS_PER_LINE for line in lines)
    assert lines[-1].endswith("...")


def test_wrap_keeps_short_body_intact():
    assert SpotlightRenderer.wrap("  Bitcoin   will\nwin ") == ["Bitcoin will win"]
