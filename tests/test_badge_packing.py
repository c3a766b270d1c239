import pytest
import reportlab.pdfbase.pdfmetrics

import prebuild_spec_cards as psc
import prebuild_spec_cards.render
import prebuild_spec_cards.schema


#============================================
def make_box(text: str, width: float) -> psc.render.BadgeBox:
	return psc.render.BadgeBox(
		text=text,
		width=width,
		height=0.2,
		background_color="#000000",
		text_color="#ffffff",
	)


#============================================
def test_single_row_is_centered() -> None:
	"""
	A row starts at (card_width - row_width) / 2.
	"""
	boxes = [make_box("A", 0.5), make_box("B", 0.7)]
	rows = psc.render.pack_badge_rows(boxes, 0.1, 4.0, 3.7)
	assert len(rows) == 1
	row_width = 0.5 + 0.1 + 0.7
	assert rows[0][0][0] == pytest.approx((4.0 - row_width) / 2.0)
	assert rows[0][1][0] == pytest.approx((4.0 - row_width) / 2.0 + 0.6)


#============================================
def test_rows_wrap_at_content_width() -> None:
	boxes = [make_box(str(index), 0.8) for index in range(5)]
	rows = psc.render.pack_badge_rows(boxes, 0.05, 2.0, 1.84)
	assert [len(row) for row in rows] == [2, 2, 1]
	for row in rows:
		row_width = sum(box.width for _x, box in row) + 0.05 * (len(row) - 1)
		assert row[0][0] == pytest.approx((2.0 - row_width) / 2.0)


#============================================
def test_wide_badge_gets_own_row() -> None:
	boxes = [make_box("wide", 5.0), make_box("small", 0.3)]
	rows = psc.render.pack_badge_rows(boxes, 0.05, 4.0, 3.7)
	assert [len(row) for row in rows] == [1, 1]


#============================================
def test_packing_is_deterministic() -> None:
	boxes = [make_box(str(index), 0.3 + index * 0.1) for index in range(6)]
	first = psc.render.pack_badge_rows(boxes, 0.05, 4.0, 3.7)
	second = psc.render.pack_badge_rows(boxes, 0.05, 4.0, 3.7)
	assert first == second


#============================================
def test_measure_badges_adds_padding() -> None:
	style = psc.schema.BadgeRowStyle(font_size=8.0, padding_x=0.06, padding_y=0.03, border_radius=0.03, spacing=0.05)
	badges = [psc.schema.Badge("NEW", "#dcfce7", "#16a34a")]
	boxes = psc.render.measure_badges(badges, style, "Helvetica-Bold")
	text_width = reportlab.pdfbase.pdfmetrics.stringWidth("NEW", "Helvetica-Bold", 8.0) / 72.0
	assert boxes[0].width == pytest.approx(text_width + 0.12)
	assert boxes[0].height == pytest.approx(8.0 / 72.0 + 0.06)
