import dataclasses
import io

import pypdf
import pytest
import reportlab.lib.pagesizes
import reportlab.pdfgen.canvas

import prebuild_spec_cards as psc
import prebuild_spec_cards.config
import prebuild_spec_cards.imposition


#============================================
def make_tile_pdf(width_in: float, height_in: float) -> bytes:
	"""
	Build a one-page PDF filled with a dark rectangle.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(width_in * 72.0, height_in * 72.0))
	pdf.setFillColorRGB(0.1, 0.1, 0.1)
	pdf.rect(0, 0, width_in * 72.0, height_in * 72.0, stroke=0, fill=1)
	pdf.showPage()
	pdf.save()
	return buffer.getvalue()


#============================================
def expected_mark_count(columns: int, rows: int) -> int:
	"""
	Corners get two arms, other boundary points one, interior points four.
	"""
	return 8 + 2 * (columns - 1) + 2 * (rows - 1) + 4 * (columns - 1) * (rows - 1)


#============================================
def test_shelf_grid_on_letter() -> None:
	"""
	2x3 in tags tile 4x3 on letter with symmetric margins.
	"""
	grid = psc.imposition.compute_multi_up_grid("shelf")
	assert (grid.columns, grid.rows) == (4, 3)
	assert grid.cards_per_page == 12
	assert grid.margin_x == pytest.approx(0.25)
	assert grid.margin_y == pytest.approx(1.0)
	assert 2 * grid.margin_x + grid.columns * grid.card_width == pytest.approx(8.5)
	assert 2 * grid.margin_y + grid.rows * grid.card_height == pytest.approx(11.0)


#============================================
def test_price_grid_on_letter() -> None:
	grid = psc.imposition.compute_multi_up_grid("price")
	assert (grid.columns, grid.rows) == (2, 1)
	assert grid.margin_x == pytest.approx(0.25)
	assert grid.margin_y == pytest.approx(2.5)


#============================================
def test_poster_not_supported() -> None:
	with pytest.raises(ValueError):
		psc.imposition.compute_multi_up_grid("poster")


#============================================
def test_grid_that_does_not_fit() -> None:
	config = psc.config.get_multi_up_config("shelf")
	too_many = dataclasses.replace(config, columns=5)
	with pytest.raises(ValueError):
		psc.imposition.compute_multi_up_grid("shelf", too_many)


#============================================
def test_slots_fill_row_major_within_page() -> None:
	grid = psc.imposition.compute_multi_up_grid("shelf")
	assert grid.slot_origin(0) == pytest.approx((0.25, 1.0))
	assert grid.slot_origin(1) == pytest.approx((2.25, 1.0))
	assert grid.slot_origin(4) == pytest.approx((0.25, 4.0))
	for index in range(grid.cards_per_page):
		x, top = grid.slot_origin(index)
		assert x >= 0.0
		assert top >= 0.0
		assert x + grid.card_width <= grid.page_width + 1e-9
		assert top + grid.card_height <= grid.page_height + 1e-9


#============================================
@pytest.mark.parametrize("card_size", ["shelf", "price"])
def test_crop_marks_count_and_bounds(card_size: str) -> None:
	config = psc.config.get_multi_up_config(card_size)
	grid = psc.imposition.compute_multi_up_grid(card_size, config)
	marks = psc.imposition.compute_crop_marks(grid, config)
	assert len(marks) == expected_mark_count(grid.columns, grid.rows)
	for mark in marks:
		for x in (mark.x0, mark.x1):
			assert 0.0 <= x <= grid.page_width
		for y in (mark.y0, mark.y1):
			assert 0.0 <= y <= grid.page_height
		length = abs(mark.x1 - mark.x0) + abs(mark.y1 - mark.y0)
		assert length == pytest.approx(config.crop_mark_length)


#============================================
def test_boundary_marks_point_outward() -> None:
	config = psc.config.get_multi_up_config("price")
	grid = psc.imposition.compute_multi_up_grid("price", config)
	marks = psc.imposition.compute_crop_marks(grid, config)
	grid_left = grid.margin_x
	grid_right = grid.margin_x + grid.columns * grid.card_width
	grid_top = grid.margin_y
	grid_bottom = grid.margin_y + grid.rows * grid.card_height
	# a 2x1 grid has no interior intersections
	for mark in marks:
		outside_x = max(mark.x0, mark.x1) <= grid_left or min(mark.x0, mark.x1) >= grid_right
		outside_y = max(mark.y0, mark.y1) <= grid_top or min(mark.y0, mark.y1) >= grid_bottom
		assert outside_x or outside_y
		if mark.y0 == mark.y1:
			near = min(abs(mark.x0 - grid_left), abs(mark.x0 - grid_right))
		else:
			near = min(abs(mark.y0 - grid_top), abs(mark.y0 - grid_bottom))
		assert near == pytest.approx(config.crop_mark_gap)


#============================================
def test_caption_text() -> None:
	grid = psc.imposition.compute_multi_up_grid("shelf")
	caption = psc.imposition.build_multi_up_caption("Apex", grid)
	assert caption == "Apex - Shelf Tags (4x3 = 12 per page)"
	assert psc.imposition.build_multi_up_caption("", grid).startswith("PC Build - ")


#============================================
def test_impose_cards_letter_page() -> None:
	config = psc.config.get_multi_up_config("shelf")
	grid = psc.imposition.compute_multi_up_grid("shelf", config)
	data, result = psc.imposition.impose_cards(make_tile_pdf(2.0, 3.0), grid, config, True, "caption")
	assert result.cards_placed == 12
	assert result.pages == 1
	assert result.crop_marks == expected_mark_count(4, 3)
	reader = pypdf.PdfReader(io.BytesIO(data))
	assert len(reader.pages) == 1
	page_width, page_height = reportlab.lib.pagesizes.letter
	box = reader.pages[0].mediabox
	assert float(box.width) == pytest.approx(page_width)
	assert float(box.height) == pytest.approx(page_height)
	assert "caption" in reader.pages[0].extract_text()


#============================================
def test_impose_cards_without_crop_marks() -> None:
	config = psc.config.get_multi_up_config("price")
	grid = psc.imposition.compute_multi_up_grid("price", config)
	_data, result = psc.imposition.impose_cards(make_tile_pdf(4.0, 6.0), grid, config, False)
	assert result.crop_marks == 0
	assert result.cards_placed == 2
