import asyncio
import base64
import dataclasses
import io
import pathlib

import pypdf
import pytest

import prebuild_spec_cards as psc
import prebuild_spec_cards.assets
import prebuild_spec_cards.builders
import prebuild_spec_cards.config
import prebuild_spec_cards.render
import prebuild_spec_cards.schema


#============================================
def render(config, card_size: str, with_assets: bool = True) -> psc.render.PrintDocument:
	"""
	Build and render one card to a PrintDocument.
	"""
	assets = None
	if with_assets:
		assets = asyncio.run(psc.assets.prepare_async_assets(config))
	ctx = psc.builders.make_builder_context(config, card_size, assets=assets)
	layout = psc.builders.build_card_layout(ctx)
	return asyncio.run(psc.render.render_layout_to_pdf(layout))


#============================================
def page_of(document: psc.render.PrintDocument) -> pypdf.PageObject:
	return pypdf.PdfReader(io.BytesIO(document.data)).pages[0]


#============================================
@pytest.mark.parametrize(
	"card_size, width, height",
	[("shelf", 144.0, 216.0), ("price", 288.0, 432.0), ("poster", 612.0, 792.0)],
)
def test_page_size_matches_card(sample_config, card_size: str, width: float, height: float) -> None:
	document = render(sample_config, card_size)
	assert document.page_count == 1
	box = page_of(document).mediabox
	assert float(box.width) == pytest.approx(width)
	assert float(box.height) == pytest.approx(height)


#============================================
def test_text_content(sample_config) -> None:
	text = page_of(render(sample_config, "price")).extract_text()
	assert "Circuit City Computers" in text
	assert "$1,799.99" in text
	assert "SKU: APX-VTX-4070S" in text


#============================================
def test_vector_qr_code_drawn(sample_config) -> None:
	"""
	The QR code adds vector module rectangles to the content stream.
	"""
	with_qr = page_of(render(sample_config, "price")).get_contents().get_data()
	visual = dataclasses.replace(sample_config.visual_settings, show_qr_code=False)
	without_qr = page_of(render(dataclasses.replace(sample_config, visual_settings=visual), "price"))
	without_data = without_qr.get_contents().get_data()
	assert with_qr.count(b" re") > without_data.count(b" re") + 50


#============================================
def test_print_document_outputs(sample_config, tmp_path: pathlib.Path) -> None:
	document = render(sample_config, "shelf")
	assert document.to_bytes().startswith(b"%PDF")
	assert base64.b64decode(document.to_base64()) == document.data
	assert document.to_data_uri().startswith("data:application/pdf;base64,")
	path = document.save(tmp_path / "out" / "card.pdf")
	assert path.read_bytes() == document.data


#============================================
def test_missing_logo_sets_warning(sample_config, tmp_path: pathlib.Path) -> None:
	config = dataclasses.replace(sample_config, store_logo=str(tmp_path / "missing.png"))
	document = render(config, "price")
	assert document.warnings.missing_logo
	assert not document.warnings.missing_product_image
	assert document.page_count == 1


#============================================
def test_missing_product_image_sets_warning(sample_config) -> None:
	visual = dataclasses.replace(sample_config.visual_settings, product_image="data:image/png;base64,AAAA")
	document = render(dataclasses.replace(sample_config, visual_settings=visual), "poster")
	assert document.warnings.missing_product_image


#============================================
@pytest.mark.parametrize("pattern", ["solid", "gradient", "geometric", "circuit", "dots"])
def test_background_patterns_render(sample_config, pattern: str) -> None:
	visual = dataclasses.replace(sample_config.visual_settings, background_pattern=pattern)
	document = render(dataclasses.replace(sample_config, visual_settings=visual), "shelf")
	assert document.page_count == 1


#============================================
@pytest.mark.parametrize("font_family", ["helvetica", "georgia", "courier"])
def test_font_families_render(sample_config, font_family: str) -> None:
	visual = dataclasses.replace(sample_config.visual_settings, font_family=font_family)
	document = render(dataclasses.replace(sample_config, visual_settings=visual), "price")
	assert document.page_count == 1


#============================================
def test_unknown_element_kind_raises(sample_config) -> None:
	ctx = psc.builders.make_builder_context(sample_config, "shelf")
	layout = psc.builders.build_card_layout(ctx)
	broken = dataclasses.replace(layout, elements=layout.elements + (psc.schema.LayoutElement(id="odd-1"),))
	with pytest.raises(ValueError):
		asyncio.run(psc.render.render_layout_to_pdf(broken))


#============================================
def test_invisible_elements_skipped(sample_config) -> None:
	ctx = psc.builders.make_builder_context(sample_config, "price")
	layout = psc.builders.build_card_layout(ctx)
	hidden = tuple(
		dataclasses.replace(element, visible=element.kind != "sku") for element in layout.elements
	)
	document = asyncio.run(psc.render.render_layout_to_pdf(dataclasses.replace(layout, elements=hidden)))
	assert "SKU:" not in page_of(document).extract_text()


#============================================
def test_wrap_text_caps_lines() -> None:
	text = "A very long model name that certainly cannot fit inside a narrow shelf tag"
	lines = psc.render.wrap_text(text, "Helvetica-Bold", 12.0, 1.5, max_lines=2)
	assert len(lines) == 2
	assert lines[-1].endswith("...")
	for line in lines:
		assert psc.render.measure_text(line, "Helvetica-Bold", 12.0) <= 1.5 + 1e-9


#============================================
def test_fit_font_size_shrinks_to_minimum() -> None:
	size = psc.render.fit_font_size("Circuit City Computers", "Helvetica-Bold", 14.0, 1.0)
	assert size < 14.0
	assert psc.render.measure_text("Circuit City Computers", "Helvetica-Bold", size) <= 1.0 + 1e-6
	tiny = psc.render.fit_font_size("x" * 200, "Helvetica-Bold", 14.0, 0.5)
	assert tiny == psc.config.DEFAULT_TEXT_MIN_SIZE
