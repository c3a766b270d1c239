import asyncio
import dataclasses
import io
import pathlib

import PIL.Image
import pypdf
import pytest

import prebuild_spec_cards as psc
import prebuild_spec_cards.export
import prebuild_spec_cards.render


#============================================
def test_generate_card_pdf(sample_config) -> None:
	document = asyncio.run(psc.export.generate_card_pdf(sample_config, "shelf"))
	assert document.page_count == 1
	assert document.page_width == 2.0
	assert document.title == "Apex Vortex RTX - Shelf Tag"
	assert not document.warnings.qr_code_failed
	assert not document.warnings.barcode_failed


#============================================
def test_invalid_sku_flags_barcode_warning(sample_config) -> None:
	"""
	A SKU that cannot be encoded is skipped with a warning, not an error.
	"""
	config = dataclasses.replace(sample_config, sku="SKU-éè")
	document = asyncio.run(psc.export.generate_card_pdf(config, "price"))
	assert document.warnings.barcode_failed
	assert document.warnings.has_warnings()
	assert "Barcode generation failed" in document.warnings.format_warnings()


#============================================
def test_generate_multi_up_pdf(sample_config) -> None:
	sheet = asyncio.run(psc.export.generate_multi_up_pdf(sample_config, "shelf"))
	assert sheet.result.cards_placed == 12
	assert (sheet.result.columns, sheet.result.rows) == (4, 3)
	assert sheet.caption == "Apex Vortex RTX - Shelf Tags (4x3 = 12 per page)"
	reader = pypdf.PdfReader(io.BytesIO(sheet.document.data))
	assert len(reader.pages) == 1
	assert float(reader.pages[0].mediabox.width) == pytest.approx(612.0)


#============================================
def test_multi_up_rejects_poster(sample_config) -> None:
	with pytest.raises(ValueError):
		asyncio.run(psc.export.generate_multi_up_pdf(sample_config, "poster"))


#============================================
def test_failure_wrapped_in_generation_error(sample_config, monkeypatch) -> None:
	async def broken_render(*args, **kwargs):
		raise RuntimeError("canvas exploded")

	monkeypatch.setattr(psc.render, "render_layout_to_pdf", broken_render)
	with pytest.raises(psc.export.GenerationError) as info:
		asyncio.run(psc.export.generate_card_pdf(sample_config, "price"))
	assert info.value.card_size == "price"
	assert info.value.message == "Failed to generate PDF. Please try again."
	assert isinstance(info.value.__cause__, RuntimeError)


#============================================
def test_build_export_filename() -> None:
	assert psc.export.build_export_filename("Apex Pro", "price") == "Apex-Pro-Price-Card.pdf"
	assert psc.export.build_export_filename("", "shelf") == "PC-Build-Shelf-Tag.pdf"
	assert psc.export.build_export_filename("A/B", "poster") == "A-B-Poster.pdf"


#============================================
def test_export_all_sizes(sample_config, tmp_path: pathlib.Path) -> None:
	results = asyncio.run(psc.export.export_all_sizes(sample_config, tmp_path))
	names = [path.name for path, _document in results]
	assert names == [
		"Apex-Vortex-RTX-Shelf-Tag.pdf",
		"Apex-Vortex-RTX-Price-Card.pdf",
		"Apex-Vortex-RTX-Poster.pdf",
	]
	for path, document in results:
		assert path.read_bytes() == document.data


#============================================
def test_export_all_sizes_stops_on_first_failure(sample_config, tmp_path: pathlib.Path, monkeypatch) -> None:
	"""
	Earlier sizes stay on disk; later sizes are never attempted.
	"""
	real_render = psc.render.render_layout_to_pdf
	attempted = []

	async def failing_on_price(layout, *args, **kwargs):
		attempted.append(layout.card_size)
		if layout.card_size == "price":
			raise RuntimeError("boom")
		return await real_render(layout, *args, **kwargs)

	monkeypatch.setattr(psc.render, "render_layout_to_pdf", failing_on_price)
	with pytest.raises(psc.export.BatchExportError) as info:
		asyncio.run(psc.export.export_all_sizes(sample_config, tmp_path))
	assert info.value.card_size == "price"
	assert attempted == ["shelf", "price"]
	assert (tmp_path / "Apex-Vortex-RTX-Shelf-Tag.pdf").exists()
	assert not (tmp_path / "Apex-Vortex-RTX-Poster.pdf").exists()
	assert [path.name for path in info.value.written] == ["Apex-Vortex-RTX-Shelf-Tag.pdf"]


#============================================
def test_oversized_logo_only_warns(sample_config, tmp_path: pathlib.Path, monkeypatch) -> None:
	"""
	A logo over the decompression limit is skipped; the card still renders.
	"""
	logo_path = tmp_path / "huge-logo.png"
	PIL.Image.new("RGB", (100, 100), "#dc2626").save(logo_path)
	monkeypatch.setattr(PIL.Image, "MAX_IMAGE_PIXELS", 1000)
	config = dataclasses.replace(sample_config, store_logo=str(logo_path))
	document = asyncio.run(psc.export.generate_card_pdf(config, "price"))
	assert document.page_count == 1
	assert document.warnings.missing_logo


#============================================
def test_export_all_sizes_reports_write_failure(sample_config, tmp_path: pathlib.Path) -> None:
	blocker = tmp_path / "blocker"
	blocker.write_text("not a directory", encoding="utf-8")
	with pytest.raises(psc.export.BatchExportError) as info:
		asyncio.run(psc.export.export_all_sizes(sample_config, blocker / "out"))
	assert info.value.card_size == "shelf"
	assert info.value.written == []
	assert isinstance(info.value.__cause__, OSError)
