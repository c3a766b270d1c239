import dataclasses

import pytest

import prebuild_spec_cards as psc
import prebuild_spec_cards.brands
import prebuild_spec_cards.builders
import prebuild_spec_cards.colors
import prebuild_spec_cards.config
import prebuild_spec_cards.product
import prebuild_spec_cards.schema


ALL_SIZES = ("shelf", "price", "poster")
ASSETS = psc.schema.AsyncAssets(
	qr_code_image="data:image/png;base64,AA==",
	barcode_image="data:image/svg+xml;base64,AA==",
)


#============================================
def build(config, card_size: str, assets=None, brand_icons=None) -> psc.schema.CardLayout:
	"""
	Build a layout with a fresh context.
	"""
	ctx = psc.builders.make_builder_context(config, card_size, brand_icons, assets)
	return psc.builders.build_card_layout(ctx)


#============================================
def kinds(layout: psc.schema.CardLayout) -> list[str]:
	return [element.kind for element in layout.elements]


#============================================
def elements_of(layout: psc.schema.CardLayout, kind: str) -> list:
	return [element for element in psc.schema.iter_elements(layout.elements) if element.kind == kind]


#============================================
def test_empty_sku_has_no_barcode_or_sku(sample_config) -> None:
	"""
	No SKU means no barcode and no SKU text on any size.
	"""
	config = dataclasses.replace(sample_config, sku="")
	for card_size in ALL_SIZES:
		layout = build(config, card_size, ASSETS)
		assert "barcode" not in kinds(layout)
		assert "sku" not in kinds(layout)


#============================================
def test_barcode_needs_asset(sample_config) -> None:
	for card_size in ALL_SIZES:
		without_asset = build(sample_config, card_size)
		assert "barcode" not in kinds(without_asset)
		assert "sku" in kinds(without_asset)
		with_asset = build(sample_config, card_size, ASSETS)
		assert "barcode" in kinds(with_asset)


#============================================
def test_identical_contexts_give_identical_layouts(sample_config) -> None:
	for card_size in ALL_SIZES:
		assert build(sample_config, card_size, ASSETS) == build(sample_config, card_size, ASSETS)


#============================================
def test_sale_badge_shows_discount() -> None:
	config = psc.product.PrebuildConfig(
		model_name="Sale Rig",
		price=800.0,
		sale_info=psc.product.SaleInfo(enabled=True, original_price=1000.0),
	)
	ctx = psc.builders.make_builder_context(config, "price")
	texts = [badge.text for badge in psc.builders.build_badges(ctx)]
	assert texts == ["SALE 20% OFF"]
	assert psc.builders.build_badges(ctx)[0].background_color == "#dc2626"


#============================================
def test_sale_badge_without_original_price() -> None:
	config = psc.product.PrebuildConfig(
		price=800.0,
		sale_info=psc.product.SaleInfo(enabled=True, original_price=0.0, badge_text="HOT DEAL"),
	)
	ctx = psc.builders.make_builder_context(config, "price")
	assert [badge.text for badge in psc.builders.build_badges(ctx)] == ["HOT DEAL"]


#============================================
def test_badge_order_and_stock_inclusion(sample_config) -> None:
	"""
	Condition, tier, sale, then stock when the table asks for it.
	"""
	ctx = psc.builders.make_builder_context(sample_config, "price")
	texts = [badge.text for badge in psc.builders.build_badges(ctx, include_stock=True)]
	assert texts == ["NEW", "Performance", "SALE 10% OFF", "In Stock"]
	texts = [badge.text for badge in psc.builders.build_badges(ctx, include_stock=False)]
	assert "In Stock" not in texts

	shelf = build(sample_config, "shelf")
	shelf_badges = [badge.text for badge in elements_of(shelf, "badge-row")[0].badges]
	assert "In Stock" not in shelf_badges


#============================================
def test_no_empty_badge_row(minimal_config) -> None:
	for card_size in ALL_SIZES:
		assert "badge-row" not in kinds(build(minimal_config, card_size))


#============================================
def test_shelf_never_has_financing(sample_config) -> None:
	assert sample_config.financing_info.enabled
	assert "financing" not in kinds(build(sample_config, "shelf"))
	assert "financing" in kinds(build(sample_config, "price"))


#============================================
def test_financing_apr_only_on_poster(sample_config) -> None:
	price = elements_of(build(sample_config, "price"), "financing")[0]
	poster = elements_of(build(sample_config, "poster"), "financing")[0]
	assert not price.show_apr
	assert poster.show_apr
	assert psc.schema.format_financing_text(poster).endswith("@ 9.99% APR")


#============================================
def test_financing_skipped_for_zero_price(sample_config) -> None:
	config = dataclasses.replace(sample_config, price=0.0)
	assert "financing" not in kinds(build(config, "price"))


#============================================
def test_monthly_payment() -> None:
	assert psc.product.calculate_monthly_payment(1200, 12, 0) == "100.00"
	assert float(psc.product.calculate_monthly_payment(1200, 12, 12)) > 100.0
	assert psc.product.calculate_monthly_payment(0, 12, 0) == ""
	assert psc.product.calculate_monthly_payment(1200, 0, 0) == ""


#============================================
def test_empty_component_has_no_spec_item(sample_config) -> None:
	components = dataclasses.replace(sample_config.components, gpu="")
	config = dataclasses.replace(sample_config, components=components)
	for card_size in ALL_SIZES:
		specs = elements_of(build(config, card_size), "specs")[0]
		assert "gpu" not in [spec.key for spec in specs.specs]
		assert all(spec.value for spec in specs.specs)


#============================================
def test_shelf_specs_key_components_single_column(sample_config) -> None:
	shelf = elements_of(build(sample_config, "shelf"), "specs")[0]
	assert shelf.layout == "single-column"
	assert [spec.key for spec in shelf.specs] == ["cpu", "gpu", "ram", "storage"]
	price = elements_of(build(sample_config, "price"), "specs")[0]
	assert price.layout == "two-column"
	assert len(price.specs) == 8


#============================================
def test_split_spec_columns_left_takes_extra() -> None:
	items = [psc.schema.SpecItem(key=str(index), label="L", value="V") for index in range(5)]
	left, right = psc.schema.split_spec_columns(items)
	assert len(left) == 3
	assert len(right) == 2


#============================================
def test_brand_icon_attached(minimal_config) -> None:
	icons = [psc.brands.BrandIcon(name="nvidia", image="data:image/png;base64,AA==")]
	layout = build(minimal_config, "price", brand_icons=icons)
	specs = {spec.key: spec for spec in elements_of(layout, "specs")[0].specs}
	assert specs["gpu"].brand_icon == psc.schema.BrandIconRef(src="data:image/png;base64,AA==", name="nvidia")
	assert specs["cpu"].brand_icon is None


#============================================
def test_header_requires_store_name(sample_config) -> None:
	config = dataclasses.replace(sample_config, store_name="")
	for card_size in ALL_SIZES:
		assert "header" not in kinds(build(config, card_size))
		assert kinds(build(sample_config, card_size))[0] == "header"


#============================================
def test_header_accent_stripe(sample_config) -> None:
	colors = psc.product.get_theme_colors(sample_config)
	shelf = elements_of(build(sample_config, "shelf"), "header")[0]
	price = elements_of(build(sample_config, "price"), "header")[0]
	assert shelf.style.accent_height == 0.0
	assert price.style.accent_height > 0.0
	assert price.style.accent_color == colors.primary
	assert price.style.background_color == colors.accent


#============================================
def test_model_name_default_and_colors(sample_config) -> None:
	colors = psc.product.get_theme_colors(sample_config)
	config = dataclasses.replace(sample_config, model_name="")
	shelf = elements_of(build(config, "shelf"), "text")[0]
	assert shelf.text == "PC Build"
	assert shelf.style.color == "#000000"
	assert shelf.max_lines == 2
	price = [e for e in elements_of(build(config, "price"), "text") if e.id.startswith("model")][0]
	assert price.style.color == psc.colors.darken_color(colors.accent, 0.2)
	poster = [e for e in elements_of(build(config, "poster"), "text") if e.id.startswith("model")][0]
	assert poster.style.color == psc.colors.darken_color(colors.accent, 0.1)


#============================================
def test_price_box_tint(sample_config) -> None:
	colors = psc.product.get_theme_colors(sample_config)
	price = elements_of(build(sample_config, "price"), "price")[0]
	assert price.style.show_box
	assert price.style.box_color == psc.colors.lighten_color(colors.price_color, 0.92)
	assert price.show_strikethrough
	assert price.original_price == 1999.99
	shelf = elements_of(build(sample_config, "shelf"), "price")[0]
	assert not shelf.style.show_box


#============================================
def test_feature_badges_capped(sample_config) -> None:
	features = [f"Feature {index}" for index in range(10)]
	config = dataclasses.replace(sample_config, features=features)
	price_rows = [e for e in elements_of(build(config, "price"), "badge-row") if e.id.startswith("features")]
	poster_rows = [e for e in elements_of(build(config, "poster"), "badge-row") if e.id.startswith("features")]
	assert len(price_rows[0].badges) == 4
	assert len(poster_rows[0].badges) == 6
	assert poster_rows[0].badges[0].text_color == "#ffffff"


#============================================
def test_media_container_for_image_and_qr(sample_config) -> None:
	visual = dataclasses.replace(sample_config.visual_settings, product_image="data:image/png;base64,AA==")
	config = dataclasses.replace(sample_config, visual_settings=visual)
	layout = build(config, "price", ASSETS)
	containers = elements_of(layout, "container")
	assert len(containers) == 1
	assert [child.kind for child in containers[0].children] == ["image", "qrcode"]


#============================================
def test_qr_requires_flag_and_asset(sample_config) -> None:
	assert "qrcode" not in kinds(build(sample_config, "price"))
	assert "qrcode" in kinds(build(sample_config, "price", ASSETS))
	visual = dataclasses.replace(sample_config.visual_settings, show_qr_code=False)
	config = dataclasses.replace(sample_config, visual_settings=visual)
	assert "qrcode" not in kinds(build(config, "price", ASSETS))
	assert "qrcode" not in kinds(build(sample_config, "shelf", ASSETS))


#============================================
def test_price_card_divider_and_footer(sample_config) -> None:
	colors = psc.product.get_theme_colors(sample_config)
	layout = build(sample_config, "price")
	order = kinds(layout)
	assert order.index("divider") < order.index("specs")
	footer = elements_of(layout, "footer-accent")[0]
	assert footer.style.primary_color == colors.primary
	assert footer.style.accent_color is None
	assert order[-1] == "footer-accent"


#============================================
def test_poster_section_title_and_footer(sample_config) -> None:
	colors = psc.product.get_theme_colors(sample_config)
	layout = build(sample_config, "poster")
	titles = [e for e in elements_of(layout, "text") if e.text == "SPECIFICATIONS"]
	assert len(titles) == 1
	assert titles[0].box.background_color == colors.primary
	footer = elements_of(layout, "footer-accent")[0]
	assert footer.style.primary_color == colors.accent
	assert footer.style.accent_color == colors.primary

	config = dataclasses.replace(sample_config, components=psc.product.ComponentSpec())
	empty = build(config, "poster")
	assert not [e for e in elements_of(empty, "text") if e.text == "SPECIFICATIONS"]
	assert "specs" not in kinds(empty)
	assert "divider" not in kinds(build(config, "price"))


#============================================
def test_poster_description_italic(sample_config) -> None:
	layout = build(sample_config, "poster")
	description = [e for e in elements_of(layout, "text") if e.id.startswith("description")][0]
	assert description.style.italic
	assert description.max_lines == 2


#============================================
def test_info_bar_items(sample_config) -> None:
	ctx = psc.builders.make_builder_context(sample_config, "price")
	labels = [item.label for item in psc.builders.build_info_items(ctx)]
	assert labels == ["OS", "WARRANTY", "CONNECTIVITY"]
	config = dataclasses.replace(sample_config, os="", warranty="", wifi="")
	assert "info-bar" not in kinds(build(config, "price"))


#============================================
def test_unknown_size_falls_back_to_price_card(sample_config) -> None:
	layout = build(sample_config, "banner")
	assert layout.card_size == "price"
	assert layout.dimensions == psc.schema.Size(4.0, 6.0)


#============================================
def test_injected_layout_config(sample_config) -> None:
	"""
	An injected table replaces the per-size defaults.
	"""
	table = psc.config.get_layout_config("price")
	custom = dataclasses.replace(table, max_features=1)
	ctx = psc.builders.make_builder_context(sample_config, "price")
	layout = psc.builders.build_card_layout(ctx, custom)
	rows = [e for e in elements_of(layout, "badge-row") if e.id.startswith("features")]
	assert len(rows[0].badges) == 1


#============================================
@pytest.mark.parametrize("card_size", ALL_SIZES)
def test_layout_background_and_font(sample_config, card_size: str) -> None:
	layout = build(sample_config, card_size)
	assert layout.background.pattern == "solid"
	assert layout.font_family == "helvetica"
	assert layout.colors == psc.product.get_theme_colors(sample_config)
