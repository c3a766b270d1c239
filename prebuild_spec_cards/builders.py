"""
Layout builders turning a BuilderContext into a CardLayout.

Builders are synchronous and never fetch assets. A QR code or barcode
element is emitted only when the matching pre-resolved asset is present in
the context. Apart from the generated ids, the same context always yields
the same layout.
"""

# Standard Library
import dataclasses

# local repo modules
import prebuild_spec_cards as psc
import prebuild_spec_cards.brands
import prebuild_spec_cards.colors
import prebuild_spec_cards.config
import prebuild_spec_cards.product
import prebuild_spec_cards.schema


BuilderContext = psc.schema.BuilderContext
CardLayout = psc.schema.CardLayout
LayoutConfig = psc.config.LayoutConfig
BadgeConfig = psc.config.BadgeConfig
Badge = psc.schema.Badge
SpecItem = psc.schema.SpecItem
InfoItem = psc.schema.InfoItem

lighten_color = psc.colors.lighten_color
darken_color = psc.colors.darken_color

CARD_SIZE_SHELF = psc.config.CARD_SIZE_SHELF
CARD_SIZE_PRICE = psc.config.CARD_SIZE_PRICE
CARD_SIZE_POSTER = psc.config.CARD_SIZE_POSTER
DEFAULT_MODEL_NAME = psc.config.DEFAULT_MODEL_NAME
SALE_BADGE_COLOR = psc.config.SALE_BADGE_COLOR
STRIKE_COLOR = psc.config.STRIKE_COLOR
FINANCING_COLOR = psc.config.FINANCING_COLOR
WHITE = psc.config.WHITE
BLACK = psc.config.BLACK

COMPONENT_KEYS = psc.product.COMPONENT_KEYS
SHELF_COMPONENT_KEYS = psc.product.SHELF_COMPONENT_KEYS
COMPONENT_LABELS = psc.product.COMPONENT_LABELS
CONDITION_CONFIG = psc.product.CONDITION_CONFIG
STOCK_STATUS_CONFIG = psc.product.STOCK_STATUS_CONFIG

SPEC_VALUE_COLORS = {
	CARD_SIZE_SHELF: "#3c3c3c",
	CARD_SIZE_PRICE: "#323232",
	CARD_SIZE_POSTER: "#282828",
}
SPEC_BACKGROUNDS = {
	CARD_SIZE_PRICE: ("#fafafa", 0.08),
	CARD_SIZE_POSTER: ("#f8f9fa", 0.06),
}
INFO_VALUE_COLOR = "#3c3c3c"
DESCRIPTION_COLOR = "#505050"
POSTER_SKU_COLOR = "#646464"
DIVIDER_THICKNESS = 0.02
SECTION_TITLE = "SPECIFICATIONS"


#============================================
def build_badges(ctx: BuilderContext, include_stock: bool = False) -> list[Badge]:
	"""
	Compose the status badges in fixed order.

	Order is condition, build tier, sale, then stock status.

	Args:
		ctx: Builder context.
		include_stock: Whether to add the stock status badge.

	Returns:
		List of badges, possibly empty.
	"""
	config = ctx.config
	badges: list[Badge] = []

	if config.condition:
		condition = CONDITION_CONFIG[config.condition]
		badges.append(Badge(condition.short_label, condition.bg_color, condition.color))

	if config.build_tier:
		badges.append(Badge(config.build_tier, ctx.colors.primary, WHITE))

	sale = config.sale_info
	if sale.enabled:
		sale_text = sale.badge_text
		if sale.original_price > 0 and config.price > 0:
			percent = psc.product.calculate_discount_percent(sale.original_price, config.price)
			sale_text = f"{sale.badge_text} {percent}% OFF"
		badges.append(Badge(sale_text, SALE_BADGE_COLOR, WHITE))

	if include_stock and config.stock_status:
		status = STOCK_STATUS_CONFIG[config.stock_status]
		badges.append(Badge(status.label, status.bg_color, status.color))

	return badges


#============================================
def build_feature_badges(ctx: BuilderContext, max_features: int) -> list[Badge]:
	"""
	Build feature badges, capped to max_features.

	The price card uses a light primary tint with primary text; the poster
	uses solid primary with white text.

	Args:
		ctx: Builder context.
		max_features: Cap on the number of features shown.

	Returns:
		List of badges.
	"""
	if max_features <= 0:
		return []
	primary = ctx.colors.primary
	badges: list[Badge] = []
	for feature in ctx.config.features[:max_features]:
		if not feature:
			continue
		if ctx.card_size == CARD_SIZE_POSTER:
			badges.append(Badge(feature, primary, WHITE))
		else:
			badges.append(Badge(feature, lighten_color(primary, 0.15), primary))
	return badges


#============================================
def build_spec_items(ctx: BuilderContext, spec_keys) -> list[SpecItem]:
	"""
	Build spec items for the given component keys, skipping empty values.

	Args:
		ctx: Builder context.
		spec_keys: Component keys in display order.

	Returns:
		List of SpecItem entries.
	"""
	items: list[SpecItem] = []
	for key in spec_keys:
		value = ctx.config.components.get(key)
		if not value:
			continue
		icon = psc.brands.find_brand_icon(value, ctx.brand_icons)
		brand_icon = None
		if icon is not None:
			brand_icon = psc.schema.BrandIconRef(src=icon.image, name=icon.name)
		items.append(SpecItem(key=key, label=COMPONENT_LABELS[key], value=value, brand_icon=brand_icon))
	return items


#============================================
def build_info_items(ctx: BuilderContext) -> list[InfoItem]:
	"""
	Build the OS / warranty / connectivity items.
	"""
	config = ctx.config
	items: list[InfoItem] = []
	if config.os:
		items.append(InfoItem("OS", config.os))
	if config.warranty:
		items.append(InfoItem("WARRANTY", config.warranty))
	if config.wifi:
		items.append(InfoItem("CONNECTIVITY", config.wifi))
	return items


#============================================
def _badge_row_style(badge: BadgeConfig) -> psc.schema.BadgeRowStyle:
	return psc.schema.BadgeRowStyle(
		font_size=badge.font_size,
		padding_x=badge.padding_x,
		padding_y=badge.padding_y,
		border_radius=badge.radius,
		spacing=badge.spacing,
	)


#============================================
def _header_element(ctx: BuilderContext, layout: LayoutConfig, with_accent: bool):
	if not ctx.config.store_name:
		return None
	accent_height = 0.0
	accent_color = None
	if with_accent and layout.header.accent_height > 0:
		accent_height = layout.header.accent_height
		accent_color = ctx.colors.primary
	return psc.schema.HeaderElement(
		id=ctx.ids.next_id("header"),
		text=ctx.config.store_name,
		style=psc.schema.HeaderStyle(
			height=layout.header.height,
			background_color=ctx.colors.accent,
			text_color=WHITE,
			font_size=layout.header.font_size,
			accent_height=accent_height,
			accent_color=accent_color,
		),
	)


#============================================
def _logo_element(ctx: BuilderContext, layout: LayoutConfig, card_width: float):
	if not ctx.config.store_logo:
		return None
	return psc.schema.ImageElement(
		id=ctx.ids.next_id("logo"),
		src=ctx.config.store_logo,
		alt="Store logo",
		size=psc.schema.Size(card_width - layout.margin * 2, layout.logo_max_height),
	)


#============================================
def _model_element(ctx: BuilderContext, layout: LayoutConfig, color: str):
	return psc.schema.TextElement(
		id=ctx.ids.next_id("model"),
		text=ctx.config.model_name or DEFAULT_MODEL_NAME,
		style=psc.schema.TextStyle(
			font_size=layout.font_size.model_name,
			color=color,
			bold=True,
		),
		max_lines=2,
	)


#============================================
def _badge_row_element(ctx: BuilderContext, prefix: str, badges: list[Badge], badge: BadgeConfig):
	if not badges:
		return None
	return psc.schema.BadgeRowElement(
		id=ctx.ids.next_id(prefix),
		badges=tuple(badges),
		style=_badge_row_style(badge),
	)


#============================================
def _price_element(ctx: BuilderContext, layout: LayoutConfig):
	config = ctx.config
	sale = config.sale_info
	original_price = sale.original_price if sale.enabled else None
	box_color = None
	if layout.price.show_box:
		box_color = lighten_color(ctx.colors.price_color, 0.92)
	return psc.schema.PriceElement(
		id=ctx.ids.next_id("price"),
		current_price=config.price,
		original_price=original_price,
		show_strikethrough=sale.enabled and sale.original_price > 0,
		style=psc.schema.PriceStyle(
			main_font_size=layout.price.main_font_size,
			strike_font_size=layout.price.strike_font_size,
			price_color=ctx.colors.price_color,
			strike_color=STRIKE_COLOR,
			show_box=layout.price.show_box,
			box_color=box_color,
			box_radius=layout.price.box_radius,
			box_height=layout.price.box_height,
		),
	)


#============================================
def _financing_element(ctx: BuilderContext, layout: LayoutConfig, show_apr: bool):
	config = ctx.config
	financing = config.financing_info
	if not financing.enabled or config.price <= 0:
		return None
	monthly = psc.product.calculate_monthly_payment(config.price, financing.months, financing.apr)
	if not monthly:
		return None
	return psc.schema.FinancingElement(
		id=ctx.ids.next_id("financing"),
		monthly_amount=monthly,
		months=financing.months,
		apr=financing.apr,
		show_apr=show_apr and financing.apr > 0,
		style=psc.schema.TextStyle(
			font_size=layout.font_size.financing,
			color=FINANCING_COLOR,
		),
	)


#============================================
def _specs_element(ctx: BuilderContext, layout: LayoutConfig, specs: list[SpecItem]):
	if not specs:
		return None
	background_color, border_radius = SPEC_BACKGROUNDS.get(ctx.card_size, (None, 0.0))
	accent_color = None
	if layout.specs.accent_width > 0:
		accent_color = ctx.colors.primary
	spec_layout = "two-column"
	if ctx.card_size == CARD_SIZE_SHELF:
		spec_layout = "single-column"
	return psc.schema.SpecsElement(
		id=ctx.ids.next_id("specs"),
		specs=tuple(specs),
		layout=spec_layout,
		style=psc.schema.SpecsStyle(
			label_font_size=layout.font_size.spec_label,
			value_font_size=layout.font_size.spec_value,
			label_color=ctx.colors.primary,
			value_color=SPEC_VALUE_COLORS[ctx.card_size],
			icon_size=layout.specs.icon_size,
			line_height=layout.specs.line_height,
			background_color=background_color,
			accent_width=layout.specs.accent_width,
			accent_color=accent_color,
			border_radius=border_radius,
			padding=layout.specs.padding,
		),
	)


#============================================
def _info_bar_element(ctx: BuilderContext, layout: LayoutConfig):
	items = build_info_items(ctx)
	if not items:
		return None
	return psc.schema.InfoBarElement(
		id=ctx.ids.next_id("infobar"),
		items=tuple(items),
		style=psc.schema.InfoBarStyle(
			height=layout.info_bar.height,
			background_color=lighten_color(ctx.colors.primary, 0.9),
			label_font_size=layout.info_bar.label_font_size,
			value_font_size=layout.info_bar.value_font_size,
			label_color=ctx.colors.primary,
			value_color=INFO_VALUE_COLOR,
			border_radius=layout.info_bar.radius,
		),
	)


#============================================
def _media_element(ctx: BuilderContext, layout: LayoutConfig):
	"""
	Build the product image and QR code, sharing a row when both exist.
	"""
	visual = ctx.config.visual_settings
	children = []
	if visual.product_image:
		children.append(
			psc.schema.ImageElement(
				id=ctx.ids.next_id("product-image"),
				src=visual.product_image,
				alt="Product",
				size=psc.schema.Size(layout.media.image_size, layout.media.image_size),
			)
		)
	if visual.show_qr_code and ctx.assets is not None and ctx.assets.qr_code_image:
		children.append(
			psc.schema.QRCodeElement(
				id=ctx.ids.next_id("qrcode"),
				url=visual.qr_code_url,
				size=layout.media.qr_size,
			)
		)
	if len(children) < 2:
		return children[0] if children else None
	return psc.schema.ContainerElement(
		id=ctx.ids.next_id("media"),
		children=tuple(children),
		direction="row",
		gap=layout.spacing.section_gap,
	)


#============================================
def _barcode_element(ctx: BuilderContext, layout: LayoutConfig):
	if not ctx.config.sku or ctx.assets is None or not ctx.assets.barcode_image:
		return None
	return psc.schema.BarcodeElement(
		id=ctx.ids.next_id("barcode"),
		value=ctx.config.sku,
		size=psc.schema.Size(layout.footer.barcode_width, layout.footer.barcode_height),
	)


#============================================
def _sku_element(ctx: BuilderContext, layout: LayoutConfig, color: str, align: str):
	if not ctx.config.sku:
		return None
	return psc.schema.SkuElement(
		id=ctx.ids.next_id("sku"),
		value=ctx.config.sku,
		style=psc.schema.TextStyle(
			font_size=layout.footer.sku_font_size,
			color=color,
			align=align,
		),
	)


#============================================
def _with_card_size(ctx: BuilderContext, card_size: str) -> BuilderContext:
	# the copy shares the id generator with the caller's context
	if ctx.card_size == card_size:
		return ctx
	return dataclasses.replace(ctx, card_size=card_size)


#============================================
def _finish_layout(ctx: BuilderContext, elements: list) -> CardLayout:
	size = psc.config.CARD_SIZES[ctx.card_size]
	visual = ctx.config.visual_settings
	return CardLayout(
		card_size=ctx.card_size,
		dimensions=psc.schema.Size(size.width, size.height),
		colors=ctx.colors,
		background=psc.schema.Background(color=WHITE, pattern=visual.background_pattern),
		font_family=visual.font_family,
		elements=tuple(element for element in elements if element is not None),
	)


#============================================
def build_shelf_tag_layout(ctx: BuilderContext, layout_config: LayoutConfig | None = None) -> CardLayout:
	"""
	Build the 2x3 in shelf tag layout.

	Key specs only, single column, no financing.

	Args:
		ctx: Builder context.
		layout_config: Optional layout table override.

	Returns:
		CardLayout.
	"""
	ctx = _with_card_size(ctx, CARD_SIZE_SHELF)
	layout = layout_config or psc.config.get_layout_config(CARD_SIZE_SHELF)
	width = psc.config.CARD_SIZES[CARD_SIZE_SHELF].width

	elements = [
		_header_element(ctx, layout, with_accent=False),
		_logo_element(ctx, layout, width),
		_model_element(ctx, layout, BLACK),
		_badge_row_element(ctx, "badges", build_badges(ctx, layout.include_stock_badge), layout.badge),
		_price_element(ctx, layout),
		_specs_element(ctx, layout, build_spec_items(ctx, SHELF_COMPONENT_KEYS)),
		_barcode_element(ctx, layout),
		_sku_element(ctx, layout, STRIKE_COLOR, "center"),
	]
	return _finish_layout(ctx, elements)


#============================================
def build_price_card_layout(ctx: BuilderContext, layout_config: LayoutConfig | None = None) -> CardLayout:
	"""
	Build the 4x6 in price card layout.

	Args:
		ctx: Builder context.
		layout_config: Optional layout table override.

	Returns:
		CardLayout.
	"""
	ctx = _with_card_size(ctx, CARD_SIZE_PRICE)
	layout = layout_config or psc.config.get_layout_config(CARD_SIZE_PRICE)
	width = psc.config.CARD_SIZES[CARD_SIZE_PRICE].width

	elements = [
		_header_element(ctx, layout, with_accent=True),
		_logo_element(ctx, layout, width),
		_model_element(ctx, layout, darken_color(ctx.colors.accent, 0.2)),
		_badge_row_element(ctx, "badges", build_badges(ctx, layout.include_stock_badge), layout.badge),
		_price_element(ctx, layout),
		_financing_element(ctx, layout, show_apr=False),
		_badge_row_element(
			ctx, "features", build_feature_badges(ctx, layout.max_features), layout.feature_badge
		),
	]
	specs = build_spec_items(ctx, COMPONENT_KEYS)
	if specs:
		elements.append(
			psc.schema.DividerElement(
				id=ctx.ids.next_id("divider"),
				style=psc.schema.DividerStyle(color=ctx.colors.primary, thickness=DIVIDER_THICKNESS),
			)
		)
	elements += [
		_specs_element(ctx, layout, specs),
		_info_bar_element(ctx, layout),
		_media_element(ctx, layout),
		_barcode_element(ctx, layout),
		_sku_element(ctx, layout, STRIKE_COLOR, "center"),
		psc.schema.FooterAccentElement(
			id=ctx.ids.next_id("footer-accent"),
			style=psc.schema.FooterAccentStyle(
				height=layout.footer.accent_height,
				primary_color=ctx.colors.primary,
			),
		),
	]
	return _finish_layout(ctx, elements)


#============================================
def build_poster_layout(ctx: BuilderContext, layout_config: LayoutConfig | None = None) -> CardLayout:
	"""
	Build the 8.5x11 in poster layout.

	Args:
		ctx: Builder context.
		layout_config: Optional layout table override.

	Returns:
		CardLayout.
	"""
	ctx = _with_card_size(ctx, CARD_SIZE_POSTER)
	layout = layout_config or psc.config.get_layout_config(CARD_SIZE_POSTER)
	width = psc.config.CARD_SIZES[CARD_SIZE_POSTER].width
	config = ctx.config

	elements = [
		_header_element(ctx, layout, with_accent=True),
		_logo_element(ctx, layout, width),
		_badge_row_element(ctx, "badges", build_badges(ctx, layout.include_stock_badge), layout.badge),
		_model_element(ctx, layout, darken_color(ctx.colors.accent, 0.1)),
		_price_element(ctx, layout),
		_financing_element(ctx, layout, show_apr=True),
	]

	specs = build_spec_items(ctx, COMPONENT_KEYS)
	if specs and layout.section_header is not None:
		elements.append(
			psc.schema.TextElement(
				id=ctx.ids.next_id("specs-header"),
				text=SECTION_TITLE,
				style=psc.schema.TextStyle(
					font_size=layout.section_header.font_size,
					color=WHITE,
					bold=True,
				),
				box=psc.schema.BoxStyle(
					background_color=ctx.colors.primary,
					border_radius=layout.specs.border_radius,
					height=layout.section_header.height,
				),
			)
		)
	elements += [
		_specs_element(ctx, layout, specs),
		_info_bar_element(ctx, layout),
	]

	if config.description:
		elements.append(
			psc.schema.TextElement(
				id=ctx.ids.next_id("description"),
				text=config.description,
				style=psc.schema.TextStyle(
					font_size=layout.font_size.description,
					color=DESCRIPTION_COLOR,
					italic=True,
				),
				max_lines=2,
			)
		)

	elements += [
		_badge_row_element(
			ctx, "features", build_feature_badges(ctx, layout.max_features), layout.feature_badge
		),
		_media_element(ctx, layout),
		_barcode_element(ctx, layout),
		_sku_element(ctx, layout, POSTER_SKU_COLOR, "left"),
		psc.schema.FooterAccentElement(
			id=ctx.ids.next_id("footer-accent"),
			style=psc.schema.FooterAccentStyle(
				height=layout.footer.accent_height,
				primary_color=ctx.colors.accent,
				accent_color=ctx.colors.primary,
				accent_height=layout.footer.primary_stripe_height,
			),
		),
	]
	return _finish_layout(ctx, elements)


BUILDERS = {
	CARD_SIZE_SHELF: build_shelf_tag_layout,
	CARD_SIZE_PRICE: build_price_card_layout,
	CARD_SIZE_POSTER: build_poster_layout,
}


#============================================
def build_card_layout(ctx: BuilderContext, layout_config: LayoutConfig | None = None) -> CardLayout:
	"""
	Build the layout for the context's card size.

	Unknown sizes fall back to the price card.

	Args:
		ctx: Builder context.
		layout_config: Optional layout table override.

	Returns:
		CardLayout.
	"""
	card_size = psc.config.normalize_card_size(ctx.card_size)
	return BUILDERS[card_size](ctx, layout_config)


#============================================
def make_builder_context(
	config,
	card_size: str,
	brand_icons=None,
	assets=None,
) -> BuilderContext:
	"""
	Create a BuilderContext with resolved theme colors and fresh ids.

	Args:
		config: PrebuildConfig.
		card_size: Card size key.
		brand_icons: Optional list of BrandIcon.
		assets: Optional AsyncAssets.

	Returns:
		BuilderContext.
	"""
	return BuilderContext(
		config=config,
		card_size=psc.config.normalize_card_size(card_size),
		colors=psc.product.get_theme_colors(config),
		brand_icons=list(brand_icons or []),
		assets=assets,
	)
