"""
Screen preview of a CardLayout as a tree of styled HTML nodes.

Layout values are scaled to pixels with two heuristic factors: font sizes in
points use ScaleFactors.font and distances in inches use ScaleFactors.inch.
The preview approximates the printed card; it is not pixel identical.
"""

# Standard Library
import dataclasses
import html

# local repo modules
import prebuild_spec_cards as psc
import prebuild_spec_cards.assets
import prebuild_spec_cards.builders
import prebuild_spec_cards.config
import prebuild_spec_cards.product
import prebuild_spec_cards.schema


CardLayout = psc.schema.CardLayout
LayoutConfig = psc.config.LayoutConfig

DEFAULT_FONT_SCALE = psc.config.DEFAULT_FONT_SCALE
DEFAULT_INCH_SCALE = psc.config.DEFAULT_INCH_SCALE
PATTERN_TILE_SIZE = "20px 20px"
PAGE_BACKGROUND = "#e5e7eb"
VOID_TAGS = ("img",)

format_price = psc.product.format_price


@dataclasses.dataclass(frozen=True)
class ScaleFactors:
	# preview px per PDF point
	font: float = DEFAULT_FONT_SCALE
	# preview px per inch
	inch: float = DEFAULT_INCH_SCALE


@dataclasses.dataclass
class PreviewOptions:
	qr_code_image: str = ""
	barcode_image: str = ""
	scale: ScaleFactors = dataclasses.field(default_factory=ScaleFactors)
	layout_config: LayoutConfig | None = None


@dataclasses.dataclass
class PreviewNode:
	tag: str
	style: dict = dataclasses.field(default_factory=dict)
	text: str = ""
	attrs: dict = dataclasses.field(default_factory=dict)
	children: list = dataclasses.field(default_factory=list)

	def find_all(self, element_kind: str) -> list:
		"""
		Collect descendant nodes tagged with a layout element kind.
		"""
		found = []
		if self.attrs.get("data-kind") == element_kind:
			found.append(self)
		for child in self.children:
			found.extend(child.find_all(element_kind))
		return found


#============================================
def px(value: float) -> str:
	"""
	Format a pixel length for CSS.

	Args:
		value: Length in pixels.

	Returns:
		String like "12.5px".
	"""
	return f"{round(value, 2):g}px"


def _font_px(size: float, scale: ScaleFactors) -> str:
	return px(size * scale.font)


def _inch_px(value: float, scale: ScaleFactors) -> str:
	return px(value * scale.inch)


def _element_node(element, tag: str, style: dict, text: str = "", children=None) -> PreviewNode:
	attrs = {"data-id": element.id, "data-kind": element.kind}
	return PreviewNode(tag=tag, style=style, text=text, attrs=attrs, children=list(children or []))


def _align_to_justify(align: str) -> str:
	if align == "left":
		return "flex-start"
	if align == "right":
		return "flex-end"
	return "center"


#============================================
def render_header(element, options: PreviewOptions) -> PreviewNode:
	scale = options.scale
	style = element.style
	title = PreviewNode(
		tag="p",
		style={
			"margin": "0",
			"text-align": "center",
			"font-weight": "bold",
			"white-space": "nowrap",
			"overflow": "hidden",
			"text-overflow": "ellipsis",
			"color": style.text_color,
			"font-size": _font_px(style.font_size, scale),
		},
		text=element.text,
	)
	children = [title]
	if style.accent_height > 0:
		children.append(PreviewNode(
			tag="div",
			style={
				"position": "absolute",
				"left": "0",
				"right": "0",
				"bottom": "0",
				"height": _inch_px(style.accent_height, scale),
				"background-color": style.accent_color or style.background_color,
			},
		))
	node_style = {
		"position": "relative",
		"background-color": style.background_color,
		"padding": f"{px(style.height * scale.inch * 0.15)} {px(scale.inch * 0.1)}",
	}
	# full bleed across the content padding
	if options.layout_config is not None and options.layout_config.margin > 0:
		bleed = px(-options.layout_config.margin * scale.inch)
		node_style["margin"] = f"{bleed} {bleed} 0"
	return _element_node(element, "div", node_style, children=children)


#============================================
def render_text(element, options: PreviewOptions) -> PreviewNode:
	scale = options.scale
	style = element.style
	node_style = {
		"margin": "0",
		"font-size": _font_px(style.font_size, scale),
		"font-weight": "bold" if style.bold else "normal",
		"font-style": "italic" if style.italic else "normal",
		"color": style.color,
		"text-align": style.align,
	}
	if element.strikethrough:
		node_style["text-decoration"] = "line-through"
	if element.max_lines:
		node_style.update({
			"display": "-webkit-box",
			"-webkit-box-orient": "vertical",
			"-webkit-line-clamp": str(element.max_lines),
			"overflow": "hidden",
		})
	if element.box is not None:
		box = element.box
		if box.background_color:
			node_style["background-color"] = box.background_color
		if box.border_radius > 0:
			node_style["border-radius"] = _inch_px(box.border_radius, scale)
		if box.padding > 0:
			node_style["padding"] = _inch_px(box.padding, scale)
		if box.height > 0:
			node_style["line-height"] = _inch_px(box.height, scale)
	return _element_node(element, "p", node_style, text=element.text)


#============================================
def _badge_span(text: str, background: str, color: str, style, scale: ScaleFactors) -> PreviewNode:
	return PreviewNode(
		tag="span",
		style={
			"display": "inline-block",
			"font-weight": "500",
			"background-color": background,
			"color": color,
			"font-size": _font_px(style.font_size, scale),
			"padding": f"{_inch_px(style.padding_y, scale)} {_inch_px(style.padding_x, scale)}",
			"border-radius": _inch_px(style.border_radius, scale),
		},
		text=text,
	)


def render_badge_row(element, options: PreviewOptions) -> PreviewNode:
	scale = options.scale
	spans = [
		_badge_span(badge.text, badge.background_color, badge.text_color, element.style, scale)
		for badge in element.badges
	]
	node_style = {
		"display": "flex",
		"flex-wrap": "wrap",
		"justify-content": _align_to_justify(element.align),
		"gap": _inch_px(element.style.spacing, scale),
	}
	return _element_node(element, "div", node_style, children=spans)


def render_badge(element, options: PreviewOptions) -> PreviewNode:
	style = element.style
	span = _badge_span(element.text, style.background_color, style.text_color, style, options.scale)
	return _element_node(element, "div", {"display": "flex", "justify-content": "center"}, children=[span])


#============================================
def render_image(element, options: PreviewOptions) -> PreviewNode:
	scale = options.scale
	node = _element_node(element, "img", {
		"display": "block",
		"margin": "0 auto",
		"object-fit": element.object_fit,
		"max-width": _inch_px(element.size.width, scale),
		"max-height": _inch_px(element.size.height, scale),
	})
	node.attrs.update({"src": element.src, "alt": element.alt})
	return node


#============================================
def render_price(element, options: PreviewOptions) -> PreviewNode:
	scale = options.scale
	style = element.style
	children = []
	if element.show_strikethrough and element.original_price and element.original_price > 0:
		children.append(PreviewNode(
			tag="p",
			style={
				"margin": "0",
				"text-decoration": "line-through",
				"font-size": _font_px(style.strike_font_size, scale),
				"color": style.strike_color,
			},
			text=format_price(element.original_price),
		))
	children.append(PreviewNode(
		tag="p",
		style={
			"margin": "0",
			"font-weight": "bold",
			"font-size": _font_px(style.main_font_size, scale),
			"color": style.price_color,
		},
		text=format_price(element.current_price),
	))
	node_style = {"text-align": "center"}
	if style.show_box:
		node_style.update({
			"background-color": style.box_color,
			"border-radius": _inch_px(style.box_radius or 0.06, scale),
			"padding": f"{px(scale.inch * 0.05)} {px(scale.inch * 0.1)}",
		})
	return _element_node(element, "div", node_style, children=children)


def render_financing(element, options: PreviewOptions) -> PreviewNode:
	node_style = {
		"margin": "0",
		"text-align": "center",
		"font-size": _font_px(element.style.font_size, options.scale),
		"color": element.style.color,
	}
	return _element_node(element, "p", node_style, text=psc.schema.format_financing_text(element))


#============================================
def _spec_item_node(spec, style, scale: ScaleFactors) -> PreviewNode:
	value_children = []
	if spec.brand_icon is not None:
		icon_size = _inch_px(style.icon_size, scale)
		value_children.append(PreviewNode(
			tag="img",
			style={"width": icon_size, "height": icon_size, "object-fit": "contain", "flex-shrink": "0"},
			attrs={"src": spec.brand_icon.src, "alt": spec.brand_icon.name},
		))
	value_children.append(PreviewNode(
		tag="p",
		style={
			"margin": "0",
			"white-space": "nowrap",
			"overflow": "hidden",
			"text-overflow": "ellipsis",
			"font-size": _font_px(style.value_font_size, scale),
			"color": style.value_color,
		},
		text=spec.value,
	))
	label = PreviewNode(
		tag="p",
		style={
			"margin": "0",
			"font-weight": "bold",
			"font-size": _font_px(style.label_font_size, scale),
			"color": style.label_color,
		},
		text=spec.label.upper(),
	)
	value_row = PreviewNode(tag="div", style={"display": "flex", "align-items": "center", "gap": "2px"}, children=value_children)
	return PreviewNode(tag="div", attrs={"data-spec": spec.key}, children=[label, value_row])


def render_specs(element, options: PreviewOptions) -> PreviewNode:
	scale = options.scale
	style = element.style
	node_style = {"position": "relative"}
	if style.background_color:
		node_style["background-color"] = style.background_color
	if style.border_radius > 0:
		node_style["border-radius"] = _inch_px(style.border_radius, scale)
	if style.padding > 0:
		node_style["padding"] = _inch_px(style.padding, scale)

	children = []
	if style.accent_width > 0:
		children.append(PreviewNode(
			tag="div",
			style={
				"position": "absolute",
				"left": "0",
				"top": "0",
				"bottom": "0",
				"width": _inch_px(style.accent_width, scale),
				"background-color": style.accent_color,
			},
		))

	grid_style = {}
	if style.accent_width > 0:
		grid_style["padding-left"] = px(style.accent_width * scale.inch + 2)
	if element.layout == "two-column":
		left, right = psc.schema.split_spec_columns(element.specs)
		grid_style.update({"display": "grid", "grid-template-columns": "1fr 1fr", "column-gap": "4px"})
		columns = [
			PreviewNode(tag="div", children=[_spec_item_node(spec, style, scale) for spec in column])
			for column in (left, right)
		]
		children.append(PreviewNode(tag="div", style=grid_style, children=columns))
	else:
		items = [_spec_item_node(spec, style, scale) for spec in element.specs]
		children.append(PreviewNode(tag="div", style=grid_style, children=items))
	return _element_node(element, "div", node_style, children=children)


#============================================
def render_info_bar(element, options: PreviewOptions) -> PreviewNode:
	scale = options.scale
	style = element.style
	cells = []
	for item in element.items:
		cells.append(PreviewNode(tag="div", children=[
			PreviewNode(
				tag="p",
				style={
					"margin": "0",
					"font-weight": "bold",
					"font-size": _font_px(style.label_font_size, scale),
					"color": style.label_color,
				},
				text=item.label,
			),
			PreviewNode(
				tag="p",
				style={
					"margin": "0",
					"white-space": "nowrap",
					"overflow": "hidden",
					"text-overflow": "ellipsis",
					"font-size": _font_px(style.value_font_size, scale),
					"color": style.value_color,
				},
				text=item.value,
			),
		]))
	node_style = {
		"display": "grid",
		"text-align": "center",
		"grid-template-columns": f"repeat({len(element.items)}, 1fr)",
		"background-color": style.background_color,
		"border-radius": _inch_px(style.border_radius, scale),
		"padding": px(scale.inch * 0.03),
	}
	return _element_node(element, "div", node_style, children=cells)


#============================================
def render_barcode(element, options: PreviewOptions) -> PreviewNode | None:
	if not options.barcode_image:
		return None
	image = PreviewNode(
		tag="img",
		style={"height": _inch_px(element.size.height, options.scale)},
		attrs={"src": options.barcode_image, "alt": "Barcode"},
	)
	return _element_node(element, "div", {"display": "flex", "justify-content": "center"}, children=[image])


def render_qrcode(element, options: PreviewOptions) -> PreviewNode | None:
	if not options.qr_code_image:
		return None
	size = _inch_px(element.size, options.scale)
	node = _element_node(element, "img", {"display": "block", "margin": "0 auto", "width": size, "height": size})
	node.attrs.update({"src": options.qr_code_image, "alt": "QR Code"})
	return node


def render_sku(element, options: PreviewOptions) -> PreviewNode:
	node_style = {
		"margin": "0",
		"font-size": _font_px(element.style.font_size, options.scale),
		"color": element.style.color,
		"text-align": element.style.align,
	}
	return _element_node(element, "p", node_style, text=psc.schema.format_sku_text(element))


def render_divider(element, options: PreviewOptions) -> PreviewNode:
	node_style = {
		"height": _inch_px(element.style.thickness, options.scale),
		"background-color": element.style.color,
	}
	return _element_node(element, "div", node_style)


#============================================
def render_container(element, options: PreviewOptions) -> PreviewNode | None:
	"""
	Lay out child elements in a flex row or column.
	"""
	children = [render_element(child, options) for child in element.children]
	children = [child for child in children if child is not None]
	if not children:
		return None
	node_style = {
		"display": "flex",
		"flex-direction": element.direction,
		"gap": _inch_px(element.gap, options.scale),
		"align-items": _align_to_justify(element.align),
		"justify-content": _align_to_justify(element.justify),
	}
	if element.style is not None and element.style.background_color:
		node_style["background-color"] = element.style.background_color
	return _element_node(element, "div", node_style, children=children)


def render_footer_accent(element, options: PreviewOptions) -> PreviewNode:
	scale = options.scale
	style = element.style
	children = []
	if style.accent_color and style.accent_height > 0:
		children.append(PreviewNode(
			tag="div",
			style={
				"position": "absolute",
				"top": "0",
				"left": "0",
				"right": "0",
				"height": _inch_px(style.accent_height, scale),
				"background-color": style.accent_color,
			},
		))
	node_style = {
		"position": "absolute",
		"bottom": "0",
		"left": "0",
		"right": "0",
		"height": _inch_px(style.height, scale),
		"background-color": style.primary_color,
	}
	return _element_node(element, "div", node_style, children=children)


RENDER_RULES = {
	"header": render_header,
	"text": render_text,
	"badge": render_badge,
	"badge-row": render_badge_row,
	"image": render_image,
	"price": render_price,
	"financing": render_financing,
	"specs": render_specs,
	"info-bar": render_info_bar,
	"barcode": render_barcode,
	"qrcode": render_qrcode,
	"sku": render_sku,
	"divider": render_divider,
	"container": render_container,
	"footer-accent": render_footer_accent,
}


#============================================
def render_element(element, options: PreviewOptions) -> PreviewNode | None:
	"""
	Render one layout element.

	Args:
		element: Layout element.
		options: Preview options.

	Returns:
		PreviewNode, or None for hidden elements and missing assets.

	Raises:
		ValueError: Unknown element kind.
	"""
	if not element.visible:
		return None
	rule = RENDER_RULES.get(element.kind)
	if rule is None:
		raise ValueError(f"Unknown layout element kind: {element.kind}")
	return rule(element, options)


#============================================
def background_style(layout: CardLayout) -> dict:
	pattern = psc.product.BACKGROUND_PATTERNS.get(layout.background.pattern)
	if pattern is None or layout.background.pattern == "solid":
		return {"background-color": layout.background.color}
	return {"background": pattern.css, "background-size": PATTERN_TILE_SIZE}


#============================================
def render_layout_to_nodes(layout: CardLayout, options: PreviewOptions | None = None) -> PreviewNode:
	"""
	Render a card layout to a preview node tree.

	Args:
		layout: Card layout.
		options: Preview options with the resolved QR and barcode images.

	Returns:
		Root PreviewNode sized to the card.
	"""
	if options is None:
		options = PreviewOptions()
	scale = options.scale
	layout_config = options.layout_config or psc.config.get_layout_config(layout.card_size)
	font_info = psc.product.FONT_FAMILIES.get(layout.font_family, psc.product.FONT_FAMILIES["helvetica"])
	options = dataclasses.replace(options, layout_config=layout_config)

	children = []
	for element in layout.elements:
		node = render_element(element, options)
		if node is not None:
			children.append(node)

	content = PreviewNode(
		tag="div",
		style={
			"flex": "1",
			"display": "flex",
			"flex-direction": "column",
			"gap": _inch_px(layout_config.spacing.section_gap, scale),
			"padding": _inch_px(layout_config.margin, scale),
		},
		children=children,
	)
	root_style = {
		"position": "relative",
		"display": "flex",
		"flex-direction": "column",
		"overflow": "hidden",
		"box-sizing": "border-box",
		"width": _inch_px(layout.dimensions.width, scale),
		"height": _inch_px(layout.dimensions.height, scale),
		"font-family": font_info.css,
	}
	root_style.update(background_style(layout))
	attrs = {"data-card-size": layout.card_size}
	return PreviewNode(tag="div", style=root_style, attrs=attrs, children=[content])


#============================================
def format_style(style: dict) -> str:
	return "; ".join(f"{key}: {value}" for key, value in style.items())


#============================================
def render_node_html(node: PreviewNode) -> str:
	"""
	Serialize a preview node tree to an HTML fragment.

	Args:
		node: Root node.

	Returns:
		HTML string with escaped text and attribute values.
	"""
	parts = [f"<{node.tag}"]
	if node.style:
		parts.append(f' style="{html.escape(format_style(node.style), quote=True)}"')
	for key, value in node.attrs.items():
		parts.append(f' {key}="{html.escape(str(value), quote=True)}"')
	parts.append(">")
	if node.tag in VOID_TAGS:
		return "".join(parts)
	parts.append(html.escape(node.text, quote=False))
	for child in node.children:
		parts.append(render_node_html(child))
	parts.append(f"</{node.tag}>")
	return "".join(parts)


#============================================
def wrap_preview_page(fragment: str, title: str) -> str:
	"""
	Wrap an HTML fragment in a standalone page.
	"""
	lines = [
		"<!DOCTYPE html>",
		"<html>",
		"<head>",
		'<meta charset="utf-8">',
		f"<title>{html.escape(title)}</title>",
		"</head>",
		f'<body style="margin: 0; padding: 20px; background: {PAGE_BACKGROUND}">',
		fragment,
		"</body>",
		"</html>",
	]
	return "\n".join(lines) + "\n"


def render_preview_html(layout: CardLayout, options: PreviewOptions | None = None, title: str | None = None) -> str:
	if title is None:
		size = psc.config.CARD_SIZES.get(layout.card_size)
		title = size.name if size is not None else layout.card_size
	fragment = render_node_html(render_layout_to_nodes(layout, options))
	return wrap_preview_page(fragment, title)


#============================================
async def render_preview(
	config,
	card_size: str,
	brand_icons=None,
	scale: ScaleFactors | None = None,
	layout_config: LayoutConfig | None = None,
) -> PreviewNode:
	"""
	Build and render the preview of one card.

	The QR code and barcode images are resolved before the layout is built.

	Args:
		config: PrebuildConfig.
		card_size: Card size key.
		brand_icons: Optional list of BrandIcon.
		scale: Optional scale factor override.
		layout_config: Optional layout table override.

	Returns:
		Root PreviewNode.
	"""
	assets = await psc.assets.prepare_async_assets(config)
	ctx = psc.builders.make_builder_context(config, card_size, brand_icons, assets)
	layout = psc.builders.build_card_layout(ctx, layout_config)
	options = PreviewOptions(
		qr_code_image=assets.qr_code_image,
		barcode_image=assets.barcode_image,
		scale=scale or ScaleFactors(),
		layout_config=layout_config,
	)
	return render_layout_to_nodes(layout, options)
