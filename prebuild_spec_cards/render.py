"""
Vector PDF rendering of a CardLayout.

Layout values are inches measured from the card's top edge; every drawing
call converts them to PDF points with a bottom-left origin. Elements are
drawn in list order with a running vertical cursor. Images are decoded and
awaited one at a time, in element order.
"""

# Standard Library
import base64
import dataclasses
import io
import pathlib

# PIP3 modules
import pypdf
import reportlab.graphics.barcode.code128
import reportlab.graphics.barcode.qr
import reportlab.graphics.renderPDF
import reportlab.graphics.shapes
import reportlab.lib.colors
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import prebuild_spec_cards as psc
import prebuild_spec_cards.assets
import prebuild_spec_cards.colors
import prebuild_spec_cards.config
import prebuild_spec_cards.product
import prebuild_spec_cards.schema


CardLayout = psc.schema.CardLayout
LayoutConfig = psc.config.LayoutConfig
GenerationWarnings = psc.assets.GenerationWarnings

POINTS_PER_INCH = psc.config.POINTS_PER_INCH
LINE_HEIGHT_FACTOR = psc.config.LINE_HEIGHT_FACTOR
DEFAULT_TEXT_MIN_SIZE = psc.config.DEFAULT_TEXT_MIN_SIZE
ELLIPSIS = "..."
PRICE_BOX_PADDING = 0.05
INFO_BAR_PADDING = 0.03
PATTERN_SPACING = 0.5
PATTERN_COLOR = "#f2f2f2"
GRADIENT_START = "#f5f7fa"
GRADIENT_END = "#c3cfe2"

# failures from reportlab barcode and QR encoders
ASSET_ERRORS = (ValueError, TypeError, KeyError, IndexError, AttributeError, OverflowError)

hex_to_rgb_float = psc.colors.hex_to_rgb_float


@dataclasses.dataclass
class RenderState:
	pdf: reportlab.pdfgen.canvas.Canvas
	layout: LayoutConfig
	card_width: float
	card_height: float
	font_family: str
	warnings: GenerationWarnings
	cursor: float = 0.0
	bottom_limit: float = 0.0

	@property
	def left(self) -> float:
		return self.layout.margin

	@property
	def content_width(self) -> float:
		return self.card_width - self.layout.margin * 2


@dataclasses.dataclass(frozen=True)
class BadgeBox:
	text: str
	width: float
	height: float
	background_color: str
	text_color: str


@dataclasses.dataclass
class PrintDocument:
	data: bytes
	page_width: float
	page_height: float
	title: str
	warnings: GenerationWarnings = dataclasses.field(default_factory=GenerationWarnings)

	@property
	def page_count(self) -> int:
		reader = pypdf.PdfReader(io.BytesIO(self.data))
		return len(reader.pages)

	def to_bytes(self) -> bytes:
		return self.data

	def to_base64(self) -> str:
		return base64.b64encode(self.data).decode("ascii")

	def to_data_uri(self) -> str:
		return f"data:application/pdf;base64,{self.to_base64()}"

	def save(self, path: pathlib.Path | str) -> pathlib.Path:
		"""
		Write the PDF to disk.

		Args:
			path: Output path.

		Returns:
			Output path.
		"""
		output_path = pathlib.Path(path)
		output_path.parent.mkdir(parents=True, exist_ok=True)
		output_path.write_bytes(self.data)
		return output_path


#============================================
def to_points(value: float) -> float:
	return value * POINTS_PER_INCH


#============================================
def measure_text(text: str, font_name: str, font_size: float) -> float:
	"""
	Measure a string width in inches.

	Args:
		text: Text content.
		font_name: ReportLab font name.
		font_size: Font size in points.

	Returns:
		Width in inches.
	"""
	width = reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size)
	return width / POINTS_PER_INCH


#============================================
def font_ascent(font_name: str, font_size: float) -> float:
	"""
	Font ascent in inches.
	"""
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(font_name) * font_size / 1000.0
	return ascent / POINTS_PER_INCH


#============================================
def font_descent(font_name: str, font_size: float) -> float:
	"""
	Font descent in inches, as a positive distance below the baseline.
	"""
	descent = reportlab.pdfbase.pdfmetrics.getDescent(font_name) * font_size / 1000.0
	return abs(descent) / POINTS_PER_INCH


#============================================
def line_height(font_size: float) -> float:
	return font_size * LINE_HEIGHT_FACTOR / POINTS_PER_INCH


#============================================
def truncate_text(text: str, font_name: str, font_size: float, max_width: float) -> str:
	"""
	Cut text with an ellipsis so it fits max_width.

	Args:
		text: Text content.
		font_name: ReportLab font name.
		font_size: Font size in points.
		max_width: Available width in inches.

	Returns:
		Text that fits, possibly ending in "...".
	"""
	if measure_text(text, font_name, font_size) <= max_width:
		return text
	trimmed = text
	while trimmed and measure_text(trimmed + ELLIPSIS, font_name, font_size) > max_width:
		trimmed = trimmed[:-1]
	return trimmed.rstrip() + ELLIPSIS


#============================================
def wrap_text(
	text: str,
	font_name: str,
	font_size: float,
	max_width: float,
	max_lines: int | None = None,
) -> list[str]:
	"""
	Word-wrap text to a width, optionally capping the line count.

	When the cap cuts text off, the last kept line ends in an ellipsis.

	Args:
		text: Text content.
		font_name: ReportLab font name.
		font_size: Font size in points.
		max_width: Available width in inches.
		max_lines: Optional line cap.

	Returns:
		List of lines.
	"""
	words = text.split()
	if not words:
		return []
	lines: list[str] = []
	current = words[0]
	for word in words[1:]:
		candidate = f"{current} {word}"
		if measure_text(candidate, font_name, font_size) <= max_width:
			current = candidate
		else:
			lines.append(current)
			current = word
	lines.append(current)
	lines = [truncate_text(line, font_name, font_size, max_width) for line in lines]
	if max_lines is not None and len(lines) > max_lines:
		lines = lines[:max_lines]
		last = lines[-1]
		if not last.endswith(ELLIPSIS):
			room = max_width - measure_text(ELLIPSIS, font_name, font_size)
			last = truncate_text(last, font_name, font_size, room)
			if last.endswith(ELLIPSIS):
				last = last[: -len(ELLIPSIS)]
			last = last.rstrip() + ELLIPSIS
		lines[-1] = last
	return lines


#============================================
def fit_font_size(
	text: str,
	font_name: str,
	font_size: float,
	max_width: float,
	min_font_size: float = DEFAULT_TEXT_MIN_SIZE,
) -> float:
	"""
	Shrink a font size until one line of text fits.

	Args:
		text: Text content.
		font_name: ReportLab font name.
		font_size: Preferred size in points.
		max_width: Available width in inches.
		min_font_size: Smallest size allowed.

	Returns:
		Font size in points.
	"""
	width = measure_text(text, font_name, font_size)
	if width <= max_width or width <= 0:
		return font_size
	target_size = font_size * max_width / width
	return max(min_font_size, target_size)


#============================================
def fit_image_size(
	image_width: float,
	image_height: float,
	max_width: float,
	max_height: float,
) -> tuple[float, float]:
	"""
	Fit an image into a bounding box, keeping its aspect ratio.

	The width is fitted first; if the resulting height is over the cap the
	size is re-derived from the height.

	Args:
		image_width: Source width in any unit.
		image_height: Source height in the same unit.
		max_width: Box width in inches.
		max_height: Box height in inches.

	Returns:
		Tuple of (width, height) in inches.
	"""
	if image_width <= 0 or image_height <= 0:
		return (0.0, 0.0)
	aspect = image_width / image_height
	width = max_width
	height = width / aspect
	if height > max_height:
		height = max_height
		width = height * aspect
	return (width, height)


#============================================
def measure_badges(badges, style, font_name: str) -> list[BadgeBox]:
	"""
	Measure each badge: text width plus horizontal padding, font height plus
	vertical padding.

	Args:
		badges: Badge entries.
		style: BadgeRowStyle.
		font_name: ReportLab font name.

	Returns:
		List of BadgeBox.
	"""
	font_height = style.font_size / POINTS_PER_INCH
	boxes: list[BadgeBox] = []
	for badge in badges:
		text_width = measure_text(badge.text, font_name, style.font_size)
		boxes.append(
			BadgeBox(
				text=badge.text,
				width=text_width + style.padding_x * 2,
				height=font_height + style.padding_y * 2,
				background_color=badge.background_color,
				text_color=badge.text_color,
			)
		)
	return boxes


#============================================
def pack_badge_rows(
	boxes: list[BadgeBox],
	spacing: float,
	card_width: float,
	content_width: float,
) -> list[list[tuple[float, BadgeBox]]]:
	"""
	Pack measured badges into centered rows.

	A row starts at (card_width - row_width) / 2 where row_width is the sum
	of badge widths plus the spacing between them. Badges wrap to a new row
	once a row would be wider than the content width.

	Args:
		boxes: Measured badges in order.
		spacing: Horizontal gap between badges.
		card_width: Card width in inches.
		content_width: Usable width in inches.

	Returns:
		Rows of (x, BadgeBox) pairs.
	"""
	groups: list[list[BadgeBox]] = []
	current: list[BadgeBox] = []
	current_width = 0.0
	for box in boxes:
		added = box.width if not current else current_width + spacing + box.width
		if current and added > content_width:
			groups.append(current)
			current = [box]
			current_width = box.width
		else:
			current.append(box)
			current_width = added
	if current:
		groups.append(current)

	rows: list[list[tuple[float, BadgeBox]]] = []
	for group in groups:
		row_width = sum(box.width for box in group) + spacing * (len(group) - 1)
		x = (card_width - row_width) / 2.0
		placed: list[tuple[float, BadgeBox]] = []
		for box in group:
			placed.append((x, box))
			x += box.width + spacing
		rows.append(placed)
	return rows


#============================================
def get_font(state: RenderState, bold: bool = False, italic: bool = False) -> str:
	return psc.config.get_pdf_font(state.font_family, bold, italic)


#============================================
def fill_box(
	state: RenderState,
	x: float,
	top: float,
	width: float,
	height: float,
	color: str,
	radius: float = 0.0,
) -> None:
	"""
	Fill a rectangle given in top-origin inches.
	"""
	if width <= 0 or height <= 0:
		return
	pdf = state.pdf
	pdf.setFillColorRGB(*hex_to_rgb_float(color))
	y = state.card_height - top - height
	if radius > 0:
		radius = min(radius, width / 2.0, height / 2.0)
		pdf.roundRect(to_points(x), to_points(y), to_points(width), to_points(height), to_points(radius), stroke=0, fill=1)
	else:
		pdf.rect(to_points(x), to_points(y), to_points(width), to_points(height), stroke=0, fill=1)


#============================================
def draw_string(
	state: RenderState,
	text: str,
	x: float,
	baseline: float,
	width: float,
	font_name: str,
	font_size: float,
	color: str,
	align: str = "center",
) -> tuple[float, float]:
	"""
	Draw one line of text aligned inside a horizontal span.

	Args:
		state: Render state.
		text: Line of text.
		x: Span left edge in inches.
		baseline: Baseline distance from the card top in inches.
		width: Span width in inches.
		font_name: ReportLab font name.
		font_size: Font size in points.
		color: Hex color.
		align: left, center or right.

	Returns:
		Tuple of (text_x, text_width) in inches.
	"""
	text_width = measure_text(text, font_name, font_size)
	if align == "left":
		text_x = x
	elif align == "right":
		text_x = x + width - text_width
	else:
		text_x = x + (width - text_width) / 2.0
	pdf = state.pdf
	pdf.setFont(font_name, font_size)
	pdf.setFillColorRGB(*hex_to_rgb_float(color))
	pdf.drawString(to_points(text_x), to_points(state.card_height - baseline), text)
	return (text_x, text_width)


#============================================
def draw_horizontal_line(
	state: RenderState,
	x0: float,
	x1: float,
	y: float,
	color: str,
	thickness: float,
) -> None:
	pdf = state.pdf
	pdf.setStrokeColorRGB(*hex_to_rgb_float(color))
	pdf.setLineWidth(to_points(thickness))
	pdf_y = to_points(state.card_height - y)
	pdf.line(to_points(x0), pdf_y, to_points(x1), pdf_y)


#============================================
def centered_baseline(top: float, height: float, font_name: str, font_size: float) -> float:
	"""
	Baseline that centers a line of text vertically in a box.
	"""
	ascent = font_ascent(font_name, font_size)
	descent = font_descent(font_name, font_size)
	return top + (height + ascent - descent) / 2.0


#============================================
def draw_background(state: RenderState, layout: CardLayout) -> None:
	"""
	Paint the card background color and its pattern.
	"""
	pdf = state.pdf
	width = state.card_width
	height = state.card_height
	fill_box(state, 0.0, 0.0, width, height, layout.background.color)
	pattern = layout.background.pattern
	if pattern == "gradient":
		start = reportlab.lib.colors.HexColor(GRADIENT_START)
		end = reportlab.lib.colors.HexColor(GRADIENT_END)
		# 135 degrees: top-left to bottom-right
		pdf.saveState()
		pdf.linearGradient(0, to_points(height), to_points(width), 0, (start, end), extend=True)
		pdf.restoreState()
	elif pattern == "geometric":
		pdf.saveState()
		pdf.setStrokeColorRGB(*hex_to_rgb_float(PATTERN_COLOR))
		pdf.setLineWidth(to_points(PATTERN_SPACING / 4.0))
		offset = -height
		while offset < width:
			pdf.line(to_points(offset), 0, to_points(offset + height), to_points(height))
			offset += PATTERN_SPACING
		pdf.restoreState()
	elif pattern == "circuit":
		pdf.saveState()
		pdf.setStrokeColorRGB(*hex_to_rgb_float(PATTERN_COLOR))
		pdf.setLineWidth(0.5)
		x = PATTERN_SPACING
		while x < width:
			pdf.line(to_points(x), 0, to_points(x), to_points(height))
			x += PATTERN_SPACING
		y = PATTERN_SPACING
		while y < height:
			pdf.line(0, to_points(y), to_points(width), to_points(y))
			y += PATTERN_SPACING
		pdf.restoreState()
	elif pattern == "dots":
		pdf.saveState()
		pdf.setFillColorRGB(*hex_to_rgb_float(PATTERN_COLOR))
		x = PATTERN_SPACING / 2.0
		while x < width:
			y = PATTERN_SPACING / 2.0
			while y < height:
				pdf.circle(to_points(x), to_points(y), 0.75, stroke=0, fill=1)
				y += PATTERN_SPACING
			x += PATTERN_SPACING
		pdf.restoreState()


#============================================
def draw_header(state: RenderState, element) -> None:
	"""
	Draw the full-width store name bar and its accent stripe.
	"""
	style = element.style
	top = state.cursor
	fill_box(state, 0.0, top, state.card_width, style.height, style.background_color)
	if style.accent_height > 0 and style.accent_color:
		fill_box(
			state,
			0.0,
			top + style.height - style.accent_height,
			state.card_width,
			style.accent_height,
			style.accent_color,
		)
	font_name = get_font(state, bold=True)
	font_size = fit_font_size(element.text, font_name, style.font_size, state.content_width)
	text = truncate_text(element.text, font_name, font_size, state.content_width)
	bar_height = style.height - style.accent_height
	baseline = centered_baseline(top, bar_height, font_name, font_size)
	draw_string(state, text, state.left, baseline, state.content_width, font_name, font_size, style.text_color)
	state.cursor = top + style.height + state.layout.spacing.section_gap


#============================================
def draw_text(state: RenderState, element) -> None:
	"""
	Draw a text element, wrapped, or one line inside a filled title bar.
	"""
	style = element.style
	font_name = get_font(state, bold=style.bold, italic=style.italic)
	top = state.cursor
	if element.box is not None:
		box = element.box
		bar_height = box.height or line_height(style.font_size)
		if box.background_color:
			fill_box(state, state.left, top, state.content_width, bar_height, box.background_color, box.border_radius)
		font_size = fit_font_size(element.text, font_name, style.font_size, state.content_width)
		baseline = centered_baseline(top, bar_height, font_name, font_size)
		draw_string(state, element.text, state.left, baseline, state.content_width, font_name, font_size, style.color, style.align)
		state.cursor = top + bar_height + state.layout.spacing.section_gap
		return

	lines = wrap_text(element.text, font_name, style.font_size, state.content_width, element.max_lines)
	leading = line_height(style.font_size)
	ascent = font_ascent(font_name, style.font_size)
	for index, line in enumerate(lines):
		baseline = top + ascent + index * leading
		text_x, text_width = draw_string(
			state, line, state.left, baseline, state.content_width, font_name, style.font_size, style.color, style.align
		)
		if element.strikethrough:
			strike_y = baseline - ascent * 0.35
			draw_horizontal_line(state, text_x, text_x + text_width, strike_y, style.color, style.font_size / 12.0 / POINTS_PER_INCH)
	state.cursor = top + len(lines) * leading + state.layout.spacing.after_model_name


#============================================
def draw_badge_boxes(state: RenderState, rows, style, top: float) -> float:
	"""
	Draw packed badge rows starting at top.

	Returns:
		Total height used in inches.
	"""
	font_name = get_font(state, bold=True)
	y = top
	for index, row in enumerate(rows):
		row_height = max(box.height for _, box in row)
		for x, box in row:
			fill_box(state, x, y, box.width, box.height, box.background_color, style.border_radius)
			baseline = centered_baseline(y, box.height, font_name, style.font_size)
			draw_string(state, box.text, x, baseline, box.width, font_name, style.font_size, box.text_color)
		y += row_height
		if index < len(rows) - 1:
			y += style.spacing
	return y - top


#============================================
def draw_badge_row(state: RenderState, element) -> None:
	if not element.badges:
		return
	font_name = get_font(state, bold=True)
	boxes = measure_badges(element.badges, element.style, font_name)
	rows = pack_badge_rows(boxes, element.style.spacing, state.card_width, state.content_width)
	used = draw_badge_boxes(state, rows, element.style, state.cursor)
	state.cursor += used + state.layout.spacing.after_badges


#============================================
def draw_badge(state: RenderState, element) -> None:
	style = element.style
	row_style = psc.schema.BadgeRowStyle(
		font_size=style.font_size,
		padding_x=style.padding_x,
		padding_y=style.padding_y,
		border_radius=style.border_radius,
		spacing=0.0,
	)
	badge = psc.schema.Badge(element.text, style.background_color, style.text_color)
	font_name = get_font(state, bold=True)
	boxes = measure_badges([badge], row_style, font_name)
	rows = pack_badge_rows(boxes, 0.0, state.card_width, state.content_width)
	used = draw_badge_boxes(state, rows, row_style, state.cursor)
	state.cursor += used + state.layout.spacing.after_badges


#============================================
def draw_price(state: RenderState, element) -> None:
	"""
	Draw the price block: optional struck-through original above the
	current price, optionally inside a tinted box.
	"""
	style = element.style
	main_font = get_font(state, bold=True)
	strike_font = get_font(state)
	show_strike = bool(element.show_strikethrough and element.original_price and element.original_price > 0)

	content_height = line_height(style.main_font_size)
	if show_strike:
		content_height += line_height(style.strike_font_size)

	top = state.cursor
	box_height = content_height
	if style.show_box:
		box_height = max(style.box_height, content_height + PRICE_BOX_PADDING * 2)
		fill_box(state, state.left, top, state.content_width, box_height, style.box_color or psc.config.WHITE, style.box_radius)

	y = top + (box_height - content_height) / 2.0
	if show_strike:
		strike_text = psc.product.format_price(element.original_price)
		ascent = font_ascent(strike_font, style.strike_font_size)
		baseline = y + ascent
		text_x, text_width = draw_string(
			state, strike_text, state.left, baseline, state.content_width, strike_font, style.strike_font_size, style.strike_color
		)
		draw_horizontal_line(
			state,
			text_x,
			text_x + text_width,
			baseline - ascent * 0.35,
			style.strike_color,
			style.strike_font_size / 14.0 / POINTS_PER_INCH,
		)
		y += line_height(style.strike_font_size)

	main_text = psc.product.format_price(element.current_price)
	font_size = fit_font_size(main_text, main_font, style.main_font_size, state.content_width)
	baseline = y + font_ascent(main_font, font_size)
	draw_string(state, main_text, state.left, baseline, state.content_width, main_font, font_size, style.price_color)
	state.cursor = top + box_height + state.layout.spacing.after_price


#============================================
def draw_financing(state: RenderState, element) -> None:
	style = element.style
	font_name = get_font(state)
	text = psc.schema.format_financing_text(element)
	lines = wrap_text(text, font_name, style.font_size, state.content_width, 2)
	leading = line_height(style.font_size)
	ascent = font_ascent(font_name, style.font_size)
	top = state.cursor
	for index, line in enumerate(lines):
		draw_string(
			state, line, state.left, top + ascent + index * leading, state.content_width, font_name, style.font_size, style.color, style.align
		)
	state.cursor = top + len(lines) * leading + state.layout.spacing.section_gap


#============================================
async def load_brand_icon(state: RenderState, icon, icon_cache: dict):
	"""
	Decode a brand icon once per render call.
	"""
	if icon.src not in icon_cache:
		image = await psc.assets.load_image(icon.src)
		icon_cache[icon.src] = image
		if image is None and icon.name not in state.warnings.brand_icons_failed:
			state.warnings.brand_icons_failed.append(icon.name)
	return icon_cache[icon.src]


#============================================
def draw_image_at(state: RenderState, image, x: float, top: float, width: float, height: float) -> None:
	reader = reportlab.lib.utils.ImageReader(image)
	state.pdf.drawImage(
		reader,
		to_points(x),
		to_points(state.card_height - top - height),
		width=to_points(width),
		height=to_points(height),
		mask="auto",
		preserveAspectRatio=False,
		anchor="sw",
	)


#============================================
async def draw_spec_item(
	state: RenderState,
	element,
	item,
	x: float,
	top: float,
	width: float,
	icon_cache: dict,
) -> None:
	style = element.style
	label_font = get_font(state, bold=True)
	value_font = get_font(state)

	icon_image = None
	if item.brand_icon is not None:
		icon_image = await load_brand_icon(state, item.brand_icon, icon_cache)

	if element.layout == "single-column":
		label = f"{item.label.upper()}: "
		baseline = top + font_ascent(value_font, style.value_font_size)
		text_x = x
		if icon_image is not None:
			icon_size = min(style.icon_size, style.line_height)
			draw_image_at(state, icon_image, x, top, icon_size, icon_size)
			text_x += icon_size + 0.02
		_, label_width = draw_string(
			state, label, text_x, baseline, width, label_font, style.label_font_size, style.label_color, "left"
		)
		remaining = max(0.0, x + width - text_x - label_width)
		value = truncate_text(item.value, value_font, style.value_font_size, remaining)
		draw_string(
			state, value, text_x + label_width, baseline, remaining, value_font, style.value_font_size, style.value_color, "left"
		)
		return

	label_baseline = top + font_ascent(label_font, style.label_font_size)
	draw_string(
		state, item.label.upper(), x, label_baseline, width, label_font, style.label_font_size, style.label_color, "left"
	)
	value_top = top + line_height(style.label_font_size)
	text_x = x
	if icon_image is not None:
		draw_image_at(state, icon_image, x, value_top, style.icon_size, style.icon_size)
		text_x += style.icon_size + style.icon_size / 4.0
	value_width = max(0.0, x + width - text_x)
	value = truncate_text(item.value, value_font, style.value_font_size, value_width)
	value_baseline = value_top + font_ascent(value_font, style.value_font_size)
	draw_string(
		state, value, text_x, value_baseline, value_width, value_font, style.value_font_size, style.value_color, "left"
	)


#============================================
async def draw_specs(state: RenderState, element, icon_cache: dict) -> None:
	"""
	Draw the specs block as one column or two, with optional background
	card and left accent bar.
	"""
	style = element.style
	if element.layout == "two-column":
		columns = [column for column in psc.schema.split_spec_columns(element.specs) if column]
	else:
		columns = [tuple(element.specs)]
	if not columns:
		return
	rows = max(len(column) for column in columns)
	row_height = style.line_height
	if element.layout == "two-column":
		row_height = max(
			style.line_height,
			line_height(style.label_font_size) + max(style.icon_size, line_height(style.value_font_size)),
		)
	block_height = rows * row_height + style.padding * 2

	top = state.cursor
	if style.background_color:
		fill_box(state, state.left, top, state.content_width, block_height, style.background_color, style.border_radius)
	if style.accent_width > 0 and style.accent_color:
		fill_box(state, state.left, top, style.accent_width, block_height, style.accent_color)

	inner_left = state.left + style.padding + style.accent_width
	inner_width = state.content_width - style.padding * 2 - style.accent_width
	column_gap = state.layout.specs.column_gap
	column_width = (inner_width - column_gap * (len(columns) - 1)) / len(columns)
	for column_index, column in enumerate(columns):
		column_x = inner_left + column_index * (column_width + column_gap)
		for row_index, item in enumerate(column):
			row_top = top + style.padding + row_index * row_height
			await draw_spec_item(state, element, item, column_x, row_top, column_width, icon_cache)
	state.cursor = top + block_height + state.layout.spacing.section_gap


#============================================
def draw_info_bar(state: RenderState, element) -> None:
	style = element.style
	if not element.items:
		return
	label_font = get_font(state, bold=True)
	value_font = get_font(state)
	needed = line_height(style.label_font_size) + line_height(style.value_font_size) + INFO_BAR_PADDING * 2
	bar_height = max(style.height, needed)
	top = state.cursor
	fill_box(state, state.left, top, state.content_width, bar_height, style.background_color, style.border_radius)

	column_width = state.content_width / len(element.items)
	text_top = top + (bar_height - needed) / 2.0 + INFO_BAR_PADDING
	for index, item in enumerate(element.items):
		column_x = state.left + index * column_width
		label_baseline = text_top + font_ascent(label_font, style.label_font_size)
		draw_string(state, item.label, column_x, label_baseline, column_width, label_font, style.label_font_size, style.label_color)
		value_baseline = text_top + line_height(style.label_font_size) + font_ascent(value_font, style.value_font_size)
		value = truncate_text(item.value, value_font, style.value_font_size, column_width - INFO_BAR_PADDING * 2)
		draw_string(state, value, column_x, value_baseline, column_width, value_font, style.value_font_size, style.value_color)
	state.cursor = top + bar_height + state.layout.spacing.section_gap


#============================================
def draw_vector_qr(state: RenderState, value: str, x: float, top: float, size: float) -> bool:
	"""
	Draw a QR code as vector modules.

	Returns:
		True when drawn, False when encoding failed.
	"""
	try:
		widget = reportlab.graphics.barcode.qr.QrCodeWidget(value, barLevel="M")
		bounds = widget.getBounds()
	except ASSET_ERRORS:
		return False
	qr_width = bounds[2] - bounds[0]
	qr_height = bounds[3] - bounds[1]
	if qr_width <= 0 or qr_height <= 0:
		return False
	size_points = to_points(size)
	scale_x = size_points / qr_width
	scale_y = size_points / qr_height
	drawing = reportlab.graphics.shapes.Drawing(size_points, size_points)
	drawing.add(widget)
	drawing.transform = [scale_x, 0, 0, scale_y, -bounds[0] * scale_x, -bounds[1] * scale_y]
	reportlab.graphics.renderPDF.draw(
		drawing,
		state.pdf,
		to_points(x),
		to_points(state.card_height - top - size),
	)
	return True


#============================================
def draw_vector_barcode(state: RenderState, value: str, x: float, top: float, width: float, height: float) -> bool:
	"""
	Draw a Code128 barcode stretched to width.

	Returns:
		True when drawn, False when encoding failed.
	"""
	if not psc.assets.is_valid_barcode(value):
		return False
	bar_height = to_points(height)
	try:
		probe = reportlab.graphics.barcode.code128.Code128(
			value, barWidth=1.0, barHeight=bar_height, quiet=0, humanReadable=0
		)
		if probe.width <= 0:
			return False
		barcode = reportlab.graphics.barcode.code128.Code128(
			value,
			barWidth=to_points(width) / probe.width,
			barHeight=bar_height,
			quiet=0,
			humanReadable=0,
		)
	except ASSET_ERRORS:
		return False
	barcode.drawOn(state.pdf, to_points(x), to_points(state.card_height - top - height))
	return True


#============================================
def draw_barcode(state: RenderState, element) -> None:
	width = min(element.size.width, state.content_width)
	height = element.size.height
	x = (state.card_width - width) / 2.0
	if not draw_vector_barcode(state, element.value, x, state.cursor, width, height):
		state.warnings.barcode_failed = True
		return
	state.cursor += height + state.layout.spacing.after_price


#============================================
def draw_qrcode(state: RenderState, element) -> None:
	size = min(element.size, state.content_width)
	x = (state.card_width - size) / 2.0
	if not draw_vector_qr(state, element.url, x, state.cursor, size):
		state.warnings.qr_code_failed = True
		return
	state.cursor += size + state.layout.spacing.section_gap


#============================================
def _flag_missing_image(state: RenderState, element) -> None:
	if element.id.startswith("logo"):
		state.warnings.missing_logo = True
	else:
		state.warnings.missing_product_image = True


#============================================
async def measure_image(state: RenderState, element, max_width: float):
	"""
	Load an image element and fit it to its box.

	Returns:
		Tuple of (image, width, height), or None when loading failed.
	"""
	image = await psc.assets.load_image(element.src)
	if image is None:
		_flag_missing_image(state, element)
		return None
	width, height = fit_image_size(
		image.width,
		image.height,
		min(element.size.width, max_width),
		element.size.height,
	)
	return (image, width, height)


#============================================
async def draw_image(state: RenderState, element) -> None:
	measured = await measure_image(state, element, state.content_width)
	if measured is None:
		return
	image, width, height = measured
	x = state.left + (state.content_width - width) / 2.0
	draw_image_at(state, image, x, state.cursor, width, height)
	spacing = state.layout.spacing.after_logo
	if not element.id.startswith("logo"):
		spacing = state.layout.spacing.section_gap
	state.cursor += height + spacing


#============================================
async def draw_container(state: RenderState, element) -> None:
	"""
	Lay children out side by side (row) or stacked (column), centered.
	"""
	if element.direction == "column":
		for child in element.children:
			await draw_element(state, child, {})
		return

	placed = []
	for child in element.children:
		if not child.visible:
			continue
		if child.kind == "image":
			measured = await measure_image(state, child, state.content_width)
			if measured is not None:
				placed.append((child, measured[0], measured[1], measured[2]))
		elif child.kind == "qrcode":
			size = min(child.size, state.content_width)
			placed.append((child, None, size, size))
	if not placed:
		return

	total_width = sum(item[2] for item in placed) + element.gap * (len(placed) - 1)
	row_height = max(item[3] for item in placed)
	x = (state.card_width - total_width) / 2.0
	top = state.cursor
	drew_any = False
	for child, image, width, height in placed:
		child_top = top + (row_height - height) / 2.0
		if child.kind == "image":
			draw_image_at(state, image, x, child_top, width, height)
			drew_any = True
		elif draw_vector_qr(state, child.url, x, child_top, width):
			drew_any = True
		else:
			state.warnings.qr_code_failed = True
		x += width + element.gap
	if drew_any:
		state.cursor = top + row_height + state.layout.spacing.section_gap


#============================================
def draw_sku(state: RenderState, element) -> None:
	style = element.style
	font_name = get_font(state)
	text = truncate_text(psc.schema.format_sku_text(element), font_name, style.font_size, state.content_width)
	top = state.cursor
	baseline = top + font_ascent(font_name, style.font_size)
	draw_string(state, text, state.left, baseline, state.content_width, font_name, style.font_size, style.color, style.align)
	state.cursor = top + line_height(style.font_size)


#============================================
def draw_divider(state: RenderState, element) -> None:
	style = element.style
	y = state.cursor + style.thickness / 2.0
	draw_horizontal_line(state, state.left, state.left + state.content_width, y, style.color, style.thickness)
	state.cursor += style.thickness + state.layout.spacing.section_gap


#============================================
def draw_footer_accent(state: RenderState, element) -> None:
	"""
	Draw the bottom strip; the poster variant adds a thinner top stripe.
	"""
	style = element.style
	if style.height <= 0:
		return
	top = state.card_height - style.height
	fill_box(state, 0.0, top, state.card_width, style.height, style.primary_color)
	if style.accent_color and style.accent_height > 0:
		fill_box(state, 0.0, top, state.card_width, style.accent_height, style.accent_color)


#============================================
async def draw_element(state: RenderState, element, icon_cache: dict) -> None:
	"""
	Draw one element and advance the cursor.
	"""
	if not element.visible:
		return
	kind = element.kind
	if kind == "header":
		draw_header(state, element)
	elif kind == "text":
		draw_text(state, element)
	elif kind == "badge":
		draw_badge(state, element)
	elif kind == "badge-row":
		draw_badge_row(state, element)
	elif kind == "image":
		await draw_image(state, element)
	elif kind == "price":
		draw_price(state, element)
	elif kind == "financing":
		draw_financing(state, element)
	elif kind == "specs":
		await draw_specs(state, element, icon_cache)
	elif kind == "info-bar":
		draw_info_bar(state, element)
	elif kind == "barcode":
		draw_barcode(state, element)
	elif kind == "qrcode":
		draw_qrcode(state, element)
	elif kind == "sku":
		draw_sku(state, element)
	elif kind == "divider":
		draw_divider(state, element)
	elif kind == "container":
		await draw_container(state, element)
	elif kind == "footer-accent":
		draw_footer_accent(state, element)
	else:
		raise ValueError(f"Unknown layout element kind: {kind}")
	if state.cursor > state.bottom_limit + 1e-6:
		state.warnings.overflow = True


#============================================
async def draw_layout(
	pdf: reportlab.pdfgen.canvas.Canvas,
	layout: CardLayout,
	layout_config: LayoutConfig | None = None,
	warnings: GenerationWarnings | None = None,
) -> GenerationWarnings:
	"""
	Draw a card layout onto a canvas page sized to the card.

	Args:
		pdf: ReportLab canvas.
		layout: Card layout.
		layout_config: Optional layout table override.
		warnings: Optional warnings record to fill.

	Returns:
		The warnings record.
	"""
	if warnings is None:
		warnings = GenerationWarnings()
	if layout_config is None:
		layout_config = psc.config.get_layout_config(layout.card_size)
	font_info = psc.product.FONT_FAMILIES.get(layout.font_family, psc.product.FONT_FAMILIES["helvetica"])

	footer_height = 0.0
	for element in layout.elements:
		if element.kind == "footer-accent" and element.visible:
			footer_height = max(footer_height, element.style.height)

	state = RenderState(
		pdf=pdf,
		layout=layout_config,
		card_width=layout.dimensions.width,
		card_height=layout.dimensions.height,
		font_family=font_info.pdf_family,
		warnings=warnings,
		cursor=layout_config.margin,
		bottom_limit=layout.dimensions.height - max(footer_height, layout_config.margin),
	)
	if layout.elements and layout.elements[0].kind == "header":
		state.cursor = 0.0

	draw_background(state, layout)
	icon_cache: dict = {}
	for element in layout.elements:
		await draw_element(state, element, icon_cache)
	return warnings


#============================================
async def render_layout_to_pdf(
	layout: CardLayout,
	layout_config: LayoutConfig | None = None,
	warnings: GenerationWarnings | None = None,
	title: str | None = None,
) -> PrintDocument:
	"""
	Render a card layout to a one-page PDF document sized to the card.

	Args:
		layout: Card layout.
		layout_config: Optional layout table override.
		warnings: Optional warnings record to fill.
		title: Optional document title.

	Returns:
		PrintDocument.
	"""
	if warnings is None:
		warnings = GenerationWarnings()
	size = psc.config.CARD_SIZES.get(layout.card_size)
	if title is None:
		title = size.name if size is not None else layout.card_size
	buffer = io.BytesIO()
	page_size = (to_points(layout.dimensions.width), to_points(layout.dimensions.height))
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=page_size)
	pdf.setTitle(title)
	await draw_layout(pdf, layout, layout_config, warnings)
	pdf.showPage()
	pdf.save()
	return PrintDocument(
		data=buffer.getvalue(),
		page_width=layout.dimensions.width,
		page_height=layout.dimensions.height,
		title=title,
		warnings=warnings,
	)
