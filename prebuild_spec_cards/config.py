"""
Shared configuration and constants.

All layout measurements are in inches unless a name says otherwise. Font
sizes are in points.
"""

import dataclasses


POINTS_PER_INCH = 72.0
PAGE_WIDTH = 8.5
PAGE_HEIGHT = 11.0

CARD_SIZE_SHELF = "shelf"
CARD_SIZE_PRICE = "price"
CARD_SIZE_POSTER = "poster"
ALL_CARD_SIZES = (CARD_SIZE_SHELF, CARD_SIZE_PRICE, CARD_SIZE_POSTER)

DEFAULT_FONT_SCALE = 0.65
DEFAULT_INCH_SCALE = 40.0

DEFAULT_MODEL_NAME = "PC Build"
DEFAULT_TEXT_MIN_SIZE = 4.0
LINE_HEIGHT_FACTOR = 1.2
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 4

SALE_BADGE_COLOR = "#dc2626"
STRIKE_COLOR = "#9ca3af"
FINANCING_COLOR = "#6b7280"
WHITE = "#ffffff"
BLACK = "#000000"

# PDF font names per family, keyed by (bold, italic)
PDF_FONTS = {
	"helvetica": {
		(False, False): "Helvetica",
		(True, False): "Helvetica-Bold",
		(False, True): "Helvetica-Oblique",
		(True, True): "Helvetica-BoldOblique",
	},
	"times": {
		(False, False): "Times-Roman",
		(True, False): "Times-Bold",
		(False, True): "Times-Italic",
		(True, True): "Times-BoldItalic",
	},
	"courier": {
		(False, False): "Courier",
		(True, False): "Courier-Bold",
		(False, True): "Courier-Oblique",
		(True, True): "Courier-BoldOblique",
	},
}


@dataclasses.dataclass(frozen=True)
class CardSizeConfig:
	name: str
	width: float
	height: float
	description: str


CARD_SIZES = {
	CARD_SIZE_SHELF: CardSizeConfig(
		name="Shelf Tag",
		width=2.0,
		height=3.0,
		description="Compact, key specs only",
	),
	CARD_SIZE_PRICE: CardSizeConfig(
		name="Price Card",
		width=4.0,
		height=6.0,
		description="Medium detail, fits display stands",
	),
	CARD_SIZE_POSTER: CardSizeConfig(
		name="Poster",
		width=8.5,
		height=11.0,
		description="Full specs, prominent display",
	),
}


@dataclasses.dataclass(frozen=True)
class FontSizeConfig:
	store_name: float
	model_name: float
	spec_label: float
	spec_value: float
	financing: float
	description: float


@dataclasses.dataclass(frozen=True)
class SpacingConfig:
	section_gap: float
	after_logo: float
	after_model_name: float
	after_badges: float
	after_price: float


@dataclasses.dataclass(frozen=True)
class BadgeConfig:
	font_size: float
	padding_x: float
	padding_y: float
	radius: float
	spacing: float


@dataclasses.dataclass(frozen=True)
class HeaderConfig:
	height: float
	font_size: float
	accent_height: float


@dataclasses.dataclass(frozen=True)
class PriceConfig:
	main_font_size: float
	strike_font_size: float
	show_box: bool
	box_height: float
	box_radius: float


@dataclasses.dataclass(frozen=True)
class SpecsConfig:
	icon_size: float
	column_gap: float
	line_height: float
	accent_width: float
	padding: float
	border_radius: float


@dataclasses.dataclass(frozen=True)
class InfoBarConfig:
	height: float
	label_font_size: float
	value_font_size: float
	radius: float


@dataclasses.dataclass(frozen=True)
class FooterConfig:
	barcode_width: float
	barcode_height: float
	sku_font_size: float
	accent_height: float
	primary_stripe_height: float


@dataclasses.dataclass(frozen=True)
class MediaConfig:
	qr_size: float
	image_size: float


@dataclasses.dataclass(frozen=True)
class SectionHeaderConfig:
	height: float
	font_size: float


@dataclasses.dataclass(frozen=True)
class LayoutConfig:
	margin: float
	font_size: FontSizeConfig
	spacing: SpacingConfig
	badge: BadgeConfig
	feature_badge: BadgeConfig
	header: HeaderConfig
	price: PriceConfig
	specs: SpecsConfig
	info_bar: InfoBarConfig
	footer: FooterConfig
	media: MediaConfig
	logo_max_height: float
	include_stock_badge: bool
	max_features: int
	section_header: SectionHeaderConfig | None = None


@dataclasses.dataclass(frozen=True)
class MultiUpConfig:
	page_width: float
	page_height: float
	columns: int
	rows: int
	crop_mark_length: float
	crop_mark_gap: float
	crop_mark_width: float
	crop_mark_gray: float
	caption_font_size: float
	caption_offset: float


#============================================
SHELF_TAG_LAYOUT = LayoutConfig(
	margin=0.08,
	font_size=FontSizeConfig(
		store_name=7.0,
		model_name=9.0,
		spec_label=5.5,
		spec_value=5.5,
		financing=6.0,
		description=5.0,
	),
	spacing=SpacingConfig(
		section_gap=0.08,
		after_logo=0.06,
		after_model_name=0.06,
		after_badges=0.06,
		after_price=0.04,
	),
	badge=BadgeConfig(font_size=5.0, padding_x=0.05, padding_y=0.03, radius=0.03, spacing=0.04),
	feature_badge=BadgeConfig(font_size=5.0, padding_x=0.04, padding_y=0.02, radius=0.02, spacing=0.03),
	header=HeaderConfig(height=0.35, font_size=7.0, accent_height=0.0),
	price=PriceConfig(main_font_size=18.0, strike_font_size=9.0, show_box=False, box_height=0.0, box_radius=0.04),
	specs=SpecsConfig(icon_size=0.12, column_gap=0.06, line_height=0.12, accent_width=0.0, padding=0.0, border_radius=0.0),
	info_bar=InfoBarConfig(height=0.0, label_font_size=4.0, value_font_size=5.0, radius=0.03),
	footer=FooterConfig(
		barcode_width=1.5,
		barcode_height=0.1,
		sku_font_size=4.5,
		accent_height=0.0,
		primary_stripe_height=0.0,
	),
	media=MediaConfig(qr_size=0.4, image_size=0.4),
	logo_max_height=0.3,
	include_stock_badge=False,
	max_features=0,
)

#============================================
PRICE_CARD_LAYOUT = LayoutConfig(
	margin=0.15,
	font_size=FontSizeConfig(
		store_name=11.0,
		model_name=14.0,
		spec_label=7.0,
		spec_value=7.0,
		financing=8.0,
		description=7.0,
	),
	spacing=SpacingConfig(
		section_gap=0.12,
		after_logo=0.08,
		after_model_name=0.06,
		after_badges=0.06,
		after_price=0.08,
	),
	badge=BadgeConfig(font_size=7.0, padding_x=0.08, padding_y=0.04, radius=0.04, spacing=0.06),
	feature_badge=BadgeConfig(font_size=6.0, padding_x=0.06, padding_y=0.03, radius=0.03, spacing=0.04),
	header=HeaderConfig(height=0.45, font_size=11.0, accent_height=0.04),
	price=PriceConfig(main_font_size=32.0, strike_font_size=14.0, show_box=True, box_height=0.5, box_radius=0.06),
	specs=SpecsConfig(icon_size=0.14, column_gap=0.06, line_height=0.36, accent_width=0.05, padding=0.08, border_radius=0.08),
	info_bar=InfoBarConfig(height=0.35, label_font_size=5.0, value_font_size=6.0, radius=0.05),
	footer=FooterConfig(
		barcode_width=2.8,
		barcode_height=0.12,
		sku_font_size=6.0,
		accent_height=0.04,
		primary_stripe_height=0.04,
	),
	media=MediaConfig(qr_size=0.55, image_size=0.55),
	logo_max_height=0.45,
	include_stock_badge=True,
	max_features=4,
)

#============================================
POSTER_LAYOUT = LayoutConfig(
	margin=0.35,
	font_size=FontSizeConfig(
		store_name=20.0,
		model_name=32.0,
		spec_label=11.0,
		spec_value=13.0,
		financing=12.0,
		description=11.0,
	),
	spacing=SpacingConfig(
		section_gap=0.2,
		after_logo=0.15,
		after_model_name=0.15,
		after_badges=0.1,
		after_price=0.1,
	),
	badge=BadgeConfig(font_size=12.0, padding_x=0.12, padding_y=0.06, radius=0.06, spacing=0.1),
	feature_badge=BadgeConfig(font_size=9.0, padding_x=0.08, padding_y=0.04, radius=0.04, spacing=0.06),
	header=HeaderConfig(height=0.7, font_size=20.0, accent_height=0.05),
	price=PriceConfig(main_font_size=56.0, strike_font_size=20.0, show_box=True, box_height=0.75, box_radius=0.08),
	specs=SpecsConfig(icon_size=0.28, column_gap=0.2, line_height=0.7, accent_width=0.05, padding=0.15, border_radius=0.06),
	info_bar=InfoBarConfig(height=0.6, label_font_size=10.0, value_font_size=12.0, radius=0.06),
	footer=FooterConfig(
		barcode_width=1.8,
		barcode_height=0.3,
		sku_font_size=10.0,
		accent_height=0.1,
		primary_stripe_height=0.03,
	),
	media=MediaConfig(qr_size=0.6, image_size=0.8),
	logo_max_height=0.6,
	include_stock_badge=True,
	max_features=6,
	section_header=SectionHeaderConfig(height=0.4, font_size=18.0),
)

LAYOUT_CONFIGS = {
	CARD_SIZE_SHELF: SHELF_TAG_LAYOUT,
	CARD_SIZE_PRICE: PRICE_CARD_LAYOUT,
	CARD_SIZE_POSTER: POSTER_LAYOUT,
}

SHELF_TAG_MULTI_UP = MultiUpConfig(
	page_width=PAGE_WIDTH,
	page_height=PAGE_HEIGHT,
	columns=4,
	rows=3,
	crop_mark_length=0.1,
	crop_mark_gap=0.02,
	crop_mark_width=0.005,
	crop_mark_gray=0.6,
	caption_font_size=6.0,
	caption_offset=0.15,
)

PRICE_CARD_MULTI_UP = MultiUpConfig(
	page_width=PAGE_WIDTH,
	page_height=PAGE_HEIGHT,
	columns=2,
	rows=1,
	crop_mark_length=0.15,
	crop_mark_gap=0.03,
	crop_mark_width=0.005,
	crop_mark_gray=0.6,
	caption_font_size=6.0,
	caption_offset=0.15,
)

MULTI_UP_CONFIGS = {
	CARD_SIZE_SHELF: SHELF_TAG_MULTI_UP,
	CARD_SIZE_PRICE: PRICE_CARD_MULTI_UP,
}


#============================================
def normalize_card_size(card_size: str) -> str:
	"""
	Normalize a card size key, falling back to the price card.

	Args:
		card_size: Card size key.

	Returns:
		Known card size key.
	"""
	key = (card_size or "").strip().lower()
	if key in CARD_SIZES:
		return key
	return CARD_SIZE_PRICE


#============================================
def get_layout_config(card_size: str) -> LayoutConfig:
	"""
	Get the layout table for a card size.

	Args:
		card_size: Card size key.

	Returns:
		LayoutConfig for the size (price card for unknown sizes).
	"""
	return LAYOUT_CONFIGS[normalize_card_size(card_size)]


#============================================
def get_multi_up_config(card_size: str) -> MultiUpConfig | None:
	"""
	Get the multi-up table for a card size.

	Args:
		card_size: Card size key.

	Returns:
		MultiUpConfig, or None when the size is not tiled.
	"""
	return MULTI_UP_CONFIGS.get(card_size)


#============================================
def inches_to_points(value: float) -> float:
	"""
	Convert inches to points.

	Args:
		value: Inches value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH


#============================================
def points_to_inches(value: float) -> float:
	"""
	Convert points to inches.

	Args:
		value: Points value.

	Returns:
		Inches value.
	"""
	return value / POINTS_PER_INCH


#============================================
def inches_to_pixels(value: float, inch_scale: float = DEFAULT_INCH_SCALE) -> float:
	"""
	Convert inches to preview pixels.
	"""
	return value * inch_scale


#============================================
def get_pdf_font(family: str, bold: bool = False, italic: bool = False) -> str:
	"""
	Map a font family key to a standard PDF font name.

	Args:
		family: PDF family key (helvetica, times, courier).
		bold: Bold flag.
		italic: Italic flag.

	Returns:
		ReportLab font name.
	"""
	fonts = PDF_FONTS.get(family, PDF_FONTS["helvetica"])
	return fonts[(bold, italic)]
