"""
Declarative card layout model.

A CardLayout is an ordered tuple of layout elements. The list order is the
top-to-bottom paint order; only the footer accent is anchored to the card
bottom. Both the PDF renderer and the preview renderer walk the same tree.

All distances are inches and all font sizes are points.
"""

# Standard Library
import dataclasses
import itertools
import math

# local repo modules
import prebuild_spec_cards as psc
import prebuild_spec_cards.product


ThemeColors = psc.product.ThemeColors
PrebuildConfig = psc.product.PrebuildConfig

ELEMENT_KINDS = (
	"header",
	"text",
	"badge",
	"badge-row",
	"image",
	"price",
	"financing",
	"specs",
	"info-bar",
	"barcode",
	"qrcode",
	"sku",
	"divider",
	"container",
	"footer-accent",
)


#============================================
class ElementIdGenerator:
	"""
	Hand out "{prefix}-{n}" ids, counting from 1.

	One generator lives in each BuilderContext so ids are unique within a
	render pass and two passes never share a counter.
	"""

	def __init__(self) -> None:
		self._counter = itertools.count(1)

	def next_id(self, prefix: str) -> str:
		return f"{prefix}-{next(self._counter)}"

	def reset(self) -> None:
		self._counter = itertools.count(1)


_default_id_generator = ElementIdGenerator()


#============================================
def generate_element_id(prefix: str) -> str:
	"""
	Generate an id from the shared module-level counter.

	Args:
		prefix: Id prefix such as "header".

	Returns:
		Id string like "header-1".
	"""
	return _default_id_generator.next_id(prefix)


#============================================
def reset_element_id_counter() -> None:
	"""
	Reset the shared module-level id counter.
	"""
	_default_id_generator.reset()


#============================================
# styles
#============================================

@dataclasses.dataclass(frozen=True)
class Size:
	width: float
	height: float


@dataclasses.dataclass(frozen=True, kw_only=True)
class TextStyle:
	font_size: float
	color: str
	bold: bool = False
	italic: bool = False
	align: str = "center"
	line_height: float | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class BoxStyle:
	background_color: str | None = None
	border_radius: float = 0.0
	padding: float = 0.0
	height: float = 0.0


@dataclasses.dataclass(frozen=True, kw_only=True)
class BadgeStyle:
	background_color: str
	text_color: str
	font_size: float
	padding_x: float
	padding_y: float
	border_radius: float


@dataclasses.dataclass(frozen=True)
class Badge:
	text: str
	background_color: str
	text_color: str


@dataclasses.dataclass(frozen=True, kw_only=True)
class BadgeRowStyle:
	font_size: float
	padding_x: float
	padding_y: float
	border_radius: float
	spacing: float


@dataclasses.dataclass(frozen=True, kw_only=True)
class HeaderStyle:
	height: float
	background_color: str
	text_color: str
	font_size: float
	accent_height: float = 0.0
	accent_color: str | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class PriceStyle:
	main_font_size: float
	strike_font_size: float
	price_color: str
	strike_color: str
	show_box: bool
	box_color: str | None = None
	box_radius: float = 0.0
	box_height: float = 0.0


@dataclasses.dataclass(frozen=True)
class BrandIconRef:
	src: str
	name: str


@dataclasses.dataclass(frozen=True)
class SpecItem:
	key: str
	label: str
	value: str
	brand_icon: BrandIconRef | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class SpecsStyle:
	label_font_size: float
	value_font_size: float
	label_color: str
	value_color: str
	icon_size: float
	line_height: float
	background_color: str | None = None
	accent_width: float = 0.0
	accent_color: str | None = None
	border_radius: float = 0.0
	padding: float = 0.0


@dataclasses.dataclass(frozen=True)
class InfoItem:
	label: str
	value: str


@dataclasses.dataclass(frozen=True, kw_only=True)
class InfoBarStyle:
	height: float
	background_color: str
	label_font_size: float
	value_font_size: float
	label_color: str
	value_color: str
	border_radius: float


@dataclasses.dataclass(frozen=True, kw_only=True)
class DividerStyle:
	color: str
	thickness: float


@dataclasses.dataclass(frozen=True, kw_only=True)
class FooterAccentStyle:
	height: float
	primary_color: str
	accent_color: str | None = None
	accent_height: float = 0.0


#============================================
# elements
#============================================

@dataclasses.dataclass(frozen=True, kw_only=True)
class LayoutElement:
	id: str
	visible: bool = True
	kind: str = dataclasses.field(init=False, default="")


@dataclasses.dataclass(frozen=True, kw_only=True)
class HeaderElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="header")
	text: str
	style: HeaderStyle


@dataclasses.dataclass(frozen=True, kw_only=True)
class TextElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="text")
	text: str
	style: TextStyle
	max_lines: int | None = None
	strikethrough: bool = False
	# filled bar drawn behind the text, used for section titles
	box: BoxStyle | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class BadgeElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="badge")
	text: str
	style: BadgeStyle


@dataclasses.dataclass(frozen=True, kw_only=True)
class BadgeRowElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="badge-row")
	badges: tuple[Badge, ...]
	style: BadgeRowStyle
	align: str = "center"


@dataclasses.dataclass(frozen=True, kw_only=True)
class ImageElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="image")
	src: str
	alt: str
	size: Size
	object_fit: str = "contain"


@dataclasses.dataclass(frozen=True, kw_only=True)
class PriceElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="price")
	current_price: float
	original_price: float | None
	show_strikethrough: bool
	style: PriceStyle


@dataclasses.dataclass(frozen=True, kw_only=True)
class FinancingElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="financing")
	monthly_amount: str
	months: int
	apr: float
	show_apr: bool
	style: TextStyle


@dataclasses.dataclass(frozen=True, kw_only=True)
class SpecsElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="specs")
	specs: tuple[SpecItem, ...]
	layout: str
	style: SpecsStyle


@dataclasses.dataclass(frozen=True, kw_only=True)
class InfoBarElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="info-bar")
	items: tuple[InfoItem, ...]
	style: InfoBarStyle


@dataclasses.dataclass(frozen=True, kw_only=True)
class BarcodeElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="barcode")
	value: str
	size: Size


@dataclasses.dataclass(frozen=True, kw_only=True)
class QRCodeElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="qrcode")
	url: str
	size: float


@dataclasses.dataclass(frozen=True, kw_only=True)
class SkuElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="sku")
	value: str
	style: TextStyle


@dataclasses.dataclass(frozen=True, kw_only=True)
class DividerElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="divider")
	style: DividerStyle


@dataclasses.dataclass(frozen=True, kw_only=True)
class ContainerElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="container")
	children: tuple[LayoutElement, ...]
	direction: str = "row"
	gap: float = 0.0
	align: str = "center"
	justify: str = "center"
	style: BoxStyle | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class FooterAccentElement(LayoutElement):
	kind: str = dataclasses.field(init=False, default="footer-accent")
	style: FooterAccentStyle


#============================================
# layout and builder context
#============================================

@dataclasses.dataclass(frozen=True)
class Background:
	color: str
	pattern: str = "solid"


@dataclasses.dataclass(frozen=True)
class CardLayout:
	card_size: str
	dimensions: Size
	colors: ThemeColors
	background: Background
	font_family: str
	elements: tuple[LayoutElement, ...]


@dataclasses.dataclass(frozen=True)
class AsyncAssets:
	qr_code_image: str = ""
	barcode_image: str = ""


@dataclasses.dataclass
class BuilderContext:
	config: PrebuildConfig
	card_size: str
	colors: ThemeColors
	brand_icons: list = dataclasses.field(default_factory=list)
	assets: AsyncAssets | None = None
	ids: ElementIdGenerator = dataclasses.field(default_factory=ElementIdGenerator)


#============================================
def split_spec_columns(specs) -> tuple[tuple[SpecItem, ...], tuple[SpecItem, ...]]:
	"""
	Split spec items for a two-column layout.

	Args:
		specs: Ordered spec items.

	Returns:
		Tuple of (left, right); the left column takes the extra item.
	"""
	items = tuple(specs)
	middle = math.ceil(len(items) / 2)
	return (items[:middle], items[middle:])


#============================================
def iter_elements(elements):
	"""
	Yield elements depth first, descending into containers.
	"""
	for element in elements:
		yield element
		if isinstance(element, ContainerElement):
			yield from iter_elements(element.children)


#============================================
def format_financing_text(element: FinancingElement) -> str:
	"""
	Build the financing sentence shown under the price.

	Args:
		element: Financing element.

	Returns:
		Text like "As low as $62.50/mo for 24 months".
	"""
	text = f"As low as ${element.monthly_amount}/mo for {element.months} months"
	if element.show_apr and element.apr > 0:
		text += f" @ {element.apr:g}% APR"
	return text


#============================================
def format_sku_text(element: SkuElement) -> str:
	return f"SKU: {element.value}"
