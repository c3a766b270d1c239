"""
Product configuration model, lookup tables and price helpers.

The configuration document is the camelCase JSON object the configuration
store persists. Parsing fills in defaults for missing keys and rejects values
of the wrong type with ValueError.
"""

# Standard Library
import dataclasses
import json
import math
import pathlib


COMPONENT_KEYS = ("cpu", "gpu", "ram", "storage", "motherboard", "psu", "case", "cooling")
SHELF_COMPONENT_KEYS = ("cpu", "gpu", "ram", "storage")

COMPONENT_LABELS = {
	"cpu": "CPU",
	"gpu": "GPU",
	"ram": "RAM",
	"storage": "Storage",
	"motherboard": "Motherboard",
	"psu": "PSU",
	"case": "Case",
	"cooling": "Cooling",
}


@dataclasses.dataclass(frozen=True)
class ThemeColors:
	primary: str
	accent: str
	price_color: str


THEME_PRESETS = {
	"gaming": ThemeColors(primary="#dc2626", accent="#1f2937", price_color="#dc2626"),
	"workstation": ThemeColors(primary="#2563eb", accent="#1e3a5f", price_color="#2563eb"),
	"budget": ThemeColors(primary="#16a34a", accent="#14532d", price_color="#16a34a"),
	"minimal": ThemeColors(primary="#374151", accent="#111827", price_color="#059669"),
}
COLOR_THEMES = tuple(THEME_PRESETS) + ("custom",)


@dataclasses.dataclass(frozen=True)
class ConditionInfo:
	label: str
	short_label: str
	color: str
	bg_color: str
	description: str


CONDITION_CONFIG = {
	"new": ConditionInfo("Brand New", "NEW", "#16a34a", "#dcfce7", "Factory sealed, never opened"),
	"preowned": ConditionInfo("Pre-Owned", "PREOWNED", "#7c3aed", "#ede9fe", "Previously used, tested working"),
	"refurbished": ConditionInfo("Refurbished", "REFURB", "#2563eb", "#dbeafe", "Restored to working condition"),
	"open_box": ConditionInfo("Open Box", "OPEN BOX", "#ca8a04", "#fef9c3", "Opened but unused or like-new"),
	"certified_preowned": ConditionInfo(
		"Certified Pre-Owned", "CPO", "#0891b2", "#cffafe", "Professionally inspected & certified"
	),
}


@dataclasses.dataclass(frozen=True)
class StockStatusInfo:
	label: str
	color: str
	bg_color: str


STOCK_STATUS_CONFIG = {
	"in_stock": StockStatusInfo("In Stock", "#16a34a", "#dcfce7"),
	"low_stock": StockStatusInfo("Low Stock", "#ca8a04", "#fef9c3"),
	"out_of_stock": StockStatusInfo("Out of Stock", "#dc2626", "#fee2e2"),
	"on_order": StockStatusInfo("On Order", "#2563eb", "#dbeafe"),
}


@dataclasses.dataclass(frozen=True)
class BackgroundPatternInfo:
	name: str
	description: str
	css: str


BACKGROUND_PATTERNS = {
	"solid": BackgroundPatternInfo("Solid", "Clean solid background", "solid"),
	"gradient": BackgroundPatternInfo(
		"Gradient",
		"Subtle color gradient",
		"linear-gradient(135deg, #f5f7fa 0%, #c3cfe2 100%)",
	),
	"geometric": BackgroundPatternInfo(
		"Geometric",
		"Modern geometric shapes",
		"repeating-linear-gradient(45deg, transparent, transparent 10px, "
		"rgba(0,0,0,0.03) 10px, rgba(0,0,0,0.03) 20px)",
	),
	"circuit": BackgroundPatternInfo(
		"Circuit",
		"Tech circuit board pattern",
		"linear-gradient(90deg, rgba(0,0,0,0.02) 1px, transparent 1px), "
		"linear-gradient(rgba(0,0,0,0.02) 1px, transparent 1px)",
	),
	"dots": BackgroundPatternInfo(
		"Dots",
		"Dotted pattern",
		"radial-gradient(circle, rgba(0,0,0,0.05) 1px, transparent 1px)",
	),
}


@dataclasses.dataclass(frozen=True)
class FontFamilyInfo:
	name: str
	pdf_family: str
	css: str


FONT_FAMILIES = {
	"helvetica": FontFamilyInfo("Helvetica", "helvetica", "Helvetica, Arial, sans-serif"),
	"arial": FontFamilyInfo("Arial", "helvetica", "Arial, Helvetica, sans-serif"),
	"georgia": FontFamilyInfo("Georgia", "times", 'Georgia, "Times New Roman", serif'),
	"courier": FontFamilyInfo("Courier", "courier", '"Courier New", Courier, monospace'),
	"impact": FontFamilyInfo("Impact", "helvetica", 'Impact, "Arial Black", sans-serif'),
	"verdana": FontFamilyInfo("Verdana", "helvetica", "Verdana, Geneva, sans-serif"),
}


@dataclasses.dataclass
class ComponentSpec:
	cpu: str = ""
	gpu: str = ""
	ram: str = ""
	storage: str = ""
	motherboard: str = ""
	psu: str = ""
	case: str = ""
	cooling: str = ""

	def get(self, key: str) -> str:
		return getattr(self, key)


@dataclasses.dataclass
class SaleInfo:
	enabled: bool = False
	original_price: float = 0.0
	badge_text: str = "SALE"


@dataclasses.dataclass
class FinancingInfo:
	enabled: bool = False
	months: int = 24
	apr: float = 0.0


@dataclasses.dataclass
class VisualSettings:
	background_pattern: str = "solid"
	font_family: str = "helvetica"
	show_qr_code: bool = False
	qr_code_url: str = ""
	product_image: str | None = None


@dataclasses.dataclass
class PrebuildConfig:
	model_name: str = ""
	price: float = 0.0
	components: ComponentSpec = dataclasses.field(default_factory=ComponentSpec)
	store_name: str = ""
	store_logo: str | None = None
	sku: str = ""
	os: str = ""
	warranty: str = ""
	wifi: str = ""
	build_tier: str = ""
	features: list[str] = dataclasses.field(default_factory=list)
	description: str = ""
	color_theme: str = "minimal"
	custom_colors: ThemeColors = THEME_PRESETS["minimal"]
	stock_status: str | None = None
	sale_info: SaleInfo = dataclasses.field(default_factory=SaleInfo)
	financing_info: FinancingInfo = dataclasses.field(default_factory=FinancingInfo)
	visual_settings: VisualSettings = dataclasses.field(default_factory=VisualSettings)
	condition: str | None = None


#============================================
def get_theme_colors(config: PrebuildConfig) -> ThemeColors:
	"""
	Resolve the theme colors for a configuration.

	Args:
		config: Product configuration.

	Returns:
		Preset colors, or the custom colors for the custom theme.
	"""
	if config.color_theme == "custom":
		return config.custom_colors
	return THEME_PRESETS.get(config.color_theme, THEME_PRESETS["minimal"])


#============================================
def format_price(value: float, show_cents: bool = True) -> str:
	"""
	Format a price with a dollar sign and thousands separators.

	Args:
		value: Price value.
		show_cents: Whether to show two decimals.

	Returns:
		Formatted price like "$1,499.00".
	"""
	if value is None or math.isnan(value):
		value = 0.0
	if show_cents:
		return f"${value:,.2f}"
	return f"${value:,.0f}"


#============================================
def parse_price(text: str) -> float:
	"""
	Parse a price string like "$1,499.99".

	Args:
		text: Price string.

	Returns:
		Price value, 0.0 when the string is not a number.
	"""
	if not text:
		return 0.0
	cleaned = text.replace("$", "").replace(",", "").strip()
	try:
		value = float(cleaned)
	except ValueError:
		return 0.0
	if math.isnan(value):
		return 0.0
	return value


#============================================
def calculate_monthly_payment(price: float, months: int, apr: float) -> str:
	"""
	Compute the monthly financing payment.

	Args:
		price: Total price.
		months: Term length in months.
		apr: Annual percentage rate.

	Returns:
		Payment with two decimals, or "" when price or months is not positive.
	"""
	if price <= 0 or months <= 0:
		return ""
	if apr == 0:
		return f"{price / months:.2f}"
	monthly_rate = apr / 100.0 / 12.0
	growth = math.pow(1.0 + monthly_rate, months)
	payment = price * (monthly_rate * growth) / (growth - 1.0)
	return f"{payment:.2f}"


#============================================
def calculate_discount_percent(original_price: float, sale_price: float) -> int:
	"""
	Compute the whole-number discount percentage.

	Args:
		original_price: Price before the sale.
		sale_price: Current price.

	Returns:
		Rounded percentage, 0 when there is no discount.
	"""
	if original_price <= 0 or sale_price < 0:
		return 0
	if sale_price >= original_price:
		return 0
	return int(math.floor((original_price - sale_price) / original_price * 100.0 + 0.5))


#============================================
def _get_str(data: dict, key: str, default: str) -> str:
	value = data.get(key, default)
	if value is None:
		return default
	if not isinstance(value, str):
		raise ValueError(f"{key} must be a string, got {type(value).__name__}")
	return value


#============================================
def _get_optional_str(data: dict, key: str) -> str | None:
	value = data.get(key)
	if value is None or value == "":
		return None
	if not isinstance(value, str):
		raise ValueError(f"{key} must be a string or null, got {type(value).__name__}")
	return value


#============================================
def _get_number(data: dict, key: str, default: float) -> float:
	value = data.get(key, default)
	if value is None:
		return default
	# bool is an int subclass
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		raise ValueError(f"{key} must be a number, got {type(value).__name__}")
	return float(value)


#============================================
def _get_bool(data: dict, key: str, default: bool) -> bool:
	value = data.get(key, default)
	if value is None:
		return default
	if not isinstance(value, bool):
		raise ValueError(f"{key} must be a boolean, got {type(value).__name__}")
	return value


#============================================
def _get_dict(data: dict, key: str) -> dict:
	value = data.get(key)
	if value is None:
		return {}
	if not isinstance(value, dict):
		raise ValueError(f"{key} must be an object, got {type(value).__name__}")
	return value


#============================================
def _get_choice(data: dict, key: str, choices, default: str | None) -> str | None:
	value = _get_optional_str(data, key)
	if value is None:
		return default
	if value not in choices:
		raise ValueError(f"{key} must be one of {', '.join(choices)}, got {value!r}")
	return value


#============================================
def parse_theme_colors(data: dict) -> ThemeColors:
	"""
	Parse a customColors object.
	"""
	fallback = THEME_PRESETS["minimal"]
	return ThemeColors(
		primary=_get_str(data, "primary", fallback.primary),
		accent=_get_str(data, "accent", fallback.accent),
		price_color=_get_str(data, "priceColor", fallback.price_color),
	)


#============================================
def parse_prebuild_config(data: dict) -> PrebuildConfig:
	"""
	Build a PrebuildConfig from the camelCase JSON document.

	Args:
		data: Decoded JSON object.

	Returns:
		PrebuildConfig with defaults for missing keys.

	Raises:
		ValueError: A value has the wrong type or an unknown enum key.
	"""
	if not isinstance(data, dict):
		raise ValueError("Configuration must be a JSON object")

	components_data = _get_dict(data, "components")
	components = ComponentSpec(
		**{key: _get_str(components_data, key, "") for key in COMPONENT_KEYS}
	)

	features = data.get("features") or []
	if not isinstance(features, list) or not all(isinstance(item, str) for item in features):
		raise ValueError("features must be a list of strings")

	sale_data = _get_dict(data, "saleInfo")
	sale_info = SaleInfo(
		enabled=_get_bool(sale_data, "enabled", False),
		original_price=_get_number(sale_data, "originalPrice", 0.0),
		badge_text=_get_str(sale_data, "badgeText", "SALE"),
	)

	financing_data = _get_dict(data, "financingInfo")
	financing_info = FinancingInfo(
		enabled=_get_bool(financing_data, "enabled", False),
		months=int(_get_number(financing_data, "months", 24)),
		apr=_get_number(financing_data, "apr", 0.0),
	)

	visual_data = _get_dict(data, "visualSettings")
	visual_settings = VisualSettings(
		background_pattern=_get_choice(visual_data, "backgroundPattern", BACKGROUND_PATTERNS, "solid"),
		font_family=_get_choice(visual_data, "fontFamily", FONT_FAMILIES, "helvetica"),
		show_qr_code=_get_bool(visual_data, "showQrCode", False),
		qr_code_url=_get_str(visual_data, "qrCodeUrl", ""),
		product_image=_get_optional_str(visual_data, "productImage"),
	)

	config = PrebuildConfig(
		model_name=_get_str(data, "modelName", ""),
		price=_get_number(data, "price", 0.0),
		components=components,
		store_name=_get_str(data, "storeName", ""),
		store_logo=_get_optional_str(data, "storeLogo"),
		sku=_get_str(data, "sku", ""),
		os=_get_str(data, "os", ""),
		warranty=_get_str(data, "warranty", ""),
		wifi=_get_str(data, "wifi", ""),
		build_tier=_get_str(data, "buildTier", ""),
		features=list(features),
		description=_get_str(data, "description", ""),
		color_theme=_get_choice(data, "colorTheme", COLOR_THEMES, "minimal"),
		custom_colors=parse_theme_colors(_get_dict(data, "customColors")),
		stock_status=_get_choice(data, "stockStatus", STOCK_STATUS_CONFIG, None),
		sale_info=sale_info,
		financing_info=financing_info,
		visual_settings=visual_settings,
		condition=_get_choice(data, "condition", CONDITION_CONFIG, None),
	)
	return config


#============================================
def load_prebuild_config(path: pathlib.Path | str) -> PrebuildConfig:
	"""
	Load a product configuration from a JSON file.

	Args:
		path: JSON file path.

	Returns:
		PrebuildConfig.
	"""
	with pathlib.Path(path).open("r", encoding="utf-8") as handle:
		data = json.load(handle)
	return parse_prebuild_config(data)
