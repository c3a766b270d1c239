"""
Asset generation and decoding: QR codes, barcodes and images.

Asset helpers never raise into rendering. A failure returns an empty value
and the caller records it in GenerationWarnings.
"""

# Standard Library
import asyncio
import base64
import binascii
import dataclasses
import io
import pathlib

# PIP3 modules
import PIL.Image
import qrcode
import qrcode.constants
import qrcode.exceptions
import reportlab.graphics.barcode
import reportlab.graphics.renderSVG

# local repo modules
import prebuild_spec_cards as psc
import prebuild_spec_cards.product
import prebuild_spec_cards.schema


AsyncAssets = psc.schema.AsyncAssets
PrebuildConfig = psc.product.PrebuildConfig

QR_CODE_SIZE = 128
QR_CODE_MARGIN = 1
BARCODE_MAX_LENGTH = 80
BARCODE_BAR_HEIGHT = 50.0
BARCODE_BAR_WIDTH = 2.0


@dataclasses.dataclass
class GenerationWarnings:
	missing_logo: bool = False
	missing_product_image: bool = False
	qr_code_failed: bool = False
	barcode_failed: bool = False
	brand_icons_failed: list[str] = dataclasses.field(default_factory=list)
	overflow: bool = False

	def has_warnings(self) -> bool:
		return (
			self.missing_logo
			or self.missing_product_image
			or self.qr_code_failed
			or self.barcode_failed
			or bool(self.brand_icons_failed)
			or self.overflow
		)

	def format_warnings(self) -> list[str]:
		messages: list[str] = []
		if self.missing_logo:
			messages.append("Store logo failed to load")
		if self.missing_product_image:
			messages.append("Product image failed to load")
		if self.qr_code_failed:
			messages.append("QR code generation failed")
		if self.barcode_failed:
			messages.append("Barcode generation failed")
		if self.brand_icons_failed:
			messages.append(f"Brand icons failed: {', '.join(self.brand_icons_failed)}")
		if self.overflow:
			messages.append("Content ran past the printable area")
		return messages


#============================================
def is_valid_barcode(text: str) -> bool:
	"""
	Check whether text can be encoded as a Code128 barcode.

	Args:
		text: Barcode payload.

	Returns:
		True for 1 to 80 ASCII characters.
	"""
	if not text or len(text) > BARCODE_MAX_LENGTH:
		return False
	return text.isascii()


#============================================
def _png_data_url(image: PIL.Image.Image) -> str:
	buffer = io.BytesIO()
	image.save(buffer, format="PNG")
	payload = base64.b64encode(buffer.getvalue()).decode("ascii")
	return f"data:image/png;base64,{payload}"


#============================================
def render_qr_code_image(text: str, size: int = QR_CODE_SIZE) -> PIL.Image.Image:
	"""
	Render a QR code to a square black-on-white PIL image.

	Args:
		text: QR payload.
		size: Output edge length in pixels.

	Returns:
		RGB PIL image.
	"""
	qr = qrcode.QRCode(
		version=None,
		error_correction=qrcode.constants.ERROR_CORRECT_M,
		box_size=10,
		border=QR_CODE_MARGIN,
	)
	qr.add_data(text)
	qr.make(fit=True)
	image = qr.make_image(fill_color="black", back_color="white").convert("RGB")
	return image.resize((size, size), resample=PIL.Image.Resampling.NEAREST)


#============================================
async def generate_qr_code_data_url(text: str, size: int = QR_CODE_SIZE) -> str:
	"""
	Generate a QR code PNG data URL.

	Args:
		text: QR payload, usually a URL.
		size: Output edge length in pixels.

	Returns:
		Data URL, or "" when text is empty or generation fails.
	"""
	if not text:
		return ""
	try:
		image = await asyncio.to_thread(render_qr_code_image, text, size)
	except (ValueError, qrcode.exceptions.DataOverflowError):
		return ""
	return _png_data_url(image)


#============================================
def render_barcode_svg(text: str) -> str:
	"""
	Render a Code128 barcode with its human readable value as SVG text.

	Args:
		text: Barcode payload.

	Returns:
		SVG document string.
	"""
	drawing = reportlab.graphics.barcode.createBarcodeDrawing(
		"Code128",
		value=text,
		barHeight=BARCODE_BAR_HEIGHT,
		barWidth=BARCODE_BAR_WIDTH,
		humanReadable=True,
		quiet=True,
	)
	return reportlab.graphics.renderSVG.drawToString(drawing)


#============================================
async def generate_barcode_data_url(text: str) -> str:
	"""
	Generate a Code128 barcode SVG data URL.

	Args:
		text: Barcode payload, usually the SKU.

	Returns:
		Data URL, or "" when the text is not encodable.
	"""
	if not is_valid_barcode(text):
		return ""
	try:
		svg = await asyncio.to_thread(render_barcode_svg, text)
	except (ValueError, KeyError):
		return ""
	payload = base64.b64encode(svg.encode("utf-8")).decode("ascii")
	return f"data:image/svg+xml;base64,{payload}"


#============================================
def decode_image_source(src: str) -> PIL.Image.Image:
	"""
	Decode an image from a data URL or a file path.

	Args:
		src: "data:<mime>;base64,<payload>" or a filesystem path.

	Returns:
		Loaded PIL image.

	Raises:
		ValueError: The source cannot be decoded.
	"""
	if src.startswith("data:"):
		header, _, payload = src.partition(",")
		if ";base64" not in header:
			raise ValueError("Only base64 data URLs are supported")
		try:
			raw = base64.b64decode(payload, validate=False)
		except binascii.Error as error:
			raise ValueError(f"Invalid base64 image payload: {error}") from error
		stream = io.BytesIO(raw)
	else:
		path = pathlib.Path(src)
		if not path.is_file():
			raise ValueError(f"Image not found: {src}")
		stream = path
	try:
		image = PIL.Image.open(stream)
		image.load()
	except (OSError, PIL.UnidentifiedImageError, PIL.Image.DecompressionBombError) as error:
		raise ValueError(f"Unreadable image: {error}") from error
	return image


#============================================
async def load_image(src: str) -> PIL.Image.Image | None:
	"""
	Decode an image in a worker thread.

	Args:
		src: Data URL or file path.

	Returns:
		PIL image, or None when decoding fails.
	"""
	if not src:
		return None
	try:
		return await asyncio.to_thread(decode_image_source, src)
	except ValueError:
		return None


#============================================
async def prepare_async_assets(config: PrebuildConfig) -> AsyncAssets:
	"""
	Resolve the QR code and barcode images before building a layout.

	Generation runs one asset at a time.

	Args:
		config: Product configuration.

	Returns:
		AsyncAssets with empty strings for assets that were not produced.
	"""
	qr_code_image = ""
	visual = config.visual_settings
	if visual.show_qr_code and visual.qr_code_url:
		qr_code_image = await generate_qr_code_data_url(visual.qr_code_url)
	barcode_image = ""
	if config.sku:
		barcode_image = await generate_barcode_data_url(config.sku)
	return AsyncAssets(qr_code_image=qr_code_image, barcode_image=barcode_image)
