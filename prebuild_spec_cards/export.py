"""
Top-level PDF generation and export for single cards, multi-up sheets and
every card size in one run.
"""

# Standard Library
import dataclasses
import pathlib

# local repo modules
import prebuild_spec_cards as psc
import prebuild_spec_cards.assets
import prebuild_spec_cards.builders
import prebuild_spec_cards.config
import prebuild_spec_cards.imposition
import prebuild_spec_cards.render


LayoutConfig = psc.config.LayoutConfig
PrintDocument = psc.render.PrintDocument
GenerationWarnings = psc.assets.GenerationWarnings
ImpositionResult = psc.imposition.ImpositionResult

ALL_CARD_SIZES = psc.config.ALL_CARD_SIZES
DEFAULT_MODEL_NAME = psc.config.DEFAULT_MODEL_NAME
GENERATION_FAILED_MESSAGE = "Failed to generate PDF. Please try again."


#============================================
class GenerationError(Exception):
	"""
	A whole document could not be generated.
	"""

	def __init__(self, card_size: str, message: str = GENERATION_FAILED_MESSAGE) -> None:
		super().__init__(message)
		self.card_size = card_size
		self.message = message


class BatchExportError(GenerationError):
	"""
	One size failed during a multi-size export; earlier sizes were kept.
	"""

	def __init__(self, card_size: str, written=None, message: str = GENERATION_FAILED_MESSAGE) -> None:
		super().__init__(card_size, message)
		self.written = list(written or [])


@dataclasses.dataclass
class MultiUpDocument:
	document: PrintDocument
	result: ImpositionResult
	caption: str


#============================================
async def _render_card(config, card_size: str, brand_icons, layout_config: LayoutConfig | None):
	assets = await psc.assets.prepare_async_assets(config)
	ctx = psc.builders.make_builder_context(config, card_size, brand_icons, assets)
	layout = psc.builders.build_card_layout(ctx, layout_config)
	warnings = GenerationWarnings()
	visual = config.visual_settings
	if visual.show_qr_code and visual.qr_code_url and not assets.qr_code_image:
		warnings.qr_code_failed = True
	if config.sku and not assets.barcode_image:
		warnings.barcode_failed = True
	title = f"{config.model_name or DEFAULT_MODEL_NAME} - {psc.config.CARD_SIZES[layout.card_size].name}"
	document = await psc.render.render_layout_to_pdf(layout, layout_config, warnings, title)
	return document


#============================================
async def generate_card_pdf(
	config,
	card_size: str,
	brand_icons=None,
	layout_config: LayoutConfig | None = None,
) -> PrintDocument:
	"""
	Generate a one-card PDF sized to the card.

	Assets are prepared fresh for the call.

	Args:
		config: PrebuildConfig.
		card_size: Card size key.
		brand_icons: Optional list of BrandIcon.
		layout_config: Optional layout table override.

	Returns:
		PrintDocument.

	Raises:
		GenerationError: The document could not be assembled.
	"""
	try:
		return await _render_card(config, card_size, brand_icons, layout_config)
	except GenerationError:
		raise
	except Exception as error:
		raise GenerationError(card_size) from error


#============================================
async def generate_multi_up_pdf(
	config,
	card_size: str,
	brand_icons=None,
	include_crop_marks: bool = True,
	layout_config: LayoutConfig | None = None,
	verbose: bool = False,
) -> MultiUpDocument:
	"""
	Generate a letter page filled with copies of one card.

	The card is rendered once and placed into every slot.

	Args:
		config: PrebuildConfig.
		card_size: "shelf" or "price".
		brand_icons: Optional list of BrandIcon.
		include_crop_marks: Draw crop marks at the grid intersections.
		layout_config: Optional layout table override.
		verbose: Print placement progress.

	Returns:
		MultiUpDocument.

	Raises:
		ValueError: The card size has no multi-up layout.
		GenerationError: The document could not be assembled.
	"""
	multi_up = psc.config.get_multi_up_config(card_size)
	if multi_up is None:
		raise ValueError(f"Multi-up is not supported for card size: {card_size}")
	grid = psc.imposition.compute_multi_up_grid(card_size, multi_up)
	try:
		tile = await _render_card(config, card_size, brand_icons, layout_config)
		caption = psc.imposition.build_multi_up_caption(config.model_name, grid)
		data, result = psc.imposition.impose_cards(
			tile.data,
			grid,
			multi_up,
			include_crop_marks=include_crop_marks,
			caption=caption,
			verbose=verbose,
		)
	except Exception as error:
		raise GenerationError(card_size) from error
	document = PrintDocument(
		data=data,
		page_width=grid.page_width,
		page_height=grid.page_height,
		title=caption,
		warnings=tile.warnings,
	)
	return MultiUpDocument(document=document, result=result, caption=caption)


#============================================
def build_export_filename(model_name: str, card_size: str) -> str:
	"""
	Build the download filename, e.g. "Apex-Pro-Price-Card.pdf".

	Args:
		model_name: Model name, may be empty.
		card_size: Card size key.

	Returns:
		File name with spaces replaced by dashes.
	"""
	model = model_name or "PC-Build"
	size_name = psc.config.CARD_SIZES[psc.config.normalize_card_size(card_size)].name
	name = f"{model}-{size_name}".replace(" ", "-")
	name = name.replace("/", "-").replace("\\", "-")
	return f"{name}.pdf"


#============================================
async def export_card(
	config,
	card_size: str,
	output_dir: pathlib.Path | str,
	brand_icons=None,
	layout_config: LayoutConfig | None = None,
) -> tuple[pathlib.Path, PrintDocument]:
	"""
	Generate one card and write it to the output directory.

	Returns:
		Tuple of (written path, PrintDocument).
	"""
	document = await generate_card_pdf(config, card_size, brand_icons, layout_config)
	path = pathlib.Path(output_dir) / build_export_filename(config.model_name, card_size)
	document.save(path)
	return (path, document)


#============================================
async def export_all_sizes(
	config,
	output_dir: pathlib.Path | str,
	brand_icons=None,
	card_sizes=ALL_CARD_SIZES,
	verbose: bool = False,
) -> list[tuple[pathlib.Path, PrintDocument]]:
	"""
	Export every card size one after another.

	Stops at the first size that fails; files already written stay on disk.

	Args:
		config: PrebuildConfig.
		output_dir: Output directory.
		brand_icons: Optional list of BrandIcon.
		card_sizes: Sizes to export, in order.
		verbose: Print a progress bar.

	Returns:
		List of (path, PrintDocument) in export order.

	Raises:
		BatchExportError: A size failed to render or to write; carries the size and the written paths.
	"""
	written: list[tuple[pathlib.Path, PrintDocument]] = []
	total = len(card_sizes)
	for index, card_size in enumerate(card_sizes, start=1):
		try:
			path, document = await export_card(config, card_size, output_dir, brand_icons)
		except (GenerationError, OSError) as error:
			raise BatchExportError(card_size, [item[0] for item in written]) from error
		written.append((path, document))
		if verbose:
			psc.imposition.print_progress("Exporting sizes", index, total)
	if verbose and total:
		print()
	return written
