"""
Multi-up imposition of rendered cards onto letter pages.
"""

# Standard Library
import dataclasses
import io

# PIP3 modules
import pypdf
import reportlab.pdfgen.canvas

# local repo modules
import prebuild_spec_cards as psc
import prebuild_spec_cards.config


MultiUpConfig = psc.config.MultiUpConfig

POINTS_PER_INCH = psc.config.POINTS_PER_INCH
PROGRESS_BAR_WIDTH = psc.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = psc.config.PROGRESS_UPDATE_EVERY
CAPTION_FONT = "Helvetica"


@dataclasses.dataclass(frozen=True)
class MultiUpGrid:
	card_size: str
	page_width: float
	page_height: float
	card_width: float
	card_height: float
	columns: int
	rows: int
	margin_x: float
	margin_y: float

	@property
	def cards_per_page(self) -> int:
		return self.columns * self.rows

	def slot_origin(self, index: int) -> tuple[float, float]:
		"""
		Top-left corner of a slot in inches from the page top-left.

		Slots fill row by row, left to right.
		"""
		row = index // self.columns
		col = index % self.columns
		x = self.margin_x + col * self.card_width
		top = self.margin_y + row * self.card_height
		return (x, top)


@dataclasses.dataclass(frozen=True)
class CropMark:
	x0: float
	y0: float
	x1: float
	y1: float


@dataclasses.dataclass
class ImpositionResult:
	cards_placed: int
	cards_per_page: int
	columns: int
	rows: int
	margin_x: float
	margin_y: float
	pages: int
	crop_marks: int


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def compute_multi_up_grid(card_size: str, config: MultiUpConfig | None = None) -> MultiUpGrid:
	"""
	Center a grid of cards on the page with equal margins.

	Args:
		card_size: Card size key.
		config: Optional multi-up table override.

	Returns:
		MultiUpGrid.

	Raises:
		ValueError: The size has no multi-up table or the grid does not fit.
	"""
	if config is None:
		config = psc.config.get_multi_up_config(card_size)
	if config is None:
		raise ValueError(f"Multi-up is not supported for card size: {card_size}")
	if config.columns <= 0 or config.rows <= 0:
		raise ValueError("Multi-up grid needs at least one column and one row")
	size = psc.config.CARD_SIZES[psc.config.normalize_card_size(card_size)]
	grid_width = config.columns * size.width
	grid_height = config.rows * size.height
	if grid_width > config.page_width or grid_height > config.page_height:
		raise ValueError(
			f"{config.columns}x{config.rows} grid of {size.width}x{size.height} in cards "
			f"does not fit a {config.page_width}x{config.page_height} in page"
		)
	return MultiUpGrid(
		card_size=card_size,
		page_width=config.page_width,
		page_height=config.page_height,
		card_width=size.width,
		card_height=size.height,
		columns=config.columns,
		rows=config.rows,
		margin_x=(config.page_width - grid_width) / 2.0,
		margin_y=(config.page_height - grid_height) / 2.0,
	)


#============================================
def compute_crop_marks(grid: MultiUpGrid, config: MultiUpConfig) -> list[CropMark]:
	"""
	Compute crop mark segments for every grid intersection.

	Each segment runs along a cut line, starting crop_mark_gap away from the
	intersection. Intersections on the grid boundary get marks pointing out
	of the grid; interior intersections get a short arm in all four
	directions.

	Args:
		grid: Multi-up grid.
		config: Multi-up table with mark length and gap.

	Returns:
		List of CropMark segments in inches from the page top-left.
	"""
	length = config.crop_mark_length
	gap = config.crop_mark_gap
	marks: list[CropMark] = []
	for row in range(grid.rows + 1):
		for col in range(grid.columns + 1):
			x = grid.margin_x + col * grid.card_width
			y = grid.margin_y + row * grid.card_height
			on_left = col == 0
			on_right = col == grid.columns
			on_top = row == 0
			on_bottom = row == grid.rows
			interior = not (on_left or on_right or on_top or on_bottom)
			if on_left or interior:
				marks.append(CropMark(x - gap, y, x - gap - length, y))
			if on_right or interior:
				marks.append(CropMark(x + gap, y, x + gap + length, y))
			if on_top or interior:
				marks.append(CropMark(x, y - gap, x, y - gap - length))
			if on_bottom or interior:
				marks.append(CropMark(x, y + gap, x, y + gap + length))
	return marks


#============================================
def build_multi_up_caption(model_name: str, grid: MultiUpGrid) -> str:
	"""
	Build the page caption, e.g. "Apex - Shelf Tags (4x3 = 12 per page)".
	"""
	size_name = psc.config.CARD_SIZES[psc.config.normalize_card_size(grid.card_size)].name
	model = model_name or psc.config.DEFAULT_MODEL_NAME
	return f"{model} - {size_name}s ({grid.columns}x{grid.rows} = {grid.cards_per_page} per page)"


#============================================
def build_crop_mark_overlay(
	grid: MultiUpGrid,
	config: MultiUpConfig,
	marks: list[CropMark],
	caption: str,
) -> pypdf.PageObject:
	"""
	Build a PDF overlay page with crop marks and the caption.

	Args:
		grid: Multi-up grid.
		config: Multi-up table.
		marks: Crop mark segments, may be empty.
		caption: Caption text, may be empty.

	Returns:
		PDF page object.
	"""
	buffer = io.BytesIO()
	page_width = grid.page_width * POINTS_PER_INCH
	page_height = grid.page_height * POINTS_PER_INCH
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	gray = config.crop_mark_gray
	pdf.setStrokeColorRGB(gray, gray, gray)
	pdf.setLineWidth(config.crop_mark_width * POINTS_PER_INCH)
	for mark in marks:
		pdf.line(
			mark.x0 * POINTS_PER_INCH,
			page_height - mark.y0 * POINTS_PER_INCH,
			mark.x1 * POINTS_PER_INCH,
			page_height - mark.y1 * POINTS_PER_INCH,
		)
	if caption:
		pdf.setFillColorRGB(gray, gray, gray)
		pdf.setFont(CAPTION_FONT, config.caption_font_size)
		pdf.drawCentredString(page_width / 2.0, config.caption_offset * POINTS_PER_INCH, caption)
	pdf.save()
	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	return reader.pages[0]


#============================================
def impose_cards(
	tile_pdf: bytes,
	grid: MultiUpGrid,
	config: MultiUpConfig,
	include_crop_marks: bool = True,
	caption: str = "",
	verbose: bool = False,
) -> tuple[bytes, ImpositionResult]:
	"""
	Place one rendered card into every slot of a letter page.

	The card tile is read once and merged slot by slot.

	Args:
		tile_pdf: One-page PDF bytes of the card.
		grid: Multi-up grid.
		config: Multi-up table.
		include_crop_marks: Whether to draw crop marks.
		caption: Caption stamped at the page bottom.
		verbose: Print a progress bar while placing cards.

	Returns:
		Tuple of (PDF bytes, ImpositionResult).
	"""
	writer = pypdf.PdfWriter()
	page_width = grid.page_width * POINTS_PER_INCH
	page_height = grid.page_height * POINTS_PER_INCH

	reader = pypdf.PdfReader(io.BytesIO(tile_pdf))
	tile_page = reader.pages[0]

	page = pypdf.PageObject.create_blank_page(width=page_width, height=page_height)
	writer.add_page(page)
	page = writer.pages[-1]

	total = grid.cards_per_page
	for index in range(total):
		x, top = grid.slot_origin(index)
		cell_x = x * POINTS_PER_INCH
		cell_y = page_height - (top + grid.card_height) * POINTS_PER_INCH
		transform = pypdf.Transformation().translate(cell_x, cell_y)
		page.merge_transformed_page(tile_page, transform)
		if verbose and ((index + 1) % PROGRESS_UPDATE_EVERY == 0 or index + 1 == total):
			print_progress("Placing cards", index + 1, total)
	if verbose:
		print()

	marks: list[CropMark] = []
	if include_crop_marks:
		marks = compute_crop_marks(grid, config)
	if marks or caption:
		page.merge_page(build_crop_mark_overlay(grid, config, marks, caption))

	buffer = io.BytesIO()
	writer.write(buffer)

	result = ImpositionResult(
		cards_placed=total,
		cards_per_page=grid.cards_per_page,
		columns=grid.columns,
		rows=grid.rows,
		margin_x=grid.margin_x,
		margin_y=grid.margin_y,
		pages=1,
		crop_marks=len(marks),
	)
	return (buffer.getvalue(), result)
