"""
CLI entry points for spec card generation.
"""

# Standard Library
import argparse
import asyncio
import pathlib
import time

# local repo modules
import prebuild_spec_cards as psc
import prebuild_spec_cards.brands
import prebuild_spec_cards.config
import prebuild_spec_cards.export
import prebuild_spec_cards.preview
import prebuild_spec_cards.product


ALL_CARD_SIZES = psc.config.ALL_CARD_SIZES
CARD_SIZE_PRICE = psc.config.CARD_SIZE_PRICE
GenerationError = psc.export.GenerationError


#============================================
def parse_args(argv=None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Generate prebuilt PC spec cards as print-ready PDFs.")
	parser.add_argument("config_path", help="Product configuration JSON file.")

	card_group = parser.add_argument_group("Card")
	card_group.add_argument("-s", "--size", dest="card_size", choices=ALL_CARD_SIZES, default=CARD_SIZE_PRICE, help="Card size.")
	card_group.add_argument("-b", "--brand-icons", dest="brand_icons_dir", default=None, help="Directory of brand icon images.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-d", "--output-dir", dest="output_dir", default=".", help="Output directory for generated files.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-m", "--multi-up", dest="multi_up", action="store_true", help="Tile the card onto a letter page.")
	behavior_group.add_argument("-M", "--no-multi-up", dest="multi_up", action="store_false", help="Write a single card.")
	behavior_group.add_argument("-c", "--crop-marks", dest="crop_marks", action="store_true", help="Draw crop marks on multi-up pages.")
	behavior_group.add_argument("-C", "--no-crop-marks", dest="crop_marks", action="store_false", help="Disable crop marks.")
	behavior_group.add_argument("-a", "--all-sizes", dest="all_sizes", action="store_true", help="Export every card size.")
	behavior_group.add_argument("-p", "--preview", dest="preview", action="store_true", help="Also write an HTML preview.")
	behavior_group.add_argument("-P", "--no-preview", dest="preview", action="store_false", help="Skip the HTML preview.")

	parser.set_defaults(
		multi_up=False,
		crop_marks=True,
		all_sizes=False,
		preview=False,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def print_warnings(warnings) -> None:
	for message in warnings.format_warnings():
		print(f"Warning: {message}")


#============================================
def resolve_output_path(args: argparse.Namespace, config, card_size: str, suffix: str = "") -> pathlib.Path:
	"""
	Pick the output path for a single document.

	Args:
		args: Parsed argparse namespace.
		config: PrebuildConfig.
		card_size: Card size key.
		suffix: Extra name part placed before ".pdf".

	Returns:
		Output path.
	"""
	if args.output_path:
		return pathlib.Path(args.output_path)
	filename = psc.export.build_export_filename(config.model_name, card_size)
	if suffix:
		filename = filename[: -len(".pdf")] + f"-{suffix}.pdf"
	return pathlib.Path(args.output_dir) / filename


#============================================
async def write_preview(args: argparse.Namespace, config, card_size: str, brand_icons) -> pathlib.Path:
	node = await psc.preview.render_preview(config, card_size, brand_icons)
	title = psc.export.build_export_filename(config.model_name, card_size)[: -len(".pdf")]
	page = psc.preview.wrap_preview_page(psc.preview.render_node_html(node), title)
	path = pathlib.Path(args.output_dir) / f"{title}.html"
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(page, encoding="utf-8")
	return path


#============================================
async def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run generation from a configuration file to PDF output.

	Args:
		args: Parsed argparse namespace.
	"""
	print("Prebuilt PC spec card pipeline")
	print(f"Config: {args.config_path}")
	print(f"Card size: {'all' if args.all_sizes else args.card_size}")
	print(f"Multi-up: {args.multi_up}")
	if args.multi_up:
		print(f"Crop marks: {args.crop_marks}")
	print(f"Preview: {args.preview}")

	start_time = time.perf_counter()
	config = psc.product.load_prebuild_config(args.config_path)
	brand_icons = []
	if args.brand_icons_dir:
		brand_icons = psc.brands.load_brand_icons(args.brand_icons_dir)
		print(f"Brand icons loaded: {len(brand_icons)}")

	render_start = time.perf_counter()
	if args.all_sizes:
		results = await psc.export.export_all_sizes(config, args.output_dir, brand_icons, verbose=True)
		for path, document in results:
			print(f"PDF written: {path}")
			print_warnings(document.warnings)
	elif args.multi_up:
		sheet = await psc.export.generate_multi_up_pdf(
			config,
			args.card_size,
			brand_icons,
			include_crop_marks=args.crop_marks,
			verbose=True,
		)
		path = sheet.document.save(resolve_output_path(args, config, args.card_size, "multi-up"))
		result = sheet.result
		print(f"Cards placed: {result.cards_placed} ({result.columns}x{result.rows})")
		print(f"Margins: {result.margin_x:.3f} in x {result.margin_y:.3f} in")
		print(f"PDF written: {path}")
		print_warnings(sheet.document.warnings)
	else:
		document = await psc.export.generate_card_pdf(config, args.card_size, brand_icons)
		path = document.save(resolve_output_path(args, config, args.card_size))
		print(f"PDF written: {path}")
		print_warnings(document.warnings)
	render_end = time.perf_counter()

	if args.preview:
		sizes = ALL_CARD_SIZES if args.all_sizes else (args.card_size,)
		for card_size in sizes:
			preview_path = await write_preview(args, config, card_size, brand_icons)
			print(f"Preview written: {preview_path}")

	total_time = time.perf_counter() - start_time
	print(
		"Timing: render={:.2f}s total={:.2f}s".format(
			render_end - render_start,
			total_time,
		)
	)


#============================================
def main(argv=None) -> int:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		asyncio.run(run_pipeline(args))
	except GenerationError as error:
		print(f"Error ({error.card_size}): {error.message}")
		return 1
	except ValueError as error:
		print(f"Error: {error}")
		return 1
	return 0
