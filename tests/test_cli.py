import pathlib

import pypdf

import prebuild_spec_cards as psc
import prebuild_spec_cards.cli


#============================================
def test_parse_args_defaults(sample_config_path: str) -> None:
	args = psc.cli.parse_args([sample_config_path])
	assert args.card_size == "price"
	assert not args.multi_up
	assert args.crop_marks
	assert not args.all_sizes
	assert not args.preview
	assert args.output_dir == "."


#============================================
def test_paired_flags(sample_config_path: str) -> None:
	args = psc.cli.parse_args([sample_config_path, "-m", "-C", "-s", "shelf"])
	assert args.multi_up
	assert not args.crop_marks
	assert args.card_size == "shelf"


#============================================
def test_single_card_run(sample_config_path: str, tmp_path: pathlib.Path, capsys) -> None:
	"""
	The pipeline writes the card and prints its parameters and timing.
	"""
	exit_code = psc.cli.main([sample_config_path, "-s", "shelf", "-d", str(tmp_path)])
	assert exit_code == 0
	output = capsys.readouterr().out
	assert "Card size: shelf" in output
	assert "Timing:" in output
	path = tmp_path / "Apex-Vortex-RTX-Shelf-Tag.pdf"
	assert len(pypdf.PdfReader(path).pages) == 1


#============================================
def test_multi_up_run_with_preview(sample_config_path: str, tmp_path: pathlib.Path, capsys) -> None:
	exit_code = psc.cli.main([sample_config_path, "-s", "price", "-m", "-p", "-d", str(tmp_path)])
	assert exit_code == 0
	output = capsys.readouterr().out
	assert "Cards placed: 2 (2x1)" in output
	assert (tmp_path / "Apex-Vortex-RTX-Price-Card-multi-up.pdf").exists()
	html_page = (tmp_path / "Apex-Vortex-RTX-Price-Card.html").read_text(encoding="utf-8")
	assert "Apex Vortex RTX" in html_page


#============================================
def test_explicit_output_path(sample_config_path: str, tmp_path: pathlib.Path) -> None:
	output_path = tmp_path / "nested" / "card.pdf"
	assert psc.cli.main([sample_config_path, "-o", str(output_path)]) == 0
	assert output_path.exists()


#============================================
def test_all_sizes_run(sample_config_path: str, tmp_path: pathlib.Path) -> None:
	assert psc.cli.main([sample_config_path, "-a", "-d", str(tmp_path)]) == 0
	assert len(list(tmp_path.glob("*.pdf"))) == 3


#============================================
def test_poster_multi_up_prints_error(sample_config_path: str, tmp_path: pathlib.Path, capsys) -> None:
	exit_code = psc.cli.main([sample_config_path, "-s", "poster", "-m", "-d", str(tmp_path)])
	assert exit_code == 1
	output = capsys.readouterr().out
	assert "Error: Multi-up is not supported for card size: poster" in output
	assert not list(tmp_path.glob("*.pdf"))


#============================================
def test_bad_config_prints_error(tmp_path: pathlib.Path, capsys) -> None:
	config_path = tmp_path / "bad.json"
	config_path.write_text('{"price": "cheap"}', encoding="utf-8")
	assert psc.cli.main([str(config_path), "-d", str(tmp_path)]) == 1
	assert "Error: price must be a number" in capsys.readouterr().out


#============================================
def test_unwritable_output_dir_prints_error(sample_config_path: str, tmp_path: pathlib.Path, capsys) -> None:
	blocker = tmp_path / "blocker"
	blocker.write_text("not a directory", encoding="utf-8")
	assert psc.cli.main([sample_config_path, "-a", "-d", str(blocker / "out")]) == 1
	assert "Error (shelf):" in capsys.readouterr().out
