"""
Brand detection for component names and brand icon loading.
"""

# Standard Library
import base64
import dataclasses
import mimetypes
import pathlib
import re


IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp")


@dataclasses.dataclass(frozen=True)
class BrandIcon:
	name: str
	# data URL or file path
	image: str


def _patterns(*expressions: str) -> tuple[re.Pattern, ...]:
	return tuple(re.compile(expression, re.IGNORECASE) for expression in expressions)


BRAND_PATTERNS = (
	("Intel", _patterns(r"\bintel\b", r"\bcore\s*i[3579]\b", r"\barc\s*a\d")),
	("AMD", _patterns(r"\bamd\b", r"\bryzen\b", r"\bradeon\b", r"\brx\s*\d")),
	("NVIDIA", _patterns(r"\bnvidia\b", r"\bgeforce\b", r"\brtx\b", r"\bgtx\b")),
	("Corsair", _patterns(r"\bcorsair\b")),
	("G.Skill", _patterns(r"\bg\.?skill\b", r"\btrident\b", r"\bripjaws\b")),
	("Kingston", _patterns(r"\bkingston\b", r"\bfury\b", r"\bhyperx\b")),
	("Samsung", _patterns(r"\bsamsung\b")),
	("Western Digital", _patterns(r"\bwestern\s*digital\b", r"\bwd\b", r"\bsn\d{3}\b")),
	("Seagate", _patterns(r"\bseagate\b", r"\bbarracuda\b", r"\bfirecuda\b")),
	("Crucial", _patterns(r"\bcrucial\b", r"\bmx\d{3}\b", r"\bp\d\s*plus\b")),
	("ASUS", _patterns(r"\basus\b", r"\brog\b", r"\btuf\b", r"\bstrix\b")),
	("MSI", _patterns(r"\bmsi\b", r"\bmeg\b", r"\bmpg\b", r"\bmag\b")),
	("Gigabyte", _patterns(r"\bgigabyte\b", r"\baorus\b")),
	("ASRock", _patterns(r"\basrock\b", r"\btaichi\b")),
	("EVGA", _patterns(r"\bevga\b")),
	("Seasonic", _patterns(r"\bseasonic\b", r"\bfocus\b", r"\bprime\b")),
	("be quiet!", _patterns(r"\bbe\s*quiet\b", r"\bdark\s*rock\b", r"\bpure\s*base\b")),
	("Noctua", _patterns(r"\bnoctua\b", r"\bnh-\w")),
	("Cooler Master", _patterns(r"\bcooler\s*master\b", r"\bhyper\s*\d{3}\b")),
	("NZXT", _patterns(r"\bnzxt\b", r"\bkraken\b")),
	("Lian Li", _patterns(r"\blian\s*li\b", r"\blancool\b", r"\bo11\b")),
	("Fractal Design", _patterns(r"\bfractal\b", r"\bmeshify\b", r"\btorrent\b", r"\bnorth\b")),
	("Phanteks", _patterns(r"\bphanteks\b", r"\beclipse\b", r"\benthoo\b")),
	("Thermaltake", _patterns(r"\bthermaltake\b", r"\btoughram\b")),
	("SilverStone", _patterns(r"\bsilverstone\b")),
	("Arctic", _patterns(r"\barctic\b", r"\bliquid\s*freezer\b")),
	("EK", _patterns(r"\bek\b", r"\bekwb\b")),
	("Sabrent", _patterns(r"\bsabrent\b", r"\brocket\b")),
	("SK hynix", _patterns(r"\bsk\s*hynix\b", r"\bhynix\b")),
	("Team Group", _patterns(r"\bteam\s*group\b", r"\bt-force\b")),
	("PNY", _patterns(r"\bpny\b")),
	("Zotac", _patterns(r"\bzotac\b")),
	("Sapphire", _patterns(r"\bsapphire\b", r"\bnitro\b", r"\bpulse\b")),
	("PowerColor", _patterns(r"\bpowercolor\b", r"\bred\s*devil\b")),
	("XFX", _patterns(r"\bxfx\b")),
)


#============================================
def detect_brand(text: str) -> str | None:
	"""
	Detect the brand named in a component string.

	Args:
		text: Free-text component value like "AMD Ryzen 7 7800X3D".

	Returns:
		Brand name, or None when nothing matches.
	"""
	if not text:
		return None
	for brand, patterns in BRAND_PATTERNS:
		for pattern in patterns:
			if pattern.search(text):
				return brand
	return None


#============================================
def find_brand_icon(value: str, brand_icons) -> BrandIcon | None:
	"""
	Find the icon for the brand named in a component value.

	Args:
		value: Component value.
		brand_icons: Available BrandIcon entries.

	Returns:
		Matching BrandIcon (case-insensitive name match) or None.
	"""
	brand = detect_brand(value)
	if brand is None:
		return None
	target = brand.lower()
	for icon in brand_icons:
		if icon.name.lower() == target:
			return icon
	return None


#============================================
def encode_data_url(path: pathlib.Path) -> str:
	"""
	Read a file into a base64 data URL.

	Args:
		path: File path.

	Returns:
		Data URL string.
	"""
	mime_type, _ = mimetypes.guess_type(path.name)
	if mime_type is None:
		mime_type = "application/octet-stream"
	payload = base64.b64encode(path.read_bytes()).decode("ascii")
	return f"data:{mime_type};base64,{payload}"


#============================================
def load_brand_icons(directory: pathlib.Path | str) -> list[BrandIcon]:
	"""
	Load brand icons from a directory of images.

	The icon name is the file stem, so "NVIDIA.png" serves the NVIDIA brand.

	Args:
		directory: Directory holding icon images.

	Returns:
		List of BrandIcon entries sorted by name.
	"""
	root = pathlib.Path(directory)
	if not root.is_dir():
		raise ValueError(f"Brand icon directory not found: {root}")
	icons: list[BrandIcon] = []
	for path in sorted(root.iterdir()):
		if not path.is_file() or path.suffix.lower() not in IMAGE_SUFFIXES:
			continue
		icons.append(BrandIcon(name=path.stem, image=encode_data_url(path)))
	return icons
