"""
Hex color parsing and tint helpers.
"""

# Standard Library
import math
import re


HEX_PATTERN = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


#============================================
def hex_to_rgb(value: str) -> tuple[int, int, int]:
	"""
	Parse a hex color string into RGB integers.

	Args:
		value: Color string like "#AABBCC" or "aabbcc".

	Returns:
		Tuple of (r, g, b) in 0-255 range, black when the string is invalid.
	"""
	match = HEX_PATTERN.match((value or "").strip())
	if match is None:
		return (0, 0, 0)
	red = int(match.group(1), 16)
	green = int(match.group(2), 16)
	blue = int(match.group(3), 16)
	return (red, green, blue)


#============================================
def hex_to_rgb_float(value: str) -> tuple[float, float, float]:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string.

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range.
	"""
	red, green, blue = hex_to_rgb(value)
	return (red / 255.0, green / 255.0, blue / 255.0)


#============================================
def rgb_to_hex(red: int, green: int, blue: int) -> str:
	"""
	Format RGB integers as a lowercase hex string.
	"""
	return f"#{red:02x}{green:02x}{blue:02x}"


#============================================
def _round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


#============================================
def _clamp_channel(value: int) -> int:
	return max(0, min(255, value))


#============================================
def lighten_color(value: str, percent: float) -> str:
	"""
	Blend a color toward white.

	Args:
		value: Base hex color.
		percent: Blend amount, 0.0 keeps the color and 1.0 gives white.

	Returns:
		Lightened hex color.
	"""
	channels = hex_to_rgb(value)
	lightened = [
		_clamp_channel(_round_half_up(channel + (255 - channel) * percent))
		for channel in channels
	]
	return rgb_to_hex(*lightened)


#============================================
def darken_color(value: str, percent: float) -> str:
	"""
	Scale a color toward black.

	Args:
		value: Base hex color.
		percent: Darken amount, 0.0 keeps the color and 1.0 gives black.

	Returns:
		Darkened hex color.
	"""
	channels = hex_to_rgb(value)
	darkened = [
		_clamp_channel(_round_half_up(channel * (1.0 - percent)))
		for channel in channels
	]
	return rgb_to_hex(*darkened)
