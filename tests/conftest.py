"""
Pytest configuration for local imports and shared product fixtures.
"""

# Standard Library
import os
import sys

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()

# PIP3 modules
import pytest

# local repo modules
import prebuild_spec_cards as psc
import prebuild_spec_cards.product


SAMPLE_CONFIG_PATH = os.path.abspath(
	os.path.join(os.path.dirname(__file__), "..", "samples", "gaming_build.json")
)


#============================================
@pytest.fixture
def sample_config_path() -> str:
	return SAMPLE_CONFIG_PATH


#============================================
@pytest.fixture
def sample_config() -> psc.product.PrebuildConfig:
	"""
	Fully populated gaming build from the samples directory.
	"""
	return psc.product.load_prebuild_config(SAMPLE_CONFIG_PATH)


#============================================
@pytest.fixture
def minimal_config() -> psc.product.PrebuildConfig:
	"""
	Build with two components and nothing optional.
	"""
	return psc.product.PrebuildConfig(
		model_name="Test Rig",
		price=999.0,
		components=psc.product.ComponentSpec(
			cpu="Intel Core i5-13400F",
			gpu="NVIDIA GeForce RTX 4060",
		),
	)
