"""
Gemeinsame Test-Konfiguration
"""
import os
import sys
import tempfile

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

# Log-Dateien der Tests nicht ins Arbeitsverzeichnis schreiben
os.environ.setdefault('ADDNOISE_LOG_DIR', tempfile.mkdtemp(prefix='addnoise_logs_'))


@pytest.fixture
def color_image():
    """8x6 BGR Testbild mit Farbverlauf"""
    rows, cols = 8, 6
    image = np.zeros((rows, cols, 3), dtype=np.uint8)
    image[..., 0] = np.arange(cols, dtype=np.uint8) * 40
    image[..., 1] = (np.arange(rows, dtype=np.uint8) * 30)[:, None]
    image[..., 2] = 128
    return image


@pytest.fixture
def gray_image():
    """2x2 einkanaliges Bild, alle Pixel 0"""
    return np.zeros((2, 2), dtype=np.uint8)
