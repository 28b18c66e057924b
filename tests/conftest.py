"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

import pytest


@pytest.fixture
def sample_page_image():
    """Fixture providing a synthetic colophon image with an ISBN line."""
    import cv2
    import numpy as np

    # Create white background
    image = np.ones((200, 600, 3), dtype=np.uint8) * 255

    cv2.putText(
        image,
        "ISBN978-4-00-310101-8",
        (20, 100),
        cv2.FONT_HERSHEY_SIMPLEX,
        1.2,
        (0, 0, 0),
        2,
    )

    return image


@pytest.fixture
def sample_page_file(tmp_path, sample_page_image):
    """Fixture writing the synthetic colophon image to a PNG file."""
    import cv2

    path = tmp_path / "colophon.png"
    cv2.imwrite(str(path), sample_page_image)
    return path
