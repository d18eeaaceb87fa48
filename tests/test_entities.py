"""Tests for the entity catalogue."""

import pytest

from sacristy.db.services.media_service import validate_upload
from sacristy.entities import BLOG, ENTITIES, MB, PARISH


class TestImageLimits:
    @pytest.mark.parametrize(
        ("name", "limit"),
        [
            ("blog", 10 * MB),
            ("priests", 5 * MB),
            ("slides", 10 * MB),
            ("albums", 5 * MB),
            ("photos", 1 * MB),
            ("timeline", 5 * MB),
            ("popups", 10 * MB),
            ("parish", 5 * MB),
        ],
    )
    def test_limit_per_tab(self, name, limit):
        assert ENTITIES[name].image.max_bytes == limit

    @pytest.mark.parametrize("name", ["celebrations", "schedules", "pastorals"])
    def test_tabs_without_images(self, name):
        assert ENTITIES[name].image is None

    def test_blog_accepts_eight_megabyte_image(self):
        validate_upload("post.jpg", "image/jpeg", 8 * MB, BLOG.image.max_bytes)

    def test_parish_accepts_four_megabyte_logo(self):
        validate_upload("logo.png", "image/png", 4 * MB, PARISH.image.max_bytes)
