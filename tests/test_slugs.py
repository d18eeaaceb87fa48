"""Tests for slug generation."""

from sacristy.lib.slugs import resolve_slug, slugify


class TestSlugify:
    def test_strips_punctuation_and_accents(self):
        assert slugify("Missa de Natal — 2024!") == "missa-de-natal-2024"

    def test_accented_letters_are_folded(self):
        assert slugify("Celebração de São João") == "celebracao-de-sao-joao"

    def test_collapses_spaces_and_dashes(self):
        assert slugify("  Festa --  Junina  ") == "festa-junina"

    def test_empty(self):
        assert slugify("") == ""
        assert slugify("!!!") == ""


class TestResolveSlug:
    def test_explicit_slug_wins(self):
        assert resolve_slug("meu-slug", "Outro título") == "meu-slug"

    def test_blank_slug_is_generated(self):
        assert resolve_slug("", "Semana Santa") == "semana-santa"
        assert resolve_slug(None, "Semana Santa") == "semana-santa"
        assert resolve_slug("   ", "Semana Santa") == "semana-santa"
