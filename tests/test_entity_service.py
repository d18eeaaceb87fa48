"""Tests for the generic entity service."""

from uuid import uuid4

import pytest

from sacristy.db.services import entity_service
from sacristy.entities import ALBUMS, BLOG, CELEBRATIONS, POPUPS, PRIESTS, SCHEDULES, SLIDES
from sacristy.lib.errors import EntityNotFoundError, FormValidationError


def _celebration(name, day="sunday", time="08:00"):
    return {
        "community_name": name,
        "celebrant_name": "Pe. João",
        "time": time,
        "day_of_week": day,
    }


class TestCreateAppend:
    @pytest.mark.asyncio
    async def test_first_in_empty_partition_gets_zero(self, db_session):
        slide = await entity_service.create_entity(
            db_session, SLIDES, {"title": "Natal", "image_url": "/uploads/slides/a.jpg"}
        )
        assert slide.order_index == 0

    @pytest.mark.asyncio
    async def test_appends_after_current_max(self, db_session):
        for title in ("A", "B"):
            await entity_service.create_entity(
                db_session, SLIDES, {"title": title, "image_url": "/x.jpg"}
            )
        third = await entity_service.create_entity(
            db_session, SLIDES, {"title": "C", "image_url": "/x.jpg"}
        )
        assert third.order_index == 2

    @pytest.mark.asyncio
    async def test_gap_after_delete_is_not_reused(self, db_session):
        """Deleting does not renumber; the next insert still goes after the max."""
        albums = [
            await entity_service.create_entity(db_session, ALBUMS, {"name": n})
            for n in ("Festa", "Crisma", "Natal")
        ]
        await entity_service.delete_entity(db_session, ALBUMS, albums[1].id)

        remaining = await entity_service.list_entities(db_session, ALBUMS)
        assert [a.order_index for a in remaining] == [0, 2]

        new = await entity_service.create_entity(db_session, ALBUMS, {"name": "Páscoa"})
        assert new.order_index == 3

    @pytest.mark.asyncio
    async def test_partitioned_append_counts_only_same_partition(self, db_session):
        for name in ("Matriz", "São José", "Santa Rita"):
            await entity_service.create_entity(db_session, CELEBRATIONS, _celebration(name))

        monday = await entity_service.create_entity(
            db_session, CELEBRATIONS, _celebration("Aparecida", day="monday")
        )
        assert monday.order_index == 0

    @pytest.mark.asyncio
    async def test_client_supplied_order_index_is_ignored(self, db_session):
        slide = await entity_service.create_entity(
            db_session, SLIDES, {"title": "A", "image_url": "/x.jpg", "order_index": 99}
        )
        assert slide.order_index == 0

    @pytest.mark.asyncio
    async def test_unordered_type_keeps_default_index_free(self, db_session):
        priest = await entity_service.create_entity(
            db_session, PRIESTS, {"name": "Pe. João", "title": "Pároco"}
        )
        assert priest.is_active is True


class TestValidation:
    @pytest.mark.asyncio
    async def test_missing_required_field_raises_before_insert(self, db_session):
        with pytest.raises(FormValidationError) as exc_info:
            await entity_service.create_entity(db_session, SLIDES, {"title": "Sem imagem"})

        assert exc_info.value.field == "image_url"
        assert await entity_service.list_entities(db_session, SLIDES) == []

    @pytest.mark.asyncio
    async def test_blank_string_counts_as_missing(self, db_session):
        with pytest.raises(FormValidationError):
            await entity_service.create_entity(
                db_session, PRIESTS, {"name": "   ", "title": "Vigário"}
            )


class TestBlogPreparation:
    @pytest.mark.asyncio
    async def test_slug_and_excerpt_are_derived(self, db_session):
        post = await entity_service.create_entity(db_session, BLOG, {
            "title": "Missa de Natal — 2024!",
            "content": "<p>Venha celebrar conosco.</p>",
        })

        assert post.slug == "missa-de-natal-2024"
        assert post.excerpt == "Venha celebrar conosco...."
        assert post.author == "Administrador"

    @pytest.mark.asyncio
    async def test_explicit_slug_is_kept_on_update(self, db_session):
        post = await entity_service.create_entity(db_session, BLOG, {
            "title": "Festa junina",
            "slug": "arraia-2024",
            "content": "Quadrilha",
        })

        updated = await entity_service.update_entity(
            db_session, BLOG, post.id, {"title": "Festa junina da paróquia", "slug": "arraia-2024"}
        )
        assert updated.slug == "arraia-2024"
        assert updated.title == "Festa junina da paróquia"


class TestUpdate:
    @pytest.mark.asyncio
    async def test_changing_partition_appends_to_new_day(self, db_session):
        await entity_service.create_entity(db_session, CELEBRATIONS, _celebration("Matriz", day="monday"))
        sunday = await entity_service.create_entity(db_session, CELEBRATIONS, _celebration("São José"))

        moved = await entity_service.update_entity(
            db_session, CELEBRATIONS, sunday.id, {"day_of_week": "monday"}
        )

        assert moved.day_of_week == "monday"
        assert moved.order_index == 1

    @pytest.mark.asyncio
    async def test_same_partition_keeps_index(self, db_session):
        first = await entity_service.create_entity(db_session, CELEBRATIONS, _celebration("Matriz"))
        second = await entity_service.create_entity(db_session, CELEBRATIONS, _celebration("São José"))

        updated = await entity_service.update_entity(
            db_session, CELEBRATIONS, second.id, {"day_of_week": "sunday", "time": "10:00"}
        )

        assert updated.order_index == 1
        assert updated.time == "10:00"
        assert first.order_index == 0

    @pytest.mark.asyncio
    async def test_missing_entity_raises(self, db_session):
        with pytest.raises(EntityNotFoundError):
            await entity_service.update_entity(db_session, PRIESTS, uuid4(), {"name": "X"})


class TestToggle:
    @pytest.mark.asyncio
    async def test_toggle_flips_only_the_flag(self, db_session):
        popup = await entity_service.create_entity(db_session, POPUPS, {
            "title": "Aviso",
            "content": "Missa cancelada",
            "priority": 3,
        })
        assert popup.is_active is False

        value = await entity_service.toggle_flag(db_session, POPUPS, popup.id)

        reloaded = (await entity_service.list_entities(db_session, POPUPS))[0]
        assert value is True
        assert reloaded.is_active is True
        assert reloaded.title == "Aviso"
        assert reloaded.content == "Missa cancelada"
        assert reloaded.priority == 3

    @pytest.mark.asyncio
    async def test_toggle_published_post_twice_restores(self, db_session):
        post = await entity_service.create_entity(
            db_session, BLOG, {"title": "Aviso", "content": "Texto", "is_published": True}
        )
        assert await entity_service.toggle_flag(db_session, BLOG, post.id) is False
        assert await entity_service.toggle_flag(db_session, BLOG, post.id) is True

    @pytest.mark.asyncio
    async def test_type_without_toggle_rejected(self, db_session):
        from sacristy.entities import PHOTOS

        with pytest.raises(ValueError):
            await entity_service.toggle_flag(db_session, PHOTOS, uuid4())


class TestListing:
    @pytest.mark.asyncio
    async def test_schedules_sorted_sunday_first_then_time(self, db_session):
        for day, time in (("saturday", "18:00"), ("sunday", "10:00"), ("sunday", "07:00")):
            await entity_service.create_entity(db_session, SCHEDULES, {
                "day_of_week": day, "time": time, "description": "Missa",
            })

        rows = await entity_service.list_entities(db_session, SCHEDULES)

        assert [(r.day_of_week, r.time) for r in rows] == [
            ("sunday", "07:00"),
            ("sunday", "10:00"),
            ("saturday", "18:00"),
        ]

    @pytest.mark.asyncio
    async def test_popups_sorted_by_priority(self, db_session):
        for title, priority in (("Baixa", 1), ("Alta", 5)):
            await entity_service.create_entity(db_session, POPUPS, {
                "title": title, "content": "x", "priority": priority,
            })

        rows = await entity_service.list_entities(db_session, POPUPS)
        assert [r.title for r in rows] == ["Alta", "Baixa"]


class TestSetImage:
    @pytest.mark.asyncio
    async def test_returns_previous_public_id(self, db_session):
        slide = await entity_service.create_entity(db_session, SLIDES, {
            "title": "A", "image_url": "/old.jpg", "image_public_id": "slides/old",
        })

        entity, previous = await entity_service.set_image(
            db_session, SLIDES, slide.id, "/new.jpg", "slides/new"
        )

        assert previous == "slides/old"
        assert entity.image_url == "/new.jpg"
        assert entity.image_public_id == "slides/new"
