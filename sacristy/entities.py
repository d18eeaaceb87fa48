"""Registry of the record types managed from the admin panel.

Each :class:`EntitySchema` tells the generic service and the controller
factory how to list, validate, order and toggle one table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable

from sacristy.db.models import (
    BlogPost,
    Celebration,
    Parish,
    Pastoral,
    Photo,
    PhotoAlbum,
    Priest,
    Schedule,
    Slide,
    TimelineEvent,
    UrgentPopup,
)
from sacristy.db.models.photo import PHOTO_CATEGORIES
from sacristy.lib.slugs import resolve_slug
from sacristy.lib.weekdays import DAYS_OF_WEEK, day_order

MB = 1024 * 1024

CELEBRATION_TYPES = (("Missa", "Missa"), ("Celebração", "Celebração"))

PHOTO_CATEGORY_LABELS = {
    "history": "História",
    "events": "Eventos",
    "celebrations": "Celebrações",
    "community": "Comunidade",
}


@dataclass(frozen=True)
class FieldSpec:
    """One editable column.

    ``kind`` drives both the form widget and the parsing of the submitted
    value: text, textarea, html, url, time, int, bool, choice, album, hidden.
    """

    name: str
    label: str
    kind: str = "text"
    required: bool = False
    choices: tuple[tuple[str, str], ...] = ()
    default: Any = None


@dataclass(frozen=True)
class ImageSpec:
    url_field: str
    folder: str
    max_bytes: int = 5 * MB
    public_id_field: str = "image_public_id"


@dataclass(frozen=True)
class EntitySchema:
    name: str
    model: type
    label: str
    label_plural: str
    title_field: str
    fields: tuple[FieldSpec, ...]
    order_by: Callable[[type], list]
    list_columns: tuple[str, ...] = ()
    ordered: bool = False
    partition_key: str | None = None
    toggle_field: str | None = None
    image: ImageSpec | None = None
    prepare: Callable[[dict[str, Any], Any], dict[str, Any]] | None = None
    icon: str = "file"

    @property
    def required_fields(self) -> list[FieldSpec]:
        return [f for f in self.fields if f.required]

    def get_field(self, name: str) -> FieldSpec | None:
        return next((f for f in self.fields if f.name == name), None)

    def title_of(self, entity: Any) -> str:
        return str(getattr(entity, self.title_field, "") or "")


_TAG_RE = re.compile(r"<[^>]*>")

EXCERPT_LENGTH = 200


def make_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    """Plain-text preview of HTML content."""
    text = _TAG_RE.sub("", content or "").strip()
    return f"{text[:length]}..." if text else ""


def prepare_blog_post(values: dict[str, Any], existing: Any) -> dict[str, Any]:
    """Fill the slug and excerpt of a post when the editor left them blank."""
    title = values.get("title") or (existing.title if existing else "")
    slug = values.get("slug") or (existing.slug if existing else None)
    values["slug"] = resolve_slug(slug, title)
    if not values.get("excerpt"):
        content = values.get("content") or (existing.content if existing else "")
        values["excerpt"] = make_excerpt(content)
    if not values.get("author"):
        values["author"] = (existing.author if existing else "") or "Administrador"
    return values


_DAY_CHOICES = DAYS_OF_WEEK

BLOG = EntitySchema(
    name="blog",
    model=BlogPost,
    label="Post",
    label_plural="Blog",
    title_field="title",
    icon="pen-tool",
    fields=(
        FieldSpec("title", "Título", required=True),
        FieldSpec("slug", "Slug"),
        FieldSpec("content", "Conteúdo", kind="html", required=True),
        FieldSpec("excerpt", "Resumo", kind="textarea"),
        FieldSpec("featured_image", "Imagem destacada", kind="url"),
        FieldSpec("image_public_id", "", kind="hidden"),
        FieldSpec("author", "Autor", default="Administrador"),
        FieldSpec("is_published", "Publicado", kind="bool", default=False),
    ),
    order_by=lambda m: [m.created_at.desc()],
    list_columns=("title", "author", "is_published"),
    toggle_field="is_published",
    image=ImageSpec("featured_image", folder="blog", max_bytes=10 * MB),
    prepare=prepare_blog_post,
)

PRIESTS = EntitySchema(
    name="priests",
    model=Priest,
    label="Padre",
    label_plural="Padres",
    title_field="name",
    icon="user",
    fields=(
        FieldSpec("name", "Nome", required=True),
        FieldSpec("title", "Título", required=True),
        FieldSpec("photo_url", "Foto", kind="url"),
        FieldSpec("image_public_id", "", kind="hidden"),
        FieldSpec("short_bio", "Biografia curta", kind="textarea", default=""),
        FieldSpec("full_bio", "Biografia completa", kind="html", default=""),
        FieldSpec("ordination_year", "Ano de ordenação", kind="int"),
        FieldSpec("parish_since", "Na paróquia desde", kind="int"),
        FieldSpec("is_active", "Ativo", kind="bool", default=True),
    ),
    order_by=lambda m: [m.created_at.asc()],
    list_columns=("name", "title", "is_active"),
    toggle_field="is_active",
    image=ImageSpec("photo_url", folder="priests"),
)

CELEBRATIONS = EntitySchema(
    name="celebrations",
    model=Celebration,
    label="Celebração",
    label_plural="Celebrações",
    title_field="community_name",
    icon="calendar",
    fields=(
        FieldSpec("day_of_week", "Dia da semana", kind="choice", required=True,
                  choices=_DAY_CHOICES, default="sunday"),
        FieldSpec("community_name", "Comunidade", required=True),
        FieldSpec("celebrant_name", "Celebrante", required=True),
        FieldSpec("celebration_type", "Tipo", kind="choice", choices=CELEBRATION_TYPES,
                  default="Missa"),
        FieldSpec("time", "Horário", kind="time", required=True),
        FieldSpec("is_active", "Ativa", kind="bool", default=True),
    ),
    order_by=lambda m: [day_order(m.day_of_week), m.order_index, m.created_at],
    list_columns=("day_of_week", "time", "community_name", "celebrant_name", "celebration_type"),
    ordered=True,
    partition_key="day_of_week",
    toggle_field="is_active",
)

SCHEDULES = EntitySchema(
    name="schedules",
    model=Schedule,
    label="Horário",
    label_plural="Horários",
    title_field="description",
    icon="clock",
    fields=(
        FieldSpec("day_of_week", "Dia da semana", kind="choice", required=True,
                  choices=_DAY_CHOICES),
        FieldSpec("time", "Horário", kind="time", required=True),
        FieldSpec("description", "Descrição", required=True),
        FieldSpec("is_active", "Ativo", kind="bool", default=True),
    ),
    order_by=lambda m: [day_order(m.day_of_week), m.time],
    list_columns=("day_of_week", "time", "description", "is_active"),
    toggle_field="is_active",
)

PASTORALS = EntitySchema(
    name="pastorals",
    model=Pastoral,
    label="Pastoral",
    label_plural="Pastorais",
    title_field="name",
    icon="users",
    fields=(
        FieldSpec("name", "Nome", required=True),
        FieldSpec("coordinator", "Coordenador(a)", default=""),
        FieldSpec("description", "Descrição", kind="textarea", default=""),
        FieldSpec("contact_phone", "Telefone", default=""),
        FieldSpec("is_active", "Ativa", kind="bool", default=True),
    ),
    order_by=lambda m: [m.order_index, m.created_at],
    list_columns=("name", "coordinator", "contact_phone"),
    ordered=True,
    toggle_field="is_active",
)

SLIDES = EntitySchema(
    name="slides",
    model=Slide,
    label="Slide",
    label_plural="Slides",
    title_field="title",
    icon="image",
    fields=(
        FieldSpec("title", "Título", required=True),
        FieldSpec("description", "Descrição", kind="textarea", default=""),
        FieldSpec("image_url", "Imagem", kind="url", required=True),
        FieldSpec("image_public_id", "", kind="hidden"),
        FieldSpec("is_active", "Ativo", kind="bool", default=True),
    ),
    order_by=lambda m: [m.order_index, m.created_at],
    list_columns=("title", "is_active"),
    ordered=True,
    toggle_field="is_active",
    image=ImageSpec("image_url", folder="slides", max_bytes=10 * MB),
)

ALBUMS = EntitySchema(
    name="albums",
    model=PhotoAlbum,
    label="Álbum",
    label_plural="Álbuns",
    title_field="name",
    icon="folder",
    fields=(
        FieldSpec("name", "Nome", required=True),
        FieldSpec("description", "Descrição", kind="textarea", default=""),
        FieldSpec("cover_image_url", "Capa", kind="url"),
        FieldSpec("image_public_id", "", kind="hidden"),
        FieldSpec("is_active", "Ativo", kind="bool", default=True),
    ),
    order_by=lambda m: [m.order_index, m.created_at],
    list_columns=("name", "is_active"),
    ordered=True,
    toggle_field="is_active",
    image=ImageSpec("cover_image_url", folder="albums"),
)

PHOTOS = EntitySchema(
    name="photos",
    model=Photo,
    label="Foto",
    label_plural="Fotos",
    title_field="title",
    icon="camera",
    fields=(
        FieldSpec("title", "Título", required=True),
        FieldSpec("description", "Descrição", kind="textarea"),
        FieldSpec("image_url", "Imagem", kind="url", required=True),
        FieldSpec("image_public_id", "", kind="hidden"),
        FieldSpec("category", "Categoria", kind="choice", default="community",
                  choices=tuple((c, PHOTO_CATEGORY_LABELS[c]) for c in PHOTO_CATEGORIES)),
        FieldSpec("album_id", "Álbum", kind="album"),
    ),
    order_by=lambda m: [m.created_at.desc()],
    list_columns=("title", "category"),
    image=ImageSpec("image_url", folder="photos", max_bytes=1 * MB),
)

TIMELINE = EntitySchema(
    name="timeline",
    model=TimelineEvent,
    label="Evento",
    label_plural="Linha do tempo",
    title_field="title",
    icon="history",
    fields=(
        FieldSpec("year", "Ano", kind="int", required=True),
        FieldSpec("title", "Título", required=True),
        FieldSpec("description", "Descrição", kind="textarea", default=""),
        FieldSpec("image_url", "Imagem", kind="url"),
        FieldSpec("image_public_id", "", kind="hidden"),
    ),
    order_by=lambda m: [m.year.desc(), m.created_at],
    list_columns=("year", "title"),
    image=ImageSpec("image_url", folder="timeline"),
)

POPUPS = EntitySchema(
    name="popups",
    model=UrgentPopup,
    label="Aviso",
    label_plural="Avisos urgentes",
    title_field="title",
    icon="alert-triangle",
    fields=(
        FieldSpec("title", "Título", required=True),
        FieldSpec("content", "Conteúdo", kind="textarea", required=True),
        FieldSpec("image_url", "Imagem", kind="url"),
        FieldSpec("image_public_id", "", kind="hidden"),
        FieldSpec("link_url", "Link", kind="url"),
        FieldSpec("link_text", "Texto do link", default="Saiba mais"),
        FieldSpec("priority", "Prioridade", kind="int", default=1),
        FieldSpec("auto_close_seconds", "Fechar após (segundos)", kind="int", default=0),
        FieldSpec("is_active", "Ativo", kind="bool", default=False),
    ),
    order_by=lambda m: [m.priority.desc(), m.created_at.desc()],
    list_columns=("title", "priority", "is_active"),
    toggle_field="is_active",
    image=ImageSpec("image_url", folder="popups", max_bytes=10 * MB),
)

PARISH = EntitySchema(
    name="parish",
    model=Parish,
    label="Paróquia",
    label_plural="Paróquia",
    title_field="name",
    icon="home",
    fields=(
        FieldSpec("name", "Nome", required=True),
        FieldSpec("history", "História", kind="html", default=""),
        FieldSpec("founded_year", "Ano de fundação", kind="int"),
        FieldSpec("address", "Endereço", default=""),
        FieldSpec("phone", "Telefone", default=""),
        FieldSpec("email", "E-mail", default=""),
        FieldSpec("logo_url", "Logo", kind="url"),
        FieldSpec("image_public_id", "", kind="hidden"),
    ),
    order_by=lambda m: [m.created_at.asc()],
    list_columns=("name", "phone", "email"),
    image=ImageSpec("logo_url", folder="parish", max_bytes=5 * MB),
)

ENTITIES: dict[str, EntitySchema] = {
    schema.name: schema
    for schema in (
        BLOG,
        PRIESTS,
        CELEBRATIONS,
        SCHEDULES,
        PASTORALS,
        SLIDES,
        ALBUMS,
        PHOTOS,
        TIMELINE,
        POPUPS,
        PARISH,
    )
}


def get_schema(name: str) -> EntitySchema:
    try:
        return ENTITIES[name]
    except KeyError:
        raise KeyError(f"Unknown admin entity: {name!r}") from None
