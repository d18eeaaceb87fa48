"""Typed schema for the flat ``system_settings`` key/value table.

Every known key is declared once with its type, default and group. The same
``encode``/``decode`` pair is used when writing admin forms and when reading
values back, so booleans and numbers round-trip through their string form in
one place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal

SettingType = Literal["str", "bool", "int", "color", "font"]

_TRUE_VALUES = frozenset({"true", "1", "on", "yes"})

# Theme values are written verbatim into a <style> block.
_COLOR_PATTERN = re.compile(
    r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})"
    r"|rgb\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*\)"
)
_FONT_PATTERN = re.compile(r"[\w\s-]+")


def is_valid_color(value: str) -> bool:
    """``#rgb``, ``#rrggbb`` or ``rgb(r, g, b)``."""
    return bool(_COLOR_PATTERN.fullmatch(value))


def is_valid_font(value: str) -> bool:
    """Font family names: letters, digits, spaces, underscores and hyphens."""
    return bool(_FONT_PATTERN.fullmatch(value)) and bool(value.strip())


_VALIDATORS = {"color": is_valid_color, "font": is_valid_font}


@dataclass(frozen=True)
class SettingDefinition:
    """Declaration of a single known setting key."""

    key: str
    type: SettingType = "str"
    default: Any = ""
    group: str = "general"
    label: str = ""
    secret: bool = False
    multiline: bool = False


def _s(key: str, default: str = "", *, group: str, label: str = "", secret: bool = False, multiline: bool = False) -> SettingDefinition:
    return SettingDefinition(key, "str", default, group, label or key, secret, multiline)


def _b(key: str, default: bool, *, group: str, label: str = "") -> SettingDefinition:
    return SettingDefinition(key, "bool", default, group, label or key)


def _i(key: str, default: int, *, group: str, label: str = "") -> SettingDefinition:
    return SettingDefinition(key, "int", default, group, label or key)


def _c(key: str, default: str, *, group: str, label: str = "") -> SettingDefinition:
    return SettingDefinition(key, "color", default, group, label or key)


def _f(key: str, default: str, *, group: str, label: str = "") -> SettingDefinition:
    return SettingDefinition(key, "font", default, group, label or key)


_DEFINITIONS: tuple[SettingDefinition, ...] = (
    # Theme colors
    _c("site_primary_color_from", "#19274e", group="theme", label="Cor primária (início)"),
    _c("site_primary_color_to", "#2a3b63", group="theme", label="Cor primária (fim)"),
    _b("site_use_primary_gradient", True, group="theme", label="Usar gradiente primário"),
    _c("site_secondary_color_from", "#1a3a70", group="theme", label="Cor secundária (início)"),
    _c("site_secondary_color_to", "#2d5299", group="theme", label="Cor secundária (fim)"),
    _b("site_use_secondary_gradient", True, group="theme", label="Usar gradiente secundário"),
    _c("site_text_color_dark", "#374151", group="theme", label="Texto escuro"),
    _c("site_text_color_light", "#FFFFFF", group="theme", label="Texto claro"),
    _c("site_background_color_light", "#F9FAFB", group="theme", label="Fundo claro"),
    _c("site_background_color_dark", "#19274e", group="theme", label="Fundo escuro"),
    _c("site_accent_color_1", "#60a5fa", group="theme", label="Destaque 1"),
    _c("site_accent_color_2", "#93c5fd", group="theme", label="Destaque 2"),
    _c("site_button_text_color", "#FFFFFF", group="theme", label="Texto dos botões"),
    _c("site_header_text_color", "#FFFFFF", group="theme", label="Texto do cabeçalho"),
    _f("site_header_font_family", "Inter", group="theme", label="Fonte do cabeçalho"),
    _s("site_hero_title", "Tradição e Fé", group="theme", label="Título do banner"),
    _s(
        "site_hero_description",
        "Uma catedral histórica no coração de São Miguel Paulista, sendo referência de fé "
        "e tradição para toda a região.",
        group="theme",
        label="Descrição do banner",
        multiline=True,
    ),
    # Stripe
    _b("stripe_enabled", False, group="stripe", label="Stripe habilitado"),
    _s("stripe_publishable_key", group="stripe", label="Publishable key"),
    _s("stripe_secret_key", group="stripe", label="Secret key", secret=True),
    _s("stripe_webhook_secret", group="stripe", label="Webhook secret", secret=True),
    _s("stripe_currency", "BRL", group="stripe", label="Moeda"),
    _s("stripe_minimum_amount", "10", group="stripe", label="Valor mínimo"),
    _s("stripe_success_url", "/capela?donation=success", group="stripe", label="URL de sucesso"),
    _s("stripe_cancel_url", "/capela?donation=cancelled", group="stripe", label="URL de cancelamento"),
    _s("stripe_company_name", "Capela São Miguel Arcanjo", group="stripe", label="Nome exibido"),
    # Cloudinary
    _b("cloudinary_enabled", False, group="cloudinary", label="Cloudinary habilitado"),
    _s("cloudinary_cloud_name", group="cloudinary", label="Cloud name"),
    _s("cloudinary_api_key", group="cloudinary", label="API key"),
    _s("cloudinary_api_secret", group="cloudinary", label="API secret", secret=True),
    _s("cloudinary_upload_preset", "parish_uploads", group="cloudinary", label="Upload preset"),
    # Email
    _b("smtp_enabled", False, group="email", label="Envio habilitado"),
    _s("smtp_host", group="email", label="Servidor SMTP"),
    _i("smtp_port", 587, group="email", label="Porta"),
    _s("smtp_email", group="email", label="E-mail"),
    _s("smtp_password", group="email", label="Senha", secret=True),
    _b("smtp_secure", True, group="email", label="Conexão segura"),
    # Capela
    _b("capela_enabled", True, group="capela", label="Página da capela habilitada"),
    _s("capela_title", "Capela São Miguel", group="capela", label="Título"),
    _s("capela_subtitle", "Igreja de São Miguel Paulista", group="capela", label="Subtítulo"),
    _s("capela_description", group="capela", label="Descrição", multiline=True),
    _s("capela_history", group="capela", label="História", multiline=True),
    _i("capela_founded_year", 1560, group="capela", label="Ano de fundação"),
    _i("capela_tombamento_year", 1938, group="capela", label="Ano do tombamento"),
    _s("capela_tombamento_process", group="capela", label="Processo de tombamento"),
    _s("capela_location", group="capela", label="Localização"),
    _s("capela_popular_name", "Capela dos Índios", group="capela", label="Nome popular"),
    _s("capela_image_url", group="capela", label="Imagem"),
    _s("capela_phone", group="capela", label="Telefone"),
    _s("capela_email", group="capela", label="E-mail"),
    _s("capela_whatsapp", group="capela", label="WhatsApp"),
    _s("capela_contact_person", group="capela", label="Contato"),
    _s("capela_mass_schedule", group="capela", label="Horário das missas", multiline=True),
    _s("capela_visiting_hours", group="capela", label="Horário de visitação", multiline=True),
    _b("capela_donation_enabled", True, group="capela", label="Doações habilitadas"),
    _s("capela_donation_title", "Ajude a Preservar", group="capela", label="Título das doações"),
    _s("capela_donation_description", group="capela", label="Texto das doações", multiline=True),
    _s("capela_pix_key", group="capela", label="Chave PIX"),
    _s("capela_pix_name", group="capela", label="Titular PIX"),
    _s("capela_suggested_amounts", "20,50,100,200", group="capela", label="Valores sugeridos"),
    _s("capela_minimum_amount", "5", group="capela", label="Valor mínimo"),
    _b("capela_stripe_enabled", False, group="capela", label="Cartão via Stripe"),
    _b("capela_transparency_enabled", True, group="capela", label="Transparência habilitada"),
    _s("capela_transparency_text", group="capela", label="Texto de transparência", multiline=True),
)

SETTINGS: dict[str, SettingDefinition] = {d.key: d for d in _DEFINITIONS}

GROUP_LABELS = {
    "theme": "Personalizar Cores",
    "stripe": "Configurações Stripe",
    "cloudinary": "Cloudinary",
    "email": "Configurações de E-mail",
    "capela": "Capela São Miguel",
}

SECRET_MASK = "••••••••"


def group_definitions(group: str) -> list[SettingDefinition]:
    """All definitions belonging to ``group``, in declaration order."""
    return [d for d in _DEFINITIONS if d.group == group]


def group_keys(group: str) -> list[str]:
    return [d.key for d in group_definitions(group)]


def encode(key: str, value: Any) -> str | None:
    """Serialize a typed value to its stored string form."""
    if value is None:
        return None

    definition = SETTINGS.get(key)
    if definition is None or definition.type == "str":
        return str(value)
    if definition.type == "bool":
        if isinstance(value, str):
            value = value.strip().lower() in _TRUE_VALUES
        return "true" if value else "false"
    if definition.type in _VALIDATORS:
        value = str(value).strip()
        if not _VALIDATORS[definition.type](value):
            raise ValueError(f"Invalid {definition.type} for {key}: {value!r}")
        return value
    return str(int(value))


def decode(key: str, raw: str | None) -> Any:
    """Parse a stored string back to its declared type.

    Missing values, unparseable numbers and malformed colors or font names
    fall back to the declared default. Unknown keys are returned unchanged.
    """
    definition = SETTINGS.get(key)
    if definition is None:
        return raw
    if raw is None:
        return definition.default

    if definition.type == "bool":
        return raw.strip().lower() in _TRUE_VALUES
    if definition.type == "int":
        try:
            return int(raw.strip())
        except ValueError:
            return definition.default
    if definition.type in _VALIDATORS:
        value = raw.strip()
        return value if _VALIDATORS[definition.type](value) else definition.default
    return raw


def decode_group(group: str, stored: dict[str, str | None]) -> dict[str, Any]:
    """Decode every key of a group from raw stored values, applying defaults."""
    return {
        d.key: decode(d.key, stored.get(d.key))
        for d in group_definitions(group)
    }


def parse_form(group: str, data: dict[str, Any]) -> dict[str, Any]:
    """Turn a submitted HTML form into typed values for a group.

    Checkboxes are absent from the form body when unchecked, so missing bool
    keys mean ``False``. Secret fields left blank (or still showing the mask)
    are omitted so the stored value is kept. Blank numbers, colors and fonts
    take their default; malformed ones raise ``ValueError``.
    """
    values: dict[str, Any] = {}
    for definition in group_definitions(group):
        if definition.type == "bool":
            values[definition.key] = str(data.get(definition.key, "")).strip().lower() in _TRUE_VALUES
            continue

        raw = str(data.get(definition.key, "")).strip()
        if definition.secret and (not raw or raw == SECRET_MASK):
            continue

        if definition.type == "int":
            if not raw:
                values[definition.key] = definition.default
                continue
            try:
                values[definition.key] = int(raw)
            except ValueError as exc:
                raise ValueError(f"{definition.label}: número inválido ({raw})") from exc
            continue

        if definition.type in _VALIDATORS and not raw:
            values[definition.key] = definition.default
            continue
        if definition.type == "color" and not is_valid_color(raw):
            raise ValueError(f"{definition.label}: cor inválida ({raw})")
        if definition.type == "font" and not is_valid_font(raw):
            raise ValueError(f"{definition.label}: fonte inválida ({raw})")

        values[definition.key] = raw
    return values


def mask_secrets(group: str, values: dict[str, Any]) -> dict[str, Any]:
    """Replace non-empty secret values with a fixed mask for display."""
    masked = dict(values)
    for definition in group_definitions(group):
        if definition.secret and masked.get(definition.key):
            masked[definition.key] = SECRET_MASK
    return masked
