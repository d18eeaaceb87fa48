"""End-to-end tests of the admin panel through Litestar's TestClient."""

import re

import pytest
from litestar.testing import TestClient

from sacristy.asgi import create_app
from sacristy.config import DatabaseConfig, Settings, StorageConfig, StoreConfig


@pytest.fixture
def client(tmp_path):
    settings = Settings(
        debug=True,
        secret_key="test-secret",
        site_name="Paróquia Teste",
        db=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'admin.db'}"),
        storage=StorageConfig(stores={
            "default": StoreConfig(local_path=str(tmp_path / "uploads"), local_url_prefix="/uploads"),
        }),
    )
    with TestClient(app=create_app(settings)) as test_client:
        yield test_client


def _ids(html: str, name: str) -> list[str]:
    return re.findall(rf"/admin/{name}/([0-9a-f-]{{36}})/edit", html)


class TestDashboard:
    def test_root_redirects_to_admin(self, client):
        response = client.get("/", follow_redirects=False)
        assert response.status_code in (301, 302, 303, 307)
        assert response.headers["location"].startswith("/admin")

    def test_dashboard_lists_tabs(self, client):
        response = client.get("/admin/")

        assert response.status_code == 200
        assert "Painel administrativo" in response.text
        assert "Pastorais" in response.text
        assert "--color-primary-from: #19274e;" in response.text

    def test_pages_use_configured_site_name(self, client):
        assert "Painel - Paróquia Teste" in client.get("/admin/").text

        response = client.get("/admin/settings/nope", headers={"accept": "text/html"})

        assert response.status_code == 404
        assert "Erro 404 - Paróquia Teste" in response.text


class TestEntityTabs:
    def test_create_shows_success_toast(self, client):
        response = client.post("/admin/pastorals/new", data={"name": "Catequese"})

        assert response.status_code == 200
        assert "Pastoral criado(a) com sucesso!" in response.text
        assert len(_ids(response.text, "pastorals")) == 1

    def test_missing_required_field_shows_error(self, client):
        response = client.post("/admin/pastorals/new", data={"coordinator": "Ana"})

        assert response.status_code == 200
        assert "O campo Nome é obrigatório" in response.text

    def test_move_up_swaps_rows(self, client):
        client.post("/admin/pastorals/new", data={"name": "Catequese"})
        listing = client.post("/admin/pastorals/new", data={"name": "Liturgia"}).text
        first, second = _ids(listing, "pastorals")

        response = client.post(f"/admin/pastorals/{second}/move-up")

        assert response.status_code == 200
        assert _ids(response.text, "pastorals") == [second, first]

    def test_toggle_flips_status(self, client):
        listing = client.post(
            "/admin/pastorals/new", data={"name": "Jovens", "is_active": "on"}
        ).text
        (pastoral_id,) = _ids(listing, "pastorals")

        response = client.post(f"/admin/pastorals/{pastoral_id}/toggle")

        assert "Desativado(a)" in response.text
        assert ">Ativar<" in response.text

    def test_move_buttons_disabled_at_list_edges(self, client):
        client.post("/admin/pastorals/new", data={"name": "Catequese"})
        listing = client.post("/admin/pastorals/new", data={"name": "Liturgia"}).text
        first, second = _ids(listing, "pastorals")

        assert re.search(rf'{first}/move-up"><button[^>]* disabled>', listing)
        assert not re.search(rf'{first}/move-down"><button[^>]* disabled>', listing)
        assert not re.search(rf'{second}/move-up"><button[^>]* disabled>', listing)
        assert re.search(rf'{second}/move-down"><button[^>]* disabled>', listing)

    def test_move_buttons_disabled_per_day(self, client):
        client.post("/admin/celebrations/new", data={
            "day_of_week": "sunday", "community_name": "Matriz",
            "celebrant_name": "Pe. João", "time": "08:00",
        })
        listing = client.post("/admin/celebrations/new", data={
            "day_of_week": "monday", "community_name": "São José",
            "celebrant_name": "Pe. João", "time": "19:00",
        }).text

        assert len(_ids(listing, "celebrations")) == 2
        assert listing.count('title="Mover para cima" disabled') == 2
        assert listing.count('title="Mover para baixo" disabled') == 2

    def test_delete_prompt_is_json_encoded(self, client):
        listing = client.post("/admin/pastorals/new", data={"name": "Jovens d'Ouro"}).text

        assert r'confirm("Excluir Jovens d\u0027Ouro?")' in listing

    def test_unknown_id_redirects_with_toast(self, client):
        response = client.post("/admin/pastorals/00000000-0000-0000-0000-000000000000/delete")
        assert "Pastoral não encontrado(a)" in response.text


class TestSettings:
    def test_saving_theme_updates_css(self, client):
        client.post("/admin/settings/theme", data={"site_primary_color_from": "#123456"})

        response = client.get("/admin/")

        assert "--color-primary-from: #123456;" in response.text

    def test_secret_is_masked(self, client):
        client.post("/admin/settings/stripe", data={"stripe_secret_key": "sk_test_123"})

        response = client.get("/admin/settings/stripe")

        assert "sk_test_123" not in response.text
        assert "••••••••" in response.text

    def test_unknown_group_is_404(self, client):
        response = client.get("/admin/settings/nope")
        assert response.status_code == 404


class TestDonations:
    def test_export_csv(self, client):
        response = client.get("/admin/donations/export.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment; filename=\"doacoes-" in response.headers["content-disposition"]
        assert response.text.splitlines()[0].startswith("Data,Valor,Status")

    def test_list_page(self, client):
        response = client.get("/admin/donations?status=completed&period=month")

        assert response.status_code == 200
        assert "R$ 0,00" in response.text


class TestMediaUpload:
    def test_image_upload_returns_location(self, client, tmp_path):
        response = client.post(
            "/admin/media/upload?entity=slides",
            files={"data": ("natal.jpg", b"\xff\xd8\xff" * 10, "image/jpeg")},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["public_id"].startswith("slides/")
        assert body["url"] == f"/uploads/{body['public_id']}"
        assert (tmp_path / "uploads" / body["public_id"]).exists()

    def test_non_image_rejected(self, client):
        response = client.post(
            "/admin/media/upload",
            files={"data": ("ata.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 400
        assert "apenas imagens" in response.json()["error"]


class TestEntityImage:
    def _priest(self, client) -> str:
        listing = client.post(
            "/admin/priests/new", data={"name": "Pe. João", "title": "Pároco"}
        ).text
        (priest_id,) = _ids(listing, "priests")
        return priest_id

    def _stored_files(self, tmp_path) -> list:
        return [p for p in (tmp_path / "uploads").rglob("*") if p.is_file()]

    def test_upload_replaces_previous_file(self, client, tmp_path):
        priest_id = self._priest(client)
        for filename in ("a.jpg", "b.jpg"):
            response = client.post(
                f"/admin/priests/{priest_id}/image",
                files={"data": (filename, b"\xff\xd8\xff" * 10, "image/jpeg")},
            )

        assert "Imagem enviada com sucesso!" in response.text
        assert len(self._stored_files(tmp_path)) == 1

    def test_database_failure_removes_uploaded_file(self, client, tmp_path, monkeypatch):
        from sqlalchemy.exc import OperationalError

        from sacristy.db.services import entity_service

        priest_id = self._priest(client)

        async def failing_set_image(*args, **kwargs):
            raise OperationalError("UPDATE priests", {}, Exception("database is locked"))

        monkeypatch.setattr(entity_service, "set_image", failing_set_image)

        response = client.post(
            f"/admin/priests/{priest_id}/image",
            files={"data": ("pe-joao.jpg", b"\xff\xd8\xff" * 10, "image/jpeg")},
        )

        assert response.status_code == 200
        assert "Erro ao salvar imagem" in response.text
        assert self._stored_files(tmp_path) == []
