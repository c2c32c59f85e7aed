"""
Tests para el módulo de Empresa
"""

import pytest
from fastapi import HTTPException

from maxcontrol.modules.company.service import CompanyInfoService


class TestCompanyInfo:

    def test_get_not_configured(self, client, viewer_headers):
        response = client.get("/api/settings/company-info", headers=viewer_headers)
        assert response.status_code == 404

    def test_upsert(self, client, admin_headers):
        response = client.put("/api/settings/company-info", json={
            "name": "Max Vidros",
            "cnpj": "11222333000181",
            "email": "contato@maxvidros.com.br"
        }, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["id"] == 1
        assert response.json()["cnpj"] == "11.222.333/0001-81"

        response = client.put("/api/settings/company-info", json={"name": "Max Vidros e Espelhos"}, headers=admin_headers)
        assert response.json()["id"] == 1
        assert client.get("/api/settings/company-info", headers=admin_headers).json()["name"] == "Max Vidros e Espelhos"

    def test_invalid_email(self, client, admin_headers):
        response = client.put("/api/settings/company-info", json={"name": "Max", "email": "sem-arroba"}, headers=admin_headers)
        assert response.status_code == 400

    def test_only_admin_updates(self, client, sales_headers):
        response = client.put("/api/settings/company-info", json={"name": "Max"}, headers=sales_headers)
        assert response.status_code == 403

    def test_snapshot(self, db_session, company_info):
        snapshot = CompanyInfoService(db_session).snapshot()
        assert snapshot["name"] == "Vidraçaria Max"
        assert snapshot["cnpj"] == "11.222.333/0001-81"

    def test_snapshot_requires_configuration(self, db_session):
        with pytest.raises(HTTPException) as exc:
            CompanyInfoService(db_session).snapshot()
        assert exc.value.status_code == 500
