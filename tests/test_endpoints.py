# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end tests for the HTTP routes against the in-memory store.
"""

import pytest
from datetime import datetime, timezone

from assistencia.app import create_app
from assistencia.models import Order


class TestApplicationFactory:
    """Test building the application from the environment alone."""

    def test_create_app_with_default_services(self):
        """Test that the factory builds its own store and token services."""
        app = create_app()

        assert app.user_service is not None
        assert app.auth_service.algorithm == "RS256"
        rules = {rule.rule for rule in app.url_map.iter_rules()}
        assert {"/v1/healthz", "/v1/user", "/v1/community", "/v1/inhabitant", "/v1/order"} <= rules


class TestPublicRoutes:
    """Test routes that need no token."""

    def test_signup(self, client):
        """Test that signup returns the user without its password."""
        response = client.post('/v1/user', json={
            "name": "Maria Souza",
            "email": "maria@example.com",
            "password": "segredo1"
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data["email"] == "maria@example.com"
        assert data["userType"] == "None"
        assert "password" not in data

    def test_signup_validation_errors(self, client):
        """Test the structured validation body."""
        response = client.post('/v1/user', json={
            "name": "Maria Souza",
            "email": "maria@example.com",
            "password": "123"
        })

        assert response.status_code == 400
        assert response.get_json()["errors"][0]["property"] == "password"

    def test_signup_non_object_body(self, client, fake_db):
        """Test that a JSON array body is treated as missing fields."""
        response = client.post('/v1/user', json=["x"])

        assert response.status_code == 400
        assert response.get_json() == {"error": "Name, password, and email are required"}
        assert fake_db["users"].count_documents({}) == 0

    def test_login(self, client, registered_user):
        """Test that login returns userData and token."""
        response = client.post('/v1/auth/login', json={"email": "maria@example.com", "password": "segredo1"})

        assert response.status_code == 200
        data = response.get_json()
        assert data["userData"]["_id"] == registered_user.id
        assert "password" not in data["userData"]

        listed = client.get('/v1/user', headers={"Authorization": f"Bearer {data['token']}"})
        assert listed.status_code == 200

    def test_login_wrong_password(self, client, registered_user):
        """Test the generic credential failure."""
        response = client.post('/v1/auth/login', json={"email": "maria@example.com", "password": "errada1"})

        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid email and/or password"}

    def test_healthz(self, client, fake_db):
        """Test the store health endpoint."""
        assert client.get('/v1/healthz').status_code == 200

        fake_db.healthy = False
        response = client.get('/v1/healthz')

        assert response.status_code == 503
        assert response.get_json()["status"] == "unhealthy"

    @pytest.mark.parametrize("method,path", [
        ("get", "/"),
        ("get", "/anything/else"),
        ("post", "/v1/nowhere"),
        ("patch", "/v1/community"),
    ])
    def test_catch_all_greeting(self, client, method, path):
        """Test that unmatched paths and methods get the greeting."""
        response = getattr(client, method)(path)

        assert response.status_code == 200
        assert response.get_json() == {"message": "Hello, world!"}


class TestAuthentication:
    """Test the bearer token gate on protected routes."""

    def test_token_not_provided(self, client):
        """Test 401 without a token."""
        response = client.get('/v1/community')

        assert response.status_code == 401
        assert response.get_json() == {"error": "Token not provided"}

    def test_token_invalid(self, client):
        """Test 401 with a bad token."""
        response = client.get('/v1/order', headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401
        assert response.get_json() == {"error": "Token invalid"}


class TestUserRoutes:
    """Test protected user routes."""

    def test_get_by_email(self, client, auth_headers, registered_user):
        """Test lookup by email."""
        response = client.get('/v1/user/maria@example.com', headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()["_id"] == registered_user.id

    def test_rename_and_delete(self, client, auth_headers, registered_user):
        """Test PATCH and DELETE shapes."""
        response = client.patch(f'/v1/user/{registered_user.id}', json={"name": "Maria Souza Lima"},
                                headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()["user"]["name"] == "Maria Souza Lima"

        response = client.delete(f'/v1/user/{registered_user.id}', headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json() == registered_user.id


class TestCommunityRoutes:
    """Test community routes."""

    def test_lifecycle(self, client, auth_headers):
        """Test create, read, query by name, rename and delete."""
        response = client.post('/v1/community', json={"name": "Vila Nova"}, headers=auth_headers)
        assert response.status_code == 201
        community_id = response.get_json()["community"]["_id"]

        assert client.get(f'/v1/community/{community_id}', headers=auth_headers).get_json()["name"] == "Vila Nova"
        assert client.get('/v1/community/query/name', query_string={"name": "Vila Nova"},
                          headers=auth_headers).get_json()["_id"] == community_id

        response = client.put(f'/v1/community/{community_id}', json={"name": "Vila Velha"}, headers=auth_headers)
        assert response.get_json()["community"]["name"] == "Vila Velha"

        response = client.delete(f'/v1/community/{community_id}', headers=auth_headers)
        assert response.status_code == 200
        assert client.get(f'/v1/community/{community_id}', headers=auth_headers).status_code == 404

    def test_query_name_from_body(self, client, auth_headers, community):
        """Test the JSON body fallback for the name query."""
        response = client.get('/v1/community/query/name', json={"name": "Vila Nova"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()["_id"] == community.id

    def test_delete_with_inhabitants(self, client, auth_headers, inhabitant):
        """Test that a referenced community cannot be deleted."""
        response = client.delete(f'/v1/community/{inhabitant.communityID}', headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json() == {"error": "There are inhabitants registered in this community"}

    def test_create_non_object_body(self, client, auth_headers, fake_db):
        """Test that a JSON array body is treated as a missing name."""
        response = client.post('/v1/community', json=["x"], headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json() == {"error": "Name is required"}
        assert fake_db["communities"].count_documents({}) == 0


class TestInhabitantRoutes:
    """Test inhabitant routes."""

    def test_create_and_list(self, client, auth_headers, community, sample_inhabitant_data):
        """Test create and the listing with community names."""
        payload = dict(sample_inhabitant_data, communityID=community.id)

        response = client.post('/v1/inhabitant', json=payload, headers=auth_headers)

        assert response.status_code == 201
        assert response.get_json()["inhabitant"]["cpf"] == "52998224725"

        rows = client.get('/v1/inhabitant', headers=auth_headers).get_json()
        assert rows[0]["communityName"] == "Vila Nova"

    def test_dangling_community(self, client, auth_headers, fake_db, sample_inhabitant_data):
        """Test 404 for an unknown community and nothing stored."""
        response = client.post('/v1/inhabitant', json=dict(sample_inhabitant_data, communityID="missing"),
                               headers=auth_headers)

        assert response.status_code == 404
        assert fake_db["inhabitants"].count_documents({}) == 0

    @pytest.mark.parametrize("number", [12.5, True])
    def test_non_string_address_number(self, client, auth_headers, fake_db, sample_inhabitant_data, number):
        """Test that a float or boolean house number is a 400 and nothing is stored."""
        payload = dict(sample_inhabitant_data, address={"street": "Rua das Flores", "number": number})

        response = client.post('/v1/inhabitant', json=payload, headers=auth_headers)

        assert response.status_code == 400
        errors = response.get_json()["errors"]
        assert errors == [{
            "property": "address.number",
            "constraints": {"isString": "address.number must be a string"}
        }]
        assert fake_db["inhabitants"].count_documents({}) == 0

    def test_get_by_cpf(self, client, auth_headers, inhabitant):
        """Test lookup by CPF."""
        response = client.get('/v1/inhabitant/52998224725', headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()["_id"] == inhabitant.id

    def test_update_and_delete(self, client, auth_headers, inhabitant, sample_inhabitant_data):
        """Test PUT and DELETE shapes."""
        payload = dict(sample_inhabitant_data, name="José da Silva Filho", communityID=inhabitant.communityID)

        response = client.put(f'/v1/inhabitant/{inhabitant.id}', json=payload, headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json()["inhabitant"]["name"] == "José da Silva Filho"

        response = client.delete(f'/v1/inhabitant/{inhabitant.id}', headers=auth_headers)
        assert response.status_code == 200
        assert "message" in response.get_json()


class TestOrderRoutes:
    """Test order routes and reports."""

    def test_content_too_long(self, client, auth_headers, fake_db, registered_user, inhabitant):
        """Test that 256 characters of content are a 400 and nothing is stored."""
        response = client.post('/v1/order', json={
            "content": "x" * 256,
            "userID": registered_user.id,
            "inhabitantCPF": inhabitant.cpf
        }, headers=auth_headers)

        assert response.status_code == 400
        constraints = response.get_json()["errors"][0]["constraints"]
        assert constraints == {"maxLength": "content must be shorter than or equal to 255 characters"}
        assert fake_db["orders"].count_documents({}) == 0

    def test_create_by_cpf(self, client, auth_headers, registered_user, inhabitant):
        """Test that a new order is Pending with equal timestamps."""
        response = client.post('/v1/order', json={
            "content": "Solicitação de cesta básica",
            "userID": registered_user.id,
            "inhabitantCPF": "529.982.247-25"
        }, headers=auth_headers)

        assert response.status_code == 201
        data = response.get_json()
        assert data["status"] == "Pending"
        assert data["inhabitantID"] == inhabitant.id
        assert data["date_update"] == data["date"]

    def test_update_delete_and_view(self, client, auth_headers, order_service, registered_user, inhabitant):
        """Test status update, processed view and delete."""
        order = order_service.create({
            "content": "Solicitação de cesta básica",
            "userID": registered_user.id,
            "inhabitantID": inhabitant.id
        })

        response = client.put(f'/v1/order/{order.id}', json={"status": "Atendido"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json()["order"]["status"] == "Attended"

        bad = client.put(f'/v1/order/{order.id}', json={"status": "Done"}, headers=auth_headers)
        assert bad.status_code == 400

        view = client.get('/v1/order/data/view', headers=auth_headers).get_json()
        assert view[0]["userName"] == "Maria Souza"
        assert view[0]["inhabitantCPF"] == "52998224725"

        response = client.delete(f'/v1/order/{order.id}', headers=auth_headers)
        assert response.get_json()["order"] == order.id
        assert client.get(f'/v1/order/{order.id}', headers=auth_headers).status_code == 404

    def test_with_community_current_year(self, client, auth_headers, repositories, registered_user, inhabitant):
        """Test that the community report only covers this year's orders."""
        this_year = datetime.now(timezone.utc).year
        for created in (datetime(this_year - 1, 6, 1, tzinfo=timezone.utc),
                        datetime(this_year, 1, 1, tzinfo=timezone.utc)):
            repositories.orders.insert(Order(
                content="Visita domiciliar",
                userID=registered_user.id,
                inhabitantID=inhabitant.id,
                date=created,
                date_update=created
            ))

        response = client.get('/v1/order/with/community', headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json() == [{"community": "Vila Nova", "date": f"01/01/{this_year}"}]
