"""
Integration tests for the Person endpoints.

Tests:
- Paged listing with search/sort/pagination metadata
- Admin-only create/update
- Soft delete and restore over HTTP, including account deactivation
- Domain errors rendered with the right status codes
"""


def person_payload(**overrides):
    payload = {
        "institution_id": "2011001",
        "name": "Dewi Lestari",
        "program": "Information Systems",
        "cohort_year": 2019,
        "graduation_year": 2023,
        "email": "dewi@example.com",
        "phone": "0813111222",
        "address": "Bandung",
    }
    payload.update(overrides)
    return payload


class TestListPersons:
    """GET /persons"""

    def test_requires_authentication(self, client, db_session):
        response = client.get("/api/v1/persons")
        assert response.status_code in (401, 403)

    def test_list_with_meta(self, client, make_account, make_person, auth_headers):
        viewer = make_account("viewer")
        for name in ["Citra", "Agus", "Bayu"]:
            make_person(name=name)

        response = client.get("/api/v1/persons?limit=2&page=1", headers=auth_headers(viewer))

        assert response.status_code == 200
        data = response.json()
        assert [p["name"] for p in data["data"]] == ["Agus", "Bayu"]
        assert data["meta"] == {
            "page": 1,
            "limit": 2,
            "total": 3,
            "pages": 2,
            "sort_by": "name",
            "order": "asc",
            "search": "",
        }

    def test_invalid_parameters_fall_back(self, client, make_account, make_person, auth_headers):
        viewer = make_account("viewer")
        make_person(name="Engineer One", program="Engineering")

        response = client.get(
            "/api/v1/persons?search=eng&sortBy=doesnotexist&order=sideways&page=0&limit=-5",
            headers=auth_headers(viewer)
        )

        assert response.status_code == 200
        meta = response.json()["meta"]
        assert meta["sort_by"] == "name"
        assert meta["order"] == "asc"
        assert meta["page"] == 1
        assert meta["limit"] == 1
        assert meta["total"] == 1

    def test_huge_page_is_empty(self, client, make_account, make_person, auth_headers):
        viewer = make_account("viewer")
        make_person(name="Only One")

        response = client.get("/api/v1/persons?page=10000000000000000000", headers=auth_headers(viewer))

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["meta"]["total"] == 1

    def test_sort_desc(self, client, make_account, make_person, auth_headers):
        viewer = make_account("viewer")
        make_person(name="A", graduation_year=2021)
        make_person(name="B", graduation_year=2024)

        response = client.get("/api/v1/persons?sortBy=graduation_year&order=desc", headers=auth_headers(viewer))

        assert [p["name"] for p in response.json()["data"]] == ["B", "A"]

    def test_deleted_only_requires_admin(self, client, make_account, auth_headers):
        viewer = make_account("viewer")

        response = client.get("/api/v1/persons?deleted_only=true", headers=auth_headers(viewer))

        assert response.status_code == 403

    def test_without_engagements(self, client, admin_account, make_person, make_engagement, auth_headers):
        make_engagement(make_person(name="Busy"))
        make_person(name="Free")

        response = client.get("/api/v1/persons/without-engagements", headers=auth_headers(admin_account))

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["data"][0]["name"] == "Free"


class TestCreateAndUpdatePerson:
    """POST/PUT /persons"""

    def test_admin_creates_person(self, client, admin_account, auth_headers):
        response = client.post("/api/v1/persons", json=person_payload(), headers=auth_headers(admin_account))

        assert response.status_code == 201
        data = response.json()
        assert data["institution_id"] == "2011001"
        assert data["is_deleted"] is False

    def test_alumni_cannot_create(self, client, make_account, auth_headers):
        alumni = make_account("alumni")

        response = client.post("/api/v1/persons", json=person_payload(), headers=auth_headers(alumni))

        assert response.status_code == 403

    def test_invalid_payload(self, client, admin_account, auth_headers):
        response = client.post(
            "/api/v1/persons",
            json=person_payload(email="not-an-email"),
            headers=auth_headers(admin_account)
        )

        assert response.status_code == 422

    def test_duplicate_institution_id_conflicts(self, client, admin_account, make_person, auth_headers):
        make_person(institution_id="2011001")

        response = client.post("/api/v1/persons", json=person_payload(), headers=auth_headers(admin_account))

        assert response.status_code == 409

    def test_update(self, client, admin_account, make_person, auth_headers):
        person = make_person()

        response = client.put(
            f"/api/v1/persons/{person.id}",
            json=person_payload(institution_id=person.institution_id, name="Updated Name"),
            headers=auth_headers(admin_account)
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Updated Name"

    def test_get_missing(self, client, admin_account, auth_headers):
        response = client.get("/api/v1/persons/9999", headers=auth_headers(admin_account))

        assert response.status_code == 404
        assert "not found" in response.json()["detail"].lower()


class TestDeleteAndRestorePerson:
    """DELETE /persons/{id} and POST /persons/{id}/restore"""

    def test_other_alumni_forbidden_admin_succeeds(
        self, client, db_session, admin_account, make_account, make_person, auth_headers
    ):
        a1 = make_account("a1")
        p1 = make_person(account=a1)
        a2 = make_account("a2")
        make_person(account=a2)

        response = client.delete(f"/api/v1/persons/{p1.id}", headers=auth_headers(a2))
        assert response.status_code == 403

        response = client.delete(f"/api/v1/persons/{p1.id}", headers=auth_headers(admin_account))
        assert response.status_code == 200

        db_session.expire_all()
        assert a1.is_active is False
        assert p1.is_deleted is True

        # The deactivated account can no longer log in
        response = client.post("/api/v1/auth/login", json={"username": "a1", "password": "Password123!"})
        assert response.status_code == 403

    def test_delete_twice_conflicts(self, client, admin_account, make_account, make_person, auth_headers):
        person = make_person(account=make_account("once"))
        client.delete(f"/api/v1/persons/{person.id}", headers=auth_headers(admin_account))

        response = client.delete(f"/api/v1/persons/{person.id}", headers=auth_headers(admin_account))

        assert response.status_code == 409

    def test_restore(self, client, db_session, admin_account, make_account, make_person, auth_headers):
        account = make_account("back")
        person = make_person(account=account)
        client.delete(f"/api/v1/persons/{person.id}", headers=auth_headers(admin_account))

        response = client.post(f"/api/v1/persons/{person.id}/restore", headers=auth_headers(admin_account))

        assert response.status_code == 200
        assert response.json()["is_deleted"] is False
        db_session.expire_all()
        assert account.is_active is True

        listing = client.get("/api/v1/persons?deleted_only=true", headers=auth_headers(admin_account))
        assert listing.json()["meta"]["total"] == 0
