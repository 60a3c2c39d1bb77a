from legalmatters.models import Customer, Matter


def _create_customer(client, name="Acme Corp", phone="555-123-4567"):
    response = client.post("/api/customers", json={"name": name, "phone": phone})
    assert response.status_code == 201, response.text
    return response.json()


def _create_matter(client, customer_id, **payload):
    payload.setdefault("title", "Contract review")
    response = client.post(f"/api/customers/{customer_id}/matters", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_customer(lawyer_a):
    response = lawyer_a.post("/api/customers", json={"name": "Acme Corp", "phone": "+1 555.123.4567"})
    assert response.status_code == 201

    body = response.json()
    assert body["name"] == "Acme Corp"
    assert body["phone"] == "(555) 123-4567"
    assert body["lawyerId"] == lawyer_a.user["id"]
    assert body["openMattersCount"] == 0
    assert body["version"] == 1


def test_create_customer_stores_raw_digits(lawyer_a, db):
    created = _create_customer(lawyer_a, phone="(555) 987-6543")
    assert db.get(Customer, created["id"]).phone == "5559876543"


def test_create_customer_rejects_invalid_phone(lawyer_a, db):
    response = lawyer_a.post("/api/customers", json={"name": "Acme Corp", "phone": "12345"})
    assert response.status_code == 400
    body = response.json()
    assert "phone" in body["errors"]
    assert "10 digits" in body["message"]
    assert db.query(Customer).count() == 0


def test_create_customer_requires_name(lawyer_a):
    response = lawyer_a.post("/api/customers", json={"phone": "5551234567"})
    assert response.status_code == 400
    assert "name" in response.json()["errors"]


def test_customers_require_authentication(client):
    assert client.get("/api/customers").status_code == 401
    assert client.post("/api/customers", json={"name": "Acme", "phone": "5551234567"}).status_code == 401
    assert client.get("/api/customers/1").status_code == 401


def test_admin_created_customer_is_owned_by_admin(admin):
    created = _create_customer(admin)
    assert created["lawyerId"] == admin.user["id"]


def test_list_is_scoped_to_owner(lawyer_a, lawyer_b, admin):
    _create_customer(lawyer_a, name="Zeta Holdings")
    _create_customer(lawyer_a, name="Acme Corp")
    _create_customer(lawyer_b, name="Bravo Inc")

    names_a = [c["name"] for c in lawyer_a.get("/api/customers").json()]
    names_b = [c["name"] for c in lawyer_b.get("/api/customers").json()]
    names_admin = [c["name"] for c in admin.get("/api/customers").json()]

    assert names_a == ["Acme Corp", "Zeta Holdings"]
    assert names_b == ["Bravo Inc"]
    assert names_admin == ["Acme Corp", "Bravo Inc", "Zeta Holdings"]


def test_open_matters_count_only_counts_open(lawyer_a):
    customer = _create_customer(lawyer_a)
    _create_matter(lawyer_a, customer["id"], title="First")
    _create_matter(lawyer_a, customer["id"], title="Second")
    _create_matter(lawyer_a, customer["id"], title="Done", status="Closed")
    _create_matter(lawyer_a, customer["id"], title="Paused", status="OnHold")

    listed = lawyer_a.get("/api/customers").json()
    assert listed[0]["openMattersCount"] == 2
    assert lawyer_a.get(f"/api/customers/{customer['id']}").json()["openMattersCount"] == 2


def test_get_customer(lawyer_a, customer_of_a):
    response = lawyer_a.get(f"/api/customers/{customer_of_a['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Acme Corp"


def test_get_customer_of_another_lawyer_is_forbidden(lawyer_b, customer_of_a):
    response = lawyer_b.get(f"/api/customers/{customer_of_a['id']}")
    assert response.status_code == 403
    assert "not authorized" in response.json()["message"]


def test_admin_can_get_any_customer(admin, customer_of_a):
    assert admin.get(f"/api/customers/{customer_of_a['id']}").status_code == 200


def test_get_missing_customer(lawyer_a):
    response = lawyer_a.get("/api/customers/9999")
    assert response.status_code == 404
    assert response.json() == {"message": "Customer not found"}


def test_update_customer_keeps_owner(lawyer_a, admin, customer_of_a):
    response = admin.put(
        f"/api/customers/{customer_of_a['id']}",
        json={"name": "Acme Corporation", "phone": "212.555.0100"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Acme Corporation"
    assert body["phone"] == "(212) 555-0100"
    assert body["lawyerId"] == lawyer_a.user["id"]
    assert body["version"] == 2


def test_update_customer_of_another_lawyer_is_forbidden(lawyer_b, customer_of_a, db):
    response = lawyer_b.put(
        f"/api/customers/{customer_of_a['id']}",
        json={"name": "Hijacked", "phone": "5551234567"},
    )
    assert response.status_code == 403
    assert db.get(Customer, customer_of_a["id"]).name == "Acme Corp"


def test_update_customer_rejects_invalid_phone(lawyer_a, customer_of_a):
    response = lawyer_a.put(
        f"/api/customers/{customer_of_a['id']}",
        json={"name": "Acme Corp", "phone": "555"},
    )
    assert response.status_code == 400
    assert "phone" in response.json()["errors"]


def test_update_missing_customer(lawyer_a):
    response = lawyer_a.put("/api/customers/9999", json={"name": "Ghost", "phone": "5551234567"})
    assert response.status_code == 404


def test_update_with_stale_version_conflicts(lawyer_a, customer_of_a):
    first = lawyer_a.put(
        f"/api/customers/{customer_of_a['id']}",
        json={"name": "Acme One", "phone": "5551234567", "version": 1},
    )
    assert first.status_code == 200

    second = lawyer_a.put(
        f"/api/customers/{customer_of_a['id']}",
        json={"name": "Acme Two", "phone": "5551234567", "version": 1},
    )
    assert second.status_code == 409
    assert lawyer_a.get(f"/api/customers/{customer_of_a['id']}").json()["name"] == "Acme One"


def test_delete_customer_removes_its_matters(lawyer_a, db):
    customer = _create_customer(lawyer_a)
    matter = _create_matter(lawyer_a, customer["id"])
    _create_matter(lawyer_a, customer["id"], title="Second")
    other = _create_customer(lawyer_a, name="Other Co")
    _create_matter(lawyer_a, other["id"])

    response = lawyer_a.delete(f"/api/customers/{customer['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Customer deleted successfully"}

    assert lawyer_a.get(f"/api/customers/{customer['id']}").status_code == 404
    assert lawyer_a.get(f"/api/customers/{customer['id']}/matters/{matter['id']}").status_code == 404
    assert db.query(Matter).filter(Matter.customer_id == customer["id"]).count() == 0
    assert db.query(Matter).filter(Matter.customer_id == other["id"]).count() == 1


def test_delete_customer_of_another_lawyer_is_forbidden(lawyer_b, customer_of_a, db):
    assert lawyer_b.delete(f"/api/customers/{customer_of_a['id']}").status_code == 403
    assert db.get(Customer, customer_of_a["id"]) is not None


def test_admin_can_delete_any_customer(admin, customer_of_a):
    assert admin.delete(f"/api/customers/{customer_of_a['id']}").status_code == 200


def test_delete_missing_customer(lawyer_a):
    assert lawyer_a.delete("/api/customers/9999").status_code == 404


def test_create_customer_rejects_blank_name(lawyer_a, db):
    response = lawyer_a.post("/api/customers", json={"name": "   ", "phone": "5551234567"})
    assert response.status_code == 400
    assert "name" in response.json()["errors"]
    assert db.query(Customer).count() == 0


def test_customer_name_is_trimmed(lawyer_a):
    created = _create_customer(lawyer_a, name="  Acme Corp  ")
    assert created["name"] == "Acme Corp"


def test_update_customer_rejects_blank_name(lawyer_a, customer_of_a):
    response = lawyer_a.put(
        f"/api/customers/{customer_of_a['id']}",
        json={"name": "\t ", "phone": "5551234567"},
    )
    assert response.status_code == 400
    assert "name" in response.json()["errors"]


def test_out_of_range_customer_id_is_rejected(lawyer_a):
    huge = 2**70
    for response in (
        lawyer_a.get(f"/api/customers/{huge}"),
        lawyer_a.put(f"/api/customers/{huge}", json={"name": "Ghost", "phone": "5551234567"}),
        lawyer_a.delete(f"/api/customers/{huge}"),
        lawyer_a.get("/api/customers/0"),
    ):
        assert response.status_code == 400
        assert "customer_id" in response.json()["errors"]
