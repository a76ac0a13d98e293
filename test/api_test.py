from fastapi.testclient import TestClient

from rutz.main import SESSION_COOKIE_NAME, create_app
from rutz.mem_storage import MemStorage


def _create_user(client, email="grace@example.org"):
    response = client.post("/api/users", json={"email": email, "firstName": "Grace", "lastName": "Hopper"})
    assert response.status_code == 201
    return response.json()


def test_root_message(client):
    assert client.get("/").json() == {"message": "RÜTZ Botanicals API is running"}


def test_cart_end_to_end(client):
    response = client.post("/api/cart", json={"productId": "turmeric-extract", "quantity": 2})
    assert response.status_code == 200
    item_id = response.json()["id"]

    cart = client.get("/api/cart").json()
    assert len(cart) == 1
    assert cart[0]["quantity"] == 2
    assert cart[0]["sessionId"] == "abc"
    assert cart[0]["product"]["price"] == "49.99"

    assert client.delete(f"/api/cart/{item_id}").json() == {"message": "Item removed from cart"}
    assert client.get("/api/cart").json() == []


def test_cart_is_scoped_to_session(client):
    client.post("/api/cart", json={"productId": "turmeric-extract"})
    client.cookies.set(SESSION_COOKIE_NAME, "someone-else")
    assert client.get("/api/cart").json() == []


def test_cart_rejects_negative_quantity(client):
    item_id = client.post("/api/cart", json={"productId": "turmeric-extract"}).json()["id"]
    response = client.patch(f"/api/cart/{item_id}", json={"quantity": -1})
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request data"}

    response = client.patch(f"/api/cart/{item_id}", json={"quantity": 0})
    assert response.json()["quantity"] == 0


def test_cart_unknown_product_is_404(client):
    response = client.post("/api/cart", json={"productId": "nope", "quantity": 1})
    assert response.status_code == 404
    assert response.json() == {"message": "Product not found"}


def test_clear_cart(client):
    client.post("/api/cart", json={"productId": "turmeric-extract"})
    client.post("/api/cart", json={"productId": "chaga-capsules"})
    assert client.delete("/api/cart").json() == {"message": "Cart cleared"}
    assert client.get("/api/cart").json() == []


def test_session_cookie_issued_when_missing():
    client = TestClient(create_app(storage=MemStorage()))
    response = client.get("/api/cart")
    assert response.status_code == 200
    assert response.cookies.get(SESSION_COOKIE_NAME)


def test_products_use_camel_case_and_filters(client):
    products = client.get("/api/products", params={"plantMaterial": "Turmeric"}).json()
    assert [p["id"] for p in products] == ["turmeric-extract"]
    assert products[0]["plantMaterial"] == "Turmeric"
    assert "shortDescription" in products[0]

    filters = client.get("/api/products/filters").json()
    assert set(filters) == {"sectors", "plantMaterials", "productTypes"}


def test_create_and_fetch_product(client):
    body = {
        "name": "Sweetgrass Tea", "description": "Braided sweetgrass infusion.",
        "shortDescription": "Herbal infusion", "price": "12.00", "origin": "Manitoba",
        "category": "Herbal Teas", "sector": "Functional Foods", "plantMaterial": "Sweetgrass",
        "productType": "Loose leaf herbal tea",
    }
    created = client.post("/api/products", json=body)
    assert created.status_code == 201
    fetched = client.get(f"/api/products/{created.json()['id']}").json()
    assert fetched["price"] == "12.00"
    assert fetched["name"] == "Sweetgrass Tea"


def test_products_by_plant(client):
    group = client.get("/api/products/by-plant/Chaga Mushroom").json()
    assert group["totalProducts"] == 5
    missing = client.get("/api/products/by-plant/Mandrake")
    assert missing.status_code == 404


def test_not_found_body_shape(client):
    response = client.get("/api/products/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"message": "Product not found"}


def test_storage_failure_is_generic_500():
    class BrokenStorage(MemStorage):
        def get_products(self, filters=None):
            raise RuntimeError("connection refused")

    client = TestClient(create_app(storage=BrokenStorage()))
    response = client.get("/api/products")
    assert response.status_code == 500
    assert response.json() == {"message": "Failed to fetch products"}


def test_supply_chain_and_impact(client):
    steps = client.get("/api/supply-chain").json()
    assert [s["stepNumber"] for s in steps] == [1, 2, 3, 4]
    assert client.get("/api/supply-chain/step-1").json()["id"] == "step-1"
    assert client.get("/api/impact").json()["schoolsBuilt"] == 12


def test_community_project_flow(client):
    body = {
        "name": "Greenhouse", "description": "Medicinal plant nursery", "location": "Kenora",
        "community": "Kenora First Nation", "category": "environment",
        "fundingGoal": "100.00", "currentFunding": "50.00",
    }
    created = client.post("/api/community-projects", json=body)
    assert created.status_code == 201
    project = created.json()
    assert project["fundingPercentage"] == 50

    over = client.patch(f"/api/community-projects/{project['id']}", json={"currentFunding": "150.00"})
    assert over.status_code == 400

    done = client.patch(f"/api/community-projects/{project['id']}", json={"status": "completed"}).json()
    assert done["completionDate"] is not None
    assert client.get("/api/community-projects/missing").status_code == 404


def test_milestones_and_live_updates(client):
    assert len(client.get("/api/community-projects/proj-001/milestones").json()) == 2
    assert len(client.get("/api/impact-milestones", params={"projectId": "proj-002"}).json()) == 1

    created = client.post("/api/live-updates", json={
        "projectId": "proj-001", "updateType": "progress", "title": "Walls up", "description": "Framing done",
    })
    assert created.status_code == 201
    assert client.get("/api/live-updates", params={"limit": 1}).json()[0]["title"] == "Walls up"


def test_recommendations_for_session(client):
    assert client.get("/api/recommendations").status_code == 404
    prefs = {"healthGoals": ["stress_relief"], "preferredFormats": ["powder"], "budgetRange": "medium"}
    first = client.post("/api/recommendations", json=prefs).json()
    second = client.post("/api/recommendations", json=prefs).json()
    assert [r["productId"] for r in first["recommendedProducts"]] == \
        [r["productId"] for r in second["recommendedProducts"]]
    assert client.get("/api/recommendations").json()["id"] == second["id"]
    assert client.get("/api/user-preferences").json()["healthGoals"] == ["stress_relief"]


def test_user_registration_and_duplicate_email(client):
    user = _create_user(client)
    duplicate = client.post("/api/users", json={"email": "grace@example.org", "firstName": "G", "lastName": "H"})
    assert duplicate.status_code == 400
    assert duplicate.json() == {"message": "Email already registered"}

    updated = client.put(f"/api/users/{user['id']}", json={"phone": "555-0100"}).json()
    assert updated["phone"] == "555-0100"
    detail = client.get(f"/api/users/{user['id']}").json()
    assert detail["badges"] == []
    assert client.get("/api/users/missing").status_code == 404


def test_learning_completion_pays_xp_once(client):
    user = _create_user(client)
    url = f"/api/users/{user['id']}/learning/intro-traditional-medicine"

    assert client.put(url, json={"progress": 50}).json()["status"] == "in_progress"
    done = client.put(url, json={"progress": 100}).json()
    assert done["status"] == "completed"
    assert done["xpEarned"] == 100
    again = client.put(url, json={"progress": 100}).json()
    assert again["xpEarned"] == 100

    journey = client.get(f"/api/users/{user['id']}/journey").json()
    assert journey["totalXp"] == 100
    assert client.put(f"/api/users/{user['id']}/learning/missing", json={"progress": 10}).status_code == 404


def test_badges(client):
    user = _create_user(client)
    assert len(client.get("/api/badges").json()) == 4
    awarded = client.post(f"/api/users/{user['id']}/badges/first-purchase")
    assert awarded.status_code == 201
    assert client.post(f"/api/users/{user['id']}/badges/first-purchase").status_code == 400
    assert client.post(f"/api/users/{user['id']}/badges/no-such-badge").status_code == 404
    eligible = client.get(f"/api/users/{user['id']}/badges/eligible").json()
    assert "first-purchase" not in {b["id"] for b in eligible}
    assert client.get(f"/api/users/{user['id']}/badges").json()[0]["badgeId"] == "first-purchase"


def test_journey_advance(client):
    user = _create_user(client)
    base = f"/api/users/{user['id']}/journey"
    assert client.get(base).json()["currentStageId"] == "explorer"
    assert client.get(f"{base}/can-advance").json() == {"canAdvance": False, "nextStage": None}
    assert client.post(f"{base}/advance").status_code == 400

    client.put(f"/api/users/{user['id']}", json={"totalSpent": "5.00", "learningProgress": 30})
    assert client.get(f"{base}/can-advance").json()["canAdvance"] is True
    advanced = client.post(f"{base}/advance").json()
    assert advanced["currentStageId"] == "seeker"

    granted = client.post(f"{base}/xp", json={"xp": 1000}).json()
    assert granted["totalXp"] == 1100
    assert granted["level"] == 2


def test_impact_actions(client):
    user = _create_user(client)
    url = f"/api/users/{user['id']}/impact-actions"
    created = client.post(url, json={
        "actionType": "donation", "description": "Supported the school",
        "impactValue": "25.00", "xpEarned": 20, "loyaltyPointsEarned": 10,
    })
    assert created.status_code == 201
    assert len(client.get(url).json()) == 1
    summary = client.get(f"/api/users/{user['id']}/impact").json()
    assert summary == {"totalImpact": 25.0, "totalXp": 20, "totalLoyaltyPoints": 10}
    assert client.get(f"/api/users/{user['id']}").json()["loyaltyPoints"] == 10


def test_checkout_cancel_and_receipt(client):
    user = _create_user(client)
    client.post("/api/cart", json={"productId": "turmeric-extract", "quantity": 2})

    placed = client.post("/api/orders", json={"userId": user["id"]})
    assert placed.status_code == 201
    order = placed.json()
    assert order["subtotal"] == "99.98"
    assert order["status"] == "pending"
    assert len(order["items"]) == 1
    assert client.get("/api/cart").json() == []
    assert client.get("/api/inventory/turmeric-extract").json()["reservedStock"] == 2
    assert [o["id"] for o in client.get(f"/api/users/{user['id']}/orders").json()] == [order["id"]]

    receipt = client.get(f"/api/orders/{order['id']}/receipt")
    assert receipt.headers["content-type"] == "application/pdf"
    assert receipt.content.startswith(b"%PDF")

    cancelled = client.patch(f"/api/orders/{order['id']}/status", json={"status": "cancelled"})
    assert cancelled.json()["status"] == "cancelled"
    assert client.get("/api/inventory/turmeric-extract").json()["reservedStock"] == 0
    assert client.get(f"/api/users/{user['id']}").json()["totalSpent"] == "0.00"

    reopened = client.patch(f"/api/orders/{order['id']}/status", json={"status": "pending"})
    assert reopened.status_code == 400
    assert client.get(f"/api/orders/{order['id']}").json()["status"] == "cancelled"


def test_checkout_errors(client):
    empty = client.post("/api/orders", json={})
    assert empty.status_code == 400
    assert empty.json() == {"message": "Cart is empty"}
    client.post("/api/cart", json={"productId": "turmeric-extract"})
    assert client.post("/api/orders", json={"userId": "ghost"}).status_code == 404
    assert client.get("/api/orders/missing").status_code == 404


def test_inventory_routes(client):
    assert len(client.get("/api/inventory").json()) == 15
    low = client.get("/api/inventory/low-stock").json()
    assert [row["productId"] for row in low] == ["chaga-wound-care-gel"]

    availability = client.get("/api/inventory/chaga-wound-care-gel/availability", params={"quantity": 20}).json()
    assert availability["available"] is False

    reserved = client.post("/api/inventory/chaga-capsules/reserve", json={"quantity": 5, "orderId": "o-1"})
    assert reserved.json()["availableStock"] == 175
    too_many = client.post("/api/inventory/chaga-capsules/reserve", json={"quantity": 1000, "orderId": "o-1"})
    assert too_many.status_code == 400
    released = client.post("/api/inventory/chaga-capsules/release", json={"quantity": 5, "orderId": "o-1"})
    assert released.json()["reservedStock"] == 0

    movements = client.get("/api/inventory/movements", params={"productId": "chaga-capsules"}).json()
    assert len(movements) == 2

    below = client.put("/api/inventory/chaga-capsules", json={"currentStock": 100})
    assert below.json()["currentStock"] == 100
    assert client.put("/api/inventory/missing", json={"currentStock": 1}).status_code == 404


def test_plant_routes(client):
    assert len(client.get("/api/global-indigenous-plants").json()) == 15
    assert len(client.get("/api/global-indigenous-plants/region/Australia").json()) == 2
    assert len(client.get("/api/global-indigenous-plants/tribe/Cherokee").json()) == 2
    assert client.get("/api/global-indigenous-plants/manuka").json()["plantName"] == "Manuka"
    assert client.get("/api/global-indigenous-plants/missing").status_code == 404

    found = client.post("/api/global-indigenous-plants/search",
                        json={"searchTerm": "vitamin", "region": "South America"}).json()
    assert [p["id"] for p in found] == ["camu-camu"]


def test_cors_allows_only_configured_origins(client):
    allowed = client.get("/", headers={"Origin": "http://localhost:5173"})
    assert allowed.headers["access-control-allow-origin"] == "http://localhost:5173"
    foreign = client.get("/", headers={"Origin": "https://elsewhere.example"})
    assert "access-control-allow-origin" not in foreign.headers
