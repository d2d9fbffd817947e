"""
Package catalog: public browsing, admin management and the detail documents.
"""

from datetime import datetime
from decimal import Decimal

DETAILS = {
    "itinerary": [
        {"day": 2, "title": "Trek to Kedarnath", "description": "16 km from Gaurikund", "activities": ["trek"]},
        {"day": 1, "title": "Arrive Haridwar", "description": "Evening Ganga aarti", "meals": "Dinner"}
    ],
    "inclusions": ["Hotel stays", "Breakfast"],
    "exclusions": ["Helicopter tickets"],
    "terms": ["Carry valid ID"],
    "bestTimeToVisit": "May to June",
    "groupSize": {"min": 2, "max": 12},
    "pricing": {"adultPrice": "11000", "childPrice": "8000"},
    "gallery": [{"url": "https://img.yatri.in/k1.jpg", "caption": "Temple"}],
    "reviews": [{"userName": "Neha", "rating": 5, "comment": "Well organised"}]
}

def test_public_listing_shows_active_packages(client, create_package):
    older = create_package(title="Older")
    newer = create_package(title="Newer")

    response = client.post("/api/common/getPackages")
    assert response.status_code == 200
    titles = [p["title"] for p in response.json()["data"]]
    assert titles == ["Newer", "Older"]
    assert response.json()["data"][0]["id"] == newer["id"]
    assert response.json()["data"][1]["id"] == older["id"]

def test_get_package_by_id(client, create_package):
    package = create_package(price="12500.50")

    response = client.post("/api/common/getPackageById", json={"packageId": package["id"]})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Kedarnath Yatra"
    assert data["locations"] == ["Haridwar", "Guptkashi", "Kedarnath"]
    assert Decimal(str(data["price"])) == Decimal("12500.50")
    assert data["status"] == 1

    missing = client.post("/api/common/getPackageById", json={"packageId": 4040})
    assert missing.status_code == 404
    assert missing.json() == {"status": "error", "message": "Package not found"}

def test_create_package_validation(client, admin_token, auth):
    response = client.post("/api/admin/createPackage", headers=auth(admin_token), json={
        "title": "No places",
        "description": "Missing locations",
        "locations": [],
        "price": "100",
        "duration": "1 Day",
        "imageUrl": "https://img.yatri.in/x.jpg"
    })
    assert response.status_code == 400
    assert response.json()["status"] == "error"

def test_update_package_bumps_updated_at(client, create_package, admin_token, auth):
    package = create_package()

    response = client.post("/api/admin/updatePackage", headers=auth(admin_token), json={
        "packageId": package["id"],
        "price": "13999"
    })
    assert response.status_code == 200
    updated = response.json()["data"]
    assert Decimal(str(updated["price"])) == Decimal("13999")
    assert updated["title"] == package["title"]
    assert datetime.fromisoformat(updated["updatedAt"]) > datetime.fromisoformat(updated["createdAt"])

def test_package_details_lifecycle(client, create_package, admin_token, auth):
    package = create_package()
    body = dict(DETAILS, packageId=package["id"])

    added = client.post("/api/admin/addPackageDetails", headers=auth(admin_token), json=body)
    assert added.status_code == 201
    assert [day["day"] for day in added.json()["data"]["itinerary"]] == [1, 2]

    duplicate = client.post("/api/admin/addPackageDetails", headers=auth(admin_token), json=body)
    assert duplicate.status_code == 409

    updated = client.post("/api/admin/updatePackageDetails", headers=auth(admin_token), json={
        "packageId": package["id"],
        "inclusions": ["Hotel stays", "All meals"]
    })
    assert updated.status_code == 200
    assert updated.json()["data"]["inclusions"] == ["Hotel stays", "All meals"]
    assert updated.json()["data"]["exclusions"] == ["Helicopter tickets"]

    view = client.post("/api/common/getPackageDetails", json={"packageId": package["id"]})
    assert view.status_code == 200
    data = view.json()["data"]
    assert data["package"]["id"] == package["id"]
    assert data["details"]["bestTimeToVisit"] == "May to June"
    assert data["details"]["groupSize"] == {"min": 2, "max": 12}
    assert data["details"]["reviews"][0]["rating"] == 5

    deleted = client.post("/api/admin/deletePackageDetails", headers=auth(admin_token), json={"packageId": package["id"]})
    assert deleted.status_code == 200
    again = client.post("/api/admin/deletePackageDetails", headers=auth(admin_token), json={"packageId": package["id"]})
    assert again.status_code == 404

    bare = client.post("/api/common/getPackageDetails", json={"packageId": package["id"]})
    assert bare.json()["data"]["details"] is None

def test_details_reject_bad_group_size(client, create_package, admin_token, auth):
    package = create_package()
    response = client.post("/api/admin/addPackageDetails", headers=auth(admin_token), json={
        "packageId": package["id"],
        "groupSize": {"min": 10, "max": 4}
    })
    assert response.status_code == 400

def test_soft_delete(client, create_package, admin_token, auth):
    package = create_package()
    client.post("/api/admin/addPackageDetails", headers=auth(admin_token), json=dict(DETAILS, packageId=package["id"]))

    response = client.post("/api/admin/deletePackage", headers=auth(admin_token), json={"packageId": package["id"]})
    assert response.status_code == 200
    assert response.json()["data"]["status"] == 0

    assert client.post("/api/common/getPackages").json()["data"] == []
    hidden = client.post("/api/common/getPackageById", json={"packageId": package["id"]})
    assert hidden.status_code == 404

    as_admin = client.post("/api/common/getPackageById", headers=auth(admin_token), json={"packageId": package["id"]})
    assert as_admin.status_code == 200
    assert as_admin.json()["data"]["status"] == 0

    everything = client.post("/api/admin/getAllPackages", headers=auth(admin_token))
    assert [(p["id"], p["status"]) for p in everything.json()["data"]] == [(package["id"], 0)]

    details = client.post("/api/common/getPackageDetails", headers=auth(admin_token), json={"packageId": package["id"]})
    assert details.json()["data"]["details"] is None

def test_catalog_management_is_admin_only(client, register, create_package, auth):
    package = create_package()
    token = register(name="Customer", email="customer@yatri.in")

    for path, body in (
        ("/api/admin/getAllPackages", None),
        ("/api/admin/updatePackage", {"packageId": package["id"], "price": "1"}),
        ("/api/admin/deletePackage", {"packageId": package["id"]}),
    ):
        response = client.post(path, headers=auth(token), json=body)
        assert response.status_code == 403, path

def test_detail_list_sections_cannot_be_nulled(client, create_package, admin_token, auth):
    """A null list section is refused and the stored document stays readable"""
    package = create_package()
    client.post("/api/admin/addPackageDetails", headers=auth(admin_token), json=dict(DETAILS, packageId=package["id"]))

    for section in ("itinerary", "inclusions", "exclusions", "terms", "gallery", "reviews"):
        response = client.post("/api/admin/updatePackageDetails", headers=auth(admin_token), json={
            "packageId": package["id"],
            section: None
        })
        assert response.status_code == 400, section
        assert response.json()["status"] == "error"

    view = client.post("/api/common/getPackageDetails", json={"packageId": package["id"]})
    assert view.status_code == 200
    assert [day["day"] for day in view.json()["data"]["details"]["itinerary"]] == [1, 2]
    assert view.json()["data"]["details"]["inclusions"] == ["Hotel stays", "Breakfast"]

    cleared = client.post("/api/admin/updatePackageDetails", headers=auth(admin_token), json={
        "packageId": package["id"],
        "gallery": [],
        "pricing": None
    })
    assert cleared.status_code == 200
    assert cleared.json()["data"]["gallery"] == []
    assert cleared.json()["data"]["pricing"] is None
