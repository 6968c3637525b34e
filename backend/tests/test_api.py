import types
import uuid

import pytest

from inkwell.api.routes import taxonomy as taxonomy_routes


async def create(client, path, headers, **body):
    response = await client.post(f"/v1{path}", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_route_modules_are_reachable_from_the_package():
    assert isinstance(taxonomy_routes, types.ModuleType)
    assert taxonomy_routes.build_taxonomy_router is not None
    assert hasattr(taxonomy_routes, "CategoryStore")


async def test_health_and_root(client):
    assert (await client.get("/health")).json() == {"status": "healthy"}
    root = (await client.get("/")).json()
    assert root["docs"] == "/v1/docs"


async def test_science_history_physics(client, admin_headers):
    science = await create(client, "/topics", admin_headers, name="Science")
    assert science["slug"] == "science"
    science_physics = await create(client, f"/topics/{science['id']}/subtopics", admin_headers, name="Physics")
    assert science_physics["slug"] == "physics"

    history = await create(client, "/topics", admin_headers, name="History")
    history_physics = await create(client, f"/topics/{history['id']}/subtopics", admin_headers, name="Physics")
    assert history_physics["slug"] == "physics"

    response = await client.delete(f"/v1/topics/{science['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Topic deleted successfully"}

    assert (await client.get(f"/v1/topics/{science['id']}")).status_code == 404
    gone = await client.get(f"/v1/subtopics/{science_physics['id']}")
    assert gone.status_code == 404
    assert gone.json() == {"error": "Subtopic not found"}

    children = (await client.get(f"/v1/topics/{history['id']}/subtopics")).json()
    assert [c["id"] for c in children] == [history_physics["id"]]

    listing = (await client.get("/v1/topics")).json()
    assert listing["total"] == 1
    assert listing["items"][0]["slug"] == "history"
    assert listing["items"][0]["subcategory_count"] == 1


async def test_duplicate_subcategory_slug_is_400(client, admin_headers):
    science = await create(client, "/topics", admin_headers, name="Science")
    await create(client, f"/topics/{science['id']}/subtopics", admin_headers, name="Physics")

    response = await client.post(
        f"/v1/topics/{science['id']}/subtopics", json={"name": "physics"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert "already exists" in response.json()["error"]


async def test_blank_name_is_400(client, admin_headers):
    response = await client.post("/v1/bookgenres", json={"name": "  "}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Book genre name is required"}


@pytest.mark.parametrize(
    "method,path",
    [
        ("POST", "/v1/topics"),
        ("PUT", f"/v1/topics/{uuid.uuid4()}"),
        ("DELETE", f"/v1/topics/{uuid.uuid4()}"),
        ("PUT", "/v1/topics/order"),
        ("POST", f"/v1/topics/{uuid.uuid4()}/subtopics"),
        ("PUT", f"/v1/subtopics/{uuid.uuid4()}"),
        ("DELETE", f"/v1/subgenres/{uuid.uuid4()}"),
        ("PUT", f"/v1/bookgenres/{uuid.uuid4()}/subgenres/order"),
        ("POST", "/v1/posts"),
    ],
)
async def test_mutations_require_admin(client, monkeypatch, method, path):
    class ExplodingStore:
        def __init__(self, *args, **kwargs):
            raise AssertionError("store reached without authorization")

    monkeypatch.setattr(taxonomy_routes, "CategoryStore", ExplodingStore)
    monkeypatch.setattr(taxonomy_routes, "SubcategoryStore", ExplodingStore)

    response = await client.request(method, path, json={"name": "X", "title": "X", "updates": []})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized. Admin access required."}

    bad_token = await client.request(
        method, path, json={"name": "X"}, headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert bad_token.status_code == 401


async def test_cache_headers(client, admin_headers):
    await create(client, "/topics", admin_headers, name="Science")

    cached = await client.get("/v1/topics")
    assert cached.headers["cache-control"] == "public, max-age=60, stale-while-revalidate=30"
    assert cached.headers["x-query-time"].endswith("ms")

    fresh = await client.get("/v1/topics", params={"fresh": "true"})
    assert fresh.headers["cache-control"] == "no-cache, no-store, must-revalidate"

    tree = await client.get("/v1/topics/with-children")
    assert tree.headers["cache-control"] == "public, max-age=600, stale-while-revalidate=300"


async def test_with_children_and_featured(client, admin_headers):
    fiction = await create(client, "/bookgenres", admin_headers, name="Fiction", featured=True)
    await create(client, "/bookgenres", admin_headers, name="Essays")
    await create(client, f"/bookgenres/{fiction['id']}/subgenres", admin_headers, name="Mystery")
    await create(client, f"/bookgenres/{fiction['id']}/subgenres", admin_headers, name="Fantasy", order=0)

    tree = (await client.get("/v1/bookgenres/with-children")).json()
    assert tree["total"] == 2
    assert [g["name"] for g in tree["items"]] == ["Fiction", "Essays"]
    assert [s["name"] for s in tree["items"][0]["subcategories"]] == ["Fantasy", "Mystery"]
    assert tree["items"][0]["subcategory_count"] == 2

    featured = (await client.get("/v1/bookgenres", params={"featured": "true"})).json()
    assert [g["name"] for g in featured["items"]] == ["Fiction"]

    # Genres and topics never mix
    assert (await client.get("/v1/topics")).json()["total"] == 0


async def test_get_by_slug_and_update(client, admin_headers):
    science = await create(client, "/topics", admin_headers, name="Science")

    by_slug = await client.get("/v1/topics/slug/science")
    assert by_slug.json()["id"] == science["id"]
    assert (await client.get("/v1/topics/slug/nope")).status_code == 404

    response = await client.put(
        f"/v1/topics/{science['id']}",
        json={"name": "Natural Science", "regenerate_slug": True},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["slug"] == "natural-science"


async def test_reorder_endpoints(client, admin_headers):
    a = await create(client, "/topics", admin_headers, name="A")
    b = await create(client, "/topics", admin_headers, name="B")

    response = await client.put(
        "/v1/topics/order",
        json={"updates": [{"id": a["id"], "order": 1}, {"id": b["id"], "order": 0}]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert [c["slug"] for c in (await client.get("/v1/topics")).json()["items"]] == ["b", "a"]

    x = await create(client, f"/topics/{a['id']}/subtopics", admin_headers, name="X")
    y = await create(client, f"/topics/{a['id']}/subtopics", admin_headers, name="Y")
    response = await client.put(
        f"/v1/topics/{a['id']}/subtopics/order",
        json={"updates": [{"id": x["id"], "order": 5}, {"id": y["id"], "order": 1}]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    children = (await client.get(f"/v1/topics/{a['id']}/subtopics")).json()
    assert [c["name"] for c in children] == ["Y", "X"]


async def test_subcategory_update_and_delete(client, admin_headers):
    science = await create(client, "/topics", admin_headers, name="Science")
    physics = await create(client, f"/topics/{science['id']}/subtopics", admin_headers, name="Physics")

    response = await client.put(
        f"/v1/subtopics/{physics['id']}", json={"description": "Matter and motion"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["description"] == "Matter and motion"

    response = await client.delete(f"/v1/subtopics/{physics['id']}", headers=admin_headers)
    assert response.json() == {"message": "Subtopic deleted successfully"}
    assert (await client.get(f"/v1/topics/{science['id']}/subtopics")).json() == []


async def test_content_filters_and_association(client, admin_headers):
    science = await create(client, "/topics", admin_headers, name="Science")
    history = await create(client, "/topics", admin_headers, name="History")
    physics = await create(client, f"/topics/{science['id']}/subtopics", admin_headers, name="Physics")

    await create(client, "/posts", admin_headers, title="Quarks", category_id=science["id"], subcategory_id=physics["id"])
    await create(client, "/posts", admin_headers, title="Lab notes", category_id=science["id"])
    await create(client, "/posts", admin_headers, title="Rome", category_id=history["id"])

    orphan = await client.post("/v1/posts", json={"title": "Lost", "subcategory_id": physics["id"]}, headers=admin_headers)
    assert orphan.status_code == 400
    assert orphan.json() == {"error": "subcategory without category"}

    mismatched = await client.post(
        "/v1/posts",
        json={"title": "Wrong", "category_id": history["id"], "subcategory_id": physics["id"]},
        headers=admin_headers,
    )
    assert mismatched.status_code == 400

    by_category = (await client.get("/v1/posts", params={"categoryId": science["id"]})).json()
    assert by_category["total"] == 2
    assert {p["title"] for p in by_category["items"]} == {"Quarks", "Lab notes"}

    by_sub = (await client.get("/v1/posts", params={"categoryId": science["id"], "subCategoryId": physics["id"]})).json()
    assert [p["title"] for p in by_sub["items"]] == ["Quarks"]

    everything = (await client.get("/v1/posts", params={"limit": 2})).json()
    assert everything["total"] == 3
    assert len(everything["items"]) == 2

    # Deleting the topic leaves its posts unclassified rather than dangling
    await client.delete(f"/v1/topics/{science['id']}", headers=admin_headers)
    posts = (await client.get("/v1/posts", params={"limit": 10})).json()["items"]
    quarks = next(p for p in posts if p["title"] == "Quarks")
    assert quarks["category_id"] is None
    assert quarks["subcategory_id"] is None


async def test_books_use_genres(client, admin_headers):
    fiction = await create(client, "/bookgenres", admin_headers, name="Fiction")
    book = await create(client, "/books", admin_headers, title="Dune", author="Frank Herbert", category_id=fiction["id"])
    assert book["slug"] == "dune"

    topic = await create(client, "/topics", admin_headers, name="Science")
    response = await client.post(
        "/v1/books", json={"title": "Cosmos", "category_id": topic["id"]}, headers=admin_headers
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Book genre not found"}


async def test_inactive_entries_are_hidden_from_public_reads(client, admin_headers):
    science = await create(client, "/topics", admin_headers, name="Science")
    archived = await create(client, "/topics", admin_headers, name="Archived", is_active=False)
    await create(client, f"/topics/{science['id']}/subtopics", admin_headers, name="Physics")
    alchemy = await create(client, f"/topics/{science['id']}/subtopics", admin_headers, name="Alchemy", is_active=False)
    assert science["is_active"] is True
    assert archived["is_active"] is False

    listed = (await client.get("/v1/topics")).json()
    assert listed["total"] == 2
    assert listed["items"][0]["subcategory_count"] == 1

    active = (await client.get("/v1/topics", params={"active": "true"})).json()
    assert [c["name"] for c in active["items"]] == ["Science"]

    tree = (await client.get("/v1/topics/with-children", params={"active": "true"})).json()
    assert [c["name"] for c in tree["items"]] == ["Science"]
    assert [s["name"] for s in tree["items"][0]["subcategories"]] == ["Physics"]

    children = (await client.get(f"/v1/topics/{science['id']}/subtopics", params={"active": "true"})).json()
    assert [s["name"] for s in children] == ["Physics"]

    assert (await client.get("/v1/topics/slug/archived")).status_code == 404
    # Admin reads by id still see it
    assert (await client.get(f"/v1/topics/{archived['id']}")).json()["is_active"] is False

    response = await client.put(f"/v1/subtopics/{alchemy['id']}", json={"is_active": True}, headers=admin_headers)
    assert response.json()["is_active"] is True
    assert (await client.get("/v1/topics/slug/science")).json()["subcategory_count"] == 2


async def test_malformed_input_uses_error_shape(client):
    response = await client.get("/v1/topics/not-a-uuid")
    assert response.status_code == 400
    body = response.json()
    assert "detail" not in body
    assert body["error"].startswith("Invalid category_id")

    response = await client.get("/v1/posts", params={"categoryId": "bad"})
    assert response.status_code == 400
    assert set(response.json()) == {"error"}
