"""Tests for post CRUD, ownership checks, search and listings."""

from conftest import register


class TestCreateAndRead:

    def test_create_returns_post_with_author(self, client, alice):
        response = client.post(
            "/api/post",
            json={"title": "Hi", "content": "World", "tags": ["intro"], "published": True},
            headers=alice["headers"],
        )
        assert response.status_code == 201
        post = response.json()
        assert post["title"] == "Hi"
        assert post["content"] == "World"
        assert post["tags"] == ["intro"]
        assert post["published"] is True
        assert post["coverImage"] is None
        assert post["author"] == {"id": alice["id"], "username": "alice"}
        assert "createdAt" in post and "updatedAt" in post

    def test_author_in_body_is_ignored(self, client, alice, bob, make_post):
        post = make_post(alice, author=bob["id"])
        assert post["author"]["id"] == alice["id"]

    def test_cover_image_accepts_camel_case(self, client, alice, make_post):
        post = make_post(alice, coverImage="https://img.example/cover.jpg")
        assert post["coverImage"] == "https://img.example/cover.jpg"

    def test_tags_are_trimmed_and_deduplicated(self, client, alice, make_post):
        post = make_post(alice, tags=[" python ", "web", "python", ""])
        assert post["tags"] == ["python", "web"]

    def test_title_is_required(self, client, alice):
        response = client.post("/api/post", json={"content": "World"}, headers=alice["headers"])
        assert response.status_code == 400
        assert "title" in response.json()["error"]

    def test_blank_content_is_rejected(self, client, alice):
        response = client.post(
            "/api/post", json={"title": "Hi", "content": "  "}, headers=alice["headers"]
        )
        assert response.status_code == 400

    def test_read_one_is_public(self, client, alice, make_post):
        post = make_post(alice)
        response = client.get(f"/api/post/{post['id']}")
        assert response.status_code == 200
        assert response.json() == post

    def test_read_missing_post(self, client):
        response = client.get("/api/post/12345")
        assert response.status_code == 404
        assert response.json() == {"error": "Post not found"}

    def test_non_numeric_id_is_rejected(self, client):
        response = client.get("/api/post/not-a-number")
        assert response.status_code == 400

    def test_read_all_is_public(self, client, alice, bob, make_post):
        first = make_post(alice, title="First")
        second = make_post(bob, title="Second")
        response = client.get("/api/post")
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [first["id"], second["id"]]
        assert response.json()[1]["author"] == {"id": bob["id"], "username": "bob"}

    def test_read_all_when_empty(self, client):
        response = client.get("/api/post")
        assert response.status_code == 200
        assert response.json() == []


class TestUpdate:

    def test_update_only_title_keeps_other_fields(self, client, alice, make_post):
        post = make_post(alice, tags=["a", "b"], published=True)
        response = client.put(
            f"/api/post/{post['id']}", json={"title": "New title"}, headers=alice["headers"]
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["title"] == "New title"
        assert updated["content"] == post["content"]
        assert updated["tags"] == ["a", "b"]
        assert updated["published"] is True

    def test_published_false_is_persisted(self, client, alice, make_post):
        post = make_post(alice, published=True)
        response = client.put(
            f"/api/post/{post['id']}", json={"published": False}, headers=alice["headers"]
        )
        assert response.status_code == 200
        assert response.json()["published"] is False
        assert client.get(f"/api/post/{post['id']}").json()["published"] is False

    def test_empty_strings_keep_prior_values(self, client, alice, make_post):
        post = make_post(alice)
        response = client.put(
            f"/api/post/{post['id']}",
            json={"title": "", "content": "", "coverImage": ""},
            headers=alice["headers"],
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Hi"
        assert response.json()["content"] == "World"

    def test_explicit_tag_list_replaces_tags(self, client, alice, make_post):
        post = make_post(alice, tags=["a", "b"])
        response = client.put(
            f"/api/post/{post['id']}", json={"tags": ["c"]}, headers=alice["headers"]
        )
        assert response.json()["tags"] == ["c"]

        response = client.put(
            f"/api/post/{post['id']}", json={"tags": []}, headers=alice["headers"]
        )
        assert response.json()["tags"] == []

    def test_other_user_cannot_update(self, client, alice, bob, make_post):
        post = make_post(alice)
        response = client.put(
            f"/api/post/{post['id']}", json={"title": "Hacked"}, headers=bob["headers"]
        )
        assert response.status_code == 403
        assert response.json() == {"error": "Unauthorized access"}
        assert client.get(f"/api/post/{post['id']}").json()["title"] == "Hi"

    def test_cover_image_can_be_replaced(self, client, alice, make_post):
        post = make_post(alice, coverImage="https://img.example/old.jpg")
        response = client.put(
            f"/api/post/{post['id']}",
            json={"coverImage": "https://img.example/new.jpg"},
            headers=alice["headers"],
        )
        assert response.status_code == 200
        assert response.json()["coverImage"] == "https://img.example/new.jpg"
        assert client.get(f"/api/post/{post['id']}").json()["coverImage"] == "https://img.example/new.jpg"

    def test_update_requires_token(self, client, alice, make_post):
        post = make_post(alice)
        response = client.put(f"/api/post/{post['id']}", json={"title": "x"})
        assert response.status_code == 401

    def test_update_missing_post(self, client, alice):
        response = client.put("/api/post/999", json={"title": "x"}, headers=alice["headers"])
        assert response.status_code == 404


class TestDelete:

    def test_owner_deletes_post(self, client, alice, make_post):
        post = make_post(alice)
        response = client.delete(f"/api/post/{post['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json() == {"message": "Post deleted successfully"}
        assert client.get(f"/api/post/{post['id']}").status_code == 404

    def test_delete_requires_token(self, client, alice, make_post):
        post = make_post(alice)
        response = client.delete(f"/api/post/{post['id']}")
        assert response.status_code == 401
        assert response.json() == {"error": "No token provided"}
        assert client.get(f"/api/post/{post['id']}").status_code == 200

    def test_delete_missing_post(self, client, alice):
        response = client.delete("/api/post/999", headers=alice["headers"])
        assert response.status_code == 404

    def test_other_user_cannot_delete(self, client, alice, bob, make_post):
        post = make_post(alice)
        response = client.delete(f"/api/post/{post['id']}", headers=bob["headers"])
        assert response.status_code == 403
        assert client.get(f"/api/post/{post['id']}").status_code == 200

    def test_deleted_post_tags_disappear(self, client, alice, make_post):
        post = make_post(alice, tags=["gone"])
        client.delete(f"/api/post/{post['id']}", headers=alice["headers"])
        assert client.get("/api/post/all-tags").json() == []


class TestSearch:

    def test_search_matches_content_case_insensitively(self, client, alice, make_post):
        post = make_post(alice, title="Hi", content="World")
        response = client.get("/api/post/search/world")
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [post["id"]]

    def test_search_matches_title(self, client, alice, make_post):
        post = make_post(alice, title="Learning FastAPI", content="body")
        make_post(alice, title="Other", content="body")
        response = client.get("/api/post/search/fastapi")
        assert [p["id"] for p in response.json()] == [post["id"]]

    def test_search_matches_single_tag(self, client, alice, make_post):
        make_post(alice, title="One", content="text", tags=["general"])
        tagged = make_post(alice, title="Two", content="text", tags=["kubernetes"])
        response = client.get("/api/post/search/KUBER")
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [tagged["id"]]

    def test_search_without_match_is_not_found(self, client, alice, make_post):
        make_post(alice)
        response = client.get("/api/post/search/zzzz")
        assert response.status_code == 404
        assert response.json() == {"error": "Post not found"}

    def test_search_folds_non_ascii_case(self, client, alice, make_post):
        post = make_post(alice, title="Été à Paris", content="voyage", tags=["Ümlaut"])
        by_title = client.get("/api/post/search/été")
        by_tag = client.get("/api/post/search/ümlaut")
        assert by_title.status_code == 200
        assert [p["id"] for p in by_title.json()] == [post["id"]]
        assert by_tag.status_code == 200
        assert [p["id"] for p in by_tag.json()] == [post["id"]]

    def test_like_wildcards_match_literally(self, client, alice, make_post):
        make_post(alice, title="Hi", content="World")
        assert client.get("/api/post/search/%25").status_code == 404
        assert client.get("/api/post/search/_").status_code == 404


class TestListings:

    def test_list_by_tag_requires_token(self, client, alice, make_post):
        make_post(alice, tags=["python"])
        assert client.get("/api/post/tags/python").status_code == 401

    def test_list_by_tag(self, client, alice, make_post):
        tagged = make_post(alice, tags=["python", "web"])
        make_post(alice, tags=["pythonic"])
        response = client.get("/api/post/tags/python", headers=alice["headers"])
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [tagged["id"]]

    def test_list_by_unknown_tag(self, client, alice, make_post):
        make_post(alice, tags=["python"])
        response = client.get("/api/post/tags/rust", headers=alice["headers"])
        assert response.status_code == 404

    def test_tags_path_lists_all_posts(self, client, alice, make_post):
        make_post(alice, tags=["a"])
        make_post(alice, tags=["b"])
        response = client.get("/api/post/tags")
        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_distinct_tags(self, client, alice, bob, make_post):
        make_post(alice, tags=["web", "python"])
        make_post(bob, tags=["python", "api"])
        response = client.get("/api/post/all-tags")
        assert response.status_code == 200
        assert response.json() == ["api", "python", "web"]

    def test_list_by_user(self, client, alice, bob, make_post):
        mine = make_post(alice, title="Mine")
        make_post(bob, title="Theirs")
        response = client.get(f"/api/post/user/posts/{alice['id']}", headers=bob["headers"])
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [mine["id"]]

    def test_list_by_user_without_posts(self, client, alice):
        carol = register(client, "carol", "carol@x.com")
        response = client.get(f"/api/post/user/posts/{carol['id']}", headers=alice["headers"])
        assert response.status_code == 404
        assert response.json() == {"error": "No posts found for this user"}

    def test_list_by_user_requires_token(self, client, alice):
        assert client.get(f"/api/post/user/posts/{alice['id']}").status_code == 401


def test_example_scenario(client):
    alice = register(client, "alice", "alice@x.com", password="pw123")
    bob = register(client, "bob", "bob@x.com")

    response = client.post(
        "/api/post",
        json={"title": "Hi", "content": "World", "tags": ["intro"], "published": True},
        headers=alice["headers"],
    )
    assert response.status_code == 201
    post = response.json()
    assert post["author"]["id"] == alice["id"]

    found = client.get("/api/post/search/world")
    assert found.status_code == 200
    assert post["id"] in [p["id"] for p in found.json()]

    response = client.put(f"/api/post/{post['id']}", json={"title": "Mine now"}, headers=bob["headers"])
    assert response.status_code == 403
    assert client.get(f"/api/post/{post['id']}").json() == post
