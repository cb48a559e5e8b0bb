from watchmatch.core.config import settings
from watchmatch.models import Preferences, SwipeCreate


def swipe(client, headers, tmdb_id, liked=True):
    return client.post(
        f"{settings.API_STR}/movies/swipe", headers=headers, json={"tmdbId": tmdb_id, "liked": liked}
    )


def paired(storage, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    storage.pair_users(alice.id, bob.id)
    return alice, bob


def test_discover_anonymous_is_unfiltered(client, tmdb):
    resp = client.get(f"{settings.API_STR}/movies/discover", params={"page": 2})
    assert resp.status_code == 200
    assert [m["id"] for m in resp.json()["results"]] == [42, 7]

    [request] = tmdb.requests
    assert request.url.params["page"] == "2"
    assert request.url.params["sort_by"] == "popularity.desc"
    assert "with_genres" not in request.url.params


def test_discover_filters_by_preferred_genres(client, storage, tmdb, make_user, auth_headers):
    user = make_user()
    storage.update_user_preferences(user.id, Preferences(genres=["comedy", "ACTION", "Mumblecore"]))

    resp = client.get(f"{settings.API_STR}/movies/discover", headers=auth_headers(user.id))
    assert resp.status_code == 200

    assert tmdb.paths() == ["/genre/movie/list", "/discover/movie"]
    assert tmdb.requests[-1].url.params["with_genres"] == "35|28"


def test_discover_empty_page(client, tmdb):
    tmdb.discover_results = []
    resp = client.get(f"{settings.API_STR}/movies/discover")
    assert resp.status_code == 404


def test_discover_upstream_failure(client, tmdb):
    tmdb.failures["/discover/movie"] = [503, 503, 503]
    resp = client.get(f"{settings.API_STR}/movies/discover")
    assert resp.status_code == 500


def test_movie_detail(client):
    resp = client.get(f"{settings.API_STR}/movies/42")
    assert resp.status_code == 200
    assert resp.json() == {
        "id": 42,
        "title": "Arrival",
        "overview": "Linguist meets heptapods.",
        "posterPath": "/arrival.jpg",
        "backdropPath": "/arrival-bg.jpg",
        "voteAverage": 7.9,
        "releaseDate": "2016-11-11",
    }


def test_movie_detail_upstream_failure(client):
    resp = client.get(f"{settings.API_STR}/movies/31337")
    assert resp.status_code == 500


def test_swipe_without_partner(client, make_user, auth_headers):
    alice = make_user("alice")
    resp = swipe(client, auth_headers(alice.id), 42)
    assert resp.status_code == 200
    data = resp.json()
    assert data["userId"] == alice.id
    assert data["tmdbId"] == 42
    assert data["liked"] is True
    assert data["match"] is False
    assert "movieTitle" not in data


def test_swipe_completes_match(client, storage, tmdb, make_user, auth_headers):
    alice, bob = paired(storage, make_user)
    storage.add_movie_swipe(SwipeCreate(user_id=bob.id, tmdb_id=42, liked=True))

    resp = swipe(client, auth_headers(alice.id), 42)
    assert resp.status_code == 200
    assert resp.json()["match"] is True
    assert resp.json()["movieTitle"] == "Arrival"

    [match] = storage.get_matches(alice.id)
    assert match.tmdb_id == 42
    assert {match.user1_id, match.user2_id} == {alice.id, bob.id}
    assert "/movie/42" in tmdb.paths()


def test_repeated_likes_do_not_duplicate_match(client, storage, make_user, auth_headers):
    alice, bob = paired(storage, make_user)
    swipe(client, auth_headers(bob.id), 42)
    assert swipe(client, auth_headers(alice.id), 42).json()["match"] is True

    assert swipe(client, auth_headers(alice.id), 42).json()["match"] is False
    assert swipe(client, auth_headers(bob.id), 42).json()["match"] is False
    assert len(storage.get_matches(alice.id)) == 1


def test_dislike_never_matches(client, storage, make_user, auth_headers):
    alice, bob = paired(storage, make_user)
    swipe(client, auth_headers(bob.id), 42)

    resp = swipe(client, auth_headers(alice.id), 42, liked=False)
    assert resp.json()["match"] is False
    assert storage.get_matches(alice.id) == []


def test_match_survives_title_lookup_failure(client, storage, tmdb, make_user, auth_headers):
    alice, bob = paired(storage, make_user)
    swipe(client, auth_headers(bob.id), 7)
    tmdb.failures["/movie/7"] = [404]

    resp = swipe(client, auth_headers(alice.id), 7)
    assert resp.status_code == 200
    assert resp.json()["match"] is True
    assert "movieTitle" not in resp.json()
    assert len(storage.get_matches(bob.id)) == 1


def test_swipe_requires_auth(client):
    assert swipe(client, {}, 42).status_code == 401


def test_swipe_rejects_invalid_payload(client, make_user, auth_headers):
    alice = make_user("alice")
    resp = client.post(
        f"{settings.API_STR}/movies/swipe", headers=auth_headers(alice.id), json={"tmdbId": "abc"}
    )
    assert resp.status_code == 400


def test_list_matches(client, storage, make_user, auth_headers):
    alice, bob = paired(storage, make_user)
    for tmdb_id in (42, 7):
        swipe(client, auth_headers(alice.id), tmdb_id)
        swipe(client, auth_headers(bob.id), tmdb_id)

    for user in (alice, bob):
        resp = client.get(f"{settings.API_STR}/matches", headers=auth_headers(user.id))
        assert resp.status_code == 200
        assert [m["tmdbId"] for m in resp.json()] == [42, 7]
        assert {resp.json()[0]["user1Id"], resp.json()[0]["user2Id"]} == {alice.id, bob.id}


def test_list_matches_requires_auth(client):
    assert client.get(f"{settings.API_STR}/matches").status_code == 401
