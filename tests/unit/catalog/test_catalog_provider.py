import pytest
import requests
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOAuth, SpotifyOauthError

from journey.domain.catalog import SpotifyCatalogProvider, build_spotify_client
from journey.errors import InvalidArgument, ProviderError
from journey.models.dto import Artist, Track
from journey.settings import CurationSettings
from tests.support.stubs import SpotipyCatalogStub, artist_payload, track_payload


@pytest.fixture
def provider(spotipy_stub, settings):
    return SpotifyCatalogProvider(spotify_client=spotipy_stub, settings=settings)


@pytest.mark.unit
def test_search_artists_maps_items_and_uses_settings_limit(provider, spotipy_stub):
    spotipy_stub.search_response = {"artists": {"items": [artist_payload("a1", "Band"), None]}}

    artists = provider.search_artists("band", offset=20)

    assert len(artists) == 1
    assert isinstance(artists[0], Artist)
    assert artists[0].name == "Band"
    assert artists[0].image_url == "http://images/a1-640.jpg"
    args, kwargs = spotipy_stub.calls_to("search")[0]
    assert args == ("band",)
    assert kwargs == {"limit": 10, "offset": 20, "type": "artist"}


@pytest.mark.unit
def test_search_tracks_converts_milliseconds(provider, spotipy_stub):
    spotipy_stub.search_response = {"tracks": {"items": [track_payload("t9", "Drive", duration_ms=215_500)]}}

    tracks = provider.search_tracks("drive", limit=5)

    assert [track.id for track in tracks] == ["t9"]
    assert tracks[0].duration_seconds == pytest.approx(215.5)
    assert tracks[0].display_name == "Artist One  ---  Drive"
    assert spotipy_stub.calls_to("search")[0][1]["limit"] == 5


@pytest.mark.unit
def test_top_tracks_pass_market_and_are_cached(provider, spotipy_stub):
    first = provider.top_tracks("ar-1")
    second = provider.top_tracks("ar-1")

    assert [track.id for track in first] == ["t1", "t2"]
    assert first == second
    calls = spotipy_stub.calls_to("artist_top_tracks")
    assert len(calls) == 1
    assert calls[0] == (("ar-1",), {"country": "US"})


@pytest.mark.unit
def test_top_tracks_cache_is_keyed_by_market(provider, spotipy_stub):
    provider.top_tracks("ar-1")
    provider.top_tracks("ar-1", market="SE")

    assert [kwargs["country"] for _, kwargs in spotipy_stub.calls_to("artist_top_tracks")] == ["US", "SE"]


@pytest.mark.unit
def test_related_artists_are_cached(provider, spotipy_stub):
    assert [artist.id for artist in provider.related_artists("seed")] == ["r1", "r2"]
    assert [artist.id for artist in provider.related_artists("seed")] == ["r1", "r2"]

    assert len(spotipy_stub.calls_to("artist_related_artists")) == 1


@pytest.mark.unit
def test_cached_lists_are_copies(provider):
    provider.related_artists("seed").clear()

    assert len(provider.related_artists("seed")) == 2


@pytest.mark.unit
@pytest.mark.parametrize(
    "seed_kind, expected",
    [
        ("artist", {"seed_artists": ["x"], "seed_tracks": None}),
        ("track", {"seed_artists": None, "seed_tracks": ["x"]}),
        ("song", {"seed_artists": None, "seed_tracks": ["x"]}),
    ],
)
def test_recommendations_seed_parameter(provider, spotipy_stub, seed_kind, expected):
    tracks = provider.recommendations(seed_kind, "x", 25)

    assert [track.id for track in tracks] == ["rec1"]
    _, kwargs = spotipy_stub.calls_to("recommendations")[0]
    assert kwargs == dict(expected, limit=25)


@pytest.mark.unit
def test_recommendations_reject_unknown_seed_kind(provider, spotipy_stub):
    with pytest.raises(InvalidArgument):
        provider.recommendations("genre", "rock", 10)
    assert spotipy_stub.calls == []


@pytest.mark.unit
def test_get_track_maps_primary_artist(provider):
    track = provider.get_track("seed-track")

    assert isinstance(track, Track)
    assert track.artist.id == "seed-artist"


@pytest.mark.unit
def test_playlist_calls(provider, spotipy_stub):
    assert provider.get_current_user() == "user-42"
    assert provider.create_playlist("user-42", "Road Trip!", description="desc", public=True) == "pl-1"
    provider.append_tracks("pl-1", ("a", "b"))

    assert spotipy_stub.calls_to("user_playlist_create") == [
        (("user-42", "Road Trip!"), {"public": True, "description": "desc"})
    ]
    assert spotipy_stub.calls_to("playlist_add_items") == [(("pl-1", ["a", "b"]), {})]


@pytest.mark.unit
def test_spotify_exception_becomes_provider_error(settings):
    error = SpotifyException(429, -1, "rate limited")
    provider = SpotifyCatalogProvider(spotify_client=SpotipyCatalogStub(error=error), settings=settings)

    with pytest.raises(ProviderError) as excinfo:
        provider.related_artists("seed")

    assert excinfo.value.cause is error
    assert "related artists for seed" in str(excinfo.value)
    assert excinfo.value.partial == []


@pytest.mark.unit
def test_auth_failure_becomes_provider_error(settings):
    error = SpotifyOauthError("invalid_client", error="invalid_client")
    provider = SpotifyCatalogProvider(spotify_client=SpotipyCatalogStub(error=error), settings=settings)

    with pytest.raises(ProviderError) as excinfo:
        provider.related_artists("seed")

    assert excinfo.value.cause is error


@pytest.mark.unit
def test_network_error_becomes_provider_error(settings):
    provider = SpotifyCatalogProvider(
        spotify_client=SpotipyCatalogStub(error=requests.exceptions.ReadTimeout("slow")), settings=settings
    )

    with pytest.raises(ProviderError):
        provider.top_tracks("ar-1")


@pytest.mark.unit
def test_failed_lookup_is_not_cached(settings):
    stub = SpotipyCatalogStub(error=SpotifyException(503, -1, "unavailable"))
    provider = SpotifyCatalogProvider(spotify_client=stub, settings=settings)

    with pytest.raises(ProviderError):
        provider.top_tracks("ar-1")
    stub.error = None

    assert [track.id for track in provider.top_tracks("ar-1")] == ["t1", "t2"]


@pytest.mark.unit
def test_malformed_payload_becomes_provider_error(provider, spotipy_stub):
    spotipy_stub.top_tracks_response = {"tracks": [{"id": "broken"}]}

    with pytest.raises(ProviderError) as excinfo:
        provider.top_tracks("ar-1")

    assert isinstance(excinfo.value.cause, KeyError)


@pytest.mark.unit
def test_build_client_requires_credentials():
    with pytest.raises(InvalidArgument):
        build_spotify_client(CurationSettings(spotify_client_id=None, spotify_client_secret="secret"))


@pytest.mark.unit
def test_build_client_uses_client_credentials_without_redirect(settings):
    client = build_spotify_client(settings)

    assert isinstance(client.auth_manager, SpotifyClientCredentials)


@pytest.mark.unit
def test_build_client_uses_user_auth_with_redirect(settings):
    settings = settings.model_copy(update={"spotify_redirect_uri": "http://127.0.0.1:8888/callback"})

    client = build_spotify_client(settings)

    assert isinstance(client.auth_manager, SpotifyOAuth)
    assert "playlist-modify-private" in client.auth_manager.scope
