# journey/domain/catalog/provider.py
import logging
from typing import Any, Callable, List, Optional, Protocol, Sequence

import requests
import spotipy
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOAuth, SpotifyOauthError

from journey.errors import InvalidArgument, ProviderError
from journey.models.dto import Artist, Track
from journey.settings import CurationSettings, load_curation_settings
from journey.utils.cache import CatalogCache

from .mapping import artists_from_payloads, track_from_payload, tracks_from_payloads

logger = logging.getLogger(__name__)

PLAYLIST_SCOPES = ["playlist-modify-private", "playlist-modify-public"]

SEED_KINDS = {
    "artist": "seed_artists",
    "track": "seed_tracks",
    # the search form historically called track seeds "song"
    "song": "seed_tracks",
}


class CatalogProvider(Protocol):
    """Catalog capability consumed by the curation stages."""

    def search_artists(self, query: str, limit: int = 10, offset: int = 0) -> List[Artist]: ...

    def search_tracks(self, query: str, limit: int = 10, offset: int = 0) -> List[Track]: ...

    def get_track(self, track_id: str) -> Track: ...

    def top_tracks(self, artist_id: str, market: Optional[str] = None) -> List[Track]: ...

    def related_artists(self, artist_id: str) -> List[Artist]: ...

    def recommendations(self, seed_kind: str, seed_id: str, limit: int) -> List[Track]: ...

    def get_current_user(self) -> str: ...

    def create_playlist(self, user_id: str, name: str, description: str = "", public: bool = False) -> str: ...

    def append_tracks(self, playlist_id: str, track_ids: Sequence[str]) -> None: ...


def build_spotify_client(settings: CurationSettings) -> spotipy.Spotify:
    """Create a spotipy client from settings.

    A configured redirect URI means user authorization (needed to create
    playlists); otherwise the client-credentials flow is used, which only
    allows catalog reads.
    """
    if not settings.spotify_client_id or not settings.spotify_client_secret:
        raise InvalidArgument("Spotify client ID and secret are required (SPOTIPY_CLIENT_ID / SPOTIPY_CLIENT_SECRET).")
    if settings.spotify_redirect_uri:
        auth_manager = SpotifyOAuth(
            client_id=settings.spotify_client_id,
            client_secret=settings.spotify_client_secret,
            redirect_uri=settings.spotify_redirect_uri,
            scope=" ".join(PLAYLIST_SCOPES),
        )
    else:
        logger.warning("SPOTIPY_REDIRECT_URI not set; using client credentials. Playlist creation will be unavailable.")
        auth_manager = SpotifyClientCredentials(
            client_id=settings.spotify_client_id,
            client_secret=settings.spotify_client_secret,
        )
    return spotipy.Spotify(
        auth_manager=auth_manager,
        requests_timeout=settings.request_timeout,
        retries=settings.retries,
    )


class SpotifyCatalogProvider:
    """Typed wrapper over the Spotify Web API (via spotipy)."""

    def __init__(self, spotify_client=None, settings: Optional[CurationSettings] = None):
        self.settings = settings or load_curation_settings()
        self.sp = spotify_client
        if self.sp is None:
            self.sp = build_spotify_client(self.settings)
            logger.info("Spotipy client initialized for catalog provider.")
        else:
            logger.info("Spotipy client injected into catalog provider.")
        self._cache = CatalogCache(maxsize=self.settings.cache_maxsize, ttl=self.settings.cache_ttl_seconds)

    def _call_spotify(self, action: str, call: Callable[[], Any]) -> Any:
        try:
            return call()
        except SpotifyException as exc:
            logger.error('Spotify API call failed during %s (HTTP %s): %s', action, exc.http_status, exc.msg)
            raise ProviderError(action, exc) from exc
        except SpotifyOauthError as exc:
            # token refresh and client-credential failures are raised by the auth manager, not the API
            logger.error('Spotify authorization failed during %s: %s', action, exc)
            raise ProviderError(action, exc) from exc
        except requests.exceptions.RequestException as exc:
            logger.error('Network error during %s: %s', action, exc)
            raise ProviderError(action, exc) from exc

    def _map(self, action: str, mapper: Callable[[], Any]) -> Any:
        try:
            return mapper()
        except (KeyError, TypeError, ValueError) as exc:
            logger.error('Malformed Spotify payload during %s: %s', action, exc, exc_info=True)
            raise ProviderError(action, exc) from exc

    def search_artists(self, query: str, limit: Optional[int] = None, offset: int = 0) -> List[Artist]:
        action = f'search artists for {query!r}'
        limit = limit or self.settings.search_limit
        response = self._call_spotify(
            action, lambda: self.sp.search(q=query, type='artist', limit=limit, offset=offset)
        )
        return self._map(action, lambda: artists_from_payloads(response['artists']['items']))

    def search_tracks(self, query: str, limit: Optional[int] = None, offset: int = 0) -> List[Track]:
        action = f'search tracks for {query!r}'
        limit = limit or self.settings.search_limit
        response = self._call_spotify(
            action, lambda: self.sp.search(q=query, type='track', limit=limit, offset=offset)
        )
        return self._map(action, lambda: tracks_from_payloads(response['tracks']['items']))

    def get_track(self, track_id: str) -> Track:
        action = f'fetch track {track_id}'
        response = self._call_spotify(action, lambda: self.sp.track(track_id))
        return self._map(action, lambda: track_from_payload(response))

    def top_tracks(self, artist_id: str, market: Optional[str] = None) -> List[Track]:
        market = market or self.settings.market
        action = f'fetch top tracks for {artist_id}'

        def load() -> List[Track]:
            response = self._call_spotify(action, lambda: self.sp.artist_top_tracks(artist_id, country=market))
            return self._map(action, lambda: tracks_from_payloads(response['tracks']))

        return self._cache.fetch(('top_tracks', artist_id, market), load)

    def related_artists(self, artist_id: str) -> List[Artist]:
        action = f'fetch related artists for {artist_id}'

        def load() -> List[Artist]:
            response = self._call_spotify(action, lambda: self.sp.artist_related_artists(artist_id))
            return self._map(action, lambda: artists_from_payloads(response['artists']))

        return self._cache.fetch(('related_artists', artist_id), load)

    def recommendations(self, seed_kind: str, seed_id: str, limit: int) -> List[Track]:
        seed_param = SEED_KINDS.get(seed_kind)
        if seed_param is None:
            raise InvalidArgument(f"Invalid seed kind: {seed_kind!r}")
        action = f'fetch {limit} recommendations for {seed_kind} {seed_id}'
        response = self._call_spotify(
            action, lambda: self.sp.recommendations(**{seed_param: [seed_id]}, limit=limit)
        )
        return self._map(action, lambda: tracks_from_payloads(response['tracks']))

    def get_current_user(self) -> str:
        action = 'fetch current user'
        profile = self._call_spotify(action, self.sp.current_user)
        return self._map(action, lambda: profile['id'])

    def create_playlist(self, user_id: str, name: str, description: str = "", public: bool = False) -> str:
        action = f'create playlist {name!r}'
        created = self._call_spotify(
            action,
            lambda: self.sp.user_playlist_create(user_id, name, public=public, description=description),
        )
        playlist_id = self._map(action, lambda: created['id'])
        logger.info("Created playlist %s (%r) for user %s", playlist_id, name, user_id)
        return playlist_id

    def append_tracks(self, playlist_id: str, track_ids: Sequence[str]) -> None:
        self._call_spotify(
            f'append {len(track_ids)} tracks to playlist {playlist_id}',
            lambda: self.sp.playlist_add_items(playlist_id, list(track_ids)),
        )
