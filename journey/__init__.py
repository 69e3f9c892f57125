"""Duration-constrained road-trip playlist curation on top of the Spotify catalog."""

from .domain.catalog import SpotifyCatalogProvider
from .domain.curation import (
    CurationContext,
    CurationEngine,
    CurationStrategy,
    resolve_profile,
    select_for_duration,
)
from .errors import (
    CurationError,
    ExpansionExhausted,
    InfeasiblePool,
    InvalidArgument,
    PartialSubmissionFailure,
    ProviderError,
)
from .models import Artist, PlaylistSubmission, SelectionResult, Track

__version__ = "0.1.0"

__all__ = [
    "Artist",
    "CurationContext",
    "CurationEngine",
    "CurationError",
    "CurationStrategy",
    "ExpansionExhausted",
    "InfeasiblePool",
    "InvalidArgument",
    "PartialSubmissionFailure",
    "PlaylistSubmission",
    "ProviderError",
    "SelectionResult",
    "SpotifyCatalogProvider",
    "Track",
    "resolve_profile",
    "select_for_duration",
]
