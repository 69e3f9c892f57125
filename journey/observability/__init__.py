# noqa: D104 - package initialization
from .logging import (  # noqa: F401
    JsonFormatter,
    RunContextFilter,
    configure_logging,
    configure_structured_logging,
    current_run_id,
    run_context,
)
