"""
Typed projector: document store -> BridgeValues snapshot.

The snapshot is taken once at bootstrap. Reloads replace the document store but not the
snapshot, so code that needs live values must go through the Config accessors.
"""

from typing import Any, Callable

import structlog
from pydantic import ValidationError

from relay import logs
from relay.config.document import DocumentStore
from relay.config.errors import ProjectionError
from relay.config.schemas import BridgeValues

logger = structlog.get_logger(__name__)

DEFAULT_MEDIA_DOWNLOAD_SIZE = 1000000


def _drop_nulls(value: Any) -> Any:
    """Remove null entries so they fall back to schema defaults (YAML `key:` with no value)."""
    if isinstance(value, dict):
        return {k: _drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_nulls(v) for v in value if v is not None]
    return value


def project(
    store: DocumentStore,
    open_log_file: Callable[[str], bool] | None = logs.open_log_file,
) -> BridgeValues:
    """
    Decode the whole document into BridgeValues and apply general-section defaults.

    - general.MediaDownloadSize unset or 0 becomes 1000000.
    - general.LogFile, when set, is opened for append and log output moves there
      (open failures are logged as warnings and ignored). Pass open_log_file=None to skip.

    Raises:
        ProjectionError: The document does not fit the schema (wrong shapes/types).
    """
    try:
        values = BridgeValues.model_validate(_drop_nulls(store.all_settings()))
    except ValidationError as e:
        raise ProjectionError(f"failed to load the configuration: {e}") from e
    if values.general.media_download_size == 0:
        values.general.media_download_size = DEFAULT_MEDIA_DOWNLOAD_SIZE
    if values.general.log_file and open_log_file is not None:
        open_log_file(values.general.log_file)
    logger.debug(
        "config_projected",
        accounts=len(values.accounts()),
        gateways=len(values.gateway),
    )
    return values
