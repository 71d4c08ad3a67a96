import io
import logging
from pathlib import Path
from typing import Union

import pandas as pd
import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    retry_if_exception,
)

from .config import settings

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """A CSV source could not be fetched or parsed."""


def is_rate_limited(exception):
    return isinstance(exception, requests.HTTPError) and getattr(exception.response, 'status_code', None) == 429


def _is_url(location: str) -> bool:
    return str(location).lower().startswith(("http://", "https://"))


class CsvClient:
    """Fetches CSV exports over HTTP. Retries connection errors, timeouts and rate limits."""
    def __init__(self, timeout: float = None):
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.session = requests.Session()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout))
        | retry_if_exception(is_rate_limited),
        reraise=True,
    )
    def get_text(self, url: str) -> str:
        response = self.session.get(url, timeout=self.timeout)
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            status = getattr(e.response, 'status_code', None)
            if status == 429:
                logger.warning(f"Rate limited fetching {url}; retrying")
            elif status == 404:
                logger.error(f"Not found: {url}")
            raise
        return response.text


def load_csv(location: Union[str, Path], client: CsvClient = None) -> pd.DataFrame:
    """Read a CSV from a local path or an http(s) URL into a DataFrame.

    Any fetch or parse failure is raised as DataSourceError.
    """
    location = str(location)
    try:
        if _is_url(location):
            client = client or CsvClient()
            df = pd.read_csv(io.StringIO(client.get_text(location)), skip_blank_lines=True)
        else:
            df = pd.read_csv(location, skip_blank_lines=True)
    except (OSError, requests.RequestException, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataSourceError(f"Could not load {location}: {e}") from e

    logger.info(f"Loaded {len(df)} rows from {location}")
    return df
