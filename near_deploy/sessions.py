"""
HTTP sessions with retries for the helper and analytics services.
"""
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def create_session(retry_count: int = 3) -> requests.Session:
    """
    Build a session that retries connection errors and 5xx responses.

    Args:
        retry_count: Number of retries for each request
    """
    session = requests.Session()
    retries = Retry(
        total=retry_count,
        backoff_factor=0.5,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET", "POST"],
        # Also retry on connection errors
        raise_on_status=False,
        # Retry for connection errors and read timeouts
        connect=retry_count,
        read=retry_count,
        other=retry_count
    )
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    return session
