import logging
from functools import wraps

import requests

logger = logging.getLogger(__name__)

request_timeout = 30


def logging_requests(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        response = f(*args, **kwargs)

        if response is not None and response.status_code != 200:
            logger.warning(
                "method: %s, url: %s, code: %s, content: %s",
                f.__name__,
                kwargs.get("url") or (args[1] if len(args) > 1 else None),
                response.status_code,
                response.text[:500],
            )

        return response

    return wrapper


class Client:
    """Thin JSON client over a requests session. One attempt per call, no retries."""

    def __init__(self, session=None):
        self.__session = session or requests.session()

    @property
    def base_headers(self):
        return {
            "Accept": "application/json",
            "Accept-Language": "en-US;q=0.5,en;q=0.3",
        }

    @logging_requests
    def get(self, url: str, **kwargs):
        kwargs["headers"] = self.__get_headers(kwargs.get("headers", {}))
        kwargs.setdefault("timeout", request_timeout)
        return self.__session.get(url, **kwargs)

    def get_json(self, url: str, **kwargs):
        """GET a URL and decode the JSON body. Raises for non-2xx responses."""
        response = self.get(url, **kwargs)
        response.raise_for_status()
        return response.json()

    def close(self):
        self.__session.close()

    def __get_headers(self, additional: dict) -> dict:
        base = self.base_headers
        if additional:
            base.update(additional)

        return base
