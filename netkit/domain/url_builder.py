"""Mutable URL builder (scheme, host, port, path, query, fragment)."""
from __future__ import annotations

from typing import Iterable, Mapping

import httpx
from loguru import logger

QueryItem = tuple[str, "str | None"]


class URLBuilder:
    """Collects URL components and materializes an `httpx.URL` on demand.

    `url` is None while the components cannot form an absolute URL (no
    host, or httpx rejects them); the request lifecycle reports that as a
    bad-URL error at dispatch time.
    """

    def __init__(self) -> None:
        self.scheme: str = "https"
        self.host: str | None = None
        self.port: int | None = None
        self.path: str = ""
        self.query_items: list[QueryItem] = []
        self.fragment: str | None = None
        self.username: str | None = None
        self.password: str | None = None

    def add(self, items: Iterable[QueryItem] | Mapping[str, str | None]) -> None:
        """Append query items, keeping existing ones."""
        if isinstance(items, Mapping):
            items = items.items()
        self.query_items.extend((str(name), None if value is None else str(value)) for name, value in items)

    @property
    def url(self) -> httpx.URL | None:
        if not self.host or not self.scheme:
            return None
        path = self.path
        if path and not path.startswith("/"):
            path = "/" + path
        components: dict[str, object] = {"scheme": self.scheme, "host": self.host, "path": path}
        if self.port is not None:
            components["port"] = self.port
        if self.query_items:
            components["query"] = _encode_query(self.query_items)
        if self.fragment:
            components["fragment"] = self.fragment
        if self.username is not None:
            components["username"] = self.username
            if self.password is not None:
                components["password"] = self.password
        try:
            return httpx.URL(**components)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            logger.debug("url components rejected: {}", exc)
            return None

    @url.setter
    def url(self, url: httpx.URL | str | None) -> None:
        if url is None:
            return
        try:
            parsed = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as exc:
            logger.debug("ignoring unparseable url {!r}: {}", url, exc)
            return
        if not parsed.is_absolute_url:
            logger.debug("ignoring relative url {!r}", url)
            return
        self.scheme = parsed.scheme
        self.host = parsed.host
        self.port = parsed.port
        self.path = parsed.path
        self.query_items = list(parsed.params.multi_items())
        self.fragment = parsed.fragment or None
        self.username = parsed.username or None
        self.password = parsed.password or None

    @property
    def url_string(self) -> str | None:
        url = self.url
        return str(url) if url is not None else None

    @url_string.setter
    def url_string(self, value: str | None) -> None:
        self.url = value

    def __repr__(self) -> str:
        return f"URLBuilder({self.url_string!r})"


def _encode_query(items: list[QueryItem]) -> bytes:
    encoded = []
    for name, value in items:
        if value is None:
            encoded.append(str(httpx.QueryParams({name: ""})).rstrip("="))
        else:
            encoded.append(str(httpx.QueryParams({name: value})))
    return "&".join(encoded).encode("ascii")
