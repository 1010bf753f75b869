"""API Manager REST client for export/import with optional retry support."""

from __future__ import annotations

import logging
import os
import time

import requests

from apictl.models import (
    DEFAULT_HTTP_TIMEOUT_MS,
    DEFAULT_MAX_RETRIES,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_VALUE_APPLICATION_JSON,
    HEADER_VALUE_APPLICATION_ZIP,
    HEADER_VALUE_AUTH_BASIC_PREFIX,
    LOGGER_NAME,
    RETRY_BACKOFF_FACTOR,
    RETRYABLE_STATUS_CODES,
    Environment,
)

PAGE_LIMIT = 100


def _flag(value: bool) -> str:
    return "true" if value else "false"


class ApimClient:
    """Thin wrapper around the import/export, publisher and devportal REST APIs of one environment."""

    def __init__(
        self,
        environment: Environment,
        credentials: str,
        timeout_ms: int = DEFAULT_HTTP_TIMEOUT_MS,
        verify: bool = True,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        self.environment = environment
        self.session = requests.Session()
        self.session.headers.update(
            {
                HEADER_AUTHORIZATION: f"{HEADER_VALUE_AUTH_BASIC_PREFIX} {credentials}",
                HEADER_ACCEPT: HEADER_VALUE_APPLICATION_JSON,
            }
        )
        self.session.verify = verify
        self.timeout = timeout_ms / 1000.0
        self.max_retries = max_retries
        self.logger = logging.getLogger(LOGGER_NAME)

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Make an HTTP request, retrying transient failures up to max_retries times."""
        kwargs.setdefault("timeout", self.timeout)
        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                self.logger.debug(
                    f"{method.upper()} {url} {kwargs.get('params') or ''} "
                    f"(attempt {attempt + 1}/{self.max_retries + 1})"
                )
                resp = self.session.request(method, url, **kwargs)

                if resp.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                    wait_time = self._calculate_backoff(resp, attempt)
                    self.logger.warning(f"Retryable error {resp.status_code}, waiting {wait_time:.1f}s before retry")
                    time.sleep(wait_time)
                    continue

                self.logger.debug(f"ResponseStatus: {resp.status_code} {resp.reason}")
                if resp.status_code >= 400:
                    self.logger.debug(f"API error {resp.status_code}: {resp.text[:500]}")
                resp.raise_for_status()
                return resp

            except requests.exceptions.ConnectionError as e:
                last_exception = e
                if attempt < self.max_retries:
                    wait_time = RETRY_BACKOFF_FACTOR * (2**attempt)
                    self.logger.warning(f"Connection error, retrying in {wait_time:.1f}s: {e}")
                    time.sleep(wait_time)
                    continue
                raise

        if last_exception:
            raise last_exception
        raise RuntimeError("Unexpected retry loop exit")

    def _calculate_backoff(self, resp: requests.Response, attempt: int) -> float:
        """Calculate backoff time, respecting Retry-After header for 429s."""
        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass  # Fall through to exponential backoff
        return RETRY_BACKOFF_FACTOR * (2**attempt)

    def _upload(self, url: str, file_path: str, params: dict) -> requests.Response:
        # Read up front so a retried request sends the full body again
        with open(file_path, "rb") as f:
            content = f.read()
        files = {"file": (os.path.basename(file_path), content, HEADER_VALUE_APPLICATION_ZIP)}
        return self._request("POST", url, params=params, files=files)

    def paginate(self, url: str, params: dict | None = None) -> dict:
        """Fetch every page of a ``{count, list, pagination}`` listing and merge the lists."""
        params = dict(params or {})
        params.setdefault("limit", PAGE_LIMIT)
        offset = 0
        items: list[dict] = []
        while True:
            params["offset"] = offset
            data = self._request("GET", url, params=params).json()
            page = data.get("list") or []
            items.extend(page)
            total = (data.get("pagination") or {}).get("total", len(items))
            if not page or len(items) >= total:
                break
            offset += len(page)
        return {"count": len(items), "list": items}

    # -- APIs --

    def export_api(self, name: str, version: str, provider: str = "") -> requests.Response:
        url = f"{self.environment.import_export_endpoint}/export-api"
        params = {"name": name, "version": version}
        if provider:
            params["provider"] = provider
        self.logger.info(f"ExportAPI: URL: {url}")
        return self._request("GET", url, params=params, headers={HEADER_ACCEPT: HEADER_VALUE_APPLICATION_ZIP})

    def import_api(self, file_path: str, preserve_provider: bool = True, update: bool = False) -> requests.Response:
        url = f"{self.environment.import_export_endpoint}/import-api"
        params = {"preserveProvider": _flag(preserve_provider)}
        if update:
            params["overwrite"] = "true"
        self.logger.info(f"ImportAPI: URL: {url}")
        return self._upload(url, file_path, params)

    def list_apis(self, query: str = "") -> dict:
        params = {"query": query} if query else {}
        return self.paginate(f"{self.environment.publisher_endpoint}/apis", params=params)

    # -- Applications --

    def export_app(self, name: str, owner: str, with_keys: bool = False, format: str = "") -> requests.Response:
        url = f"{self.environment.devportal_applications_endpoint}/export"
        params = {"appName": name, "appOwner": owner}
        if with_keys:
            params["withKeys"] = "true"
        if format:
            params["format"] = format
        self.logger.info(f"ExportApp: URL: {url}")
        return self._request("GET", url, params=params, headers={HEADER_ACCEPT: HEADER_VALUE_APPLICATION_ZIP})

    def import_app(
        self,
        file_path: str,
        owner: str = "",
        preserve_owner: bool = False,
        skip_subscriptions: bool = False,
        skip_keys: bool = False,
        update: bool = False,
    ) -> requests.Response:
        url = f"{self.environment.devportal_applications_endpoint}/import"
        params = {
            "preserveOwner": _flag(preserve_owner),
            "skipSubscriptions": _flag(skip_subscriptions),
            "skipApplicationKeys": _flag(skip_keys),
            "update": _flag(update),
        }
        if owner:
            params["appOwner"] = owner
        self.logger.info(f"ImportApp: URL: {url}")
        return self._upload(url, file_path, params)

    def list_apps(self, query: str = "", owner: str = "") -> dict:
        """List applications visible to the caller, or every application of ``owner``.

        The devportal only returns the caller's own applications, so an owner
        lookup goes through the admin REST API instead.
        """
        if owner:
            return self.paginate(f"{self.environment.admin_endpoint}/applications", params={"user": owner})
        params = {"query": query} if query else {}
        return self.paginate(self.environment.devportal_applications_endpoint, params=params)

    def get_app_by_name(self, name: str, owner: str | None = None) -> dict | None:
        """Find an application by exact name (and owner, when given)."""
        for app in self.list_apps(query=name)["list"]:
            if app.get("name") != name:
                continue
            if owner and app.get("owner") != owner:
                continue
            return app
        return None

    def delete_app(self, app_id: str) -> requests.Response:
        return self._request("DELETE", f"{self.environment.devportal_applications_endpoint}/{app_id}")
