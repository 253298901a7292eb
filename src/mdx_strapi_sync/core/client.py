import json
import logging
from typing import Any, Protocol

import requests

from ..config import Config

logger = logging.getLogger(__name__)

Document = dict[str, Any]

# Strapi's write lifecycles check this header and skip their MDX export,
# so an import never triggers a CMS -> MDX round trip.
IMPORT_MARKER_HEADER = "x-skip-mdx-export"


class CMSError(Exception):
    """A CMS request failed or returned something unusable."""


class CMSClient(Protocol):
    """Capability set the sync engine needs from a CMS.

    ``StrapiClient`` is the production implementation; tests substitute
    in-memory fakes.  Every method is blocking.
    """

    def get_all_entries(
        self, type_id: str, locale: str = "all"
    ) -> list[Document]: ...

    def find_by_slug(
        self, type_id: str, slug: str, locale: str | None = None
    ) -> Document | None: ...

    def create_entry(
        self, type_id: str, fields: dict[str, Any], locale: str | None = None
    ) -> Document: ...

    def update_entry(
        self,
        type_id: str,
        document_id: str,
        fields: dict[str, Any],
        locale: str | None = None,
    ) -> Document: ...

    def create_localization(
        self,
        type_id: str,
        document_id: str,
        locale: str,
        fields: dict[str, Any],
    ) -> Any: ...

    def update_localization(
        self,
        type_id: str,
        document_id: str,
        locale: str,
        fields: dict[str, Any],
    ) -> Any: ...

    def delete_entry(self, type_id: str, document_id: str) -> Any: ...

    def delete_localization(
        self, type_id: str, document_id: str, locale: str
    ) -> Any: ...


class StrapiClient:
    def __init__(self, config: Config):
        self.config = config
        self.api_url = f"{config.strapi_url.rstrip('/')}/api"
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {
                "Authorization": f"Bearer {self.config.api_token}",
                "Content-Type": "application/json",
                IMPORT_MARKER_HEADER: "true",
            }
        )
        return session

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request to the Strapi REST API and return the decoded JSON.

        DELETE requests may answer with an empty body (204); that returns None.
        """
        url = f"{self.api_url}/{endpoint}"
        body = json.dumps({"data": data}) if data is not None else None
        logger.debug("%s %s params=%s", method, url, params)

        response = self.session.request(
            method,
            url,
            params=params,
            data=body,
            timeout=(10, self.config.timeout),
        )

        if not response.ok:
            raise CMSError(
                f"Strapi API error ({response.status_code}): {response.text}"
            )

        text = response.text
        if not text:
            if method == "DELETE":
                return None
            raise CMSError(f"Empty response from Strapi API: {url}")

        try:
            return json.loads(text)
        except ValueError as exc:
            raise CMSError(
                f"Failed to parse JSON response from Strapi API: {url} - {exc}"
            ) from exc

    @staticmethod
    def _locale_params(locale: str | None) -> dict[str, Any]:
        return {"locale": locale} if locale else {}

    def get_all_entries(
        self, type_id: str, locale: str = "all"
    ) -> list[Document]:
        """
        List every entry of a collection, following pagination to the end.

        ``locale="all"`` returns every locale's documents.
        """
        entries: list[Document] = []
        page = 1
        page_size = self.config.page_size
        while True:
            params = {
                "pagination[page]": page,
                "pagination[pageSize]": page_size,
                **self._locale_params(locale),
            }
            payload = self._request("GET", type_id, params=params) or {}
            batch = payload.get("data") or []
            entries.extend(batch)

            pagination = (payload.get("meta") or {}).get("pagination") or {}
            page_count = pagination.get("pageCount")
            if page_count is not None:
                if page >= page_count:
                    break
            elif len(batch) < page_size:
                break
            page += 1

        logger.debug(
            "Listed %d %s entries (locale=%s)", len(entries), type_id, locale
        )
        return entries

    def find_by_slug(
        self, type_id: str, slug: str, locale: str | None = None
    ) -> Document | None:
        """
        Return the first entry whose slug equals *slug*, or None.
        """
        params = {"filters[slug][$eq]": slug, **self._locale_params(locale)}
        payload = self._request("GET", type_id, params=params) or {}
        data = payload.get("data") or []
        return data[0] if data else None

    def create_entry(
        self, type_id: str, fields: dict[str, Any], locale: str | None = None
    ) -> Document:
        payload = self._request(
            "POST", type_id, params=self._locale_params(locale), data=fields
        )
        return payload["data"]

    def update_entry(
        self,
        type_id: str,
        document_id: str,
        fields: dict[str, Any],
        locale: str | None = None,
    ) -> Document:
        payload = self._request(
            "PUT",
            f"{type_id}/{document_id}",
            params=self._locale_params(locale),
            data=fields,
        )
        return payload["data"]

    def create_localization(
        self,
        type_id: str,
        document_id: str,
        locale: str,
        fields: dict[str, Any],
    ) -> Any:
        """
        Attach a new locale variant to an existing document.

        Raises:
            CMSError: If the base document does not exist.
        """
        base = self._request("GET", f"{type_id}/{document_id}")
        if not base or not base.get("data"):
            raise CMSError(
                f"Base entry not found with documentId: {document_id}"
            )

        return self._request(
            "PUT",
            f"{type_id}/{document_id}",
            params={"locale": locale},
            data=fields,
        )

    def update_localization(
        self,
        type_id: str,
        document_id: str,
        locale: str,
        fields: dict[str, Any],
    ) -> Any:
        """
        Update the localization matching ``fields["slug"]`` in *locale*,
        creating it on *document_id* when it does not exist yet.
        """
        localization = self.find_by_slug(type_id, fields["slug"], locale)
        if localization:
            return self.update_entry(
                type_id, localization["documentId"], fields, locale
            )
        return self.create_localization(type_id, document_id, locale, fields)

    def delete_entry(self, type_id: str, document_id: str) -> Any:
        return self._request("DELETE", f"{type_id}/{document_id}")

    def delete_localization(
        self, type_id: str, document_id: str, locale: str
    ) -> Any:
        """Delete a single locale variant, keeping the other locales."""
        return self._request(
            "DELETE", f"{type_id}/{document_id}", params={"locale": locale}
        )
