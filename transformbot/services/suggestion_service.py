"""
SUGGESTION SERVICE MODULE
=========================

Looks up already-indexed transformations while the user types, so an existing
one can be picked instead of generating a new one.

FLOW:
  1. Queries shorter than 2 characters (after trimming) return [] with no request.
  2. Otherwise one search_single_index request goes to the hosted index through
     the Algolia search client; hits come back in the index's own relevance
     order (no reranking here).
  3. Hits that cannot be read as a SuggestionRecord are skipped and logged;
     the remaining hits keep their order.
  4. Any failure of the request itself is logged and degrades to [], so the
     chat keeps working without suggestions.

If ALGOLIA_APP_ID / ALGOLIA_SEARCH_API_KEY are not set, no search client is
built and every lookup returns [].
"""

import logging
from typing import Any, Dict, List, Optional

from algoliasearch.http.exceptions import AlgoliaException
from pydantic import ValidationError

from transformbot.config import Settings
from transformbot.models import SuggestionRecord

logger = logging.getLogger("transformbot")

MIN_QUERY_LENGTH = 2


def build_search_client(settings: Settings):
    """Create the Algolia search client, or None when credentials are missing."""
    if not (settings.search_app_id and settings.search_api_key):
        return None

    from algoliasearch.search.client import SearchClientSync

    return SearchClientSync(settings.search_app_id, settings.search_api_key)


def _hit_as_dict(hit: Any) -> Dict[str, Any]:
    # SDK hits are models; fakes and raw payloads are plain dicts.
    if isinstance(hit, dict):
        return hit
    return hit.to_dict()


# ==============================================================================
# SUGGESTION LOOKUP
# ==============================================================================

class SuggestionLookup:
    """Debounce-by-length search over one index; never raises to the caller."""

    def __init__(self, search_client: Any, index_name: str, hits_per_page: Optional[int] = None):
        self.search_client = search_client
        self.index_name = index_name
        self.hits_per_page = hits_per_page

    def search_params(self, query: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {"query": query}
        # Without hitsPerPage the index's own page size applies.
        if self.hits_per_page:
            params["hitsPerPage"] = self.hits_per_page
        return params

    def search(self, query: str) -> List[SuggestionRecord]:
        if len(query.strip()) < MIN_QUERY_LENGTH or self.search_client is None:
            return []

        try:
            response = self.search_client.search_single_index(
                index_name=self.index_name,
                search_params=self.search_params(query),
            )
            hits = response.hits or []
        except (AlgoliaException, OSError, ValueError) as e:
            logger.warning(f"Suggestion lookup failed for query {query!r}: {e}")
            return []

        records = []
        for hit in hits:
            try:
                records.append(SuggestionRecord.model_validate(_hit_as_dict(hit)))
            except (ValidationError, AttributeError) as e:
                logger.warning(f"Skipping unreadable search hit for query {query!r}: {e}")
        return records
