"""Tavily Search API service used to ground discovery and enrichment."""

import traceback
from typing import Dict, List, Optional

from tavily import AsyncTavilyClient


class TavilyService:
    """Async service wrapper for Tavily search API."""

    def __init__(self, api_key: str):
        """
        Initialize Tavily service.

        Args:
            api_key: Tavily API key
        """
        self.api_key = api_key
        self._client: Optional[AsyncTavilyClient] = None

    @property
    def client(self) -> AsyncTavilyClient:
        """Lazy-initialize Tavily client."""
        if self._client is None:
            if not self.api_key:
                raise ValueError("Tavily API key is required")
            self._client = AsyncTavilyClient(api_key=self.api_key)
        return self._client

    async def search(
        self,
        query: str,
        max_results: int = 10,
        search_depth: str = "advanced",
        include_domains: Optional[List[str]] = None
    ) -> List[Dict]:
        """
        Search the web using Tavily.

        Search is grounding only: on failure the error is logged and an empty
        list returned so the caller can carry on without it.

        Returns:
            List of search results with url, title, content, score
        """
        print(f"[Tavily] Searching: {query[:60]}... (max_results={max_results})", flush=True)
        search_params = {
            "query": query,
            "max_results": max_results,
            "search_depth": search_depth,
        }
        if include_domains:
            search_params["include_domains"] = include_domains

        try:
            response = await self.client.search(**search_params)
        except Exception as e:
            print(f"[Tavily] ERROR: {e}", flush=True)
            print(traceback.format_exc(), flush=True)
            return []

        results = []
        for result in response.get("results", []):
            results.append({
                "url": result.get("url", ""),
                "title": result.get("title", ""),
                "content": result.get("content", ""),
                "score": result.get("score", 0)
            })

        print(f"[Tavily] Got {len(results)} results", flush=True)
        return results

    @staticmethod
    def format_results(results: List[Dict], max_chars: int = 600) -> str:
        """Render search results as prompt context."""
        blocks = []
        for i, result in enumerate(results, 1):
            content = (result.get("content") or "")[:max_chars]
            blocks.append(f"[{i}] {result.get('title', '')}\nURL: {result.get('url', '')}\n{content}")
        return "\n\n".join(blocks)
