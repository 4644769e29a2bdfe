"""Skills registry search over HTTP."""

from dataclasses import dataclass

import httpx

from skillcopy.config import DEFAULT_REGISTRY_URL, DEFAULT_TIMEOUT
from skillcopy.exceptions import RegistryError

SEARCH_LIMIT = 10


@dataclass(frozen=True)
class RegistrySkill:
    """A search hit from the registry.

    Attributes:
        name: Skill name (e.g., "code-review")
        source: Repository identifier the skill is published from (e.g., "acme/skills")
        slug: Registry identifier of the skill
        installs: Install count reported by the registry
    """

    name: str
    source: str
    slug: str = ""
    installs: int = 0


def _parse_results(payload: object) -> list[RegistrySkill]:
    if not isinstance(payload, dict) or not isinstance(payload.get("skills"), list):
        raise RegistryError("Unexpected response from skills registry")

    results = []
    for item in payload["skills"]:
        if not isinstance(item, dict) or not item.get("name"):
            continue
        installs = item.get("installs")
        results.append(
            RegistrySkill(
                name=str(item["name"]),
                source=str(item.get("source") or ""),
                slug=str(item.get("id") or ""),
                installs=installs if isinstance(installs, int) else 0,
            )
        )
    return results


def search_skills(
    query: str,
    base_url: str = DEFAULT_REGISTRY_URL,
    timeout: float = DEFAULT_TIMEOUT,
    limit: int = SEARCH_LIMIT,
    client: httpx.Client | None = None,
) -> list[RegistrySkill]:
    """Search the registry for skills matching a free-text query.

    Results keep the registry's relevance order; the first one is the best guess.

    Args:
        query: Text to search for
        base_url: Registry base URL
        timeout: Request timeout in seconds
        limit: Maximum number of results to request
        client: Optional httpx client to reuse

    Raises:
        RegistryError: On network errors, non-2xx responses, or malformed payloads
    """
    url = f"{base_url.rstrip('/')}/api/search"
    params = {"q": query, "limit": limit}

    try:
        if client is None:
            with httpx.Client(follow_redirects=True, timeout=timeout) as own_client:
                response = own_client.get(url, params=params)
        else:
            response = client.get(url, params=params)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        raise RegistryError(f"Skills registry search failed: {e}")
    except httpx.RequestError as e:
        raise RegistryError(f"Network error: {e}")
    except httpx.InvalidURL as e:
        raise RegistryError(f"Invalid skills registry URL: {e}")
    except ValueError as e:
        raise RegistryError(f"Invalid JSON from skills registry: {e}")

    return _parse_results(payload)
