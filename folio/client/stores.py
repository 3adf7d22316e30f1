#!/usr/bin/env python3
"""
stores.py
---------
Client-side state stores backed by the API.

A store holds a StoreState (data, loading, error) and notifies
subscribers on every change. Subscribing calls the callback once with
the current state and returns a function that unsubscribes.

Resource stores load a collection from a list endpoint, keep it in
sync on create/update/delete, and answer simple queries (search,
filters, featured, related) from the loaded data without another
request.

Usage:
    client = ApiClient("http://127.0.0.1:8000")
    projects = ProjectsStore(client)
    unsubscribe = projects.subscribe(lambda state: print(state.loading))
    projects.init()
    projects.filter_by(status="completed")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

# --- Third-party imports ---
from jose import JWTError, jwt

# --- Local imports ---
from folio.client.api_client import ApiClient, ApiClientError
from folio.core.paths import TOKEN_FILE

Item = Dict[str, Any]
Subscriber = Callable[[Any], None]

TOKEN_KEY = "admin_auth_token"
LOAD_LIMIT = 100


@dataclass
class StoreState:
    """Snapshot of a resource store."""

    data: List[Item] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None


class Store:
    """Observable state holder."""

    def __init__(self, initial: Any) -> None:
        self._initial = initial
        self._state = initial
        self._subscribers: List[Subscriber] = []

    @property
    def state(self) -> Any:
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call callback now and on every change; returns the unsubscribe function."""
        self._subscribers.append(callback)
        callback(self._state)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for callback in list(self._subscribers):
            callback(self._state)

    def reset(self) -> None:
        """Back to the initial state."""
        self._set(**{name: getattr(self._initial, name) for name in vars(self._initial)})


def _normalize_id(value: Any) -> Any:
    """Numeric string ids (e.g. from a route param) compare equal to int ids."""
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def _matches(value: Any, wanted: Any) -> bool:
    if isinstance(value, (list, tuple)):
        if isinstance(wanted, str):
            return wanted.lower() in (str(v).lower() for v in value)
        return wanted in value
    if isinstance(value, str) and isinstance(wanted, str):
        return value.lower() == wanted.lower()
    return value == wanted


def _text(item: Item, name: str) -> str:
    value = item.get(name)
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value).lower()
    return str(value or "").lower()


class ResourceStore(Store):
    """
    Store for one API collection.

    Subclasses set:
        path: List endpoint, e.g. '/api/projects'
        search_fields: Item keys searched by search()
        related_field: List key compared by related()
    """

    path = ""
    search_fields: Sequence[str] = ("title",)
    related_field = "tags"

    def __init__(self, client: ApiClient) -> None:
        super().__init__(StoreState())
        self.client = client

    @property
    def items(self) -> List[Item]:
        return self._state.data

    # ---- Loading ----
    def init(self) -> List[Item]:
        """Load the first page of the collection."""
        return self.load_all(limit=LOAD_LIMIT)

    def load_all(self, **params: Any) -> List[Item]:
        """
        Replace the data with the list endpoint's result.

        Failures are kept in state.error and leave the data as it was.
        """
        self._set(loading=True, error=None)
        try:
            items, _ = self.client.get_page(self.path, params=params)
        except ApiClientError as e:
            self._set(loading=False, error=e.message)
            return []
        self._set(data=list(items), loading=False)
        return list(items)

    # ---- Writes ----
    def _write(self, operation: Callable[[], Any]) -> Any:
        try:
            return operation()
        except ApiClientError as e:
            self._set(error=e.message)
            raise

    def create(self, payload: Item) -> Item:
        """Create on the server and append the result."""
        created = self._write(lambda: self.client.post(self.path, payload))
        self._set(data=[*self.items, created], error=None)
        return created

    def update_by_id(self, item_id: Any, payload: Item) -> Item:
        """Update on the server and replace the local copy."""
        updated = self._write(lambda: self.client.put(f"{self.path}/{item_id}", payload))
        wanted = _normalize_id(updated.get("id", item_id))
        self._set(
            data=[updated if _normalize_id(item.get("id")) == wanted else item for item in self.items],
            error=None,
        )
        return updated

    def delete_by_id(self, item_id: Any) -> None:
        """Delete on the server and drop the local copy."""
        self._write(lambda: self.client.delete(f"{self.path}/{item_id}"))
        wanted = _normalize_id(item_id)
        self._set(
            data=[item for item in self.items if _normalize_id(item.get("id")) != wanted],
            error=None,
        )

    def get_by_id(self, item_id: Any) -> Optional[Item]:
        """Loaded item with the id, else fetched from the server; None when missing."""
        wanted = _normalize_id(item_id)
        for item in self.items:
            if _normalize_id(item.get("id")) == wanted:
                return item
        try:
            return self.client.get(f"{self.path}/{item_id}")
        except ApiClientError as e:
            if e.status == 404:
                return None
            raise

    # ---- Queries on loaded data ----
    def search(self, query: str) -> List[Item]:
        """Items whose search fields contain query (case-insensitive)."""
        term = (query or "").strip().lower()
        if not term:
            return list(self.items)
        return [
            item
            for item in self.items
            if any(term in _text(item, name) for name in self.search_fields)
        ]

    def filter_by(self, **fields: Any) -> List[Item]:
        """
        Items matching every field.

        List fields match when they contain the value; strings compare
        case-insensitively.
        """
        return [
            item
            for item in self.items
            if all(_matches(item.get(name), wanted) for name, wanted in fields.items())
        ]

    def featured(self) -> List[Item]:
        return [item for item in self.items if item.get("featured")]

    def related(self, item: Item, limit: int = 3) -> List[Item]:
        """Other items sharing values of related_field, most shared first."""
        wanted = {str(v).lower() for v in item.get(self.related_field) or []}
        if not wanted:
            return []
        scored: List[Tuple[int, Item]] = []
        for other in self.items:
            if other.get("id") == item.get("id"):
                continue
            shared = len(wanted & {str(v).lower() for v in other.get(self.related_field) or []})
            if shared:
                scored.append((shared, other))
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [other for _, other in scored[:limit]]


class ProjectsStore(ResourceStore):
    path = "/api/projects"
    search_fields = ("title", "description", "long_description", "technologies")
    related_field = "technologies"

    def by_status(self, status: str) -> List[Item]:
        return self.filter_by(status=status)

    def by_technology(self, technology: str) -> List[Item]:
        return self.filter_by(technologies=technology)

    def statistics(self) -> Dict[str, int]:
        statuses = Counter(item.get("status") for item in self.items)
        return {
            "total": len(self.items),
            "completed": statuses.get("completed", 0),
            "in_progress": statuses.get("in-progress", 0),
            "featured": len(self.featured()),
        }


class BlogsStore(ResourceStore):
    path = "/api/blogs"
    search_fields = ("title", "tags", "excerpt", "content")
    related_field = "tags"

    def load_by_slug(self, slug: str) -> Optional[Item]:
        """Fetch one post by slug (counts as a view) and merge it into data."""
        self._set(loading=True, error=None)
        try:
            post = self.client.get(f"{self.path}/slug/{slug}")
        except ApiClientError as e:
            self._set(loading=False, error=e.message)
            return None
        others = [item for item in self.items if item.get("id") != post.get("id")]
        self._set(data=[*others, post], loading=False)
        return post

    def search(self, query: str) -> List[Item]:
        """
        Posts ranked by where the query matches: title (50, exact 100),
        tags (30), excerpt (20), content (10); newer first on ties.
        """
        term = (query or "").strip().lower()
        if not term:
            return list(self.items)

        scored = []
        for post in self.items:
            title = _text(post, "title")
            score = 0
            if term in title:
                score += 100 if title == term else 50
            if any(term in str(tag).lower() for tag in post.get("tags") or []):
                score += 30
            if term in _text(post, "excerpt"):
                score += 20
            if term in _text(post, "content"):
                score += 10
            if score:
                scored.append((score, post.get("published_at") or "", post))

        scored.sort(key=lambda entry: (entry[0], entry[1]), reverse=True)
        return [post for _, _, post in scored]

    def all_tags(self) -> List[str]:
        return sorted({tag for post in self.items for tag in post.get("tags") or []})

    def tags_with_counts(self) -> List[Dict[str, Any]]:
        """[{tag, count}], most used first, then alphabetical."""
        counts = Counter(tag for post in self.items for tag in post.get("tags") or [])
        ordered = sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))
        return [{"tag": tag, "count": count} for tag, count in ordered]


class SkillsStore(ResourceStore):
    path = "/api/skills"
    search_fields = ("name", "description")
    related_field = "category"

    def by_category(self) -> Dict[str, List[Item]]:
        """Loaded skills grouped by category, strongest first."""
        grouped: Dict[str, List[Item]] = {}
        for skill in self.items:
            grouped.setdefault(skill.get("category") or "other", []).append(skill)
        for skills in grouped.values():
            skills.sort(key=lambda s: (-(s.get("proficiency") or 0), s.get("name") or ""))
        return grouped

    def by_min_proficiency(self, minimum: int) -> List[Item]:
        return [s for s in self.items if (s.get("proficiency") or 0) >= minimum]


# ----- Authentication -----
@dataclass
class AuthState:
    is_authenticated: bool = False
    user: Optional[Item] = None
    token: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None


def token_expired(token: str, now: Optional[datetime] = None) -> bool:
    """
    True when the token cannot be read or its exp has passed.

    The signature is not checked here; the server does that on every
    request.
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return True
    exp = claims.get("exp")
    if exp is None:
        return True
    current = now or datetime.now(timezone.utc)
    return float(exp) <= current.timestamp()


class AuthStore(Store):
    """
    Login state with the token persisted to a JSON file.

    The token is stored under the admin_auth_token key; other keys in
    the file are left untouched.
    """

    def __init__(self, client: ApiClient, token_file: Optional[Path] = None) -> None:
        super().__init__(AuthState())
        self.client = client
        self.token_file = Path(token_file) if token_file else TOKEN_FILE

    @property
    def is_authenticated(self) -> bool:
        token = self._state.token
        return bool(self._state.is_authenticated and token and not token_expired(token))

    # ---- Token file ----
    def _read_file(self) -> Dict[str, Any]:
        try:
            content = json.loads(self.token_file.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return content if isinstance(content, dict) else {}

    def _write_token(self, token: Optional[str]) -> None:
        content = self._read_file()
        if token is None:
            content.pop(TOKEN_KEY, None)
        else:
            content[TOKEN_KEY] = token
        self.token_file.parent.mkdir(parents=True, exist_ok=True)
        self.token_file.write_text(json.dumps(content, indent=2), encoding="utf-8")

    def stored_token(self) -> Optional[str]:
        token = self._read_file().get(TOKEN_KEY)
        return token if isinstance(token, str) else None

    # ---- Actions ----
    def init(self) -> bool:
        """
        Restore the session from the token file.

        Expired or unreadable tokens are removed. A stored token is
        checked against /api/auth/me; a rejected one is removed too.
        """
        self._set(loading=True, error=None)
        token = self.stored_token()
        if not token or token_expired(token):
            if token:
                self._write_token(None)
            self._set(is_authenticated=False, user=None, token=None, loading=False)
            return False

        self.client.token = token
        try:
            user = self.client.me()
        except ApiClientError as e:
            self.client.token = None
            if e.status == 401:
                self._write_token(None)
            self._set(
                is_authenticated=False, user=None, token=None, loading=False, error=e.message
            )
            return False

        self._set(is_authenticated=True, user=user, token=token, loading=False)
        return True

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Log in through the API.

        Returns:
            {"success": True, "user": {...}} or {"success": False, "error": "..."}
        """
        self._set(loading=True, error=None)
        try:
            result = self.client.login(email, password)
        except ApiClientError as e:
            self._set(loading=False, error=e.message)
            return {"success": False, "error": e.message}

        self._write_token(result["token"])
        self._set(
            is_authenticated=True,
            user=result["user"],
            token=result["token"],
            loading=False,
        )
        return {"success": True, "user": result["user"]}

    def logout(self) -> None:
        self.client.token = None
        self._write_token(None)
        self.reset()

    def require_role(self, roles: Iterable[str]) -> bool:
        """True when logged in with one of roles."""
        user = self._state.user or {}
        return self.is_authenticated and user.get("role") in set(roles)
