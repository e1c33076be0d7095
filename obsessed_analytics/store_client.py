"""
Obsessed Analytics — Firestore REST client (read-only)

Fetches the three inputs the engine consumes:
  users/{uid}/workouts   → WorkoutRecord list (completed only)
  exercises              → ExerciseCatalogEntry list
  users/{uid}            → personalInfo.weight (body weight)
"""
import logging
import time

import requests

from obsessed_analytics.cache import LRUCache
from obsessed_analytics.config import FIREBASE_ID_TOKEN, FIREBASE_PROJECT_ID, PROFILE_CACHE_SIZE
from obsessed_analytics.models import ExerciseCatalogEntry, WorkoutRecord

logger = logging.getLogger(__name__)

BASE_URL = (
    f"https://firestore.googleapis.com/v1/projects/{FIREBASE_PROJECT_ID}"
    "/databases/(default)/documents"
)
HEADERS = {"accept": "application/json"}
if FIREBASE_ID_TOKEN:
    HEADERS["Authorization"] = f"Bearer {FIREBASE_ID_TOKEN}"

PAGE_SIZE = 300
MAX_RETRIES = 3
RETRY_BACKOFF = 2  # exponential backoff multiplier

_profile_cache = LRUCache(PROFILE_CACHE_SIZE)


def _get(path: str, params: dict = None) -> dict:
    """GET a document or collection with retry on 429 / 5xx / timeout."""
    for attempt in range(1, MAX_RETRIES + 1):
        try:
            r = requests.get(
                f"{BASE_URL}/{path}", headers=HEADERS,
                params=params or {}, timeout=15,
            )
            if r.status_code == 429:
                wait = RETRY_BACKOFF ** attempt
                logger.warning("Store rate limit on %s, retrying in %ss (attempt %d/%d)",
                               path, wait, attempt, MAX_RETRIES)
                time.sleep(wait)
                continue
            r.raise_for_status()
            return r.json()
        except requests.exceptions.Timeout:
            if attempt < MAX_RETRIES:
                logger.warning("Store timeout on %s, retrying (attempt %d/%d)", path, attempt, MAX_RETRIES)
                time.sleep(RETRY_BACKOFF ** attempt)
            else:
                raise
        except requests.exceptions.HTTPError:
            if attempt < MAX_RETRIES and r.status_code >= 500:
                logger.warning("Store %s on %s, retrying (attempt %d/%d)",
                               r.status_code, path, attempt, MAX_RETRIES)
                time.sleep(RETRY_BACKOFF ** attempt)
            else:
                raise
    raise requests.exceptions.RetryError(f"Store request {path} failed after {MAX_RETRIES} attempts")


# ═══════════════════════════════════════════════════════════════════════
# TYPED VALUE DECODING
# ═══════════════════════════════════════════════════════════════════════

def decode_value(value: dict):
    """Firestore typed value → plain Python value. Timestamps stay RFC 3339 strings."""
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "nullValue" in value:
        return None
    for key in ("stringValue", "booleanValue", "timestampValue", "referenceValue", "geoPointValue"):
        if key in value:
            return value[key]
    return None


def decode_fields(fields: dict) -> dict:
    return {k: decode_value(v) for k, v in fields.items()}


def decode_document(doc: dict) -> dict:
    """Flatten a REST document, adding its id (last path segment)."""
    data = decode_fields(doc.get("fields", {}))
    data.setdefault("id", doc.get("name", "").rsplit("/", 1)[-1])
    return data


def _list_documents(path: str) -> list[dict]:
    """Every document of a collection, following nextPageToken."""
    docs = []
    params = {"pageSize": PAGE_SIZE}
    while True:
        data = _get(path, params)
        docs.extend(decode_document(d) for d in data.get("documents", []))
        token = data.get("nextPageToken")
        if not token:
            break
        params = {"pageSize": PAGE_SIZE, "pageToken": token}
    return docs


# ═══════════════════════════════════════════════════════════════════════
# ENGINE INPUTS
# ═══════════════════════════════════════════════════════════════════════

def fetch_completed_workouts(user_id: str) -> list[WorkoutRecord]:
    records = []
    for doc in _list_documents(f"users/{user_id}/workouts"):
        try:
            w = WorkoutRecord.from_dict(doc)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping malformed workout %s: %s", doc.get("id"), e)
            continue
        if w.is_completed:
            records.append(w)
    logger.info("Fetched %d completed workouts for %s", len(records), user_id)
    return records


def list_exercises() -> list[ExerciseCatalogEntry]:
    entries = []
    for doc in _list_documents("exercises"):
        try:
            entries.append(ExerciseCatalogEntry.from_dict(doc))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping malformed exercise %s: %s", doc.get("id"), e)
    return entries


def fetch_profile(user_id: str) -> dict:
    cached = _profile_cache.get(user_id)
    if cached is not None:
        return cached
    profile = decode_document(_get(f"users/{user_id}"))
    _profile_cache.put(user_id, profile)
    return profile


def fetch_body_weight(user_id: str) -> float | None:
    """personalInfo.weight from the user profile, None when absent."""
    info = fetch_profile(user_id).get("personalInfo") or {}
    weight = info.get("weight") if isinstance(info, dict) else None
    try:
        return float(weight) if weight is not None else None
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric body weight %r for %s", weight, user_id)
        return None
