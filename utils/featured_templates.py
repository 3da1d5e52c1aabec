"""
Featured-series templates: named snapshots of the featured configs and badges.

A template stores {"configs": [...]} and {"badges": [...]}; applying it
replaces the live collections with the snapshot and records a history entry
holding both the previous and the applied state.
"""
import uuid
from typing import Optional

from core.config import logger
from utils.fallback_store import FallbackStore, NotFoundError

TEMPLATE_TYPES = ("config", "badge", "combined")


def list_templates(templates: FallbackStore) -> list:
    """Default templates first, then newest first."""
    items = templates.load(active_only=True)
    items = sorted(items, key=lambda t: str(t.get("created_at") or ""), reverse=True)
    return sorted(items, key=lambda t: not t.get("is_default"))


def save_template(templates: FallbackStore, data: dict, created_by: str = "admin") -> dict:
    record = {
        "id": data.get("id") or str(uuid.uuid4()),
        "name": data.get("name") or "Untitled Template",
        "description": data.get("description") or "",
        "template_type": data.get("template_type") or "combined",
        "config_data": data.get("config_data") or {"configs": []},
        "badge_data": data.get("badge_data") or {"badges": []},
        "is_default": bool(data.get("is_default")),
        "is_active": data.get("is_active") is not False,
        "created_by": data.get("created_by") or created_by,
    }
    saved = templates.upsert(record)
    logger.info(f"[templates] saved {saved.get('name')} ({saved.get('id')})")
    return saved


def snapshot_current(configs: FallbackStore, badges: FallbackStore) -> dict:
    return {"configs": configs.load(), "badges": badges.load()}


def save_before_template(templates: FallbackStore, configs: FallbackStore, badges: FallbackStore, created_by: str = "admin") -> dict:
    """Capture the live configs and badges so they can be restored later."""
    current = snapshot_current(configs, badges)
    return save_template(templates, {
        "name": "Before Template",
        "description": "Template capturing the current state before any changes. Use this to restore the original configuration.",
        "template_type": "combined",
        "config_data": {"configs": current["configs"]},
        "badge_data": {"badges": current["badges"]},
        "is_default": True,
    }, created_by=created_by)


def record_history(history: FallbackStore, template_id: str, action: str, previous: Optional[dict], new: Optional[dict], applied_by: str = "admin") -> dict:
    return history.create({
        "template_id": template_id,
        "action": action,
        "previous_data": previous,
        "new_data": new,
        "applied_by": applied_by,
    })


def apply_template(
    templates: FallbackStore,
    configs: FallbackStore,
    badges: FallbackStore,
    history: FallbackStore,
    template_id: str,
    applied_by: str = "admin",
) -> dict:
    """Replace the live collections with the template snapshot.

    "config" templates only touch configs, "badge" templates only badges.
    Raises NotFoundError for an unknown template.
    """
    template = templates.get(template_id)
    if template is None:
        raise NotFoundError(templates.collection, template_id)

    kind = template.get("template_type") or "combined"
    previous = snapshot_current(configs, badges)
    new_configs = list((template.get("config_data") or {}).get("configs") or [])
    new_badges = list((template.get("badge_data") or {}).get("badges") or [])

    applied = dict(previous)
    if kind in ("config", "combined"):
        applied["configs"] = configs.replace_all(new_configs)
    if kind in ("badge", "combined"):
        applied["badges"] = badges.replace_all(new_badges)

    record_history(history, template_id, "applied", previous, {"configs": new_configs, "badges": new_badges}, applied_by)
    logger.info(f"[templates] applied {template.get('name')}: {len(applied['configs'])} configs, {len(applied['badges'])} badges")
    return applied


def template_history(history: FallbackStore, template_id: Optional[str] = None, limit: int = 50) -> list:
    items = history.load(where={"template_id": template_id} if template_id else None)
    items = sorted(items, key=lambda h: str(h.get("created_at") or ""), reverse=True)
    return items[:limit]
