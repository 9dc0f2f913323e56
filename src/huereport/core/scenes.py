from __future__ import annotations

import logging
from typing import Any

from .client import BridgeClient

logger = logging.getLogger(__name__)


async def augment_scenes(
    client: BridgeClient, address: str, credential: str, dump: dict[str, Any]
) -> dict[str, Any]:
    """Return a copy of ``dump`` whose scenes carry their per-light states.

    The bulk dump omits ``lightstates``; each scene is requested on its own.
    A scene whose detail cannot be retrieved keeps its fallback action.
    """
    scenes = dump.get("scenes")
    if not isinstance(scenes, dict) or not scenes:
        return dump

    merged: dict[str, Any] = {}
    enriched = 0
    for scene_id, scene in scenes.items():
        detail = await client.fetch_scene(address, credential, scene_id)
        light_states = detail.get("lightstates") if detail else None
        if isinstance(scene, dict) and isinstance(light_states, dict):
            merged[scene_id] = {**scene, "lightstates": light_states}
            enriched += 1
        else:
            merged[scene_id] = scene

    logger.debug(
        "Scene details on %s: %d of %d enriched", address, enriched, len(scenes)
    )
    return {**dump, "scenes": merged}
