"""Click detector - detects marker clicks from Pydeck events.

Pydeck click events return picked object data directly. Spot markers carry
``type == "spot"`` and the spot id.

Streamlit re-delivers the last component value on every rerun, so each click
is processed only once via the ClickDeduplicationContext.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from prayerspot_finder.constants import MarkerConfig

if TYPE_CHECKING:
    from prayerspot_finder.ui.state_machine import ClickDeduplicationContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpotClick:
    spot_id: str


@dataclass
class ClickDetector:
    """Detects spot marker clicks.

    Attributes:
        dedup: ClickDeduplicationContext for tracking the last-seen click
    """

    dedup: "ClickDeduplicationContext"

    def detect(
        self,
        clicked_object: dict[str, Any] | None,
        clicked_coordinate: list[float] | None,
    ) -> SpotClick | None:
        """Return a SpotClick for a new click on a spot marker, None otherwise.

        Empty-map clicks are consumed for deduplication but carry no action.
        """
        click_id = _click_id(obj=clicked_object, coord=clicked_coordinate)
        if not click_id or not self.dedup.is_new_click(click_id):
            return None

        if clicked_object is None:
            return None

        obj_type = clicked_object.get("type")
        if obj_type != MarkerConfig.TYPE_SPOT:
            logger.warning(f"Unknown object type: {obj_type}")
            return None

        spot_id = clicked_object.get("id")
        if not spot_id:
            logger.warning(f"Spot click missing id: {clicked_object}")
            return None
        return SpotClick(spot_id=str(spot_id))


def _click_id(obj: dict[str, Any] | None, coord: list[float] | None) -> str:
    """Identify one click: picked object plus rounded coordinate."""
    parts = []
    if obj:
        parts.append(f"{obj.get('type', '')}_{obj.get('id', '')}")
    if coord:
        parts.append(f"coord_{coord[0]:.5f}_{coord[1]:.5f}")
    return "_".join(parts)
