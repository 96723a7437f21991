"""
Export options - validated encoder settings.
"""

from pydantic import BaseModel, Field

from scorewriter.constants import TICKS_PER_QUARTER


class ExportOptions(BaseModel):
    """
    Settings that shape the encoded file without changing the music.

    The defaults produce the canonical output; two exports of the same
    score with the same options are byte-identical.
    """

    ticks_per_quarter: int = Field(
        TICKS_PER_QUARTER,
        gt=0,
        le=0x7FFF,
        description="Header division: ticks per quarter note (15-bit, metrical timing)",
    )
    include_track_names: bool = Field(
        True, description="Emit the score title and part names as track-name meta events"
    )

    model_config = {"frozen": True}
