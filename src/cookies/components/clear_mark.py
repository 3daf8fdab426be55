from dataclasses import dataclass

@dataclass(slots=True)
class ClearMark:
    """Per-cell clear flag.

    marked: True between match marking and column compaction of one resolution step.
    """
    marked: bool = False
