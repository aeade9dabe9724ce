class Locations:
    """Centralised monitored-site definitions along the canal skateway."""

    DOWS_LAKE = "Dow's Lake"
    FIFTH_AVENUE = "Fifth Avenue"
    NAC = "NAC"

    @classmethod
    def all(cls) -> list[str]:
        """Monitored sites in their canonical display (and tie-break) order."""
        return [cls.DOWS_LAKE, cls.FIFTH_AVENUE, cls.NAC]
