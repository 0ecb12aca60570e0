"""
Recovery heuristics per muscle group.

The research narrative boils down to a rest-day count per group, so this
is a lookup table rather than a dataset.
"""

DEFAULT_REST_DAYS = 2

REST_DAYS = {
    "quads": 2,
    "hamstrings": 2,
    "glutes": 2,
    "legs": 2,
    "back": 2,
    "chest": 2,
    "shoulders": 2,
    "calves": 1,
}

# Checked in order; "legs" must win over "quads" for "legs/quads".
_GROUP_KEYWORDS = (
    (("leg",), "legs"),
    (("quad",), "quads"),
    (("ham",), "hamstrings"),
    (("glute",), "glutes"),
    (("back",), "back"),
    (("chest",), "chest"),
    (("shoulder", "delts"), "shoulders"),
    (("calf",), "calves"),
)


class RecoveryKnowledgeService:
    """Maps free-text muscle group names to recommended rest days."""

    def normalize(self, raw: str) -> str:
        group = raw.strip().lower()
        for keywords, canonical in _GROUP_KEYWORDS:
            if any(keyword in group for keyword in keywords):
                return canonical
        return group

    def recommended_rest_days(self, group: str) -> int:
        return REST_DAYS.get(self.normalize(group), DEFAULT_REST_DAYS)
