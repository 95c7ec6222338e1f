"""
Tests for the candidate pool builder.

Run with: pytest tests/test_candidate_pool.py -v
"""
from nomadmatch.services.candidate_pool import build_pool, opposite_gender


class TestOppositeGender:
    """Tests for the opposite-gender heuristic."""

    def test_male_maps_to_female(self):
        assert opposite_gender("male") == "female"
        assert opposite_gender("Male") == "female"

    def test_anything_else_maps_to_male(self):
        assert opposite_gender("female") == "male"
        assert opposite_gender("non-binary") == "male"


class TestBuildPool:
    """Tests for build_pool()."""

    def test_straight_male_keeps_female_candidates_case_insensitive(self):
        target = {"uid": "me", "orientation": "Straight", "gender": "male"}
        population = [
            {"uid": "a", "gender": "female"},
            {"uid": "b", "gender": "male"},
            {"uid": "c", "gender": "Female"},
        ]

        pool = build_pool(target, population, 20)

        assert [c["uid"] for c in pool] == ["a", "c"]

    def test_straight_female_keeps_male_candidates(self):
        target = {"uid": "me", "orientation": "straight", "gender": "Female"}
        population = [
            {"uid": "a", "gender": "female"},
            {"uid": "b", "gender": "MALE"},
        ]

        assert [c["uid"] for c in build_pool(target, population, 20)] == ["b"]

    def test_candidates_without_gender_dropped_when_filtering(self):
        target = {"uid": "me", "orientation": "straight", "gender": "male"}
        population = [{"uid": "a"}, {"uid": "b", "gender": None}, {"uid": "c", "gender": "female"}]

        assert [c["uid"] for c in build_pool(target, population, 20)] == ["c"]

    def test_gender_compared_without_trimming(self):
        target = {"uid": "me", "orientation": "straight", "gender": "male"}
        population = [{"uid": "a", "gender": " female"}, {"uid": "b", "gender": "female"}]

        assert [c["uid"] for c in build_pool(target, population, 20)] == ["b"]

    def test_other_orientations_are_not_filtered(self):
        target = {"uid": "me", "orientation": "Bisexual", "gender": "female"}
        population = [
            {"uid": "a", "gender": "female"},
            {"uid": "b", "gender": "male"},
            {"uid": "c"},
        ]

        assert [c["uid"] for c in build_pool(target, population, 20)] == ["a", "b", "c"]

    def test_straight_without_gender_is_not_filtered(self):
        target = {"uid": "me", "orientation": "straight"}
        population = [{"uid": "a", "gender": "male"}, {"uid": "b", "gender": "female"}]

        assert len(build_pool(target, population, 20)) == 2

    def test_truncates_in_input_order(self):
        target = {"uid": "me"}
        population = [{"uid": str(i)} for i in range(5)]

        pool = build_pool(target, population, 2)

        assert [c["uid"] for c in pool] == ["0", "1"]

    def test_excludes_target(self):
        target = {"uid": "me"}
        population = [{"uid": "me"}, {"uid": "a"}]

        assert [c["uid"] for c in build_pool(target, population, 20)] == ["a"]

    def test_truncation_applies_after_filtering(self):
        target = {"uid": "me", "orientation": "straight", "gender": "male"}
        population = [
            {"uid": "m1", "gender": "male"},
            {"uid": "f1", "gender": "female"},
            {"uid": "m2", "gender": "male"},
            {"uid": "f2", "gender": "female"},
            {"uid": "f3", "gender": "female"},
        ]

        assert [c["uid"] for c in build_pool(target, population, 2)] == ["f1", "f2"]

    def test_empty_population(self):
        assert build_pool({"uid": "me"}, [], 20) == []

    def test_non_positive_size(self):
        assert build_pool({"uid": "me"}, [{"uid": "a"}], 0) == []

    def test_returns_copies(self):
        population = [{"uid": "a", "city": "Lisbon"}]
        pool = build_pool({"uid": "me"}, population, 20)

        pool[0]["city"] = "Porto"

        assert population[0]["city"] == "Lisbon"
