"""Tests for split generation and exercise recommendation."""
import pytest

from traincycle.core.exceptions import NotFoundError
from traincycle.models import Exercise
from traincycle.models.enums import Goal
from traincycle.schemas.plan import SplitSessionTemplate, parse_planned_exercises
from traincycle.services.user_settings import UserSettingsService
from traincycle.services.workout_planner import (
    WorkoutPlanner,
    distribute_budget,
    estimate_exercise_duration,
    filter_candidates,
    recommend_exercises,
)


def _exercise(id, name, compound, equipment, primary, secondary=()):
    return Exercise(
        id=id,
        name=name,
        compound=compound,
        equipment_required=list(equipment),
        primary_muscle=primary,
        secondary_muscles=list(secondary),
        is_active=True,
    )


@pytest.fixture
def catalog():
    return [
        _exercise(1, "Bench Press", True, ["Barbell", "Bench"], "chest", ["triceps"]),
        _exercise(2, "Push-up", True, [], "chest", ["triceps"]),
        _exercise(3, "Dumbbell Curl", False, ["Dumbbells"], "biceps"),
        _exercise(4, "Triceps Pushdown", False, ["Cable"], "triceps"),
        _exercise(5, "Treadmill Run", False, ["Treadmill"], "cardio"),
        _exercise(6, "Squat", True, ["Barbell"], "quadriceps", ["hamstrings"]),
    ]


def _ids(exercises):
    return [e.id for e in exercises]


class TestDurations:
    def test_compound_and_isolation(self):
        assert estimate_exercise_duration(True) == 11.0
        assert estimate_exercise_duration(False) == 6.0

    def test_single_set_has_no_rest(self):
        assert estimate_exercise_duration(True, sets=1) == 2.0


class TestFilterCandidates:
    def test_cardio_is_never_a_candidate(self, catalog):
        assert 5 not in _ids(filter_candidates(catalog, ["cardio", "chest"], None))

    def test_secondary_muscle_matches(self, catalog):
        assert _ids(filter_candidates(catalog, ["triceps"], None)) == [1, 2, 4]

    def test_equipment_must_all_be_available(self, catalog):
        assert _ids(filter_candidates(catalog, ["chest"], ["barbell"])) == [2]
        assert _ids(filter_candidates(catalog, ["chest"], ["Barbell", "Bench"])) == [1, 2]

    def test_empty_equipment_list_allows_bodyweight_only(self, catalog):
        assert _ids(filter_candidates(catalog, ["chest", "biceps"], [])) == [2]

    def test_none_equipment_is_unrestricted(self, catalog):
        assert _ids(filter_candidates(catalog, ["chest", "biceps"], None)) == [1, 2, 3]


class TestDistributeBudget:
    def test_proportional_to_priority(self):
        assert distribute_budget(["biceps", "chest"], Goal.HYPERTROPHY, 5) == [2, 3]

    def test_at_least_one_per_muscle(self):
        counts = distribute_budget(["neck", "chest", "back"], Goal.STRENGTH, 2)
        assert counts == [1, 1, 1]

    def test_unknown_muscle_gets_weight_one(self):
        assert distribute_budget(["elbows"], Goal.STRENGTH, 4) == [4]


class TestRecommendExercises:
    def test_primary_muscles_first(self, catalog):
        picked = recommend_exercises(catalog, ["Biceps", "chest"], goal="hypertrophy", workout_duration=60)
        assert _ids(picked) == [3, 1, 2]

    def test_fits_inside_duration(self, catalog):
        picked = recommend_exercises(catalog, ["chest", "triceps", "biceps"], workout_duration=30)
        total = sum(estimate_exercise_duration(bool(e.compound)) for e in picked)
        assert picked
        assert total <= 30

    def test_first_exercise_even_if_too_long(self, catalog):
        picked = recommend_exercises(catalog, ["chest"], workout_duration=5)
        assert _ids(picked) == [1]

    def test_excluded_never_recommended(self, catalog):
        picked = recommend_exercises(catalog, ["chest", "triceps"], excluded_ids=[1, 4])
        assert _ids(picked) == [2]

    def test_no_targets(self, catalog):
        assert recommend_exercises(catalog, []) == []

    def test_no_duplicates(self, catalog):
        picked = recommend_exercises(catalog, ["chest", "triceps"], workout_duration=120)
        assert len(_ids(picked)) == len(set(_ids(picked)))


class TestWorkoutPlanner:
    @pytest.mark.asyncio
    async def test_generate_one_per_session(self, async_db_session, test_user, exercises):
        planner = WorkoutPlanner(async_db_session)
        planned = await planner.generate_planned_workouts(
            test_user.id,
            5,
            [
                SplitSessionTemplate(title="Push", main_muscles=["chest"], optional_muscles=["triceps"]),
                SplitSessionTemplate(main_muscles=["quadriceps"]),
            ],
        )

        assert [p.session_index for p in planned] == [0, 1]
        assert [p.title for p in planned] == ["Push", "Session 2"]
        push_ids = [r.exercise_id for r in parse_planned_exercises(planned[0].exercises)]
        assert exercises["bench"].id in push_ids
        assert exercises["run"].id not in push_ids
        assert [r.exercise_id for r in parse_planned_exercises(planned[1].exercises)] == [
            exercises["leg_press"].id
        ]
        assert planned[0].details["main_muscles"] == ["chest"]
        assert planned[0].details["secondary_muscles"] == ["triceps"]
        assert planned[0].details["fitness_goal"] == "Build muscle mass"
        assert planned[1].details["duration"] == 11

    @pytest.mark.asyncio
    async def test_generate_twice_updates_in_place(self, async_db_session, test_user, exercises):
        planner = WorkoutPlanner(async_db_session)
        template = [SplitSessionTemplate(main_muscles=["chest"])]
        first = await planner.generate_planned_workouts(test_user.id, 5, template)
        second = await planner.generate_planned_workouts(test_user.id, 5, template, available_equipment=[])

        assert second[0].id == first[0].id
        assert [r.exercise_id for r in parse_planned_exercises(second[0].exercises)] == [
            exercises["pushup"].id
        ]

    @pytest.mark.asyncio
    async def test_user_exclusions_respected(self, async_db_session, test_user, exercises):
        await UserSettingsService(async_db_session).exclude_exercise(test_user.id, exercises["bench"].id)
        planned = await WorkoutPlanner(async_db_session).generate_planned_workouts(
            test_user.id, 5, [SplitSessionTemplate(main_muscles=["chest"])]
        )
        assert [r.exercise_id for r in parse_planned_exercises(planned[0].exercises)] == [
            exercises["pushup"].id
        ]

    @pytest.mark.asyncio
    async def test_recalculate_from_stored_muscles(self, async_db_session, test_user, exercises):
        planner = WorkoutPlanner(async_db_session)
        (original,) = await planner.generate_planned_workouts(
            test_user.id, 5, [SplitSessionTemplate(title="Chest", main_muscles=["chest"])]
        )
        await UserSettingsService(async_db_session).exclude_exercise(test_user.id, exercises["pushup"].id)

        recalculated = await planner.recalculate_planned_workout(test_user.id, 5, 0)

        assert recalculated.id == original.id
        assert recalculated.title == "Chest"
        assert [r.exercise_id for r in parse_planned_exercises(recalculated.exercises)] == [
            exercises["bench"].id
        ]

    @pytest.mark.asyncio
    async def test_recalculate_missing_slot(self, async_db_session, test_user, exercises):
        with pytest.raises(NotFoundError):
            await WorkoutPlanner(async_db_session).recalculate_planned_workout(test_user.id, 5, 3)
