"""
Tests for the LLM-backed plan generator.

The OpenAI client is replaced with a fake that replays canned completions,
so these tests exercise parsing, validation, cost recomputation and the
retry policy without network access.
"""

from types import SimpleNamespace

import pytest
from openai import OpenAIError

from app.meal_plans.ai_service import LLMPlanGenerator, parse_plan, validate_plan_shape
from app.meal_plans.errors import InvalidPlanError, LLMUnavailableError, PlanGenerationError
from app.meal_plans.prompts import CHEAPER_DIRECTIVE


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_generator(settings, fake_openai, sleeps):
    def make(*responses):
        client = fake_openai(responses)
        return LLMPlanGenerator(settings, client=client, sleep=sleeps.append), client.completions

    return make


class TestParsePlan:
    def test_fenced_json(self, llm_plan_json):
        plan = parse_plan("Here you go:\n```json\n" + llm_plan_json(duration_days=1) + "\n```")
        assert len(plan.days) == 1
        assert plan.days[0].meals[0].slot == "breakfast"

    def test_float_calories_are_rounded(self, llm_plan_json):
        plan = parse_plan(llm_plan_json(duration_days=1))
        assert plan.days[0].meals[0].calories == 667

    def test_not_json(self):
        with pytest.raises(InvalidPlanError):
            parse_plan("I cannot help with that.")

    def test_wrong_schema(self):
        with pytest.raises(InvalidPlanError):
            parse_plan('{"days": "soon"}')

    def test_shape_checks(self, llm_plan_json):
        plan = parse_plan(llm_plan_json(duration_days=7, meals_per_day=3, days=6))
        with pytest.raises(InvalidPlanError, match="Expected 7 days"):
            validate_plan_shape(plan, 7, 3)
        plan = parse_plan(llm_plan_json(duration_days=7, meals_per_day=2))
        with pytest.raises(InvalidPlanError, match="incorrect number of meals"):
            validate_plan_shape(plan, 7, 3)


class TestLLMPlanGenerator:
    def test_happy_path_recomputes_cost(self, make_generator, llm_plan_json, profile):
        gen, calls = make_generator(llm_plan_json(price=1.0, reported_cost=999.0))
        plan = gen.generate(profile, 7, 3, 2400)

        assert len(calls.calls) == 1
        assert plan.meta.estimated_total_cost == pytest.approx(21.0)
        assert plan.meta.target_calories == 2400
        assert plan.meta.weekly_budget == profile.weekly_budget
        assert plan.meta.notes == []

    def test_request_uses_configured_model(self, make_generator, llm_plan_json, profile, settings):
        gen, calls = make_generator(llm_plan_json())
        gen.generate(profile, 7, 3, 2400)
        sent = calls.calls[0]
        assert sent["model"] == settings.MODEL_NAME
        assert sent["response_format"] == {"type": "json_object"}
        assert "2400" in sent["messages"][0]["content"]

    def test_over_budget_retries_once_with_cheaper_directive(self, make_generator, llm_plan_json, profile):
        # budget 200/week -> envelope 230; 21 meals at $20 is 420
        gen, calls = make_generator(llm_plan_json(price=20.0), llm_plan_json(price=2.0))
        plan = gen.generate(profile, 7, 3, 2400)

        assert len(calls.calls) == 2
        first, second = (c["messages"][0]["content"] for c in calls.calls)
        assert CHEAPER_DIRECTIVE not in first
        assert CHEAPER_DIRECTIVE in second
        assert plan.meta.estimated_total_cost == pytest.approx(42.0)
        assert plan.meta.notes == []

    def test_still_over_budget_gets_note(self, make_generator, llm_plan_json, profile):
        gen, calls = make_generator(llm_plan_json(price=20.0), llm_plan_json(price=16.0))
        plan = gen.generate(profile, 7, 3, 2400)

        assert len(calls.calls) == 2
        assert plan.meta.notes[-1] == (
            "Estimated cost ($336.00) exceeds budget by 68%. Consider cheaper substitutions."
        )

    def test_invalid_output_retries_after_backoff(self, make_generator, llm_plan_json, profile, sleeps, settings):
        gen, calls = make_generator("not json", llm_plan_json())
        plan = gen.generate(profile, 7, 3, 2400)

        assert len(calls.calls) == 2
        assert sleeps == [settings.LLM_RETRY_BACKOFF_SECONDS]
        assert len(plan.days) == 7

    def test_api_error_then_success(self, make_generator, llm_plan_json, profile):
        gen, calls = make_generator(OpenAIError("upstream timeout"), llm_plan_json())
        plan = gen.generate(profile, 7, 3, 2400)
        assert len(calls.calls) == 2
        assert plan.meta.estimated_total_cost == pytest.approx(21.0)

    def test_malformed_response_is_retried(self, make_generator, llm_plan_json, profile, sleeps):
        broken = SimpleNamespace(choices=[SimpleNamespace(message=None)])
        gen, calls = make_generator(broken, llm_plan_json())
        plan = gen.generate(profile, 7, 3, 2400)
        assert len(calls.calls) == 2
        assert len(sleeps) == 1
        assert len(plan.days) == 7

    def test_empty_choices_is_invalid(self, make_generator, profile):
        gen, calls = make_generator(SimpleNamespace(choices=[]), SimpleNamespace(choices=[]))
        with pytest.raises(InvalidPlanError, match="Malformed model response"):
            gen.generate(profile, 7, 3, 2400)
        assert len(calls.calls) == 2

    def test_unexpected_client_error_is_retried(self, make_generator, llm_plan_json, profile):
        gen, calls = make_generator(RuntimeError("connection reset"), llm_plan_json())
        plan = gen.generate(profile, 7, 3, 2400)
        assert len(calls.calls) == 2
        assert plan.meta.estimated_total_cost == pytest.approx(21.0)

    def test_two_failures_propagate(self, make_generator, llm_plan_json, profile):
        gen, calls = make_generator("nope", llm_plan_json(days=3))
        with pytest.raises(InvalidPlanError):
            gen.generate(profile, 7, 3, 2400)
        assert len(calls.calls) == 2

    def test_failed_cheaper_retry_is_not_retried_again(self, make_generator, llm_plan_json, profile):
        gen, calls = make_generator(llm_plan_json(price=20.0), OpenAIError("boom"), llm_plan_json())
        with pytest.raises(LLMUnavailableError):
            gen.generate(profile, 7, 3, 2400)
        assert len(calls.calls) == 2

    def test_missing_api_key(self, settings, profile):
        gen = LLMPlanGenerator(settings)
        with pytest.raises(LLMUnavailableError):
            gen.generate(profile, 7, 3, 2400)

    def test_errors_share_a_base(self):
        assert issubclass(InvalidPlanError, PlanGenerationError)
        assert issubclass(LLMUnavailableError, PlanGenerationError)
