from sqlalchemy import select

from recruit_api import enums
from recruit_api.models.db.question import QuestionTemplate
from recruit_api.models.question_templates import (
    AnswerOption,
    QuestionTemplateCreate,
    QuestionTemplateUpdate,
)

PSYCHOLOGY = enums.TestType.PSYCHOLOGY


def _options(*ids: str) -> list[AnswerOption]:
    return [AnswerOption(id=option, text=f"Opção {option.upper()}") for option in ids]


def _request(correct: list[str] | None = None, **kwargs) -> QuestionTemplateCreate:
    return QuestionTemplateCreate(
        test_type=kwargs.pop("test_type", PSYCHOLOGY),
        question_text=kwargs.pop("question_text", "Como você reage sob pressão?"),
        options=kwargs.pop("options", _options("a", "b", "c", "d")),
        correct_answers=correct,
        **kwargs,
    )


def test_create_template_stores_answer_key(template_service, clock) -> None:
    result = template_service.create_template(
        _request(["b"], display_order=3, point_value=2, expected_answer_guide={"perfil": "calmo"})
    )

    assert result.success
    template = result.value
    assert template.group_id is None
    assert template.group_order == 3
    assert template.version == 1
    assert template.is_active
    assert template.answer.correct_answers == ["b"]
    assert template.answer.expected_answer_guide_json == '{"perfil": "calmo"}'
    assert template.answer.updated_at == clock.now()


def test_create_template_without_key(template_service) -> None:
    template = template_service.create_template(_request()).value
    assert template.answer is None


def test_create_template_rejects_group_sourced_type(template_service) -> None:
    result = template_service.create_template(_request(["a"], test_type=enums.TestType.MATH))
    assert result.code == "UNSUPPORTED_TEST_TYPE"


def test_create_template_rejects_bad_answer_keys(template_service) -> None:
    unknown = template_service.create_template(_request(["z"]))
    assert unknown.code == "INVALID_ANSWER_KEY"
    assert unknown.error.details == {"unknown_options": ["z"]}

    too_many = template_service.create_template(_request(["a", "b"]))
    assert too_many.code == "INVALID_ANSWER_KEY"

    over_limit = template_service.create_template(
        _request(["a", "b", "c"], allow_multiple_answers=True, max_answers_allowed=2)
    )
    assert over_limit.code == "INVALID_ANSWER_KEY"

    blank = template_service.create_template(_request([" "]))
    assert blank.code == "INVALID_ANSWER_KEY"

    duplicated = template_service.create_template(_request(["a"], options=_options("a", "a")))
    assert duplicated.code == "INVALID_OPTIONS"


def test_update_template_bumps_version_and_key(template_service, clock) -> None:
    template_id = template_service.create_template(_request(["a"])).value.id
    clock.advance(minutes=1)

    result = template_service.update_template(
        template_id,
        QuestionTemplateUpdate(
            question_text="Como você reage a prazos curtos?",
            allow_multiple_answers=True,
            correct_answers=["c", "d"],
        ),
    )

    assert result.success
    template = result.value
    assert template.version == 2
    assert template.updated_at == clock.now()
    assert template.question_text == "Como você reage a prazos curtos?"
    assert template.answer.correct_answers == ["c", "d"]


def test_update_rechecks_existing_key_against_new_options(template_service) -> None:
    template_id = template_service.create_template(_request(["d"])).value.id

    result = template_service.update_template(
        template_id, QuestionTemplateUpdate(options=_options("a", "b", "c"))
    )

    assert result.code == "INVALID_ANSWER_KEY"
    assert template_service.get_template(template_id).value.version == 1


def test_update_adds_key_to_unkeyed_template(template_service) -> None:
    template_id = template_service.create_template(_request()).value.id

    template = template_service.update_template(
        template_id, QuestionTemplateUpdate(correct_answers=["a"])
    ).value

    assert template.answer.correct_answers == ["a"]


def test_group_questions_are_not_bank_templates(template_service, make_group) -> None:
    group = make_group(enums.TestType.MATH, 2)
    question_id = group.questions[0].id

    assert template_service.get_template(question_id).code == "TEMPLATE_NOT_FOUND"
    assert (
        template_service.update_template(question_id, QuestionTemplateUpdate(point_value=3)).code
        == "TEMPLATE_NOT_FOUND"
    )


def test_list_templates_paginates_in_display_order(template_service) -> None:
    for order in (3, 1, 2):
        template_service.create_template(
            _request(["a"], display_order=order, question_text=f"Pergunta {order}")
        )

    first = template_service.list_templates(PSYCHOLOGY, page=1, page_size=2)
    second = template_service.list_templates(PSYCHOLOGY, page=2, page_size=2)

    assert first.total == 3
    assert [t.group_order for t in first.items] == [1, 2]
    assert [t.group_order for t in second.items] == [3]


def test_deactivate_and_reactivate(template_service) -> None:
    template_id = template_service.create_template(_request(["a"])).value.id

    assert template_service.deactivate_template(template_id).success
    assert template_service.list_templates(PSYCHOLOGY).total == 0
    assert template_service.list_templates(PSYCHOLOGY, include_inactive=True).total == 1

    assert template_service.reactivate_template(template_id).success
    assert template_service.list_templates(PSYCHOLOGY).total == 1
    assert template_service.deactivate_template("missing").code == "TEMPLATE_NOT_FOUND"


def test_list_by_difficulty(template_service) -> None:
    visual = enums.TestType.VISUAL_RETENTION
    template_service.create_template(_request(["a"], test_type=visual, difficulty_level="easy"))
    template_service.create_template(_request(["a"], test_type=visual, difficulty_level="hard"))

    easy = template_service.list_by_difficulty(visual, "easy")

    assert [t.difficulty_level for t in easy] == ["easy"]


def test_created_template_feeds_new_tests(template_service, test_service, make_candidate, db) -> None:
    candidate = make_candidate()
    template_service.create_template(_request(["b"]))

    test = test_service.create_test(candidate.id, PSYCHOLOGY).value

    assert len(test.question_snapshots) == 1
    assert test.question_snapshots[0].correct_answers == ["b"]
    assert db.execute(select(QuestionTemplate)).scalars().one().answer is not None
