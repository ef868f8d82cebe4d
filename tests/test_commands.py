from __future__ import annotations

import asyncio

from quiz_shell import commands


def test_help_lists_every_verb(make_ctx, memory_repo, console, shell):
    asyncio.run(commands.help_cmd(make_ctx(memory_repo)))

    text = console.export_text()
    for verb in ("help", "list", "show", "add", "delete", "edit", "test",
                 "play", "credits", "quit"):
        assert verb in text
    assert shell.prompts == 1


def test_list_prints_id_and_question(make_ctx, memory_repo, console, shell):
    asyncio.run(commands.list_cmd(make_ctx(memory_repo)))

    lines = console.export_text().splitlines()
    assert lines == [
        "1: Capital of Spain",
        "2: 2+2",
        "3: Largest planet",
    ]
    assert shell.prompts == 1


def test_list_reports_repository_error(make_ctx, memory_repo, console, shell):
    memory_repo.fail_find_all = True

    asyncio.run(commands.list_cmd(make_ctx(memory_repo)))

    assert "store offline" in console.export_text()
    assert shell.prompts == 1


def test_show_renders_question_and_answer(make_ctx, memory_repo, console):
    asyncio.run(commands.show_cmd(make_ctx(memory_repo), "1"))

    assert "[1]:  Capital of Spain => Madrid" in console.export_text()


def test_show_missing_id_reports_not_found_once(
    make_ctx, memory_repo, console, shell
):
    asyncio.run(commands.show_cmd(make_ctx(memory_repo), "42"))

    text = console.export_text()
    assert "No quiz exists with id=42." in text
    assert shell.prompts == 1


def test_show_without_argument_reports_missing_parameter(
    make_ctx, memory_repo, console, shell
):
    asyncio.run(commands.show_cmd(make_ctx(memory_repo)))

    assert "Missing <id> parameter." in console.export_text()
    assert shell.prompts == 1


def test_show_non_numeric_argument(make_ctx, memory_repo, console, shell):
    asyncio.run(commands.show_cmd(make_ctx(memory_repo), "abc"))

    assert "not a number" in console.export_text()
    assert shell.prompts == 1


def test_add_then_show_uses_the_new_quiz(
    make_ctx, store, prompter, console, shell
):
    ctx = make_ctx(store)
    prompter.feed("2+2?", "4")

    asyncio.run(commands.add_cmd(ctx))

    [quiz] = asyncio.run(store.find_all())
    assert (quiz.question, quiz.answer) == ("2+2?", "4")
    assert [text for text, _ in prompter.asked] == [
        "Enter a question: ",
        "Enter the answer: ",
    ]

    asyncio.run(commands.show_cmd(ctx, str(quiz.id)))

    assert "2+2? => 4" in console.export_text()
    assert shell.prompts == 2


def test_add_reports_each_field_error(make_ctx, store, prompter, console):
    prompter.feed("", "")

    asyncio.run(commands.add_cmd(make_ctx(store)))

    lines = console.export_text().splitlines()
    assert "Error: The quiz is invalid:" in lines
    assert "Error: question must not be empty." in lines
    assert "Error: answer must not be empty." in lines
    assert asyncio.run(store.count()) == 0


def test_delete_then_show_reports_not_found(
    make_ctx, memory_repo, console, shell
):
    ctx = make_ctx(memory_repo)

    asyncio.run(commands.delete_cmd(ctx, "2"))
    asyncio.run(commands.show_cmd(ctx, "2"))

    assert 2 not in memory_repo.rows
    assert "No quiz exists with id=2." in console.export_text()
    assert shell.prompts == 2


def test_delete_missing_id(make_ctx, memory_repo, console):
    asyncio.run(commands.delete_cmd(make_ctx(memory_repo), "9"))

    assert "No quiz exists with id=9." in console.export_text()
    assert len(memory_repo.rows) == 3


def test_edit_prefills_and_saves(make_ctx, memory_repo, prompter, console):
    prompter.feed("Capital of Italy", "Rome")

    asyncio.run(commands.edit_cmd(make_ctx(memory_repo), "1"))

    assert prompter.asked == [
        ("Enter the question: ", "Capital of Spain"),
        ("Enter the answer: ", "Madrid"),
    ]
    quiz = memory_repo.rows[1]
    assert (quiz.id, quiz.question, quiz.answer) == (
        1,
        "Capital of Italy",
        "Rome",
    )
    assert "Capital of Italy => Rome" in console.export_text()


def test_edit_missing_id_prompts_once(
    make_ctx, memory_repo, prompter, console, shell
):
    asyncio.run(commands.edit_cmd(make_ctx(memory_repo), "12"))

    assert "No quiz exists with id=12." in console.export_text()
    assert prompter.asked == []
    assert shell.prompts == 1


def test_edit_validation_failure_keeps_original(
    make_ctx, memory_repo, prompter, console, shell
):
    prompter.feed("", "Rome")

    asyncio.run(commands.edit_cmd(make_ctx(memory_repo), "1"))

    assert memory_repo.rows[1].question == "Capital of Spain"
    assert "question must not be empty." in console.export_text()
    assert shell.prompts == 1


def test_test_accepts_case_and_whitespace(
    make_ctx, memory_repo, prompter, console
):
    prompter.feed(" madrid ")

    asyncio.run(commands.test_cmd(make_ctx(memory_repo), "1"))

    text = console.export_text()
    assert "CORRECT" in text
    assert "INCORRECT" not in text
    assert prompter.asked == [("Capital of Spain? ", None)]


def test_test_rejects_wrong_answer(make_ctx, memory_repo, prompter, console):
    prompter.feed("Paris")

    asyncio.run(commands.test_cmd(make_ctx(memory_repo), "1"))

    assert "INCORRECT" in console.export_text()


def test_test_missing_id_prompts_once(make_ctx, memory_repo, console, shell):
    asyncio.run(commands.test_cmd(make_ctx(memory_repo), "77"))

    assert "No quiz exists with id=77." in console.export_text()
    assert shell.prompts == 1


def test_credits_lists_authors(make_ctx, memory_repo, console, shell):
    asyncio.run(commands.credits_cmd(make_ctx(memory_repo)))

    assert "Ada Lovelace" in console.export_text()
    assert shell.prompts == 1


def test_quit_closes_without_prompt(make_ctx, memory_repo, shell):
    asyncio.run(commands.quit_cmd(make_ctx(memory_repo)))

    assert shell.closed is True
    assert shell.prompts == 0


def test_unexpected_errors_are_reported(make_ctx, memory_repo, console, shell):
    async def boom(quiz_id):
        raise OSError("disk gone")

    memory_repo.find_by_id = boom

    asyncio.run(commands.show_cmd(make_ctx(memory_repo), "1"))

    assert "disk gone" in console.export_text()
    assert shell.prompts == 1


def test_answers_match_is_strict_apart_from_case_and_spaces():
    assert commands.answers_match("  ROME ", "rome")
    assert not commands.answers_match("Rom", "Rome")
    assert not commands.answers_match(None, "Rome")
