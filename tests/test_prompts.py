import pytest

from worldgraph.errors import TemplateError
from worldgraph.prompts import PROMPT, compile_prompt


def test_prompt_ends_with_open_cue():
    prompt = compile_prompt("Water", "Fire", "% Wind + Earth = Dust")

    assert prompt.endswith("% Water + Fire =")


def test_prompt_contains_rules_and_examples_block():
    examples = "% Wind + Earth = Dust\n% Water + Earth = Mud"

    prompt = compile_prompt("Water", "Fire", examples)

    assert "Welcome to the World Graph game!" in prompt
    assert "% King + Woman = Queen" in prompt
    assert prompt.index(examples) < prompt.rindex("% Water + Fire =")


def test_operands_with_braces_are_inserted_literally():
    prompt = compile_prompt("{a}", "{examples}", "")

    assert prompt.endswith("% {a} + {examples} =")


def test_default_template_cue():
    assert "{examples}" in PROMPT
    assert PROMPT.endswith("% {a} + {b} =")


@pytest.mark.parametrize("template", ["{unknown}", "{a", "{0}"])
def test_malformed_template_raises_template_error(template):
    with pytest.raises(TemplateError):
        compile_prompt("a", "b", "", template=template)
