"""Prompt template for the World Graph completion oracle."""

from worldgraph.errors import TemplateError

# ==================== GAME RULES AND WORKED EXAMPLES ====================

# Written so that base and instruction tuned models both continue the last line.
PROMPT = """
Welcome to the World Graph game!

The core idea of World Graph is to explore relationships.
We do this in an algebraic way. Specifically the addition operation.

When two things are combined with `+` we get a third thing.

For example:
% King + Woman = Queen
% Water + Fire = Steam

Addition is commutative, so the order of the things does not matter.
% King + Woman = Queen
% Woman + King = Queen

Not all combinations are sensible, these are undefined.
% Moss + Karl Marx = undefined
% Nuclear + Lipstick = undefined

Using adjectives or adverbs is generally undesirable:
BAD:
% Sand + Water = Wet Sand
GOOD:
% Sand + Water = Mud
BAD:
% Water + Sea = More Water
GOOD:
% Water + Sea = Ocean

Results never contain prose:
BAD:
% Fire + Water = A hot steam vapour
GOOD:
% Fire + Water = Steam
BAD:
% Knowledge + Power = The ability to control people
GOOD:
% Knowledge + Power = Wisdom

Results never grow nominally:
BAD:
% Planet + Planet = Two Planets
GOOD:
% Planet + Planet = Solar System

Countless interesting combinations are possible, and we are just scratching the surface.
In World Graph, you're only limited by your imagination.

You'll soon realize that the game is not about the result, but the journey to get there.
Exciting relationships will be discovered, and you'll be surprised by the results.

For example, you'll discover intriguing examples like:
{examples}
% {a} + {b} ="""


def compile_prompt(a: str, b: str, examples: str, template: str = PROMPT) -> str:
    """Render ``template`` with the operand pair and the few-shot examples.

    The template must only reference ``{a}``, ``{b}`` and ``{examples}``.
    Substituted values are inserted literally, so operands containing braces
    are safe.

    Raises:
        TemplateError: if the template has unknown or malformed placeholders.
    """
    try:
        return template.format(a=a, b=b, examples=examples)
    except (KeyError, IndexError, ValueError) as exc:
        raise TemplateError(f"Failed to render prompt template: {exc!r}") from exc
