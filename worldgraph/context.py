"""Few-shot context retrieval.

Facts already stored for either operand are pulled from the store and rendered
as worked examples for the prompt. Up to ``per_operand`` facts are taken for
each side, the two lists are concatenated (``a`` side first), and adjacent
duplicates are dropped. The dedup pass is intentionally cheap: a fact that
appears on both sides but not next to itself survives twice.
"""

from typing import List

from worldgraph.models import Pair, Triple

PER_OPERAND = 5


def gather_examples(store, pair: Pair, per_operand: int = PER_OPERAND) -> List[Triple]:
    """Return at most ``2 * per_operand`` facts touching either operand."""
    merged = store.find_by_operand(pair.a)[:per_operand]
    merged += store.find_by_operand(pair.b)[:per_operand]

    examples: List[Triple] = []
    for triple in merged:
        if examples and examples[-1] == triple:
            continue
        examples.append(triple)
    return examples


def render_examples(triples: List[Triple]) -> str:
    return "\n".join(triple.render() for triple in triples)


def build_context(store, pair: Pair, per_operand: int = PER_OPERAND) -> str:
    return render_examples(gather_examples(store, pair, per_operand))
