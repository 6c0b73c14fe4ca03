"""Grounding instruction builder."""

from typing import Sequence

from knowledgebot.knowledge.models import KnowledgeItem
from knowledgebot.prompts.loader import PromptLoader


def compose(knowledge: Sequence[KnowledgeItem], loader: PromptLoader | None = None) -> str:
    """Build the system instruction embedding every knowledge item verbatim.

    Items appear in the order given, one labelled block each, separated by
    a blank line. An empty collection yields the empty-knowledge notice
    instead.
    """
    loader = loader or PromptLoader()

    if knowledge:
        block = loader.load_partial("knowledge_item")
        context = "\n\n".join(
            loader.render(block, title=item.title, content=item.content)
            for item in knowledge
        )
    else:
        context = loader.load_partial("empty_knowledge")

    return loader.render(loader.load_template("system"), context=context)
