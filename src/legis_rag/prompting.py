"""Context assembly: render ranked chunks and the reference date into a prompt."""
from __future__ import annotations

import re
from datetime import date
from typing import Sequence

from .dates import format_date_for_display
from .schema import LegislativeChunk

NO_LEGISLATION_FOR_DATE = "No relevant legislation found for the specified date."
NO_LEGISLATION_FOUND = "No relevant legislation found."

TRUNCATION_MARKER = "\n[... truncated]"

DEFAULT_DATED_TEMPLATE = """You are a legislative assistant answering questions about the law in force on a specific date.

EVALUATION DATE: {date_context}

Only rely on legislation that was in force on {date_context}. Compare every document's effective date with the evaluation date:
- an effective date on or before {date_context} means the provision is in force;
- an effective date after {date_context} means the provision is not yet in force and must be ignored.

When several versions of the same law appear in the context, identify the most recent version in force on {date_context} and base your answer on it. Mention earlier versions only to explain what they changed or what replaced them.
Describe legislation in force on {date_context} in the present tense.

{query}

Context information is below, surrounded by ---------------------

---------------------
{question_answer_context}
---------------------

Given the context and not prior knowledge, reply to the user comment.
If the context states that no relevant legislation was found, say so and do not invent an answer."""

DEFAULT_UNDATED_TEMPLATE = """{query}

Context information is below, surrounded by ---------------------

---------------------
{question_answer_context}
---------------------

Given the context and not prior knowledge, reply to the user comment.
If the answer is not in the context, inform the user that you can't answer the question."""

DATED_PLACEHOLDERS = ("{query}", "{question_answer_context}", "{date_context}")
UNDATED_PLACEHOLDERS = ("{query}", "{question_answer_context}")

_PLACEHOLDER = re.compile(r"\{(query|question_answer_context|date_context)\}")


def format_chunk(chunk: LegislativeChunk) -> str:
    """Render one chunk with its metadata header ahead of the text."""
    header = [
        f"Title: {chunk.title or 'Untitled'}",
        f"Effective Date: {chunk.effective_date or 'unknown'}",
    ]
    if chunk.expiration_date:
        header.append(f"Expiration Date: {chunk.expiration_date}")
    header.append(f"Type: {chunk.document_type or 'unknown'}")
    header.append(f"Document Number: {chunk.document_number or 'unknown'}")
    return "\n".join(header) + "\n\n" + chunk.text


def render_context(
    chunks: Sequence[LegislativeChunk],
    max_chars: int,
    empty_marker: str = NO_LEGISLATION_FOR_DATE,
) -> str:
    """Concatenate formatted chunks in order, capped at ``max_chars``.

    An empty input yields ``empty_marker``, never an empty string. The chunk
    that crosses the cap is cut and marked; later chunks are dropped.
    """
    if not chunks:
        return empty_marker

    separator = "\n\n"
    blocks: list[str] = []
    used = 0
    for chunk in chunks:
        block = format_chunk(chunk)
        cost = len(block) + (len(separator) if blocks else 0)
        if used + cost <= max_chars:
            blocks.append(block)
            used += cost
            continue

        remaining = max_chars - used - (len(separator) if blocks else 0) - len(TRUNCATION_MARKER)
        if remaining > 0:
            blocks.append(block[:remaining] + TRUNCATION_MARKER)
        break

    if not blocks:
        return format_chunk(chunks[0])[: max(max_chars - len(TRUNCATION_MARKER), 0)] + TRUNCATION_MARKER
    return separator.join(blocks)


def assemble(
    query_text: str,
    ranked_chunks: Sequence[LegislativeChunk],
    query_date: date | None,
    max_context_chars: int = 12000,
    dated_template: str = DEFAULT_DATED_TEMPLATE,
    undated_template: str = DEFAULT_UNDATED_TEMPLATE,
) -> str:
    """Build the augmented user message handed to the generation model.

    Args:
        query_text: Original user question.
        ranked_chunks: Filtered chunks in rank order.
        query_date: Evaluation date, or ``None`` for the simplified template.
        max_context_chars: Cap on the rendered context block.
        dated_template: Template used when ``query_date`` is set.
        undated_template: Template used otherwise.

    Returns:
        The rendered prompt text.
    """
    if query_date is None:
        context = render_context(ranked_chunks, max_context_chars, empty_marker=NO_LEGISLATION_FOUND)
        return _fill(undated_template, query=query_text, question_answer_context=context)

    context = render_context(ranked_chunks, max_context_chars, empty_marker=NO_LEGISLATION_FOR_DATE)
    return _fill(
        dated_template,
        query=query_text,
        question_answer_context=context,
        date_context=format_date_for_display(query_date),
    )


def _fill(template: str, **values: str) -> str:
    # Single pass over the template so braces inside questions or legislative text are left alone.
    return _PLACEHOLDER.sub(lambda match: values.get(match.group(1), match.group(0)), template)
