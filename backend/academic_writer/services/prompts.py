"""Prompt templates for essay generation, humanization, and the chat assistant.

All builders are pure functions over their inputs.
"""

from __future__ import annotations

from typing import Optional, Sequence

from academic_writer.models import ChatContext, ChatMessage, WritingRequest

# Number of trailing chat turns quoted back to the model
CHAT_HISTORY_WINDOW = 5

ACADEMIC_PROMPT_TEMPLATE = """
You are an expert academic writer. Create a well-structured academic paper on the following topic:

Topic: {topic}
Instructions: {instructions}
Target Word Count: {word_count} words
{reference_line}

Requirements:
1. Include a compelling introduction with thesis statement
2. Develop 3-5 well-organized body paragraphs with clear topic sentences
3. Provide a strong conclusion that synthesizes key points
4. Use formal academic language and proper transitions
5. Include relevant examples and analysis
6. Maintain scholarly tone throughout
7. Ensure content is original and well-researched

Structure the response with clear headings:
- Introduction
- Body paragraphs (with subheadings as appropriate)
- Conclusion

Write approximately {word_count} words.
"""

HUMANIZE_PROMPT_TEMPLATE = """
Take the following academic text and rewrite it to sound more natural and human-like while maintaining academic quality and structure. Make it sound like it was written by a university student who is knowledgeable but not overly formal or robotic.

Key adjustments:
1. Use more natural sentence flow and varied sentence lengths
2. Include occasional personal insights or observations
3. Make transitions more conversational but still academic
4. Reduce overly complex vocabulary where simpler words work
5. Add subtle personality while keeping it professional
6. Maintain all factual content and academic structure

Original text:
{draft}

Rewrite this to sound more human and natural while preserving academic integrity:
"""

CHAT_PROMPT_TEMPLATE = """You are an expert academic writing assistant helping students create high-quality academic papers. You are knowledgeable, helpful, and encouraging.

Current Context:
{context}

Recent Chat History:
{history}

Guidelines:
1. Provide specific, actionable advice for academic writing
2. Help with topic selection, research strategies, citation styles, and paper structure
3. Be encouraging and supportive
4. Keep responses concise but informative (2-3 sentences max)
5. Offer practical suggestions when appropriate
6. If asked about topics outside academic writing, politely redirect to writing-related help

User's question: {message}

Respond helpfully and concisely:"""


def build_academic_prompt(request: WritingRequest) -> str:
    """Assemble the drafting prompt for a writing request.

    The reference URL, when present, is quoted as-is; its content is never
    fetched.
    """
    reference_line = (
        f"Reference Document: {request.reference_file_url}"
        if request.reference_file_url
        else ""
    )
    return ACADEMIC_PROMPT_TEMPLATE.format(
        topic=request.topic,
        instructions=request.instructions,
        word_count=request.word_count,
        reference_line=reference_line,
    )


def build_humanize_prompt(draft: str) -> str:
    """Assemble the rewrite prompt around a generated draft."""
    return HUMANIZE_PROMPT_TEMPLATE.format(draft=draft)


def format_chat_context(context: Optional[ChatContext]) -> str:
    if context is None:
        return ""
    return (
        f"\nCurrent Step: {context.current_step}\n"
        f"Topic: {context.topic or 'Not specified'}\n"
        f"Instructions: {context.instructions or 'Not specified'}\n"
        f"Word Count: {context.word_count or 'Not specified'}\n"
    )


def format_chat_history(history: Sequence[ChatMessage]) -> str:
    recent = list(history)[-CHAT_HISTORY_WINDOW:]
    return "\n".join(f"{msg.role}: {msg.content}" for msg in recent)


def build_chat_prompt(
    message: str,
    context: Optional[ChatContext],
    history: Sequence[ChatMessage],
) -> str:
    """Assemble the assistant prompt for one chat turn."""
    return CHAT_PROMPT_TEMPLATE.format(
        context=format_chat_context(context),
        history=format_chat_history(history),
        message=message,
    )
