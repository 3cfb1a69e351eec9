"""Prompts for extracting questionnaire answers from document descriptions."""

from __future__ import annotations

import json
from typing import Any

EXTRACTION_SYSTEM_PROMPT = """You are an AI medical assistant specializing in extracting precise \
patient information from medical documents.
You have been provided with medical documents and a structured questionnaire. Your task is to:
1. Carefully analyze each document description
2. Extract specific, concrete information that directly answers the questions in the questionnaire
3. Only include factual information actually present in the documents
4. If a clear answer is found, provide it with high confidence (0.8-1.0)
5. If an answer is suggested but not definitive, provide it with medium confidence (0.4-0.7)
6. If no answer is found, return null with zero confidence
7. For each answer, cite the specific document ID where the information was found
8. Be as precise as possible and avoid vague phrases like "and others" or "etc."
9. When describing medical conditions, medications, or allergies, always list specific names"""

EXTRACTION_USER_PROMPT = """Based on the following medical documents, answer the structured \
questionnaire questions.

QUESTIONNAIRE (with expected answer types):
{questionnaire}

DOCUMENT DESCRIPTIONS:
{documents}

INSTRUCTIONS:
For each question, provide:
1. A precise, specific answer extracted from the documents (or null if not found)
2. A confidence score (0.0 to 1.0) reflecting your certainty in the answer
3. The source document ID where you found the information
Answer "boolean" questions with true or false.

EXPECTED OUTPUT FORMAT:
{{
  "questionId1": {{"answer": "specific, precise answer text", "confidence": 0.95, "source": "documentId"}},
  "questionId2": {{"answer": null, "confidence": 0, "source": null}}
}}

EXAMPLE:
Instead of {{"allergies": {{"answer": "Penicillin and others", "confidence": 0.9, "source": "123"}}}}
write {{"allergies": {{"answer": "Penicillin, amoxicillin, cephalosporins", "confidence": 0.9, "source": "123"}}}}

REMEMBER: Output ONLY valid JSON without any additional text. If no answers can be found for \
any questions, return an empty object {{}}."""


def build_extraction_messages(
    question_specs: list[dict[str, Any]],
    document_specs: list[dict[str, Any]],
) -> list[dict[str, str]]:
    """Render the chat messages for one extraction call.

    Args:
        question_specs: ``{id, text, answerType}`` per question.
        document_specs: ``{documentId, text}`` per document.
    """
    user = EXTRACTION_USER_PROMPT.format(
        questionnaire=json.dumps(question_specs, indent=2, ensure_ascii=False),
        documents=json.dumps(document_specs, indent=2, ensure_ascii=False),
    )
    return [
        {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]
