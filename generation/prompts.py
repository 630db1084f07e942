SYSTEM_PROMPT = """You are a helpful assistant that answers questions about web content the user has saved.

Rules:
1) Use only information from the provided context. No hallucinations.
2) If the context does not contain enough information, answer == "" and explain briefly in missing_info.
3) Answer in the same language as the question, in a few sentences.
4) Return JSON only (no Markdown, no extra text).
"""


USER_PROMPT_TEMPLATE = """Question:
{question}

Context:
{context}

Return a JSON response with this schema:
{{
  "answer": "...",
  "missing_info": ""
}}
"""


RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "answer": {"type": "string"},
        "missing_info": {"type": "string"},
    },
    "required": ["answer", "missing_info"],
}
