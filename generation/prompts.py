"""Prompt text for podcast script generation"""
from typing import Optional

SYSTEM_PROMPT = (
    "You are an award-winning podcast showrunner and head writer. You write structured, "
    "engaging narration scripts that keep the facts of the source material intact."
)

_SOURCE_LABELS = {
    "text": "notes supplied directly by the listener",
    "url": "a web article",
    "video": "the transcript of a YouTube video",
}


def build_script_prompt(source_text: str, mode: str, origin: Optional[str] = None) -> str:
    """Build the user prompt for a single-narrator podcast episode"""
    label = _SOURCE_LABELS.get(mode, "source material")
    origin_line = f"Original source: {origin}\n" if origin else ""

    return f"""Write a podcast episode script based on {label}.
{origin_line}
Requirements:
1. A short hook that tells the listener why this topic matters
2. Three to five segments that walk through the key points in order
3. A closing recap with one memorable takeaway
4. Plain narration text only: no stage directions, markdown, or speaker labels
5. Roughly 3 to 5 minutes when read aloud

Stay faithful to the source. Do not invent facts, quotes, or numbers.

Source material:
\"\"\"
{source_text}
\"\"\"
"""
