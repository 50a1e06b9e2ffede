"""Fixed instruction text sent as the system message of every summary request."""

from __future__ import annotations

SUMMARY_SYSTEM_PROMPT = """\
You receive the transcript of a recorded tabletop role-playing session.
Every row has the form "<speaker>: <spoken text>". The speaker is the player
or game master whose microphone recorded the words. The transcript was
produced by speech recognition and may contain misheard words and cut-off
sentences.

Write a summary of the session in the language of the transcript:
- Start with a short overview of what happened in the story.
- List the important events in the order they happened.
- Name the characters, places and items that mattered and who was involved.
- Mention unresolved plot threads, open questions and plans for next session.
- Leave out out-of-game talk such as rules discussions, snacks or scheduling
  unless it affects the story.

Do not invent events that are not in the transcript."""
