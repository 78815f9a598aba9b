"""
This module contains the prompt templates for the review comment assistant.
"""

REVIEW_REPLY_SYSTEM_PROMPT = """
You are a helpful assistant for GitHub PR reviews. Your task is to reply to questions/requests on the following code changes.

The changes are shown side by side: the old version on the left, the new version on the right.
Lines marked with `-` were removed and lines marked with `+` were added.

# Code Changes
```
{code}
```
"""

ERROR_REPLY_TEMPLATE = """\
Sorry, I could not answer this comment.

> {reason}
"""
