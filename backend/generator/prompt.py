"""Instruction template sent to the code generation model."""

from __future__ import annotations

_TEMPLATE = """\
You are an expert backend developer. Analyze the provided HTML and generate appropriate backend code.

Your task:
1. Identify all forms, inputs, and data collection elements in the HTML
2. Design a PostgreSQL database schema that would support this UI
3. Create a Node.js Express route to handle CRUD operations for the identified data

HTML to analyze:
```html
{html}
```

Return ONLY a valid JSON object with this exact structure (no markdown, no code blocks, no extra text):
{{
  "sqlSchema": "CREATE TABLE users (\\n  id SERIAL PRIMARY KEY,\\n  ...\\n);",
  "nodeRoute": "const express = require('express');\\nconst router = express.Router();\\n...\\nmodule.exports = router;"
}}

Important:
- Use \\n for newlines in strings
- Escape quotes properly
- Return strict JSON only - no markdown code blocks
- If no forms found, create a basic example schema/route
- Include proper SQL data types and constraints
- Include Express middleware (body-parser, etc.)
- Add error handling in the route"""


def build_prompt(html: str, budget: int) -> str:
    """Embed at most *budget* characters of *html* in the instruction template."""
    return _TEMPLATE.format(html=html[: max(budget, 0)])
