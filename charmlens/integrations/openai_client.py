"""OpenAI API integration for charmlens.

Turns a company fact into recruitment "attractiveness points" (rational and
emotional viewpoints). The analytics engine only consumes the resulting
GeneratedOutput; prompt wording is not part of its contract.
"""

import os
import json
import logging
from typing import Optional
from openai import OpenAI, APIError
from dotenv import load_dotenv

from charmlens.models.analysis import GeneratedOutput, GeneratedPoint

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

GENERATION_PROMPT_TEMPLATE = """You turn company facts into compelling recruitment copy.

Given the FACT below, write attractiveness points for job seekers from two viewpoints:
- Rational: tangible benefits, data and numbers, comparisons with the industry, scarcity.
- Emotional: mission, impact, culture, pride, personal growth.

Titles must be concise. Descriptions should be specific and may use clearly illustrative numbers.
Write in the same language as the FACT.

FACT: "{fact}"

Respond with a JSON object:
{{"rational_points": [{{"title": "...", "description": "..."}}],
  "emotional_points": [{{"title": "...", "description": "..."}}],
  "summary": "one-sentence summary"}}

Respond only with the JSON object, no other text."""


class OpenAIClient:
    """Client for OpenAI API integration."""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY environment variable.

        Note:
            Without a key the client still initializes, and generation returns None.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.client = None

        if self.api_key:
            self.client = OpenAI(api_key=self.api_key)
        else:
            logger.warning("OPENAI_API_KEY not found in environment. Generation will not be available.")

    def generate_points(self, fact: str) -> Optional[GeneratedOutput]:
        """Generate attractiveness points for a company fact.

        Args:
            fact: The fact the user submitted

        Returns:
            GeneratedOutput, or None if:
            - API key is not configured
            - fact is empty
            - API call fails
            - Response parsing fails
        """
        if not self.client:
            logger.debug("OpenAI client not initialized. Skipping generation.")
            return None

        if not fact or not fact.strip():
            logger.debug("Empty fact provided. Skipping generation.")
            return None

        try:
            response = self.client.chat.completions.create(
                model=OPENAI_MODEL,
                messages=[
                    {"role": "system", "content": "You are a recruitment copywriter. Respond only with valid JSON."},
                    {"role": "user", "content": GENERATION_PROMPT_TEMPLATE.format(fact=fact)},
                ],
                temperature=0.7,
                max_tokens=2000,
            )
            response_content = response.choices[0].message.content or ""
            return parse_generation_response(response_content)

        except APIError as e:
            error_code = getattr(e, 'code', None)
            status_code = getattr(e, 'status_code', None)

            if error_code == 'insufficient_quota':
                logger.warning("OpenAI API quota insufficient. Please check billing in the OpenAI dashboard.")
            elif status_code == 429:
                logger.warning("OpenAI API rate limit exceeded. Please wait before retrying.")
            else:
                logger.error(f"OpenAI API error: {status_code or 'unknown'} ({error_code or 'unknown'})")
            # Don't log full error message as it might contain sensitive info
            return None
        except Exception as e:
            logger.error(f"Error calling OpenAI API: {type(e).__name__}")
            return None


def parse_generation_response(response_content: str) -> Optional[GeneratedOutput]:
    """Parse the model's JSON reply (markdown code fences tolerated).

    Returns:
        GeneratedOutput with rational points followed by emotional points, or
        None if the reply is not the expected JSON object
    """
    content = response_content.strip()
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    content = content.strip()

    try:
        result = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse OpenAI JSON response: {e}")
        return None

    if not isinstance(result, dict):
        logger.warning("OpenAI response is not a JSON object")
        return None

    points = []
    for key in ("rational_points", "emotional_points"):
        for raw in result.get(key) or []:
            if not isinstance(raw, dict):
                continue
            title = str(raw.get("title") or "").strip()
            description = str(raw.get("description") or "").strip()
            if title or description:
                points.append(GeneratedPoint(title=title, description=description))

    summary = result.get("summary")
    return GeneratedOutput(points=points, summary=str(summary) if summary else None)
