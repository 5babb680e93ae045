"""
Prompt for founder search query parsing: query → subject + subject_variations + criteria.
Output is a single JSON object validated into ParsedQuery.
"""

from founder_discovery.domain import CRITERIA_TYPES

CRITERIA_TYPE_ENUM = ", ".join(f'"{t}"' for t in CRITERIA_TYPES)

DISCOVER_QUERY_SYSTEM_PROMPT = (
    "You are a query parser specialized in understanding founder search queries. "
    "Extract structured components and expand search terms with relevant variations."
)

PROMPT_DISCOVER_QUERY = """
QUERY: "{{USER_TEXT}}"

STEP 1: Find the occupation word
- Look for: engineer, CTO, founder, CEO, developer, designer, etc.
- This becomes SUBJECT. If no role is named, use "founder".

STEP 2: List 2-4 variations of the SUBJECT
- Titles, spellings, and closely related roles (e.g. CTO → "Chief Technology Officer", "VP Engineering").

STEP 3: Split the remaining words into separate criteria items
- Each company = separate item
- Each school = separate item
- Each location = separate item
- Each interest = separate item

STEP 4: Expand each criteria item with common aliases
- Schools: full name, short name, abbreviations (e.g. "University of Michigan", "UMich")
- Companies: brand name, legal name, former name (e.g. "Meta", "Facebook", "Meta Platforms")

STEP 5: Classify criteria_type as one of: {{CRITERIA_TYPE_ENUM}}
- Use "mixed" when criteria span more than one kind, or when there are no criteria.

EXAMPLE 1:
INPUT: "coinbase engineer from michigan"
OUTPUT:
{
  "subject": "engineer",
  "subject_variations": ["software engineer", "developer", "programmer"],
  "criteria": ["Coinbase", "Coinbase Inc", "University of Michigan", "Michigan State", "UMich"],
  "criteria_type": "mixed",
  "reasoning": "engineer is the role; Coinbase is a company; michigan is a school"
}

EXAMPLE 2:
INPUT: "Meta CTO from Stanford"
OUTPUT:
{
  "subject": "CTO",
  "subject_variations": ["Chief Technology Officer", "VP Engineering"],
  "criteria": ["Meta", "Facebook", "Meta Platforms", "Stanford University", "Stanford"],
  "criteria_type": "mixed",
  "reasoning": "CTO is the role; Meta is a company; Stanford is a school"
}

Return ONLY a JSON object with exactly these keys:
subject (string), subject_variations (string[]), criteria (string[]), criteria_type (string), reasoning (string).

NOW PARSE: "{{USER_TEXT}}"
"""


def get_discover_query_prompt(user_text: str) -> str:
    return (
        PROMPT_DISCOVER_QUERY.replace("{{CRITERIA_TYPE_ENUM}}", CRITERIA_TYPE_ENUM)
        .replace("{{USER_TEXT}}", user_text or "")
    )
