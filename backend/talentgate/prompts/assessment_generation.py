"""Prompt templates for skill assessment generation."""

ASSESSMENT_GENERATION_SYSTEM_PROMPT = """You are an expert technical interviewer who writes
skill assessments for job applicants. You generate questions that:
- Test practical, industry-relevant understanding of the listed skills
- Are original and different from common textbook examples
- Have clear, unambiguous wording and exactly one correct answer
- Never repeat the same question or the same angle on a skill
You reply with raw JSON only."""

ASSESSMENT_GENERATION_PROMPT = """Create a skill assessment for the following job:

Job Title: {job_title}
Skills: {skills}
Passing Score: {passing_score}%
Session Seed: {seed} (use it to vary the questions)

Generate up to {total_questions} unique questions.
{type_instruction}

Each question must have:
- "type": {type_values}
- "skill": one of the skills listed above
- "question": clear, original question text

For "mcq" questions:
- "options": array of 4 unique strings
- "correctAnswer": integer index into "options" (0-3)

For "coding" questions:
- "starterCode": string with the function signature the candidate completes

Return ONLY a JSON object in exactly this shape:
{{
  "questions": [
    {{
      "type": "mcq|coding",
      "skill": "skill name",
      "question": "Question text",
      "options": ["A", "B", "C", "D"],
      "correctAnswer": 0,
      "starterCode": "function solve(input) {{ }}"
    }}
  ]
}}

Omit "options" and "correctAnswer" for coding questions and "starterCode" for mcq questions.
NO markdown code fences, explanations, or any text outside the JSON object."""

TYPE_INSTRUCTIONS: dict[str, str] = {
    "mcq": 'All questions must be multiple-choice ("type": "mcq").',
    "coding": 'All questions must be coding challenges ("type": "coding").',
    "mixed": (
        'Mix multiple-choice ("type": "mcq") and coding ("type": "coding") questions, '
        "with mostly mcq and at least one coding challenge."
    ),
}

TYPE_VALUES: dict[str, str] = {
    "mcq": '"mcq"',
    "coding": '"coding"',
    "mixed": '"mcq" or "coding"',
}
