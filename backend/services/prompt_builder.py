"""Prompt templates for Gemini API calls."""


def build_narrative_prompt(
    resume_text: str,
    job_description: str,
    local_matched: list[str] | None = None,
    local_missing: list[str] | None = None,
) -> str:
    """Narrative analysis: score, keyword lists, findings and sub-analyses.

    Locally matched/missing keywords are included as calibration context
    when available.
    """
    context_section = ""
    if local_matched or local_missing:
        context_section = f"""
LOCAL KEYWORD PRE-ANALYSIS (use as calibration reference, not as final results):
- Keywords already matched: {', '.join(local_matched or [])}
- Keywords detected as missing: {', '.join(local_missing or [])}
---
"""

    return f"""You are an expert recruiter and resume analyst with 20 years of experience.

Analyze the resume against the job description in depth and give SPECIFIC,
ACTIONABLE feedback.

SCORING RUBRIC (follow strictly):
- 0-20:  No relevant match. Resume is for a completely different field.
- 20-40: Weak match. Some transferable skills but major gaps in core requirements.
- 40-60: Moderate match. Meets some key requirements but missing several important ones.
- 60-80: Strong match. Meets most requirements with minor gaps.
- 80-100: Exceptional match. Meets or exceeds nearly all requirements.

{context_section}RESUME:
---
{resume_text}
---

JOB DESCRIPTION:
---
{job_description}
---

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "match_score": <integer 0-100>,
  "missing_keywords": [<important job keywords NOT found in the resume>],
  "strong_matches": [<keywords and skills found in BOTH resume and job description>],
  "key_findings": [<3-5 key observations with evidence from the resume>],
  "suggested_improvements": [<3-5 concrete improvements>],
  "skills": {{
    "technical": [<technical skills the candidate demonstrates>],
    "soft": [<soft skills the candidate demonstrates>],
    "missing": [<required skills the candidate lacks>],
    "recommendations": [<how to close the skill gaps>]
  }},
  "experience": {{
    "strengths": [<relevant experience strengths>],
    "gaps": [<experience gaps against the job>],
    "recommendations": [<how to present or close those gaps>]
  }}
}}"""
