SCORING_SYSTEM_PROMPT = """You are an expert ATS and senior technical recruiter.
Analyze the candidate's resume against the provided job description.
Return only a single, valid JSON object that strictly adheres to the requested schema.
"""

SCORING_USER_PROMPT = """JOB DESCRIPTION:
---
{job_description}
---

CANDIDATE RESUME TEXT:
---
{resume_text}
---

Scoring criteria and output format:
1. overall_score (integer 0-100): the numerical fit score.
2. strengths (array of strings): 3-5 specific points where the resume excels.
3. gaps (array of strings): 3-5 skills or experiences from the job description that are missing or weak on the resume.
4. summary (string): a brief, 3-sentence summary of the candidate's fit.

Return JSON: {{"overall_score": <0..100>, "strengths": ["..."], "gaps": ["..."], "summary": "..."}}
"""
