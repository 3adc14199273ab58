import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from resume_match.helpers.text import ensure_text
from resume_match.models.models import MatchInput, RankedResume
from resume_match.models.settings import MatchSettings
from resume_match.services.graph import evaluate_match
from resume_match.utils.exceptions import ExceptionContext, ValidationError
from resume_match.utils.logging_config import get_logger

logger = get_logger(__name__)

REPORT_COLUMNS = [
    "rank", "resume_id", "overall_score", "readiness_level", "source", "degraded",
    "skill", "experience", "education", "keyword", "matched_skills", "missing_skills",
]


def rank_resumes(
    job_description: str,
    resumes: Dict[str, str],
    use_external_model: bool = False,
    settings: Optional[MatchSettings] = None,
    remote_scorer=None,
    max_workers: Optional[int] = None,
) -> List[RankedResume]:
    """Score every resume against one posting and order best match first."""
    ensure_text(job_description, "job_description")
    if not isinstance(resumes, dict):
        raise ValidationError("resumes must map resume ids to text", field="resumes", value=resumes)
    for rid, text in resumes.items():
        ensure_text(text, f"resumes[{rid}]")

    settings = settings or MatchSettings()
    ids = list(resumes)

    def _one(rid: str):
        return evaluate_match(
            MatchInput(resume_text=resumes[rid], job_description=job_description),
            use_external_model=use_external_model,
            settings=settings,
            remote_scorer=remote_scorer,
        )

    # evaluations share no mutable state
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = list(pool.map(_one, ids))

    ordered = sorted(zip(ids, results), key=lambda x: (-x[1].overall_score, str(x[0])))
    ranked = [RankedResume(resume_id=str(rid), rank=i, result=r) for i, (rid, r) in enumerate(ordered, start=1)]
    logger.info(f"Ranked {len(ranked)} resume(s); best: {ranked[0].resume_id if ranked else 'none'}")
    return ranked


def _row(item: RankedResume) -> dict:
    r = item.result
    subs = {s.name.value: s.value for s in r.sub_scores}
    return {
        "rank": item.rank,
        "resume_id": item.resume_id,
        "overall_score": r.overall_score,
        "readiness_level": r.readiness_level,
        "source": r.source,
        "degraded": r.degraded,
        "skill": subs.get("skill"),
        "experience": subs.get("experience"),
        "education": subs.get("education"),
        "keyword": subs.get("keyword"),
        "matched_skills": ", ".join(r.matched_skills),
        "missing_skills": ", ".join(r.missing_skills),
    }


def _check_job_id(job_id: str) -> str:
    ensure_text(job_id, "job_id")
    # report files must stay inside report_dir
    if not job_id.strip() or job_id in (".", "..") or Path(job_id).name != job_id or "\\" in job_id:
        raise ValidationError("job_id must be a plain file name", field="job_id", value=job_id)
    return job_id


def write_reports(job_id: str, ranked: List[RankedResume], report_dir: str = "./reports") -> Tuple[str, str]:
    """Write ``{job_id}_report.csv`` and ``{job_id}_top.md`` into ``report_dir``."""
    _check_job_id(job_id)
    df = pd.DataFrame([_row(item) for item in ranked], columns=REPORT_COLUMNS)

    with ExceptionContext("write_reports", logger, job_id=job_id, report_dir=str(report_dir)):
        Path(report_dir).mkdir(parents=True, exist_ok=True)
        csv_path = os.path.join(report_dir, f"{job_id}_report.csv")
        if len(df):
            df.sort_values(["rank"]).to_csv(csv_path, index=False)
        else:
            df.to_csv(csv_path, index=False)  # empty file with headers

    md_lines = [f"# Job {job_id} - Top Matches", ""]
    if len(df):
        top_md = df.sort_values("rank").head(10)
        md_lines += [
            "| Rank | Resume | Score | Readiness | Skill | Experience | Education | Keyword |",
            "|---:|---|---:|---|---:|---:|---:|---:|",
        ]
        for r in top_md.itertuples():
            md_lines.append(
                f"| {r.rank} | {r.resume_id} | {r.overall_score} | {r.readiness_level} | "
                f"{r.skill} | {r.experience} | {r.education} | {r.keyword} |"
            )
        md_lines.append("\n---\nRecommendations (top-5):")
        for item in sorted(ranked, key=lambda x: x.rank)[:5]:
            recs = "; ".join(item.result.recommendations) or "none"
            md_lines.append(f"- **{item.resume_id}**: {recs}")
    else:
        md_lines.append("> No resumes were scored for this job.\n")

    md_path = os.path.join(report_dir, f"{job_id}_top.md")
    with ExceptionContext("write_reports", logger, job_id=job_id, report_dir=str(report_dir)):
        Path(md_path).write_text("\n".join(md_lines), encoding="utf-8")
    logger.info(f"Wrote reports for job {job_id}: {csv_path}, {md_path}")
    return csv_path, md_path
