"""Career timeline and consistency checks turned into weighted risk flags.

Four families of checks run over the structured profile:

- employment gaps between consecutive positions,
- role history (job hopping, unusually fast promotion),
- skills (one-off mentions, certifications earned with little practice),
- education periods overlapping heavy work periods.

Every consistency issue becomes a ``RedFlag`` whose impact depends on its
severity; ``overall_risk`` is the mean impact of all flags.
"""

import datetime
import logging
import re

from models.schemas.profile import Certification, Education, Experience, months_between
from models.schemas.red_flags import ConsistencyIssue, RedFlag, RedFlagAnalysis, TimeGap

logger = logging.getLogger(__name__)

MIN_GAP_MONTHS = 3
WARNING_GAP_MONTHS = 6
CRITICAL_GAP_MONTHS = 12
CRITICAL_GAP_IMPACT = 80
WARNING_GAP_IMPACT = 50

SHORT_TENURE_MONTHS = 12
RAPID_PROMOTION_MONTHS = 24
SENIORITY_KEYWORDS = ("senior", "lead", "principal", "head", "manager", "director", "chief")

MAX_ONE_TIME_SKILLS = 3
MIN_PRACTICE_BEFORE_CERT_MONTHS = 6

HOURS_PER_MONTH_FACTOR = 40
MAX_STUDY_WORK_HOURS = 1000

ISSUE_FLAG_SEVERITY = {"high": "critical", "medium": "warning", "low": "info"}
ISSUE_IMPACT = {"high": 70, "medium": 40, "low": 20}
ISSUE_CATEGORY = {"education": "education", "skills": "skills"}  # default: experience

HIGH_IMPACT_EXPERIENCE = 60


def _by_start(experience: Experience) -> datetime.date:
    return experience.start_date or datetime.date.min


def _is_senior(role: str) -> bool:
    role = role.lower()
    return any(kw in role for kw in SENIORITY_KEYWORDS)


def _overlaps(
    start1: datetime.date | None,
    end1: datetime.date | None,
    start2: datetime.date | None,
    end2: datetime.date | None,
) -> bool:
    if not (start1 and end1 and start2 and end2):
        return False
    return start1 <= end2 and end1 >= start2


class RedFlagAnalyzer:
    def find_time_gaps(self, experiences: list[Experience]) -> list[TimeGap]:
        """Gaps longer than three months between consecutive positions."""
        ordered = sorted(experiences, key=_by_start)
        gaps: list[TimeGap] = []
        for previous, current in zip(ordered, ordered[1:]):
            if not (current.start_date and previous.end_date):
                continue
            if current.start_date <= previous.end_date:
                continue
            months = months_between(previous.end_date, current.start_date)
            if months > MIN_GAP_MONTHS:
                gaps.append(TimeGap(
                    start_date=previous.end_date,
                    end_date=current.start_date,
                    duration_months=months,
                ))
        return gaps

    def _experience_issues(self, experiences: list[Experience]) -> list[ConsistencyIssue]:
        issues: list[ConsistencyIssue] = []

        short_term = [e for e in experiences if 0 < e.duration_months < SHORT_TENURE_MONTHS]
        if len(short_term) >= 2:
            issues.append(ConsistencyIssue(
                type="roles",
                description="Frequent job changes",
                elements=[e.role for e in short_term],
                severity="high" if len(short_term) >= 3 else "medium",
            ))

        ordered = sorted(experiences, key=_by_start)
        for previous, current in zip(ordered, ordered[1:]):
            if not (previous.start_date and current.start_date):
                continue
            if (
                _is_senior(current.role)
                and not _is_senior(previous.role)
                and months_between(previous.start_date, current.start_date) < RAPID_PROMOTION_MONTHS
            ):
                issues.append(ConsistencyIssue(
                    type="roles",
                    description="Unusually fast career progression",
                    elements=[previous.role, current.role],
                    severity="medium",
                ))
                break
        return issues

    def _skill_issues(
        self, experiences: list[Experience], certifications: list[Certification]
    ) -> list[ConsistencyIssue]:
        issues: list[ConsistencyIssue] = []

        # skill (lowercase) -> (display name, first dated mention, occurrences)
        timeline: dict[str, tuple[str, datetime.date | None, int]] = {}
        for exp in experiences:
            for skill in dict.fromkeys(exp.skills):
                key = skill.lower()
                name, first, count = timeline.get(key, (skill, None, 0))
                if exp.start_date and (first is None or exp.start_date < first):
                    first = exp.start_date
                timeline[key] = (name, first, count + 1)

        one_time = [name for name, _, count in timeline.values() if count == 1]
        if len(one_time) > MAX_ONE_TIME_SKILLS:
            issues.append(ConsistencyIssue(
                type="skills",
                description="Several skills mentioned in a single position only",
                elements=one_time,
                severity="low",
            ))

        for cert in certifications:
            if cert.date is None:
                continue
            cert_name = cert.name.lower()
            for key, (name, first, _) in timeline.items():
                if first is None or not re.search(rf"(?<!\w){re.escape(key)}(?!\w)", cert_name):
                    continue
                practice = months_between(first, cert.date) if cert.date > first else 0
                if practice < MIN_PRACTICE_BEFORE_CERT_MONTHS:
                    issues.append(ConsistencyIssue(
                        type="skills",
                        description="Certification obtained with little hands-on experience",
                        elements=[name, cert.name],
                        severity="medium",
                    ))
        return issues

    def _education_issues(
        self, education: list[Education], experiences: list[Experience]
    ) -> list[ConsistencyIssue]:
        issues: list[ConsistencyIssue] = []
        for edu in education:
            overlapping = [
                e for e in experiences
                if _overlaps(e.start_date, e.end_date, edu.start_date, edu.end_date)
            ]
            work_hours = sum(e.duration_months * HOURS_PER_MONTH_FACTOR for e in overlapping)
            if work_hours > MAX_STUDY_WORK_HOURS:
                issues.append(ConsistencyIssue(
                    type="education",
                    description="Heavy workload during studies",
                    elements=[edu.degree, *(e.role for e in overlapping)],
                    severity="medium",
                ))
        return issues

    def analyze_profile(
        self,
        experiences: list[Experience],
        education: list[Education],
        certifications: list[Certification],
    ) -> RedFlagAnalysis:
        time_gaps = self.find_time_gaps(experiences)
        flags: list[RedFlag] = []
        for gap in time_gaps:
            period = f"{gap.start_date.isoformat()} to {gap.end_date.isoformat()}"
            if gap.duration_months > CRITICAL_GAP_MONTHS:
                flags.append(RedFlag(
                    severity="critical",
                    category="experience",
                    description="Significant gap in work history",
                    details=f"{gap.duration_months}-month gap from {period}",
                    impact=CRITICAL_GAP_IMPACT,
                ))
            elif gap.duration_months > WARNING_GAP_MONTHS:
                flags.append(RedFlag(
                    severity="warning",
                    category="experience",
                    description="Noticeable gap in work history",
                    details=f"{gap.duration_months}-month gap from {period}",
                    impact=WARNING_GAP_IMPACT,
                ))

        issues = [
            *self._experience_issues(experiences),
            *self._skill_issues(experiences, certifications),
            *self._education_issues(education, experiences),
        ]
        for issue in issues:
            flags.append(RedFlag(
                severity=ISSUE_FLAG_SEVERITY[issue.severity],
                category=ISSUE_CATEGORY.get(issue.type, "experience"),
                description=issue.description,
                details=f"Concerned: {', '.join(issue.elements)}",
                impact=ISSUE_IMPACT[issue.severity],
            ))

        overall_risk = min(100, round(sum(f.impact for f in flags) / len(flags))) if flags else 0
        if flags:
            logger.info("Detected %d red flags (risk %d)", len(flags), overall_risk)

        return RedFlagAnalysis(
            flags=flags,
            consistency_issues=issues,
            time_gaps=time_gaps,
            overall_risk=overall_risk,
            recommendations=self._recommendations(flags, time_gaps),
        )

    @staticmethod
    def _recommendations(flags: list[RedFlag], time_gaps: list[TimeGap]) -> list[str]:
        recommendations = [
            f"Clarify during the interview: {f.description}"
            for f in flags if f.severity == "critical"
        ]
        recommendations.extend(
            f"Ask about the inactivity period from {g.start_date.isoformat()} to {g.end_date.isoformat()}"
            for g in time_gaps
        )
        if any(f.category == "skills" for f in flags):
            recommendations.append("Verify technical skills in depth during the interview")
        if any(f.category == "experience" and f.impact > HIGH_IMPACT_EXPERIENCE for f in flags):
            recommendations.append("Plan a more closely supervised probation period")
        return recommendations
