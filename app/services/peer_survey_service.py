"""
app/services/peer_survey_service.py

Peer-selection survey analytics.

For one survey version, counts how often each provider was selected per
question, how many respondents answered each question, and produces the
flat export (one line per response, selections joined with ``|``).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from analytics.aggregation import aggregate, by_subject, rank
from analytics.base import FlatRecord
from analytics.csv_export import slugify
from app.logging_utils import timed_event
from db.repositories.record_source import RecordSourceRepository

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: list[str] = [
    "response_date",
    "respondent_initials",
    "question_prompt",
    "selected_initials",
]


@dataclass(frozen=True)
class Selection:
    initials: str
    display_name: str
    count: int
    share: float | None = None


@dataclass
class QuestionSummary:
    question_id: str
    prompt: str
    completions: int = 0
    total_selections: int = 0
    selections: list[Selection] = field(default_factory=list)


@dataclass
class PeerSurveyReport:
    version_id: str
    version_name: str
    questions: list[QuestionSummary] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def file_subject(self) -> str:
        return slugify(self.version_name)


def _share(count: int, completions: int) -> float | None:
    if not completions:
        return None
    return round(count / completions * 100, 1)


class PeerSurveyService:
    def __init__(self, source: RecordSourceRepository) -> None:
        self._source = source

    def build_report(
        self,
        date_from: date | None,
        date_to: date | None,
        *,
        version_id: uuid.UUID | None = None,
    ) -> PeerSurveyReport:
        """
        Summarise one survey version; the live version when *version_id* is omitted.

        Selections are ranked by count, ties in first-selected order; each
        carries its share of the question's completions as a percentage to
        one decimal place (``None`` when nobody completed the question). A
        question nobody answered still appears with zero completions. Answers
        to questions that were since deleted are reported under their id.

        Raises
        ------
        SurveyVersionNotFoundError: When the version does not exist.
        """
        version = self._source.get_survey_version(version_id)
        with timed_event(
            logger,
            "peer_survey.report",
            version=str(version.id),
            date_from=date_from,
            date_to=date_to,
        ) as extra:
            questions = self._source.list_survey_questions(version.id)
            responses = self._source.list_survey_responses(version.id, date_from, date_to)
            names = {
                member.initials: member.display_name
                for member in self._source.list_roster()
                if member.initials
            }
            prompts = {str(q.id): q.prompt for q in questions}

            completions = aggregate(
                responses,
                lambda response: str(response.question_id),
                lambda _: 1.0,
            )

            selected: list[FlatRecord] = []
            rows: list[dict[str, Any]] = []
            for response in responses:
                question_key = str(response.question_id)
                picks = list(response.selected_initials or [])
                for initials in picks:
                    selected.append(
                        FlatRecord(
                            date=response.response_date,
                            subject_key=initials,
                            category=question_key,
                        )
                    )
                rows.append(
                    {
                        "response_date": response.response_date,
                        "respondent_initials": response.respondent_initials,
                        "question_prompt": prompts.get(question_key, question_key),
                        "selected_initials": picks,
                    }
                )

            summaries: list[QuestionSummary] = []
            known = [str(q.id) for q in questions]
            orphaned = [key for key in completions if key not in prompts]
            for question_key in known + orphaned:
                picks_for_question = [r for r in selected if r.category == question_key]
                counts = rank(aggregate(picks_for_question, by_subject), by="count")
                answered = (
                    completions[question_key].count if question_key in completions else 0
                )
                summaries.append(
                    QuestionSummary(
                        question_id=question_key,
                        prompt=prompts.get(question_key, question_key),
                        completions=answered,
                        total_selections=len(picks_for_question),
                        selections=[
                            Selection(
                                initials=initials,
                                display_name=names.get(initials, initials),
                                count=agg.count,
                                share=_share(agg.count, answered),
                            )
                            for initials, agg in counts
                        ],
                    )
                )
            extra["responses"] = len(responses)

        return PeerSurveyReport(
            version_id=str(version.id),
            version_name=version.name,
            questions=summaries,
            rows=rows,
        )
