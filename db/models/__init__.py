"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.campaign import Campaign, CampaignRecipient
from db.models.delay_survey import DelaySurveyResponse, SurveyAssignment
from db.models.discharge_delay import DischargeDelay
from db.models.peer_survey import SurveyQuestion, SurveyResponse, SurveyVersion
from db.models.rank_review import RankReview
from db.models.roster import RosterMember

__all__ = [
    "Campaign",
    "CampaignRecipient",
    "DelaySurveyResponse",
    "DischargeDelay",
    "RankReview",
    "RosterMember",
    "SurveyAssignment",
    "SurveyQuestion",
    "SurveyResponse",
    "SurveyVersion",
]
