"""Models package - Re-exports all models for convenient importing."""
from skillmetrix.extensions import db
from skillmetrix.models.user import User, ACCOUNT_ROLES
from skillmetrix.models.skill import Skill, SKILL_LEVELS
from skillmetrix.models.history import SkillHistory, ProfileHistory

__all__ = ['db', 'User', 'Skill', 'SkillHistory', 'ProfileHistory', 'ACCOUNT_ROLES', 'SKILL_LEVELS']
