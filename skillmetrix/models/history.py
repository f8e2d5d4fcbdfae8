"""Append-only history models for skills and profiles."""
from skillmetrix.extensions import db
from skillmetrix.utils import utcnow


class SkillHistory(db.Model):
    """Snapshot of a skill's name, level and certification at one point in time."""
    __tablename__ = 'skill_history'

    id = db.Column(db.Integer, primary_key=True)
    skill_id = db.Column(db.Integer, db.ForeignKey('skills.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    level = db.Column(db.String(20), nullable=False)
    certification_url = db.Column(db.String(500))
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'skillId': self.skill_id,
            'userId': self.user_id,
            'name': self.name,
            'level': self.level,
            'certificationUrl': self.certification_url,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }


class ProfileHistory(db.Model):
    """One changed profile field."""
    __tablename__ = 'profile_history'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    field = db.Column(db.String(50), nullable=False)  # Label, e.g. 'Project Name'
    previous_value = db.Column(db.String(200))
    new_value = db.Column(db.String(200), nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'field': self.field,
            'previousValue': self.previous_value,
            'newValue': self.new_value,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
