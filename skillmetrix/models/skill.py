"""Skill model."""
from skillmetrix.extensions import db
from skillmetrix.utils import utcnow

SKILL_LEVELS = ['Beginner', 'Intermediate', 'Expert']


class Skill(db.Model):
    __tablename__ = 'skills'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    level = db.Column(db.String(20), nullable=False)  # Beginner, Intermediate, Expert
    certification_url = db.Column(db.String(500))
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'level': self.level,
            'certificationUrl': self.certification_url,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
