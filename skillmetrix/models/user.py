"""User model."""
from skillmetrix.extensions import db
from skillmetrix.utils import utcnow

ACCOUNT_ROLES = ['user', 'admin']


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    project_name = db.Column(db.String(200))
    client_name = db.Column(db.String(200))
    role = db.Column(db.String(200))  # Job title, e.g. 'Software Engineer'
    location = db.Column(db.String(200))
    account_role = db.Column(db.String(20), nullable=False, default='user')  # user, admin
    created_at = db.Column(db.DateTime, default=utcnow)

    @property
    def is_admin(self):
        return self.account_role == 'admin'

    def has_role(self, roles):
        return self.account_role in roles

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'projectName': self.project_name,
            'clientName': self.client_name,
            'role': self.role,
            'location': self.location,
            'accountRole': self.account_role,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
