"""Admin account and demo data bootstrap."""
import logging

from werkzeug.security import generate_password_hash

from skillmetrix.services.mutations import save_skill
from skillmetrix.storage import USER

logger = logging.getLogger(__name__)

DEMO_EMAIL = 'demo@example.com'
DEMO_PASSWORD = 'password123'

DEMO_PROFILE = {
    'first_name': 'Demo',
    'last_name': 'User',
    'project_name': 'Cloud Migration',
    'client_name': 'Acme Corp',
    'role': 'Software Engineer',
    'location': 'New York, NY',
}

DEMO_SKILLS = [
    {'name': 'JavaScript', 'level': 'Expert', 'certification_url': None},
    {'name': 'TypeScript', 'level': 'Intermediate',
     'certification_url': 'https://credentials.example.com/typescript/123'},
    {'name': 'React', 'level': 'Beginner', 'certification_url': None},
]


def ensure_admin(store, email, password):
    """Create the admin account, or promote an existing user with that email."""
    user = store.get_user_by_email(email)
    if user is None:
        user = store.insert(USER, {
            'email': email,
            'password_hash': generate_password_hash(password),
            'first_name': 'Admin',
            'last_name': 'User',
            'account_role': 'admin',
        })
        logger.info('Created admin account %s', email)
    elif not user.is_admin:
        user = store.update(USER, user.id, {'account_role': 'admin'})
        logger.info('Promoted %s to admin', email)
    return user


def seed_demo(store):
    """Create the demo user and its skills once; skills go through save_skill so history exists."""
    if store.get_user_by_email(DEMO_EMAIL) is not None:
        return None

    user = store.insert(USER, dict(DEMO_PROFILE, email=DEMO_EMAIL,
                                   password_hash=generate_password_hash(DEMO_PASSWORD)))
    for skill in DEMO_SKILLS:
        save_skill(store, None, user.id, dict(skill, user_id=user.id))
    logger.info('Seeded demo user %s with %d skills', DEMO_EMAIL, len(DEMO_SKILLS))
    return user


def seed_from_config(app, store):
    if app.config.get('ADMIN_PASSWORD'):
        ensure_admin(store, app.config['ADMIN_EMAIL'], app.config['ADMIN_PASSWORD'])
    else:
        logger.warning('ADMIN_PASSWORD not set; skipping admin account creation')
    seed_demo(store)
