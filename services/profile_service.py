import logging

from core.errors import AuthorizationError, NotFoundError, ValidationError
from core.slugs import derive_slug
from services.schemas import CategoryCreateSchema, ProfileUpdateSchema, load

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, store):
        self.store = store

    def get(self, user_id):
        return self.store.fetch_one('profiles', {'id': user_id})

    def get_or_create(self, user_id, claims=None):
        """
        Profile for a verified token subject. The identity provider owns
        sign-up, so the first authenticated request creates the profile row.
        """
        profiles = self.store.fetch('profiles', {'id': user_id}, limit=1)
        if profiles:
            return profiles[0]

        claims = claims or {}
        username = claims.get('username') or (claims.get('email') or '').split('@')[0]
        username = username or f"user_{user_id[:8]}"
        if self.store.exists('profiles', {'username': username}):
            username = f"{username}_{user_id[:6]}"

        profile = self.store.insert('profiles', {
            'id': user_id,
            'username': username,
            'full_name': claims.get('full_name'),
        })
        logger.info("Provisioned profile %s for %s", username, user_id)
        return profile

    def update(self, user_id, data):
        patch = load(ProfileUpdateSchema(), data)
        if patch:
            self.store.update('profiles', {'id': user_id}, patch)
        return self.get(user_id)

    def make_admin(self, username):
        if self.store.update('profiles', {'username': username}, {'is_admin': True}) == 0:
            raise NotFoundError(f"No profile named {username}")
        return self.store.fetch_one('profiles', {'username': username})


class CategoryService:
    def __init__(self, store):
        self.store = store

    def list(self):
        return self.store.fetch('categories', order='name')

    def create(self, profile, data):
        if not profile.get('is_admin'):
            raise AuthorizationError("Only administrators can add categories")
        form = load(CategoryCreateSchema(), data)
        slug = derive_slug(form['name'])
        if not slug:
            raise ValidationError("Invalid input", details={'name': ["Name must contain letters or digits"]})
        if self.store.exists('categories', {'slug': slug}) or \
                self.store.exists('categories', {'name': form['name']}):
            raise ValidationError("Invalid input", details={'name': ["Category already exists"]})
        return self.store.insert('categories', dict(form, slug=slug))
