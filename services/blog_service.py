import logging
import uuid

from core.errors import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from core.lifecycle import Action, Actor, Status, apply_transition
from core.slugs import derive_slug, slug_candidates, unique_slug
from core.text import contains_profanity, sanitize_html
from services.schemas import BlogFormSchema, load

logger = logging.getLogger(__name__)

FEED_EXPAND = {
    'profiles': ('author_id', ('username', 'full_name', 'avatar_url')),
    'categories': ('category_id', ('name', 'slug')),
}
DETAIL_EXPAND = {
    'profiles': ('author_id', ('username', 'full_name', 'avatar_url', 'bio')),
    'categories': ('category_id', ('name', 'slug')),
}
QUEUE_EXPAND = {
    'profiles': ('author_id', ('username', 'full_name')),
    'categories': ('category_id', ('name', 'slug')),
}
DASHBOARD_EXPAND = {
    'categories': ('category_id', ('name', 'slug')),
}

# Path segments under /blogs/ that must never be used as a slug
RESERVED_SLUGS = {'mine'}


def dashboard_stats(blogs):
    """Per-author counters shown on the writer's dashboard."""
    return {
        'total': len(blogs),
        'drafts': sum(1 for b in blogs if b['status'] == Status.DRAFT.value),
        'pending': sum(1 for b in blogs if b['status'] == Status.PENDING.value),
        'published': sum(1 for b in blogs if b['status'] == Status.APPROVED.value),
        'total_views': sum(b['view_count'] for b in blogs),
        'total_likes': sum(b['like_count'] for b in blogs),
    }


class BlogService:
    """
    Writing, reading and moderating blogs.
    Status changes go through apply_transition so the rules live in one place;
    this class only turns the resulting patch into store writes.
    """

    def __init__(self, store, blocked_words=()):
        self.store = store
        self.blocked_words = list(blocked_words)

    # --- reading ---

    def list_published(self, category_slug=None, featured=None, limit=None):
        filters = {'status': Status.APPROVED.value}
        if category_slug:
            category = self.store.fetch_one('categories', {'slug': category_slug})
            filters['category_id'] = category['id']
        if featured is not None:
            filters['is_featured'] = bool(featured)
        return self.store.fetch('blogs', filters, order=('published_at', 'desc'),
                                limit=limit, expand=FEED_EXPAND)

    def get(self, blog_id):
        return self.store.fetch_one('blogs', {'id': blog_id})

    def get_by_slug(self, slug, profile=None):
        """
        Blog detail page. Approved blogs are public and every fetch counts as
        one view; other statuses are only visible to their author and admins.
        """
        blog = self.store.fetch_one('blogs', {'slug': slug}, expand=DETAIL_EXPAND)
        if blog['status'] != Status.APPROVED.value:
            actor = Actor.for_blog(profile, blog)
            if not (actor.is_author or actor.is_admin):
                raise NotFoundError("Blog not found")
            return blog

        self.store.increment('blogs', {'id': blog['id']}, 'view_count')
        blog['view_count'] += 1
        return blog

    def list_for_author(self, profile):
        blogs = self.store.fetch('blogs', {'author_id': profile['id']},
                                 order=('created_at', 'desc'), expand=DASHBOARD_EXPAND)
        return blogs, dashboard_stats(blogs)

    # --- writing ---

    def _clean_form(self, data):
        form = load(BlogFormSchema(), data)
        form['content'] = sanitize_html(form['content'])

        for field in ('title', 'excerpt', 'content'):
            if contains_profanity(form[field], self.blocked_words):
                raise ValidationError("Content contains inappropriate language.",
                                      details={field: ["Inappropriate language"]})

        if not self.store.exists('categories', {'id': form['category_id']}):
            raise ValidationError("Invalid input", details={'category_id': ["Unknown category"]})
        return form

    def _slug_for(self, title, blog_id):
        base = derive_slug(title)
        candidates = slug_candidates(base, blog_id)
        owners = self.store.fetch('blogs', {'slug': candidates})
        taken = {b['slug'] for b in owners if b['id'] != blog_id} | RESERVED_SLUGS
        return unique_slug(base, blog_id, taken)

    def create(self, profile, data, submit=False):
        action = Action.CREATE_AND_SUBMIT if submit else Action.CREATE_DRAFT
        transition = apply_transition(None, action, Actor.for_blog(profile))
        form = self._clean_form(data)

        blog_id = str(uuid.uuid4())
        record = dict(form, id=blog_id, author_id=profile['id'],
                      slug=self._slug_for(form['title'], blog_id))
        record.update(transition.as_patch())
        blog = self.store.insert('blogs', record)
        logger.info("Blog %s created by %s as %s", blog_id, profile['id'], blog['status'])
        return blog

    def update(self, blog_id, profile, data, submit=False):
        """
        Saves the author's edits. Without submit the blog stays a draft; with
        submit a draft goes to review and a rejected blog is resubmitted.
        """
        blog = self.get(blog_id)
        current = Status(blog['status'])
        if submit:
            action = Action.RESUBMIT if current == Status.REJECTED else Action.SUBMIT
        else:
            action = Action.SAVE_DRAFT
        transition = apply_transition(current, action, Actor.for_blog(profile, blog))
        form = self._clean_form(data)

        patch = dict(form, slug=self._slug_for(form['title'], blog_id))
        patch.update(transition.as_patch())
        self.store.update('blogs', {'id': blog_id}, patch)
        logger.info("Blog %s saved by %s (%s -> %s)", blog_id, profile['id'],
                    current.value, transition.new_status.value)
        return self.get(blog_id)

    def submit(self, blog_id, profile):
        blog = self.get(blog_id)
        current = Status(blog['status'])
        action = Action.RESUBMIT if current == Status.REJECTED else Action.SUBMIT
        transition = apply_transition(current, action, Actor.for_blog(profile, blog))
        self.store.update('blogs', {'id': blog_id}, transition.as_patch())
        logger.info("Blog %s submitted for review", blog_id)
        return self.get(blog_id)

    # --- moderation ---

    def moderate(self, blog_id, profile, action, feedback=None):
        blog = self.get(blog_id)
        transition = apply_transition(blog['status'], action, Actor.for_blog(profile, blog),
                                      feedback=feedback)
        self.store.update('blogs', {'id': blog_id}, transition.as_patch())
        logger.info("Blog %s %s by admin %s", blog_id, transition.new_status.value, profile['id'])
        return self.get(blog_id)

    def set_featured(self, blog_id, profile, featured=True):
        if not profile.get('is_admin'):
            raise AuthorizationError("Only administrators can feature blogs")
        blog = self.get(blog_id)
        if featured and blog['status'] != Status.APPROVED.value:
            raise InvalidTransitionError("Only approved blogs can be featured")
        self.store.update('blogs', {'id': blog_id}, {'is_featured': bool(featured)})
        return self.get(blog_id)

    def pending_queue(self, profile):
        if not profile.get('is_admin'):
            raise AuthorizationError("Admin access required")
        return self.store.fetch('blogs', {'status': Status.PENDING.value},
                                order=('created_at', 'asc'), expand=QUEUE_EXPAND)

    def admin_stats(self, profile):
        if not profile.get('is_admin'):
            raise AuthorizationError("Admin access required")
        return {
            'total_users': self.store.count('profiles'),
            'total_blogs': self.store.count('blogs'),
            'pending_blogs': self.store.count('blogs', {'status': Status.PENDING.value}),
            'total_comments': self.store.count('comments'),
        }
