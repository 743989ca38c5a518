import logging

from core.comment_tree import build_comment_tree
from core.errors import NotFoundError, ValidationError
from core.lifecycle import Status
from core.text import contains_profanity
from services.schemas import CommentCreateSchema, load

logger = logging.getLogger(__name__)

COMMENT_EXPAND = {'profiles': ('user_id', ('username', 'avatar_url'))}


class CommentService:
    """Threaded discussion under approved blogs."""

    def __init__(self, store, blocked_words=()):
        self.store = store
        self.blocked_words = list(blocked_words)

    def _published_blog(self, blog_id):
        blog = self.store.fetch_one('blogs', {'id': blog_id})
        if blog['status'] != Status.APPROVED.value:
            raise NotFoundError("Blog not found")
        return blog

    def fetch_flat(self, blog_id):
        return self.store.fetch('comments', {'blog_id': blog_id},
                                order=('created_at', 'asc'), expand=COMMENT_EXPAND)

    def get_tree(self, blog_id):
        """Roots in chronological order, each with nested 'replies'."""
        self._published_blog(blog_id)
        return build_comment_tree(self.fetch_flat(blog_id))

    def add_comment(self, blog_id, user_id, data):
        """
        Stores a comment (or a reply when parent_id is given) and returns it
        together with the tree rebuilt from a fresh fetch.
        """
        form = load(CommentCreateSchema(), data)
        content = form['content']
        if not content:
            raise ValidationError("Comment cannot be empty")
        if contains_profanity(content, self.blocked_words):
            raise ValidationError("Profanity detected.")

        self._published_blog(blog_id)
        parent_id = form['parent_id'] or None
        if parent_id:
            parent = self.store.fetch_one('comments', {'id': parent_id})
            if parent['blog_id'] != blog_id:
                raise NotFoundError("Parent comment not found")

        comment = self.store.insert('comments', {
            'blog_id': blog_id,
            'user_id': user_id,
            'parent_id': parent_id,
            'content': content,
        })
        logger.info("Comment %s added to blog %s", comment['id'], blog_id)
        return comment, build_comment_tree(self.fetch_flat(blog_id))
