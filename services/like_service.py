import logging

from core.errors import NotFoundError
from core.lifecycle import Status

logger = logging.getLogger(__name__)


class LikeService:
    """
    A like is the existence of a (blog, user) row in blog_likes. The
    blog's like_count is recomputed from those rows in the same transaction
    as the toggle, so the two can never drift apart.
    """

    def __init__(self, store):
        self.store = store

    def is_liked(self, blog_id, user_id):
        return self.store.exists('blog_likes', {'blog_id': blog_id, 'user_id': user_id})

    def toggle(self, blog_id, user_id):
        """Returns (liked, like_count) after the toggle."""
        blog = self.store.fetch_one('blogs', {'id': blog_id})
        if blog['status'] != Status.APPROVED.value:
            raise NotFoundError("Blog not found")

        key = {'blog_id': blog_id, 'user_id': user_id}
        with self.store.transaction():
            if self.store.exists('blog_likes', key):
                self.store.delete('blog_likes', key)
                liked = False
            else:
                self.store.insert('blog_likes', key)
                liked = True
            like_count = self.store.count('blog_likes', {'blog_id': blog_id})
            self.store.update('blogs', {'id': blog_id}, {'like_count': like_count})

        logger.info("User %s %s blog %s", user_id, 'liked' if liked else 'unliked', blog_id)
        return liked, like_count
