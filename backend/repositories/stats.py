class StatsRepository:
    """Dashboard counters computed from the other repositories."""

    def __init__(self, posts, authors, categories, tags, media):
        self._posts = posts
        self._authors = authors
        self._categories = categories
        self._tags = tags
        self._media = media

    def get_overview(self):
        total = self._posts.count()
        published = self._posts.count_published()
        return {
            'totalPosts': total,
            'publishedPosts': published,
            'draftPosts': total - published,
            'totalViews': self._posts.total_views(),
            'categories': self._categories.count(),
            'tags': self._tags.count(),
            'media': self._media.count(),
            'authors': self._authors.count(),
        }
