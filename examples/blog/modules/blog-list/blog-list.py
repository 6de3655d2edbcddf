"""Blog index: newest posts first."""

from lectern import Controller


class BlogListModule(Controller):
    def transform(self):
        posts = self.data.get("posts") or []
        self.data["posts"] = sorted(posts, key=lambda post: str(post.get("date", "")), reverse=True)
        return self.data
